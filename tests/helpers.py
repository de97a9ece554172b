"""Helpers shared by the test modules."""

from fastapi.testclient import TestClient

from subscription_tracker_api.app.schemas.subscription import BillingCycle, SubscriptionCreate


def register(client: TestClient, email: str = "alice@example.com", password: str = "s3cret-pass") -> dict:
    response = client.post("/auth/register", json={"email": email, "password": password})
    assert response.status_code == 201, response.text
    return response.json()


def subscription_payload(**overrides) -> dict:
    payload = {
        "name": "Netflix",
        "billing_cycle": "Monthly",
        "is_active": True,
        "base_cost": 10,
        "tax_rate": 0.1,
    }
    payload.update(overrides)
    return payload


def subscription_data(**overrides) -> SubscriptionCreate:
    values = {
        "name": "Netflix",
        "billing_cycle": BillingCycle.MONTHLY,
        "is_active": True,
        "base_cost": 10.0,
        "tax_rate": 0.0,
    }
    values.update(overrides)
    return SubscriptionCreate(**values)
