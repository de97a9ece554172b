"""Tests for the subscription endpoints."""

import pytest

from helpers import register, subscription_payload


@pytest.fixture
def alice(client):
    register(client, "alice@example.com")
    return client


@pytest.fixture
def bob(other_client):
    register(other_client, "bob@example.com")
    return other_client


class TestAuthentication:
    @pytest.mark.parametrize(
        "method, path",
        [
            ("get", "/subscriptions"),
            ("post", "/subscriptions"),
            ("get", "/subscriptions/export"),
            ("get", "/subscriptions/some-id"),
            ("put", "/subscriptions/some-id"),
            ("delete", "/subscriptions/some-id"),
        ],
    )
    def test_requires_session(self, client, method, path):
        kwargs = {"json": subscription_payload()} if method in ("post", "put") else {}
        response = getattr(client, method)(path, **kwargs)
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}


class TestCreate:
    def test_create_returns_record_with_cost(self, alice):
        response = alice.post(
            "/subscriptions",
            json=subscription_payload(name="Cloud", billing_cycle="Annually", base_cost=120, tax_rate=0.05),
        )
        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Cloud"
        assert body["billing_cycle"] == "Annually"
        assert body["is_active"] is True
        assert body["total_monthly_cost"] == 10.5
        assert body["id"]
        assert body["created_at"]
        assert body["user_id"] == alice.get("/auth/me").json()["user"]["id"]

    def test_costs_default_to_zero(self, alice):
        payload = subscription_payload()
        del payload["base_cost"]
        payload["tax_rate"] = None
        response = alice.post("/subscriptions", json=payload)
        assert response.status_code == 201
        assert response.json()["base_cost"] == 0
        assert response.json()["total_monthly_cost"] == 0

    @pytest.mark.parametrize("missing", ["name", "billing_cycle", "is_active"])
    def test_missing_required_field(self, alice, missing):
        payload = subscription_payload()
        del payload[missing]
        response = alice.post("/subscriptions", json=payload)
        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields"}

    def test_empty_name(self, alice):
        response = alice.post("/subscriptions", json=subscription_payload(name=""))
        assert response.status_code == 400

    def test_invalid_billing_cycle(self, alice):
        response = alice.post("/subscriptions", json=subscription_payload(billing_cycle="Weekly"))
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid billing_cycle"}

    @pytest.mark.parametrize("value", ["true", 1, None])
    def test_is_active_must_be_boolean(self, alice, value):
        response = alice.post("/subscriptions", json=subscription_payload(is_active=value))
        assert response.status_code == 400

    def test_negative_base_cost(self, alice):
        response = alice.post("/subscriptions", json=subscription_payload(base_cost=-1))
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid base_cost"}

    @pytest.mark.parametrize("field", ["base_cost", "tax_rate"])
    @pytest.mark.parametrize("value", ["inf", "nan", "Infinity", "-inf"])
    def test_non_finite_costs_are_rejected(self, alice, field, value):
        response = alice.post("/subscriptions", json=subscription_payload(**{field: value}))
        assert response.status_code == 400
        assert response.json() == {"error": f"Invalid {field}"}
        assert alice.get("/subscriptions").json()["total"] == 0


class TestReadUpdateDelete:
    def test_round_trip(self, alice):
        created = alice.post("/subscriptions", json=subscription_payload(base_cost=10, tax_rate=0.1)).json()
        fetched = alice.get(f"/subscriptions/{created['id']}").json()
        assert fetched == created

        response = alice.put(
            f"/subscriptions/{created['id']}",
            json=subscription_payload(name="Netflix 4K", billing_cycle="Quarterly", is_active=False, base_cost=30, tax_rate=0),
        )
        assert response.status_code == 200
        refetched = alice.get(f"/subscriptions/{created['id']}").json()
        assert refetched == response.json()
        assert refetched["id"] == created["id"]
        assert refetched["created_at"] == created["created_at"]
        assert refetched["name"] == "Netflix 4K"
        assert refetched["is_active"] is False
        assert refetched["total_monthly_cost"] == 10.0

    def test_update_validates_like_create(self, alice):
        created = alice.post("/subscriptions", json=subscription_payload()).json()
        response = alice.put(f"/subscriptions/{created['id']}", json=subscription_payload(billing_cycle="Daily"))
        assert response.status_code == 400

    def test_unknown_id(self, alice):
        assert alice.get("/subscriptions/nope").status_code == 404
        assert alice.put("/subscriptions/nope", json=subscription_payload()).status_code == 404
        response = alice.delete("/subscriptions/nope")
        assert response.status_code == 404
        assert response.json() == {"error": "Subscription not found"}

    def test_delete(self, alice):
        created = alice.post("/subscriptions", json=subscription_payload()).json()
        response = alice.delete(f"/subscriptions/{created['id']}")
        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert alice.get(f"/subscriptions/{created['id']}").status_code == 404

    def test_ownership_isolation(self, alice, bob):
        created = alice.post("/subscriptions", json=subscription_payload()).json()
        path = f"/subscriptions/{created['id']}"
        assert bob.get(path).status_code == 404
        assert bob.put(path, json=subscription_payload(name="Mine now")).status_code == 404
        assert bob.delete(path).status_code == 404
        assert bob.get("/subscriptions").json()["total"] == 0
        assert alice.get(path).json()["name"] == "Netflix"


class TestListing:
    def _seed(self, client):
        rows = [
            ("Netflix", "Monthly", 15),
            ("Spotify", "Monthly", 10),
            ("Gym", "Quarterly", 90),
            ("Cloud Storage", "Quarterly", 30),
            ("Domain", "Annually", 12),
            ("Netflix Extra", "Quarterly", 60),
        ]
        for name, cycle, cost in rows:
            client.post("/subscriptions", json=subscription_payload(name=name, billing_cycle=cycle, base_cost=cost, tax_rate=0))

    def test_default_page(self, alice):
        self._seed(alice)
        body = alice.get("/subscriptions").json()
        assert body["page"] == 1
        assert body["limit"] == 5
        assert body["total"] == 6
        assert len(body["items"]) == 5
        assert body["hasNextPage"] is True
        assert body["hasPrevPage"] is False
        assert all("total_monthly_cost" in item for item in body["items"])

    def test_second_and_out_of_range_pages(self, alice):
        self._seed(alice)
        second = alice.get("/subscriptions", params={"page": 2}).json()
        assert len(second["items"]) == 1
        assert second["hasNextPage"] is False
        assert second["hasPrevPage"] is True
        beyond = alice.get("/subscriptions", params={"page": 9}).json()
        assert beyond["items"] == []
        assert beyond["hasNextPage"] is False
        assert beyond["total"] == 6

    def test_limit_is_clamped(self, alice):
        self._seed(alice)
        assert alice.get("/subscriptions", params={"limit": 500}).json()["limit"] == 50
        assert alice.get("/subscriptions", params={"limit": 0}).json()["limit"] == 1
        assert alice.get("/subscriptions", params={"page": "x", "limit": "y"}).json()["limit"] == 5

    def test_quarterly_sorted_by_cost_desc(self, alice):
        self._seed(alice)
        body = alice.get("/subscriptions", params={"cycle": "Quarterly", "sort_by": "cost", "order": "desc"}).json()
        assert [item["name"] for item in body["items"]] == ["Gym", "Netflix Extra", "Cloud Storage"]
        assert all(item["billing_cycle"] == "Quarterly" for item in body["items"])
        costs = [item["total_monthly_cost"] for item in body["items"]]
        assert costs == sorted(costs, reverse=True)

    def test_search_and_unknown_cycle(self, alice):
        self._seed(alice)
        body = alice.get("/subscriptions", params={"search": " NETFLIX ", "cycle": "Weekly"}).json()
        assert sorted(item["name"] for item in body["items"]) == ["Netflix", "Netflix Extra"]
        assert body["total"] == 2


class TestExport:
    def test_page_export_matches_listing(self, alice):
        for i in range(7):
            alice.post("/subscriptions", json=subscription_payload(name=f"Sub {i}", base_cost=i, tax_rate=0))
        response = alice.get("/subscriptions/export", params={"sort_by": "cost", "order": "desc"})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert 'filename="subscriptions.csv"' in response.headers["content-disposition"]
        lines = response.text.split("\n")
        assert lines[0] == '"name","billing_cycle","is_active","base_cost","tax_rate","total_monthly_cost"'
        assert len(lines) == 1 + 5
        assert lines[1] == '"Sub 6","Monthly","true","6","0","6"'

    def test_all_export(self, alice):
        for i in range(7):
            alice.post("/subscriptions", json=subscription_payload(name=f"Sub {i}"))
        response = alice.get("/subscriptions/export", params={"scope": "all"})
        assert len(response.text.split("\n")) == 1 + 7

    def test_invalid_scope(self, alice):
        response = alice.get("/subscriptions/export", params={"scope": "everything"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid scope"}
