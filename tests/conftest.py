"""Shared fixtures: settings, a fresh application per test and HTTP clients."""

import pytest
from fastapi.testclient import TestClient

from subscription_tracker_api.app.core.config import Settings
from subscription_tracker_api.app.core.storage import InMemorySubscriptionStore, InMemoryUserStore
from subscription_tracker_api.app.main import create_app


@pytest.fixture
def settings() -> Settings:
    return Settings(secret_key="test-secret", environment="development", log_level="WARNING")


@pytest.fixture
def user_store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def subscription_store() -> InMemorySubscriptionStore:
    return InMemorySubscriptionStore()


@pytest.fixture
def app(settings, user_store, subscription_store):
    return create_app(settings, user_store=user_store, subscription_store=subscription_store)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def other_client(app) -> TestClient:
    """A second browser, with its own cookie jar."""
    return TestClient(app)
