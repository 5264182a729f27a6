from __future__ import annotations

import os
from uuid import uuid4

import pytest

from tests.testkit import ApiClient, IdentityFactory, create_deck


@pytest.fixture(scope="session")
def api() -> ApiClient:
    if os.getenv("RUN_API_INTEGRATION", "0") != "1":
        pytest.skip("Integration tests disabled. Set RUN_API_INTEGRATION=1.")

    base_url = os.getenv("TEST_API_BASE_URL", "http://localhost:8000")
    client = ApiClient(base_url)
    try:
        health = client.call("GET", "/health")
    except Exception as exc:  # pragma: no cover - guard rail
        pytest.fail(f"API not reachable at {base_url}: {exc}")
    if not isinstance(health, dict) or not health.get("ok"):
        pytest.fail(f"Invalid health check at {base_url}: {health}")
    return client


@pytest.fixture(scope="session")
def identity_factory() -> IdentityFactory:
    secret = os.getenv("JWT_SECRET")
    if not secret:
        pytest.skip("JWT_SECRET must match the server to mint test tokens.")
    return IdentityFactory(seed=uuid4().hex[:8], secret=secret)


@pytest.fixture(scope="session")
def admin(identity_factory) -> dict:
    return identity_factory.user("admin", is_admin=True)


@pytest.fixture(scope="session")
def decks(api, admin, identity_factory) -> list[dict]:
    return [
        create_deck(api, admin["token"], identity_factory.next_name("deck"))
        for _ in range(2)
    ]

