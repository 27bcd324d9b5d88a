# subscription_hub/conftest.py
import os
import pytest
from fastapi.testclient import TestClient

# Tests always run against explicit stores, never a configured database.
os.environ.pop("DATABASE_URL", None)
os.environ.pop("TEST_DATABASE_URL", None)

from subscription_hub.core.clock import FixedClock
from subscription_hub.features.registry.hub import SubscriptionHub, get_hub, reset_hub
from subscription_hub.features.storage.store import MemoryStore, SqlStore, reset_store
from subscription_hub.tests.helpers import ADMIN, START


@pytest.fixture
def clock():
    return FixedClock(START)


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def sql_store():
    store = SqlStore.from_url("sqlite://")
    yield store
    store.engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def any_store(request):
    """Run the test once per store backend."""
    if request.param == "memory":
        yield MemoryStore()
        return
    store = SqlStore.from_url("sqlite://")
    yield store
    store.engine.dispose()


@pytest.fixture
def hub(memory_store, clock):
    return SubscriptionHub(store=memory_store, clock=clock, admin=ADMIN)


@pytest.fixture
def client(hub):
    from subscription_hub.main import app

    app.dependency_overrides[get_hub] = lambda: hub
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_singletons():
    yield
    reset_hub()
    reset_store()
