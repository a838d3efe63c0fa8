import pytest


@pytest.fixture(scope="session")
def _stockroom_domain():
    """Initialize the stockroom domain once per session."""
    from stockroom.domain import stockroom

    stockroom.init()
    return stockroom


@pytest.fixture(scope="session", autouse=True)
def setup_db(_stockroom_domain):
    from stockroom.utils.db import drop_db, setup_db

    setup_db(_stockroom_domain)

    yield

    drop_db(_stockroom_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_stockroom_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _stockroom_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


# ---------------------------------------------------------------------------
# Hierarchy builders shared by application and integration tests
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_location():
    from protean import current_domain
    from stockroom.location.management import CreateLocation

    def _make(name="Main Store", code="MAIN", **overrides):
        return current_domain.process(CreateLocation(name=name, code=code, **overrides), asynchronous=False)

    return _make


@pytest.fixture()
def make_storage_type(make_location):
    from protean import current_domain
    from stockroom.storage.management import CreateStorageType

    def _make(location_id=None, name="Shelf 1", code="SH-1", **overrides):
        location_id = location_id or make_location(code=f"LOC-{code}")
        command = CreateStorageType(location_id=location_id, name=name, code=code, **overrides)
        return current_domain.process(command, asynchronous=False)

    return _make


@pytest.fixture()
def make_storage_object(make_storage_type):
    from protean import current_domain
    from stockroom.storage.management import CreateStorageObject

    def _make(code="BOX-A", storage_type_id=None, label=None, **overrides):
        storage_type_id = storage_type_id or make_storage_type(code=f"ST-{code}")
        command = CreateStorageObject(storage_type_id=storage_type_id, label=label or code, code=code, **overrides)
        return current_domain.process(command, asynchronous=False)

    return _make
