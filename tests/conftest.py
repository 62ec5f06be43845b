import pytest
from fastapi.testclient import TestClient

from batches.service import BatchCache
from core.db import Database
from helpers import FakeConnection, FakePool, make_batches


@pytest.fixture
def conn():
    return FakeConnection()


@pytest.fixture
def pool(conn):
    return FakePool(conn)


@pytest.fixture
def db(pool):
    return Database(pool, acquire_timeout=2.5)


@pytest.fixture
def batch_loader():
    calls = []
    batches = make_batches("S1", "S2", "S1")

    async def loader():
        calls.append(1)
        return batches

    loader.calls = calls
    loader.batches = batches
    return loader


@pytest.fixture
def cache(batch_loader):
    return BatchCache(loader=batch_loader)


@pytest.fixture
def client(db, cache):
    from main import app

    # Lifespan does not run without `with TestClient(...)`; wire state by hand.
    app.state.db = db
    app.state.batch_cache = cache
    try:
        yield TestClient(app)
    finally:
        del app.state.db
        del app.state.batch_cache
