"""
SmartHome API: Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the test suite.
How:   MongoDB is replaced by mongomock-motor, an in-memory implementation of
       the Motor API, so the real ResourceStore code runs against it. The app
       is built with create_app(dependencies), so no lifespan (and no real
       connection) is involved.

Fixtures:
    mongo_database: in-memory Motor database
    validator:      SchemaValidator loaded from the packaged schema files
    dependencies:   AppDependencies bundling the two above
    test_client:    HTTPX AsyncClient talking to the app over ASGI
    failing_store:  ResourceStore mock whose every operation raises
"""

import json
import os

os.environ["LOG_LEVEL"] = "WARNING"
os.environ["MONGODB_URL"] = "mongodb://localhost:1"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient
from pymongo.errors import ServerSelectionTimeoutError

from smarthome.config import PACKAGED_SCHEMA_DIR
from smarthome.dependencies import AppDependencies
from smarthome.main import create_app
from smarthome.services.store import ResourceStore
from smarthome.services.validator import SchemaValidator


@pytest.fixture
def mongo_database():
    client = AsyncMongoMockClient()
    return client["SmartHome"]


@pytest.fixture
def validator():
    schemas = {
        path.stem: json.loads(path.read_text(encoding="utf-8"))
        for path in PACKAGED_SCHEMA_DIR.glob("*/*.json")
    }
    return SchemaValidator(schemas)


@pytest.fixture
def dependencies(mongo_database, validator):
    return AppDependencies(database=mongo_database, validator=validator, database_connected=True)


@pytest_asyncio.fixture
async def test_client(dependencies):
    """
    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    app = create_app(dependencies)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def failing_store():
    """A ResourceStore stand-in whose driver calls all time out."""
    error = ServerSelectionTimeoutError("no servers available")
    store = MagicMock(spec=ResourceStore)
    store.find_by_key = AsyncMock(side_effect=error)
    store.find_by_natural_key = AsyncMock(side_effect=error)
    store.list = AsyncMock(side_effect=error)
    store.insert = AsyncMock(side_effect=error)
    store.delete_by_key = AsyncMock(side_effect=error)
    return store


@pytest.fixture
def alice():
    return {"username": "alice", "password": "x"}
