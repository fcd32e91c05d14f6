import asyncio
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient
from pymongo.errors import OperationFailure
from unittest.mock import AsyncMock, MagicMock

from certificates_api.db.database import MongoConnectionManager, get_mongo
from certificates_api.main import app

TEST_MONGODB_URI = "mongodb://127.0.0.1:27017/certificates_test"
DRIVER_ERROR_MESSAGE = "node db-0 refused: auth failed for user admin"


@pytest.fixture(scope="function")
def mongo_client():
    """In-memory MongoDB client shared by every connection made during one test."""
    return AsyncMongoMockClient()


@pytest.fixture(scope="function")
def disconnected_manager(mongo_client):
    return MongoConnectionManager(
        TEST_MONGODB_URI,
        retry_delay=0,
        client_factory=lambda uri, **kwargs: mongo_client,
    )


@pytest_asyncio.fixture(scope="function")
async def connected_manager(disconnected_manager):
    assert await disconnected_manager.connect()
    yield disconnected_manager
    await disconnected_manager.close()


@pytest.fixture(scope="function")
def client(disconnected_manager):
    """Test client backed by a connected in-memory store."""
    asyncio.run(disconnected_manager.connect())
    app.dependency_overrides[get_mongo] = lambda: disconnected_manager
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def offline_client(disconnected_manager):
    """Test client whose store never connected."""
    app.dependency_overrides[get_mongo] = lambda: disconnected_manager
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def failing_client():
    """Test client whose store is connected but fails every query."""
    mock_client = MagicMock()
    mock_client.server_info = AsyncMock(return_value={"ok": 1})
    collection = mock_client.__getitem__.return_value.__getitem__.return_value
    collection.create_index = AsyncMock()
    failure = OperationFailure(DRIVER_ERROR_MESSAGE)
    collection.find_one = AsyncMock(side_effect=failure)
    collection.find_one_and_update = AsyncMock(side_effect=failure)
    collection.delete_one = AsyncMock(side_effect=failure)
    collection.find = MagicMock(side_effect=failure)

    manager = MongoConnectionManager(
        TEST_MONGODB_URI,
        retry_delay=0,
        client_factory=lambda uri, **kwargs: mock_client,
    )
    asyncio.run(manager.connect())
    app.dependency_overrides[get_mongo] = lambda: manager
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
