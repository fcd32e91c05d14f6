"""
MongoDB connection management with a fixed-delay reconnect loop
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, Optional
from urllib.parse import urlparse

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import ASCENDING

from certificates_api.core.config import settings
from certificates_api.core.exceptions import StoreUnavailableError

# Configure logging based on environment
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

# Log environment information
logger.info(f"Environment: {getattr(settings, 'ENVIRONMENT', 'Unknown')}")
logger.info(f"MongoDB URI configured: {bool(settings.MONGODB_URI)}")


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


def database_name_from_uri(uri: str, default: str) -> str:
    """Database named in the URI path, e.g. mongodb://host:27017/certificates"""
    name = urlparse(uri).path.lstrip("/")
    return name or default


class MongoConnectionManager:
    """
    Owns the motor client and its connection state.

    Attempts that fail put the manager back to DISCONNECTED and the next one
    runs after `retry_delay` seconds, with no limit on attempts. Requests keep
    being served meanwhile; store access raises StoreUnavailableError until
    a connection is up.
    """

    def __init__(
        self,
        uri: str,
        database_name: Optional[str] = None,
        collection_name: str = "certificates",
        retry_delay: float = 5.0,
        server_selection_timeout_ms: int = 5000,
        client_factory: Callable[..., AsyncIOMotorClient] = AsyncIOMotorClient,
    ):
        self.uri = uri
        self.database_name = database_name or database_name_from_uri(uri, "certificates")
        self.collection_name = collection_name
        self.retry_delay = retry_delay
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self._client_factory = client_factory
        self.client: Optional[AsyncIOMotorClient] = None
        self.state = ConnectionState.DISCONNECTED
        self.attempts = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def is_connected(self) -> bool:
        return self.state == ConnectionState.CONNECTED

    @property
    def collection(self) -> AsyncIOMotorCollection:
        if not self.is_connected or self.client is None:
            raise StoreUnavailableError()
        return self.client[self.database_name][self.collection_name]

    async def connect(self) -> bool:
        """Make a single connection attempt. Returns True when connected."""
        self.state = ConnectionState.CONNECTING
        self.attempts += 1
        client = None
        connected = False
        try:
            client = self._client_factory(
                self.uri,
                serverSelectionTimeoutMS=self.server_selection_timeout_ms,
            )
            await client.server_info()
            collection = client[self.database_name][self.collection_name]
            await collection.create_index([("id", ASCENDING)], unique=True)
            await collection.create_index([("registrationNumber", ASCENDING)])

            self._replace_client(client)
            self.state = ConnectionState.CONNECTED
            connected = True
            logger.info(f"MongoDB connected to database '{self.database_name}'")
            return True
        except Exception as e:
            # Bad URIs surface as ValueError/ConfigurationError; both are retried
            logger.error(f"MongoDB connection failed (attempt {self.attempts}): {str(e)}")
            return False
        finally:
            # Also runs on cancellation mid-attempt
            if not connected:
                if client is not None:
                    client.close()
                self.state = ConnectionState.DISCONNECTED

    async def _connect_loop(self):
        while not self.is_connected:
            if await self.connect():
                return
            logger.info(f"Retrying MongoDB connection in {self.retry_delay} seconds")
            await asyncio.sleep(self.retry_delay)

    def start(self) -> asyncio.Task:
        """Start the reconnect loop in the background unless it is already running"""
        if self._task is not None and not self._task.done():
            return self._task
        self._task = asyncio.create_task(self._connect_loop())
        return self._task

    def mark_disconnected(self):
        """Drop to DISCONNECTED after a network failure and schedule reconnection"""
        if not self.is_connected:
            return
        logger.warning("MongoDB connection lost, scheduling reconnect")
        self.state = ConnectionState.DISCONNECTED
        try:
            self.start()
        except RuntimeError:
            # No running loop; the next start() picks it up
            logger.warning("No running event loop to schedule MongoDB reconnect")

    async def close(self):
        if self._task is not None and not self._task.done():
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)
        self._task = None
        self._replace_client(None)
        self.state = ConnectionState.DISCONNECTED

    def _replace_client(self, client: Optional[AsyncIOMotorClient]):
        if self.client is not None and self.client is not client:
            self.client.close()
        self.client = client


mongo = MongoConnectionManager(
    settings.MONGODB_URI,
    database_name=database_name_from_uri(settings.MONGODB_URI, settings.MONGODB_DEFAULT_DB),
    collection_name=settings.MONGODB_COLLECTION,
    retry_delay=settings.MONGODB_RETRY_DELAY_SECONDS,
    server_selection_timeout_ms=settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
)


def get_mongo() -> MongoConnectionManager:
    """
    Connection manager dependency
    Usage:
    async def some_endpoint(mongo: MongoConnectionManager = Depends(get_mongo)):
        ...
    """
    return mongo
