from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from natureup.core.config import Settings, settings
from natureup.core.logger import logs
import logging

class MongoConnection:
    """
    Process-wide motor client backing the api cache.
    Only constructed when STORAGE_MODE=mongodb.
    """
    _client: AsyncIOMotorClient | None = None

    def __init__(self, config: Settings = settings):
        if config.STORAGE_MODE != "mongodb":
            raise RuntimeError(f"MongoDB not available - STORAGE_MODE is set to '{config.STORAGE_MODE}'")
        self.uri = config.MONGO_URI
        self.db_name = config.MONGO_DB_NAME
        self.collection_name = config.CACHE_COLLECTION

    @property
    def client(self) -> AsyncIOMotorClient:
        # Connects lazily on first query; tz_aware so expires_at compares as UTC
        if MongoConnection._client is None:
            MongoConnection._client = AsyncIOMotorClient(self.uri, tz_aware=True)
            logs.log(logging.INFO, f"MongoDB client created for database {self.db_name}")
        return MongoConnection._client

    def cache_collection(self) -> AsyncIOMotorCollection:
        return self.client[self.db_name][self.collection_name]

    @classmethod
    def close(cls):
        if cls._client is not None:
            cls._client.close()
            cls._client = None
            logs.log(logging.INFO, "MongoDB client closed")
