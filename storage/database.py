"""
MongoDB connection management for async operations.
Handles connection, indexing and teardown of the books collection.
"""

from typing import Optional

import structlog
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import ConnectionFailure

logger = structlog.get_logger(__name__)


class MongoDBManager:
    """
    Async MongoDB manager owning the client and its connection pool.
    """

    def __init__(self, connection_url: str, database_name: str, collection_name: str):
        """
        Initialize MongoDB manager.

        Args:
            connection_url: MongoDB connection URL
            database_name: Name of the database
            collection_name: Name of the collection
        """
        self.connection_url = connection_url
        self.database_name = database_name
        self.collection_name = collection_name
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None
        self.collection: Optional[AsyncIOMotorCollection] = None

    async def connect(self) -> None:
        """Establish connection to MongoDB."""
        try:
            self.client = AsyncIOMotorClient(self.connection_url, tz_aware=True)
            self.database = self.client[self.database_name]
            self.collection = self.database[self.collection_name]

            # Test connection
            await self.client.admin.command('ping')
            logger.info("Successfully connected to MongoDB",
                        database=self.database_name,
                        collection=self.collection_name)

            await self._create_indexes()

        except ConnectionFailure as e:
            logger.error("Failed to connect to MongoDB", error=str(e))
            raise

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")

    async def _create_indexes(self) -> None:
        """Create indexes for the sortable fields."""
        try:
            # Default listing order
            await self.collection.create_index([("createdAt", DESCENDING)])

            for field in ("title", "author", "genre", "publishedDate"):
                await self.collection.create_index([(field, ASCENDING)])

            logger.info("Successfully created MongoDB indexes")

        except Exception as e:
            logger.error("Failed to create indexes", error=str(e))
            raise

    async def ping(self) -> bool:
        """Check that the server answers."""
        if not self.client:
            return False
        try:
            await self.client.admin.command('ping')
            return True
        except ConnectionFailure as e:
            logger.warning("MongoDB ping failed", error=str(e))
            return False
