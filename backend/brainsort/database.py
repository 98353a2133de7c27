"""
Database Connection and Management
"""
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase, AsyncIOMotorCollection
from typing import Optional
import logging
import asyncio
from pymongo.errors import PyMongoError

from .config import settings

logger = logging.getLogger(__name__)


class Database:
    """MongoDB database connection manager"""

    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None
    _connected: bool = False

    async def connect(self, max_retries: int = 3, retry_delay: int = 2):
        """Establish database connection with retry logic"""
        if self.client is not None:
            return

        for attempt in range(max_retries):
            try:
                logger.info(f"Connecting to MongoDB (attempt {attempt + 1}/{max_retries}): {settings.mongo_url}")
                self.client = AsyncIOMotorClient(
                    settings.mongo_url,
                    serverSelectionTimeoutMS=5000,
                    connectTimeoutMS=5000
                )
                self.db = self.client[settings.db_name]

                await self.client.admin.command('ping')
                await self._ensure_indexes()
                self._connected = True
                logger.info(f"Connected to database: {settings.db_name}")
                return

            except PyMongoError as e:
                logger.warning(f"MongoDB connection attempt {attempt + 1} failed: {e}")
                if attempt < max_retries - 1:
                    if self.client is not None:
                        self.client.close()
                    logger.info(f"Retrying in {retry_delay} seconds...")
                    await asyncio.sleep(retry_delay)
                else:
                    logger.error("Failed to connect to MongoDB after all retries")
                    self._connected = False
                    # The client is kept; check_connection() reconnects once a ping succeeds

    async def _ensure_indexes(self):
        """One user per email, one checklist per user"""
        await self.db.users.create_index("email", unique=True)
        await self.db.users.create_index("id", unique=True)
        await self.db.sessions.create_index("id", unique=True)
        await self.db.checklists.create_index("user_id", unique=True)

    async def disconnect(self):
        """Close database connection"""
        if self.client is not None:
            self.client.close()
            self.client = None
            self.db = None
            self._connected = False
            logger.info("Disconnected from MongoDB")

    def get_db(self) -> AsyncIOMotorDatabase:
        """Get database instance"""
        if self.db is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self.db

    def is_connected(self) -> bool:
        """Check if database is connected"""
        return self._connected

    async def check_connection(self) -> bool:
        """Check if database connection is alive"""
        if self.client is None:
            return False
        try:
            await self.client.admin.command('ping')
            if not self._connected:
                await self._ensure_indexes()
                self._connected = True
                logger.info("MongoDB connection restored")
            return True
        except PyMongoError as e:
            logger.warning(f"MongoDB ping failed: {e}")
            self._connected = False
            return False


# Singleton instance
database = Database()


# Collection accessors for convenience
def get_users_collection() -> AsyncIOMotorCollection:
    return database.get_db().users


def get_sessions_collection() -> AsyncIOMotorCollection:
    return database.get_db().sessions


def get_checklists_collection() -> AsyncIOMotorCollection:
    return database.get_db().checklists
