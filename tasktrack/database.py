"""
TaskTrack API - Database Module

MongoDB connection management using Motor (async driver).

The connection handle is owned by the application (``app.state.database``)
and handed to repositories through FastAPI dependencies, so tests can swap
in in-memory repositories without touching a global.
"""

import logging

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, ReturnDocument

logger = logging.getLogger(__name__)

COUNTERS_COLLECTION = "counters"


class Database:
    """MongoDB database connection manager."""

    def __init__(self, uri: str, database_name: str):
        self.uri = uri
        self.database_name = database_name
        self.client: AsyncIOMotorClient | None = None
        self.db: AsyncIOMotorDatabase | None = None

    async def connect(self) -> None:
        """Connect to MongoDB and make sure required indexes exist."""
        self.client = AsyncIOMotorClient(self.uri, tz_aware=True)
        self.db = self.client[self.database_name]
        await ensure_indexes(self.db)
        logger.info("Connected to MongoDB database '%s'", self.database_name)

    async def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self.client:
            self.client.close()
            self.client = None
            self.db = None

    def get_database(self) -> AsyncIOMotorDatabase:
        """Get the database instance."""
        if self.db is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self.db


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create the indexes the repositories rely on."""
    # Username uniqueness is enforced here, not only by the pre-insert check
    await db["users"].create_index([("username", ASCENDING)], unique=True)
    await db["tasks"].create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])


async def next_sequence(db: AsyncIOMotorDatabase, name: str) -> int:
    """Atomically allocate the next integer id for ``name``."""
    doc = await db[COUNTERS_COLLECTION].find_one_and_update(
        {"_id": name},
        {"$inc": {"seq": 1}},
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )
    return doc["seq"]


async def get_database(request: Request) -> AsyncIOMotorDatabase:
    """Dependency to get the database instance owned by the running app."""
    database: Database | None = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database not configured on application state.")
    return database.get_database()
