"""
TaskTrack API - User Repository

Repository pattern for user data access.
Includes MongoDB implementation for runtime and in-memory for testing.
"""

import itertools
import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from tasktrack.auth.models import User
from tasktrack.database import next_sequence
from tasktrack.errors import UsernameTakenError

logger = logging.getLogger(__name__)


class UserRepositoryInterface(ABC):
    """Abstract interface for user repository.

    Usernames are unique and compared case-sensitively.
    """

    @abstractmethod
    async def create(self, user: User) -> User:
        """Persist a new user and return it with its assigned id.

        Raises ``UsernameTakenError`` if the username is already registered.
        """
        pass

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by exact username."""
        pass

    @abstractmethod
    async def exists_by_username(self, username: str) -> bool:
        """Check if username exists."""
        pass


class MongoUserRepository(UserRepositoryInterface):
    """MongoDB implementation of the user repository."""

    COLLECTION_NAME = "users"

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db[self.COLLECTION_NAME]

    async def create(self, user: User) -> User:
        user_id = await next_sequence(self.db, self.COLLECTION_NAME)
        stored = replace(user, id=user_id)
        try:
            await self.collection.insert_one(stored.to_dict())
        except DuplicateKeyError:
            logger.info("Rejected duplicate username: %s", user.username)
            raise UsernameTakenError() from None
        logger.info("Created user id=%s username=%s", stored.id, stored.username)
        return stored

    async def get_by_id(self, user_id: int) -> Optional[User]:
        doc = await self.collection.find_one({"_id": user_id})
        if doc is None:
            return None
        return User.from_dict(doc)

    async def get_by_username(self, username: str) -> Optional[User]:
        doc = await self.collection.find_one({"username": username})
        if doc is None:
            return None
        return User.from_dict(doc)

    async def exists_by_username(self, username: str) -> bool:
        doc = await self.collection.find_one({"username": username}, {"_id": 1})
        return doc is not None


class InMemoryUserRepository(UserRepositoryInterface):
    """
    In-memory implementation for CI-safe testing.
    """

    def __init__(self):
        self._users: dict[int, User] = {}
        self._ids = itertools.count(1)

    def clear(self) -> None:
        self._users.clear()
        self._ids = itertools.count(1)

    async def create(self, user: User) -> User:
        if any(existing.username == user.username for existing in self._users.values()):
            raise UsernameTakenError()
        stored = replace(user, id=next(self._ids))
        self._users[stored.id] = stored
        return stored

    async def get_by_id(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    async def get_by_username(self, username: str) -> Optional[User]:
        for user in self._users.values():
            if user.username == username:
                return user
        return None

    async def exists_by_username(self, username: str) -> bool:
        return await self.get_by_username(username) is not None
