"""
TaskTrack API - MongoDB Storage Tests

Exercises the Motor-backed repositories against mocked collections.
"""

from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from tasktrack.auth.models import User
from tasktrack.auth.repository import MongoUserRepository
from tasktrack.database import COUNTERS_COLLECTION, next_sequence
from tasktrack.errors import UsernameTakenError
from tasktrack.tasks.enums import TaskPriority, TaskStatus
from tasktrack.tasks.models import Task
from tasktrack.tasks.repository import TaskRepository, _storage_value

NOW = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def collections():
    """Collections keyed by name, each a fresh mock."""
    counters = MagicMock()
    counters.find_one_and_update = AsyncMock(return_value={"_id": "x", "seq": 1})
    return {
        COUNTERS_COLLECTION: counters,
        "users": MagicMock(),
        "tasks": MagicMock(),
    }


@pytest.fixture
def mock_db(collections):
    """Mock database whose item access returns the matching collection."""
    db = MagicMock()
    db.__getitem__.side_effect = collections.__getitem__
    return db


class TestNextSequence:

    async def test_returns_counter_value(self, mock_db, collections):
        collections[COUNTERS_COLLECTION].find_one_and_update.return_value = {"seq": 7}

        assert await next_sequence(mock_db, "tasks") == 7

        collections[COUNTERS_COLLECTION].find_one_and_update.assert_awaited_once_with(
            {"_id": "tasks"},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )


class TestMongoUserRepository:

    async def test_create_assigns_sequence_id(self, mock_db, collections):
        collections["users"].insert_one = AsyncMock()
        repo = MongoUserRepository(mock_db)

        user = await repo.create(User(username="alice1", password_hash="h", created_at=NOW))

        assert user.id == 1
        stored = collections["users"].insert_one.await_args.args[0]
        assert stored["_id"] == 1
        assert stored["username"] == "alice1"

    async def test_duplicate_key_maps_to_username_taken(self, mock_db, collections):
        collections["users"].insert_one = AsyncMock(side_effect=DuplicateKeyError("dup"))
        repo = MongoUserRepository(mock_db)

        with pytest.raises(UsernameTakenError):
            await repo.create(User(username="alice1", password_hash="h"))

    async def test_get_by_username_missing(self, mock_db, collections):
        collections["users"].find_one = AsyncMock(return_value=None)
        repo = MongoUserRepository(mock_db)

        assert await repo.get_by_username("nobody") is None
        assert await repo.exists_by_username("nobody") is False


class TestStorageValue:

    @pytest.mark.parametrize(
        "value, expected",
        [
            (TaskStatus.IN_PROGRESS, "in-progress"),
            (TaskPriority.HIGH, "high"),
            (date(2025, 3, 1), "2025-03-01"),
            (NOW, NOW),
            ("Buy milk", "Buy milk"),
            (None, None),
        ],
    )
    def test_converts_for_bson(self, value, expected):
        assert _storage_value(value) == expected


class TestTaskDocument:

    def test_due_date_stored_as_iso_string(self):
        task = Task.create(user_id=1, title="Pay rent", due_date=date(2025, 2, 1), now=NOW)
        task.id = 5

        doc = task.to_dict()

        assert doc["_id"] == 5
        assert doc["due_date"] == "2025-02-01"
        assert doc["status"] == "todo"
        assert doc["created_at"] == NOW
        assert Task.from_dict(doc) == task

    def test_missing_due_date_and_description(self):
        doc = {
            "_id": 2,
            "user_id": 1,
            "title": "Plain",
            "description": None,
            "status": "done",
            "priority": "low",
            "due_date": None,
            "created_at": NOW,
            "updated_at": NOW,
        }

        task = Task.from_dict(doc)

        assert task.due_date is None
        assert task.description == ""
        assert task.status == TaskStatus.DONE


class TestTaskRepository:

    @staticmethod
    def _doc(**overrides) -> dict:
        doc = Task.create(user_id=1, title="Stored", now=NOW).to_dict()
        doc["_id"] = 3
        doc.update(overrides)
        return doc

    async def test_create_assigns_sequence_id(self, mock_db, collections):
        collections["tasks"].insert_one = AsyncMock()
        repo = TaskRepository(mock_db)

        task = await repo.create(Task.create(user_id=1, title="New", now=NOW))

        assert task.id == 1
        assert collections["tasks"].insert_one.await_args.args[0]["_id"] == 1

    async def test_update_is_owner_scoped_and_converts_values(self, mock_db, collections):
        collections["tasks"].find_one_and_update = AsyncMock(
            return_value=self._doc(status="done", due_date="2025-04-01")
        )
        repo = TaskRepository(mock_db)

        task = await repo.update(
            3, 1, {"status": TaskStatus.DONE, "due_date": date(2025, 4, 1), "updated_at": NOW}
        )

        assert task.status == TaskStatus.DONE
        assert task.due_date == date(2025, 4, 1)
        query, update = collections["tasks"].find_one_and_update.await_args.args
        assert query == {"_id": 3, "user_id": 1}
        assert update == {
            "$set": {"status": "done", "due_date": "2025-04-01", "updated_at": NOW}
        }

    async def test_update_foreign_task_returns_none(self, mock_db, collections):
        collections["tasks"].find_one_and_update = AsyncMock(return_value=None)
        repo = TaskRepository(mock_db)

        assert await repo.update(3, 2, {"updated_at": NOW}) is None

    async def test_list_builds_filtered_query(self, mock_db, collections):
        cursor = MagicMock()
        cursor.__aiter__.return_value = [self._doc()]
        collections["tasks"].find.return_value.sort.return_value = cursor
        repo = TaskRepository(mock_db)

        tasks = await repo.list_by_owner(
            1, status=TaskStatus.TODO, priority=TaskPriority.MEDIUM, search="a.b"
        )

        assert [t.id for t in tasks] == [3]
        query = collections["tasks"].find.call_args.args[0]
        assert query["user_id"] == 1
        assert query["status"] == "todo"
        assert query["priority"] == "medium"
        assert query["$or"][0] == {"title": {"$regex": r"a\.b", "$options": "i"}}
        collections["tasks"].find.return_value.sort.assert_called_once_with(
            [("created_at", -1), ("_id", -1)]
        )

    async def test_delete_reports_missing(self, mock_db, collections):
        collections["tasks"].delete_one = AsyncMock(return_value=MagicMock(deleted_count=0))
        repo = TaskRepository(mock_db)

        assert await repo.delete(3, 2) is False
        collections["tasks"].delete_one.assert_awaited_once_with({"_id": 3, "user_id": 2})
