"""Shared fixtures: document classes and driver doubles."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.results import InsertOneResult

from docmapper import Document, DocumentManager


class User(Document):
    """Document used across the test suite."""

    name: str
    age: int = 0


class FakeCursor:
    """Stand-in for a motor cursor that records when it is consumed."""

    def __init__(self, docs: list[dict[str, Any]]):
        self._docs = list(docs)
        self.fetched = 0
        self.modifiers: list[tuple[str, tuple]] = []

    def __aiter__(self) -> "FakeCursor":
        return self

    async def __anext__(self) -> dict[str, Any]:
        if not self._docs:
            raise StopAsyncIteration
        self.fetched += 1
        return self._docs.pop(0)

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        docs = self._docs if length is None else self._docs[:length]
        self.fetched += len(docs)
        self._docs = self._docs[len(docs):]
        return docs

    def sort(self, *args: Any, **kwargs: Any) -> "FakeCursor":
        self.modifiers.append(("sort", args))
        return self

    def skip(self, skip: int) -> "FakeCursor":
        self.modifiers.append(("skip", (skip,)))
        return self

    def limit(self, limit: int) -> "FakeCursor":
        self.modifiers.append(("limit", (limit,)))
        return self

    def batch_size(self, batch_size: int) -> "FakeCursor":
        self.modifiers.append(("batch_size", (batch_size,)))
        return self

    def close(self) -> None:
        self._docs = []


class InMemoryCollection:
    """Tiny collection double that stores documents keyed by ``_id``."""

    def __init__(self):
        self.docs: dict[Any, dict[str, Any]] = {}

    async def insert_one(self, doc: dict[str, Any], **options: Any) -> InsertOneResult:
        self.docs[doc["_id"]] = dict(doc)
        return InsertOneResult(doc["_id"], acknowledged=True)

    async def find_one(self, filter: dict[str, Any], **options: Any):
        found = self.docs.get(filter.get("_id"))
        return dict(found) if found else None


@pytest.fixture
def collection():
    """Mocked motor collection; async methods are AsyncMocks."""
    collection = MagicMock(name="collection")
    for method in (
        "find_one",
        "insert_one",
        "insert_many",
        "update_one",
        "update_many",
        "replace_one",
        "delete_one",
        "delete_many",
        "find_one_and_update",
        "find_one_and_replace",
        "find_one_and_delete",
        "create_indexes",
    ):
        setattr(collection, method, AsyncMock(name=method))
    return collection


@pytest.fixture
def db(collection):
    """Mocked motor database returning the same collection for any name."""
    db = MagicMock(name="db")
    db.__getitem__.return_value = collection
    return db


@pytest.fixture
def manager(db):
    return DocumentManager(db)


@pytest.fixture
def repo(manager):
    return manager.get_repository(User)
