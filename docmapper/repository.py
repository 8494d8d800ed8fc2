"""
Repository

Async CRUD facade over one MongoDB collection for one document class.

Every document handed to the driver passes through ``to_db`` and every
document handed back to the caller passes through ``from_db``. Filters,
updates and driver options are forwarded untouched.

Lookups return ``None`` when nothing matches; the ``*_or_fail`` variants
raise DocumentNotFound instead. Driver errors are never caught here.
"""

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, Mapping, Sequence, TypeVar

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.results import (
    DeleteResult,
    InsertManyResult,
    InsertOneResult,
    UpdateResult,
)

from docmapper.cursor import MappedCursor
from docmapper.document import Document
from docmapper.exceptions import (
    AlreadyConfiguredError,
    ConfigurationError,
    DocumentNotFound,
)
from docmapper.metadata import DocumentMetadata

if TYPE_CHECKING:
    from docmapper.manager import DocumentManager

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Document)

Filter = Mapping[str, Any]
Props = Mapping[str, Any]


class FindOneAndOperation(str, Enum):
    """Atomic find-and-modify primitives offered by the collection."""

    UPDATE = "update"
    REPLACE = "replace"
    DELETE = "delete"


class Repository(Generic[T]):
    """Repository for documents of one class."""

    def __init__(
        self,
        manager: "DocumentManager | None" = None,
        metadata: DocumentMetadata[T] | None = None,
    ):
        self._manager: "DocumentManager | None" = None
        self._metadata: DocumentMetadata[T] | None = None

        if manager is not None:
            self.manager = manager
        if metadata is not None:
            self.metadata = metadata

    # ------------------------------------------------------------------
    # Write-once binding
    # ------------------------------------------------------------------

    @property
    def manager(self) -> "DocumentManager | None":
        return self._manager

    @manager.setter
    def manager(self, manager: "DocumentManager") -> None:
        if self._manager is not None:
            raise AlreadyConfiguredError("DocumentManager", type(self).__name__)
        self._manager = manager

    @property
    def metadata(self) -> DocumentMetadata[T]:
        if self._metadata is None:
            raise ConfigurationError(
                f"{type(self).__name__} has no DocumentMetadata bound"
            )
        return self._metadata

    @metadata.setter
    def metadata(self, metadata: DocumentMetadata[T]) -> None:
        if self._metadata is not None:
            raise AlreadyConfiguredError("DocumentMetadata", type(self).__name__)
        self._metadata = metadata

    @property
    def db(self) -> AsyncIOMotorDatabase:
        return self.metadata.db

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return self.metadata.collection

    # ------------------------------------------------------------------
    # Conversions
    # ------------------------------------------------------------------

    def init(self, props: Props | T) -> T:
        return self.metadata.init(props)

    def to_db(self, model: T) -> dict[str, Any]:
        return self.metadata.to_db(model)

    def from_db(self, doc: Mapping[str, Any] | None) -> T | None:
        return self.metadata.from_db(doc)

    def id(self, value: str | ObjectId | None = None) -> ObjectId:
        """Normalize an identifier, or mint a new one."""
        return self.metadata.id(value)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find(self, filter: Filter | None = None, **options: Any) -> MappedCursor[T]:
        """
        Query the collection.

        Returns a lazy cursor; no request is sent until it is iterated, and
        each document is converted as it is yielded.
        """
        cursor = self.collection.find(filter, **options)
        return MappedCursor(cursor, self.from_db)

    async def find_one(self, filter: Filter, **options: Any) -> T | None:
        found = await self.collection.find_one(filter, **options)
        return self.from_db(found) if found else None

    async def find_one_or_fail(self, filter: Filter, **options: Any) -> T:
        return self._fail_if_empty(
            self.metadata, filter, await self.find_one(filter, **options)
        )

    async def find_by_id(self, id: str | ObjectId) -> T | None:
        return await self.find_one({"_id": self.id(id)})

    async def find_by_id_or_fail(self, id: str | ObjectId) -> T:
        filter = {"_id": self.id(id)}
        return self._fail_if_empty(self.metadata, filter, await self.find_one(filter))

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def create(
        self, props: Props | Sequence[Props], **options: Any
    ) -> T | list[T] | None:
        """Create one document from a mapping, or many from a list of them."""
        if isinstance(props, (list, tuple)):
            return await self.create_many(props, **options)
        return await self.create_one(props, **options)

    async def create_one(self, props: Props, **options: Any) -> T | None:
        """
        Build a document and insert it.

        Returns the in-memory model when the server acknowledges the write,
        None otherwise. Server-side defaults are not read back.
        """
        model = self.init(props)
        result = await self.insert_one(model, **options)
        return model if result is not None and result.acknowledged else None

    async def create_many(self, props: Sequence[Props], **options: Any) -> list[T]:
        """
        Build documents and insert them in bulk.

        Returns only the models reported as inserted, in the order the
        driver reported them.
        """
        models = [self.init(p) for p in props]
        result = await self.insert_many(models, **options)

        created = [models[i] for i in self._inserted_positions(models, result)]
        if len(created) != len(models):
            logger.warning(
                f"Inserted {len(created)} of {len(models)} documents "
                f"into '{self.metadata.name}'"
            )
        return created

    async def insert_one(self, model: T, **options: Any) -> InsertOneResult:
        return await self.collection.insert_one(self.to_db(model), **options)

    async def insert_many(
        self, models: Sequence[T], **options: Any
    ) -> InsertManyResult:
        return await self.collection.insert_many(
            [self.to_db(model) for model in models], **options
        )

    # ------------------------------------------------------------------
    # Find-and-modify
    # ------------------------------------------------------------------

    async def find_one_and_update(
        self, filter: Filter, update: Any, **options: Any
    ) -> T | None:
        options.setdefault("return_document", ReturnDocument.AFTER)
        return await self._find_one_and(
            FindOneAndOperation.UPDATE, filter, update, **options
        )

    async def find_one_and_replace(
        self, filter: Filter, props: Props, **options: Any
    ) -> T | None:
        options.setdefault("return_document", ReturnDocument.AFTER)
        replacement = self.to_db(self.init(props))
        return await self._find_one_and(
            FindOneAndOperation.REPLACE, filter, replacement, **options
        )

    async def find_one_and_delete(self, filter: Filter, **options: Any) -> T | None:
        return await self._find_one_and(FindOneAndOperation.DELETE, filter, **options)

    # ------------------------------------------------------------------
    # Updates and deletes
    # ------------------------------------------------------------------

    async def update_one(
        self, filter: Filter, update: Any, **options: Any
    ) -> UpdateResult:
        return await self.collection.update_one(filter, update, **options)

    async def update_many(
        self, filter: Filter, update: Any, **options: Any
    ) -> UpdateResult:
        return await self.collection.update_many(filter, update, **options)

    async def replace_one(
        self, filter: Filter, props: Props, **options: Any
    ) -> UpdateResult:
        """Replace a document; the payload is normalized like a new record."""
        return await self.collection.replace_one(
            filter, self.to_db(self.init(props)), **options
        )

    async def delete_one(self, filter: Filter, **options: Any) -> bool:
        """True only when exactly one document was deleted."""
        result = await self.collection.delete_one(filter, **options)
        return result is not None and result.deleted_count == 1

    async def delete_many(self, filter: Filter, **options: Any) -> DeleteResult:
        return await self.collection.delete_many(filter, **options)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _fail_if_empty(
        self, metadata: DocumentMetadata[T], filter: Filter | None, value: Any
    ) -> Any:
        if not value:
            raise DocumentNotFound(metadata, filter)
        return value

    async def _find_one_and(
        self, operation: FindOneAndOperation, *args: Any, **options: Any
    ) -> T | None:
        primitives = {
            FindOneAndOperation.UPDATE: self.collection.find_one_and_update,
            FindOneAndOperation.REPLACE: self.collection.find_one_and_replace,
            FindOneAndOperation.DELETE: self.collection.find_one_and_delete,
        }
        found = await primitives[operation](*args, **options)
        return self.from_db(found) if found else None

    @staticmethod
    def _inserted_positions(models: Sequence[T], result: Any) -> list[int]:
        """Positions of inserted models, in the order the driver reported them."""
        if result is None:
            return []

        inserted = result.inserted_ids
        # Positional results map index -> id
        if isinstance(inserted, Mapping):
            return [int(i) for i in inserted.keys() if 0 <= int(i) < len(models)]

        positions = {model.id: i for i, model in enumerate(models)}
        return [positions[_id] for _id in inserted if _id in positions]
