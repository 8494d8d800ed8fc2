"""Per-class mapping metadata: construction, conversion and id minting."""

import logging
from typing import Any, Generic, Mapping, TypeVar

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase

from docmapper.document import Document

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Document)


class DocumentMetadata(Generic[T]):
    """
    Knows how to build, store and load one document class.

    Shared by every repository of that class within a DocumentManager.

    Args:
        model: Document subclass being mapped
        db: Motor database holding the collection
        collection_name: Overrides the name declared on the model
    """

    def __init__(
        self,
        model: type[T],
        db: AsyncIOMotorDatabase,
        collection_name: str | None = None,
    ):
        self.model = model
        self._db = db
        self._name = collection_name or model.get_collection_name()
        self._collection = db[self._name]
        logger.debug(f"Mapped {model.__name__} to collection '{self._name}'")

    @property
    def name(self) -> str:
        return self._name

    @property
    def db(self) -> AsyncIOMotorDatabase:
        return self._db

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return self._collection

    def init(self, props: Mapping[str, Any] | T) -> T:
        """
        Build a validated domain object from a property set.

        The identifier may be given as ``_id`` or ``id``; it is normalized
        through ``id()`` and minted when missing.
        """
        if isinstance(props, Document):
            data = props.model_dump(by_alias=True)
        else:
            data = dict(props)

        raw_id = data.pop("_id", None)
        if "id" in data:
            alias_id = data.pop("id")
            raw_id = raw_id if raw_id is not None else alias_id

        data["_id"] = self.id(raw_id)
        return self.model.model_validate(data)

    def to_db(self, model: T) -> dict[str, Any]:
        return model.model_dump(by_alias=True)

    def from_db(self, doc: Mapping[str, Any] | None) -> T | None:
        if doc is None:
            return None
        return self.model.model_validate(doc)

    def id(self, value: str | ObjectId | None = None) -> ObjectId:
        """Normalize a raw identifier, or mint a new one when absent."""
        if value is None:
            return ObjectId()
        if isinstance(value, ObjectId):
            return value
        return ObjectId(value)

    def __repr__(self) -> str:
        return f"DocumentMetadata({self.model.__name__}, collection='{self._name}')"
