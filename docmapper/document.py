"""
Base document model for docmapper.

Domain objects are pydantic models whose identifier is stored under
MongoDB's ``_id`` key. Subclasses may set ``collection_name`` and
``indexes`` as class variables.
"""

import re
from typing import ClassVar

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field
from pymongo import IndexModel

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


class Document(BaseModel):
    """Base class for all mapped documents."""

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    # Minted by DocumentMetadata.id(), never defaulted here
    id: ObjectId = Field(alias="_id")

    collection_name: ClassVar[str | None] = None
    indexes: ClassVar[list[IndexModel]] = []

    @classmethod
    def get_collection_name(cls) -> str:
        """Collection name from ``collection_name`` or the snake_cased class name."""
        if cls.collection_name:
            return cls.collection_name
        return _CAMEL_BOUNDARY.sub("_", cls.__name__).lower()
