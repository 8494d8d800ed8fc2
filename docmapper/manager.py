"""
DocumentManager

Registry that binds document classes to one motor database.

Each document class gets exactly one DocumentMetadata and one repository
per manager; both are created lazily on first request and reused after.
"""

import logging
from typing import TypeVar

from motor.motor_asyncio import AsyncIOMotorDatabase

from docmapper.config import Settings
from docmapper.connection import get_database
from docmapper.document import Document
from docmapper.exceptions import ConfigurationError
from docmapper.metadata import DocumentMetadata
from docmapper.repository import Repository

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Document)


class DocumentManager:
    """Hands out metadata and repositories for document classes."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self._db = db
        self._metadata: dict[type[Document], DocumentMetadata] = {}
        self._repositories: dict[type[Document], Repository] = {}

    @property
    def db(self) -> AsyncIOMotorDatabase:
        return self._db

    @property
    def models(self) -> list[type[Document]]:
        """Document classes with a repository in this manager."""
        return list(self._repositories)

    def get_metadata(self, model: type[T]) -> DocumentMetadata[T]:
        if model not in self._metadata:
            self._metadata[model] = DocumentMetadata(model, self._db)
        return self._metadata[model]

    def get_repository(
        self,
        model: type[T],
        repository_class: type[Repository] = Repository,
    ) -> Repository[T]:
        """
        Get the repository for a document class, creating it on first use.

        Raises:
            ConfigurationError: The class is already served by a different
                repository class.
        """
        existing = self._repositories.get(model)
        if existing is not None:
            if type(existing) is not repository_class:
                raise ConfigurationError(
                    f"{model.__name__} is already registered with "
                    f"{type(existing).__name__}, not {repository_class.__name__}"
                )
            return existing

        repository = repository_class()
        repository.manager = self
        repository.metadata = self.get_metadata(model)
        self._repositories[model] = repository

        logger.info(
            f"Registered {repository_class.__name__} for {model.__name__} "
            f"on '{repository.metadata.name}'"
        )
        return repository

    def register(
        self,
        model: type[T],
        repository_class: type[Repository] | None = None,
    ) -> Repository[T]:
        """Eagerly register a document class."""
        return self.get_repository(model, repository_class or Repository)

    async def ensure_indexes(self) -> dict[str, list[str]]:
        """
        Create the indexes declared on registered document classes.

        Returns:
            Index names created per collection
        """
        created: dict[str, list[str]] = {}
        for model in self.models:
            if not model.indexes:
                continue
            metadata = self.get_metadata(model)
            names = await metadata.collection.create_indexes(model.indexes)
            created[metadata.name] = names
            logger.info(f"Ensured {len(names)} index(es) on '{metadata.name}'")
        return created


def create_manager(settings: Settings | None = None) -> DocumentManager:
    """Factory function to create a DocumentManager on the connected database."""
    return DocumentManager(get_database(settings))
