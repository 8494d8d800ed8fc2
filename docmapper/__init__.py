"""docmapper: async document mapping and repositories for MongoDB."""

__version__ = "0.1.0"

from .cursor import MappedCursor
from .document import Document
from .exceptions import (
    AlreadyConfiguredError,
    ConfigurationError,
    DocumentMapperError,
    DocumentNotFound,
)
from .manager import DocumentManager, create_manager
from .metadata import DocumentMetadata
from .repository import FindOneAndOperation, Repository

__all__ = [
    "__version__",
    # Mapping
    "Document",
    "DocumentMetadata",
    "DocumentManager",
    "create_manager",
    # Repositories
    "Repository",
    "FindOneAndOperation",
    "MappedCursor",
    # Errors
    "DocumentMapperError",
    "ConfigurationError",
    "AlreadyConfiguredError",
    "DocumentNotFound",
]
