"""Custom exceptions for the document mapping layer."""

from typing import Any, Mapping


class DocumentMapperError(Exception):
    """Base exception for docmapper errors."""

    pass


class ConfigurationError(DocumentMapperError):
    """Repository, metadata or manager is wired up incorrectly."""

    pass


class AlreadyConfiguredError(ConfigurationError):
    """A write-once field was assigned a second time."""

    def __init__(self, field: str, owner: str | None = None):
        target = f" for {owner}" if owner else ""
        super().__init__(f"Cannot set {field}{target}: already configured")
        self.field = field


class DocumentNotFound(DocumentMapperError):
    """No document matched a lookup that required one."""

    def __init__(self, metadata: Any, filter: Mapping[str, Any] | None):
        self.metadata = metadata
        self.filter = filter
        name = getattr(metadata, "name", None) or "collection"
        super().__init__(f"No document found in '{name}' matching {filter!r}")
