"""
MongoDB connection management.

This module provides:
- MongoDB client connection via Motor (async driver)
- Database handle lookup
- Health check utilities
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure, OperationFailure

from docmapper.config import Settings, get_settings
from docmapper.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Global MongoDB client instance
_client: Optional[AsyncIOMotorClient] = None


def init_client(settings: Settings | None = None) -> AsyncIOMotorClient:
    """
    Create the MongoDB client.

    Motor connects lazily, so this does no network I/O. Calling it again
    returns the existing client.
    """
    global _client

    if _client is not None:
        return _client

    settings = settings or get_settings()
    _client = AsyncIOMotorClient(
        settings.mongodb_url,
        appname=settings.app_name,
        serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
    )
    logger.info(f"MongoDB client created for {_sanitize_mongodb_url(settings.mongodb_url)}")
    return _client


def close_client() -> None:
    """
    Close MongoDB connection.
    """
    global _client
    if _client is not None:
        _client.close()
        _client = None
        logger.info("MongoDB client closed")


def get_client() -> AsyncIOMotorClient:
    """
    Get the MongoDB client instance.
    """
    if _client is None:
        raise ConfigurationError("MongoDB client not initialized. Call init_client() first.")
    return _client


def get_database(settings: Settings | None = None) -> AsyncIOMotorDatabase:
    """
    Get the configured MongoDB database.
    """
    settings = settings or get_settings()
    return get_client()[settings.mongodb_database]


async def check_connection() -> bool:
    """
    Check if MongoDB connection is healthy.
    """
    if _client is None:
        return False

    try:
        await _client.admin.command("ping")
        return True
    except (ConnectionFailure, OperationFailure) as e:
        logger.warning(f"MongoDB ping failed: {e}")
        return False


def get_connection_info(settings: Settings | None = None) -> dict:
    """
    Get database connection information and status.
    """
    settings = settings or get_settings()

    return {
        "status": "connected" if _client is not None else "disconnected",
        "url": _sanitize_mongodb_url(settings.mongodb_url),
        "database": settings.mongodb_database,
    }


def _sanitize_mongodb_url(url: str) -> str:
    """
    Hide password in MongoDB URL for safe logging.
    """
    if "@" not in url or "://" not in url:
        return url

    protocol, rest = url.split("://", 1)
    credentials, host = rest.rsplit("@", 1)
    if ":" in credentials:
        username = credentials.split(":", 1)[0]
        return f"{protocol}://{username}:***@{host}"
    return url
