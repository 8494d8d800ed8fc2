"""Logging setup and optional Logfire instrumentation."""

import logging

import logfire

from docmapper import __version__
from docmapper.config import Settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s:%(name)s:%(message)s"


def configure_logging(settings: Settings) -> None:
    """Configure the root logger from settings."""
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    logging.getLogger("docmapper").setLevel(settings.log_level)


def initialize_logfire(settings: Settings) -> bool:
    """
    Initialize Logfire with MongoDB instrumentation.

    Call once at application startup, before the client is created, so
    pymongo commands are traced from the first request.

    Args:
        settings: Settings containing the Logfire token

    Returns:
        True when Logfire was configured, False when it was skipped or failed.
    """
    if not settings.logfire_token:
        logger.warning("Logfire token not set - observability disabled")
        return False

    try:
        logfire.configure(
            token=settings.logfire_token,
            service_name=settings.app_name,
            service_version=__version__,
        )

        logfire.instrument_pymongo()

        # Bridge Python logging to Logfire
        logging.getLogger().addHandler(logfire.LogfireLoggingHandler())

        logger.info("Logfire tracking initialized")
        return True

    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")
        # Observability is optional
        return False
