"""Configuration management using Pydantic Settings."""

import logging
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Connection and runtime settings, read from DOCMAPPER_* variables."""

    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "docmapper"
    server_selection_timeout_ms: int = Field(default=5000, gt=0)
    app_name: str = "docmapper"

    # Logging
    log_level: str = "INFO"
    logfire_token: str = ""

    # Optional YAML overlay
    config_file: Path | None = None

    model_config = SettingsConfigDict(
        env_prefix="DOCMAPPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Upper-case and validate the log level name."""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("mongodb_url")
    @classmethod
    def validate_mongodb_url(cls, v: str) -> str:
        if not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError("MongoDB URL must start with mongodb:// or mongodb+srv://")
        return v

    def load_yaml_config(self) -> None:
        """Load and merge YAML configuration over the environment values."""
        if self.config_file is None:
            return

        config_path = self.config_file
        if not config_path.exists():
            logger.warning(f"Config file not found: {config_path}. Using defaults.")
            return

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse YAML config: {e}")
            raise

        if not yaml_config:
            logger.warning(f"Empty config file: {config_path}")
            return

        fields = type(self).model_fields
        merged = self.model_dump()
        merged.update({key: value for key, value in yaml_config.items() if key in fields})
        validated = self.__class__.model_validate(merged)
        for name in fields:
            setattr(self, name, getattr(validated, name))

        logger.info(f"Loaded configuration from {config_path}")


@lru_cache()
def get_settings() -> Settings:
    """Get singleton Settings instance."""
    settings = Settings()
    settings.load_yaml_config()
    return settings
