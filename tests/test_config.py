"""Tests for Settings loading."""

import pytest
from pydantic import ValidationError

from docmapper.config import Settings


def test_defaults(monkeypatch) -> None:
    monkeypatch.delenv("DOCMAPPER_MONGODB_URL", raising=False)
    settings = Settings(_env_file=None)
    assert settings.mongodb_url == "mongodb://localhost:27017"
    assert settings.log_level == "INFO"


def test_environment_prefix(monkeypatch) -> None:
    monkeypatch.setenv("DOCMAPPER_MONGODB_DATABASE", "inventory")
    monkeypatch.setenv("DOCMAPPER_LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert settings.mongodb_database == "inventory"
    assert settings.log_level == "DEBUG"


def test_rejects_unknown_log_level() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_level="chatty")


def test_rejects_non_mongodb_url() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, mongodb_url="postgresql://localhost/db")


def test_yaml_overlay(tmp_path) -> None:
    config_file = tmp_path / "docmapper.yaml"
    config_file.write_text("mongodb_database: reports\nlog_level: warning\nunknown: 1\n")

    settings = Settings(_env_file=None, config_file=config_file)
    settings.load_yaml_config()

    assert settings.mongodb_database == "reports"
    assert settings.log_level == "WARNING"


def test_missing_yaml_file_keeps_defaults(tmp_path) -> None:
    settings = Settings(_env_file=None, config_file=tmp_path / "absent.yaml")
    settings.load_yaml_config()
    assert settings.mongodb_database == "docmapper"
