"""Tests for environment settings and logging setup."""

import logging
from pathlib import Path

import pytest

from packetjourney.logging_setup import LOG_FORMAT, configure_logging
from packetjourney.settings import get_settings, load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("DATA_DIR", "DB_PATH", "QUESTS_DIR", "API_URL", "LOG_LEVEL", "LOG_FILE"):
        monkeypatch.delenv(f"PACKETJOURNEY_{name}", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    settings = load_settings()

    assert settings.data_dir == Path.home() / ".local" / "share" / "packetjourney"
    assert settings.db_path == settings.data_dir / "progress.db"
    assert settings.quests_dir is None
    assert settings.api_url is None
    assert settings.log_level == "INFO"
    assert settings.log_level_value == logging.INFO


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("PACKETJOURNEY_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("PACKETJOURNEY_QUESTS_DIR", str(tmp_path / "quests"))
    monkeypatch.setenv("PACKETJOURNEY_API_URL", "http://localhost:3000/")
    monkeypatch.setenv("PACKETJOURNEY_LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.db_path == tmp_path / "progress.db"
    assert settings.quests_dir == tmp_path / "quests"
    assert settings.api_url == "http://localhost:3000"
    assert settings.log_level_value == logging.DEBUG


def test_blank_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("PACKETJOURNEY_API_URL", "   ")

    assert load_settings().api_url is None


def test_invalid_log_level(monkeypatch):
    monkeypatch.setenv("PACKETJOURNEY_LOG_LEVEL", "LOUD")

    with pytest.raises(ValueError, match="LOG_LEVEL"):
        load_settings()


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


@pytest.fixture
def package_logger():
    logger = logging.getLogger("packetjourney")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    handlers, level, propagate = saved
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate


def test_configure_logging_writes_to_file(package_logger, tmp_path):
    log_file = tmp_path / "logs" / "packetjourney.log"

    configure_logging(logging.DEBUG, log_file)
    logging.getLogger("packetjourney.quests").debug("hello from a module")
    for handler in package_logger.handlers:
        handler.flush()

    assert len(package_logger.handlers) == 1
    assert "DEBUG packetjourney.quests: hello from a module" in log_file.read_text()


def test_configure_logging_replaces_handlers(package_logger):
    configure_logging()
    configure_logging()

    assert len(package_logger.handlers) == 1
    assert package_logger.handlers[0].formatter._fmt == LOG_FORMAT
