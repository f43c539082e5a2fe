"""Typed smoke tests for the settings loader.

These tests verify three guarantees:
1) Importing the module-level `settings` yields a `Settings` instance.
2) Environment variables override defaults after clearing the loader cache.
3) `get_logger()` respects the configured LOG_LEVEL when constructing loggers.
"""

from __future__ import annotations

import logging
from typing import Any

from wordcards.core.settings import (
    Settings,
    get_logger,
    load_settings,
    settings,
)


def test_settings_instance_type() -> None:
    """`settings` should be an instance of the typed `Settings` model."""
    assert isinstance(settings, Settings)


def test_env_overrides_with_cache_clear(monkeypatch: Any) -> None:
    """Changing env vars should take effect after `load_settings.cache_clear()`."""
    monkeypatch.setenv("WORDCARDS_ENV", "test")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("GEMINI_API_KEY", "test-gemini-key")
    monkeypatch.setenv("WORDCARDS_HTTP_TIMEOUT", "12.5")
    monkeypatch.setenv("WORDCARDS_MAX_JOBS", "20")

    load_settings.cache_clear()
    try:
        s = load_settings()
        assert s.environment == "test"
        assert s.is_test and not s.is_dev and not s.is_prod
        assert s.log_level == "DEBUG"
        assert s.gemini_api_key == "test-gemini-key"
        assert s.http_timeout_seconds == 12.5
        assert s.max_jobs == 20
    finally:
        load_settings.cache_clear()


def test_get_logger_respects_level(monkeypatch: Any) -> None:
    """`get_logger()` should apply the numeric level derived from `LOG_LEVEL`."""
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    load_settings.cache_clear()
    try:
        logger = get_logger("wordcards.tests.settings")
        assert logger.level == logging.ERROR
        assert logger.handlers, "Expected at least one StreamHandler to be attached."
        assert logger.propagate is False
    finally:
        load_settings.cache_clear()
