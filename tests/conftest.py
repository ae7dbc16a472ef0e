"""Shared fixtures for cronnext tests."""

import logging

import pytest

from cronnext.config import reset_config
from cronnext.days import clear_day_cache
from cronnext.logging import LOGGER_NAME


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Run every test without time zone variables and with fresh caches."""
    for name in ("CRONNEXT_TIMEZONE", "CRONNEXT_LOG_LEVEL", "CRONNEXT_DAY_CACHE_SIZE", "TZ"):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    clear_day_cache()

    logger = logging.getLogger(LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate

    yield

    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
    reset_config()
