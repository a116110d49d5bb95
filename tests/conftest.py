"""Shared fixtures for the TextCompare test suite."""

import pytest

from config_logging import AppConfig, reset_config


@pytest.fixture
def config() -> AppConfig:
    """A fresh configuration with defaults and no file logging."""
    return AppConfig(log_to_file=False, log_to_console=False)


@pytest.fixture(autouse=True)
def clean_global_config():
    """Drop any global configuration a test created from the environment."""
    yield
    reset_config()
