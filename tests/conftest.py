"""Pytest configuration for authorlog tests."""

import logging

import pytest

from authorlog.config import reset_config_cache


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    """Never read the developer's ~/.authorlog config or .env during tests."""
    monkeypatch.setenv("AUTHORLOG_CONFIG_PATH", str(tmp_path / "missing-authorlog.yml"))
    monkeypatch.delenv("AUTHORLOG_ENV_PATH", raising=False)
    monkeypatch.delenv("AUTHORLOG_LOG_LEVEL", raising=False)
    reset_config_cache()
    yield
    reset_config_cache()
    package_logger = logging.getLogger("authorlog")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


def pytest_collection_modifyitems(config, items):
    """Set per-marker timeouts: unit=1s, integration=5s."""
    for item in items:
        if "unit" in item.keywords:
            item.add_marker(pytest.mark.timeout(1))
        elif "integration" in item.keywords:
            item.add_marker(pytest.mark.timeout(5))
