"""Pytest configuration and shared fixtures."""

import pytest

from ideavault_app.config import get_settings
from ideavault_app.storage import Storage


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point the settings at a throwaway data directory.

    ``get_settings`` is cached, so the cache is cleared before and after
    each test that uses this fixture.
    """
    path = tmp_path / "vault"
    monkeypatch.setenv("IDEAVAULT_DATA_DIR", str(path))
    monkeypatch.delenv("IDEAVAULT_MAX_LIST_ITEMS", raising=False)
    get_settings.cache_clear()
    yield path
    get_settings.cache_clear()


@pytest.fixture
def storage(data_dir):
    return Storage(data_dir)
