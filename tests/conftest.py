"""Shared fixtures for settings store tests."""

import pytest

from settings_store import SettingsStore


@pytest.fixture
def store_path(tmp_path):
    """Path of a settings file that does not exist yet."""
    return tmp_path / "settings.json"


@pytest.fixture
def store(store_path):
    """Fresh SettingsStore on a temp file, closed after the test."""
    with SettingsStore.open(store_path) as s:
        yield s
