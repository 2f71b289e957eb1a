"""Tests for environment configuration."""

import logging

import settings


class TestDefaultPath:
    def test_env_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SETTINGS_STORE_PATH", str(tmp_path / "s.json"))
        assert settings.default_path() == tmp_path / "s.json"

    def test_fallback(self, monkeypatch):
        monkeypatch.delenv("SETTINGS_STORE_PATH", raising=False)
        assert settings.default_path() == settings.DEFAULT_SETTINGS_PATH


class TestSetupLogging:
    def test_configures_root_once(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("LOG_FILE_PATH", str(tmp_path / "store.log"))
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        for h in saved_handlers:
            root.removeHandler(h)

        try:
            settings.setup_logging()
            handlers = root.handlers[:]
            settings.setup_logging()

            assert root.level == logging.DEBUG
            assert len(handlers) == 2
            assert root.handlers == handlers
        finally:
            for h in root.handlers[:]:
                root.removeHandler(h)
                h.close()
            for h in saved_handlers:
                root.addHandler(h)
            root.setLevel(saved_level)

    def test_invalid_level_falls_back_to_warning(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        monkeypatch.delenv("LOG_FILE_PATH", raising=False)
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        for h in saved_handlers:
            root.removeHandler(h)

        try:
            settings.setup_logging()
            assert root.level == logging.WARNING
        finally:
            for h in root.handlers[:]:
                root.removeHandler(h)
                h.close()
            for h in saved_handlers:
                root.addHandler(h)
            root.setLevel(saved_level)
