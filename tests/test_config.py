"""Tests for config loading and database URL handling."""

import pytest
from pydantic import ValidationError

from config import ChatConfig, get_config, get_database_url


@pytest.fixture
def fresh_config():
    get_config.cache_clear()
    yield
    get_config.cache_clear()


class TestGetConfig:
    def test_defaults_from_yaml(self, fresh_config, monkeypatch):
        for key in ("CATALOG_BACKEND", "CATALOG_FIXTURE", "LOG_LEVEL", "CHAT_EXAMPLE_DISTRICT"):
            monkeypatch.delenv(key, raising=False)
        cfg = get_config()
        assert cfg.chat.max_results == 20
        assert cfg.chat.max_suggestions == 3

    def test_env_overrides(self, fresh_config, monkeypatch):
        monkeypatch.setenv("CATALOG_BACKEND", "memory")
        monkeypatch.setenv("CHAT_EXAMPLE_DISTRICT", "Huye")
        cfg = get_config()
        assert cfg.store.backend == "memory"
        assert cfg.chat.example_district == "Huye"

    def test_cached(self, fresh_config):
        assert get_config() is get_config()

    def test_bad_backend(self, fresh_config, monkeypatch):
        monkeypatch.setenv("CATALOG_BACKEND", "sqlite")
        with pytest.raises(ValidationError):
            get_config()

    def test_max_results_must_be_positive(self):
        with pytest.raises(ValidationError):
            ChatConfig(max_results=0)


class TestDatabaseUrl:
    def test_missing(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        with pytest.raises(RuntimeError):
            get_database_url()

    def test_local_untouched(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@localhost:5432/cp")
        assert get_database_url() == "postgresql://u:p@localhost:5432/cp"

    def test_remote_gets_sslmode(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgres://u:p@db.example.com/cp")
        assert get_database_url() == "postgresql://u:p@db.example.com/cp?sslmode=require"

    def test_existing_query_string(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db.example.com/cp?app=chat")
        assert get_database_url().endswith("?app=chat&sslmode=require")
