"""Central configuration loader.

Reads config.yaml, applies environment variable overrides, and exposes a
typed Config object via get_config(). All modules import from here.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, field_validator

CONFIG_PATH = Path(__file__).parent / "config.yaml"


class ChatConfig(BaseModel):
    assistant_name: str = "NCDA Assistant"
    directory_title: str = "Child Protection Services Directory"
    example_district: str = "Kigali"
    max_results: int = 20
    max_suggestions: int = 3

    @field_validator("max_results", "max_suggestions")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be at least 1")
        return value


class StoreConfig(BaseModel):
    backend: Literal["postgres", "memory"] = "postgres"
    fixture_path: str = "data/catalog.json"


class LoggingConfig(BaseModel):
    level: str = "INFO"
    log_queries: bool = True
    log_file: str = "logs/queries.jsonl"
    log_to_database: bool = False


class AppConfig(BaseModel):
    title: str = "Child Protection Services Directory"
    description: str = "Find child protection service providers by district, service and need"


class Config(BaseModel):
    chat: ChatConfig = ChatConfig()
    store: StoreConfig = StoreConfig()
    logging: LoggingConfig = LoggingConfig()
    app: AppConfig = AppConfig()


def _apply_env_overrides(raw: dict) -> dict:
    """Apply environment variable overrides to the raw config dict."""
    env_map = {
        "CATALOG_BACKEND": ("store", "backend"),
        "CATALOG_FIXTURE": ("store", "fixture_path"),
        "LOG_LEVEL": ("logging", "level"),
        "CHAT_EXAMPLE_DISTRICT": ("chat", "example_district"),
    }
    for env_key, (section, field) in env_map.items():
        if env_key in os.environ:
            raw.setdefault(section, {})[field] = os.environ[env_key]
    return raw


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Load and return the cached Config singleton."""
    raw: dict = {}
    if CONFIG_PATH.exists():
        with open(CONFIG_PATH) as f:
            raw = yaml.safe_load(f) or {}
    raw = _apply_env_overrides(raw)
    return Config(**raw)


def get_database_url() -> str:
    """Return the database URL, always from the environment for security."""
    url = os.environ.get("DATABASE_URL")
    if not url:
        raise RuntimeError(
            "DATABASE_URL environment variable is not set. "
            "Add it to your .env file for local development."
        )
    # Heroku returns postgres:// but we store postgresql://
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    if "localhost" not in url and "127.0.0.1" not in url:
        if "sslmode" not in url:
            sep = "&" if "?" in url else "?"
            url = f"{url}{sep}sslmode=require"
    return url
