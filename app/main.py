"""FastAPI application entry point.

Lifespan events:
  - Configure logging
  - Build the catalog store (PostgreSQL or in-memory fixture)
  - Assemble the ChatEngine and attach it to app.state

A store passed to create_app() is used as-is and the lifespan leaves it
alone; the test suite relies on this.

Run with:
    uvicorn app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from loguru import logger

load_dotenv()

from catalog.memory import InMemoryCatalogStore
from catalog.store import CatalogStore, PostgresCatalogStore
from config import Config, get_config, get_database_url
from responses.engine import ChatEngine


def build_store(cfg: Config) -> CatalogStore:
    """Create the catalog store selected by store.backend."""
    if cfg.store.backend == "memory":
        logger.info(f"Using in-memory catalog from {cfg.store.fixture_path}")
        return InMemoryCatalogStore.from_json(cfg.store.fixture_path)
    logger.info("Using PostgreSQL catalog store")
    return PostgresCatalogStore(get_database_url())


def _attach(app: FastAPI, store: CatalogStore, cfg: Config) -> None:
    app.state.catalog_store = store
    app.state.chat_engine = ChatEngine(store, cfg)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize shared resources once at startup."""
    cfg = get_config()

    # ── Logging setup ─────────────────────────────────────────────────────────
    logging.basicConfig(level=cfg.logging.level)
    logger.info("Starting chat service...")

    # ── Catalog store + engine ────────────────────────────────────────────────
    if getattr(app.state, "chat_engine", None) is None:
        _attach(app, build_store(cfg), cfg)

    logger.info("System ready.")
    yield

    logger.info("Shutting down.")


# ── App factory ───────────────────────────────────────────────────────────────

def create_app(store: Optional[CatalogStore] = None, cfg: Optional[Config] = None) -> FastAPI:
    cfg = cfg or get_config()
    app = FastAPI(
        title=cfg.app.title,
        description=cfg.app.description,
        lifespan=lifespan,
    )
    app.state.chat_engine = None
    if store is not None:
        _attach(app, store, cfg)

    # Routers
    from app.routes.chat import router as chat_router
    from app.routes.directories import router as directories_router

    app.include_router(chat_router)
    app.include_router(directories_router)

    return app


app = create_app()
