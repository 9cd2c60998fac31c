from __future__ import annotations

import logging
from pathlib import Path
from threading import Lock

from alembic import command
from alembic.config import Config

from .config import get_settings

logger = logging.getLogger(__name__)
PROJECT_ROOT = Path(__file__).resolve().parents[1]
_run_lock = Lock()
_applied_urls: set[str] = set()


def build_alembic_config(database_url: str | None = None) -> Config:
    cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    cfg.set_main_option("sqlalchemy.url", database_url or get_settings().database_url)
    return cfg


def run_migrations_once(database_url: str | None = None, revision: str = "head") -> bool:
    """Upgrade the schema once per process and database; returns True if it ran now."""
    url = database_url or get_settings().database_url
    if url in _applied_urls:
        return False

    with _run_lock:
        if url in _applied_urls:
            return False
        logger.info("Applying database migrations up to %s...", revision)
        command.upgrade(build_alembic_config(url), revision)
        _applied_urls.add(url)
        logger.info("Database schema is up to date.")
        return True
