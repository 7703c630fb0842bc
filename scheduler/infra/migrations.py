from __future__ import annotations

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config

from scheduler.config import PROJECT_ROOT

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = PROJECT_ROOT / "migrations"


def build_alembic_config(database_url: str, script_location: Path = MIGRATIONS_DIR) -> Config:
    if not script_location.exists():
        raise RuntimeError(f"Missing migrations directory: {script_location}")
    alembic_cfg = Config()
    alembic_cfg.set_main_option("script_location", str(script_location))
    alembic_cfg.set_main_option("sqlalchemy.url", database_url)
    return alembic_cfg


def run_migrations(database_url: str) -> None:
    logger.info("running migrations")
    command.upgrade(build_alembic_config(database_url), "head")
    logger.info("migrations complete")
