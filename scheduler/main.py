from __future__ import annotations

import logging

import uvicorn

from scheduler.api.app import create_app
from scheduler.config import SETTINGS
from scheduler.infra.db import build_engine, build_session_factory, init_db
from scheduler.infra.logging import setup_logging
from scheduler.infra.migrations import run_migrations

logger = logging.getLogger(__name__)


def main() -> None:
    setup_logging(SETTINGS)
    engine = build_engine(SETTINGS.database_url)
    try:
        init_db(engine)
        run_migrations(SETTINGS.database_url)
    except Exception:  # noqa: BLE001
        logger.exception("database initialisation failed for %s", SETTINGS.database_url)
        raise SystemExit(1)

    app = create_app(SETTINGS, build_session_factory(engine))
    logger.info("server listening on %s:%s", SETTINGS.host, SETTINGS.port)
    uvicorn.run(app, host=SETTINGS.host, port=SETTINGS.port, log_config=None)


if __name__ == "__main__":
    main()
