from __future__ import annotations

import pytest
from sqlalchemy.orm import sessionmaker

from scheduler.infra.db import build_engine, build_session_factory
from scheduler.infra.migrations import run_migrations


@pytest.fixture
def database_url(tmp_path) -> str:
    url = f"sqlite:///{tmp_path / 'scheduler.db'}"
    run_migrations(url)
    return url


@pytest.fixture
def session_factory(database_url: str) -> sessionmaker:
    engine = build_engine(database_url)
    try:
        yield build_session_factory(engine)
    finally:
        engine.dispose()
