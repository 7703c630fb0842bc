from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def load_env() -> None:
    """Load ``.env`` and then ``.env.<APP_ENV>`` from the CWD or the project root."""
    env_name = os.getenv("APP_ENV", "development")
    for name, override in ((".env", False), (f".env.{env_name}", True)):
        for base in (Path.cwd(), PROJECT_ROOT):
            env_path = base / name
            if env_path.exists():
                load_dotenv(env_path, override=override)
                break


@dataclass(frozen=True)
class Settings:
    database_url: str
    host: str = "0.0.0.0"
    port: int = 7540
    web_dir: str = "web"
    search_limit: int = 50
    log_level: str = "INFO"
    log_dir: str = "logs"
    password: str | None = None
    jwt_secret: str | None = None
    token_ttl_hours: int = 8

    @property
    def auth_enabled(self) -> bool:
        return bool(self.password)

    @property
    def signing_key(self) -> str:
        return self.jwt_secret or self.password or ""


def _database_url() -> str:
    url = os.getenv("DATABASE_URL", "").strip()
    if url:
        return url
    db_file = os.getenv("TODO_DBFILE", "").strip() or "scheduler.db"
    return f"sqlite:///{db_file}"


def _read_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer") from exc


def load_settings() -> Settings:
    return Settings(
        database_url=_database_url(),
        host=os.getenv("TODO_HOST", "0.0.0.0"),
        port=_read_int("TODO_PORT", 7540),
        web_dir=os.getenv("TODO_WEB_DIR", "web"),
        search_limit=_read_int("TODO_SEARCH_LIMIT", 50),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_dir=os.getenv("LOG_DIR", "logs"),
        password=os.getenv("TODO_PASSWORD", "").strip() or None,
        jwt_secret=os.getenv("TODO_JWT_SECRET", "").strip() or None,
        token_ttl_hours=_read_int("TODO_TOKEN_TTL_HOURS", 8),
    )


load_env()

SETTINGS = load_settings()
