from __future__ import annotations

import logging
import time
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.orm import sessionmaker

from scheduler.api.routes import router
from scheduler.config import PROJECT_ROOT, SETTINGS, Settings
from scheduler.infra.db import build_engine, build_session_factory

logger = logging.getLogger("scheduler.request")


def _resolve_web_dir(web_dir: str) -> Path | None:
    candidates = [Path(web_dir), PROJECT_ROOT / web_dir]
    for path in candidates:
        if path.is_dir():
            return path
    return None


def create_app(settings: Settings = SETTINGS, session_factory: sessionmaker | None = None) -> FastAPI:
    if session_factory is None:
        session_factory = build_session_factory(build_engine(settings.database_url))

    app = FastAPI(title="Scheduler API")
    app.state.settings = settings
    app.state.session_factory = session_factory

    @app.middleware("http")
    async def request_logger(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = int((time.perf_counter() - start) * 1000)

        message = f"{request.method} {request.url.path} status={response.status_code} {duration_ms}ms"
        if response.status_code >= 500:
            logger.error(message)
        elif response.status_code >= 400:
            logger.warning(message)
        else:
            logger.info(message)
        return response

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "invalid request body"})

    app.include_router(router)

    web_dir = _resolve_web_dir(settings.web_dir)
    if web_dir is not None:
        app.mount("/", StaticFiles(directory=web_dir, html=True), name="web")
    else:
        logger.info("web directory %s not found, serving API only", settings.web_dir)

    return app
