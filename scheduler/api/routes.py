from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse, PlainTextResponse

from scheduler.api.auth import TOKEN_COOKIE, create_access_token, require_authenticated, verify_password
from scheduler.api.schemas import SignInIn, TaskCreatedOut, TaskIn, TaskListOut, TaskOut, TokenOut
from scheduler.domain.dates import parse_date
from scheduler.domain.errors import RecurrenceError, TaskError, TaskNotFoundError
from scheduler.domain.filters import TaskFilters
from scheduler.infra.repository import TaskRepository
from scheduler.services.task_service import TaskService

router = APIRouter(prefix="/api", tags=["scheduler"])
logger = logging.getLogger(__name__)

authenticated = [Depends(require_authenticated)]


def get_service(request: Request) -> TaskService:
    return TaskService(TaskRepository(request.app.state.session_factory))


def get_search_limit(request: Request) -> int:
    return request.app.state.settings.search_limit


def _error(exc: TaskError) -> JSONResponse:
    logger.info("request rejected: %s (%s)", exc, exc.kind)
    code = status.HTTP_404_NOT_FOUND if isinstance(exc, TaskNotFoundError) else status.HTTP_400_BAD_REQUEST
    return JSONResponse(status_code=code, content={"error": str(exc)})


@router.post("/signin", response_model=TokenOut)
def sign_in(payload: SignInIn, request: Request, response: Response):
    settings = request.app.state.settings
    if not settings.auth_enabled or not verify_password(payload.password, settings):
        logger.warning("sign-in rejected")
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"error": "wrong password"})

    token, expires = create_access_token(settings)
    response.set_cookie(TOKEN_COOKIE, token, expires=expires, httponly=True, samesite="lax")
    return TokenOut(token=token)


@router.get("/nextdate", response_class=PlainTextResponse)
def next_date(
    now: str = "",
    date: str = "",
    repeat: str = "",
    service: TaskService = Depends(get_service),
) -> PlainTextResponse:
    try:
        now_value = parse_date(now)
    except RecurrenceError:
        return PlainTextResponse("invalid 'now' date", status_code=status.HTTP_400_BAD_REQUEST)

    try:
        result = service.next_date(now_value, date, repeat)
    except RecurrenceError as exc:
        return PlainTextResponse(str(exc), status_code=status.HTTP_400_BAD_REQUEST)
    return PlainTextResponse(result)


@router.get("/task", response_model=TaskOut, dependencies=authenticated)
def get_task(id: str = "", service: TaskService = Depends(get_service)):
    try:
        return TaskOut.from_entity(service.get_task(id))
    except TaskError as exc:
        return _error(exc)


@router.post("/task", response_model=TaskCreatedOut, dependencies=authenticated)
def create_task(payload: TaskIn, service: TaskService = Depends(get_service)):
    try:
        task = service.create_task(payload.model_dump())
    except TaskError as exc:
        return _error(exc)
    return TaskCreatedOut(id=task.id)


@router.put("/task", dependencies=authenticated)
def update_task(payload: TaskIn, service: TaskService = Depends(get_service)) -> dict:
    try:
        service.update_task(payload.id, payload.model_dump())
    except TaskError as exc:
        return _error(exc)
    return {}


@router.delete("/task", dependencies=authenticated)
def delete_task(id: str = "", service: TaskService = Depends(get_service)) -> dict:
    try:
        service.delete_task(id)
    except TaskError as exc:
        return _error(exc)
    return {}


@router.get("/tasks", response_model=TaskListOut, dependencies=authenticated)
def list_tasks(
    search: str = "",
    limit: int = Depends(get_search_limit),
    service: TaskService = Depends(get_service),
) -> TaskListOut:
    tasks = service.list_tasks(TaskFilters(search=search.strip() or None, limit=limit))
    return TaskListOut(tasks=[TaskOut.from_entity(task) for task in tasks])


@router.post("/task/done", dependencies=authenticated)
def complete_task(id: str = "", service: TaskService = Depends(get_service)) -> dict:
    try:
        service.mark_done(id)
    except TaskError as exc:
        return _error(exc)
    return {}
