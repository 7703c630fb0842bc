from __future__ import annotations

from typing import Optional

from sqlalchemy import delete, or_, select, update
from sqlalchemy.orm import sessionmaker

from scheduler.domain.dates import format_date
from scheduler.domain.entities import TaskEntity
from scheduler.domain.filters import TaskFilters

from .models import TaskModel


def _to_entity(model: TaskModel) -> TaskEntity:
    return TaskEntity(
        id=model.id,
        date=model.date,
        title=model.title,
        comment=model.comment or "",
        repeat=model.repeat or "",
    )


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _apply_filters(stmt, filters: TaskFilters) -> object:
    if filters.due_on:
        stmt = stmt.where(TaskModel.date == format_date(filters.due_on))

    if filters.text:
        pattern = f"%{_escape_like(filters.text)}%"
        stmt = stmt.where(
            or_(
                TaskModel.title.ilike(pattern, escape="\\"),
                TaskModel.comment.ilike(pattern, escape="\\"),
            )
        )

    return stmt


class TaskRepository:
    """Task storage backed by the ``scheduler`` table.

    The session factory is passed in explicitly; the repository opens one
    short-lived session per call.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def list_tasks(self, filters: TaskFilters) -> list[TaskEntity]:
        with self._session_factory() as session:
            stmt = select(TaskModel)
            stmt = _apply_filters(stmt, filters)
            stmt = stmt.order_by(TaskModel.date.asc(), TaskModel.id.asc()).limit(filters.limit)
            return [_to_entity(task) for task in session.scalars(stmt)]

    def get_task(self, task_id: int) -> Optional[TaskEntity]:
        with self._session_factory() as session:
            task = session.get(TaskModel, task_id)
            return _to_entity(task) if task else None

    def create_task(self, task: TaskEntity) -> TaskEntity:
        with self._session_factory() as session:
            model = TaskModel(
                date=task.date,
                title=task.title,
                comment=task.comment,
                repeat=task.repeat,
            )
            session.add(model)
            session.commit()
            session.refresh(model)
            return _to_entity(model)

    def update_task(self, task: TaskEntity) -> Optional[TaskEntity]:
        with self._session_factory() as session:
            model = session.get(TaskModel, task.id)
            if not model:
                return None

            model.date = task.date
            model.title = task.title
            model.comment = task.comment
            model.repeat = task.repeat
            session.commit()
            session.refresh(model)
            return _to_entity(model)

    def update_date(self, task_id: int, task_date: str) -> bool:
        with self._session_factory() as session:
            result = session.execute(
                update(TaskModel).where(TaskModel.id == task_id).values(date=task_date)
            )
            session.commit()
            return result.rowcount > 0

    def delete_task(self, task_id: int) -> bool:
        with self._session_factory() as session:
            result = session.execute(delete(TaskModel).where(TaskModel.id == task_id))
            session.commit()
            return result.rowcount > 0
