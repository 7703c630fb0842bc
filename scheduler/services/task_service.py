from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Protocol

from scheduler.domain import recurrence
from scheduler.domain.entities import TaskEntity
from scheduler.domain.errors import (
    NextOccurrenceError,
    RecurrenceError,
    TaskIdRequiredError,
    TaskNotFoundError,
    TaskTitleRequiredError,
)
from scheduler.domain.filters import TaskFilters
from scheduler.services.normalizer import normalize_task

logger = logging.getLogger(__name__)

MIN_TASK_ID = -(2**63)
MAX_TASK_ID = 2**63 - 1


class TaskStore(Protocol):
    def list_tasks(self, filters: TaskFilters) -> list[TaskEntity]: ...

    def get_task(self, task_id: int) -> TaskEntity | None: ...

    def create_task(self, task: TaskEntity) -> TaskEntity: ...

    def update_task(self, task: TaskEntity) -> TaskEntity | None: ...

    def update_date(self, task_id: int, task_date: str) -> bool: ...

    def delete_task(self, task_id: int) -> bool: ...


class TaskService:
    def __init__(self, repo: TaskStore, clock: Callable[[], datetime] = datetime.now) -> None:
        self._repo = repo
        self._clock = clock

    def list_tasks(self, filters: TaskFilters) -> list[TaskEntity]:
        return self._repo.list_tasks(filters)

    def get_task(self, task_id: int | str | None) -> TaskEntity:
        task = self._repo.get_task(self._require_id(task_id))
        if task is None:
            raise TaskNotFoundError()
        return task

    def create_task(self, data: dict) -> TaskEntity:
        task = normalize_task(self._build_entity(None, data), self._clock())
        created = self._repo.create_task(task)
        logger.info("task %s created for %s (repeat=%r)", created.id, created.date, created.repeat)
        return created

    def update_task(self, task_id: int | str | None, data: dict) -> TaskEntity:
        task = self._build_entity(self._require_id(task_id), data)
        updated = self._repo.update_task(normalize_task(task, self._clock()))
        if updated is None:
            raise TaskNotFoundError()
        logger.info("task %s updated to %s", updated.id, updated.date)
        return updated

    def delete_task(self, task_id: int | str | None) -> None:
        task_id = self._require_id(task_id)
        if not self._repo.delete_task(task_id):
            raise TaskNotFoundError()
        logger.info("task %s deleted", task_id)

    def mark_done(self, task_id: int | str | None) -> TaskEntity | None:
        """Complete a task.

        One-off tasks are deleted and ``None`` is returned. Recurring tasks
        move to their next occurrence after the current moment.
        """
        task = self.get_task(task_id)
        if not task.is_recurring:
            self.delete_task(task.id)
            return None

        try:
            next_due = recurrence.next_date(self._clock(), task.date, task.repeat)
        except RecurrenceError as exc:
            logger.warning("task %s: cannot advance %r from %s: %s", task.id, task.repeat, task.date, exc)
            raise NextOccurrenceError() from exc

        if not self._repo.update_date(task.id, next_due):
            raise TaskNotFoundError()
        logger.info("task %s rescheduled from %s to %s", task.id, task.date, next_due)
        return TaskEntity(task.id, next_due, task.title, task.comment, task.repeat)

    def next_date(self, now: date | datetime, task_date: str, repeat: str) -> str:
        return recurrence.next_date(now, task_date, repeat)

    @staticmethod
    def _require_id(task_id: int | str | None) -> int:
        if task_id is None or str(task_id).strip() == "":
            raise TaskIdRequiredError()
        try:
            value = int(str(task_id).strip())
        except ValueError as exc:
            raise TaskNotFoundError() from exc
        # ids are stored as signed 64-bit integers
        if not MIN_TASK_ID <= value <= MAX_TASK_ID:
            raise TaskNotFoundError()
        return value

    @staticmethod
    def _build_entity(task_id: int | None, data: dict) -> TaskEntity:
        title = (data.get("title") or "").strip()
        if not title:
            raise TaskTitleRequiredError()
        return TaskEntity(
            id=task_id,
            date=(data.get("date") or "").strip(),
            title=title,
            comment=data.get("comment") or "",
            repeat=(data.get("repeat") or "").strip(),
        )
