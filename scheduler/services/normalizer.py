from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

from scheduler.domain.dates import as_date, format_date, parse_date
from scheduler.domain.entities import TaskEntity
from scheduler.domain.errors import (
    InvalidDateFormatError,
    InvalidRepeatRuleError,
    RecurrenceError,
    TaskDateInvalidError,
)
from scheduler.domain.recurrence import next_date


def normalize_task(task: TaskEntity, now: date | datetime) -> TaskEntity:
    """Return ``task`` with a date that is never left in the past.

    A blank date means today. A one-off task dated before today moves to
    today; a recurring one rolls forward to its next occurrence after today.
    """
    today = as_date(now)
    task_date = task.date if (task.date or "").strip() else format_date(today)

    try:
        parsed = parse_date(task_date)
    except InvalidDateFormatError as exc:
        raise TaskDateInvalidError(f"invalid task date {task.date!r}") from exc

    if parsed < today:
        if not task.is_recurring:
            task_date = format_date(today)
        else:
            try:
                task_date = next_date(today, task_date, task.repeat)
            except RecurrenceError as exc:
                raise InvalidRepeatRuleError(f"invalid repeat rule {task.repeat!r}: {exc}") from exc

    return replace(task, date=task_date)
