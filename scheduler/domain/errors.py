"""Error kinds raised by the recurrence engine and the task workflows.

Each class carries a stable ``kind`` so callers can either report the precise
failure or collapse everything under the base class into a generic message.
"""
from __future__ import annotations


class RecurrenceError(ValueError):
    kind = "recurrence_error"
    default_message = "invalid repeat rule"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class EmptyRuleError(RecurrenceError):
    kind = "empty_rule"
    default_message = "repeat rule is not specified"


class InvalidDateFormatError(RecurrenceError):
    kind = "invalid_date_format"
    default_message = "date must use the YYYYMMDD format"


class UnsupportedRuleFormatError(RecurrenceError):
    kind = "unsupported_rule_format"
    default_message = "unsupported repeat rule format"


class InvalidIntervalError(RecurrenceError):
    kind = "invalid_interval"
    default_message = "day interval must be between 1 and 400"


class InvalidWeekdayError(RecurrenceError):
    kind = "invalid_weekday"
    default_message = "weekday must be between 1 and 7"


class InvalidDayTokenError(RecurrenceError):
    kind = "invalid_day_token"
    default_message = "day of month must be between 1 and 31, -1 or -2"


class InvalidMonthTokenError(RecurrenceError):
    kind = "invalid_month_token"
    default_message = "month must be between 1 and 12"


class NoRuleMatchError(RecurrenceError):
    kind = "no_rule_match"
    default_message = "no date matches the repeat rule"


class TaskError(ValueError):
    kind = "task_error"
    default_message = "task error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class TaskDateInvalidError(TaskError):
    kind = "task_date_invalid"
    default_message = "task date must use the YYYYMMDD format"


class InvalidRepeatRuleError(TaskError):
    kind = "invalid_repeat_rule"
    default_message = "invalid repeat rule"


class TaskTitleRequiredError(TaskError):
    kind = "task_title_required"
    default_message = "task title is required"


class TaskIdRequiredError(TaskError):
    kind = "task_id_required"
    default_message = "task id is required"


class TaskNotFoundError(TaskError):
    kind = "task_not_found"
    default_message = "task not found"


class NextOccurrenceError(TaskError):
    kind = "next_occurrence_failed"
    default_message = "could not compute next occurrence"
