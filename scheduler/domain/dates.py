from __future__ import annotations

import calendar
from datetime import date, datetime

from .errors import InvalidDateFormatError

DATE_FORMAT = "%Y%m%d"
SEARCH_DATE_FORMAT = "%d.%m.%Y"


def as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def parse_date(text: str) -> date:
    value = text or ""
    if len(value) != 8 or not value.isascii() or not value.isdigit():
        raise InvalidDateFormatError(f"invalid date {text!r}: expected YYYYMMDD")
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as exc:
        raise InvalidDateFormatError(f"invalid date {text!r}: {exc}") from exc


def format_date(value: date | datetime) -> str:
    return as_date(value).strftime(DATE_FORMAT)


def parse_search_date(text: str) -> date | None:
    try:
        return datetime.strptime(text.strip(), SEARCH_DATE_FORMAT).date()
    except ValueError:
        return None


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]
