"""Recurrence rule grammar.

Four forms are understood::

    d <interval>            every <interval> days, 1..400
    y                       every year on the anchor's month/day
    w <d1,d2,...>           on the listed weekdays, 1 = Monday .. 7 = Sunday
    m <d1,...> [<m1,...>]   on the listed days of month (-1 = last day,
                            -2 = day before last), optionally only in the
                            listed months

Rules are parsed once into frozen dataclasses; the calculators in
``scheduler.domain.recurrence`` only ever see parsed rules.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Union

from .enums import RuleKind, Weekday
from .errors import (
    EmptyRuleError,
    InvalidDayTokenError,
    InvalidIntervalError,
    InvalidMonthTokenError,
    InvalidWeekdayError,
    UnsupportedRuleFormatError,
)

MIN_INTERVAL = 1
MAX_INTERVAL = 400
LAST_DAY = -1
SECOND_TO_LAST_DAY = -2

_INT_RE = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class DailyRule:
    interval: int
    kind: RuleKind = field(default=RuleKind.DAILY, init=False)


@dataclass(frozen=True)
class YearlyRule:
    kind: RuleKind = field(default=RuleKind.YEARLY, init=False)


@dataclass(frozen=True)
class WeeklyRule:
    weekdays: frozenset[int]
    kind: RuleKind = field(default=RuleKind.WEEKLY, init=False)


@dataclass(frozen=True)
class MonthlyRule:
    days: frozenset[int]
    months: frozenset[int] = frozenset()
    kind: RuleKind = field(default=RuleKind.MONTHLY, init=False)


RecurrenceRule = Union[DailyRule, YearlyRule, WeeklyRule, MonthlyRule]


def _parse_int(token: str) -> int | None:
    token = token.strip()
    if not _INT_RE.fullmatch(token):
        return None
    return int(token)


def is_valid_weekday(value: int) -> bool:
    return Weekday.MONDAY <= value <= Weekday.SUNDAY


def is_valid_month_day(value: int) -> bool:
    return 1 <= value <= 31 or value in (LAST_DAY, SECOND_TO_LAST_DAY)


def is_valid_month(value: int) -> bool:
    return 1 <= value <= 12


def _parse_daily(payload: str) -> DailyRule:
    interval = _parse_int(payload)
    if interval is None or not MIN_INTERVAL <= interval <= MAX_INTERVAL:
        raise InvalidIntervalError(f"invalid day interval {payload.strip()!r}: expected 1..400")
    return DailyRule(interval)


def _parse_weekly(payload: str) -> WeeklyRule:
    weekdays = set()
    for token in payload.split(","):
        value = _parse_int(token)
        if value is None or not is_valid_weekday(value):
            raise InvalidWeekdayError(f"invalid weekday {token.strip()!r}")
        weekdays.add(value)
    return WeeklyRule(frozenset(weekdays))


def _parse_monthly(payload: str) -> MonthlyRule:
    parts = payload.split(maxsplit=1)
    if not parts:
        raise InvalidDayTokenError("monthly rule lists no days")

    days = set()
    for token in parts[0].split(","):
        value = _parse_int(token)
        if value is None or not is_valid_month_day(value):
            raise InvalidDayTokenError(f"invalid day of month {token.strip()!r}")
        days.add(value)

    months = set()
    if len(parts) > 1:
        for token in parts[1].split(","):
            value = _parse_int(token)
            if value is None or not is_valid_month(value):
                raise InvalidMonthTokenError(f"invalid month {token.strip()!r}")
            months.add(value)

    return MonthlyRule(frozenset(days), frozenset(months))


def parse_rule(text: str) -> RecurrenceRule:
    rule = (text or "").strip()
    if not rule:
        raise EmptyRuleError()

    if rule.startswith(f"{RuleKind.DAILY} "):
        return _parse_daily(rule[2:])
    if rule == RuleKind.YEARLY:
        return YearlyRule()
    if rule.startswith(f"{RuleKind.WEEKLY} "):
        return _parse_weekly(rule[2:])
    if rule.startswith(f"{RuleKind.MONTHLY} "):
        return _parse_monthly(rule[2:])
    raise UnsupportedRuleFormatError(f"unsupported repeat rule {rule!r}")
