"""Next-occurrence calculators.

Every calculator answers one question: the earliest date matching the rule
that is strictly after the reference date ``now``. All functions are pure;
they never look at the wall clock.
"""
from __future__ import annotations

from datetime import MAXYEAR, date, datetime, timedelta

from .dates import as_date, days_in_month, format_date, parse_date
from .errors import (
    EmptyRuleError,
    InvalidDayTokenError,
    InvalidIntervalError,
    InvalidMonthTokenError,
    InvalidWeekdayError,
    NoRuleMatchError,
)
from .rules import (
    LAST_DAY,
    MAX_INTERVAL,
    MIN_INTERVAL,
    SECOND_TO_LAST_DAY,
    DailyRule,
    MonthlyRule,
    RecurrenceRule,
    WeeklyRule,
    YearlyRule,
    is_valid_month,
    is_valid_month_day,
    is_valid_weekday,
    parse_rule,
)

# Upper bound for the monthly walk. Any day token that can resolve at all
# (including Feb 29) does so within this many years.
MAX_LOOKAHEAD_YEARS = 10


def next_date(now: date | datetime, date_text: str, rule_text: str) -> str:
    """Return the next occurrence after ``now`` as ``YYYYMMDD``.

    ``date_text`` is the anchor in ``YYYYMMDD`` form and ``rule_text`` the raw
    repeat rule. Raises a :class:`RecurrenceError` subclass on bad input.
    """
    rule_text = (rule_text or "").strip()
    if not rule_text:
        raise EmptyRuleError()
    anchor = parse_date(date_text)
    rule = parse_rule(rule_text)
    return format_date(compute_next(now, anchor, rule))


def compute_next(now: date | datetime, anchor: date | datetime, rule: RecurrenceRule) -> date:
    now = as_date(now)
    anchor = as_date(anchor)
    try:
        if isinstance(rule, DailyRule):
            return next_daily(now, anchor, rule.interval)
        if isinstance(rule, YearlyRule):
            return next_yearly(now, anchor)
        if isinstance(rule, WeeklyRule):
            return next_weekly(now, anchor, rule.weekdays)
        if isinstance(rule, MonthlyRule):
            return next_monthly(now, anchor, rule.days, rule.months)
    except OverflowError as exc:
        raise NoRuleMatchError("next occurrence is beyond the supported date range") from exc
    raise TypeError(f"unknown recurrence rule: {rule!r}")


def next_daily(now: date, anchor: date, interval: int) -> date:
    if not MIN_INTERVAL <= interval <= MAX_INTERVAL:
        raise InvalidIntervalError(f"invalid day interval {interval}: expected 1..400")
    step = timedelta(days=interval)
    candidate = anchor + step
    while candidate <= now:
        candidate += step
    return candidate


def _same_day_in_year(anchor: date, year: int) -> date:
    if anchor.month == 2 and anchor.day == 29 and days_in_month(year, 2) == 28:
        # Feb 29 anchors move to Mar 1 in common years, never back to Feb 28.
        return date(year, 3, 1)
    return anchor.replace(year=year)


def next_yearly(now: date, anchor: date) -> date:
    year = anchor.year + 1
    while year <= MAXYEAR:
        candidate = _same_day_in_year(anchor, year)
        if candidate > now:
            return candidate
        year += 1
    raise NoRuleMatchError("next occurrence is beyond the supported date range")


def next_weekly(now: date, anchor: date, weekdays: frozenset[int]) -> date:
    if not weekdays:
        raise NoRuleMatchError("weekly rule lists no weekdays")

    earliest: date | None = None
    for weekday in weekdays:
        if not is_valid_weekday(weekday):
            raise InvalidWeekdayError(f"invalid weekday {weekday}")
        # date.weekday() counts Monday as 0, rules count it as 1.
        days_until = (weekday - 1 - now.weekday()) % 7 or 7
        candidate = now + timedelta(days=days_until)
        if candidate <= anchor:
            weeks = (anchor - candidate).days // 7 + 1
            candidate += timedelta(weeks=weeks)
        if earliest is None or candidate < earliest:
            earliest = candidate
    return earliest


def resolve_month_day(year: int, month: int, day: int) -> date | None:
    """Concrete date for a day token in the given month, or None if it does not exist."""
    last = days_in_month(year, month)
    if day == LAST_DAY:
        return date(year, month, last)
    if day == SECOND_TO_LAST_DAY:
        if last < 2:
            return None
        return date(year, month, last - 1)
    if 1 <= day <= last:
        return date(year, month, day)
    return None


def _first_in_month(after: date, day: int, month: int) -> date | None:
    last_year = min(after.year + MAX_LOOKAHEAD_YEARS, MAXYEAR)
    for year in range(after.year, last_year + 1):
        candidate = resolve_month_day(year, month, day)
        if candidate is not None and candidate > after:
            return candidate
    return None


def _first_in_any_month(after: date, day: int) -> date | None:
    year, month = after.year, after.month
    for _ in range(MAX_LOOKAHEAD_YEARS * 12 + 1):
        candidate = resolve_month_day(year, month, day)
        if candidate is not None and candidate > after:
            return candidate
        month += 1
        if month > 12:
            month = 1
            year += 1
            if year > MAXYEAR:
                break
    return None


def next_monthly(now: date, anchor: date, days: frozenset[int], months: frozenset[int]) -> date:
    if not days:
        raise InvalidDayTokenError("monthly rule lists no days")
    for day in days:
        if not is_valid_month_day(day):
            raise InvalidDayTokenError(f"invalid day of month {day}")
    for month in months:
        if not is_valid_month(month):
            raise InvalidMonthTokenError(f"invalid month {month}")

    # Nothing at or before the later of the two dates can qualify.
    after = max(now, anchor)
    earliest: date | None = None
    for day in sorted(days):
        if months:
            candidates = [_first_in_month(after, day, month) for month in sorted(months)]
        else:
            candidates = [_first_in_any_month(after, day)]
        for candidate in candidates:
            if candidate is not None and (earliest is None or candidate < earliest):
                earliest = candidate

    if earliest is None:
        raise NoRuleMatchError("no date matches the monthly rule")
    return earliest
