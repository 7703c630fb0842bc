from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta

import pytest

from scheduler.domain.dates import format_date, parse_date
from scheduler.domain.errors import (
    EmptyRuleError,
    InvalidDateFormatError,
    InvalidDayTokenError,
    InvalidIntervalError,
    InvalidMonthTokenError,
    InvalidWeekdayError,
    NoRuleMatchError,
    RecurrenceError,
    UnsupportedRuleFormatError,
)
from scheduler.domain.recurrence import compute_next, next_date, next_monthly, next_weekly
from scheduler.domain.rules import MonthlyRule, WeeklyRule


@pytest.mark.parametrize(
    ("now", "anchor", "rule", "expected"),
    [
        (date(2024, 3, 1), "20240228", "d 1", "20240302"),
        (date(2024, 3, 1), "20240229", "y", "20250301"),
        (date(2024, 3, 4), "20240101", "w 1,3", "20240306"),
        (date(2024, 1, 15), "20230101", "m 31", "20240131"),
    ],
)
def test_reference_scenarios(now: date, anchor: str, rule: str, expected: str) -> None:
    assert next_date(now, anchor, rule) == expected


def test_blank_rule_is_rejected_before_the_date_is_read() -> None:
    with pytest.raises(EmptyRuleError):
        next_date(date(2024, 3, 1), "not-a-date", "   ")


def test_unknown_prefix_is_unsupported() -> None:
    with pytest.raises(UnsupportedRuleFormatError):
        next_date(date(2024, 3, 1), "20240101", "x 5")


@pytest.mark.parametrize("anchor", ["2024-01-01", "2024011", "20240230", "", "abcdefgh", " 20240101 "])
def test_malformed_anchor(anchor: str) -> None:
    with pytest.raises(InvalidDateFormatError):
        next_date(date(2024, 3, 1), anchor, "d 1")


def test_now_may_carry_a_time_of_day() -> None:
    assert next_date(datetime(2024, 3, 1, 23, 59), "20240228", "d 1") == "20240302"


def test_same_inputs_give_same_output() -> None:
    now = date(2024, 5, 17)
    first = next_date(now, "20230131", "m -1,15 1,5,9")
    second = next_date(now, "20230131", "m -1,15 1,5,9")
    assert first == second == "20240531"


# daily


def test_daily_steps_past_now() -> None:
    assert next_date(date(2024, 1, 26), "20240113", "d 7") == "20240127"


def test_daily_equal_to_now_is_not_enough() -> None:
    assert next_date(date(2024, 1, 20), "20240113", "d 7") == "20240127"


def test_daily_future_anchor_still_advances_once() -> None:
    assert next_date(date(2024, 1, 1), "20240201", "d 3") == "20240204"


@pytest.mark.parametrize("interval", [1, 3, 7, 30, 400])
@pytest.mark.parametrize("anchor", ["19990101", "20231130", "20240229"])
def test_daily_result_is_after_now_and_on_the_interval(interval: int, anchor: str) -> None:
    now = date(2024, 6, 10)
    result = parse_date(next_date(now, anchor, f"d {interval}"))
    assert result > now
    assert (result - parse_date(anchor)).days % interval == 0
    assert result - timedelta(days=interval) <= now or result - timedelta(days=interval) == parse_date(anchor)


@pytest.mark.parametrize("rule", ["d 0", "d 401", "d -1", "d abc", "d 1_0", "d 1.5"])
def test_daily_interval_bounds(rule: str) -> None:
    with pytest.raises(InvalidIntervalError):
        next_date(date(2024, 1, 1), "20240101", rule)


def test_daily_past_the_calendar_end() -> None:
    with pytest.raises(NoRuleMatchError):
        next_date(date(9999, 12, 30), "99991230", "d 5")


# yearly


def test_yearly_adds_at_least_one_year() -> None:
    assert next_date(date(2023, 1, 1), "20230615", "y") == "20240615"


def test_yearly_from_distant_anchor() -> None:
    assert next_date(date(2024, 7, 1), "20010701", "y") == "20250701"


def test_yearly_leap_day_returns_to_feb_29_in_leap_years() -> None:
    assert next_date(date(2024, 1, 1), "20200229", "y") == "20240229"


def test_yearly_leap_day_moves_to_march_first_in_common_years() -> None:
    assert next_date(date(2024, 3, 1), "20200229", "y") == "20250301"


def test_yearly_leap_day_never_lands_on_feb_28() -> None:
    now = date(2020, 3, 1)
    while now < date(2033, 1, 1):
        result = parse_date(next_date(now, "20200229", "y"))
        assert (result.month, result.day) in {(2, 29), (3, 1)}
        assert result > now
        now += timedelta(days=37)


# weekly


def test_weekly_skips_today() -> None:
    # 2024-03-04 is a Monday
    assert next_date(date(2024, 3, 4), "20240101", "w 1") == "20240311"


def test_weekly_sunday_is_seven() -> None:
    assert next_date(date(2024, 3, 4), "20240101", "w 7") == "20240310"


def test_weekly_moves_past_future_anchor() -> None:
    # anchor is Wednesday 2024-03-20; the same weekday is not strictly after it
    assert next_date(date(2024, 3, 4), "20240320", "w 3") == "20240327"


def test_weekly_picks_earliest_weekday() -> None:
    assert next_date(date(2024, 3, 8), "20240101", "w 5,2,6") == "20240309"


@pytest.mark.parametrize("weekdays", [{1}, {2, 4}, {6, 7}, {1, 2, 3, 4, 5, 6, 7}])
@pytest.mark.parametrize("anchor", [date(2023, 12, 31), date(2024, 3, 6), date(2024, 4, 2)])
def test_weekly_properties(weekdays: set[int], anchor: date) -> None:
    now = date(2024, 3, 6)
    result = compute_next(now, anchor, WeeklyRule(frozenset(weekdays)))
    assert result > now
    assert result > anchor
    assert result.isoweekday() in weekdays
    assert result - timedelta(days=7) <= max(now, anchor)


@pytest.mark.parametrize("rule", ["w 0", "w 8", "w 1,x", "w 1,,2", "w -1"])
def test_weekly_rejects_bad_weekdays(rule: str) -> None:
    with pytest.raises(InvalidWeekdayError):
        next_date(date(2024, 3, 4), "20240101", rule)


def test_weekly_without_weekdays_has_no_match() -> None:
    with pytest.raises(NoRuleMatchError):
        next_weekly(date(2024, 3, 4), date(2024, 1, 1), frozenset())


# monthly


def test_monthly_last_day_in_leap_february() -> None:
    assert next_date(date(2024, 2, 15), "20240101", "m -1") == "20240229"


def test_monthly_second_to_last_day() -> None:
    assert next_date(date(2024, 2, 15), "20240101", "m -2") == "20240228"


def test_monthly_last_day_when_now_is_the_last_day() -> None:
    assert next_date(date(2024, 2, 29), "20240101", "m -1") == "20240331"


def test_monthly_earliest_of_several_days() -> None:
    assert next_date(date(2024, 1, 15), "20230101", "m 1,-1") == "20240131"


def test_monthly_restricted_months() -> None:
    assert next_date(date(2024, 1, 15), "20230101", "m 3 1,3,6") == "20240303"


def test_monthly_restricted_month_rolls_into_next_year() -> None:
    assert next_date(date(2024, 7, 1), "20240101", "m 10 1,6") == "20250110"


def test_monthly_skips_months_without_the_day() -> None:
    assert next_date(date(2024, 4, 1), "20240101", "m 31") == "20240531"


def test_monthly_feb_29_waits_for_a_leap_year() -> None:
    assert next_date(date(2023, 3, 1), "20230101", "m 29 2") == "20240229"


def test_monthly_respects_future_anchor() -> None:
    assert next_date(date(2024, 1, 15), "20400110", "m 5") == "20400205"


def test_monthly_contradictory_rule_has_no_match() -> None:
    with pytest.raises(NoRuleMatchError):
        next_date(date(2024, 1, 1), "20240101", "m 31 2")


def test_monthly_without_days_is_rejected() -> None:
    with pytest.raises(InvalidDayTokenError):
        next_monthly(date(2024, 1, 1), date(2024, 1, 1), frozenset(), frozenset())


@pytest.mark.parametrize("rule", ["m 0", "m 32", "m -3", "m 1,a", "m ,"])
def test_monthly_rejects_bad_days(rule: str) -> None:
    with pytest.raises(InvalidDayTokenError):
        next_date(date(2024, 1, 1), "20240101", rule)


@pytest.mark.parametrize("rule", ["m 1 0", "m 1 13", "m 1 1,x", "m 1 2 3"])
def test_monthly_rejects_bad_months(rule: str) -> None:
    with pytest.raises(InvalidMonthTokenError):
        next_date(date(2024, 1, 1), "20240101", rule)


@pytest.mark.parametrize("month", range(1, 13))
@pytest.mark.parametrize("year", [2023, 2024])
def test_monthly_negative_days_resolve_to_month_end(year: int, month: int) -> None:
    now = date(year, month, 1)
    last = calendar.monthrange(year, month)[1]

    result = compute_next(now, date(2000, 1, 1), MonthlyRule(frozenset({-1})))
    assert result == date(year, month, last)

    result = compute_next(now, date(2000, 1, 1), MonthlyRule(frozenset({-2})))
    assert result == date(year, month, last - 1)


def test_errors_share_a_base_class() -> None:
    for rule in ["", "x", "d 0", "w 9", "m 40", "m 1 40", "m 31 2"]:
        with pytest.raises(RecurrenceError):
            next_date(date(2024, 1, 1), "20240101", rule)


def test_format_round_trip_of_result() -> None:
    result = next_date(date(2024, 12, 31), "20241231", "d 1")
    assert format_date(parse_date(result)) == result == "20250101"
