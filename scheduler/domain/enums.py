from __future__ import annotations

from enum import IntEnum, StrEnum


class RuleKind(StrEnum):
    DAILY = "d"
    YEARLY = "y"
    WEEKLY = "w"
    MONTHLY = "m"


class Weekday(IntEnum):
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7
