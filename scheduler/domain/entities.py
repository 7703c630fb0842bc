from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TaskEntity:
    id: int | None
    date: str
    title: str
    comment: str = ""
    repeat: str = ""

    @property
    def is_recurring(self) -> bool:
        return bool(self.repeat.strip())
