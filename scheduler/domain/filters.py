from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from .dates import parse_search_date

DEFAULT_LIMIT = 50


@dataclass(frozen=True)
class TaskFilters:
    search: str | None = None
    limit: int = DEFAULT_LIMIT

    @property
    def due_on(self) -> Optional[date]:
        if not self.search:
            return None
        return parse_search_date(self.search)

    @property
    def text(self) -> str | None:
        if not self.search or self.due_on is not None:
            return None
        return self.search
