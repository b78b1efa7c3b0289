"""
Weave History — Emission Log
==============================
Append-only record of every delivered event and its payload.

Rules:
- Records are immutable (frozen dataclass)
- add() only appends; nothing is ever mutated or removed
- No eviction: the log grows for the lifetime of the history
- Queries see the live log, including records added after the
  query was created
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from weave.history.query import HistoryQuery


@dataclass(frozen=True)
class EmissionRecord:
    """
    One delivered event.

    Fields:
        event: Event name.
        args:  Emitted payload, in emission order.
    """

    event: str
    args: Tuple[Any, ...]


class EventHistory:
    """
    Ordered log of emissions, queried newest-first.

    Usage:
        history = EventHistory()
        history.add("signup", {"email": "a@b.com"})

        email = (
            history.query()
            .from_event("signup")
            .using("[0].email")
            .get()
        )
    """

    def __init__(self):
        self._records: List[EmissionRecord] = []

    def add(self, event: str, *args: Any) -> "EventHistory":
        self._records.append(EmissionRecord(event=event, args=tuple(args)))
        return self

    def query(self) -> HistoryQuery:
        """Fresh query builder bound to the live log."""
        return HistoryQuery(self._records)

    @property
    def records(self) -> Tuple[EmissionRecord, ...]:
        return tuple(self._records)

    def latest(self, event: Optional[str] = None) -> Optional[EmissionRecord]:
        for record in reversed(self._records):
            if event is None or record.event == event:
                return record
        return None

    def has_occurred(self, event: str) -> bool:
        return self.latest(event) is not None

    def __len__(self) -> int:
        return len(self._records)
