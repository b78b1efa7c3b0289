"""
Weave History — Query Builder
===============================
Chainable, state-isolated search over the emission log.

Search order is newest-first. Each candidate record's full payload is
handed to the resolver; the first defined result wins. arg(n) narrows
each record to its n-th argument first, so the resolver starts there.

A query must state what it extracts: get() without using() or arg() is
a configuration error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Sequence

from weave.errors import ConfigurationError
from weave.primitives.path import MISSING, PathResolver, as_resolver, strictly_equal

if TYPE_CHECKING:
    from weave.history.log import EmissionRecord


class HistoryQuery:
    def __init__(self, records: Sequence["EmissionRecord"]):
        self._records = records
        self._event: Optional[str] = None
        self._resolver: Optional[PathResolver] = None
        self._arg: Optional[int] = None
        self._expected: Any = MISSING

    def from_event(self, event: str) -> "HistoryQuery":
        """Only consider records of this event."""
        self._event = event
        return self

    def using(self, path: Any) -> "HistoryQuery":
        """What to extract from each record's payload (resolver or notation)."""
        self._resolver = as_resolver(path)
        return self

    def arg(self, position: int) -> "HistoryQuery":
        """Search only the argument at this position of each record."""
        if not isinstance(position, int) or isinstance(position, bool):
            raise TypeError(f"Argument position must be an int, got {position!r}.")
        self._arg = position
        return self

    def where(self, value: Any) -> "HistoryQuery":
        """Only accept extracted values strictly equal to value (no 1 == True)."""
        self._expected = value
        return self

    def get(self, default: Any = None) -> Any:
        """
        Run the query.

        Returns the first defined extraction, newest record first,
        or default if nothing matches.

        Raises:
            ConfigurationError: If neither using() nor arg() was called.
        """
        if self._resolver is None and self._arg is None:
            raise ConfigurationError(
                "History query has no resolver. "
                "Call using() or arg() to state what should be extracted."
            )
        resolver = self._resolver if self._resolver is not None else PathResolver()

        for record in reversed(self._records):
            if self._event is not None and record.event != self._event:
                continue

            data = record.args
            if self._arg is not None:
                data = PathResolver().index(self._arg).get_data(data, MISSING)

            value = resolver.get_data(data, MISSING)
            if value is MISSING:
                continue
            if self._expected is not MISSING and not strictly_equal(
                value, self._expected
            ):
                continue
            return value

        return default

    def __repr__(self) -> str:
        return (
            f"HistoryQuery(event={self._event!r}, arg={self._arg!r}, "
            f"using={self._resolver!r})"
        )
