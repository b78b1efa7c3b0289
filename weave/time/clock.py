"""
Weave Time — Envelope Clock
=============================
Source of the timestamp stamped on every bus Envelope.

SignalBus reads its clock once per emit(). Pass a FixedClock to pin
envelope timestamps in tests; SystemClock is the default.

Rules:
- Timestamps are always timezone-aware UTC
- FixedClock only moves when advance() is called
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    def now_utc(self) -> datetime:
        ...  # pragma: no cover


class SystemClock:
    """Wall-clock UTC."""

    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Clock frozen at a chosen instant.

    Usage:
        clock = FixedClock(datetime(2025, 1, 1, tzinfo=timezone.utc))
        bus = SignalBus(clock=clock)
        bus.emit("tick", "c")     # envelope.timestamp == 2025-01-01
        clock.advance(30)
        bus.emit("tick", "c")     # 30 seconds later
    """

    def __init__(self, instant: datetime) -> None:
        if instant.tzinfo is None:
            raise ValueError(
                f"FixedClock needs an aware datetime, got naive {instant!r}."
            )
        self._instant = instant

    def now_utc(self) -> datetime:
        return self._instant

    def advance(self, seconds: float) -> None:
        self._instant += timedelta(seconds=seconds)
