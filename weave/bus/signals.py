"""
Weave Event Bus — In-Process Signal Bus
=========================================
Default transport: one django.dispatch.Signal per event name.

Dispatch behavior:
1. Look up the signal for the event name
2. Wrap the payload in an Envelope stamped by the bus clock
3. Call receivers sequentially, in connection order
4. Handler exceptions propagate to the emitter

Rules:
- Receivers are held by strong reference (no silent garbage collection
  of lambda or bound-method handlers)
- once() receivers disconnect themselves before running
- Emitting an event nobody listens to is not an error
- Signal table is guarded by a lock; delivery itself is not

Single process only. Events never leave the interpreter.
"""

from __future__ import annotations

import itertools
import logging
from threading import Lock
from typing import Any, Dict, Optional

from django.dispatch import Signal

from weave.bus.base import (
    Envelope,
    EventBus,
    Handler,
    validate_correlation,
    validate_event_name,
)
from weave.time.clock import Clock, SystemClock

logger = logging.getLogger("weave.bus")


class SignalBus(EventBus):
    """
    In-memory event bus built on Django's signal dispatcher.

    Usage:
        bus = SignalBus()
        bus.on("signup", lambda envelope: print(envelope.payload))
        bus.emit("signup", "req-1", {"email": "a@b.com"})
    """

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or SystemClock()
        self._signals: Dict[str, Signal] = {}
        self._uids = itertools.count(1)
        self._lock = Lock()

    def _signal_for(self, event: str) -> Signal:
        with self._lock:
            if event not in self._signals:
                self._signals[event] = Signal()
            return self._signals[event]

    def _next_uid(self, event: str) -> str:
        return f"weave:{event}:{next(self._uids)}"

    # ══════════════════════════════════════════════════════════
    # SUBSCRIPTION
    # ══════════════════════════════════════════════════════════

    def on(self, event: str, handler: Handler) -> None:
        validate_event_name(event)
        if not callable(handler):
            raise TypeError(f"Handler must be callable, got {type(handler)}.")

        def receiver(sender, envelope, **kwargs):
            return handler(envelope)

        self._signal_for(event).connect(
            receiver, weak=False, dispatch_uid=self._next_uid(event)
        )
        logger.debug(f"Subscribed {_name(handler)} → {event}")

    def once(self, event: str, handler: Handler) -> None:
        validate_event_name(event)
        if not callable(handler):
            raise TypeError(f"Handler must be callable, got {type(handler)}.")

        signal = self._signal_for(event)
        uid = self._next_uid(event)

        def receiver(sender, envelope, **kwargs):
            signal.disconnect(dispatch_uid=uid)
            return handler(envelope)

        signal.connect(receiver, weak=False, dispatch_uid=uid)
        logger.debug(f"Subscribed once {_name(handler)} → {event}")

    # ══════════════════════════════════════════════════════════
    # EMISSION
    # ══════════════════════════════════════════════════════════

    def emit(self, event: str, correlation: str, *args: Any) -> None:
        validate_event_name(event)
        validate_correlation(correlation)

        with self._lock:
            signal = self._signals.get(event)

        if signal is None or not signal.receivers:
            logger.debug(f"No subscribers for '{event}' ({correlation})")
            return

        envelope = Envelope(
            payload=tuple(args),
            correlation=correlation,
            timestamp=self._clock.now_utc(),
        )
        signal.send(sender=self, envelope=envelope)

    def has_subscribers(self, event: str) -> bool:
        with self._lock:
            signal = self._signals.get(event)
        return signal is not None and bool(signal.receivers)

    def subscriber_count(self, event: str) -> int:
        with self._lock:
            signal = self._signals.get(event)
        return len(signal.receivers) if signal is not None else 0


def _name(handler: Any) -> str:
    return getattr(handler, "__qualname__", str(handler))
