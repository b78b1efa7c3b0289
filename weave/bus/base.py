"""
Weave Event Bus — Transport Contract
======================================
Any pub/sub primitive the engine can run on.

Contract:
- on(event, handler):    persistent subscription
- once(event, handler):  removed after its first delivery
- emit(event, correlation, *args): deliver an Envelope to every
  handler of `event`, synchronously, in registration order

Handlers receive an Envelope. Implementations must preserve
per-event handler-registration order.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Tuple

from weave.bus.errors import InvalidCorrelation, InvalidEventName


@dataclass(frozen=True)
class Envelope:
    """
    What a handler receives for one emission.

    Fields:
        payload:     Emitted arguments, in order.
        correlation: Causal-chain id the emission belongs to.
        timestamp:   UTC time of emission.
    """

    payload: Tuple[Any, ...]
    correlation: str
    timestamp: datetime


Handler = Callable[[Envelope], Any]


def validate_event_name(event: Any) -> None:
    if not isinstance(event, str) or not event.strip():
        raise InvalidEventName(event)


def validate_correlation(correlation: Any) -> None:
    if not isinstance(correlation, str):
        raise InvalidCorrelation(correlation)


class EventBus(ABC):
    """Transport the engine subscribes to and emits through."""

    @abstractmethod
    def on(self, event: str, handler: Handler) -> None:
        ...  # pragma: no cover

    @abstractmethod
    def once(self, event: str, handler: Handler) -> None:
        ...  # pragma: no cover

    @abstractmethod
    def emit(self, event: str, correlation: str, *args: Any) -> None:
        ...  # pragma: no cover
