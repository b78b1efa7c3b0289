"""
Weave Event Bus — Public API
==============================
The bus carries events. The engine decides what they mean.
"""

from weave.bus.base import Envelope, EventBus, Handler
from weave.bus.errors import EventBusError, InvalidCorrelation, InvalidEventName
from weave.bus.signals import SignalBus

__all__ = [
    "Envelope",
    "EventBus",
    "Handler",
    "SignalBus",
    "EventBusError",
    "InvalidCorrelation",
    "InvalidEventName",
]
