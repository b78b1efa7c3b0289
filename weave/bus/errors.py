"""
Weave Event Bus — Errors
==========================
Error types for the transport layer.
Kept apart from engine errors: the bus routes, it does not decide.
"""

from weave.errors import WeaveError


class EventBusError(WeaveError):
    """Base error for event bus operations."""
    pass


class InvalidEventName(EventBusError):
    """Event name is empty or not a string."""

    def __init__(self, event):
        self.event = event
        super().__init__(
            f"Event name must be a non-empty string, got {event!r}."
        )


class InvalidCorrelation(EventBusError):
    """Correlation id is missing or not a string."""

    def __init__(self, correlation):
        self.correlation = correlation
        super().__init__(
            f"Correlation id must be a string, got {correlation!r}."
        )
