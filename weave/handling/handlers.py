"""
Weave Handling — Error Handlers
=================================
Where a failing rule's error ends up.

FatalErrorHandler    → log, then terminate the process (default)
LoggingErrorHandler  → log and continue

A handler may abort the current delivery by raising; the engine does
not catch exceptions raised from handle().
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Any, Optional, Protocol, Tuple

logger = logging.getLogger("weave.handling")


@dataclass(frozen=True)
class ErrorContext:
    """
    Fields:
        rule:       The creation or interaction rule that failed.
        event:      Event being delivered when it failed.
        event_args: Resolved arguments when available, else the payload.
    """

    rule: Any
    event: Optional[str]
    event_args: Tuple[Any, ...] = ()


class ErrorHandler(Protocol):
    def handle(self, error: BaseException, context: ErrorContext) -> None:
        ...  # pragma: no cover


def _describe(error: BaseException, context: ErrorContext) -> str:
    return (
        f"Rule failed for event '{context.event}': "
        f"{type(error).__name__}: {error}"
    )


class FatalErrorHandler:
    """Log the failure with traceback and exit (code 1, or 0 if graceful)."""

    def __init__(self, exit_gracefully: bool = False):
        self._exit_code = 0 if exit_gracefully else 1

    def handle(self, error: BaseException, context: ErrorContext) -> None:
        logger.critical(
            _describe(error, context),
            exc_info=(type(error), error, error.__traceback__),
        )
        sys.exit(self._exit_code)


class LoggingErrorHandler:
    """Log the failure with traceback and keep going."""

    def __init__(self, name: str = "weave.handling"):
        self._logger = logging.getLogger(name)

    def handle(self, error: BaseException, context: ErrorContext) -> None:
        self._logger.error(
            _describe(error, context),
            exc_info=(type(error), error, error.__traceback__),
        )
