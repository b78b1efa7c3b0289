"""
Weave Handling — Public API
=============================
"""

from weave.handling.handlers import (
    ErrorContext,
    ErrorHandler,
    FatalErrorHandler,
    LoggingErrorHandler,
)

__all__ = [
    "ErrorContext",
    "ErrorHandler",
    "FatalErrorHandler",
    "LoggingErrorHandler",
]
