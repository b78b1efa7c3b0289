"""
Weave Diagnostics — Rule Log Records
======================================
Typed, purely observational records of what the engine did.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class LogType(str, Enum):
    CREATION = "creation"
    DESTRUCTION = "destruction"
    INTERACTION = "interaction"
    ERROR = "error"


class LogMode(str, Enum):
    """
    OFF:    nothing is forwarded
    DEBUG:  every record is forwarded
    CUSTOM: only the configured log types are forwarded
    """
    OFF = "off"
    DEBUG = "debug"
    CUSTOM = "custom"


@dataclass(frozen=True)
class RuleLog:
    type: LogType
    message: str


class RuleLogger(Protocol):
    """Sink for rule log records."""

    def log(self, record: RuleLog) -> None:
        ...  # pragma: no cover
