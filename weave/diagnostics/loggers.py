"""
Weave Diagnostics — Sinks and Filtering
=========================================
StdlibRuleLogger forwards rule records to the standard logging tree.
Diagnostics sits in front of any sink and applies the log mode.
"""

from __future__ import annotations

import logging
from typing import FrozenSet, Iterable, Optional

from weave.diagnostics.records import LogMode, LogType, RuleLog, RuleLogger

DEFAULT_LOG_TYPES: FrozenSet[LogType] = frozenset({
    LogType.CREATION,
    LogType.INTERACTION,
    LogType.ERROR,
})

_LEVELS = {
    LogType.CREATION: logging.INFO,
    LogType.DESTRUCTION: logging.INFO,
    LogType.INTERACTION: logging.INFO,
    LogType.ERROR: logging.ERROR,
}


class StdlibRuleLogger:
    """Writes rule records to logging.getLogger("weave.rules")."""

    def __init__(self, name: str = "weave.rules"):
        self._logger = logging.getLogger(name)

    def log(self, record: RuleLog) -> None:
        self._logger.log(
            _LEVELS.get(record.type, logging.INFO),
            f"[{record.type.value}] {record.message}",
        )


class Diagnostics:
    """
    Mode-aware front for a RuleLogger.

    Usage:
        diagnostics = Diagnostics(LogMode.CUSTOM, StdlibRuleLogger())
        diagnostics.creation("Built Account")
        diagnostics.destruction("Destroyed Account")   # filtered by default
    """

    def __init__(
        self,
        mode: LogMode = LogMode.CUSTOM,
        sink: Optional[RuleLogger] = None,
        log_types: Iterable[LogType] = DEFAULT_LOG_TYPES,
    ):
        self._mode = LogMode(mode)
        self._sink = sink or StdlibRuleLogger()
        self._log_types = frozenset(LogType(t) for t in log_types)

    def can_log(self, log_type: LogType) -> bool:
        if self._mode == LogMode.OFF:
            return False
        if self._mode == LogMode.DEBUG:
            return True
        return log_type in self._log_types

    def log(self, record: RuleLog) -> None:
        if self.can_log(record.type):
            self._sink.log(record)

    def creation(self, message: str) -> None:
        self.log(RuleLog(LogType.CREATION, message))

    def destruction(self, message: str) -> None:
        self.log(RuleLog(LogType.DESTRUCTION, message))

    def interaction(self, message: str) -> None:
        self.log(RuleLog(LogType.INTERACTION, message))

    def error(self, message: str) -> None:
        self.log(RuleLog(LogType.ERROR, message))
