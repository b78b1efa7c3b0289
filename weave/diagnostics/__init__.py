"""
Weave Diagnostics — Public API
================================
Observational only. Nothing here changes what the engine does.
"""

from weave.diagnostics.loggers import DEFAULT_LOG_TYPES, Diagnostics, StdlibRuleLogger
from weave.diagnostics.records import LogMode, LogType, RuleLog, RuleLogger

__all__ = [
    "DEFAULT_LOG_TYPES",
    "Diagnostics",
    "StdlibRuleLogger",
    "LogMode",
    "LogType",
    "RuleLog",
    "RuleLogger",
]
