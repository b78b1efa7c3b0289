"""
Weave Config — Engine Settings
================================
Everything an engine needs to know that is not a rule.

Values come from code (EngineSettings(...)) or from the environment
(EngineSettings.from_env()). Invalid values fail at construction.

Environment:
    WEAVE_LOG_MODE          off | debug | custom
    WEAVE_LOG_TYPES         comma list of creation,destruction,interaction,error
    WEAVE_MAX_CHAIN_DEPTH   positive int
    WEAVE_ERROR_POLICY      fatal | log
    WEAVE_EXIT_GRACEFULLY   true | false
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Mapping, Optional

from weave.diagnostics.loggers import DEFAULT_LOG_TYPES
from weave.diagnostics.records import LogMode, LogType
from weave.errors import ConfigurationError

DEFAULT_MAX_CHAIN_DEPTH = 200

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


class ErrorPolicy(str, Enum):
    """
    FATAL: unhandled rule failures terminate the process
    LOG:   unhandled rule failures are logged and processing continues
    """
    FATAL = "fatal"
    LOG = "log"


@dataclass(frozen=True)
class EngineSettings:
    """
    Fields:
        log_mode:        Diagnostics mode.
        log_types:       Types forwarded in CUSTOM mode.
        max_chain_depth: Deepest allowed re-entrant delivery.
        error_policy:    Default handler for rules without their own.
        exit_gracefully: Exit code 0 instead of 1 under FATAL.
    """

    log_mode: LogMode = LogMode.CUSTOM
    log_types: FrozenSet[LogType] = DEFAULT_LOG_TYPES
    max_chain_depth: int = DEFAULT_MAX_CHAIN_DEPTH
    error_policy: ErrorPolicy = ErrorPolicy.FATAL
    exit_gracefully: bool = False

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "log_mode", LogMode(self.log_mode))
            object.__setattr__(
                self, "log_types", frozenset(LogType(t) for t in self.log_types)
            )
            object.__setattr__(
                self, "error_policy", ErrorPolicy(self.error_policy)
            )
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

        if (
            not isinstance(self.max_chain_depth, int)
            or isinstance(self.max_chain_depth, bool)
            or self.max_chain_depth < 1
        ):
            raise ConfigurationError(
                f"max_chain_depth must be a positive int, "
                f"got {self.max_chain_depth!r}."
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineSettings":
        env = os.environ if environ is None else environ
        kwargs = {}

        if "WEAVE_LOG_MODE" in env:
            kwargs["log_mode"] = env["WEAVE_LOG_MODE"].strip().lower()

        if "WEAVE_LOG_TYPES" in env:
            kwargs["log_types"] = frozenset(
                part.strip().lower()
                for part in env["WEAVE_LOG_TYPES"].split(",")
                if part.strip()
            )

        if "WEAVE_MAX_CHAIN_DEPTH" in env:
            raw = env["WEAVE_MAX_CHAIN_DEPTH"].strip()
            try:
                kwargs["max_chain_depth"] = int(raw)
            except ValueError as exc:
                raise ConfigurationError(
                    f"WEAVE_MAX_CHAIN_DEPTH must be an int, got {raw!r}."
                ) from exc

        if "WEAVE_ERROR_POLICY" in env:
            kwargs["error_policy"] = env["WEAVE_ERROR_POLICY"].strip().lower()

        if "WEAVE_EXIT_GRACEFULLY" in env:
            kwargs["exit_gracefully"] = _parse_bool(
                "WEAVE_EXIT_GRACEFULLY", env["WEAVE_EXIT_GRACEFULLY"]
            )

        return cls(**kwargs)


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}.")
