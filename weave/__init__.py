"""
Weave — Declarative Event Orchestration
=========================================
Declare how components come into existence and interact when events
occur, instead of wiring them by hand.

    engine = OrchestrationEngine(SignalBus())
    engine.upon("signup").build(Account).using(
        PathResolver().index(0).field("email")
    ).correlation("req-1").then()

    engine.emit("signup", "req-1", {"email": "a@b.com"})
"""

from weave.bus import Envelope, EventBus, SignalBus
from weave.config import EngineSettings, ErrorPolicy
from weave.diagnostics import Diagnostics, LogMode, LogType, RuleLog, StdlibRuleLogger
from weave.engine import CreationRule, InteractionRule, OrchestrationEngine
from weave.errors import (
    ChainDepthExceeded,
    ConfigurationError,
    MethodNotFound,
    NotRegistered,
    RuleExecutionError,
    UnresolvedTarget,
    WeaveError,
)
from weave.handling import ErrorContext, FatalErrorHandler, LoggingErrorHandler
from weave.history import EmissionRecord, EventHistory, HistoryQuery
from weave.lazy import Deferred, LazyHistoryValue, LazyReference
from weave.primitives import MISSING, PathResolver
from weave.registry import InstanceRegistry, Lifecycle, RegistrationOptions
from weave.time import FixedClock, SystemClock

__all__ = [
    # ── Engine ────────────────────────────────────────────────
    "OrchestrationEngine",
    "CreationRule",
    "InteractionRule",
    # ── Transport ─────────────────────────────────────────────
    "EventBus",
    "SignalBus",
    "Envelope",
    # ── Data ──────────────────────────────────────────────────
    "EventHistory",
    "EmissionRecord",
    "HistoryQuery",
    "PathResolver",
    "MISSING",
    # ── Instances ─────────────────────────────────────────────
    "InstanceRegistry",
    "Lifecycle",
    "RegistrationOptions",
    "Deferred",
    "LazyReference",
    "LazyHistoryValue",
    # ── Errors ────────────────────────────────────────────────
    "WeaveError",
    "ConfigurationError",
    "NotRegistered",
    "UnresolvedTarget",
    "MethodNotFound",
    "RuleExecutionError",
    "ChainDepthExceeded",
    "ErrorContext",
    "FatalErrorHandler",
    "LoggingErrorHandler",
    # ── Ambient ───────────────────────────────────────────────
    "EngineSettings",
    "ErrorPolicy",
    "Diagnostics",
    "LogMode",
    "LogType",
    "RuleLog",
    "StdlibRuleLogger",
    "FixedClock",
    "SystemClock",
]
