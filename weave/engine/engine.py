"""
Weave Engine — Orchestration Engine
=====================================
Holds creation and interaction rules, listens to the bus, and turns
each correlated event into registry changes and method calls.

Delivery behavior (event E, correlation C, payload P):
1. Append (E, P) to history
2. Creation phase: every creation rule routed to (E, C), in
   registration order: gate, resolve arguments, register factory,
   build, then-callback, follow-up emit
3. Interaction phase: every interaction rule routed to (E, C), in
   registration order: gate, resolve target and arguments, invoke,
   then-callback on completion, follow-up emit, release the target
4. Each rule is its own failure boundary: errors go to the rule's
   handler (or the engine default) and siblings keep running

Rules:
- One bus subscription per distinct event name
- Rule lists are append-only; once-rules are retired, never removed
- Follow-up emits re-enter delivery synchronously
- then-callbacks are queued and run once the outermost delivery has
  finished (or via call_soon when an asyncio loop is running)
- A once-rule retired during a re-entrant delivery is skipped by every
  delivery still in progress
- Re-entrant depth is bounded by settings.max_chain_depth
- Exceptions raised by an error handler are NOT caught
"""

from __future__ import annotations

import logging
from collections import deque
from functools import partial
from typing import Any, Callable, Deque, List, Optional, Set, Tuple

from weave.bus.base import Envelope, EventBus
from weave.config.settings import EngineSettings, ErrorPolicy
from weave.diagnostics.loggers import Diagnostics
from weave.diagnostics.records import LogType, RuleLog, RuleLogger
from weave.engine.builders import RuleGateway
from weave.engine.completion import defer, settle, when_done
from weave.engine.resolution import ResolvedTarget, resolve_arguments, resolve_target
from weave.engine.rules import CreationRule, InteractionRule, condition_holds
from weave.errors import (
    ChainDepthExceeded,
    MethodNotFound,
    RuleExecutionError,
    UnresolvedTarget,
    WeaveError,
    describe_token,
)
from weave.handling.handlers import (
    ErrorContext,
    ErrorHandler,
    FatalErrorHandler,
    LoggingErrorHandler,
)
from weave.history.log import EventHistory
from weave.registry.container import InstanceRegistry

logger = logging.getLogger("weave.engine")


def _default_handler(settings: EngineSettings) -> ErrorHandler:
    if settings.error_policy == ErrorPolicy.LOG:
        return LoggingErrorHandler()
    return FatalErrorHandler(exit_gracefully=settings.exit_gracefully)


class OrchestrationEngine:
    """
    Declarative rule engine over an event bus.

    Usage:
        engine = OrchestrationEngine(SignalBus())

        engine.upon("signup") \\
            .build(Account) \\
            .using(PathResolver().index(0).field("email")) \\
            .correlation("req-1") \\
            .then()

        engine.upon("signup") \\
            .use(Account) \\
            .call("activate") \\
            .correlation("req-1") \\
            .then()

        engine.emit("signup", "req-1", {"email": "a@b.com"})
    """

    def __init__(
        self,
        bus: EventBus,
        registry: Optional[InstanceRegistry] = None,
        history: Optional[EventHistory] = None,
        error_handler: Optional[ErrorHandler] = None,
        rule_logger: Optional[RuleLogger] = None,
        settings: Optional[EngineSettings] = None,
    ):
        self._settings = settings if settings is not None else EngineSettings()
        self._bus = bus
        self._registry = registry if registry is not None else InstanceRegistry()
        self._history = history if history is not None else EventHistory()
        self._error_handler = error_handler or _default_handler(self._settings)
        self._diagnostics = Diagnostics(
            self._settings.log_mode, rule_logger, self._settings.log_types
        )

        self._contracts: List[CreationRule] = []
        self._interactions: List[InteractionRule] = []
        self._subscribed: Set[str] = set()
        self._retired: Set[int] = set()
        self._depth = 0
        self._pending: Deque[Callable[[], Any]] = deque()

    # ══════════════════════════════════════════════════════════
    # INTROSPECTION
    # ══════════════════════════════════════════════════════════

    @property
    def bus(self) -> EventBus:
        return self._bus

    @property
    def registry(self) -> InstanceRegistry:
        return self._registry

    @property
    def history(self) -> EventHistory:
        return self._history

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    @property
    def contracts(self) -> Tuple[CreationRule, ...]:
        return tuple(self._contracts)

    @property
    def interactions(self) -> Tuple[InteractionRule, ...]:
        return tuple(self._interactions)

    # ══════════════════════════════════════════════════════════
    # RULE REGISTRATION
    # ══════════════════════════════════════════════════════════

    def upon(self, event: str) -> RuleGateway:
        """Start declaring a rule triggered by event."""
        return RuleGateway(self, event)

    def add_contract(self, rule: CreationRule) -> "OrchestrationEngine":
        if not isinstance(rule, CreationRule):
            raise TypeError(
                f"Expected CreationRule, got {type(rule).__name__}."
            )

        self._contracts.append(rule)
        self._subscribe(rule.trigger)
        logger.debug(
            f"Creation rule added: {rule.trigger} ({rule.correlation}) "
            f"→ {describe_token(rule.token)}"
        )
        return self

    def add_interaction(self, rule: InteractionRule) -> "OrchestrationEngine":
        if not isinstance(rule, InteractionRule):
            raise TypeError(
                f"Expected InteractionRule, got {type(rule).__name__}."
            )

        self._interactions.append(rule)
        if rule.trigger is not None:
            self._subscribe(rule.trigger)
        logger.debug(
            f"Interaction rule added: {rule.trigger} ({rule.correlation}) "
            f"→ {rule.method}"
        )
        return self

    def track(self, *events: str) -> "OrchestrationEngine":
        """Record these events in history even if no rule listens to them."""
        for event in events:
            self._subscribe(event)
        return self

    def emit(self, event: str, correlation: str, *args: Any) -> None:
        self._bus.emit(event, correlation, *args)

    def _subscribe(self, event: str) -> None:
        if event in self._subscribed:
            return
        self._bus.on(event, partial(self._deliver, event))
        self._subscribed.add(event)

    # ══════════════════════════════════════════════════════════
    # DELIVERY
    # ══════════════════════════════════════════════════════════

    def _deliver(self, event: str, envelope: Envelope) -> None:
        limit = self._settings.max_chain_depth
        if self._depth >= limit:
            raise ChainDepthExceeded(event, self._depth + 1, limit)

        self._depth += 1
        try:
            payload = tuple(envelope.payload)
            correlation = envelope.correlation
            self._history.add(event, *payload)

            outcomes = []
            for rule in self._routed(self._contracts, event, correlation):
                outcomes.append(self._create(rule, event, payload))
            for rule in self._routed(self._interactions, event, correlation):
                outcomes.append(self._interact(rule, event, payload))

            logger.debug(
                f"Delivery complete: {event} ({correlation}): "
                f"{outcomes.count(True)} fired, "
                f"{outcomes.count(False)} failed"
            )
        finally:
            self._depth -= 1
            if self._depth == 0:
                self._drain()

    def _routed(self, rules: List[Any], event: str, correlation: str) -> List[Any]:
        return [
            rule for rule in rules
            if rule.trigger == event
            and rule.correlation == correlation
            and id(rule) not in self._retired
        ]

    def _admits(self, rule: Any, payload: Tuple[Any, ...], log_type: LogType) -> bool:
        if id(rule) in self._retired:
            return False

        if not condition_holds(rule, payload):
            self._diagnostics.log(RuleLog(
                log_type,
                f"Condition not met for {_label(rule)}: "
                f"expected {rule.equals!r} at '{rule.when.notation}'",
            ))
            return False

        for required in rule.requirements:
            if not self._history.has_occurred(required):
                self._diagnostics.log(RuleLog(
                    log_type,
                    f"Requirement not met for {_label(rule)}: "
                    f"'{required}' has not occurred",
                ))
                return False

        if rule.once:
            self._retired.add(id(rule))
        return True

    # ══════════════════════════════════════════════════════════
    # CREATION
    # ══════════════════════════════════════════════════════════

    def _create(
        self, rule: CreationRule, event: str, payload: Tuple[Any, ...]
    ) -> Optional[bool]:
        args: Tuple[Any, ...] = payload
        try:
            if not self._admits(rule, payload, LogType.CREATION):
                return None

            args = resolve_arguments(rule.using, payload)
            scope = rule.scope if rule.scope is not None else self._registry
            name = describe_token(rule.token)

            self._diagnostics.creation(
                f"Creating '{name}' with arguments {list(args)!r}"
            )
            scope.register(rule.token, partial(rule.build, *args), rule.options)
            instance = rule.build(*args)
            self._diagnostics.creation(f"'{name}' built ({rule.lifecycle.value})")

            if rule.then is not None:
                self._diagnostics.interaction(
                    f"Scheduling 'then' callback for '{name}'"
                )
                self._defer(self._run_then, rule, instance, event, args)

            if rule.emit is not None:
                self._diagnostics.interaction(
                    f"Emitting '{rule.emit}' ({rule.correlation}) for '{name}'"
                )
                self._bus.emit(rule.emit, rule.correlation, instance)

            return True
        except Exception as exc:
            self._fail(rule, exc, event, args)
            return False

    # ══════════════════════════════════════════════════════════
    # INTERACTION
    # ══════════════════════════════════════════════════════════

    def _interact(
        self, rule: InteractionRule, event: str, payload: Tuple[Any, ...]
    ) -> Optional[bool]:
        args: Tuple[Any, ...] = payload
        try:
            if not self._admits(rule, payload, LogType.INTERACTION):
                return None

            target = resolve_target(rule.target, self._registry, self._history)
            if target.instance is None:
                raise UnresolvedTarget(rule.target)

            args = resolve_arguments(rule.args, payload)
            method = getattr(target.instance, rule.method, None)
            if not callable(method):
                raise MethodNotFound(rule.method, target.instance)

            kind = type(target.instance).__name__
            self._diagnostics.interaction(
                f"Calling '{rule.method}' on '{kind}' with arguments {list(args)!r}"
            )
            completion = settle(method(*args))
            when_done(completion, partial(self._complete, rule, event, args))

            if rule.emit is not None:
                self._diagnostics.interaction(
                    f"Emitting '{rule.emit}' ({rule.correlation}) for '{kind}'"
                )
                self._bus.emit(rule.emit, rule.correlation, completion)

            self._release(target)
            return True
        except Exception as exc:
            self._fail(rule, exc, event, args)
            return False

    def _complete(
        self, rule: InteractionRule, event: str, args: Tuple[Any, ...], completion
    ) -> None:
        if completion.cancelled():
            self._diagnostics.interaction(f"'{rule.method}' was cancelled")
            return

        error = completion.exception()
        if error is not None:
            self._fail(rule, error, event, args)
            return

        if rule.then is not None:
            self._defer(self._run_then, rule, completion.result(), event, args)

    def _release(self, target: ResolvedTarget) -> None:
        if target.owner is None:
            return

        options = target.owner.get_options(target.token)
        if options is not None and not options.destroy_on_interaction:
            return

        target.owner.destroy(target.token)
        self._diagnostics.destruction(
            f"'{describe_token(target.token)}' destroyed after interaction"
        )

    # ══════════════════════════════════════════════════════════
    # CALLBACKS AND FAILURES
    # ══════════════════════════════════════════════════════════

    def _defer(self, callback: Callable[..., Any], *args: Any) -> None:
        defer(callback, *args, pending=self._pending)
        if self._depth == 0:
            self._drain()

    def _drain(self) -> None:
        while self._pending:
            self._pending.popleft()()

    def _run_then(self, rule: Any, value: Any, event: str, args: Tuple[Any, ...]) -> None:
        try:
            outcome = settle(rule.then(value))
        except Exception as exc:
            self._fail(rule, exc, event, args)
            return
        when_done(outcome, partial(self._check_outcome, rule, event, args))

    def _check_outcome(self, rule: Any, event: str, args: Tuple[Any, ...], outcome) -> None:
        if outcome.cancelled():
            return
        error = outcome.exception()
        if error is not None:
            self._fail(rule, error, event, args)

    def _fail(
        self, rule: Any, error: BaseException, event: str, args: Tuple[Any, ...]
    ) -> None:
        if not isinstance(error, WeaveError):
            wrapped = RuleExecutionError(
                f"{_label(rule)} failed on '{event}': "
                f"{type(error).__name__}: {error}",
                cause=error,
            )
            wrapped.__cause__ = error
            error = wrapped

        self._diagnostics.error(str(error))
        handler = rule.error_handler or self._error_handler
        handler.handle(
            error, ErrorContext(rule=rule, event=event, event_args=tuple(args))
        )


def _label(rule: Any) -> str:
    if isinstance(rule, CreationRule):
        return f"creation of '{describe_token(rule.token)}'"
    return f"interaction '{rule.method}'"
