"""
Weave Engine — Rule Declarations
==================================
Frozen descriptions of what to build or invoke when an event occurs.

CreationRule     → build an instance and register its factory
InteractionRule  → call a method on an existing instance

Rules:
- Every rule names a correlation id; routing key is (event, correlation)
- Creation rules always have a trigger; interaction triggers are optional
- `when` paths are normalised to PathResolver at construction
- Argument lists and requirements are stored as tuples
- Rules are immutable after creation and compared by identity

This module ONLY declares structure. Evaluation is in engine.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Hashable, Optional, Tuple

from weave.errors import ConfigurationError
from weave.primitives.path import MISSING, PathResolver, as_resolver, strictly_equal
from weave.registry.container import InstanceRegistry
from weave.registry.options import Lifecycle, RegistrationOptions


# ══════════════════════════════════════════════════════════════
# VALIDATION HELPERS (used during rule construction only)
# ══════════════════════════════════════════════════════════════

def _require_event(name: str, value: Any) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(
            f"{name} must be a non-empty event name, got {value!r}."
        )


def _require_correlation(value: Any) -> None:
    if not isinstance(value, str) or not value:
        raise ConfigurationError(
            f"correlation must be a non-empty string, got {value!r}."
        )


def _optional_callable(name: str, value: Any) -> None:
    if value is not None and not callable(value):
        raise ConfigurationError(f"{name} must be callable, got {value!r}.")


def _normalise_common(rule: Any) -> None:
    if rule.emit is not None:
        _require_event("emit", rule.emit)

    requirements = tuple(rule.requirements or ())
    for event in requirements:
        _require_event("requirement", event)
    object.__setattr__(rule, "requirements", requirements)

    if rule.when is not None:
        try:
            object.__setattr__(rule, "when", as_resolver(rule.when))
        except TypeError as exc:
            raise ConfigurationError(str(exc)) from exc

    if rule.error_handler is not None and not callable(
        getattr(rule.error_handler, "handle", None)
    ):
        raise ConfigurationError("error_handler must provide handle().")

    _optional_callable("then", rule.then)


# ══════════════════════════════════════════════════════════════
# CREATION RULE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True, eq=False)
class CreationRule:
    """
    When `trigger` fires under `correlation`, build `build(*using)`.

    Fields:
        trigger:                Event that fires the rule.
        correlation:            Causal-chain id the rule listens to.
        build:                  Callable producing the instance.
        token:                  Registry key (defaults to `build`).
        using:                  Constructor arguments; literals, PathResolver
                                (read from the payload) or Deferred.
        scope:                  Registry receiving the factory (None = root).
        lifecycle:              SINGLETON or TRANSIENT.
        destroy_on_interaction: Drop the cached instance after use.
        once:                   Stop firing after the first match.
        when / equals:          Payload condition; `when` must resolve to a
                                value strictly equal to `equals`. Without
                                `equals`, the path must resolve to nothing.
        requirements:           Events that must already be in history.
        then:                   Called with the new instance.
        emit:                   Follow-up event carrying the new instance.
        error_handler:          Overrides the engine's default handler.

    Example:
        CreationRule(
            trigger="signup",
            correlation="req-1",
            build=Account,
            using=(PathResolver().index(0).field("email"),),
        )
    """

    trigger: str
    correlation: str
    build: Callable[..., Any]
    token: Optional[Hashable] = None
    using: Tuple[Any, ...] = ()
    scope: Optional[InstanceRegistry] = None
    lifecycle: Lifecycle = Lifecycle.SINGLETON
    destroy_on_interaction: bool = True
    once: bool = False
    when: Optional[PathResolver] = None
    equals: Any = MISSING
    requirements: Tuple[str, ...] = ()
    then: Optional[Callable[[Any], Any]] = None
    emit: Optional[str] = None
    error_handler: Any = None

    def __post_init__(self):
        _require_event("trigger", self.trigger)
        _require_correlation(self.correlation)

        if not callable(self.build):
            raise ConfigurationError(
                f"build must be callable, got {self.build!r}."
            )
        if self.token is None:
            object.__setattr__(self, "token", self.build)

        if self.scope is not None and not isinstance(self.scope, InstanceRegistry):
            raise ConfigurationError("scope must be an InstanceRegistry.")

        try:
            options = RegistrationOptions(
                lifecycle=self.lifecycle,
                destroy_on_interaction=self.destroy_on_interaction,
            )
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(str(exc)) from exc
        object.__setattr__(self, "lifecycle", options.lifecycle)

        object.__setattr__(self, "using", tuple(self.using or ()))
        _normalise_common(self)

    @property
    def options(self) -> RegistrationOptions:
        return RegistrationOptions(
            lifecycle=self.lifecycle,
            destroy_on_interaction=self.destroy_on_interaction,
        )


# ══════════════════════════════════════════════════════════════
# INTERACTION RULE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True, eq=False)
class InteractionRule:
    """
    When `trigger` fires under `correlation`, call `target.method(*args)`.

    Fields:
        target:        Token (looked up in the root registry), PathResolver
                       (looked up in history) or LazyReference.
        method:        Name of the method to invoke.
        correlation:   Causal-chain id the rule listens to.
        trigger:       Event that fires the rule; None means the rule never
                       fires on its own.
        args:          Method arguments; same forms as CreationRule.using.
        when / equals, requirements, once, then, emit, error_handler:
                       As on CreationRule. `then` receives the method result
                       once it completes; `emit` carries the pending
                       completion.
    """

    target: Any
    method: str
    correlation: str
    trigger: Optional[str] = None
    args: Tuple[Any, ...] = ()
    once: bool = False
    when: Optional[PathResolver] = None
    equals: Any = MISSING
    requirements: Tuple[str, ...] = ()
    then: Optional[Callable[[Any], Any]] = None
    emit: Optional[str] = None
    error_handler: Any = None

    def __post_init__(self):
        if self.trigger is not None:
            _require_event("trigger", self.trigger)
        _require_correlation(self.correlation)

        if self.target is None:
            raise ConfigurationError("target is required.")
        if not isinstance(self.method, str) or not self.method:
            raise ConfigurationError(
                f"method must be a non-empty string, got {self.method!r}."
            )

        object.__setattr__(self, "args", tuple(self.args or ()))
        _normalise_common(self)


def condition_holds(rule: Any, payload: Tuple[Any, ...]) -> bool:
    """Whether a rule's `when` path resolves to its `equals` value."""
    if rule.when is None:
        return True
    return strictly_equal(rule.when.get_data(payload, MISSING), rule.equals)
