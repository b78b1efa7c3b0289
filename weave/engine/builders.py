"""
Weave Engine — Rule Builders
==============================
Fluent construction of rules, validated before they reach the engine.

    engine.upon("order.placed") \\
        .when("[0].status").equals("paid") \\
        .build(Invoice) \\
        .using(PathResolver.parse("[0].total")) \\
        .correlation("order-42") \\
        .emit("invoice.created") \\
        .then()

The terminal then() checks required fields, builds the frozen rule and
submits it. Missing fields raise ConfigurationError; the engine does
no further validation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, Hashable, Iterable, Optional

from weave.engine.rules import CreationRule, InteractionRule
from weave.errors import ConfigurationError
from weave.registry.container import InstanceRegistry
from weave.registry.options import Lifecycle

if TYPE_CHECKING:
    from weave.engine.engine import OrchestrationEngine


def _missing_fields(fields: Dict[str, Any], required: Iterable[str]) -> list:
    return [name for name in required if fields.get(name) is None]


class _RuleBuilder:
    """Shared clauses of creation and interaction builders."""

    _required: tuple = ()

    def __init__(self, engine: "OrchestrationEngine", fields: Dict[str, Any]):
        self._engine = engine
        self._fields = fields

    def when(self, path: Any) -> "_RuleBuilder":
        self._fields["when"] = path
        return self

    def equals(self, value: Any) -> "_RuleBuilder":
        self._fields["equals"] = value
        return self

    def correlation(self, correlation: str) -> "_RuleBuilder":
        self._fields["correlation"] = correlation
        return self

    def emit(self, event: str) -> "_RuleBuilder":
        self._fields["emit"] = event
        return self

    def requirements(self, events: Iterable[str]) -> "_RuleBuilder":
        self._fields["requirements"] = tuple(events)
        return self

    def once(self) -> "_RuleBuilder":
        self._fields["once"] = True
        return self

    def catch(self, error_handler: Any) -> "_RuleBuilder":
        self._fields["error_handler"] = error_handler
        return self

    def _validate(self) -> None:
        missing = _missing_fields(self._fields, self._required)
        if missing:
            raise ConfigurationError(
                f"Missing required properties: {', '.join(missing)}."
            )


class CreationBuilder(_RuleBuilder):
    _required = ("trigger", "build", "correlation")

    def using(self, *args: Any) -> "CreationBuilder":
        self._fields["using"] = args
        return self

    def in_scope(self, scope: InstanceRegistry) -> "CreationBuilder":
        self._fields["scope"] = scope
        return self

    def lifecycle(self, lifecycle: Lifecycle) -> "CreationBuilder":
        self._fields["lifecycle"] = lifecycle
        return self

    def destroy_on_interaction(self, flag: bool = True) -> "CreationBuilder":
        self._fields["destroy_on_interaction"] = flag
        return self

    def then(self, callback: Optional[Callable[[Any], Any]] = None) -> "OrchestrationEngine":
        """Finish the rule and hand it to the engine."""
        self._validate()
        if callback is not None:
            self._fields["then"] = callback
        return self._engine.add_contract(CreationRule(**self._fields))


class InteractionBuilder(_RuleBuilder):
    _required = ("trigger", "target", "method", "correlation")

    def call(self, method: str) -> "InteractionBuilder":
        self._fields["method"] = method
        return self

    def with_args(self, *args: Any) -> "InteractionBuilder":
        self._fields["args"] = args
        return self

    def then(self, callback: Optional[Callable[[Any], Any]] = None) -> "OrchestrationEngine":
        """Finish the rule and hand it to the engine."""
        self._validate()
        if callback is not None:
            self._fields["then"] = callback
        return self._engine.add_interaction(InteractionRule(**self._fields))


class RuleGateway:
    """
    First step after engine.upon(event): choose to build or to use.
    A when/equals condition set here carries into the chosen builder.
    """

    def __init__(self, engine: "OrchestrationEngine", event: str):
        self._engine = engine
        self._fields: Dict[str, Any] = {"trigger": event}

    def when(self, path: Any) -> "RuleGateway":
        self._fields["when"] = path
        return self

    def equals(self, value: Any) -> "RuleGateway":
        self._fields["equals"] = value
        return self

    def build(
        self, factory: Callable[..., Any], token: Optional[Hashable] = None
    ) -> CreationBuilder:
        fields = dict(self._fields, build=factory)
        if token is not None:
            fields["token"] = token
        return CreationBuilder(self._engine, fields)

    def use(self, target: Any) -> InteractionBuilder:
        return InteractionBuilder(self._engine, dict(self._fields, target=target))
