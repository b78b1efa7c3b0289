"""
Weave Registry — Instance Registry
====================================
Hierarchical container: factories keyed by token, instances cached
per scope, unresolved lookups delegated to the parent scope.

Rules:
- register() stores or overwrites a factory in THIS scope only
- get() walks the parent chain to find a factory
- Singleton instances are cached in the scope where get() was called,
  even when the factory lives in an ancestor
- Transient factories run on every get(), nothing is cached
- destroy() removes this scope's cached instance only; factories and
  parent caches are untouched
- No locking: one logical thread of control per scope

Lifecycle:
    root = InstanceRegistry()
    root.register(Mailer, Mailer)
    request = root.create_scope()
    request.get(Mailer)       # built and cached in `request`
    request.destroy(Mailer)   # root is unaffected
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional

from weave.errors import NotRegistered, describe_token
from weave.registry.options import Lifecycle, RegistrationOptions

logger = logging.getLogger("weave.registry")


@dataclass(frozen=True)
class Registration:
    factory: Callable[[], Any]
    options: RegistrationOptions


class InstanceRegistry:
    """
    Scope node owning a factory table and an instance cache.

    A registry created without a parent is a root scope.
    """

    def __init__(self, parent: Optional["InstanceRegistry"] = None):
        self._parent = parent
        self._registrations: Dict[Hashable, Registration] = {}
        self._instances: Dict[Hashable, Any] = {}

    @property
    def parent(self) -> Optional["InstanceRegistry"]:
        return self._parent

    # ══════════════════════════════════════════════════════════
    # REGISTRATION
    # ══════════════════════════════════════════════════════════

    def register(
        self,
        token: Hashable,
        factory: Callable[[], Any],
        options: Optional[RegistrationOptions] = None,
    ) -> None:
        """
        Store a factory for token in this scope.

        Args:
            token:   Registry key (a class or any hashable value).
            factory: Zero-argument callable producing an instance.
            options: Lifecycle options (default: singleton,
                     destroy_on_interaction=True).
        """
        if not callable(factory):
            raise TypeError(
                f"Factory for '{describe_token(token)}' must be callable."
            )

        self._registrations[token] = Registration(
            factory=factory,
            options=options or RegistrationOptions(),
        )
        logger.debug(
            f"Registered '{describe_token(token)}' "
            f"({self._registrations[token].options.lifecycle.value})"
        )

    def _find(self, token: Hashable) -> Optional[Registration]:
        scope: Optional[InstanceRegistry] = self
        while scope is not None:
            registration = scope._registrations.get(token)
            if registration is not None:
                return registration
            scope = scope._parent
        return None

    # ══════════════════════════════════════════════════════════
    # RESOLUTION
    # ══════════════════════════════════════════════════════════

    def get(self, token: Hashable) -> Any:
        """
        Resolve an instance for token.

        Raises:
            NotRegistered: No factory in this scope or any parent.
        """
        registration = self._find(token)
        if registration is None:
            raise NotRegistered(token)

        if registration.options.lifecycle == Lifecycle.TRANSIENT:
            return registration.factory()

        if token not in self._instances:
            self._instances[token] = registration.factory()
            logger.debug(f"Cached new '{describe_token(token)}' instance")

        return self._instances[token]

    def destroy(self, token: Hashable) -> None:
        """Drop this scope's cached instance, if any."""
        self._instances.pop(token, None)

    def get_options(self, token: Hashable) -> Optional[RegistrationOptions]:
        registration = self._find(token)
        return registration.options if registration else None

    def is_registered(self, token: Hashable) -> bool:
        return self._find(token) is not None

    def has_instance(self, token: Hashable) -> bool:
        """Whether THIS scope currently caches an instance for token."""
        return token in self._instances

    # ══════════════════════════════════════════════════════════
    # SCOPES
    # ══════════════════════════════════════════════════════════

    def create_scope(self) -> "InstanceRegistry":
        """New child scope with its own empty cache."""
        return InstanceRegistry(parent=self)
