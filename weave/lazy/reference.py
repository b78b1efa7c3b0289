"""
Weave Lazy — Deferred Pointers
================================
Let a rule capture WHERE to look instead of WHAT to use.

LazyReference     → an instance in a registry scope
LazyHistoryValue  → the result of a history query

Nothing is resolved until get() is called, which the engine does only
when the rule actually fires.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Hashable

from weave.errors import describe_token

if TYPE_CHECKING:
    from weave.history.query import HistoryQuery
    from weave.registry.container import InstanceRegistry


class Deferred(ABC):
    """Anything the engine should resolve at fire time via get()."""

    @abstractmethod
    def get(self) -> Any:
        ...  # pragma: no cover


class LazyReference(Deferred):
    """
    Pointer to an instance that may not exist yet.

    Usage:
        request_scope = root.create_scope()
        cart = LazyReference(Cart, request_scope)
        ...
        cart.get()   # request_scope.get(Cart)
    """

    def __init__(self, token: Hashable, scope: "InstanceRegistry"):
        self._token = token
        self._scope = scope

    @property
    def token(self) -> Hashable:
        return self._token

    @property
    def scope(self) -> "InstanceRegistry":
        return self._scope

    def get(self) -> Any:
        return self._scope.get(self._token)

    def __repr__(self) -> str:
        return f"LazyReference({describe_token(self._token)})"


class LazyHistoryValue(Deferred):
    """Pointer to data that a past (or future) event carries."""

    def __init__(self, query: "HistoryQuery"):
        self._query = query

    def get(self) -> Any:
        return self._query.get()

    def __repr__(self) -> str:
        return f"LazyHistoryValue({self._query!r})"
