"""
Weave Engine — Argument and Target Resolution
===============================================
Turns what a rule declared into what a call needs.

Arguments (three-way):
- PathResolver → extract from the current payload
- Deferred     → call get()
- anything else → literal, used as-is

Targets:
- PathResolver  → newest-first history query with that resolver
- LazyReference → get(); owned by the reference's scope
- other Deferred → get(); not registry-owned
- anything else → token, resolved through the root registry
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, Iterable, Optional, Tuple

from weave.history.log import EventHistory
from weave.lazy.reference import Deferred, LazyReference
from weave.primitives.path import PathResolver
from weave.registry.container import InstanceRegistry


def resolve_argument(argument: Any, payload: Tuple[Any, ...]) -> Any:
    if isinstance(argument, PathResolver):
        return argument.get_data(payload)
    if isinstance(argument, Deferred):
        return argument.get()
    return argument


def resolve_arguments(
    arguments: Iterable[Any], payload: Tuple[Any, ...]
) -> Tuple[Any, ...]:
    return tuple(resolve_argument(argument, payload) for argument in arguments)


@dataclass(frozen=True)
class ResolvedTarget:
    """
    Fields:
        instance: Object the method will be called on (None if unresolved).
        owner:    Registry that caches the instance, if registry-owned.
        token:    Token the instance is cached under, if registry-owned.
    """

    instance: Any
    owner: Optional[InstanceRegistry] = None
    token: Optional[Hashable] = None


def resolve_target(
    target: Any, registry: InstanceRegistry, history: EventHistory
) -> ResolvedTarget:
    if isinstance(target, PathResolver):
        return ResolvedTarget(instance=history.query().using(target).get())

    if isinstance(target, LazyReference):
        return ResolvedTarget(
            instance=target.get(), owner=target.scope, token=target.token
        )

    if isinstance(target, Deferred):
        return ResolvedTarget(instance=target.get())

    return ResolvedTarget(
        instance=registry.get(target), owner=registry, token=target
    )
