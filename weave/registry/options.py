"""
Weave Registry — Registration Options
=======================================
How a registered factory behaves once it is asked for an instance.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Lifecycle(str, Enum):
    """
    SINGLETON: build once, cache per scope.
    TRANSIENT: build on every request, never cache.
    """
    SINGLETON = "singleton"
    TRANSIENT = "transient"


@dataclass(frozen=True)
class RegistrationOptions:
    """
    Fields:
        lifecycle:              SINGLETON or TRANSIENT.
        destroy_on_interaction: Drop the cached instance after an
                                interaction rule has used it.
    """

    lifecycle: Lifecycle = Lifecycle.SINGLETON
    destroy_on_interaction: bool = True

    def __post_init__(self):
        try:
            lifecycle = Lifecycle(self.lifecycle)
        except ValueError as exc:
            raise ValueError(
                f"lifecycle must be 'singleton' or 'transient', "
                f"got {self.lifecycle!r}."
            ) from exc
        object.__setattr__(self, "lifecycle", lifecycle)

        if not isinstance(self.destroy_on_interaction, bool):
            raise TypeError("destroy_on_interaction must be a bool.")
