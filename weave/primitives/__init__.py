"""
Weave Primitives — Public API
===============================
Data-location building blocks shared by history queries and rules.
"""

from weave.primitives.path import (
    MISSING,
    PathResolver,
    PathStep,
    StepKind,
    as_resolver,
    strictly_equal,
)

__all__ = [
    "MISSING",
    "PathResolver",
    "PathStep",
    "StepKind",
    "as_resolver",
    "strictly_equal",
]
