"""
Weave — Error Taxonomy
========================
Every failure the engine can route to an error handler.

ConfigurationError  → incomplete rule or query, raised at construction
NotRegistered       → no factory for a token at any scope depth
UnresolvedTarget    → interaction target could not be resolved
MethodNotFound      → named method missing or not callable
RuleExecutionError  → anything else while resolving, building or invoking
ChainDepthExceeded  → re-entrant event chain deeper than allowed
"""

from typing import Any, Optional


def describe_token(token: Any) -> str:
    """Readable name for a registry token (class or opaque key)."""
    if isinstance(token, str):
        return token
    name = getattr(token, "__qualname__", None) or getattr(token, "__name__", None)
    return name or repr(token)


class WeaveError(Exception):
    """Base error for Weave operations."""
    pass


class ConfigurationError(WeaveError):
    """A rule or query is missing required information."""
    pass


class NotRegistered(WeaveError):
    """No factory registered for a token in this scope or any parent."""

    def __init__(self, token: Any):
        self.token = token
        super().__init__(
            f"'{describe_token(token)}' is not registered "
            f"in this scope or any parent scope."
        )


class UnresolvedTarget(WeaveError):
    """Interaction target resolved to nothing."""

    def __init__(self, target: Any):
        self.target = target
        super().__init__(
            f"Could not resolve an instance for target {target!r}."
        )


class MethodNotFound(WeaveError):
    """Named method does not exist or is not callable on the instance."""

    def __init__(self, method: str, instance: Any):
        self.method = method
        self.instance = instance
        super().__init__(
            f"Method '{method}' does not exist or is not callable on "
            f"'{type(instance).__name__}'."
        )


class RuleExecutionError(WeaveError):
    """Any other failure while a rule was executing."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class ChainDepthExceeded(WeaveError):
    """Re-entrant delivery went deeper than the configured limit."""

    def __init__(self, event: str, depth: int, limit: int):
        self.event = event
        self.depth = depth
        self.limit = limit
        super().__init__(
            f"Delivery of '{event}' reached chain depth {depth}, "
            f"limit is {limit}."
        )
