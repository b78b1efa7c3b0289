"""
Weave Primitives — Path Resolver
==================================
Immutable description of where a value lives inside nested data.

A path is an ordered list of steps:
- INDEX: take element i of an ordered sequence
- FIELD: read a named field (mapping key or object attribute)

Rules:
- Resolvers are immutable; index()/field() return a new resolver
- get_data() never raises on missing structure
- Zero steps return the input unchanged
- Scalars (None, str, bytes, numbers, bool) are not traversable

The same resolver is used for rule conditions and argument extraction.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Tuple


class _Missing:
    """Marker for a value that does not exist (distinct from None)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()

_SCALARS = (str, bytes, bytearray, int, float, complex, bool)
_TOKEN = re.compile(r"\[(-?\d+)\]|([^.\[\]]+)")


class StepKind(Enum):
    INDEX = "INDEX"
    FIELD = "FIELD"


@dataclass(frozen=True)
class PathStep:
    kind: StepKind
    key: Any

    def __str__(self) -> str:
        if self.kind == StepKind.INDEX:
            return f"[{self.key}]"
        return str(self.key)


def _read(value: Any, step: PathStep) -> Any:
    if value is None or value is MISSING or isinstance(value, _SCALARS):
        return MISSING

    if step.kind == StepKind.INDEX:
        if isinstance(value, Mapping):
            return value.get(step.key, MISSING)
        if isinstance(value, Sequence):
            try:
                return value[step.key]
            except IndexError:
                return MISSING
        return MISSING

    if isinstance(value, Mapping):
        return value.get(step.key, MISSING)
    if isinstance(value, Sequence):
        return MISSING
    return getattr(value, step.key, MISSING)


class PathResolver:
    """
    Ordered, immutable list of read steps.

    Usage:
        email = PathResolver().index(0).field("email")
        email.get_data([{"email": "a@b.com"}])      # "a@b.com"
        email.get_data([None])                       # None (default)

        PathResolver.parse("[0].user.name")          # same shape, from text
    """

    __slots__ = ("_steps",)

    def __init__(self, steps: Tuple[PathStep, ...] = ()):
        self._steps = tuple(steps)

    @classmethod
    def parse(cls, notation: str) -> "PathResolver":
        """
        Build a resolver from notation text.
        `[n]` is an index step, any other dot-separated segment a field step.
        """
        if not isinstance(notation, str):
            raise TypeError(
                f"Path notation must be a string, got {type(notation).__name__}."
            )

        steps = []
        for index, name in _TOKEN.findall(notation):
            if name:
                steps.append(PathStep(StepKind.FIELD, name))
            else:
                steps.append(PathStep(StepKind.INDEX, int(index)))
        return cls(tuple(steps))

    def index(self, position: int) -> "PathResolver":
        if not isinstance(position, int) or isinstance(position, bool):
            raise TypeError(f"Index step must be an int, got {position!r}.")
        return PathResolver(self._steps + (PathStep(StepKind.INDEX, position),))

    def field(self, name: str) -> "PathResolver":
        if not isinstance(name, str) or not name:
            raise TypeError(f"Field step must be a non-empty string, got {name!r}.")
        return PathResolver(self._steps + (PathStep(StepKind.FIELD, name),))

    @property
    def steps(self) -> Tuple[PathStep, ...]:
        return self._steps

    @property
    def notation(self) -> str:
        text = ""
        for step in self._steps:
            if step.kind == StepKind.FIELD and text:
                text += "."
            text += str(step)
        return text

    def get_data(self, root: Any, default: Any = None) -> Any:
        """Walk the steps from root. Missing structure yields default."""
        value = root
        for step in self._steps:
            value = _read(value, step)
            if value is MISSING:
                return default
        return value

    def __len__(self) -> int:
        return len(self._steps)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathResolver):
            return NotImplemented
        return self._steps == other._steps

    def __hash__(self) -> int:
        return hash(self._steps)

    def __repr__(self) -> str:
        return f"PathResolver({self.notation!r})"


def strictly_equal(left: Any, right: Any) -> bool:
    """
    Equality without cross-type coercion.

    True == 1 and 1 == 1.0 hold in Python but are NOT strictly equal here.
    MISSING only equals MISSING.
    """
    if left is MISSING or right is MISSING:
        return left is right
    return type(left) is type(right) and left == right


def as_resolver(path: Any) -> PathResolver:
    """Accept a PathResolver or notation text."""
    if isinstance(path, PathResolver):
        return path
    if isinstance(path, str):
        return PathResolver.parse(path)
    raise TypeError(
        f"Expected PathResolver or notation string, got {type(path).__name__}."
    )
