"""Runtime context for require expressions.

The context is assembled from many unrelated subsystems, so its values are
weakly typed: plain mappings, lists, dataclasses, ORM-ish objects, scalars.
Every value is classified into a ``ValueKind`` and property lookup dispatches
on that kind, which keeps path walking total: a missing key or a property
asked of a scalar yields ``None`` instead of raising.
"""
from __future__ import annotations

import enum
from collections.abc import Mapping, Sequence, Set
from numbers import Number
from typing import Any, Iterable, List, Optional

LENGTH_PROPERTY = "length"


class ValueKind(enum.Enum):
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    OBJECT = "object"


def kind_of(value: Any) -> ValueKind:
    """Classify a context value."""
    if value is None:
        return ValueKind.NULL
    # bool before Number: bool is an int subclass
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, Number):
        return ValueKind.NUMBER
    if isinstance(value, (str, bytes)):
        return ValueKind.STRING
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if isinstance(value, (Sequence, Set)):
        return ValueKind.SEQUENCE
    return ValueKind.OBJECT


def get_property(value: Any, name: str) -> Any:
    """Look up ``name`` on ``value``; ``None`` when it has no such property."""
    kind = kind_of(value)
    if kind is ValueKind.MAPPING:
        return value.get(name)
    if kind in (ValueKind.SEQUENCE, ValueKind.STRING):
        return len(value) if name == LENGTH_PROPERTY else None
    if kind is ValueKind.OBJECT:
        if name.startswith("_"):
            return None
        attr = getattr(value, name, None)
        return None if callable(attr) else attr
    return None


def resolve_path(root: Any, parts: Iterable[str]) -> Any:
    """Walk ``parts`` from ``root``, stopping at the first missing step."""
    current = root
    for part in parts:
        current = get_property(current, part)
        if current is None:
            return None
    return current


def members_of(value: Any) -> List[Any]:
    """Members of a sequence value; any other kind has none."""
    if kind_of(value) is ValueKind.SEQUENCE:
        return list(value)
    return []


class AppContextModel(dict):
    """Key/value environment supplying the variables of require expressions.

    Constructed per request; keys are top-level variable names such as
    ``visit`` or ``sessionLocation``.
    """

    def with_(self, **values: Any) -> "AppContextModel":
        """Return a copy extended with ``values``."""
        model = AppContextModel(self)
        model.update(values)
        return model

    def lookup(self, path: str) -> Optional[Any]:
        """Resolve a dotted path such as ``"visit.active"``."""
        parts = [p for p in path.split(".") if p]
        if not parts:
            return None
        return resolve_path(self.get(parts[0]), parts[1:])


__all__ = [
    "LENGTH_PROPERTY",
    "ValueKind",
    "kind_of",
    "get_property",
    "resolve_path",
    "members_of",
    "AppContextModel",
]
