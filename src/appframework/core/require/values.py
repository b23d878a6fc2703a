"""Truthiness and equality rules for require-expression values.

Require expressions were historically written against a JavaScript engine,
so these rules follow that register: every collection or object is truthy,
``==`` converts between numbers, strings and booleans, ``===`` does not.
"""
from __future__ import annotations

import math
from numbers import Integral
from typing import Any

from appframework.core.context import ValueKind, kind_of


def is_truthy(value: Any) -> bool:
    kind = kind_of(value)
    if kind is ValueKind.NULL:
        return False
    if kind is ValueKind.BOOL:
        return value
    if kind is ValueKind.NUMBER:
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    if kind is ValueKind.STRING:
        return len(value) > 0
    return True


def as_text(value: Any) -> str:
    """String form used when comparing values textually."""
    kind = kind_of(value)
    if kind is ValueKind.NULL:
        return "null"
    if kind is ValueKind.BOOL:
        return "true" if value else "false"
    if isinstance(value, Integral) or (isinstance(value, float) and value.is_integer()):
        return str(int(value))
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _as_number(value: Any) -> int | float | None:
    kind = kind_of(value)
    if kind is ValueKind.BOOL or isinstance(value, Integral):
        # ints stay exact; comparing them with floats cannot overflow
        return int(value)
    if kind is ValueKind.NUMBER:
        try:
            return float(value)
        except OverflowError:
            return None
    if kind is ValueKind.STRING:
        text = as_text(value).strip() or "0"
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return None
    return None


def strict_equals(left: Any, right: Any) -> bool:
    left_kind, right_kind = kind_of(left), kind_of(right)
    if left_kind is not right_kind:
        return False
    if left_kind is ValueKind.NULL:
        return True
    return left == right


def loose_equals(left: Any, right: Any) -> bool:
    left_kind, right_kind = kind_of(left), kind_of(right)
    if ValueKind.NULL in (left_kind, right_kind):
        return left_kind is right_kind
    if left_kind is right_kind:
        return left == right
    scalar = (ValueKind.NUMBER, ValueKind.STRING, ValueKind.BOOL)
    if left_kind in scalar and right_kind in scalar:
        a, b = _as_number(left), _as_number(right)
        if a is not None and b is not None:
            return a == b
        return as_text(left) == as_text(right)
    return False


__all__ = ["is_truthy", "as_text", "strict_equals", "loose_equals"]
