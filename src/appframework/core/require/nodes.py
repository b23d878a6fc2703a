"""Expression tree produced by the require-expression parser."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Tuple, Union


class Operator(enum.Enum):
    AND = "&&"
    OR = "||"
    EQ = "=="
    NE = "!="
    STRICT_EQ = "==="
    STRICT_NE = "!=="

    @property
    def is_comparison(self) -> bool:
        return self not in (Operator.AND, Operator.OR)


@dataclass(frozen=True)
class Literal:
    value: Any
    position: int = 0


@dataclass(frozen=True)
class Path:
    """Dotted property access such as ``sessionLocation.uuid``."""

    parts: Tuple[str, ...]
    position: int = 0


@dataclass(frozen=True)
class Not:
    operand: "Node"
    position: int = 0


@dataclass(frozen=True)
class BoolOp:
    """A run of one logical operator: ``a && b && c`` is one node with three operands."""

    op: Operator
    operands: Tuple["Node", ...]
    position: int = 0


@dataclass(frozen=True)
class BinaryOp:
    """Equality comparison between two operands."""

    op: Operator
    left: "Node"
    right: "Node"
    position: int = 0


@dataclass(frozen=True)
class FunctionLiteral:
    """``function(it) { return <body> }`` passed to a predicate function."""

    param: str
    body: "Node"
    position: int = 0


@dataclass(frozen=True)
class Call:
    name: str
    args: Tuple["Node", ...]
    position: int = 0


Node = Union[Literal, Path, Not, BoolOp, BinaryOp, FunctionLiteral, Call]


__all__ = [
    "Operator",
    "Literal",
    "Path",
    "Not",
    "BoolOp",
    "BinaryOp",
    "FunctionLiteral",
    "Call",
    "Node",
]
