"""
Require expressions: a small boolean language gating app/extension visibility.

The pipeline is lexer -> recursive-descent parser -> expression tree ->
tree-walking evaluator. No host scripting engine is involved.
"""
from __future__ import annotations

from .evaluator import ExpressionEvaluator
from .functions import BUILTIN_FUNCTIONS, FunctionSpec
from .nodes import BinaryOp, BoolOp, Call, FunctionLiteral, Literal, Node, Not, Operator, Path
from .parser import DEFAULT_MAX_DEPTH, LEFT_TO_RIGHT, MAX_DEPTH_LIMIT, PRECEDENCE_MODES, STANDARD, Parser, parse
from .values import is_truthy, loose_equals, strict_equals

__all__ = [
    "ExpressionEvaluator",
    "BUILTIN_FUNCTIONS",
    "FunctionSpec",
    "BinaryOp",
    "BoolOp",
    "Call",
    "FunctionLiteral",
    "Literal",
    "Node",
    "Not",
    "Operator",
    "Path",
    "DEFAULT_MAX_DEPTH",
    "MAX_DEPTH_LIMIT",
    "LEFT_TO_RIGHT",
    "PRECEDENCE_MODES",
    "STANDARD",
    "Parser",
    "parse",
    "is_truthy",
    "loose_equals",
    "strict_equals",
]
