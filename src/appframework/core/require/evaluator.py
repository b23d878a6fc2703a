"""Evaluate require expressions against an app context model.

Example expressions:
    visit.active
    visit.active || visit.admitted
    sessionLocation.uuid == 'abc-123'
    hasMemberWithProperty(sessionLocation.tags, 'display', 'Login Location')

A path that does not resolve is ``undefined`` (falsy); only an expression
that cannot be parsed raises ``EvaluationError``.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Callable, Dict, Mapping, Optional

from appframework.core.context import resolve_path
from appframework.core.exceptions import EvaluationError

from .functions import BUILTIN_FUNCTIONS, FunctionImpl, FunctionSpec
from .nodes import BinaryOp, BoolOp, Call, FunctionLiteral, Literal, Node, Not, Operator, Path
from .parser import DEFAULT_MAX_DEPTH, LEFT_TO_RIGHT, Parser
from .values import is_truthy, loose_equals, strict_equals

logger = logging.getLogger(__name__)

_COMPARATORS: Dict[Operator, Callable[[Any, Any], bool]] = {
    Operator.EQ: loose_equals,
    Operator.NE: lambda a, b: not loose_equals(a, b),
    Operator.STRICT_EQ: strict_equals,
    Operator.STRICT_NE: lambda a, b: not strict_equals(a, b),
}


class ExpressionEvaluator:
    """Parse and evaluate require expressions.

    Parsed trees are cached per expression, so evaluating the same
    configured expression for every request only parses it once.
    """

    def __init__(
        self,
        *,
        precedence: str = LEFT_TO_RIGHT,
        max_depth: int = DEFAULT_MAX_DEPTH,
        cache_size: int = 256,
    ) -> None:
        """Initialize evaluator.

        Args:
            precedence: "left-to-right" or "standard" grouping of && and ||
            max_depth: Maximum nesting depth accepted by the parser
            cache_size: Number of parsed expressions kept
        """
        self.precedence = precedence
        self.max_depth = max_depth
        self.functions: Dict[str, FunctionSpec] = dict(BUILTIN_FUNCTIONS)
        self._cache_size = cache_size
        self._parse = lru_cache(maxsize=cache_size)(self._parse_uncached)
        # Validate the precedence mode eagerly.
        Parser("true", precedence=precedence, max_depth=max_depth)

    def register_function(
        self,
        name: str,
        impl: FunctionImpl,
        *,
        arity: int,
        function_args: frozenset[int] = frozenset(),
    ) -> None:
        """Make an additional predicate function callable from expressions."""
        self.functions[name] = FunctionSpec(name, arity, impl, frozenset(function_args))
        self._parse = lru_cache(maxsize=self._cache_size)(self._parse_uncached)

    def _parse_uncached(self, expression: str) -> Node:
        return Parser(
            expression,
            precedence=self.precedence,
            max_depth=self.max_depth,
            functions=self.functions,
        ).parse()

    def parse(self, expression: str) -> Node:
        """Return the (cached) tree for ``expression``.

        Raises:
            EvaluationError: If the expression is malformed
        """
        return self._parse(expression.strip())

    def evaluate(self, expression: Optional[str], context_model: Optional[Mapping[str, Any]] = None) -> bool:
        """Evaluate ``expression`` against ``context_model``.

        Args:
            expression: Require expression; empty or None always passes
            context_model: Variables available to the expression

        Returns:
            Boolean result of the expression

        Raises:
            EvaluationError: If the expression is malformed
        """
        if expression is None or not expression.strip():
            return True
        tree = self.parse(expression)
        result = is_truthy(self.evaluate_node(tree, context_model or {}))
        logger.debug("require %r -> %s", expression, result)
        return result

    def evaluate_node(self, node: Node, scope: Mapping[str, Any]) -> Any:
        """Evaluate a parsed tree to its (not yet boolean-coerced) value."""
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Path):
            return resolve_path(scope.get(node.parts[0]), node.parts[1:])
        if isinstance(node, Not):
            return not is_truthy(self.evaluate_node(node.operand, scope))
        if isinstance(node, BoolOp):
            # && stops at the first falsy operand, || at the first truthy one.
            stop_on = node.op is Operator.OR
            for operand in node.operands:
                if is_truthy(self.evaluate_node(operand, scope)) is stop_on:
                    return stop_on
            return not stop_on
        if isinstance(node, BinaryOp):
            comparator = _COMPARATORS[node.op]
            return comparator(self.evaluate_node(node.left, scope), self.evaluate_node(node.right, scope))
        if isinstance(node, Call):
            spec = self.functions[node.name]
            return spec.impl(self.evaluate_node, scope, node.args)
        if isinstance(node, FunctionLiteral):
            raise EvaluationError(
                "A function can only be used as a predicate argument",
                position=node.position,
            )
        raise EvaluationError(f"Cannot evaluate node of type {type(node).__name__}")


__all__ = ["ExpressionEvaluator"]
