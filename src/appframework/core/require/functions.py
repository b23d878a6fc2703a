"""Built-in predicate functions callable from require expressions.

Supported functions:
- hasMemberWithProperty(collection, property, expected): some member of
  ``collection`` has ``property`` equal (as text) to ``expected``
- hasMemberThatEvaluatesTrue(collection, function(it) { return ... }): the
  function body is true for some member bound to the parameter

Example usage:
    hasMemberWithProperty(sessionLocation.tags, 'display', 'Login Location')
    hasMemberThatEvaluatesTrue(visits, function(v) { return v.active === true })
"""
from __future__ import annotations

from collections import ChainMap
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, Mapping, Sequence

from appframework.core.context import get_property, members_of
from appframework.core.exceptions import EvaluationError

from .nodes import FunctionLiteral, Node
from .values import as_text, is_truthy

NodeEvaluator = Callable[[Node, Mapping[str, Any]], Any]
FunctionImpl = Callable[[NodeEvaluator, Mapping[str, Any], Sequence[Node]], bool]


@dataclass(frozen=True)
class FunctionSpec:
    """Signature of a built-in: arity and which arguments are function literals."""

    name: str
    arity: int
    impl: FunctionImpl
    function_args: FrozenSet[int] = frozenset()


def has_member_with_property(
    evaluate: NodeEvaluator, scope: Mapping[str, Any], args: Sequence[Node]
) -> bool:
    collection = evaluate(args[0], scope)
    prop = as_text(evaluate(args[1], scope))
    expected = as_text(evaluate(args[2], scope))
    for member in members_of(collection):
        value = get_property(member, prop)
        if value is not None and as_text(value) == expected:
            return True
    return False


def has_member_that_evaluates_true(
    evaluate: NodeEvaluator, scope: Mapping[str, Any], args: Sequence[Node]
) -> bool:
    collection = evaluate(args[0], scope)
    predicate = args[1]
    if not isinstance(predicate, FunctionLiteral):
        raise EvaluationError("hasMemberThatEvaluatesTrue expects a function as its second argument")
    for member in members_of(collection):
        if is_truthy(evaluate(predicate.body, ChainMap({predicate.param: member}, scope))):
            return True
    return False


BUILTIN_FUNCTIONS: Dict[str, FunctionSpec] = {
    spec.name: spec
    for spec in (
        FunctionSpec("hasMemberWithProperty", 3, has_member_with_property),
        FunctionSpec(
            "hasMemberThatEvaluatesTrue",
            2,
            has_member_that_evaluates_true,
            function_args=frozenset({1}),
        ),
    )
}


__all__ = [
    "FunctionSpec",
    "BUILTIN_FUNCTIONS",
    "has_member_with_property",
    "has_member_that_evaluates_true",
]
