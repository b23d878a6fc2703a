"""Recursive-descent parser for require expressions.

Grammar::

    expression  := logical
    logical     := unary ( ("&&" | "||") unary )*        # left-to-right
                 | and_expr ( "||" and_expr )*            # standard
    and_expr    := unary ( "&&" unary )*
    unary       := "!" unary | comparison
    comparison  := primary ( ("==" | "===" | "!=" | "!==") primary )?
    primary     := literal | path | call | "(" expression ")"
    path        := IDENT ( "." IDENT )*
    call        := IDENT "(" [ argument ( "," argument )* ] ")"
    function    := "function" "(" IDENT ")" "{" "return" expression [";"] "}"

With ``left-to-right`` precedence ``a || b && c`` groups as ``(a || b) && c``;
with ``standard`` precedence it groups as ``a || (b && c)``.
A run of one operator such as ``a && b && c`` is a single ``BoolOp`` node, so
long flat chains do not deepen the tree.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Dict, Iterator, List, Mapping, Optional

from appframework.core.exceptions import ConfigurationError, EvaluationError

from .functions import BUILTIN_FUNCTIONS, FunctionSpec
from .lexer import Token, TokenKind, tokenize
from .nodes import BinaryOp, BoolOp, Call, FunctionLiteral, Literal, Node, Not, Operator, Path

LEFT_TO_RIGHT = "left-to-right"
STANDARD = "standard"
PRECEDENCE_MODES = (LEFT_TO_RIGHT, STANDARD)
DEFAULT_MAX_DEPTH = 64
# Upper bound for max_depth; parsing recurses a few frames per nesting level.
MAX_DEPTH_LIMIT = 100

_KEYWORD_LITERALS = {"true": True, "false": False, "null": None, "undefined": None}
_RESERVED = {"function", "return"}
_COMPARISONS: Dict[TokenKind, Operator] = {
    TokenKind.EQ: Operator.EQ,
    TokenKind.NE: Operator.NE,
    TokenKind.STRICT_EQ: Operator.STRICT_EQ,
    TokenKind.STRICT_NE: Operator.STRICT_NE,
}
_LOGICAL: Dict[TokenKind, Operator] = {
    TokenKind.AND: Operator.AND,
    TokenKind.OR: Operator.OR,
}


class Parser:
    """Parse one require expression into a tree of ``nodes``."""

    def __init__(
        self,
        expression: str,
        *,
        precedence: str = LEFT_TO_RIGHT,
        max_depth: int = DEFAULT_MAX_DEPTH,
        functions: Optional[Mapping[str, FunctionSpec]] = None,
    ) -> None:
        if precedence not in PRECEDENCE_MODES:
            raise ConfigurationError(
                f"Unknown operator precedence '{precedence}'. Expected one of {list(PRECEDENCE_MODES)}",
                context={"precedence": precedence},
            )
        if not 1 <= max_depth <= MAX_DEPTH_LIMIT:
            raise ConfigurationError(
                f"max_depth must be between 1 and {MAX_DEPTH_LIMIT}, got {max_depth}",
                context={"max_depth": max_depth},
            )
        self.expression = expression
        self.precedence = precedence
        self.max_depth = max_depth
        self.functions = BUILTIN_FUNCTIONS if functions is None else functions
        self._tokens: List[Token] = tokenize(expression)
        self._pos = 0
        self._depth = 0

    # ------------------------------------------------------------------
    # Token helpers
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> Token:
        idx = min(self._pos + offset, len(self._tokens) - 1)
        return self._tokens[idx]

    def _advance(self) -> Token:
        tok = self._tokens[self._pos]
        if tok.kind is not TokenKind.EOF:
            self._pos += 1
        return tok

    def _error(self, message: str, token: Optional[Token] = None) -> EvaluationError:
        tok = token or self._peek()
        return EvaluationError(
            f"{message} at position {tok.position} in require expression {self.expression!r}",
            expression=self.expression,
            position=tok.position,
        )

    def _describe(self, token: Token) -> str:
        if token.kind is TokenKind.EOF:
            return token.kind.value
        return repr(str(token.value))

    def _expect(self, kind: TokenKind, what: Optional[str] = None) -> Token:
        tok = self._peek()
        if tok.kind is not kind:
            raise self._error(f"Expected {what or kind.value!r}, found {self._describe(tok)}", tok)
        return self._advance()

    def _expect_keyword(self, keyword: str) -> Token:
        tok = self._peek()
        if tok.kind is not TokenKind.IDENT or tok.value != keyword:
            raise self._error(f"Expected '{keyword}', found {self._describe(tok)}", tok)
        return self._advance()

    @contextmanager
    def _nested(self) -> Iterator[None]:
        self._depth += 1
        try:
            if self._depth > self.max_depth:
                raise self._error(f"Expression nesting exceeds maximum depth of {self.max_depth}")
            yield
        finally:
            self._depth -= 1

    # ------------------------------------------------------------------
    # Grammar
    # ------------------------------------------------------------------

    def parse(self) -> Node:
        if self._peek().kind is TokenKind.EOF:
            raise self._error("Empty require expression")
        node = self._expression()
        tok = self._peek()
        if tok.kind is not TokenKind.EOF:
            raise self._error(f"Unexpected {self._describe(tok)}", tok)
        return node

    def _expression(self) -> Node:
        with self._nested():
            if self.precedence == STANDARD:
                return self._or()
            return self._left_to_right()

    def _left_to_right(self) -> Node:
        # Each change of operator wraps the run so far in one more level; levels count as nesting.
        first = self._unary()
        op: Optional[Operator] = None
        position = 0
        operands: List[Node] = [first]
        levels = 0
        while self._peek().kind in _LOGICAL:
            tok = self._advance()
            tok_op = _LOGICAL[tok.kind]
            if op is not None and tok_op is not op:
                levels += 1
                if self._depth + levels > self.max_depth:
                    raise self._error(
                        f"Expression nesting exceeds maximum depth of {self.max_depth}", tok
                    )
                operands = [BoolOp(op, tuple(operands), position)]
            if tok_op is not op:
                op, position = tok_op, tok.position
            operands.append(self._unary())
        if op is None:
            return first
        return BoolOp(op, tuple(operands), position)

    def _or(self) -> Node:
        operands = [self._and()]
        position = self._peek().position
        while self._peek().kind is TokenKind.OR:
            self._advance()
            operands.append(self._and())
        if len(operands) == 1:
            return operands[0]
        return BoolOp(Operator.OR, tuple(operands), position)

    def _and(self) -> Node:
        operands = [self._unary()]
        position = self._peek().position
        while self._peek().kind is TokenKind.AND:
            self._advance()
            operands.append(self._unary())
        if len(operands) == 1:
            return operands[0]
        return BoolOp(Operator.AND, tuple(operands), position)

    def _unary(self) -> Node:
        tok = self._peek()
        if tok.kind is TokenKind.NOT:
            self._advance()
            with self._nested():
                return Not(self._unary(), tok.position)
        return self._comparison()

    def _comparison(self) -> Node:
        left = self._primary()
        tok = self._peek()
        if tok.kind in _COMPARISONS:
            self._advance()
            right = self._primary()
            return BinaryOp(_COMPARISONS[tok.kind], left, right, tok.position)
        return left

    def _primary(self) -> Node:
        tok = self._peek()
        if tok.kind in (TokenKind.STRING, TokenKind.NUMBER):
            self._advance()
            return Literal(tok.value, tok.position)
        if tok.kind is TokenKind.LPAREN:
            self._advance()
            node = self._expression()
            self._expect(TokenKind.RPAREN)
            return node
        if tok.kind is TokenKind.IDENT:
            name = tok.value
            if name in _KEYWORD_LITERALS:
                self._advance()
                return Literal(_KEYWORD_LITERALS[name], tok.position)
            if name == "function":
                raise self._error("Function literals are only allowed as predicate arguments", tok)
            if name in _RESERVED:
                raise self._error(f"Unexpected keyword '{name}'", tok)
            if self._peek(1).kind is TokenKind.LPAREN:
                return self._call()
            return self._path()
        raise self._error(f"Unexpected {self._describe(tok)}", tok)

    def _path(self) -> Path:
        first = self._expect(TokenKind.IDENT, "identifier")
        parts = [first.value]
        while self._peek().kind is TokenKind.DOT:
            self._advance()
            parts.append(self._expect(TokenKind.IDENT, "property name").value)
        return Path(tuple(parts), first.position)

    def _call(self) -> Call:
        name_tok = self._advance()
        spec = self.functions.get(name_tok.value)
        if spec is None:
            available = sorted(self.functions.keys())
            raise self._error(
                f"Unknown function '{name_tok.value}'. Available functions: {available}", name_tok
            )
        self._expect(TokenKind.LPAREN)
        args: List[Node] = []
        if self._peek().kind is not TokenKind.RPAREN:
            while True:
                if len(args) in spec.function_args:
                    args.append(self._function_literal())
                else:
                    args.append(self._expression())
                if self._peek().kind is not TokenKind.COMMA:
                    break
                self._advance()
        self._expect(TokenKind.RPAREN)
        if len(args) != spec.arity:
            raise self._error(
                f"{spec.name} expects {spec.arity} arguments, got {len(args)}", name_tok
            )
        return Call(spec.name, tuple(args), name_tok.position)

    def _function_literal(self) -> FunctionLiteral:
        start = self._expect_keyword("function")
        self._expect(TokenKind.LPAREN)
        param_tok = self._expect(TokenKind.IDENT, "parameter name")
        if param_tok.value in _KEYWORD_LITERALS or param_tok.value in _RESERVED:
            raise self._error(f"Invalid parameter name '{param_tok.value}'", param_tok)
        self._expect(TokenKind.RPAREN)
        self._expect(TokenKind.LBRACE)
        self._expect_keyword("return")
        body_tok = self._peek()
        body = self._expression()
        if self._peek().kind is TokenKind.SEMI:
            self._advance()
        self._expect(TokenKind.RBRACE)
        # Predicate bodies are limited to one equality comparison.
        if not (isinstance(body, BinaryOp) and body.op.is_comparison):
            raise self._error("Predicate body must be a single equality comparison", body_tok)
        return FunctionLiteral(param_tok.value, body, start.position)


def parse(
    expression: str,
    *,
    precedence: str = LEFT_TO_RIGHT,
    max_depth: int = DEFAULT_MAX_DEPTH,
    functions: Optional[Mapping[str, FunctionSpec]] = None,
) -> Node:
    """Parse ``expression``; raises EvaluationError when it is malformed."""
    return Parser(expression, precedence=precedence, max_depth=max_depth, functions=functions).parse()


__all__ = [
    "LEFT_TO_RIGHT",
    "STANDARD",
    "PRECEDENCE_MODES",
    "DEFAULT_MAX_DEPTH",
    "MAX_DEPTH_LIMIT",
    "Parser",
    "parse",
]
