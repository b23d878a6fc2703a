"""Tokenizer for require expressions."""
from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Any, List

from appframework.core.exceptions import EvaluationError


class TokenKind(enum.Enum):
    IDENT = "identifier"
    STRING = "string"
    NUMBER = "number"
    AND = "&&"
    OR = "||"
    NOT = "!"
    EQ = "=="
    NE = "!="
    STRICT_EQ = "==="
    STRICT_NE = "!=="
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    COMMA = ","
    DOT = "."
    SEMI = ";"
    EOF = "end of expression"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: Any
    position: int


# Longest operators first so "===" wins over "==".
_OPERATORS = [
    ("===", TokenKind.STRICT_EQ),
    ("!==", TokenKind.STRICT_NE),
    ("==", TokenKind.EQ),
    ("!=", TokenKind.NE),
    ("&&", TokenKind.AND),
    ("||", TokenKind.OR),
    ("!", TokenKind.NOT),
    ("(", TokenKind.LPAREN),
    (")", TokenKind.RPAREN),
    ("{", TokenKind.LBRACE),
    ("}", TokenKind.RBRACE),
    (",", TokenKind.COMMA),
    (".", TokenKind.DOT),
    (";", TokenKind.SEMI),
]

_IDENT = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\\": "\\", "'": "'", '"': '"'}


def _read_string(expression: str, start: int) -> tuple[str, int]:
    quote = expression[start]
    chars: List[str] = []
    i = start + 1
    while i < len(expression):
        ch = expression[i]
        if ch == "\\" and i + 1 < len(expression):
            nxt = expression[i + 1]
            chars.append(_ESCAPES.get(nxt, nxt))
            i += 2
            continue
        if ch == quote:
            return "".join(chars), i + 1
        chars.append(ch)
        i += 1
    raise EvaluationError(
        f"Unterminated string literal at position {start}",
        expression=expression,
        position=start,
    )


def tokenize(expression: str) -> List[Token]:
    """Split ``expression`` into tokens, ending with an EOF token.

    Raises:
        EvaluationError: On characters that cannot start any token.
    """
    tokens: List[Token] = []
    i = 0
    length = len(expression)
    while i < length:
        ch = expression[i]
        if ch.isspace():
            i += 1
            continue
        if ch in ("'", '"'):
            text, end = _read_string(expression, i)
            tokens.append(Token(TokenKind.STRING, text, i))
            i = end
            continue
        match = _NUMBER.match(expression, i)
        if match:
            raw = match.group(0)
            value: Any = float(raw) if "." in raw else int(raw)
            tokens.append(Token(TokenKind.NUMBER, value, i))
            i = match.end()
            continue
        match = _IDENT.match(expression, i)
        if match:
            tokens.append(Token(TokenKind.IDENT, match.group(0), i))
            i = match.end()
            continue
        for text, kind in _OPERATORS:
            if expression.startswith(text, i):
                tokens.append(Token(kind, text, i))
                i += len(text)
                break
        else:
            raise EvaluationError(
                f"Unexpected character {ch!r} at position {i}",
                expression=expression,
                position=i,
            )
    tokens.append(Token(TokenKind.EOF, None, length))
    return tokens


__all__ = ["TokenKind", "Token", "tokenize"]
