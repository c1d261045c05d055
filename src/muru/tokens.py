"""Token kinds and token representation for the muru lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from muru.source import Span


class TokenKind(Enum):
    # Literals
    INTEGER_LIT = auto()
    FLOAT_LIT = auto()
    BOOLEAN_LIT = auto()

    # Type names
    TYPE_NAME = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    EQUAL = auto()
    NOT_EQUAL = auto()
    ASSIGN = auto()
    ARROW = auto()
    DOUBLE_COLON = auto()
    QUESTION = auto()
    COLON = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()

    # Whitespace
    NEWLINE = auto()

    # Identifiers
    IDENTIFIER = auto()

    # Special
    EOF = auto()


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    span: Span


KEYWORDS: dict[str, TokenKind] = {
    "true": TokenKind.BOOLEAN_LIT,
    "false": TokenKind.BOOLEAN_LIT,
    "int": TokenKind.TYPE_NAME,
    "float": TokenKind.TYPE_NAME,
    "bool": TokenKind.TYPE_NAME,
}

# Longest match first.
OPERATORS: list[tuple[str, TokenKind]] = [
    ("==", TokenKind.EQUAL),
    ("!=", TokenKind.NOT_EQUAL),
    ("->", TokenKind.ARROW),
    ("::", TokenKind.DOUBLE_COLON),
    ("+", TokenKind.PLUS),
    ("-", TokenKind.MINUS),
    ("*", TokenKind.STAR),
    ("/", TokenKind.SLASH),
    ("=", TokenKind.ASSIGN),
    ("?", TokenKind.QUESTION),
    (":", TokenKind.COLON),
    ("(", TokenKind.LPAREN),
    (")", TokenKind.RPAREN),
]

# A line cannot end on one of these; the next line continues it.
NEWLINE_SUPPRESSED_AFTER: frozenset[TokenKind] = frozenset({
    TokenKind.PLUS,
    TokenKind.MINUS,
    TokenKind.STAR,
    TokenKind.SLASH,
    TokenKind.EQUAL,
    TokenKind.NOT_EQUAL,
    TokenKind.ASSIGN,
    TokenKind.ARROW,
    TokenKind.DOUBLE_COLON,
    TokenKind.QUESTION,
    TokenKind.COLON,
    TokenKind.LPAREN,
})
