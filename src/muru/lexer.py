"""Lexer for the muru language.

Produces a flat token stream. Each top-level line ends in a NEWLINE token;
newlines inside parentheses or after an operator are dropped so a long
definition can continue on the next line.
"""

from __future__ import annotations

import string

from muru.errors import CompileError, Diagnostic, DiagnosticLabel, Severity
from muru.source import Span
from muru.tokens import (
    KEYWORDS,
    NEWLINE_SUPPRESSED_AFTER,
    OPERATORS,
    Token,
    TokenKind,
)

# Token kinds that complete a value; a '-' after one of them is subtraction.
_VALUE_TOKENS = frozenset({
    TokenKind.IDENTIFIER,
    TokenKind.INTEGER_LIT,
    TokenKind.FLOAT_LIT,
    TokenKind.BOOLEAN_LIT,
    TokenKind.RPAREN,
})

_DIGITS = frozenset(string.digits)
_IDENT_START = frozenset(string.ascii_lowercase + "_")
_IDENT_CHARS = frozenset(string.ascii_letters + string.digits + "_")


class Lexer:
    """Tokenizes muru source code."""

    def __init__(self, source: str, filename: str = "<stdin>") -> None:
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.col = 1
        self.paren_depth = 0
        self.prev_token: Token | None = None
        self.tokens: list[Token] = []
        self.diagnostics: list[Diagnostic] = []

    def lex(self) -> list[Token]:
        """Tokenize the entire source and return the token list."""
        while self.pos < len(self.source):
            ch = self.source[self.pos]
            if ch in (' ', '\r'):
                self._advance()
            elif ch == '\t':
                self._error("tabs are not allowed; use spaces", self.line, self.col)
                self._advance()
            elif ch == '\n':
                self._handle_newline()
            elif ch == '#':
                self._skip_line_comment()
            elif ch in _DIGITS:
                self._lex_number()
            elif ch == '-' and self._peek(1) in _DIGITS and self._starts_negative_literal():
                self._lex_number()
            elif ch in _IDENT_START:
                self._lex_identifier()
            else:
                self._lex_operator_or_punct()

        if self.prev_token is not None and self.prev_token.kind != TokenKind.NEWLINE:
            self._emit(TokenKind.NEWLINE, "", self.line, self.col)
        self._emit(TokenKind.EOF, "", self.line, self.col)

        if self.diagnostics:
            raise CompileError(self.diagnostics)
        return self.tokens

    # ── Helpers ───────────────────────────────────────────────────

    def _peek(self, offset: int = 0) -> str:
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def _emit(self, kind: TokenKind, value: str, start_line: int, start_col: int) -> Token:
        end_col = self.col - 1 if self.col > 1 else 1
        span = Span(self.filename, start_line, start_col, self.line, end_col)
        tok = Token(kind, value, span)
        self.tokens.append(tok)
        self.prev_token = tok
        return tok

    def _error(self, message: str, line: int, col: int) -> None:
        span = Span(self.filename, line, col, line, col)
        self.diagnostics.append(
            Diagnostic(
                severity=Severity.ERROR,
                code="E100",
                message=message,
                labels=[DiagnosticLabel(span=span, message="")],
            )
        )

    def _starts_negative_literal(self) -> bool:
        """A '-' glued to a digit is a sign unless it follows a value without a space."""
        if self.prev_token is None or self.prev_token.kind not in _VALUE_TOKENS:
            return True
        return self.pos > 0 and self.source[self.pos - 1] == ' '

    # ── Newlines and comments ────────────────────────────────────

    def _handle_newline(self) -> None:
        start_line = self.line
        start_col = self.col
        self._advance()

        if self.paren_depth > 0:
            return
        if self.prev_token is None or self.prev_token.kind == TokenKind.NEWLINE:
            return
        if self.prev_token.kind in NEWLINE_SUPPRESSED_AFTER:
            return

        self._emit(TokenKind.NEWLINE, "\n", start_line, start_col)

    def _skip_line_comment(self) -> None:
        while self.pos < len(self.source) and self.source[self.pos] != '\n':
            self._advance()

    # ── Numbers ──────────────────────────────────────────────────

    def _lex_number(self) -> None:
        start_line = self.line
        start_col = self.col
        text = []
        if self.source[self.pos] == '-':
            text.append(self._advance())

        while self.pos < len(self.source) and self.source[self.pos] in _DIGITS:
            text.append(self._advance())

        if self._peek() == "." and self._peek(1) in _DIGITS:
            text.append(self._advance())  # .
            while self.pos < len(self.source) and self.source[self.pos] in _DIGITS:
                text.append(self._advance())
            self._emit(TokenKind.FLOAT_LIT, ''.join(text), start_line, start_col)
            return

        self._emit(TokenKind.INTEGER_LIT, ''.join(text), start_line, start_col)

    # ── Identifiers ──────────────────────────────────────────────

    def _lex_identifier(self) -> None:
        start_line = self.line
        start_col = self.col
        text = []
        while self.pos < len(self.source) and self.source[self.pos] in _IDENT_CHARS:
            text.append(self._advance())
        word = ''.join(text)
        self._emit(KEYWORDS.get(word, TokenKind.IDENTIFIER), word, start_line, start_col)

    # ── Operators ────────────────────────────────────────────────

    def _lex_operator_or_punct(self) -> None:
        start_line = self.line
        start_col = self.col
        for text, kind in OPERATORS:
            if self.source.startswith(text, self.pos):
                for _ in text:
                    self._advance()
                if kind == TokenKind.LPAREN:
                    self.paren_depth += 1
                elif kind == TokenKind.RPAREN:
                    self.paren_depth = max(0, self.paren_depth - 1)
                self._emit(kind, text, start_line, start_col)
                return
        ch = self._advance()
        self._error(f"unexpected character {ch!r}", start_line, start_col)
