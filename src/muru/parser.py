"""Parser for the muru language.

Recursive descent over one declaration per line:

    fib :: int -> int
    fib 0 = 0
    fib 1 = 1
    fib n = fib (n - 1) + fib (n - 2)

Binary and ternary expressions take unary operands; nesting needs
parentheses, so there is no operator precedence to resolve.
"""

from __future__ import annotations

from typing import NoReturn

from muru.ast_nodes import (
    BinaryExpr,
    BindingPattern,
    BoolLit,
    CallExpr,
    Expr,
    FloatLit,
    FunctionClause,
    IntLit,
    Line,
    Literal,
    LiteralPattern,
    Operator,
    Pattern,
    Program,
    SignatureDecl,
    TernaryExpr,
)
from muru.errors import CompileError, Diagnostic, DiagnosticLabel, Severity
from muru.lexer import Lexer
from muru.source import Span
from muru.tokens import Token, TokenKind
from muru.types import INT_MAX, INT_MIN, TYPE_NAMES, VariableType

_BINARY_OPS: dict[TokenKind, Operator] = {
    TokenKind.PLUS: Operator.ADD,
    TokenKind.MINUS: Operator.SUBTRACT,
    TokenKind.STAR: Operator.MULTIPLY,
    TokenKind.SLASH: Operator.DIVIDE,
    TokenKind.EQUAL: Operator.EQ,
    TokenKind.NOT_EQUAL: Operator.NEQ,
}

_LITERALS = frozenset({
    TokenKind.INTEGER_LIT, TokenKind.FLOAT_LIT, TokenKind.BOOLEAN_LIT,
})


class _ParseAbort(Exception):
    """Unwinds to the line loop after an error has been recorded."""


class Parser:
    """Parses a list of tokens into a muru Program."""

    def __init__(self, tokens: list[Token], filename: str = "<stdin>") -> None:
        self.tokens = tokens
        self.pos = 0
        self.filename = filename
        self.diagnostics: list[Diagnostic] = []

    # ── Token access ─────────────────────────────────────────────

    def _current(self) -> Token:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return self.tokens[-1]  # EOF

    def _peek(self, offset: int = 0) -> Token:
        idx = self.pos + offset
        if idx < len(self.tokens):
            return self.tokens[idx]
        return self.tokens[-1]

    def _at(self, kind: TokenKind) -> bool:
        return self._current().kind == kind

    def _advance(self) -> Token:
        tok = self._current()
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def _expect(self, kind: TokenKind, what: str) -> Token:
        if self._current().kind == kind:
            return self._advance()
        tok = self._current()
        self._fail(f"expected {what}, got {_describe(tok)}", tok.span)

    def _fail(self, message: str, span: Span) -> NoReturn:
        self.diagnostics.append(
            Diagnostic(
                severity=Severity.ERROR,
                code="E200",
                message=message,
                labels=[DiagnosticLabel(span=span, message="")],
            )
        )
        raise _ParseAbort()

    def _synchronize(self) -> None:
        """Skip to the start of the next line."""
        while not self._at(TokenKind.EOF):
            if self._advance().kind == TokenKind.NEWLINE:
                return

    # ── Top-level parsing ────────────────────────────────────────

    def parse(self) -> Program:
        """Parse the entire token stream into a Program."""
        lines: list[Line] = []
        while not self._at(TokenKind.EOF):
            if self._at(TokenKind.NEWLINE):
                self._advance()
                continue
            try:
                lines.append(self._parse_line())
            except _ParseAbort:
                self._synchronize()

        if self.diagnostics:
            raise CompileError(self.diagnostics)
        return Program(lines, self.filename)

    def _parse_line(self) -> Line:
        name_tok = self._expect(TokenKind.IDENTIFIER, "a function name")
        if self._at(TokenKind.DOUBLE_COLON):
            line: Line = self._parse_signature(name_tok)
        else:
            line = self._parse_clause(name_tok)
        self._expect(TokenKind.NEWLINE, "end of line")
        return line

    def _parse_signature(self, name_tok: Token) -> SignatureDecl:
        self._advance()  # ::
        types = [self._parse_type()]
        while self._at(TokenKind.ARROW):
            self._advance()
            types.append(self._parse_type())
        end = self._peek(-1).span
        return SignatureDecl(
            name=name_tok.value,
            arg_types=types[:-1],
            return_type=types[-1],
            span=name_tok.span.to(end),
        )

    def _parse_type(self) -> VariableType:
        tok = self._expect(TokenKind.TYPE_NAME, "a type (int, float or bool)")
        return TYPE_NAMES[tok.value]

    def _parse_clause(self, name_tok: Token) -> FunctionClause:
        params: list[Pattern] = []
        while not self._at(TokenKind.ASSIGN):
            params.append(self._parse_pattern())
        self._advance()  # =
        body = self._parse_expression()
        return FunctionClause(
            name=name_tok.value,
            params=params,
            body=body,
            span=name_tok.span.to(body.span),
        )

    def _parse_pattern(self) -> Pattern:
        tok = self._current()
        if tok.kind == TokenKind.IDENTIFIER:
            self._advance()
            return BindingPattern(tok.value, tok.span)
        if tok.kind in _LITERALS:
            lit = self._parse_literal()
            return LiteralPattern(lit, lit.span)
        self._fail(f"expected a parameter name or literal, got {_describe(tok)}", tok.span)

    # ── Expressions ──────────────────────────────────────────────

    def _parse_expression(self) -> Expr:
        left = self._parse_unary()
        op = _BINARY_OPS.get(self._current().kind)
        if op is not None:
            self._advance()
            right = self._parse_unary()
            return BinaryExpr(left, op, right, left.span.to(right.span))
        if self._at(TokenKind.QUESTION):
            self._advance()
            then_branch = self._parse_unary()
            self._expect(TokenKind.COLON, "':' in conditional")
            else_branch = self._parse_unary()
            return TernaryExpr(left, then_branch, else_branch, left.span.to(else_branch.span))
        return left

    def _parse_unary(self) -> Expr:
        tok = self._current()
        if tok.kind == TokenKind.LPAREN:
            return self._parse_parenthesized()
        if tok.kind in _LITERALS:
            return self._parse_literal()
        if tok.kind == TokenKind.IDENTIFIER:
            return self._parse_call()
        self._fail(f"expected an expression, got {_describe(tok)}", tok.span)

    def _parse_parenthesized(self) -> Expr:
        self._advance()  # (
        expr = self._parse_expression()
        self._expect(TokenKind.RPAREN, "')'")
        return expr

    def _parse_call(self) -> CallExpr:
        name_tok = self._advance()
        args: list[Expr] = []
        while True:
            tok = self._current()
            if tok.kind == TokenKind.LPAREN:
                args.append(self._parse_parenthesized())
            elif tok.kind in _LITERALS:
                args.append(self._parse_literal())
            elif tok.kind == TokenKind.IDENTIFIER:
                self._advance()
                args.append(CallExpr(tok.value, [], tok.span))
            else:
                break
        end = self._peek(-1).span
        return CallExpr(name_tok.value, args, name_tok.span.to(end))

    def _parse_literal(self) -> Literal:
        tok = self._advance()
        if tok.kind == TokenKind.INTEGER_LIT:
            value = int(tok.value)
            if not INT_MIN <= value <= INT_MAX:
                self._fail(f"integer literal {tok.value} does not fit in 32 bits", tok.span)
            return IntLit(value, tok.span)
        if tok.kind == TokenKind.FLOAT_LIT:
            return FloatLit(tok.value, tok.span)
        return BoolLit(tok.value == "true", tok.span)


def _describe(tok: Token) -> str:
    if tok.kind == TokenKind.NEWLINE:
        return "end of line"
    if tok.kind == TokenKind.EOF:
        return "end of file"
    return f"{tok.value!r}"


def parse(source: str, filename: str = "<stdin>") -> Program:
    """Lex and parse *source*; raises CompileError on any syntax error."""
    tokens = Lexer(source, filename).lex()
    return Parser(tokens, filename).parse()
