"""Tests for the muru lexer."""

from __future__ import annotations

import pytest

from muru.errors import CompileError
from muru.lexer import Lexer
from muru.tokens import TokenKind


def lex(source: str) -> list[tuple[TokenKind, str]]:
    """Helper: lex source and return (kind, value) pairs, excluding NEWLINE and EOF."""
    tokens = Lexer(source).lex()
    return [
        (t.kind, t.value) for t in tokens
        if t.kind not in (TokenKind.NEWLINE, TokenKind.EOF)
    ]


def kinds(source: str) -> list[TokenKind]:
    """Helper: lex source and return just the token kinds, excluding EOF."""
    tokens = Lexer(source).lex()
    return [t.kind for t in tokens if t.kind != TokenKind.EOF]


class TestLexerBasic:
    def test_empty_source(self):
        tokens = Lexer("").lex()
        assert len(tokens) == 1
        assert tokens[0].kind == TokenKind.EOF

    def test_identifier(self):
        assert lex("fact") == [(TokenKind.IDENTIFIER, "fact")]

    def test_snake_case_identifier(self):
        assert lex("my_fn_2") == [(TokenKind.IDENTIFIER, "my_fn_2")]

    def test_boolean_keywords(self):
        assert lex("true false") == [
            (TokenKind.BOOLEAN_LIT, "true"),
            (TokenKind.BOOLEAN_LIT, "false"),
        ]

    def test_type_names(self):
        assert [k for k, _ in lex("int float bool")] == [TokenKind.TYPE_NAME] * 3

    def test_line_ends_with_newline(self):
        assert kinds("main = 1") == [
            TokenKind.IDENTIFIER, TokenKind.ASSIGN, TokenKind.INTEGER_LIT, TokenKind.NEWLINE,
        ]

    def test_signature_tokens(self):
        assert kinds("fact :: int -> int\n") == [
            TokenKind.IDENTIFIER,
            TokenKind.DOUBLE_COLON,
            TokenKind.TYPE_NAME,
            TokenKind.ARROW,
            TokenKind.TYPE_NAME,
            TokenKind.NEWLINE,
        ]

    def test_operators(self):
        assert [k for k, _ in lex("a == b != c + d * e / f ? g : h")] == [
            TokenKind.IDENTIFIER, TokenKind.EQUAL,
            TokenKind.IDENTIFIER, TokenKind.NOT_EQUAL,
            TokenKind.IDENTIFIER, TokenKind.PLUS,
            TokenKind.IDENTIFIER, TokenKind.STAR,
            TokenKind.IDENTIFIER, TokenKind.SLASH,
            TokenKind.IDENTIFIER, TokenKind.QUESTION,
            TokenKind.IDENTIFIER, TokenKind.COLON,
            TokenKind.IDENTIFIER,
        ]


class TestNumbers:
    def test_integer(self):
        assert lex("42") == [(TokenKind.INTEGER_LIT, "42")]

    def test_float(self):
        assert lex("1.25") == [(TokenKind.FLOAT_LIT, "1.25")]

    def test_negative_literal_after_assign(self):
        assert lex("x = -3") == [
            (TokenKind.IDENTIFIER, "x"),
            (TokenKind.ASSIGN, "="),
            (TokenKind.INTEGER_LIT, "-3"),
        ]

    def test_negative_literal_in_parens(self):
        assert lex("(-2.5)") == [
            (TokenKind.LPAREN, "("),
            (TokenKind.FLOAT_LIT, "-2.5"),
            (TokenKind.RPAREN, ")"),
        ]

    def test_spaced_minus_is_subtraction(self):
        assert lex("n - 1") == [
            (TokenKind.IDENTIFIER, "n"),
            (TokenKind.MINUS, "-"),
            (TokenKind.INTEGER_LIT, "1"),
        ]

    def test_glued_minus_is_subtraction(self):
        assert lex("n-1") == [
            (TokenKind.IDENTIFIER, "n"),
            (TokenKind.MINUS, "-"),
            (TokenKind.INTEGER_LIT, "1"),
        ]

    def test_minus_glued_to_digit_after_space_is_literal(self):
        assert lex("f -1") == [
            (TokenKind.IDENTIFIER, "f"),
            (TokenKind.INTEGER_LIT, "-1"),
        ]


class TestLayout:
    def test_comment_skipped(self):
        assert lex("main = 1 # the answer") == [
            (TokenKind.IDENTIFIER, "main"),
            (TokenKind.ASSIGN, "="),
            (TokenKind.INTEGER_LIT, "1"),
        ]

    def test_comment_only_line(self):
        assert kinds("# nothing here\n") == []

    def test_blank_lines_collapse(self):
        assert kinds("a = 1\n\n\nb = 2\n").count(TokenKind.NEWLINE) == 2

    def test_newline_inside_parens_ignored(self):
        assert kinds("main = f (1\n+ 2)").count(TokenKind.NEWLINE) == 1

    def test_newline_after_operator_ignored(self):
        assert kinds("main = 1 +\n  2") == [
            TokenKind.IDENTIFIER, TokenKind.ASSIGN, TokenKind.INTEGER_LIT,
            TokenKind.PLUS, TokenKind.INTEGER_LIT, TokenKind.NEWLINE,
        ]

    def test_span_positions(self):
        tokens = Lexer("main = 42", "prog.muru").lex()
        lit = tokens[2]
        assert lit.span.file == "prog.muru"
        assert (lit.span.start_line, lit.span.start_col) == (1, 8)
        assert lit.span.end_col == 9

    def test_second_line_span(self):
        tokens = Lexer("a = 1\nb = 2").lex()
        b = [t for t in tokens if t.value == "b"][0]
        assert (b.span.start_line, b.span.start_col) == (2, 1)


class TestLexerErrors:
    def test_tab_rejected(self):
        with pytest.raises(CompileError) as exc_info:
            Lexer("\tmain = 1").lex()
        assert exc_info.value.diagnostics[0].code == "E100"

    def test_unexpected_character(self):
        with pytest.raises(CompileError) as exc_info:
            Lexer("main = 1 $ 2").lex()
        assert "unexpected character" in exc_info.value.diagnostics[0].message

    def test_errors_are_batched(self):
        with pytest.raises(CompileError) as exc_info:
            Lexer("a = @\nb = %").lex()
        assert len(exc_info.value.diagnostics) == 2

    def test_non_ascii_digit_rejected(self):
        with pytest.raises(CompileError) as exc_info:
            Lexer("main = \u00b2").lex()
        diag = exc_info.value.diagnostics[0]
        assert diag.code == "E100"
        assert "unexpected character" in diag.message

    def test_non_ascii_identifier_rejected(self):
        with pytest.raises(CompileError) as exc_info:
            Lexer("\u00e9 = 1").lex()
        assert exc_info.value.diagnostics[0].code == "E100"

    def test_identifier_must_start_lowercase(self):
        with pytest.raises(CompileError) as exc_info:
            Lexer("Main = 1").lex()
        assert exc_info.value.diagnostics[0].code == "E100"

    def test_identifier_may_contain_capitals(self):
        assert lex("fooBar_2 = 1")[0] == (TokenKind.IDENTIFIER, "fooBar_2")
