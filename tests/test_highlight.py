"""Tests for the Pygments lexer and highlighting helpers."""

from __future__ import annotations

from pygments.token import Comment, Keyword, Name, Number, Operator, Punctuation

from muru.highlight import MuruLexer, highlight_muru, highlight_wat


def tokens(source: str) -> list[tuple]:
    return [(tok, value) for tok, value in MuruLexer().get_tokens(source) if value.strip()]


class TestMuruLexer:
    def test_signature(self):
        assert tokens("fact :: int -> int\n") == [
            (Name.Function, "fact"),
            (Punctuation, "::"),
            (Keyword.Type, "int"),
            (Punctuation, "->"),
            (Keyword.Type, "int"),
        ]

    def test_clause_head_is_function(self):
        assert tokens("fact 0 = 1\n")[0] == (Name.Function, "fact")

    def test_literals(self):
        result = tokens("f = g 1 2.5 true\n")
        assert (Number.Integer, "1") in result
        assert (Number.Float, "2.5") in result
        assert (Keyword.Constant, "true") in result

    def test_comment(self):
        assert tokens("# hi\n") == [(Comment.Single, "# hi")]

    def test_operators(self):
        result = tokens("f n = (n == 0) ? 1 : n * 2\n")
        assert (Operator, "==") in result
        assert (Operator, "?") in result
        assert (Operator, "*") in result


class TestHighlight:
    def test_highlight_muru_adds_escapes(self):
        assert "\033[" in highlight_muru("main = 1\n")

    def test_highlight_wat_keeps_text(self):
        out = highlight_wat("(module (memory 1))")
        assert "module" in out
        assert "memory" in out
