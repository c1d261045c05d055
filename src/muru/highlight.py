"""Pygments support: a lexer for muru source and terminal highlighting."""

from __future__ import annotations

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexer import RegexLexer, bygroups, words
from pygments.lexers.webassembly import WatLexer
from pygments.token import (
    Comment,
    Keyword,
    Name,
    Number,
    Operator,
    Punctuation,
    Text,
)


class MuruLexer(RegexLexer):
    """Pygments lexer for the muru language."""

    name = "Muru"
    aliases = ["muru"]
    filenames = ["*.muru"]
    mimetypes = ["text/x-muru"]

    tokens = {
        "root": [
            (r"[ \t\r\n]+", Text),
            (r"#.*$", Comment.Single),
            # Signature line: name ::
            (r"([a-z_][a-zA-Z0-9_]*)(\s*)(::)", bygroups(Name.Function, Text, Punctuation)),
            # Clause head: name at the start of a line
            (r"^[a-z_][a-zA-Z0-9_]*", Name.Function),
            (r"-?[0-9]+\.[0-9]+", Number.Float),
            (r"-?[0-9]+", Number.Integer),
            (r"\b(true|false)\b", Keyword.Constant),
            (words(("int", "float", "bool"), prefix=r"\b", suffix=r"\b"), Keyword.Type),
            (r"->", Punctuation),
            (r"==|!=", Operator),
            (r"[+\-*/]", Operator),
            (r"[?:]", Operator),
            (r"=", Operator),
            (r"[a-z_][a-zA-Z0-9_]*", Name),
            (r"[()]", Punctuation),
        ],
    }


def highlight_muru(source: str) -> str:
    return highlight(source, MuruLexer(), TerminalFormatter())


def highlight_wat(text: str) -> str:
    """Colorize WebAssembly text for a terminal."""
    return highlight(text, WatLexer(), TerminalFormatter())
