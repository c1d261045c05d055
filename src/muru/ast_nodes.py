"""AST node definitions for the muru language."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from muru.source import Span
from muru.types import VariableType

# ── Operators ───────────────────────────────────────────────────


class Operator(Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    EQ = "=="
    NEQ = "!="

    @property
    def mnemonic(self) -> str:
        return _MNEMONICS[self]

    @property
    def is_arithmetic(self) -> bool:
        return self not in (Operator.EQ, Operator.NEQ)


_MNEMONICS: dict[Operator, str] = {
    Operator.ADD: "add",
    Operator.SUBTRACT: "sub",
    Operator.MULTIPLY: "mul",
    Operator.DIVIDE: "div",
    Operator.EQ: "eq",
    Operator.NEQ: "ne",
}


# ── Literals ────────────────────────────────────────────────────


@dataclass(frozen=True)
class IntLit:
    value: int
    span: Span


@dataclass(frozen=True)
class FloatLit:
    value: str  # source text, emitted verbatim
    span: Span


@dataclass(frozen=True)
class BoolLit:
    value: bool
    span: Span


Literal = Union[IntLit, FloatLit, BoolLit]


def literal_type(lit: Literal) -> VariableType:
    """The intrinsic type of a literal."""
    if isinstance(lit, IntLit):
        return VariableType.INT
    if isinstance(lit, FloatLit):
        return VariableType.FLOAT
    return VariableType.BOOL


def literal_text(lit: Literal) -> str:
    """The constant operand for a literal; booleans become 0 / 1."""
    if isinstance(lit, BoolLit):
        return "1" if lit.value else "0"
    return str(lit.value)


# ── Expressions ─────────────────────────────────────────────────


@dataclass(frozen=True)
class CallExpr:
    """A call, or with no arguments, a reference to a parameter or function."""

    name: str
    args: list[Expr]
    span: Span


@dataclass(frozen=True)
class BinaryExpr:
    left: Expr
    op: Operator
    right: Expr
    span: Span


@dataclass(frozen=True)
class TernaryExpr:
    condition: Expr
    then_branch: Expr
    else_branch: Expr
    span: Span


Expr = Union[IntLit, FloatLit, BoolLit, CallExpr, BinaryExpr, TernaryExpr]


# ── Parameters ──────────────────────────────────────────────────


@dataclass(frozen=True)
class BindingPattern:
    name: str
    span: Span


@dataclass(frozen=True)
class LiteralPattern:
    literal: Literal
    span: Span


Pattern = Union[BindingPattern, LiteralPattern]


# ── Top level ───────────────────────────────────────────────────


@dataclass(frozen=True)
class SignatureDecl:
    name: str
    arg_types: list[VariableType]
    return_type: VariableType
    span: Span


@dataclass(frozen=True)
class FunctionClause:
    name: str
    params: list[Pattern]
    body: Expr
    span: Span

    @property
    def is_catch_all(self) -> bool:
        return not any(isinstance(p, LiteralPattern) for p in self.params)


Line = Union[SignatureDecl, FunctionClause]


@dataclass(frozen=True)
class Program:
    lines: list[Line]
    filename: str = "<stdin>"

    @property
    def clauses(self) -> list[FunctionClause]:
        return [line for line in self.lines if isinstance(line, FunctionClause)]

    @property
    def signatures(self) -> list[SignatureDecl]:
        return [line for line in self.lines if isinstance(line, SignatureDecl)]
