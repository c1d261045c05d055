"""Lowering of validated expressions into IR instructions."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from muru.ast_nodes import (
    BinaryExpr,
    BoolLit,
    CallExpr,
    Expr,
    FloatLit,
    IntLit,
    Literal,
    Operator,
    TernaryExpr,
    literal_text,
    literal_type,
)
from muru.errors import FunctionNotFoundError
from muru.ir import Node, dollar, sx
from muru.symbols import SignatureTable
from muru.types import BOOL, INT, VariableType


@dataclass(frozen=True)
class Slot:
    """A positional argument visible to a clause body."""

    index: int
    type: VariableType


def const(lit: Literal) -> Node:
    """``(i32.const 5)``, ``(f32.const 1.5)``; booleans are i32 0 / 1."""
    return sx(f"{literal_type(lit).machine_tag}.const", literal_text(lit))


def instruction(op: Operator, operand_type: VariableType) -> str:
    """The instruction name for *op* applied to two operands of *operand_type*.

    Arithmetic results share the operand type; comparisons are tagged with
    what they compare, which only differs from the result for floats.
    """
    mnemonic = op.mnemonic
    if op is Operator.DIVIDE and operand_type is INT:
        mnemonic = "div_s"
    return f"{operand_type.machine_tag}.{mnemonic}"


class ExprLowerer:
    """Lowers the body expressions of one clause.

    *slots* maps bound parameter names to their argument positions; every
    other name is a call to a global resolved through *signatures*.
    """

    def __init__(self, signatures: SignatureTable, slots: Mapping[str, Slot]) -> None:
        self.signatures = signatures
        self.slots = slots

    def type_of(self, expr: Expr) -> VariableType:
        """The validated type of *expr*, recomputed from slots and signatures."""
        if isinstance(expr, (IntLit, FloatLit, BoolLit)):
            return literal_type(expr)
        if isinstance(expr, CallExpr):
            slot = self.slots.get(expr.name)
            if slot is not None:
                return slot.type
            sig = self.signatures.lookup(expr.name)
            if sig is None:
                raise FunctionNotFoundError(expr.name, expr.span)
            return sig.return_type
        if isinstance(expr, BinaryExpr):
            return self.type_of(expr.left) if expr.op.is_arithmetic else BOOL
        if isinstance(expr, TernaryExpr):
            return self.type_of(expr.then_branch)
        raise TypeError(f"unknown expression node {type(expr).__name__}")

    def lower(self, expr: Expr, return_type: VariableType) -> Node:
        """Lower *expr*, whose validated type is *return_type*."""
        if isinstance(expr, (IntLit, FloatLit, BoolLit)):
            return const(expr)

        if isinstance(expr, CallExpr):
            slot = self.slots.get(expr.name)
            if slot is not None:
                return sx("local.get", slot.index)
            args = [self.lower(arg, self.type_of(arg)) for arg in expr.args]
            return sx("call", dollar(expr.name), *args)

        if isinstance(expr, BinaryExpr):
            operand_type = self.type_of(expr.left)
            return sx(
                instruction(expr.op, operand_type),
                self.lower(expr.left, operand_type),
                self.lower(expr.right, operand_type),
            )

        if isinstance(expr, TernaryExpr):
            return sx(
                "if", sx("result", return_type.machine_tag),
                self.lower(expr.condition, BOOL),
                sx("then", self.lower(expr.then_branch, return_type)),
                sx("else", self.lower(expr.else_branch, return_type)),
            )

        raise TypeError(f"unknown expression node {type(expr).__name__}")
