"""Tests for the muru parser."""

from __future__ import annotations

import pytest

from muru.ast_nodes import (
    BinaryExpr,
    BindingPattern,
    BoolLit,
    CallExpr,
    FloatLit,
    FunctionClause,
    IntLit,
    LiteralPattern,
    Operator,
    SignatureDecl,
    TernaryExpr,
)
from muru.errors import CompileError
from muru.parser import parse
from muru.types import BOOL, FLOAT, INT


def parse_line(source: str):
    program = parse(source, "<test>")
    assert len(program.lines) == 1
    return program.lines[0]


def parse_errors(source: str) -> list:
    with pytest.raises(CompileError) as exc_info:
        parse(source, "<test>")
    return exc_info.value.diagnostics


class TestSignatures:
    def test_unary_function(self):
        decl = parse_line("fact :: int -> int")
        assert isinstance(decl, SignatureDecl)
        assert decl.name == "fact"
        assert decl.arg_types == [INT]
        assert decl.return_type == INT

    def test_constant_signature(self):
        decl = parse_line("main :: int")
        assert decl.arg_types == []
        assert decl.return_type == INT

    def test_mixed_types(self):
        decl = parse_line("scale :: float -> bool -> float")
        assert decl.arg_types == [FLOAT, BOOL]
        assert decl.return_type == FLOAT

    def test_unknown_type_rejected(self):
        diags = parse_errors("f :: int -> string\n")
        assert diags[0].code == "E200"


class TestClauses:
    def test_constant_clause(self):
        clause = parse_line("main = 42")
        assert isinstance(clause, FunctionClause)
        assert clause.name == "main"
        assert clause.params == []
        assert isinstance(clause.body, IntLit)
        assert clause.body.value == 42

    def test_binding_and_literal_patterns(self):
        clause = parse_line("pick 0 n = n")
        first, second = clause.params
        assert isinstance(first, LiteralPattern)
        assert first.literal.value == 0
        assert isinstance(second, BindingPattern)
        assert second.name == "n"
        assert not clause.is_catch_all

    def test_catch_all(self):
        assert parse_line("f n = n").is_catch_all

    def test_negative_literal_pattern(self):
        clause = parse_line("sign -1 = 0")
        assert clause.params[0].literal.value == -1

    def test_bool_and_float_patterns(self):
        clause = parse_line("g true 1.5 = 0")
        assert isinstance(clause.params[0].literal, BoolLit)
        assert clause.params[0].literal.value is True
        assert isinstance(clause.params[1].literal, FloatLit)
        assert clause.params[1].literal.value == "1.5"

    def test_clause_span_covers_body(self):
        clause = parse_line("main = 1 + 3")
        assert clause.span.start_col == 1
        assert clause.span.end_col == 12


class TestExpressions:
    def test_binary(self):
        body = parse_line("f n = n * 2").body
        assert isinstance(body, BinaryExpr)
        assert body.op == Operator.MULTIPLY
        assert body.left == CallExpr("n", [], body.left.span)
        assert isinstance(body.right, IntLit)

    def test_comparison(self):
        body = parse_line("f n = n != 0").body
        assert body.op == Operator.NEQ

    def test_call_arguments(self):
        body = parse_line("main = add 1 (neg 2) y").body
        assert isinstance(body, CallExpr)
        assert body.name == "add"
        one, neg, y = body.args
        assert isinstance(one, IntLit)
        assert isinstance(neg, CallExpr) and neg.name == "neg"
        assert isinstance(neg.args[0], IntLit)
        assert isinstance(y, CallExpr) and y.name == "y" and y.args == []

    def test_call_then_operator(self):
        body = parse_line("f n = f (n - 1) + f (n - 2)").body
        assert isinstance(body, BinaryExpr)
        assert body.op == Operator.ADD
        assert isinstance(body.left, CallExpr) and len(body.left.args) == 1
        assert isinstance(body.left.args[0], BinaryExpr)

    def test_ternary(self):
        body = parse_line("f n = (n == 0) ? 1 : 2").body
        assert isinstance(body, TernaryExpr)
        assert isinstance(body.condition, BinaryExpr)
        assert body.condition.op == Operator.EQ
        assert isinstance(body.then_branch, IntLit)
        assert isinstance(body.else_branch, IntLit)

    def test_operators_do_not_chain(self):
        diags = parse_errors("f n = n + 1 + 2\n")
        assert diags[0].code == "E200"

    def test_unparenthesized_ternary_condition_rejected(self):
        diags = parse_errors("f n = n == 0 ? 1 : 2\n")
        assert diags[0].code == "E200"

    def test_body_continues_after_operator(self):
        program = parse("main =\n  1 +\n  2\n", "<test>")
        assert len(program.lines) == 1
        assert isinstance(program.lines[0].body, BinaryExpr)


class TestProgram:
    def test_lines_in_order(self):
        program = parse(
            "fact :: int -> int\n"
            "fact 0 = 1\n"
            "fact n = n * fact (n - 1)\n"
            "main = fact 5\n",
            "<test>",
        )
        assert [type(line).__name__ for line in program.lines] == [
            "SignatureDecl", "FunctionClause", "FunctionClause", "FunctionClause",
        ]
        assert [s.name for s in program.signatures] == ["fact"]
        assert [c.name for c in program.clauses] == ["fact", "fact", "main"]
        assert program.filename == "<test>"

    def test_missing_assign(self):
        diags = parse_errors("f x\n")
        assert diags[0].code == "E200"

    def test_errors_are_batched(self):
        diags = parse_errors("f = )\ng = )\nmain = 1\n")
        assert len(diags) == 2
        assert all(d.code == "E200" for d in diags)


class TestIntegerRange:
    def test_extremes_accepted(self):
        assert parse_line("main = 2147483647").body.value == 2147483647
        assert parse_line("main = -2147483648").body.value == -2147483648

    def test_too_large(self):
        diags = parse_errors("main = 99999999999\n")
        assert diags[0].code == "E200"
        assert "does not fit in 32 bits" in diags[0].message
        assert diags[0].labels[0].span.start_col == 8

    def test_too_small(self):
        assert parse_errors("main = -2147483649\n")[0].code == "E200"

    def test_out_of_range_pattern(self):
        assert parse_errors("f 4294967296 = 1\nmain = 1\n")[0].code == "E200"

    def test_non_ascii_digit_is_a_diagnostic(self):
        assert parse_errors("main = \u00b2\n")[0].code == "E100"
