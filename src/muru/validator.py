"""Type inference and checking across a whole muru program.

Parameters carry no type annotations, so a function's signature is inferred
from its first call: argument types flow in from the call site, every clause
is checked against them, and the agreed return type is memoized in the
signature table. Later calls must match the memo exactly. Validation starts
from ``main`` and from every function with a declared signature.

Recursion needs an anchor: a call to a function whose body is still being
inferred is only allowed when that function has a declared signature.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from muru.ast_nodes import (
    BinaryExpr,
    BindingPattern,
    BoolLit,
    CallExpr,
    Expr,
    FloatLit,
    FunctionClause,
    IntLit,
    LiteralPattern,
    Program,
    SignatureDecl,
    TernaryExpr,
    literal_type,
)
from muru.errors import (
    ArgumentError,
    Diagnostic,
    FunctionAlreadyDefinedError,
    FunctionNotFoundError,
    NoFunctionMatchesError,
    OperatorArgumentError,
    TypeMismatchError,
    UntypedFunctionError,
    warning,
)
from muru.runtime import RESERVED_NAMES, runtime_signatures
from muru.source import Span
from muru.symbols import SignatureTable
from muru.types import BOOL, INT, FunctionSignature, VariableType

log = logging.getLogger(__name__)

ENTRY_POINT = "main"


class Validator:
    """Infers and checks the signatures of one program.

    One instance holds the mutable state of one compilation: the signature
    table, the set of validated names, and the names currently being
    inferred.
    """

    def __init__(self, externals: Mapping[str, FunctionSignature] | None = None) -> None:
        self.globals: dict[str, list[FunctionClause]] = {}
        self.signatures = SignatureTable()
        self.validated: set[str] = set()
        self.diagnostics: list[Diagnostic] = []
        self._externals = dict(runtime_signatures() if externals is None else externals)
        self._declared: dict[str, SignatureDecl] = {}
        self._in_progress: list[str] = []

    # ── Public API ──────────────────────────────────────────────

    def validate(self, program: Program) -> SignatureTable:
        """Validate *program*, raising the first error found.

        Returns the signature table; warnings are left in self.diagnostics.
        """
        self._register_externals()
        self._register_program(program)

        main_type = self._validate_entry_point()
        log.debug("%s returns %s", ENTRY_POINT, main_type)

        for name, decl in self._declared.items():
            if name not in self.validated:
                sig = self.signatures.lookup(name)
                self.validate_call(name, list(sig.arg_types), decl.span)

        self._check_unused()
        return self.signatures

    def validate_call(
        self, name: str, arg_types: Sequence[VariableType], span: Span | None = None,
    ) -> VariableType:
        """Check every clause of global *name* against *arg_types*; return the result type."""
        sig = self.signatures.lookup(name)

        if name in self.validated:
            self._check_against(name, sig, arg_types, span)
            return sig.return_type

        if name in self._in_progress:
            if sig is None:
                raise UntypedFunctionError(name, span)
            self._check_against(name, sig, arg_types, span)
            return sig.return_type

        if sig is not None:
            self._check_against(name, sig, arg_types, span)

        clauses = self.globals.get(name, [])
        self._in_progress.append(name)
        try:
            return_types = [self.validate_clause(c, arg_types) for c in clauses]
        finally:
            self._in_progress.pop()

        if not return_types:
            if sig is None:
                raise NoFunctionMatchesError(name, span)
            return sig.return_type

        first = return_types[0]
        for clause, return_type in zip(clauses[1:], return_types[1:]):
            if return_type != first:
                raise TypeMismatchError(first, return_type, clause.span)

        if sig is None:
            self.signatures.define(name, FunctionSignature(tuple(arg_types), first))
            log.debug("inferred %s :: %s", name, self.signatures.lookup(name))
        elif sig.return_type != first:
            raise TypeMismatchError(sig.return_type, first, clauses[0].span)

        self.validated.add(name)
        return first

    def validate_clause(
        self, clause: FunctionClause, arg_types: Sequence[VariableType],
    ) -> VariableType:
        """Type one clause body with its parameters bound to *arg_types*."""
        if len(clause.params) != len(arg_types):
            raise ArgumentError(clause.name, len(clause.params), len(arg_types), clause.span)

        local_types: dict[str, VariableType] = {}
        for param, arg_type in zip(clause.params, arg_types):
            if isinstance(param, LiteralPattern):
                pattern_type = literal_type(param.literal)
                if pattern_type != arg_type:
                    raise TypeMismatchError(arg_type, pattern_type, param.span)
            elif isinstance(param, BindingPattern):
                local_types[param.name] = arg_type

        return self.infer_expr(clause.body, local_types)

    def infer_expr(self, expr: Expr, local_types: Mapping[str, VariableType]) -> VariableType:
        """Infer the type of an expression."""
        if isinstance(expr, (IntLit, FloatLit, BoolLit)):
            return literal_type(expr)
        if isinstance(expr, CallExpr):
            return self._infer_call(expr, local_types)
        if isinstance(expr, BinaryExpr):
            return self._infer_binary(expr, local_types)
        if isinstance(expr, TernaryExpr):
            return self._infer_ternary(expr, local_types)
        raise TypeError(f"unknown expression node {type(expr).__name__}")

    # ── Registration ────────────────────────────────────────────

    def _register_externals(self) -> None:
        for name, sig in self._externals.items():
            self.signatures.define(name, sig)
            self.globals[name] = []

    def _is_reserved(self, name: str) -> bool:
        return name in self._externals or name in RESERVED_NAMES

    def _register_program(self, program: Program) -> None:
        for decl in program.signatures:
            if self._is_reserved(decl.name) or decl.name in self._declared:
                raise FunctionAlreadyDefinedError(decl.name, decl.span)
            self.signatures.define(
                decl.name,
                FunctionSignature(tuple(decl.arg_types), decl.return_type),
                decl.span,
            )
            self._declared[decl.name] = decl
            self.globals.setdefault(decl.name, [])

        for clause in program.clauses:
            if self._is_reserved(clause.name):
                raise FunctionAlreadyDefinedError(clause.name, clause.span)
            self.globals.setdefault(clause.name, []).append(clause)

    # ── Checks ──────────────────────────────────────────────────

    def _validate_entry_point(self) -> VariableType:
        if ENTRY_POINT not in self.globals or ENTRY_POINT in self._externals:
            raise FunctionNotFoundError(ENTRY_POINT)
        decl = self._declared.get(ENTRY_POINT)
        span = decl.span if decl is not None else self.globals[ENTRY_POINT][0].span
        return_type = self.validate_call(ENTRY_POINT, [], span)
        if return_type != INT:
            raise TypeMismatchError(INT, return_type, span)
        return return_type

    def _check_against(
        self,
        name: str,
        sig: FunctionSignature,
        arg_types: Sequence[VariableType],
        span: Span | None,
    ) -> None:
        if len(sig.arg_types) != len(arg_types):
            raise ArgumentError(name, len(sig.arg_types), len(arg_types), span)
        for expected, got in zip(sig.arg_types, arg_types):
            if expected != got:
                raise TypeMismatchError(expected, got, span)

    def _check_unused(self) -> None:
        """Warn about functions that never received a signature (W300)."""
        for name, clauses in self.globals.items():
            if name in self.signatures or not clauses:
                continue
            log.info("function '%s' is never used", name)
            self.diagnostics.append(
                warning("W300", f"function '{name}' is never used", clauses[0].span)
            )

    # ── Expression typing ───────────────────────────────────────

    def _infer_call(self, expr: CallExpr, local_types: Mapping[str, VariableType]) -> VariableType:
        arg_types = [self.infer_expr(a, local_types) for a in expr.args]

        local = local_types.get(expr.name)
        if local is not None:
            if arg_types:
                raise ArgumentError(expr.name, 0, len(arg_types), expr.span)
            return local

        if expr.name not in self.globals:
            raise FunctionNotFoundError(expr.name, expr.span)
        return self.validate_call(expr.name, arg_types, expr.span)

    def _infer_binary(
        self, expr: BinaryExpr, local_types: Mapping[str, VariableType],
    ) -> VariableType:
        left = self.infer_expr(expr.left, local_types)
        right = self.infer_expr(expr.right, local_types)
        if left != right:
            raise TypeMismatchError(left, right, expr.span)
        if not expr.op.is_arithmetic:
            return BOOL
        if left == BOOL:
            raise OperatorArgumentError(expr.op, left, expr.span)
        return left

    def _infer_ternary(
        self, expr: TernaryExpr, local_types: Mapping[str, VariableType],
    ) -> VariableType:
        condition = self.infer_expr(expr.condition, local_types)
        if condition != BOOL:
            raise TypeMismatchError(BOOL, condition, expr.condition.span)
        then_type = self.infer_expr(expr.then_branch, local_types)
        else_type = self.infer_expr(expr.else_branch, local_types)
        if then_type != else_type:
            raise TypeMismatchError(then_type, else_type, expr.else_branch.span)
        return then_type
