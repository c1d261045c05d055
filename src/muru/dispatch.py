"""Compiles the clauses sharing one name into a single function.

Clauses are tried in declaration order. A clause with literal parameters
becomes a guarded branch; the first clause without literal parameters is
the catch-all and ends the search. For

    f 5 = 50
    f 7 = 70
    f n = n

the body is ``(if (result i32) guard5 (then 50) (else (if ... guard7 ...)))``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from muru.ast_nodes import BindingPattern, FunctionClause, LiteralPattern, literal_type
from muru.codegen import ExprLowerer, Slot, const
from muru.errors import Diagnostic, DispatchCoverageError, FunctionNotFoundError, warning
from muru.ir import Atom, List, Node, dollar, sx
from muru.source import Span
from muru.symbols import SignatureTable
from muru.types import FunctionSignature

log = logging.getLogger(__name__)


def clause_guard(clause: FunctionClause) -> Node | None:
    """AND of ``arg_i == literal`` over the literal parameters, or None."""
    tests: list[Node] = []
    for index, param in enumerate(clause.params):
        if isinstance(param, LiteralPattern):
            tag = literal_type(param.literal).machine_tag
            tests.append(sx(f"{tag}.eq", sx("local.get", index), const(param.literal)))
    if not tests:
        return None
    guard = tests[-1]
    for test in reversed(tests[:-1]):
        guard = sx("i32.and", test, guard)
    return guard


def clause_slots(clause: FunctionClause, signature: FunctionSignature) -> dict[str, Slot]:
    """Bound parameters by name; literal parameters keep their position but no name."""
    return {
        param.name: Slot(index, signature.arg_types[index])
        for index, param in enumerate(clause.params)
        if isinstance(param, BindingPattern)
    }


class DispatchCompiler:
    """Builds one ``func`` node per function name."""

    def __init__(self, signatures: SignatureTable) -> None:
        self.signatures = signatures
        self.diagnostics: list[Diagnostic] = []

    def compile(
        self, name: str, clauses: Sequence[FunctionClause], span: Span | None = None,
    ) -> Node:
        """Emit *name*; *span* locates the declaration when there are no clauses."""
        signature = self.signatures.lookup(name)
        if signature is None:
            raise FunctionNotFoundError(name)

        body = self.compile_body(name, clauses, signature, span)

        items: list[Node] = [Atom("func"), dollar(name)]
        if signature.arg_types:
            items.append(sx("param", *(t.machine_tag for t in signature.arg_types)))
        items.append(sx("result", signature.return_type.machine_tag))
        items.append(body)
        return List(tuple(items))

    def compile_body(
        self,
        name: str,
        clauses: Sequence[FunctionClause],
        signature: FunctionSignature,
        span: Span | None = None,
    ) -> Node:
        guarded: list[tuple[FunctionClause, Node]] = []
        catch_all: FunctionClause | None = None
        for position, clause in enumerate(clauses):
            if clause.is_catch_all:
                catch_all = clause
                self._report_unreachable(name, clauses[position + 1:])
                break
            guarded.append((clause, clause_guard(clause)))

        if catch_all is None:
            raise DispatchCoverageError(name, clauses[-1].span if clauses else span)

        result_tag = signature.return_type.machine_tag
        body = self._lower_clause(catch_all, signature)
        for clause, guard in reversed(guarded):
            body = sx(
                "if", sx("result", result_tag), guard,
                sx("then", self._lower_clause(clause, signature)),
                sx("else", body),
            )
        log.debug("%s: %d guarded clause(s) before the catch-all", name, len(guarded))
        return body

    def _lower_clause(self, clause: FunctionClause, signature: FunctionSignature) -> Node:
        lowerer = ExprLowerer(self.signatures, clause_slots(clause, signature))
        return lowerer.lower(clause.body, signature.return_type)

    def _report_unreachable(self, name: str, dropped: Sequence[FunctionClause]) -> None:
        for clause in dropped:
            log.info("unreachable clause of '%s' at %s", name, clause.span)
            self.diagnostics.append(
                warning("W301", f"unreachable clause of '{name}'", clause.span)
            )
