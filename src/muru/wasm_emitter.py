"""Assembles a validated program into one WebAssembly text module."""

from __future__ import annotations

import logging

from muru.ast_nodes import FunctionClause, Program
from muru.dispatch import DispatchCompiler
from muru.errors import Diagnostic
from muru.ir import Node, quote, sx
from muru.source import Span
from muru.runtime import RUNTIME_FUNCTIONS, entry_point, fd_write_import
from muru.symbols import SignatureTable

log = logging.getLogger(__name__)


class WasmEmitter:
    """Emits the module for a program whose signatures are already resolved.

    Only names that received a signature during validation are emitted, in
    order of first appearance; runtime functions follow the user's.
    """

    def __init__(self, program: Program, signatures: SignatureTable) -> None:
        self.program = program
        self.signatures = signatures
        self.diagnostics: list[Diagnostic] = []

    def emit(self) -> Node:
        module = sx(
            "module",
            fd_write_import(),
            sx("export", quote("memory"), sx("memory", 0)),
            sx("memory", 1),
            entry_point(),
        )

        dispatcher = DispatchCompiler(self.signatures)
        for name, (span, clauses) in self._functions().items():
            if name not in self.signatures:
                log.debug("skipping unused function %s", name)
                continue
            module = module.extend(dispatcher.compile(name, clauses, span))
        self.diagnostics.extend(dispatcher.diagnostics)

        for fn in RUNTIME_FUNCTIONS:
            module = module.extend(fn.func)
        return module

    def _functions(self) -> dict[str, tuple[Span, list[FunctionClause]]]:
        """Clauses by name, with the span of the first line naming each."""
        functions: dict[str, tuple[Span, list[FunctionClause]]] = {}
        for line in self.program.lines:
            _, clauses = functions.setdefault(line.name, (line.span, []))
            if isinstance(line, FunctionClause):
                clauses.append(line)
        return functions
