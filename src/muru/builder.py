"""Full build pipeline: .muru source -> WebAssembly text -> binary module."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from muru.ast_nodes import Program
from muru.config import MuruConfig
from muru.errors import CompileError, Diagnostic, MuruError
from muru.ir import Node
from muru.parser import parse
from muru.symbols import SignatureTable
from muru.toolchain import ToolchainError, assemble
from muru.validator import Validator
from muru.wasm_emitter import WasmEmitter

log = logging.getLogger(__name__)

SOURCE_SUFFIX = ".muru"


@dataclass
class CompileOutput:
    """The module tree of one compilation plus its signatures and warnings."""

    program: Program
    module: Node
    signatures: SignatureTable
    diagnostics: list[Diagnostic] = field(default_factory=list)


@dataclass
class BuildResult:
    """Outcome of a build."""

    ok: bool
    output: Path | None = None
    wat: Path | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)
    tool_error: str | None = None


def compile_program(program: Program) -> CompileOutput:
    """Validate and emit *program*. Raises MuruError on the first error."""
    validator = Validator()
    signatures = validator.validate(program)
    emitter = WasmEmitter(program, signatures)
    module = emitter.emit()
    return CompileOutput(
        program=program,
        module=module,
        signatures=signatures,
        diagnostics=validator.diagnostics + emitter.diagnostics,
    )


def compile_source(text: str, filename: str = "<stdin>") -> CompileOutput:
    """Lex, parse, validate and emit *text*.

    Raises CompileError for syntax errors and MuruError for semantic ones.
    """
    log.debug("compiling %s (%d bytes)", filename, len(text))
    program = parse(text, filename)
    log.debug("parsed %d line(s)", len(program.lines))
    output = compile_program(program)
    if log.isEnabledFor(logging.DEBUG):
        log.debug("module:\n%s", output.module.to_pretty(4))
    return output


def error_diagnostics(exc: CompileError | MuruError) -> list[Diagnostic]:
    """The diagnostics an aborted compilation should report."""
    if isinstance(exc, CompileError):
        return list(exc.diagnostics)
    return [exc.to_diagnostic()]


def check_source(path: Path) -> BuildResult:
    """Compile *path* without assembling; reports diagnostics only."""
    try:
        compiled = compile_source(path.read_text(), str(path))
    except (CompileError, MuruError) as e:
        return BuildResult(ok=False, diagnostics=error_diagnostics(e))
    return BuildResult(ok=True, diagnostics=compiled.diagnostics)


def build_source(
    path: Path,
    config: MuruConfig,
    output: Path | None = None,
    *,
    root: Path | None = None,
    emit_text: bool | None = None,
) -> BuildResult:
    """Run the full pipeline for one source file.

    The binary goes to *output*, or ``<root>/<output_dir>/<stem>.wasm`` where
    *root* defaults to the source's directory. The text module is kept next
    to the binary when *emit_text* (or ``[build] emit_text``) is set.
    """
    try:
        compiled = compile_source(path.read_text(), str(path))
    except (CompileError, MuruError) as e:
        return BuildResult(ok=False, diagnostics=error_diagnostics(e))

    if emit_text is None:
        emit_text = config.build.emit_text
    if output is None:
        base = root if root is not None else path.parent
        output = base / config.build.output_dir / (path.stem + ".wasm")

    output.parent.mkdir(parents=True, exist_ok=True)
    wat_path = output.with_suffix(".wat")
    wat_path.write_text(compiled.module.to_pretty(config.build.indent) + "\n")
    log.info("wrote %s", wat_path)

    try:
        assemble(wat_path, output, wat2wasm=config.tools.wat2wasm)
    except ToolchainError as e:
        return BuildResult(
            ok=False, wat=wat_path, diagnostics=compiled.diagnostics,
            tool_error=f"{e}\n{e.stderr}" if e.stderr else str(e),
        )
    log.info("wrote %s", output)

    if not emit_text:
        wat_path.unlink()
    return BuildResult(
        ok=True, output=output, wat=wat_path if emit_text else None,
        diagnostics=compiled.diagnostics,
    )
