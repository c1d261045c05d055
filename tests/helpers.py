"""Shared test helpers for the muru compiler test suite."""

from __future__ import annotations

from muru.builder import CompileOutput, compile_source
from muru.errors import CompileError, Diagnostic, MuruError


def compile_ok(source: str) -> CompileOutput:
    """Compile source, asserting no errors. Returns the compile output."""
    try:
        return compile_source(source, "<test>")
    except CompileError as e:
        raise AssertionError(
            f"Unexpected errors: {[f'{d.code}: {d.message}' for d in e.diagnostics]}"
        ) from e
    except MuruError as e:
        raise AssertionError(f"Unexpected error {e.code}: {e.message}") from e


def compile_fails(source: str, error_code: str) -> list[Diagnostic]:
    """Compile source, asserting it aborts with the given error code."""
    try:
        compile_source(source, "<test>")
    except CompileError as e:
        diagnostics = e.diagnostics
    except MuruError as e:
        diagnostics = [e.to_diagnostic()]
    else:
        raise AssertionError(f"Expected error {error_code} but compilation succeeded")
    matching = [d for d in diagnostics if d.code == error_code]
    assert matching, (
        f"Expected error {error_code} but got: "
        f"{[f'{d.code}: {d.message}' for d in diagnostics]}"
    )
    return matching


def compile_warns(source: str, warning_code: str) -> list[Diagnostic]:
    """Compile source, asserting the given warning code appears."""
    output = compile_ok(source)
    matching = [d for d in output.diagnostics if d.code == warning_code]
    assert matching, (
        f"Expected warning {warning_code} but got: "
        f"{[f'{d.code}: {d.message}' for d in output.diagnostics] or 'no diagnostics'}"
    )
    return matching
