"""Diagnostics, their Rust-style rendering, and the compile error taxonomy."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from muru.ast_nodes import Operator
    from muru.source import Span
    from muru.types import VariableType


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


# ANSI color codes
_COLORS = {
    Severity.ERROR: "\033[1;31m",    # bold red
    Severity.WARNING: "\033[1;33m",  # bold yellow
    Severity.NOTE: "\033[1;36m",     # bold cyan
}
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"


@dataclass(frozen=True)
class DiagnosticLabel:
    """Points to a specific source location."""

    span: Span
    message: str
    style: str = "primary"  # "primary" or "secondary"


@dataclass
class Diagnostic:
    """A single diagnostic message with optional labels and notes."""

    severity: Severity
    code: str
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)


class DiagnosticRenderer:
    """Renders diagnostics in Rust-style format with colors."""

    def __init__(self, *, color: bool = True, sources: dict[str, str] | None = None) -> None:
        self.color = color
        self._file_cache: dict[str, list[str]] = {
            name: text.splitlines() for name, text in (sources or {}).items()
        }

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def _get_source_line(self, filename: str, line_num: int) -> str | None:
        """Load and cache source file, return the 1-indexed line."""
        if filename not in self._file_cache:
            try:
                path = Path(filename)
                if path.is_file():
                    self._file_cache[filename] = path.read_text().splitlines()
                else:
                    self._file_cache[filename] = []
            except OSError:
                self._file_cache[filename] = []
        lines = self._file_cache[filename]
        if 1 <= line_num <= len(lines):
            return lines[line_num - 1]
        return None

    def render(self, diag: Diagnostic) -> str:
        lines: list[str] = []
        sev = diag.severity
        color = _COLORS[sev]

        # Header: error[E300]: message
        lines.append(
            f"{self._c(color)}{sev.value}[{diag.code}]{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        )

        for label in diag.labels:
            span = label.span
            lines.append(f"  {self._c(_BLUE)}-->{self._c(_RESET)} {span}")
            gutter = f"{span.start_line:>4}"
            lines.append(f"  {self._c(_BLUE)}   |{self._c(_RESET)}")

            source_line = self._get_source_line(span.file, span.start_line)
            if source_line is not None:
                lines.append(
                    f"  {self._c(_BLUE)}{gutter} |{self._c(_RESET)} {source_line}"
                )
                if span.start_line == span.end_line:
                    caret_len = max(1, span.end_col - span.start_col + 1)
                    padding = " " * max(0, span.start_col - 1)
                    carets = "^" * caret_len
                    lines.append(
                        f"  {self._c(_BLUE)}   |{self._c(_RESET)} "
                        f"{padding}{self._c(color)}{carets}{self._c(_RESET)}"
                    )

            if label.message:
                lines.append(
                    f"  {self._c(_BLUE)}   |{self._c(_RESET)}   "
                    f"{self._c(color)}{label.message}{self._c(_RESET)}"
                )

        for note in diag.notes:
            lines.append(f"  {self._c(_BLUE)}={self._c(_RESET)} note: {note}")

        return "\n".join(lines)


class CompileError(Exception):
    """Batch compilation error carrying multiple diagnostics."""

    def __init__(self, diagnostics: list[Diagnostic]) -> None:
        self.diagnostics = diagnostics
        messages = [d.message for d in diagnostics]
        super().__init__(f"{len(diagnostics)} error(s): {'; '.join(messages)}")


def warning(code: str, message: str, span: Span | None = None) -> Diagnostic:
    """Build a warning diagnostic, optionally pointing at *span*."""
    labels = [DiagnosticLabel(span=span, message="")] if span is not None else []
    return Diagnostic(severity=Severity.WARNING, code=code, message=message, labels=labels)


# ── Compile error taxonomy ──────────────────────────────────────


class MuruError(Exception):
    """Base class for errors that abort a compilation."""

    code = "E000"

    def __init__(self, message: str, span: Span | None = None) -> None:
        self.message = message
        self.span = span
        super().__init__(message)

    def to_diagnostic(self) -> Diagnostic:
        labels = []
        if self.span is not None:
            labels.append(DiagnosticLabel(span=self.span, message=""))
        return Diagnostic(
            severity=Severity.ERROR, code=self.code, message=self.message, labels=labels,
        )


class TypeMismatchError(MuruError):
    code = "E300"

    def __init__(self, expected: VariableType, got: VariableType, span: Span | None = None) -> None:
        self.expected = expected
        self.got = got
        super().__init__(f"type mismatch: expected '{expected}', got '{got}'", span)


class OperatorArgumentError(MuruError):
    code = "E301"

    def __init__(
        self, operator: Operator, argument_type: VariableType, span: Span | None = None,
    ) -> None:
        self.operator = operator
        self.argument_type = argument_type
        super().__init__(
            f"no implementation of '{operator.mnemonic}' for '{argument_type}'", span,
        )


class ArgumentError(MuruError):
    code = "E302"

    def __init__(
        self, function_name: str, expected: int, actual: int, span: Span | None = None,
    ) -> None:
        self.function_name = function_name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"wrong number of arguments to '{function_name}': "
            f"expected {expected}, got {actual}",
            span,
        )


class FunctionAlreadyDefinedError(MuruError):
    code = "E303"

    def __init__(self, name: str, span: Span | None = None) -> None:
        self.name = name
        super().__init__(f"function '{name}' already has a signature", span)


class FunctionNotFoundError(MuruError):
    code = "E310"

    def __init__(self, name: str, span: Span | None = None) -> None:
        self.name = name
        super().__init__(f"undefined function '{name}'", span)


class NoFunctionMatchesError(MuruError):
    code = "E311"

    def __init__(self, name: str, span: Span | None = None) -> None:
        self.name = name
        super().__init__(f"no clause of '{name}' produced a type", span)


class UntypedFunctionError(MuruError):
    code = "E312"

    def __init__(self, name: str, span: Span | None = None) -> None:
        self.name = name
        super().__init__(
            f"could not determine type for recursive function '{name}'; "
            f"declare its signature",
            span,
        )


class DispatchCoverageError(MuruError):
    code = "E320"

    def __init__(self, name: str, span: Span | None = None) -> None:
        self.name = name
        super().__init__(
            f"not all cases covered for '{name}': add a clause without literal patterns",
            span,
        )
