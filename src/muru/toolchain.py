"""Invoke the WebAssembly tools: wat2wasm to assemble, wasmtime to run."""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60


class ToolchainError(Exception):
    """Raised when an external tool is missing or fails."""

    def __init__(self, message: str, stderr: str = "") -> None:
        self.stderr = stderr
        super().__init__(message)


@dataclass(frozen=True)
class RunResult:
    returncode: int
    stdout: str
    stderr: str


def find_tool(name: str) -> str | None:
    """Search PATH for *name*; returns the resolved path or None."""
    return shutil.which(name)


def _run(cmd: list[str], what: str, timeout: int) -> subprocess.CompletedProcess[str]:
    log.debug("running %s", " ".join(cmd))
    try:
        return subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except FileNotFoundError:
        raise ToolchainError(f"{what} '{cmd[0]}' not found")
    except subprocess.TimeoutExpired:
        raise ToolchainError(f"{what} timed out after {timeout}s")


def assemble(
    wat_file: Path,
    output: Path,
    *,
    wat2wasm: str = "wat2wasm",
    timeout: int = DEFAULT_TIMEOUT,
) -> Path:
    """Assemble a .wat file into a binary module.

    Returns the output path on success; raises ToolchainError on failure.
    """
    tool = find_tool(wat2wasm)
    if tool is None:
        raise ToolchainError(f"assembler '{wat2wasm}' not found (install wabt)")

    result = _run([tool, str(wat_file), "-o", str(output)], "assembler", timeout)
    if result.returncode != 0:
        raise ToolchainError(
            f"assembly failed (exit {result.returncode})", stderr=result.stderr,
        )
    return output


def run_module(
    wasm_file: Path,
    *,
    wasmtime: str = "wasmtime",
    timeout: int = DEFAULT_TIMEOUT,
) -> RunResult:
    """Execute a binary module and capture its output.

    A non-zero exit is reported in the result, not raised; a trap prints
    to stderr and exits non-zero.
    """
    tool = find_tool(wasmtime)
    if tool is None:
        raise ToolchainError(f"runtime '{wasmtime}' not found (install wasmtime)")

    result = _run([tool, str(wasm_file)], "runtime", timeout)
    return RunResult(result.returncode, result.stdout, result.stderr)
