"""muru compiler CLI."""

from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from muru import __version__
from muru.builder import (
    SOURCE_SUFFIX,
    BuildResult,
    build_source,
    check_source,
    compile_source,
    error_diagnostics,
)
from muru.config import MuruConfig, config_for
from muru.errors import CompileError, Diagnostic, DiagnosticRenderer, MuruError
from muru.log import LEVELS, configure
from muru.project import scaffold
from muru.toolchain import ToolchainError, run_module


def _log_level_option(func: Callable[..., Any]) -> Callable[..., Any]:
    return click.option(
        "--log-level",
        type=click.Choice(LEVELS, case_sensitive=False),
        default="warning",
        show_default=True,
        help="Verbosity of compiler logging on stderr.",
    )(func)


def _source_argument(func: Callable[..., Any]) -> Callable[..., Any]:
    return click.argument(
        "source", type=click.Path(exists=True, dir_okay=False, path_type=Path),
    )(func)


def _require_source(source: Path) -> None:
    if source.suffix != SOURCE_SUFFIX:
        click.echo(f"error: expected a {SOURCE_SUFFIX} file, got '{source}'", err=True)
        raise SystemExit(1)


def _load(source: Path) -> tuple[MuruConfig, Path]:
    """The config for *source* and the directory build paths are relative to."""
    config, config_path = config_for(source)
    root = config_path.parent if config_path is not None else source.parent
    return config, root


def _report(diagnostics: list[Diagnostic]) -> None:
    renderer = DiagnosticRenderer(color=True)
    for diag in diagnostics:
        click.echo(renderer.render(diag), err=True)


def _fail(result: BuildResult) -> None:
    if result.tool_error:
        click.echo(f"error: {result.tool_error}", err=True)
    raise SystemExit(1)


@click.group()
@click.version_option(__version__, prog_name="muru")
def main() -> None:
    """The muru compiler: multi-clause functions to WebAssembly."""


@main.command()
@_source_argument
@click.option(
    "-o", "--output", type=click.Path(dir_okay=False, path_type=Path), default=None,
    help="Path of the binary module.",
)
@click.option("--emit-text", is_flag=True, help="Keep the .wat text module.")
@_log_level_option
def build(source: Path, output: Path | None, emit_text: bool, log_level: str) -> None:
    """Compile a .muru file to a WebAssembly binary."""
    configure(log_level)
    _require_source(source)
    config, root = _load(source)

    result = build_source(
        source, config, output, root=root, emit_text=True if emit_text else None,
    )
    _report(result.diagnostics)
    if not result.ok:
        _fail(result)

    click.echo(f"built {source.name} -> {result.output}")
    if result.wat is not None:
        click.echo(f"wrote {result.wat}")


@main.command()
@_source_argument
@_log_level_option
def run(source: Path, log_level: str) -> None:
    """Build a .muru file and execute it with wasmtime."""
    configure(log_level)
    _require_source(source)
    config, _ = _load(source)

    with tempfile.TemporaryDirectory(prefix="muru-") as tmp:
        output = Path(tmp) / (source.stem + ".wasm")
        result = build_source(source, config, output, emit_text=False)
        _report(result.diagnostics)
        if not result.ok:
            _fail(result)

        try:
            outcome = run_module(output, wasmtime=config.tools.wasmtime)
        except ToolchainError as e:
            click.echo(f"error: {e}", err=True)
            raise SystemExit(1)

    click.echo(outcome.stdout, nl=False)
    if outcome.stderr:
        click.echo(outcome.stderr, err=True, nl=False)
    if outcome.returncode != 0:
        raise SystemExit(outcome.returncode)


@main.command()
@_source_argument
@_log_level_option
def check(source: Path, log_level: str) -> None:
    """Type-check a .muru file without assembling it."""
    configure(log_level)
    _require_source(source)

    result = check_source(source)
    _report(result.diagnostics)
    if not result.ok:
        _fail(result)
    click.echo(f"checked {source.name}: no errors")


@main.command()
@_source_argument
@click.option("--indent", type=click.IntRange(min=0), default=None, help="Indent width; 0 prints one line.")
@click.option("--ast", "show_ast", is_flag=True, help="Dump the syntax tree instead.")
@click.option("--color", is_flag=True, help="Highlight the output.")
@_log_level_option
def view(source: Path, indent: int | None, show_ast: bool, color: bool, log_level: str) -> None:
    """Print the WebAssembly text of a .muru file."""
    configure(log_level)
    _require_source(source)
    config, _ = _load(source)

    try:
        compiled = compile_source(source.read_text(), str(source))
    except (CompileError, MuruError) as e:
        _report(error_diagnostics(e))
        raise SystemExit(1)

    if show_ast:
        for line in compiled.program.lines:
            _dump_ast(line, 0)
        return

    text = compiled.module.to_pretty(config.build.indent if indent is None else indent)
    if color:
        from muru.highlight import highlight_wat

        click.echo(highlight_wat(text), nl=False)
    else:
        click.echo(text)


@main.command()
@click.argument("name")
def new(name: str) -> None:
    """Create a new muru project."""
    try:
        project_dir = scaffold(name)
        click.echo(f"created project '{name}' at {project_dir}")
    except FileExistsError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)


def _dump_ast(node: object, depth: int) -> None:
    """Print a readable AST dump."""
    indent = "  " * depth
    name = type(node).__name__

    if hasattr(node, "__dataclass_fields__"):
        fields = node.__dataclass_fields__  # type: ignore[union-attr]
        click.echo(f"{indent}{name}")
        for field_name in fields:
            if field_name == "span":
                continue
            value = getattr(node, field_name)
            if isinstance(value, list):
                if value:
                    click.echo(f"{indent}  {field_name}:")
                    for item in value:
                        _dump_ast(item, depth + 2)
                else:
                    click.echo(f"{indent}  {field_name}: []")
            elif hasattr(value, "__dataclass_fields__"):
                click.echo(f"{indent}  {field_name}:")
                _dump_ast(value, depth + 2)
            elif value is not None:
                click.echo(f"{indent}  {field_name}: {value!r}")
    else:
        click.echo(f"{indent}{name}: {node!r}")
