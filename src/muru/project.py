"""Project scaffolding for `muru new`."""

from __future__ import annotations

from pathlib import Path

_MURU_TOML_TEMPLATE = """\
[package]
name = "{name}"
version = "0.1.0"
authors = []

[build]
output_dir = "build"
indent = 4
emit_text = false

[tools]
wat2wasm = "wat2wasm"
wasmtime = "wasmtime"
"""

_MAIN_MURU_TEMPLATE = """\
# Prints the 10th Fibonacci number.
fib :: int -> int
fib 0 = 0
fib 1 = 1
fib n = fib (n - 1) + fib (n - 2)

main = fib 10
"""

_GITIGNORE = """\
build/
__pycache__/
"""

_README_TEMPLATE = """\
# {name}

A muru project.

## Build

```bash
muru build src/main.muru
```

## Run

```bash
muru run src/main.muru
```
"""


def scaffold(name: str, parent: Path | None = None) -> Path:
    """Create a new muru project directory. Returns the project path."""
    base = parent or Path.cwd()
    project_dir = base / name

    if project_dir.exists():
        raise FileExistsError(f"Directory '{name}' already exists")

    src_dir = project_dir / "src"
    src_dir.mkdir(parents=True)

    (project_dir / "muru.toml").write_text(_MURU_TOML_TEMPLATE.format(name=name))
    (src_dir / "main.muru").write_text(_MAIN_MURU_TEMPLATE)
    (project_dir / ".gitignore").write_text(_GITIGNORE)
    (project_dir / "README.md").write_text(_README_TEMPLATE.format(name=name))

    return project_dir
