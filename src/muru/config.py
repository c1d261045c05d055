"""TOML config loading for muru.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_NAME = "muru.toml"


@dataclass
class PackageConfig:
    name: str = "untitled"
    version: str = "0.0.0"
    authors: list[str] = field(default_factory=list)


@dataclass
class BuildConfig:
    output_dir: str = "build"
    indent: int = 4
    emit_text: bool = False


@dataclass
class ToolsConfig:
    wat2wasm: str = "wat2wasm"
    wasmtime: str = "wasmtime"


@dataclass
class MuruConfig:
    package: PackageConfig = field(default_factory=PackageConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    tools: ToolsConfig = field(default_factory=ToolsConfig)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find muru.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_NAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_NAME} found in any parent directory")
        path = parent


def load_config(path: Path) -> MuruConfig:
    """Parse a muru.toml file into a MuruConfig."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = MuruConfig()

    if "package" in data:
        pkg = data["package"]
        config.package = PackageConfig(
            name=pkg.get("name", "untitled"),
            version=pkg.get("version", "0.0.0"),
            authors=pkg.get("authors", []),
        )

    if "build" in data:
        bld = data["build"]
        config.build = BuildConfig(
            output_dir=bld.get("output_dir", "build"),
            indent=bld.get("indent", 4),
            emit_text=bld.get("emit_text", False),
        )

    if "tools" in data:
        tools = data["tools"]
        config.tools = ToolsConfig(
            wat2wasm=tools.get("wat2wasm", "wat2wasm"),
            wasmtime=tools.get("wasmtime", "wasmtime"),
        )

    return config


def config_for(source: Path) -> tuple[MuruConfig, Path | None]:
    """The config governing *source* and the file it came from; defaults if none."""
    try:
        path = find_config(source)
    except FileNotFoundError:
        return MuruConfig(), None
    return load_config(path), path
