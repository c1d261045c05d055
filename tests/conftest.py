"""Shared pytest fixtures for the muru compiler test suite."""

from __future__ import annotations

import pytest

from muru.toolchain import find_tool


@pytest.fixture
def needs_wasm_tools():
    """Skip test if wat2wasm or wasmtime is not installed."""
    for tool in ("wat2wasm", "wasmtime"):
        if find_tool(tool) is None:
            pytest.skip(f"{tool} not available")
