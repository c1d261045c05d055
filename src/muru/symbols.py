"""Signature table: the write-once memo of function types for one compilation."""

from __future__ import annotations

from muru.errors import FunctionAlreadyDefinedError
from muru.source import Span
from muru.types import FunctionSignature


class SignatureTable:
    """Maps function names to signatures. Each name is written at most once."""

    def __init__(self) -> None:
        self._signatures: dict[str, FunctionSignature] = {}

    def define(self, name: str, sig: FunctionSignature, span: Span | None = None) -> None:
        """Record *sig* for *name*. Raises if the name already has one."""
        if name in self._signatures:
            raise FunctionAlreadyDefinedError(name, span)
        self._signatures[name] = sig

    def lookup(self, name: str) -> FunctionSignature | None:
        return self._signatures.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._signatures
