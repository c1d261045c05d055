"""Hand-written runtime functions linked into every module.

Output goes through WASI ``fd_write``. Linear memory layout used by
``printc``:

    0   iovec.buf  (always 8)
    4   iovec.len  (always 1)
    8   the byte being written
    20  bytes-written result slot
"""

from __future__ import annotations

from dataclasses import dataclass

from muru.ir import Node, dollar, quote, sx
from muru.types import INT, FunctionSignature


@dataclass(frozen=True)
class RuntimeFunction:
    name: str
    signature: FunctionSignature
    func: Node


def _const(value: int) -> Node:
    return sx("i32.const", value)


def _local(name: str) -> Node:
    return sx("local.get", dollar(name))


def _call(name: str, *args: Node) -> Node:
    return sx("call", dollar(name), *args)


def fd_write_import() -> Node:
    return sx(
        "import", quote("wasi_unstable"), quote("fd_write"),
        sx("func", dollar("fd_write"), sx("param", "i32", "i32", "i32", "i32"), sx("result", "i32")),
    )


def _printc() -> Node:
    return sx(
        "func", dollar("printc"),
        sx("param", dollar("char"), "i32"),
        sx("result", "i32"),
        sx("i32.store", _const(0), _const(8)),
        sx("i32.store", _const(4), _const(1)),
        sx("i32.store8", _const(8), _local("char")),
        sx("drop", _call("fd_write", _const(1), _const(0), _const(1), _const(20))),
        _local("char"),
    )


def _printu() -> Node:
    # Unsigned, so the magnitude of the most negative i32 still prints.
    return sx(
        "func", dollar("printu"),
        sx("param", dollar("num"), "i32"),
        sx("result", "i32"),
        sx(
            "if", sx("i32.ge_u", _local("num"), _const(10)),
            sx("then", sx("drop", _call("printu", sx("i32.div_u", _local("num"), _const(10))))),
        ),
        sx("drop", _call(
            "printc",
            sx("i32.add", _const(48), sx("i32.rem_u", _local("num"), _const(10))),
        )),
        _local("num"),
    )


def _printi() -> Node:
    return sx(
        "func", dollar("printi"),
        sx("param", dollar("num"), "i32"),
        sx("result", "i32"),
        sx(
            "if", sx("i32.lt_s", _local("num"), _const(0)),
            sx(
                "then",
                sx("drop", _call("printc", _const(ord("-")))),
                sx("drop", _call("printu", sx("i32.sub", _const(0), _local("num")))),
            ),
            sx("else", sx("drop", _call("printu", _local("num")))),
        ),
        _local("num"),
    )


# Module-level names owned by the import and the entry point.
RESERVED_NAMES: tuple[str, ...] = ("fd_write", "_start")

_PRINT_SIGNATURE = FunctionSignature((INT,), INT)

RUNTIME_FUNCTIONS: tuple[RuntimeFunction, ...] = (
    RuntimeFunction("printc", _PRINT_SIGNATURE, _printc()),
    RuntimeFunction("printu", _PRINT_SIGNATURE, _printu()),
    RuntimeFunction("printi", _PRINT_SIGNATURE, _printi()),
)


def runtime_signatures() -> dict[str, FunctionSignature]:
    """Signatures registered before user code is validated."""
    return {fn.name: fn.signature for fn in RUNTIME_FUNCTIONS}


def entry_point(main: str = "main") -> Node:
    """``_start``: print the result of *main*, then a newline."""
    return sx(
        "func", dollar("_start"),
        sx("export", quote("_start")),
        sx("drop", _call("printi", _call(main))),
        sx("drop", _call("printc", _const(ord("\n")))),
    )
