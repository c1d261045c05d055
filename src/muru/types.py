"""Value types and function signatures of the muru language.

The type system is a closed set of primitives with no subtyping and no
coercion; two types are compatible only when they are equal.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class VariableType(Enum):
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"

    def __str__(self) -> str:
        return self.value

    @property
    def machine_tag(self) -> str:
        """The WebAssembly value type that carries this type."""
        return _MACHINE_TAGS[self]


# Bool shares the i32 representation with Int (0 / 1).
_MACHINE_TAGS: dict[VariableType, str] = {
    VariableType.BOOL: "i32",
    VariableType.INT: "i32",
    VariableType.FLOAT: "f32",
}

BOOL = VariableType.BOOL
INT = VariableType.INT
FLOAT = VariableType.FLOAT

TYPE_NAMES: dict[str, VariableType] = {ty.value: ty for ty in VariableType}

# Range of an i32 integer literal.
INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1


@dataclass(frozen=True)
class FunctionSignature:
    arg_types: tuple[VariableType, ...]
    return_type: VariableType

    def __str__(self) -> str:
        return " -> ".join(str(t) for t in (*self.arg_types, self.return_type))
