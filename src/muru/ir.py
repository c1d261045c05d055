"""The intermediate tree: a two-variant atom/list tree in WebAssembly text form.

Trees are built bottom-up and never mutated; ``extend`` returns a new node.
``to_pretty`` is a pure function of the tree and the indent width, so the same
tree always renders to the same text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Atom:
    text: str

    def extend(self, other: Node) -> List:
        """Promote the atom to a two-element list ending in *other*."""
        return List((self, other))

    def to_pretty(self, width: int = 0) -> str:
        return self.text

    def __str__(self) -> str:
        return self.to_pretty(0)


@dataclass(frozen=True)
class List:
    items: tuple[Node, ...] = ()

    def extend(self, other: Node) -> List:
        return List((*self.items, other))

    def to_pretty(self, width: int = 0) -> str:
        """Render as text; *width* 0 gives one line, otherwise nested lists
        get one child per line indented by *width* spaces."""
        indent = " " * width
        line_break = "\n" if width > 0 else " "
        final_break = "\n" if width > 0 else ""
        separator = line_break + indent

        has_depth = any(isinstance(item, List) for item in self.items)
        if not (has_depth and len(self.items) > 1):
            return "(" + " ".join(item.to_pretty(width) for item in self.items) + ")"

        head = self.items[0].to_pretty(width)
        rest = separator.join(
            separator.join(item.to_pretty(width).split("\n"))
            for item in self.items[1:]
        )
        return f"({head}{separator}{rest}{final_break})"

    def __str__(self) -> str:
        return self.to_pretty(0)


Node = Union[Atom, List]


def node(value: Node | str | int | float | list | tuple) -> Node:
    """Build a node from text, a number, an existing node, or a sequence of those."""
    if isinstance(value, (Atom, List)):
        return value
    if isinstance(value, str):
        return Atom(value)
    if isinstance(value, bool):
        return Atom("1" if value else "0")
    if isinstance(value, int):
        return Atom(str(value))
    if isinstance(value, float):
        return Atom(repr(value))
    if isinstance(value, (list, tuple)):
        return List(tuple(node(v) for v in value))
    raise TypeError(f"cannot build an IR node from {type(value).__name__}")


def sx(head: Node | str | int | float, *rest: Node | str | int | float) -> Node:
    """``sx("i32.const", 4)`` builds ``(i32.const 4)``; a lone head stays an atom."""
    if not rest:
        return node(head)
    return List((node(head), *(node(r) for r in rest)))


def dollar(name: str) -> Atom:
    """An identifier reference such as ``$main``."""
    return Atom(f"${name}")


def quote(text: str) -> Atom:
    """A string literal such as ``"memory"``."""
    return Atom(f'"{text}"')
