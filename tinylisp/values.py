"""
tinylisp Values
===============
The tagged value model produced by evaluation. Every evaluation yields
exactly one of these; evaluation-time failures are ``Error`` values, not
exceptions.

``str(value)`` is the display form printed by the REPL.
``repr(value)`` is the debug form embedded in error messages.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .environment import Environment
    from .parser import ASTNode


def _quoted(text: str) -> str:
    """Double-quote ``text`` with embedded quotes and backslashes escaped."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


class Value:
    """Base class for all runtime values."""
    tag: str = ""


@dataclass(frozen=True, repr=False)
class Error(Value):
    message: str
    tag = "Err"

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"Err({_quoted(self.message)})"


@dataclass(frozen=True, repr=False)
class Integer(Value):
    value: int
    tag = "Int"

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"Int({self.value})"


@dataclass(frozen=True, repr=False)
class Boolean(Value):
    value: bool
    tag = "Bool"

    def __str__(self) -> str:
        return "true" if self.value else "false"

    def __repr__(self) -> str:
        return f"Bool({self})"


@dataclass(frozen=True, repr=False)
class String(Value):
    value: str
    tag = "Str"

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Str({_quoted(self.value)})"


@dataclass(frozen=True, repr=False)
class Sequence(Value):
    items: tuple[Value, ...] = ()
    tag = "Seq"

    def __post_init__(self):
        # Accept any iterable but store a tuple
        object.__setattr__(self, "items", tuple(self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __getitem__(self, index):
        return self.items[index]

    def last(self) -> Value | None:
        return self.items[-1] if self.items else None

    def __str__(self) -> str:
        if not self.items:
            return "()"
        return str(self.items[-1])

    def __repr__(self) -> str:
        return "Seq([" + ", ".join(repr(item) for item in self.items) + "])"


@dataclass(frozen=True, repr=False, eq=False)
class Closure(Value):
    """A function value. Inert: the language has no call form.

    ``body`` is the unevaluated AST subtree, shared with the tree it came
    from. ``env`` keeps the defining environment alive.
    """
    params: tuple[str, ...]
    body: "ASTNode"
    env: "Environment" = field(compare=False)
    tag = "Fn"

    def __post_init__(self):
        object.__setattr__(self, "params", tuple(self.params))

    def __str__(self) -> str:
        return "<fn (" + " ".join(self.params) + ")>"

    def __repr__(self) -> str:
        return "Fn([" + ", ".join(self.params) + "])"


def format_value(value: Value) -> str:
    """Return the display form of a value."""
    return str(value)
