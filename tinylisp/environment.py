"""
tinylisp Environment
====================
A chain of binding frames. Lookups walk outward through parents;
bindings only ever touch the local frame.
"""
from __future__ import annotations

from typing import Iterator

from .values import Value


class Environment:
    """
    One lexical frame: a name -> Value mapping plus an optional parent.

    Several frames may share a parent. A frame stays alive as long as
    something (a Closure, a caller) still holds a reference to it.
    """

    def __init__(self, parent: Environment | None = None):
        self.bindings: dict[str, Value] = {}
        self.parent = parent

    def lookup(self, name: str) -> Value | None:
        """Return the nearest binding for ``name``, or None."""
        env = self
        while env is not None:
            if name in env.bindings:
                return env.bindings[name]
            env = env.parent
        return None

    def bind(self, name: str, value: Value) -> Value:
        """Insert or overwrite ``name`` in this frame and return ``value``."""
        self.bindings[name] = value
        return value

    def child(self) -> Environment:
        """Create a new frame whose parent is this one."""
        return Environment(parent=self)

    def __contains__(self, name: str) -> bool:
        return self.lookup(name) is not None

    def items(self) -> Iterator[tuple[str, Value]]:
        """Iterate over the bindings of this frame only."""
        return iter(self.bindings.items())

    def __repr__(self) -> str:
        depth = 0
        env = self.parent
        while env is not None:
            depth += 1
            env = env.parent
        return f"Environment({sorted(self.bindings)}, depth={depth})"
