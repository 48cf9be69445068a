"""Environment.

A chain of scope frames. Each frame maps names to values and holds a
reference to the frame that encloses it. Frames are shared, not copied: a
closure keeps the frame it was created in (and therefore the whole chain
above it) alive, and a mutation through one holder is seen by every other
holder of the same frame.

Lookups by name walk the chain outward. Expressions the resolver has bound
statically use ``get_at``/``assign_at`` instead, which hop a known number of
links and go straight to the right frame.


File: environment.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from typing import Any, Optional

from loxlang.exceptions import RedefinedVariableError, UndefinedVariableError
from loxlang.tokens import Token


class Environment:
    """One lexical scope frame."""

    def __init__(self, enclosing: Optional["Environment"] = None):
        self.values: dict[str, Any] = {}
        self.enclosing = enclosing

    def define(self, name: str, value: Any, token: Optional[Token] = None) -> None:
        """
        Bind ``name`` in this frame.

        Raises:
            RedefinedVariableError: If this exact frame already binds ``name``.
                Binding the same name in a nested frame is ordinary shadowing.
        """
        if name in self.values:
            raise RedefinedVariableError(name, token)
        self.values[name] = value

    def get(self, name: Token) -> Any:
        """
        Look ``name`` up in this frame or the nearest enclosing one.

        Raises:
            UndefinedVariableError: If no frame in the chain binds the name.
        """
        env = self
        while env is not None:
            if name.lexeme in env.values:
                return env.values[name.lexeme]
            env = env.enclosing
        raise UndefinedVariableError(name.lexeme, name)

    def assign(self, name: Token, value: Any) -> None:
        """
        Rebind an existing name in the nearest frame that defines it.

        Raises:
            UndefinedVariableError: If no frame in the chain binds the name.
        """
        env = self
        while env is not None:
            if name.lexeme in env.values:
                env.values[name.lexeme] = value
                return
            env = env.enclosing
        raise UndefinedVariableError(name.lexeme, name)

    def ancestor(self, distance: int) -> "Environment":
        """
        Return the frame ``distance`` links up the chain.
        """
        env = self
        for _ in range(distance):
            if env.enclosing is None:
                raise RuntimeError(f"Scope chain is shorter than resolved distance {distance}")
            env = env.enclosing
        return env

    def get_at(self, distance: int, name: str, token: Optional[Token] = None) -> Any:
        """
        Read ``name`` from the frame exactly ``distance`` links up.
        """
        values = self.ancestor(distance).values
        if name not in values:
            raise UndefinedVariableError(name, token)
        return values[name]

    def assign_at(self, distance: int, name: Token, value: Any) -> None:
        """
        Rebind ``name`` in the frame exactly ``distance`` links up.
        """
        values = self.ancestor(distance).values
        if name.lexeme not in values:
            raise UndefinedVariableError(name.lexeme, name)
        values[name.lexeme] = value

    def __repr__(self) -> str:
        depth = 0
        env = self.enclosing
        while env is not None:
            depth += 1
            env = env.enclosing
        return f"Environment({sorted(self.values)}, depth={depth})"
