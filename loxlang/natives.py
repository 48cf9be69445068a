"""Built-in functions.

Natives are installed into the global environment of every interpreter.
Output goes through the interpreter's sink so a host can capture it.


File: natives.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

import time
from typing import TYPE_CHECKING, Any, Callable

from loxlang.callables import LoxCallable
from loxlang.exceptions import NativeFunctionError

if TYPE_CHECKING:
    from loxlang.environment import Environment
    from loxlang.interpreter import Interpreter


class NativeFunction(LoxCallable):
    """A function implemented in Python."""

    def __init__(self, name: str, arity: int, fn: Callable[['Interpreter', list], Any]):
        self.name = name
        self._arity = arity
        self.fn = fn

    def arity(self) -> int:
        return self._arity

    def call(self, interpreter: 'Interpreter', arguments: list) -> Any:
        try:
            return self.fn(interpreter, arguments)
        except (OSError, ValueError) as e:
            raise NativeFunctionError(None, f"Native function '{self.name}' failed: {e}") from e

    def __str__(self) -> str:
        return f"<native fn {self.name}>"

    def __repr__(self) -> str:
        return f"NativeFunction({self.name}/{self._arity})"


def _clock(_interpreter, _arguments) -> float:
    return time.time()


def _print(interpreter, arguments) -> None:
    interpreter.write(interpreter.stringify(arguments[0]))


def _println(interpreter, arguments) -> None:
    interpreter.write(interpreter.stringify(arguments[0]) + "\n")


NATIVES = [
    NativeFunction("clock", 0, _clock),
    NativeFunction("print", 1, _print),
    NativeFunction("println", 1, _println),
]


def install(globals_env: 'Environment') -> None:
    """
    Define every built-in function in ``globals_env``.
    """
    for native in NATIVES:
        globals_env.define(native.name, native)
