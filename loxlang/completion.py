"""Statement completion records.

Executing a statement finishes in one of three ways: normally, by a
``break`` travelling out to the nearest loop, or by a ``return`` travelling
out to the nearest function call. Each statement evaluator hands back a
:class:`Completion` saying which, instead of raising an exception, so a real
error and a control-flow signal can never be confused.


File: completion.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from loxlang.tokens import Token


class Flow(str, Enum):
    """
    Enumeration of the ways a statement can finish.
    """
    NORMAL = "normal"
    BREAK = "break"
    RETURN = "return"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value


@dataclass(frozen=True)
class Completion:
    """Outcome of executing one statement."""
    flow: Flow
    value: Any = None
    # The 'break'/'return' keyword, kept for error reporting.
    keyword: Optional[Token] = None

    @property
    def is_normal(self) -> bool:
        return self.flow is Flow.NORMAL


NORMAL = Completion(Flow.NORMAL)


def break_from(keyword: Token) -> Completion:
    return Completion(Flow.BREAK, keyword=keyword)


def return_from(keyword: Token, value: Any) -> Completion:
    return Completion(Flow.RETURN, value, keyword)


__all__ = ["Flow", "Completion", "NORMAL", "break_from", "return_from"]
