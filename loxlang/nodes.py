"""AST node definitions for Lox.

The parser builds trees out of the frozen dataclasses below; nothing mutates
a node afterwards. Expression and statement kinds are closed sets and both
the resolver and the interpreter dispatch on them with ``match``.

Every expression receives a process-unique ``id`` from a monotonically
increasing counter. The resolver keys its side table on that id, so two
occurrences of the same variable name never share an entry.


File: nodes.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

import itertools
from dataclasses import dataclass, field
from typing import Any, Optional

from loxlang.tokens import Token

_expr_ids = itertools.count(1)


def _next_id() -> int:
    return next(_expr_ids)


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class Expr:
    """Base class of every expression node."""
    id: int = field(default_factory=_next_id, kw_only=True, repr=False)


@dataclass(frozen=True, eq=False)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Literal(Expr):
    value: Any


@dataclass(frozen=True, eq=False)
class Variable(Expr):
    name: Token


@dataclass(frozen=True, eq=False)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(frozen=True, eq=False)
class Call(Expr):
    callee: Expr
    paren: Token
    arguments: tuple[Expr, ...]


@dataclass(frozen=True, eq=False)
class Get(Expr):
    obj: Expr
    name: Token


@dataclass(frozen=True, eq=False)
class Set(Expr):
    obj: Expr
    name: Token
    value: Expr


@dataclass(frozen=True, eq=False)
class This(Expr):
    keyword: Token


@dataclass(frozen=True, eq=False)
class Super(Expr):
    keyword: Token
    method: Token


@dataclass(frozen=True, eq=False)
class Ternary(Expr):
    condition: Expr
    then_branch: Expr
    else_branch: Expr


@dataclass(frozen=True, eq=False)
class Comma(Expr):
    left: Expr
    right: Expr


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class Stmt:
    """Base class of every statement node."""


@dataclass(frozen=True, eq=False)
class Expression(Stmt):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Print(Stmt):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr]


@dataclass(frozen=True, eq=False)
class Block(Stmt):
    statements: tuple[Stmt, ...]


@dataclass(frozen=True, eq=False)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass(frozen=True, eq=False)
class While(Stmt):
    condition: Expr
    body: Stmt
    # Runs once when the condition turns false; skipped after a break.
    else_branch: Optional[Stmt] = None


@dataclass(frozen=True, eq=False)
class Loop(Stmt):
    body: Stmt


@dataclass(frozen=True, eq=False)
class Break(Stmt):
    keyword: Token


@dataclass(frozen=True, eq=False)
class Function(Stmt):
    name: Token
    params: tuple[Token, ...]
    body: tuple[Stmt, ...]
    is_public: bool = True
    is_static: bool = False


@dataclass(frozen=True, eq=False)
class Return(Stmt):
    keyword: Token
    value: Optional[Expr]


@dataclass(frozen=True, eq=False)
class Class(Stmt):
    name: Token
    superclass: Optional[Variable]
    methods: tuple[Function, ...]
