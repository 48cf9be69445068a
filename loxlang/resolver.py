"""Resolver.

A single static pass over the parsed program that runs before the
interpreter. It keeps a stack of block scopes, each mapping a local name to
whether its declaration has finished, and for every variable read,
assignment, ``this`` and ``super`` records how many scopes separate the use
from its declaration. The interpreter uses those distances to go straight to
the right environment frame at run time. Names found in no scope are left
unresolved and are looked up among the globals.

The scope stack mirrors the frames the interpreter will build:

- a block pushes one scope;
- a function pushes one scope holding its parameters and its body;
- a class with a superclass pushes a scope binding ``super``;
- each method pushes a scope binding ``this`` (or, for a static method, the
  class's own name) between the class scopes and the method's own scope.

Errors do not stop the pass. They are collected and returned together so a
host can report all of them before refusing to run the program. Locals that
are never read or assigned, and locals that shadow an enclosing local, are
reported as warnings, which do not prevent running.


File: resolver.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

import logging
from enum import Enum
from typing import TYPE_CHECKING, Iterable

from loxlang.exceptions import ResolverError, ResolverErrorKind, ResolverWarning
from loxlang.nodes import (
    Assign,
    Binary,
    Block,
    Break,
    Call,
    Class,
    Comma,
    Expr,
    Expression,
    Function,
    Get,
    Grouping,
    If,
    Literal,
    Logical,
    Loop,
    Print,
    Return,
    Set,
    Stmt,
    Super,
    Ternary,
    This,
    Unary,
    Var,
    Variable,
    While,
)
from loxlang.tokens import Token

if TYPE_CHECKING:
    from loxlang.interpreter import Interpreter

logger = logging.getLogger(__name__)


class FunctionType(str, Enum):
    """
    Kind of function body currently being resolved.
    """
    NONE = "none"
    FUNCTION = "function"
    METHOD = "method"
    INITIALIZER = "initializer"
    STATIC_METHOD = "static_method"


class ClassType(str, Enum):
    """
    Kind of class body currently being resolved.
    """
    NONE = "none"
    CLASS = "class"
    SUBCLASS = "subclass"


class Resolver:
    """Static scope resolver."""

    def __init__(self, interpreter: 'Interpreter'):
        self.interpreter = interpreter
        self.scopes: list[dict[str, bool]] = []
        # Declarations per scope not yet read or assigned.
        self.unused: list[dict[str, Token]] = []
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE
        self.in_static = False
        self.loop_depth = 0
        self.errors: list[ResolverError] = []
        self.warnings: list[ResolverWarning] = []

    def resolve(self, statements: Iterable[Stmt]) -> list[ResolverError]:
        """
        Resolve a whole program.

        Parameters:
            statements (list): Top-level statements from the parser.

        Returns:
            list: Every resolver error found, in source order. An empty list
                means the program may be run.
        """
        for stmt in statements:
            self.resolve_stmt(stmt)
        return self.errors

    def error(self, kind: ResolverErrorKind, token: Token, message: str) -> None:
        self.errors.append(ResolverError(kind, token, message))

    def warn(self, token: Token, message: str) -> None:
        warning = ResolverWarning(token, message)
        self.warnings.append(warning)
        logger.warning("Warning: %s", warning)

    # ------------------------------------------------------------------
    # Scopes
    # ------------------------------------------------------------------

    def begin_scope(self) -> None:
        self.scopes.append({})
        self.unused.append({})

    def end_scope(self) -> None:
        self.scopes.pop()
        for name, token in self.unused.pop().items():
            self.warn(token, f"Local variable '{name}' is never used")

    def declare(self, name: Token, track: bool = True) -> None:
        """
        Add ``name`` to the innermost scope as declared but not yet defined.

        Globals are not tracked. ``track`` controls whether the name is
        reported if it is never used; parameters are not.
        """
        if not self.scopes:
            return

        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.error(
                ResolverErrorKind.DUPLICATE_DECLARATION,
                name,
                f"Already a variable named '{name.lexeme}' in this scope",
            )
        elif any(name.lexeme in outer for outer in self.scopes[:-1]):
            self.warn(name, f"'{name.lexeme}' shadows a variable in an enclosing scope")

        scope[name.lexeme] = False
        if track:
            self.unused[-1][name.lexeme] = name

    def define(self, name: Token) -> None:
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True

    def resolve_local(self, expr: Expr, name: str) -> bool:
        """
        Record the scope distance of ``name`` for ``expr``.

        Returns:
            bool: Whether the name was found in any local scope.
        """
        for depth, scope in enumerate(reversed(self.scopes)):
            if name in scope:
                self.interpreter.resolve(expr, depth)
                self.unused[len(self.scopes) - 1 - depth].pop(name, None)
                return True
        return False

    def resolve_function(self, function: Function, kind: FunctionType) -> None:
        enclosing_function = self.current_function
        enclosing_loop_depth = self.loop_depth
        self.current_function = kind
        self.loop_depth = 0

        self.begin_scope()
        for param in function.params:
            self.declare(param, track=False)
            self.define(param)
        for stmt in function.body:
            self.resolve_stmt(stmt)
        self.end_scope()

        self.current_function = enclosing_function
        self.loop_depth = enclosing_loop_depth

    def resolve_class(self, stmt: Class) -> None:
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS

        self.declare(stmt.name)
        self.define(stmt.name)

        if stmt.superclass is not None:
            if stmt.superclass.name.lexeme == stmt.name.lexeme:
                self.error(
                    ResolverErrorKind.SELF_INHERITANCE,
                    stmt.superclass.name,
                    "A class can't inherit from itself",
                )
            else:
                self.current_class = ClassType.SUBCLASS
                self.resolve_expr(stmt.superclass)

            self.begin_scope()
            self.scopes[-1]["super"] = True

        enclosing_static = self.in_static
        for method in stmt.methods:
            self.begin_scope()
            if method.is_static:
                self.scopes[-1][stmt.name.lexeme] = True
                kind = FunctionType.STATIC_METHOD
            else:
                self.scopes[-1]["this"] = True
                kind = FunctionType.INITIALIZER if method.name.lexeme == "init" else FunctionType.METHOD
            self.in_static = method.is_static
            self.resolve_function(method, kind)
            self.end_scope()
        self.in_static = enclosing_static

        if stmt.superclass is not None:
            self.end_scope()

        self.current_class = enclosing_class

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def resolve_stmt(self, stmt: Stmt) -> None:
        match stmt:
            case Block(statements=statements):
                self.begin_scope()
                for inner in statements:
                    self.resolve_stmt(inner)
                self.end_scope()

            case Var(name=name, initializer=initializer):
                self.declare(name)
                if initializer is not None:
                    self.resolve_expr(initializer)
                self.define(name)

            case Function(name=name):
                self.declare(name)
                self.define(name)
                self.resolve_function(stmt, FunctionType.FUNCTION)

            case Class():
                self.resolve_class(stmt)

            case Expression(expression=expr) | Print(expression=expr):
                self.resolve_expr(expr)

            case If(condition=condition, then_branch=then_branch, else_branch=else_branch):
                self.resolve_expr(condition)
                self.resolve_stmt(then_branch)
                if else_branch is not None:
                    self.resolve_stmt(else_branch)

            case While(condition=condition, body=body, else_branch=else_branch):
                self.resolve_expr(condition)
                self.loop_depth += 1
                self.resolve_stmt(body)
                self.loop_depth -= 1
                # 'break' in the else branch belongs to the enclosing loop
                if else_branch is not None:
                    self.resolve_stmt(else_branch)

            case Loop(body=body):
                self.loop_depth += 1
                self.resolve_stmt(body)
                self.loop_depth -= 1

            case Break(keyword=keyword):
                if self.loop_depth == 0:
                    self.error(
                        ResolverErrorKind.BREAK_OUTSIDE_LOOP,
                        keyword,
                        "Can't use 'break' outside of a loop",
                    )

            case Return(keyword=keyword, value=value):
                if self.current_function is FunctionType.NONE:
                    self.error(
                        ResolverErrorKind.TOP_LEVEL_RETURN,
                        keyword,
                        "Can't return from top-level code",
                    )
                if value is not None:
                    if self.current_function is FunctionType.INITIALIZER:
                        self.error(
                            ResolverErrorKind.INITIALIZER_RETURN,
                            keyword,
                            "Can't return a value from an initializer",
                        )
                    self.resolve_expr(value)

            case _:
                raise TypeError(f"Unknown statement node: {stmt!r}")

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def resolve_expr(self, expr: Expr) -> None:
        match expr:
            case Variable(name=name):
                if self.scopes and self.scopes[-1].get(name.lexeme) is False:
                    self.error(
                        ResolverErrorKind.SELF_REFERENCE,
                        name,
                        "Can't read local variable in its own initializer",
                    )
                self.resolve_local(expr, name.lexeme)

            case Assign(name=name, value=value):
                self.resolve_expr(value)
                self.resolve_local(expr, name.lexeme)

            case Binary(left=left, right=right) | Logical(left=left, right=right) | Comma(left=left, right=right):
                self.resolve_expr(left)
                self.resolve_expr(right)

            case Unary(right=operand) | Grouping(expression=operand):
                self.resolve_expr(operand)

            case Literal():
                pass

            case Call(callee=callee, arguments=arguments):
                self.resolve_expr(callee)
                for argument in arguments:
                    self.resolve_expr(argument)

            case Get(obj=obj):
                self.resolve_expr(obj)

            case Set(obj=obj, value=value):
                self.resolve_expr(value)
                self.resolve_expr(obj)

            case Ternary(condition=condition, then_branch=then_branch, else_branch=else_branch):
                self.resolve_expr(condition)
                self.resolve_expr(then_branch)
                self.resolve_expr(else_branch)

            case This(keyword=keyword):
                if self.current_class is ClassType.NONE:
                    self.error(
                        ResolverErrorKind.THIS_OUTSIDE_CLASS,
                        keyword,
                        "Can't use 'this' outside of a class",
                    )
                elif self.in_static:
                    self.error(
                        ResolverErrorKind.THIS_IN_STATIC,
                        keyword,
                        "Can't use 'this' in a static method",
                    )
                else:
                    self.resolve_local(expr, "this")

            case Super(keyword=keyword):
                if self.current_class is ClassType.NONE:
                    self.error(
                        ResolverErrorKind.SUPER_OUTSIDE_CLASS,
                        keyword,
                        "Can't use 'super' outside of a class",
                    )
                elif self.in_static:
                    self.error(
                        ResolverErrorKind.SUPER_IN_STATIC,
                        keyword,
                        "Can't use 'super' in a static method",
                    )
                elif self.current_class is not ClassType.SUBCLASS:
                    self.error(
                        ResolverErrorKind.SUPER_WITHOUT_SUPERCLASS,
                        keyword,
                        "Can't use 'super' in a class with no superclass",
                    )
                else:
                    self.resolve_local(expr, "super")

            case _:
                raise TypeError(f"Unknown expression node: {expr!r}")
