"""Interpreter.

This is a tree-walk interpreter for the statements produced by the parser
and annotated by the resolver. It supports arithmetic, strings, variables,
closures, classes with inheritance, static and private methods, and the
usual structured control flow.

1. Execution Model
The interpreter evaluates the AST top-down and recursively. Statements are
run by `execute()`, expressions by `evaluate()`; both dispatch on the node
class with structural pattern matching.

2. Environment
The current scope is an `Environment` frame. Blocks and calls swap in a new
frame and restore the previous one when they finish, however they finish.
Variable references the resolver bound to a local scope hop straight to
their frame; everything else is looked up among the globals.

3. Control Flow
Executing a statement returns a `Completion`. A loop consumes a ``break``
completion and a function call consumes a ``return`` completion; any other
statement passes a non-normal completion straight up to its parent.

4. Error Handling
Runtime errors such as bad operands, undefined names, wrong arity or
forbidden member access are raised as typed `LoxRuntimeError` subclasses
carrying the offending token and its line.


File: interpreter.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

import sys
from typing import Any, Iterable, Optional, TextIO

from loxlang import natives
from loxlang.callables import LoxCallable, LoxClass, LoxFunction, LoxInstance
from loxlang.completion import NORMAL, Completion, Flow, break_from, return_from
from loxlang.environment import Environment
from loxlang.exceptions import (
    ArityError,
    BadOperandError,
    DivisionByZeroError,
    InvalidSuperclassError,
    MisplacedBreakError,
    MisplacedReturnError,
    NotAnInstanceError,
    NotCallableError,
    PrivateAccessError,
    StackOverflowError,
    UndefinedPropertyError,
)
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
from loxlang.tokens import Token, TokenType


class Interpreter:
    """Tree-walk interpreter for Lox."""

    def __init__(self, out: Optional[TextIO] = None):
        """
        Initialize the interpreter.

        Parameters:
            out (TextIO): Where program output is written. Defaults to
                whatever ``sys.stdout`` is at the time of each write.
        """
        self.out = out
        self.globals = Environment()
        self.environment = self.globals
        # Resolver distances, keyed by expression id.
        self.locals: dict[int, int] = {}
        self.call_stack: list[LoxFunction] = []
        natives.install(self.globals)

    def resolve(self, expr: Expr, depth: int) -> None:
        """
        Record that ``expr`` refers to a binding ``depth`` frames up.
        """
        self.locals[expr.id] = depth

    def current_owner(self) -> Optional[LoxClass]:
        """
        Return the class that lexically contains the innermost running function.
        """
        if not self.call_stack:
            return None
        return self.call_stack[-1].owner

    def interpret(self, statements: Iterable[Stmt]) -> None:
        """
        Execute a resolved program.

        Raises:
            LoxRuntimeError: On the first runtime error. Statements already
                executed keep their effects.
            StackOverflowError: If calls nest too deeply.
        """
        for stmt in statements:
            try:
                completion = self.execute(stmt)
            except RecursionError:
                self.environment = self.globals
                self.call_stack.clear()
                raise StackOverflowError() from None
            if completion.flow is Flow.BREAK:
                raise MisplacedBreakError(completion.keyword)
            if completion.flow is Flow.RETURN:
                raise MisplacedReturnError(completion.keyword)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def write(self, text: str) -> None:
        out = self.out if self.out is not None else sys.stdout
        out.write(text)

    @staticmethod
    def stringify(value: Any) -> str:
        """
        Render a runtime value the way ``print`` shows it.
        """
        if value is None:
            return "nil"
        if value is True:
            return "true"
        if value is False:
            return "false"
        if isinstance(value, float):
            if value.is_integer():
                return str(int(value))
            return repr(value)
        return str(value)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def execute_block(self, statements: Iterable[Stmt], environment: Environment) -> Completion:
        """
        Execute ``statements`` inside ``environment``, restoring the current
        frame afterwards.

        Returns:
            Completion: The first non-normal completion, or ``NORMAL``.
        """
        previous = self.environment
        self.environment = environment
        try:
            for stmt in statements:
                completion = self.execute(stmt)
                if not completion.is_normal:
                    return completion
            return NORMAL
        finally:
            self.environment = previous

    def execute(self, stmt: Stmt) -> Completion:
        """
        Execute a single statement.

        Returns:
            Completion: How the statement finished.

        Raises:
            LoxRuntimeError: For any runtime failure.
        """
        match stmt:
            case Expression(expression=expr):
                self.evaluate(expr)
                return NORMAL

            case Print(expression=expr):
                self.write(self.stringify(self.evaluate(expr)) + "\n")
                return NORMAL

            case Var(name=name, initializer=initializer):
                value = None
                if initializer is not None:
                    value = self.evaluate(initializer)
                self.environment.define(name.lexeme, value, name)
                return NORMAL

            case Block(statements=statements):
                return self.execute_block(statements, Environment(self.environment))

            case If(condition=condition, then_branch=then_branch, else_branch=else_branch):
                if self.is_truthy(self.evaluate(condition)):
                    return self.execute(then_branch)
                if else_branch is not None:
                    return self.execute(else_branch)
                return NORMAL

            case While(condition=condition, body=body, else_branch=else_branch):
                while self.is_truthy(self.evaluate(condition)):
                    completion = self.execute(body)
                    if completion.flow is Flow.BREAK:
                        return NORMAL
                    if completion.flow is Flow.RETURN:
                        return completion
                if else_branch is not None:
                    return self.execute(else_branch)
                return NORMAL

            case Loop(body=body):
                while True:
                    completion = self.execute(body)
                    if completion.flow is Flow.BREAK:
                        return NORMAL
                    if completion.flow is Flow.RETURN:
                        return completion

            case Break(keyword=keyword):
                return break_from(keyword)

            case Return(keyword=keyword, value=value):
                result = self.evaluate(value) if value is not None else None
                return return_from(keyword, result)

            case Function(name=name):
                function = LoxFunction(stmt, self.environment, owner=self.current_owner())
                self.environment.define(name.lexeme, function, name)
                return NORMAL

            case Class():
                self.execute_class(stmt)
                return NORMAL

            case _:
                raise TypeError(f"Unknown statement node: {stmt!r}")

    def execute_class(self, stmt: Class) -> None:
        superclass = None
        if stmt.superclass is not None:
            superclass = self.evaluate(stmt.superclass)
            if not isinstance(superclass, LoxClass):
                raise InvalidSuperclassError(stmt.superclass.name)

        self.environment.define(stmt.name.lexeme, None, stmt.name)

        if superclass is not None:
            self.environment = Environment(self.environment)
            self.environment.define("super", superclass)

        methods = {}
        for method in stmt.methods:
            is_initializer = method.name.lexeme == "init" and not method.is_static
            methods[method.name.lexeme] = LoxFunction(method, self.environment, is_initializer)

        klass = LoxClass(stmt.name.lexeme, superclass, methods)

        if superclass is not None:
            self.environment = self.environment.enclosing

        self.environment.assign(stmt.name, klass)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def evaluate(self, expr: Expr) -> Any:
        """
        Evaluate an expression and return its value.

        Raises:
            LoxRuntimeError: For any runtime failure.
        """
        match expr:
            case Literal(value=value):
                return value

            case Grouping(expression=inner):
                return self.evaluate(inner)

            case Variable(name=name):
                return self.lookup_variable(name, expr)

            case Assign(name=name, value=value_expr):
                value = self.evaluate(value_expr)
                distance = self.locals.get(expr.id)
                if distance is not None:
                    self.environment.assign_at(distance, name, value)
                else:
                    self.globals.assign(name, value)
                return value

            case Logical(left=left, operator=operator, right=right):
                lhs = self.evaluate(left)
                if operator.type is TokenType.OR:
                    if self.is_truthy(lhs):
                        return lhs
                elif not self.is_truthy(lhs):
                    return lhs
                return self.evaluate(right)

            case Unary(operator=operator, right=right):
                operand = self.evaluate(right)
                match operator.type:
                    case TokenType.BANG:
                        return not self.is_truthy(operand)
                    case TokenType.MINUS:
                        self.check_number_operand(operator, operand)
                        return -operand
                raise BadOperandError(operator, f"Unknown unary operator '{operator.lexeme}'")

            case Binary(left=left, operator=operator, right=right):
                return self.evaluate_binary(operator, self.evaluate(left), self.evaluate(right))

            case Ternary(condition=condition, then_branch=then_branch, else_branch=else_branch):
                if self.is_truthy(self.evaluate(condition)):
                    return self.evaluate(then_branch)
                return self.evaluate(else_branch)

            case Comma(left=left, right=right):
                self.evaluate(left)
                return self.evaluate(right)

            case Call(callee=callee_expr, paren=paren, arguments=argument_exprs):
                callee = self.evaluate(callee_expr)
                arguments = [self.evaluate(argument) for argument in argument_exprs]

                if not isinstance(callee, LoxCallable):
                    raise NotCallableError(paren)
                if len(arguments) != callee.arity():
                    raise ArityError(paren, callee.arity(), len(arguments))
                return callee.call(self, arguments)

            case Get(obj=obj_expr, name=name):
                obj = self.evaluate(obj_expr)
                if isinstance(obj, LoxInstance):
                    return obj.get(name, via_this=isinstance(obj_expr, This))
                if isinstance(obj, LoxClass):
                    return obj.get(name, self)
                raise NotAnInstanceError(name, "Only instances have properties")

            case Set(obj=obj_expr, name=name, value=value_expr):
                obj = self.evaluate(obj_expr)
                if not isinstance(obj, LoxInstance):
                    raise NotAnInstanceError(name, "Only instances have fields")
                value = self.evaluate(value_expr)
                obj.set(name, value)
                return value

            case This(keyword=keyword):
                return self.lookup_variable(keyword, expr)

            case Super(keyword=keyword, method=method_name):
                distance = self.locals[expr.id]
                superclass = self.environment.get_at(distance, "super", keyword)
                instance = self.environment.get_at(distance - 1, "this", keyword)
                method = superclass.find_method(method_name.lexeme)
                if method is None:
                    raise UndefinedPropertyError(method_name)
                if not method.is_public:
                    raise PrivateAccessError(method_name)
                return method.bind(instance)

            case _:
                raise TypeError(f"Unknown expression node: {expr!r}")

    def evaluate_binary(self, operator: Token, lhs: Any, rhs: Any) -> Any:
        match operator.type:
            case TokenType.PLUS:
                if _is_number(lhs) and _is_number(rhs):
                    return lhs + rhs
                if isinstance(lhs, str) and isinstance(rhs, str):
                    return lhs + rhs
                if isinstance(lhs, str) and _is_number(rhs):
                    return lhs + self.stringify(rhs)
                raise BadOperandError(operator, "Operands must be two numbers or two strings")
            case TokenType.MINUS:
                if isinstance(lhs, str) and isinstance(rhs, str):
                    return lhs.replace(rhs, "", 1)
                self.check_number_operands(operator, lhs, rhs)
                return lhs - rhs
            case TokenType.STAR:
                self.check_number_operands(operator, lhs, rhs)
                return lhs * rhs
            case TokenType.SLASH:
                self.check_number_operands(operator, lhs, rhs)
                if rhs == 0:
                    raise DivisionByZeroError(operator)
                return lhs / rhs
            case TokenType.GREATER:
                self.check_number_operands(operator, lhs, rhs)
                return lhs > rhs
            case TokenType.GREATER_EQUAL:
                self.check_number_operands(operator, lhs, rhs)
                return lhs >= rhs
            case TokenType.LESS:
                self.check_number_operands(operator, lhs, rhs)
                return lhs < rhs
            case TokenType.LESS_EQUAL:
                self.check_number_operands(operator, lhs, rhs)
                return lhs <= rhs
            case TokenType.EQUAL_EQUAL:
                return self.is_equal(lhs, rhs)
            case TokenType.BANG_EQUAL:
                return not self.is_equal(lhs, rhs)
        raise BadOperandError(operator, f"Unknown binary operator '{operator.lexeme}'")

    def lookup_variable(self, name: Token, expr: Expr) -> Any:
        distance = self.locals.get(expr.id)
        if distance is not None:
            return self.environment.get_at(distance, name.lexeme, name)
        return self.globals.get(name)

    # ------------------------------------------------------------------
    # Value semantics
    # ------------------------------------------------------------------

    @staticmethod
    def is_truthy(value: Any) -> bool:
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        return True

    @staticmethod
    def is_equal(a: Any, b: Any) -> bool:
        """
        Lox equality: values of different kinds are never equal, primitives
        compare by value and everything else by identity.
        """
        if a is None or b is None:
            return a is b
        if isinstance(a, bool) or isinstance(b, bool):
            return a is b
        if _is_number(a) and _is_number(b):
            return a == b
        if isinstance(a, str) and isinstance(b, str):
            return a == b
        return a is b

    @staticmethod
    def check_number_operand(operator: Token, operand: Any) -> None:
        if not _is_number(operand):
            raise BadOperandError(operator, "Operand must be a number")

    @staticmethod
    def check_number_operands(operator: Token, lhs: Any, rhs: Any) -> None:
        if not (_is_number(lhs) and _is_number(rhs)):
            raise BadOperandError(operator, "Operands must be numbers")


def _is_number(value: Any) -> bool:
    # bool is an int subclass; Lox booleans are not numbers
    return isinstance(value, (int, float)) and not isinstance(value, bool)
