"""Errors.

Three independent families are defined here: errors raised while scanning
and parsing source text, errors found by the static resolver, and errors
raised while a program runs. Every error keeps the structured data a host
needs to render it (kind, offending token, line) in addition to its message.


File: exceptions.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from enum import Enum

from loxlang.tokens import TokenType


def _where(line) -> str:
    return f" on line {line}" if line is not None else ""


class ScanError(Exception):
    """
    Error for source text the lexer cannot tokenize.
    """
    def __init__(self, message, line=None, at_end=False):
        self.line = line
        # Whether the source ended inside the offending token.
        self.at_end = at_end
        super().__init__(f"{message}{_where(line)}")


class ParseErrorKind(str, Enum):
    """
    Enumeration of syntax error causes.
    """
    EXPECTED_EXPRESSION = "expected_expression"
    EXPECTED_TOKEN = "expected_token"
    INVALID_ASSIGNMENT_TARGET = "invalid_assignment_target"
    TOO_MANY_ARGUMENTS = "too_many_arguments"
    TOO_MANY_PARAMETERS = "too_many_parameters"
    MISSING_LEFT_OPERAND = "missing_left_operand"
    UNEXPECTED_QUALIFIER = "unexpected_qualifier"
    CONFLICTING_QUALIFIERS = "conflicting_qualifiers"
    NESTING_TOO_DEEP = "nesting_too_deep"


class ParseError(Exception):
    """
    Error for malformed syntax.
    """
    def __init__(self, kind, token, message):
        self.kind = kind
        self.token = token
        self.line = token.line if token is not None else None
        if token is None:
            where = ""
        elif token.type is TokenType.EOF:
            where = " at end"
        else:
            where = f" at '{token.lexeme}'"
        super().__init__(f"{message}{where}{_where(self.line)}")


class ResolverErrorKind(str, Enum):
    """
    Enumeration of static scoping errors.
    """
    DUPLICATE_DECLARATION = "duplicate_declaration"
    SELF_REFERENCE = "self_reference"
    TOP_LEVEL_RETURN = "top_level_return"
    INITIALIZER_RETURN = "initializer_return"
    BREAK_OUTSIDE_LOOP = "break_outside_loop"
    THIS_OUTSIDE_CLASS = "this_outside_class"
    THIS_IN_STATIC = "this_in_static"
    SUPER_OUTSIDE_CLASS = "super_outside_class"
    SUPER_WITHOUT_SUPERCLASS = "super_without_superclass"
    SUPER_IN_STATIC = "super_in_static"
    SELF_INHERITANCE = "self_inheritance"


class ResolverError(Exception):
    """
    Error for scope violations found before execution.
    """
    def __init__(self, kind, token, message):
        self.kind = kind
        self.token = token
        self.line = token.line if token is not None else None
        super().__init__(f"{message}{_where(self.line)}")


class ResolverWarning:
    """
    Advisory diagnostic (unused or shadowing local) that does not stop a run.
    """
    def __init__(self, token, message):
        self.token = token
        self.line = token.line
        self.message = f"{message}{_where(self.line)}"

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"ResolverWarning({self.message!r})"


class LoxRuntimeError(Exception):
    """
    Base error for failures while a program is running.
    """
    def __init__(self, token, message):
        self.token = token
        self.line = token.line if token is not None else None
        super().__init__(f"{message}{_where(self.line)}")


class BadOperandError(LoxRuntimeError):
    """
    Error for an operator applied to operands of the wrong kind.
    """


class DivisionByZeroError(BadOperandError):
    """
    Error for numeric division by zero.
    """
    def __init__(self, token):
        super().__init__(token, "Division by zero")


class UndefinedVariableError(LoxRuntimeError):
    """
    Error for undefined variables.
    """
    def __init__(self, varname, token=None):
        self.varname = varname
        super().__init__(token, f"Undefined variable '{varname}'")


class RedefinedVariableError(LoxRuntimeError):
    """
    Error for a second definition of a name in the same scope.
    """
    def __init__(self, varname, token=None):
        self.varname = varname
        super().__init__(token, f"Variable '{varname}' is already defined in this scope")


class UndefinedPropertyError(LoxRuntimeError):
    """
    Error for reading a member an object does not have.
    """
    def __init__(self, token):
        self.name = token.lexeme
        super().__init__(token, f"Undefined property '{token.lexeme}'")


class NotAnInstanceError(LoxRuntimeError):
    """
    Error for property access on a value that has no properties.
    """


class InvalidSuperclassError(LoxRuntimeError):
    """
    Error for a class declaration whose superclass is not a class.
    """
    def __init__(self, token):
        super().__init__(token, "Superclass must be a class")


class NotCallableError(LoxRuntimeError):
    """
    Error for calling a value that is not a function or class.
    """
    def __init__(self, token):
        super().__init__(token, "Can only call functions and classes")


class ArityError(LoxRuntimeError):
    """
    Error for a call whose argument count does not match the callee.
    """
    def __init__(self, token, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(token, f"Expected {expected} arguments but got {actual}")


class PrivateAccessError(LoxRuntimeError):
    """
    Error for reading a private method from outside its class.
    """
    def __init__(self, token):
        self.name = token.lexeme
        super().__init__(token, f"Method '{token.lexeme}' is private")


class StaticAccessError(LoxRuntimeError):
    """
    Error for reading a static method through an instance.
    """
    def __init__(self, token):
        self.name = token.lexeme
        super().__init__(token, f"Static method '{token.lexeme}' must be accessed through its class")


class NativeFunctionError(LoxRuntimeError):
    """
    Error raised from inside a built-in function.
    """


class MisplacedBreakError(LoxRuntimeError):
    """
    Error for a 'break' that is not inside a loop.
    """
    def __init__(self, token=None):
        super().__init__(token, "'break' used outside of a loop")


class MisplacedReturnError(LoxRuntimeError):
    """
    Error for a 'return' that is not inside a function.
    """
    def __init__(self, token=None):
        super().__init__(token, "'return' used outside of a function")


class StackOverflowError(LoxRuntimeError):
    """
    Error for calls nested deeper than the host interpreter allows.
    """
    def __init__(self, token=None):
        super().__init__(token, "Stack overflow")
