"""Runtime object model.

Native functions, user functions and classes all satisfy one capability,
:class:`LoxCallable` (``call`` and ``arity``), so the interpreter dispatches
a call without knowing what kind of callee it has.

- :class:`LoxFunction` pairs a ``fun`` declaration with the environment it
  closed over. ``bind`` and ``inject`` derive new functions whose closure is
  one frame deeper, holding ``this`` or the declaring class respectively.
- :class:`LoxClass` splits its methods into instance and static tables once,
  when it is built, and creates instances when called.
- :class:`LoxInstance` holds per-object fields and binds methods on read.


File: callables.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional

from loxlang.completion import Flow
from loxlang.environment import Environment
from loxlang.exceptions import (
    MisplacedBreakError,
    PrivateAccessError,
    StaticAccessError,
    UndefinedPropertyError,
)
from loxlang.nodes import Function
from loxlang.tokens import Token

if TYPE_CHECKING:
    from loxlang.interpreter import Interpreter


class LoxCallable(ABC):
    """Anything a Lox program can call."""

    @abstractmethod
    def call(self, interpreter: 'Interpreter', arguments: list) -> Any:
        raise NotImplementedError

    @abstractmethod
    def arity(self) -> int:
        raise NotImplementedError


class LoxFunction(LoxCallable):
    """Runtime representation of a user-defined function or method."""

    def __init__(
        self,
        declaration: Function,
        closure: Environment,
        is_initializer: bool = False,
        owner: Optional['LoxClass'] = None,
    ):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer
        self.is_public = declaration.is_public
        self.is_static = declaration.is_static
        # Class whose body lexically contains this function, if any.
        self.owner = owner

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    def bind(self, instance: 'LoxInstance') -> 'LoxFunction':
        """
        Return a copy of this method whose closure defines ``this``.
        """
        env = Environment(self.closure)
        env.define("this", instance)
        return LoxFunction(self.declaration, env, self.is_initializer, self.owner)

    def inject(self, klass: 'LoxClass') -> 'LoxFunction':
        """
        Return a copy of this static method whose closure defines its class by name.
        """
        env = Environment(self.closure)
        env.define(klass.name, klass)
        return LoxFunction(self.declaration, env, self.is_initializer, self.owner)

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: 'Interpreter', arguments: list) -> Any:
        env = Environment(self.closure)
        for param, arg in zip(self.declaration.params, arguments):
            env.define(param.lexeme, arg, param)

        interpreter.call_stack.append(self)
        try:
            completion = interpreter.execute_block(self.declaration.body, env)
        finally:
            interpreter.call_stack.pop()

        if completion.flow is Flow.BREAK:
            raise MisplacedBreakError(completion.keyword)
        if self.is_initializer:
            return self.closure.get_at(0, "this")
        if completion.flow is Flow.RETURN:
            return completion.value
        return None

    def __str__(self) -> str:
        return f"<fn {self.name}>"

    def __repr__(self) -> str:
        qualifiers = []
        if not self.is_public:
            qualifiers.append("priv")
        if self.is_static:
            qualifiers.append("static")
        prefix = " ".join(qualifiers)
        return f"LoxFunction({prefix + ' ' if prefix else ''}{self.name}/{self.arity()})"


class LoxClass(LoxCallable):
    """Runtime representation of a class."""

    def __init__(self, name: str, superclass: Optional['LoxClass'], methods: dict[str, LoxFunction]):
        self.name = name
        self.superclass = superclass
        self.methods = {key: fn for key, fn in methods.items() if not fn.is_static}
        self.statics = {key: fn for key, fn in methods.items() if fn.is_static}
        for fn in methods.values():
            fn.owner = self

    def find_method(self, name: str) -> Optional[LoxFunction]:
        klass = self
        while klass is not None:
            if name in klass.methods:
                return klass.methods[name]
            klass = klass.superclass
        return None

    def find_static(self, name: str) -> Optional[LoxFunction]:
        klass = self
        while klass is not None:
            if name in klass.statics:
                return klass.statics[name]
            klass = klass.superclass
        return None

    def get(self, name: Token, interpreter: 'Interpreter') -> LoxFunction:
        """
        Read a static method through the class.

        Raises:
            PrivateAccessError: If the method is private and no method of the
                declaring class is currently executing.
            UndefinedPropertyError: If there is no such static method.
        """
        method = self.find_static(name.lexeme)
        if method is None:
            raise UndefinedPropertyError(name)
        if not method.is_public and interpreter.current_owner() is not method.owner:
            raise PrivateAccessError(name)
        return method.inject(method.owner)

    def arity(self) -> int:
        initializer = self.find_method("init")
        return initializer.arity() if initializer is not None else 0

    def call(self, interpreter: 'Interpreter', arguments: list) -> 'LoxInstance':
        instance = LoxInstance(self)
        initializer = self.find_method("init")
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        return instance

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        if self.superclass is not None:
            return f"LoxClass({self.name} < {self.superclass.name})"
        return f"LoxClass({self.name})"


class LoxInstance:
    """An object created by calling a class."""

    def __init__(self, klass: LoxClass):
        self.klass = klass
        self.fields: dict[str, Any] = {}

    def get(self, name: Token, via_this: bool = False) -> Any:
        """
        Read a field, or bind and return a method.

        Parameters:
            name (Token): The property name.
            via_this (bool): Whether the receiver expression was a literal
                ``this``; private methods are only readable that way.

        Raises:
            PrivateAccessError: For a private method read through another receiver.
            StaticAccessError: For a static method read through an instance.
            UndefinedPropertyError: If the property does not exist.
        """
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]

        method = self.klass.find_method(name.lexeme)
        if method is not None:
            if not method.is_public and not via_this:
                raise PrivateAccessError(name)
            return method.bind(self)

        if self.klass.find_static(name.lexeme) is not None:
            raise StaticAccessError(name)
        raise UndefinedPropertyError(name)

    def set(self, name: Token, value: Any) -> None:
        self.fields[name.lexeme] = value

    def __str__(self) -> str:
        return f"{self.klass.name} instance"

    def __repr__(self) -> str:
        return f"LoxInstance({self.klass.name})"
