"""Lox language package.

A tree-walking interpreter for a small class-based scripting language. The
pipeline is `loxlang.lexer.tokenize` -> `loxlang.parser.Parser` ->
`loxlang.resolver.Resolver` -> `loxlang.interpreter.Interpreter`.


File: __init__.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

__version__ = "0.1.0"
