"""
Main parser entry point for Lox.

This module defines the `Parser` class, which coordinates the recursive
descent parsing process. The actual parsing routines are split across
`loxlang.parser.expressions` and `loxlang.parser.statements`.

Syntax errors do not stop the parse. The failing declaration is recorded,
the parser discards tokens until a likely statement boundary and carries
on, so one pass reports every independent error in the source.


File: parser.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.1
License: MIT
"""

from loxlang.exceptions import ParseError, ParseErrorKind
from loxlang.nodes import Expr, Function, Stmt
from loxlang.tokens import Token, TokenType

from . import expressions as _expr
from . import statements as _stmt

# Keywords that start a fresh declaration or statement.
SYNC_BOUNDARIES = frozenset({
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
})


class Parser:
    """Lox parser."""

    MAX_ARGUMENTS = 255

    def __init__(self, tokens: list[Token]):
        """
        Initialize the parser with a list of tokens.

        Parameters:
            tokens (list): A list of Token instances. An ``EOF`` token is
                appended when the list does not already end with one.
        """
        tokens = list(tokens)
        if not tokens or tokens[-1].type is not TokenType.EOF:
            eof_line = tokens[-1].line if tokens else 1
            tokens.append(Token(TokenType.EOF, "", None, eof_line))
        self.tokens = tokens
        self.position = 0
        self.errors: list[ParseError] = []

    # Token helpers
    @property
    def curr_token(self) -> Token:
        return self.tokens[self.position]

    def previous(self) -> Token:
        return self.tokens[self.position - 1]

    def is_at_end(self) -> bool:
        return self.curr_token.type is TokenType.EOF

    def check(self, token_type: TokenType) -> bool:
        return not self.is_at_end() and self.curr_token.type is token_type

    def advance(self) -> Token:
        if not self.is_at_end():
            self.position += 1
        return self.previous()

    def match(self, *token_types: TokenType) -> bool:
        """
        Consume the current token if it is one of ``token_types``.
        """
        for token_type in token_types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def eat(self, token_type: TokenType, message: str) -> Token:
        """
        Consume the current token if it matches the expected type.

        Parameters:
            token_type (TokenType): The expected token type.
            message (str): Error text used when the token does not match.

        Returns:
            Token: The consumed token.

        Raises:
            ParseError: If the token does not match the expected type.
        """
        if self.check(token_type):
            return self.advance()
        raise self.error(self.curr_token, ParseErrorKind.EXPECTED_TOKEN, message)

    def error(self, token: Token, kind: ParseErrorKind, message: str) -> ParseError:
        """
        Record a syntax error and return it.

        Callers raise the result when the error leaves the parser unable to
        continue the current declaration; recoverable errors are only recorded.
        """
        err = ParseError(kind, token, message)
        self.errors.append(err)
        return err

    def synchronize(self) -> None:
        """
        Discard tokens until the start of the next statement.
        """
        self.advance()
        while not self.is_at_end():
            if self.previous().type is TokenType.SEMICOLON:
                return
            if self.curr_token.type in SYNC_BOUNDARIES:
                return
            self.advance()


    # Expression wrappers
    def expression(self) -> Expr:
        """
        Parse a full expression, starting from the lowest-precedence operator.
        """
        return _expr.parse_expression(self)

    def assignment(self) -> Expr:
        """
        Parse an assignment, or anything of higher precedence.
        """
        return _expr.parse_assignment(self)

    def ternary(self) -> Expr:
        """
        Parse a conditional ``a ? b : c`` expression.
        """
        return _expr.parse_ternary(self)

    def logical_or(self) -> Expr:
        """
        Parse a logical OR expression.
        """
        return _expr.parse_logical_or(self)

    def logical_and(self) -> Expr:
        """
        Parse a logical AND expression.
        """
        return _expr.parse_logical_and(self)

    def equality(self) -> Expr:
        """
        Parse an equality expression.
        """
        return _expr.parse_equality(self)

    def comparison(self) -> Expr:
        """
        Parse a comparison expression using relational operators.
        """
        return _expr.parse_comparison(self)

    def term(self) -> Expr:
        """
        Parse an addition or subtraction expression.
        """
        return _expr.parse_term(self)

    def factor(self) -> Expr:
        """
        Parse a multiplication or division expression.
        """
        return _expr.parse_factor(self)

    def unary(self) -> Expr:
        """
        Parse a prefix ``!`` or ``-`` expression.
        """
        return _expr.parse_unary(self)

    def call(self) -> Expr:
        """
        Parse a chain of calls and property accesses.
        """
        return _expr.parse_call(self)

    def primary(self) -> Expr:
        """
        Parse a literal, variable, keyword expression or parenthesized group.
        """
        return _expr.parse_primary(self)


    # Statement wrappers
    def declaration(self) -> Stmt:
        """
        Parse a declaration or, failing that, a statement.
        """
        return _stmt.parse_declaration(self)

    def class_declaration(self) -> Stmt:
        """
        Parse a class declaration.
        """
        return _stmt.parse_class_declaration(self)

    def function(self, kind: str, is_public: bool = True, is_static: bool = False) -> Function:
        """
        Parse the name, parameters and body of a function or method.
        """
        return _stmt.parse_function(self, kind, is_public, is_static)

    def var_declaration(self) -> Stmt:
        """
        Parse a 'var' declaration.
        """
        return _stmt.parse_var_declaration(self)

    def statement(self) -> Stmt:
        """
        Parse a single statement.
        """
        return _stmt.parse_statement(self)

    def block(self) -> list[Stmt]:
        """
        Parse the statements of a block up to its closing brace.
        """
        return _stmt.parse_block(self)


    def parse(self) -> tuple[list[Stmt], list[ParseError]]:
        """
        Parse the full input into a list of statements.

        Returns:
            tuple: The statements that parsed cleanly and every syntax error
                collected along the way.
        """
        statements = []
        while not self.is_at_end():
            try:
                statements.append(self.declaration())
            except ParseError:
                self.synchronize()
            except RecursionError:
                self.error(self.curr_token, ParseErrorKind.NESTING_TOO_DEEP, "Expression nests too deeply")
                self.synchronize()
        return statements, self.errors
