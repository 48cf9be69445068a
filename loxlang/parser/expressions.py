"""Expression parsing utilities for Lox.

These functions operate on a `loxlang.parser.parser.Parser` instance. Each
one parses a single precedence level and calls the next-higher level for
its operands, from the comma operator down to primary expressions.


File: expressions.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from typing import TYPE_CHECKING

from loxlang.exceptions import ParseErrorKind
from loxlang.nodes import (
    Assign,
    Binary,
    Call,
    Comma,
    Expr,
    Get,
    Grouping,
    Literal,
    Logical,
    Set,
    Super,
    Ternary,
    This,
    Unary,
    Variable,
)
from loxlang.tokens import TokenType

if TYPE_CHECKING:
    from loxlang.parser import Parser


# Binary operators that may appear with no left operand, mapped to the
# precedence level used to parse the orphaned right operand.
_ORPHAN_OPERATORS = {
    TokenType.BANG_EQUAL: "equality",
    TokenType.EQUAL_EQUAL: "equality",
    TokenType.GREATER: "comparison",
    TokenType.GREATER_EQUAL: "comparison",
    TokenType.LESS: "comparison",
    TokenType.LESS_EQUAL: "comparison",
    TokenType.PLUS: "term",
    TokenType.SLASH: "factor",
    TokenType.STAR: "factor",
}


def parse_expression(parser: 'Parser') -> Expr:
    """
    Parse a comma-separated sequence of expressions.

    Syntax:
        <assignment> ( , <assignment> )*

    Args:
        parser: The parser instance.

    Returns:
        Expr: The expression; a sequence nests to the left as ``Comma`` nodes.
    """
    expr = parser.assignment()
    while parser.match(TokenType.COMMA):
        right = parser.assignment()
        expr = Comma(expr, right)
    return expr


def parse_assignment(parser: 'Parser') -> Expr:
    """
    Parse an assignment to a variable or a property.

    Syntax:
        <identifier> = <assignment>
        <call>.<identifier> = <assignment>

    An invalid target is reported but not raised, and the left-hand side is
    returned as parsed.
    """
    expr = parser.ternary()

    if parser.match(TokenType.EQUAL):
        equals = parser.previous()
        value = parser.assignment()

        match expr:
            case Variable(name=name):
                return Assign(name, value)
            case Get(obj=obj, name=name):
                return Set(obj, name, value)

        parser.error(equals, ParseErrorKind.INVALID_ASSIGNMENT_TARGET, "Invalid assignment target")

    return expr


def parse_ternary(parser: 'Parser') -> Expr:
    """
    Parse a conditional expression.

    Syntax:
        <or> ? <assignment> : <ternary>

    The else branch recurses into this level, so ``a ? b : c ? d : e``
    groups as ``a ? b : (c ? d : e)``.
    """
    expr = parser.logical_or()

    if parser.match(TokenType.QUESTION):
        then_branch = parser.assignment()
        parser.eat(TokenType.COLON, "Expect ':' after then branch of conditional expression")
        else_branch = parser.ternary()
        expr = Ternary(expr, then_branch, else_branch)

    return expr


def parse_logical_or(parser: 'Parser') -> Expr:
    expr = parser.logical_and()
    while parser.match(TokenType.OR):
        operator = parser.previous()
        right = parser.logical_and()
        expr = Logical(expr, operator, right)
    return expr


def parse_logical_and(parser: 'Parser') -> Expr:
    expr = parser.equality()
    while parser.match(TokenType.AND):
        operator = parser.previous()
        right = parser.equality()
        expr = Logical(expr, operator, right)
    return expr


def parse_equality(parser: 'Parser') -> Expr:
    """
    Parse ``==`` and ``!=`` comparisons, left-associative.
    """
    expr = parser.comparison()
    while parser.match(TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL):
        operator = parser.previous()
        right = parser.comparison()
        expr = Binary(expr, operator, right)
    return expr


def parse_comparison(parser: 'Parser') -> Expr:
    expr = parser.term()
    while parser.match(
        TokenType.GREATER,
        TokenType.GREATER_EQUAL,
        TokenType.LESS,
        TokenType.LESS_EQUAL,
    ):
        operator = parser.previous()
        right = parser.term()
        expr = Binary(expr, operator, right)
    return expr


def parse_term(parser: 'Parser') -> Expr:
    expr = parser.factor()
    while parser.match(TokenType.MINUS, TokenType.PLUS):
        operator = parser.previous()
        right = parser.factor()
        expr = Binary(expr, operator, right)
    return expr


def parse_factor(parser: 'Parser') -> Expr:
    expr = parser.unary()
    while parser.match(TokenType.SLASH, TokenType.STAR):
        operator = parser.previous()
        right = parser.unary()
        expr = Binary(expr, operator, right)
    return expr


def parse_unary(parser: 'Parser') -> Expr:
    """
    Parse a prefix operator applied to a unary expression.

    Syntax:
        ( ! | - ) <unary> | <call>
    """
    if parser.match(TokenType.BANG, TokenType.MINUS):
        operator = parser.previous()
        right = parser.unary()
        return Unary(operator, right)
    return parser.call()


def _finish_call(parser: 'Parser', callee: Expr) -> Expr:
    """
    Parse the argument list of a call whose '(' has been consumed.
    """
    arguments = []
    if not parser.check(TokenType.RIGHT_PAREN):
        while True:
            if len(arguments) >= parser.MAX_ARGUMENTS:
                parser.error(
                    parser.curr_token,
                    ParseErrorKind.TOO_MANY_ARGUMENTS,
                    f"Can't have more than {parser.MAX_ARGUMENTS} arguments",
                )
            arguments.append(parser.assignment())
            if not parser.match(TokenType.COMMA):
                break

    paren = parser.eat(TokenType.RIGHT_PAREN, "Expect ')' after arguments")
    return Call(callee, paren, tuple(arguments))


def parse_call(parser: 'Parser') -> Expr:
    """
    Parse a primary expression followed by any chain of calls and
    property accesses.

    Syntax:
        <primary> ( ( <arguments>? ) | . <identifier> )*

    Args:
        parser: The parser instance.

    Returns:
        Expr: A ``Call``/``Get`` chain, or the primary itself.
    """
    expr = parser.primary()

    while True:
        if parser.match(TokenType.LEFT_PAREN):
            expr = _finish_call(parser, expr)
        elif parser.match(TokenType.DOT):
            name = parser.eat(TokenType.IDENTIFIER, "Expect property name after '.'")
            expr = Get(expr, name)
        else:
            break

    return expr


def parse_primary(parser: 'Parser') -> Expr:
    """
    Parse a primary expression.

    Handles literals, identifiers, ``this``, ``super.<name>``, the ``print``
    keyword used as a value, and parenthesized expressions.

    Raises:
        ParseError: If no expression starts at the current token.
    """
    if parser.match(TokenType.FALSE):
        return Literal(False)
    if parser.match(TokenType.TRUE):
        return Literal(True)
    if parser.match(TokenType.NIL):
        return Literal(None)

    if parser.match(TokenType.NUMBER, TokenType.STRING):
        return Literal(parser.previous().literal)

    if parser.match(TokenType.SUPER):
        keyword = parser.previous()
        parser.eat(TokenType.DOT, "Expect '.' after 'super'")
        method = parser.eat(TokenType.IDENTIFIER, "Expect superclass method name")
        return Super(keyword, method)

    if parser.match(TokenType.THIS):
        return This(parser.previous())

    # 'print' in value position names the native function
    if parser.match(TokenType.IDENTIFIER, TokenType.PRINT):
        return Variable(parser.previous())

    if parser.match(TokenType.LEFT_PAREN):
        expr = parser.expression()
        parser.eat(TokenType.RIGHT_PAREN, "Expect ')' after expression")
        return Grouping(expr)

    tok = parser.curr_token
    if tok.type in _ORPHAN_OPERATORS:
        parser.advance()
        parser.error(
            tok,
            ParseErrorKind.MISSING_LEFT_OPERAND,
            f"Missing left-hand operand for '{tok.lexeme}'",
        )
        return getattr(parser, _ORPHAN_OPERATORS[tok.type])()

    raise parser.error(tok, ParseErrorKind.EXPECTED_EXPRESSION, "Expect expression")
