"""Statement parsing utilities for Lox.

These functions operate on a `loxlang.parser.parser.Parser` instance and
handle the declaration and statement forms in the language such as blocks,
conditionals, loops, and function and class definitions.


File: statements.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from typing import TYPE_CHECKING

from loxlang.exceptions import ParseErrorKind
from loxlang.nodes import (
    Block,
    Break,
    Class,
    Expression,
    Function,
    If,
    Literal,
    Loop,
    Print,
    Return,
    Stmt,
    Var,
    Variable,
    While,
)
from loxlang.tokens import TokenType

if TYPE_CHECKING:
    from loxlang.parser import Parser


QUALIFIERS = (TokenType.PUB, TokenType.PRIV, TokenType.STATIC)


def parse_declaration(parser: 'Parser') -> Stmt:
    """
    Parse a declaration, falling back to an ordinary statement.

    Syntax:
        class ... | fun ... | var ... | <statement>
    """
    if parser.match(TokenType.CLASS):
        return parser.class_declaration()
    if parser.match(TokenType.FUN):
        return parser.function("function")
    if parser.match(TokenType.VAR):
        return parser.var_declaration()
    return parser.statement()


def parse_class_declaration(parser: 'Parser') -> Class:
    """
    Parse a class declaration. The 'class' keyword has been consumed.

    Syntax:
        class <identifier> ( < <identifier> )? { <method>* }

    Args:
        parser: The parser instance.

    Returns:
        Class: The class node with its methods in source order.
    """
    name = parser.eat(TokenType.IDENTIFIER, "Expect class name")

    superclass = None
    if parser.match(TokenType.LESS):
        parser.eat(TokenType.IDENTIFIER, "Expect superclass name")
        superclass = Variable(parser.previous())

    parser.eat(TokenType.LEFT_BRACE, "Expect '{' before class body")

    methods = []
    while not parser.check(TokenType.RIGHT_BRACE) and not parser.is_at_end():
        methods.append(_parse_method(parser))

    parser.eat(TokenType.RIGHT_BRACE, "Expect '}' after class body")
    return Class(name, superclass, tuple(methods))


def _parse_method(parser: 'Parser') -> Function:
    """
    Parse a method with its optional qualifiers.

    Syntax:
        ( pub | priv | static )* <identifier> ( <parameters>? ) <block>

    Qualifiers may come in any order. Giving both ``pub`` and ``priv`` is
    reported and the last one wins.
    """
    is_public = True
    is_static = False
    visibility = None

    while parser.curr_token.type in QUALIFIERS:
        tok = parser.advance()
        if tok.type is TokenType.STATIC:
            is_static = True
            continue
        if visibility is not None and visibility.type is not tok.type:
            parser.error(
                tok,
                ParseErrorKind.CONFLICTING_QUALIFIERS,
                "A method cannot be both 'pub' and 'priv'",
            )
        visibility = tok
        is_public = tok.type is TokenType.PUB

    return parser.function("method", is_public, is_static)


def parse_function(parser: 'Parser', kind: str, is_public: bool = True, is_static: bool = False) -> Function:
    """
    Parse a function or method after its 'fun' keyword or qualifiers.

    Syntax:
        <identifier> ( <identifier> ( , <identifier> )* )? ) { <statement>* }

    Args:
        parser: The parser instance.
        kind: "function" or "method", used in error messages.
        is_public: Visibility qualifier of a method.
        is_static: Whether the method belongs to the class rather than instances.

    Returns:
        Function: The function declaration node.
    """
    name = parser.eat(TokenType.IDENTIFIER, f"Expect {kind} name")
    parser.eat(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name")

    params = []
    if not parser.check(TokenType.RIGHT_PAREN):
        while True:
            if len(params) >= parser.MAX_ARGUMENTS:
                parser.error(
                    parser.curr_token,
                    ParseErrorKind.TOO_MANY_PARAMETERS,
                    f"Can't have more than {parser.MAX_ARGUMENTS} parameters",
                )
            params.append(parser.eat(TokenType.IDENTIFIER, "Expect parameter name"))
            if not parser.match(TokenType.COMMA):
                break

    parser.eat(TokenType.RIGHT_PAREN, "Expect ')' after parameters")
    parser.eat(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body")
    body = parser.block()
    return Function(name, tuple(params), tuple(body), is_public, is_static)


def parse_var_declaration(parser: 'Parser') -> Var:
    """
    Parse a variable declaration. The 'var' keyword has been consumed.

    Syntax:
        var <identifier> ( = <expression> )? ;
    """
    name = parser.eat(TokenType.IDENTIFIER, "Expect variable name")

    initializer = None
    if parser.match(TokenType.EQUAL):
        initializer = parser.expression()

    parser.eat(TokenType.SEMICOLON, "Expect ';' after variable declaration")
    return Var(name, initializer)


def parse_statement(parser: 'Parser') -> Stmt:
    """
    Parse a single statement.

    Dispatches on the leading keyword; anything else is an expression
    statement.

    Raises:
        ParseError: If the statement starts with a method qualifier, or on
            any error from the statement parsers.
    """
    tok = parser.curr_token
    if tok.type in QUALIFIERS:
        raise parser.error(
            tok,
            ParseErrorKind.UNEXPECTED_QUALIFIER,
            f"'{tok.lexeme}' is only allowed on methods inside a class body",
        )

    if parser.match(TokenType.FOR):
        return _parse_for(parser)
    if parser.match(TokenType.IF):
        return _parse_if(parser)
    if parser.match(TokenType.PRINT):
        return _parse_print(parser)
    if parser.match(TokenType.RETURN):
        return _parse_return(parser)
    if parser.match(TokenType.WHILE):
        return _parse_while(parser)
    if parser.match(TokenType.LOOP):
        return Loop(parser.statement())
    if parser.match(TokenType.BREAK):
        keyword = parser.previous()
        parser.eat(TokenType.SEMICOLON, "Expect ';' after 'break'")
        return Break(keyword)
    if parser.match(TokenType.LEFT_BRACE):
        return Block(tuple(parser.block()))

    expr = parser.expression()
    parser.eat(TokenType.SEMICOLON, "Expect ';' after expression")
    return Expression(expr)


def parse_block(parser: 'Parser') -> list[Stmt]:
    """
    Parse the declarations of a block. The '{' has been consumed.

    Syntax:
        { <declaration>* }
    """
    statements = []
    while not parser.check(TokenType.RIGHT_BRACE) and not parser.is_at_end():
        statements.append(parser.declaration())
    parser.eat(TokenType.RIGHT_BRACE, "Expect '}' after block")
    return statements


def _parse_for(parser: 'Parser') -> Stmt:
    """
    Parse a for loop and desugar it into a while loop.

    Syntax:
        for ( <var-decl> | <expr-stmt> | ; <expression>? ; <expression>? ) <statement>

    The result is ``{ init; while (cond) { body; incr; } }``, with a missing
    condition read as ``true``.
    """
    parser.eat(TokenType.LEFT_PAREN, "Expect '(' after 'for'")

    if parser.match(TokenType.SEMICOLON):
        initializer = None
    elif parser.match(TokenType.VAR):
        initializer = parser.var_declaration()
    else:
        expr = parser.expression()
        parser.eat(TokenType.SEMICOLON, "Expect ';' after loop initializer")
        initializer = Expression(expr)

    condition = None
    if not parser.check(TokenType.SEMICOLON):
        condition = parser.expression()
    parser.eat(TokenType.SEMICOLON, "Expect ';' after loop condition")

    increment = None
    if not parser.check(TokenType.RIGHT_PAREN):
        increment = parser.expression()
    parser.eat(TokenType.RIGHT_PAREN, "Expect ')' after for clauses")

    body = parser.statement()

    if increment is not None:
        body = Block((body, Expression(increment)))
    if condition is None:
        condition = Literal(True)
    body = While(condition, body)
    if initializer is not None:
        body = Block((initializer, body))
    return body


def _parse_if(parser: 'Parser') -> If:
    """
    Parse an if statement. A dangling else binds to the nearest if.

    Syntax:
        if ( <expression> ) <statement> ( else <statement> )?
    """
    parser.eat(TokenType.LEFT_PAREN, "Expect '(' after 'if'")
    condition = parser.expression()
    parser.eat(TokenType.RIGHT_PAREN, "Expect ')' after if condition")

    then_branch = parser.statement()
    else_branch = parser.statement() if parser.match(TokenType.ELSE) else None
    return If(condition, then_branch, else_branch)


def _parse_while(parser: 'Parser') -> While:
    """
    Parse a while loop with its optional else branch.

    Syntax:
        while ( <expression> ) <statement> ( else <statement> )?
    """
    parser.eat(TokenType.LEFT_PAREN, "Expect '(' after 'while'")
    condition = parser.expression()
    parser.eat(TokenType.RIGHT_PAREN, "Expect ')' after condition")

    body = parser.statement()
    else_branch = parser.statement() if parser.match(TokenType.ELSE) else None
    return While(condition, body, else_branch)


def _parse_print(parser: 'Parser') -> Print:
    value = parser.expression()
    parser.eat(TokenType.SEMICOLON, "Expect ';' after value")
    return Print(value)


def _parse_return(parser: 'Parser') -> Return:
    keyword = parser.previous()
    value = None
    if not parser.check(TokenType.SEMICOLON):
        value = parser.expression()
    parser.eat(TokenType.SEMICOLON, "Expect ';' after return value")
    return Return(keyword, value)
