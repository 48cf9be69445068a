"""Lexer for Lox.

This lexer performs a single pass over the source code using a combined
regular expression of named groups. Each match yields a :class:`Token`
containing its type, lexeme, literal value and source line number.

Tokens cover literals (numbers, strings), keywords (``class``, ``fun``,
``loop`` …), operators and delimiters. Comment text beginning with ``//`` or
enclosed within ``/* … */`` is skipped during tokenization while still
advancing the line counter so line numbers remain accurate.


File: lexer.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.1
License: MIT
"""

import re

from loxlang.exceptions import ScanError
from loxlang.tokens import Token, TokenType

KEYWORDS = [
    TokenType.AND, TokenType.BREAK, TokenType.CLASS, TokenType.ELSE,
    TokenType.FALSE, TokenType.FOR, TokenType.FUN, TokenType.IF,
    TokenType.LOOP, TokenType.NIL, TokenType.OR, TokenType.PRINT,
    TokenType.PRIV, TokenType.PUB, TokenType.RETURN, TokenType.STATIC,
    TokenType.SUPER, TokenType.THIS, TokenType.TRUE, TokenType.VAR,
    TokenType.WHILE,
]

token_specification: list[tuple[str, str]] = [
    # Comments
    ('BLOCK_COMMENT',       r'/\*(?:.|\n)*?\*/'),
    ('OPEN_COMMENT',        r'/\*(?:.|\n)*\Z'),
    ('LINE_COMMENT',        r'//[^\n]*'),

    # Literals
    ('NUMBER',              r'\d+(?:\.\d+)?'),
    ('STRING',              r'"(?:[^"\\]|\\.)*"'),
    ('OPEN_STRING',         r'"(?:[^"\\]|\\.)*\\?\Z'),

    # Keywords
    *[(kw.name, rf'\b{kw.value}\b') for kw in KEYWORDS],

    # Identifiers
    ('IDENTIFIER',          r'[A-Za-z_][A-Za-z0-9_]*'),

    # Two-character operators
    ('BANG_EQUAL',          r'!='),
    ('EQUAL_EQUAL',         r'=='),
    ('GREATER_EQUAL',       r'>='),
    ('LESS_EQUAL',          r'<='),

    # Single-character operators and delimiters
    ('LEFT_PAREN',          r'\('),
    ('RIGHT_PAREN',         r'\)'),
    ('LEFT_BRACE',          r'\{'),
    ('RIGHT_BRACE',         r'\}'),
    ('COMMA',               r','),
    ('DOT',                 r'\.'),
    ('MINUS',               r'-'),
    ('PLUS',                r'\+'),
    ('SEMICOLON',           r';'),
    ('SLASH',               r'/'),
    ('STAR',                r'\*'),
    ('QUESTION',            r'\?'),
    ('COLON',               r':'),
    ('BANG',                r'!'),
    ('EQUAL',               r'='),
    ('GREATER',             r'>'),
    ('LESS',                r'<'),

    # Miscellaneous
    ('NEWLINE',             r'\n'),
    ('SKIP',                r'[ \t\r]+'),
    ('MISMATCH',            r'.'),
]

tok_regex = re.compile('|'.join(f'(?P<{name}>{pattern})' for name, pattern in token_specification))


def _unescape(body: str, line: int) -> str:
    """
    Decode backslash escapes in a string literal body.
    """
    if '\\' not in body:
        return body
    try:
        return body.encode('latin-1', 'backslashreplace').decode('unicode_escape')
    except UnicodeDecodeError as e:
        raise ScanError(f"Invalid escape sequence in string literal: {e.reason}", line) from e


def tokenize(code: str) -> list[Token]:
    """
    Convert a string of source code into a list of tokens.

    Parameters:
        code (str): The source code to tokenize.

    Returns:
        list[Token]: A list of Token instances terminated by an ``EOF`` token.

    Raises:
        ScanError: On an unexpected character, an unterminated string or an
            unterminated block comment.
    """
    tokens: list[Token] = []
    line_num = 1

    for match_obj in tok_regex.finditer(code):
        kind = match_obj.lastgroup
        value = match_obj.group()

        if kind == 'NEWLINE':
            line_num += 1
            continue
        if kind in ('SKIP', 'LINE_COMMENT'):
            continue
        if kind == 'BLOCK_COMMENT':
            line_num += value.count('\n')
            continue
        if kind == 'OPEN_COMMENT':
            raise ScanError("Unterminated block comment", line_num, at_end=True)
        if kind == 'OPEN_STRING':
            raise ScanError("Unterminated string", line_num, at_end=True)
        if kind == 'MISMATCH':
            raise ScanError(f"Unexpected character {value!r}", line_num)

        if kind == 'NUMBER':
            tokens.append(Token(TokenType.NUMBER, value, float(value), line_num))
        elif kind == 'STRING':
            literal = _unescape(value[1:-1], line_num)
            tokens.append(Token(TokenType.STRING, value, literal, line_num))
            line_num += value.count('\n')
        else:
            tokens.append(Token(TokenType[kind], value, None, line_num))

    tokens.append(Token(TokenType.EOF, "", None, line_num))
    return tokens
