"""
Tests for the Lox lexer
"""
import pytest

from loxlang.exceptions import ScanError
from loxlang.lexer import tokenize
from loxlang.tokens import TokenType


def types(source: str) -> list[TokenType]:
    return [tok.type for tok in tokenize(source)]


def test_variable_declaration_tokens():
    """
    Test the token stream for a simple declaration.
    """
    tokens = tokenize("var x = 1.5;")
    assert [t.type for t in tokens] == [
        TokenType.VAR,
        TokenType.IDENTIFIER,
        TokenType.EQUAL,
        TokenType.NUMBER,
        TokenType.SEMICOLON,
        TokenType.EOF,
    ]
    assert tokens[3].literal == 1.5
    assert tokens[1].lexeme == "x"


def test_empty_source_is_just_eof():
    """
    Test that empty input still produces a terminating EOF token.
    """
    assert types("") == [TokenType.EOF]


def test_keywords_need_word_boundaries():
    """
    Test that identifiers starting with a keyword are not split.
    """
    assert types("printer print _print") == [
        TokenType.IDENTIFIER,
        TokenType.PRINT,
        TokenType.IDENTIFIER,
        TokenType.EOF,
    ]


def test_qualifier_keywords():
    assert types("pub priv static") == [
        TokenType.PUB,
        TokenType.PRIV,
        TokenType.STATIC,
        TokenType.EOF,
    ]


def test_two_character_operators_win():
    """
    Test that two-character operators are preferred over their prefixes.
    """
    assert types("a >= b != c == d <= e") == [
        TokenType.IDENTIFIER,
        TokenType.GREATER_EQUAL,
        TokenType.IDENTIFIER,
        TokenType.BANG_EQUAL,
        TokenType.IDENTIFIER,
        TokenType.EQUAL_EQUAL,
        TokenType.IDENTIFIER,
        TokenType.LESS_EQUAL,
        TokenType.IDENTIFIER,
        TokenType.EOF,
    ]


def test_ternary_punctuation():
    assert types("a ? b : c") == [
        TokenType.IDENTIFIER,
        TokenType.QUESTION,
        TokenType.IDENTIFIER,
        TokenType.COLON,
        TokenType.IDENTIFIER,
        TokenType.EOF,
    ]


def test_comments_are_skipped_and_lines_counted():
    """
    Test that comments produce no tokens but still advance the line count.
    """
    tokens = tokenize("// line comment\n/* block\ncomment */ x")
    assert [t.type for t in tokens] == [TokenType.IDENTIFIER, TokenType.EOF]
    assert tokens[0].line == 3


def test_string_literal_escapes():
    """
    Test that escape sequences in strings are decoded into the literal.
    """
    tokens = tokenize('"a\\tb\\n"')
    assert tokens[0].type == TokenType.STRING
    assert tokens[0].literal == "a\tb\n"
    assert tokens[0].lexeme == '"a\\tb\\n"'


def test_multiline_string_advances_line():
    tokens = tokenize('"one\ntwo" x')
    assert tokens[0].literal == "one\ntwo"
    assert tokens[1].line == 2


def test_unterminated_string():
    """
    Test that an unterminated string is reported as ending the input early.
    """
    with pytest.raises(ScanError) as exc:
        tokenize('print "oops;')
    assert exc.value.at_end
    assert "Unterminated string" in str(exc.value)


def test_unterminated_block_comment():
    with pytest.raises(ScanError) as exc:
        tokenize("var a = 1;\n/* never closed")
    assert exc.value.at_end
    assert exc.value.line == 2


def test_unexpected_character():
    """
    Test that a stray character fails with its line number.
    """
    with pytest.raises(ScanError) as exc:
        tokenize("var a = 1;\nvar b = @;")
    assert not exc.value.at_end
    assert exc.value.line == 2
    assert "on line 2" in str(exc.value)
