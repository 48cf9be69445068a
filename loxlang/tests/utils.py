"""
Utility functions shared across Lox Language tests.
"""
from pathlib import Path
import sys

from loxlang.interpreter import Interpreter
from loxlang.lexer import tokenize
from loxlang.parser import Parser
from loxlang.resolver import Resolver

# Ensure the project root is on the Python path
PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))


def parse_source(source: str):
    """
    Parse source code and return the statements and syntax errors.
    """
    return Parser(tokenize(source)).parse()


def resolve_source(source: str, interpreter: Interpreter | None = None):
    """
    Parse and resolve source code that is expected to be syntactically valid.

    Returns the statements, the resolver and its errors.
    """
    statements, errors = parse_source(source)
    assert errors == [], [str(e) for e in errors]
    interpreter = interpreter if interpreter is not None else Interpreter()
    resolver = Resolver(interpreter)
    return statements, resolver, resolver.resolve(statements)


def run_source(source: str, interpreter: Interpreter | None = None) -> Interpreter:
    """
    Run a program that is expected to parse and resolve cleanly, and return
    the interpreter after execution.
    """
    interpreter = interpreter if interpreter is not None else Interpreter()
    statements, _, errors = resolve_source(source, interpreter)
    assert errors == [], [str(e) for e in errors]
    interpreter.interpret(statements)
    return interpreter


def output_lines(capsys) -> list[str]:
    """
    Return captured stdout split into lines.
    """
    return capsys.readouterr().out.strip().splitlines()
