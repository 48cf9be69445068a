"""
Lox Language Interpreter

This is the main entry point for the Lox language interpreter.

Workflow:
1. The source script is read from the file specified on the command line.
2. The Lexer tokenizes the source code into meaningful tokens.
3. The Parser processes tokens into an AST, collecting every syntax error.
4. The Resolver binds each local variable reference to its scope.
5. The Interpreter walks the AST, evaluating expressions and executing statements.

Exit status follows the sysexits convention: 65 when the program has scan,
parse or resolve errors and is not run, 70 when it fails while running.

Environment:
    LOXDEBUG    Print the token stream and the AST before running.
    LOGLEVEL    Logging level for diagnostics on stderr (default WARNING).
"""
import logging
import os
import sys
from typing import Optional

from loxlang import __version__
from loxlang.exceptions import LoxRuntimeError, ScanError
from loxlang.interpreter import Interpreter
from loxlang.lexer import tokenize
from loxlang.parser import Parser
from loxlang.resolver import Resolver
from loxlang.tokens import TokenType

EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_SOFTWARE = 70

logger = logging.getLogger("lox")


class IncompleteInput(Exception):
    """
    Raised when the source ends in the middle of a statement.
    """


def _get_log_level() -> int:
    """
    Determine log level from LOGLEVEL environment variable.
    Defaults to WARNING if not set.
    """
    loglevel_env = os.getenv("LOGLEVEL", "").upper()
    if loglevel_env:
        level = getattr(logging, loglevel_env, None)
        if isinstance(level, int):
            return level

    # Default to WARNING if not set
    return logging.WARNING


def configure_logging() -> None:
    logging.basicConfig(
        level=_get_log_level(),
        format='%(message)s',
        stream=sys.stderr
    )


def print_usage():
    """
    Print usage.
    """
    print()
    print("Lox Language Interpreter")
    print()
    print("Usage:")
    print("    lox <script.lox>")
    print()
    print("Arguments:")
    print("    <script.lox>")
    print("        Path to a Lox source file to execute.")
    print()
    print("Example:")
    print("    lox hello.lox")
    print()
    print("Or run with no arguments to enter interactive mode (REPL).")
    print()
    print("Options:")
    print("    -h, --help")
    print("        Show this help message and exit.")


def debug_print_tokens_ast(tokens, ast):
    """
    Print tokenized source and AST
    """
    print("\nTokens:\n")
    for token in tokens:
        print(f"  {token!r}")
    print("\nAST:\n")
    for stmt in ast:
        print(f"  {stmt!r}")
    print(" ")


def report(error: Exception) -> None:
    print(f"{type(error).__name__}: {error}", file=sys.stderr)


def run_source(source: str, interpreter: Interpreter, repl: bool = False) -> int:
    """
    Scan, parse, resolve and run ``source`` on ``interpreter``.

    Parameters:
        source (str): Lox source text.
        interpreter (Interpreter): The interpreter to run on. Globals defined
            by earlier calls stay visible.
        repl (bool): Raise `IncompleteInput` instead of reporting errors
            caused by the source ending too early.

    Returns:
        int: An exit status.
    """
    try:
        tokens = tokenize(source)
    except ScanError as e:
        if repl and e.at_end:
            raise IncompleteInput() from e
        report(e)
        return EX_DATAERR

    statements, parse_errors = Parser(tokens).parse()
    if parse_errors:
        if repl and any(err.token is not None and err.token.type is TokenType.EOF for err in parse_errors):
            raise IncompleteInput()
        for err in parse_errors:
            report(err)
        return EX_DATAERR

    if os.environ.get('LOXDEBUG'):
        debug_print_tokens_ast(tokens, statements)

    resolver = Resolver(interpreter)
    resolve_errors = resolver.resolve(statements)
    if resolve_errors:
        for err in resolve_errors:
            report(err)
        return EX_DATAERR
    logger.debug("Resolved %d local references", len(interpreter.locals))

    try:
        interpreter.interpret(statements)
    except LoxRuntimeError as e:
        report(e)
        return EX_SOFTWARE
    return EX_OK


def run_script(script_name: str) -> int:
    """
    Run a Lox script
    """
    try:
        with open(script_name, "r", encoding="utf-8") as f:
            code = f.read()
    except OSError as e:
        print(f"Could not read {script_name}: {e.strerror}", file=sys.stderr)
        return EX_USAGE

    logger.info("Running %s", script_name)
    return run_source(code, Interpreter())


def run_repl(interpreter: Optional[Interpreter] = None):
    """
    Run the interactive REPL
    """
    print(f"Lox Language Interpreter {__version__} - REPL")
    print("Type `exit` or `quit` to leave.")
    interpreter = interpreter if interpreter is not None else Interpreter()
    buffer: list[str] = []
    while True:
        try:
            prompt = ">>> " if not buffer else "... "
            line = input(prompt)
            if not buffer and line.strip() in {"exit", "quit"}:
                break
            buffer.append(line)
            source = "\n".join(buffer)
            try:
                run_source(source, interpreter, repl=True)
            except IncompleteInput:
                # Keep reading until the statement is complete
                continue
            buffer.clear()
        except KeyboardInterrupt:
            print("\nInterrupted.")
            break
        except EOFError:
            print()
            break


def main(argv: Optional[list[str]] = None) -> int:
    """
    Entry point for the CLI.

    Behaviour:
    - No arguments: enter the REPL.
    - One argument equal to ``-h`` or ``--help``: print usage and exit.
    - One argument that is not an option: treat it as the path to a script and run it.
    - Any other pattern: print usage and return a non-zero exit code.
    """
    if argv is None:
        argv = sys.argv
    configure_logging()
    args = argv[1:]
    if not args:
        run_repl()
        return EX_OK
    if len(args) == 1 and args[0] in ('-h', '--help'):
        print_usage()
        return EX_OK
    if len(args) == 1:
        return run_script(args[0])
    print_usage()
    return EX_USAGE


if __name__ == "__main__":
    sys.exit(main(sys.argv))
