"""
Monkey CLI Entrypoint.

Runs Monkey programs from `.monkey` files or inline strings, or starts the
interactive REPL.

Features:
    - Read source from `.monkey` files or inline strings.
    - Lex, parse and evaluate, printing the inspected result.
    - Optionally dump the token stream or the AST (as JSON) instead of evaluating.
    - Launch an interactive REPL with optional verbosity.

Example usage:
    monkey fib.monkey
    monkey -s "let x = 5; x * 2"
    monkey -s "1 + 2 * 3" --ast
    monkey --repl --verbose

Functions:
    run_monkey(source: str, is_string: bool = False, tokens: bool = False,
               ast: bool = False) -> int:
        Executes the full pipeline and returns a process exit status.

    main(argv: list[str] | None = None) -> int:
        Parses CLI arguments and invokes the appropriate action.
"""

import argparse
import json
import logging
import sys

from monkey.monkey_constants import EOF
from monkey.monkey_environment import Environment
from monkey.monkey_evaluator import evaluate
from monkey.monkey_lexer import Lexer
from monkey.monkey_object import Error
from monkey.monkey_parser import Parser

logging.getLogger("monkey").addHandler(logging.NullHandler())

logger = logging.getLogger(__name__)


def run_monkey(
    source: str,
    is_string: bool = False,
    tokens: bool = False,
    ast: bool = False,
) -> int:
    """
    Run the Monkey pipeline: lex, parse, then evaluate or dump.

    Args:
        source (str): Monkey source code or a path to a `.monkey` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        tokens (bool): If True, print the token stream and stop.
        ast (bool): If True, print the parsed program as JSON and stop.

    Returns:
        int: 0 on success, 1 when parsing failed or evaluation produced an error.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.monkey'.
    """
    if not is_string and not source.endswith(".monkey"):
        raise ValueError("Only .monkey files are supported.")
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    if tokens:
        for tok in Lexer(source):
            if tok.type == EOF:
                break
            print(f"{tok.line}:{tok.col}\t{tok.type}\t{tok.literal}")
        return 0

    parser = Parser(source)
    program = parser.parse_program()
    if parser.errors:
        for message in parser.errors:
            print(f"\t{message}", file=sys.stderr)
        return 1

    if ast:
        print(json.dumps(program.to_dict(), indent=2))
        return 0

    result = evaluate(program, Environment())
    logger.debug("program result type %s", result.type)
    print(result.inspect())
    return 1 if isinstance(result, Error) else 0


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the Monkey CLI.

    With no arguments the REPL starts. Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `--tokens`: Print the token stream.
        - `--ast`: Print the AST as JSON.
        - `--repl`: Launch the interactive REPL.
        - `--verbose`: Debug logging, and canonical program echo in the REPL.
    """
    parser = argparse.ArgumentParser(prog="monkey")
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument("--tokens", action="store_true", help="Print the token stream")
    parser.add_argument("--ast", action="store_true", help="Print the AST as JSON")
    parser.add_argument(
        "--repl",
        action="store_true",
        help="Launch interactive REPL instead of running a program",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging"
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )

    if args.repl or args.source is None:
        from monkey.monkey_repl import start_repl

        start_repl(verbose=args.verbose)
        return 0

    return run_monkey(
        source=args.source,
        is_string=args.string,
        tokens=args.tokens,
        ast=args.ast,
    )


if __name__ == "__main__":
    sys.exit(main())
