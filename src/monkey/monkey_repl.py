import io
import traceback

from monkey.monkey_constants import LBRACE, RBRACE
from monkey.monkey_environment import Environment
from monkey.monkey_evaluator import evaluate
from monkey.monkey_lexer import Lexer
from monkey.monkey_parser import Parser

PROMPT = ">> "
CONTINUATION_PROMPT = "... "


def print_traceback() -> None:
    buf = io.StringIO()
    traceback.print_exc(file=buf)
    print("[error] >>>")
    print(buf.getvalue())


def print_parser_errors(errors: list[str]) -> None:
    print("[error] >>> parser errors:")
    for message in errors:
        print(f"\t{message}")


def brace_depth(src: str) -> int:
    """Counts `{` tokens minus `}` tokens, ignoring braces inside strings."""
    depth = 0
    for tok in Lexer(src):
        if tok.type == LBRACE:
            depth += 1
        elif tok.type == RBRACE:
            depth -= 1
    return depth


def read_source() -> str | None:
    """Reads one input, continuing over several lines while braces are open.

    Returns:
        str | None: The collected source, or None when the user asked to leave.
    """
    src_lines: list[str] = []
    while True:
        line = input(PROMPT if not src_lines else CONTINUATION_PROMPT)
        if line.strip() in ("exit", "quit") and not src_lines:
            return None
        src_lines.append(line)
        src = "\n".join(src_lines)
        if brace_depth(src) <= 0:
            return src.strip()


def run_source(src: str, env: Environment, verbose: bool = False) -> None:
    """Lex, parse and evaluate one input against the session environment."""
    parser = Parser(src)
    program = parser.parse_program()
    if parser.errors:
        print_parser_errors(parser.errors)
        return
    if verbose:
        print(f"[ast] >>> {program}")
    result = evaluate(program, env)
    print(result.inspect())


def start_repl(verbose: bool = False) -> None:
    print("Monkey REPL. Type 'exit' or 'quit' to leave.")
    env = Environment()

    while True:
        try:
            src = read_source()
            if src is None:
                print("Exiting Monkey REPL.")
                return
            if not src:
                continue
            if src.lower() == "verbose-mode":
                verbose = not verbose
                print(f"[mode] >>> Verbose mode {'ON' if verbose else 'OFF'}")
                continue
            try:
                run_source(src, env, verbose)
            except Exception:
                print_traceback()
        except (KeyboardInterrupt, EOFError):
            print("\nExiting Monkey REPL.")
            break


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
