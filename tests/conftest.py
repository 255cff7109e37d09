from collections.abc import Callable

import pytest

from monkey.monkey_environment import Environment
from monkey.monkey_evaluator import evaluate
from monkey.monkey_object import MonkeyObject
from monkey.monkey_parser import Parser


def run_source(source: str, env: Environment | None = None) -> MonkeyObject:
    parser = Parser(source)
    program = parser.parse_program()
    assert parser.errors == [], f"unexpected parser errors: {parser.errors}"
    return evaluate(program, env if env is not None else Environment())


@pytest.fixture  # type: ignore[misc]
def run() -> Callable[[str], MonkeyObject]:
    return run_source


@pytest.fixture  # type: ignore[misc]
def env() -> Environment:
    return Environment()
