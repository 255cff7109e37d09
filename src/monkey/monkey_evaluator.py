"""
Tree-walking evaluator for the Monkey language.

`evaluate(node, env)` is total over the AST: a malformed program produces an
`Error` value, never a Python exception. Errors and `return` signals travel as
ordinary return values:

    - any sub-evaluation that yields an `Error` ends the enclosing construct
      and hands that `Error` back unchanged;
    - a `ReturnValue` leaves blocks untouched until it reaches a function
      call (or the top of the program), where it is unwrapped.

Nodes are dispatched on their `kind` to the matching `eval_<kind>` method.
Unknown node kinds evaluate to `NULL`.

Integers are signed 64-bit: arithmetic wraps, and `/` truncates toward zero.

Recursion in user programs maps onto Python recursion. The module-level
`evaluate()` raises the recursion limit and turns stack exhaustion into the
Error `maximum recursion depth exceeded`.
"""

import logging
import sys
from collections.abc import Callable, Mapping

from monkey.monkey_ast import (
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    Node,
    PrefixExpression,
    Program,
    ReturnStatement,
    StringLiteral,
)
from monkey.monkey_builtins import builtins as default_builtins
from monkey.monkey_environment import Environment
from monkey.monkey_object import (
    NULL,
    Array,
    Boolean,
    Builtin,
    Error,
    Function,
    Hash,
    Hashable,
    Integer,
    MonkeyObject,
    ReturnValue,
    String,
    native_bool_to_boolean,
)

logger = logging.getLogger(__name__)

INT64_MIN = -(2**63)
UINT64_RANGE = 2**64

# Each Monkey call level takes roughly sixteen Python frames.
RECURSION_LIMIT = 20_000


def wrap_int64(value: int) -> int:
    """Reduces `value` to the signed 64-bit range, two's complement style."""
    return (value - INT64_MIN) % UINT64_RANGE + INT64_MIN


def truncating_div(left: int, right: int) -> int:
    quotient = abs(left) // abs(right)
    return -quotient if (left < 0) != (right < 0) else quotient


def is_error(obj: MonkeyObject | None) -> bool:
    return isinstance(obj, Error)


def is_truthy(obj: MonkeyObject) -> bool:
    """Only `false` and `null` are falsy."""
    if obj is NULL:
        return False
    if isinstance(obj, Boolean):
        return obj.value
    return True


class Evaluator:
    """
    Evaluates Monkey AST nodes against an `Environment`.

    Attributes:
        builtins (Mapping[str, Builtin]): Read-only table consulted when a name
            is not bound in any enclosing environment.
    """

    def __init__(self, builtins: Mapping[str, Builtin] | None = None) -> None:
        self.builtins: Mapping[str, Builtin] = (
            default_builtins if builtins is None else builtins
        )

    def evaluate(self, node: Node, env: Environment) -> MonkeyObject:
        method: Callable[[Node, Environment], MonkeyObject] | None = getattr(
            self, f"eval_{node.kind}", None
        )
        if method is None:
            logger.debug("no evaluation rule for node kind %r", node.kind)
            return NULL
        return method(node, env)

    # Statements

    def eval_program(self, node: Program, env: Environment) -> MonkeyObject:
        result: MonkeyObject = NULL
        for stmt in node.statements:
            result = self.evaluate(stmt, env)
            if isinstance(result, ReturnValue):
                return result.value
            if isinstance(result, Error):
                return result
        return result

    def eval_block(self, node: BlockStatement, env: Environment) -> MonkeyObject:
        result: MonkeyObject = NULL
        for stmt in node.statements:
            result = self.evaluate(stmt, env)
            if isinstance(result, (ReturnValue, Error)):
                return result
        return result

    def eval_expr_stmt(self, node: ExpressionStatement, env: Environment) -> MonkeyObject:
        return self.evaluate(node.expression, env)

    def eval_let(self, node: LetStatement, env: Environment) -> MonkeyObject:
        value = self.evaluate(node.value, env)
        if is_error(value):
            return value
        return env.set(node.name.value, value)

    def eval_return(self, node: ReturnStatement, env: Environment) -> MonkeyObject:
        value = self.evaluate(node.value, env)
        if is_error(value):
            return value
        return ReturnValue(value)

    # Literals and names

    def eval_integer(self, node: IntegerLiteral, env: Environment) -> MonkeyObject:
        return Integer(node.value)

    def eval_boolean(self, node: BooleanLiteral, env: Environment) -> MonkeyObject:
        return native_bool_to_boolean(node.value)

    def eval_string(self, node: StringLiteral, env: Environment) -> MonkeyObject:
        return String(node.value)

    def eval_identifier(self, node: Identifier, env: Environment) -> MonkeyObject:
        value = env.get(node.value)
        if value is not None:
            return value
        builtin = self.builtins.get(node.value)
        if builtin is not None:
            return builtin
        return Error(f"identifier not found: {node.value}")

    # Operators

    def eval_prefix(self, node: PrefixExpression, env: Environment) -> MonkeyObject:
        right = self.evaluate(node.right, env)
        if is_error(right):
            return right
        if node.operator == "!":
            return native_bool_to_boolean(not is_truthy(right))
        if node.operator == "-":
            if not isinstance(right, Integer):
                return Error(f"unknown operator: -{right.type}")
            return Integer(wrap_int64(-right.value))
        return Error(f"unknown operator: {node.operator}{right.type}")

    def eval_infix(self, node: InfixExpression, env: Environment) -> MonkeyObject:
        left = self.evaluate(node.left, env)
        if is_error(left):
            return left
        right = self.evaluate(node.right, env)
        if is_error(right):
            return right
        return self.eval_infix_operator(node.operator, left, right)

    def eval_infix_operator(
        self, operator: str, left: MonkeyObject, right: MonkeyObject
    ) -> MonkeyObject:
        if isinstance(left, Integer) and isinstance(right, Integer):
            return self.eval_integer_infix(operator, left, right)
        if isinstance(left, String) and isinstance(right, String):
            if operator == "+":
                return String(left.value + right.value)
            return Error(f"unknown operator: {left.type} {operator} {right.type}")
        if operator == "==":
            return native_bool_to_boolean(left == right)
        if operator == "!=":
            return native_bool_to_boolean(left != right)
        if left.type != right.type:
            return Error(f"type mismatch: {left.type} {operator} {right.type}")
        return Error(f"unknown operator: {left.type} {operator} {right.type}")

    def eval_integer_infix(
        self, operator: str, left: Integer, right: Integer
    ) -> MonkeyObject:
        a, b = left.value, right.value
        if operator == "+":
            return Integer(wrap_int64(a + b))
        if operator == "-":
            return Integer(wrap_int64(a - b))
        if operator == "*":
            return Integer(wrap_int64(a * b))
        if operator == "/":
            if b == 0:
                return Error("division by zero")
            return Integer(wrap_int64(truncating_div(a, b)))
        if operator == "<":
            return native_bool_to_boolean(a < b)
        if operator == ">":
            return native_bool_to_boolean(a > b)
        if operator == "==":
            return native_bool_to_boolean(a == b)
        if operator == "!=":
            return native_bool_to_boolean(a != b)
        return Error(f"unknown operator: {left.type} {operator} {right.type}")

    # Control flow and functions

    def eval_if(self, node: IfExpression, env: Environment) -> MonkeyObject:
        condition = self.evaluate(node.condition, env)
        if is_error(condition):
            return condition
        if is_truthy(condition):
            return self.evaluate(node.consequence, env)
        if node.alternative is not None:
            return self.evaluate(node.alternative, env)
        return NULL

    def eval_function(self, node: FunctionLiteral, env: Environment) -> MonkeyObject:
        return Function(node.parameters, node.body, env)

    def eval_call(self, node: CallExpression, env: Environment) -> MonkeyObject:
        function = self.evaluate(node.function, env)
        if is_error(function):
            return function
        args = self.eval_expressions(node.arguments, env)
        if isinstance(args, Error):
            return args
        return self.apply_function(function, args)

    def eval_expressions(
        self, expressions: tuple[Expression, ...], env: Environment
    ) -> list[MonkeyObject] | Error:
        """Evaluates left to right, stopping at the first `Error`."""
        values: list[MonkeyObject] = []
        for expression in expressions:
            value = self.evaluate(expression, env)
            if isinstance(value, Error):
                return value
            values.append(value)
        return values

    def apply_function(
        self, function: MonkeyObject, args: list[MonkeyObject]
    ) -> MonkeyObject:
        if isinstance(function, Function):
            logger.debug(
                "apply fn/%d to %d argument(s)", len(function.parameters), len(args)
            )
            inner = self.extend_function_env(function, args)
            result = self.evaluate(function.body, inner)
            if isinstance(result, ReturnValue):
                return result.value
            return result
        if isinstance(function, Builtin):
            return function.fn(args)
        return Error(f"not a function: {function.type}")

    @staticmethod
    def extend_function_env(
        function: Function, args: list[MonkeyObject]
    ) -> Environment:
        """Binds parameters positionally in a child of the captured environment.

        Parameters without a matching argument stay unbound; surplus
        arguments are ignored.
        """
        env = Environment.enclosed(function.env)
        for param, arg in zip(function.parameters, args):
            env.set(param.value, arg)
        return env

    # Collections

    def eval_array(self, node: ArrayLiteral, env: Environment) -> MonkeyObject:
        elements = self.eval_expressions(node.elements, env)
        if isinstance(elements, Error):
            return elements
        return Array(elements)

    def eval_hash(self, node: HashLiteral, env: Environment) -> MonkeyObject:
        pairs: dict[MonkeyObject, MonkeyObject] = {}
        for key_node, value_node in node.pairs:
            key = self.evaluate(key_node, env)
            if is_error(key):
                return key
            if not isinstance(key, Hashable):
                return Error(f"unusable as hash key: {key.type}")
            value = self.evaluate(value_node, env)
            if is_error(value):
                return value
            pairs[key] = value
        return Hash(pairs)

    def eval_index(self, node: IndexExpression, env: Environment) -> MonkeyObject:
        left = self.evaluate(node.left, env)
        if is_error(left):
            return left
        index = self.evaluate(node.index, env)
        if is_error(index):
            return index

        if isinstance(left, Array) and isinstance(index, Integer):
            if 0 <= index.value < len(left.elements):
                return left.elements[index.value]
            return NULL
        if isinstance(left, Hash):
            if not isinstance(index, Hashable):
                return Error(f"unusable as hash key: {index.type}")
            return left.pairs.get(index, NULL)
        return Error(f"index operator not supported: {left.type}")


_default_evaluator = Evaluator()


def evaluate(node: Node, env: Environment) -> MonkeyObject:
    """Evaluates `node` in `env` using the standard built-in table.

    Raises the interpreter's recursion limit to `RECURSION_LIMIT` on first use
    so that ordinary recursive programs have room to run. A program that
    still exhausts the stack yields an `Error` value instead of raising.
    """
    if sys.getrecursionlimit() < RECURSION_LIMIT:
        sys.setrecursionlimit(RECURSION_LIMIT)
    try:
        return _default_evaluator.evaluate(node, env)
    except RecursionError:
        logger.debug("evaluation exceeded recursion limit %d", sys.getrecursionlimit())
        return Error("maximum recursion depth exceeded")
