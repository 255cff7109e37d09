"""
Defines the abstract syntax tree (AST) node structure for the Monkey language.

The node set is closed: statements (let, return, expression, block) and
expressions (identifier, integer, boolean, string, prefix, infix, if, fn, call,
array, hash, index), rooted in a `Program`. Every node is a frozen dataclass that
owns its children outright, so a parsed tree is immutable.

Each node provides:
    str(node): The canonical source text. Re-parsing the canonical text of a
        successfully parsed program yields a tree with the same canonical text.
    to_dict(): A plain-dict rendering (see `ASTDict`) for JSON output or debugging.

The originating token is carried for diagnostics but is excluded from
equality, so two trees compare equal when their structure matches.

Example:
    >>> stmt = LetStatement(Identifier("myVar"), Identifier("anotherVar"))
    >>> str(Program((stmt,)))
    'let myVar = anotherVar;'
"""

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, TypedDict

from monkey.monkey_lexer import Token


class ASTDict(TypedDict, total=False):
    """
    Serialized form of a node produced by `Node.to_dict()`.

    Fields:
        kind (str): The node variant (e.g. "let", "infix", "call").
        line (int): Line of the originating token, 0 when unknown.
        col (int): Column of the originating token, 0 when unknown.

    Remaining keys mirror the node's own fields, with child nodes serialized
    recursively and tuples turned into lists.
    """

    kind: str
    line: int
    col: int


def _serialize(value: Any) -> Any:
    if isinstance(value, Node):
        return value.to_dict()
    if isinstance(value, tuple):
        return [_serialize(v) for v in value]
    return value


def _join_statements(statements: "tuple[Statement, ...]") -> str:
    """Renders statements so that a parser sees the same boundaries again."""
    parts: list[str] = []
    last = len(statements) - 1
    for i, stmt in enumerate(statements):
        text = str(stmt)
        if i < last and not text.endswith(";"):
            text += ";"
        parts.append(text)
    return " ".join(parts)


class Node:
    """Base class of every AST node."""

    kind: ClassVar[str] = "node"
    token: Token | None

    def __str__(self) -> str:  # pragma: no cover
        raise NotImplementedError(type(self).__name__)

    def to_dict(self) -> ASTDict:
        out: dict[str, Any] = {"kind": self.kind}
        token = getattr(self, "token", None)
        out["line"] = token.line if token is not None else 0
        out["col"] = token.col if token is not None else 0
        for f in fields(self):  # type: ignore[arg-type]
            if f.name == "token":
                continue
            out[f.name] = _serialize(getattr(self, f.name))
        return out  # type: ignore[return-value]


class Statement(Node):
    pass


class Expression(Node):
    pass


# Expressions


@dataclass(frozen=True)
class Identifier(Expression):
    kind: ClassVar[str] = "identifier"
    value: str
    token: Token | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    kind: ClassVar[str] = "integer"
    value: int
    token: Token | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    kind: ClassVar[str] = "boolean"
    value: bool
    token: Token | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class StringLiteral(Expression):
    kind: ClassVar[str] = "string"
    value: str
    token: Token | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return f'"{self.value}"'


@dataclass(frozen=True)
class PrefixExpression(Expression):
    kind: ClassVar[str] = "prefix"
    operator: str
    right: Expression
    token: Token | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return f"({self.operator}{self.right})"


@dataclass(frozen=True)
class InfixExpression(Expression):
    kind: ClassVar[str] = "infix"
    left: Expression
    operator: str
    right: Expression
    token: Token | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass(frozen=True)
class IfExpression(Expression):
    kind: ClassVar[str] = "if"
    condition: Expression
    consequence: "BlockStatement"
    alternative: "BlockStatement | None" = None
    token: Token | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        text = f"if ({self.condition}) {self.consequence}"
        if self.alternative is not None:
            text += f" else {self.alternative}"
        return text


@dataclass(frozen=True)
class FunctionLiteral(Expression):
    kind: ClassVar[str] = "function"
    parameters: tuple[Identifier, ...]
    body: "BlockStatement"
    token: Token | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {self.body}"


@dataclass(frozen=True)
class CallExpression(Expression):
    kind: ClassVar[str] = "call"
    function: Expression
    arguments: tuple[Expression, ...]
    token: Token | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return f"{self.function}({args})"


@dataclass(frozen=True)
class ArrayLiteral(Expression):
    kind: ClassVar[str] = "array"
    elements: tuple[Expression, ...]
    token: Token | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return "[" + ", ".join(str(e) for e in self.elements) + "]"


@dataclass(frozen=True)
class HashLiteral(Expression):
    kind: ClassVar[str] = "hash"
    pairs: tuple[tuple[Expression, Expression], ...]
    token: Token | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return "{" + ", ".join(f"{k}: {v}" for k, v in self.pairs) + "}"


@dataclass(frozen=True)
class IndexExpression(Expression):
    kind: ClassVar[str] = "index"
    left: Expression
    index: Expression
    token: Token | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return f"({self.left}[{self.index}])"


# Statements


@dataclass(frozen=True)
class LetStatement(Statement):
    kind: ClassVar[str] = "let"
    name: Identifier
    value: Expression
    token: Token | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return f"let {self.name} = {self.value};"


@dataclass(frozen=True)
class ReturnStatement(Statement):
    kind: ClassVar[str] = "return"
    value: Expression
    token: Token | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return f"return {self.value};"


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    kind: ClassVar[str] = "expr_stmt"
    expression: Expression
    token: Token | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return str(self.expression)


@dataclass(frozen=True)
class BlockStatement(Statement):
    kind: ClassVar[str] = "block"
    statements: tuple[Statement, ...]
    token: Token | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        if not self.statements:
            return "{ }"
        return "{ " + _join_statements(self.statements) + " }"


@dataclass(frozen=True)
class Program(Node):
    kind: ClassVar[str] = "program"
    statements: tuple[Statement, ...]
    token: Token | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return _join_statements(self.statements)
