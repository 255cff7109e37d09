"""
Runtime values of the Monkey language.

The value set is closed:

    Integer, Boolean, String   scalar values, usable as hash keys (`Hashable`)
    Array, Hash                containers
    Function                   closure over the environment it was defined in
    Builtin                    host-provided callable
    ReturnValue                carrier for a `return` escaping nested blocks
    Error                      runtime error, propagated as an ordinary value
    Null                       the single `NULL` value

Every value reports its type name through `type` and renders itself through
`inspect()`. Equality is structural, which is what `==`/`!=` falls back to for
non-numeric operands; two hashable values are equal as keys iff their type
and underlying value are equal.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from monkey.monkey_ast import BlockStatement, Identifier

if TYPE_CHECKING:
    from monkey.monkey_environment import Environment

INTEGER_OBJ = "INTEGER"
BOOLEAN_OBJ = "BOOLEAN"
STRING_OBJ = "STRING"
ARRAY_OBJ = "ARRAY"
HASH_OBJ = "HASH"
FUNCTION_OBJ = "FUNCTION"
BUILTIN_OBJ = "BUILTIN"
RETURN_VALUE_OBJ = "RETURN_VALUE"
ERROR_OBJ = "ERROR"
NULL_OBJ = "NULL"


class MonkeyObject:
    """Base class of every runtime value."""

    type: ClassVar[str]

    def inspect(self) -> str:  # pragma: no cover
        raise NotImplementedError(type(self).__name__)


class Hashable:
    """Marker for values that may be used as hash keys."""


@dataclass(frozen=True)
class Integer(MonkeyObject, Hashable):
    type: ClassVar[str] = INTEGER_OBJ
    value: int

    def inspect(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Boolean(MonkeyObject, Hashable):
    type: ClassVar[str] = BOOLEAN_OBJ
    value: bool

    def inspect(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class String(MonkeyObject, Hashable):
    type: ClassVar[str] = STRING_OBJ
    value: str

    def inspect(self) -> str:
        return self.value


@dataclass
class Array(MonkeyObject):
    type: ClassVar[str] = ARRAY_OBJ
    elements: list[MonkeyObject]

    def inspect(self) -> str:
        return "[" + ", ".join(e.inspect() for e in self.elements) + "]"


@dataclass
class Hash(MonkeyObject):
    type: ClassVar[str] = HASH_OBJ
    pairs: dict[MonkeyObject, MonkeyObject]

    def inspect(self) -> str:
        items = (f"{k.inspect()}: {v.inspect()}" for k, v in self.pairs.items())
        return "{" + ", ".join(items) + "}"


@dataclass
class Function(MonkeyObject):
    """A user-defined function and the environment captured at its definition."""

    type: ClassVar[str] = FUNCTION_OBJ
    parameters: tuple[Identifier, ...]
    body: BlockStatement
    # Captured by reference; compared by identity.
    env: "Environment" = field(repr=False)

    def inspect(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {self.body}"


@dataclass
class Builtin(MonkeyObject):
    type: ClassVar[str] = BUILTIN_OBJ
    fn: Callable[[list[MonkeyObject]], MonkeyObject]
    name: str = ""

    def inspect(self) -> str:
        return "builtin function"


@dataclass
class ReturnValue(MonkeyObject):
    type: ClassVar[str] = RETURN_VALUE_OBJ
    value: MonkeyObject

    def inspect(self) -> str:
        return self.value.inspect()


@dataclass
class Error(MonkeyObject):
    type: ClassVar[str] = ERROR_OBJ
    message: str

    def inspect(self) -> str:
        return f"ERROR: {self.message}"


class Null(MonkeyObject):
    type: ClassVar[str] = NULL_OBJ

    def inspect(self) -> str:
        return "null"

    def __repr__(self) -> str:
        return "NULL"


NULL = Null()
TRUE = Boolean(True)
FALSE = Boolean(False)


def native_bool_to_boolean(value: bool) -> Boolean:
    return TRUE if value else FALSE
