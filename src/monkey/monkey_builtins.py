"""
Built-in functions available to every Monkey program.

The table is assembled once at import time and exposed read-only as
`builtins`. Each entry receives the already-evaluated argument list and
returns a value; misuse is reported as an `Error` value, never raised.

    len(x)          length of a string or array
    first(xs)       first element, or null when empty
    last(xs)        last element, or null when empty
    rest(xs)        new array without the first element
    push(xs, v)     new array with `v` appended
    puts(...)       print each argument's inspection on its own line
"""

from collections.abc import Callable, Mapping
from types import MappingProxyType

from monkey.monkey_object import NULL, Array, Builtin, Error, Integer, MonkeyObject, String

BuiltinFn = Callable[[list[MonkeyObject]], MonkeyObject]


def wrong_arg_count(got: int, want: int) -> Error:
    return Error(f"wrong number of arguments. got={got}, want={want}")


def unsupported(name: str, *args: MonkeyObject) -> Error:
    types = ", ".join(a.type for a in args)
    return Error(f"argument to `{name}` not supported, got {types}")


def _len(args: list[MonkeyObject]) -> MonkeyObject:
    if len(args) != 1:
        return wrong_arg_count(len(args), 1)
    arg = args[0]
    if isinstance(arg, String):
        return Integer(len(arg.value))
    if isinstance(arg, Array):
        return Integer(len(arg.elements))
    return unsupported("len", arg)


def _first(args: list[MonkeyObject]) -> MonkeyObject:
    if len(args) != 1:
        return wrong_arg_count(len(args), 1)
    arg = args[0]
    if not isinstance(arg, Array):
        return unsupported("first", arg)
    return arg.elements[0] if arg.elements else NULL


def _last(args: list[MonkeyObject]) -> MonkeyObject:
    if len(args) != 1:
        return wrong_arg_count(len(args), 1)
    arg = args[0]
    if not isinstance(arg, Array):
        return unsupported("last", arg)
    return arg.elements[-1] if arg.elements else NULL


def _rest(args: list[MonkeyObject]) -> MonkeyObject:
    if len(args) != 1:
        return wrong_arg_count(len(args), 1)
    arg = args[0]
    if not isinstance(arg, Array):
        return unsupported("rest", arg)
    return Array(arg.elements[1:])


def _push(args: list[MonkeyObject]) -> MonkeyObject:
    if len(args) != 2:
        return wrong_arg_count(len(args), 2)
    arr, value = args
    if not isinstance(arr, Array):
        return unsupported("push", arr, value)
    return Array([*arr.elements, value])


def _puts(args: list[MonkeyObject]) -> MonkeyObject:
    for arg in args:
        print(arg.inspect())
    return NULL


def _build_table() -> Mapping[str, Builtin]:
    table: dict[str, BuiltinFn] = {
        "len": _len,
        "first": _first,
        "last": _last,
        "rest": _rest,
        "push": _push,
        "puts": _puts,
    }
    return MappingProxyType({name: Builtin(fn, name) for name, fn in table.items()})


builtins: Mapping[str, Builtin] = _build_table()
