"""
Lexical scopes for the Monkey evaluator.

An `Environment` maps names to values and optionally points at an enclosing
environment. Lookups walk outward; bindings always land in the innermost
scope, so an inner `let` shadows rather than overwrites an outer binding.

Closures hold a reference to the environment they were defined in. Python's
reference counting keeps a shared environment alive for as long as any
function value (or child scope) still refers to it.
"""

import logging

from monkey.monkey_object import MonkeyObject

logger = logging.getLogger(__name__)


class Environment:
    """A mutable name -> value scope with an optional outer scope.

    Attributes:
        store (dict[str, MonkeyObject]): Bindings made in this scope.
        outer (Environment | None): Enclosing scope, or None at the top level.
    """

    def __init__(self, outer: "Environment | None" = None) -> None:
        self.store: dict[str, MonkeyObject] = {}
        self.outer = outer

    def __repr__(self) -> str:
        names = ", ".join(sorted(self.store))
        return f"Environment([{names}], nested={self.outer is not None})"

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    @classmethod
    def enclosed(cls, outer: "Environment") -> "Environment":
        """Creates a child scope whose lookups fall back to `outer`."""
        return cls(outer)

    def get(self, name: str) -> MonkeyObject | None:
        """Resolves `name` in this scope or the nearest enclosing one.

        Returns:
            MonkeyObject | None: The bound value, or None when no scope binds it.
        """
        env: Environment | None = self
        while env is not None:
            value = env.store.get(name)
            if value is not None:
                return value
            env = env.outer
        return None

    def set(self, name: str, value: MonkeyObject) -> MonkeyObject:
        """Binds `name` in this scope and returns the bound value."""
        logger.debug("bind %s = %s", name, value.type)
        self.store[name] = value
        return value
