from typing import Any, Dict, Optional

from lox.exceptions import ErrorCode, LoxRuntimeError
from lox.scanner.tokens import Token


class Environment:
    """
    A single scope frame mapping names to values, chained to its enclosing frame.

    The parent link is fixed at creation. A frame captured by a closure simply
    stays referenced by that closure, so it outlives the block or call that
    created it for as long as the function value is reachable.
    """

    def __init__(self, enclosing: Optional["Environment"] = None):
        self.enclosing = enclosing
        self.values: Dict[str, Any] = {}

    def define(self, name: str, value: Any):
        """Binds the name in this frame, overwriting any previous binding here."""
        self.values[name] = value

    def get(self, name: Token) -> Any:
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                return environment.values[name.lexeme]
            environment = environment.enclosing

        raise LoxRuntimeError(ErrorCode.UNDEFINED_VARIABLE, token=name, name=name.lexeme)

    def assign(self, name: Token, value: Any):
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                environment.values[name.lexeme] = value
                return
            environment = environment.enclosing

        raise LoxRuntimeError(ErrorCode.UNDEFINED_VARIABLE, token=name, name=name.lexeme)

    # --- Resolver-informed access: jump straight to the frame, no search ---

    def ancestor(self, distance: int) -> "Environment":
        environment = self
        for _ in range(distance):
            environment = environment.enclosing
        return environment

    def get_at(self, distance: int, name: str) -> Any:
        return self.ancestor(distance).values[name]

    def assign_at(self, distance: int, name: Token, value: Any):
        self.ancestor(distance).values[name.lexeme] = value

    def __repr__(self) -> str:
        return f"Environment({list(self.values)}, enclosing={self.enclosing is not None})"
