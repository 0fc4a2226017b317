from typing import Dict, Any, Optional

from .tokens import Token
from .errors import LoxRuntimeError

class Environment:
    """
    Manages variable scopes, storing and retrieving variable values.

    Environments form a chain through `enclosing`. A chain is shared, not
    owned: every closure created in a scope keeps a reference to it, so a
    scope stays alive for as long as anything that captured it is reachable.
    """
    def __init__(self, enclosing: Optional['Environment'] = None):
        self.values: Dict[str, Any] = {}
        self.enclosing: Optional['Environment'] = enclosing

    def define(self, name: str, value: Any):
        """
        Defines a new variable in the current scope.
        This is used for 'var' declarations, functions and parameters.
        """
        self.values[name] = value

    def get(self, name: Token) -> Any:
        """
        Retrieves the value of a variable.
        If not found in the current scope, it checks the enclosing scope.
        """
        if name.lexeme in self.values:
            return self.values[name.lexeme]

        if self.enclosing is not None:
            return self.enclosing.get(name)

        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name: Token, value: Any):
        """
        Assigns a new value to an existing variable.
        If not found in the current scope, it checks the enclosing scope.
        """
        if name.lexeme in self.values:
            self.values[name.lexeme] = value
            return

        if self.enclosing is not None:
            self.enclosing.assign(name, value)
            return

        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def ancestor(self, distance: int) -> 'Environment':
        """Walks `distance` hops up the chain. 0 is this environment."""
        environment = self
        for _ in range(distance):
            environment = environment.enclosing
        return environment

    def get_at(self, distance: int, name: Token) -> Any:
        """Reads a variable the resolver placed exactly `distance` scopes up."""
        values = self.ancestor(distance).values
        if name.lexeme in values:
            return values[name.lexeme]
        # Only reachable if the resolver and the runtime chain disagree.
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign_at(self, distance: int, name: Token, value: Any):
        values = self.ancestor(distance).values
        if name.lexeme not in values:
            raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")
        values[name.lexeme] = value
