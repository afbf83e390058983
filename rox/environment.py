from typing import Dict, Iterator, Optional

from rox.errors import UndefinedVariable
from rox.values import Value


class Environment:
    """A scope mapping variable names to values, chained to its enclosing scope."""
    def __init__(self, enclosing: Optional['Environment'] = None):
        self.enclosing = enclosing
        self.values: Dict[str, Value] = {}

    def define(self, name: str, value: Value) -> None:
        # Redefinition in the same scope overwrites; outer scopes are shadowed.
        self.values[name] = value

    def get(self, name: str) -> Value:
        for env in self.chain():
            if name in env.values:
                return env.values[name]
        raise UndefinedVariable(name)

    def assign(self, name: str, value: Value) -> None:
        for env in self.chain():
            if name in env.values:
                env.values[name] = value
                return
        raise UndefinedVariable(name)

    def chain(self) -> Iterator['Environment']:
        """Yield this scope, then each enclosing scope out to the global one."""
        env: Optional[Environment] = self
        while env is not None:
            yield env
            env = env.enclosing

    @property
    def depth(self) -> int:
        return sum(1 for _ in self.chain()) - 1

    def __repr__(self) -> str:
        return f"<Environment depth={self.depth} names={sorted(self.values)}>"
