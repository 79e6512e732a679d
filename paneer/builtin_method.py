from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass
class BuiltinMethod:
    """A method call the interpreter implements natively, e.g. `paneer.bol`."""
    receiver: str
    name: str
    arity: Optional[int]
    fn: Any

    @property
    def qualified_name(self) -> str:
        return f"{self.receiver}.{self.name}"

    def __repr__(self) -> str:
        return f"<builtin {self.qualified_name}>"


BuiltinTable = Dict[Tuple[str, str], BuiltinMethod]


def register(table: BuiltinTable, method: BuiltinMethod):
    table[(method.receiver, method.name)] = method
