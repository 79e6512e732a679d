from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from paneer.ast import Statement
from paneer.types import LiteralValue, Type


@dataclass(frozen=True)
class Function:
    """A user-defined function: parameter signature, return type and body."""
    params: Tuple[Tuple[str, Type], ...]
    return_type: Type
    body: Tuple[Statement, ...]

    @property
    def arity(self) -> int:
        return len(self.params)


@dataclass
class Frame:
    """One scope: local bindings plus the index of the enclosing frame."""
    parent: Optional[int]
    variables: Dict[str, LiteralValue] = field(default_factory=dict)
    functions: Dict[str, Function] = field(default_factory=dict)


class Environment:
    """Scope frames stored in an arena and addressed by index.

    Frame 0 is the global scope. Entering a block pushes a frame chained
    to its parent by index; leaving it truncates the arena back to the
    saved frame, so anything the block defined disappears and the
    enclosing bindings are exactly as they were.
    """
    def __init__(self):
        self.frames: List[Frame] = [Frame(parent=None)]
        self.current = 0

    @property
    def depth(self) -> int:
        return len(self.frames)

    def define_variable(self, name: str, value: LiteralValue):
        self.frames[self.current].variables[name] = value

    def define_function(self, name: str, function: Function):
        self.frames[self.current].functions[name] = function

    def get_variable(self, name: str) -> Optional[LiteralValue]:
        index: Optional[int] = self.current
        while index is not None:
            frame = self.frames[index]
            if name in frame.variables:
                return frame.variables[name]
            index = frame.parent
        return None

    def get_function(self, name: str) -> Optional[Function]:
        index: Optional[int] = self.current
        while index is not None:
            frame = self.frames[index]
            if name in frame.functions:
                return frame.functions[name]
            index = frame.parent
        return None

    def push_scope(self, parent: Optional[int] = None) -> int:
        """Install a new child frame; return the index to restore later."""
        saved = self.current
        self.frames.append(Frame(parent=saved if parent is None else parent))
        self.current = len(self.frames) - 1
        return saved

    def pop_scope(self, saved: int):
        del self.frames[saved + 1:]
        self.current = saved

    @contextmanager
    def child_scope(self) -> Iterator[int]:
        saved = self.push_scope()
        try:
            yield self.current
        finally:
            self.pop_scope(saved)
