from typing import Optional


class PaneerError(Exception):
    """Base class for every error raised by the PaneerLang pipeline."""
    kind = 'Error'

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class LexError(PaneerError):
    """An unrecognized character in the source text.

    `position` is a character offset into the source string, the same
    unit as token spans and `ParseError.position`.
    """
    kind = 'LexError'

    def __init__(self, position: int, text: str, message: Optional[str] = None):
        if message is None:
            message = f"Unexpected character at position {position}: '{text}'"
        super().__init__(message)
        self.position = position
        self.text = text


class ParseError(PaneerError):
    """The first unmet grammar expectation."""
    kind = 'ParseError'

    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(message)
        self.position = position


class PaneerRuntimeError(PaneerError):
    kind = 'RuntimeError'


class TypeMismatch(PaneerRuntimeError):
    kind = 'TypeMismatch'


class UndefinedVariable(PaneerRuntimeError):
    kind = 'UndefinedVariable'


class UndefinedFunction(PaneerRuntimeError):
    kind = 'UndefinedFunction'


class ArityMismatch(PaneerRuntimeError):
    kind = 'ArityMismatch'


class DivisionByZero(PaneerRuntimeError):
    kind = 'DivisionByZero'


class ArrayIndexOutOfBounds(PaneerRuntimeError):
    kind = 'ArrayIndexOutOfBounds'


class InvalidOperation(PaneerRuntimeError):
    kind = 'InvalidOperation'


class ReturnOutsideFunction(PaneerRuntimeError):
    kind = 'ReturnOutsideFunction'
