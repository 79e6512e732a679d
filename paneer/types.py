"""Type definitions and runtime values for PaneerLang.

This module defines the static type descriptions used in declarations
(`Type`) and the closed set of runtime values the interpreter produces
(`IntValue`, `FloatValue`, `StringValue`, `BoolValue`, `ArrayValue`).
Every runtime value derives exactly one `Type` and has a truthiness.
Values are immutable, so handing one out is indistinguishable from
handing out a copy.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple
import math


INT_MIN = -(2 ** 63)
INT_MAX = 2 ** 63 - 1

PRIMITIVE_KINDS = ('int', 'float', 'string', 'bool')


@dataclass(frozen=True)
class Type:
    """A PaneerLang type.

    `kind` is one of 'int', 'float', 'string', 'bool' or 'array'. Array
    types carry their element type, so `array<array<int>>` becomes
    `Type('array', Type('array', Type('int')))`.
    """
    kind: str
    element: Optional['Type'] = None

    def __str__(self) -> str:
        if self.kind == 'array':
            return f"array<{self.element}>"
        return self.kind

    @staticmethod
    def integer() -> 'Type':
        return Type('int')

    @staticmethod
    def floating() -> 'Type':
        return Type('float')

    @staticmethod
    def string() -> 'Type':
        return Type('string')

    @staticmethod
    def boolean() -> 'Type':
        return Type('bool')

    @staticmethod
    def array(element: 'Type') -> 'Type':
        return Type('array', element)


class LiteralValue:
    """Base class for runtime values."""

    def type_of(self) -> Type:
        raise NotImplementedError

    def is_truthy(self) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class IntValue(LiteralValue):
    value: int

    def type_of(self) -> Type:
        return Type.integer()

    def is_truthy(self) -> bool:
        return self.value != 0

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class FloatValue(LiteralValue):
    value: float

    def type_of(self) -> Type:
        return Type.floating()

    def is_truthy(self) -> bool:
        return self.value != 0.0

    def __eq__(self, other):
        # compare the floats directly so NaN is never equal to itself
        if other.__class__ is not self.__class__:
            return NotImplemented
        return self.value == other.value

    def __str__(self) -> str:
        return format_float(self.value)


@dataclass(frozen=True)
class StringValue(LiteralValue):
    value: str

    def type_of(self) -> Type:
        return Type.string()

    def is_truthy(self) -> bool:
        return len(self.value) > 0

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class BoolValue(LiteralValue):
    value: bool

    def type_of(self) -> Type:
        return Type.boolean()

    def is_truthy(self) -> bool:
        return self.value

    def __str__(self) -> str:
        return 'true' if self.value else 'false'


@dataclass(frozen=True)
class ArrayValue(LiteralValue):
    """An ordered sequence of values.

    Elements are not required to share a type. The derived type comes
    from the first element; an empty array is `array<int>`.
    """
    items: Tuple[LiteralValue, ...] = ()

    def type_of(self) -> Type:
        if not self.items:
            return Type.array(Type.integer())
        return Type.array(self.items[0].type_of())

    def is_truthy(self) -> bool:
        return len(self.items) > 0

    def __eq__(self, other):
        # element by element; tuple comparison would treat a shared NaN as equal
        if other.__class__ is not self.__class__:
            return NotImplemented
        if len(self.items) != len(other.items):
            return False
        return all(a == b for a, b in zip(self.items, other.items))

    def __len__(self) -> int:
        return len(self.items)

    def __str__(self) -> str:
        return to_string(self)


def format_float(x: float) -> str:
    """Render a float the way PaneerLang prints it.

    Integral values drop the fractional part (`3.0` prints as `3`) and
    large or tiny magnitudes are written out in full rather than with an
    exponent.
    """
    if math.isnan(x):
        return 'NaN'
    if math.isinf(x):
        return 'inf' if x > 0 else '-inf'
    text = repr(x)
    if 'e' in text or 'E' in text:
        text = format(Decimal(text), 'f')
    if text.endswith('.0'):
        text = text[:-2]
    return text


def to_string(value: LiteralValue, nested_placeholder: str = '[nested array]') -> str:
    """Convert a value to its printed form.

    Arrays are rendered one level deep; an element that is itself an
    array is replaced by `nested_placeholder`.
    """
    if isinstance(value, ArrayValue):
        parts = []
        for item in value.items:
            if isinstance(item, ArrayValue):
                parts.append(nested_placeholder)
            else:
                parts.append(str(item))
        return '[' + ', '.join(parts) + ']'
    return str(value)


def in_int_range(n: int) -> bool:
    return INT_MIN <= n <= INT_MAX


def type_name(value: LiteralValue) -> str:
    """Return the PaneerLang type spelling of a runtime value."""
    return str(value.type_of())
