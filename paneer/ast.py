"""Abstract Syntax Tree (AST) definitions for PaneerLang.

The AST classes defined in this module represent the syntactic structure
of parsed PaneerLang programs. They are produced by the parser and
executed directly by the interpreter. Statement bodies are plain lists of
statements; there is no separate block node.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .types import Type, LiteralValue


class BinaryOperator(Enum):
    ADD = '+'
    SUBTRACT = '-'
    MULTIPLY = '*'
    DIVIDE = '/'
    EQUAL = '=='
    NOT_EQUAL = '!='
    GREATER = '>'
    LESS = '<'
    GREATER_EQUAL = '>='
    LESS_EQUAL = '<='


class UnaryOperator(Enum):
    MINUS = '-'
    NOT = '!'


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass
class Statement(Node):
    pass


@dataclass
class Expression(Node):
    pass


@dataclass
class Program(Node):
    statements: List[Statement]


# Statements

@dataclass
class VarDecl(Statement):
    name: str
    type_annotation: Type
    initializer: Expression


@dataclass
class FuncDecl(Statement):
    name: str
    params: List[Tuple[str, Type]]
    return_type: Type
    body: List[Statement]


@dataclass
class ExprStmt(Statement):
    expression: Expression


@dataclass
class IfStmt(Statement):
    condition: Expression
    then_branch: List[Statement]
    else_branch: Optional[List[Statement]]


@dataclass
class ReturnStmt(Statement):
    value: Optional[Expression]


@dataclass
class WhileStmt(Statement):
    condition: Expression
    body: List[Statement]


@dataclass
class ForStmt(Statement):
    variable: str
    iterable: Expression
    body: List[Statement]


# Expressions

@dataclass
class Binary(Expression):
    left: Expression
    operator: BinaryOperator
    right: Expression


@dataclass
class Unary(Expression):
    operator: UnaryOperator
    operand: Expression


@dataclass
class Call(Expression):
    callee: Expression
    arguments: List[Expression]


@dataclass
class Variable(Expression):
    name: str


@dataclass
class Literal(Expression):
    value: LiteralValue


@dataclass
class MethodCall(Expression):
    object: Expression
    method: str
    arguments: List[Expression]


@dataclass
class ArrayLiteral(Expression):
    elements: List[Expression]


@dataclass
class ArrayAccess(Expression):
    array: Expression
    index: Expression
