"""JSON serialization/deserialization for the PaneerLang AST.

This module converts between PaneerLang AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. It supports a full
round-trip for all node types, `Type` and runtime literal values.
"""

from __future__ import annotations

from typing import Any, Dict

from .ast import (
    Program,
    VarDecl,
    FuncDecl,
    ExprStmt,
    IfStmt,
    ReturnStmt,
    WhileStmt,
    ForStmt,
    Binary,
    Unary,
    Call,
    Variable,
    Literal,
    MethodCall,
    ArrayLiteral,
    ArrayAccess,
    BinaryOperator,
    UnaryOperator,
)
from .types import Type, LiteralValue, IntValue, FloatValue, StringValue, BoolValue, ArrayValue


def type_to_obj(t: Type) -> Dict[str, Any]:
    if t.kind == 'array':
        return {"kind": "array", "element": type_to_obj(t.element)}
    return {"kind": t.kind}


def type_from_obj(o: Dict[str, Any]) -> Type:
    if o["kind"] == 'array':
        return Type.array(type_from_obj(o["element"]))
    return Type(o["kind"])


def value_to_obj(v: LiteralValue) -> Dict[str, Any]:
    if isinstance(v, ArrayValue):
        return {"value_type": "array", "value": [value_to_obj(item) for item in v.items]}
    return {"value_type": str(v.type_of()), "value": v.value}


def value_from_obj(o: Dict[str, Any]) -> LiteralValue:
    kind = o["value_type"]
    if kind == 'int':
        return IntValue(int(o["value"]))
    if kind == 'float':
        return FloatValue(float(o["value"]))
    if kind == 'string':
        return StringValue(o["value"])
    if kind == 'bool':
        return BoolValue(bool(o["value"]))
    if kind == 'array':
        return ArrayValue(tuple(value_from_obj(item) for item in o["value"]))
    raise ValueError(f"Unknown literal value type: {kind}")


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None

    if isinstance(node, Program):
        return {"type": "Program", "statements": [ast_to_obj(s) for s in node.statements]}
    if isinstance(node, VarDecl):
        return {
            "type": "VarDecl",
            "name": node.name,
            "type_annotation": type_to_obj(node.type_annotation),
            "initializer": ast_to_obj(node.initializer),
        }
    if isinstance(node, FuncDecl):
        return {
            "type": "FuncDecl",
            "name": node.name,
            "params": [{"name": name, "type": type_to_obj(t)} for name, t in node.params],
            "return_type": type_to_obj(node.return_type),
            "body": [ast_to_obj(s) for s in node.body],
        }
    if isinstance(node, ExprStmt):
        return {"type": "ExprStmt", "expression": ast_to_obj(node.expression)}
    if isinstance(node, IfStmt):
        return {
            "type": "IfStmt",
            "condition": ast_to_obj(node.condition),
            "then_branch": [ast_to_obj(s) for s in node.then_branch],
            "else_branch": None if node.else_branch is None else [ast_to_obj(s) for s in node.else_branch],
        }
    if isinstance(node, ReturnStmt):
        return {"type": "ReturnStmt", "value": ast_to_obj(node.value)}
    if isinstance(node, WhileStmt):
        return {
            "type": "WhileStmt",
            "condition": ast_to_obj(node.condition),
            "body": [ast_to_obj(s) for s in node.body],
        }
    if isinstance(node, ForStmt):
        return {
            "type": "ForStmt",
            "variable": node.variable,
            "iterable": ast_to_obj(node.iterable),
            "body": [ast_to_obj(s) for s in node.body],
        }
    if isinstance(node, Binary):
        return {
            "type": "Binary",
            "operator": node.operator.value,
            "left": ast_to_obj(node.left),
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, Unary):
        return {"type": "Unary", "operator": node.operator.value, "operand": ast_to_obj(node.operand)}
    if isinstance(node, Call):
        return {
            "type": "Call",
            "callee": ast_to_obj(node.callee),
            "arguments": [ast_to_obj(a) for a in node.arguments],
        }
    if isinstance(node, Variable):
        return {"type": "Variable", "name": node.name}
    if isinstance(node, Literal):
        return {"type": "Literal", "value": value_to_obj(node.value)}
    if isinstance(node, MethodCall):
        return {
            "type": "MethodCall",
            "object": ast_to_obj(node.object),
            "method": node.method,
            "arguments": [ast_to_obj(a) for a in node.arguments],
        }
    if isinstance(node, ArrayLiteral):
        return {"type": "ArrayLiteral", "elements": [ast_to_obj(e) for e in node.elements]}
    if isinstance(node, ArrayAccess):
        return {"type": "ArrayAccess", "array": ast_to_obj(node.array), "index": ast_to_obj(node.index)}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "Program":
        return Program(statements=[ast_from_obj(s) for s in obj["statements"]])
    if t == "VarDecl":
        return VarDecl(
            name=obj["name"],
            type_annotation=type_from_obj(obj["type_annotation"]),
            initializer=ast_from_obj(obj["initializer"]),
        )
    if t == "FuncDecl":
        return FuncDecl(
            name=obj["name"],
            params=[(p["name"], type_from_obj(p["type"])) for p in obj["params"]],
            return_type=type_from_obj(obj["return_type"]),
            body=[ast_from_obj(s) for s in obj["body"]],
        )
    if t == "ExprStmt":
        return ExprStmt(expression=ast_from_obj(obj["expression"]))
    if t == "IfStmt":
        else_branch = obj.get("else_branch")
        return IfStmt(
            condition=ast_from_obj(obj["condition"]),
            then_branch=[ast_from_obj(s) for s in obj["then_branch"]],
            else_branch=None if else_branch is None else [ast_from_obj(s) for s in else_branch],
        )
    if t == "ReturnStmt":
        return ReturnStmt(value=ast_from_obj(obj.get("value")))
    if t == "WhileStmt":
        return WhileStmt(
            condition=ast_from_obj(obj["condition"]),
            body=[ast_from_obj(s) for s in obj["body"]],
        )
    if t == "ForStmt":
        return ForStmt(
            variable=obj["variable"],
            iterable=ast_from_obj(obj["iterable"]),
            body=[ast_from_obj(s) for s in obj["body"]],
        )
    if t == "Binary":
        return Binary(
            left=ast_from_obj(obj["left"]),
            operator=BinaryOperator(obj["operator"]),
            right=ast_from_obj(obj["right"]),
        )
    if t == "Unary":
        return Unary(operator=UnaryOperator(obj["operator"]), operand=ast_from_obj(obj["operand"]))
    if t == "Call":
        return Call(callee=ast_from_obj(obj["callee"]), arguments=[ast_from_obj(a) for a in obj["arguments"]])
    if t == "Variable":
        return Variable(name=obj["name"])
    if t == "Literal":
        return Literal(value=value_from_obj(obj["value"]))
    if t == "MethodCall":
        return MethodCall(
            object=ast_from_obj(obj["object"]),
            method=obj["method"],
            arguments=[ast_from_obj(a) for a in obj["arguments"]],
        )
    if t == "ArrayLiteral":
        return ArrayLiteral(elements=[ast_from_obj(e) for e in obj["elements"]])
    if t == "ArrayAccess":
        return ArrayAccess(array=ast_from_obj(obj["array"]), index=ast_from_obj(obj["index"]))

    raise ValueError(f"Unknown AST node type: {t}")
