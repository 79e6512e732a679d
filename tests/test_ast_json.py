import json
from pathlib import Path

import pytest

from paneer.ast_json import ast_to_obj, ast_from_obj, type_to_obj, type_from_obj, value_to_obj, value_from_obj
from paneer.interpreter import parse_program, Interpreter
from paneer.types import Type, IntValue, ArrayValue, StringValue

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_type_objects():
    nested = Type.array(Type.array(Type.boolean()))
    assert type_to_obj(nested) == {"kind": "array", "element": {"kind": "array", "element": {"kind": "bool"}}}
    assert type_from_obj(type_to_obj(nested)) == nested


def test_value_objects():
    value = ArrayValue((IntValue(1), StringValue('a')))
    obj = value_to_obj(value)
    assert obj == {
        "value_type": "array",
        "value": [{"value_type": "int", "value": 1}, {"value_type": "string", "value": "a"}],
    }
    assert value_from_obj(obj) == value


def test_var_decl_shape():
    obj = ast_to_obj(parse_program('ye x: float = -1.5;'))
    assert obj == {
        "type": "Program",
        "statements": [{
            "type": "VarDecl",
            "name": "x",
            "type_annotation": {"kind": "float"},
            "initializer": {"type": "Literal", "value": {"value_type": "float", "value": -1.5}},
        }],
    }


def test_operators_are_serialized_by_symbol():
    obj = ast_to_obj(parse_program('paneer.bol(!(a <= 2));'))
    call = obj["statements"][0]["expression"]
    assert call["type"] == "MethodCall"
    assert call["method"] == "bol"
    unary = call["arguments"][0]
    assert unary["operator"] == "!"
    assert unary["operand"]["operator"] == "<="


@pytest.mark.parametrize('name', sorted(p.name for p in EXAMPLES.glob('*.paneer')))
def test_examples_survive_json(name, capsys):
    source = (EXAMPLES / name).read_text(encoding='utf-8')
    program = parse_program(source)
    restored = ast_from_obj(json.loads(json.dumps(ast_to_obj(program))))
    assert restored == program

    Interpreter().run(program)
    direct = capsys.readouterr().out
    Interpreter().run(restored)
    assert capsys.readouterr().out == direct


def test_unknown_node_type():
    with pytest.raises(ValueError):
        ast_from_obj({"type": "Loop"})
    with pytest.raises(TypeError):
        ast_to_obj(object())
