from pathlib import Path

from paneer.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_12_early_return(capsys):
    with open(EXAMPLES / 'program_12.paneer', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out.strip().split('\n')
    assert out == ['2', '-1', 'true', 'false']
