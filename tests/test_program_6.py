from pathlib import Path

from paneer.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_6_while_loop(capsys):
    with open(EXAMPLES / 'program_6.paneer', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out.strip().split('\n')
    assert out == ['i = 0', 'i = 1', 'i = 2', 'done at 3']
