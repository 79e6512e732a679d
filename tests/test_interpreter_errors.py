import pytest

from paneer.errors import (
    PaneerError, PaneerRuntimeError, TypeMismatch, UndefinedVariable, UndefinedFunction,
    ArityMismatch, DivisionByZero, ArrayIndexOutOfBounds, InvalidOperation,
    ReturnOutsideFunction, LexError, ParseError,
)
from paneer.interpreter import run_program


@pytest.mark.parametrize('source, error, message', [
    ('ye x: int = "five";', TypeMismatch, 'Type mismatch: expected int, got string'),
    ('ye a: array<string> = [1, 2];', TypeMismatch, 'Type mismatch: expected array<string>, got array<int>'),
    ('ye f: float = 1;', TypeMismatch, 'Type mismatch: expected float, got int'),
    ('paneer.bol(x);', UndefinedVariable, 'Undefined variable: x'),
    ('paneer.bol(nope(1));', UndefinedFunction, 'Undefined function: nope'),
    ('func f(a int) int { return a; } f(1, 2);', ArityMismatch, 'Function f expects 1 arguments, got 2'),
    ('func f(a int) int { return a; } f("x");', TypeMismatch,
     'Argument type mismatch for parameter a: expected int, got string'),
    ('func f() int { return "x"; } f();', TypeMismatch, 'Return type mismatch: expected int, got string'),
    ('func f() string { } f();', TypeMismatch, 'Return type mismatch: expected string, got int'),
    ('ye x: int = 5 / 0;', DivisionByZero, 'Division by zero'),
    ('ye x: float = 5.0 / 0.0;', DivisionByZero, 'Division by zero'),
    ('ye a: array<int> = [1, 2, 3]; paneer.bol(a[3]);', ArrayIndexOutOfBounds, 'Array index out of bounds: 3'),
    ('ye a: array<int> = [1, 2, 3]; paneer.bol(a[-1]);', ArrayIndexOutOfBounds, 'Array index out of bounds: -1'),
    ('ye a: array<int> = [1]; paneer.bol(a["0"]);', InvalidOperation,
     'Invalid array access: array must be array type and index must be int'),
    ('ye s: string = "abc"; paneer.bol(s[0]);', InvalidOperation,
     'Invalid array access: array must be array type and index must be int'),
    ('paneer.bol(1 + 2.0);', InvalidOperation, 'Invalid binary operation: 1 + 2'),
    ('paneer.bol(true - 1);', InvalidOperation, 'Invalid binary operation: true - 1'),
    ('paneer.bol("a" > "b");', InvalidOperation, 'Invalid binary operation: a > b'),
    ('paneer.bol(-"a");', InvalidOperation, 'Invalid unary operation: -a'),
    ('har x mein 5 { }', InvalidOperation, 'Can only iterate over arrays'),
    ('paneer.shout(1);', InvalidOperation, 'Unknown method: paneer.shout'),
    ('paneer.bol(1, 2);', ArityMismatch, 'paneer.bol() expects exactly 1 argument'),
    ('paneer.bol();', ArityMismatch, 'paneer.bol() expects exactly 1 argument'),
    ('(1)(2);', InvalidOperation, 'Invalid function call'),
    ('return 1;', ReturnOutsideFunction, 'Return statement outside of function'),
    ('agar true { wapas kar 1; }', ReturnOutsideFunction, 'Return statement outside of function'),
    ('paneer.bol(9223372036854775807 + 1);', InvalidOperation,
     'Integer overflow: 9223372036854775807 + 1'),
])
def test_runtime_errors(source, error, message):
    with pytest.raises(error) as exc:
        run_program(source)
    assert str(exc.value) == message
    assert isinstance(exc.value, PaneerRuntimeError)


def test_division_by_zero_prints_nothing(capsys):
    with pytest.raises(DivisionByZero):
        run_program('ye x: int = 5 / 0; paneer.bol(x);')
    assert capsys.readouterr().out == ''


def test_output_before_error_is_kept(capsys):
    with pytest.raises(UndefinedVariable):
        run_program('paneer.bol("before"); paneer.bol(missing); paneer.bol("after");')
    assert capsys.readouterr().out == 'before\n'


def test_arity_is_checked_before_arguments_are_evaluated():
    with pytest.raises(ArityMismatch):
        run_program('func f(a int) int { return a; } f(missing, 2);')


def test_arguments_are_checked_left_to_right(capsys):
    source = '''
    func loud(s string) int { paneer.bol(s); return 0; }
    func pair(a int, b string) int { return a; }
    pair(loud("first"), loud("second"));
    '''
    with pytest.raises(TypeMismatch) as exc:
        run_program(source)
    assert str(exc.value) == 'Argument type mismatch for parameter b: expected string, got int'
    assert capsys.readouterr().out.split() == ['first', 'second']


def test_unbounded_recursion():
    with pytest.raises(PaneerRuntimeError) as exc:
        run_program('func down(n int) int { return down(n + 1); } down(0);')
    assert str(exc.value) == 'Maximum recursion depth exceeded'


def test_error_kinds():
    assert TypeMismatch('x').kind == 'TypeMismatch'
    assert DivisionByZero('x').kind == 'DivisionByZero'
    assert LexError(3, '@').kind == 'LexError'
    assert ParseError('Expected expression', 4).kind == 'ParseError'
    for cls in (LexError, ParseError, PaneerRuntimeError):
        assert issubclass(cls, PaneerError)


def test_lex_and_parse_errors_surface_from_run_program():
    with pytest.raises(LexError):
        run_program('ye x: int = 5 $;')
    with pytest.raises(ParseError):
        run_program('ye x: int = 5')
