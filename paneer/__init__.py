# PaneerLang package
# This package provides a lexer, parser and tree-walking interpreter for PaneerLang.
from .interpreter import run_program, compile_module, parse_program, Interpreter
from .errors import PaneerError

__all__ = [
    'run_program',
    'compile_module',
    'parse_program',
    'Interpreter',
    'PaneerError',
]
