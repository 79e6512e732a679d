"""CLI entry point for the PaneerLang interpreter.

Usage:
    python -m paneer [-v|-vv|-vvv|-vvvv] <program_file>
    python -m paneer [-v...] --emit-ast <program_file>
    python -m paneer [-v...] --ast <ast_json_file>
    python -m paneer --repl

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .paneer file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file
  --repl        Start an interactive read-eval-print loop

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import builtins
import json
import sys
from pathlib import Path
from typing import Optional

from .ast_json import ast_to_obj, ast_from_obj
from .errors import PaneerError
from .interpreter import Interpreter

DEBUG_FILE = 'debug.txt'
PROMPT = 'paneer> '


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def fail(err: PaneerError):
    print(f"Error: {err.kind}: {err}", file=sys.stderr)
    sys.exit(1)


def repl(interpreter: Interpreter):
    """Read one line at a time and run it against a shared interpreter.

    A line without ';' and without '{' gets a ';' appended. Errors are
    reported and the session continues. `exit` or end of input stops.
    """
    while True:
        try:
            line = builtins.input(PROMPT)
        except EOFError:
            break
        line = line.strip()
        if not line:
            continue
        if line == 'exit':
            break
        if not line.endswith(';') and '{' not in line:
            line += ';'
        try:
            interpreter.interpret(interpreter.parse_source(line))
        except PaneerError as e:
            print(f"Error: {e.kind}: {e}", file=sys.stderr)


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(description="PaneerLang interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='PANEER_FILE', help='emit AST JSON for the given .paneer file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    group.add_argument('--repl', action='store_true', help='start the interactive REPL')
    parser.add_argument('program', nargs='?', help='PaneerLang program file (.paneer) to execute')
    args = parser.parse_args(argv)

    interpreter = Interpreter(debug_level=args.v, debug_file=DEBUG_FILE)
    try:
        if args.repl:
            repl(interpreter)
            return

        # Emit AST mode
        if args.emit_ast:
            program_file = Path(args.emit_ast)
            ast_program = interpreter.parse_source(read_source(program_file))
            out_path = program_file.with_name(program_file.name + '.ast.json')
            with open(out_path, 'w', encoding='utf-8') as out:
                json.dump(ast_to_obj(ast_program), out, ensure_ascii=False, indent=2)
            print(str(out_path))
            return

        # Execute from AST JSON
        if args.ast:
            ast_path = Path(args.ast)
            try:
                program = ast_from_obj(json.loads(read_source(ast_path)))
            except (ValueError, KeyError, TypeError) as e:
                print(f"Error: invalid AST file {ast_path}: {e}", file=sys.stderr)
                sys.exit(1)
            interpreter.interpret(program)
            return

        # Default: execute source file
        if not args.program:
            parser.error('missing program file; or use --emit-ast/--ast/--repl')
        source = read_source(Path(args.program))
        interpreter.interpret(interpreter.parse_source(source))
    except PaneerError as e:
        fail(e)
    finally:
        interpreter.close()


if __name__ == '__main__':
    main()
