"""Tree-walking interpreter for PaneerLang.

The interpreter executes a parsed `Program` statement by statement
against an `Environment`. Executing a statement yields either None
(normal completion) or a `ReturnSignal` carrying the returned value; the
signal is passed up through enclosing if/while/for bodies until a
function call absorbs it. Expressions evaluate to immutable runtime
values and every operator dispatches on the runtime types of its
operands.

Function calls use call-site scoping: the callee's frame is chained to
the caller's current frame, so a body sees whatever is in scope where it
is called, never where it was declared. A callee can read caller
bindings but anything it defines vanishes when the call returns.
"""

from __future__ import annotations

import operator
import sys
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, TextIO

from .ast import (
    Program, Statement, Expression, VarDecl, FuncDecl, ExprStmt, IfStmt,
    ReturnStmt, WhileStmt, ForStmt, Binary, Unary, Call, Variable, Literal,
    MethodCall, ArrayLiteral, ArrayAccess, BinaryOperator, UnaryOperator,
)
from .builtin_method import BuiltinMethod, BuiltinTable, register
from .environment import Environment, Function
from .errors import (
    PaneerRuntimeError, TypeMismatch, UndefinedVariable, UndefinedFunction,
    ArityMismatch, DivisionByZero, ArrayIndexOutOfBounds, InvalidOperation,
    ReturnOutsideFunction,
)
from .lexer import Lexer
from .parser import Parser
from .types import (
    LiteralValue, IntValue, FloatValue, StringValue, BoolValue, ArrayValue,
    in_int_range, to_string, type_name,
)


ARITHMETIC: Dict[BinaryOperator, Callable[[Any, Any], Any]] = {
    BinaryOperator.ADD: operator.add,
    BinaryOperator.SUBTRACT: operator.sub,
    BinaryOperator.MULTIPLY: operator.mul,
}

ORDERING: Dict[BinaryOperator, Callable[[Any, Any], bool]] = {
    BinaryOperator.GREATER: operator.gt,
    BinaryOperator.LESS: operator.lt,
    BinaryOperator.GREATER_EQUAL: operator.ge,
    BinaryOperator.LESS_EQUAL: operator.le,
}

# Placeholders for an array nested inside an array being stringified
PRINT_NESTED = '[nested array]'
CONCAT_NESTED = '[nested]'

# Each PaneerLang call costs several Python frames; programs execute on a
# worker thread sized for this many.
RECURSION_LIMIT = 30000
STACK_SIZE = 512 * 1024 * 1024


@dataclass
class ReturnSignal:
    """Result of a statement that hit `return`."""
    value: LiteralValue


def parse_program(source: str) -> Program:
    """Lex and parse PaneerLang source into a Program AST."""
    return Parser(Lexer(source)).parse()


class Interpreter:
    """Core interpreter that executes PaneerLang ASTs."""
    def __init__(self, debug_level: int = 0, debug_file: Optional[str] = None,
                 output: Optional[TextIO] = None):
        self.env = Environment()
        self.output = output
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 and debug_file else None
        self.builtins: BuiltinTable = {}
        self.load_builtins()

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg, file=sys.stderr)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    def load_builtins(self):
        def paneer_bol(args: List[LiteralValue]) -> LiteralValue:
            print(to_string(args[0], PRINT_NESTED), file=self.output)
            return IntValue(0)

        register(self.builtins, BuiltinMethod('paneer', 'bol', 1, paneer_bol))

    # Public API

    def parse_source(self, source: str) -> Program:
        """Lex and parse `source`, tracing each phase at debug level 1+."""
        self.debug("phase: lexical analysis")
        lexer = Lexer(source)
        self.debug(f"lexer: {len(lexer)} tokens")
        if self.debug_level >= 4:
            for token, (start, end) in lexer.tokens:
                self.debug(f"  {start}..{end} {token!r}")
        self.debug("phase: syntax analysis")
        program = Parser(lexer).parse()
        self.debug(f"parser: {len(program.statements)} top-level statements")
        return program

    def interpret(self, program: Program):
        """Execute `program` in the global scope.

        Bindings persist across calls, so a REPL can feed one line at a
        time. Any error aborts the current call.
        """
        self.debug("phase: execution")
        run_on_deep_stack(self.execute_program, program)

    def execute_program(self, program: Program):
        try:
            for statement in program.statements:
                if isinstance(self.execute(statement), ReturnSignal):
                    raise ReturnOutsideFunction("Return statement outside of function")
        except RecursionError:
            raise PaneerRuntimeError("Maximum recursion depth exceeded") from None

    def run(self, program: Program):
        try:
            self.interpret(program)
        finally:
            self.close()

    # Statements

    def execute_block(self, statements: Sequence[Statement]) -> Optional[ReturnSignal]:
        for statement in statements:
            result = self.execute(statement)
            if isinstance(result, ReturnSignal):
                return result
        return None

    def execute(self, node: Statement) -> Optional[ReturnSignal]:
        if isinstance(node, VarDecl):
            value = self.evaluate(node.initializer)
            if value.type_of() != node.type_annotation:
                raise TypeMismatch(f"Type mismatch: expected {node.type_annotation}, got {type_name(value)}")
            self.env.define_variable(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"declare {node.name}: {node.type_annotation} = {value}")
            return None
        if isinstance(node, FuncDecl):
            function = Function(tuple(node.params), node.return_type, tuple(node.body))
            self.env.define_function(node.name, function)
            if self.debug_level >= 2:
                self.debug(f"define function {node.name}/{function.arity}")
            return None
        if isinstance(node, ExprStmt):
            self.evaluate(node.expression)
            return None
        if isinstance(node, IfStmt):
            truthy = self.evaluate(node.condition).is_truthy()
            if self.debug_level >= 3:
                self.debug(f"if condition -> {truthy}")
            if truthy:
                return self.execute_block(node.then_branch)
            if node.else_branch is not None:
                return self.execute_block(node.else_branch)
            return None
        if isinstance(node, ReturnStmt):
            value = self.evaluate(node.value) if node.value is not None else IntValue(0)
            return ReturnSignal(value)
        if isinstance(node, WhileStmt):
            while self.evaluate(node.condition).is_truthy():
                result = self.execute_block(node.body)
                if isinstance(result, ReturnSignal):
                    return result
            return None
        if isinstance(node, ForStmt):
            iterable = self.evaluate(node.iterable)
            if not isinstance(iterable, ArrayValue):
                raise InvalidOperation("Can only iterate over arrays")
            for element in iterable.items:
                with self.env.child_scope():
                    self.env.define_variable(node.variable, element)
                    result = self.execute_block(node.body)
                if isinstance(result, ReturnSignal):
                    return result
            return None
        raise NotImplementedError(f"execute: unexpected node type {type(node).__name__}")

    # Expressions

    def evaluate(self, node: Expression) -> LiteralValue:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Variable):
            value = self.env.get_variable(node.name)
            if value is None:
                raise UndefinedVariable(f"Undefined variable: {node.name}")
            return value
        if isinstance(node, Binary):
            left = self.evaluate(node.left)
            right = self.evaluate(node.right)
            return self.apply_binary_op(node.operator, left, right)
        if isinstance(node, Unary):
            return self.apply_unary_op(node.operator, self.evaluate(node.operand))
        if isinstance(node, Call):
            return self.call_function(node)
        if isinstance(node, MethodCall):
            return self.call_method(node)
        if isinstance(node, ArrayLiteral):
            return ArrayValue(tuple(self.evaluate(element) for element in node.elements))
        if isinstance(node, ArrayAccess):
            array = self.evaluate(node.array)
            index = self.evaluate(node.index)
            if not isinstance(array, ArrayValue) or not isinstance(index, IntValue):
                raise InvalidOperation("Invalid array access: array must be array type and index must be int")
            if index.value < 0 or index.value >= len(array.items):
                raise ArrayIndexOutOfBounds(f"Array index out of bounds: {index.value}")
            return array.items[index.value]
        raise NotImplementedError(f"evaluate: unexpected node type {type(node).__name__}")

    def call_function(self, node: Call) -> LiteralValue:
        if not isinstance(node.callee, Variable):
            raise InvalidOperation("Invalid function call")
        name = node.callee.name
        function = self.env.get_function(name)
        if function is None:
            raise UndefinedFunction(f"Undefined function: {name}")
        if len(node.arguments) != function.arity:
            raise ArityMismatch(
                f"Function {name} expects {function.arity} arguments, got {len(node.arguments)}")
        # Arguments are evaluated and checked one at a time in the caller's scope
        args: List[LiteralValue] = []
        for (param_name, param_type), arg_node in zip(function.params, node.arguments):
            value = self.evaluate(arg_node)
            if value.type_of() != param_type:
                raise TypeMismatch(
                    f"Argument type mismatch for parameter {param_name}: "
                    f"expected {param_type}, got {type_name(value)}")
            args.append(value)
        if self.debug_level >= 3:
            self.debug(f"call {name}({', '.join(str(a) for a in args)})")
        # explicit push/pop: child_scope() would add C stack per call level
        saved = self.env.push_scope()
        try:
            for (param_name, _), value in zip(function.params, args):
                self.env.define_variable(param_name, value)
            result = self.execute_block(function.body)
        finally:
            self.env.pop_scope(saved)
        ret_val = result.value if isinstance(result, ReturnSignal) else IntValue(0)
        if ret_val.type_of() != function.return_type:
            raise TypeMismatch(
                f"Return type mismatch: expected {function.return_type}, got {type_name(ret_val)}")
        if self.debug_level >= 3:
            self.debug(f"return {name} -> {ret_val}")
        return ret_val

    def call_method(self, node: MethodCall) -> LiteralValue:
        receiver = node.object.name if isinstance(node.object, Variable) else 'unknown'
        method = self.builtins.get((receiver, node.method))
        if method is None:
            raise InvalidOperation(f"Unknown method: {receiver}.{node.method}")
        if method.arity is not None and len(node.arguments) != method.arity:
            raise ArityMismatch(f"{method.qualified_name}() expects exactly {method.arity} argument"
                                f"{'' if method.arity == 1 else 's'}")
        args = [self.evaluate(arg) for arg in node.arguments]
        return method.fn(args)

    # Operators

    def apply_binary_op(self, op: BinaryOperator, left: LiteralValue, right: LiteralValue) -> LiteralValue:
        if op is BinaryOperator.EQUAL:
            return BoolValue(left == right)
        if op is BinaryOperator.NOT_EQUAL:
            return BoolValue(left != right)
        if op is BinaryOperator.ADD and (isinstance(left, StringValue) or isinstance(right, StringValue)):
            return StringValue(to_string(left, CONCAT_NESTED) + to_string(right, CONCAT_NESTED))
        same_numeric = type(left) is type(right) and isinstance(left, (IntValue, FloatValue))
        if same_numeric:
            a, b = left.value, right.value
            if op in ARITHMETIC:
                return self.make_number(left, ARITHMETIC[op](a, b), op, right)
            if op is BinaryOperator.DIVIDE:
                if b == 0:
                    raise DivisionByZero("Division by zero")
                if isinstance(left, IntValue):
                    return self.make_number(left, truncating_div(a, b), op, right)
                return FloatValue(a / b)
            if op in ORDERING:
                return BoolValue(ORDERING[op](a, b))
        raise InvalidOperation(f"Invalid binary operation: {left} {op.value} {right}")

    def make_number(self, left: LiteralValue, result, op: BinaryOperator, right: LiteralValue) -> LiteralValue:
        if isinstance(left, FloatValue):
            return FloatValue(result)
        if not in_int_range(result):
            raise InvalidOperation(f"Integer overflow: {left} {op.value} {right}")
        return IntValue(result)

    def apply_unary_op(self, op: UnaryOperator, operand: LiteralValue) -> LiteralValue:
        if op is UnaryOperator.NOT:
            return BoolValue(not operand.is_truthy())
        if isinstance(operand, IntValue):
            if not in_int_range(-operand.value):
                raise InvalidOperation(f"Integer overflow: -{operand}")
            return IntValue(-operand.value)
        if isinstance(operand, FloatValue):
            return FloatValue(-operand.value)
        raise InvalidOperation(f"Invalid unary operation: {op.value}{operand}")


def run_on_deep_stack(fn: Callable[..., Any], *args: Any) -> Any:
    """Call `fn(*args)` on a worker thread with a large stack.

    The recursion limit is raised while the worker runs and restored
    afterwards. Whatever `fn` raises is re-raised in the calling thread.
    """
    outcome: Dict[str, Any] = {"value": None, "error": None}

    def worker():
        try:
            outcome["value"] = fn(*args)
        except BaseException as e:
            outcome["error"] = e

    old_limit = sys.getrecursionlimit()
    old_stack_size = threading.stack_size()
    sys.setrecursionlimit(max(old_limit, RECURSION_LIMIT))
    try:
        threading.stack_size(STACK_SIZE)
        try:
            thread = threading.Thread(target=worker, name='paneer-interpreter', daemon=True)
            thread.start()
        finally:
            threading.stack_size(old_stack_size)
        thread.join()
    finally:
        sys.setrecursionlimit(old_limit)
    if outcome["error"] is not None:
        raise outcome["error"]
    return outcome["value"]


def truncating_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def run_program(source: str, debug_level: int = 0) -> Interpreter:
    """Convenience function to parse and run a PaneerLang program from source."""
    interpreter = Interpreter(debug_level=debug_level)
    interpreter.run(interpreter.parse_source(source))
    return interpreter


def compile_module(file_path: str, debug_level: int = 0) -> Interpreter:
    """Parse and execute a PaneerLang file, returning the interpreter instance."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    return run_program(source, debug_level=debug_level)
