"""Parser for PaneerLang.

A recursive-descent parser with one method per grammar level. It reads
tokens through the lexer's forward-only cursor and never backtracks.
The first unmet expectation raises ParseError; there is no recovery.

Expression precedence, lowest to highest:

    equality       == !=
    comparison     > >= < <=
    term           + -
    factor         * /
    unary          ! -            (prefix, right-recursive)
    call/postfix   f(...)  obj.m(...)  a[i]
    primary        literals, names, paneer, ( expr ), [ elements ]
"""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from .ast import (
    Program, Statement, Expression, VarDecl, FuncDecl, ExprStmt, IfStmt,
    ReturnStmt, WhileStmt, ForStmt, Binary, Unary, Call, Variable, Literal,
    MethodCall, ArrayLiteral, ArrayAccess, BinaryOperator, UnaryOperator,
)
from .errors import ParseError
from .lexer import Lexer, Token
from .types import Type, IntValue, FloatValue, StringValue, BoolValue


EQUALITY_OPS = {
    'EQUAL': BinaryOperator.EQUAL,
    'NOT_EQUAL': BinaryOperator.NOT_EQUAL,
}

COMPARISON_OPS = {
    'GREATER': BinaryOperator.GREATER,
    'GREATER_EQUAL': BinaryOperator.GREATER_EQUAL,
    'LESS': BinaryOperator.LESS,
    'LESS_EQUAL': BinaryOperator.LESS_EQUAL,
}

TERM_OPS = {
    'PLUS': BinaryOperator.ADD,
    'MINUS': BinaryOperator.SUBTRACT,
}

FACTOR_OPS = {
    'STAR': BinaryOperator.MULTIPLY,
    'SLASH': BinaryOperator.DIVIDE,
}

PRIMITIVE_TYPES = {
    'INT_TYPE': Type.integer(),
    'FLOAT_TYPE': Type.floating(),
    'STRING_TYPE': Type.string(),
    'BOOL_TYPE': Type.boolean(),
}


class Parser:
    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.statement_parsers = {
            'YE': self.parse_var_decl,
            'FUNC': self.parse_func_decl,
            'AGAR': self.parse_if_stmt,
            'RETURN': self.parse_return_stmt,
            'WAPAS': self.parse_wapas_kar_stmt,
            'JABTAK': self.parse_while_stmt,
            'HAR': self.parse_for_stmt,
        }

    # Cursor helpers

    def error(self, message: str, span=None) -> ParseError:
        if span is None:
            span = self.lexer.peek_span()
        return ParseError(message, span[0] if span else None)

    def match(self, kind: str) -> bool:
        token = self.lexer.peek()
        return token is not None and token.kind == kind

    def consume(self, kind: str, message: str) -> Token:
        token = self.lexer.peek()
        if token is None or token.kind != kind:
            raise self.error(message)
        self.lexer.advance()
        return token

    def consume_name(self, message: str) -> str:
        return self.consume('IDENT', message).value

    # Program and statements

    def parse(self) -> Program:
        statements: List[Statement] = []
        while not self.lexer.is_at_end():
            statements.append(self.parse_statement())
        return Program(statements)

    def parse_statement(self) -> Statement:
        token = self.lexer.peek()
        handler = self.statement_parsers.get(token.kind) if token else None
        if handler is not None:
            return handler()
        return self.parse_expression_stmt()

    def parse_body(self, what: str) -> List[Statement]:
        """Parse `{ statement* }`; `what` names the construct for messages."""
        self.consume('LBRACE', f"Expected '{{' {what}")
        body: List[Statement] = []
        while not self.match('RBRACE') and not self.lexer.is_at_end():
            body.append(self.parse_statement())
        return body

    def parse_var_decl(self) -> VarDecl:
        self.consume('YE', "Expected 'ye'")
        name = self.consume_name("Expected variable name")
        self.consume('COLON', "Expected ':' after variable name")
        type_annotation = self.parse_type()
        self.consume('ASSIGN', "Expected '=' after type")
        initializer = self.parse_expression()
        self.consume('SEMICOLON', "Expected ';' after variable declaration")
        return VarDecl(name, type_annotation, initializer)

    def parse_func_decl(self) -> FuncDecl:
        self.consume('FUNC', "Expected 'func'")
        name = self.consume_name("Expected function name")
        self.consume('LPAREN', "Expected '(' after function name")
        params: List[Tuple[str, Type]] = []
        if not self.match('RPAREN'):
            while True:
                param_name = self.consume_name("Expected parameter name")
                params.append((param_name, self.parse_type()))
                if not self.match('COMMA'):
                    break
                self.lexer.advance()
        self.consume('RPAREN', "Expected ')' after parameters")
        return_type = self.parse_type()
        body = self.parse_body("before function body")
        self.consume('RBRACE', "Expected '}' after function body")
        return FuncDecl(name, params, return_type, body)

    def parse_if_stmt(self) -> IfStmt:
        self.consume('AGAR', "Expected 'agar'")
        condition = self.parse_expression()
        then_branch = self.parse_body("after if condition")
        self.consume('RBRACE', "Expected '}' after if body")
        else_branch: Optional[List[Statement]] = None
        if self.match('VARNA'):
            self.lexer.advance()
            else_branch = self.parse_body("after 'varna'")
            self.consume('RBRACE', "Expected '}' after else body")
        return IfStmt(condition, then_branch, else_branch)

    def parse_return_value(self, what: str) -> ReturnStmt:
        value: Optional[Expression] = None
        if not self.match('SEMICOLON'):
            value = self.parse_expression()
        self.consume('SEMICOLON', f"Expected ';' after {what}")
        return ReturnStmt(value)

    def parse_return_stmt(self) -> ReturnStmt:
        self.consume('RETURN', "Expected 'return'")
        return self.parse_return_value("return statement")

    def parse_wapas_kar_stmt(self) -> ReturnStmt:
        # `wapas kar` is the long-hand spelling of `return`
        self.consume('WAPAS', "Expected 'wapas'")
        self.consume('KAR', "Expected 'kar' after 'wapas'")
        return self.parse_return_value("wapas kar statement")

    def parse_while_stmt(self) -> WhileStmt:
        self.consume('JABTAK', "Expected 'jabtak'")
        condition = self.parse_expression()
        body = self.parse_body("after while condition")
        self.consume('RBRACE', "Expected '}' after while body")
        return WhileStmt(condition, body)

    def parse_for_stmt(self) -> ForStmt:
        self.consume('HAR', "Expected 'har'")
        variable = self.consume_name("Expected variable name after 'har'")
        self.consume('MEIN', "Expected 'mein' after variable")
        iterable = self.parse_expression()
        body = self.parse_body("after for expression")
        self.consume('RBRACE', "Expected '}' after for body")
        return ForStmt(variable, iterable, body)

    def parse_expression_stmt(self) -> ExprStmt:
        expr = self.parse_expression()
        self.consume('SEMICOLON', "Expected ';' after expression")
        return ExprStmt(expr)

    # Types

    def parse_type(self) -> Type:
        span = self.lexer.peek_span()
        token = self.lexer.advance()
        if token is not None and token.kind in PRIMITIVE_TYPES:
            return PRIMITIVE_TYPES[token.kind]
        if token is not None and token.kind == 'ARRAY_TYPE':
            self.consume('LESS', "Expected '<' after 'array'")
            element = self.parse_type()
            self.consume('GREATER', "Expected '>' after array element type")
            return Type.array(element)
        raise self.error("Expected type annotation", span)

    # Expressions

    def parse_expression(self) -> Expression:
        return self.parse_equality()

    def parse_binary_chain(self, operators, operand: Callable[[], Expression]) -> Expression:
        node = operand()
        while True:
            token = self.lexer.peek()
            if token is None or token.kind not in operators:
                return node
            self.lexer.advance()
            node = Binary(node, operators[token.kind], operand())

    def parse_equality(self) -> Expression:
        return self.parse_binary_chain(EQUALITY_OPS, self.parse_comparison)

    def parse_comparison(self) -> Expression:
        return self.parse_binary_chain(COMPARISON_OPS, self.parse_term)

    def parse_term(self) -> Expression:
        node = self.parse_factor()
        while True:
            token = self.lexer.peek()
            if token is None:
                return node
            if token.kind in TERM_OPS:
                self.lexer.advance()
                node = Binary(node, TERM_OPS[token.kind], self.parse_factor())
            elif self.is_signed_number(token):
                # `a -1` lexes as IDENT INT(-1): read it as `a - 1`
                self.lexer.advance()
                magnitude = self.number_literal(token.kind, -token.value)
                node = Binary(node, BinaryOperator.SUBTRACT, self.parse_factor(magnitude))
            else:
                return node

    def parse_factor(self, first: Optional[Expression] = None) -> Expression:
        node = first if first is not None else self.parse_unary()
        while True:
            token = self.lexer.peek()
            if token is None or token.kind not in FACTOR_OPS:
                return node
            self.lexer.advance()
            node = Binary(node, FACTOR_OPS[token.kind], self.parse_unary())

    def parse_unary(self) -> Expression:
        if self.match('BANG'):
            self.lexer.advance()
            return Unary(UnaryOperator.NOT, self.parse_unary())
        if self.match('MINUS'):
            self.lexer.advance()
            return Unary(UnaryOperator.MINUS, self.parse_unary())
        return self.parse_call()

    def parse_arguments(self, closing: str, message: str) -> List[Expression]:
        args: List[Expression] = []
        if not self.match(closing):
            while True:
                args.append(self.parse_expression())
                if not self.match('COMMA'):
                    break
                self.lexer.advance()
        self.consume(closing, message)
        return args

    def parse_call(self) -> Expression:
        expr = self.parse_primary()
        while True:
            if self.match('LPAREN'):
                self.lexer.advance()
                args = self.parse_arguments('RPAREN', "Expected ')' after arguments")
                expr = Call(expr, args)
            elif self.match('DOT'):
                self.lexer.advance()
                span = self.lexer.peek_span()
                token = self.lexer.advance()
                if token is not None and token.kind == 'IDENT':
                    method = token.value
                elif token is not None and token.kind == 'BOL':
                    method = 'bol'
                else:
                    raise self.error("Expected method name after '.'", span)
                self.consume('LPAREN', "Expected '(' after method name")
                args = self.parse_arguments('RPAREN', "Expected ')' after method arguments")
                expr = MethodCall(expr, method, args)
            elif self.match('LBRACKET'):
                self.lexer.advance()
                index = self.parse_expression()
                self.consume('RBRACKET', "Expected ']' after array index")
                expr = ArrayAccess(expr, index)
            else:
                return expr

    def parse_primary(self) -> Expression:
        span = self.lexer.peek_span()
        token = self.lexer.advance()
        if token is None:
            raise self.error("Expected expression", span)
        kind = token.kind
        if kind == 'TRUE':
            return Literal(BoolValue(True))
        if kind == 'FALSE':
            return Literal(BoolValue(False))
        if kind in ('INT_LIT', 'FLOAT_LIT'):
            return self.number_literal(kind, token.value)
        if kind == 'STRING_LIT':
            return Literal(StringValue(token.value))
        if kind == 'IDENT':
            return Variable(token.value)
        if kind == 'PANEER':
            return Variable('paneer')
        if kind == 'LPAREN':
            expr = self.parse_expression()
            self.consume('RPAREN', "Expected ')' after expression")
            return expr
        if kind == 'LBRACKET':
            elements = self.parse_arguments('RBRACKET', "Expected ']' after array elements")
            return ArrayLiteral(elements)
        raise self.error("Expected expression", span)

    @staticmethod
    def is_signed_number(token: Token) -> bool:
        return token.kind in ('INT_LIT', 'FLOAT_LIT') and token.text.startswith('-')

    @staticmethod
    def number_literal(kind: str, value) -> Literal:
        if kind == 'INT_LIT':
            return Literal(IntValue(value))
        return Literal(FloatValue(value))
