"""Lexical analysis for PaneerLang.

Token rules are written as a Lark terminal grammar and lexed with Lark's
basic lexer. Keyword and type-name terminals are plain strings, so Lark
retypes an identifier that spells one of them exactly; everything else
is first-match over the regex terminals. Whitespace and `//` comments are
dropped.

The whole input is lexed up front into a list of `(Token, span)` pairs.
The parser reads it through a forward-only cursor (`peek`, `advance`,
`is_at_end`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from lark import Lark
from lark.exceptions import UnexpectedCharacters

from .errors import LexError
from .types import in_int_range


PANEER_TOKENS = r"""
    start: _token*

    _token: PANEER | BOL | YE | AGAR | TOH | VARNA | FUNC | RETURN
          | WAPAS | KAR | JABTAK | HAR | MEIN | SE | TAK | TRUE | FALSE
          | INT_TYPE | FLOAT_TYPE | STRING_TYPE | BOOL_TYPE | ARRAY_TYPE
          | INT_LIT | FLOAT_LIT | STRING_LIT | IDENT
          | PLUS | MINUS | STAR | SLASH | EQUAL | NOT_EQUAL | BANG
          | GREATER | LESS | GREATER_EQUAL | LESS_EQUAL
          | LPAREN | RPAREN | LBRACE | RBRACE | LBRACKET | RBRACKET
          | SEMICOLON | COLON | ASSIGN | COMMA | DOT

    // Keywords
    PANEER: "paneer"
    BOL: "bol"
    YE: "ye"
    AGAR: "agar"
    TOH: "toh"
    VARNA: "varna"
    FUNC: "func"
    RETURN: "return"
    WAPAS: "wapas"
    KAR: "kar"
    JABTAK: "jabtak"
    HAR: "har"
    MEIN: "mein"
    SE: "se"
    TAK: "tak"
    TRUE: "true"
    FALSE: "false"

    // Types
    INT_TYPE: "int"
    FLOAT_TYPE: "float"
    STRING_TYPE: "string"
    BOOL_TYPE: "bool"
    ARRAY_TYPE: "array"

    // Literals
    FLOAT_LIT: /-?[0-9]+\.[0-9]+/
    INT_LIT: /-?[0-9]+/
    STRING_LIT: /"([^"\\]|\\["\\nt])*"/
    IDENT: /[a-zA-Z_][a-zA-Z0-9_]*/

    // Operators and delimiters
    EQUAL: "=="
    NOT_EQUAL: "!="
    GREATER_EQUAL: ">="
    LESS_EQUAL: "<="
    PLUS: "+"
    MINUS: "-"
    STAR: "*"
    SLASH: "/"
    BANG: "!"
    GREATER: ">"
    LESS: "<"
    LPAREN: "("
    RPAREN: ")"
    LBRACE: "{"
    RBRACE: "}"
    LBRACKET: "["
    RBRACKET: "]"
    SEMICOLON: ";"
    COLON: ":"
    ASSIGN: "="
    COMMA: ","
    DOT: "."

    COMMENT: /\/\/[^\n]*/
    WS: /[ \t\n\f\r]+/
    %ignore WS
    %ignore COMMENT
"""


PANEER_LEXER = Lark(
    PANEER_TOKENS,
    parser='lalr',
    lexer='basic',
)


STRING_ESCAPES = {'"': '"', '\\': '\\', 'n': '\n', 't': '\t'}

Span = Tuple[int, int]


@dataclass(frozen=True)
class Token:
    """A classified lexical unit.

    `kind` is the terminal name (e.g. 'IDENT', 'INT_LIT', 'SEMICOLON').
    `value` holds the decoded payload for literals and identifiers and is
    None for every fixed token. `text` is the matched source slice.
    """
    kind: str
    value: Any = None
    text: str = field(default='', compare=False)

    def __repr__(self) -> str:
        if self.value is None:
            return self.kind
        return f"{self.kind}({self.value!r})"


def unescape_string(raw: str) -> str:
    """Decode the body of a string literal (quotes already stripped)."""
    out: List[str] = []
    i = 0
    while i < len(raw):
        c = raw[i]
        if c == '\\' and i + 1 < len(raw):
            out.append(STRING_ESCAPES.get(raw[i + 1], raw[i + 1]))
            i += 2
            continue
        out.append(c)
        i += 1
    return ''.join(out)


def tokenize(source: str) -> List[Tuple[Token, Span]]:
    """Convert source code into a list of `(Token, span)` pairs.

    Raises LexError on the first character no terminal accepts, and on
    an integer literal that does not fit in 64 bits.
    """
    tokens: List[Tuple[Token, Span]] = []
    try:
        for tok in PANEER_LEXER.lex(source):
            span = (tok.start_pos, tok.end_pos)
            text = str(tok)
            if tok.type == 'INT_LIT':
                n = int(text)
                if not in_int_range(n):
                    raise LexError(tok.start_pos, text,
                                   f"Integer literal out of range at position {tok.start_pos}: '{text}'")
                token = Token('INT_LIT', n, text)
            elif tok.type == 'FLOAT_LIT':
                token = Token('FLOAT_LIT', float(text), text)
            elif tok.type == 'STRING_LIT':
                token = Token('STRING_LIT', unescape_string(text[1:-1]), text)
            elif tok.type == 'IDENT':
                token = Token('IDENT', text, text)
            else:
                token = Token(tok.type, None, text)
            tokens.append((token, span))
    except UnexpectedCharacters as e:
        pos = e.pos_in_stream
        raise LexError(pos, source[pos:pos + 1]) from None
    return tokens


class Lexer:
    """Token list plus a forward-only cursor over it."""

    def __init__(self, source: str):
        self.tokens = tokenize(source)
        self.current = 0

    def peek(self) -> Optional[Token]:
        if self.current < len(self.tokens):
            return self.tokens[self.current][0]
        return None

    def peek_span(self) -> Optional[Span]:
        if self.current < len(self.tokens):
            return self.tokens[self.current][1]
        return None

    def advance(self) -> Optional[Token]:
        if self.current < len(self.tokens):
            token = self.tokens[self.current][0]
            self.current += 1
            return token
        return None

    def is_at_end(self) -> bool:
        return self.current >= len(self.tokens)

    def __len__(self) -> int:
        return len(self.tokens)
