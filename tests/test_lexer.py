import pytest

from paneer.errors import LexError
from paneer.lexer import Lexer, Token, tokenize, unescape_string


def kinds(source):
    return [token.kind for token, _ in tokenize(source)]


def test_declaration_tokens_and_spans():
    tokens = tokenize('ye x: int = 5;')
    assert [t for t, _ in tokens] == [
        Token('YE'),
        Token('IDENT', 'x'),
        Token('COLON'),
        Token('INT_TYPE'),
        Token('ASSIGN'),
        Token('INT_LIT', 5),
        Token('SEMICOLON'),
    ]
    assert [span for _, span in tokens] == [(0, 2), (3, 4), (4, 5), (6, 9), (10, 11), (12, 13), (13, 14)]


def test_keywords_are_not_identifiers():
    assert kinds('paneer bol agar toh varna func return wapas kar jabtak har mein se tak true false') == [
        'PANEER', 'BOL', 'AGAR', 'TOH', 'VARNA', 'FUNC', 'RETURN', 'WAPAS', 'KAR',
        'JABTAK', 'HAR', 'MEIN', 'SE', 'TAK', 'TRUE', 'FALSE',
    ]
    assert kinds('int float string bool array') == [
        'INT_TYPE', 'FLOAT_TYPE', 'STRING_TYPE', 'BOOL_TYPE', 'ARRAY_TYPE',
    ]


def test_identifier_containing_keyword():
    tokens = tokenize('agarwal yes _ye int2')
    assert [t.value for t, _ in tokens] == ['agarwal', 'yes', '_ye', 'int2']
    assert all(t.kind == 'IDENT' for t, _ in tokens)


def test_two_character_operators_win():
    assert kinds('== != >= <= = ! > <') == [
        'EQUAL', 'NOT_EQUAL', 'GREATER_EQUAL', 'LESS_EQUAL', 'ASSIGN', 'BANG', 'GREATER', 'LESS',
    ]


def test_numbers():
    tokens = [t for t, _ in tokenize('42 3.14 -7 -2.5 0')]
    assert tokens == [
        Token('INT_LIT', 42),
        Token('FLOAT_LIT', 3.14),
        Token('INT_LIT', -7),
        Token('FLOAT_LIT', -2.5),
        Token('INT_LIT', 0),
    ]


def test_minus_followed_by_space_is_operator():
    assert kinds('a - 1') == ['IDENT', 'MINUS', 'INT_LIT']
    assert kinds('a -1') == ['IDENT', 'INT_LIT']


def test_integer_literal_limits():
    assert tokenize('9223372036854775807')[0][0].value == 2 ** 63 - 1
    assert tokenize('-9223372036854775808')[0][0].value == -(2 ** 63)
    with pytest.raises(LexError) as exc:
        tokenize('ye x: int = 9223372036854775808;')
    assert exc.value.position == 12
    assert 'out of range' in str(exc.value)


def test_string_literal_and_escapes():
    token, span = tokenize('"say \\"hi\\"\\n"')[0]
    assert token.kind == 'STRING_LIT'
    assert token.value == 'say "hi"\n'
    assert span == (0, 14)
    assert unescape_string('a\\tb\\\\c') == 'a\tb\\c'


def test_comments_and_whitespace_are_skipped():
    source = '// heading\nye x: int = 1; // trailing\r\n\tpaneer.bol(x);'
    assert kinds(source) == [
        'YE', 'IDENT', 'COLON', 'INT_TYPE', 'ASSIGN', 'INT_LIT', 'SEMICOLON',
        'PANEER', 'DOT', 'BOL', 'LPAREN', 'IDENT', 'RPAREN', 'SEMICOLON',
    ]


def test_unrecognized_character():
    with pytest.raises(LexError) as exc:
        tokenize('ye x: int = 5 @ 3;')
    assert exc.value.position == 14
    assert exc.value.text == '@'
    assert str(exc.value) == "Unexpected character at position 14: '@'"


def test_unterminated_string_is_lex_error():
    with pytest.raises(LexError) as exc:
        tokenize('paneer.bol("open);')
    assert exc.value.position == 11


def test_empty_source():
    lexer = Lexer('   // nothing here\n')
    assert len(lexer) == 0
    assert lexer.is_at_end()
    assert lexer.peek() is None
    assert lexer.advance() is None


def test_cursor():
    lexer = Lexer('x;')
    assert lexer.peek() == Token('IDENT', 'x')
    assert lexer.peek_span() == (0, 1)
    assert lexer.advance() == Token('IDENT', 'x')
    assert not lexer.is_at_end()
    assert lexer.advance() == Token('SEMICOLON')
    assert lexer.is_at_end()
    assert lexer.peek_span() is None


def test_error_position_counts_characters():
    with pytest.raises(LexError) as exc:
        tokenize('ye s: string = "ñ"; @')
    assert exc.value.position == 20
