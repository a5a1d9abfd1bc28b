import pytest

from errors import LexError
from lexer import Lexer
from main import lex
from tokens import BinOp as Op, Token, TokenType
from tests.utils import op, op_eq, tok, token_types


def test_brackets():
    assert token_types("(\r[{  \t} ] \n)") == [
        TokenType.LPAREN,
        TokenType.LBRACKET,
        TokenType.LBRACE,
        TokenType.RBRACE,
        TokenType.RBRACKET,
        TokenType.RPAREN,
    ]


def test_comparison_operators_use_maximal_munch():
    assert lex("= = ==< << == = => ==<== == >= > >>") == [
        tok(TokenType.ASSIGN),
        tok(TokenType.ASSIGN),
        tok(TokenType.EQ),
        tok(TokenType.LT),
        op(Op.SHIFT_LEFT),
        tok(TokenType.EQ),
        tok(TokenType.ASSIGN),
        tok(TokenType.FAT_ARROW),
        tok(TokenType.EQ),
        tok(TokenType.LE),
        tok(TokenType.ASSIGN),
        tok(TokenType.EQ),
        tok(TokenType.GE),
        tok(TokenType.GT),
        op(Op.SHIFT_RIGHT),
    ]


def test_boolean_operators():
    assert lex("& &&^ || |^^ !") == [
        op(Op.AND),
        tok(TokenType.AND_AND),
        op(Op.XOR),
        tok(TokenType.OR_OR),
        op(Op.OR),
        tok(TokenType.XOR_XOR),
        tok(TokenType.NOT),
    ]


def test_compound_assignment_operators():
    assert lex("+ = += -= *= /= %= >>= <<= |= &= ^= ^^=") == [
        op(Op.PLUS),
        tok(TokenType.ASSIGN),
        op_eq(Op.PLUS),
        op_eq(Op.MINUS),
        op_eq(Op.TIMES),
        op_eq(Op.DIVIDE),
        op_eq(Op.MODULO),
        op_eq(Op.SHIFT_RIGHT),
        op_eq(Op.SHIFT_LEFT),
        op_eq(Op.OR),
        op_eq(Op.AND),
        op_eq(Op.XOR),
        tok(TokenType.XOR_XOR),
        tok(TokenType.ASSIGN),
    ]


def test_miscellaneous_punctuation():
    assert token_types("@..... .. . ...~ $# ; , :::: : :: .") == [
        TokenType.AT,
        TokenType.DOT_DOT_DOT,
        TokenType.DOT_DOT,
        TokenType.DOT_DOT,
        TokenType.DOT,
        TokenType.DOT_DOT_DOT,
        TokenType.TILDE,
        TokenType.DOLLAR,
        TokenType.HASH,
        TokenType.SEMICOLON,
        TokenType.COMMA,
        TokenType.DOUBLE_COLON,
        TokenType.DOUBLE_COLON,
        TokenType.COLON,
        TokenType.DOUBLE_COLON,
        TokenType.DOT,
    ]


def test_arrows():
    assert token_types("<- -> =>") == [
        TokenType.LARROW,
        TokenType.RARROW,
        TokenType.FAT_ARROW,
    ]


def test_identifiers_and_booleans():
    assert lex("$éllo_36a /false true _") == [
        tok(TokenType.DOLLAR),
        tok(TokenType.IDENTIFIER, "éllo_36a"),
        op(Op.DIVIDE),
        tok(TokenType.BOOL, False),
        tok(TokenType.BOOL, True),
        tok(TokenType.IDENTIFIER, "_"),
    ]


def test_identifier_is_greedy():
    assert lex("trueish iffoo") == [
        tok(TokenType.IDENTIFIER, "trueish"),
        tok(TokenType.IDENTIFIER, "iffoo"),
    ]


def test_char_literals():
    assert lex("/'h'$ 'e'") == [
        op(Op.DIVIDE),
        tok(TokenType.CHAR, "h"),
        tok(TokenType.DOLLAR),
        tok(TokenType.CHAR, "e"),
    ]


def test_string_literals():
    assert lex(' "hello" $ "wórld"~ ') == [
        tok(TokenType.STRING, "hello"),
        tok(TokenType.DOLLAR),
        tok(TokenType.STRING, "wórld"),
        tok(TokenType.TILDE),
    ]


def test_numbers():
    assert lex("5 1. 3.4") == [
        tok(TokenType.NUMBER, ("5", "")),
        tok(TokenType.NUMBER, ("1", "")),
        tok(TokenType.NUMBER, ("3", "4")),
    ]


def test_numbers_keep_underscores_and_extra_dots():
    assert lex("1_000.5 1.2.3 1..5") == [
        tok(TokenType.NUMBER, ("1_000", "5")),
        tok(TokenType.NUMBER, ("1", "2.3")),
        tok(TokenType.NUMBER, ("1", ".5")),
    ]


def test_string_escapes():
    tokens = lex(r'"a\n\r\t\0\\\'\"\x41\u{e9}\u{1F600}"')
    assert tokens == [tok(TokenType.STRING, "a\n\r\t\0\\'\"Aé\U0001F600")]


def test_char_escapes():
    assert lex(r"'\n' '\u{e9}' '\''") == [
        tok(TokenType.CHAR, "\n"),
        tok(TokenType.CHAR, "é"),
        tok(TokenType.CHAR, "'"),
    ]


def test_raw_strings():
    assert lex(r'r"a\n" r#"say "hi""# r##"a"#b"##') == [
        tok(TokenType.RAW_STRING, "a\\n"),
        tok(TokenType.RAW_STRING, 'say "hi"'),
        tok(TokenType.RAW_STRING, 'a"#b'),
    ]


def test_byte_strings():
    assert lex(r'b"ab\xff\n" br"x\y" br#"q"#') == [
        tok(TokenType.BYTE_STRING, b"ab\xff\n"),
        tok(TokenType.RAW_BYTE_STRING, b"x\\y"),
        tok(TokenType.RAW_BYTE_STRING, b"q"),
    ]


def test_prefix_letters_without_quote_are_identifiers():
    assert lex("r b br rb r#x") == [
        tok(TokenType.IDENTIFIER, "r"),
        tok(TokenType.IDENTIFIER, "b"),
        tok(TokenType.IDENTIFIER, "br"),
        tok(TokenType.IDENTIFIER, "rb"),
        tok(TokenType.IDENTIFIER, "r"),
        tok(TokenType.HASH),
        tok(TokenType.IDENTIFIER, "x"),
    ]


def test_line_comments_are_skipped():
    assert lex("1 // one\n// two\n2 / 3 /= 4") == [
        tok(TokenType.NUMBER, ("1", "")),
        tok(TokenType.NUMBER, ("2", "")),
        op(Op.DIVIDE),
        tok(TokenType.NUMBER, ("3", "")),
        op_eq(Op.DIVIDE),
        tok(TokenType.NUMBER, ("4", "")),
    ]


def test_positions_count_scalar_values():
    tokens = lex("é + xy")
    assert [(t.start, t.end) for t in tokens] == [(0, 1), (2, 3), (4, 6)]


def test_line_and_column_tracking():
    tokens = lex("a\n  bc\n\td")
    assert [(t.line, t.column) for t in tokens] == [(1, 1), (2, 3), (3, 2)]


def test_start_offset():
    tokens = Lexer("abc\ndef", offset=4).tokenize()
    assert tokens == [tok(TokenType.IDENTIFIER, "def")]
    assert (tokens[0].start, tokens[0].line, tokens[0].column) == (4, 2, 1)


def test_lexer_is_lazy_iterator():
    lexer = Lexer("a b")
    assert next(lexer) == tok(TokenType.IDENTIFIER, "a")
    assert lexer.pos == 1
    assert next(lexer) == tok(TokenType.IDENTIFIER, "b")
    with pytest.raises(StopIteration):
        next(lexer)


def test_no_eof_token_is_emitted():
    assert lex("") == []
    assert lex("  // nothing\n") == []


def test_error_ends_the_stream():
    lexer = Lexer("a ` b")
    assert lexer.get_next_token() == tok(TokenType.IDENTIFIER, "a")
    with pytest.raises(LexError) as exc:
        lexer.get_next_token()
    assert exc.value.pos == 2
    assert lexer.get_next_token() is None


@pytest.mark.parametrize(
    "source, pos, detail",
    [
        ('"abc', 0, "unterminated string literal"),
        ("x 'a", 2, "unterminated char literal"),
        ("''", 0, "empty char literal"),
        ("'ab'", 2, "expected `'`, found `b`"),
        (r'"\q"', 1, "unknown escape sequence `\\q`"),
        (r'"\x80"', 1, "`\\x80` escape out of range"),
        (r'"\xZ1"', 1, "invalid `\\x` escape: expected two hex digits"),
        (r'"\u{D800}"', 1, "`\\u{D800}` is not a valid character"),
        (r'"\u41"', 1, "invalid `\\u` escape: expected `{`"),
        ('b"é"', 2, "non-ASCII character `é` in byte string literal"),
        ('r#"abc"', 0, "unterminated raw string literal"),
        ("a ` b", 2, "unexpected character ```"),
    ],
)
def test_lex_errors(source, pos, detail):
    with pytest.raises(LexError) as exc:
        lex(source)
    assert exc.value.pos == pos
    assert exc.value.detail == detail
    assert str(exc.value) == f"pos {pos}: {detail}"


def test_lex_error_is_a_syntax_error():
    with pytest.raises(SyntaxError):
        lex('"open')


def test_token_lexeme():
    assert Token(TokenType.BINOP_EQ, Op.SHIFT_LEFT).lexeme == "<<="
    assert Token(TokenType.NUMBER, ("3", "4")).lexeme == "3.4"
    assert Token(TokenType.BOOL, False).lexeme == "false"
    assert Token(TokenType.DOUBLE_COLON).lexeme == "::"
    assert Token(TokenType.EOF).lexeme == "EOF"


def test_longest_match_for_shift_and_compare():
    assert lex(">>= >> > >=") == [
        op_eq(Op.SHIFT_RIGHT),
        op(Op.SHIFT_RIGHT),
        tok(TokenType.GT),
        tok(TokenType.GE),
    ]
    assert lex("<<=<<<-<=") == [
        op_eq(Op.SHIFT_LEFT),
        op(Op.SHIFT_LEFT),
        tok(TokenType.LARROW),
        tok(TokenType.LE),
    ]
