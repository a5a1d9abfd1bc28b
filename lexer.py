"""
Lexer for the FeO scripting language.

Overview:
- This module implements a small hand-written lexical analyzer (scanner)
    that transforms an input source string into a stream of `Token` objects
    defined in `tokens.py`.
- It recognizes identifiers, the boolean literals `true`/`false`, number
    literals (split into integer and fraction parts), character and string
    literals (plain, raw `r"..."`/`r#"..."#`, byte `b"..."` and raw byte
    `br"..."`), single-, two- and three-character operators, punctuation,
    and skips whitespace and `//` line comments.

Examples:
    Input:  "x += f(3.4, 'c')"
    Tokens: [IDENTIFIER('x'), BINOP_EQ(+), IDENTIFIER('f'), LPAREN,
             NUMBER(('3', '4')), COMMA, CHAR('c'), RPAREN]

Implementation notes:
- The lexer is a stateful scanner using `self.pos` and `self.current_char`.
    The cursor only ever moves forward, one Unicode scalar value (one Python
    string index) at a time.
- It is lazy: `get_next_token()` scans exactly one token and returns `None`
    once the input is exhausted. No EOF token is put on the stream; the
    parser appends its own sentinel.
- Operators use maximal munch with up to two characters of lookahead, so
    `>>=` is never split into `>>` `=` or `>` `>=`.
- Any lexing failure raises `LexError` and ends the stream: the pass is over
    and later calls return no further tokens.
"""

from __future__ import annotations
import logging
from typing import Iterator, List, Optional, Tuple

from errors import LexError, line_and_column
from tokens import BinOp, Token, TokenType, TokenValue

logger = logging.getLogger(__name__)

# Single-character operators that have a compound-assignment form (`+=`).
ARITHMETIC_OPS = {
    "+": BinOp.PLUS,
    "-": BinOp.MINUS,
    "*": BinOp.TIMES,
    "/": BinOp.DIVIDE,
    "%": BinOp.MODULO,
    "&": BinOp.AND,
    "|": BinOp.OR,
    "^": BinOp.XOR,
}

SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "0": "\0",
    "\\": "\\",
    "'": "'",
    '"': '"',
}

HEX_DIGITS = "0123456789abcdefABCDEF"

Mark = Tuple[int, int, int]


def is_digit(c: Optional[str]) -> bool:
    return c is not None and "0" <= c <= "9"


class Lexer:
    def __init__(self, text: str, offset: int = 0):
        self.text = text
        self.pos = offset
        self.line, self.column = line_and_column(text, offset)
        self.current_char = self.text[self.pos] if self.pos < len(self.text) else None

    def error(self, message: str, pos: Optional[int] = None) -> LexError:
        """Build a `LexError` and end the stream; callers `raise` the result."""
        err = LexError(self.pos if pos is None else pos, message)
        self.pos = len(self.text)
        self.current_char = None
        return err

    def advance(self) -> None:
        """Advance to next character."""
        if self.current_char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1

        self.pos += 1
        if self.pos < len(self.text):
            self.current_char = self.text[self.pos]
        else:
            self.current_char = None

    def peek_char(self, distance: int = 1) -> Optional[str]:
        """Look `distance` characters ahead without consuming anything."""
        next_pos = self.pos + distance
        if next_pos < len(self.text):
            return self.text[next_pos]
        return None

    def skip_whitespace(self) -> None:
        while self.current_char is not None and self.current_char.isspace():
            self.advance()

    def skip_comment(self) -> None:
        """Skip a `//` comment up to (not including) the end of the line."""
        while self.current_char is not None and self.current_char != "\n":
            self.advance()

    def mark(self) -> Mark:
        return self.pos, self.line, self.column

    def finish(self, mark: Mark, token_type: TokenType, value: TokenValue = None) -> Token:
        start, line, column = mark
        return Token(token_type, value, start=start, end=self.pos, line=line, column=column)

    def emit(self, token_type: TokenType, length: int, value: TokenValue = None) -> Token:
        """Consume `length` characters as one token."""
        mark = self.mark()
        for _ in range(length):
            self.advance()
        return self.finish(mark, token_type, value)

    def symbol(self) -> Optional[Token]:
        """Scan punctuation and operators, longest match first."""
        c = self.current_char
        n = self.peek_char()
        n2 = self.peek_char(2)

        match (c, n):
            case ("(", _):
                return self.emit(TokenType.LPAREN, 1)
            case (")", _):
                return self.emit(TokenType.RPAREN, 1)
            case ("[", _):
                return self.emit(TokenType.LBRACKET, 1)
            case ("]", _):
                return self.emit(TokenType.RBRACKET, 1)
            case ("{", _):
                return self.emit(TokenType.LBRACE, 1)
            case ("}", _):
                return self.emit(TokenType.RBRACE, 1)
            case ("=", "="):
                return self.emit(TokenType.EQ, 2)
            case ("=", ">"):
                return self.emit(TokenType.FAT_ARROW, 2)
            case ("=", _):
                return self.emit(TokenType.ASSIGN, 1)
            case (">", "="):
                return self.emit(TokenType.GE, 2)
            case (">", ">"):
                if n2 == "=":
                    return self.emit(TokenType.BINOP_EQ, 3, BinOp.SHIFT_RIGHT)
                return self.emit(TokenType.BINOP, 2, BinOp.SHIFT_RIGHT)
            case (">", _):
                return self.emit(TokenType.GT, 1)
            case ("<", "="):
                return self.emit(TokenType.LE, 2)
            case ("<", "<"):
                if n2 == "=":
                    return self.emit(TokenType.BINOP_EQ, 3, BinOp.SHIFT_LEFT)
                return self.emit(TokenType.BINOP, 2, BinOp.SHIFT_LEFT)
            case ("<", "-"):
                return self.emit(TokenType.LARROW, 2)
            case ("<", _):
                return self.emit(TokenType.LT, 1)
            case ("&", "&"):
                return self.emit(TokenType.AND_AND, 2)
            case ("|", "|"):
                return self.emit(TokenType.OR_OR, 2)
            case ("^", "^"):
                return self.emit(TokenType.XOR_XOR, 2)
            case ("-", ">"):
                return self.emit(TokenType.RARROW, 2)
            case ("!", _):
                return self.emit(TokenType.NOT, 1)
            case ("~", _):
                return self.emit(TokenType.TILDE, 1)
            case ("@", _):
                return self.emit(TokenType.AT, 1)
            case (".", "."):
                if n2 == ".":
                    return self.emit(TokenType.DOT_DOT_DOT, 3)
                return self.emit(TokenType.DOT_DOT, 2)
            case (".", _):
                return self.emit(TokenType.DOT, 1)
            case (",", _):
                return self.emit(TokenType.COMMA, 1)
            case (";", _):
                return self.emit(TokenType.SEMICOLON, 1)
            case (":", ":"):
                return self.emit(TokenType.DOUBLE_COLON, 2)
            case (":", _):
                return self.emit(TokenType.COLON, 1)
            case ("#", _):
                return self.emit(TokenType.HASH, 1)
            case ("$", _):
                return self.emit(TokenType.DOLLAR, 1)

        # `+ - * / % & | ^`, optionally followed by `=`.
        if c in ARITHMETIC_OPS:
            if n == "=":
                return self.emit(TokenType.BINOP_EQ, 2, ARITHMETIC_OPS[c])
            return self.emit(TokenType.BINOP, 1, ARITHMETIC_OPS[c])
        return None

    def raw_prefix_follows(self, distance: int) -> bool:
        """True if `#*"` starts `distance` characters ahead."""
        while self.peek_char(distance) == "#":
            distance += 1
        return self.peek_char(distance) == '"'

    def identifier(self) -> Token:
        """Scan an identifier, boolean literal or prefixed string literal."""
        c = self.current_char
        if c == "r" and self.raw_prefix_follows(1):
            return self.raw_string(TokenType.RAW_STRING, prefix=1)
        if c == "b" and self.peek_char() == '"':
            return self.byte_string()
        if c == "b" and self.peek_char() == "r" and self.raw_prefix_follows(2):
            return self.raw_string(TokenType.RAW_BYTE_STRING, prefix=2)

        mark = self.mark()
        result = [c]
        self.advance()
        while self.current_char is not None and (
            self.current_char.isalnum() or self.current_char == "_"
        ):
            result.append(self.current_char)
            self.advance()

        name = "".join(result)
        if name == "true":
            return self.finish(mark, TokenType.BOOL, True)
        if name == "false":
            return self.finish(mark, TokenType.BOOL, False)
        return self.finish(mark, TokenType.IDENTIFIER, name)

    def number(self) -> Token:
        """Scan a number literal into its integer and fraction parts.

        The fraction part also swallows further dots (`1.2.3` lexes as
        ("1", "2.3")); the parser rejects such literals when it converts them.
        """
        mark = self.mark()
        whole = []
        while is_digit(self.current_char) or self.current_char == "_":
            whole.append(self.current_char)
            self.advance()

        if self.current_char != ".":
            return self.finish(mark, TokenType.NUMBER, ("".join(whole), ""))

        self.advance()
        frac = []
        while is_digit(self.current_char) or self.current_char in ("_", "."):
            frac.append(self.current_char)
            self.advance()
        return self.finish(mark, TokenType.NUMBER, ("".join(whole), "".join(frac)))

    def escape(self, max_hex: int, allow_unicode: bool) -> int:
        """Decode one escape sequence; `current_char` is the backslash."""
        start = self.pos
        self.advance()
        c = self.current_char
        if c is None:
            raise self.error("unterminated escape sequence", start)
        if c in SIMPLE_ESCAPES:
            self.advance()
            return ord(SIMPLE_ESCAPES[c])

        if c == "x":
            self.advance()
            digits = ""
            for _ in range(2):
                if self.current_char is None or self.current_char not in HEX_DIGITS:
                    raise self.error("invalid `\\x` escape: expected two hex digits", start)
                digits += self.current_char
                self.advance()
            value = int(digits, 16)
            if value > max_hex:
                raise self.error(f"`\\x{digits}` escape out of range", start)
            return value

        if c == "u" and allow_unicode:
            self.advance()
            if self.current_char != "{":
                raise self.error("invalid `\\u` escape: expected `{`", start)
            self.advance()
            digits = ""
            while self.current_char is not None and self.current_char in HEX_DIGITS:
                digits += self.current_char
                self.advance()
            if self.current_char != "}" or not 1 <= len(digits) <= 6:
                raise self.error("invalid `\\u{...}` escape", start)
            self.advance()
            value = int(digits, 16)
            if value > 0x10FFFF or 0xD800 <= value <= 0xDFFF:
                raise self.error(f"`\\u{{{digits}}}` is not a valid character", start)
            return value

        raise self.error(f"unknown escape sequence `\\{c}`", start)

    def char_literal(self) -> Token:
        """Scan `'x'`: exactly one character (or escape) between quotes."""
        mark = self.mark()
        self.advance()  # Skip `'`

        if self.current_char is None:
            raise self.error("unterminated char literal", mark[0])
        if self.current_char == "'":
            raise self.error("empty char literal", mark[0])
        if self.current_char == "\\":
            value = chr(self.escape(0x7F, allow_unicode=True))
        else:
            value = self.current_char
            self.advance()

        if self.current_char is None:
            raise self.error("unterminated char literal", mark[0])
        if self.current_char != "'":
            raise self.error(f"expected `'`, found `{self.current_char}`")
        self.advance()
        return self.finish(mark, TokenType.CHAR, value)

    def string_literal(self) -> Token:
        mark = self.mark()
        self.advance()  # Skip `"`
        result = []
        while self.current_char != '"':
            if self.current_char is None:
                raise self.error("unterminated string literal", mark[0])
            if self.current_char == "\\":
                result.append(chr(self.escape(0x7F, allow_unicode=True)))
            else:
                result.append(self.current_char)
                self.advance()
        self.advance()
        return self.finish(mark, TokenType.STRING, "".join(result))

    def byte_string(self) -> Token:
        mark = self.mark()
        self.advance()  # Skip `b`
        self.advance()  # Skip `"`
        result = bytearray()
        while self.current_char != '"':
            if self.current_char is None:
                raise self.error("unterminated byte string literal", mark[0])
            if self.current_char == "\\":
                result.append(self.escape(0xFF, allow_unicode=False))
                continue
            if ord(self.current_char) > 0x7F:
                raise self.error(
                    f"non-ASCII character `{self.current_char}` in byte string literal"
                )
            result.append(ord(self.current_char))
            self.advance()
        self.advance()
        return self.finish(mark, TokenType.BYTE_STRING, bytes(result))

    def raw_string(self, token_type: TokenType, prefix: int) -> Token:
        """Scan `r#*"..."#*` (or `br...`): no escapes, closed by `"` plus the same number of `#`."""
        mark = self.mark()
        for _ in range(prefix):
            self.advance()
        hashes = 0
        while self.current_char == "#":
            hashes += 1
            self.advance()
        self.advance()  # Skip `"`

        closing = '"' + "#" * hashes
        end = self.text.find(closing, self.pos)
        if end == -1:
            raise self.error("unterminated raw string literal", mark[0])

        body = self.text[self.pos:end]
        while self.pos < end + len(closing):
            self.advance()

        if token_type == TokenType.RAW_BYTE_STRING:
            for i, ch in enumerate(body):
                if ord(ch) > 0x7F:
                    raise self.error(
                        f"non-ASCII character `{ch}` in byte string literal",
                        end - len(body) + i,
                    )
            return self.finish(mark, token_type, body.encode("ascii"))
        return self.finish(mark, token_type, body)

    def get_next_token(self) -> Optional[Token]:
        """Scan and return the next token, or `None` once the input is exhausted."""
        while self.current_char is not None:
            if self.current_char.isspace():
                self.skip_whitespace()
                continue

            if self.current_char == "/" and self.peek_char() == "/":
                self.skip_comment()
                continue

            token = self.symbol()
            if token is not None:
                return token

            if self.current_char.isalpha() or self.current_char == "_":
                return self.identifier()

            if is_digit(self.current_char):
                return self.number()

            if self.current_char == "'":
                return self.char_literal()

            if self.current_char == '"':
                return self.string_literal()

            raise self.error(f"unexpected character `{self.current_char}`")

        return None

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        token = self.get_next_token()
        if token is None:
            raise StopIteration
        return token

    def tokenize(self) -> List[Token]:
        """Return all remaining tokens (no EOF token is appended)."""
        tokens = list(self)
        logger.debug("tokenized %d tokens from %d characters", len(tokens), len(self.text))
        return tokens
