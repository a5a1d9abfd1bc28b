"""Token definitions for the lexer.

This module defines the `TokenType` enum for all token kinds recognized by
the lexer, the `BinOp` enum naming the operator carried by binary-operator
tokens (`+`, `<<`, ...) and their compound-assignment forms (`+=`, `<<=`,
...), and a small `Token` dataclass that holds a token type, an optional
value and its source position. Tokens are the atomic units produced by the
lexer and consumed by the parser.

Token values by type:
    NUMBER           (integer_part, fraction_part) strings, e.g. ("3", "4")
    STRING           decoded text
    RAW_STRING       text exactly as written
    BYTE_STRING      decoded bytes
    RAW_BYTE_STRING  bytes exactly as written
    CHAR             a one-character string
    BOOL             True / False
    IDENTIFIER       the name
    BINOP, BINOP_EQ  a `BinOp`
    everything else  None
"""

from __future__ import annotations
from enum import Enum, auto
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


class BinOp(Enum):
    PLUS = "+"
    MINUS = "-"
    TIMES = "*"
    DIVIDE = "/"
    MODULO = "%"
    XOR = "^"
    AND = "&"
    OR = "|"
    SHIFT_LEFT = "<<"
    SHIFT_RIGHT = ">>"

    def __str__(self) -> str:
        return self.value


class TokenType(Enum):
    # Literals
    NUMBER = auto()
    STRING = auto()
    RAW_STRING = auto()
    BYTE_STRING = auto()
    RAW_BYTE_STRING = auto()
    CHAR = auto()
    BOOL = auto()
    IDENTIFIER = auto()

    # Parentheses and brackets
    LPAREN = auto()
    RPAREN = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    LBRACE = auto()
    RBRACE = auto()

    # Comparison and assignment
    ASSIGN = auto()
    EQ = auto()
    LT = auto()
    LE = auto()
    GT = auto()
    GE = auto()

    # Logical operators
    AND_AND = auto()
    OR_OR = auto()
    XOR_XOR = auto()
    NOT = auto()
    TILDE = auto()

    # Arithmetic and bitwise operators, plain and compound-assignment
    BINOP = auto()
    BINOP_EQ = auto()

    # Punctuation
    AT = auto()
    DOT = auto()
    DOT_DOT = auto()
    DOT_DOT_DOT = auto()
    COMMA = auto()
    SEMICOLON = auto()
    COLON = auto()
    DOUBLE_COLON = auto()
    LARROW = auto()
    RARROW = auto()
    FAT_ARROW = auto()
    HASH = auto()
    DOLLAR = auto()

    # Special
    EOF = auto()

    def __str__(self) -> str:
        return self.name


# Fixed spellings, used for diagnostics and printing.
SYMBOLS = {
    TokenType.LPAREN: "(",
    TokenType.RPAREN: ")",
    TokenType.LBRACKET: "[",
    TokenType.RBRACKET: "]",
    TokenType.LBRACE: "{",
    TokenType.RBRACE: "}",
    TokenType.ASSIGN: "=",
    TokenType.EQ: "==",
    TokenType.LT: "<",
    TokenType.LE: "<=",
    TokenType.GT: ">",
    TokenType.GE: ">=",
    TokenType.AND_AND: "&&",
    TokenType.OR_OR: "||",
    TokenType.XOR_XOR: "^^",
    TokenType.NOT: "!",
    TokenType.TILDE: "~",
    TokenType.AT: "@",
    TokenType.DOT: ".",
    TokenType.DOT_DOT: "..",
    TokenType.DOT_DOT_DOT: "...",
    TokenType.COMMA: ",",
    TokenType.SEMICOLON: ";",
    TokenType.COLON: ":",
    TokenType.DOUBLE_COLON: "::",
    TokenType.LARROW: "<-",
    TokenType.RARROW: "->",
    TokenType.FAT_ARROW: "=>",
    TokenType.HASH: "#",
    TokenType.DOLLAR: "$",
}

TokenValue = Union[str, bytes, bool, BinOp, Tuple[str, str], None]


@dataclass
class Token:
    type: TokenType
    value: TokenValue = None
    # Positions are metadata: two tokens are equal when type and value are.
    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)
    line: int = field(default=1, compare=False)
    column: int = field(default=1, compare=False)

    def __repr__(self) -> str:
        return f"Token({self.type}, {repr(self.value)})"

    @property
    def lexeme(self) -> str:
        """A human-readable spelling of the token for diagnostics."""
        match self.type:
            case TokenType.EOF:
                return "EOF"
            case TokenType.BINOP:
                return str(self.value)
            case TokenType.BINOP_EQ:
                return f"{self.value}="
            case TokenType.NUMBER:
                whole, frac = self.value
                return f"{whole}.{frac}" if frac else whole
            case TokenType.BOOL:
                return "true" if self.value else "false"
            case TokenType.STRING | TokenType.RAW_STRING:
                return f'"{self.value}"'
            case TokenType.BYTE_STRING | TokenType.RAW_BYTE_STRING:
                return repr(self.value)
            case TokenType.CHAR:
                return f"'{self.value}'"
            case TokenType.IDENTIFIER:
                return str(self.value)
        return SYMBOLS.get(self.type, str(self.type))

    def is_keyword(self, word: str) -> bool:
        return self.type == TokenType.IDENTIFIER and self.value == word

    def is_binop(self, op: Optional[BinOp] = None) -> bool:
        if self.type != TokenType.BINOP:
            return False
        return op is None or self.value == op
