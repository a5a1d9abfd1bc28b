from ast_nodes import *
from lexer import Lexer
from parser import Parser
from tokens import BinOp as Op, Token, TokenType


def lex(text: str):
    """Return a list of tokens for the given source text."""
    return Lexer(text).tokenize()


def token_types(text: str):
    return [t.type for t in lex(text)]


def parse_tokens(tokens, source_length=None):
    """Parse a list of tokens into an AST node."""
    return Parser(tokens, source_length=source_length).parse()


def parse_text(text: str, **kwargs):
    """Convenience: lex+parse a source text into an AST."""
    return Parser(Lexer(text).tokenize(), source_length=len(text), **kwargs).parse()


# Small constructors so expected trees stay readable.
def num(value):
    return NumLiteral(value=float(value))


def ident(name):
    return Identifier(name=name)


def string(value):
    return StrLiteral(value=value)


def block(*statements):
    return Block(statements=list(statements))


def binop(operator, lhs, rhs):
    return BinOp(operator=operator, lhs=lhs, rhs=rhs)


def tok(token_type, value=None):
    return Token(token_type, value)


def op(kind: Op):
    return Token(TokenType.BINOP, kind)


def op_eq(kind: Op):
    return Token(TokenType.BINOP_EQ, kind)
