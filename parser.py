"""
Parser for the FeO scripting language.

Overview and approach:
- This parser is a small, hand-written recursive-descent parser over the
    token list produced by `lexer.Lexer`. Binary operators use a Pratt-like
    loop driven by the precedence table `PRECEDENCE`, which keeps expression
    parsing concise while handling precedence and associativity.
- FeO is expression-oriented: blocks, conditionals, loops, `let` and
    function/class declarations are all expressions, and a program is a
    `;`-separated statement list whose value is its last expression.

Key points:
- Expression parsing:
    - `parse_primary()` recognizes literals, identifiers, keyword forms
        (`if`, `while`, `for`, `fn`, `class`, `let`), parenthesized
        expressions and tuples, list literals and blocks.
    - `parse_postfix()` handles calls `f(x)(y)`, indexing `a[i]` and
        lookups `a.b` / `A::b` (all left-associative, tightest binding).
    - `parse_unary()` handles prefix `-`, `!` and `~`.
    - `parse_binary_expression()` implements the Pratt loop.
    - `parse_range()` sits above it: `a .. b` and `a ... b` take two
        binary operands and do not chain.
    - `parse_expression()` finally handles assignment (`=` and compound
        forms such as `+=`), the loosest and right-associative form, which
        only accepts a bare identifier target.

- Statement lists:
    - `parse_statements()` reads expressions separated by `;`. When the
        list is closed by `}` without a tail expression (empty block or
        trailing `;`), the unit value `()` is appended, so a block's value is
        always its last element.
    - A conditional's `else` must be followed by a block or another `if`,
        which resolves the dangling `else` to the nearest `if`.

Errors:
- The first error raises `ParseError` carrying the offset of the offending
    token (the source length at end of input). There is no recovery.
- Nesting deeper than `max_depth` raises `ParseError` instead of exhausting
    the interpreter stack. Each operator folded into a left-leaning chain
    (`a + b + c`, `f()()`, `a.b.c`) counts as one level.
- A bad `else` body is reported at the offset where that body ends.

Examples:
    parse("f(3, 5); hello")
    -> Block([Call(Identifier(f), [NumLiteral(3.0), NumLiteral(5.0)]),
              Identifier(hello)])
"""

from __future__ import annotations
import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from ast_nodes import *
from errors import ParseError
from lexer import Lexer
from tokens import Token, TokenType

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 64

# Identifiers with a grammatical meaning.
KEYWORDS = {"if", "else", "while", "for", "in", "fn", "class", "let"}

# Binary operator precedence (higher = tighter binding). All left-associative.
PRECEDENCE = {
    "||": 1,
    "^^": 2,
    "&&": 3,
    "==": 4,
    "<": 4,
    "<=": 4,
    ">": 4,
    ">=": 4,
    "|": 5,
    "^": 6,
    "&": 7,
    "<<": 8,
    ">>": 8,
    "+": 9,
    "-": 9,
    "*": 10,
    "/": 10,
    "%": 10,
}

BINARY_TOKENS = {
    TokenType.OR_OR: "||",
    TokenType.XOR_XOR: "^^",
    TokenType.AND_AND: "&&",
    TokenType.EQ: "==",
    TokenType.LT: "<",
    TokenType.LE: "<=",
    TokenType.GT: ">",
    TokenType.GE: ">=",
}

RANGE_TOKENS = {
    TokenType.DOT_DOT: "..",
    TokenType.DOT_DOT_DOT: "...",
}

UNARY_TOKENS = {
    TokenType.NOT: "!",
    TokenType.TILDE: "~",
}


class Parser:
    def __init__(
        self,
        tokens: List[Token],
        source_length: Optional[int] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        if source_length is None:
            source_length = tokens[-1].end if tokens else 0
        self.tokens = list(tokens)
        self.tokens.append(
            Token(TokenType.EOF, None, start=source_length, end=source_length)
        )
        self.pos = 0
        self.current = self.tokens[0]
        self.max_depth = max_depth
        self.depth = 0

    def error(self, message: str, token: Optional[Token] = None) -> ParseError:
        token = token or self.current
        return ParseError(token.start, message)

    def advance(self) -> Token:
        """Move to next token."""
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        self.current = self.tokens[self.pos]
        return self.current

    def expect(self, expected_type: TokenType, spelling: str) -> Token:
        """Expect and consume token of given type."""
        if self.current.type == expected_type:
            token = self.current
            self.advance()
            return token
        raise self.error(f"expected `{spelling}`, found {self.describe(self.current)}")

    def expect_name(self, what: str) -> str:
        """Consume a non-keyword identifier and return its name."""
        token = self.current
        if token.type != TokenType.IDENTIFIER or token.value in KEYWORDS:
            raise self.error(f"expected {what}, found {self.describe(token)}")
        self.advance()
        return token.value

    @staticmethod
    def describe(token: Token) -> str:
        if token.type == TokenType.EOF:
            return "EOF"
        return f"`{token.lexeme}`"

    def deepen(self) -> None:
        if self.depth >= self.max_depth:
            raise self.error(f"nesting too deep (limit {self.max_depth})")
        self.depth += 1

    @contextmanager
    def nested(self) -> Iterator[None]:
        """Count one level of nesting for the depth guard."""
        self.deepen()
        try:
            yield
        finally:
            self.depth -= 1

    @staticmethod
    def binary_operator(token: Token) -> Optional[str]:
        """Return the spelling of a binary operator token, else None."""
        if token.type == TokenType.BINOP:
            return str(token.value)
        return BINARY_TOKENS.get(token.type)

    def parse_number(self, token: Token) -> NumLiteral:
        whole, frac = token.value
        text = f"{whole}.{frac}" if frac else whole
        try:
            value = float(text.replace("_", ""))
        except ValueError:
            raise self.error(f"invalid number literal `{text}`", token) from None
        return NumLiteral(value=value, pos=token.start)

    def parse_primary(self) -> ASTNode:
        """Parse primary expressions (literals, identifiers, keyword forms, groups)."""
        token = self.current

        match token.type:
            case TokenType.NUMBER:
                self.advance()
                return self.parse_number(token)

            case TokenType.STRING | TokenType.RAW_STRING | TokenType.CHAR:
                self.advance()
                return StrLiteral(value=token.value, pos=token.start)

            case TokenType.BYTE_STRING | TokenType.RAW_BYTE_STRING:
                raise self.error("byte string literals are not supported in expressions")

            case TokenType.BOOL:
                self.advance()
                return BoolLiteral(value=token.value, pos=token.start)

            case TokenType.IDENTIFIER:
                match token.value:
                    case "if":
                        return self.parse_conditional()
                    case "while":
                        return self.parse_while()
                    case "for":
                        return self.parse_for()
                    case "fn":
                        return self.parse_function()
                    case "class":
                        return self.parse_class()
                    case "let":
                        return self.parse_declaration()
                    case "else" | "in":
                        raise self.error(f"unexpected token `{token.value}`")
                self.advance()
                return Identifier(name=token.value, pos=token.start)

            case TokenType.LPAREN:
                return self.parse_parenthesized()

            case TokenType.LBRACKET:
                self.advance()
                items = self.parse_sequence(TokenType.RBRACKET, "]")
                return ListLiteral(items=items, pos=token.start)

            case TokenType.LBRACE:
                return self.parse_block()

            case TokenType.EOF:
                raise self.error("expected expression, found EOF")

            case _:
                raise self.error(f"unexpected token `{token.lexeme}`")

    def parse_parenthesized(self) -> ASTNode:
        """`()` is unit, `(e)` is just `e`, `(e,)` and `(a, b)` are tuples."""
        start = self.expect(TokenType.LPAREN, "(")
        if self.current.type == TokenType.RPAREN:
            self.advance()
            return unit(start.start)

        first = self.parse_expression()
        if self.current.type != TokenType.COMMA:
            self.expect(TokenType.RPAREN, ")")
            return first

        self.advance()
        items = [first] + self.parse_sequence(TokenType.RPAREN, ")")
        return TupleLiteral(items=items, pos=start.start)

    def parse_sequence(self, closing: TokenType, spelling: str) -> List[ASTNode]:
        """Parse `expr, expr, ...` up to and including `closing`; a trailing comma is allowed."""
        items: List[ASTNode] = []
        while self.current.type != closing:
            items.append(self.parse_expression())
            if self.current.type != TokenType.COMMA:
                break
            self.advance()
        self.expect(closing, spelling)
        return items

    def parse_postfix(self, left: ASTNode) -> ASTNode:
        """Parse postfix expressions (calls, indexing, lookups).

        Each postfix operator wraps the tree built so far, so every one
        counts as a level of nesting until the chain ends.
        """
        folded = 0
        try:
            while True:
                match self.current.type:
                    case TokenType.LPAREN:
                        self.deepen()
                        folded += 1
                        self.advance()
                        args = self.parse_sequence(TokenType.RPAREN, ")")
                        left = Call(callee=left, args=args, pos=left.pos)

                    case TokenType.LBRACKET:
                        self.deepen()
                        folded += 1
                        self.advance()
                        index = self.parse_expression()
                        self.expect(TokenType.RBRACKET, "]")
                        left = Index(target=left, index=index, pos=left.pos)

                    case TokenType.DOT | TokenType.DOUBLE_COLON:
                        self.deepen()
                        folded += 1
                        self.advance()
                        name = self.expect_name("field name")
                        left = Lookup(target=left, name=name, pos=left.pos)

                    case _:
                        break
        finally:
            self.depth -= folded

        return left

    def parse_unary(self) -> ASTNode:
        """Parse prefix `-`, `!` and `~`, binding tighter than any binary operator."""
        token = self.current
        if token.type == TokenType.BINOP and str(token.value) == "-":
            operator = "-"
        else:
            operator = UNARY_TOKENS.get(token.type)

        if operator is None:
            return self.parse_postfix(self.parse_primary())

        self.advance()
        with self.nested():
            operand = self.parse_unary()
        return UnrOp(operator=operator, operand=operand, pos=token.start)

    def parse_binary_expression(
        self, left: ASTNode, min_precedence: int = 0
    ) -> ASTNode:
        """Parse binary expressions using Pratt parsing.

        Left-associative chains grow the tree one level per operator, and
        each level counts toward the depth guard.
        """
        folded = 0
        try:
            while True:
                operator = self.binary_operator(self.current)
                if operator is None:
                    break

                precedence = PRECEDENCE[operator]
                if precedence < min_precedence:
                    break

                self.deepen()
                folded += 1
                self.advance()
                # Parse right operand with higher precedence
                right = self.parse_binary_expression(self.parse_unary(), precedence + 1)
                left = BinOp(operator=operator, lhs=left, rhs=right, pos=left.pos)
        finally:
            self.depth -= folded

        return left

    def parse_range(self) -> ASTNode:
        """Parse `a .. b` / `a ... b`; ranges do not chain."""
        left = self.parse_binary_expression(self.parse_unary())
        operator = RANGE_TOKENS.get(self.current.type)
        if operator is None:
            return left

        self.advance()
        right = self.parse_binary_expression(self.parse_unary())
        return BinOp(operator=operator, lhs=left, rhs=right, pos=left.pos)

    def parse_assignment(self, target: ASTNode) -> Assign:
        """Parse `name = expr` or `name op= expr`; `current` is the operator."""
        token = self.current
        if not isinstance(target, Identifier):
            raise self.error("can only assign to an identifier")

        self.advance()
        value = self.parse_expression()
        if token.type == TokenType.BINOP_EQ:
            value = BinOp(
                operator=str(token.value),
                lhs=Identifier(name=target.name, pos=target.pos),
                rhs=value,
                pos=target.pos,
            )
        return Assign(name=target.name, value=value, pos=target.pos)

    def parse_expression(self) -> ASTNode:
        """Parse an expression. Assignment is the loosest form and right-associative."""
        with self.nested():
            left = self.parse_range()
            if self.current.type in (TokenType.ASSIGN, TokenType.BINOP_EQ):
                return self.parse_assignment(left)
            return left

    def parse_statements(self) -> List[ASTNode]:
        """Parse `expr (; expr)* ;?`, stopping before `}` or EOF."""
        statements: List[ASTNode] = []

        while True:
            if self.current.type == TokenType.RBRACE:
                # No tail expression: the list evaluates to unit.
                statements.append(unit(self.current.start))
                return statements
            if self.current.type == TokenType.EOF:
                return statements

            statements.append(self.parse_expression())

            if self.current.type == TokenType.SEMICOLON:
                self.advance()
                continue
            if self.current.type in (TokenType.RBRACE, TokenType.EOF):
                return statements
            raise self.error(f"expected `}}`, found {self.describe(self.current)}")

    def parse_block(self) -> Block:
        """Parse a block of statements: { stmts }"""
        start = self.expect(TokenType.LBRACE, "{")
        statements = self.parse_statements()
        self.expect(TokenType.RBRACE, "}")
        return Block(statements=statements, pos=start.start)

    def parse_conditional(self) -> Conditional:
        """Parse `if expr block (else (block | if ...))?`."""
        start = self.current
        self.advance()  # Skip `if`
        condition = self.parse_expression()
        then_branch = self.parse_block()

        if not self.current.is_keyword("else"):
            return Conditional(
                condition=condition,
                then_branch=then_branch,
                else_branch=unit(self.current.start),
                pos=start.start,
            )

        self.advance()  # Skip `else`
        else_branch = self.parse_expression()
        if not isinstance(else_branch, (Block, Conditional)):
            # Reported where the offending body ends.
            end = self.tokens[self.pos - 1].end
            raise ParseError(end, "`else` should be followed by `if` or a block")
        return Conditional(
            condition=condition,
            then_branch=then_branch,
            else_branch=else_branch,
            pos=start.start,
        )

    def parse_while(self) -> WhileLoop:
        """Parse `while expr block`."""
        start = self.current
        self.advance()  # Skip `while`
        condition = self.parse_expression()
        body = self.parse_block()
        return WhileLoop(condition=condition, body=body.statements, pos=start.start)

    def parse_for(self) -> ForLoop:
        """Parse `for name in expr block`."""
        start = self.current
        self.advance()  # Skip `for`
        name = self.expect_name("loop variable")
        if not self.current.is_keyword("in"):
            raise self.error(f"expected `in`, found {self.describe(self.current)}")
        self.advance()
        iterable = self.parse_expression()
        body = self.parse_block()
        return ForLoop(name=name, iterable=iterable, body=body.statements, pos=start.start)

    def parse_function(self) -> FnDecl:
        """Parse `fn name(param, ...) block`."""
        start = self.current
        self.advance()  # Skip `fn`
        name = self.expect_name("function name")
        self.expect(TokenType.LPAREN, "(")

        params: List[str] = []
        while self.current.type != TokenType.RPAREN:
            params.append(self.expect_name("parameter name"))
            if self.current.type != TokenType.COMMA:
                break
            self.advance()
        self.expect(TokenType.RPAREN, ")")

        body = self.parse_block()
        return FnDecl(name=name, params=params, body=body.statements, pos=start.start)

    def parse_class(self) -> ClassDecl:
        """Parse `class Name (: Base (+ Base)*)? block`."""
        start = self.current
        self.advance()  # Skip `class`
        name = self.expect_name("class name")

        bases: List[ASTNode] = []
        if self.current.type == TokenType.COLON:
            self.advance()
            with self.nested():
                bases.append(self.parse_unary())
                while self.current.type == TokenType.BINOP and str(self.current.value) == "+":
                    self.advance()
                    bases.append(self.parse_unary())

        body = self.parse_block()
        return ClassDecl(name=name, bases=bases, body=body.statements, pos=start.start)

    def parse_declaration(self) -> Declare:
        """Parse `let name (= expr)?`; without an initializer the value is unit."""
        start = self.current
        self.advance()  # Skip `let`
        name = self.expect_name("variable name")
        if self.current.type == TokenType.ASSIGN:
            self.advance()
            value = self.parse_expression()
        else:
            value = unit(self.current.start)
        return Declare(name=name, value=value, pos=start.start)

    def parse(self) -> Block:
        """Parse a complete program; leftover tokens are an error."""
        statements = self.parse_statements()
        if self.current.type != TokenType.EOF:
            raise self.error(f"unexpected token `{self.current.lexeme}`")
        logger.debug("parsed %d top-level statements", len(statements))
        return Block(statements=statements, pos=0)


def parse_tokens(
    tokens: List[Token],
    *,
    source_length: Optional[int] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Block:
    """Parse tokens into an AST."""
    return Parser(tokens, source_length=source_length, max_depth=max_depth).parse()


def parse(text: str, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Block:
    """Tokenize and parse `text`; raises `LexError` or `ParseError`."""
    tokens = Lexer(text).tokenize()
    return parse_tokens(tokens, source_length=len(text), max_depth=max_depth)
