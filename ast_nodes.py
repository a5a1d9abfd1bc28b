"""AST node definitions for the FeO scripting language.

This module defines the concrete AST node dataclasses produced by the
parser. FeO is expression-oriented: blocks, conditionals, loops and
declarations are all expressions, so every node is an expression node. The
`NodeType` enum identifies node kinds and is used by the pretty-printer,
the JSON exporter and the Graphviz renderer.

Conventions:
- All AST node dataclasses inherit from `ASTNode`, which records the node
    kind (`NodeType`) and the source offset `pos` of the node's first token.
    `pos` is excluded from equality, so two parses of the same program that
    differ only in whitespace compare equal.
- Each node exclusively owns its children: the AST is a plain tree with no
    shared subtrees.
- The empty tuple is the unit ("nothing") value; `unit()` builds one.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List


class NodeType(Enum):
    STR_LITERAL = auto()
    NUM_LITERAL = auto()
    BOOL_LITERAL = auto()
    IDENTIFIER = auto()
    LIST_LITERAL = auto()
    TUPLE_LITERAL = auto()
    CALL = auto()
    INDEX = auto()
    LOOKUP = auto()
    BIN_OP = auto()
    UNR_OP = auto()
    DECLARE = auto()
    ASSIGN = auto()
    CONDITIONAL = auto()
    FOR_LOOP = auto()
    WHILE_LOOP = auto()
    FN_DECL = auto()
    CLASS_DECL = auto()
    BLOCK = auto()
    NOTHING = auto()

    def __str__(self) -> str:
        return self.name


# Base AST Node
@dataclass
class ASTNode:
    type: NodeType
    pos: int = field(default=0, compare=False)


# Literals
@dataclass
class StrLiteral(ASTNode):
    type: NodeType = NodeType.STR_LITERAL
    value: str = ""


@dataclass
class NumLiteral(ASTNode):
    type: NodeType = NodeType.NUM_LITERAL
    value: float = 0.0


@dataclass
class BoolLiteral(ASTNode):
    type: NodeType = NodeType.BOOL_LITERAL
    value: bool = False


@dataclass
class Identifier(ASTNode):
    type: NodeType = NodeType.IDENTIFIER
    name: str = ""


@dataclass
class ListLiteral(ASTNode):
    type: NodeType = NodeType.LIST_LITERAL
    items: List[ASTNode] = field(default_factory=list)


@dataclass
class TupleLiteral(ASTNode):
    type: NodeType = NodeType.TUPLE_LITERAL
    items: List[ASTNode] = field(default_factory=list)


# Postfix forms
@dataclass
class Call(ASTNode):
    type: NodeType = NodeType.CALL
    callee: ASTNode = field(default_factory=lambda: Nothing())
    args: List[ASTNode] = field(default_factory=list)


@dataclass
class Index(ASTNode):
    type: NodeType = NodeType.INDEX
    target: ASTNode = field(default_factory=lambda: Nothing())
    index: ASTNode = field(default_factory=lambda: Nothing())


@dataclass
class Lookup(ASTNode):
    type: NodeType = NodeType.LOOKUP
    target: ASTNode = field(default_factory=lambda: Nothing())
    name: str = ""


# Operators
@dataclass
class BinOp(ASTNode):
    type: NodeType = NodeType.BIN_OP
    operator: str = ""
    lhs: ASTNode = field(default_factory=lambda: Nothing())
    rhs: ASTNode = field(default_factory=lambda: Nothing())


@dataclass
class UnrOp(ASTNode):
    type: NodeType = NodeType.UNR_OP
    operator: str = ""
    operand: ASTNode = field(default_factory=lambda: Nothing())


# Bindings. Targets are bare names; pattern targets are not supported yet.
@dataclass
class Declare(ASTNode):
    type: NodeType = NodeType.DECLARE
    name: str = ""
    value: ASTNode = field(default_factory=lambda: unit())


@dataclass
class Assign(ASTNode):
    type: NodeType = NodeType.ASSIGN
    name: str = ""
    value: ASTNode = field(default_factory=lambda: unit())


# Control flow
@dataclass
class Conditional(ASTNode):
    type: NodeType = NodeType.CONDITIONAL
    condition: ASTNode = field(default_factory=lambda: Nothing())
    then_branch: ASTNode = field(default_factory=lambda: Block())
    # Always present: a missing `else` is the unit value.
    else_branch: ASTNode = field(default_factory=lambda: unit())


@dataclass
class ForLoop(ASTNode):
    type: NodeType = NodeType.FOR_LOOP
    name: str = ""
    iterable: ASTNode = field(default_factory=lambda: Nothing())
    body: List[ASTNode] = field(default_factory=list)


@dataclass
class WhileLoop(ASTNode):
    type: NodeType = NodeType.WHILE_LOOP
    condition: ASTNode = field(default_factory=lambda: Nothing())
    body: List[ASTNode] = field(default_factory=list)


# Declarations
@dataclass
class FnDecl(ASTNode):
    type: NodeType = NodeType.FN_DECL
    name: str = ""
    params: List[str] = field(default_factory=list)
    body: List[ASTNode] = field(default_factory=list)


@dataclass
class ClassDecl(ASTNode):
    type: NodeType = NodeType.CLASS_DECL
    name: str = ""
    bases: List[ASTNode] = field(default_factory=list)
    body: List[ASTNode] = field(default_factory=list)


@dataclass
class Block(ASTNode):
    type: NodeType = NodeType.BLOCK
    statements: List[ASTNode] = field(default_factory=list)


# Parser bookkeeping only; never part of a successful parse.
@dataclass
class Nothing(ASTNode):
    type: NodeType = NodeType.NOTHING


def unit(pos: int = 0) -> TupleLiteral:
    """The empty tuple, FeO's unit value."""
    return TupleLiteral(items=[], pos=pos)
