"""Convert AST nodes into JSON-serializable structures.

This module provides `ast_to_json(node)` which returns a nested structure
of dicts/lists/primitives describing the AST node. Every dict carries the
node kind under "node_type" and the source offset under "pos", followed by
the node's fields.
"""

from typing import Any, Dict, Optional
from ast_nodes import *


def ast_to_json(node: Optional[ASTNode]) -> Any:
    if node is None:
        return None

    t = node.type
    data: Dict[str, Any] = {"node_type": _NAMES[t], "pos": node.pos}

    # literals
    if t == NodeType.STR_LITERAL and isinstance(node, StrLiteral):
        data["value"] = node.value
    elif t == NodeType.NUM_LITERAL and isinstance(node, NumLiteral):
        data["value"] = node.value
    elif t == NodeType.BOOL_LITERAL and isinstance(node, BoolLiteral):
        data["value"] = node.value
    elif t == NodeType.IDENTIFIER and isinstance(node, Identifier):
        data["name"] = node.name
    elif t in (NodeType.LIST_LITERAL, NodeType.TUPLE_LITERAL):
        data["items"] = [ast_to_json(i) for i in node.items]
    # postfix forms
    elif t == NodeType.CALL and isinstance(node, Call):
        data["callee"] = ast_to_json(node.callee)
        data["args"] = [ast_to_json(a) for a in node.args]
    elif t == NodeType.INDEX and isinstance(node, Index):
        data["target"] = ast_to_json(node.target)
        data["index"] = ast_to_json(node.index)
    elif t == NodeType.LOOKUP and isinstance(node, Lookup):
        data["target"] = ast_to_json(node.target)
        data["name"] = node.name
    # operators
    elif t == NodeType.BIN_OP and isinstance(node, BinOp):
        data["operator"] = node.operator
        data["lhs"] = ast_to_json(node.lhs)
        data["rhs"] = ast_to_json(node.rhs)
    elif t == NodeType.UNR_OP and isinstance(node, UnrOp):
        data["operator"] = node.operator
        data["operand"] = ast_to_json(node.operand)
    # bindings
    elif t in (NodeType.DECLARE, NodeType.ASSIGN):
        data["name"] = node.name
        data["value"] = ast_to_json(node.value)
    # control flow
    elif t == NodeType.CONDITIONAL and isinstance(node, Conditional):
        data["condition"] = ast_to_json(node.condition)
        data["then"] = ast_to_json(node.then_branch)
        data["else"] = ast_to_json(node.else_branch)
    elif t == NodeType.FOR_LOOP and isinstance(node, ForLoop):
        data["name"] = node.name
        data["iterable"] = ast_to_json(node.iterable)
        data["body"] = [ast_to_json(s) for s in node.body]
    elif t == NodeType.WHILE_LOOP and isinstance(node, WhileLoop):
        data["condition"] = ast_to_json(node.condition)
        data["body"] = [ast_to_json(s) for s in node.body]
    # declarations
    elif t == NodeType.FN_DECL and isinstance(node, FnDecl):
        data["name"] = node.name
        data["params"] = list(node.params)
        data["body"] = [ast_to_json(s) for s in node.body]
    elif t == NodeType.CLASS_DECL and isinstance(node, ClassDecl):
        data["name"] = node.name
        data["bases"] = [ast_to_json(b) for b in node.bases]
        data["body"] = [ast_to_json(s) for s in node.body]
    elif t == NodeType.BLOCK and isinstance(node, Block):
        data["statements"] = [ast_to_json(s) for s in node.statements]

    return data


_NAMES = {
    NodeType.STR_LITERAL: "StrLiteral",
    NodeType.NUM_LITERAL: "NumLiteral",
    NodeType.BOOL_LITERAL: "BoolLiteral",
    NodeType.IDENTIFIER: "Identifier",
    NodeType.LIST_LITERAL: "ListLiteral",
    NodeType.TUPLE_LITERAL: "TupleLiteral",
    NodeType.CALL: "Call",
    NodeType.INDEX: "Index",
    NodeType.LOOKUP: "Lookup",
    NodeType.BIN_OP: "BinOp",
    NodeType.UNR_OP: "UnrOp",
    NodeType.DECLARE: "Declare",
    NodeType.ASSIGN: "Assign",
    NodeType.CONDITIONAL: "Conditional",
    NodeType.FOR_LOOP: "ForLoop",
    NodeType.WHILE_LOOP: "WhileLoop",
    NodeType.FN_DECL: "FnDecl",
    NodeType.CLASS_DECL: "ClassDecl",
    NodeType.BLOCK: "Block",
    NodeType.NOTHING: "Nothing",
}
