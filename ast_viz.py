"""Graphviz visualization helpers for ASTs.

Provides `render_ast_dot(node, use_surface=False)` which returns a
`graphviz.Digraph` object (not rendered). Optionally `write_and_render`
can write the file to disk.

Tree layout: every AST node becomes one graph node (`n0`, `n1`, ... in
pre-order) rendered as an HTML-like table with the node kind in bold and
its scalar fields underneath. Edges point from parent to child and are
labelled with the field name (`lhs`, `arg[0]`, `body[2]`, ...). Function
and class bodies are grouped into a cluster subgraph.
"""

from typing import Iterator, List, Optional, Tuple
import html
from ast_nodes import *
from graphviz import Digraph
from pretty_printer import PrettyPrinter


def _children(node: ASTNode) -> Iterator[Tuple[str, ASTNode]]:
    """Yield `(edge_label, child)` pairs in source order."""

    def many(label: str, items: List[ASTNode]) -> Iterator[Tuple[str, ASTNode]]:
        for i, item in enumerate(items):
            yield f"{label}[{i}]", item

    match node:
        case ListLiteral(items=items) | TupleLiteral(items=items):
            yield from many("item", items)
        case Call(callee=callee, args=args):
            yield "callee", callee
            yield from many("arg", args)
        case Index(target=target, index=idx):
            yield "target", target
            yield "index", idx
        case Lookup(target=target):
            yield "target", target
        case BinOp(lhs=lhs, rhs=rhs):
            yield "lhs", lhs
            yield "rhs", rhs
        case UnrOp(operand=operand):
            yield "operand", operand
        case Declare(value=value) | Assign(value=value):
            yield "value", value
        case Conditional(condition=cond, then_branch=then_b, else_branch=else_b):
            yield "condition", cond
            yield "then", then_b
            yield "else", else_b
        case ForLoop(iterable=iterable, body=body):
            yield "iterable", iterable
            yield from many("body", body)
        case WhileLoop(condition=cond, body=body):
            yield "condition", cond
            yield from many("body", body)
        case FnDecl(body=body):
            yield from many("body", body)
        case ClassDecl(bases=bases, body=body):
            yield from many("base", bases)
            yield from many("body", body)
        case Block(statements=stmts):
            yield from many("stmt", stmts)


def _detail(node: ASTNode) -> str:
    """Return the node's scalar fields as a short string."""
    match node:
        case StrLiteral() | NumLiteral() | BoolLiteral():
            return PrettyPrinter.print_surface(node)
        case Identifier(name=name) | Lookup(name=name):
            return name
        case BinOp(operator=op) | UnrOp(operator=op):
            return op
        case Declare(name=name) | Assign(name=name) | ForLoop(name=name):
            return name
        case FnDecl(name=name, params=params):
            return f"{name}({', '.join(params)})"
        case ClassDecl(name=name):
            return name
        case TupleLiteral(items=[]):
            return "()"
    return ""


def _node_html(node: ASTNode, use_surface: bool) -> str:
    kind = type(node).__name__
    detail = _detail(node)
    rows = f"<TR><TD><B>{html.escape(kind)}</B></TD></TR>"
    if detail:
        rows += f'<TR><TD><FONT POINT-SIZE="10">{html.escape(detail)}</FONT></TD></TR>'
    if use_surface and not isinstance(node, (StrLiteral, NumLiteral, BoolLiteral, Identifier)):
        surface = html.escape(PrettyPrinter.print_surface(node))
        # Avoid empty FONT elements which some Graphviz versions reject
        if surface.strip():
            rows += f'<TR><TD><FONT POINT-SIZE="8">{surface}</FONT></TD></TR>'
    return f'<<TABLE BORDER="0" CELLBORDER="1" CELLSPACING="0">{rows}</TABLE>>'


def render_ast_dot(node: ASTNode, use_surface: bool = False) -> Digraph:
    """Return a graphviz.Digraph for the given AST.

    The caller may call `dot.source` to inspect the dot text, or call
    `dot.render(filename, format=...)` to write files (requires Graphviz installed).
    """
    dot = Digraph(format="svg")
    dot.attr("graph", rankdir="TB")
    counter = 0

    def emit(graph: Digraph, current: ASTNode) -> str:
        nonlocal counter
        name = f"n{counter}"
        counter += 1
        graph.node(name, label=_node_html(current, use_surface), shape="plaintext")

        # Declarations get their own cluster so bodies stay grouped.
        cluster: Optional[str] = None
        if isinstance(current, (FnDecl, ClassDecl)):
            cluster = f"cluster_{name}"

        if cluster is None:
            for label, child in _children(current):
                dot.edge(name, emit(graph, child), label=label)
            return name

        with graph.subgraph(name=cluster) as c:
            keyword = "fn" if isinstance(current, FnDecl) else "class"
            c.attr(label=f"{keyword} {current.name}", style="rounded")
            for label, child in _children(current):
                dot.edge(name, emit(c, child), label=label)
        return name

    emit(dot, node)
    return dot


def write_and_render(
    node: ASTNode,
    out_path: str,
    fmt: str = "svg",
    use_surface: bool = False,
) -> None:
    """Write and render the AST to the given path (without extension). Returns when rendered.

    Example: write_and_render(ast, 'out/ast', fmt='png') will create out/ast.png
    (requires Graphviz)."""
    dot = render_ast_dot(node, use_surface=use_surface)
    dot.format = fmt
    # Note: render will append extension automatically
    dot.render(out_path, cleanup=True)
