"""Pretty-printer for the AST.

Provides `PrettyPrinter.print_ast(node, indent, prefix)` which renders an
AST into a readable multi-line string, and `PrettyPrinter.print_surface(node)`
which renders a node back into compact, source-like FeO text. Both are
intended for debugging, tests and the command-line driver rather than for
producing formatted source code.

Examples:
    PrettyPrinter.print_ast(parse("f(1)"))
    PrettyPrinter.print_surface(parse("x += 1"))  # -> "{ x = x + 1 }"
"""

from __future__ import annotations
from decimal import Decimal
from typing import List
from ast_nodes import *


def _format_number(value: float) -> str:
    """Render a number the lexer reads back: digits with no exponent."""
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def _quote(text: str) -> str:
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\0", "\\0")
    )
    return f'"{escaped}"'


class PrettyPrinter:
    @staticmethod
    def print_ast(node: ASTNode, indent: int = 0, prefix: str = "") -> str:
        """Pretty print AST and return as string."""
        lines = []
        indent_str = " " * indent

        if not isinstance(node, ASTNode):
            lines.append(f"{indent_str}{prefix}{node}")
            return "\n".join(lines)

        def children(items: List[ASTNode], label: str) -> None:
            for i, item in enumerate(items):
                lines.append(PrettyPrinter.print_ast(item, indent + 4, f"{label}[{i}]: "))

        match node:
            case StrLiteral(value=v):
                lines.append(f"{indent_str}{prefix}StrLiteral({_quote(v)})")

            case NumLiteral(value=v):
                lines.append(f"{indent_str}{prefix}NumLiteral({v})")

            case BoolLiteral(value=v):
                lines.append(f"{indent_str}{prefix}BoolLiteral({v})")

            case Identifier(name=n):
                lines.append(f"{indent_str}{prefix}Identifier({n})")

            case ListLiteral(items=items):
                lines.append(f"{indent_str}{prefix}List")
                children(items, "item")

            case TupleLiteral(items=items):
                lines.append(f"{indent_str}{prefix}Tuple" if items else f"{indent_str}{prefix}Unit")
                children(items, "item")

            case Call(callee=callee, args=args):
                lines.append(f"{indent_str}{prefix}Call")
                lines.append(PrettyPrinter.print_ast(callee, indent + 2, "callee: "))
                children(args, "arg")

            case Index(target=target, index=idx):
                lines.append(f"{indent_str}{prefix}Index")
                lines.append(PrettyPrinter.print_ast(target, indent + 2, "target: "))
                lines.append(PrettyPrinter.print_ast(idx, indent + 2, "index: "))

            case Lookup(target=target, name=name):
                lines.append(f"{indent_str}{prefix}Lookup({name})")
                lines.append(PrettyPrinter.print_ast(target, indent + 2, "target: "))

            case BinOp(operator=op, lhs=lhs, rhs=rhs):
                lines.append(f"{indent_str}{prefix}BinOp({op})")
                lines.append(PrettyPrinter.print_ast(lhs, indent + 2, "lhs: "))
                lines.append(PrettyPrinter.print_ast(rhs, indent + 2, "rhs: "))

            case UnrOp(operator=op, operand=operand):
                lines.append(f"{indent_str}{prefix}UnrOp({op})")
                lines.append(PrettyPrinter.print_ast(operand, indent + 2))

            case Declare(name=name, value=value):
                lines.append(f"{indent_str}{prefix}Declare({name})")
                lines.append(PrettyPrinter.print_ast(value, indent + 2, "value: "))

            case Assign(name=name, value=value):
                lines.append(f"{indent_str}{prefix}Assign({name})")
                lines.append(PrettyPrinter.print_ast(value, indent + 2, "value: "))

            case Conditional(condition=cond, then_branch=then_b, else_branch=else_b):
                lines.append(f"{indent_str}{prefix}Conditional")
                lines.append(PrettyPrinter.print_ast(cond, indent + 4, "condition: "))
                lines.append(PrettyPrinter.print_ast(then_b, indent + 4, "then: "))
                lines.append(PrettyPrinter.print_ast(else_b, indent + 4, "else: "))

            case ForLoop(name=name, iterable=iterable, body=body):
                lines.append(f"{indent_str}{prefix}ForLoop({name})")
                lines.append(PrettyPrinter.print_ast(iterable, indent + 4, "iterable: "))
                children(body, "body")

            case WhileLoop(condition=cond, body=body):
                lines.append(f"{indent_str}{prefix}WhileLoop")
                lines.append(PrettyPrinter.print_ast(cond, indent + 4, "condition: "))
                children(body, "body")

            case FnDecl(name=name, params=params, body=body):
                lines.append(f"{indent_str}{prefix}FnDecl({name}, params=[{', '.join(params)}])")
                children(body, "body")

            case ClassDecl(name=name, bases=bases, body=body):
                lines.append(f"{indent_str}{prefix}ClassDecl({name})")
                children(bases, "base")
                children(body, "body")

            case Block(statements=stmts):
                lines.append(f"{indent_str}{prefix}Block")
                children(stmts, "stmt")

            case _:
                lines.append(f"{indent_str}{prefix}Unknown node type: {type(node)}")

        return "\n".join(line for line in lines if line)

    @staticmethod
    def print_surface(node: ASTNode) -> str:
        """Return a compact, one-line FeO rendering of an AST node.

        Operations, assignments, `let` and `if` forms are parenthesized when
        nested, so the output re-parses to the same tree. Blocks, including
        the root `Block` returned by the parser, always keep their braces.
        """
        if node is None:
            return ""

        # Helpers
        def _p(n: ASTNode) -> str:
            if isinstance(n, (BinOp, UnrOp, Assign, Declare, Conditional)):
                return f"({PrettyPrinter.print_surface(n)})"
            return PrettyPrinter.print_surface(n)

        def _stmts(stmts: List[ASTNode]) -> str:
            # A trailing unit came from a trailing `;` or an empty block.
            if stmts and stmts[-1] == unit():
                return "".join(f"{PrettyPrinter.print_surface(s)}; " for s in stmts[:-1]).rstrip()
            return "; ".join(PrettyPrinter.print_surface(s) for s in stmts)

        def _body(stmts: List[ASTNode]) -> str:
            inner = _stmts(stmts)
            return f"{{ {inner} }}" if inner else "{}"

        match node:
            case StrLiteral(value=v):
                return _quote(v)
            case NumLiteral(value=v):
                return _format_number(v)
            case BoolLiteral(value=v):
                return "true" if v else "false"
            case Identifier(name=n):
                return n
            case ListLiteral(items=items):
                return f"[{', '.join(PrettyPrinter.print_surface(i) for i in items)}]"
            case TupleLiteral(items=[]):
                return "()"
            case TupleLiteral(items=[only]):
                return f"({PrettyPrinter.print_surface(only)},)"
            case TupleLiteral(items=items):
                return f"({', '.join(PrettyPrinter.print_surface(i) for i in items)})"
            case Call(callee=callee, args=args):
                args_s = ", ".join(PrettyPrinter.print_surface(a) for a in args)
                return f"{_p(callee)}({args_s})"
            case Index(target=target, index=idx):
                return f"{_p(target)}[{PrettyPrinter.print_surface(idx)}]"
            case Lookup(target=NumLiteral() as target, name=name):
                # `1.x` would lex as the number `1.`
                return f"({PrettyPrinter.print_surface(target)}).{name}"
            case Lookup(target=target, name=name):
                return f"{_p(target)}.{name}"
            case BinOp(operator=op, lhs=lhs, rhs=rhs):
                return f"{_p(lhs)} {op} {_p(rhs)}"
            case UnrOp(operator=op, operand=operand):
                return f"{op}{_p(operand)}"
            case Declare(name=name, value=value):
                if value == unit():
                    return f"let {name}"
                return f"let {name} = {PrettyPrinter.print_surface(value)}"
            case Assign(name=name, value=value):
                return f"{name} = {PrettyPrinter.print_surface(value)}"
            case Conditional(condition=cond, then_branch=then_b, else_branch=else_b):
                text = f"if {PrettyPrinter.print_surface(cond)} {PrettyPrinter.print_surface(then_b)}"
                if else_b == unit():
                    return text
                return f"{text} else {PrettyPrinter.print_surface(else_b)}"
            case ForLoop(name=name, iterable=iterable, body=body):
                return f"for {name} in {PrettyPrinter.print_surface(iterable)} {_body(body)}"
            case WhileLoop(condition=cond, body=body):
                return f"while {PrettyPrinter.print_surface(cond)} {_body(body)}"
            case FnDecl(name=name, params=params, body=body):
                return f"fn {name}({', '.join(params)}) {_body(body)}"
            case ClassDecl(name=name, bases=bases, body=body):
                bases_s = ""
                if bases:
                    bases_s = ": " + " + ".join(_p(b) for b in bases)
                return f"class {name}{bases_s} {_body(body)}"
            case Block(statements=stmts):
                return _body(stmts)
            case _:
                s = PrettyPrinter.print_ast(node)
                return " ".join(line.strip() for line in s.splitlines())
