import pytest

from ast_nodes import *
from parser import parse
from pretty_printer import PrettyPrinter


def test_print_ast_renders_nested_structure():
    out = PrettyPrinter.print_ast(parse("x = f(1) + 2"))
    assert out.splitlines() == [
        "Block",
        "    stmt[0]: Assign(x)",
        "      value: BinOp(+)",
        "        lhs: Call",
        "          callee: Identifier(f)",
        "            arg[0]: NumLiteral(1.0)",
        "        rhs: NumLiteral(2.0)",
    ]


def test_print_ast_shows_unit_and_strings():
    out = PrettyPrinter.print_ast(parse('if a { "x\\n" }'))
    assert "Conditional" in out
    assert 'StrLiteral("x\\n")' in out
    assert "else: Unit" in out


def test_print_ast_declarations():
    out = PrettyPrinter.print_ast(parse("class A: B { fn f(x, y) { x } }"))
    assert "ClassDecl(A)" in out
    assert "base[0]: Identifier(B)" in out
    assert "FnDecl(f, params=[x, y])" in out


@pytest.mark.parametrize(
    "source, surface",
    [
        ("x += 1", "x = x + 1"),
        ("a * (b + c)", "a * (b + c)"),
        ("-f(x)[0].y", "-f(x)[0].y"),
        ("-(a + b)", "-(a + b)"),
        ("A::b", "A.b"),
        ("let x", "let x"),
        ("let s = \"q\\\"\"", 'let s = "q\\""'),
        ("(1,)", "(1,)"),
        ("(1, 2.5)", "(1, 2.5)"),
        ("[true, false]", "[true, false]"),
        ("if a { 1 } else if b { 2 } else {}", "if a { 1 } else if b { 2 } else {}"),
        ("while x { x -= 1; }", "while x { x = x - 1; }"),
        ("for i in 0 .. 3 { i }", "for i in 0 .. 3 { i }"),
        ("fn f(a, b) { a; b }", "fn f(a, b) { a; b }"),
        ("class C: A + B {}", "class C: A + B {}"),
    ],
)
def test_print_surface(source, surface):
    stmt = parse(source).statements[0]
    assert PrettyPrinter.print_surface(stmt) == surface


def test_print_surface_wraps_blocks_in_braces():
    assert PrettyPrinter.print_surface(parse("1; {2; 3;}")) == "{ 1; { 2; 3; } }"


@pytest.mark.parametrize(
    "source",
    [
        "a - (b - c)",
        "x = y = -(1 + 2) * 3",
        "if a { b; c; } else { d }",
        "fn add(a, b) { let c = a + b; c }",
        "class Cow: Animal { fn moo() { 'm' } }",
        "f(1)(2)[3]",
        "for x in xs { while x { x -= 1 } }",
        "0.0000001",
        "123456.25 * 0.5",
        "(1).x",
        "(2.5)::y",
        "(if a { 1 } else { 2 }) + c",
        "(let x = 1) + 2",
        "-(if a { 1 })",
    ],
)
def test_print_surface_reparses_to_same_tree(source):
    ast = parse(source)
    assert parse(PrettyPrinter.print_surface(ast)).statements[0] == ast


@pytest.mark.parametrize(
    "source, surface",
    [
        ("0.0000001", "0.0000001"),
        ("(1).x", "(1).x"),
        ("(if a { 1 } else { 2 }) + c", "(if a { 1 } else { 2 }) + c"),
    ],
)
def test_print_surface_keeps_numbers_and_operands_lexable(source, surface):
    assert PrettyPrinter.print_surface(parse(source).statements[0]) == surface
