from __future__ import annotations
import argparse
import json
import logging
import sys
from typing import List, Optional

import graphviz

from ast_json import ast_to_json
from ast_viz import render_ast_dot, write_and_render
from errors import FeOSyntaxError, format_caret
from lexer import Lexer
from parser import DEFAULT_MAX_DEPTH, parse_tokens
from pretty_printer import PrettyPrinter
from tokens import Token

logger = logging.getLogger(__name__)


def lex(text: str) -> List[Token]:
    """Tokenize input string."""
    lexer = Lexer(text)
    return lexer.tokenize()


def process_program(
    text: str,
    *,
    filename: str = "<input>",
    print_tokens: bool = False,
    print_ast: bool = True,
    json_path: Optional[str] = None,
    viz_path: Optional[str] = None,
    viz_format: str = "svg",
    viz_surface: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> bool:
    """Process a single program: lex, parse and optionally print or export stages.

    Returns True on success. Lexing and parsing failures are reported with a
    caret under the offending character and return False.
    """
    try:
        tokens = lex(text)
        if print_tokens:
            print(f"Tokens ({len(tokens)}):")
            for i, token in enumerate(tokens[:50]):
                print(f"  {i:3}: {token}")
            if len(tokens) > 50:
                print(f"  ... and {len(tokens) - 50} more")

        ast = parse_tokens(tokens, source_length=len(text), max_depth=max_depth)
    except FeOSyntaxError as e:
        print(f"Syntax Error: {e}")
        print(format_caret(text, e, filename))
        return False

    if print_ast:
        print("\nAST:")
        print(PrettyPrinter.print_ast(ast))

    if json_path:
        export = json.dumps(ast_to_json(ast), indent=2)
        if json_path == "-":
            print(export)
        else:
            try:
                with open(json_path, "w", encoding="utf-8") as fh:
                    fh.write(export + "\n")
            except OSError as e:
                print(f"Failed to write AST JSON to {json_path}: {e}")
                return False
            print(f"Wrote AST JSON to {json_path}")

    # Optionally render visualization via Graphviz
    if viz_path:
        try:
            write_and_render(ast, viz_path, fmt=viz_format, use_surface=viz_surface)
            print(f"Wrote AST visualization to {viz_path}.{viz_format}")
        except graphviz.ExecutableNotFound:
            # fallback: write dot source
            dot = render_ast_dot(ast, use_surface=viz_surface)
            with open(f"{viz_path}.dot", "w", encoding="utf-8") as fh:
                fh.write(dot.source)
            print(f"Wrote DOT to {viz_path}.dot ({viz_format} render failed)")

    logger.debug("processed %s", filename)
    return True


def interactive_mode(
    print_tokens: bool = False,
    print_ast: bool = True,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> None:
    """Run interactive parser REPL reading one program per line from stdin."""
    print("\nInteractive FeO Mode (type 'quit' to exit)")
    print("=" * 80)

    while True:
        try:
            text = input("\nEnter program or expression: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\n\nExiting...")
            break

        if text.lower() in ("quit", "exit", "q"):
            print("Goodbye!")
            break

        if not text:
            continue

        process_program(
            text,
            print_tokens=print_tokens,
            print_ast=print_ast,
            max_depth=max_depth,
        )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Lex and parse FeO source from a file or interactively from stdin"
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--file", "-f", dest="file", help="Path to source file to process"
    )
    group.add_argument(
        "--interactive",
        "-i",
        dest="interactive",
        action="store_true",
        help="Start interactive REPL mode",
    )
    # printing/verbosity options
    parser.add_argument(
        "--print-tokens", dest="print_tokens", action="store_true", help="Print tokens"
    )
    parser.add_argument(
        "--no-ast", dest="print_ast", action="store_false", help="Do not print AST"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        dest="verbose",
        action="store_true",
        help="Enable debug logging",
    )

    # default behavior: print the AST only
    parser.set_defaults(print_tokens=False, print_ast=True)
    parser.add_argument(
        "--json",
        dest="json_path",
        metavar="PATH",
        help="Path to write the AST as JSON ('-' for stdout)",
    )
    parser.add_argument(
        "--viz",
        dest="viz_path",
        metavar="PATH",
        help="Path (without extension) to write Graphviz visualization of the AST",
    )
    parser.add_argument(
        "--viz-format",
        dest="viz_format",
        default="svg",
        help="Format for Graphviz output (svg, png, pdf, etc)",
    )
    parser.add_argument(
        "--viz-surface",
        dest="viz_surface",
        action="store_true",
        help="Show surface syntax for compound nodes in the visualization",
    )
    parser.add_argument(
        "--max-depth",
        dest="max_depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help=f"Maximum expression nesting depth (default {DEFAULT_MAX_DEPTH})",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    if args.interactive:
        interactive_mode(
            print_tokens=args.print_tokens,
            print_ast=args.print_ast,
            max_depth=args.max_depth,
        )
        return 0

    if not args.file:
        parser.print_help()
        return 0

    try:
        with open(args.file, "r", encoding="utf-8") as fh:
            text = fh.read()
    except (OSError, UnicodeDecodeError) as e:
        print(f"Failed to read file {args.file}: {e}")
        return 1

    ok = process_program(
        text,
        filename=args.file,
        print_tokens=args.print_tokens,
        print_ast=args.print_ast,
        json_path=args.json_path,
        viz_path=args.viz_path,
        viz_format=args.viz_format,
        viz_surface=args.viz_surface,
        max_depth=args.max_depth,
    )
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
