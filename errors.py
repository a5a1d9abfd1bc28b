"""Diagnostics shared by the lexer and the parser.

Both front-end stages report at most one failure per pass: the first error
is raised immediately and nothing is collected or recovered. Every error
carries `pos`, the offset (in Unicode scalar values, i.e. Python string
indices) of the first unexpected or unconsumed character, which callers
can turn into a line/column pair or a caret report with the helpers below.

Both classes derive from `SyntaxError` so existing `except SyntaxError`
handlers keep working.
"""

from __future__ import annotations
from typing import Tuple


class FeOSyntaxError(SyntaxError):
    """A positioned front-end failure: `pos {pos}: {detail}`."""

    def __init__(self, pos: int, detail: str):
        super().__init__(f"pos {pos}: {detail}")
        self.pos = pos
        self.detail = detail

    def __str__(self) -> str:
        return f"pos {self.pos}: {self.detail}"


class LexError(FeOSyntaxError):
    """Raised by the lexer; terminates the tokenizing pass."""


class ParseError(FeOSyntaxError):
    """Raised by the parser; aborts the parse."""


def line_and_column(text: str, pos: int) -> Tuple[int, int]:
    """Return the 1-based (line, column) of offset `pos` in `text`."""
    pos = max(0, min(pos, len(text)))
    line = text.count("\n", 0, pos) + 1
    line_start = text.rfind("\n", 0, pos) + 1
    return line, pos - line_start + 1


def format_caret(text: str, err: FeOSyntaxError, filename: str = "<input>") -> str:
    """Render `err` as a three-line report with a caret under the offending column."""
    line, column = line_and_column(text, err.pos)
    lines = text.split("\n")
    source_line = lines[line - 1] if line - 1 < len(lines) else ""
    return "\n".join(
        [
            f"{filename}:{line}:{column}: {err.detail}",
            f"    {source_line}",
            f"    {' ' * (column - 1)}^",
        ]
    )
