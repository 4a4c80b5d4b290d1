"""Comment placement for parsed reference documents.

The round-trip parser stores a full-line comment in the trailing slot of
whichever node precedes it, so a comment written above key ``b`` travels with
the value of key ``a``. Snippets cut the document apart at key boundaries, so
comments are read from the source lines instead and handed to the node they
describe:

- a run of full-line comments belongs to the first node starting below it
- a comment closing a content line belongs to the last node starting on or
  before that line
- comment lines after the last node form the foot of the document

Nodes inside flow collections never receive comments; their comments go to
the block node holding the collection.
"""

from __future__ import annotations

import re
from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field
from typing import Hashable

# Block scalar header at the end of a content line: ``key: |``, ``- >-``, ``|2``.
_BLOCK_SCALAR = re.compile(r"(?:^|[\s:-])[|>][0-9+-]*$")

# Characters after which a quote character opens a quoted scalar.
_QUOTE_OPENERS = ("", ":", "-", "?", ",", "[", "{")


@dataclass
class SourceComments:
    """Comments found in the source text, by zero-based line number."""

    full_line: dict[int, str] = field(default_factory=dict)
    end_of_line: dict[int, tuple[int, str]] = field(default_factory=dict)
    blank: set[int] = field(default_factory=set)


@dataclass
class Placement:
    """Comments assigned to node positions."""

    heads: dict[Hashable, str] = field(default_factory=dict)
    lines: dict[Hashable, tuple[int, str]] = field(default_factory=dict)
    foot: str = ""


def scan(text: str) -> SourceComments:
    """Find full-line and end-of-line comments in YAML text.

    Lines inside block scalars and continuation lines of quoted scalars are
    content, whatever they start with.
    """
    found = SourceComments()
    quote: str | None = None
    # (indent of the owning node, indent of the content once known)
    block: tuple[int, int | None] | None = None

    for number, line in enumerate(_lines(text)):
        stripped = line.strip()

        if block is not None:
            if not stripped:
                continue
            parent, content = block
            indent = len(line) - len(line.lstrip(" "))
            if content is None and indent > parent:
                block = (parent, indent)
                continue
            if content is not None and indent >= content:
                continue
            block = None

        if quote is None:
            if not stripped:
                found.blank.add(number)
                continue
            if stripped.startswith("#"):
                found.full_line[number] = stripped
                continue

        column, quote = _comment_column(line, quote)
        code = line
        if column is not None:
            found.end_of_line[number] = (column, line[column:].rstrip())
            code = line[:column]

        code = code.rstrip()
        if quote is None and _BLOCK_SCALAR.search(code):
            block = (_owner_indent(code), None)

    return found


def place(found: SourceComments, positions: list[tuple[int, Hashable]]) -> Placement:
    """Assign scanned comments to node positions.

    Args:
        found: Result of :func:`scan`
        positions: ``(line, ref)`` of every node that can carry comments, in
            document order

    Returns:
        Head comments and end-of-line comments by ``ref``, plus the foot
    """
    ordered = sorted(positions, key=lambda position: position[0])
    starts = [line for line, _ in ordered]
    placement = Placement()

    for first, last in _comment_runs(found):
        head = _run_text(found, first, last)
        index = bisect_right(starts, last)
        if index == len(ordered):
            placement.foot = _join(placement.foot, head)
            continue
        ref = ordered[index][1]
        placement.heads[ref] = _join(placement.heads.get(ref, ""), head)

    for number, (column, text) in sorted(found.end_of_line.items()):
        index = bisect_right(starts, number) - 1
        if index < 0:
            # Comment on a line before the first node, e.g. ``--- # note``.
            index = bisect_left(starts, number)
            if index == len(ordered):
                placement.foot = _join(placement.foot, text)
                continue
            ref = ordered[index][1]
            placement.heads[ref] = _join(text, placement.heads.get(ref, ""))
            continue
        ref = ordered[index][1]
        if ref in placement.lines:
            # Several comment lines on one node, e.g. inside a flow collection.
            previous_column, previous = placement.lines[ref]
            placement.lines[ref] = (previous_column, f"{previous} {text}")
        else:
            placement.lines[ref] = (column, text)

    return placement


def _lines(text: str) -> list[str]:
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def _comment_column(line: str, quote: str | None) -> tuple[int | None, str | None]:
    """Column of the comment closing ``line`` and the quote still open after it."""
    previous = quote or ""
    index = 0
    while index < len(line):
        char = line[index]
        if quote is not None:
            if quote == '"' and char == "\\":
                index += 2
                continue
            if char == quote:
                if quote == "'" and line[index + 1 : index + 2] == "'":
                    index += 2
                    continue
                quote = None
                previous = char
        elif char == "#" and (index == 0 or line[index - 1] in " \t"):
            return index, None
        elif (
            char in "'\""
            and previous in _QUOTE_OPENERS
            and (index == 0 or line[index - 1] in " \t[{,")
        ):
            quote = char
        elif not char.isspace():
            previous = char
        index += 1
    return None, quote


def _owner_indent(code: str) -> int:
    """Indent a block scalar's content must exceed."""
    indent = len(code) - len(code.lstrip(" "))
    rest = code[indent:]
    while rest.startswith("- "):
        body = rest[2:].lstrip(" ")
        if body[:1] in ("|", ">"):
            return indent
        indent += len(rest) - len(body)
        rest = body
    return indent


def _comment_runs(found: SourceComments) -> list[tuple[int, int]]:
    """First and last line of each block of consecutive comment lines.

    Blank lines join two comment blocks into one; a run never starts or ends
    with a blank line.
    """
    runs: list[tuple[int, int]] = []
    for number in sorted(found.full_line):
        if runs:
            first, last = runs[-1]
            if all(gap in found.blank for gap in range(last + 1, number)):
                runs[-1] = (first, number)
                continue
        runs.append((number, number))
    return runs


def _run_text(found: SourceComments, first: int, last: int) -> str:
    return "\n".join(found.full_line.get(number, "") for number in range(first, last + 1))


def _join(first: str, second: str) -> str:
    if first and second:
        return f"{first}\n{second}"
    return first or second
