"""Pipe table detection and parsing.

Handles GFM-style pipe tables::

    | Header 1 | Header 2 |   <- header row
    |:---------|---------:|   <- separator row (required, same column count)
    | Cell 1   | Cell 2   |   <- body rows

Rows must start and end with a pipe. These helpers are pure; the streaming
detector built on them is goteo.detectors.table.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from goteo.text import extract_lines, find_pattern

_SEPARATOR_CELL = re.compile(r"^:?-+:?$")


@dataclass(frozen=True, slots=True)
class ParsedTable:
    """A fully parsed table.

    Attributes:
        headers: Header cell texts
        alignments: Per-column "left", "center", "right" or None
        rows: Body rows, each a list of cell texts
    """

    headers: list[str]
    alignments: list[str | None]
    rows: list[list[str]]


def is_table_row(line: str) -> bool:
    """True if the line starts and ends with a pipe."""
    stripped = line.strip()
    return len(stripped) >= 2 and stripped.startswith("|") and stripped.endswith("|")


def parse_table_row(line: str) -> list[str]:
    """Split a row into stripped cell texts. Escaped pipes stay in the cell."""
    line = line.strip()
    if line.startswith("|"):
        line = line[1:]
    if line.endswith("|") and not line.endswith("\\|"):
        line = line[:-1]

    cells: list[str] = []
    current_cell: list[str] = []
    i = 0
    while i < len(line):
        if line[i] == "\\" and i + 1 < len(line) and line[i + 1] == "|":
            current_cell.append("|")
            i += 2
        elif line[i] == "|":
            cells.append("".join(current_cell).strip())
            current_cell = []
            i += 1
        else:
            current_cell.append(line[i])
            i += 1

    cells.append("".join(current_cell).strip())
    return cells


def count_table_columns(line: str) -> int:
    return len(parse_table_row(line))


def parse_table_separator(line: str) -> list[str | None] | None:
    """Parse a separator row into column alignments.

    Returns:
        One of "left", "center", "right" or None per column, or None if the
        line is not a separator row.
    """
    if not is_table_row(line):
        return None

    alignments: list[str | None] = []
    for part in parse_table_row(line):
        if not _SEPARATOR_CELL.match(part):
            return None
        has_left_colon = part.startswith(":")
        has_right_colon = part.endswith(":") and len(part) > 1
        if has_left_colon and has_right_colon:
            alignments.append("center")
        elif has_left_colon:
            alignments.append("left")
        elif has_right_colon:
            alignments.append("right")
        else:
            alignments.append(None)
    return alignments


def find_table_end(text: str, start_index: int = 0) -> int:
    """Offset just past the last consecutive table row from start_index.

    The trailing newline of the last row is not included.
    """
    end = start_index
    pos = start_index
    while pos < len(text):
        newline = find_pattern(text, "\n", pos)
        line_end = len(text) if newline is None else newline.index
        if not is_table_row(text[pos:line_end]):
            break
        end = line_end
        pos = line_end + 1
    return end


def parse_table(text: str, start_index: int = 0) -> ParsedTable | None:
    """Parse the table starting at start_index.

    Returns:
        ParsedTable, or None if the first two lines are not a header and a
        matching separator.
    """
    lines = extract_lines(text, start_index, find_table_end(text, start_index))
    if len(lines) < 2:
        return None

    headers = parse_table_row(lines[0])
    alignments = parse_table_separator(lines[1])
    if alignments is None or len(alignments) != len(headers):
        return None

    rows = [parse_table_row(line) for line in lines[2:]]
    return ParsedTable(headers=headers, alignments=alignments, rows=rows)


__all__ = [
    "ParsedTable",
    "count_table_columns",
    "find_table_end",
    "is_table_row",
    "parse_table",
    "parse_table_row",
    "parse_table_separator",
]
