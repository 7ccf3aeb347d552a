"""Pipe table detection.

A header row is only a table once the separator row right after it has been
seen, so under streaming the detector answers INCOMPLETE while that second
line is still arriving. Row and separator parsing live in goteo.table.
"""

from __future__ import annotations

from goteo.detectors.base import (
    INCOMPLETE,
    DetectedBlock,
    DetectResult,
    current_line,
    split_indent,
    undecided,
)
from goteo.events import BlockType
from goteo.table import (
    count_table_columns,
    is_table_row,
    parse_table_row,
    parse_table_separator,
)

_SEPARATOR_CHARS = frozenset("|:- \t")


def _could_be_separator(partial: str) -> bool:
    return all(c in _SEPARATOR_CHARS for c in partial)


def detect_table(buffer: str, from_index: int) -> DetectResult:
    """Detect a header row followed by a matching separator row.

    Both lines are consumed on success. The block's initial content is the
    two stripped lines joined by a newline.

    Metadata: headers, alignments, columns.
    """
    line, complete = current_line(buffer, from_index)
    indent, rest = split_indent(line)
    if indent > 3:
        return None
    if not rest.strip():
        return undecided(complete)
    if not rest.startswith("|"):
        return None
    if not complete:
        return INCOMPLETE
    if not is_table_row(line):
        return None

    separator, separator_complete = current_line(buffer, from_index + len(line) + 1)
    if not separator_complete:
        return INCOMPLETE if _could_be_separator(separator) else None

    alignments = parse_table_separator(separator)
    columns = count_table_columns(line)
    if alignments is None or len(alignments) != columns:
        return None

    return DetectedBlock(
        block_type=BlockType.TABLE,
        match_length=len(line) + len(separator) + 2,
        start_marker=line.strip(),
        content=f"{line.strip()}\n{separator.strip()}",
        metadata={
            "headers": parse_table_row(line),
            "alignments": alignments,
            "columns": columns,
        },
    )


__all__ = ["detect_table"]
