"""Block quote detector.

Nested markers (">>", "> >") are flattened: the whole marker run is stripped
from each line and the run length of the first line is reported as depth.
"""

from __future__ import annotations

from goteo.detectors.base import (
    INCOMPLETE,
    DetectedBlock,
    DetectResult,
    current_line,
    split_indent,
)
from goteo.events import BlockType


def quote_marker_length(line: str) -> tuple[int, int] | None:
    """Measure the quote marker prefix of a line.

    Each ">" may be followed by one space or tab. Up to 3 spaces of
    indentation are allowed before the first ">".

    Returns:
        (prefix length, depth), or None if the line is not quote-marked.
    """
    indent, rest = split_indent(line)
    if indent > 3 or not rest.startswith(">"):
        return None

    pos = 0
    depth = 0
    while pos < len(rest) and rest[pos] == ">":
        depth += 1
        pos += 1
        if pos < len(rest) and rest[pos] in " \t":
            pos += 1
    return indent + pos, depth


def detect_quote(buffer: str, from_index: int) -> DetectResult:
    """Detect a ">" line.

    match_length covers only the marker prefix; the driver decides what the
    rest of the line holds. A partial line that ends inside the marker run is
    INCOMPLETE, since another ">" may still follow.
    """
    line, complete = current_line(buffer, from_index)
    if not line.strip(" "):
        return None if complete else INCOMPLETE

    marker = quote_marker_length(line)
    if marker is None:
        return None

    length, depth = marker
    if length == len(line) and not complete:
        return INCOMPLETE

    return DetectedBlock(
        block_type=BlockType.QUOTE,
        match_length=length,
        start_marker=line[:length],
        metadata={"depth": depth},
    )
