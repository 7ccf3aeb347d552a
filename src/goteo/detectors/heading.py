"""ATX heading detector."""

from __future__ import annotations

from goteo.detectors.base import (
    DetectedBlock,
    DetectResult,
    current_line,
    split_indent,
    undecided,
)
from goteo.events import BlockType


def strip_closing_sequence(text: str) -> str:
    """Remove an optional closing # sequence from heading text.

    The trailing #s only count as a closing sequence when preceded by a space
    or tab, or when they are all the heading has.

    Example:
        >>> strip_closing_sequence("Title ##")
        'Title'
        >>> strip_closing_sequence("C#")
        'C#'
    """
    text = text.rstrip(" \t")
    if not text.endswith("#"):
        return text

    trailing_start = len(text.rstrip("#"))
    if trailing_start == 0:
        return ""
    if text[trailing_start - 1] in " \t":
        return text[:trailing_start].rstrip(" \t")
    return text


def detect_heading(buffer: str, from_index: int) -> DetectResult:
    """Detect "#" through "######" followed by a space, tab or line end.

    A finished line is returned as a closed block with its content. On a
    partial line the heading is committed as soon as the marker and its
    separator are seen; the driver streams the rest of the line.
    """
    line, complete = current_line(buffer, from_index)
    indent, rest = split_indent(line)
    if indent > 3:
        return None
    if not rest:
        return undecided(complete)
    if rest[0] != "#":
        return None

    level = len(rest) - len(rest.lstrip("#"))
    if level > 6:
        return None
    if level == len(rest):
        if not complete:
            return undecided(complete)
    elif rest[level] not in " \t":
        return None

    metadata = {"level": level}
    if complete:
        return DetectedBlock(
            block_type=BlockType.HEADING,
            match_length=len(line) + 1,
            start_marker="#" * level,
            content=strip_closing_sequence(rest[level:].lstrip(" \t")),
            closed=True,
            metadata=metadata,
        )

    marker_end = level
    while marker_end < len(rest) and rest[marker_end] in " \t":
        marker_end += 1
    return DetectedBlock(
        block_type=BlockType.HEADING,
        match_length=indent + marker_end,
        start_marker="#" * level,
        metadata=metadata,
    )
