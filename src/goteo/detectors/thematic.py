"""Horizontal rule detector."""

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


def detect_horizontal_rule(buffer: str, from_index: int) -> DetectResult:
    """Detect 3+ of the same "-", "*" or "_", optionally separated by spaces.

    The rule is only known once the line ends; a partial line is rejected
    early as soon as any other character shows up.
    """
    line, complete = current_line(buffer, from_index)
    indent, rest = split_indent(line)
    if indent > 3:
        return None
    if not rest:
        return undecided(complete)

    char = rest[0]
    if char not in "-*_":
        return None

    count = 0
    for c in rest:
        if c == char:
            count += 1
        elif c not in " \t":
            return None

    if not complete:
        return INCOMPLETE
    if count < 3:
        return None

    rule = rest.strip()
    return DetectedBlock(
        block_type=BlockType.HORIZONTAL_RULE,
        match_length=len(line) + 1,
        start_marker=rule,
        content=rule,
        closed=True,
        metadata={"marker": char},
    )
