"""List item detector.

Each item is its own block. Nesting is expressed through metadata (level,
indent) rather than through block nesting.
"""

from __future__ import annotations

from goteo.detectors.base import (
    INCOMPLETE,
    DetectedBlock,
    DetectResult,
    current_line,
    undecided,
)
from goteo.events import BlockType
from goteo.text import count_leading_whitespace

_BULLETS = "-*+"
_TASK_STATES = " xX"


def _task_prefix(text: str, complete: bool) -> tuple[bool | None, int] | None:
    """Check for a "[ ] " / "[x] " task marker at the start of item text.

    Returns:
        (checked, consumed) when text holds a task marker, (None, 0) when it
        does not, or None when a partial line could still become one.
    """
    if not text.startswith("["):
        return None, 0

    if len(text) < 4 and not complete:
        if len(text) == 1:
            return None
        if text[1] in _TASK_STATES and (len(text) == 2 or text[2] == "]"):
            return None

    if len(text) >= 3 and text[1] in _TASK_STATES and text[2] == "]":
        if len(text) == 3 or text[3] in " \t":
            consumed = 3
            while consumed < len(text) and text[consumed] in " \t":
                consumed += 1
            if consumed == len(text) and not complete:
                return None
            return text[1] != " ", consumed
    return None, 0


def detect_list_item(buffer: str, from_index: int) -> DetectResult:
    """Detect a bullet ("-", "*", "+") or ordered ("1.", "1)") list item.

    The marker must be followed by whitespace and then non-blank text; a bare
    marker line is left for the paragraph fallback.

    Metadata: ordered, marker, level (indent // 2 + 1), indent,
    content_indent, and start for ordered items, task (bool) for task items.
    """
    line, complete = current_line(buffer, from_index)
    indent = count_leading_whitespace(line)
    rest = line[indent:]
    if not rest:
        return undecided(complete)

    char = rest[0]
    metadata: dict[str, object]
    if char in _BULLETS:
        pos = 1
        metadata = {"ordered": False, "marker": char}
    elif char.isdigit():
        pos = len(rest) - len(rest.lstrip("0123456789"))
        if pos > 9:
            return None
        if pos == len(rest):
            return undecided(complete)
        if rest[pos] not in ".)":
            return None
        metadata = {
            "ordered": True,
            "marker": rest[pos],
            "start": int(rest[:pos]),
        }
        pos += 1
    else:
        return None

    if pos == len(rest):
        return undecided(complete)
    if rest[pos] not in " \t":
        return None

    text_start = pos
    while text_start < len(rest) and rest[text_start] in " \t":
        text_start += 1
    if text_start == len(rest):
        return undecided(complete)

    task = _task_prefix(rest[text_start:], complete)
    if task is None:
        return INCOMPLETE
    checked, consumed = task

    metadata.update(
        level=indent // 2 + 1,
        indent=indent,
        content_indent=indent + text_start,
    )
    if checked is not None:
        metadata["task"] = checked

    return DetectedBlock(
        block_type=BlockType.LIST,
        match_length=indent + text_start + consumed,
        start_marker=rest[:pos],
        metadata=metadata,
    )
