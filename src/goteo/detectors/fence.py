"""Fenced block detectors: code (``` / ~~~) and display math ($$)."""

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
from goteo.text import parse_code_block_metadata


def detect_code_block(buffer: str, from_index: int) -> DetectResult:
    """Detect a fenced code block opening line.

    Fences are 3+ backticks or tildes indented 0-3 spaces. Backtick fences
    cannot have backticks in the info string. The whole opening line is
    needed before committing, since the info string carries the language.

    Metadata: language (default "text"), any key=value pairs from the info
    string, fence_char, fence_length, indent.
    """
    line, complete = current_line(buffer, from_index)
    indent, rest = split_indent(line)
    if indent > 3:
        return None
    if not rest:
        return undecided(complete)

    fence_char = rest[0]
    if fence_char not in "`~":
        return None

    count = len(rest) - len(rest.lstrip(fence_char))
    if count < 3:
        if count == len(rest):
            return undecided(complete)
        return None

    info = rest[count:].strip()
    if fence_char == "`" and "`" in info:
        return None
    if not complete:
        return INCOMPLETE

    metadata: dict[str, object] = {"language": "text"}
    metadata.update(parse_code_block_metadata(info))
    metadata.update(fence_char=fence_char, fence_length=count, indent=indent)

    return DetectedBlock(
        block_type=BlockType.CODE,
        match_length=len(line) + 1,
        start_marker=line.strip(),
        end_marker=fence_char * count,
        metadata=metadata,
    )


def detect_math_block(buffer: str, from_index: int) -> DetectResult:
    """Detect a display math block opened by "$$".

    "$$ x $$" on one line is a complete block. Otherwise the block stays open
    until a "$$" line; text after the opening "$$" is the first content line.
    """
    line, complete = current_line(buffer, from_index)
    indent, rest = split_indent(line)
    if indent > 3:
        return None
    if not rest:
        return undecided(complete)
    if rest[0] != "$":
        return None
    if len(rest) == 1:
        return undecided(complete)
    if rest[1] != "$":
        return None
    if not complete:
        return INCOMPLETE

    body = rest[2:].strip()
    if len(body) >= 2 and body.endswith("$$"):
        return DetectedBlock(
            block_type=BlockType.MATH,
            match_length=len(line) + 1,
            start_marker="$$",
            end_marker="$$",
            content=body[:-2].strip(),
            closed=True,
            metadata={"display": True},
        )

    return DetectedBlock(
        block_type=BlockType.MATH,
        match_length=len(line) + 1,
        start_marker="$$",
        end_marker="$$",
        content=body + "\n" if body else None,
        metadata={"display": True},
    )
