"""Detector contract shared by built-in detectors and custom matchers.

A detector is a pure function::

    detect(buffer: str, from_index: int) -> DetectedBlock | Incomplete | None

``from_index`` is the start of a line. The line may be partial (no "\\n" yet);
a detector then answers definitively only when no further input on that line
could change the answer, and returns INCOMPLETE otherwise. Detectors never
raise and never mutate anything.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from goteo.events import BlockType
from goteo.text import find_pattern


class Incomplete(Enum):
    """Sentinel type: the detector needs more input to decide."""

    INCOMPLETE = "incomplete"

    def __repr__(self) -> str:
        return "INCOMPLETE"


INCOMPLETE = Incomplete.INCOMPLETE


@dataclass(frozen=True, slots=True)
class DetectedBlock:
    """A recognized block start.

    Attributes:
        block_type: Kind of block
        match_length: Characters consumed from from_index (always > 0)
        start_marker: Literal text that opened the block
        end_marker: Closing marker for fenced blocks; None otherwise
        content: Initial content (or the whole content when closed)
        closed: The detection covers the entire construct; the block is
            opened and closed at once
        metadata: Per-type details carried on the Begin event
    """

    block_type: BlockType
    match_length: int
    start_marker: str = ""
    end_marker: str | None = None
    content: str | None = None
    closed: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)


DetectResult = DetectedBlock | Incomplete | None

BlockMatcher = Callable[[str, int], DetectResult]


def current_line(buffer: str, from_index: int) -> tuple[str, bool]:
    """Return the line starting at from_index and whether it is complete.

    The returned text excludes the newline.
    """
    newline = find_pattern(buffer, "\n", from_index)
    if newline is None:
        return buffer[from_index:], False
    return buffer[from_index : newline.index], True


def undecided(complete: bool) -> Incomplete | None:
    """INCOMPLETE for a partial line, None for a finished one."""
    return None if complete else INCOMPLETE


def split_indent(line: str) -> tuple[int, str]:
    """Split leading spaces from a line: (count, rest)."""
    rest = line.lstrip(" ")
    return len(line) - len(rest), rest


__all__ = [
    "INCOMPLETE",
    "BlockMatcher",
    "DetectResult",
    "DetectedBlock",
    "Incomplete",
    "current_line",
    "split_indent",
    "undecided",
]
