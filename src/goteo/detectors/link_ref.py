"""Link reference definition detector: ``[label]: url "title"``."""

from __future__ import annotations

import re

from goteo.detectors.base import (
    INCOMPLETE,
    DetectedBlock,
    DetectResult,
    current_line,
    split_indent,
    undecided,
)
from goteo.events import BlockType

_LINK_REF = re.compile(
    r"\[(?P<label>[^\]\n]+)\]:[ \t]*"
    r"(?P<url><[^>\n]*>|\S+)"
    r"(?:[ \t]+(?P<title>\"[^\"\n]*\"|'[^'\n]*'|\([^)\n]*\)))?"
    r"[ \t]*$"
)


def detect_link_reference(buffer: str, from_index: int) -> DetectResult:
    """Detect a single-line link reference definition.

    Definitions cannot interrupt a paragraph; the driver only consults this
    detector when no text block is open.

    Metadata: label, url, title (None when absent).
    """
    line, complete = current_line(buffer, from_index)
    indent, rest = split_indent(line)
    if indent > 3:
        return None
    if not rest:
        return undecided(complete)
    if rest[0] != "[":
        return None

    if not complete:
        close = rest.find("]")
        if close == -1 or close + 1 == len(rest):
            return INCOMPLETE
        if rest[close + 1] != ":":
            return None
        return INCOMPLETE

    m = _LINK_REF.match(rest)
    if m is None:
        return None

    url = m.group("url")
    if url.startswith("<") and url.endswith(">"):
        url = url[1:-1]
    title = m.group("title")
    if title is not None:
        title = title[1:-1]

    definition = rest.strip()
    return DetectedBlock(
        block_type=BlockType.LINK_REFERENCE,
        match_length=len(line) + 1,
        start_marker=f"[{m.group('label')}]:",
        content=definition,
        closed=True,
        metadata={"label": m.group("label"), "url": url, "title": title},
    )
