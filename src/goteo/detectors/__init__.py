"""Block detectors.

Each construct has its own module with one pure detection function. The
built-in priority order is::

    code > math > heading > horizontal rule > quote > list > table > link reference

Anything none of them claims becomes paragraph text.

Example:
    >>> from goteo.detectors import detect_block
    >>> detect_block("# Title\\n", 0).block_type
    <BlockType.HEADING: 'heading'>
"""

from __future__ import annotations

from collections.abc import Sequence

from goteo.detectors.base import (
    INCOMPLETE,
    BlockMatcher,
    DetectedBlock,
    DetectResult,
    Incomplete,
    current_line,
)
from goteo.detectors.fence import detect_code_block, detect_math_block
from goteo.detectors.heading import detect_heading, strip_closing_sequence
from goteo.detectors.link_ref import detect_link_reference
from goteo.detectors.list import detect_list_item
from goteo.detectors.quote import detect_quote, quote_marker_length
from goteo.detectors.table import detect_table
from goteo.detectors.thematic import detect_horizontal_rule

BUILTIN_DETECTORS: tuple[BlockMatcher, ...] = (
    detect_code_block,
    detect_math_block,
    detect_heading,
    detect_horizontal_rule,
    detect_quote,
    detect_list_item,
    detect_table,
    detect_link_reference,
)

# Constructs allowed to cut off an open paragraph or container.
INTERRUPTING_DETECTORS: tuple[BlockMatcher, ...] = tuple(
    d for d in BUILTIN_DETECTORS if d is not detect_link_reference
)

# Blocks that may open inside a quote or list item.
CHILD_DETECTORS: tuple[BlockMatcher, ...] = (detect_code_block, detect_math_block)


def detect_block(
    buffer: str,
    from_index: int,
    detectors: Sequence[BlockMatcher] = BUILTIN_DETECTORS,
) -> DetectResult:
    """Run detectors in priority order.

    The first definite match wins. An INCOMPLETE answer stops the search,
    since a higher-priority construct may still claim the line.
    """
    for detector in detectors:
        result = detector(buffer, from_index)
        if result is not None:
            return result
    return None


__all__ = [
    "BUILTIN_DETECTORS",
    "CHILD_DETECTORS",
    "INCOMPLETE",
    "INTERRUPTING_DETECTORS",
    "BlockMatcher",
    "DetectResult",
    "DetectedBlock",
    "Incomplete",
    "current_line",
    "detect_block",
    "detect_code_block",
    "detect_heading",
    "detect_horizontal_rule",
    "detect_link_reference",
    "detect_list_item",
    "detect_math_block",
    "detect_quote",
    "detect_table",
    "quote_marker_length",
    "strip_closing_sequence",
]
