"""Parse events emitted by the streaming parser.

The parser's only output is an ordered sequence of events. For each block id
the order is always::

    Begin -> (Delta | Annotation)* -> End

An Annotation only covers content already delivered by earlier Deltas. Inline
annotations come right before End; table rows are annotated as each row
arrives. Concatenating the Delta texts of a block reproduces its raw content
exactly.
End.final_content is the normalized form of that content (trimmed, and for
code, dedented).

Thread Safety:
Events are frozen dataclasses and safe to share once emitted.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class BlockType(Enum):
    """Block constructs the parser recognizes.

    Values are the wire names used by serialization.
    """

    PARAGRAPH = "paragraph"
    HEADING = "heading"
    CODE = "code"
    MATH = "math"
    QUOTE = "quote"
    LIST = "list"
    HORIZONTAL_RULE = "horizontal_rule"
    TABLE = "table"
    LINK_REFERENCE = "link_reference"


@dataclass(frozen=True, slots=True)
class Begin:
    """A new block was recognized.

    Attributes:
        block_id: Unique id correlating this block's events
        block_type: Kind of block
        metadata: Per-type details (code language and fence info, heading
            level, list ordering, table alignments...)
    """

    block_id: str
    block_type: BlockType
    metadata: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class Delta:
    """Text appended to an open block since its previous Delta."""

    block_id: str
    text: str


@dataclass(frozen=True, slots=True)
class End:
    """The block is closed; no further events carry this id.

    Attributes:
        block_id: Id of the closed block
        final_content: Normalized block content
        incomplete: True when a fenced block was closed without its end marker
            (stream ended, or its container ended first)
    """

    block_id: str
    final_content: str | None = None
    incomplete: bool = False


@dataclass(frozen=True, slots=True)
class Annotation:
    """An inline span found in a block's finished content.

    Attributes:
        block_id: Block whose content the range refers to
        kind: "strong", "emphasis", "strikethrough", "code", "link",
            "table_row", or a custom kind from an inline matcher
        range: (start, end) offsets into the block's raw content
        payload: Kind-specific data (link url, marker, row cells...)
    """

    block_id: str
    kind: str
    range: tuple[int, int]
    payload: dict[str, Any] = field(default_factory=dict)


ParseEvent = Begin | Delta | End | Annotation


__all__ = [
    "Annotation",
    "Begin",
    "BlockType",
    "Delta",
    "End",
    "ParseEvent",
]
