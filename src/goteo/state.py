"""Mutable parser state and buffer compaction.

ParserState holds exactly what is needed to resume scanning after any chunk
boundary: the unconsumed buffer tail, how far it has been scanned, and the
stack of open blocks. It is owned by one StreamingParser and is never shared.

Thread Safety:
Not thread-safe. One parser instance per stream, fed from one producer.

"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from goteo.config import StreamConfig
from goteo.events import BlockType
from goteo.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(slots=True)
class BlockState:
    """One open block construct.

    Created when a start marker is detected, dropped when the block closes.

    Attributes:
        id: Unique block id (see ParserState.generate_id)
        type: Kind of block
        content: Raw content accumulated so far (markers stripped)
        start_marker: Literal text that opened the block
        end_marker: Literal closing marker for fenced blocks, else None
        content_start_index: Buffer offset of the content at detection time
        source_offset: Same position as an absolute stream offset
        last_emitted_length: Length of content already sent as deltas
        metadata: Per-type details, shared with the Begin event
        indent: Columns stripped from continuation lines (list content
            indent, fence indent for code)
        pending_break: Line break text withheld until the next line proves
            the block continues
        line_open: The block owns the rest of the current line
        terminated: The block saw its end marker
        end_pattern: Compiled closing-line pattern for fenced blocks
    """

    id: str
    type: BlockType
    content: str = ""
    start_marker: str = ""
    end_marker: str | None = None
    content_start_index: int = 0
    source_offset: int = 0
    last_emitted_length: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)
    indent: int = 0
    pending_break: str = ""
    line_open: bool = False
    terminated: bool = False
    end_pattern: re.Pattern[str] | None = None

    def append(self, text: str) -> None:
        """Append text, first releasing any withheld line break."""
        if not text:
            return
        if self.pending_break:
            self.content += self.pending_break
            self.pending_break = ""
        self.content += text

    def pending_delta(self) -> str:
        """Content not yet delivered via a Delta event."""
        return self.content[self.last_emitted_length :]


@dataclass(slots=True)
class ParserState:
    """Mutable scanning progress for one stream.

    Attributes:
        config: Immutable tuning parameters
        buffer: Unconsumed tail of the normalized input
        processed_index: Offset into buffer up to which input has been
            consumed (emitted or folded into an open block)
        active_blocks: Open blocks, innermost last
        id_counter: Number of ids handed out; survives reset()
        discarded: Characters released by compaction (absolute offset of
            buffer[0])
    """

    config: StreamConfig
    buffer: str = ""
    processed_index: int = 0
    active_blocks: list[BlockState] = field(default_factory=list)
    id_counter: int = 0
    discarded: int = 0

    def generate_id(self) -> str:
        self.id_counter += 1
        return f"{self.config.id_prefix}-{self.id_counter}"

    @property
    def top(self) -> BlockState | None:
        return self.active_blocks[-1] if self.active_blocks else None

    @property
    def absolute_index(self) -> int:
        """processed_index in absolute stream coordinates."""
        return self.discarded + self.processed_index

    def reset(self) -> None:
        """Forget buffered input and open blocks. Ids keep counting up."""
        self.buffer = ""
        self.processed_index = 0
        self.active_blocks = []
        self.discarded = 0


def compact(state: ParserState) -> bool:
    """Release consumed input from the front of the buffer.

    Only runs when the processed offset has passed config.max_buffer_size and
    no block is open, so nothing an open block still refers to is dropped.

    Returns:
        True if the buffer was compacted.
    """
    if state.active_blocks or state.processed_index <= state.config.max_buffer_size:
        return False

    dropped = state.processed_index
    state.buffer = state.buffer[dropped:]
    state.discarded += dropped
    state.processed_index = 0
    logger.debug("Compacted %d characters (%d buffered)", dropped, len(state.buffer))
    return True


__all__ = [
    "BlockState",
    "ParserState",
    "compact",
]
