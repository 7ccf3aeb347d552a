"""Fold parse events into block records.

BlockAccumulator is the typical consumer of a parser: it keeps finished
blocks in order, tracks the blocks still streaming, and can hand a renderer a
consistent snapshot after every chunk.

Example:
    >>> from goteo import StreamingParser
    >>> parser, blocks = StreamingParser(), BlockAccumulator()
    >>> blocks.extend(parser.feed("# Title\\n\\nSome *text*"))
    >>> [(b.type.value, b.finished) for b in blocks.snapshot()]
    [('heading', True), ('paragraph', False)]

"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import Any

from goteo.events import Annotation, Begin, BlockType, Delta, End, ParseEvent
from goteo.table import ParsedTable, parse_table


@dataclass(slots=True)
class StreamedBlock:
    """A block as seen by a consumer.

    Attributes:
        id: Block id from the events
        type: Kind of block
        content: Raw content while streaming; final content once finished
        metadata: Metadata from the Begin event
        annotations: Annotations received so far
        finished: End has been received
        incomplete: The block ended without its closing marker
        table: Parsed cells for finished table blocks
    """

    id: str
    type: BlockType
    content: str = ""
    metadata: dict[str, Any] | None = None
    annotations: list[Annotation] = field(default_factory=list)
    finished: bool = False
    incomplete: bool = False
    table: ParsedTable | None = None


class BlockAccumulator:
    """Collects events into StreamedBlock records, in document order.

    Events for unknown block ids are ignored.

    Thread Safety:
    Not thread-safe; owned by the consumer of one stream.
    """

    __slots__ = ("_finished", "_pending")

    def __init__(self) -> None:
        self._pending: dict[str, StreamedBlock] = {}
        self._finished: list[StreamedBlock] = []

    def handle(self, event: ParseEvent) -> None:
        if isinstance(event, Begin):
            self._pending[event.block_id] = StreamedBlock(
                id=event.block_id,
                type=event.block_type,
                metadata=event.metadata,
            )
            return

        block = self._pending.get(event.block_id)
        if block is None:
            return

        if isinstance(event, Delta):
            block.content += event.text
        elif isinstance(event, Annotation):
            block.annotations.append(event)
        elif isinstance(event, End):
            if event.final_content is not None:
                block.content = event.final_content
            block.finished = True
            block.incomplete = event.incomplete
            if block.type is BlockType.TABLE:
                block.table = parse_table(block.content)
            self._finished.append(block)
            del self._pending[event.block_id]

    def extend(self, events: Iterable[ParseEvent]) -> None:
        for event in events:
            self.handle(event)

    @property
    def blocks(self) -> list[StreamedBlock]:
        """Finished blocks, in order."""
        return list(self._finished)

    def snapshot(self) -> list[StreamedBlock]:
        """Finished blocks followed by copies of the blocks still open."""
        pending = [
            replace(block, annotations=list(block.annotations))
            for block in self._pending.values()
        ]
        return [*self._finished, *pending]

    def clear(self) -> None:
        self._pending.clear()
        self._finished.clear()


__all__ = [
    "BlockAccumulator",
    "StreamedBlock",
]
