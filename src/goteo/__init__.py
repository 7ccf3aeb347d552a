"""
Goteo: Incremental Markdown Parser for Streaming Text

Parses Markdown as it arrives, chunk by chunk, and emits block events
(Begin, Delta, End, Annotation) as soon as each piece of structure is known.
Built for rendering model output while it is still being generated. Zero
runtime dependencies.

Quick Start:
    >>> from goteo import StreamingParser
    >>> parser = StreamingParser()
    >>> for chunk in ["# Hel", "lo\\n", "Some **bold** text"]:
    ...     for event in parser.feed(chunk):
    ...         handle(event)
    >>> for event in parser.finalize():
    ...     handle(event)

    >>> # Or drive a whole stream
    >>> from goteo import parse_stream
    >>> events = list(parse_stream(["```py\\n", "print(1)\\n", "```\\n"]))

Consuming Blocks:
    >>> from goteo import BlockAccumulator
    >>> blocks = BlockAccumulator()
    >>> blocks.extend(parse_stream(chunks))
    >>> [b.type for b in blocks.blocks]

Installation:
    pip install goteo
"""

from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator

from goteo.blocks import BlockAccumulator, StreamedBlock
from goteo.config import (
    StreamConfig,
    get_stream_config,
    reset_stream_config,
    set_stream_config,
    stream_config_context,
)
from goteo.detectors import INCOMPLETE, DetectedBlock, detect_block
from goteo.errors import ConfigError, DetectorError, GoteoError
from goteo.events import Annotation, Begin, BlockType, Delta, End, ParseEvent
from goteo.inline import InlineSpan, find_all_inline_emphasis, find_links
from goteo.parser import StreamingParser
from goteo.serialization import from_dict, from_json, to_dict, to_json
from goteo.table import ParsedTable, parse_table

__version__ = "0.1.0"


def parse_stream(
    chunks: Iterable[str], config: StreamConfig | None = None
) -> Iterator[ParseEvent]:
    """Parse a sequence of chunks, yielding events as they are produced.

    The stream is finalized once chunks is exhausted.

    Args:
        chunks: Text chunks in order (a generator over a network response,
            a list of strings...)
        config: Stream configuration (uses the context default if None)

    Example:
        >>> events = list(parse_stream(["# Hi", "\\n"]))
        >>> events[0].block_type
        <BlockType.HEADING: 'heading'>
    """
    parser = StreamingParser(config)
    for chunk in chunks:
        yield from parser.feed(chunk)
    yield from parser.finalize()


async def aparse_stream(
    chunks: AsyncIterable[str], config: StreamConfig | None = None
) -> AsyncIterator[ParseEvent]:
    """Async counterpart of parse_stream.

    Parsing itself never awaits; only reading chunks does.
    """
    parser = StreamingParser(config)
    async for chunk in chunks:
        for event in parser.feed(chunk):
            yield event
    for event in parser.finalize():
        yield event


__all__ = [  # noqa: RUF022 — grouped by category for maintainability
    # Version
    "__version__",
    # Core API
    "StreamingParser",
    "aparse_stream",
    "parse_stream",
    # Events
    "Annotation",
    "Begin",
    "BlockType",
    "Delta",
    "End",
    "ParseEvent",
    # Consumers
    "BlockAccumulator",
    "StreamedBlock",
    # Detection
    "INCOMPLETE",
    "DetectedBlock",
    "InlineSpan",
    "ParsedTable",
    "detect_block",
    "find_all_inline_emphasis",
    "find_links",
    "parse_table",
    # Configuration
    "StreamConfig",
    "get_stream_config",
    "reset_stream_config",
    "set_stream_config",
    "stream_config_context",
    # Errors
    "ConfigError",
    "DetectorError",
    "GoteoError",
    # Serialization
    "from_dict",
    "from_json",
    "to_dict",
    "to_json",
]
