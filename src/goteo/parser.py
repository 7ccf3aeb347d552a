"""Streaming Markdown parser.

StreamingParser turns text chunks into parse events as they arrive. Input is
processed line by line: at the start of each line the block detectors decide
what the line is, and once that is decided the rest of the line is streamed
into the owning block as it comes in, even before its newline.

A line that cannot be decided yet (a possible table header waiting for its
separator, a partial "```" that may become a fence) is held in the buffer,
unconsumed, until more input arrives or finalize() is called. Nothing
speculative is emitted, which makes the event sequence independent of how the
input was split into chunks.

Block structure:
    - Leaf blocks: paragraph, heading, code, math, horizontal rule, table,
      link reference
    - Containers: quote and list item. A container holds text itself and may
      hold one fenced child (code or math)

Usage:
    >>> parser = StreamingParser()
    >>> events = parser.feed("# Hello")
    >>> events += parser.feed(" World\\n")
    >>> events += parser.finalize()
    >>> [type(e).__name__ for e in events]
    ['Begin', 'Delta', 'Delta', 'End']

Thread Safety:
Not thread-safe. Use one parser per stream, fed from a single producer.

"""

from __future__ import annotations

import functools
from collections.abc import Iterable

from goteo.config import InlineMatcher, StreamConfig, get_stream_config
from goteo.detectors import (
    BUILTIN_DETECTORS,
    CHILD_DETECTORS,
    INCOMPLETE,
    INTERRUPTING_DETECTORS,
    BlockMatcher,
    DetectedBlock,
    DetectResult,
    Incomplete,
    quote_marker_length,
    strip_closing_sequence,
)
from goteo.errors import DetectorError
from goteo.events import Annotation, Begin, BlockType, Delta, End, ParseEvent
from goteo.inline import InlineSpan, find_all_inline_emphasis, find_links
from goteo.state import BlockState, ParserState, compact
from goteo.table import is_table_row, parse_table_row
from goteo.text import (
    LineEndingNormalizer,
    could_complete_end_marker,
    count_leading_whitespace,
    create_end_marker_regex,
    dedent_lines,
    strip_indent,
)
from goteo.utils.logger import get_logger

logger = get_logger(__name__)

# Containers hold at most one fenced child, so the stack never goes deeper.
MAX_BLOCK_DEPTH = 2

_INLINE_BLOCKS = frozenset(
    {BlockType.PARAGRAPH, BlockType.HEADING, BlockType.QUOTE, BlockType.LIST}
)


def _matcher_name(matcher: object) -> str:
    return getattr(matcher, "__name__", repr(matcher))


def _guard_block_matcher(matcher: BlockMatcher) -> BlockMatcher:
    name = _matcher_name(matcher)

    @functools.wraps(matcher)
    def guarded(buffer: str, from_index: int) -> DetectResult:
        try:
            return matcher(buffer, from_index)
        except Exception:
            logger.warning("Block matcher %s raised; treating as no match", name, exc_info=True)
            return None

    return guarded


def _guard_inline_matcher(matcher: InlineMatcher) -> InlineMatcher:
    name = _matcher_name(matcher)

    @functools.wraps(matcher)
    def guarded(text: str) -> Iterable[InlineSpan]:
        try:
            return list(matcher(text))
        except Exception:
            logger.warning("Inline matcher %s raised; skipping", name, exc_info=True)
            return []

    return guarded


def _crosses(a: InlineSpan, b: InlineSpan) -> bool:
    """True when the spans overlap without one containing the other."""
    return a.start < b.start < a.end < b.end or b.start < a.start < b.end < a.end


def _span_payload(span: InlineSpan) -> dict[str, object]:
    payload: dict[str, object] = {"marker": span.marker, "content": span.content}
    payload.update(span.payload)
    return payload


class StreamingParser:
    """Incremental Markdown parser.

    Feed chunks with feed(), then call finalize() once the stream ends. Both
    return the events produced by that call.

    Per block the events are: Begin, then Delta and Annotation events, then
    End. Deltas of a block concatenate to its raw content; Annotation ranges
    refer to content already delivered.

    Args:
        config: Stream configuration; defaults to the context default
            (see goteo.config.get_stream_config)
    """

    __slots__ = (
        "_config",
        "_detectors",
        "_events",
        "_inline_matchers",
        "_interrupting",
        "_normalizer",
        "_state",
    )

    def __init__(self, config: StreamConfig | None = None) -> None:
        self._config = config if config is not None else get_stream_config()
        self._state = ParserState(config=self._config)
        self._normalizer = LineEndingNormalizer()
        self._events: list[ParseEvent] = []

        before = tuple(_guard_block_matcher(m) for m in self._config.before_matchers)
        after = tuple(_guard_block_matcher(m) for m in self._config.after_matchers)
        self._detectors: tuple[BlockMatcher, ...] = (*before, *BUILTIN_DETECTORS, *after)
        self._interrupting: tuple[BlockMatcher, ...] = (
            *before,
            *INTERRUPTING_DETECTORS,
            *after,
        )
        self._inline_matchers = tuple(
            _guard_inline_matcher(m) for m in self._config.inline_matchers
        )

    @property
    def config(self) -> StreamConfig:
        return self._config

    @property
    def state(self) -> ParserState:
        """Live parser state, for inspection only."""
        return self._state

    # =========================================================================
    # Public API
    # =========================================================================

    def feed(self, chunk: str) -> list[ParseEvent]:
        """Append a chunk and return the events it produced.

        Raises:
            DetectorError: A detector matched zero characters or the scan
                stopped making progress (a bug, never bad input)
        """
        text = self._normalizer.feed(chunk)
        if text:
            self._state.buffer += text
            self._scan(final=False)
        self._flush_deltas()
        compact(self._state)
        return self._take_events()

    def finalize(self) -> list[ParseEvent]:
        """Flush held input, close every open block, and reset for reuse.

        The last line is treated as complete even without a newline. Lines
        still waiting on a decision fall back to text. Unterminated fenced
        blocks end with End.incomplete set. Calling finalize() again
        returns no events.
        """
        tail = self._normalizer.flush()
        if tail:
            self._state.buffer += tail
        self._scan(final=True)
        self._close_all()
        self._state.reset()
        return self._take_events()

    def reset(self) -> None:
        """Drop buffered input and open blocks without emitting events.

        Block ids keep counting up, so ids stay unique across documents.
        """
        self._state.reset()
        self._normalizer = LineEndingNormalizer()
        self._events = []

    # =========================================================================
    # Scanning
    # =========================================================================

    def _scan(self, final: bool) -> None:
        state = self._state
        while state.processed_index < len(state.buffer):
            mark = self._progress_mark()
            if not self._step(final):
                if final:
                    raise DetectorError(
                        "scan stalled before end of input", offset=state.absolute_index
                    )
                return
            if self._progress_mark() == mark:
                raise DetectorError("scan step made no progress", offset=state.absolute_index)

    def _progress_mark(self) -> tuple[object, ...]:
        state = self._state
        top = state.top
        if top is None:
            return (state.processed_index, 0)
        return (
            state.processed_index,
            len(state.active_blocks),
            top.id,
            top.line_open,
            top.pending_break,
        )

    def _line(self, final: bool) -> tuple[str, str, bool]:
        """Current line from processed_index: (text, newline, complete)."""
        buffer = self._state.buffer
        start = self._state.processed_index
        newline = buffer.find("\n", start)
        if newline == -1:
            return buffer[start:], "", final
        return buffer[start:newline], "\n", True

    def _consume(self, length: int) -> None:
        self._state.processed_index += length

    def _step(self, final: bool) -> bool:
        """Advance by one decision. False means: wait for more input."""
        top = self._state.top
        text, newline, complete = self._line(final)
        if top is not None and top.line_open:
            return self._continue_line(top, text, newline, complete)
        if top is not None and top.end_marker is not None:
            return self._fenced_line(top, text, newline, complete)
        if top is not None and top.type is BlockType.TABLE:
            return self._table_line(top, text, newline, complete)
        return self._block_line(text, newline, complete, final)

    # =========================================================================
    # Line handlers
    # =========================================================================

    def _continue_line(self, block: BlockState, text: str, newline: str, complete: bool) -> bool:
        """Stream the rest of a line already owned by block."""
        if block.type is BlockType.HEADING:
            return self._continue_heading(block, text, newline, complete)

        if not complete:
            if not text:
                return False
            block.append(text)
            self._consume(len(text))
            return True

        block.line_open = False
        self._consume(len(text) + len(newline))
        if block.end_marker is not None:
            block.append(text + newline)
        else:
            block.append(text)
            block.pending_break = "\n"
        return True

    def _continue_heading(
        self, block: BlockState, text: str, newline: str, complete: bool
    ) -> bool:
        # A trailing run of spaces and #s may be a closing sequence, so it
        # stays in the buffer until the line ends.
        if complete:
            head = text if block.content else text.lstrip(" \t")
            full = strip_closing_sequence(block.content + head)
            if len(full) < len(block.content):
                # Already-emitted text is never taken back.
                full = block.content + head.rstrip(" \t")
            block.append(full[len(block.content) :])
            block.line_open = False
            self._consume(len(text) + len(newline))
            self._close(block)
            return True

        skip = 0 if block.content else len(text) - len(text.lstrip(" \t"))
        keep = len(text[skip:].rstrip(" \t#"))
        if skip + keep == 0:
            if not self._lookahead_exceeded():
                return False
            keep = len(text)
        block.append(text[skip : skip + keep])
        self._consume(skip + keep)
        return True

    def _fenced_line(self, block: BlockState, text: str, newline: str, complete: bool) -> bool:
        """A line inside an open code or math block, possibly within a container."""
        prefix = 0
        for container in self._state.active_blocks[:-1]:
            length = self._container_prefix(container, text[prefix:], complete)
            if length is INCOMPLETE:
                return False
            if length is None:
                self._close_from(container)
                return True
            prefix += length

        inner = text[prefix:]
        if complete:
            self._consume(len(text) + len(newline))
            if block.end_pattern is not None and block.end_pattern.match(inner):
                block.terminated = True
                self._close(block)
            else:
                block.append(strip_indent(inner, block.indent) + newline)
            return True

        if could_complete_end_marker(
            inner,
            block.end_marker or "",
            max_indent=3,
            extendable=block.type is BlockType.CODE,
        ):
            return False
        block.append(strip_indent(inner, block.indent))
        self._consume(len(text))
        block.line_open = True
        return True

    def _container_prefix(
        self, container: BlockState, line: str, complete: bool
    ) -> int | Incomplete | None:
        """Length of the container's prefix on line, or None if the container ends."""
        blank = not line.strip(" \t")
        if container.type is BlockType.QUOTE:
            if blank and not complete:
                return INCOMPLETE
            marker = quote_marker_length(line)
            if marker is None:
                return None
            length = marker[0]
            if length == len(line) and not complete:
                return INCOMPLETE
            return length

        if blank:
            return len(line) if complete else INCOMPLETE
        return min(count_leading_whitespace(line), container.indent)

    def _table_line(self, block: BlockState, text: str, newline: str, complete: bool) -> bool:
        row = text.strip()
        if not complete and (not row or row.startswith("|")):
            if not self._lookahead_exceeded():
                return False
            self._close(block)
            return True
        if not complete or not is_table_row(row):
            self._close(block)
            return True

        self._consume(len(text) + len(newline))
        start = len(block.content) + 1
        block.pending_break = "\n"
        block.append(row)
        self._annotate(
            block,
            "table_row",
            (start, start + len(row)),
            {
                "cells": parse_table_row(row),
                "header": False,
                "row": block.content.count("\n") - 1,
            },
        )
        return True

    def _block_line(self, text: str, newline: str, complete: bool, final: bool) -> bool:
        """A line with no fenced block or table open."""
        state = self._state
        top = state.top

        if not text.strip(" \t"):
            if not complete:
                return False
            self._consume(len(text) + len(newline))
            self._close_all()
            return True

        if top is not None and top.type is BlockType.QUOTE:
            marker = quote_marker_length(text)
            if marker is not None:
                return self._quote_line(top, marker[0], text, newline, complete, final)
        elif top is not None and top.type is BlockType.LIST:
            if count_leading_whitespace(text) >= top.indent:
                child = self._detect_child(state.processed_index + top.indent, final)
                if child is INCOMPLETE:
                    return False
                if child is not None:
                    self._consume(top.indent)
                    self._open(child)
                    return True

        detectors = self._detectors if top is None else self._interrupting
        result = self._resolve(self._detect(detectors, state.processed_index, final))
        if result is INCOMPLETE:
            return False

        if result is not None:
            if (
                result.block_type is BlockType.QUOTE
                and result.end_marker is None
                and not result.closed
            ):
                return self._quote_line(
                    None, result.match_length, text, newline, complete, final, result.metadata
                )
            self._close_all()
            self._open(result)
            return True

        # Plain text: a new paragraph, or a (lazy) continuation of the open block.
        if top is None:
            top = self._begin(BlockType.PARAGRAPH)
        self._consume(len(text) - len(text.lstrip(" \t")))
        top.line_open = True
        return True

    def _quote_line(
        self,
        existing: BlockState | None,
        marker_length: int,
        text: str,
        newline: str,
        complete: bool,
        final: bool,
        metadata: dict[str, object] | None = None,
    ) -> bool:
        """A ">" line: blank quote line, fenced child, or quote text."""
        inner = text[marker_length:]
        if not inner.strip(" \t"):
            if not complete:
                return False
            block = existing if existing is not None else self._open_quote(metadata)
            self._consume(len(text) + len(newline))
            if block.content:
                block.pending_break = "\n\n"
            return True

        child = self._detect_child(self._state.processed_index + marker_length, final)
        if child is INCOMPLETE:
            return False

        block = existing if existing is not None else self._open_quote(metadata)
        self._consume(marker_length)
        if child is not None:
            self._open(child)
            return True
        self._consume(len(inner) - len(inner.lstrip(" \t")))
        block.line_open = True
        return True

    # =========================================================================
    # Detection
    # =========================================================================

    def _detect(
        self, detectors: Iterable[BlockMatcher], from_index: int, final: bool
    ) -> DetectResult:
        buffer = self._state.buffer
        if final and not buffer.endswith("\n"):
            buffer += "\n"

        for detector in detectors:
            result = detector(buffer, from_index)
            if result is None:
                continue
            if result is INCOMPLETE:
                if final:
                    continue
                return INCOMPLETE
            if result.match_length <= 0:
                raise DetectorError(
                    f"zero-length {result.block_type.value} match",
                    detector=_matcher_name(detector),
                    offset=self._state.discarded + from_index,
                )
            return result
        return None

    def _detect_child(self, from_index: int, final: bool) -> DetectResult:
        if len(self._state.active_blocks) >= MAX_BLOCK_DEPTH:
            return None
        return self._resolve(self._detect(CHILD_DETECTORS, from_index, final))

    def _resolve(self, result: DetectResult) -> DetectResult:
        """Give up on an undecided line once it holds more than max_lookahead."""
        if result is not INCOMPLETE:
            return result
        return None if self._lookahead_exceeded() else INCOMPLETE

    def _lookahead_exceeded(self) -> bool:
        """True once the held, unconsumed input is longer than max_lookahead."""
        held = len(self._state.buffer) - self._state.processed_index
        if held <= self._config.max_lookahead:
            return False
        logger.debug(
            "Held %d characters at offset %d without a decision; treating as text",
            held,
            self._state.absolute_index,
        )
        return True

    # =========================================================================
    # Block lifecycle
    # =========================================================================

    def _begin(
        self,
        block_type: BlockType,
        metadata: dict[str, object] | None = None,
        *,
        start_marker: str = "",
        end_marker: str | None = None,
        offset: int = 0,
    ) -> BlockState:
        state = self._state
        self._flush_deltas()
        block = BlockState(
            id=state.generate_id(),
            type=block_type,
            start_marker=start_marker,
            end_marker=end_marker,
            content_start_index=state.processed_index + offset,
            source_offset=state.absolute_index + offset,
            metadata=dict(metadata or {}),
        )
        state.active_blocks.append(block)
        self._events.append(Begin(block.id, block_type, dict(block.metadata) or None))
        return block

    def _open(self, detected: DetectedBlock) -> None:
        state = self._state
        length = min(detected.match_length, len(state.buffer) - state.processed_index)
        block = self._begin(
            detected.block_type,
            detected.metadata,
            start_marker=detected.start_marker,
            end_marker=detected.end_marker,
            offset=length,
        )
        self._consume(length)

        if detected.closed:
            block.append(detected.content or "")
            block.terminated = True
            self._close(block)
            return

        if detected.content:
            block.append(detected.content)

        if block.end_marker is not None:
            block.indent = int(block.metadata.get("indent", 0))
            block.end_pattern = create_end_marker_regex(
                block.end_marker,
                max_indent=3,
                extendable=block.type is BlockType.CODE,
            )
        elif block.type is BlockType.TABLE:
            self._annotate(
                block,
                "table_row",
                (0, len(block.start_marker)),
                {
                    "cells": list(block.metadata.get("headers", [])),
                    "header": True,
                    "row": 0,
                },
            )
        else:
            block.indent = int(block.metadata.get("content_indent", 0))
            block.line_open = True

    def _open_quote(self, metadata: dict[str, object] | None) -> BlockState:
        self._close_all()
        return self._begin(BlockType.QUOTE, metadata or {"depth": 1})

    def _close(self, block: BlockState) -> None:
        self._flush_deltas()
        if self._config.inline_annotations and block.type in _INLINE_BLOCKS:
            for span in self._inline_spans(block.content):
                self._events.append(
                    Annotation(block.id, span.kind, (span.start, span.end), _span_payload(span))
                )

        incomplete = block.end_marker is not None and not block.terminated
        if incomplete:
            logger.debug("Closing unterminated %s block %s", block.type.value, block.id)
        self._events.append(End(block.id, self._final_content(block), incomplete))
        self._state.active_blocks.remove(block)

    def _close_from(self, block: BlockState) -> None:
        """Close block and everything nested in it, innermost first."""
        active = self._state.active_blocks
        while block in active:
            self._close(active[-1])

    def _close_all(self) -> None:
        active = self._state.active_blocks
        while active:
            self._close(active[-1])

    def _final_content(self, block: BlockState) -> str:
        content = block.content
        if self._config.preserve_whitespace:
            return content
        if block.type is BlockType.CODE:
            return "\n".join(dedent_lines(content.split("\n"))).strip("\n")
        return content.strip()

    def _inline_spans(self, content: str) -> list[InlineSpan]:
        spans = find_all_inline_emphasis(content)
        links = find_links(content)
        # Code spans win over links, links over emphasis: crossing spans are dropped.
        code = [span for span in spans if span.kind == "code"]
        links = [link for link in links if not any(_crosses(link, c) for c in code)]
        spans = [span for span in spans if not any(_crosses(span, link) for link in links)]
        spans.extend(links)
        for matcher in self._inline_matchers:
            spans.extend(matcher(content))
        spans.sort(key=lambda span: (span.start, -span.end))
        return spans

    # =========================================================================
    # Event output
    # =========================================================================

    def _annotate(
        self,
        block: BlockState,
        kind: str,
        span: tuple[int, int],
        payload: dict[str, object],
    ) -> None:
        self._flush(block)
        self._events.append(Annotation(block.id, kind, span, payload))

    def _flush(self, block: BlockState) -> None:
        pending = block.pending_delta()
        if pending:
            self._events.append(Delta(block.id, pending))
            block.last_emitted_length = len(block.content)

    def _flush_deltas(self) -> None:
        for block in self._state.active_blocks:
            self._flush(block)

    def _take_events(self) -> list[ParseEvent]:
        events = self._events
        self._events = []
        return events


__all__ = [
    "MAX_BLOCK_DEPTH",
    "StreamingParser",
]
