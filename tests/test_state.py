"""Tests for parser state, block state and buffer compaction."""

import logging

import pytest

from goteo import StreamConfig
from goteo.events import BlockType
from goteo.state import BlockState, ParserState, compact


class TestBlockState:
    """Content accumulation and delta bookkeeping."""

    def test_pending_break_released_by_next_text(self) -> None:
        block = BlockState(id="md-1", type=BlockType.PARAGRAPH)
        block.append("one")
        block.pending_break = "\n"

        assert block.content == "one"
        block.append("two")
        assert block.content == "one\ntwo"
        assert block.pending_break == ""

    def test_empty_append_keeps_break_pending(self) -> None:
        block = BlockState(id="md-1", type=BlockType.PARAGRAPH, content="a")
        block.pending_break = "\n"

        block.append("")

        assert block.content == "a"
        assert block.pending_break == "\n"

    def test_pending_delta(self) -> None:
        block = BlockState(id="md-1", type=BlockType.CODE, content="abc")
        block.last_emitted_length = 1

        assert block.pending_delta() == "bc"


class TestParserState:
    """Ids, top of stack, reset."""

    def test_generate_id(self) -> None:
        state = ParserState(config=StreamConfig(id_prefix="doc"))

        assert [state.generate_id() for _ in range(3)] == ["doc-1", "doc-2", "doc-3"]

    def test_top(self) -> None:
        state = ParserState(config=StreamConfig())
        assert state.top is None

        block = BlockState(id="md-1", type=BlockType.QUOTE)
        state.active_blocks.append(block)
        assert state.top is block

    def test_reset_keeps_id_counter(self) -> None:
        state = ParserState(config=StreamConfig())
        state.generate_id()
        state.buffer = "abc"
        state.processed_index = 2

        state.reset()

        assert state.buffer == ""
        assert state.processed_index == 0
        assert state.generate_id() == "md-2"


class TestCompact:
    """compact() releases consumed input."""

    def test_compacts_past_threshold(self) -> None:
        state = ParserState(config=StreamConfig(max_buffer_size=10))
        state.buffer = "x" * 50 + "tail"
        state.processed_index = 50

        assert compact(state) is True
        assert state.buffer == "tail"
        assert state.processed_index == 0
        assert state.discarded == 50
        assert state.absolute_index == 50

    def test_below_threshold(self) -> None:
        state = ParserState(config=StreamConfig(max_buffer_size=100))
        state.buffer = "x" * 50
        state.processed_index = 50

        assert compact(state) is False
        assert len(state.buffer) == 50

    def test_open_block_prevents_compaction(self) -> None:
        state = ParserState(config=StreamConfig(max_buffer_size=10))
        state.buffer = "x" * 50
        state.processed_index = 50
        state.active_blocks.append(BlockState(id="md-1", type=BlockType.CODE))

        assert compact(state) is False
        assert state.processed_index == 50

    def test_logs_compaction(self, caplog: pytest.LogCaptureFixture) -> None:
        state = ParserState(config=StreamConfig(max_buffer_size=1))
        state.buffer = "abc"
        state.processed_index = 3

        with caplog.at_level(logging.DEBUG, logger="goteo"):
            compact(state)

        assert "Compacted 3 characters" in caplog.text
