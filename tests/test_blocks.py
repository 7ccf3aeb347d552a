"""Tests for BlockAccumulator."""

from goteo import (
    BlockAccumulator,
    BlockType,
    Delta,
    End,
    ParsedTable,
    StreamingParser,
    parse_stream,
)


class TestBlockAccumulator:
    """Folding events into block records."""

    def test_finished_blocks_in_order(self) -> None:
        blocks = BlockAccumulator()
        blocks.extend(parse_stream(["# Title\n\nSome ", "*text*\n"]))

        assert [(b.type, b.content) for b in blocks.blocks] == [
            (BlockType.HEADING, "Title"),
            (BlockType.PARAGRAPH, "Some *text*"),
        ]
        assert blocks.blocks[0].metadata == {"level": 1}
        assert [a.kind for a in blocks.blocks[1].annotations] == ["emphasis"]

    def test_snapshot_includes_open_blocks(self) -> None:
        parser, blocks = StreamingParser(), BlockAccumulator()

        blocks.extend(parser.feed("# Title\n\nSome *te"))
        snapshot = blocks.snapshot()

        assert [(b.type, b.finished) for b in snapshot] == [
            (BlockType.HEADING, True),
            (BlockType.PARAGRAPH, False),
        ]
        assert snapshot[1].content == "Some *te"
        assert blocks.blocks == snapshot[:1]

    def test_snapshot_copies_are_independent(self) -> None:
        parser, blocks = StreamingParser(), BlockAccumulator()
        blocks.extend(parser.feed("open paragraph"))

        snapshot = blocks.snapshot()
        snapshot[0].content = "changed"

        blocks.extend(parser.feed(" more"))
        assert blocks.snapshot()[0].content == "open paragraph more"

    def test_incomplete_code_block(self) -> None:
        blocks = BlockAccumulator()
        blocks.extend(parse_stream(["```py\nx = 1\n"]))

        (block,) = blocks.blocks
        assert block.type is BlockType.CODE
        assert block.incomplete is True
        assert block.content == "x = 1"
        assert block.metadata["language"] == "py"

    def test_table_cells_parsed(self) -> None:
        blocks = BlockAccumulator()
        blocks.extend(parse_stream(["| a | b |\n|---|:-:|\n| 1 | 2 |\n"]))

        (block,) = blocks.blocks
        assert block.table == ParsedTable(
            headers=["a", "b"],
            alignments=[None, "center"],
            rows=[["1", "2"]],
        )
        assert [a.payload["row"] for a in block.annotations] == [0, 1]

    def test_events_for_unknown_ids_ignored(self) -> None:
        blocks = BlockAccumulator()

        blocks.handle(Delta("md-9", "stray"))
        blocks.handle(End("md-9", "stray"))

        assert blocks.snapshot() == []

    def test_clear(self) -> None:
        blocks = BlockAccumulator()
        blocks.extend(parse_stream(["a\n\nb"]))
        assert len(blocks.blocks) == 2

        blocks.clear()

        assert blocks.blocks == []
        assert blocks.snapshot() == []
