"""Teach the parser new constructs with plain callables."""

import re

from goteo import (
    INCOMPLETE,
    Annotation,
    BlockType,
    DetectedBlock,
    InlineSpan,
    StreamConfig,
    StreamingParser,
)
from goteo.detectors import current_line

MENTION = re.compile(r"@(\w+)")


def detect_admonition(buffer, from_index):
    """'!!! note' opens a fenced block that runs until a '!!!' line."""
    line, complete = current_line(buffer, from_index)
    if not "!!!".startswith(line[:3]):
        return None
    if not complete:
        return INCOMPLETE
    if not line.startswith("!!!"):
        return None
    kind = line[3:].strip() or "note"
    return DetectedBlock(
        block_type=BlockType.CODE,
        match_length=len(line) + 1,
        start_marker=line,
        end_marker="!!!",
        metadata={"language": "admonition", "kind": kind},
    )


def find_mentions(text):
    return [InlineSpan("mention", m.start(), m.end(), m.group(1), "@") for m in MENTION.finditer(text)]


config = StreamConfig(
    before_matchers=(detect_admonition,),
    inline_matchers=(find_mentions,),
)
parser = StreamingParser(config)

source = "!!! warning\nBack up first.\n!!!\n\nThanks @ana and @li!\n"
events = parser.feed(source) + parser.finalize()

for event in events:
    if isinstance(event, Annotation):
        print("annotation:", event.kind, event.range, event.payload)
    else:
        print(event)
