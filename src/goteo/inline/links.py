"""Inline link and image detection: [text](url "title") and ![alt](src)."""

from __future__ import annotations

import re

from goteo.inline.emphasis import InlineSpan, find_all_inline_emphasis

_LINK = re.compile(
    r"(?P<bang>!?)\[(?P<text>[^\]\n]*)\]"
    r"\((?P<url>[^)\s]*)(?:\s+\"(?P<title>[^\"\n]*)\")?\)"
)


def detect_link(text: str, start_index: int = 0) -> InlineSpan | None:
    """Detect a link or image starting exactly at start_index."""
    m = _LINK.match(text, start_index)
    if m is None:
        return None

    kind = "image" if m.group("bang") else "link"
    payload = {"url": m.group("url"), "title": m.group("title")}
    return InlineSpan(kind, m.start(), m.end(), m.group("text"), payload=payload)


def find_links(text: str) -> list[InlineSpan]:
    """Find links and images outside code spans, in order of appearance."""
    code_ranges = [
        (span.start, span.end)
        for span in find_all_inline_emphasis(text)
        if span.kind == "code"
    ]

    links: list[InlineSpan] = []
    for m in _LINK.finditer(text):
        if m.start() > 0 and text[m.start() - 1] == "\\":
            continue
        if any(start <= m.start() < end for start, end in code_ranges):
            continue
        link = detect_link(text, m.start())
        if link is not None:
            links.append(link)
    return links


__all__ = [
    "detect_link",
    "find_links",
]
