"""Inline span detection over finished block content."""

from goteo.inline.emphasis import (
    MAX_INLINE_DEPTH,
    InlineSpan,
    detect_emphasis,
    detect_inline_code,
    detect_inline_emphasis,
    detect_strikethrough,
    detect_strong,
    find_all_inline_emphasis,
)
from goteo.inline.links import detect_link, find_links

__all__ = [
    "MAX_INLINE_DEPTH",
    "InlineSpan",
    "detect_emphasis",
    "detect_inline_code",
    "detect_inline_emphasis",
    "detect_link",
    "detect_strikethrough",
    "detect_strong",
    "find_all_inline_emphasis",
    "find_links",
]
