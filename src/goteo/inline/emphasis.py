"""Inline span detection: strong, emphasis, strikethrough and code.

Works on finished text (a closed block's content), so nothing here has to
deal with partial input.

Each primitive answers one question: does a span of its kind start exactly at
start_index? The closer search skips backslash escapes and code spans, and
steps over nested spans of other kinds, so the innermost pair always closes
first. find_all_inline_emphasis walks the text and recurses into span
contents.

Delimiter rules (a simplification of the CommonMark flanking rules):
- An opener must be followed by a non-whitespace character
- A closer must be preceded by a non-whitespace character
- "_" delimiters cannot open or close inside a word
- Spans must have non-empty content

Complexity:
Detections are memoized per (position, marker, end), which bounds a scan at
O(n^2) even for inputs full of unmatched delimiters.

Thread Safety:
All functions are pure and safe to call concurrently.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from goteo.text import is_whitespace, starts_with_at

MAX_INLINE_DEPTH = 8

_DELIMITER_CHARS = frozenset("*_~`")
_ESCAPABLE = frozenset("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")


@dataclass(frozen=True, slots=True)
class InlineSpan:
    """A recognized inline span.

    Attributes:
        kind: "strong", "emphasis", "strikethrough", "code", "link", or a
            custom kind
        start: Offset of the opening delimiter
        end: Offset just past the closing delimiter
        content: Text between the delimiters
        marker: The delimiter ("**", "_", "~~", "``"...)
        payload: Extra kind-specific data (link url and title)
    """

    kind: str
    start: int
    end: int
    content: str
    marker: str = ""
    payload: dict[str, Any] = field(default_factory=dict)

    @property
    def content_start(self) -> int:
        return self.start + len(self.marker)

    @property
    def content_end(self) -> int:
        return self.end - len(self.marker)


class _Scanner:
    """Shared state for one detection pass over a text."""

    __slots__ = ("_memo", "text")

    def __init__(self, text: str) -> None:
        self.text = text
        self._memo: dict[tuple[int, str, int], InlineSpan | None] = {}

    def code(self, start: int, end: int) -> InlineSpan | None:
        text = self.text
        if start >= end or text[start] != "`":
            return None
        if start > 0 and text[start - 1] == "`":
            return None

        run = _run_length(text, start, end, "`")
        pos = start + run
        while pos < end:
            if text[pos] != "`":
                pos += 1
                continue
            closing = _run_length(text, pos, end, "`")
            if closing == run:
                content = text[start + run : pos]
                if not content:
                    return None
                return InlineSpan("code", start, pos + run, content, "`" * run)
            pos += closing
        return None

    def delimited(
        self, start: int, end: int, marker: str, kind: str, depth: int
    ) -> InlineSpan | None:
        key = (start, marker, end)
        if key in self._memo:
            return self._memo[key]
        span = self._scan_delimited(start, end, marker, kind, depth)
        self._memo[key] = span
        return span

    def _scan_delimited(
        self, start: int, end: int, marker: str, kind: str, depth: int
    ) -> InlineSpan | None:
        text = self.text
        if not starts_with_at(text, marker, start) or not self._can_open(start, end, marker):
            return None

        content_start = start + len(marker)
        pos = content_start
        while pos < end:
            char = text[pos]
            if char == "\\" and pos + 1 < end and text[pos + 1] in _ESCAPABLE:
                pos += 2
                continue
            if char == "`":
                code = self.code(pos, end)
                pos = code.end if code else pos + _run_length(text, pos, end, "`")
                continue
            if (
                starts_with_at(text, marker, pos)
                and pos + len(marker) <= end
                and self._can_close(pos, end, marker, content_start)
            ):
                return InlineSpan(kind, start, pos + len(marker), text[content_start:pos], marker)
            if char in _DELIMITER_CHARS and depth < MAX_INLINE_DEPTH:
                nested = self.any(pos, end, depth + 1)
                if nested is not None:
                    pos = nested.end
                    continue
            pos += 1
        return None

    def any(self, start: int, end: int, depth: int = 0) -> InlineSpan | None:
        """Try every kind at start, in priority order."""
        text = self.text
        if start >= end:
            return None
        char = text[start]
        if char == "`":
            return self.code(start, end)
        if char == "~":
            return self.strikethrough(start, end, depth)
        if char in "*_":
            return self.strong(start, end, depth) or self.emphasis(start, end, depth)
        return None

    def strikethrough(self, start: int, end: int, depth: int = 0) -> InlineSpan | None:
        if starts_with_at(self.text, "~~~", start):
            return None
        return self.delimited(start, end, "~~", "strikethrough", depth)

    def strong(self, start: int, end: int, depth: int = 0) -> InlineSpan | None:
        if start >= end or self.text[start] not in "*_":
            return None
        return self.delimited(start, end, self.text[start] * 2, "strong", depth)

    def emphasis(self, start: int, end: int, depth: int = 0) -> InlineSpan | None:
        if start >= end or self.text[start] not in "*_":
            return None
        marker = self.text[start]
        if starts_with_at(self.text, marker * 2, start):
            return None
        return self.delimited(start, end, marker, "emphasis", depth)

    def _can_open(self, start: int, end: int, marker: str) -> bool:
        text = self.text
        after = start + len(marker)
        if after >= end or is_whitespace(text[after]):
            return False
        if marker[0] == "_" and start > 0 and text[start - 1].isalnum():
            return False
        return True

    def _can_close(self, pos: int, end: int, marker: str, content_start: int) -> bool:
        text = self.text
        if pos <= content_start or is_whitespace(text[pos - 1]):
            return False
        after = pos + len(marker)
        if marker[0] == "_" and after < end and text[after].isalnum():
            return False
        return True


def _run_length(text: str, start: int, end: int, char: str) -> int:
    pos = start
    while pos < end and text[pos] == char:
        pos += 1
    return pos - start


def _bounds(text: str, end_index: int | None) -> int:
    return len(text) if end_index is None else min(end_index, len(text))


def detect_inline_code(
    text: str, start_index: int = 0, end_index: int | None = None
) -> InlineSpan | None:
    """Detect a code span opening at start_index.

    The closing backtick run must have the same length as the opening one.

    Example:
        >>> detect_inline_code("`x` y").content
        'x'
    """
    return _Scanner(text).code(start_index, _bounds(text, end_index))


def detect_strikethrough(
    text: str, start_index: int = 0, end_index: int | None = None
) -> InlineSpan | None:
    """Detect "~~text~~" opening at start_index."""
    return _Scanner(text).strikethrough(start_index, _bounds(text, end_index))


def detect_strong(
    text: str, start_index: int = 0, end_index: int | None = None
) -> InlineSpan | None:
    """Detect "**text**" or "__text__" opening at start_index."""
    return _Scanner(text).strong(start_index, _bounds(text, end_index))


def detect_emphasis(
    text: str, start_index: int = 0, end_index: int | None = None
) -> InlineSpan | None:
    """Detect "*text*" or "_text_" opening at start_index.

    A doubled delimiter at start_index is left to detect_strong.
    """
    return _Scanner(text).emphasis(start_index, _bounds(text, end_index))


def detect_inline_emphasis(
    text: str, start_index: int = 0, end_index: int | None = None
) -> InlineSpan | None:
    """Try code, strikethrough, strong and emphasis at start_index, in that order."""
    return _Scanner(text).any(start_index, _bounds(text, end_index))


def find_all_inline_emphasis(
    text: str, start_index: int = 0, end_index: int | None = None
) -> list[InlineSpan]:
    """Find every inline span in text[start_index:end_index].

    Returns:
        Spans sorted by start, outer spans before the spans nested in them.
        Any two spans are either disjoint or properly nested.

    Example:
        >>> [(s.kind, s.start, s.end) for s in find_all_inline_emphasis("**a *b* c**")]
        [('strong', 0, 11), ('emphasis', 4, 7)]
    """
    scanner = _Scanner(text)
    spans: list[InlineSpan] = []
    _collect(scanner, start_index, _bounds(text, end_index), spans, 0)
    spans.sort(key=lambda span: (span.start, -span.end))
    return spans


def _collect(
    scanner: _Scanner, start: int, end: int, spans: list[InlineSpan], depth: int
) -> None:
    text = scanner.text
    pos = start
    while pos < end:
        char = text[pos]
        if char == "\\" and pos + 1 < end and text[pos + 1] in _ESCAPABLE:
            pos += 2
            continue
        if char in _DELIMITER_CHARS:
            span = scanner.any(pos, end)
            if span is not None:
                spans.append(span)
                if span.kind != "code" and depth < MAX_INLINE_DEPTH:
                    _collect(scanner, span.content_start, span.content_end, spans, depth + 1)
                pos = span.end
                continue
        pos += 1


__all__ = [
    "MAX_INLINE_DEPTH",
    "InlineSpan",
    "detect_emphasis",
    "detect_inline_code",
    "detect_inline_emphasis",
    "detect_strikethrough",
    "detect_strong",
    "find_all_inline_emphasis",
]
