"""Pure text helpers shared by the detectors and the streaming driver.

Everything here is stateless except LineEndingNormalizer, which carries a
single pending carriage return across chunk boundaries.

Example:
    >>> from goteo.text import dedent_lines, parse_code_block_metadata
    >>> dedent_lines(["  a", "    b"])
    ['a', '  b']
    >>> parse_code_block_metadata("python title=main.py")
    {'language': 'python', 'title': 'main.py'}
"""

from __future__ import annotations

import re
from typing import NamedTuple

_REGEX_SPECIAL = re.compile(r"[.*+?^${}()|[\]\\]")


class PatternMatch(NamedTuple):
    """Result of find_pattern: absolute offset and the matched text."""

    index: int
    match: str


def find_pattern(
    text: str, pattern: str | re.Pattern[str], start_index: int = 0
) -> PatternMatch | None:
    """Locate the next literal or regex match at or after start_index.

    Args:
        text: Text to search
        pattern: Literal string or compiled regular expression
        start_index: Offset to start searching from

    Returns:
        PatternMatch with the absolute offset, or None if not found.
    """
    if isinstance(pattern, str):
        index = text.find(pattern, start_index)
        if index == -1:
            return None
        return PatternMatch(index, pattern)

    m = pattern.search(text, start_index)
    if m is None:
        return None
    return PatternMatch(m.start(), m.group(0))


def extract_lines(text: str, start_index: int, end_index: int) -> list[str]:
    """Split text[start_index:end_index] on newlines.

    An empty range yields a single empty line, never an empty list.
    """
    return text[start_index:end_index].split("\n")


def starts_with_at(text: str, pattern: str, index: int) -> bool:
    """Check whether text contains pattern starting exactly at index."""
    return text.startswith(pattern, index)


def is_whitespace(char: str) -> bool:
    """True for a single whitespace character (space, tab, newline, CR...)."""
    return len(char) == 1 and char.isspace()


def count_leading_whitespace(line: str) -> int:
    """Count leading spaces and tabs. Each tab counts as one character."""
    count = 0
    for char in line:
        if char not in " \t":
            break
        count += 1
    return count


def leading_indent(lines: list[str]) -> int:
    """Minimum leading whitespace across non-blank lines (0 if all blank)."""
    indents = [count_leading_whitespace(line) for line in lines if line.strip()]
    return min(indents) if indents else 0


def dedent_lines(lines: list[str]) -> list[str]:
    """Strip the common leading indentation from every line.

    Blank lines pass through unchanged. Input with no common indentation is
    returned as a copy.

    Example:
        >>> dedent_lines(["    a", "", "      b"])
        ['a', '', '  b']
    """
    indent = leading_indent(lines)
    if indent == 0:
        return list(lines)
    return [line[indent:] if line.strip() else line for line in lines]


def escape_regex(text: str) -> str:
    r"""Escape regex metacharacters so text matches literally.

    Only ``.*+?^${}()|[]\`` are escaped; spaces and other punctuation pass
    through so the result stays readable in debug output.
    """
    return _REGEX_SPECIAL.sub(r"\\\g<0>", text)


def create_end_marker_regex(
    marker: str, *, max_indent: int = 0, extendable: bool = False
) -> re.Pattern[str]:
    """Build a line-anchored pattern for a literal closing marker.

    Args:
        marker: Literal marker, e.g. "```" or "$$" or "~~~~"
        max_indent: Number of leading spaces tolerated before the marker
        extendable: Also accept a longer run of the marker's last character
            (a "````" line closes a "```" fence)

    Returns:
        Compiled pattern that matches a whole line (trailing spaces/tabs ok).
    """
    indent = f" {{0,{max_indent}}}" if max_indent > 0 else ""
    body = escape_regex(marker)
    if extendable and marker:
        body += escape_regex(marker[-1]) + "*"
    return re.compile(f"^{indent}{body}[ \\t]*$")


def could_complete_end_marker(
    partial: str, marker: str, *, max_indent: int = 0, extendable: bool = False
) -> bool:
    """Check whether a partial line may still become a closing marker line.

    Mirrors create_end_marker_regex: True while the text seen so far is a
    prefix of some line that pattern would match.
    """
    stripped = partial.lstrip(" ")
    if len(partial) - len(stripped) > max_indent:
        return False
    if len(stripped) <= len(marker):
        return marker.startswith(stripped)
    if not stripped.startswith(marker):
        return False
    rest = stripped[len(marker) :]
    if extendable and marker:
        rest = rest.lstrip(marker[-1])
    return rest.strip(" \t") == ""


def strip_indent(line: str, columns: int) -> str:
    """Remove up to `columns` leading spaces."""
    index = 0
    while index < columns and index < len(line) and line[index] == " ":
        index += 1
    return line[index:]


def normalize_line_endings(text: str) -> str:
    """Collapse CRLF and lone CR to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


class LineEndingNormalizer:
    """Chunk-aware line ending normalization.

    A chunk ending in "\\r" may be the first half of a "\\r\\n" pair, so the
    carriage return is held back until the next chunk (or flush) decides.

    Example:
        >>> n = LineEndingNormalizer()
        >>> n.feed("a\\r") + n.feed("\\nb") + n.flush()
        'a\\nb'
    """

    __slots__ = ("_pending_cr",)

    def __init__(self) -> None:
        self._pending_cr = False

    def feed(self, chunk: str) -> str:
        if self._pending_cr:
            chunk = "\r" + chunk
            self._pending_cr = False
        if chunk.endswith("\r"):
            self._pending_cr = True
            chunk = chunk[:-1]
        return normalize_line_endings(chunk)

    def flush(self) -> str:
        if self._pending_cr:
            self._pending_cr = False
            return "\n"
        return ""


def parse_code_block_metadata(lang_spec: str) -> dict[str, str]:
    """Split a fence info string into language and key=value pairs.

    The first token is the language. Later tokens must be ``key=value`` with
    exactly one "=" and a non-empty key; anything else is dropped, since a
    streamed info string may be cut mid-token.

    Example:
        >>> parse_code_block_metadata("python titl")
        {'language': 'python'}
        >>> parse_code_block_metadata("")
        {}
    """
    tokens = lang_spec.split()
    if not tokens:
        return {}

    metadata: dict[str, str] = {"language": tokens[0]}
    for token in tokens[1:]:
        if token.count("=") != 1:
            continue
        key, value = token.split("=")
        if key:
            metadata[key] = value
    return metadata


__all__ = [
    "LineEndingNormalizer",
    "PatternMatch",
    "could_complete_end_marker",
    "count_leading_whitespace",
    "create_end_marker_regex",
    "dedent_lines",
    "escape_regex",
    "extract_lines",
    "find_pattern",
    "is_whitespace",
    "leading_indent",
    "normalize_line_endings",
    "parse_code_block_metadata",
    "starts_with_at",
    "strip_indent",
]
