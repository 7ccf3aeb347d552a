"""Tests for goteo.text helpers."""

import re

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from goteo.text import (
    LineEndingNormalizer,
    PatternMatch,
    could_complete_end_marker,
    count_leading_whitespace,
    create_end_marker_regex,
    dedent_lines,
    escape_regex,
    extract_lines,
    find_pattern,
    is_whitespace,
    leading_indent,
    normalize_line_endings,
    parse_code_block_metadata,
    starts_with_at,
    strip_indent,
)


class TestSearching:
    """find_pattern, starts_with_at, extract_lines."""

    def test_literal_pattern(self) -> None:
        assert find_pattern("abcabc", "c", 3) == PatternMatch(5, "c")

    def test_regex_pattern(self) -> None:
        assert find_pattern("a1b22", re.compile(r"\d+"), 2) == PatternMatch(3, "22")

    def test_not_found(self) -> None:
        assert find_pattern("abc", "z") is None
        assert find_pattern("abc", re.compile(r"\d")) is None

    def test_starts_with_at(self) -> None:
        assert starts_with_at("hello", "ll", 2)
        assert not starts_with_at("hello", "ll", 1)

    def test_extract_lines(self) -> None:
        assert extract_lines("a\nb\nc", 0, 3) == ["a", "b"]

    def test_extract_empty_range(self) -> None:
        assert extract_lines("abc", 1, 1) == [""]


class TestWhitespace:
    """Whitespace and indentation helpers."""

    def test_is_whitespace(self) -> None:
        assert is_whitespace(" ")
        assert is_whitespace("\t")
        assert not is_whitespace("x")
        assert not is_whitespace("  ")

    def test_count_leading_whitespace(self) -> None:
        assert count_leading_whitespace(" \t x") == 3
        assert count_leading_whitespace("x") == 0

    def test_leading_indent_ignores_blank_lines(self) -> None:
        assert leading_indent(["    a", "", "  ", "      b"]) == 4
        assert leading_indent(["", " "]) == 0

    def test_dedent_lines(self) -> None:
        assert dedent_lines(["    a", "", "      b"]) == ["a", "", "  b"]

    def test_dedent_without_common_indent(self) -> None:
        lines = ["a", "  b"]
        result = dedent_lines(lines)
        assert result == lines
        assert result is not lines

    @given(st.lists(st.text(alphabet="ab ", max_size=12), max_size=8))
    @settings(max_examples=200)
    def test_dedent_round_trip(self, lines: list[str]) -> None:
        indent = leading_indent(lines)
        dedented = dedent_lines(lines)

        restored = [" " * indent + line if line.strip() else line for line in dedented]
        assert restored == lines

    def test_strip_indent(self) -> None:
        assert strip_indent("    x", 2) == "  x"
        assert strip_indent(" x", 3) == "x"
        assert strip_indent("\tx", 2) == "\tx"


class TestMarkers:
    """Regex escaping and end marker patterns."""

    def test_escape_regex(self) -> None:
        assert escape_regex("a.b*c") == r"a\.b\*c"
        assert escape_regex("$$") == r"\$\$"
        assert escape_regex("a b") == "a b"

    @given(st.text(max_size=40))
    @settings(max_examples=200)
    def test_escaped_text_matches_itself(self, text: str) -> None:
        assert re.fullmatch(escape_regex(text), text, re.DOTALL) is not None

    def test_code_fence_pattern(self) -> None:
        pattern = create_end_marker_regex("```", max_indent=3, extendable=True)

        assert pattern.match("```")
        assert pattern.match("   ````  ")
        assert not pattern.match("    ```")
        assert not pattern.match("```py")

    def test_math_pattern_is_exact(self) -> None:
        pattern = create_end_marker_regex("$$")

        assert pattern.match("$$")
        assert pattern.match("$$ \t")
        assert not pattern.match(" $$")
        assert not pattern.match("$$$")

    @pytest.mark.parametrize(
        ("partial", "expected"),
        [
            ("", True),
            ("``", True),
            ("```  ", True),
            ("```x", False),
            ("~", False),
            ("   `", True),
            ("    `", False),
        ],
    )
    def test_could_complete_code_fence(self, partial: str, expected: bool) -> None:
        assert could_complete_end_marker(partial, "```", max_indent=3) is expected

    def test_could_complete_extendable(self) -> None:
        assert could_complete_end_marker("`````", "```", extendable=True)
        assert not could_complete_end_marker("`````", "```")


class TestLineEndings:
    """CRLF and CR normalization."""

    def test_normalize(self) -> None:
        assert normalize_line_endings("a\r\nb\rc\n") == "a\nb\nc\n"

    def test_crlf_split_across_chunks(self) -> None:
        normalizer = LineEndingNormalizer()

        assert normalizer.feed("a\r") == "a"
        assert normalizer.feed("\nb") == "\nb"
        assert normalizer.flush() == ""

    def test_lone_cr_followed_by_text(self) -> None:
        normalizer = LineEndingNormalizer()

        assert normalizer.feed("a\r") + normalizer.feed("b") == "a\nb"

    def test_trailing_cr_flushed(self) -> None:
        normalizer = LineEndingNormalizer()
        normalizer.feed("a\r")

        assert normalizer.flush() == "\n"
        assert normalizer.flush() == ""


class TestCodeBlockMetadata:
    """Fence info string parsing."""

    def test_language_and_pairs(self) -> None:
        assert parse_code_block_metadata("python title=main.py") == {
            "language": "python",
            "title": "main.py",
        }

    def test_empty(self) -> None:
        assert parse_code_block_metadata("") == {}
        assert parse_code_block_metadata("   ") == {}

    def test_malformed_tokens_dropped(self) -> None:
        assert parse_code_block_metadata("js a=b=c =x flag k=v") == {
            "language": "js",
            "k": "v",
        }
