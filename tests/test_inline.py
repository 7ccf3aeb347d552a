"""Tests for inline span detection: emphasis, strong, strikethrough, code, links."""

from hypothesis import given, settings
from hypothesis import strategies as st

from goteo.inline import (
    InlineSpan,
    detect_emphasis,
    detect_inline_code,
    detect_inline_emphasis,
    detect_link,
    detect_strikethrough,
    detect_strong,
    find_all_inline_emphasis,
    find_links,
)


def _kinds(text: str) -> list[tuple[str, int, int]]:
    return [(s.kind, s.start, s.end) for s in find_all_inline_emphasis(text)]


class TestSingleDetectors:
    """Detectors anchored at a start index."""

    def test_strong(self) -> None:
        assert detect_strong("**bold**") == InlineSpan("strong", 0, 8, "bold", "**")

    def test_strong_underscore(self) -> None:
        span = detect_strong("__bold__")
        assert span is not None
        assert span.marker == "__"
        assert span.content == "bold"

    def test_strong_requires_non_space_after_opener(self) -> None:
        assert detect_strong("** bold**") is None

    def test_emphasis(self) -> None:
        assert detect_emphasis("*it*") == InlineSpan("emphasis", 0, 4, "it", "*")

    def test_emphasis_leaves_double_marker_to_strong(self) -> None:
        assert detect_emphasis("**b**") is None

    def test_closer_preceded_by_space_does_not_close(self) -> None:
        assert detect_emphasis("*a *") is None

    def test_start_index(self) -> None:
        span = detect_emphasis("x *y*", 2)
        assert span is not None
        assert (span.start, span.end) == (2, 5)

    def test_end_index_bounds_search(self) -> None:
        assert detect_emphasis("*abc*", 0, 4) is None

    def test_strikethrough(self) -> None:
        assert detect_strikethrough("~~gone~~") == InlineSpan(
            "strikethrough", 0, 8, "gone", "~~"
        )

    def test_triple_tilde_is_not_strikethrough(self) -> None:
        assert detect_strikethrough("~~~x~~~") is None

    def test_inline_code(self) -> None:
        assert detect_inline_code("`x` y") == InlineSpan("code", 0, 3, "x", "`")

    def test_inline_code_matching_run_length(self) -> None:
        span = detect_inline_code("``a ` b``")
        assert span is not None
        assert span.content == "a ` b"
        assert span.end == 9

    def test_unclosed_code(self) -> None:
        assert detect_inline_code("`abc") is None

    def test_inline_emphasis_dispatches_by_character(self) -> None:
        assert detect_inline_emphasis("`c`").kind == "code"
        assert detect_inline_emphasis("~~s~~").kind == "strikethrough"
        assert detect_inline_emphasis("**b**").kind == "strong"
        assert detect_inline_emphasis("*e*").kind == "emphasis"
        assert detect_inline_emphasis("plain") is None

    def test_content_offsets(self) -> None:
        span = detect_strong("**bold**")
        assert span is not None
        assert (span.content_start, span.content_end) == (2, 6)


class TestFindAll:
    """find_all_inline_emphasis over whole texts."""

    def test_nested_strong_and_emphasis(self) -> None:
        assert _kinds("**bold *and italic* text**") == [
            ("strong", 0, 26),
            ("emphasis", 7, 19),
        ]

    def test_sequential_spans(self) -> None:
        assert _kinds("*a* and **b**") == [("emphasis", 0, 3), ("strong", 8, 13)]

    def test_intraword_underscore_ignored(self) -> None:
        assert _kinds("snake_case_name") == []

    def test_intraword_asterisk_allowed(self) -> None:
        assert _kinds("un*frigging*believable") == [("emphasis", 2, 12)]

    def test_code_span_content_not_scanned(self) -> None:
        assert _kinds("`*a*` and *b*") == [("code", 0, 5), ("emphasis", 10, 13)]

    def test_escaped_delimiters(self) -> None:
        assert _kinds(r"\*not\*") == []

    def test_unclosed_delimiter(self) -> None:
        assert _kinds("**never closed") == []

    def test_deep_delimiter_run_terminates(self) -> None:
        text = "*" * 500
        for span in find_all_inline_emphasis(text):
            assert 0 <= span.start < span.end <= len(text)

    @given(st.text(alphabet="*_~`ab \\", max_size=60))
    @settings(max_examples=300)
    def test_spans_are_nested_or_disjoint(self, text: str) -> None:
        spans = find_all_inline_emphasis(text)

        for span in spans:
            assert 0 <= span.start < span.end <= len(text)
        for i, a in enumerate(spans):
            for b in spans[i + 1 :]:
                disjoint = a.end <= b.start or b.end <= a.start
                nested = a.start <= b.start and b.end <= a.end
                assert disjoint or nested

    @given(st.text(alphabet="*_~`ab \\", max_size=60))
    @settings(max_examples=100)
    def test_sorted_outer_first(self, text: str) -> None:
        spans = find_all_inline_emphasis(text)

        assert spans == sorted(spans, key=lambda s: (s.start, -s.end))


class TestLinks:
    """Link and image spans."""

    def test_link(self) -> None:
        span = detect_link("[docs](https://x.io)")
        assert span is not None
        assert span.kind == "link"
        assert span.content == "docs"
        assert span.payload == {"url": "https://x.io", "title": None}

    def test_link_with_title(self) -> None:
        span = detect_link('[a](/b "Title")')
        assert span is not None
        assert span.payload["title"] == "Title"

    def test_image(self) -> None:
        span = detect_link("![alt](img.png)")
        assert span is not None
        assert span.kind == "image"
        assert span.content == "alt"

    def test_not_a_link(self) -> None:
        assert detect_link("[docs] (x)") is None

    def test_find_links_in_text(self) -> None:
        text = "see [a](/a) and [b](/b)"
        assert [(s.start, s.end) for s in find_links(text)] == [(4, 11), (16, 23)]

    def test_links_inside_code_spans_ignored(self) -> None:
        assert find_links("`[a](/a)`") == []

    def test_escaped_link_ignored(self) -> None:
        assert find_links(r"\[a](/a)") == []
