"""Tests for RawText materialization and boundary-span backfill.

Three tiers, in preference order:
1. Source text between the surrounding boundaries (exact whitespace)
2. Source text of the run itself
3. Canonical token text

Python 3.13+.
"""

from __future__ import annotations

from tagtree import parse_strict
from tagtree.diagnostics import Span
from tagtree.syntax.ast import Element, Fragment, RawText, Text
from tagtree.syntax.raw_text import set_context_spans
from tagtree.syntax.source import SourceText
from tagtree.syntax.tokens import Ident, Literal, Punct


def _raw_child(source: str) -> RawText:
    (node,) = parse_strict(source)
    assert isinstance(node, Element | Fragment)
    (child,) = node.children
    assert isinstance(child, RawText)
    return child


class TestMaterializationTiers:
    """to_string_best() and its fallbacks."""

    def test_whitespace_preserved_inside_element(self) -> None:
        """Tier 1: text between '>' and '<' is kept verbatim."""
        raw = _raw_child("<p> hello   world </p>")

        assert raw.to_string_best() == " hello   world "
        assert str(raw) == " hello   world "

    def test_inside_fragment(self) -> None:
        """Fragment bodies get boundary spans too."""
        raw = _raw_child("<>  a  b  </>")

        assert raw.to_string_best() == "  a  b  "

    def test_between_siblings(self) -> None:
        """Boundaries may be sibling nodes."""
        (paragraph,) = parse_strict('<p>"x"  mid  dle  {y}</p>')

        raw = paragraph.children[1]
        assert isinstance(raw, RawText)
        assert raw.to_string_best() == "  mid  dle  "

    def test_multiline_run(self) -> None:
        """Line breaks inside a run are kept."""
        raw = _raw_child("<p>\n  one\n  two\n</p>")

        assert raw.to_string_best() == "\n  one\n  two\n"

    def test_top_level_run_uses_own_span(self) -> None:
        """Tier 2: at top level there is no boundary, so edges are trimmed."""
        first, _ = parse_strict("  hello ,   world  <br/>")

        assert isinstance(first, RawText)
        assert first.context_spans is None
        assert first.to_string_best() == "hello ,   world"

    def test_canonical_fallback_without_source(self) -> None:
        """Tier 3: without a source provider the tokens are re-stringified."""
        raw = RawText((Ident("hello"), Punct(","), Ident("world")))

        assert raw.to_source_text(with_whitespace=True) is None
        assert raw.to_source_text(with_whitespace=False) is None
        assert raw.to_string_best() == "hello , world"

    def test_to_token_stream_string(self) -> None:
        """Canonical text normalizes whitespace regardless of source."""
        raw = _raw_child("<p> hello   world </p>")

        assert raw.to_token_stream_string() == "hello world"

    def test_to_source_text_tiers(self) -> None:
        """with_whitespace selects between tier 1 and tier 2."""
        raw = _raw_child("<p> a b </p>")

        assert raw.to_source_text(with_whitespace=True) == " a b "
        assert raw.to_source_text(with_whitespace=False) == "a b"

    def test_unjoinable_spans_fall_back(self) -> None:
        """Spans outside the source cannot be joined; tier 2 is used."""
        source = SourceText("ab")
        raw = RawText((Ident("a", span=Span(0, 1)),), source=source)
        raw = raw.with_context_spans(Span(0, 0), Span(50, 51))

        assert raw.to_source_text(with_whitespace=True) is None
        assert raw.to_string_best() == "a"


class TestSetContextSpans:
    """Sliding-window backfill over (before, children..., after)."""

    def test_spans_from_neighbours(self) -> None:
        """Each run gets the span of the nodes on either side."""
        first = RawText((Ident("a", span=Span(3, 4)),))
        text = Text(Literal('"t"', span=Span(5, 8)))
        second = RawText((Ident("b", span=Span(9, 10)),))

        result = set_context_spans(Span(2, 3), [first, text, second], Span(11, 12))

        assert result[0].context_spans == (Span(2, 3), Span(5, 8))
        assert result[1] is text
        assert result[2].context_spans == (Span(5, 8), Span(11, 12))

    def test_missing_boundary_leaves_run_untouched(self) -> None:
        """Runs at an unbounded edge keep context_spans None."""
        run = RawText((Ident("a", span=Span(0, 1)),))

        (result,) = set_context_spans(None, [run], Span(2, 3))

        assert result.context_spans is None

    def test_equality_ignores_context(self) -> None:
        """Context spans and source do not affect node equality."""
        run = RawText((Ident("a"),))

        assert run.with_context_spans(Span(0, 0), Span(1, 1)) == run

    def test_empty_children(self) -> None:
        """No children, nothing to do."""
        assert set_context_spans(Span(0, 1), [], Span(1, 2)) == ()
