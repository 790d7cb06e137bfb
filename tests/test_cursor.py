"""Tests for syntax/cursor.py: immutable TokenCursor and ParseResult.

Python 3.13+.
"""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from tagtree.diagnostics import Span
from tagtree.enums import Delimiter, Spacing, TokenKind
from tagtree.syntax.cursor import ParseResult, TokenCursor
from tagtree.syntax.source import SourceText
from tagtree.syntax.tokens import Group, Ident, Literal, Punct, TokenStream


def _tokens() -> tuple[Ident | Punct | Literal | Group, ...]:
    return (
        Punct("<", span=Span(0, 1)),
        Ident("a", span=Span(1, 2)),
        Punct("/", Spacing.JOINT, span=Span(3, 4)),
        Punct(">", span=Span(4, 5)),
    )


# ============================================================================
# Construction
# ============================================================================


class TestCursorConstruction:
    """Test TokenCursor construction."""

    def test_of_sequence(self) -> None:
        """of() accepts any sequence of token trees."""
        cursor = TokenCursor.of(list(_tokens()))

        assert cursor.pos == 0
        assert len(cursor.trees) == 4
        assert cursor.source is None

    def test_of_stream_keeps_source(self) -> None:
        """of() takes the source provider from a TokenStream."""
        source = SourceText("<a />")
        cursor = TokenCursor.of(TokenStream(_tokens(), source))

        assert cursor.source is source

    def test_explicit_source_wins(self) -> None:
        """An explicit source overrides the stream's."""
        other = SourceText("other")
        cursor = TokenCursor.of(TokenStream(_tokens(), SourceText("<a />")), other)

        assert cursor.source is other

    def test_nested_shares_source(self) -> None:
        """nested() opens a cursor over a group interior."""
        group = Group(Delimiter.BRACE, (Ident("x"),))
        source = SourceText("{x}")
        cursor = TokenCursor.of([group], source)

        inner = cursor.nested(group)

        assert inner.trees == (Ident("x"),)
        assert inner.source is source


# ============================================================================
# Movement
# ============================================================================


class TestCursorMovement:
    """Test advance, fork and commit."""

    def test_advance_is_immutable(self) -> None:
        """advance() returns a new cursor, the original is unchanged."""
        cursor = TokenCursor.of(_tokens())
        moved = cursor.advance()

        assert cursor.pos == 0
        assert moved.pos == 1

    def test_advance_clamps_at_eof(self) -> None:
        """advance() never moves past the end."""
        cursor = TokenCursor.of(_tokens()).advance(100)

        assert cursor.is_eof
        assert cursor.pos == 4

    def test_current_at_eof_raises(self) -> None:
        """current raises EOFError at end of input."""
        cursor = TokenCursor.of(())

        with pytest.raises(EOFError):
            _ = cursor.current

    def test_fork_and_commit(self) -> None:
        """A fork advanced independently can be committed."""
        cursor = TokenCursor.of(_tokens())
        fork = cursor.fork().advance(2)

        assert cursor.pos == 0
        assert cursor.advance_to(fork).pos == 2

    def test_commit_rejects_backwards_fork(self) -> None:
        """advance_to() refuses a fork behind the cursor."""
        cursor = TokenCursor.of(_tokens()).advance(2)

        with pytest.raises(ValueError, match="does not extend"):
            cursor.advance_to(TokenCursor(cursor.trees, 1))

    def test_commit_rejects_foreign_fork(self) -> None:
        """advance_to() refuses a cursor over another sequence."""
        cursor = TokenCursor.of(_tokens())

        with pytest.raises(ValueError, match="does not extend"):
            cursor.advance_to(TokenCursor.of(_tokens()).advance())

    def test_slice_to(self) -> None:
        """slice_to() returns the tokens between two cursors."""
        cursor = TokenCursor.of(_tokens())

        assert cursor.advance().slice_to(cursor.advance(3)) == (
            Ident("a"),
            Punct("/", Spacing.JOINT),
        )

    @given(st.integers(min_value=0, max_value=10), st.integers(min_value=0, max_value=10))
    def test_advance_composes(self, first: int, second: int) -> None:
        """PROPERTY: advancing twice equals advancing by the sum (clamped)."""
        cursor = TokenCursor.of(_tokens())

        assert cursor.advance(first).advance(second).pos == cursor.advance(first + second).pos


# ============================================================================
# Lookahead
# ============================================================================


class TestCursorLookahead:
    """Test bounded lookahead helpers."""

    def test_peek_beyond_end(self) -> None:
        """peek() returns None past the end."""
        assert TokenCursor.of(_tokens()).peek(10) is None

    def test_kind_at(self) -> None:
        """kind_at() classifies tokens and reports EOF."""
        cursor = TokenCursor.of(_tokens())

        assert cursor.kind_at(0) is TokenKind.PUNCT
        assert cursor.kind_at(1) is TokenKind.IDENT
        assert cursor.kind_at(4) is TokenKind.EOF

    def test_peek_punct_and_ident(self) -> None:
        """peek_punct() and peek_ident() check kind and value."""
        cursor = TokenCursor.of(_tokens())

        assert cursor.peek_punct("<")
        assert not cursor.peek_punct(">")
        assert cursor.peek_ident(1)
        assert not cursor.peek_ident()

    def test_peek_group(self) -> None:
        """peek_group() distinguishes delimiters."""
        cursor = TokenCursor.of((Group(Delimiter.BRACE),))

        assert cursor.peek_group(Delimiter.BRACE)
        assert not cursor.peek_group(Delimiter.PARENTHESIS)

    def test_peek_string(self) -> None:
        """peek_string() accepts plain strings only."""
        assert TokenCursor.of((Literal('"x"'),)).peek_string()
        assert not TokenCursor.of((Literal("42"),)).peek_string()
        assert not TokenCursor.of((Literal('f"{x}"'),)).peek_string()

    def test_expect_punct(self) -> None:
        """expect_punct() advances on a match and returns None otherwise."""
        cursor = TokenCursor.of(_tokens())

        after = cursor.expect_punct("<")
        assert after is not None
        assert after.pos == 1
        assert cursor.expect_punct(">") is None


# ============================================================================
# Spans
# ============================================================================


class TestCursorSpans:
    """Test span helpers."""

    def test_span_of_current(self) -> None:
        """span is the current token's span."""
        assert TokenCursor.of(_tokens()).advance().span == Span(1, 2)

    def test_span_at_eof(self) -> None:
        """At EOF span is empty, just after the last token."""
        assert TokenCursor.of(_tokens()).advance(4).span == Span(5, 5)

    def test_span_of_empty_input(self) -> None:
        """Empty input has no span."""
        assert TokenCursor.of(()).span is None

    def test_prev_span(self) -> None:
        """prev_span is the span of the token just consumed."""
        cursor = TokenCursor.of(_tokens())

        assert cursor.prev_span is None
        assert cursor.advance(2).prev_span == Span(1, 2)

    def test_span_to(self) -> None:
        """span_to() covers the consumed tokens."""
        cursor = TokenCursor.of(_tokens())

        assert cursor.span_to(cursor.advance(4)) == Span(0, 5)


class TestParseResult:
    """Test ParseResult container."""

    def test_holds_value_and_cursor(self) -> None:
        """ParseResult pairs a value with the cursor after it."""
        cursor = TokenCursor.of(_tokens()).advance()
        result = ParseResult("value", cursor)

        assert result.value == "value"
        assert result.cursor is cursor
