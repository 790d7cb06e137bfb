"""Tests for ParseOutcome: Ok / Partial / Failed classification.

Python 3.13+.
"""

from __future__ import annotations

import pytest

from tagtree import OutcomeStatus, ParseOutcome, TagSyntaxError, parse_recoverable
from tagtree.diagnostics import DiagnosticCode, ErrorTemplate

_DIAGNOSTIC = ErrorTemplate.unterminated_fragment(None)


class TestConstructors:
    """ok(), failed() and from_parts()."""

    def test_ok(self) -> None:
        """ok() has no diagnostics."""
        outcome = ParseOutcome.ok((1, 2))

        assert outcome.status is OutcomeStatus.OK
        assert outcome.is_ok
        assert outcome.value == (1, 2)

    def test_failed(self) -> None:
        """failed() has no value."""
        outcome: ParseOutcome[tuple[int, ...]] = ParseOutcome.failed([_DIAGNOSTIC])

        assert outcome.is_failed
        assert outcome.value is None
        assert outcome.diagnostics == (_DIAGNOSTIC,)

    def test_failed_needs_diagnostics(self) -> None:
        """A failure without a reason is a programming error."""
        with pytest.raises(ValueError, match="at least one"):
            ParseOutcome.failed([])

    def test_from_parts_ok(self) -> None:
        """No diagnostics: Ok, even for an empty value."""
        assert ParseOutcome.from_parts((), []).is_ok

    def test_from_parts_partial(self) -> None:
        """Value and diagnostics: Partial."""
        outcome = ParseOutcome.from_parts((1,), [_DIAGNOSTIC])

        assert outcome.is_partial
        assert outcome.status is OutcomeStatus.PARTIAL

    def test_from_parts_empty_value_fails(self) -> None:
        """Diagnostics and nothing built: Failed."""
        assert ParseOutcome.from_parts((), [_DIAGNOSTIC]).is_failed


class TestAccessors:
    """split() and into_result()."""

    def test_split(self) -> None:
        """split() unpacks into value and diagnostics."""
        value, diagnostics = ParseOutcome.from_parts((1,), [_DIAGNOSTIC]).split()

        assert value == (1,)
        assert diagnostics == (_DIAGNOSTIC,)

    def test_into_result_ok(self) -> None:
        """Ok outcomes yield their value."""
        assert ParseOutcome.ok("v").into_result() == "v"

    def test_into_result_partial_raises(self) -> None:
        """Partial outcomes raise the first diagnostic."""
        outcome = parse_recoverable("<a></b>")

        with pytest.raises(TagSyntaxError) as exc_info:
            outcome.into_result()

        assert exc_info.value.diagnostic is outcome.diagnostics[0]
        assert exc_info.value.diagnostic.code is DiagnosticCode.MISMATCHED_CLOSE_TAG

    def test_into_result_failed_raises(self) -> None:
        """Failed outcomes raise as well."""
        with pytest.raises(TagSyntaxError):
            ParseOutcome.failed([_DIAGNOSTIC]).into_result()

    def test_immutable(self) -> None:
        """Outcomes are frozen."""
        outcome = ParseOutcome.ok(())

        with pytest.raises(AttributeError):
            outcome.value = (1,)  # type: ignore[misc]
