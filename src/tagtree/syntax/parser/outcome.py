"""Three-way parse result: Ok, Partial or Failed.

A recoverable parse always produces an outcome; only the status says how
much of it can be trusted:

    Ok       value, no diagnostics
    Partial  value, one or more diagnostics
    Failed   no value, one or more diagnostics

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from tagtree.diagnostics import Diagnostic, TagSyntaxError
from tagtree.enums import OutcomeStatus

__all__ = ["ParseOutcome"]


@dataclass(frozen=True, slots=True)
class ParseOutcome[T]:
    """Value of a recoverable parse plus every diagnostic recorded.

    Attributes:
        value: Parsed value, None for a failed parse
        diagnostics: Diagnostics in the order they were recorded

    Example:
        >>> from tagtree import parse_recoverable
        >>> outcome = parse_recoverable('<p>"hi"</p>')
        >>> outcome.is_ok
        True
        >>> nodes, diagnostics = outcome.split()
    """

    value: T | None
    diagnostics: tuple[Diagnostic, ...] = field(default=())

    @classmethod
    def ok(cls, value: T) -> "ParseOutcome[T]":
        return cls(value, ())

    @classmethod
    def failed(cls, diagnostics: Sequence[Diagnostic]) -> "ParseOutcome[T]":
        if not diagnostics:
            msg = "A failed outcome needs at least one diagnostic"
            raise ValueError(msg)
        return cls(None, tuple(diagnostics))

    @classmethod
    def from_parts(cls, value: T, diagnostics: Sequence[Diagnostic]) -> "ParseOutcome[T]":
        """Classify a value and its diagnostics.

        An empty value with diagnostics counts as failed: nothing usable
        was built. An empty value without diagnostics is a legitimate Ok
        (empty input).
        """
        if not diagnostics:
            return cls.ok(value)
        if not value:
            return cls.failed(diagnostics)
        return cls(value, tuple(diagnostics))

    @property
    def status(self) -> OutcomeStatus:
        if self.value is None:
            return OutcomeStatus.FAILED
        if self.diagnostics:
            return OutcomeStatus.PARTIAL
        return OutcomeStatus.OK

    @property
    def is_ok(self) -> bool:
        return self.status is OutcomeStatus.OK

    @property
    def is_partial(self) -> bool:
        return self.status is OutcomeStatus.PARTIAL

    @property
    def is_failed(self) -> bool:
        return self.status is OutcomeStatus.FAILED

    def split(self) -> tuple[T | None, tuple[Diagnostic, ...]]:
        """Value and diagnostics as a pair, for tuple unpacking."""
        return self.value, self.diagnostics

    def into_result(self) -> T:
        """Value of an Ok outcome.

        Raises:
            TagSyntaxError: With the first diagnostic, if any was recorded
        """
        if self.diagnostics:
            raise TagSyntaxError(self.diagnostics[0])
        # No diagnostics means from_parts() stored a value
        return self.value  # type: ignore[return-value]
