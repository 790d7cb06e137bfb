"""Diagnostic codes and data structures.

Defines error codes, source spans, and diagnostic messages.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticLabel",
    "Span",
]


@dataclass(frozen=True, slots=True)
class Span:
    """Source position span.

    Tracks character offsets in the host source text. Tokens, nodes and
    diagnostics all point back into the source with spans.

    Note:
        Python strings measure positions in characters (Unicode code points),
        not bytes.

    Attributes:
        start: Starting character offset (inclusive)
        end: Ending character offset (exclusive)

    Example:
        Source: "<div>"
        Span of "div": Span(start=1, end=4)
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        """Validate span invariants."""
        if self.start < 0:
            msg = f"Span start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"Span end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)

    def __len__(self) -> int:
        return self.end - self.start

    @staticmethod
    def join(first: "Span | None", last: "Span | None") -> "Span | None":
        """Smallest span covering both spans.

        Returns None when either side is unknown or when the spans are
        out of order (last starts before first).

        Example:
            >>> Span.join(Span(0, 1), Span(5, 6))
            Span(start=0, end=6)
        """
        if first is None or last is None:
            return None
        if last.end < first.start:
            return None
        return Span(first.start, max(first.end, last.end))


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        3000-3099: Tag structure errors
        3100-3199: Name, attribute and embedded-expression errors
        3200-3299: Top-level constraint violations
        3300-3399: Recovery and resource-limit errors
    """

    # Tag structure (3000-3099)
    UNTERMINATED_OPEN_TAG = 3001
    MISMATCHED_CLOSE_TAG = 3002
    UNEXPECTED_CLOSE_TAG = 3003
    UNTERMINATED_FRAGMENT = 3004
    FRAGMENT_CLOSED_BY_ELEMENT = 3005
    UNEXPECTED_TOKEN = 3006

    # Names, attributes, blocks (3100-3199)
    INVALID_NODE_NAME = 3101
    MISSING_ATTRIBUTE_VALUE = 3102
    INVALID_EMBEDDED_EXPRESSION = 3103
    HOST_SYNTAX_ERROR = 3104

    # Top-level constraints (3200-3299)
    TOP_LEVEL_CARDINALITY_VIOLATION = 3201
    TOP_LEVEL_KIND_VIOLATION = 3202

    # Recovery and limits (3300-3399)
    UNEXPECTED_END_OF_INPUT = 3301
    NESTING_DEPTH_EXCEEDED = 3302


@dataclass(frozen=True, slots=True)
class DiagnosticLabel:
    """Secondary location attached to a diagnostic.

    Attributes:
        span: Location the label points at (None if unknown)
        label: Short explanation shown next to the location
    """

    span: Span | None
    label: str


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Inspired by Rust compiler diagnostics. Provides rich error information
    for both humans and tools (IDEs, LSP servers).

    Attributes:
        code: Unique error code
        message: Human-readable error description
        span: Primary source location (None if unknown)
        labels: Secondary locations with explanations
        hint: Suggestion for fixing the error
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    span: Span | None = None
    labels: tuple[DiagnosticLabel, ...] = ()
    hint: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like Rust compiler (without source context).

        Example output:
            error[MISMATCHED_CLOSE_TAG]: wrong close tag found: expected 'div', found 'span'
              --> offset 12..16
              = note: offset 0..5: open tag is here

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
