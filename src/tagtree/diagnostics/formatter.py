"""Diagnostic formatting service.

Centralizes diagnostic output formatting with configurable options.
Python 3.13+. Zero external dependencies.
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from .codes import Diagnostic, Span

__all__ = [
    "DiagnosticFormatter",
    "OutputFormat",
    "SourceLocator",
]


class OutputFormat(StrEnum):
    """Output format options for diagnostic formatting."""

    RUST = "rust"  # Rust compiler-style output (default)
    SIMPLE = "simple"  # Single-line format
    JSON = "json"  # JSON format for tooling integration


class SourceLocator(Protocol):
    """Source text able to map offsets to lines.

    Implemented by tagtree.syntax.source.SourceText.
    """

    def line_col(self, offset: int) -> tuple[int, int]:
        """1-based (line, column) of a character offset."""
        ...

    def line_text(self, line: int) -> str:
        """Text of a 1-based line without its line terminator."""
        ...


@dataclass(frozen=True, slots=True)
class DiagnosticFormatter:
    """Diagnostic formatting service.

    Centralizes formatting of Diagnostic objects into human-readable
    or machine-readable output. When a source is supplied, spans are
    reported as line and column and the offending line is shown with a
    caret underline.

    Attributes:
        output_format: Output style (rust, simple, json)
        source: Source text the spans point into (optional)
        sanitize: Truncate content to prevent information leakage
        color: Enable ANSI color codes (for terminal output)
        max_content_length: Maximum content length when sanitizing

    Example:
        >>> formatter = DiagnosticFormatter()
        >>> diagnostic = ErrorTemplate.unterminated_fragment(Span(0, 2))
        >>> print(formatter.format(diagnostic))
        error[UNTERMINATED_FRAGMENT]: fragment has no corresponding close tag '</>'
          --> offset 0..2
          = help: Add '</>' after the last child of the fragment

        >>> formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        >>> print(formatter.format(diagnostic))
        UNTERMINATED_FRAGMENT: fragment has no corresponding close tag '</>'
    """

    output_format: OutputFormat = OutputFormat.RUST
    source: SourceLocator | None = None
    sanitize: bool = False
    color: bool = False
    max_content_length: int = 100

    def format(self, diagnostic: Diagnostic) -> str:
        """Format a single diagnostic.

        Args:
            diagnostic: Diagnostic to format

        Returns:
            Formatted diagnostic string
        """
        match self.output_format:
            case OutputFormat.RUST:
                return self._format_rust(diagnostic)
            case OutputFormat.SIMPLE:
                return self._format_simple(diagnostic)
            case OutputFormat.JSON:
                return self._format_json(diagnostic)

    def format_all(self, diagnostics: Iterable[Diagnostic]) -> str:
        """Format multiple diagnostics.

        Args:
            diagnostics: Iterable of diagnostics to format

        Returns:
            Formatted string with all diagnostics separated by blank lines
        """
        return "\n\n".join(self.format(d) for d in diagnostics)

    def _location(self, span: Span) -> str:
        if self.source is None:
            return f"offset {span.start}..{span.end}"
        line, col = self.source.line_col(span.start)
        return f"line {line}, column {col}"

    def _snippet(self, span: Span) -> list[str]:
        """Offending source line with a caret underline."""
        if self.source is None:
            return []
        line, col = self.source.line_col(span.start)
        text = self.source.line_text(line)
        # Underline stops at the end of the first line of a multi-line span
        width = max(1, min(len(span), len(text) - col + 1))
        gutter = f"{line:4} | "
        return [
            f"{gutter}{self._maybe_sanitize(text)}",
            " " * (len(gutter) + col - 1) + "^" * width,
        ]

    def _format_rust(self, diagnostic: Diagnostic) -> str:
        """Format diagnostic in Rust compiler style.

        Example output:
            error[MISMATCHED_CLOSE_TAG]: wrong close tag found: expected 'a', found 'b'
              --> line 1, column 6
                 1 | <a></b>
                          ^
              = note: line 1, column 2: open tag is here
        """
        severity = diagnostic.severity if diagnostic.severity == "warning" else "error"

        # Apply color if enabled
        if self.color:
            if severity == "error":
                severity_str = f"\033[1;31m{severity}\033[0m"  # Bold red
            else:
                severity_str = f"\033[1;33m{severity}\033[0m"  # Bold yellow
        else:
            severity_str = severity

        message = self._maybe_sanitize(diagnostic.message)
        parts = [f"{severity_str}[{diagnostic.code.name}]: {message}"]

        if diagnostic.span is not None:
            parts.append(f"  --> {self._location(diagnostic.span)}")
            parts.extend(f"  {line}" for line in self._snippet(diagnostic.span))

        for label in diagnostic.labels:
            if label.span is not None:
                parts.append(f"  = note: {self._location(label.span)}: {label.label}")
            else:
                parts.append(f"  = note: {label.label}")

        if diagnostic.hint:
            hint = self._maybe_sanitize(diagnostic.hint)
            parts.append(f"  = help: {hint}")

        return "\n".join(parts)

    def _format_simple(self, diagnostic: Diagnostic) -> str:
        """Format diagnostic in single-line format.

        Example output:
            UNEXPECTED_CLOSE_TAG: close tag </a> has no corresponding open tag
        """
        message = self._maybe_sanitize(diagnostic.message)
        if diagnostic.span is not None and self.source is not None:
            line, col = self.source.line_col(diagnostic.span.start)
            return f"{line}:{col}: {diagnostic.code.name}: {message}"
        return f"{diagnostic.code.name}: {message}"

    def _format_json(self, diagnostic: Diagnostic) -> str:
        """Format diagnostic as JSON.

        Example output:
            {"code": "UNTERMINATED_FRAGMENT", "message": "...", "severity": "error"}
        """
        data: dict[str, object] = {
            "code": diagnostic.code.name,
            "code_value": diagnostic.code.value,
            "message": self._maybe_sanitize(diagnostic.message),
            "severity": diagnostic.severity,
        }

        # Add optional fields if present
        if diagnostic.span is not None:
            data["start"] = diagnostic.span.start
            data["end"] = diagnostic.span.end
            if self.source is not None:
                line, col = self.source.line_col(diagnostic.span.start)
                data["line"] = line
                data["column"] = col

        if diagnostic.labels:
            data["labels"] = [
                {
                    "label": label.label,
                    "start": label.span.start if label.span else None,
                    "end": label.span.end if label.span else None,
                }
                for label in diagnostic.labels
            ]

        if diagnostic.hint:
            data["hint"] = self._maybe_sanitize(diagnostic.hint)

        return json.dumps(data, ensure_ascii=False)

    def _maybe_sanitize(self, text: str) -> str:
        """Truncate text if sanitization is enabled.

        Args:
            text: Text to possibly truncate

        Returns:
            Original or truncated text
        """
        if self.sanitize and len(text) > self.max_content_length:
            return text[: self.max_content_length] + "..."
        return text
