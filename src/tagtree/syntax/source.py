"""Source text access for span-based text recovery.

The grammar engine never needs the source text to build a tree. It is an
optional capability used to recover verbatim text (whitespace included)
for un-delimited text runs, and to report diagnostics as line:column.

Line Ending Support:
    - LF (Unix, \\n) and CRLF (Windows, \\r\\n): Supported
    - CR-only (Classic Mac, \\r): NOT supported

Python 3.13+. Zero external dependencies.
"""

from typing import Protocol, runtime_checkable

from tagtree.diagnostics import Span

__all__ = ["LineOffsetCache", "SourceText", "SourceTextProvider"]


@runtime_checkable
class SourceTextProvider(Protocol):
    """Host capability that maps spans back to source text."""

    def text_of(self, span: Span) -> str | None:
        """Verbatim text covered by span, or None if unavailable."""
        ...

    def join(self, first: Span, last: Span) -> Span | None:
        """Span covering both spans, or None if they cannot be joined."""
        ...


class LineOffsetCache:
    """Cached line offset computation for efficient position lookups.

    Precomputes line start offsets in O(n) single pass, then provides
    O(log n) lookups using binary search.

    Example:
        >>> cache = LineOffsetCache("line1\\nline2\\nline3")
        >>> cache.get_line_col(0)   # Start of line 1
        (1, 1)
        >>> cache.get_line_col(8)   # Third char of line 2
        (2, 3)

    Thread Safety:
        Thread-safe. Internal state is only set during __init__.
    """

    __slots__ = ("_offsets", "_source_len")

    def __init__(self, source: str) -> None:
        """Build line offset cache from source.

        Args:
            source: Source text to index
        """
        offsets = [0]
        for i, char in enumerate(source):
            if char == "\n":
                offsets.append(i + 1)
        self._offsets: tuple[int, ...] = tuple(offsets)
        self._source_len = len(source)

    @property
    def line_count(self) -> int:
        """Number of lines (a trailing newline opens an empty last line)."""
        return len(self._offsets)

    def line_start(self, line: int) -> int:
        """Offset of the first character of a 1-based line."""
        return self._offsets[line - 1]

    def get_line_col(self, pos: int) -> tuple[int, int]:
        """Get line and column for position using binary search.

        Args:
            pos: Character position in source (0-indexed, clamped)

        Returns:
            (line, column) tuple (1-indexed, like text editors)
        """
        pos = min(max(pos, 0), self._source_len)

        # Line index = index of largest offset <= pos
        left, right = 0, len(self._offsets) - 1
        while left < right:
            mid = (left + right + 1) // 2
            if self._offsets[mid] <= pos:
                left = mid
            else:
                right = mid - 1

        return (left + 1, pos - self._offsets[left] + 1)


class SourceText:
    """Source text provider backed by the complete host source.

    Example:
        >>> source = SourceText("<p> hello   world </p>")
        >>> source.text_of(Span(3, 18))
        ' hello   world '
        >>> source.line_col(4)
        (1, 5)
    """

    __slots__ = ("_lines", "text")

    def __init__(self, text: str) -> None:
        self.text = text
        self._lines = LineOffsetCache(text)

    def __repr__(self) -> str:
        return f"SourceText(<{len(self.text)} chars>)"

    def text_of(self, span: Span) -> str | None:
        if span.end > len(self.text):
            return None
        return self.text[span.start : span.end]

    def join(self, first: Span, last: Span) -> Span | None:
        if max(first.end, last.end) > len(self.text):
            return None
        return Span.join(first, last)

    def line_col(self, offset: int) -> tuple[int, int]:
        return self._lines.get_line_col(offset)

    def line_text(self, line: int) -> str:
        if line < 1 or line > self._lines.line_count:
            return ""
        start = self._lines.line_start(line)
        end = self.text.find("\n", start)
        if end == -1:
            end = len(self.text)
        return self.text[start:end].rstrip("\r")
