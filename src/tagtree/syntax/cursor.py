"""Immutable token cursor for speculative parsing.

Implements the immutable cursor pattern over a token sequence.
Python 3.13+. Zero external dependencies.

Design Philosophy:
    - Cursor is immutable (frozen dataclass)
    - EOF is a state (is_eof), not a return value
    - Every advance() returns NEW cursor (prevents infinite loops)
    - Forking is copying: a fork is the same value, and committing a
      successful fork is reassigning the caller's variable

Pattern Reference:
    - Rust syn ParseStream fork / advance_to
    - Haskell Parsec try
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from tagtree.diagnostics import Span
from tagtree.enums import Delimiter, TokenKind

from .source import SourceTextProvider
from .tokens import Group, Ident, Literal, Punct, TokenStream, TokenTree

__all__ = ["ParseResult", "TokenCursor"]


@dataclass(frozen=True, slots=True)
class TokenCursor:
    """Immutable position in a token sequence.

    Example:
        >>> cursor = TokenCursor.of(tokenize_source("<br/>"))
        >>> cursor.current
        Punct(char='<', spacing=<Spacing.ALONE: 'alone'>)
        >>> cursor.advance().peek_ident()
        True
        >>> cursor.pos  # Original unchanged (immutability)
        0
    """

    trees: tuple[TokenTree, ...]
    pos: int = 0
    source: SourceTextProvider | None = field(default=None, compare=False, repr=False)

    @classmethod
    def of(
        cls,
        tokens: TokenStream | Sequence[TokenTree],
        source: SourceTextProvider | None = None,
    ) -> "TokenCursor":
        """Cursor at the start of a token stream or sequence."""
        if isinstance(tokens, TokenStream):
            return cls(tokens.trees, 0, source if source is not None else tokens.source)
        return cls(tuple(tokens), 0, source)

    def nested(self, group: Group) -> "TokenCursor":
        """Cursor at the start of a group's interior, sharing this source."""
        return TokenCursor(group.stream, 0, self.source)

    # ========================================================================
    # POSITION
    # ========================================================================

    @property
    def is_eof(self) -> bool:
        """Check if at end of input."""
        return self.pos >= len(self.trees)

    @property
    def current(self) -> TokenTree:
        """Current token tree.

        Raises:
            EOFError: If at end of input
        """
        if self.is_eof:
            msg = f"Unexpected end of token stream at position {self.pos}"
            raise EOFError(msg)
        return self.trees[self.pos]

    def peek(self, offset: int = 0) -> TokenTree | None:
        """Token tree at position + offset, or None if beyond EOF."""
        target_pos = self.pos + offset
        if target_pos >= len(self.trees):
            return None
        return self.trees[target_pos]

    def kind_at(self, offset: int = 0) -> TokenKind:
        """Coarse kind of the token at position + offset (EOF past the end)."""
        tree = self.peek(offset)
        if tree is None:
            return TokenKind.EOF
        return tree.kind

    def advance(self, count: int = 1) -> "TokenCursor":
        """Return new cursor advanced by count tokens (clamped at EOF)."""
        new_pos = min(self.pos + count, len(self.trees))
        return TokenCursor(self.trees, new_pos, self.source)

    def fork(self) -> "TokenCursor":
        """Speculative branch. Cursors are values, so a fork is the cursor itself."""
        return self

    def advance_to(self, forked: "TokenCursor") -> "TokenCursor":
        """Commit a successful fork.

        Raises:
            ValueError: If the fork belongs to another sequence or lies behind
        """
        if forked.trees is not self.trees or forked.pos < self.pos:
            msg = "Fork does not extend this cursor"
            raise ValueError(msg)
        return forked

    def slice_to(self, end: "TokenCursor") -> tuple[TokenTree, ...]:
        """Tokens between this cursor and a later cursor on the same sequence."""
        return self.trees[self.pos : end.pos]

    @property
    def remaining(self) -> tuple[TokenTree, ...]:
        """All tokens from the current position to the end."""
        return self.trees[self.pos :]

    # ========================================================================
    # LOOKAHEAD
    # ========================================================================

    def peek_punct(self, char: str, offset: int = 0) -> bool:
        """Check for a punctuation character at position + offset."""
        tree = self.peek(offset)
        return isinstance(tree, Punct) and tree.char == char

    def peek_ident(self, offset: int = 0) -> bool:
        """Check for an identifier at position + offset."""
        return isinstance(self.peek(offset), Ident)

    def peek_group(self, delimiter: Delimiter, offset: int = 0) -> bool:
        """Check for a group with the given delimiter at position + offset."""
        tree = self.peek(offset)
        return isinstance(tree, Group) and tree.delimiter is delimiter

    def peek_string(self, offset: int = 0) -> bool:
        """Check for a plain string literal at position + offset."""
        tree = self.peek(offset)
        return isinstance(tree, Literal) and tree.is_string

    def expect_punct(self, char: str) -> "TokenCursor | None":
        """Cursor after the expected punctuation character, or None."""
        if self.peek_punct(char):
            return self.advance()
        return None

    # ========================================================================
    # SPANS
    # ========================================================================

    @property
    def span(self) -> Span | None:
        """Span of the current token, or an empty span after the last one at EOF."""
        if not self.is_eof:
            return self.trees[self.pos].span
        if self.trees and (last := self.trees[-1].span) is not None:
            return Span(last.end, last.end)
        return None

    @property
    def prev_span(self) -> Span | None:
        """Span of the token just before the current position."""
        if self.pos == 0:
            return None
        return self.trees[self.pos - 1].span

    def span_to(self, end: "TokenCursor") -> Span | None:
        """Span covering the tokens between this cursor and a later one."""
        if end.pos <= self.pos:
            return self.span
        return Span.join(self.trees[self.pos].span, self.trees[end.pos - 1].span)


@dataclass(frozen=True, slots=True)
class ParseResult[T]:
    """Parser result containing parsed value and new cursor position.

    Type Parameters:
        T: The type of the parsed value

    Pattern:
        Every sub-parser has signature:
            def parse_foo(ctx: ParseContext, cursor: TokenCursor) -> ParseResult[Foo] | None:
                ...
                return ParseResult(parsed_value, new_cursor)

        None means "no value"; the sub-parser has already recorded a
        diagnostic explaining why.
    """

    value: T
    cursor: TokenCursor
