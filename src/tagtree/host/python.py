"""Python as the host language.

Builds token trees from source text with the standard tokenize module and
parses embedded expressions with the standard ast module.

Source text is tokenized inside an implicit parenthesis, so line breaks and
indentation carry no meaning: markup can span lines freely. Unquoted text
must still consist of valid Python tokens (no lone apostrophes, balanced
brackets); quote it otherwise.
"#" is content like any other punctuation, never a comment.

Python 3.13+. Zero external dependencies.
"""

import ast
import io
import logging
import tokenize
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field, replace

from tagtree.constants import MAX_SOURCE_SIZE
from tagtree.diagnostics import ErrorTemplate, HostSyntaxError, Span
from tagtree.enums import Delimiter, Spacing
from tagtree.syntax.cursor import ParseResult, TokenCursor
from tagtree.syntax.expression import HostExpression
from tagtree.syntax.source import LineOffsetCache, SourceText, SourceTextProvider
from tagtree.syntax.tokens import (
    Group,
    Ident,
    Literal,
    Punct,
    TokenStream,
    TokenTree,
    stream_span,
    tokens_to_string,
)

__all__ = ["PythonExpressionParser", "tokenize_source"]

logger = logging.getLogger(__name__)

# Layout tokens: meaningless inside the implicit parenthesis
_SKIPPED_TYPES = frozenset(
    {
        tokenize.NL,
        tokenize.NEWLINE,
        tokenize.INDENT,
        tokenize.DEDENT,
        tokenize.ENDMARKER,
    }
)

# Template strings (PEP 750) only exist from Python 3.14 on
_STRING_START_TYPES = frozenset(
    t for t in (tokenize.FSTRING_START, getattr(tokenize, "TSTRING_START", None)) if t is not None
)
_STRING_END_TYPES = frozenset(
    t for t in (tokenize.FSTRING_END, getattr(tokenize, "TSTRING_END", None)) if t is not None
)

_OPENERS = {d.open: d for d in Delimiter}
_CLOSERS = {d.close: d for d in Delimiter}


@dataclass(slots=True)
class _Frame:
    """Open delimiter awaiting its closing partner."""

    delimiter: Delimiter | None
    start: int
    items: list[TokenTree] = field(default_factory=list)

    def push(self, tree: TokenTree) -> None:
        # Adjacent punctuation becomes joint: "/" ">" written as "/>"
        if (
            isinstance(tree, Punct)
            and self.items
            and isinstance(prev := self.items[-1], Punct)
            and prev.span is not None
            and tree.span is not None
            and prev.span.end == tree.span.start
        ):
            self.items[-1] = replace(prev, spacing=Spacing.JOINT)
        self.items.append(tree)


class _Wrapped:
    """Source text inside the implicit parenthesis, with offset mapping."""

    __slots__ = ("lines", "size", "text")

    def __init__(self, source: str) -> None:
        self.text = f"({source}\n)"
        self.lines = LineOffsetCache(self.text)
        self.size = len(source)

    def offset(self, position: tuple[int, int]) -> int:
        row, col = position
        row = min(max(row, 1), self.lines.line_count)
        return self.lines.line_start(row) + col

    def is_wrapper(self, at: int) -> bool:
        return at in (0, len(self.text) - 1)

    def span(self, start: int, end: int) -> Span:
        # Shift out the implicit "(" and clamp to the user's source
        lo = min(max(start - 1, 0), self.size)
        return Span(lo, min(max(end - 1, lo), self.size))

    def masked(self, resume: int, openers: Iterable[tuple[int, str]]) -> str:
        """Text with everything before resume blanked, except open brackets.

        Line breaks survive, so token positions in the result map back
        through the same line offsets as the original text.
        """
        chars = [char if char in "\r\n" else " " for char in self.text[:resume]]
        for at, opener in openers:
            chars[at] = opener
        return "".join(chars) + self.text[resume:]

    def error_span(self, error: tokenize.TokenError | SyntaxError) -> Span:
        """Best-known location of a tokenizer failure."""
        if isinstance(error, SyntaxError):
            at = self.offset((error.lineno or 1, max((error.offset or 1) - 1, 0)))
        elif len(error.args) > 1 and isinstance(error.args[1], tuple):
            at = self.offset(error.args[1])
        else:
            at = 0
        return self.span(at, at + 1)


def tokenize_source(source: str, *, max_source_size: int = MAX_SOURCE_SIZE) -> TokenStream:
    """Build a token tree from source text.

    Args:
        source: Markup source text
        max_source_size: Maximum accepted length in characters

    Returns:
        TokenStream whose source provider is a SourceText over source

    Raises:
        ValueError: If source exceeds max_source_size
        HostSyntaxError: If source cannot be tokenized or has unbalanced brackets

    Example:
        >>> stream = tokenize_source('<a href="x">')
        >>> [str(tree) for tree in stream.trees]
        ['<', 'a', 'href', '=', '"x"', '>']
    """
    if len(source) > max_source_size:
        msg = f"Source too large: {len(source)} characters exceeds limit of {max_source_size}"
        raise ValueError(msg)

    wrapped = _Wrapped(source)
    stack = [_Frame(None, 0)]
    string_depth = 0
    string_start = 0
    text: str | None = wrapped.text
    resume = 0

    try:
        while text is not None:
            scan, text = _scan(text, wrapped, resume), None
            for tok, start, end in scan:
                if string_depth == 0 and tok.type == tokenize.COMMENT:
                    # "#" is markup content: rescan the rest of the line
                    _push_char(stack, "#", wrapped.span(start, start + 1))
                    resume = start + 1
                    text = wrapped.masked(resume, _open_brackets(stack))
                    break
                string_depth, string_start = _emit(
                    stack, wrapped, tok, start, end, string_depth, string_start
                )
    except (tokenize.TokenError, SyntaxError) as e:
        detail = e.msg if isinstance(e, SyntaxError) else str(e.args[0] if e.args else e)
        raise HostSyntaxError(
            ErrorTemplate.host_syntax_error(detail, wrapped.error_span(e))
        ) from e

    if len(stack) != 1:
        frame = stack[-1]
        opener = frame.delimiter.open if frame.delimiter else "("
        raise HostSyntaxError(
            ErrorTemplate.host_syntax_error(
                f"unclosed '{opener}'", wrapped.span(frame.start, frame.start + 1)
            )
        )

    return TokenStream(tuple(stack[0].items), SourceText(source))


def _scan(
    text: str, wrapped: _Wrapped, resume: int
) -> Iterator[tuple[tokenize.TokenInfo, int, int]]:
    """Host tokens of text starting at or after resume, with wrapped offsets."""
    for tok in tokenize.generate_tokens(io.StringIO(text).readline):
        start, end = wrapped.offset(tok.start), wrapped.offset(tok.end)
        if start >= resume:
            yield tok, start, end


def _open_brackets(stack: list[_Frame]) -> list[tuple[int, str]]:
    # The implicit parenthesis is the bottom frame, at offset 0
    return [(frame.start, frame.delimiter.open if frame.delimiter else "(") for frame in stack]


def _emit(
    stack: list[_Frame],
    wrapped: _Wrapped,
    tok: tokenize.TokenInfo,
    start: int,
    end: int,
    string_depth: int,
    string_start: int,
) -> tuple[int, int]:
    """Push one host token onto the open frame; returns the f-string state."""
    if tok.type in _STRING_START_TYPES:
        if string_depth == 0:
            string_start = start
        return string_depth + 1, string_start
    if tok.type in _STRING_END_TYPES:
        string_depth -= 1
        if string_depth == 0:
            text = wrapped.text[string_start:end]
            stack[-1].push(Literal(text, wrapped.span(string_start, end)))
        return string_depth, string_start
    if string_depth or tok.type in _SKIPPED_TYPES:
        return string_depth, string_start

    match tok.type:
        case tokenize.NAME:
            stack[-1].push(Ident(tok.string, wrapped.span(start, end)))
        case tokenize.NUMBER | tokenize.STRING:
            stack[-1].push(Literal(tok.string, wrapped.span(start, end)))
        case tokenize.OP | tokenize.ERRORTOKEN:
            for i, char in enumerate(tok.string):
                if char.isspace() or wrapped.is_wrapper(start + i):
                    continue
                _push_char(stack, char, wrapped.span(start + i, start + i + 1))
        case _:
            logger.debug("Ignoring host token %s %r", tokenize.tok_name[tok.type], tok.string)
    return string_depth, string_start


def _push_char(stack: list[_Frame], char: str, span: Span) -> None:
    if char in _OPENERS:
        # Frame start is kept in wrapped coordinates
        stack.append(_Frame(_OPENERS[char], span.start + 1))
        return
    if char in _CLOSERS:
        frame = stack[-1]
        if frame.delimiter is not _CLOSERS[char]:
            raise HostSyntaxError(ErrorTemplate.host_syntax_error(f"unmatched '{char}'", span))
        stack.pop()
        group_span = Span(frame.start - 1, span.end)
        stack[-1].push(Group(frame.delimiter, tuple(frame.items), group_span))
        return
    stack[-1].push(Punct(char, Spacing.ALONE, span))


@dataclass(frozen=True, slots=True)
class PythonExpressionParser:
    """HostExpressionParser for Python expressions.

    Expressions are compiled with ast.parse(mode="eval") inside an implicit
    parenthesis, so they may span lines. Exact source slices are used when
    the tokens carry spans and a source provider is known; canonical token
    text is used otherwise.

    Example:
        >>> parser = PythonExpressionParser()
        >>> cursor = TokenCursor.of(tokenize_source('"a" + b c'))
        >>> result = parser.parse_expression(cursor)
        >>> result.value.text
        '"a" + b'
        >>> result.cursor.pos
        3
    """

    def parse_expression(self, cursor: TokenCursor) -> ParseResult[HostExpression]:
        remaining = cursor.remaining
        if not remaining:
            raise HostSyntaxError(
                ErrorTemplate.invalid_embedded_expression(
                    "expected an expression, found end of input", cursor.span
                )
            )
        # Greedy: the longest prefix that compiles wins
        for count in range(len(remaining), 1, -1):
            try:
                expression = self._compile(remaining[:count], cursor.source)
            except HostSyntaxError:
                continue
            return ParseResult(expression, cursor.advance(count))
        # The single-token attempt reports the error
        return ParseResult(self._compile(remaining[:1], cursor.source), cursor.advance())

    def parse_block(
        self, tokens: Sequence[TokenTree], source: SourceTextProvider | None
    ) -> HostExpression:
        if not tokens:
            return HostExpression(())
        return self._compile(tuple(tokens), source)

    @staticmethod
    def _source_text(tokens: tuple[TokenTree, ...], source: SourceTextProvider | None) -> str:
        if source is not None and all(tree.span is not None for tree in tokens):
            joined = stream_span(tokens)
            if joined is not None and (text := source.text_of(joined)) is not None:
                return text
        return tokens_to_string(tokens)

    def _compile(
        self, tokens: tuple[TokenTree, ...], source: SourceTextProvider | None
    ) -> HostExpression:
        text = self._source_text(tokens, source)
        try:
            tree = ast.parse(f"(\n{text}\n)", mode="eval").body
        except (SyntaxError, ValueError) as e:
            detail = e.msg if isinstance(e, SyntaxError) else str(e)
            raise HostSyntaxError(
                ErrorTemplate.invalid_embedded_expression(detail, stream_span(tokens))
            ) from e
        return HostExpression(tokens, tree, text)
