"""Two-phase open-tag body parsing.

An attribute value is an arbitrary host expression, and host expressions
may contain ">" and "/" ("a > b", "x / y"). To keep the end of the tag
unambiguous the body is parsed in two phases:

1. Collect raw tokens one at a time, checking for the terminator (">" or
   "/>") on a fork before taking each token. The terminator always wins.
2. Re-parse the collected run, and only that run, as a sequence of
   attribute items: key, key=value, or {block}.

An expression that needs ">" must therefore be braced: a={x > 1}.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from tagtree.diagnostics import ErrorTemplate, HostSyntaxError, Span
from tagtree.enums import Delimiter
from tagtree.syntax.ast import DynAttribute, KeyedAttribute, NodeAttribute
from tagtree.syntax.cursor import ParseResult, TokenCursor
from tagtree.syntax.source import SourceTextProvider
from tagtree.syntax.tokens import TokenTree

from .context import ParseContext
from .primitives import parse_node_block, parse_node_name, recover_progress

__all__ = ["TagBody", "collect_tag_body", "parse_attributes"]


@dataclass(frozen=True, slots=True)
class TagBody:
    """Raw tokens of an open tag between its name and its terminator.

    Attributes:
        tokens: Attribute tokens, terminator excluded
        self_closing: Terminated by "/>"
        terminated: False if end of input came first
        end_span: Span of the final ">" (None if unterminated or unknown)
    """

    tokens: tuple[TokenTree, ...]
    self_closing: bool
    terminated: bool
    end_span: Span | None = None


def collect_tag_body(cursor: TokenCursor) -> ParseResult[TagBody]:
    """Phase 1: copy tokens up to and including the tag terminator.

    Returns:
        ParseResult with the body; the cursor is after the terminator, or
        at EOF for an unterminated tag
    """
    start = cursor
    while not cursor.is_eof:
        fork = cursor.fork()
        self_closing = fork.peek_punct("/") and fork.peek_punct(">", 1)
        if self_closing:
            fork = fork.advance()
        if fork.peek_punct(">"):
            body = TagBody(
                start.slice_to(cursor),
                self_closing=self_closing,
                terminated=True,
                end_span=fork.span,
            )
            return ParseResult(body, cursor.advance_to(fork.advance()))
        cursor = cursor.advance()
    body = TagBody(start.slice_to(cursor), self_closing=False, terminated=False)
    return ParseResult(body, cursor)


def parse_attributes(
    ctx: ParseContext, tokens: Sequence[TokenTree], source: SourceTextProvider | None
) -> tuple[NodeAttribute, ...]:
    """Phase 2: parse a collected token run as attribute items.

    Failed items are recorded as diagnostics and skipped under the usual
    progress guard; the surrounding tag is unaffected.
    """
    cursor = TokenCursor.of(tokens, source)
    attributes: list[NodeAttribute] = []
    while not cursor.is_eof and not ctx.is_stalled(cursor):
        before = cursor
        result = parse_attribute(ctx, cursor)
        if result is not None:
            attributes.append(result.value)
            cursor = result.cursor
        if cursor.pos == before.pos:
            recovered = recover_progress(ctx, cursor, "attributes")
            if recovered is None:
                break
            cursor = recovered
    return tuple(attributes)


def parse_attribute(ctx: ParseContext, cursor: TokenCursor) -> ParseResult[NodeAttribute] | None:
    """Parse one attribute item.

    Grammar:
        attribute ::= block                  DynAttribute
                    | name                   KeyedAttribute, no value
                    | name "=" block         KeyedAttribute, block value
                    | name "=" expression    KeyedAttribute, host expression

    The expression is greedy: the longest token prefix the host parser
    accepts, so "a + b" is one value and `x="1" y="2"` are two attributes.
    """
    if cursor.peek_group(Delimiter.BRACE):
        block_result = parse_node_block(ctx, cursor)
        if block_result is None:
            return None
        return ParseResult(DynAttribute(block_result.value), block_result.cursor)

    start = cursor
    key_result = parse_node_name(ctx, cursor)
    if key_result is None:
        return None
    key = key_result.value
    cursor = key_result.cursor

    if not cursor.peek_punct("="):
        return ParseResult(KeyedAttribute(key, None, key.span), cursor)

    equals = cursor
    cursor = cursor.advance()
    if cursor.is_eof:
        ctx.push(ErrorTemplate.missing_attribute_value(str(key), equals.span))
        return ParseResult(KeyedAttribute(key, None, start.span_to(cursor)), cursor)

    if cursor.peek_group(Delimiter.BRACE):
        block_result = parse_node_block(ctx, cursor)
        if block_result is None:
            return None
        cursor = block_result.cursor
        return ParseResult(KeyedAttribute(key, block_result.value, start.span_to(cursor)), cursor)

    try:
        value_result = ctx.expression_parser.parse_expression(cursor)
    except HostSyntaxError as e:
        diagnostic = e.diagnostic or ErrorTemplate.invalid_embedded_expression(str(e), cursor.span)
        ctx.push(diagnostic)
        # Drop the unparseable value token; the rest of the tag is retried
        cursor = cursor.advance()
        return ParseResult(KeyedAttribute(key, None, start.span_to(cursor)), cursor)

    cursor = value_result.cursor
    return ParseResult(KeyedAttribute(key, value_result.value, start.span_to(cursor)), cursor)
