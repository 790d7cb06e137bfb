"""Primitive parsers shared by the grammar rules.

This module provides low-level parsers for node names, blocks and fixed
punctuation sequences. Like every grammar rule they take the parse
context and an immutable cursor, and return ParseResult or None.
"""

import logging
from dataclasses import replace

from tagtree.constants import PATH_SEPARATOR
from tagtree.diagnostics import ErrorTemplate, HostSyntaxError
from tagtree.enums import Delimiter
from tagtree.syntax.ast import (
    BlockName,
    InvalidBlock,
    NodeBlock,
    NodeName,
    PathName,
    PunctuatedName,
    ValidBlock,
)
from tagtree.syntax.cursor import ParseResult, TokenCursor
from tagtree.syntax.tokens import Group, Ident, Literal, Punct, describe_token

from .context import ParseContext

__all__ = [
    "expect_sequence",
    "parse_node_block",
    "parse_node_name",
    "recover_progress",
    "skip_past",
]

logger = logging.getLogger(__name__)


def _is_segment(tree: object) -> bool:
    """Identifier, or number literal after a separator (data-1)."""
    if isinstance(tree, Ident):
        return True
    return isinstance(tree, Literal) and tree.text[:1].isdigit()


def parse_node_name(ctx: ParseContext, cursor: TokenCursor) -> ParseResult[NodeName] | None:
    """Parse a tag name or attribute key.

    Grammar:
        name       ::= path | punctuated | block
        path       ::= ident ("." ident)*
        punctuated ::= ident (sep segment)+      sep in config separators
        segment    ::= ident | number

    Examples:
        div -> PathName(div)
        ui.Button -> PathName(ui, Button)
        data-id -> PunctuatedName(data, id)
        on:click -> PunctuatedName(on, click)
        {component} -> BlockName

    Returns:
        ParseResult with the name, or None with INVALID_NODE_NAME recorded
    """
    if cursor.peek_group(Delimiter.BRACE):
        block_result = parse_node_block(ctx, cursor)
        if block_result is None:
            return None
        return ParseResult(BlockName(block_result.value), block_result.cursor)

    first = cursor.peek()
    if not isinstance(first, Ident):
        ctx.push(ErrorTemplate.invalid_node_name(describe_token(first), cursor.span))
        return None

    start = cursor
    cursor = cursor.advance()

    # Path: a.b.c
    if cursor.peek_punct(PATH_SEPARATOR) and cursor.peek_ident(1):
        segments = [first]
        while cursor.peek_punct(PATH_SEPARATOR) and isinstance(segment := cursor.peek(1), Ident):
            segments.append(segment)
            cursor = cursor.advance(2)
        return ParseResult(PathName(tuple(segments), start.span_to(cursor)), cursor)

    # Punctuated: a-b:c
    separators = ctx.config.punctuated_name_separators
    parts: list[Ident | Literal] = [first]
    joiners: list[str] = []
    while (
        isinstance(sep := cursor.peek(), Punct)
        and sep.char in separators
        and isinstance(segment := cursor.peek(1), Ident | Literal)
        and _is_segment(segment)
    ):
        joiners.append(sep.char)
        parts.append(segment)
        cursor = cursor.advance(2)

    if isinstance(sep := cursor.peek(), Punct) and sep.char in separators:
        # Dangling separator: data-
        after = cursor.advance()
        ctx.push(ErrorTemplate.invalid_node_name(describe_token(after.peek()), after.span))
        return None

    if joiners:
        name = PunctuatedName(tuple(parts), tuple(joiners), start.span_to(cursor))
        return ParseResult(name, cursor)
    return ParseResult(PathName((first,), first.span), cursor)


def parse_node_block(ctx: ParseContext, cursor: TokenCursor) -> ParseResult[NodeBlock] | None:
    """Parse a brace group as a host-language block: { expression }

    The block transform hook, when configured, sees the interior first and
    may supply replacement tokens. A block the host parser rejects is kept
    as InvalidBlock if recover_invalid_blocks is set; otherwise the whole
    parse is aborted.

    Returns:
        ParseResult with the block, or None if the cursor is not at a brace group
    """
    group = cursor.peek()
    if not isinstance(group, Group) or group.delimiter is not Delimiter.BRACE:
        found = describe_token(group)
        ctx.push(ErrorTemplate.unexpected_token("a '{...}' block", found, cursor.span))
        return None

    interior = cursor.nested(group)
    tokens = group.stream
    try:
        hook = ctx.config.block_transform_hook
        if hook is not None and (replacement := hook(interior)) is not None:
            tokens = tuple(replacement)
        expression = ctx.expression_parser.parse_block(tokens, cursor.source)
    except HostSyntaxError as e:
        diagnostic = e.diagnostic or ErrorTemplate.invalid_embedded_expression(str(e), group.span)
        if diagnostic.span is None:
            diagnostic = replace(diagnostic, span=group.span)
        if not ctx.config.recover_invalid_blocks:
            ctx.abort(diagnostic)
        ctx.push(diagnostic)
        return ParseResult(InvalidBlock(group, group.stream), cursor.advance())

    return ParseResult(ValidBlock(group, expression), cursor.advance())


def expect_sequence(
    ctx: ParseContext, cursor: TokenCursor, chars: str, what: str
) -> TokenCursor | None:
    """Consume a fixed run of punctuation characters such as "-->".

    Records UNEXPECTED_TOKEN and returns None when the run is absent.
    """
    for offset, char in enumerate(chars):
        if not cursor.peek_punct(char, offset):
            found = cursor.advance(offset)
            ctx.push(ErrorTemplate.unexpected_token(what, describe_token(found.peek()), found.span))
            return None
    return cursor.advance(len(chars))


def skip_past(cursor: TokenCursor, char: str) -> TokenCursor:
    """Cursor just after the next punctuation character, or at EOF."""
    while not cursor.is_eof:
        if cursor.peek_punct(char):
            return cursor.advance()
        cursor = cursor.advance()
    logger.debug("Resync reached end of input looking for %r", char)
    return cursor


def recover_progress(ctx: ParseContext, cursor: TokenCursor, what: str) -> TokenCursor | None:
    """Force progress after a loop iteration that consumed nothing.

    Skips exactly one stray punctuation token (never "<", which starts
    markup) when skip_unexpected_punctuation is set. Otherwise records
    UNEXPECTED_END_OF_INPUT and returns None: the loop must stop.
    """
    tree = cursor.peek()
    if ctx.config.skip_unexpected_punctuation and isinstance(tree, Punct) and tree.char != "<":
        logger.debug("Skipping unexpected %r while parsing %s", tree.char, what)
        return cursor.advance()
    ctx.stall(cursor, what)
    return None
