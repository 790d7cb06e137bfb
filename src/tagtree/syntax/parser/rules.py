"""Grammar rules for markup nodes.

This module provides the node dispatcher and one parser per construct:
element, fragment, doctype, comment, text, raw text and block. The rules
are mutually recursive (element bodies contain nodes), so they are
co-located in a single module to keep the import graph flat.

Lookahead Patterns:
    The dispatcher chooses a construct from at most three tokens:
    - "<" "!" ident  starts a Doctype
    - "<" "!" "-"    starts a Comment
    - "<" ">"        starts a Fragment
    - "<" "/"        starts a close tag (never a node)
    - "<" other      starts an Element
    - {...}          is a Block
    - "string"       is Text
    - anything else  starts RawText

Recovery:
    Every rule returns ParseResult or None. None means the construct could
    not be parsed; a diagnostic has been recorded and the cursor is
    unchanged. Loops over children guard against non-progress with
    recover_progress(), so every loop terminates on any input.

Security:
    Element and fragment nesting is bounded by ParserConfig.max_nesting_depth.
"""

import logging
from typing import cast

from tagtree.constants import DOCTYPE_KEYWORD
from tagtree.diagnostics import ErrorTemplate, Span
from tagtree.enums import Delimiter, NodeStart, TokenKind
from tagtree.syntax.ast import (
    Block,
    CloseTag,
    Comment,
    Doctype,
    Element,
    Fragment,
    FragmentClose,
    Node,
    OpenTag,
    RawText,
    Text,
)
from tagtree.syntax.cursor import ParseResult, TokenCursor
from tagtree.syntax.raw_text import set_context_spans
from tagtree.syntax.tokens import Ident, Literal, Punct, TokenTree, describe_token

from .attributes import collect_tag_body, parse_attributes
from .context import ParseContext
from .primitives import (
    expect_sequence,
    parse_node_block,
    parse_node_name,
    recover_progress,
    skip_past,
)

__all__ = [
    "classify",
    "parse_children",
    "parse_close_tag",
    "parse_node",
    "skip_stray_close_tag",
]

logger = logging.getLogger(__name__)


# =============================================================================
# Dispatch
# =============================================================================


def classify(cursor: TokenCursor) -> NodeStart | None:
    """Construct announced by the next tokens, or None at end of input."""
    match cursor.kind_at():
        case TokenKind.EOF:
            return None
        case TokenKind.GROUP if cursor.peek_group(Delimiter.BRACE):
            return NodeStart.BLOCK
        case TokenKind.LITERAL if cursor.peek_string():
            return NodeStart.TEXT
    if cursor.peek_punct("<"):
        if cursor.peek_punct("!", 1):
            if cursor.peek_ident(2):
                return NodeStart.DOCTYPE
            if cursor.peek_punct("-", 2):
                return NodeStart.COMMENT
        if cursor.peek_punct(">", 1):
            return NodeStart.FRAGMENT
        if cursor.peek_punct("/", 1):
            return NodeStart.CLOSE_TAG
        return NodeStart.ELEMENT
    return NodeStart.RAW_TEXT


def parse_node(ctx: ParseContext, cursor: TokenCursor) -> ParseResult[Node] | None:
    """Parse one node of any kind.

    A close tag is not a node: callers stop before one. Reaching this
    function at a close tag records UNEXPECTED_CLOSE_TAG and returns None.
    """
    match classify(cursor):
        case NodeStart.DOCTYPE:
            return parse_doctype(ctx, cursor)
        case NodeStart.COMMENT:
            return parse_comment(ctx, cursor)
        case NodeStart.FRAGMENT:
            return parse_fragment(ctx, cursor)
        case NodeStart.ELEMENT:
            return parse_element(ctx, cursor)
        case NodeStart.BLOCK:
            return parse_block(ctx, cursor)
        case NodeStart.TEXT:
            return parse_text(cursor)
        case NodeStart.RAW_TEXT:
            return parse_raw_text(cursor)
        case NodeStart.CLOSE_TAG:
            ctx.push(ErrorTemplate.unexpected_close_tag("", cursor.span))
            return None
        case None:
            ctx.push(ErrorTemplate.unexpected_end_of_input("a node", cursor.span))
            return None


def parse_children(
    ctx: ParseContext, cursor: TokenCursor, what: str
) -> tuple[list[Node], TokenCursor, bool]:
    """Parse sibling nodes until a close tag or end of input.

    Args:
        ctx: Parse context
        cursor: Position after the opening tag
        what: Description of the parent for diagnostics

    Returns:
        (children, cursor, stalled): stalled is True when the loop gave up
        on a token it could neither parse nor skip
    """
    children: list[Node] = []
    while classify(cursor) not in (None, NodeStart.CLOSE_TAG):
        if ctx.is_stalled(cursor):
            return children, cursor, True
        before = cursor
        result = parse_node(ctx, cursor)
        if result is not None:
            children.append(result.value)
            cursor = result.cursor
        if cursor.pos == before.pos:
            recovered = recover_progress(ctx, cursor, what)
            if recovered is None:
                return children, cursor, True
            cursor = recovered
    return children, cursor, False


# =============================================================================
# Elements
# =============================================================================


def parse_open_tag(ctx: ParseContext, cursor: TokenCursor) -> ParseResult[OpenTag] | None:
    """Parse <name attributes...> or <name attributes... />

    Returns:
        ParseResult with the open tag (cursor after ">"), or None if the
        name is invalid
    """
    start = cursor
    name_result = parse_node_name(ctx, cursor.advance())
    if name_result is None:
        return None

    body_result = collect_tag_body(name_result.cursor)
    body = body_result.value
    cursor = body_result.cursor
    if not body.terminated:
        expected = "'>' or '/>' to end the open tag"
        ctx.push(ErrorTemplate.unexpected_token(expected, describe_token(None), cursor.span))

    attributes = parse_attributes(ctx, body.tokens, cursor.source)
    open_tag = OpenTag(
        name=name_result.value,
        attributes=attributes,
        self_closing=body.self_closing,
        span=start.span_to(cursor),
    )
    return ParseResult(open_tag, cursor)


def parse_close_tag(ctx: ParseContext, cursor: TokenCursor) -> ParseResult[CloseTag | None]:
    """Parse </name>

    Always consumes input. On a malformed close tag a diagnostic is
    recorded and the parser resynchronises past the next ">" so the
    damage stays local; the value is then None.
    """
    start = cursor
    cursor = cursor.advance(2)  # "<" "/"

    if cursor.peek_punct(">"):
        cursor = cursor.advance()
        ctx.push(ErrorTemplate.unexpected_close_tag("", start.span_to(cursor)))
        return ParseResult(None, cursor)

    name_result = parse_node_name(ctx, cursor)
    if name_result is None:
        return ParseResult(None, skip_past(cursor, ">"))

    cursor = name_result.cursor
    if (end := cursor.expect_punct(">")) is not None:
        cursor = end
    else:
        found = describe_token(cursor.peek())
        ctx.push(ErrorTemplate.unexpected_token("'>' to end the close tag", found, cursor.span))
        cursor = skip_past(cursor, ">")
    return ParseResult(CloseTag(name_result.value, start.span_to(cursor)), cursor)


def skip_stray_close_tag(ctx: ParseContext, cursor: TokenCursor) -> TokenCursor:
    """Consume a close tag with no open tag, recording UNEXPECTED_CLOSE_TAG."""
    if cursor.peek_punct(">", 2):
        end = cursor.advance(3)
        ctx.push(ErrorTemplate.unexpected_close_tag("", cursor.span_to(end)))
        return end
    result = parse_close_tag(ctx, cursor)
    if result.value is not None:
        ctx.push(ErrorTemplate.unexpected_close_tag(str(result.value.name), result.value.span))
    return result.cursor


def parse_element(ctx: ParseContext, cursor: TokenCursor) -> ParseResult[Element] | None:
    """Parse an element with its children and close tag.

    Self-closing elements, syntactic ("/>") or by policy
    (self_closing_names), never have children. Raw-text elements
    (raw_text_names) have at most one RawText child. A mismatched close
    tag is recorded and kept; a missing one is recorded and left None.
    """
    open_result = parse_open_tag(ctx, cursor)
    if open_result is None:
        return None
    open_tag = open_result.value
    cursor = open_result.cursor
    name = str(open_tag.name)

    if open_tag.self_closing or ctx.config.is_self_closing(name):
        return ParseResult(Element(open_tag, (), None, open_tag.span), cursor)

    open_end = cursor.prev_span
    with ctx.enter_nested(open_tag.span):
        if ctx.config.is_raw_text(name):
            children, cursor = _parse_raw_text_body(cursor, name)
            stalled = False
        else:
            children, cursor, stalled = parse_children(ctx, cursor, f"element '{name}'")

    close_tag: CloseTag | None = None
    if cursor.peek_punct("<") and cursor.peek_punct("/", 1):
        close_start = cursor.span
        close_result = parse_close_tag(ctx, cursor)
        cursor = close_result.cursor
        close_tag = close_result.value
        if close_tag is not None and str(close_tag.name) != name:
            ctx.push(
                ErrorTemplate.mismatched_close_tag(
                    name, str(close_tag.name), close_tag.name.span, open_tag.name.span
                )
            )
    else:
        close_start = None
        if not stalled:
            ctx.push(ErrorTemplate.unterminated_open_tag(name, open_tag.span))

    element = Element(
        open_tag=open_tag,
        children=set_context_spans(open_end, children, close_start),
        close_tag=close_tag,
        span=Span.join(open_tag.span, cursor.prev_span),
    )
    return ParseResult(element, cursor)


def _parse_raw_text_body(cursor: TokenCursor, name: str) -> tuple[list[Node], TokenCursor]:
    """Capture everything up to the close tag named `name` as one RawText.

    Markup inside is not interpreted: <script>if a < b</script> keeps
    "if a < b" verbatim.
    """
    start = cursor
    while not cursor.is_eof and not _at_close_tag_named(cursor, name):
        cursor = cursor.advance()
    tokens = start.slice_to(cursor)
    if not tokens:
        return [], cursor
    return [RawText(tokens, source=cursor.source)], cursor


def _at_close_tag_named(cursor: TokenCursor, name: str) -> bool:
    if not (cursor.peek_punct("<") and cursor.peek_punct("/", 1)):
        return False
    parts: list[str] = []
    offset = 2
    while (tree := cursor.peek(offset)) is not None and not _is_gt(tree):
        parts.append(str(tree))
        offset += 1
    return tree is not None and "".join(parts) == name


def _is_gt(tree: TokenTree) -> bool:
    return isinstance(tree, Punct) and tree.char == ">"


# =============================================================================
# Fragments
# =============================================================================


def parse_fragment(ctx: ParseContext, cursor: TokenCursor) -> ParseResult[Fragment] | None:
    """Parse <> children... </>

    A close tag with a name ("</div>") where "</>" is expected records
    FRAGMENT_CLOSED_BY_ELEMENT but still closes the fragment.
    """
    start = cursor
    cursor = cursor.advance(2)  # "<" ">"
    open_span = start.span_to(cursor)

    with ctx.enter_nested(open_span):
        children, cursor, stalled = parse_children(ctx, cursor, "fragment")

    close: FragmentClose | None = None
    if cursor.peek_punct("<") and cursor.peek_punct("/", 1):
        close_start = cursor.span
        close_begin = cursor
        if cursor.peek_punct(">", 2):
            cursor = cursor.advance(3)
        else:
            name_cursor = cursor.advance(2)
            found = cursor.peek(2)
            ctx.push(
                ErrorTemplate.fragment_closed_by_element(
                    _close_name_text(name_cursor), found.span if found else None, open_span
                )
            )
            cursor = skip_past(name_cursor, ">")
        close = FragmentClose(close_begin.span_to(cursor))
    else:
        close_start = None
        if not stalled:
            ctx.push(ErrorTemplate.unterminated_fragment(open_span))

    fragment = Fragment(
        children=set_context_spans(start.advance().span, children, close_start),
        close=close,
        span=Span.join(open_span, cursor.prev_span),
    )
    return ParseResult(fragment, cursor)


def _close_name_text(cursor: TokenCursor) -> str:
    parts: list[str] = []
    while (tree := cursor.peek()) is not None and not _is_gt(tree):
        parts.append(str(tree))
        cursor = cursor.advance()
    return "".join(parts)


# =============================================================================
# Declarations
# =============================================================================


def parse_doctype(ctx: ParseContext, cursor: TokenCursor) -> ParseResult[Doctype] | None:
    """Parse <!DOCTYPE name>

    The keyword is matched case-insensitively; exactly one identifier
    follows, then ">".
    """
    start = cursor
    keyword = cursor.peek(2)
    if not isinstance(keyword, Ident) or keyword.name.lower() != DOCTYPE_KEYWORD:
        found = describe_token(keyword)
        ctx.push(ErrorTemplate.unexpected_token("'DOCTYPE'", found, cursor.advance(2).span))
        return None
    cursor = cursor.advance(3)

    value = cursor.peek()
    if not isinstance(value, Ident):
        found = describe_token(value)
        ctx.push(ErrorTemplate.unexpected_token("a document type name", found, cursor.span))
        return None
    cursor = cursor.advance()

    end = expect_sequence(ctx, cursor, ">", "'>' to end the doctype")
    if end is None:
        return None
    return ParseResult(Doctype(keyword, value, start.span_to(end)), end)


def parse_comment(ctx: ParseContext, cursor: TokenCursor) -> ParseResult[Comment] | None:
    """Parse <!-- "text" -->

    The comment body is a single string literal.
    """
    start = cursor
    after_open = expect_sequence(ctx, cursor, "<!--", "'<!--' to start a comment")
    if after_open is None:
        return None

    value = after_open.peek()
    if not (isinstance(value, Literal) and value.is_string):
        found = describe_token(value)
        ctx.push(ErrorTemplate.unexpected_token("a string literal", found, after_open.span))
        return None

    end = expect_sequence(ctx, after_open.advance(), "-->", "'-->' to end the comment")
    if end is None:
        return None
    return ParseResult(Comment(value, start.span_to(end)), end)


# =============================================================================
# Leaves
# =============================================================================


def parse_block(ctx: ParseContext, cursor: TokenCursor) -> ParseResult[Block] | None:
    """Parse {expression} in node position."""
    result = parse_node_block(ctx, cursor)
    if result is None:
        return None
    return ParseResult(Block(result.value), result.cursor)


def parse_text(cursor: TokenCursor) -> ParseResult[Text]:
    """Parse a string literal in node position."""
    literal = cast(Literal, cursor.current)  # classify() checked
    return ParseResult(Text(literal), cursor.advance())


def parse_raw_text(cursor: TokenCursor) -> ParseResult[RawText]:
    """Parse an un-delimited run of tokens.

    The run extends up to the next "<", brace group or string literal.
    """
    start = cursor
    while classify(cursor) is NodeStart.RAW_TEXT:
        cursor = cursor.advance()
    tokens: tuple[TokenTree, ...] = start.slice_to(cursor)
    return ParseResult(RawText(tokens, source=cursor.source), cursor)
