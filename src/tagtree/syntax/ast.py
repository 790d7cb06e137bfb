"""Markup node tree definitions.

Nodes are immutable. Children are tuples, spans are excluded from equality,
so two trees compare equal when they have the same structure and content.
Includes type guards as static methods (eliminates circular imports).

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass, field, replace
from typing import ClassVar, TypeIs

from tagtree.constants import PATH_SEPARATOR
from tagtree.diagnostics import Span
from tagtree.enums import NodeKind

from .expression import HostExpression
from .source import SourceTextProvider
from .tokens import Group, Ident, Literal, TokenTree, stream_span, tokens_to_string

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Names
    "PathName",
    "PunctuatedName",
    "BlockName",
    "NodeName",
    # Blocks
    "ValidBlock",
    "InvalidBlock",
    "NodeBlock",
    # Attributes
    "KeyedAttribute",
    "DynAttribute",
    "NodeAttribute",
    # Tags
    "OpenTag",
    "CloseTag",
    "FragmentClose",
    # Nodes
    "Element",
    "Fragment",
    "Text",
    "RawText",
    "Comment",
    "Doctype",
    "Block",
    "Node",
    # Transforms
    "flatten",
]

# ============================================================================
# NAMES
# ============================================================================


@dataclass(frozen=True, slots=True)
class PathName:
    """Dot-joined identifier path: div, some.module.Component."""

    segments: tuple[Ident, ...]
    span: Span | None = field(default=None, compare=False)

    def __str__(self) -> str:
        return PATH_SEPARATOR.join(segment.name for segment in self.segments)

    @staticmethod
    def guard(name: object) -> TypeIs["PathName"]:
        """Type guard for PathName."""
        return isinstance(name, PathName)


@dataclass(frozen=True, slots=True)
class PunctuatedName:
    """Segments joined by separator characters: data-id, on:click, x-on:blur.

    Attributes:
        segments: Identifiers and number literals in order
        separators: Separator characters, one between each pair of segments
    """

    segments: tuple[Ident | Literal, ...]
    separators: tuple[str, ...]
    span: Span | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if len(self.separators) != len(self.segments) - 1:
            msg = "PunctuatedName needs exactly one separator between segments"
            raise ValueError(msg)

    def __str__(self) -> str:
        parts = [str(self.segments[0])]
        for separator, segment in zip(self.separators, self.segments[1:], strict=True):
            parts.append(separator)
            parts.append(str(segment))
        return "".join(parts)

    @staticmethod
    def guard(name: object) -> TypeIs["PunctuatedName"]:
        """Type guard for PunctuatedName."""
        return isinstance(name, PunctuatedName)


@dataclass(frozen=True, slots=True)
class BlockName:
    """Name computed by a block: <{component}>."""

    block: "NodeBlock"

    @property
    def span(self) -> Span | None:
        return self.block.span

    def __str__(self) -> str:
        return str(self.block.group)

    @staticmethod
    def guard(name: object) -> TypeIs["BlockName"]:
        """Type guard for BlockName."""
        return isinstance(name, BlockName)


type NodeName = PathName | PunctuatedName | BlockName

# ============================================================================
# BLOCKS
# ============================================================================


@dataclass(frozen=True, slots=True)
class ValidBlock:
    """Brace group whose interior the host parser accepted."""

    group: Group
    expression: HostExpression

    @property
    def span(self) -> Span | None:
        return self.group.span

    def try_expression(self) -> HostExpression | None:
        return self.expression


@dataclass(frozen=True, slots=True)
class InvalidBlock:
    """Brace group whose interior the host parser rejected.

    Only produced with ParserConfig.recover_invalid_blocks; a diagnostic
    explaining the rejection is always recorded alongside.
    """

    group: Group
    body: tuple[TokenTree, ...]

    @property
    def span(self) -> Span | None:
        return self.group.span

    def try_expression(self) -> HostExpression | None:
        return None


type NodeBlock = ValidBlock | InvalidBlock

# ============================================================================
# ATTRIBUTES
# ============================================================================


@dataclass(frozen=True, slots=True)
class KeyedAttribute:
    """key, key=value or key={block}.

    Attributes:
        key: Attribute name
        value: Value expression, block, or None for a bare key
    """

    key: NodeName
    value: HostExpression | NodeBlock | None = None
    span: Span | None = field(default=None, compare=False)

    def value_as_string(self) -> str | None:
        """Value when it is a plain string literal, else None.

        Example:
            For href="/home": '/home'
        """
        expression = self.value if isinstance(self.value, HostExpression) else None
        if isinstance(self.value, ValidBlock):
            expression = self.value.expression
        if expression is None or expression.is_empty:
            return None
        try:
            value = expression.literal_value()
        except ValueError:
            return None
        return value if isinstance(value, str) else None

    @staticmethod
    def guard(attribute: object) -> TypeIs["KeyedAttribute"]:
        """Type guard for KeyedAttribute."""
        return isinstance(attribute, KeyedAttribute)


@dataclass(frozen=True, slots=True)
class DynAttribute:
    """Block in attribute position: <div {attrs}>."""

    block: NodeBlock

    @property
    def span(self) -> Span | None:
        return self.block.span

    @staticmethod
    def guard(attribute: object) -> TypeIs["DynAttribute"]:
        """Type guard for DynAttribute."""
        return isinstance(attribute, DynAttribute)


type NodeAttribute = KeyedAttribute | DynAttribute

# ============================================================================
# TAGS
# ============================================================================


@dataclass(frozen=True, slots=True)
class OpenTag:
    """<name attributes...> or <name attributes... />"""

    name: NodeName
    attributes: tuple[NodeAttribute, ...] = ()
    self_closing: bool = False
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class CloseTag:
    """</name>"""

    name: NodeName
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class FragmentClose:
    """</>"""

    span: Span | None = field(default=None, compare=False)


# ============================================================================
# NODES
# ============================================================================


@dataclass(frozen=True, slots=True)
class Element:
    """Named element.

    close_tag is None for self-closing elements and for elements that
    reached end of input unclosed. A mismatched close tag is kept as found.
    """

    kind: ClassVar[NodeKind] = NodeKind.ELEMENT

    open_tag: OpenTag
    children: tuple["Node", ...] = ()
    close_tag: CloseTag | None = None
    span: Span | None = field(default=None, compare=False)

    @property
    def name(self) -> NodeName:
        return self.open_tag.name

    @property
    def attributes(self) -> tuple[NodeAttribute, ...]:
        return self.open_tag.attributes

    @staticmethod
    def guard(node: object) -> TypeIs["Element"]:
        """Type guard for Element."""
        return isinstance(node, Element)


@dataclass(frozen=True, slots=True)
class Fragment:
    """Anonymous grouping: <>...</>"""

    kind: ClassVar[NodeKind] = NodeKind.FRAGMENT

    children: tuple["Node", ...] = ()
    close: FragmentClose | None = None
    span: Span | None = field(default=None, compare=False)

    @staticmethod
    def guard(node: object) -> TypeIs["Fragment"]:
        """Type guard for Fragment."""
        return isinstance(node, Fragment)


@dataclass(frozen=True, slots=True)
class Text:
    """Quoted text: "hello"."""

    kind: ClassVar[NodeKind] = NodeKind.TEXT

    value: Literal

    @property
    def span(self) -> Span | None:
        return self.value.span

    @property
    def children(self) -> tuple["Node", ...]:
        return ()

    @property
    def value_string(self) -> str:
        return str(self.value.value)

    @staticmethod
    def guard(node: object) -> TypeIs["Text"]:
        """Type guard for Text."""
        return isinstance(node, Text)


@dataclass(frozen=True, slots=True)
class RawText:
    """Un-delimited run of tokens: hello world.

    The tokens are kept as they were lexed. Verbatim text, whitespace
    included, can only be recovered from the source with the spans of the
    tokens around the run (context_spans), which the parent fills in once
    all its children are known.

    Attributes:
        tokens: The run, never empty when produced by the parser
        context_spans: Spans of the tokens just before and just after the run
        source: Source text provider the tokens were read from
    """

    kind: ClassVar[NodeKind] = NodeKind.RAW_TEXT

    tokens: tuple[TokenTree, ...]
    context_spans: tuple[Span, Span] | None = field(default=None, compare=False)
    source: SourceTextProvider | None = field(default=None, compare=False, repr=False)

    @property
    def span(self) -> Span | None:
        return stream_span(self.tokens)

    @property
    def children(self) -> tuple["Node", ...]:
        return ()

    @property
    def is_empty(self) -> bool:
        return not self.tokens

    def with_context_spans(self, before: Span, after: Span) -> "RawText":
        return replace(self, context_spans=(before, after))

    def to_token_stream_string(self) -> str:
        """Canonical token text, whitespace normalized.

        Example:
            For  hello ,   world : 'hello , world'
        """
        return tokens_to_string(self.tokens)

    def to_source_text(self, with_whitespace: bool) -> str | None:
        """Verbatim source text of the run, or None if unavailable.

        Args:
            with_whitespace: Include the whitespace between the run and the
                tokens around it (needs context_spans)
        """
        if self.source is None:
            return None
        if with_whitespace:
            if self.context_spans is None:
                return None
            before, after = self.context_spans
            if self.source.join(before, after) is None or after.start < before.end:
                return None
            return self.source.text_of(Span(before.end, after.start))
        span = self.span
        if span is None:
            return None
        return self.source.text_of(span)

    def to_string_best(self) -> str:
        """Most faithful text available.

        Tries, in order: source text with surrounding whitespace, source
        text of the run itself, canonical token text.
        """
        text = self.to_source_text(with_whitespace=True)
        if text is None:
            text = self.to_source_text(with_whitespace=False)
        if text is None:
            text = self.to_token_stream_string()
        return text

    def __str__(self) -> str:
        return self.to_string_best()

    @staticmethod
    def guard(node: object) -> TypeIs["RawText"]:
        """Type guard for RawText."""
        return isinstance(node, RawText)


@dataclass(frozen=True, slots=True)
class Comment:
    """<!-- "note" -->"""

    kind: ClassVar[NodeKind] = NodeKind.COMMENT

    value: Literal
    span: Span | None = field(default=None, compare=False)

    @property
    def children(self) -> tuple["Node", ...]:
        return ()

    @property
    def value_string(self) -> str:
        return str(self.value.value)

    @staticmethod
    def guard(node: object) -> TypeIs["Comment"]:
        """Type guard for Comment."""
        return isinstance(node, Comment)


@dataclass(frozen=True, slots=True)
class Doctype:
    """<!DOCTYPE html>

    Attributes:
        keyword: The doctype keyword as written (any letter case)
        value: Document type identifier
    """

    kind: ClassVar[NodeKind] = NodeKind.DOCTYPE

    keyword: Ident
    value: Ident
    span: Span | None = field(default=None, compare=False)

    @property
    def children(self) -> tuple["Node", ...]:
        return ()

    @property
    def value_string(self) -> str:
        return self.value.name

    @staticmethod
    def guard(node: object) -> TypeIs["Doctype"]:
        """Type guard for Doctype."""
        return isinstance(node, Doctype)


@dataclass(frozen=True, slots=True)
class Block:
    """Braced host code in node position: {expression}."""

    kind: ClassVar[NodeKind] = NodeKind.BLOCK

    payload: NodeBlock

    @property
    def span(self) -> Span | None:
        return self.payload.span

    @property
    def children(self) -> tuple["Node", ...]:
        return ()

    @staticmethod
    def guard(node: object) -> TypeIs["Block"]:
        """Type guard for Block."""
        return isinstance(node, Block)


# ============================================================================
# TYPE ALIASES
# ============================================================================

type Node = Element | Fragment | Text | RawText | Comment | Doctype | Block

# ============================================================================
# TRANSFORMS
# ============================================================================


def flatten(node: Node) -> list[Node]:
    """Node and all its descendants in pre-order, with children removed.

    Example:
        For <a><b/>"t"</a>: [Element(a), Element(b), Text("t")]
    """
    match node:
        case Element(children=children) | Fragment(children=children) if children:
            result: list[Node] = [replace(node, children=())]
            for child in children:
                result.extend(flatten(child))
            return result
        case _:
            return [node]
