"""Markup syntax: token trees, node tree and grammar engine.

Submodules:
    tokens: Token tree types (Ident, Punct, Literal, Group, TokenStream)
    source: Source text provider and line/column lookup
    cursor: Immutable TokenCursor and ParseResult
    expression: Host expression handle and parser protocol
    ast: Node tree types
    raw_text: Boundary-span backfill for RawText runs
    parser: Grammar engine and entry points

Python 3.13+. Zero external dependencies.
"""

from .tokens import Group, Ident, Literal, Punct, TokenStream, TokenTree, tokens_to_string
from .source import SourceText, SourceTextProvider
from .cursor import ParseResult, TokenCursor
from .expression import HostExpression, HostExpressionParser
from .ast import (
    Block,
    BlockName,
    CloseTag,
    Comment,
    Doctype,
    DynAttribute,
    Element,
    Fragment,
    FragmentClose,
    InvalidBlock,
    KeyedAttribute,
    Node,
    NodeAttribute,
    NodeBlock,
    NodeName,
    OpenTag,
    PathName,
    PunctuatedName,
    RawText,
    Text,
    ValidBlock,
    flatten,
)
from .raw_text import set_context_spans
from .parser import MarkupParser, ParseOutcome, parse_recoverable, parse_strict

__all__ = [
    "Block",
    "BlockName",
    "CloseTag",
    "Comment",
    "Doctype",
    "DynAttribute",
    "Element",
    "Fragment",
    "FragmentClose",
    "Group",
    "HostExpression",
    "HostExpressionParser",
    "Ident",
    "InvalidBlock",
    "KeyedAttribute",
    "Literal",
    "MarkupParser",
    "Node",
    "NodeAttribute",
    "NodeBlock",
    "NodeName",
    "OpenTag",
    "ParseOutcome",
    "ParseResult",
    "PathName",
    "Punct",
    "PunctuatedName",
    "RawText",
    "SourceText",
    "SourceTextProvider",
    "Text",
    "TokenCursor",
    "TokenStream",
    "TokenTree",
    "ValidBlock",
    "flatten",
    "parse_recoverable",
    "parse_strict",
    "set_context_spans",
    "tokens_to_string",
]
