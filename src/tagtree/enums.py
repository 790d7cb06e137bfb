"""Enumerations for tagtree type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class NodeKind(StrEnum):
    """Kind of a markup node.

    StrEnum provides automatic string conversion: str(NodeKind.ELEMENT) == "element"
    """

    ELEMENT = "element"
    """Named element: <div>...</div> or <br />"""

    FRAGMENT = "fragment"
    """Anonymous grouping: <>...</>"""

    TEXT = "text"
    """Quoted text: "hello" """

    RAW_TEXT = "raw_text"
    """Un-delimited run of tokens: hello world"""

    COMMENT = "comment"
    """Comment: <!-- "note" -->"""

    DOCTYPE = "doctype"
    """Doctype declaration: <!DOCTYPE html>"""

    BLOCK = "block"
    """Braced host-language code: { expression }"""


class Delimiter(StrEnum):
    """Delimiter of a token group.

    The value is the pair of opening and closing characters.
    """

    PARENTHESIS = "()"
    BRACE = "{}"
    BRACKET = "[]"

    @property
    def open(self) -> str:
        """Opening character."""
        return self.value[0]

    @property
    def close(self) -> str:
        """Closing character."""
        return self.value[1]


class Spacing(StrEnum):
    """Whether a punctuation token is immediately followed by another one."""

    ALONE = "alone"
    JOINT = "joint"


class TokenKind(StrEnum):
    """Coarse classification of a token tree, used for lookahead."""

    IDENT = "ident"
    PUNCT = "punct"
    LITERAL = "literal"
    GROUP = "group"
    EOF = "eof"


class NodeStart(StrEnum):
    """Construct announced by the next few tokens of input.

    Produced by the lookahead classifier in the grammar engine.
    """

    DOCTYPE = "doctype"
    """<! followed by an identifier"""

    COMMENT = "comment"
    """<! followed by -"""

    FRAGMENT = "fragment"
    """<>"""

    CLOSE_TAG = "close_tag"
    """</ (never valid where a node is expected)"""

    ELEMENT = "element"
    """< followed by anything else"""

    BLOCK = "block"
    """Brace-delimited group"""

    TEXT = "text"
    """String literal"""

    RAW_TEXT = "raw_text"
    """Anything else"""


class OutcomeStatus(StrEnum):
    """Status of a recoverable parse."""

    OK = "ok"
    """Fully valid, no diagnostics"""

    PARTIAL = "partial"
    """A best-effort value plus diagnostics"""

    FAILED = "failed"
    """No value, only diagnostics"""


__all__ = [
    "Delimiter",
    "NodeKind",
    "NodeStart",
    "OutcomeStatus",
    "Spacing",
    "TokenKind",
]
