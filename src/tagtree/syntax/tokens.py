"""Token tree: the input model of the grammar engine.

A token tree is an identifier, a punctuation character, a literal, or a
delimited group holding a nested token sequence. Token trees are produced
by a host tokenizer (see tagtree.host) or built by hand.

Every token carries an optional span. Spans are excluded from equality so
two token trees compare equal when their content matches, wherever they
came from.

Python 3.13+. Zero external dependencies.
"""

import ast
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import ClassVar

from tagtree.diagnostics import Span
from tagtree.enums import Delimiter, Spacing, TokenKind

from .source import SourceTextProvider

__all__ = [
    "Group",
    "Ident",
    "Literal",
    "Punct",
    "TokenStream",
    "TokenTree",
    "describe_token",
    "stream_span",
    "tokens_to_string",
]


@dataclass(frozen=True, slots=True)
class Ident:
    """Identifier or keyword: div, class, None."""

    kind: ClassVar[TokenKind] = TokenKind.IDENT

    name: str
    span: Span | None = field(default=None, compare=False)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class Punct:
    """Single punctuation character.

    Multi-character operators are sequences of Punct where every character
    but the last has JOINT spacing: "/>" is Punct("/", JOINT), Punct(">").
    """

    kind: ClassVar[TokenKind] = TokenKind.PUNCT

    char: str
    spacing: Spacing = Spacing.ALONE
    span: Span | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if len(self.char) != 1:
            msg = f"Punct must be a single character, got {self.char!r}"
            raise ValueError(msg)

    def __str__(self) -> str:
        return self.char


@dataclass(frozen=True, slots=True)
class Literal:
    """Literal token, kept in its host source form: "text", 42, f"{x}"."""

    kind: ClassVar[TokenKind] = TokenKind.LITERAL

    text: str
    span: Span | None = field(default=None, compare=False)

    @property
    def value(self) -> object:
        """Decoded literal value.

        Raises:
            ValueError: If the literal is not a constant (f-strings)
        """
        try:
            return ast.literal_eval(self.text)
        except SyntaxError as e:
            msg = f"Not a constant literal: {self.text}"
            raise ValueError(msg) from e

    @property
    def is_string(self) -> bool:
        """True for plain string literals, False for numbers, bytes and f-strings."""
        try:
            return isinstance(self.value, str)
        except ValueError:
            return False

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class Group:
    """Delimited token sequence: ( ... ), { ... } or [ ... ]."""

    kind: ClassVar[TokenKind] = TokenKind.GROUP

    delimiter: Delimiter
    stream: tuple["TokenTree", ...] = ()
    span: Span | None = field(default=None, compare=False)

    @property
    def open_span(self) -> Span | None:
        """Span of the opening delimiter."""
        if self.span is None:
            return None
        return Span(self.span.start, self.span.start + 1)

    @property
    def close_span(self) -> Span | None:
        """Span of the closing delimiter."""
        if self.span is None:
            return None
        return Span(max(self.span.start, self.span.end - 1), self.span.end)

    def __str__(self) -> str:
        return tokens_to_string((self,))


type TokenTree = Ident | Punct | Literal | Group


@dataclass(frozen=True, slots=True)
class TokenStream:
    """Token sequence bundled with the source it was read from.

    Attributes:
        trees: Top-level token trees
        source: Source text provider (None for hand-built streams)
    """

    trees: tuple[TokenTree, ...]
    source: SourceTextProvider | None = field(default=None, compare=False)

    @classmethod
    def of(
        cls, trees: Iterable[TokenTree], source: SourceTextProvider | None = None
    ) -> "TokenStream":
        """Build a stream from any iterable of token trees."""
        return cls(tuple(trees), source)

    def __len__(self) -> int:
        return len(self.trees)

    def __str__(self) -> str:
        return tokens_to_string(self.trees)


def tokens_to_string(trees: Iterable[TokenTree]) -> str:
    """Canonical re-stringification of a token sequence.

    Tokens are separated by one space, except after a JOINT punctuation
    character. Brace groups are padded with spaces, other groups are not.
    Original whitespace is not preserved.

    Example:
        >>> tokens_to_string([Ident("a"), Punct("=", Spacing.JOINT), Punct("="), Ident("b")])
        'a == b'
    """
    parts: list[str] = []
    joint = True
    for tree in trees:
        if not joint:
            parts.append(" ")
        match tree:
            case Group(delimiter=delimiter, stream=stream):
                inner = tokens_to_string(stream)
                if delimiter is Delimiter.BRACE and inner:
                    parts.append(f"{{ {inner} }}")
                else:
                    parts.append(f"{delimiter.open}{inner}{delimiter.close}")
                joint = False
            case Punct(char=char, spacing=spacing):
                parts.append(char)
                joint = spacing is Spacing.JOINT
            case _:
                parts.append(str(tree))
                joint = False
    return "".join(parts)


def stream_span(trees: Sequence[TokenTree]) -> Span | None:
    """Span covering a token sequence, or None if empty or unknown."""
    if not trees:
        return None
    return Span.join(trees[0].span, trees[-1].span)


def describe_token(tree: TokenTree | None) -> str:
    """Short human-readable description used in diagnostics."""
    match tree:
        case None:
            return "end of input"
        case Ident(name=name):
            return f"identifier '{name}'"
        case Punct(char=char):
            return f"'{char}'"
        case Literal(text=text):
            return f"literal {text}"
        case Group(delimiter=delimiter):
            return f"'{delimiter.open}...{delimiter.close}' group"
