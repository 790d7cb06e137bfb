"""Parser configuration.

Provides a single frozen dataclass that encapsulates every policy knob of
the grammar engine. One ParserConfig can be shared by any number of
parsers and parse calls; it is never mutated.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tagtree.constants import DEFAULT_NAME_SEPARATORS, MAX_DEPTH
from tagtree.enums import NodeKind

if TYPE_CHECKING:
    from tagtree.syntax.expression import HostExpressionParser
    from tagtree.syntax.cursor import TokenCursor
    from tagtree.syntax.tokens import TokenTree

__all__ = ["BlockTransformHook", "ParserConfig"]

# Receives a cursor over a block interior. Returns replacement tokens, or None
# to parse the interior unchanged. Raising HostSyntaxError marks the block invalid.
type BlockTransformHook = Callable[[TokenCursor], Sequence[TokenTree] | None]


def _frozen_names(names: Iterable[str]) -> frozenset[str]:
    if isinstance(names, str):
        msg = "Expected an iterable of names, got a single string"
        raise TypeError(msg)
    return frozenset(names)


@dataclass(frozen=True, slots=True, kw_only=True)
class ParserConfig:
    """Immutable policy for the grammar engine.

    All fields have sensible defaults; ``ParserConfig()`` parses any markup
    without HTML assumptions, collecting every diagnostic.

    Attributes:
        flatten_tree: Return all nodes in pre-order with children removed.
        required_top_level_count: Exact number of top-level nodes, checked
            before flattening (default: no constraint).
        required_top_level_kind: Kind every top-level node must have
            (default: no constraint).
        self_closing_names: Element names that never have children, even
            without a trailing "/" (HTML void elements).
        raw_text_names: Element names whose body is captured verbatim as a
            single RawText child (HTML script and style).
        recover_invalid_blocks: Keep blocks the host parser rejects as
            InvalidBlock nodes instead of aborting the parse.
        strict_mode: Stop at the first diagnostic.
        block_transform_hook: Rewrites block interiors before they reach
            the host expression parser.
        max_nesting_depth: Maximum element/fragment nesting, clamped
            against the Python recursion limit (default: 100).
        punctuated_name_separators: Characters joining identifiers into one
            name, such as "-" in data-id and ":" in on:click.
        skip_unexpected_punctuation: Skip one stray punctuation token when a
            child loop makes no progress, instead of stopping the loop.
        expression_parser: Host expression parser (default: Python).

    Example:
        >>> from tagtree.constants import HTML_RAW_TEXT_ELEMENTS, HTML_VOID_ELEMENTS
        >>> config = ParserConfig(
        ...     self_closing_names=HTML_VOID_ELEMENTS,
        ...     raw_text_names=HTML_RAW_TEXT_ELEMENTS,
        ...     recover_invalid_blocks=True,
        ... )
        >>> "br" in config.self_closing_names
        True
    """

    flatten_tree: bool = False
    required_top_level_count: int | None = None
    required_top_level_kind: NodeKind | None = None
    self_closing_names: frozenset[str] = field(default_factory=frozenset)
    raw_text_names: frozenset[str] = field(default_factory=frozenset)
    recover_invalid_blocks: bool = False
    strict_mode: bool = False
    block_transform_hook: BlockTransformHook | None = None
    max_nesting_depth: int = MAX_DEPTH
    punctuated_name_separators: frozenset[str] = DEFAULT_NAME_SEPARATORS
    skip_unexpected_punctuation: bool = True
    expression_parser: HostExpressionParser | None = None

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If a count or depth is out of range, or a separator
                is not a single punctuation character.
            TypeError: If a name set is given as a bare string.
        """
        # Accept any iterable of names; store frozensets
        object.__setattr__(self, "self_closing_names", _frozen_names(self.self_closing_names))
        object.__setattr__(self, "raw_text_names", _frozen_names(self.raw_text_names))
        object.__setattr__(
            self, "punctuated_name_separators", _frozen_names(self.punctuated_name_separators)
        )
        if self.required_top_level_kind is not None:
            object.__setattr__(
                self, "required_top_level_kind", NodeKind(self.required_top_level_kind)
            )

        if self.required_top_level_count is not None and self.required_top_level_count < 0:
            msg = "required_top_level_count must be non-negative"
            raise ValueError(msg)
        if self.max_nesting_depth <= 0:
            msg = "max_nesting_depth must be positive"
            raise ValueError(msg)
        for separator in self.punctuated_name_separators:
            if len(separator) != 1 or separator.isalnum() or separator.isspace():
                msg = f"Name separator must be a single punctuation character, got {separator!r}"
                raise ValueError(msg)
        if separators := self.punctuated_name_separators & {"<", ">", "/", "=", "."}:
            msg = f"Name separators would be ambiguous with tag syntax: {sorted(separators)}"
            raise ValueError(msg)

    def is_self_closing(self, name: str) -> bool:
        """Check whether an element name is configured as self-closing."""
        return name in self.self_closing_names

    def is_raw_text(self, name: str) -> bool:
        """Check whether an element name is configured as raw-text."""
        return name in self.raw_text_names
