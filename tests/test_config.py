"""Tests for config.py: ParserConfig validation and presets.

Python 3.13+.
"""

from __future__ import annotations

import dataclasses

import pytest

from tagtree import NodeKind, ParserConfig
from tagtree.constants import (
    DEFAULT_NAME_SEPARATORS,
    HTML_RAW_TEXT_ELEMENTS,
    HTML_VOID_ELEMENTS,
    MAX_DEPTH,
)
from tagtree.host import PythonExpressionParser


class TestDefaults:
    """ParserConfig() parses without HTML assumptions."""

    def test_defaults(self) -> None:
        """Every field has its documented default."""
        config = ParserConfig()

        assert config.flatten_tree is False
        assert config.required_top_level_count is None
        assert config.required_top_level_kind is None
        assert config.self_closing_names == frozenset()
        assert config.raw_text_names == frozenset()
        assert config.recover_invalid_blocks is False
        assert config.strict_mode is False
        assert config.block_transform_hook is None
        assert config.max_nesting_depth == MAX_DEPTH
        assert config.punctuated_name_separators == DEFAULT_NAME_SEPARATORS
        assert config.skip_unexpected_punctuation is True
        assert config.expression_parser is None

    def test_frozen(self) -> None:
        """Configuration is immutable."""
        config = ParserConfig()

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.strict_mode = True  # type: ignore[misc]

    def test_keyword_only(self) -> None:
        """Fields must be passed by keyword."""
        with pytest.raises(TypeError):
            ParserConfig(True)  # type: ignore[misc]

    def test_custom_expression_parser(self) -> None:
        """An explicit host parser is kept as given."""
        parser = PythonExpressionParser()

        assert ParserConfig(expression_parser=parser).expression_parser is parser


class TestNameSets:
    """Self-closing and raw-text name sets."""

    def test_iterables_become_frozensets(self) -> None:
        """Any iterable of names is stored as a frozenset."""
        config = ParserConfig(
            self_closing_names=["br", "hr"],  # type: ignore[arg-type]
            raw_text_names=("script",),  # type: ignore[arg-type]
        )

        assert config.self_closing_names == frozenset({"br", "hr"})
        assert config.raw_text_names == frozenset({"script"})
        assert config.is_self_closing("br")
        assert not config.is_self_closing("div")
        assert config.is_raw_text("script")

    def test_bare_string_rejected(self) -> None:
        """A single string would silently become a set of characters."""
        with pytest.raises(TypeError, match="single string"):
            ParserConfig(self_closing_names="br")  # type: ignore[arg-type]

    def test_html_presets(self) -> None:
        """HTML presets hold the usual void and raw-text elements."""
        assert {"br", "img", "input", "meta"} <= HTML_VOID_ELEMENTS
        assert {"script", "style"} <= HTML_RAW_TEXT_ELEMENTS
        assert not HTML_VOID_ELEMENTS & HTML_RAW_TEXT_ELEMENTS


class TestValidation:
    """__post_init__ range and format checks."""

    def test_negative_count(self) -> None:
        """A negative top-level count is rejected."""
        with pytest.raises(ValueError, match="non-negative"):
            ParserConfig(required_top_level_count=-1)

    def test_zero_count_allowed(self) -> None:
        """Zero means 'no top-level nodes'."""
        assert ParserConfig(required_top_level_count=0).required_top_level_count == 0

    @pytest.mark.parametrize("depth", [0, -5])
    def test_non_positive_depth(self, depth: int) -> None:
        """Nesting depth must be positive."""
        with pytest.raises(ValueError, match="positive"):
            ParserConfig(max_nesting_depth=depth)

    def test_unknown_kind(self) -> None:
        """Kinds are validated against NodeKind."""
        with pytest.raises(ValueError):
            ParserConfig(required_top_level_kind="paragraph")  # type: ignore[arg-type]

    def test_kind_enum(self) -> None:
        """NodeKind members are accepted as-is."""
        config = ParserConfig(required_top_level_kind=NodeKind.ELEMENT)

        assert config.required_top_level_kind is NodeKind.ELEMENT

    @pytest.mark.parametrize("separator", ["ab", "a", "1", " ", ""])
    def test_separator_must_be_punctuation(self, separator: str) -> None:
        """Separators are single punctuation characters."""
        with pytest.raises(ValueError, match="single punctuation"):
            ParserConfig(punctuated_name_separators=frozenset({separator}))

    @pytest.mark.parametrize("separator", ["<", ">", "/", "=", "."])
    def test_separator_must_not_be_tag_syntax(self, separator: str) -> None:
        """Characters with a meaning in tags cannot join names."""
        with pytest.raises(ValueError, match="ambiguous"):
            ParserConfig(punctuated_name_separators=frozenset({separator}))

    def test_custom_separator(self) -> None:
        """A custom separator set changes which names are accepted."""
        from tagtree import parse_recoverable

        config = ParserConfig(punctuated_name_separators=frozenset({"@"}))

        (element,) = parse_recoverable("<a@b></a@b>", config).into_result()
        assert str(element.name) == "a@b"
        assert not parse_recoverable("<a-b></a-b>", config).is_ok

    def test_replace_revalidates(self) -> None:
        """dataclasses.replace() runs validation again."""
        with pytest.raises(ValueError):
            dataclasses.replace(ParserConfig(), max_nesting_depth=0)
