"""Shared constants for tagtree.

This module provides centralized configuration constants used across the
syntax, host and diagnostics packages. Placing constants here avoids
circular imports and provides a single source of truth.

Constants are grouped by domain:
- Depth limits: Recursion protection for the grammar engine
- Input limits: DoS prevention via size constraints
- Name presets: Opt-in HTML element sets for ParserConfig

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Depth limits
    "MAX_DEPTH",
    "FRAMES_PER_NESTING_LEVEL",
    "RECURSION_RESERVE_FRAMES",
    # Input limits
    "MAX_SOURCE_SIZE",
    # Grammar
    "DEFAULT_NAME_SEPARATORS",
    "PATH_SEPARATOR",
    "DOCTYPE_KEYWORD",
    # Name presets
    "HTML_VOID_ELEMENTS",
    "HTML_RAW_TEXT_ELEMENTS",
]

# ============================================================================
# DEPTH LIMITS
# ============================================================================
#
# The grammar engine is a recursive descent: every nested element or
# fragment costs a handful of Python frames (node dispatch, construct
# parser, children loop). Nesting is therefore bounded explicitly and the
# bound is reported as a diagnostic instead of surfacing as RecursionError.
#
# 100 levels is far beyond hand-written markup and keeps
# 100 * FRAMES_PER_NESTING_LEVEL well under the default recursion limit.

MAX_DEPTH: int = 100

# Python frames consumed per level of markup nesting.
FRAMES_PER_NESTING_LEVEL: int = 4

# Frames kept free for the caller and the parser entry points.
RECURSION_RESERVE_FRAMES: int = 50

# ============================================================================
# INPUT LIMITS
# ============================================================================

# Maximum source size accepted by the host tokenizer adapter (characters).
MAX_SOURCE_SIZE: int = 10 * 1024 * 1024

# ============================================================================
# GRAMMAR
# ============================================================================

# Characters that may join identifiers into a punctuated name (data-foo, on:click).
DEFAULT_NAME_SEPARATORS: frozenset[str] = frozenset({"-", ":"})

# Separator of path names (some.module.Component).
PATH_SEPARATOR: str = "."

# Keyword that follows "<!" in a doctype declaration (matched case-insensitively).
DOCTYPE_KEYWORD: str = "doctype"

# ============================================================================
# NAME PRESETS
# ============================================================================
#
# Not applied by default: the parser is not opinionated about HTML. Pass
# them to ParserConfig to get HTML-like void and raw-text handling.

HTML_VOID_ELEMENTS: frozenset[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

HTML_RAW_TEXT_ELEMENTS: frozenset[str] = frozenset({"script", "style"})
