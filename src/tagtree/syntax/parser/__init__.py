"""Markup grammar engine.

This module provides the MarkupParser class and the two parse entry points,
organized into focused submodules.

Module Organization:
- core.py: MarkupParser, parse_recoverable() and parse_strict()
- context.py: Per-call ParseContext (config, diagnostics, depth)
- primitives.py: Node names, blocks, punctuation runs, progress recovery
- attributes.py: Two-phase open-tag body parsing
- rules.py: Grammar rules for every node kind
- outcome.py: ParseOutcome (Ok / Partial / Failed)

Public API:
    MarkupParser: Parser bound to one ParserConfig
    parse_recoverable: Parse collecting every diagnostic
    parse_strict: Parse stopping at the first diagnostic
    ParseOutcome: Result of a recoverable parse
    ParseContext: Per-call parse state (advanced usage)
"""

from tagtree.syntax.parser.context import ParseContext
from tagtree.syntax.parser.core import MarkupParser, parse_recoverable, parse_strict
from tagtree.syntax.parser.outcome import ParseOutcome

__all__ = ["MarkupParser", "ParseContext", "ParseOutcome", "parse_recoverable", "parse_strict"]
