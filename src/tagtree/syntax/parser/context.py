"""Per-call parse state: configuration, diagnostics sink, depth tracking.

Replaces ambient (global or thread-local) parser state with an explicit
context passed to every grammar rule:
- Thread safety without global state
- Independent parse calls share nothing
- Easier testing (no state reset needed)
"""

import logging
from dataclasses import dataclass, field
from typing import NoReturn

from tagtree.config import ParserConfig
from tagtree.core.depth_guard import DepthGuard
from tagtree.diagnostics import Diagnostic, ErrorTemplate, Span
from tagtree.syntax.cursor import TokenCursor
from tagtree.syntax.expression import HostExpressionParser
from tagtree.syntax.tokens import TokenTree

__all__ = ["ParseAborted", "ParseContext"]

logger = logging.getLogger(__name__)


class ParseAborted(Exception):  # noqa: N818 - control flow signal, not an error
    """Unwinds the grammar engine after a terminal diagnostic.

    Internal: raised by ParseContext and caught by MarkupParser, which turns
    it into a failed ParseOutcome. Never escapes the public API.
    """


@dataclass(slots=True)
class ParseContext:
    """Explicit context for one parse call.

    Attributes:
        config: Policy in force
        expression_parser: Host expression parser in force
        diagnostics: Diagnostics recorded so far, in order
        depth_guard: Element/fragment nesting tracker
    """

    config: ParserConfig
    expression_parser: HostExpressionParser
    diagnostics: list[Diagnostic] = field(default_factory=list)
    depth_guard: DepthGuard = field(init=False)
    _stalled_at: tuple[tuple[TokenTree, ...], int] | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.depth_guard = DepthGuard(max_depth=self.config.max_nesting_depth)

    def push(self, diagnostic: Diagnostic) -> None:
        """Record a diagnostic and continue (abort instead in strict mode)."""
        self.diagnostics.append(diagnostic)
        if self.config.strict_mode:
            logger.debug("Strict mode: aborting at %s", diagnostic.code.name)
            raise ParseAborted
        logger.debug("Recovered from %s: %s", diagnostic.code.name, diagnostic.message)

    def abort(self, diagnostic: Diagnostic) -> NoReturn:
        """Record a diagnostic and abort the whole parse."""
        self.diagnostics.append(diagnostic)
        logger.debug("Aborting parse at %s: %s", diagnostic.code.name, diagnostic.message)
        raise ParseAborted

    def enter_nested(self, span: Span | None) -> DepthGuard:
        """Depth guard for one more level of nesting, aborting if the limit is reached.

        Usage:
            with ctx.enter_nested(open_tag.span):
                children = parse_children(...)
        """
        if self.depth_guard.is_exceeded():
            self.abort(ErrorTemplate.nesting_depth_exceeded(self.depth_guard.max_depth, span))
        return self.depth_guard.enter(span)

    def is_stalled(self, cursor: TokenCursor) -> bool:
        """Check whether a loop already gave up at this cursor position."""
        if self._stalled_at is None:
            return False
        trees, pos = self._stalled_at
        return trees is cursor.trees and pos == cursor.pos

    def stall(self, cursor: TokenCursor, what: str) -> None:
        """Record that a loop over `what` can make no progress at cursor.

        Enclosing loops stuck on the same token report nothing more.
        """
        if self.is_stalled(cursor):
            return
        self._stalled_at = (cursor.trees, cursor.pos)
        self.push(ErrorTemplate.unexpected_end_of_input(what, cursor.span))
