"""Markup parser entry points.

This module provides the MarkupParser class that orchestrates parsing of a
token tree into the node tree defined in :mod:`tagtree.syntax.ast`.

Architecture:
    The parser uses an immutable cursor pattern (:class:`~tagtree.syntax.cursor.TokenCursor`)
    to traverse the token tree. Each grammar rule (in :mod:`~tagtree.syntax.parser.rules`,
    :mod:`~tagtree.syntax.parser.attributes`, etc.) returns either a
    :class:`~tagtree.syntax.cursor.ParseResult` with the parsed node and the
    updated cursor, or None after recording a diagnostic.

Result Assembly:
    After the top-level sequence is built the parser, in order:

    - backfills boundary spans of top-level raw text runs
    - checks the required top-level kind (one diagnostic per offending node)
    - checks the required top-level count (one diagnostic)
    - flattens the tree if configured

    Constraint checks never discard nodes that were already parsed.

Security:
    Source text is size-limited before tokenization and nesting is bounded
    by ParserConfig.max_nesting_depth.

See Also:
    - :mod:`tagtree.syntax.ast` - Node type definitions
    - :mod:`tagtree.syntax.parser.rules` - Grammar rules
    - :mod:`tagtree.syntax.parser.outcome` - ParseOutcome
"""

import logging
from collections.abc import Sequence
from dataclasses import replace

from tagtree.config import ParserConfig
from tagtree.diagnostics import ErrorTemplate, HostSyntaxError, Span
from tagtree.enums import NodeStart
from tagtree.syntax.ast import Node, flatten
from tagtree.syntax.cursor import TokenCursor
from tagtree.syntax.expression import HostExpressionParser
from tagtree.syntax.raw_text import set_context_spans
from tagtree.syntax.tokens import TokenStream, TokenTree

from .context import ParseAborted, ParseContext
from .outcome import ParseOutcome
from .primitives import recover_progress
from .rules import classify, parse_node, skip_stray_close_tag

__all__ = ["MarkupParser", "parse_recoverable", "parse_strict"]

logger = logging.getLogger(__name__)

type ParserInput = TokenStream | Sequence[TokenTree] | str


def _default_expression_parser() -> HostExpressionParser:
    from tagtree.host.python import PythonExpressionParser  # noqa: PLC0415 - circular

    return PythonExpressionParser()


def _tokenize(source: str) -> TokenStream:
    from tagtree.host.python import tokenize_source  # noqa: PLC0415 - circular

    return tokenize_source(source)


class MarkupParser:
    """Markup parser over host-language token trees.

    Design:
    - Immutable cursor: forking is copying, committing is reassigning
    - Explicit ParseContext instead of ambient state: parse calls share nothing
    - Every loop is progress-guarded, so any input terminates

    Attributes:
        config: Policy applied to every parse call

    Example:
        >>> parser = MarkupParser()
        >>> outcome = parser.parse_recoverable('<foo bar="moo"></foo>')
        >>> str(outcome.value[0].name)
        'foo'
    """

    __slots__ = ("_config", "_expression_parser")

    def __init__(self, config: ParserConfig | None = None) -> None:
        self._config = config if config is not None else ParserConfig()
        self._expression_parser = (
            self._config.expression_parser
            if self._config.expression_parser is not None
            else _default_expression_parser()
        )

    @property
    def config(self) -> ParserConfig:
        return self._config

    def parse_recoverable(self, tokens: ParserInput) -> ParseOutcome[tuple[Node, ...]]:
        """Parse collecting every diagnostic.

        Args:
            tokens: Token stream, token trees, or host source text

        Returns:
            Ok with the nodes, Partial with the nodes built despite
            diagnostics, or Failed if nothing usable was built

        Raises:
            ValueError: If source text exceeds the maximum source size
        """
        return self._parse(tokens, self._config)

    def parse_strict(self, tokens: ParserInput) -> tuple[Node, ...]:
        """Parse stopping at the first diagnostic.

        Returns:
            The nodes of a diagnostic-free parse

        Raises:
            TagSyntaxError: Carrying the first diagnostic
            ValueError: If source text exceeds the maximum source size
        """
        config = self._config
        if not config.strict_mode:
            config = replace(config, strict_mode=True)
        return self._parse(tokens, config).into_result()

    def _parse(self, tokens: ParserInput, config: ParserConfig) -> ParseOutcome[tuple[Node, ...]]:
        if isinstance(tokens, str):
            try:
                tokens = _tokenize(tokens)
            except HostSyntaxError as e:
                diagnostic = e.diagnostic or ErrorTemplate.host_syntax_error(str(e), None)
                logger.debug("Tokenization failed: %s", diagnostic.message)
                return ParseOutcome.failed([diagnostic])

        cursor = TokenCursor.of(tokens)
        ctx = ParseContext(config, self._expression_parser)
        try:
            nodes = self._parse_top_level(ctx, cursor)
        except ParseAborted:
            logger.debug("Parse aborted with %d diagnostic(s)", len(ctx.diagnostics))
            return ParseOutcome.failed(ctx.diagnostics)

        logger.debug(
            "Parsed %d top-level node(s) with %d diagnostic(s)", len(nodes), len(ctx.diagnostics)
        )
        return ParseOutcome.from_parts(nodes, ctx.diagnostics)

    def _parse_top_level(self, ctx: ParseContext, cursor: TokenCursor) -> tuple[Node, ...]:
        nodes: list[Node] = []
        while not cursor.is_eof and not ctx.is_stalled(cursor):
            if classify(cursor) is NodeStart.CLOSE_TAG:
                cursor = skip_stray_close_tag(ctx, cursor)
                continue
            before = cursor
            result = parse_node(ctx, cursor)
            if result is not None:
                nodes.append(result.value)
                cursor = result.cursor
            if cursor.pos == before.pos:
                recovered = recover_progress(ctx, cursor, "top-level nodes")
                if recovered is None:
                    break
                cursor = recovered

        top_level = set_context_spans(None, nodes, None)
        self._check_top_level(ctx, top_level)

        if ctx.config.flatten_tree:
            return tuple(flat for node in top_level for flat in flatten(node))
        return top_level

    @staticmethod
    def _check_top_level(ctx: ParseContext, nodes: tuple[Node, ...]) -> None:
        config = ctx.config
        if (kind := config.required_top_level_kind) is not None:
            for node in nodes:
                if node.kind is not kind:
                    ctx.push(ErrorTemplate.top_level_kind(kind, node.kind, node.span))

        if (count := config.required_top_level_count) is not None and len(nodes) != count:
            spans = [node.span for node in nodes if node.span is not None]
            span = Span.join(spans[0], spans[-1]) if spans else None
            ctx.push(ErrorTemplate.top_level_count(count, len(nodes), span))


def parse_recoverable(
    tokens: ParserInput, config: ParserConfig | None = None
) -> ParseOutcome[tuple[Node, ...]]:
    """Parse collecting every diagnostic. See MarkupParser.parse_recoverable."""
    return MarkupParser(config).parse_recoverable(tokens)


def parse_strict(tokens: ParserInput, config: ParserConfig | None = None) -> tuple[Node, ...]:
    """Parse stopping at the first diagnostic. See MarkupParser.parse_strict."""
    return MarkupParser(config).parse_strict(tokens)
