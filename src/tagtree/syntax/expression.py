"""Embedded host-expression interfaces.

The grammar engine decides where an embedded host expression starts and
ends; the host expression parser decides whether the tokens in between
form a valid expression. Any object satisfying HostExpressionParser can be
plugged into ParserConfig.expression_parser.

Python 3.13+. Zero external dependencies.
"""

import ast
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from tagtree.diagnostics import Span

from .cursor import ParseResult, TokenCursor
from .source import SourceTextProvider
from .tokens import TokenTree, stream_span, tokens_to_string

__all__ = ["HostExpression", "HostExpressionParser"]


@dataclass(frozen=True, slots=True)
class HostExpression:
    """Handle to a parsed host expression.

    Attributes:
        tokens: Tokens the expression was parsed from
        tree: Host syntax tree (None for an empty block), excluded from equality
        text: Source text the host parser saw
    """

    tokens: tuple[TokenTree, ...]
    tree: ast.expr | None = field(default=None, compare=False, repr=False)
    text: str = ""

    @property
    def span(self) -> Span | None:
        """Span covering the expression tokens."""
        return stream_span(self.tokens)

    @property
    def is_empty(self) -> bool:
        """True for the expression of an empty block: {}."""
        return not self.tokens

    def literal_value(self) -> object:
        """Constant value of a literal expression.

        Raises:
            ValueError: If the expression is not a constant
        """
        if self.tree is None:
            msg = "Empty expression has no value"
            raise ValueError(msg)
        return ast.literal_eval(self.tree)

    def __str__(self) -> str:
        return tokens_to_string(self.tokens)


@runtime_checkable
class HostExpressionParser(Protocol):
    """Parser for embedded host-language expressions."""

    def parse_expression(self, cursor: TokenCursor) -> ParseResult[HostExpression]:
        """Parse one expression starting at the cursor.

        Consumes the longest token prefix that forms an expression.

        Raises:
            HostSyntaxError: If no prefix forms an expression
        """
        ...

    def parse_block(
        self, tokens: Sequence[TokenTree], source: SourceTextProvider | None
    ) -> HostExpression:
        """Parse the complete interior of a block.

        Empty interiors are valid and yield an expression with tree None.

        Raises:
            HostSyntaxError: If the tokens do not form one expression
        """
        ...
