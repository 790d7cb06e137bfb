"""Boundary-span backfill for raw text runs.

A RawText node cannot know its own surrounding whitespace: the tokens
carry none. What it can know is where the previous structure ended and
the next one starts. Those boundaries are only known once the parent has
collected all of its children, so the parent rewrites its RawText
children in one pass after the fact.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Sequence

from tagtree.diagnostics import Span

from .ast import Node, RawText

__all__ = ["set_context_spans"]


def set_context_spans(
    before: Span | None, children: Sequence[Node], after: Span | None
) -> tuple[Node, ...]:
    """Attach boundary spans to every RawText in a sibling sequence.

    Slides a window of three over (before, child spans..., after): each
    RawText gets the span of what precedes it and of what follows it.

    Args:
        before: Span of the token ending the opening boundary (the ">" of
            an open tag), None at top level
        children: Sibling nodes in order
        after: Span of the token starting the closing boundary (the "<" of
            a close tag), None at top level

    Returns:
        Children with RawText context spans filled in where both
        boundaries are known

    Example:
        For <p> hello   world </p> the run "hello world" is bounded by
        ">" and "<", so to_string_best() yields " hello   world ".
    """
    bounds = [before, *(child.span for child in children), after]
    result: list[Node] = []
    for i, child in enumerate(children):
        previous, following = bounds[i], bounds[i + 2]
        if isinstance(child, RawText) and previous is not None and following is not None:
            result.append(child.with_context_spans(previous, following))
        else:
            result.append(child)
    return tuple(result)
