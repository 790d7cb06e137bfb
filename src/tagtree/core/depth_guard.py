"""Unified depth limiting for recursion protection.

Provides reusable depth tracking to prevent stack overflow from:
- Deeply nested elements and fragments in the grammar engine
- Adversarial token trees built to exhaust the Python stack

Thread-safe: uses explicit state, no thread-local storage.
Python 3.13+.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field

from tagtree.constants import FRAMES_PER_NESTING_LEVEL, MAX_DEPTH, RECURSION_RESERVE_FRAMES
from tagtree.diagnostics import Span, TagTreeError
from tagtree.diagnostics.templates import ErrorTemplate

__all__ = ["DepthGuard", "DepthLimitExceededError", "depth_clamp"]

logger = logging.getLogger(__name__)


class DepthLimitExceededError(TagTreeError):
    """Raised when maximum nesting depth is exceeded.

    This error indicates either:
    - Adversarial input designed to cause stack overflow
    - Unintended deep nesting in markup
    """


@dataclass(slots=True)
class DepthGuard:
    """Context manager for tracking and limiting recursion depth.

    Usage in the grammar engine:
        guard = DepthGuard(max_depth=config.max_nesting_depth)
        with guard.enter(span):
            children = parse_children(ctx, cursor)

    Mutability Note:
        Intentionally mutable (not frozen=True) to enable stateful depth
        tracking via context manager protocol. The current_depth field is
        incremented/decremented on __enter__/__exit__.

    Thread Safety:
        Uses explicit instance state, fully reentrant.
        Each parse call owns its own DepthGuard instance.

    Attributes:
        max_depth: Maximum allowed depth (default: MAX_DEPTH)
        current_depth: Current recursion depth
    """

    max_depth: int = MAX_DEPTH
    current_depth: int = field(default=0, init=False)
    _span: Span | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        """Clamp max_depth against Python recursion limit."""
        self.max_depth = depth_clamp(self.max_depth)

    def enter(self, span: Span | None) -> DepthGuard:
        """Remember the span reported if the next __enter__ exceeds the limit."""
        self._span = span
        return self

    def __enter__(self) -> DepthGuard:
        """Enter guarded section, increment depth.

        Validates depth limit BEFORE incrementing so a raised
        DepthLimitExceededError leaves current_depth unchanged (__exit__ is
        not called when __enter__ raises).
        """
        self.check()
        self.current_depth += 1
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit guarded section, decrement depth."""
        self.current_depth -= 1

    @property
    def depth(self) -> int:
        """Current depth (alias for current_depth)."""
        return self.current_depth

    def is_exceeded(self) -> bool:
        """Check if depth limit has been exceeded."""
        return self.current_depth >= self.max_depth

    def check(self) -> None:
        """Explicitly check depth and raise if exceeded.

        Raises:
            DepthLimitExceededError: If depth limit exceeded
        """
        if self.current_depth >= self.max_depth:
            raise DepthLimitExceededError(
                ErrorTemplate.nesting_depth_exceeded(self.max_depth, self._span)
            )

    def reset(self) -> None:
        """Reset depth to zero (useful for reuse across multiple parses)."""
        self.current_depth = 0


def depth_clamp(
    requested_depth: int,
    reserve_frames: int = RECURSION_RESERVE_FRAMES,
    frames_per_level: int = FRAMES_PER_NESTING_LEVEL,
) -> int:
    """Clamp requested depth against Python recursion limit.

    Each nesting level of markup costs several Python frames, so the safe
    depth is the free part of sys.getrecursionlimit() divided by the frames
    spent per level. Logs warning if clamping occurs.

    Args:
        requested_depth: Desired maximum depth
        reserve_frames: Stack frames to reserve for call overhead
        frames_per_level: Stack frames consumed per nesting level

    Returns:
        Safe depth value, clamped if necessary

    Example:
        >>> import sys
        >>> sys.setrecursionlimit(1000)
        >>> depth_clamp(100)  # OK, within limit
        100
        >>> depth_clamp(500)  # Exceeds limit, clamped to (1000 - 50) // 4
        237
    """
    max_safe_depth = max(1, (sys.getrecursionlimit() - reserve_frames) // frames_per_level)
    if requested_depth > max_safe_depth:
        logger.warning(
            "Requested depth %d exceeds Python recursion limit (%d). "
            "Clamping to %d to prevent RecursionError. "
            "Consider increasing sys.setrecursionlimit() if needed.",
            requested_depth,
            sys.getrecursionlimit(),
            max_safe_depth,
        )
        return max_safe_depth
    return requested_depth
