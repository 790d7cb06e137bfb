"""Tests for core/depth_guard.py: DepthGuard and depth_clamp.

Python 3.13+.
"""

from __future__ import annotations

import logging
import sys

import pytest

from tagtree.core import DepthGuard, DepthLimitExceededError, depth_clamp
from tagtree.diagnostics import DiagnosticCode, Span


class TestDepthGuard:
    """Test DepthGuard context manager."""

    def test_enter_exit(self) -> None:
        """Depth is incremented inside and restored after."""
        guard = DepthGuard(max_depth=5)

        with guard:
            assert guard.depth == 1
            with guard:
                assert guard.current_depth == 2
        assert guard.depth == 0

    def test_limit_raises(self) -> None:
        """Entering past max_depth raises DepthLimitExceededError."""
        guard = DepthGuard(max_depth=2)

        with guard, guard, pytest.raises(DepthLimitExceededError), guard:
            pass

    def test_failed_enter_leaves_depth_unchanged(self) -> None:
        """A raising __enter__ does not increment."""
        guard = DepthGuard(max_depth=1)

        with guard:
            with pytest.raises(DepthLimitExceededError):
                guard.__enter__()
            assert guard.depth == 1

    def test_error_carries_span(self) -> None:
        """The span given to enter() is reported."""
        guard = DepthGuard(max_depth=1)

        with guard, pytest.raises(DepthLimitExceededError) as exc_info, guard.enter(Span(4, 9)):
            pass

        diagnostic = exc_info.value.diagnostic
        assert diagnostic is not None
        assert diagnostic.code is DiagnosticCode.NESTING_DEPTH_EXCEEDED
        assert diagnostic.span == Span(4, 9)

    def test_is_exceeded_and_reset(self) -> None:
        """is_exceeded() tracks the limit; reset() clears depth."""
        guard = DepthGuard(max_depth=1)
        guard.__enter__()

        assert guard.is_exceeded()
        guard.reset()
        assert not guard.is_exceeded()

    def test_exit_on_exception(self) -> None:
        """Depth is restored when the body raises."""
        guard = DepthGuard(max_depth=3)

        with pytest.raises(RuntimeError), guard:
            raise RuntimeError

        assert guard.depth == 0


class TestDepthClamp:
    """Test depth_clamp()."""

    def test_within_limit(self) -> None:
        """Small depths pass through."""
        assert depth_clamp(10) == 10

    def test_clamped_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        """Depths beyond the recursion limit are clamped and logged."""
        limit = sys.getrecursionlimit()

        with caplog.at_level(logging.WARNING, logger="tagtree.core.depth_guard"):
            result = depth_clamp(limit * 10)

        assert result == (limit - 50) // 4
        assert "Clamping" in caplog.text

    def test_custom_frames(self) -> None:
        """Reserve and per-level frames are configurable."""
        limit = sys.getrecursionlimit()

        assert depth_clamp(limit, reserve_frames=0, frames_per_level=1) == limit

    def test_guard_clamps(self) -> None:
        """DepthGuard clamps its own max_depth."""
        guard = DepthGuard(max_depth=sys.getrecursionlimit() * 10)

        assert guard.max_depth == depth_clamp(guard.max_depth)
        assert guard.max_depth < sys.getrecursionlimit()
