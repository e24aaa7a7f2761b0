#!/usr/bin/env python3
"""
Unit tests for the ordered fallback combinator.
"""

import pytest
from unittest.mock import AsyncMock
from playlist_import.utils.fallback import Attempt, FetchFailure, FetchResult, first_success


class TestFetchResult:
    """Unit tests for FetchResult."""

    def test_success(self):
        result = FetchResult.success("value")
        assert result.ok
        assert result.value == "value"
        assert result.failure is None

    def test_fail(self):
        result = FetchResult.fail("api", "boom", 503)
        assert not result.ok
        assert result.failure == FetchFailure(attempt="api", reason="boom", status=503)
        assert "HTTP 503" in str(result.failure)

    def test_success_without_value_is_not_ok(self):
        assert not FetchResult.success(None).ok


class TestFirstSuccess:
    """Unit tests for first_success."""

    @pytest.mark.asyncio
    async def test_stops_at_first_success(self):
        """Test later attempts are never run once one succeeds."""
        first = AsyncMock(return_value=FetchResult.success("a"))
        second = AsyncMock(return_value=FetchResult.success("b"))

        outcome = await first_success([Attempt("first", first), Attempt("second", second)])

        assert outcome.value == "a"
        assert outcome.succeeded_with == "first"
        assert outcome.failures == []
        first.assert_awaited_once()
        second.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_falls_through_failures_in_order(self):
        calls = []

        async def failing():
            calls.append("failing")
            return FetchResult.fail("failing", "empty")

        async def raising():
            calls.append("raising")
            raise ConnectionError("unreachable")

        async def working():
            calls.append("working")
            return FetchResult.success(42)

        outcome = await first_success([
            Attempt("failing", failing),
            Attempt("raising", raising),
            Attempt("working", working),
        ])

        assert calls == ["failing", "raising", "working"]
        assert outcome.value == 42
        assert outcome.succeeded_with == "working"
        assert [f.attempt for f in outcome.failures] == ["failing", "raising"]
        assert "ConnectionError" in outcome.failures[1].reason
        assert outcome.attempts_made == 3

    @pytest.mark.asyncio
    async def test_all_fail(self):
        """Test total failure is reported as absence, not an exception."""
        outcome = await first_success([
            Attempt("one", AsyncMock(side_effect=ValueError("bad json"))),
            Attempt("two", AsyncMock(return_value=FetchResult.fail("two", "no tracks"))),
        ])

        assert outcome.value is None
        assert outcome.succeeded_with is None
        assert len(outcome.failures) == 2

    @pytest.mark.asyncio
    async def test_empty_attempt_list(self):
        outcome = await first_success([])
        assert outcome.value is None
        assert outcome.failures == []
