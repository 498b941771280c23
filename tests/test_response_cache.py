"""
Test Response Cache
"""

from unittest.mock import AsyncMock

import pytest
from conftest import FakeClock

from contextual_retrieval.engine.cache import TimedCache
from contextual_retrieval.engine.response_cache import ResponseCache
from contextual_retrieval.errors import LLMTimeoutError


def make_cache(clock=None):
    return ResponseCache(TimedCache("response", lifetime_seconds=100, clock=clock or FakeClock()))


class TestResponseCache:
    """Tests for get-or-compute behaviour."""

    @pytest.mark.asyncio
    async def test_compute_once(self):
        cache = make_cache()
        compute = AsyncMock(return_value="answer")

        first = await cache.get_or_compute("prompt", compute)
        second = await cache.get_or_compute("prompt\n", compute)

        assert first.text == second.text == "answer"
        assert first.from_cache is False
        assert second.from_cache is True
        compute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_key_is_case_sensitive(self):
        cache = make_cache()
        compute = AsyncMock(side_effect=["a", "b"])

        await cache.get_or_compute("Prompt", compute)
        result = await cache.get_or_compute("prompt", compute)

        assert result.text == "b"
        assert compute.await_count == 2

    @pytest.mark.asyncio
    async def test_failure_is_not_cached(self):
        cache = make_cache()
        compute = AsyncMock(side_effect=[LLMTimeoutError("timed out"), "recovered"])

        with pytest.raises(LLMTimeoutError):
            await cache.get_or_compute("prompt", compute)

        result = await cache.get_or_compute("prompt", compute)
        assert result.text == "recovered"
        assert result.from_cache is False

    @pytest.mark.asyncio
    async def test_expiry(self):
        clock = FakeClock()
        cache = make_cache(clock)
        compute = AsyncMock(return_value="answer")

        await cache.get_or_compute("prompt", compute)
        clock.advance(100)
        result = await cache.get_or_compute("prompt", compute)

        assert result.from_cache is False
        assert compute.await_count == 2

    @pytest.mark.asyncio
    async def test_empty_completion_is_cached(self):
        cache = make_cache()
        compute = AsyncMock(return_value="")

        await cache.get_or_compute("prompt", compute)
        result = await cache.get_or_compute("prompt", compute)

        assert result.from_cache is True
        compute.assert_awaited_once()
