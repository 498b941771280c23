"""
Test Retrieve Pipeline

Ranking, thresholding, weighting and the retrieval cache tier.
"""

from unittest.mock import AsyncMock, patch

import pytest

from contextual_retrieval.models.memory_item import MemoryCategory, MemoryItem

QUERY = "what sorting algorithm should I use"


async def seed(system):
    await system.add_memory("Use binary search for sorted arrays", "code")
    await system.add_memory("Meeting notes from Monday", "general")
    await system.add_memory("Decided to switch to TypeScript", "decisions")


def insert_raw(system, category, vector, content):
    """Store a vector as-is so similarities are exact."""
    return system.store.insert(category, MemoryItem(embedding=vector, content=content))


class TestRanking:
    """Tests for weighted multi-category ranking."""

    @pytest.mark.asyncio
    async def test_relevant_item_is_ranked(self, system):
        await seed(system)

        results = await system.retrieve(QUERY)

        assert len(results) == 1
        top = results[0]
        assert top.item.content == "Use binary search for sorted arrays"
        assert top.item.category == MemoryCategory.CODE
        # cosine(0.9, 0.1, 0.1) against the code axis, times the code weight
        assert top.score == pytest.approx(0.9 / 0.83 ** 0.5 * 1.3, rel=1e-5)

    @pytest.mark.asyncio
    async def test_empty_store(self, system):
        assert await system.retrieve("anything") == []

    @pytest.mark.asyncio
    async def test_category_weight_orders_equal_similarity(self, system):
        await system.add_memory("probe", "general")
        await system.add_memory("probe", "preferences")
        await system.add_memory("probe", "metadata")

        results = await system.retrieve("probe")

        assert [r.item.category for r in results] == [
            MemoryCategory.PREFERENCES,
            MemoryCategory.GENERAL,
            MemoryCategory.METADATA,
        ]
        assert [r.score for r in results] == pytest.approx([1.5, 1.0, 0.5])

    @pytest.mark.asyncio
    async def test_scores_are_non_increasing(self, system):
        insert_raw(system, "general", [0.8, 0.6, 0.0, 0.0], "g")
        insert_raw(system, "code", [0.9, 0.0, 0.0, 0.0], "c")
        insert_raw(system, "concepts", [1.0, 0.0, 0.0, 0.0], "k")
        insert_raw(system, "procedures", [0.76, 0.0, 0.0, 0.0], "p")

        results = await system.retrieve("probe")
        scores = [r.score for r in results]

        assert scores == sorted(scores, reverse=True)
        assert [r.item.content for r in results] == ["k", "c", "p", "g"]

    @pytest.mark.asyncio
    async def test_equal_scores_keep_insertion_order(self, system):
        first = insert_raw(system, "general", [1.0, 0.0, 0.0, 0.0], "first")
        second = insert_raw(system, "general", [1.0, 0.0, 0.0, 0.0], "second")

        results = await system.retrieve("probe")

        assert [r.item.id for r in results] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_results_share_stored_items(self, system):
        stored = insert_raw(system, "code", [1.0, 0.0, 0.0, 0.0], "x")
        results = await system.retrieve("probe")
        assert results[0].item is stored

    @pytest.mark.asyncio
    async def test_max_results_truncates(self, system):
        for i in range(20):
            insert_raw(system, "general", [1.0, 0.0, 0.0, 0.0], f"item {i}")

        results = await system.retrieve("probe")

        assert len(results) == 15
        assert results[0].item.content == "item 0"
        assert results[-1].item.content == "item 14"

    @pytest.mark.asyncio
    async def test_explicit_max_results(self, system):
        for i in range(5):
            insert_raw(system, "code", [1.0, 0.0, 0.0, 0.0], f"item {i}")

        results = await system.retrieve_pipeline.execute("probe", max_results=2)

        assert [r.item.content for r in results] == ["item 0", "item 1"]


class TestThreshold:
    """Raw similarity is compared to the threshold before weighting."""

    @pytest.mark.asyncio
    async def test_boundary_is_kept(self, system):
        insert_raw(system, "general", [0.75, 0.0, 0.0, 0.0], "boundary")
        results = await system.retrieve("probe")
        assert [r.item.content for r in results] == ["boundary"]

    @pytest.mark.asyncio
    async def test_below_threshold_is_dropped(self, system):
        insert_raw(system, "general", [0.74, 0.0, 0.0, 0.0], "below")
        assert await system.retrieve("probe") == []

    @pytest.mark.asyncio
    async def test_weight_does_not_rescue_low_similarity(self, system):
        insert_raw(system, "preferences", [0.7, 0.0, 0.0, 0.0], "weighted")
        assert await system.retrieve("probe") == []

    @pytest.mark.asyncio
    async def test_low_weight_keeps_similar_item(self, system):
        insert_raw(system, "metadata", [1.0, 0.0, 0.0, 0.0], "meta")
        results = await system.retrieve("probe")
        assert results[0].score == pytest.approx(0.5)


class TestRetrievalCache:
    """Tests for the retrieval cache tier."""

    @pytest.mark.asyncio
    async def test_repeat_query_skips_search(self, system):
        await seed(system)
        first = await system.retrieve(QUERY)

        with patch.object(system.store, "search", wraps=system.store.search) as search:
            second = await system.retrieve(QUERY)
            third = await system.retrieve("  WHAT sorting algorithm should I use ")

        assert search.call_count == 0
        assert second == first
        assert third == first

    @pytest.mark.asyncio
    async def test_cached_result_ignores_new_items(self, system):
        await system.retrieve("probe")
        insert_raw(system, "code", [1.0, 0.0, 0.0, 0.0], "late")

        assert await system.retrieve("probe") == []

    @pytest.mark.asyncio
    async def test_expired_entry_recomputes(self, system, clock):
        insert_raw(system, "code", [1.0, 0.0, 0.0, 0.0], "x")
        await system.retrieve("probe")

        clock.advance(24 * 60 * 60)
        with patch.object(system.store, "search", wraps=system.store.search) as search:
            results = await system.retrieve("probe")

        assert search.call_count == 1
        assert len(results) == 1

    @pytest.mark.asyncio
    async def test_embedding_failure_returns_empty_and_is_not_cached(self, system, provider):
        insert_raw(system, "code", [1.0, 0.0, 0.0, 0.0], "x")
        provider.fail_embed = True

        assert await system.retrieve("probe") == []
        assert system.get_metrics().total_queries == 0

        provider.fail_embed = False
        results = await system.retrieve("probe")

        assert len(results) == 1
        assert system.get_metrics().total_queries == 1

    @pytest.mark.asyncio
    async def test_model_unavailable_returns_empty(self, system, provider):
        provider.fail_init = True
        assert await system.retrieve("probe") == []


class TestResultIsolation:
    """Callers may mutate what they get back without touching the cache."""

    @pytest.mark.asyncio
    async def test_mutating_result_keeps_cached_ranking(self, system):
        insert_raw(system, "code", [1.0, 0.0, 0.0, 0.0], "x")

        first = await system.retrieve("probe")
        first.clear()
        second = await system.retrieve("probe")
        second.append(second[0])
        third = await system.retrieve("probe")

        assert [r.item.content for r in third] == ["x"]
        assert system.get_metrics().total_queries == 1

    @pytest.mark.asyncio
    async def test_malformed_embedding_reply_degrades_to_empty(self, system, provider):
        insert_raw(system, "code", [1.0, 0.0, 0.0, 0.0], "x")
        provider.batch_embed = AsyncMock(return_value=None)

        assert await system.retrieve("probe") == []
        assert (await system.enhance_prompt("probe"))["enhanced_prompt"] == "probe"
