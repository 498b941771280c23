"""
Retrieve Pipeline

Weighted multi-category ranking:
1. Serve from the retrieval cache when a live entry exists
2. Embed the query
3. Search every non-empty category for its top-K
4. Drop hits whose raw similarity is below the threshold
5. Score = raw similarity x category weight
6. Merge, sort descending (stable), truncate
7. Cache the ranked list
8. Record metrics
"""

import logging
import time
from typing import List, Optional

from contextual_retrieval.config import RetrievalConfig
from contextual_retrieval.engine.cache import TimedCache, normalize_key
from contextual_retrieval.engine.vector_index import MemoryStore
from contextual_retrieval.errors import ContextualRetrievalError
from contextual_retrieval.llm.embedding_gateway import EmbeddingGateway
from contextual_retrieval.models.retrieval import ScoredMemory
from contextual_retrieval.monitoring.metrics import RetrievalMetrics

logger = logging.getLogger("contextual_retrieval.retrieve")

CACHE_TIER = "retrieval"


class RetrievePipeline:
    """
    Pipeline for ranking stored memories against a query.

    Results are deterministic for identical store and cache state. Ties in
    weighted score keep category order, then index order.
    """

    def __init__(
        self,
        store: MemoryStore,
        embeddings: EmbeddingGateway,
        cache: TimedCache[List[ScoredMemory]],
        metrics: RetrievalMetrics,
        config: Optional[RetrievalConfig] = None,
    ):
        self.store = store
        self.embeddings = embeddings
        self.cache = cache
        self.metrics = metrics
        self.config = config or RetrievalConfig()

    async def execute(
        self,
        query: str,
        max_results: Optional[int] = None,
    ) -> List[ScoredMemory]:
        """
        Rank memories for ``query``.

        Embedding and index failures are logged and produce an empty list,
        which is not cached.
        """
        if max_results is None:
            max_results = self.config.max_context_items

        cache_key = normalize_key(query)
        cached = self.cache.get(cache_key)
        if cached is not None:
            self.metrics.record_cache_lookup(CACHE_TIER, hit=True)
            return list(cached)

        self.metrics.record_cache_lookup(CACHE_TIER, hit=False)

        start_time = time.perf_counter()
        try:
            ranked = await self._rank(query, max_results)
        except (ContextualRetrievalError, ValueError) as e:
            logger.error(f"Error searching memory: {e}")
            return []
        elapsed_ms = (time.perf_counter() - start_time) * 1000

        # The cache keeps its own copy of the ranking
        self.cache.set(cache_key, list(ranked))
        self.metrics.record_query(elapsed_ms, len(ranked))

        return ranked

    async def _rank(self, query: str, max_results: int) -> List[ScoredMemory]:
        query_embedding = await self.embeddings.embed(query)
        threshold = self.config.similarity_threshold

        results: List[ScoredMemory] = []
        for category in self.store.categories:
            item_count = self.store.count(category)
            if item_count == 0:
                continue

            weight = self.config.weight_for(category)
            hits = self.store.search(category, query_embedding, min(max_results, item_count))
            for position, similarity in hits:
                if similarity < threshold:
                    continue
                item = self.store.get(category, position)
                results.append(ScoredMemory(item=item, score=similarity * weight))

        # sorted() is stable: equal scores keep category order
        results = sorted(results, key=lambda r: r.score, reverse=True)
        return results[:max_results]
