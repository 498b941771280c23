"""
Contextual Retrieval System - Main Engine Implementation

Owns every piece of mutable state (vector indices, item lists, the three
cache tiers, metrics) and wires the pipelines together. Construct one per
process, or one per test for isolation.
"""

import asyncio
import logging
import time
from typing import Any, Callable, Dict, List, Optional

from contextual_retrieval.config import ACRSConfig
from contextual_retrieval.engine.base import ContextualRetrievalEngine
from contextual_retrieval.engine.cache import TimedCache
from contextual_retrieval.engine.response_cache import ResponseCache
from contextual_retrieval.engine.vector_index import MemoryStore
from contextual_retrieval.llm.base import EmbeddingProvider
from contextual_retrieval.llm.client import LLMClient, LLMMessage, LLMOptions
from contextual_retrieval.llm.embedding_gateway import EmbeddingGateway, create_embedding_provider
from contextual_retrieval.models.memory_item import MemoryCategory, MemoryItem
from contextual_retrieval.models.retrieval import EnhancedPrompt, ScoredMemory
from contextual_retrieval.monitoring.metrics import MetricsSnapshot, RetrievalMetrics
from contextual_retrieval.pipelines.compose import PromptComposer
from contextual_retrieval.pipelines.memorize import MemorizePipeline
from contextual_retrieval.pipelines.retrieve import RetrievePipeline

logger = logging.getLogger("contextual_retrieval.system")


class ContextualRetrievalSystem(ContextualRetrievalEngine):
    """
    Main implementation of the contextual retrieval engine.

    Usage:
        system = ContextualRetrievalSystem()
        await system.initialize()

        await system.add_memory("Use binary search for sorted arrays", "code")
        result = await system.enhance_prompt("what sorting algorithm should I use")

        await system.close()
    """

    def __init__(
        self,
        config: Optional[ACRSConfig] = None,
        embedding_provider: Optional[EmbeddingProvider] = None,
        llm_client: Optional[LLMClient] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config or ACRSConfig()

        provider = embedding_provider or create_embedding_provider(self.config.embedding)
        cache_cfg = self.config.cache

        self.metrics = RetrievalMetrics(
            max_context_items=self.config.retrieval.max_context_items,
            max_samples=self.config.metrics.max_samples,
        )
        self.embedding_cache: TimedCache[List[float]] = TimedCache(
            "embedding", cache_cfg.lifetime_seconds, cache_cfg.max_entries, clock
        )
        self.retrieval_cache: TimedCache[List[ScoredMemory]] = TimedCache(
            "retrieval", cache_cfg.lifetime_seconds, cache_cfg.max_entries, clock
        )
        self.response_cache = ResponseCache(
            TimedCache("response", cache_cfg.lifetime_seconds, cache_cfg.max_entries, clock)
        )

        self.store = MemoryStore(provider.get_embedding_dimension())
        self.embeddings = EmbeddingGateway(provider, self.embedding_cache, self.metrics)
        self.llm = llm_client or LLMClient(self.config.llm)

        self.memorize_pipeline = MemorizePipeline(self.store, self.embeddings, self.metrics)
        self.retrieve_pipeline = RetrievePipeline(
            self.store,
            self.embeddings,
            self.retrieval_cache,
            self.metrics,
            self.config.retrieval,
        )
        self.composer = PromptComposer()

        self._warm_up_task: Optional[asyncio.Task] = None

    async def initialize(self) -> None:
        """Start loading the embedding model in the background."""
        if self._warm_up_task is None:
            self._warm_up_task = asyncio.create_task(self.embeddings.warm_up())

    async def close(self) -> None:
        if self._warm_up_task is not None and not self._warm_up_task.done():
            self._warm_up_task.cancel()
            try:
                await self._warm_up_task
            except asyncio.CancelledError:
                pass
        self._warm_up_task = None

    # ------------------------------------------------------------------
    # Core engine
    # ------------------------------------------------------------------

    async def memorize(
        self,
        content: str,
        category: Any = "general",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> MemoryItem:
        return await self.memorize_pipeline.execute(content, category, metadata)

    async def retrieve(self, query: str, max_results: Optional[int] = None) -> List[ScoredMemory]:
        return await self.retrieve_pipeline.execute(query, max_results)

    async def contextualize(self, prompt: str) -> EnhancedPrompt:
        results = await self.retrieve(prompt)
        return self.composer.compose(prompt, results)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def process_request(self, request_text: str) -> Dict[str, Any]:
        result = await self.contextualize(request_text)
        context_count = len(result.context_items)

        async def call_llm() -> str:
            response = await self.llm.chat_complete(
                model="auto",
                messages=[LLMMessage(role="user", content=result.enhanced_prompt)],
                options=LLMOptions(temperature=self.config.llm.temperature),
            )
            return response.text

        completion = await self.response_cache.get_or_compute(result.enhanced_prompt, call_llm)

        if completion.from_cache:
            summary = f"Used {context_count} context items and returned cached response."
        else:
            summary = f"Used {context_count} context items from memory."

        return {
            "response": completion.text,
            "context_summary": summary,
            "from_cache": completion.from_cache,
        }

    async def enhance_prompt(self, prompt: str) -> Dict[str, Any]:
        result = await self.contextualize(prompt)
        return {
            "enhanced_prompt": result.enhanced_prompt,
            "context_count": len(result.context_items),
            "context_categories": [item.category.value for item in result.context_items],
        }

    def get_metrics(self) -> MetricsSnapshot:
        return self.metrics.snapshot()

    async def submit_feedback(
        self,
        request_text: str,
        useful: bool,
        feedback: Optional[str] = None,
    ) -> Dict[str, Any]:
        await self.memorize(
            f'Feedback on request: "{request_text[:100]}..."',
            MemoryCategory.METADATA,
            {"useful": useful, "feedback": feedback, "type": "feedback"},
        )
        return {"message": "Feedback recorded successfully", "useful": useful}

    async def add_memory(
        self,
        content: str,
        category: Any = "general",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        item = await self.memorize(content, category, metadata)
        return {
            "message": "Memory item added successfully",
            "id": str(item.id),
            "category": item.category.value,
            "timestamp": item.timestamp.isoformat(),
        }

    async def test_categories(self) -> Dict[str, Any]:
        """
        Probe every category: store one sample item, then retrieve it back.
        """
        test_results: Dict[str, Dict[str, Any]] = {}

        for category in MemoryCategory:
            name = category.value
            await self.memorize(
                f"This is a test memory item for the {name} category. "
                f"It contains specific knowledge related to {name}.",
                category,
                {"test": True},
            )

            results = await self.retrieve(f"Tell me about {name}", 3)
            test_results[name] = {
                "found": len(results) > 0,
                "top_score": results[0].score if results else 0,
                "match_count": sum(1 for r in results if r.item.category == category),
            }

        return {
            "message": "Category test completed",
            "results": test_results,
            "category_status": [
                {
                    "category": category.value,
                    "item_count": self.store.count(category),
                    "status": "working" if test_results[category.value]["found"] else "issue detected",
                }
                for category in MemoryCategory
            ],
        }
