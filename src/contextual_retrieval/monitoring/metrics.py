"""
Retrieval Metrics

Process-wide counters fed by the retrieval engine, the embedding gateway
and the memorize pipeline. Read-only for the reporting side.
"""

import logging
import statistics
import threading
from collections import deque
from typing import Dict

from pydantic import BaseModel, Field

from contextual_retrieval.models.memory_item import MemoryCategory

logger = logging.getLogger("contextual_retrieval.metrics")


class MetricsSnapshot(BaseModel):
    """Point-in-time view of the retrieval metrics."""
    total_queries: int = 0
    average_retrieval_time: float = Field(default=0.0, description="Milliseconds")
    cache_hit_rate: float = Field(
        default=0.0,
        description="Hits over lookups, blended across the embedding and retrieval caches",
    )
    context_utilization: float = 0.0
    category_distribution: Dict[str, int] = Field(default_factory=dict)
    per_tier: Dict[str, Dict[str, int]] = Field(default_factory=dict)


class RetrievalMetrics:
    """
    Counters and bounded sample windows.

    The cache hit/query counters form a single pool shared by every cache
    tier that reports into it, so ``cache_hit_rate`` is a blended rate.
    The per-tier breakdown is kept separately.
    """

    def __init__(self, max_context_items: int = 15, max_samples: int = 1000):
        self.max_context_items = max_context_items
        self.max_samples = max_samples
        self._lock = threading.Lock()
        self._init_counters()

    def _init_counters(self) -> None:
        self.query_count = 0
        self.retrieval_times: deque = deque(maxlen=self.max_samples)
        self.cache_hits = 0
        self.cache_queries = 0
        self.context_items_used: deque = deque(maxlen=self.max_samples)
        self.category_counts: Dict[str, int] = {c.value: 0 for c in MemoryCategory}
        self._tier_counts: Dict[str, Dict[str, int]] = {}

    def record_cache_lookup(self, tier: str, hit: bool) -> None:
        with self._lock:
            self.cache_queries += 1
            if hit:
                self.cache_hits += 1

            tier_counts = self._tier_counts.setdefault(tier, {"hits": 0, "queries": 0})
            tier_counts["queries"] += 1
            if hit:
                tier_counts["hits"] += 1

    def record_query(self, retrieval_time_ms: float, items_returned: int) -> None:
        with self._lock:
            self.query_count += 1
            self.retrieval_times.append(retrieval_time_ms)
            self.context_items_used.append(items_returned)

    def record_insert(self, category: MemoryCategory) -> None:
        with self._lock:
            self.category_counts[category.value] = self.category_counts.get(category.value, 0) + 1

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            avg_retrieval_time = (
                statistics.fmean(self.retrieval_times) if self.retrieval_times else 0.0
            )
            cache_hit_rate = (
                self.cache_hits / self.cache_queries if self.cache_queries > 0 else 0.0
            )
            avg_context_used = (
                statistics.fmean(self.context_items_used) if self.context_items_used else 0.0
            )

            return MetricsSnapshot(
                total_queries=self.query_count,
                average_retrieval_time=avg_retrieval_time,
                cache_hit_rate=cache_hit_rate,
                context_utilization=avg_context_used / self.max_context_items,
                category_distribution=dict(self.category_counts),
                per_tier={tier: dict(counts) for tier, counts in self._tier_counts.items()},
            )

    def reset(self) -> None:
        with self._lock:
            self._init_counters()
        logger.info("Retrieval metrics reset")

