"""Engine package - storage, caches and the engine interface."""

from contextual_retrieval.engine.base import ContextualRetrievalEngine
from contextual_retrieval.engine.cache import TimedCache, normalize_key
from contextual_retrieval.engine.response_cache import ResponseCache
from contextual_retrieval.engine.vector_index import CategoryIndex, MemoryStore, resolve_category

__all__ = [
    "CategoryIndex",
    "ContextualRetrievalEngine",
    "MemoryStore",
    "ResponseCache",
    "TimedCache",
    "normalize_key",
    "resolve_category",
]
