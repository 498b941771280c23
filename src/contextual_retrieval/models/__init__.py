"""Data models package."""

from contextual_retrieval.models.memory_item import (
    DEFAULT_CATEGORY,
    DEFAULT_CATEGORY_WEIGHTS,
    MemoryCategory,
    MemoryItem,
    parse_category,
)
from contextual_retrieval.models.retrieval import CachedCompletion, EnhancedPrompt, ScoredMemory

__all__ = [
    "DEFAULT_CATEGORY",
    "DEFAULT_CATEGORY_WEIGHTS",
    "MemoryCategory",
    "MemoryItem",
    "parse_category",
    "CachedCompletion",
    "EnhancedPrompt",
    "ScoredMemory",
]
