"""
Retrieval Data Models

Structures passed between the retrieval engine, the prompt composer
and the response cache.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from contextual_retrieval.models.memory_item import MemoryItem


class ScoredMemory(BaseModel):
    """A retrieved memory with its category-weighted score."""
    model_config = ConfigDict(frozen=True)

    item: MemoryItem
    score: float


class EnhancedPrompt(BaseModel):
    """Result of composing retrieved context around a caller's prompt."""
    enhanced_prompt: str
    context_items: List[MemoryItem] = Field(default_factory=list)
    original_prompt: str


class CachedCompletion(BaseModel):
    """LLM completion text and whether it was served from the response cache."""
    text: str
    from_cache: bool = False
