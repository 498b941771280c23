"""
Contextual Retrieval System

Categorized in-memory vector memory with weighted multi-category ranking,
three cache tiers and LLM prompt enhancement.
"""

from contextual_retrieval.engine.retrieval_system import ContextualRetrievalSystem
from contextual_retrieval.models.memory_item import MemoryCategory, MemoryItem
from contextual_retrieval.models.retrieval import ScoredMemory

__version__ = "0.1.0"
__all__ = ["ContextualRetrievalSystem", "MemoryCategory", "MemoryItem", "ScoredMemory"]
