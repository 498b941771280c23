"""
Memorize Pipeline

Embeds a piece of content and files it under its category.
"""

import logging
from typing import Any, Dict, Optional

from contextual_retrieval.engine.vector_index import MemoryStore, resolve_category
from contextual_retrieval.llm.embedding_gateway import EmbeddingGateway
from contextual_retrieval.models.memory_item import MemoryItem
from contextual_retrieval.monitoring.metrics import RetrievalMetrics

logger = logging.getLogger("contextual_retrieval.memorize")


class MemorizePipeline:
    """Pipeline for storing new memories."""

    def __init__(
        self,
        store: MemoryStore,
        embeddings: EmbeddingGateway,
        metrics: RetrievalMetrics,
    ):
        self.store = store
        self.embeddings = embeddings
        self.metrics = metrics

    async def execute(
        self,
        content: str,
        category: Any = "general",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> MemoryItem:
        """
        Store ``content`` as a memory.

        An unknown category is logged and replaced by the default one.

        Raises:
            ModelUnavailableError: If the embedding model cannot be initialized
            EmbeddingError: If the content cannot be embedded
        """
        resolved = resolve_category(category)
        embedding = await self.embeddings.embed(content)

        item = MemoryItem(
            embedding=embedding,
            content=content,
            category=resolved,
            metadata=metadata,
        )
        stored = self.store.insert(resolved, item)
        self.metrics.record_insert(stored.category)

        logger.debug(f"Stored memory {stored.id} in '{stored.category.value}'")
        return stored
