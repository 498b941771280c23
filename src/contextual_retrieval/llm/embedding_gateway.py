"""
Embedding Gateway

Wraps the embedding provider with:
- a time-expiring embedding cache keyed by normalized text
- single, coalesced model initialization
- vector normalization so inner product equals cosine similarity
"""

import asyncio
import logging
from typing import List, Optional

import numpy as np

from contextual_retrieval.config import EmbeddingConfig
from contextual_retrieval.engine.cache import TimedCache, normalize_key
from contextual_retrieval.errors import EmbeddingError, ModelUnavailableError
from contextual_retrieval.llm.base import EmbeddingProvider
from contextual_retrieval.llm.openai_provider import OpenAIEmbeddingProvider
from contextual_retrieval.monitoring.metrics import RetrievalMetrics

logger = logging.getLogger("contextual_retrieval.embeddings")

CACHE_TIER = "embedding"


def create_embedding_provider(config: EmbeddingConfig) -> EmbeddingProvider:
    """
    Factory method to create the configured embedding provider.

    Raises:
        ValueError: For an unknown provider name
    """
    if config.provider == "openai":
        return OpenAIEmbeddingProvider(
            api_key=config.api_key,
            base_url=config.base_url,
            model=config.model,
            dimension=config.dimension,
        )
    raise ValueError(
        f"Unknown embedding provider: {config.provider}. "
        f"Supported providers: openai"
    )


def normalize_vector(vector: List[float]) -> List[float]:
    arr = np.asarray(vector, dtype=np.float64)
    norm = np.linalg.norm(arr)
    if norm == 0:
        return arr.tolist()
    return (arr / norm).tolist()


class EmbeddingGateway:
    """
    Single entry point for text embeddings.

    While the model is initializing, further requests are parked on a
    pending list and released together once initialization settles; a
    failed initialization fails all of them and leaves the gateway
    uninitialized so the next call retries.
    """

    def __init__(
        self,
        provider: EmbeddingProvider,
        cache: TimedCache[List[float]],
        metrics: Optional[RetrievalMetrics] = None,
    ):
        self.provider = provider
        self.cache = cache
        self.metrics = metrics

        self._ready = False
        self._initializing = False
        self._pending: List[asyncio.Future] = []

    @property
    def is_ready(self) -> bool:
        return self._ready

    async def initialize(self) -> None:
        """
        Initialize the provider once.

        Raises:
            ModelUnavailableError: If initialization fails (for this caller
                and every request queued behind it)
        """
        if self._ready:
            return

        if self._initializing:
            waiter = asyncio.get_running_loop().create_future()
            self._pending.append(waiter)
            await waiter
            return

        self._initializing = True
        try:
            logger.info(f"Initializing embedding model {self.provider.get_model_name()}...")
            await self.provider.initialize()
        except BaseException as e:
            self._initializing = False
            failure = ModelUnavailableError(f"Failed to initialize embedding model: {e}")
            logger.error(str(failure))
            self._release_pending(failure)
            if isinstance(e, Exception):
                raise failure from e
            raise

        self._ready = True
        self._initializing = False
        logger.info("Embedding model initialized successfully.")
        self._release_pending(None)

    def _release_pending(self, error: Optional[BaseException]) -> None:
        pending, self._pending = self._pending, []
        for waiter in pending:
            if waiter.done():
                continue
            if error is None:
                waiter.set_result(None)
            else:
                waiter.set_exception(error)

    async def warm_up(self) -> None:
        """Background initialization; failures are logged, not raised."""
        try:
            await self.initialize()
        except ModelUnavailableError as e:
            logger.warning(f"Background initialization of embedding model failed: {e}")

    def _record_lookup(self, hit: bool) -> None:
        if self.metrics is not None:
            self.metrics.record_cache_lookup(CACHE_TIER, hit)

    async def embed(self, text: str) -> List[float]:
        """
        Embedding vector for ``text``.

        Texts that are equal after trimming and lower-casing share one
        cache entry.

        Raises:
            ModelUnavailableError: If the model cannot be initialized
            EmbeddingError: If the provider fails to embed
        """
        cache_key = normalize_key(text)
        cached = self.cache.get(cache_key)
        if cached is not None:
            self._record_lookup(hit=True)
            return list(cached)

        self._record_lookup(hit=False)

        if not self._ready:
            await self.initialize()

        try:
            vectors = await self.provider.batch_embed([text])
            embedding = self._validate(vectors)
        except EmbeddingError:
            logger.error(f"Error generating embedding for {text[:50]!r}", exc_info=True)
            raise
        except Exception as e:
            logger.error(f"Error generating embedding for {text[:50]!r}", exc_info=True)
            raise EmbeddingError(f"Embedding failed: {e}") from e

        # The cache keeps its own copy
        self.cache.set(cache_key, list(embedding))
        return embedding

    def _validate(self, vectors) -> List[float]:
        """Normalize the single vector of a provider reply, checking its shape."""
        if not isinstance(vectors, list) or len(vectors) != 1:
            count = len(vectors) if isinstance(vectors, list) else type(vectors).__name__
            raise EmbeddingError(f"Expected 1 embedding, provider returned {count}")

        expected = self.provider.get_embedding_dimension()
        if len(vectors[0]) != expected:
            raise EmbeddingError(
                f"Embedding dimension mismatch: model returned {len(vectors[0])}, "
                f"expected {expected}"
            )
        return normalize_vector(vectors[0])

    def get_cache_stats(self) -> dict:
        return self.cache.get_stats()

    def clear_cache(self) -> None:
        self.cache.clear()
