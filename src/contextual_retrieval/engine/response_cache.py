"""
Response Cache

Memoizes LLM completions keyed by the fully composed prompt so an
identical (context + question) never reaches the LLM twice within the
cache lifetime.
"""

import logging
from typing import Awaitable, Callable

from contextual_retrieval.engine.cache import TimedCache
from contextual_retrieval.models.retrieval import CachedCompletion

logger = logging.getLogger("contextual_retrieval.response_cache")


class ResponseCache:
    """Get-or-compute wrapper around the response cache tier."""

    def __init__(self, cache: TimedCache[str]):
        self.cache = cache

    async def get_or_compute(
        self,
        composed_prompt: str,
        compute: Callable[[], Awaitable[str]],
    ) -> CachedCompletion:
        """
        Return the cached completion for ``composed_prompt`` or compute it.

        ``compute`` runs at most once per call. Its exceptions propagate
        unchanged and leave the cache untouched; there is no retry here.
        """
        key = composed_prompt.strip()

        cached = self.cache.get(key)
        if cached is not None:
            return CachedCompletion(text=cached, from_cache=True)

        text = await compute()
        self.cache.set(key, text)
        logger.debug(f"Cached LLM response for prompt of {len(key)} chars")

        return CachedCompletion(text=text, from_cache=False)
