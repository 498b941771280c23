"""
Contextual Retrieval Engine - Abstract Base Class

Defines the operations the tool layer exposes to callers.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from contextual_retrieval.models.retrieval import ScoredMemory
from contextual_retrieval.monitoring.metrics import MetricsSnapshot


class ContextualRetrievalEngine(ABC):
    """
    Abstract Base Class for the contextual retrieval engine.

    Implements the caller-facing operations:
    1. process_request() - Enhance a request with memory and answer it via the LLM
    2. enhance_prompt() - Enhance a prompt with memory, without calling the LLM
    3. get_metrics() - Report retrieval metrics
    4. submit_feedback() - Record feedback on a processed request
    5. add_memory() - Store a categorized memory
    """

    @abstractmethod
    async def retrieve(self, query: str, max_results: Optional[int] = None) -> List[ScoredMemory]:
        """
        Rank stored memories against ``query``.

        Never raises for retrieval-path failures; those degrade to an
        empty list.
        """
        pass

    @abstractmethod
    async def process_request(self, request_text: str) -> Dict[str, Any]:
        """
        Answer ``request_text`` with an LLM, using retrieved memories as context.

        Returns:
            ``{"response", "context_summary", "from_cache"}``

        Raises:
            LLMError: If the outbound LLM call fails
        """
        pass

    @abstractmethod
    async def enhance_prompt(self, prompt: str) -> Dict[str, Any]:
        """
        Returns:
            ``{"enhanced_prompt", "context_count", "context_categories"}``
        """
        pass

    @abstractmethod
    def get_metrics(self) -> MetricsSnapshot:
        pass

    @abstractmethod
    async def submit_feedback(
        self,
        request_text: str,
        useful: bool,
        feedback: Optional[str] = None,
    ) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def add_memory(
        self,
        content: str,
        category: str = "general",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Returns:
            ``{"message", "id", "category", "timestamp"}`` with an ISO-8601 timestamp
        """
        pass
