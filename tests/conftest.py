"""
Shared fixtures: a deterministic in-process embedding backend and a
system wired to it.
"""

import asyncio
from typing import Dict, List, Optional
from unittest.mock import AsyncMock

import pytest

from contextual_retrieval.config import ACRSConfig
from contextual_retrieval.engine.retrieval_system import ContextualRetrievalSystem
from contextual_retrieval.errors import EmbeddingError
from contextual_retrieval.llm.base import EmbeddingProvider
from contextual_retrieval.llm.client import LLMClient

DIMENSION = 4
UNKNOWN_VECTOR = [0.0, 0.0, 0.0, 1.0]


class FakeEmbeddingProvider(EmbeddingProvider):
    """Looks vectors up by lower-cased text; unknown texts map to UNKNOWN_VECTOR."""

    def __init__(
        self,
        vectors: Optional[Dict[str, List[float]]] = None,
        fail_init: bool = False,
        init_gate: Optional[asyncio.Event] = None,
    ):
        self.vectors = {k.lower(): v for k, v in (vectors or {}).items()}
        self.fail_init = fail_init
        self.init_gate = init_gate
        self.init_calls = 0
        self.embed_calls: List[str] = []
        self.fail_embed = False

    async def initialize(self) -> None:
        self.init_calls += 1
        if self.init_gate is not None:
            await self.init_gate.wait()
        if self.fail_init:
            raise EmbeddingError("model files missing")

    async def batch_embed(self, texts: List[str]) -> List[List[float]]:
        if self.fail_embed:
            raise EmbeddingError("inference crashed")
        self.embed_calls.extend(texts)
        return [list(self.vectors.get(t.strip().lower(), UNKNOWN_VECTOR)) for t in texts]

    def get_embedding_dimension(self) -> int:
        return DIMENSION

    def get_model_name(self) -> str:
        return "fake-embedding"


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def provider():
    return FakeEmbeddingProvider({
        "Use binary search for sorted arrays": [1.0, 0.0, 0.0, 0.0],
        "Meeting notes from Monday": [0.0, 1.0, 0.0, 0.0],
        "Decided to switch to TypeScript": [0.0, 0.0, 1.0, 0.0],
        "what sorting algorithm should I use": [0.9, 0.1, 0.1, 0.0],
        "probe": [1.0, 0.0, 0.0, 0.0],
    })


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def llm_client():
    client = LLMClient()
    client.chat_complete = AsyncMock()
    return client


@pytest.fixture
def system(provider, llm_client, clock):
    return ContextualRetrievalSystem(
        config=ACRSConfig(),
        embedding_provider=provider,
        llm_client=llm_client,
        clock=clock,
    )
