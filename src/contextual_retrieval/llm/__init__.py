"""LLM and embedding backends."""

from contextual_retrieval.llm.base import EmbeddingProvider
from contextual_retrieval.llm.client import LLMClient, LLMMessage, LLMOptions, LLMResponse
from contextual_retrieval.llm.embedding_gateway import EmbeddingGateway, create_embedding_provider
from contextual_retrieval.llm.openai_provider import OpenAIEmbeddingProvider

__all__ = [
    "EmbeddingProvider",
    "EmbeddingGateway",
    "LLMClient",
    "LLMMessage",
    "LLMOptions",
    "LLMResponse",
    "OpenAIEmbeddingProvider",
    "create_embedding_provider",
]
