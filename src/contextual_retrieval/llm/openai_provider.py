"""
OpenAI embedding provider implementation.
"""

from typing import List, Optional

from openai import AsyncOpenAI

from contextual_retrieval.errors import EmbeddingError
from contextual_retrieval.llm.base import EmbeddingProvider


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """
    Embedding provider for OpenAI and OpenAI-compatible endpoints.

    The client is created in ``initialize`` rather than the constructor so
    that a missing key surfaces through the gateway's initialization path.
    """

    _dimensions = {
        "text-embedding-ada-002": 1536,
        "text-embedding-3-small": 1536,
        "text-embedding-3-large": 3072,
    }

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: str = "text-embedding-3-small",
        dimension: Optional[int] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.model = model
        self._dimension = dimension
        self.client: Optional[AsyncOpenAI] = None

    async def initialize(self) -> None:
        if not self.api_key:
            raise EmbeddingError(
                "Embedding API key not found. Set the OPENAI_API_KEY environment variable."
            )
        self.client = AsyncOpenAI(api_key=self.api_key, base_url=self.base_url)

    async def batch_embed(self, texts: List[str]) -> List[List[float]]:
        """
        Generate embeddings using OpenAI's batch API.

        OpenAI natively supports batch embedding by passing a list
        of strings to the input parameter.
        """
        if not texts:
            return []
        if self.client is None:
            raise EmbeddingError("OpenAI embedding provider used before initialize()")

        kwargs = {}
        if self._dimension is not None:
            # Shortened vectors are only produced when asked for explicitly
            kwargs["dimensions"] = self._dimension

        try:
            response = await self.client.embeddings.create(
                model=self.model,
                input=texts,
                **kwargs,
            )
            return [item.embedding for item in response.data]

        except Exception as e:
            raise EmbeddingError(f"OpenAI embedding failed: {e}") from e

    def get_embedding_dimension(self) -> int:
        if self._dimension is not None:
            return self._dimension
        return self._dimensions.get(self.model, 1536)

    def get_model_name(self) -> str:
        return self.model
