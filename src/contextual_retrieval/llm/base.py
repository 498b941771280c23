"""
Base classes for embedding providers.

The embedding gateway talks to the inference backend only through this
interface, so backends can be swapped through the adapter pattern.
"""

from abc import ABC, abstractmethod
from typing import List


class EmbeddingProvider(ABC):
    """
    Abstract base class for embedding providers.

    ``initialize`` is called once before the first ``batch_embed``; the
    gateway guarantees it is never run twice concurrently.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """
        Load the model or open the client.

        Raises:
            EmbeddingError: If the backend cannot be brought up
        """
        pass

    @abstractmethod
    async def batch_embed(self, texts: List[str]) -> List[List[float]]:
        """
        Generate embeddings for multiple texts in a single call.

        Args:
            texts: List of text strings to embed

        Returns:
            List of embedding vectors in the same order as input texts

        Raises:
            EmbeddingError: If the embedding API fails
        """
        pass

    @abstractmethod
    def get_embedding_dimension(self) -> int:
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        pass
