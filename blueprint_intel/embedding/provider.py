"""Abstract embedding provider interface."""

import asyncio
from abc import ABC, abstractmethod


class EmbeddingProvider(ABC):
    """Interface for text embedding generation.

    Used at indexing time (batch over chunk contents) and at query time
    (one vector per user query). Implementations must return vectors of a
    fixed dimension so stored chunks and queries stay comparable.
    """

    @abstractmethod
    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for a batch of text strings.

        Args:
            texts: List of text strings to embed.

        Returns:
            List of embedding vectors, one per input text.

        Raises:
            ValueError: If texts is empty.
        """
        ...

    def embed_query(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for query texts.

        Override to add model-specific query preprocessing. Default
        delegates to embed().
        """
        return self.embed(texts)

    async def aembed_query(self, text: str) -> list[float]:
        """Embed a single query without blocking the event loop."""
        vectors = await asyncio.to_thread(self.embed_query, [text])
        return vectors[0]

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Return the embedding dimension (e.g., 384)."""
        ...
