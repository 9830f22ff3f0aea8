"""Embedder protocol for dependency injection."""
from typing import Protocol, runtime_checkable


@runtime_checkable
class EmbedderProtocol(Protocol):
    """Protocol for embedding service."""

    model_name: str

    async def embed(self, text: str) -> list[float]:
        """Embed a single text with one remote call.

        Args:
            text: Text to embed (already trimmed).

        Returns:
            Fixed-length embedding vector.
        """
        ...

    async def embed_many(self, texts: list[str]) -> list[list[float]]:
        """Embed a batch of texts (offline indexing only).

        Args:
            texts: Texts to embed.

        Returns:
            One vector per input text, in input order.
        """
        ...
