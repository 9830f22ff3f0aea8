"""Vector store protocol for dependency injection."""
from typing import Protocol, runtime_checkable

from ..models.document import ContentChunk, VectorMatch


@runtime_checkable
class VectorStoreProtocol(Protocol):
    """Protocol for chunk storage and similarity search."""

    def replace_all(self, chunks: list[ContentChunk]) -> None:
        """Replace the whole collection (full re-index).

        Args:
            chunks: Chunks with embeddings.
        """
        ...

    def query(
        self,
        query_embedding: list[float],
        n_results: int = 5
    ) -> list[VectorMatch]:
        """Search by embedding.

        Args:
            query_embedding: Query vector.
            n_results: Number of nearest chunks to return.

        Returns:
            Matches ordered by distance (closest first).
        """
        ...

    def count(self) -> int:
        """Get chunk count."""
        ...
