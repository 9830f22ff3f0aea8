import logging
from typing import Optional

import requests

from faq_assistant.core.models.document import ContentChunk, VectorMatch

logger = logging.getLogger(__name__)


class ChromaVectorStore:
    """Vector store using ChromaDB HTTP API."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 8000,
        collection_name: str = "faq_chunks",
        tenant: str = "default_tenant",
        database: str = "default_database",
    ):
        """Initialize ChromaDB client.

        Args:
            host: ChromaDB host.
            port: ChromaDB port.
            collection_name: Collection name.
            tenant: Tenant name.
            database: Database name.
        """
        self._base_url = f"http://{host}:{port}/api/v2"
        self._tenant = tenant
        self._database = database
        self._collection_name = collection_name
        self._collection_id: Optional[str] = None

    @property
    def _collections_url(self) -> str:
        return f"{self._base_url}/tenants/{self._tenant}/databases/{self._database}/collections"

    def _find_collection(self) -> Optional[str]:
        resp = requests.get(self._collections_url)
        resp.raise_for_status()
        for col in resp.json():
            if col["name"] == self._collection_name:
                return col["id"]
        return None

    def _ensure_collection(self) -> str:
        """Get or create collection, return ID."""
        if self._collection_id:
            return self._collection_id

        self._collection_id = self._find_collection()
        if self._collection_id:
            return self._collection_id

        resp = requests.post(
            self._collections_url,
            json={"name": self._collection_name, "metadata": {"hnsw:space": "cosine"}},
        )
        resp.raise_for_status()
        self._collection_id = resp.json()["id"]
        logger.info(f"Created collection: {self._collection_name}")
        return self._collection_id

    def replace_all(self, chunks: list[ContentChunk]) -> None:
        """Drop the collection and add every chunk again."""
        if self._find_collection():
            resp = requests.delete(f"{self._collections_url}/{self._collection_name}")
            resp.raise_for_status()
            logger.info(f"Deleted collection: {self._collection_name}")
        self._collection_id = None

        col_id = self._ensure_collection()
        if not chunks:
            return

        resp = requests.post(
            f"{self._collections_url}/{col_id}/add",
            json={
                "ids": [c.id for c in chunks],
                "embeddings": [list(c.embedding) for c in chunks],
                "documents": [c.text for c in chunks],
                "metadatas": [
                    {"source_file": c.source_file, "chunk_index": c.chunk_index}
                    for c in chunks
                ],
            },
        )
        resp.raise_for_status()
        logger.info(f"Stored {len(chunks)} chunks in {self._collection_name}")

    def query(
        self, query_embedding: list[float], n_results: int = 5
    ) -> list[VectorMatch]:
        """Search by embedding."""
        col_id = self._ensure_collection()
        resp = requests.post(
            f"{self._collections_url}/{col_id}/query",
            json={
                "query_embeddings": [query_embedding],
                "n_results": n_results,
                "include": ["documents", "metadatas", "distances"],
            },
        )
        resp.raise_for_status()

        data = resp.json()
        results = []

        if data.get("ids") and data["ids"][0]:
            for i, chunk_id in enumerate(data["ids"][0]):
                metadata = data["metadatas"][0][i] or {}
                results.append(
                    VectorMatch(
                        chunk=ContentChunk(
                            id=chunk_id,
                            text=data["documents"][0][i],
                            source_file=metadata.get("source_file", "Unknown"),
                            chunk_index=int(metadata.get("chunk_index", 0)),
                        ),
                        distance=data["distances"][0][i],
                    )
                )

        return results

    def count(self) -> int:
        """Get chunk count."""
        col_id = self._ensure_collection()
        resp = requests.get(f"{self._collections_url}/{col_id}/count")
        resp.raise_for_status()
        return int(resp.json())
