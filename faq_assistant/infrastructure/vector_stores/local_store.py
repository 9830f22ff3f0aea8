import json
import logging
from pathlib import Path

import numpy as np

from faq_assistant.core.models.document import ContentChunk, VectorMatch

logger = logging.getLogger(__name__)


class LocalVectorStore:
    """File-backed vector store with in-memory cosine search.

    The whole index lives in one JSON file and is loaded at construction.
    """

    def __init__(self, path: str = "./data/vectors.json"):
        self._path = Path(path)
        self._chunks: list[ContentChunk] = []
        self._matrix: np.ndarray | None = None
        self._load()

    def _load(self) -> None:
        if not self._path.exists():
            logger.info(f"No vector file at {self._path}, starting empty")
            return

        data = json.loads(self._path.read_text(encoding="utf-8"))
        self._set_chunks(
            [
                ContentChunk(
                    id=item["id"],
                    text=item["text"],
                    source_file=item["source_file"],
                    chunk_index=item.get("chunk_index", 0),
                    embedding=tuple(item["embedding"]),
                )
                for item in data.get("chunks", [])
            ]
        )
        logger.info(f"Loaded {len(self._chunks)} chunks from {self._path}")

    def _set_chunks(self, chunks: list[ContentChunk]) -> None:
        self._chunks = list(chunks)
        if self._chunks:
            self._matrix = np.array([c.embedding for c in self._chunks], dtype=float)
        else:
            self._matrix = None

    def replace_all(self, chunks: list[ContentChunk]) -> None:
        dims = {len(c.embedding) for c in chunks}
        if len(dims) > 1:
            raise ValueError(f"Mixed embedding dimensions: {sorted(dims)}")
        if 0 in dims:
            raise ValueError("Every chunk needs an embedding")

        payload = {
            "chunks": [
                {
                    "id": c.id,
                    "text": c.text,
                    "source_file": c.source_file,
                    "chunk_index": c.chunk_index,
                    "embedding": list(c.embedding),
                }
                for c in chunks
            ]
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(payload), encoding="utf-8")
        self._set_chunks(chunks)
        logger.info(f"Saved {len(chunks)} chunks to {self._path}")

    def query(
        self, query_embedding: list[float], n_results: int = 5
    ) -> list[VectorMatch]:
        if self._matrix is None or n_results <= 0:
            return []

        query = np.asarray(query_embedding, dtype=float)
        if query.shape[0] != self._matrix.shape[1]:
            raise ValueError(
                f"Query dimension {query.shape[0]} does not match index "
                f"dimension {self._matrix.shape[1]}"
            )

        norms = np.linalg.norm(self._matrix, axis=1) * np.linalg.norm(query)
        norms[norms == 0] = 1.0
        similarities = self._matrix @ query / norms

        order = np.argsort(-similarities, kind="stable")[:n_results]
        return [
            VectorMatch(chunk=self._chunks[i], distance=1.0 - float(similarities[i]))
            for i in order
        ]

    def count(self) -> int:
        return len(self._chunks)
