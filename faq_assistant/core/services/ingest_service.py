"""Ingest service - offline indexing of FAQ content."""

import logging
from pathlib import Path
from typing import Optional

from ..models.document import ContentChunk, IndexStats
from ..protocols.embedder import EmbedderProtocol
from ..protocols.vector_store import VectorStoreProtocol

logger = logging.getLogger(__name__)


class IngestService:
    """Service for rebuilding the vector store from content files."""

    def __init__(
        self,
        embedder: EmbedderProtocol,
        vector_store: VectorStoreProtocol,
        content_path: str = "./content",
        chunk_size: int = 300,
        chunk_overlap: int = 50,
        batch_size: int = 100,
    ):
        """Initialize ingest service.

        Args:
            embedder: Embedding service.
            vector_store: Vector store.
            content_path: Path to content folder.
            chunk_size: Target chunk size in words.
            chunk_overlap: Words shared by adjacent chunks.
            batch_size: Batch size for embedding calls.
        """
        if chunk_overlap >= chunk_size:
            raise ValueError("chunk_size must be greater than chunk_overlap")
        self._embedder = embedder
        self._vector_store = vector_store
        self._content_path = Path(content_path)
        self._chunk_size = chunk_size
        self._chunk_overlap = chunk_overlap
        self._batch_size = batch_size

        self._loader: Optional["MarkdownLoader"] = None

    @property
    def loader(self):
        """Lazy load document loader."""
        if self._loader is None:
            from faq_assistant.infrastructure.document_loaders import MarkdownLoader

            self._loader = MarkdownLoader()
        return self._loader

    def _chunk_text(self, text: str) -> list[str]:
        """Split text into overlapping word windows.

        A trailing window whose words all sit inside the previous window's
        overlap is not emitted.

        Args:
            text: Plain text to chunk.

        Returns:
            List of chunks.
        """
        words = text.split()
        chunks: list[str] = []
        step = self._chunk_size - self._chunk_overlap

        i = 0
        while i < len(words):
            chunk = " ".join(words[i : i + self._chunk_size]).strip()
            if chunk:
                chunks.append(chunk)

            i += step

            if len(words) - i <= self._chunk_overlap:
                break

        return chunks

    def build_chunks(self) -> list[ContentChunk]:
        """Load every supported file and split it into chunks (no embeddings)."""
        if not self._content_path.exists():
            logger.error(f"Content path not found: {self._content_path}")
            return []

        chunks: list[ContentChunk] = []
        for file_path in sorted(self._content_path.iterdir()):
            if not self.loader.supports(file_path):
                continue

            content = self.loader.load(file_path)
            if not content:
                continue

            text_chunks = self._chunk_text(content)
            for i, chunk_text in enumerate(text_chunks):
                chunks.append(
                    ContentChunk(
                        id=f"{file_path.stem}_chunk_{i}",
                        text=chunk_text,
                        source_file=file_path.name,
                        chunk_index=i,
                    )
                )
            logger.info(f"Processed {file_path.name}: {len(text_chunks)} chunks")

        return chunks

    async def run(self) -> IndexStats:
        """Re-index all content, replacing the store wholesale.

        Returns:
            Indexing statistics.
        """
        pending = self.build_chunks()
        if not pending:
            logger.info("No documents to index")
            return IndexStats()

        indexed: list[ContentChunk] = []
        for i in range(0, len(pending), self._batch_size):
            batch = pending[i : i + self._batch_size]
            embeddings = await self._embedder.embed_many([c.text for c in batch])
            if len(embeddings) != len(batch):
                raise ValueError(
                    f"Embedder returned {len(embeddings)} vectors for {len(batch)} chunks"
                )

            indexed.extend(
                ContentChunk(
                    id=c.id,
                    text=c.text,
                    source_file=c.source_file,
                    chunk_index=c.chunk_index,
                    embedding=tuple(float(x) for x in vector),
                )
                for c, vector in zip(batch, embeddings)
            )
            logger.info(f"Embedded batch: {len(indexed)}/{len(pending)}")

        self._vector_store.replace_all(indexed)

        sources = sorted({c.source_file for c in indexed})
        logger.info(
            f"Indexing complete: {len(indexed)} chunks from {len(sources)} files"
        )
        return IndexStats(files=len(sources), chunks=len(indexed), sources=sources)
