"""Retrieval service - embedding, vector search and threshold filtering."""

import logging
from typing import Optional

from ..models.document import (
    CandidateScore,
    RetrievalResult,
    ScoredChunk,
    VectorMatch,
)
from ..protocols.embedder import EmbedderProtocol
from ..protocols.vector_store import VectorStoreProtocol
from ..strategies.thresholds import SensitiveContentThreshold, ThresholdStrategy

logger = logging.getLogger(__name__)

COMPARISON_SUFFIX = "benefits features characteristics"


class RetrievalService:
    """Search service with per-chunk threshold filtering."""

    def __init__(
        self,
        embedder: EmbedderProtocol,
        vector_store: VectorStoreProtocol,
        top_k: int = 5,
        threshold_strategy: ThresholdStrategy | None = None,
    ):
        """Initialize retrieval service.

        Args:
            embedder: Embedding service.
            vector_store: Vector store.
            top_k: Number of candidates considered per query.
            threshold_strategy: Per-chunk threshold policy.
        """
        self._embedder = embedder
        self._vector_store = vector_store
        self._top_k = top_k
        self._thresholds = threshold_strategy or SensitiveContentThreshold()

    @property
    def top_k(self) -> int:
        return self._top_k

    async def retrieve(
        self, query: str, comparison: Optional[tuple[str, str]] = None
    ) -> RetrievalResult:
        """Retrieve threshold-filtered chunks for ``query``.

        Embedding and vector store errors propagate to the caller.

        Args:
            query: Search query (possibly enhanced).
            comparison: Two procedures to search independently.

        Returns:
            Passing chunks plus scores for every candidate considered.
        """
        if comparison:
            matches = await self._search_comparison(comparison)
        else:
            query_embedding = await self._embedder.embed(query.strip())
            matches = self._vector_store.query(
                query_embedding=query_embedding, n_results=self._top_k
            )
            matches = sorted(matches, key=lambda m: m.similarity, reverse=True)

        concern = self._thresholds.query_concern(query)
        chunks: list[ScoredChunk] = []
        candidates: list[CandidateScore] = []

        for match in matches:
            similarity = match.similarity
            threshold = self._thresholds.threshold_for(match.chunk, concern)
            passed = similarity >= threshold
            candidates.append(
                CandidateScore(
                    chunk_id=match.chunk.id,
                    source_file=match.chunk.source_file,
                    chunk_index=match.chunk.chunk_index,
                    similarity=similarity,
                    threshold=threshold,
                    passed=passed,
                )
            )
            if passed:
                chunks.append(ScoredChunk(chunk=match.chunk, similarity=similarity))

        logger.info(
            f"Retrieved {len(chunks)}/{len(matches)} chunks for '{query[:50]}...'"
            + (f" (concern={concern})" if concern else "")
            + (f" (comparison={comparison[0]} vs {comparison[1]})" if comparison else "")
        )

        return RetrievalResult(
            chunks=chunks,
            candidates=candidates,
            default_threshold=self._thresholds.default_threshold,
            sensitive_threshold=self._thresholds.sensitive_threshold,
            top_k=self._top_k,
            comparison=comparison,
            concern=concern,
        )

    async def _search_comparison(self, procedures: tuple[str, str]) -> list[VectorMatch]:
        """Search each procedure independently, merge and keep the top K."""
        merged: dict[str, VectorMatch] = {}
        for procedure in procedures:
            embedding = await self._embedder.embed(f"{procedure} {COMPARISON_SUFFIX}")
            for match in self._vector_store.query(
                query_embedding=embedding, n_results=self._top_k
            ):
                existing = merged.get(match.chunk.id)
                if existing is None or match.similarity > existing.similarity:
                    merged[match.chunk.id] = match

        ranked = sorted(merged.values(), key=lambda m: m.similarity, reverse=True)
        return ranked[: self._top_k]


def format_context(chunks: list[ScoredChunk]) -> str:
    """Format chunks as labelled context for the LLM."""
    if not chunks:
        return ""
    parts = [
        f"[Source {i}: {c.source_file}]\n{c.text}" for i, c in enumerate(chunks, 1)
    ]
    return "\n\n---\n\n".join(parts)
