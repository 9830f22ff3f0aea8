"""Content chunk and retrieval models."""
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class ContentChunk:
    """Indexed fragment of an FAQ document. Read-only once indexed."""
    id: str
    text: str
    source_file: str
    chunk_index: int = 0
    embedding: tuple[float, ...] = ()


@dataclass
class VectorMatch:
    """Raw hit from the vector store."""
    chunk: ContentChunk
    distance: float

    @property
    def similarity(self) -> float:
        """Similarity on the 0..1 scale (higher is closer)."""
        return 1.0 - self.distance


@dataclass
class ScoredChunk:
    """Chunk that passed its similarity threshold."""
    chunk: ContentChunk
    similarity: float

    @property
    def source_file(self) -> str:
        return self.chunk.source_file

    @property
    def text(self) -> str:
        return self.chunk.text

    def to_ref(self) -> dict:
        """Compact reference for response payloads and logs."""
        return {
            "id": self.chunk.id,
            "source_file": self.chunk.source_file,
            "chunk_index": self.chunk.chunk_index,
            "similarity": round(self.similarity, 4),
        }


@dataclass
class CandidateScore:
    """Debug record for every candidate the retriever looked at."""
    chunk_id: str
    source_file: str
    chunk_index: int
    similarity: float
    threshold: float
    passed: bool

    def to_dict(self) -> dict:
        return {
            "chunk_id": self.chunk_id,
            "source_file": self.source_file,
            "chunk_index": self.chunk_index,
            "similarity": round(self.similarity, 4),
            "threshold": self.threshold,
            "passed": self.passed,
        }


@dataclass
class RetrievalResult:
    """Threshold-filtered chunks plus full candidate scoring."""
    chunks: list[ScoredChunk]
    candidates: list[CandidateScore]
    default_threshold: float
    sensitive_threshold: float
    top_k: int
    comparison: Optional[tuple[str, str]] = None
    concern: Optional[str] = None


@dataclass
class IndexStats:
    """Outcome of an indexing run."""
    files: int = 0
    chunks: int = 0
    sources: list[str] = field(default_factory=list)
