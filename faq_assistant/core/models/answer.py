"""Answer and pipeline response models."""
from dataclasses import dataclass, field
from typing import Any, Literal, Optional

from .document import CandidateScore, ScoredChunk
from .intent import IntentSignal


@dataclass
class AnswerResult:
    """Output of the answer generator."""
    answer: str
    grounding_chunks: list[ScoredChunk] = field(default_factory=list)
    used_fallback: bool = False
    suggestions: Optional[list[str]] = None


@dataclass
class DebugInfo:
    """Observability data. Never part of the natural-language answer."""
    route: str
    candidates: list[CandidateScore] = field(default_factory=list)
    default_threshold: Optional[float] = None
    sensitive_threshold: Optional[float] = None
    top_k: Optional[int] = None
    search_query: Optional[str] = None
    enhanced: bool = False
    comparison: Optional[list[str]] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "route": self.route,
            "all_candidates": [c.to_dict() for c in self.candidates],
            "threshold": self.default_threshold,
            "sensitive_threshold": self.sensitive_threshold,
            "top_k": self.top_k,
            "search_query": self.search_query,
            "enhanced": self.enhanced,
            "comparison": self.comparison,
            "error": self.error,
        }


@dataclass
class PipelineResponse:
    """Complete response for one user message."""
    answer: str
    intent: IntentSignal
    grounding_chunks: list[ScoredChunk] = field(default_factory=list)
    used_fallback: bool = False
    suggestions: Optional[list[str]] = None
    debug: Optional[DebugInfo] = None
    response_time_ms: int = 0

    def to_dict(self) -> dict:
        return {
            "answer": self.answer,
            "grounding_chunks": [c.to_ref() for c in self.grounding_chunks],
            "used_fallback": self.used_fallback,
            "intent": self.intent.to_dict(),
            "suggestions": self.suggestions,
            "debug_info": self.debug.to_dict() if self.debug else None,
            "response_time_ms": self.response_time_ms,
        }


@dataclass
class StreamEvent:
    """Increment emitted by the streaming pipeline."""
    type: Literal["content", "done", "error"]
    content: str = ""
    payload: Optional[dict[str, Any]] = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"type": self.type, "content": self.content}
        if self.payload is not None:
            data.update(self.payload)
        return data
