"""Domain models."""
from .document import (
    CandidateScore,
    ContentChunk,
    IndexStats,
    RetrievalResult,
    ScoredChunk,
    VectorMatch,
)
from .chat import ChatMessage, ChatHistory
from .intent import BuyingIntent, BuyingIntentLevel, IntentSignal, Route
from .answer import AnswerResult, DebugInfo, PipelineResponse, StreamEvent

__all__ = [
    "CandidateScore",
    "ContentChunk",
    "IndexStats",
    "RetrievalResult",
    "ScoredChunk",
    "VectorMatch",
    "ChatMessage",
    "ChatHistory",
    "BuyingIntent",
    "BuyingIntentLevel",
    "IntentSignal",
    "Route",
    "AnswerResult",
    "DebugInfo",
    "PipelineResponse",
    "StreamEvent",
]
