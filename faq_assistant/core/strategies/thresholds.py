import logging
from abc import ABC, abstractmethod
from typing import Optional

from ..models.document import ContentChunk
from ..vocabulary import IntentVocabulary, contains_any

logger = logging.getLogger(__name__)


class ThresholdStrategy(ABC):
    """Base class for per-chunk similarity thresholds."""

    @property
    @abstractmethod
    def default_threshold(self) -> float:
        ...

    @property
    @abstractmethod
    def sensitive_threshold(self) -> float:
        ...

    @abstractmethod
    def query_concern(self, query: str) -> Optional[str]:
        """Concern detected in the query that relaxes thresholds, if any."""
        ...

    @abstractmethod
    def threshold_for(self, chunk: ContentChunk, concern: Optional[str]) -> float:
        """Minimum similarity ``chunk`` needs to be used as grounding."""
        ...


class FixedThreshold(ThresholdStrategy):
    """Same threshold for every chunk."""

    def __init__(self, threshold: float = 0.25):
        self._threshold = threshold

    @property
    def default_threshold(self) -> float:
        return self._threshold

    @property
    def sensitive_threshold(self) -> float:
        return self._threshold

    def query_concern(self, query: str) -> Optional[str]:
        return None

    def threshold_for(self, chunk: ContentChunk, concern: Optional[str]) -> float:
        return self._threshold


class SensitiveContentThreshold(ThresholdStrategy):
    """Lower bar for emotionally or financially sensitive content.

    Chunks from sensitive sources, and every chunk for a concerned query, are
    held to ``sensitive_threshold``.
    """

    DEFAULT_SENSITIVE_SOURCES = [
        "anxiety", "fear", "nervous", "concern", "safety", "cost", "price",
        "pricing", "financing", "payment", "insurance",
    ]

    def __init__(
        self,
        default_threshold: float = 0.25,
        sensitive_threshold: float = 0.15,
        sensitive_sources: list[str] | None = None,
        emotional_keywords: list[str] | None = None,
        financial_keywords: list[str] | None = None,
    ):
        """Initialize strategy.

        Args:
            default_threshold: Threshold for ordinary content.
            sensitive_threshold: Lower threshold for sensitive content.
            sensitive_sources: Substrings marking a sensitive source file.
            emotional_keywords: Query keywords signalling emotional concern.
            financial_keywords: Query keywords signalling financial concern.
        """
        if sensitive_threshold >= default_threshold:
            raise ValueError("sensitive_threshold must be lower than default_threshold")
        self._default = default_threshold
        self._sensitive = sensitive_threshold
        if sensitive_sources is None:
            sensitive_sources = self.DEFAULT_SENSITIVE_SOURCES
        self._sources = [s.lower() for s in sensitive_sources]
        defaults = IntentVocabulary()
        if emotional_keywords is None:
            emotional_keywords = defaults.emotional_keywords
        if financial_keywords is None:
            financial_keywords = defaults.financial_keywords
        self._emotional = emotional_keywords
        self._financial = financial_keywords

    @property
    def default_threshold(self) -> float:
        return self._default

    @property
    def sensitive_threshold(self) -> float:
        return self._sensitive

    def is_sensitive_source(self, source_file: str) -> bool:
        source_lower = source_file.lower()
        return any(p in source_lower for p in self._sources)

    def query_concern(self, query: str) -> Optional[str]:
        concern = None
        if contains_any(query, self._emotional):
            concern = "emotional"
        elif contains_any(query, self._financial):
            concern = "financial"
        if concern:
            logger.debug(f"Relaxed threshold {self._sensitive} for {concern} query")
        return concern

    def threshold_for(self, chunk: ContentChunk, concern: Optional[str]) -> float:
        if concern or self.is_sensitive_source(chunk.source_file):
            return self._sensitive
        return self._default
