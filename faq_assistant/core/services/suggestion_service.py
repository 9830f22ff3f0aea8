"""Suggestion service - clarifying follow-up questions after a fallback."""

import logging
import re

from ..models.document import ScoredChunk
from ..prompts import GENERIC_SUGGESTIONS, SUGGESTION_PROMPT, SUGGESTION_SYSTEM_PROMPT
from ..protocols.llm import LLMProtocol

logger = logging.getLogger(__name__)

SUGGESTION_COUNT = 3
_LIST_PREFIX = re.compile(r"^\s*(?:[-*•]+|\d+[.)]|question\s*\d+\s*[:.)-])\s*", re.IGNORECASE)


class SuggestionService:
    """Produces exactly three follow-up questions. Never raises."""

    def __init__(
        self,
        llm: LLMProtocol,
        temperature: float = 0.7,
        max_tokens: int = 150,
        context_chunks: int = 3,
    ):
        self._llm = llm
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._context_chunks = context_chunks

    async def generate(self, question: str, chunks: list[ScoredChunk]) -> list[str]:
        """Suggest questions the user may have meant.

        Args:
            question: Original (possibly vague) question.
            chunks: Retrieved chunks, possibly empty.

        Returns:
            Exactly three question strings ending in "?".
        """
        if not chunks:
            return list(GENERIC_SUGGESTIONS)

        context = "\n\n---\n\n".join(c.text for c in chunks[: self._context_chunks])
        messages = [
            {"role": "system", "content": SUGGESTION_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": SUGGESTION_PROMPT.format(question=question, context=context),
            },
        ]

        try:
            response = await self._llm.complete(
                messages,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except Exception as e:
            logger.error(f"Error generating suggestions: {e}")
            return list(GENERIC_SUGGESTIONS)

        suggestions = parse_suggestions(response)
        if len(suggestions) < SUGGESTION_COUNT:
            logger.info(
                f"Only {len(suggestions)} usable suggestions, padding with generic ones"
            )
        return pad_suggestions(suggestions)


def parse_suggestions(text: str) -> list[str]:
    """Extract well-formed questions, one per line."""
    suggestions: list[str] = []
    for line in (text or "").splitlines():
        candidate = _LIST_PREFIX.sub("", line).strip().strip('"').strip()
        if len(candidate) > 1 and candidate.endswith("?") and candidate not in suggestions:
            suggestions.append(candidate)
    return suggestions[:SUGGESTION_COUNT]


def pad_suggestions(suggestions: list[str]) -> list[str]:
    padded = list(suggestions[:SUGGESTION_COUNT])
    for generic in GENERIC_SUGGESTIONS:
        if len(padded) >= SUGGESTION_COUNT:
            break
        if generic not in padded:
            padded.append(generic)
    return padded
