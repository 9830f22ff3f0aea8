"""Answer service - grounded answer generation with fallback detection."""

import logging
from typing import AsyncIterator, Optional

from ..models.answer import AnswerResult, StreamEvent
from ..models.chat import ChatMessage
from ..models.document import ScoredChunk
from ..prompts import (
    ANSWER_SYSTEM_PROMPT,
    build_answer_prompt,
    fallback_answer,
    is_fallback_answer,
)
from ..protocols.llm import LLMProtocol
from .retrieval_service import format_context
from .suggestion_service import SuggestionService

logger = logging.getLogger(__name__)


class AnswerService:
    """Builds the safety prompt, calls the LLM and checks for fallbacks."""

    def __init__(
        self,
        llm: LLMProtocol,
        suggestions: SuggestionService,
        clinic_name: str = "our clinic",
        clinic_phone: str = "XXX-XXX-XXXX",
        temperature: float = 0.3,
        top_p: Optional[float] = 0.9,
        max_tokens: int = 300,
        history_messages: int = 5,
        min_context_chars: int = 50,
    ):
        """Initialize answer service.

        Args:
            llm: LLM client.
            suggestions: Suggestion generator used on fallbacks.
            clinic_name: Practice name used in prompts.
            clinic_phone: Phone number used in the fallback sentence.
            temperature: Sampling temperature (low for factual answers).
            top_p: Nucleus sampling.
            max_tokens: Max answer length.
            history_messages: Trailing turns included in the prompt.
            min_context_chars: Below this much chunk text, context is too thin.
        """
        self._llm = llm
        self._suggestions = suggestions
        self._clinic_name = clinic_name
        self._clinic_phone = clinic_phone
        self._temperature = temperature
        self._top_p = top_p
        self._max_tokens = max_tokens
        self._history_messages = history_messages
        self._min_context_chars = min_context_chars

    @property
    def fallback_text(self) -> str:
        return fallback_answer(self._clinic_phone)

    def has_sufficient_context(self, chunks: list[ScoredChunk]) -> bool:
        total = sum(len(c.text.strip()) for c in chunks)
        return total >= self._min_context_chars

    def build_messages(
        self, question: str, chunks: list[ScoredChunk], history: list[ChatMessage]
    ) -> list[dict]:
        """System prompt, trailing history, then question with context."""
        messages = [
            {
                "role": "system",
                "content": ANSWER_SYSTEM_PROMPT.format(clinic_name=self._clinic_name),
            }
        ]
        if self._history_messages > 0:
            messages.extend(
                {"role": "user" if m.role == "user" else "assistant", "content": m.content}
                for m in history[-self._history_messages:]
            )
        messages.append(
            {
                "role": "user",
                "content": build_answer_prompt(
                    question=question,
                    context=format_context(chunks),
                    clinic_name=self._clinic_name,
                    clinic_phone=self._clinic_phone,
                ),
            }
        )
        return messages

    async def _fallback(self, question: str, chunks: list[ScoredChunk]) -> AnswerResult:
        return AnswerResult(
            answer=self.fallback_text,
            grounding_chunks=list(chunks),
            used_fallback=True,
            suggestions=await self._suggestions.generate(question, chunks),
        )

    async def generate(
        self,
        question: str,
        chunks: list[ScoredChunk],
        history: list[ChatMessage] | None = None,
    ) -> AnswerResult:
        """Generate an answer grounded in ``chunks``.

        The LLM is never called without grounding. LLM errors propagate.

        Args:
            question: User question.
            chunks: Threshold-filtered chunks.
            history: Trailing conversation window.

        Returns:
            Answer with grounding chunks, fallback flag and suggestions.
        """
        if not chunks:
            logger.info(f"No grounding for '{question[:50]}...', using fallback")
            return await self._fallback(question, [])

        if not self.has_sufficient_context(chunks):
            logger.info(f"Context too thin for '{question[:50]}...', using fallback")
            return await self._fallback(question, chunks)

        answer = await self._llm.complete(
            self.build_messages(question, chunks, history or []),
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            top_p=self._top_p,
        )

        if not answer or is_fallback_answer(answer):
            logger.info(f"Model declined to answer '{question[:50]}...'")
            return AnswerResult(
                answer=answer or self.fallback_text,
                grounding_chunks=list(chunks),
                used_fallback=True,
                suggestions=await self._suggestions.generate(question, chunks),
            )

        return AnswerResult(answer=answer, grounding_chunks=list(chunks))

    async def generate_stream(
        self,
        question: str,
        chunks: list[ScoredChunk],
        history: list[ChatMessage] | None = None,
    ) -> AsyncIterator[StreamEvent]:
        """Streaming variant of :meth:`generate`.

        Yields ``content`` events in generation order, then one ``done`` event
        carrying fallback metadata. LLM errors propagate.
        """
        if not chunks or not self.has_sufficient_context(chunks):
            result = await self._fallback(question, chunks)
            yield StreamEvent(type="content", content=result.answer)
            yield StreamEvent(type="done", payload=_done_payload(result))
            return

        parts: list[str] = []
        async for token in self._llm.stream(
            self.build_messages(question, chunks, history or []),
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            top_p=self._top_p,
        ):
            parts.append(token)
            yield StreamEvent(type="content", content=token)

        answer = "".join(parts).strip()
        result = AnswerResult(answer=answer, grounding_chunks=list(chunks))
        if not answer or is_fallback_answer(answer):
            result.used_fallback = True
            result.suggestions = await self._suggestions.generate(question, chunks)
            if not answer:
                result.answer = self.fallback_text
                yield StreamEvent(type="content", content=result.answer)

        yield StreamEvent(type="done", payload=_done_payload(result))


def _done_payload(result: AnswerResult) -> dict:
    return {
        "used_fallback": result.used_fallback,
        "suggestions": result.suggestions,
        "grounding_chunks": [c.to_ref() for c in result.grounding_chunks],
    }
