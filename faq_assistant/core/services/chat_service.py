"""Chat service - the answer pipeline entry point."""

import logging
import time
from typing import AsyncIterator, Iterable, Optional, Union

from ..exceptions import EmptyQuestionError
from ..models.answer import DebugInfo, PipelineResponse, StreamEvent
from ..models.chat import ChatHistory, ChatMessage
from ..models.document import RetrievalResult
from ..models.intent import IntentSignal, Route
from ..prompts import fallback_answer
from .answer_service import AnswerService
from .conversation_service import ConversationService
from .intent_service import IntentClassifier
from .query_enhancer import QueryEnhancer
from .retrieval_service import RetrievalService

logger = logging.getLogger(__name__)

HistoryInput = Union[ChatHistory, Iterable[ChatMessage], Iterable[dict], None]


class ChatService:
    """Coordinates classification, enhancement, retrieval and generation."""

    def __init__(
        self,
        classifier: IntentClassifier,
        enhancer: QueryEnhancer,
        retriever: RetrievalService,
        answers: AnswerService,
        conversation: ConversationService,
        clinic_phone: str = "XXX-XXX-XXXX",
        history_max_messages: int = 10,
        max_question_chars: int = 500,
    ):
        """Initialize chat service.

        Args:
            classifier: Intent classifier.
            enhancer: Query enhancer.
            retriever: Retrieval service.
            answers: Answer generator.
            conversation: Statement handler.
            clinic_phone: Phone number for the fallback sentence.
            history_max_messages: Trailing history window owned by the pipeline.
            max_question_chars: Questions are truncated to this length.
        """
        self._classifier = classifier
        self._enhancer = enhancer
        self._retriever = retriever
        self._answers = answers
        self._conversation = conversation
        self._clinic_phone = clinic_phone
        self._history_max_messages = history_max_messages
        self._max_question_chars = max_question_chars

    def _prepare(self, question: str, history: HistoryInput) -> tuple[str, list[ChatMessage]]:
        """Validate the question and cut history to the trailing window."""
        if not question or not question.strip():
            raise EmptyQuestionError()
        question = question.strip()[: self._max_question_chars]

        if isinstance(history, ChatHistory):
            messages = history.window(self._history_max_messages)
        else:
            items = list(history or [])
            dicts = [
                {"role": m.role, "content": m.content} if isinstance(m, ChatMessage) else m
                for m in items
            ]
            messages = ChatHistory.from_dicts(
                dicts, max_messages=self._history_max_messages
            ).messages
        return question, messages

    def _fallback_response(
        self, signal: IntentSignal, started: float, error: Optional[Exception] = None
    ) -> PipelineResponse:
        return PipelineResponse(
            answer=fallback_answer(self._clinic_phone),
            intent=signal,
            used_fallback=True,
            debug=DebugInfo(
                route=signal.route.value,
                error=type(error).__name__ if error else None,
            ),
            response_time_ms=_elapsed_ms(started),
        )

    async def _search(self, question: str, window: list[ChatMessage]) -> tuple[str, RetrievalResult]:
        search_query = await self._enhancer.enhance(question, window)
        comparison = self._enhancer.detect_comparison(search_query)
        retrieval = await self._retriever.retrieve(search_query, comparison=comparison)
        return search_query, retrieval

    @staticmethod
    def _debug(
        signal: IntentSignal, question: str, search_query: str, retrieval: RetrievalResult
    ) -> DebugInfo:
        return DebugInfo(
            route=signal.route.value,
            candidates=retrieval.candidates,
            default_threshold=retrieval.default_threshold,
            sensitive_threshold=retrieval.sensitive_threshold,
            top_k=retrieval.top_k,
            search_query=search_query,
            enhanced=search_query != question,
            comparison=list(retrieval.comparison) if retrieval.comparison else None,
        )

    async def answer(self, question: str, history: HistoryInput = None) -> PipelineResponse:
        """Answer one user message.

        Only an empty question raises. Every backend failure is logged and
        turned into the fixed fallback answer.

        Args:
            question: User message.
            history: Prior conversation (ChatHistory, messages or dicts).

        Returns:
            Pipeline response with answer, grounding, intent and debug info.

        Raises:
            EmptyQuestionError: Question is empty or whitespace-only.
        """
        started = time.monotonic()
        question, window = self._prepare(question, history)
        signal = IntentSignal(route=Route.RETRIEVAL)

        try:
            signal = self._classifier.classify(question)
            logger.info(
                f"Route={signal.route.value} for '{question[:50]}...'"
                + (f" ({len(window)} messages of context)" if window else "")
            )

            if signal.response is not None:
                return PipelineResponse(
                    answer=signal.response,
                    intent=signal,
                    debug=DebugInfo(route=signal.route.value),
                    response_time_ms=_elapsed_ms(started),
                )

            if not signal.needs_retrieval:
                reply = await self._conversation.respond(question, window)
                return PipelineResponse(
                    answer=reply,
                    intent=signal,
                    debug=DebugInfo(route=signal.route.value),
                    response_time_ms=_elapsed_ms(started),
                )

            search_query, retrieval = await self._search(question, window)
            result = await self._answers.generate(question, retrieval.chunks, window)

            if result.used_fallback:
                logger.info(f"Fallback triggered for '{question[:50]}...'")

            return PipelineResponse(
                answer=result.answer,
                intent=signal,
                grounding_chunks=result.grounding_chunks,
                used_fallback=result.used_fallback,
                suggestions=result.suggestions,
                debug=self._debug(signal, question, search_query, retrieval),
                response_time_ms=_elapsed_ms(started),
            )

        except Exception as e:
            logger.error(f"Pipeline error for '{question[:50]}...': {e}", exc_info=True)
            return self._fallback_response(signal, started, e)

    async def answer_stream(
        self, question: str, history: HistoryInput = None
    ) -> AsyncIterator[StreamEvent]:
        """Streaming variant of :meth:`answer`.

        Yields ``content`` increments in generation order and ends with one
        ``done`` event, or one ``error`` event carrying the fallback answer.

        Raises:
            EmptyQuestionError: Question is empty or whitespace-only.
        """
        started = time.monotonic()
        question, window = self._prepare(question, history)
        signal = IntentSignal(route=Route.RETRIEVAL)
        emitted = False

        try:
            signal = self._classifier.classify(question)
            logger.info(f"[stream] Route={signal.route.value} for '{question[:50]}...'")

            if not signal.needs_retrieval:
                reply = signal.response
                if reply is None:
                    reply = await self._conversation.respond(question, window)
                emitted = True
                yield StreamEvent(type="content", content=reply)
                yield StreamEvent(
                    type="done",
                    payload={
                        "used_fallback": False,
                        "suggestions": None,
                        "grounding_chunks": [],
                        "intent": signal.to_dict(),
                        "debug_info": DebugInfo(route=signal.route.value).to_dict(),
                        "response_time_ms": _elapsed_ms(started),
                    },
                )
                return

            search_query, retrieval = await self._search(question, window)
            debug = self._debug(signal, question, search_query, retrieval)

            async for event in self._answers.generate_stream(
                question, retrieval.chunks, window
            ):
                if event.type == "done":
                    payload = dict(event.payload or {})
                    payload.update(
                        intent=signal.to_dict(),
                        debug_info=debug.to_dict(),
                        response_time_ms=_elapsed_ms(started),
                    )
                    yield StreamEvent(type="done", payload=payload)
                else:
                    emitted = True
                    yield event

        except Exception as e:
            logger.error(f"[stream] Pipeline error for '{question[:50]}...': {e}", exc_info=True)
            yield StreamEvent(
                type="error",
                content=fallback_answer(self._clinic_phone),
                payload={
                    "used_fallback": True,
                    "partial": emitted,
                    "intent": signal.to_dict(),
                    "debug_info": DebugInfo(
                        route=signal.route.value, error=type(e).__name__
                    ).to_dict(),
                    "response_time_ms": _elapsed_ms(started),
                },
            )


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
