"""Conversation service - replies to statements without retrieval."""

import logging

from ..models.chat import ChatMessage
from ..prompts import CONVERSATION_FALLBACK, CONVERSATION_PROMPT
from ..protocols.llm import LLMProtocol

logger = logging.getLogger(__name__)


class ConversationService:
    """Acknowledges a statement and steers toward an answerable question."""

    def __init__(
        self,
        llm: LLMProtocol,
        clinic_name: str = "our clinic",
        clinic_phone: str = "XXX-XXX-XXXX",
        temperature: float = 0.7,
        max_tokens: int = 150,
        history_messages: int = 5,
    ):
        self._llm = llm
        self._clinic_name = clinic_name
        self._clinic_phone = clinic_phone
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._history_messages = history_messages

    async def respond(self, statement: str, history: list[ChatMessage]) -> str:
        """Return a short empathetic reply; static sentence on failure."""
        system = CONVERSATION_PROMPT.format(
            clinic_name=self._clinic_name,
            clinic_phone=self._clinic_phone,
            statement=statement,
        )
        messages = [{"role": "system", "content": system}]
        messages.extend(
            {"role": m.role, "content": m.content}
            for m in history[-self._history_messages:]
        )
        messages.append({"role": "user", "content": statement})

        try:
            reply = await self._llm.complete(
                messages,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except Exception as e:
            logger.error(f"Error in conversational mode: {e}")
            return CONVERSATION_FALLBACK

        return (reply or "").strip() or CONVERSATION_FALLBACK
