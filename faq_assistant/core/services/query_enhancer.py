"""Query enhancer - rewrites vague follow-ups into self-contained queries."""

import logging
import re
from typing import Optional

from ..models.chat import ChatMessage
from ..prompts import ENHANCER_PROMPT, ENHANCER_SYSTEM_PROMPT
from ..protocols.llm import LLMProtocol
from ..vocabulary import ProcedureVocabulary

logger = logging.getLogger(__name__)

MAX_SELF_CONTAINED_WORDS = 8

VAGUE_PATTERNS = [
    r"^what about\b",
    r"^how about\b",
    r"\b(compared to|versus|vs\.?)(?!\w)",
    r"\b(it|this|that|they|them|those|these)\b",
    r"^(yes|yeah|yep|sure|ok|okay)\b.*\?",
    r"^(how|why|when|where|what|really|and|is it|does it|can i|will it)\s*\?*$",
]

COMPARISON_KEYWORDS = [
    "better", "best", "worse", "versus", "vs", "compare", "compared",
    "comparison", "difference", "differences", "different", "differ",
    "which one", "which is",
]


class QueryEnhancer:
    """Turns context-dependent follow-ups into search-ready queries."""

    def __init__(
        self,
        llm: LLMProtocol,
        procedures: Optional[ProcedureVocabulary] = None,
        temperature: float = 0.2,
        max_tokens: int = 100,
        history_messages: int = 4,
    ):
        """Initialize enhancer.

        Args:
            llm: LLM client used for rewriting.
            procedures: Shared procedure vocabulary.
            temperature: Sampling temperature for rewrites.
            max_tokens: Max rewrite length.
            history_messages: Trailing messages shown to the rewriter.
        """
        self._llm = llm
        self._procedures = procedures or ProcedureVocabulary()
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._history_messages = history_messages
        self._vague_res = [re.compile(p, re.IGNORECASE) for p in VAGUE_PATTERNS]
        self._comparison_re = re.compile(
            r"\b(" + "|".join(map(re.escape, COMPARISON_KEYWORDS)) + r")\b",
            re.IGNORECASE,
        )

    def is_vague(self, query: str) -> bool:
        text = query.strip()
        return any(r.search(text) for r in self._vague_res)

    def needs_enhancement(self, query: str, history: list[ChatMessage]) -> bool:
        if not history:
            return False
        if len(query.split()) > MAX_SELF_CONTAINED_WORDS:
            return False
        return self.is_vague(query)

    async def enhance(self, query: str, history: list[ChatMessage]) -> str:
        """Return a self-contained search query.

        Never raises: any failure returns ``query`` unchanged.

        Args:
            query: Current user message.
            history: Trailing conversation window.

        Returns:
            Rewritten query, or the original when no rewrite applies.
        """
        if not self.needs_enhancement(query, history):
            return query

        recent = history[-self._history_messages:]
        conversation = "\n".join(f"{m.role}: {m.content}" for m in recent)
        mentioned = self._procedures.find(" ".join(m.content for m in recent))

        prompt = ENHANCER_PROMPT.format(
            conversation=conversation,
            procedures=", ".join(mentioned) if mentioned else "none",
            query=query,
        )
        messages = [
            {"role": "system", "content": ENHANCER_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

        try:
            rewritten = await self._llm.complete(
                messages,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except Exception as e:
            logger.warning(f"Query enhancement failed, using original query: {e}")
            return query

        lines = (rewritten or "").strip().splitlines()
        rewritten = lines[0].strip().strip('"').strip() if lines else ""
        if not rewritten:
            logger.info(f"Query enhancement returned nothing for '{query[:50]}'")
            return query

        logger.info(f"Enhanced query: '{query[:50]}' -> '{rewritten[:80]}'")
        return rewritten

    def detect_comparison(self, query: str) -> Optional[tuple[str, str]]:
        """Return the two procedures of a comparison query, if it is one."""
        if not self._comparison_re.search(query):
            return None
        found = self._procedures.find(query)
        if len(found) != 2:
            return None
        return found[0], found[1]
