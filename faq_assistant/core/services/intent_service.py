"""Intent classifier - decides how a message is answered."""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional

from ..models.intent import BuyingIntent, BuyingIntentLevel, IntentSignal, Route
from ..prompts import (
    AFFIRMATION_RESPONSE,
    GREETING_RESPONSES,
    OBJECTION_RESPONSES,
)
from ..vocabulary import IntentVocabulary, ProcedureVocabulary, contains_any

logger = logging.getLogger(__name__)

_SEPARATORS = " !.,?;:-"


@dataclass
class IntentRule:
    """One entry of the prioritized rule list.

    ``predicate`` decides whether the rule fires; ``handler`` turns the
    message into a signal.
    """
    route: Route
    predicate: Callable[[str], bool]
    handler: Callable[[str], IntentSignal]


class IntentClassifier:
    """Rule-based classifier: greeting → affirmation → objection → statement → retrieval."""

    def __init__(
        self,
        vocabulary: Optional[IntentVocabulary] = None,
        procedures: Optional[ProcedureVocabulary] = None,
        clinic_phone: str = "XXX-XXX-XXXX",
        debug: bool = False,
    ):
        """Initialize classifier.

        Args:
            vocabulary: Phrase sets (defaults if omitted).
            procedures: Shared procedure vocabulary.
            clinic_phone: Phone number used in canned replies.
            debug: Log every rule decision.
        """
        self._vocab = vocabulary or IntentVocabulary()
        self._procedures = procedures or ProcedureVocabulary()
        self._clinic_phone = clinic_phone
        self._debug = debug

        self._interrogative_res = [
            re.compile(p, re.IGNORECASE) for p in self._vocab.interrogative_patterns
        ]
        self._statement_res = [
            re.compile(p, re.IGNORECASE) for p in self._vocab.statement_patterns
        ]
        self._question_word_re = re.compile(
            r"\b(" + "|".join(map(re.escape, self._vocab.question_words)) + r")\b",
            re.IGNORECASE,
        )
        self._prescription_re = re.compile(self._vocab.prescription_pattern, re.IGNORECASE)

        self._rules = [
            IntentRule(Route.GREETING, self.is_greeting, self._greeting),
            IntentRule(Route.AFFIRMATION, self.is_affirmation, self._affirmation),
            IntentRule(Route.OBJECTION, self.is_objection, self._objection),
            IntentRule(Route.STATEMENT, self.is_statement, self._statement),
        ]

    def _log(self, message: str) -> None:
        if self._debug:
            logger.info(f"[intent] {message}")

    @property
    def rules(self) -> list[IntentRule]:
        return list(self._rules)

    def classify(self, message: str) -> IntentSignal:
        """Return exactly one route for ``message``; first matching rule wins.

        Args:
            message: Raw user message.

        Returns:
            Intent signal with route, buying intent and canned reply if any.
        """
        text = message.strip()
        for rule in self._rules:
            if rule.predicate(text):
                signal = rule.handler(text)
                self._log(f"{rule.route.value} -> {signal.route.value} for '{text[:50]}'")
                return signal

        self._log(f"default retrieval for '{text[:50]}'")
        return IntentSignal(route=Route.RETRIEVAL, buying_intent=self.buying_intent(text))

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------
    @staticmethod
    def _match_phrase(text: str, phrases: list[str]) -> Optional[str]:
        """Longest phrase that equals ``text`` or prefixes it before a separator."""
        lowered = text.lower().strip()
        for phrase in sorted(phrases, key=len, reverse=True):
            p = phrase.lower()
            if lowered == p:
                return phrase
            if lowered.startswith(p) and lowered[len(p)] in _SEPARATORS:
                return phrase
        return None

    def _leading_phrase_without_question(self, text: str, phrases: list[str]) -> bool:
        phrase = self._match_phrase(text, phrases)
        if phrase is None:
            return False
        # "yes, but how long is recovery?" is a follow-up question, not agreement;
        # "How are you?" has nothing after the phrase and stays a greeting.
        rest = text[len(phrase):]
        return not (rest.strip(_SEPARATORS) and "?" in rest)

    def is_greeting(self, text: str) -> bool:
        return self._leading_phrase_without_question(text, self._vocab.greetings)

    def is_affirmation(self, text: str) -> bool:
        return self._leading_phrase_without_question(text, self._vocab.affirmations)

    def is_objection(self, text: str) -> bool:
        return self._leading_phrase_without_question(text, self._vocab.objections)

    def is_question(self, text: str) -> bool:
        if "?" in text:
            return True
        if self._question_word_re.search(text):
            return True
        return any(r.search(text) for r in self._interrogative_res)

    def is_statement(self, text: str) -> bool:
        if self.is_question(text):
            return False
        return any(r.search(text) for r in self._statement_res)

    def statement_concern(self, text: str) -> Optional[str]:
        """Reason a first-person statement still needs retrieval, if any."""
        if self._prescription_re.search(text):
            return "clinical"
        if contains_any(text, self._vocab.clinical_terms):
            return "clinical"
        if self._procedures.mentions_any(text) and contains_any(
            text, self._vocab.desire_keywords
        ):
            return "procedure_interest"
        if contains_any(text, self._vocab.emotional_keywords):
            return "emotional"
        if contains_any(text, self._vocab.financial_keywords):
            return "financial"
        return None

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------
    def _greeting(self, text: str) -> IntentSignal:
        lowered = text.lower()
        if any(m in lowered for m in self._vocab.thanks_markers):
            category = "thanks"
        elif any(m in lowered for m in self._vocab.farewell_markers):
            category = "farewell"
        else:
            category = "generic"
        return IntentSignal(
            route=Route.GREETING,
            buying_intent=self.buying_intent(text),
            response=GREETING_RESPONSES[category],
            category=category,
        )

    def _affirmation(self, text: str) -> IntentSignal:
        intent = self.buying_intent(text)
        intent.level = BuyingIntentLevel.HIGH
        intent.score = 1.0
        return IntentSignal(
            route=Route.AFFIRMATION,
            buying_intent=intent,
            response=AFFIRMATION_RESPONSE.format(clinic_phone=self._clinic_phone),
            category="schedule",
        )

    def _objection(self, text: str) -> IntentSignal:
        if contains_any(text, self._vocab.cost_keywords):
            category = "cost"
        elif contains_any(text, self._vocab.fear_keywords):
            category = "fear"
        else:
            category = "generic"

        intent = self.buying_intent(text)
        if intent.score < 0.5:
            intent.score = 0.5
            intent.level = BuyingIntentLevel.MEDIUM
        return IntentSignal(
            route=Route.OBJECTION,
            buying_intent=intent,
            response=OBJECTION_RESPONSES[category],
            category=category,
        )

    def _statement(self, text: str) -> IntentSignal:
        concern = self.statement_concern(text)
        if concern:
            self._log(f"statement redirected to retrieval ({concern})")
            return IntentSignal(
                route=Route.RETRIEVAL,
                buying_intent=self.buying_intent(text),
                concern=concern,
            )
        return IntentSignal(route=Route.STATEMENT, buying_intent=self.buying_intent(text))

    # ------------------------------------------------------------------
    def buying_intent(self, text: str) -> BuyingIntent:
        """Score purchase intent from keyword matches."""
        high = contains_any(text, self._vocab.high_intent_keywords)
        medium = contains_any(text, self._vocab.medium_intent_keywords)
        score = min(1.0, 0.4 * len(high) + 0.2 * len(medium))

        if score >= 0.7:
            level = BuyingIntentLevel.HIGH
        elif score >= 0.3:
            level = BuyingIntentLevel.MEDIUM
        elif score > 0:
            level = BuyingIntentLevel.LOW
        else:
            level = BuyingIntentLevel.NONE

        return BuyingIntent(
            level=level,
            score=score,
            signals=high + medium,
            show_savings_calculator=bool(
                contains_any(text, self._vocab.savings_keywords)
            ),
        )
