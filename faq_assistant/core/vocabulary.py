"""Keyword vocabularies shared by the classifier, enhancer and retriever."""

import json
import logging
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


DEFAULT_PROCEDURES: dict[str, list[str]] = {
    "LASIK": ["lasik"],
    "PRK": ["prk", "photorefractive keratectomy"],
    "SMILE": ["smile surgery", "smile procedure", "smile laser", "small incision lenticule extraction"],
    "EVO ICL": ["evo icl", "evo", "icl", "implantable collamer lens", "implantable lens"],
    "RLE": ["rle", "refractive lens exchange", "lens replacement", "clear lens exchange"],
    "Cataract Surgery": ["cataract surgery", "cataract"],
    "LASEK": ["lasek"],
}


class ProcedureVocabulary:
    """Canonical procedure names and their synonyms.

    Synonyms are matched on word boundaries, longest first, so "evo icl" is
    consumed before "icl" and counts as a single procedure. Synonyms match in
    any case; a canonical name that is not also a synonym only matches as
    written, so "SMILE" is a procedure and "smile" is not.
    """

    def __init__(self, procedures: Optional[dict[str, list[str]]] = None):
        self._procedures = procedures or DEFAULT_PROCEDURES
        entries: list[tuple[str, str, bool]] = []
        for canonical, synonyms in self._procedures.items():
            lowered = [s.lower() for s in synonyms]
            entries.extend((s, canonical, False) for s in lowered)
            if canonical.lower() not in lowered:
                entries.append((canonical, canonical, True))
        entries.sort(key=lambda e: len(e[0]), reverse=True)

        self._lookup = {text.lower(): canonical for text, canonical, _ in entries}
        alternation = "|".join(
            f"(?-i:{re.escape(text)})" if exact else re.escape(text)
            for text, _, exact in entries
        )
        self._pattern = re.compile(rf"\b({alternation})\b", re.IGNORECASE)

    @property
    def names(self) -> list[str]:
        return list(self._procedures)

    def find(self, text: str) -> list[str]:
        """Return distinct canonical procedures in order of first mention."""
        found: list[str] = []
        for match in self._pattern.finditer(text):
            canonical = self._lookup[match.group(1).lower()]
            if canonical not in found:
                found.append(canonical)
        return found

    def mentions_any(self, text: str) -> bool:
        return self._pattern.search(text) is not None


@dataclass
class IntentVocabulary:
    """Phrase sets driving the rule-based classifier.

    Every field can be overridden from a JSON file whose keys match the field
    names; missing keys keep their defaults.
    """

    greetings: list[str] = field(default_factory=lambda: [
        "hi", "hello", "hey", "howdy", "greetings",
        "good morning", "good afternoon", "good evening",
        "how are you", "what's up", "whats up",
        "thanks", "thank you", "thx", "bye", "goodbye",
    ])
    thanks_markers: list[str] = field(default_factory=lambda: ["thank", "thx"])
    farewell_markers: list[str] = field(default_factory=lambda: ["bye", "goodbye"])

    affirmations: list[str] = field(default_factory=lambda: [
        "yes", "yeah", "yep", "yup", "sure", "ok", "okay", "absolutely",
        "definitely", "of course", "let's do it", "lets do it", "let's go",
        "sign me up", "i'm ready", "im ready", "i am ready", "schedule",
        "book", "book me", "sounds good", "sounds great", "i'm interested",
        "i am interested",
    ])

    objections: list[str] = field(default_factory=lambda: [
        "no", "nope", "nah", "not sure", "not really", "not now", "not yet",
        "maybe later", "i don't know", "i dont know", "idk", "i'll think about it",
        "too expensive", "too much", "too risky", "expensive", "can't afford",
        "cannot afford", "scared", "afraid", "nervous", "worried", "hesitant",
    ])
    cost_keywords: list[str] = field(default_factory=lambda: [
        "expensive", "cost", "price", "afford", "money", "pay", "too much",
    ])
    fear_keywords: list[str] = field(default_factory=lambda: [
        "scared", "afraid", "nervous", "worried", "risk", "risky", "fear",
        "pain", "hurt", "safe",
    ])

    question_words: list[str] = field(default_factory=lambda: [
        "what", "when", "where", "who", "why", "how",
    ])
    interrogative_patterns: list[str] = field(default_factory=lambda: [
        r"^(is|are|am|can|could|would|should|do|does|did|will|was|were)\b",
        r"\b(is it|is there|are there|can i|could i|will i|would i|should i|"
        r"do i|does it|will it|am i)\b",
        r"\bhow (much|long|soon|many)\b",
    ])
    statement_patterns: list[str] = field(default_factory=lambda: [
        r"^i (am|was|have|had|need|want|got|getting|scheduled|told|think|wear|heard)\b",
        r"^i've (been|had|always|never|worn|tried)\b",
        r"^i'm (getting|having|scheduled|nervous|worried|concerned|scared|thinking|"
        r"interested|considering|looking)\b",
        r"^my (doctor|surgeon|eye|eyes|vision|optometrist|ophthalmologist|prescription)\b",
        r"^the (doctor|surgeon) (said|told|recommended)\b",
    ])
    desire_keywords: list[str] = field(default_factory=lambda: [
        "want", "need", "interested in", "considering", "thinking about",
        "looking into", "hoping to", "would like",
    ])
    clinical_terms: list[str] = field(default_factory=lambda: [
        "diopter", "diopters", "astigmatism", "myopia", "hyperopia",
        "presbyopia", "nearsighted", "farsighted", "cornea", "corneal",
        "cornea thickness", "keratoconus", "prescription", "dry eye",
        "dry eyes", "pachymetry",
    ])
    prescription_pattern: str = (
        r"(?<![\w.])[-+−]\s?\d+(?:\.\d+)?\b|\b\d+(?:\.\d+)?\s*(?:diopters?|d)\b"
    )
    emotional_keywords: list[str] = field(default_factory=lambda: [
        "nervous", "scared", "afraid", "worried", "anxious", "anxiety",
        "fear", "frightened", "terrified", "concerned",
    ])
    financial_keywords: list[str] = field(default_factory=lambda: [
        "expensive", "afford", "cost", "costs", "price", "pricing",
        "financing", "payment", "insurance", "hsa", "fsa",
    ])

    high_intent_keywords: list[str] = field(default_factory=lambda: [
        "schedule", "book", "appointment", "consultation", "consult",
        "sign up", "ready", "how soon", "availability", "available",
        "next step", "next steps",
    ])
    medium_intent_keywords: list[str] = field(default_factory=lambda: [
        "cost", "price", "financing", "payment", "afford", "insurance",
        "candidate", "qualify", "recovery time", "time off",
    ])
    savings_keywords: list[str] = field(default_factory=lambda: [
        "cost", "price", "expensive", "afford", "financing", "payment",
        "save", "savings", "glasses", "contacts",
    ])

    @classmethod
    def load(cls, path: Optional[str]) -> "IntentVocabulary":
        """Load vocabulary overrides from JSON, falling back to defaults."""
        if not path:
            return cls()

        config_file = Path(path)
        if not config_file.exists():
            logger.warning(f"Intent config {path} not found, using defaults")
            return cls()

        with open(config_file, "r", encoding="utf-8") as f:
            config = json.load(f)

        known = {f.name for f in fields(cls)}
        unknown = set(config) - known
        if unknown:
            logger.warning(f"Ignoring unknown intent config keys: {sorted(unknown)}")

        vocabulary = cls(**{k: v for k, v in config.items() if k in known})
        logger.info(f"Intent vocabulary loaded from {path}")
        return vocabulary


def contains_any(text: str, keywords: list[str]) -> list[str]:
    """Return keywords found in ``text`` on word boundaries."""
    lowered = text.lower()
    return [
        k for k in keywords
        if re.search(rf"(?<!\w){re.escape(k.lower())}(?!\w)", lowered)
    ]
