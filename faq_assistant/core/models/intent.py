"""Intent classification models."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Route(Enum):
    """Primary route for an incoming message."""
    GREETING = "greeting"
    AFFIRMATION = "affirmation"
    OBJECTION = "objection"
    STATEMENT = "statement"
    RETRIEVAL = "retrieval"


class BuyingIntentLevel(Enum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class BuyingIntent:
    """Keyword-derived purchase intent, independent of the route."""
    level: BuyingIntentLevel = BuyingIntentLevel.NONE
    score: float = 0.0
    signals: list[str] = field(default_factory=list)
    show_savings_calculator: bool = False

    def to_dict(self) -> dict:
        return {
            "level": self.level.value,
            "score": round(self.score, 2),
            "signals": list(self.signals),
            "show_savings_calculator": self.show_savings_calculator,
        }


@dataclass
class IntentSignal:
    """Classifier output.

    ``response`` is set only for canned routes (greeting, affirmation,
    objection). ``concern`` is set when a first-person statement was redirected
    into retrieval.
    """
    route: Route
    buying_intent: BuyingIntent = field(default_factory=BuyingIntent)
    response: Optional[str] = None
    category: Optional[str] = None
    concern: Optional[str] = None

    @property
    def needs_retrieval(self) -> bool:
        return self.route is Route.RETRIEVAL

    def to_dict(self) -> dict:
        return {
            "route": self.route.value,
            "category": self.category,
            "concern": self.concern,
            "buying_intent": self.buying_intent.to_dict(),
        }
