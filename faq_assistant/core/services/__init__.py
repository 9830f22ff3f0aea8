"""Core business services."""
from .intent_service import IntentClassifier
from .query_enhancer import QueryEnhancer
from .retrieval_service import RetrievalService
from .suggestion_service import SuggestionService
from .answer_service import AnswerService
from .conversation_service import ConversationService
from .chat_service import ChatService
from .health_service import HealthService
from .ingest_service import IngestService

__all__ = [
    "IntentClassifier",
    "QueryEnhancer",
    "RetrievalService",
    "SuggestionService",
    "AnswerService",
    "ConversationService",
    "ChatService",
    "HealthService",
    "IngestService",
]
