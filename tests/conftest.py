"""Pytest configuration and fixtures."""

import os

import pytest

from faq_assistant.core.services.answer_service import AnswerService
from faq_assistant.core.services.chat_service import ChatService
from faq_assistant.core.services.conversation_service import ConversationService
from faq_assistant.core.services.intent_service import IntentClassifier
from faq_assistant.core.services.query_enhancer import QueryEnhancer
from faq_assistant.core.services.retrieval_service import RetrievalService
from faq_assistant.core.services.suggestion_service import SuggestionService
from faq_assistant.core.strategies.thresholds import SensitiveContentThreshold
from tests.fakes.fake_backends import CLINIC_PHONE, FakeEmbedder, FakeLLM, FakeVectorStore


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables."""
    os.environ["OPENAI_API_KEY"] = "test-openai-key"
    os.environ["VECTOR_STORE_PROVIDER"] = "local"
    os.environ["CLINIC_PHONE"] = CLINIC_PHONE


@pytest.fixture
def embedder():
    return FakeEmbedder()


@pytest.fixture
def vector_store():
    return FakeVectorStore()


@pytest.fixture
def llm():
    return FakeLLM()


@pytest.fixture
def build_chat_service(embedder, vector_store, llm):
    """Assemble a ChatService over the fake backends."""

    def _build(**overrides) -> ChatService:
        suggestions = SuggestionService(llm)
        return ChatService(
            classifier=overrides.get("classifier", IntentClassifier(clinic_phone=CLINIC_PHONE)),
            enhancer=QueryEnhancer(llm),
            retriever=RetrievalService(
                embedder,
                vector_store,
                top_k=5,
                threshold_strategy=SensitiveContentThreshold(0.25, 0.15),
            ),
            answers=AnswerService(llm, suggestions, clinic_phone=CLINIC_PHONE),
            conversation=ConversationService(llm, clinic_phone=CLINIC_PHONE),
            clinic_phone=CLINIC_PHONE,
            history_max_messages=overrides.get("history_max_messages", 10),
        )

    return _build
