import logging
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from .config.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Container:
    _factories: dict[type, Callable[[], Any]] = field(default_factory=dict)
    _singletons: dict[type, Any] = field(default_factory=dict)
    _singleton_flags: set[type] = field(default_factory=set)

    def register(
        self, interface: type[T], factory: Callable[[], T], singleton: bool = False
    ) -> None:
        """Register factory for interface.

        Args:
            interface: Interface type.
            factory: Factory function.
            singleton: Whether to cache instance.
        """
        self._factories[interface] = factory
        if singleton:
            self._singleton_flags.add(interface)

    def resolve(self, interface: type[T]) -> T:
        if interface in self._singletons:
            return self._singletons[interface]

        if interface not in self._factories:
            raise KeyError(f"No factory registered for {interface}")

        instance = self._factories[interface]()

        if interface in self._singleton_flags:
            self._singletons[interface] = instance

        return instance

    def reset(self) -> None:
        """Reset singletons (for testing)."""
        self._singletons.clear()


container = Container()


def _vector_store_factory(settings: Settings) -> Callable[[], Any]:
    if settings.vector_store_provider == "chroma":
        from .infrastructure.vector_stores.chroma_store import ChromaVectorStore

        return lambda: ChromaVectorStore(
            host=settings.chroma_host,
            port=settings.chroma_port,
            collection_name=settings.chroma_collection,
        )

    from .infrastructure.vector_stores.local_store import LocalVectorStore

    return lambda: LocalVectorStore(settings.vector_store_path)


def configure_container(settings: Settings) -> Container:
    """Configure container with all dependencies.

    Args:
        settings: Application settings.

    Returns:
        Configured container.
    """
    from .core.protocols.embedder import EmbedderProtocol
    from .core.protocols.llm import LLMProtocol
    from .core.protocols.vector_store import VectorStoreProtocol
    from .core.services.answer_service import AnswerService
    from .core.services.chat_service import ChatService
    from .core.services.conversation_service import ConversationService
    from .core.services.health_service import HealthService
    from .core.services.ingest_service import IngestService
    from .core.services.intent_service import IntentClassifier
    from .core.services.query_enhancer import QueryEnhancer
    from .core.services.retrieval_service import RetrievalService
    from .core.services.suggestion_service import SuggestionService
    from .core.strategies.thresholds import SensitiveContentThreshold
    from .core.vocabulary import IntentVocabulary, ProcedureVocabulary
    from .infrastructure.embeddings.openai_embedder import OpenAIEmbedder
    from .infrastructure.llm.openai_client import OpenAIChatClient

    container.register(
        EmbedderProtocol,
        lambda: OpenAIEmbedder(
            api_key=settings.openai_api_key,
            model=settings.embedding_model,
        ),
        singleton=True,
    )

    container.register(
        VectorStoreProtocol,
        _vector_store_factory(settings),
        singleton=True,
    )

    container.register(
        LLMProtocol,
        lambda: OpenAIChatClient(
            api_key=settings.openai_api_key,
            model=settings.llm_model,
            base_url=settings.llm_base_url,
        ),
        singleton=True,
    )

    container.register(
        IntentVocabulary,
        lambda: IntentVocabulary.load(settings.intent_config_path),
        singleton=True,
    )

    container.register(ProcedureVocabulary, ProcedureVocabulary, singleton=True)

    container.register(
        IntentClassifier,
        lambda: IntentClassifier(
            vocabulary=container.resolve(IntentVocabulary),
            procedures=container.resolve(ProcedureVocabulary),
            clinic_phone=settings.clinic_phone,
            debug=settings.intent_debug,
        ),
        singleton=True,
    )

    container.register(
        QueryEnhancer,
        lambda: QueryEnhancer(
            llm=container.resolve(LLMProtocol),
            procedures=container.resolve(ProcedureVocabulary),
            temperature=settings.enhancer_temperature,
            max_tokens=settings.enhancer_max_tokens,
            history_messages=settings.enhancer_history_messages,
        ),
        singleton=True,
    )

    def _retrieval_service() -> RetrievalService:
        vocabulary = container.resolve(IntentVocabulary)
        return RetrievalService(
            embedder=container.resolve(EmbedderProtocol),
            vector_store=container.resolve(VectorStoreProtocol),
            top_k=settings.rag_top_k,
            threshold_strategy=SensitiveContentThreshold(
                default_threshold=settings.rag_similarity_threshold,
                sensitive_threshold=settings.rag_sensitive_threshold,
                sensitive_sources=settings.rag_sensitive_sources,
                emotional_keywords=vocabulary.emotional_keywords,
                financial_keywords=vocabulary.financial_keywords,
            ),
        )

    container.register(RetrievalService, _retrieval_service, singleton=True)

    container.register(
        SuggestionService,
        lambda: SuggestionService(
            llm=container.resolve(LLMProtocol),
            temperature=settings.suggestion_temperature,
            max_tokens=settings.suggestion_max_tokens,
        ),
        singleton=True,
    )

    container.register(
        AnswerService,
        lambda: AnswerService(
            llm=container.resolve(LLMProtocol),
            suggestions=container.resolve(SuggestionService),
            clinic_name=settings.clinic_name,
            clinic_phone=settings.clinic_phone,
            temperature=settings.answer_temperature,
            top_p=settings.answer_top_p,
            max_tokens=settings.answer_max_tokens,
            history_messages=settings.prompt_history_messages,
            min_context_chars=settings.rag_min_context_chars,
        ),
        singleton=True,
    )

    container.register(
        ConversationService,
        lambda: ConversationService(
            llm=container.resolve(LLMProtocol),
            clinic_name=settings.clinic_name,
            clinic_phone=settings.clinic_phone,
            temperature=settings.conversation_temperature,
            max_tokens=settings.conversation_max_tokens,
            history_messages=settings.prompt_history_messages,
        ),
        singleton=True,
    )

    container.register(
        ChatService,
        lambda: ChatService(
            classifier=container.resolve(IntentClassifier),
            enhancer=container.resolve(QueryEnhancer),
            retriever=container.resolve(RetrievalService),
            answers=container.resolve(AnswerService),
            conversation=container.resolve(ConversationService),
            clinic_phone=settings.clinic_phone,
            history_max_messages=settings.history_max_messages,
            max_question_chars=settings.max_question_chars,
        ),
        singleton=True,
    )

    container.register(
        IngestService,
        lambda: IngestService(
            embedder=container.resolve(EmbedderProtocol),
            vector_store=container.resolve(VectorStoreProtocol),
            content_path=settings.content_path,
            chunk_size=settings.chunk_size,
            chunk_overlap=settings.chunk_overlap,
            batch_size=settings.embedding_batch_size,
        ),
        singleton=True,
    )

    container.register(
        HealthService,
        lambda: HealthService(
            llm=container.resolve(LLMProtocol),
            vector_store=container.resolve(VectorStoreProtocol),
            vector_provider=settings.vector_store_provider,
        ),
        singleton=True,
    )

    logger.info("Container configured")
    return container
