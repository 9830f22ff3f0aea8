from typing import Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    openai_api_key: Optional[str] = None
    llm_base_url: Optional[str] = None
    llm_model: str = "gpt-4o-mini"

    embedding_model: str = "text-embedding-3-small"
    embedding_batch_size: int = 100

    # Generation
    answer_temperature: float = 0.3
    answer_top_p: float = 0.9
    answer_max_tokens: int = 300
    conversation_temperature: float = 0.7
    conversation_max_tokens: int = 150
    suggestion_temperature: float = 0.7
    suggestion_max_tokens: int = 150
    enhancer_temperature: float = 0.2
    enhancer_max_tokens: int = 100

    # Retrieval
    rag_top_k: int = 5
    rag_similarity_threshold: float = 0.25
    rag_sensitive_threshold: float = 0.15
    rag_sensitive_sources: list[str] = [
        "anxiety", "fear", "nervous", "concern", "safety",
        "cost", "price", "pricing", "financing", "payment", "insurance",
    ]
    rag_min_context_chars: int = 50

    # History
    history_max_messages: int = 10
    prompt_history_messages: int = 5
    enhancer_history_messages: int = 4
    max_question_chars: int = 500

    # Vector store
    vector_store_provider: Literal["local", "chroma"] = "local"
    vector_store_path: str = "./data/vectors.json"
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    chroma_collection: str = "faq_chunks"

    # Indexing
    content_path: str = "./content"
    chunk_size: int = 300
    chunk_overlap: int = 50

    # Practice
    clinic_name: str = "our clinic"
    clinic_phone: str = "XXX-XXX-XXXX"

    intent_config_path: Optional[str] = None
    intent_debug: bool = False

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
