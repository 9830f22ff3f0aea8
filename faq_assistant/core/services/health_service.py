"""Health service - backend reachability and index readiness."""

import logging
from dataclasses import dataclass
from typing import Optional

from ..exceptions import IndexNotReadyError
from ..protocols.llm import LLMProtocol
from ..protocols.vector_store import VectorStoreProtocol

logger = logging.getLogger(__name__)


@dataclass
class HealthStatus:
    llm: bool = False
    vector_store: bool = False
    collection: bool = False
    chunk_count: int = 0
    vector_provider: str = "local"

    @property
    def healthy(self) -> bool:
        return self.llm and self.vector_store and self.collection

    def to_dict(self) -> dict:
        return {
            "status": "healthy" if self.healthy else "unhealthy",
            "components": {
                "llm": self.llm,
                "vector_store": self.vector_store,
                "vector_provider": self.vector_provider,
                "collection": self.collection,
                "chunk_count": self.chunk_count,
            },
        }


class HealthService:

    def __init__(
        self,
        llm: LLMProtocol,
        vector_store: VectorStoreProtocol,
        vector_provider: str = "local",
    ):
        self._llm = llm
        self._vector_store = vector_store
        self._vector_provider = vector_provider

    def ensure_ready(self) -> int:
        """Explicit startup check; raises if the index is empty."""
        count = self._vector_store.count()
        if count == 0:
            raise IndexNotReadyError("Vector store is empty. Run the 'ingest' command first.")
        logger.info(f"Vector store ready: {count} chunks")
        return count

    async def check(self) -> HealthStatus:
        status = HealthStatus(vector_provider=self._vector_provider)

        try:
            status.llm = await self._llm.ping()
        except Exception as e:
            logger.error(f"LLM health check failed: {e}")

        count: Optional[int] = None
        try:
            count = self._vector_store.count()
        except Exception as e:
            logger.error(f"Vector store health check failed: {e}")

        if count is not None:
            status.vector_store = True
            status.chunk_count = count
            status.collection = count > 0

        return status
