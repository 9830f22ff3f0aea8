import logging
from typing import Optional

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)


class OpenAIEmbedder:
    """Remote embeddings through the OpenAI API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "text-embedding-3-small",
        base_url: Optional[str] = None,
    ):
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self.model_name = model

    async def embed(self, text: str) -> list[float]:
        response = await self._client.embeddings.create(
            model=self.model_name,
            input=text.strip(),
            encoding_format="float",
        )
        return response.data[0].embedding

    async def embed_many(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        response = await self._client.embeddings.create(
            model=self.model_name,
            input=[t.strip() for t in texts],
            encoding_format="float",
        )
        ordered = sorted(response.data, key=lambda d: d.index)
        logger.debug(f"Embedded {len(ordered)} texts with {self.model_name}")
        return [d.embedding for d in ordered]
