import logging
from typing import AsyncIterator, Optional

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)


class OpenAIChatClient:
    """LLM client for the OpenAI chat API (or any compatible endpoint)."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
    ):
        """Initialize chat client.

        Args:
            api_key: API key.
            model: Model name.
            base_url: Optional OpenAI-compatible API URL (e.g. Ollama).
        """
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self.model_name = model

    def _params(
        self, temperature: float, max_tokens: int, top_p: Optional[float]
    ) -> dict:
        params = {
            "model": self.model_name,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if top_p is not None:
            params["top_p"] = top_p
        return params

    async def complete(
        self,
        messages: list[dict],
        temperature: float,
        max_tokens: int,
        top_p: Optional[float] = None,
    ) -> str:
        response = await self._client.chat.completions.create(
            messages=messages,
            **self._params(temperature, max_tokens, top_p),
        )
        content = response.choices[0].message.content or ""
        return content.strip()

    async def stream(
        self,
        messages: list[dict],
        temperature: float,
        max_tokens: int,
        top_p: Optional[float] = None,
    ) -> AsyncIterator[str]:
        """Stream chat response.

        Yields:
            Response tokens.
        """
        response = await self._client.chat.completions.create(
            messages=messages,
            stream=True,
            **self._params(temperature, max_tokens, top_p),
        )

        async for chunk in response:
            if chunk.choices and chunk.choices[0].delta.content:
                yield chunk.choices[0].delta.content

    async def ping(self) -> bool:
        await self._client.models.list()
        return True
