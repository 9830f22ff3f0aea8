"""LLM protocol for dependency injection."""
from typing import AsyncIterator, Optional, Protocol, runtime_checkable


@runtime_checkable
class LLMProtocol(Protocol):
    """Protocol for a chat-completion model."""

    model_name: str

    async def complete(
        self,
        messages: list[dict],
        temperature: float,
        max_tokens: int,
        top_p: Optional[float] = None,
    ) -> str:
        """Run a single completion.

        Args:
            messages: Chat messages ({role, content}).
            temperature: Sampling temperature.
            max_tokens: Output length cap.
            top_p: Nucleus sampling (optional).

        Returns:
            Stripped completion text.
        """
        ...

    def stream(
        self,
        messages: list[dict],
        temperature: float,
        max_tokens: int,
        top_p: Optional[float] = None,
    ) -> AsyncIterator[str]:
        """Stream completion tokens in generation order.

        Args:
            messages: Chat messages ({role, content}).
            temperature: Sampling temperature.
            max_tokens: Output length cap.
            top_p: Nucleus sampling (optional).

        Yields:
            Text increments.
        """
        ...

    async def ping(self) -> bool:
        """Check that the model endpoint is reachable."""
        ...
