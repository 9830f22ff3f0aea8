"""Chat domain models."""
from dataclasses import dataclass, field
from typing import Iterable


@dataclass
class ChatMessage:
    """Chat message."""
    role: str  # "user" | "assistant"
    content: str


@dataclass
class ChatHistory:
    """Chat history with limit."""
    messages: list[ChatMessage] = field(default_factory=list)
    max_messages: int = 10

    @classmethod
    def from_dicts(
        cls, messages: Iterable[dict] | None, max_messages: int = 10
    ) -> "ChatHistory":
        """Build a bounded history from caller-supplied message dicts.

        Only the trailing ``max_messages`` are kept; anything older is invisible
        to the pipeline.
        """
        history = cls(max_messages=max_messages)
        for item in messages or []:
            content = item.get("content")
            if not isinstance(content, str) or not content.strip():
                continue
            role = "user" if item.get("role") == "user" else "assistant"
            history.add(ChatMessage(role=role, content=content))
        return history

    def add(self, message: ChatMessage) -> None:
        """Add message to history."""
        self.messages.append(message)
        if len(self.messages) > self.max_messages:
            self.messages = self.messages[-self.max_messages:]

    def add_pair(self, user_content: str, assistant_content: str) -> None:
        """Add user/assistant message pair."""
        self.add(ChatMessage(role="user", content=user_content))
        self.add(ChatMessage(role="assistant", content=assistant_content))

    def window(self, size: int) -> list[ChatMessage]:
        """Return the most recent ``size`` messages."""
        if size <= 0:
            return []
        return self.messages[-size:]

    def __len__(self) -> int:
        return len(self.messages)
