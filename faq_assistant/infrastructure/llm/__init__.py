"""LLM client implementations."""
from .openai_client import OpenAIChatClient

__all__ = ["OpenAIChatClient"]
