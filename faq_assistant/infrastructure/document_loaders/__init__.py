"""Document loader implementations."""
from .markdown_loader import MarkdownLoader, strip_markdown

__all__ = ["MarkdownLoader", "strip_markdown"]
