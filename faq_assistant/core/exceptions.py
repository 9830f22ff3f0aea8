"""Pipeline exceptions."""


class EmptyQuestionError(ValueError):
    """Question is empty or whitespace-only."""

    def __init__(self, message: str = "Question cannot be empty"):
        super().__init__(message)


class IndexNotReadyError(RuntimeError):
    """Vector store holds no chunks; run the indexer first."""
