"""In-memory stand-ins for the embedding, vector store and LLM backends."""

from typing import Optional, Union

from faq_assistant.core.models.document import ContentChunk, ScoredChunk, VectorMatch

Scripted = Union[str, Exception]

CLINIC_PHONE = "555-010-2030"


def make_chunk(
    chunk_id: str,
    source_file: str = "lasik.md",
    text: str = "LASIK reshapes the cornea with a laser to correct nearsightedness.",
    chunk_index: int = 0,
) -> ContentChunk:
    return ContentChunk(
        id=chunk_id, text=text, source_file=source_file, chunk_index=chunk_index
    )


def make_match(chunk_id: str, similarity: float, **kwargs) -> VectorMatch:
    return VectorMatch(chunk=make_chunk(chunk_id, **kwargs), distance=1.0 - similarity)


def make_scored(chunk_id: str, similarity: float = 0.8, **kwargs) -> ScoredChunk:
    return ScoredChunk(chunk=make_chunk(chunk_id, **kwargs), similarity=similarity)


class FakeEmbedder:
    """Returns a fixed vector per text and records every call."""

    model_name = "fake-embedding"

    def __init__(self, vectors: Optional[dict[str, list[float]]] = None, dim: int = 3):
        self.vectors = vectors or {}
        self.dim = dim
        self.calls: list[str] = []
        self.batches: list[list[str]] = []
        self.error: Optional[Exception] = None

    def _vector(self, text: str) -> list[float]:
        if text in self.vectors:
            return self.vectors[text]
        return [float(len(text) % 7 + 1)] + [0.5] * (self.dim - 1)

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.error:
            raise self.error
        return self._vector(text)

    async def embed_many(self, texts: list[str]) -> list[list[float]]:
        self.batches.append(list(texts))
        if self.error:
            raise self.error
        return [self._vector(t) for t in texts]


class FakeVectorStore:
    """Serves scripted matches, optionally keyed by query embedding."""

    def __init__(self, matches: Optional[list[VectorMatch]] = None):
        self.matches = matches or []
        self.by_embedding: dict[tuple, list[VectorMatch]] = {}
        self.queries: list[tuple[list[float], int]] = []
        self.stored: list[ContentChunk] = []
        self.error: Optional[Exception] = None

    def replace_all(self, chunks: list[ContentChunk]) -> None:
        self.stored = list(chunks)

    def query(self, query_embedding: list[float], n_results: int = 5) -> list[VectorMatch]:
        self.queries.append((list(query_embedding), n_results))
        if self.error:
            raise self.error
        matches = self.by_embedding.get(tuple(query_embedding), self.matches)
        return list(matches)[:n_results]

    def count(self) -> int:
        if self.error:
            raise self.error
        return len(self.stored) or len(self.matches)


class FakeLLM:
    """Scripted chat model.

    ``responses`` are consumed in order by ``complete``; the last one repeats.
    An Exception in the script is raised instead of returned.
    """

    model_name = "fake-llm"

    def __init__(self, responses: Optional[list[Scripted]] = None):
        self.responses: list[Scripted] = list(responses or ["LASIK reshapes the cornea."])
        self.stream_tokens: list[str] = ["LASIK ", "reshapes ", "the cornea."]
        self.stream_error: Optional[Exception] = None
        self.stream_error_after: int = 0
        self.calls: list[dict] = []
        self.reachable = True

    def script(self, *responses: Scripted) -> None:
        self.responses = list(responses)

    async def complete(
        self,
        messages: list[dict],
        temperature: float,
        max_tokens: int,
        top_p: Optional[float] = None,
    ) -> str:
        self.calls.append(
            {
                "messages": messages,
                "temperature": temperature,
                "max_tokens": max_tokens,
                "top_p": top_p,
            }
        )
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response

    async def stream(
        self,
        messages: list[dict],
        temperature: float,
        max_tokens: int,
        top_p: Optional[float] = None,
    ):
        self.calls.append(
            {
                "messages": messages,
                "temperature": temperature,
                "max_tokens": max_tokens,
                "top_p": top_p,
                "stream": True,
            }
        )
        for i, token in enumerate(self.stream_tokens):
            if self.stream_error is not None and i == self.stream_error_after:
                raise self.stream_error
            yield token
        if self.stream_error is not None and self.stream_error_after >= len(self.stream_tokens):
            raise self.stream_error

    async def ping(self) -> bool:
        if not self.reachable:
            raise ConnectionError("LLM endpoint unreachable")
        return True
