"""Tests for retrieval with per-chunk similarity thresholds."""

import pytest

from faq_assistant.core.services.retrieval_service import RetrievalService, format_context
from faq_assistant.core.strategies.thresholds import FixedThreshold, SensitiveContentThreshold
from tests.fakes.fake_backends import (
    FakeEmbedder,
    FakeVectorStore,
    make_match,
    make_scored,
)


def _service(matches, top_k=5, embedder=None, strategy=None):
    store = FakeVectorStore(matches)
    service = RetrievalService(
        embedder or FakeEmbedder(),
        store,
        top_k=top_k,
        threshold_strategy=strategy or SensitiveContentThreshold(0.25, 0.15),
    )
    return service, store


@pytest.mark.asyncio
async def test_filters_by_default_threshold():
    """Test only chunks at or above the default threshold are returned."""
    service, _ = _service(
        [
            make_match("lasik_chunk_0", 0.62),
            make_match("lasik_chunk_1", 0.25),
            make_match("lasik_chunk_2", 0.18),
        ]
    )

    result = await service.retrieve("What is LASIK?")

    assert [c.chunk.id for c in result.chunks] == ["lasik_chunk_0", "lasik_chunk_1"]
    assert [c.passed for c in result.candidates] == [True, True, False]
    assert result.default_threshold == 0.25
    assert result.top_k == 5


@pytest.mark.asyncio
async def test_results_sorted_by_similarity():
    """Test passing chunks come back in descending similarity."""
    service, _ = _service(
        [make_match("a", 0.4), make_match("b", 0.9), make_match("c", 0.6)]
    )

    result = await service.retrieve("What is LASIK?")

    assert [c.chunk.id for c in result.chunks] == ["b", "c", "a"]


@pytest.mark.asyncio
async def test_sensitive_source_uses_lower_threshold():
    """Test reassurance content passes where ordinary content at the same score fails."""
    service, _ = _service(
        [
            make_match("anxiety_chunk_0", 0.2, source_file="anxiety.md"),
            make_match("lasik_chunk_0", 0.2, source_file="lasik.md"),
        ]
    )

    result = await service.retrieve("What is recovery like?")

    assert [c.chunk.id for c in result.chunks] == ["anxiety_chunk_0"]
    thresholds = {c.chunk_id: c.threshold for c in result.candidates}
    assert thresholds == {"anxiety_chunk_0": 0.15, "lasik_chunk_0": 0.25}


@pytest.mark.asyncio
async def test_emotional_query_relaxes_every_threshold():
    """Test an anxious query lowers the bar for all candidates."""
    service, _ = _service([make_match("lasik_chunk_0", 0.2, source_file="lasik.md")])

    result = await service.retrieve("I'm nervous about LASIK")

    assert result.concern == "emotional"
    assert [c.chunk.id for c in result.chunks] == ["lasik_chunk_0"]


@pytest.mark.asyncio
async def test_financial_query_concern():
    """Test a cost question is flagged as a financial concern."""
    service, _ = _service([make_match("lasik_chunk_0", 0.2)])

    result = await service.retrieve("Does insurance cover it?")

    assert result.concern == "financial"
    assert len(result.chunks) == 1


@pytest.mark.asyncio
async def test_below_every_threshold_returns_empty():
    """Test nothing is returned when all candidates miss."""
    service, _ = _service([make_match("anxiety_chunk_0", 0.1, source_file="anxiety.md")])

    result = await service.retrieve("What is the capital of France?")

    assert result.chunks == []
    assert len(result.candidates) == 1


@pytest.mark.asyncio
async def test_query_is_trimmed_before_embedding():
    """Test surrounding whitespace is not sent to the embedder."""
    embedder = FakeEmbedder()
    service, store = _service([], embedder=embedder, top_k=3)

    await service.retrieve("  What is PRK?  ")

    assert embedder.calls == ["What is PRK?"]
    assert store.queries[0][1] == 3


@pytest.mark.asyncio
async def test_same_query_same_result():
    """Test retrieval is deterministic for a fixed index."""
    service, _ = _service([make_match("a", 0.5), make_match("b", 0.5), make_match("c", 0.3)])

    first = await service.retrieve("What is LASIK?")
    second = await service.retrieve("What is LASIK?")

    assert [c.chunk.id for c in first.chunks] == [c.chunk.id for c in second.chunks]
    assert [c.chunk.id for c in first.chunks] == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_comparison_merges_per_procedure_searches():
    """Test each procedure is searched separately and duplicates keep the best score."""
    embedder = FakeEmbedder(
        vectors={
            "LASIK benefits features characteristics": [1.0, 0.0, 0.0],
            "PRK benefits features characteristics": [0.0, 1.0, 0.0],
        }
    )
    service, store = _service([], embedder=embedder, top_k=3)
    store.by_embedding[(1.0, 0.0, 0.0)] = [
        make_match("lasik_chunk_0", 0.6),
        make_match("compare_chunk_0", 0.4),
    ]
    store.by_embedding[(0.0, 1.0, 0.0)] = [
        make_match("prk_chunk_0", 0.7),
        make_match("compare_chunk_0", 0.5),
    ]

    result = await service.retrieve("Which is better, LASIK or PRK?", comparison=("LASIK", "PRK"))

    assert embedder.calls == [
        "LASIK benefits features characteristics",
        "PRK benefits features characteristics",
    ]
    assert [c.chunk.id for c in result.chunks] == [
        "prk_chunk_0",
        "lasik_chunk_0",
        "compare_chunk_0",
    ]
    assert result.chunks[2].similarity == pytest.approx(0.5)
    assert result.comparison == ("LASIK", "PRK")


@pytest.mark.asyncio
async def test_comparison_keeps_top_k():
    """Test the merged comparison set is capped at top_k."""
    embedder = FakeEmbedder(
        vectors={
            "LASIK benefits features characteristics": [1.0, 0.0, 0.0],
            "SMILE benefits features characteristics": [0.0, 1.0, 0.0],
        }
    )
    service, store = _service([], embedder=embedder, top_k=2)
    store.by_embedding[(1.0, 0.0, 0.0)] = [make_match("l0", 0.8), make_match("l1", 0.3)]
    store.by_embedding[(0.0, 1.0, 0.0)] = [make_match("s0", 0.7), make_match("s1", 0.6)]

    result = await service.retrieve("LASIK vs SMILE", comparison=("LASIK", "SMILE"))

    assert [c.chunk_id for c in result.candidates] == ["l0", "s0"]


@pytest.mark.asyncio
async def test_embedder_error_propagates():
    """Test embedding failures reach the caller."""
    embedder = FakeEmbedder()
    embedder.error = ConnectionError("embedding endpoint down")
    service, _ = _service([], embedder=embedder)

    with pytest.raises(ConnectionError):
        await service.retrieve("What is LASIK?")


@pytest.mark.asyncio
async def test_vector_store_error_propagates():
    """Test vector store failures reach the caller."""
    service, store = _service([])
    store.error = RuntimeError("store unavailable")

    with pytest.raises(RuntimeError):
        await service.retrieve("What is LASIK?")


@pytest.mark.asyncio
async def test_fixed_threshold_ignores_sensitivity():
    """Test the fixed strategy applies one threshold to everything."""
    service, _ = _service(
        [make_match("anxiety_chunk_0", 0.2, source_file="anxiety.md")],
        strategy=FixedThreshold(0.25),
    )

    result = await service.retrieve("I'm nervous")

    assert result.chunks == []
    assert result.concern is None


def test_sensitive_threshold_must_be_lower():
    """Test the sensitive threshold cannot exceed the default."""
    with pytest.raises(ValueError):
        SensitiveContentThreshold(default_threshold=0.2, sensitive_threshold=0.3)


def test_sensitive_source_matching_is_case_insensitive():
    """Test sensitive sources match on substrings of the filename."""
    strategy = SensitiveContentThreshold()

    assert strategy.is_sensitive_source("Financing-Options.md")
    assert not strategy.is_sensitive_source("lasik.md")


def test_empty_keyword_lists_disable_query_concern():
    """Test explicitly empty keyword lists turn off query-concern relaxation."""
    relaxed = SensitiveContentThreshold()
    strict = SensitiveContentThreshold(emotional_keywords=[], financial_keywords=[])

    assert relaxed.query_concern("I'm scared of the cost") == "emotional"
    assert strict.query_concern("I'm scared of the cost") is None


def test_format_context_labels_sources():
    """Test context blocks are numbered and separated."""
    context = format_context(
        [
            make_scored("a", source_file="lasik.md", text="LASIK text"),
            make_scored("b", source_file="prk.md", text="PRK text"),
        ]
    )

    assert context == "[Source 1: lasik.md]\nLASIK text\n\n---\n\n[Source 2: prk.md]\nPRK text"
    assert format_context([]) == ""
