"""Tests for health and readiness checks."""

import pytest

from faq_assistant.core.exceptions import IndexNotReadyError
from faq_assistant.core.services.health_service import HealthService
from tests.fakes.fake_backends import FakeLLM, FakeVectorStore, make_chunk


@pytest.mark.asyncio
async def test_healthy():
    """Test all components up with a populated index."""
    store = FakeVectorStore()
    store.replace_all([make_chunk("a"), make_chunk("b")])

    status = await HealthService(FakeLLM(), store).check()

    assert status.healthy is True
    assert status.to_dict()["components"]["chunk_count"] == 2


@pytest.mark.asyncio
async def test_llm_down():
    """Test an unreachable model marks the service unhealthy."""
    llm = FakeLLM()
    llm.reachable = False
    store = FakeVectorStore()
    store.replace_all([make_chunk("a")])

    status = await HealthService(llm, store).check()

    assert status.llm is False
    assert status.vector_store is True
    assert status.to_dict()["status"] == "unhealthy"


@pytest.mark.asyncio
async def test_vector_store_down():
    """Test a failing store is reported without raising."""
    store = FakeVectorStore()
    store.error = ConnectionError("refused")

    status = await HealthService(FakeLLM(), store, vector_provider="chroma").check()

    assert status.vector_store is False
    assert status.chunk_count == 0
    assert status.to_dict()["components"]["vector_provider"] == "chroma"


@pytest.mark.asyncio
async def test_empty_index_is_not_healthy():
    """Test an empty collection is reachable but not ready."""
    status = await HealthService(FakeLLM(), FakeVectorStore()).check()

    assert status.vector_store is True
    assert status.collection is False
    assert status.healthy is False


def test_ensure_ready_raises_on_empty_index():
    """Test startup refuses to serve an empty index."""
    with pytest.raises(IndexNotReadyError):
        HealthService(FakeLLM(), FakeVectorStore()).ensure_ready()


def test_ensure_ready_returns_count():
    """Test startup passes once content is indexed."""
    store = FakeVectorStore()
    store.replace_all([make_chunk("a")])

    assert HealthService(FakeLLM(), store).ensure_ready() == 1
