"""Tests for the Chroma HTTP vector store with mocked requests."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from faq_assistant.core.models.document import ContentChunk
from faq_assistant.infrastructure.vector_stores.chroma_store import ChromaVectorStore

MODULE = "faq_assistant.infrastructure.vector_stores.chroma_store.requests"
COLLECTIONS = "http://localhost:8000/api/v2/tenants/default_tenant/databases/default_database/collections"


def _response(payload=None, status_code=200):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status_code}")
    return resp


def test_query_maps_results_to_matches():
    """Test query results become matches with chunk metadata."""
    with patch(MODULE) as mock_requests:
        mock_requests.get.return_value = _response([{"name": "faq_chunks", "id": "col-1"}])
        mock_requests.post.return_value = _response(
            {
                "ids": [["lasik_chunk_0", "prk_chunk_2"]],
                "documents": [["LASIK text", "PRK text"]],
                "metadatas": [
                    [
                        {"source_file": "lasik.md", "chunk_index": 0},
                        {"source_file": "prk.md", "chunk_index": 2},
                    ]
                ],
                "distances": [[0.2, 0.4]],
            }
        )

        matches = ChromaVectorStore().query([0.1, 0.2], n_results=2)

    assert [m.chunk.id for m in matches] == ["lasik_chunk_0", "prk_chunk_2"]
    assert matches[1].chunk.source_file == "prk.md"
    assert matches[1].chunk.chunk_index == 2
    assert matches[0].similarity == pytest.approx(0.8)
    url = mock_requests.post.call_args.args[0]
    assert url == f"{COLLECTIONS}/col-1/query"


def test_query_error_raises():
    """Test HTTP errors reach the caller instead of an empty result."""
    with patch(MODULE) as mock_requests:
        mock_requests.get.return_value = _response([{"name": "faq_chunks", "id": "col-1"}])
        mock_requests.post.return_value = _response({"error": "boom"}, status_code=500)

        with pytest.raises(requests.HTTPError):
            ChromaVectorStore().query([0.1], n_results=5)


def test_replace_all_recreates_collection():
    """Test re-indexing deletes the collection and adds every chunk."""
    chunks = [
        ContentChunk(
            id="lasik_chunk_0",
            text="LASIK text",
            source_file="lasik.md",
            chunk_index=0,
            embedding=(0.1, 0.2),
        )
    ]
    with patch(MODULE) as mock_requests:
        mock_requests.get.side_effect = [
            _response([{"name": "faq_chunks", "id": "old"}]),
            _response([]),
        ]
        mock_requests.delete.return_value = _response()
        mock_requests.post.side_effect = [_response({"id": "new"}), _response({})]

        ChromaVectorStore().replace_all(chunks)

    assert mock_requests.delete.call_args.args[0] == f"{COLLECTIONS}/faq_chunks"
    create_call, add_call = mock_requests.post.call_args_list
    assert create_call.kwargs["json"]["metadata"] == {"hnsw:space": "cosine"}
    assert add_call.args[0] == f"{COLLECTIONS}/new/add"
    body = add_call.kwargs["json"]
    assert body["ids"] == ["lasik_chunk_0"]
    assert body["embeddings"] == [[0.1, 0.2]]
    assert body["metadatas"] == [{"source_file": "lasik.md", "chunk_index": 0}]


def test_count():
    """Test count reads the collection size."""
    with patch(MODULE) as mock_requests:
        mock_requests.get.side_effect = [
            _response([{"name": "faq_chunks", "id": "col-1"}]),
            _response(42),
        ]

        assert ChromaVectorStore().count() == 42
