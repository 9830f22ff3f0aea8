"""Tests for chat history and response models."""

from faq_assistant.core.models.answer import DebugInfo, PipelineResponse, StreamEvent
from faq_assistant.core.models.chat import ChatHistory
from faq_assistant.core.models.intent import IntentSignal, Route
from tests.fakes.fake_backends import make_scored


def test_history_from_dicts_drops_empty_and_normalizes_roles():
    """Test malformed history entries are skipped and roles normalized."""
    history = ChatHistory.from_dicts(
        [
            {"role": "user", "content": "What is LASIK?"},
            {"role": "bot", "content": "A laser procedure."},
            {"role": "user", "content": "   "},
            {"role": "assistant"},
        ]
    )

    assert [(m.role, m.content) for m in history.messages] == [
        ("user", "What is LASIK?"),
        ("assistant", "A laser procedure."),
    ]


def test_history_keeps_trailing_messages():
    """Test the history never grows beyond its limit."""
    history = ChatHistory(max_messages=3)
    for i in range(3):
        history.add_pair(f"q{i}", f"a{i}")

    assert [m.content for m in history.messages] == ["a1", "q2", "a2"]
    assert history.window(0) == []
    assert [m.content for m in history.window(1)] == ["a2"]


def test_pipeline_response_to_dict():
    """Test the response payload exposes grounding refs and debug info."""
    response = PipelineResponse(
        answer="LASIK is quick.",
        intent=IntentSignal(route=Route.RETRIEVAL),
        grounding_chunks=[make_scored("lasik_chunk_0", 0.71234)],
        debug=DebugInfo(route="retrieval", default_threshold=0.25),
        response_time_ms=12,
    )

    data = response.to_dict()

    assert data["grounding_chunks"] == [
        {"id": "lasik_chunk_0", "source_file": "lasik.md", "chunk_index": 0, "similarity": 0.7123}
    ]
    assert data["intent"]["route"] == "retrieval"
    assert data["debug_info"]["threshold"] == 0.25
    assert data["response_time_ms"] == 12


def test_stream_event_to_dict_merges_payload():
    """Test event payload keys sit beside the event type."""
    event = StreamEvent(type="done", payload={"used_fallback": False})

    assert event.to_dict() == {"type": "done", "content": "", "used_fallback": False}
