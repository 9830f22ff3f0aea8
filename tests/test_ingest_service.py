"""Tests for offline indexing."""

import pytest

from faq_assistant.core.services.ingest_service import IngestService
from faq_assistant.infrastructure.document_loaders import MarkdownLoader, strip_markdown
from tests.fakes.fake_backends import FakeEmbedder, FakeVectorStore


def _words(n: int, prefix: str = "w") -> str:
    return " ".join(f"{prefix}{i}" for i in range(n))


def _service(content_path, **kwargs):
    embedder = FakeEmbedder()
    store = FakeVectorStore()
    service = IngestService(embedder, store, content_path=str(content_path), **kwargs)
    return service, embedder, store


def test_chunk_overlap(tmp_path):
    """Test adjacent chunks share the overlap words."""
    service, _, _ = _service(tmp_path, chunk_size=10, chunk_overlap=3)

    chunks = service._chunk_text(_words(17))

    assert len(chunks) == 2
    assert chunks[0].split()[-3:] == chunks[1].split()[:3]
    assert chunks[1].split()[-1] == "w16"


def test_short_text_single_chunk(tmp_path):
    """Test text shorter than one chunk gives one chunk."""
    service, _, _ = _service(tmp_path, chunk_size=300, chunk_overlap=50)

    assert service._chunk_text("LASIK is quick.") == ["LASIK is quick."]
    assert service._chunk_text("   ") == []


def test_every_word_is_covered(tmp_path):
    """Test no words are lost at the tail."""
    service, _, _ = _service(tmp_path, chunk_size=300, chunk_overlap=50)

    chunks = service._chunk_text(_words(620))

    covered = {w for c in chunks for w in c.split()}
    assert covered == set(_words(620).split())
    assert len(chunks) == 3


def test_overlap_must_be_smaller_than_size(tmp_path):
    """Test a non-advancing window configuration is rejected."""
    with pytest.raises(ValueError):
        _service(tmp_path, chunk_size=50, chunk_overlap=50)


def test_build_chunks_ids_and_sources(tmp_path):
    """Test chunk ids are derived from the file stem and index."""
    (tmp_path / "lasik.md").write_text("# LASIK\n\n" + _words(12))
    (tmp_path / "notes.pdf").write_text("ignored")
    service, _, _ = _service(tmp_path, chunk_size=10, chunk_overlap=2)

    chunks = service.build_chunks()

    assert [c.id for c in chunks] == ["lasik_chunk_0", "lasik_chunk_1"]
    assert {c.source_file for c in chunks} == {"lasik.md"}
    assert chunks[0].text.startswith("LASIK w0")


@pytest.mark.asyncio
async def test_run_embeds_in_batches_and_replaces_store(tmp_path):
    """Test indexing embeds in batches and rebuilds the store."""
    (tmp_path / "lasik.md").write_text(_words(40, "l"))
    (tmp_path / "prk.md").write_text(_words(40, "p"))
    service, embedder, store = _service(
        tmp_path, chunk_size=10, chunk_overlap=0, batch_size=3
    )

    stats = await service.run()

    assert stats.files == 2
    assert stats.chunks == 8
    assert stats.sources == ["lasik.md", "prk.md"]
    assert [len(b) for b in embedder.batches] == [3, 3, 2]
    assert len(store.stored) == 8
    assert all(len(c.embedding) == embedder.dim for c in store.stored)


@pytest.mark.asyncio
async def test_run_without_content(tmp_path):
    """Test an empty content folder indexes nothing."""
    service, embedder, store = _service(tmp_path / "missing")

    stats = await service.run()

    assert stats.chunks == 0
    assert embedder.batches == []
    assert store.stored == []


@pytest.mark.asyncio
async def test_embedding_failure_leaves_store_untouched(tmp_path):
    """Test the store is only replaced after every batch embedded."""
    (tmp_path / "lasik.md").write_text(_words(20))
    service, embedder, store = _service(tmp_path, chunk_size=10, chunk_overlap=0)
    embedder.error = ConnectionError("down")

    with pytest.raises(ConnectionError):
        await service.run()

    assert store.stored == []


def test_strip_markdown():
    """Test markdown syntax is removed and prose kept."""
    text = (
        "# Recovery\n\n"
        "**Most** patients return to work in *1-2 days*.\n\n"
        "- See [our FAQ](https://example.com)\n"
        "> Call us\n\n"
        "```\ncode\n```\n"
        "Use `drops` as directed."
    )

    plain = strip_markdown(text)

    assert "Recovery" in plain
    assert "Most patients return to work in 1-2 days." in plain
    assert "See our FAQ" in plain
    assert "Call us" in plain
    assert "code" not in plain
    assert "Use drops as directed." in plain
    assert "#" not in plain and "**" not in plain


def test_strip_markdown_keeps_underscores_inside_words():
    """Test snake_case words survive while _italic_ and __bold__ are unwrapped."""
    plain = strip_markdown("Use dry_eye_drops with _care_ and __patience__.")

    assert plain == "Use dry_eye_drops with care and patience."


def test_loader_supports_text_formats(tmp_path):
    """Test markdown and text files are supported and read."""
    loader = MarkdownLoader()
    path = tmp_path / "faq.txt"
    path.write_text("  Plain text.  ")

    assert loader.supports(path)
    assert loader.supports(tmp_path / "faq.MD")
    assert not loader.supports(tmp_path / "faq.docx")
    assert loader.load(path) == "Plain text."
