"""Tests for the document ingestion pipeline."""

import hashlib
from unittest.mock import MagicMock

import pytest

from conftest import TEST_DIMENSIONS, FakeEmbeddingService
from ragfolio.errors import ProviderError, ValidationError
from ragfolio.service.documents import DocumentPipeline, chunk_id, id_prefix
from ragfolio.service.vector_store import InMemoryVectorStore


@pytest.fixture
def pipeline(embedding_service, vector_store):
    return DocumentPipeline(embedding_service, vector_store, chunk_size=100)


def _paragraphs(count: int) -> str:
    return "\n\n".join(f"Paragraph {i} " + "word " * 20 for i in range(count))


class TestIdScheme:
    """Tests for positional vector ids."""

    def test_default_prefix(self):
        assert id_prefix(None) == "doc"
        assert id_prefix("") == "doc"

    def test_source_is_slugged_and_hashed(self):
        prefix = id_prefix("My Resume.pdf")
        digest = hashlib.sha1(b"My Resume.pdf").hexdigest()[:8]
        assert prefix == f"my-resume.pdf-{digest}"

    def test_prefix_is_stable(self):
        assert id_prefix("cv.md") == id_prefix("cv.md")

    @pytest.mark.parametrize(
        "first, second",
        [("My CV", "my-cv"), ("Resume", "resume"), ("!!!", "???")],
    )
    def test_sources_with_same_slug_get_distinct_prefixes(self, first, second):
        assert id_prefix(first) != id_prefix(second)

    def test_non_ascii_source_does_not_fall_back_to_default(self):
        prefix = id_prefix("简历")
        assert prefix != "doc"
        assert prefix == hashlib.sha1("简历".encode("utf-8")).hexdigest()[:8]

    def test_chunk_id(self):
        assert chunk_id("doc", 3) == "doc-chunk-3"


class TestDocumentPipeline:
    """Tests for DocumentPipeline.ingest."""

    def test_alpha_beta_single_chunk(self, pipeline, vector_store):
        result = pipeline.ingest("Alpha\n\nBeta")

        assert result.chunks_processed == 1
        assert result.vector_ids == ["doc-chunk-0"]
        assert result.stale_ids_removed == []
        assert vector_store.list_ids() == ["doc-chunk-0"]

    def test_metadata_stored_with_vector(self, pipeline, vector_store):
        result = pipeline.ingest(
            "Alpha\n\nBeta", {"source": "profile", "tags": ["bio"], "type": "markdown"}
        )
        record = vector_store.list_all()[0]

        assert record.id == chunk_id(id_prefix("profile"), 0)
        assert record.metadata["text"] == "Alpha\n\nBeta"
        assert record.metadata["source"] == "profile"
        assert record.metadata["tags"] == ["bio"]
        assert record.metadata["type"] == "markdown"
        assert record.metadata["chunk_index"] == 0
        assert record.metadata["version"] == result.version
        assert record.metadata["timestamp"]

    def test_defaults_without_metadata(self, pipeline, vector_store):
        pipeline.ingest("Alpha")
        metadata = vector_store.list_all()[0].metadata
        assert metadata["source"] == "unknown"
        assert metadata["tags"] == []
        assert metadata["type"] == "text"

    def test_embeds_all_chunks_in_one_call(self, pipeline, embedding_service):
        result = pipeline.ingest(_paragraphs(5))
        assert result.chunks_processed > 1
        assert len(embedding_service.calls) == 1
        assert len(embedding_service.calls[0]) == result.chunks_processed

    def test_ingest_is_idempotent(self, pipeline, vector_store):
        """Re-ingesting the same content yields the same ids and count."""
        first = pipeline.ingest(_paragraphs(5), {"source": "cv"})
        second = pipeline.ingest(_paragraphs(5), {"source": "cv"})

        assert first.vector_ids == second.vector_ids
        assert sorted(vector_store.list_ids()) == sorted(second.vector_ids)
        assert second.stale_ids_removed == []

    def test_shrinking_reingest_removes_stale_ids(self, pipeline, vector_store):
        first = pipeline.ingest(_paragraphs(6), {"source": "cv"})
        second = pipeline.ingest(_paragraphs(2), {"source": "cv"})

        assert second.chunks_processed < first.chunks_processed
        assert sorted(second.stale_ids_removed) == sorted(
            set(first.vector_ids) - set(second.vector_ids)
        )
        assert sorted(vector_store.list_ids()) == sorted(second.vector_ids)

    def test_other_sources_untouched(self, pipeline, vector_store):
        pipeline.ingest(_paragraphs(4), {"source": "a"})
        pipeline.ingest("Alpha", {"source": "b"})
        pipeline.ingest("Alpha", {"source": "a"})

        ids = vector_store.list_ids()
        assert chunk_id(id_prefix("a"), 0) in ids
        assert chunk_id(id_prefix("a"), 1) not in ids
        assert chunk_id(id_prefix("b"), 0) in ids

    def test_sources_with_same_slug_keep_separate_records(self, pipeline, vector_store):
        """A short re-ingest of "my-cv" must not remove chunks of "My CV"."""
        first = pipeline.ingest(_paragraphs(4), {"source": "My CV"})
        second = pipeline.ingest("Short note", {"source": "my-cv"})

        assert second.stale_ids_removed == []
        assert sorted(vector_store.list_ids()) == sorted(first.vector_ids + second.vector_ids)
        sources = {record.source for record in vector_store.list_all()}
        assert sources == {"My CV", "my-cv"}

    def test_non_ascii_source_kept_apart_from_anonymous(self, pipeline, vector_store):
        pipeline.ingest("Anonymous text")
        pipeline.ingest("Resume text", {"source": "简历"})

        assert len(vector_store.list_ids()) == 2

    def test_embedding_failure_writes_nothing(self, vector_store):
        failing = FakeEmbeddingService(fail=ProviderError("ollama", "down", retryable=True))
        pipeline = DocumentPipeline(failing, vector_store, chunk_size=100)

        with pytest.raises(ProviderError):
            pipeline.ingest(_paragraphs(3))
        assert vector_store.list_ids() == []

    def test_embedding_count_mismatch_writes_nothing(self, vector_store):
        service = MagicMock()
        service.generate_embeddings.return_value = [[1.0] + [0.0] * (TEST_DIMENSIONS - 1)]
        pipeline = DocumentPipeline(service, vector_store, chunk_size=100)

        with pytest.raises(ProviderError, match="expected"):
            pipeline.ingest(_paragraphs(4))
        assert vector_store.list_ids() == []

    def test_upsert_failure_skips_stale_cleanup(self, embedding_service):
        store = MagicMock(spec=InMemoryVectorStore)
        store.upsert.side_effect = ProviderError("vectorize", "boom", status_code=503)
        pipeline = DocumentPipeline(embedding_service, store, chunk_size=100)

        with pytest.raises(ProviderError):
            pipeline.ingest("Alpha")
        store.delete.assert_not_called()

    def test_stale_cleanup_failure_is_not_fatal(self, embedding_service):
        store = MagicMock(spec=InMemoryVectorStore)
        store.list_ids.side_effect = ProviderError("vectorize", "list failed", status_code=500)
        pipeline = DocumentPipeline(embedding_service, store, chunk_size=100)

        result = pipeline.ingest("Alpha")

        assert result.vector_ids == ["doc-chunk-0"]
        assert result.stale_ids_removed == []
        store.upsert.assert_called_once()

    @pytest.mark.parametrize("content", ["", "   \n\n  "])
    def test_empty_content_rejected(self, pipeline, content):
        with pytest.raises(ValidationError) as exc_info:
            pipeline.ingest(content)
        assert exc_info.value.details[0]["field"] == "content"

    def test_to_dict_uses_camel_case(self, pipeline):
        data = pipeline.ingest("Alpha").to_dict()
        assert data["success"] is True
        assert data["chunksProcessed"] == 1
        assert data["vectorIds"] == ["doc-chunk-0"]
        assert "staleIdsRemoved" in data
