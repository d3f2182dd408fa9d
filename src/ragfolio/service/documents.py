"""Document ingestion: chunk, embed and upsert into the vector store."""

import hashlib
import logging
import re
import time
from datetime import datetime, timezone
from typing import Any

from ragfolio.constants import DEFAULT_CHUNK_SIZE
from ragfolio.errors import ProviderError, ValidationError
from ragfolio.llm.base import EmbeddingService
from ragfolio.models import DocumentChunk, IngestionResult, VectorRecord
from ragfolio.service.chunker import semantic_chunk
from ragfolio.service.vector_store import VectorStore

logger = logging.getLogger(__name__)

DEFAULT_ID_PREFIX = "doc"
ID_HASH_LENGTH = 8


def id_prefix(source: str | None) -> str:
    """Prefix used in positional vector ids; "doc" when there is no source.

    A readable slug plus a short hash of the exact source string, so sources
    that slug alike ("My CV", "my-cv") never share ids.
    """
    if not source:
        return DEFAULT_ID_PREFIX
    slug = re.sub(r"[^a-z0-9._-]+", "-", source.lower()).strip("-")
    digest = hashlib.sha1(source.encode("utf-8")).hexdigest()[:ID_HASH_LENGTH]
    return f"{slug}-{digest}" if slug else digest


def chunk_id(prefix: str, index: int) -> str:
    return f"{prefix}-chunk-{index}"


def _chunk_index_of(vector_id: str, prefix: str) -> int | None:
    head = f"{prefix}-chunk-"
    if not vector_id.startswith(head):
        return None
    tail = vector_id[len(head) :]
    return int(tail) if tail.isdigit() else None


class DocumentPipeline:
    """Ingests documents so that a later query sees all of a version or none of it.

    Records get positional ids (``{source}-chunk-{i}``), so re-ingesting a
    source overwrites its previous version. Ids left over from a longer
    previous version are deleted once the new version is written.
    """

    def __init__(
        self,
        embedding_service: EmbeddingService,
        vector_store: VectorStore,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        embedding_model: str | None = None,
    ) -> None:
        self.embedding_service = embedding_service
        self.vector_store = vector_store
        self.chunk_size = chunk_size
        self.embedding_model = embedding_model

    def ingest(self, content: str, metadata: dict[str, Any] | None = None) -> IngestionResult:
        """Chunk, embed and store one document.

        Args:
            content: Non-empty document text
            metadata: Optional dict with 'source', 'tags' and 'type'

        Returns:
            IngestionResult: chunk count, vector ids and the version stamp

        Raises:
            ValidationError: If content is empty or not a string
            ProviderError: If embedding or storage fails; nothing is written
        """
        if not isinstance(content, str) or not content.strip():
            raise ValidationError(
                "Document content must be a non-empty string",
                details=[{"field": "content", "message": "must be a non-empty string"}],
            )
        metadata = metadata or {}
        source = metadata.get("source")

        logger.info(f"📄 Starting document ingestion ({len(content)} characters)")

        chunks = semantic_chunk(content, self.chunk_size)
        logger.info(f"  Created {len(chunks)} chunks")

        embeddings = self.embedding_service.generate_embeddings(chunks, self.embedding_model)
        if len(embeddings) != len(chunks):
            raise ProviderError(
                "embedding",
                f"expected {len(chunks)} embeddings, got {len(embeddings)}",
            )
        logger.info(f"  Generated {len(embeddings)} embeddings")

        version = int(time.time() * 1000)
        created_at = datetime.now(timezone.utc).isoformat()
        prefix = id_prefix(source)

        records = []
        for index, (text, embedding) in enumerate(zip(chunks, embeddings)):
            chunk = DocumentChunk(
                text=text,
                source=source or "unknown",
                tags=tuple(metadata.get("tags") or ()),
                content_type=metadata.get("type") or "text",
                chunk_index=index,
                version=version,
                created_at=created_at,
            )
            records.append(
                VectorRecord(
                    id=chunk_id(prefix, index),
                    vector=embedding,
                    metadata=chunk.to_metadata(),
                )
            )

        self.vector_store.upsert(records)
        logger.info(f"✅ Upserted {len(records)} vectors (version {version})")

        stale_ids = self._remove_stale_ids(prefix, len(records))

        return IngestionResult(
            chunks_processed=len(chunks),
            vector_ids=[record.id for record in records],
            version=version,
            stale_ids_removed=stale_ids,
        )

    def _remove_stale_ids(self, prefix: str, chunk_count: int) -> list[str]:
        """Delete ``{prefix}-chunk-{i}`` records with ``i >= chunk_count``.

        The new version is already stored, so a failure here only leaves
        orphans behind; it is logged rather than raised.
        """
        try:
            stale_ids = []
            for vector_id in self.vector_store.list_ids():
                index = _chunk_index_of(vector_id, prefix)
                if index is not None and index >= chunk_count:
                    stale_ids.append(vector_id)
            if stale_ids:
                self.vector_store.delete(stale_ids)
                logger.info(f"🧹 Removed {len(stale_ids)} stale vector(s) for '{prefix}'")
            return stale_ids
        except ProviderError as e:
            logger.warning(f"⚠️ Could not remove stale vectors for '{prefix}': {e}")
            return []
