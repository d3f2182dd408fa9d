"""Data models for chunks, vector records, conversations and query results."""

from dataclasses import asdict, dataclass, field
from typing import Any

USER_ROLE = "user"
ASSISTANT_ROLE = "assistant"
CONVERSATION_ROLES = (USER_ROLE, ASSISTANT_ROLE)


@dataclass(frozen=True)
class DocumentChunk:
    """A contiguous span of a source document, the unit of embedding.

    Attributes:
        text: The text content of the chunk
        source: Identifier of the source document
        tags: Free-form tags supplied at ingestion
        content_type: Content type of the source (e.g. "text")
        chunk_index: Position of this chunk within its source document
        version: Ingestion version stamp (epoch milliseconds), shared by a batch
        created_at: ISO-8601 UTC creation time
    """

    text: str
    source: str
    tags: tuple[str, ...] = ()
    content_type: str = "text"
    chunk_index: int = 0
    version: int = 0
    created_at: str = ""

    def to_metadata(self) -> dict[str, Any]:
        """Metadata stored alongside the chunk's vector."""
        return {
            "text": self.text,
            "source": self.source,
            "tags": list(self.tags),
            "type": self.content_type,
            "chunk_index": self.chunk_index,
            "version": self.version,
            "timestamp": self.created_at,
        }


@dataclass
class VectorRecord:
    """A persisted vector with its chunk metadata."""

    id: str
    vector: list[float]
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def text(self) -> str:
        return self.metadata.get("text", "")

    @property
    def source(self) -> str:
        return self.metadata.get("source", "unknown")


@dataclass
class SimilarityMatch:
    """A vector store hit. Stores return these ordered by descending score."""

    record: VectorRecord
    score: float


@dataclass
class ConversationEntry:
    """One turn of a conversation."""

    role: str
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class SourceExcerpt:
    """A truncated view of a chunk used to answer a question."""

    text: str
    source: str
    score: float
    id: str


@dataclass
class QueryResult:
    """Answer returned by the query pipeline.

    ``sources`` is None when source display is disabled, and an empty list
    when it is enabled but nothing was used.
    """

    answer: str
    confidence: float = 0.0
    sources: list[SourceExcerpt] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"answer": self.answer, "confidence": self.confidence}
        if self.sources is not None:
            result["sources"] = [asdict(source) for source in self.sources]
        return result


@dataclass
class IngestionResult:
    """Outcome of ingesting one document."""

    chunks_processed: int
    vector_ids: list[str]
    version: int
    stale_ids_removed: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "chunksProcessed": self.chunks_processed,
            "vectorIds": list(self.vector_ids),
            "version": self.version,
            "staleIdsRemoved": list(self.stale_ids_removed),
        }
