"""RavenDB-backed vector store."""

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from ravendb import DocumentStore
from ravendb.documents.indexes.definitions import (
    FieldIndexing,
    FieldStorage,
    IndexDefinition,
    IndexFieldOptions,
)
from ravendb.documents.indexes.vector.options import VectorOptions
from ravendb.documents.operations.indexes import GetIndexNamesOperation, PutIndexesOperation

from ragfolio.constants import DEFAULT_RAVENDB_DATABASE, DEFAULT_RAVENDB_URL
from ragfolio.llm.base import to_provider_error
from ragfolio.models import SimilarityMatch, VectorRecord
from ragfolio.service.vector_store.base import check_dimensions, cosine_similarity

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION = "DocumentChunks"


@dataclass(eq=False)
class ChunkDocument:
    """A chunk vector as stored in RavenDB.

    Note: eq=False keeps instances hashable by identity, which RavenDB's
    session entity tracking requires.
    """

    Id: str | None = None
    text: str = ""
    source: str = ""
    chunk_index: int = 0
    embedding: list[float] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def __hash__(self) -> int:
        """Hash by object identity for RavenDB session tracking."""
        return id(self)


def _document_id(result: dict) -> str:
    return result.get("@metadata", {}).get("@id") or result.get("Id") or ""


def _to_record(result: dict) -> VectorRecord:
    metadata = dict(result.get("metadata") or {})
    metadata.setdefault("text", result.get("text", ""))
    metadata.setdefault("source", result.get("source", "unknown"))
    metadata.setdefault("chunk_index", result.get("chunk_index", 0))
    return VectorRecord(
        id=_document_id(result),
        vector=list(result.get("embedding") or []),
        metadata=metadata,
    )


class RavenDBVectorStore:
    """Vector store on a RavenDB collection using its native vector search.

    Each call opens its own session; ``save_changes`` commits a whole
    upsert or delete batch as one transaction.
    """

    def __init__(
        self,
        dimensions: int,
        url: str = DEFAULT_RAVENDB_URL,
        database: str = DEFAULT_RAVENDB_DATABASE,
        collection: str = DEFAULT_COLLECTION,
        document_store: DocumentStore | None = None,
    ) -> None:
        self.dimensions = dimensions
        self.url = url
        self.database = database
        self.collection = collection
        self.index_name = f"{collection}/ByEmbedding"
        self._index_ready = False
        if document_store is None:
            document_store = DocumentStore([url], database)
            document_store.initialize()
        self.store = document_store
        logger.info(f"🗄️  RavenDB vector store: {url}/{database} ({collection})")

    def close(self) -> None:
        self.store.close()

    def ensure_index_exists(self) -> None:
        """Ensure the vector search index exists for this collection."""
        if self._index_ready:
            return

        existing_indexes = self.store.maintenance.send(GetIndexNamesOperation(0, 100))
        if self.index_name not in existing_indexes:
            index_definition = IndexDefinition()
            index_definition.name = self.index_name
            index_definition.maps = {
                f"""from chunk in docs.{self.collection}
                where chunk.embedding != null
                select new {{
                    source = chunk.source,
                    chunk_index = chunk.chunk_index,
                    text = chunk.text,
                    embedding = CreateField("embedding", chunk.embedding, new CreateFieldOptions {{ Storage = FieldStorage.Yes, Indexing = FieldIndexing.No }})
                }}"""
            }
            index_definition.fields = {
                "embedding": IndexFieldOptions(
                    storage=FieldStorage.YES,
                    indexing=FieldIndexing.NO,
                    vector=VectorOptions(dimensions=self.dimensions),
                )
            }
            self.store.maintenance.send(PutIndexesOperation(index_definition))
            logger.info(f"✅ Created index {self.index_name}")

        self._index_ready = True

    def upsert(self, records: Sequence[VectorRecord]) -> None:
        check_dimensions([record.vector for record in records], self.dimensions)
        try:
            self.ensure_index_exists()
            with self.store.open_session() as session:
                for record in records:
                    doc = ChunkDocument(
                        Id=record.id,
                        text=record.metadata.get("text", ""),
                        source=record.metadata.get("source", "unknown"),
                        chunk_index=record.metadata.get("chunk_index", 0),
                        embedding=list(record.vector),
                        metadata=dict(record.metadata),
                    )
                    session.store(doc, record.id)
                    session.advanced.get_metadata_for(doc)["@collection"] = self.collection
                session.save_changes()
        except Exception as e:
            logger.error(f"❌ RavenDB upsert failed: {e}", exc_info=True)
            raise to_provider_error("ravendb", e) from e

    def query(self, vector: Sequence[float], top_k: int = 5) -> list[SimilarityMatch]:
        if top_k <= 0:
            return []
        check_dimensions([vector], self.dimensions)

        try:
            with self.store.open_session() as session:
                results = list(
                    session.query_collection(self.collection, object_type=dict)
                    .vector_search("embedding", list(vector))
                    .order_by_score()
                    .take(top_k)
                )
        except Exception as e:
            logger.error(f"❌ RavenDB query failed: {e}", exc_info=True)
            raise to_provider_error("ravendb", e) from e

        matches = []
        for result in results:
            index_score = result.get("@metadata", {}).get("@index-score")
            record = _to_record(result)
            if index_score is not None:
                score = float(index_score)
            else:
                score = cosine_similarity(vector, record.vector)
            matches.append(SimilarityMatch(record, score))

        matches.sort(key=lambda match: match.score, reverse=True)
        return matches[:top_k]

    def delete(self, ids: Sequence[str]) -> int:
        if not ids:
            return 0
        removed = 0
        try:
            with self.store.open_session() as session:
                for doc_id in ids:
                    if session.load(doc_id, dict) is not None:
                        session.delete(doc_id)
                        removed += 1
                session.save_changes()
        except Exception as e:
            logger.error(f"❌ RavenDB delete failed: {e}", exc_info=True)
            raise to_provider_error("ravendb", e) from e
        return removed

    def _raw_collection(self, limit: int | None = None) -> list[dict]:
        try:
            with self.store.open_session() as session:
                query = session.advanced.raw_query(f"from {self.collection}", object_type=dict)
                if limit is not None:
                    query = query.take(limit)
                return list(query)
        except Exception as e:
            logger.error(f"❌ RavenDB listing failed: {e}", exc_info=True)
            raise to_provider_error("ravendb", e) from e

    def list_ids(self) -> list[str]:
        return [_document_id(result) for result in self._raw_collection()]

    def list_all(self, limit: int | None = None) -> list[VectorRecord]:
        return [_to_record(result) for result in self._raw_collection(limit)]

    def info(self) -> dict[str, Any]:
        return {
            "backend": "ravendb",
            "dimensions": self.dimensions,
            "count": len(self._raw_collection()),
            "database": self.database,
            "collection": self.collection,
        }
