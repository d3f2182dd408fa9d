"""In-memory vector store for tests and single-process deployments."""

import threading
from typing import Any, Sequence

from ragfolio.models import SimilarityMatch, VectorRecord
from ragfolio.service.vector_store.base import check_dimensions, cosine_similarity


class InMemoryVectorStore:
    """Cosine-similarity search over a dict of records guarded by one lock."""

    def __init__(self, dimensions: int) -> None:
        if dimensions <= 0:
            raise ValueError("dimensions must be > 0")
        self.dimensions = dimensions
        self._records: dict[str, VectorRecord] = {}
        self._lock = threading.Lock()

    def upsert(self, records: Sequence[VectorRecord]) -> None:
        check_dimensions([record.vector for record in records], self.dimensions)
        copies = [
            VectorRecord(id=r.id, vector=list(r.vector), metadata=dict(r.metadata))
            for r in records
        ]
        with self._lock:
            for record in copies:
                self._records[record.id] = record

    def query(self, vector: Sequence[float], top_k: int = 5) -> list[SimilarityMatch]:
        if top_k <= 0:
            return []
        check_dimensions([vector], self.dimensions)

        with self._lock:
            records = list(self._records.values())

        scored = [
            SimilarityMatch(record, cosine_similarity(vector, record.vector)) for record in records
        ]
        scored.sort(key=lambda match: match.score, reverse=True)
        return scored[:top_k]

    def delete(self, ids: Sequence[str]) -> int:
        removed = 0
        with self._lock:
            for record_id in ids:
                if self._records.pop(record_id, None) is not None:
                    removed += 1
        return removed

    def list_ids(self) -> list[str]:
        with self._lock:
            return list(self._records)

    def list_all(self, limit: int | None = None) -> list[VectorRecord]:
        with self._lock:
            records = list(self._records.values())
        return records if limit is None else records[:limit]

    def info(self) -> dict[str, Any]:
        with self._lock:
            count = len(self._records)
        return {"backend": "memory", "dimensions": self.dimensions, "count": count}
