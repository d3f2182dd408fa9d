"""Vector store protocol and shared helpers."""

import math
from typing import Any, Protocol, Sequence

from ragfolio.errors import ValidationError
from ragfolio.models import SimilarityMatch, VectorRecord


class VectorStore(Protocol):
    """Persistence for embedding vectors and their chunk metadata.

    ``upsert`` must be idempotent by record id and apply the whole batch or
    nothing. ``query`` returns matches ordered by descending score.
    """

    def upsert(self, records: Sequence[VectorRecord]) -> None: ...

    def query(self, vector: Sequence[float], top_k: int = 5) -> list[SimilarityMatch]: ...

    def delete(self, ids: Sequence[str]) -> int: ...

    def list_ids(self) -> list[str]: ...

    def list_all(self, limit: int | None = None) -> list[VectorRecord]: ...

    def info(self) -> dict[str, Any]: ...


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """Compute cosine similarity between two vectors.

    Args:
        vec_a: First embedding vector
        vec_b: Second embedding vector

    Returns:
        float: Cosine similarity in [-1, 1]; 0.0 for empty, mismatched or zero vectors
    """
    if not vec_a or not vec_b or len(vec_a) != len(vec_b):
        return 0.0

    dot_product = sum(a * b for a, b in zip(vec_a, vec_b))
    magnitude_a = math.sqrt(sum(a * a for a in vec_a))
    magnitude_b = math.sqrt(sum(b * b for b in vec_b))

    if magnitude_a == 0 or magnitude_b == 0:
        return 0.0

    return dot_product / (magnitude_a * magnitude_b)


def check_dimensions(vectors: Sequence[Sequence[float]], dimensions: int) -> None:
    """Raise ``ValidationError`` if any vector's length differs from the index.

    Args:
        vectors: Vectors about to be written or queried
        dimensions: The store's configured dimensionality
    """
    details = [
        {"index": i, "expected": dimensions, "actual": len(vector)}
        for i, vector in enumerate(vectors)
        if len(vector) != dimensions
    ]
    if details:
        raise ValidationError(
            f"Vector dimensionality must be {dimensions}", details=details
        )
