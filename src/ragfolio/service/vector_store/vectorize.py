"""Cloudflare Vectorize (v2) vector store client."""

import json
import logging
from typing import Any, Sequence

import requests

from ragfolio.constants import CLOUDFLARE_API_BASE, DEFAULT_REQUEST_TIMEOUT_SECONDS
from ragfolio.errors import ProviderError
from ragfolio.llm.base import to_provider_error
from ragfolio.models import SimilarityMatch, VectorRecord
from ragfolio.service.vector_store.base import check_dimensions

logger = logging.getLogger(__name__)

LIST_PAGE_SIZE = 1000
GET_BY_IDS_BATCH = 20


class VectorizeStore:
    """Vectorize index accessed through the Cloudflare REST API."""

    def __init__(
        self,
        account_id: str | None,
        api_token: str | None,
        index_name: str | None,
        dimensions: int,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        if not account_id or not api_token or not index_name:
            raise ValueError(
                "CLOUDFLARE_ACCOUNT_ID, CLOUDFLARE_API_TOKEN and VECTORIZE_INDEX_NAME must be set"
            )
        self.index_name = index_name
        self.dimensions = dimensions
        self.timeout = timeout
        self.base_url = (
            f"{CLOUDFLARE_API_BASE}/accounts/{account_id}/vectorize/v2/indexes/{index_name}"
        )
        self.session = requests.Session()
        self.session.headers["Authorization"] = f"Bearer {api_token}"
        logger.info(f"🗄️  Vectorize vector store: {index_name}")

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request to the index API and return the ``result`` payload."""
        try:
            response = self.session.request(
                method, f"{self.base_url}/{path}", timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            logger.error(f"❌ Vectorize {path} failed: {e}")
            raise to_provider_error("vectorize", e) from e

        if not response.ok:
            logger.error(f"❌ Vectorize {path} failed: {response.status_code} {response.text}")
            raise ProviderError(
                "vectorize",
                f"{path} failed: {response.text}",
                status_code=response.status_code,
            )
        return response.json().get("result")

    def upsert(self, records: Sequence[VectorRecord]) -> None:
        if not records:
            return
        check_dimensions([record.vector for record in records], self.dimensions)
        body = "\n".join(
            json.dumps({"id": r.id, "values": list(r.vector), "metadata": r.metadata})
            for r in records
        )
        self._request(
            "POST",
            "upsert",
            data=body.encode("utf-8"),
            headers={"Content-Type": "application/x-ndjson"},
        )
        logger.info(f"✅ Upserted {len(records)} vectors into {self.index_name}")

    def query(self, vector: Sequence[float], top_k: int = 5) -> list[SimilarityMatch]:
        if top_k <= 0:
            return []
        check_dimensions([vector], self.dimensions)
        result = self._request(
            "POST",
            "query",
            json={"vector": list(vector), "topK": top_k, "returnMetadata": "all"},
        )
        matches = [
            SimilarityMatch(
                VectorRecord(
                    id=match["id"],
                    vector=list(match.get("values") or []),
                    metadata=match.get("metadata") or {},
                ),
                float(match["score"]),
            )
            for match in (result or {}).get("matches", [])
        ]
        matches.sort(key=lambda match: match.score, reverse=True)
        return matches

    def delete(self, ids: Sequence[str]) -> int:
        if not ids:
            return 0
        self._request("POST", "delete_by_ids", json={"ids": list(ids)})
        return len(ids)

    def list_ids(self) -> list[str]:
        ids: list[str] = []
        cursor = None
        while True:
            params: dict[str, Any] = {"count": LIST_PAGE_SIZE}
            if cursor:
                params["cursor"] = cursor
            result = self._request("GET", "list", params=params) or {}
            ids.extend(vector["id"] for vector in result.get("vectors", []))
            cursor = result.get("nextCursor")
            if not result.get("isTruncated") or not cursor:
                return ids

    def list_all(self, limit: int | None = None) -> list[VectorRecord]:
        ids = self.list_ids()
        if limit is not None:
            ids = ids[:limit]

        records = []
        for start in range(0, len(ids), GET_BY_IDS_BATCH):
            batch = ids[start : start + GET_BY_IDS_BATCH]
            result = self._request("POST", "get_by_ids", json={"ids": batch}) or []
            records.extend(
                VectorRecord(
                    id=item["id"],
                    vector=list(item.get("values") or []),
                    metadata=item.get("metadata") or {},
                )
                for item in result
            )
        return records

    def info(self) -> dict[str, Any]:
        result = self._request("GET", "info") or {}
        return {
            "backend": "vectorize",
            "dimensions": result.get("dimensions", self.dimensions),
            "count": result.get("vectorCount", 0),
            "index": self.index_name,
        }
