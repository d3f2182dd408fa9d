"""Document ingestion API routes."""

import logging

from flask import Blueprint, jsonify, request

from ragfolio.client.routes.config import get_config
from ragfolio.client.schemas import IngestDocumentRequest, parse_request

logger = logging.getLogger(__name__)

documents_bp = Blueprint("documents", __name__)


@documents_bp.route("/api/documents/ingest", methods=["POST"])
def ingest_document():
    """Chunk, embed and store a document.

    Request:
        {
            "content": "Full document text...",
            "metadata": {"source": "cv.md", "tags": ["cv"], "type": "markdown"}  # Optional
        }

    Returns:
        201 with chunksProcessed, vectorIds, version and staleIdsRemoved
    """
    services = get_config().require_services()
    payload = parse_request(IngestDocumentRequest, request.get_json(silent=True))
    logger.info(f"📄 Ingest request: source={payload.metadata.source or 'unknown'}")

    result = services.document_pipeline.ingest(
        payload.content, payload.metadata.model_dump(exclude_none=True)
    )
    return jsonify(result.to_dict()), 201
