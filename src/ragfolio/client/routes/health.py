"""Health check route."""

from datetime import datetime, timezone

from flask import Blueprint, jsonify

from ragfolio.client.routes.config import get_config

health_bp = Blueprint("health", __name__)


@health_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint.

    Returns:
        JSON with service status
    """
    services = get_config().services
    return jsonify(
        {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "llm_service": services.settings.llm_service if services else "not initialized",
            "vector_store": services.settings.vector_store if services else "not initialized",
        }
    )
