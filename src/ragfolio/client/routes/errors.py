"""JSON error handlers shared by all routes."""

import logging
import traceback

from flask import Blueprint, jsonify
from werkzeug.exceptions import HTTPException

from ragfolio.client.routes.config import get_config
from ragfolio.errors import ProviderError, ValidationError

logger = logging.getLogger(__name__)

errors_bp = Blueprint("errors", __name__)


@errors_bp.app_errorhandler(ValidationError)
def handle_validation_error(error: ValidationError):
    logger.warning(f"❌ Validation error: {error.details}")
    return jsonify({"error": error.message, "details": error.details}), 400


@errors_bp.app_errorhandler(ProviderError)
def handle_provider_error(error: ProviderError):
    logger.error(f"❌ Provider error: {error}", exc_info=error)
    return (
        jsonify(
            {
                "error": f"Upstream provider failed: {error.provider}",
                "provider": error.provider,
                "retryable": error.retryable,
            }
        ),
        502,
    )


@errors_bp.app_errorhandler(HTTPException)
def handle_http_error(error: HTTPException):
    return jsonify({"error": error.description}), error.code


@errors_bp.app_errorhandler(Exception)
def handle_unexpected_error(error: Exception):
    """Log full detail; return a generic message (plus stack in development)."""
    logger.error(f"❌ Error processing request: {error}", exc_info=error)
    body = {"error": "Internal server error"}
    if get_config().show_stack_traces:
        body["stack"] = "".join(traceback.format_exception(error))
    return jsonify(body), 500
