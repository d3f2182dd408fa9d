"""Chat API routes using the RAG query pipeline."""

import logging

from flask import Blueprint, jsonify, request

from ragfolio.client.routes.config import get_config
from ragfolio.client.schemas import ChatQueryRequest, parse_request
from ragfolio.service.async_utils import run_async

logger = logging.getLogger(__name__)

chat_bp = Blueprint("chat", __name__)


@chat_bp.route("/api/chat", methods=["POST"])
def chat():
    """Answer a question from the indexed documents.

    Request:
        {
            "question": "What projects has she built?",
            "conversationId": "abc-123",  # Optional, history kept server-side
            "language": "en",  # Optional, "en" or "id"
            "chatHistory": [  # Optional, used only without conversationId
                {"role": "user", "content": "Previous question"},
                {"role": "assistant", "content": "Previous answer"}
            ]
        }

    Response:
        {
            "answer": "...",
            "confidence": 0.83,
            "sources": [
                {"text": "...", "source": "cv.md", "score": 0.83, "id": "cv.md-1b2c3d4e-chunk-0"}
            ]
        }

    Returns:
        JSON response with answer, confidence and (if enabled) sources
    """
    services = get_config().require_services()
    logger.info("📨 Received chat request")

    query = parse_request(ChatQueryRequest, request.get_json(silent=True))
    logger.info(f"💬 Conversation history: {len(query.chat_history)} caller-supplied messages")

    result = run_async(
        services.chat_service.process_query(
            query.question,
            conversation_id=query.conversation_id,
            language=query.language,
            chat_history=[message.model_dump() for message in query.chat_history],
        )
    )

    logger.info("✅ Chat request completed successfully")
    return jsonify(result.to_dict())
