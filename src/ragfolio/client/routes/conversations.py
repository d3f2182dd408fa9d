"""Conversation history routes."""

from flask import Blueprint, jsonify

from ragfolio.client.routes.config import get_config

conversations_bp = Blueprint("conversations", __name__)


@conversations_bp.route("/api/conversations/<conversation_id>", methods=["GET"])
def get_conversation(conversation_id: str):
    """Return a conversation's stored history (empty if unknown or expired)."""
    store = get_config().require_services().conversations
    history = [entry.to_dict() for entry in store.get_history(conversation_id)]
    return jsonify({"conversationId": conversation_id, "history": history})


@conversations_bp.route("/api/conversations/<conversation_id>", methods=["DELETE"])
def clear_conversation(conversation_id: str):
    store = get_config().require_services().conversations
    store.clear(conversation_id)
    return jsonify({"success": True, "message": "Conversation cleared"})


@conversations_bp.route("/api/conversations", methods=["GET"])
def active_conversations():
    store = get_config().require_services().conversations
    return jsonify({"activeConversations": store.active_count()})
