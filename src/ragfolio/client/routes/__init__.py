"""Flask route blueprints for the ragfolio HTTP API."""

from ragfolio.client.routes.chat import chat_bp
from ragfolio.client.routes.config import get_config, init_config
from ragfolio.client.routes.conversations import conversations_bp
from ragfolio.client.routes.documents import documents_bp
from ragfolio.client.routes.errors import errors_bp
from ragfolio.client.routes.health import health_bp
from ragfolio.client.routes.upload import upload_bp

__all__ = [
    "chat_bp",
    "conversations_bp",
    "documents_bp",
    "errors_bp",
    "health_bp",
    "upload_bp",
    "init_config",
    "get_config",
]
