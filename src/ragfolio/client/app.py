"""Flask web application exposing the ragfolio RAG pipeline.

Routes cover chat queries, document ingestion (JSON and file upload),
conversation inspection and a health check. Pipeline objects are built once
at startup and shared with the blueprints through ``init_config``.
"""

import logging
import os

from dotenv import load_dotenv
from flask import Flask

from ragfolio.client.routes import (
    chat_bp,
    conversations_bp,
    documents_bp,
    errors_bp,
    health_bp,
    init_config,
    upload_bp,
)
from ragfolio.config import Settings, env_int
from ragfolio.constants import DEFAULT_MAX_UPLOAD_SIZE_MB
from ragfolio.service.bootstrap import Services, build_services

# Configure logging
log_level = os.getenv("LOG_LEVEL", "INFO")
logging.basicConfig(
    level=getattr(logging, log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()
logger.debug("Environment variables loaded")

# Create Flask app
app = Flask(__name__)
logger.debug("Flask app created")

app.config["MAX_CONTENT_LENGTH"] = (
    env_int("MAX_UPLOAD_SIZE_MB", DEFAULT_MAX_UPLOAD_SIZE_MB) * 1024 * 1024
)

# Register blueprints
app.register_blueprint(chat_bp)
app.register_blueprint(documents_bp)
app.register_blueprint(upload_bp)
app.register_blueprint(conversations_bp)
app.register_blueprint(health_bp)
app.register_blueprint(errors_bp)


def is_development() -> bool:
    return os.getenv("FLASK_ENV", "production") == "development"


def initialize_services(settings: Settings | None = None) -> Services:
    """Build providers, stores and pipelines and hand them to the routes.

    Also starts the conversation sweeper thread.

    Args:
        settings: Explicit settings; read from the environment when omitted

    Returns:
        Services: The initialized pipeline objects
    """
    services = build_services(settings or Settings.from_env())
    init_config(services=services, show_stack_traces=is_development())
    services.sweeper.start()
    return services


def create_app():
    """Factory function for creating the Flask application.

    This function is used by WSGI servers like gunicorn to create the app.
    It initializes services before returning the app instance.

    Returns:
        Flask: The configured Flask application instance
    """
    initialize_services()
    return app


def main() -> None:
    """Entry point for the Flask application command-line interface."""
    print("🚀 Starting ragfolio Flask application...")

    print("📦 Initializing services...")
    services = initialize_services()
    print("✅ Services initialized successfully")

    host = os.getenv("FLASK_HOST", "0.0.0.0")
    port = env_int("FLASK_PORT", 5000)
    debug = is_development()

    print(f"🌐 Starting Flask server on http://{host}:{port}")
    print(f"🔧 Debug mode: {debug}")
    print("📝 Press CTRL+C to quit")

    try:
        # The reloader would start a second process with its own in-memory state
        app.run(host=host, port=port, debug=debug, use_reloader=False)
    finally:
        services.sweeper.stop()


if __name__ == "__main__":
    main()
