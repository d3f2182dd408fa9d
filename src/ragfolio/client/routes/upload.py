"""Upload API route for ingesting document files."""

import logging

from flask import Blueprint, jsonify, request
from werkzeug.utils import secure_filename

from ragfolio.client.ingest import ALLOWED_EXTENSIONS, allowed_file, extract_text
from ragfolio.client.routes.config import get_config
from ragfolio.errors import ValidationError

logger = logging.getLogger(__name__)

upload_bp = Blueprint("upload", __name__)


@upload_bp.route("/api/documents/upload", methods=["POST"])
def upload_documents():
    """Ingest one or more uploaded files.

    Expects multipart form data with:
        - files: One or more .txt, .md or .pdf files
        - tags: Optional comma-separated tags applied to every file

    Each file is ingested with its (sanitized) filename as the source, so
    uploading the same filename again replaces the previous version. A file
    that fails gets an error entry and the remaining files are still ingested.

    Returns:
        JSON response with a per-file status list
    """
    services = get_config().require_services()
    logger.info("📤 Received document upload request")

    files = [f for f in request.files.getlist("files") if f.filename]
    if not files:
        raise ValidationError(
            "Validation error", details=[{"field": "files", "message": "No files provided"}]
        )

    tags = [tag.strip() for tag in request.form.get("tags", "").split(",") if tag.strip()]
    results = []
    success_count = 0

    for file in files:
        filename = secure_filename(file.filename)
        if not allowed_file(filename):
            results.append(
                {
                    "filename": file.filename,
                    "status": "error",
                    "error": "File type not allowed. Accepted: "
                    + ", ".join(sorted(ALLOWED_EXTENSIONS)),
                }
            )
            continue

        try:
            text = extract_text(filename, file.read())
            if not text.strip():
                results.append({"filename": filename, "status": "error", "error": "No text found"})
                continue

            extension = filename.rsplit(".", 1)[1].lower()
            metadata = {"source": filename, "tags": tags, "type": extension}
            result = services.document_pipeline.ingest(text, metadata)
        except Exception as e:
            logger.error(f"❌ Error processing {filename}: {e}", exc_info=True)
            results.append({"filename": filename, "status": "error", "error": str(e)})
            continue

        logger.info(f"✅ Stored {result.chunks_processed} chunks for {filename}")
        results.append(
            {"filename": filename, "status": "success", "chunks": result.chunks_processed}
        )
        success_count += 1

    return jsonify(
        {
            "success": success_count > 0,
            "message": f"Successfully ingested {success_count} of {len(files)} documents",
            "details": results,
        }
    )
