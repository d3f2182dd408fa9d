"""Text extraction for files handed to the document pipeline."""

import logging
from pathlib import Path

import fitz  # PyMuPDF

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = {"txt", "md", "markdown"}
ALLOWED_EXTENSIONS = TEXT_EXTENSIONS | {"pdf"}


def allowed_file(filename: str) -> bool:
    """Check if the file extension is allowed.

    Args:
        filename: The filename to check

    Returns:
        True if extension is allowed, False otherwise
    """
    return "." in filename and filename.rsplit(".", 1)[1].lower() in ALLOWED_EXTENSIONS


def extract_text_from_pdf_bytes(data: bytes) -> str:
    """Extract all text from an in-memory PDF.

    Pages are separated by a blank line so they never merge into one paragraph.

    Args:
        data: Raw PDF bytes

    Returns:
        str: Text from all pages
    """
    with fitz.open(stream=data, filetype="pdf") as doc:
        return "\n\n".join(page.get_text() for page in doc)


def extract_text(filename: str, data: bytes) -> str:
    """Extract text from a supported file's contents.

    Args:
        filename: Original filename, used to pick the decoder
        data: File contents

    Returns:
        str: Extracted text

    Raises:
        ValueError: If the extension is not supported
    """
    if not allowed_file(filename):
        raise ValueError(
            f"Unsupported file type: {filename}. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )

    extension = filename.rsplit(".", 1)[1].lower()
    if extension == "pdf":
        text = extract_text_from_pdf_bytes(data)
    else:
        text = data.decode("utf-8", errors="replace")

    logger.info(f"  Extracted {len(text)} characters from {filename}")
    return text


def extract_text_from_file(path: Path) -> str:
    """Read a .txt/.md/.pdf file from disk and return its text."""
    return extract_text(path.name, path.read_bytes())
