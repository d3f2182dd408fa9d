"""Paragraph-aligned text chunking."""

import re

PARAGRAPH_BREAK = re.compile(r"\n\n+")


def split_paragraphs(text: str) -> list[str]:
    """Split text on runs of blank lines, dropping whitespace-only paragraphs."""
    return [para for para in PARAGRAPH_BREAK.split(text) if para.strip()]


def semantic_chunk(text: str, max_chunk_size: int) -> list[str]:
    """Greedily pack paragraphs into chunks of at most ``max_chunk_size`` characters.

    Paragraphs are never split: a paragraph longer than the limit becomes a
    chunk of its own. Consecutive paragraphs in a chunk are joined by a blank
    line, and every chunk is stripped of surrounding whitespace.

    Args:
        text: The text to chunk
        max_chunk_size: Maximum chunk length in characters

    Returns:
        list[str]: Non-empty chunks in document order

    Raises:
        ValueError: If max_chunk_size is not positive
    """
    if max_chunk_size <= 0:
        raise ValueError("max_chunk_size must be > 0")

    chunks = []
    current = ""

    for para in split_paragraphs(text):
        if current and len(current) + len(para) > max_chunk_size:
            chunks.append(current.strip())
            current = para
        else:
            current = f"{current}\n\n{para}" if current else para

    if current.strip():
        chunks.append(current.strip())

    return chunks
