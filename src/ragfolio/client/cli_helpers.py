"""Helper functions for CLI commands."""

import logging
import os

import click

from ragfolio.config import Settings
from ragfolio.models import SimilarityMatch
from ragfolio.service.bootstrap import Services, build_services


def configure_logging() -> None:
    """Quiet logging for interactive commands unless LOG_LEVEL says otherwise."""
    logging.basicConfig(
        level=getattr(logging, os.getenv("LOG_LEVEL", "WARNING")),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def load_services() -> Services:
    """Build services from the environment, turning setup failures into click errors.

    Raises:
        click.ClickException: If the configuration is invalid
    """
    try:
        return build_services(Settings.from_env())
    except ValueError as e:
        raise click.ClickException(f"Configuration error: {e}") from e


def format_search_result(index: int, match: SimilarityMatch, max_length: int = 200) -> str:
    """Format a similarity match for display.

    Args:
        index: Result number (1-based)
        match: Record and score returned by the vector store
        max_length: Maximum content length before truncation

    Returns:
        Formatted string for display
    """
    text = match.record.text
    chunk_idx = match.record.metadata.get("chunk_index", "?")
    display_content = text[:max_length] + "..." if len(text) > max_length else text

    lines = [
        f"{index}. [{match.record.source} - chunk #{chunk_idx}] (score: {match.score:.4f})",
        f"   {display_content}",
        "",
    ]
    return "\n".join(lines)
