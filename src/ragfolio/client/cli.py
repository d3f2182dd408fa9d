"""Command-line interface for ragfolio using Click."""

import asyncio
from pathlib import Path

import click
from dotenv import load_dotenv

from ragfolio.client.cli_helpers import configure_logging, format_search_result, load_services
from ragfolio.client.ingest import ALLOWED_EXTENSIONS, allowed_file, extract_text_from_file
from ragfolio.errors import ProviderError, ValidationError

# Load environment variables
load_dotenv()


def _collect_files(paths: tuple[Path, ...]) -> list[Path]:
    files: list[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(sorted(p for p in path.iterdir() if p.is_file() and allowed_file(p.name)))
        elif allowed_file(path.name):
            files.append(path)
        else:
            click.echo(f"  ✗ Skipping {path.name}: unsupported file type", err=True)
    return files


@click.command()
@click.argument(
    "paths",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, path_type=Path),
)
@click.option(
    "--source",
    type=str,
    default=None,
    help="Source label for the document (default: the file name). Only valid with one file.",
)
@click.option("--tag", "tags", multiple=True, help="Tag to attach to every chunk (repeatable)")
@click.option("--type", "content_type", type=str, default=None, help="Content type label")
def ingest(
    paths: tuple[Path, ...],
    source: str | None,
    tags: tuple[str, ...],
    content_type: str | None,
) -> None:
    """Ingest .txt, .md and .pdf files (or directories of them) into the index.

    Re-ingesting a file with the same source replaces its previous chunks.

    Example:
        ragfolio-ingest resume.md
        ragfolio-ingest docs/ --tag portfolio
        ragfolio-ingest notes.txt --source about-me --type profile
    """
    configure_logging()
    files = _collect_files(paths)

    if not files:
        click.echo(f"No supported files found (accepted: {', '.join(sorted(ALLOWED_EXTENSIONS))})")
        return
    if source and len(files) > 1:
        raise click.UsageError("--source can only be used with a single file")

    services = load_services()
    click.echo(f"Found {len(files)} file(s)")
    click.echo(f"Vector store: {services.settings.vector_store}\n")

    failures = 0
    for path in files:
        metadata = {
            "source": source or path.name,
            "tags": list(tags),
            "type": content_type or path.suffix.lstrip(".").lower(),
        }
        try:
            text = extract_text_from_file(path)
            result = services.document_pipeline.ingest(text, metadata)
        except (ValidationError, ProviderError, ValueError) as e:
            failures += 1
            click.echo(f"  ✗ Error processing {path.name}: {e}", err=True)
            continue

        click.echo(f"  ✓ Stored {result.chunks_processed} chunks from {path.name}")
        if result.stale_ids_removed:
            click.echo(f"    removed {len(result.stale_ids_removed)} stale chunk(s)")

    if failures:
        click.echo(f"\n✗ {failures} of {len(files)} file(s) failed", err=True)
        raise click.Abort()
    click.echo("✓ Ingestion complete!")


@click.command()
@click.argument("question", type=str)
@click.option(
    "--language",
    type=click.Choice(["en", "id"]),
    default="en",
    show_default=True,
    help="Language for prompts and fixed replies",
)
@click.option("--conversation-id", type=str, default=None, help="Conversation to continue")
def ask(question: str, language: str, conversation_id: str | None) -> None:
    """Answer QUESTION from the ingested documents.

    Example:
        ragfolio-ask "What projects has she worked on?"
        ragfolio-ask "Apa keahliannya?" --language id
    """
    configure_logging()
    services = load_services()

    try:
        result = asyncio.run(
            services.chat_service.process_query(
                question, conversation_id=conversation_id, language=language
            )
        )
    except ValidationError as e:
        raise click.ClickException(e.message) from e
    except ProviderError as e:
        raise click.ClickException(f"Provider call failed ({e})") from e

    click.echo(result.answer)
    click.echo(f"\n(confidence: {result.confidence:.2f})")
    for i, source in enumerate(result.sources or [], 1):
        click.echo(f"  {i}. {source.source} (score: {source.score:.4f})")


@click.command()
@click.argument("query", type=str)
@click.option("--top-k", type=int, default=5, help="Number of results to return (default: 5)")
def search(query: str, top_k: int) -> None:
    """Show the stored chunks most similar to QUERY.

    Example:
        ragfolio-search "machine learning"
        ragfolio-search "education" --top-k 3
    """
    configure_logging()
    services = load_services()

    click.echo(f"🔍 Searching for: '{query}'")
    click.echo(f"   Returning top {top_k} results...\n")

    try:
        vector = services.chat_service.embed_question(query)
        matches = services.vector_store.query(vector, top_k=top_k)
    except (ProviderError, ValidationError) as e:
        raise click.ClickException(str(e)) from e

    if not matches:
        click.echo("No results found.")
        return

    click.echo(f"✅ Found {len(matches)} result(s):\n")
    for i, match in enumerate(matches, 1):
        click.echo(format_search_result(i, match))


@click.command()
def info() -> None:
    """Show which providers and vector store are configured.

    Example:
        ragfolio-info
    """
    configure_logging()
    services = load_services()
    settings = services.settings

    click.echo(f"🤖 LLM: {settings.llm_service} ({settings.llm_model})")
    click.echo(f"🔢 Embeddings: {settings.embedding_service} ({settings.embedding_model})")
    try:
        store_info = services.vector_store.info()
    except ProviderError as e:
        raise click.ClickException(f"Could not read vector store info: {e}") from e

    click.echo("📊 Vector store:")
    for key, value in store_info.items():
        click.echo(f"   {key}: {value}")


@click.command()
def serve() -> None:
    """Run the HTTP API (FLASK_HOST/FLASK_PORT, default 0.0.0.0:5000)."""
    from ragfolio.client.app import main

    main()


if __name__ == "__main__":
    ingest()
