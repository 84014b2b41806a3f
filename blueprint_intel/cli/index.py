"""CLI command for indexing a blueprint into the vector store."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from config.settings import get_settings
from blueprint_intel.cli.chunks import read_blueprint_or_exit, resolve_section_option
from blueprint_intel.embedding.sentence_transformer import SentenceTransformerEmbeddingProvider
from blueprint_intel.ingestion.pipeline import index_blueprint, rechunk_section
from blueprint_intel.vectorstore.chroma_store import ChromaStore

console = Console()
app = typer.Typer()


@app.command()
def index(
    blueprint_file: Annotated[
        Path,
        typer.Argument(help="Path to a blueprint JSON file"),
    ],
    blueprint_id: Annotated[
        str,
        typer.Option("--blueprint-id", "-b", help="Id to index the blueprint under"),
    ],
    section: Annotated[
        str | None,
        typer.Option("--section", "-s", help="Re-chunk only this section"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Chunk, embed and store a blueprint in the local Chroma store."""
    if verbose:
        logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.WARNING)

    blueprint = read_blueprint_or_exit(blueprint_file)
    only = resolve_section_option(section)

    settings = get_settings()
    store = ChromaStore(path=str(settings.chroma_path))

    console.print("[bold]Blueprint Indexing[/bold]")
    console.print(f"Blueprint: {blueprint_id}")
    if only is not None:
        console.print(f"Section: {only.value}")
    console.print()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Embedding chunks...", total=None)
        embedding_provider = SentenceTransformerEmbeddingProvider(settings.blueprint_embedding_model)
        if only is None:
            result = index_blueprint(blueprint_id, blueprint, store, embedding_provider)
            stored = result["chunks_stored"]
        else:
            stored = rechunk_section(blueprint_id, only, blueprint, store, embedding_provider)
        progress.update(task, completed=True)

    console.print()
    console.print("[bold green]Indexing complete![/bold green]")
    console.print(f"  Chunks stored: {stored}")
    console.print(f"  Chunks for this blueprint: {store.count_chunks(blueprint_id)}")
    console.print(f"  Total in store: {store.count} chunks")
