"""CLI command for one chat turn against an indexed blueprint."""

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from config.settings import get_settings
from blueprint_intel.agent.graph import build_chat_graph
from blueprint_intel.cli.chunks import read_blueprint_or_exit
from blueprint_intel.embedding.sentence_transformer import SentenceTransformerEmbeddingProvider
from blueprint_intel.retrieval.retriever import BlueprintRetriever
from blueprint_intel.vectorstore.chroma_store import ChromaStore

console = Console()
app = typer.Typer()

logger = logging.getLogger(__name__)

CONFIDENCE_COLORS = {
    "high": "green",
    "medium": "yellow",
    "low": "red",
}


@app.command()
def ask(
    blueprint_file: Annotated[
        Path,
        typer.Argument(help="Path to the blueprint JSON file"),
    ],
    message: Annotated[
        str,
        typer.Argument(help="Your question, edit request or 'why' question"),
    ],
    blueprint_id: Annotated[
        str,
        typer.Option("--blueprint-id", "-b", help="Id the blueprint was indexed under"),
    ],
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Ask about, edit or get explanations for a Strategic Blueprint."""
    if verbose:
        logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.WARNING)

    settings = get_settings()

    if not settings.anthropic_api_key and settings.blueprint_llm_provider == "anthropic":
        console.print(
            "[bold red]ANTHROPIC_API_KEY not set.[/bold red]\n"
            "Export your API key: export ANTHROPIC_API_KEY='sk-ant-...'"
        )
        raise typer.Exit(1)

    blueprint = read_blueprint_or_exit(blueprint_file)

    store = ChromaStore(path=str(settings.chroma_path))
    if not store.has_chunks(blueprint_id):
        console.print(
            f"[bold yellow]No chunks indexed for blueprint '{blueprint_id}'.[/bold yellow]\n"
            f"Run 'blueprint-intel index {blueprint_file} --blueprint-id {blueprint_id}' "
            "for grounded answers."
        )

    embedding_provider = SentenceTransformerEmbeddingProvider(settings.blueprint_embedding_model)
    graph = build_chat_graph(BlueprintRetriever(store, embedding_provider))

    initial_state = {
        "message": message,
        "blueprint_id": blueprint_id,
        "blueprint": blueprint,
        "chat_history": [],
        "intent": None,
        "response": "",
        "confidence": None,
        "sources": [],
        "edit_result": None,
        "related_factors": [],
        "tokens_used": 0,
        "cost": 0.0,
    }

    with console.status("[bold green]Thinking..."):
        result = asyncio.run(graph.ainvoke(initial_state))

    _print_result(result)


def _print_result(result: dict) -> None:
    intent = result.get("intent")
    intent_name = intent.type.value if intent is not None else "general"
    confidence = result.get("confidence")
    color = CONFIDENCE_COLORS.get(confidence, "white")

    header = Text()
    header.append("Blueprint", style="bold")
    header.append(f"  Intent: {intent_name}", style="dim")
    if confidence:
        header.append("  Confidence: ", style="dim")
        header.append(confidence, style=f"bold {color}")

    console.print()
    console.print(Panel(result.get("response") or "No response generated.",
                        title=header, border_style=color, padding=(1, 2)))

    if result.get("confidence_explanation"):
        console.print(f"[dim]{result['confidence_explanation']}[/dim]")
    if result.get("source_quality"):
        console.print(f"[dim]{result['source_quality']}[/dim]")

    sources = result.get("sources") or []
    for i, chunk in enumerate(sources, 1):
        similarity = f"{chunk.similarity:.0%}" if chunk.similarity is not None else "n/a"
        console.print(f"  [{i}] {chunk.metadata.section_title} - {chunk.field_path} ({similarity})")

    for factor in result.get("related_factors") or []:
        console.print(f"  [cyan]{factor.section.value}[/cyan] {factor.factor}: {factor.relevance}")

    console.print(
        f"[dim]Tokens: {result.get('tokens_used', 0)}  Cost: ${result.get('cost', 0.0):.4f}[/dim]"
    )
