"""CLI command for previewing how a blueprint is chunked."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from blueprint_intel.ingestion.chunker import chunk_blueprint, chunk_section
from blueprint_intel.ingestion.pipeline import load_blueprint
from blueprint_intel.models.enums import VALID_SECTIONS, BlueprintSection, parse_section

console = Console()
app = typer.Typer()


def resolve_section_option(value: str | None) -> BlueprintSection | None:
    """Validate a ``--section`` option value, exiting on an unknown name."""
    if value is None:
        return None
    section = parse_section(value)
    if section is None:
        console.print(
            f"[bold red]Unknown section '{value}'.[/bold red]\n"
            f"Valid sections: {', '.join(sorted(VALID_SECTIONS))}"
        )
        raise typer.Exit(1)
    return section


def read_blueprint_or_exit(path: Path) -> dict:
    try:
        return load_blueprint(path)
    except (OSError, ValueError) as e:
        console.print(f"[bold red]Could not read blueprint:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def chunks(
    blueprint_file: Annotated[
        Path,
        typer.Argument(help="Path to a blueprint JSON file"),
    ],
    blueprint_id: Annotated[
        str,
        typer.Option("--blueprint-id", "-b", help="Blueprint id stamped on each chunk"),
    ] = "preview",
    section: Annotated[
        str | None,
        typer.Option("--section", "-s", help="Only chunk this section"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Preview the chunks a blueprint produces, without embedding or storing them."""
    if verbose:
        logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.WARNING)

    blueprint = read_blueprint_or_exit(blueprint_file)
    only = resolve_section_option(section)

    if only is None:
        results = chunk_blueprint(blueprint_id, blueprint)
    else:
        results = chunk_section(blueprint_id, only, blueprint.get(only.value))

    table = Table(title=f"{len(results)} chunks")
    table.add_column("Section", style="cyan")
    table.add_column("Field path", style="magenta")
    table.add_column("Type")
    table.add_column("Editable")
    table.add_column("Content")
    for chunk in results:
        content = chunk.content if len(chunk.content) <= 120 else chunk.content[:117] + "..."
        table.add_row(
            chunk.section.value,
            chunk.field_path,
            chunk.content_type.value,
            "yes" if chunk.metadata.is_editable else "no",
            content,
        )
    console.print(table)
