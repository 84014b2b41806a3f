"""Blueprint intelligence CLI entry point."""

import typer

from blueprint_intel.cli.ask import ask
from blueprint_intel.cli.chunks import chunks
from blueprint_intel.cli.index import index

app = typer.Typer(
    name="blueprint-intel",
    help="Strategic Blueprint assistant - chunk, index and chat with research blueprints.",
)

app.command(name="chunks")(chunks)
app.command(name="index")(index)
app.command(name="ask")(ask)


if __name__ == "__main__":
    app()
