"""Command-line interface for textanchor."""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from textanchor import __version__
from textanchor.capture import SelectionCapturer
from textanchor.dom import HtmlDocument
from textanchor.fragments import magic_url
from textanchor.logging_config import setup_logging
from textanchor.models import SelectionRecord
from textanchor.relocate import SelectionResolver

app = typer.Typer(
    name="textanchor",
    help="Capture text selections in HTML documents and find them again.",
)
console = Console()


def _configure(verbose: bool) -> None:
    if verbose:
        setup_logging(logging.DEBUG)


@app.command()
def capture(
    file: Path = typer.Argument(..., help="HTML document to select in"),
    phrase: str = typer.Argument(..., help="Text to select (first occurrence)"),
    url: str | None = typer.Option(None, "--url", "-u", help="Origin URL of the document"),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write the record to this YAML file"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log the selector climb"),
) -> None:
    """Select PHRASE in FILE and print the selection record as YAML."""
    _configure(verbose)
    try:
        document = HtmlDocument.from_file(file, url=url)
    except (OSError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1) from e

    selection = document.find_text(phrase)
    if selection is None:
        console.print(f"[bold red]Not found:[/bold red] {phrase!r}")
        raise typer.Exit(1)
    document.select(selection.anchor, selection.focus)

    record = SelectionCapturer(document).wrap_selection()
    if record is None:
        console.print("[bold red]Nothing to capture[/bold red]")
        raise typer.Exit(1)
    record = record.model_copy(update={"url": document.url, "title": document.title})

    if output:
        output.write_text(record.to_yaml(), encoding="utf-8")
        console.print(f"[bold green]Saved to:[/bold green] {output}")
    else:
        console.print(record.to_yaml(), markup=False, highlight=False, soft_wrap=True)


@app.command()
def relocate(
    file: Path = typer.Argument(..., help="HTML document to search"),
    record_file: Path = typer.Argument(..., help="YAML selection record"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log diagnostics"),
) -> None:
    """Find a stored selection in FILE."""
    _configure(verbose)
    try:
        document = HtmlDocument.from_file(file)
        record = SelectionRecord.from_yaml(record_file.read_text(encoding="utf-8"))
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1) from e

    result = SelectionResolver(document).relocate(record)
    if not result.selected:
        console.print(f"[bold red]Not relocated:[/bold red] {result.status.value}")
        raise typer.Exit(1)
    console.print(f"[bold green]Selected:[/bold green] {result.found_text}")


@app.command()
def fragment(
    record_file: Path = typer.Argument(..., help="YAML selection record"),
) -> None:
    """Print a text fragment URL that highlights the stored phrase."""
    try:
        record = SelectionRecord.from_yaml(record_file.read_text(encoding="utf-8"))
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1) from e

    url = magic_url(record)
    if url is None:
        console.print("[bold red]Error:[/bold red] record has no URL")
        raise typer.Exit(1)
    console.print(url, markup=False, highlight=False, soft_wrap=True)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"textanchor {__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
