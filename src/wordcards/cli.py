# src/wordcards/cli.py
"""
WordCards Command Line Interface (CLI).

This module implements the terminal surface using `typer` and `rich`. It is a
thin adapter over :class:`~wordcards.pipelines.flashcards.PipelineOrchestrator`:
progress callbacks drive a spinner, the success callback feeds a table, and the
error callback prints the single user-facing message.

Usage
-----
    # One concept -> one card
    $ wordcards generate "قطة"

    # A category -> four cards, dumped as JSON (data URIs included)
    $ wordcards generate "فواكه" --json --output fruits.json

    # Show the model registry
    $ wordcards models
"""

from __future__ import annotations

import asyncio
import json
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from wordcards.llm.models import all_models
from wordcards.pipelines.flashcards import PipelineOrchestrator, PipelineResult

# Ensure env vars (like GEMINI_API_KEY) are loaded before any logic runs
load_dotenv()

app = typer.Typer(
    help="WordCards: illustrated Arabic/English flashcards from a word or category.",
    rich_markup_mode="markdown",
)
console = Console()


# --------------------------------------------------------------------------- #
# Helpers: Rendering & I/O
# --------------------------------------------------------------------------- #


def _approx_image_kb(image_url: str) -> float:
    """Approximate decoded size of a base64 data URI, in KiB."""
    _, _, b64 = image_url.partition(",")
    return len(b64) * 3 / 4 / 1024


def _render_cards(cards: list[Mapping[str, object]]) -> None:
    """Print the generated cards as a Rich table."""
    table = Table(title=f"{len(cards)} flashcard(s)", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Arabic", style="bold cyan")
    table.add_column("English", style="green")
    table.add_column("Image", style="dim")

    for i, card in enumerate(cards, start=1):
        image_url = str(card.get("imageUrl", ""))
        mime = image_url[len("data:") :].split(";", 1)[0] if image_url else "-"
        table.add_row(
            str(i),
            escape(str(card.get("arabicWord", ""))),
            escape(str(card.get("englishTranslation", ""))),
            f"{mime}, {_approx_image_kb(image_url):.0f} KiB",
        )
    console.print(table)


def _write_json(cards: list[Mapping[str, object]], output: Path, *, quiet: bool) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, "w", encoding="utf-8") as f:
        json.dump(cards, f, ensure_ascii=False, indent=2)
    if quiet:
        return
    console.print(
        Panel(
            f"Saved to: [link=file://{output.resolve()}]{output}[/link]",
            title="Cards",
            border_style="green",
        )
    )


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def generate(
    word: Annotated[
        str,
        typer.Argument(help="An Arabic word (e.g. 'قطة') or category (e.g. 'فواكه')."),
    ],
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the cards as JSON instead of a table."),
    ] = False,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            dir_okay=False,
            help="Also write the cards as JSON to this file.",
        ),
    ] = None,
) -> None:
    """
    Generate one card for a single concept, or four for a category.
    """
    errors: list[str] = []
    start_time = time.time()
    result: PipelineResult | None = None

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
        disable=as_json,
    ) as progress:
        task = progress.add_task("[cyan]Starting...", total=None)

        def on_progress(stage_text: str) -> None:
            progress.update(task, description=f"[yellow]{stage_text}")

        orchestrator = PipelineOrchestrator(on_progress=on_progress, on_error=errors.append)
        result = asyncio.run(orchestrator.request_generation(word))

    if result is None or result["state"] != "done":
        message = errors[0] if errors else "Generation did not run."
        console.print(f"[bold red]❌ {escape(message)}[/bold red]")
        raise typer.Exit(code=1)

    cards = result["cards"]
    if as_json:
        # Plain print keeps stdout machine-readable (no Rich markup or wrapping).
        print(json.dumps(cards, ensure_ascii=False, indent=2))
    else:
        duration = time.time() - start_time
        console.print(f"[bold green]✅ Complete![/bold green] (took {duration:.1f}s)")
        _render_cards(cards)

    if output is not None:
        _write_json(cards, output, quiet=as_json)


@app.command()  # type: ignore[misc]
def models() -> None:
    """List the model aliases used by the pipeline."""
    table = Table(title="Model registry")
    table.add_column("Alias", style="bold")
    table.add_column("Model")
    table.add_column("Kind")
    for alias, cfg in all_models().items():
        table.add_row(alias, cfg.name, cfg.kind)
    console.print(table)


if __name__ == "__main__":
    app()
