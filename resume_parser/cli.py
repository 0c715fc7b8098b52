"""
CLI Interface
=============
Command-line interface for the resume parser engine.

Usage:
    python -m resume_parser parse <pdf_path> [options]
    python -m resume_parser batch <directory> [options]
    python -m resume_parser inspect <pdf_path>
    python -m resume_parser info <pdf_path>
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeRemainingColumn,
)
from rich.table import Table

from . import __version__
from .block_extractor import BlockExtractor
from .engine import ParserConfig, ParserEngine
from .errors import ResumeParseError
from .layout import build_layout
from .sections import classify_group

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="resume-parser")
def cli():
    """Resume Parser: LinkedIn-style resume PDF to structured positions."""
    pass


@cli.command()
@click.argument("pdf_path", type=click.Path(exists=True))
@click.option(
    "--output", "-o",
    default=None,
    help="Write the JSON result to this file",
)
@click.option(
    "--header-fragments",
    default=2,
    type=int,
    help="Leading text fragments to drop on each page (page header)",
)
@click.option(
    "--keep-duration-lines",
    is_flag=True,
    default=False,
    help="Treat '(N years M months)' lines as bullets",
)
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level",
)
@click.option(
    "--log-file",
    default=None,
    help="Path to log file",
)
@click.option(
    "--json-output",
    is_flag=True,
    default=False,
    help="Output only JSON result to stdout (for programmatic use)",
)
def parse(
    pdf_path: str,
    output: str,
    header_fragments: int,
    keep_duration_lines: bool,
    log_level: str,
    log_file: str,
    json_output: bool,
):
    """Parse a single resume PDF."""

    if json_output:
        # Suppress console output for JSON mode
        log_level = "ERROR"

    config = ParserConfig(
        header_fragment_count=header_fragments,
        skip_duration_lines=not keep_duration_lines,
        log_level=log_level,
        log_file=log_file,
    )

    if not json_output:
        console.print()
        console.print(
            Panel.fit(
                f"[bold cyan]Resume Parser v{__version__}[/]\n"
                f"[dim]Parsing: {os.path.basename(pdf_path)}[/]",
                border_style="cyan",
            )
        )
        console.print()

    try:
        engine = ParserEngine(config)
        document = asyncio.run(engine.parse(Path(pdf_path).read_bytes()))
    except ResumeParseError as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Unexpected error:[/] {e}")
        if log_level == "DEBUG":
            console.print_exception()
        sys.exit(1)

    data = document.model_dump(mode="json")

    if output:
        Path(output).write_text(
            json.dumps(data, indent=2, ensure_ascii=False),
            encoding="utf-8",
        )

    if json_output:
        print(json.dumps(data, indent=2, ensure_ascii=False))
    else:
        _display_document(document)
        if output:
            console.print(f"[dim]Saved JSON output: {output}[/]")


@cli.command()
@click.argument("directory", type=click.Path(exists=True))
@click.option("--output", "-o", default="output", help="Output directory")
@click.option("--log-level", default="WARNING", help="Logging level")
@click.option(
    "--parallel", "-j",
    default=4,
    type=int,
    help="Number of PDFs parsed concurrently",
)
def batch(directory: str, output: str, log_level: str, parallel: int):
    """Batch parse all PDFs in a directory."""

    pdf_files = sorted(Path(directory).glob("*.pdf"))

    if not pdf_files:
        console.print(f"[yellow]No PDF files found in: {directory}[/]")
        return

    console.print()
    console.print(
        Panel.fit(
            f"[bold cyan]Batch Resume Parser[/]\n"
            f"[dim]Found {len(pdf_files)} PDFs in: {directory}[/]",
            border_style="cyan",
        )
    )
    console.print()

    output_dir = Path(output)
    output_dir.mkdir(parents=True, exist_ok=True)
    engine = ParserEngine(ParserConfig(log_level=log_level))

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeRemainingColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Processing PDFs...", total=len(pdf_files))
        results, errors = asyncio.run(_parse_many(
            engine,
            pdf_files,
            output_dir,
            max(1, parallel),
            lambda: progress.advance(task),
        ))

    _display_batch_summary(results, errors)


async def _parse_many(engine, pdf_files, output_dir, parallel, on_done):
    """Parse PDFs concurrently, at most ``parallel`` at a time."""
    semaphore = asyncio.Semaphore(parallel)
    results = []
    errors = []

    async def run_one(pdf_file: Path):
        async with semaphore:
            try:
                document = await engine.parse(pdf_file.read_bytes())
                out_file = output_dir / f"{pdf_file.stem}_parsed.json"
                out_file.write_text(
                    json.dumps(
                        document.model_dump(mode="json"),
                        indent=2,
                        ensure_ascii=False,
                    ),
                    encoding="utf-8",
                )
            except Exception as e:
                errors.append((pdf_file.name, str(e) or type(e).__name__))
            else:
                results.append((pdf_file.name, document))
            finally:
                on_done()

    await asyncio.gather(*(run_one(f) for f in pdf_files))
    return results, errors


@cli.command()
@click.argument("pdf_path", type=click.Path(exists=True))
@click.option(
    "--header-fragments",
    default=2,
    type=int,
    help="Leading text fragments to drop on each page (page header)",
)
def inspect(pdf_path: str, header_fragments: int):
    """Show the reconstructed group sequence of a PDF."""

    engine = ParserEngine(ParserConfig(log_level="WARNING"))
    try:
        pages = engine.extract(Path(pdf_path).read_bytes())
    except ResumeParseError as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)

    groups = build_layout(pages, header_fragments)

    console.print()
    table = Table(title="Group Sequence", border_style="cyan")
    table.add_column("#", justify="right")
    table.add_column("Page", justify="right")
    table.add_column("Index", justify="right")
    table.add_column("Head", style="bold")
    table.add_column("Kind")
    table.add_column("Lines", justify="right")

    for position, group in enumerate(groups):
        section = classify_group(group)
        table.add_row(
            str(position),
            str(group.page_index + 1),
            "TAIL" if group.is_tail else str(group.index),
            group.head or "",
            section.kind.value if section else "-",
            str(len(group.fragments)),
        )

    console.print(table)
    console.print()


@cli.command()
@click.argument("pdf_path", type=click.Path(exists=True))
def info(pdf_path: str):
    """Display PDF file information."""

    import fitz

    extractor = BlockExtractor()
    pdf_bytes = Path(pdf_path).read_bytes()
    try:
        page_count = extractor.get_page_count(pdf_bytes)
        pages = extractor.extract(pdf_bytes)
    except ResumeParseError as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)

    console.print()
    table = Table(title="PDF Information", border_style="cyan")
    table.add_column("Property", style="bold")
    table.add_column("Value")

    table.add_row("File", os.path.basename(pdf_path))
    table.add_row("Pages", str(page_count))
    table.add_row(
        "File Size",
        f"{os.path.getsize(pdf_path) / 1024:.1f} KB",
    )

    with fitz.open(pdf_path) as doc:
        metadata = doc.metadata or {}
    for key in ["title", "author", "creator", "producer"]:
        val = metadata.get(key, "")
        if val:
            table.add_row(key.title(), val)

    for idx, page in enumerate(pages, start=1):
        table.add_row(
            f"Page {idx}",
            f"{len(page.fragments)} fragments, {len(page.separators)} separators",
        )

    console.print(table)
    console.print()


# ─── Display Helpers ──────────────────────────────────────────────────────────


def _format_month(value) -> str:
    return value.strftime("%b %Y") if value else "-"


def _display_document(document):
    """Display a parsed resume as rich tables."""
    if document.summary:
        console.print(Panel(document.summary, title="Summary", border_style="green"))
        console.print()

    table = Table(title="Positions", border_style="cyan")
    table.add_column("Title", style="bold")
    table.add_column("Company")
    table.add_column("Start", justify="right")
    table.add_column("End", justify="right")
    table.add_column("Lines", justify="right")

    for position in document.positions:
        table.add_row(
            position.title,
            position.company,
            _format_month(position.start_date),
            _format_month(position.end_date),
            str(len(position.summary.splitlines())),
        )

    console.print(table)
    console.print()


def _display_batch_summary(results, errors):
    """Display batch processing summary."""
    console.print()

    table = Table(title="Batch Processing Summary", border_style="cyan")
    table.add_column("PDF", style="bold")
    table.add_column("Positions", justify="right")
    table.add_column("Summary", justify="center")
    table.add_column("Status", justify="center")

    total_positions = 0

    for name, document in sorted(results, key=lambda r: r[0]):
        total_positions += len(document.positions)
        table.add_row(
            name,
            str(len(document.positions)),
            "[green]✓[/]" if document.summary else "[yellow]-[/]",
            "[green]✓[/]",
        )

    for name, error in sorted(errors):
        table.add_row(name, "-", "-", f"[red]✗ {error}[/]")

    console.print(table)
    console.print()
    console.print(
        f"[bold]Total:[/] {total_positions} positions from "
        f"{len(results)} PDFs, {len(errors)} failures"
    )
    console.print()


# ─── Entry point (for python -m resume_parser.cli) ────────────────────────────


if __name__ == "__main__":
    cli()
