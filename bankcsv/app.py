#!/usr/bin/env python3
"""
CLI interface for the bank statement CSV parser.
"""
import typer
from enum import Enum
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from .core.errors import StatementError
from .core.resolver import FormatResolver
from .core.runner import StatementParser, write_csv, write_json
from .tools.sniff_report import create_sniff_report

app = typer.Typer(help="Bank statement CSV/TXT parser")
console = Console()


class OutputFormat(str, Enum):
    json = "json"
    csv = "csv"


@app.command()
def parse(
    file_path: Path = typer.Argument(..., help="Path to CSV/TXT statement"),
    bank: Optional[str] = typer.Option(None, "--bank", "-b", help="Bank hint, e.g. 'ABSA savings'"),
    output: Optional[Path] = typer.Option(None, "--out", "-o", help="Output file path"),
    output_format: OutputFormat = typer.Option(OutputFormat.json, "--format", help="Output format"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output")
):
    """Parse a bank statement export into canonical transactions."""

    if not file_path.exists():
        console.print(f"[red]Error: Statement file not found: {file_path}[/red]")
        raise typer.Exit(1)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True
        ) as progress:
            task = progress.add_task("Detecting format...", total=None)
            parser = StatementParser(bank_hint=bank, verbose=verbose)

            progress.update(task, description="Extracting transactions...")
            result = parser.parse(file_path)

        if output:
            if output_format == OutputFormat.csv:
                write_csv(result, output)
            else:
                write_json(result, output)
            console.print(f"[green]✓ Parsed {len(result.transactions)} {result.bank} transactions. "
                          f"Output written to: {output}[/green]")
        else:
            typer.echo(result.model_dump_json(indent=2))

    except StatementError as e:
        console.print(f"[red]Error parsing statement: {e}[/red]")
        raise typer.Exit(1)
    except OSError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def detect(
    file_path: Path = typer.Argument(..., help="Path to CSV/TXT statement"),
    bank: Optional[str] = typer.Option(None, "--bank", "-b", help="Bank hint"),
    explain: bool = typer.Option(False, "--explain", help="Show every detector's score")
):
    """Detect which bank format a statement file is in."""
    if not file_path.exists():
        console.print(f"[red]Error: Statement file not found: {file_path}[/red]")
        raise typer.Exit(1)

    try:
        resolver = FormatResolver()
        parser = resolver.resolve(bank, file_path)
        console.print(f"[green]Detected bank: {parser.display_name} ({parser.short_token})[/green]")
        if explain:
            console.print(create_sniff_report(file_path, resolver))
    except StatementError as e:
        console.print(f"[red]Error detecting format: {e}[/red]")
        raise typer.Exit(1)
    except OSError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def validate(
    json_path: Path = typer.Argument(..., help="Path to JSON file to validate")
):
    """Validate a JSON file against the parse result schema."""
    from pydantic import ValidationError
    from .models.schema import ParseResult

    try:
        data = ParseResult.model_validate_json(json_path.read_text(encoding="utf-8"))
        console.print("[green]✓ JSON is valid[/green]")
        console.print(f"Bank: {data.bank}")
        console.print(f"Status: {data.status.value}")
        console.print(f"Transactions: {len(data.transactions)}")
    except (OSError, ValidationError) as e:
        console.print(f"[red]Validation failed: {e}[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
