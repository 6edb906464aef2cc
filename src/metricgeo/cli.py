"""CLI interface for metricgeo."""

import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Optional, TextIO

import typer
from rich.console import Console
from rich.table import Table

from metricgeo.config import SAMPLE_CONFIG, load_config, validate_config
from metricgeo.errors import AddressNotFoundError, GeoIPError
from metricgeo.geo import open_reader, parse_address
from metricgeo.models import DatabaseKind, Metric
from metricgeo import registry

app = typer.Typer(
    name="metricgeo",
    help="GeoIP enrichment for metric streams",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


def _read_metrics(stream: TextIO) -> list[Metric]:
    """Read JSON-lines metrics, skipping lines that cannot be decoded.

    Args:
        stream: File-like object with one JSON metric per line

    Returns:
        Decoded metrics in input order
    """
    metrics = []
    for lineno, line in enumerate(stream, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            metrics.append(Metric.from_dict(json.loads(line)))
        except (json.JSONDecodeError, ValueError, AttributeError) as e:
            err_console.print(f"[yellow]Skipping line {lineno}: {e}[/yellow]")
    return metrics


@app.command()
def enrich(
    input_file: Optional[Path] = typer.Argument(None, help="JSON-lines metrics file (stdin if omitted)"),
    config: Path = typer.Option(..., "--config", "-c", help="Path to TOML config file"),
):
    """Enrich JSON-lines metrics and write them to stdout."""
    try:
        cfg = load_config(config)
    except (FileNotFoundError, ValueError) as e:
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    processor = registry.create("geoip", cfg)
    try:
        processor.initialize()
    except GeoIPError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    try:
        if input_file is None:
            metrics = _read_metrics(sys.stdin)
        else:
            if not input_file.exists():
                err_console.print(f"[red]Error: File not found: {input_file}[/red]")
                raise typer.Exit(1)
            with open(input_file, "r", encoding="utf-8") as f:
                metrics = _read_metrics(f)

        for metric in processor.enrich(metrics):
            typer.echo(json.dumps(metric.to_dict()))
    finally:
        processor.close()


@app.command()
def lookup(
    ip: str = typer.Argument(..., help="IPv4 or IPv6 address"),
    db: Path = typer.Option(..., "--db", help="Path to MaxMind .mmdb database"),
    db_type: str = typer.Option("city", "--db-type", help="Database type: city, country or asn"),
):
    """Look up a single IP address and print the result."""
    address = parse_address(ip)
    if address is None:
        console.print(f"[red]Error: Invalid IP address: {ip}[/red]")
        raise typer.Exit(1)

    try:
        kind = DatabaseKind.resolve(db_type)
        with open_reader(db, kind) as reader:
            record = reader.lookup(address)
    except AddressNotFoundError:
        console.print(f"[yellow]{ip} not found in {db}[/yellow]")
        raise typer.Exit(1)
    except GeoIPError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"{kind.value.upper()} lookup: {ip}", show_lines=False)
    table.add_column("Attribute", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")
    for key, value in asdict(record).items():
        table.add_row(key, str(value))
    console.print(table)


@app.command()
def check(
    config: Path = typer.Argument(..., help="Path to TOML config file"),
):
    """Validate a configuration file."""
    try:
        cfg = load_config(config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    warnings = validate_config(cfg)
    if warnings:
        console.print(f"[yellow]Config warnings ({len(warnings)}):[/yellow]")
        for warning in warnings:
            console.print(f"  [dim]{warning}[/dim]")
        raise typer.Exit(1)

    console.print(
        f"[green]Config OK: {cfg.db_type or 'city'} database {cfg.db_path}, "
        f"{len(cfg.lookups)} lookup(s)[/green]"
    )


@app.command()
def init(
    output: str = typer.Option("metricgeo.toml", "--output", help="Output config file path"),
    force: bool = typer.Option(False, "--force", help="Force overwrite existing file"),
):
    """Initialize a sample configuration file."""
    output_path = Path(output)

    if output_path.exists() and not force:
        console.print(f"[yellow]Config file already exists: {output}[/yellow]")
        console.print("[yellow]Use --force to overwrite[/yellow]")
        raise typer.Exit(1)

    try:
        output_path.write_text(SAMPLE_CONFIG, encoding="utf-8")
    except OSError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Created configuration file: {output}[/green]")
    console.print("\n[cyan]Next steps:[/cyan]")
    console.print(f"  1. Point db_path in {output} at your GeoLite2 database")
    console.print(f"  2. Run 'metricgeo check {output}' to validate it")
    console.print(f"  3. Run 'metricgeo enrich metrics.jsonl -c {output}' to enrich metrics")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """GeoIP enrichment for metric streams."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


if __name__ == "__main__":
    app()
