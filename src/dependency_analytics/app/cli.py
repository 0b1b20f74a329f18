from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import typer

from .api import DependencyAnalyticsClient, UnsupportedManifestError
from .handlers import default_handlers
from ..core.domain.models import CycleReport


app = typer.Typer(help="Dependency Analytics: flag vulnerable dependencies in project manifests")


@app.command(help="Analyze a manifest (package.json, pom.xml, requirements.txt, go.mod) and print its diagnostics.")
def scan(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Manifest file to analyze"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uri = path.resolve().as_uri()
    try:
        contents = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        typer.echo(f"Cannot read {path}: {e}", err=True)
        raise typer.Exit(code=1)
    try:
        report = asyncio.run(_scan(uri, contents))
    except UnsupportedManifestError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)

    if report.aborted:
        typer.echo(f"Failed to parse {path.name}: {report.error}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(_report_to_dict(report), indent=2))
    else:
        _print_report(report)


@app.command(help="List supported manifest file names and their ecosystems.")
def ecosystems() -> None:
    for handler in default_handlers().handlers():
        typer.echo(f"{handler.ecosystem.value:8} {handler.pattern.pattern}")


async def _scan(uri: str, contents: str) -> CycleReport:
    async with DependencyAnalyticsClient() as client:
        return await client.analyze(uri, contents)


def _report_to_dict(report: CycleReport) -> dict:
    return {
        "uri": report.uri,
        "ecosystem": report.ecosystem.value,
        "dependencyCount": report.dependency_count,
        "diagnostics": [d.to_dict() for d in report.diagnostics],
        "counts": report.counts.to_dict(),
        "message": report.message,
        "batches": report.batches,
        "failedBatches": report.failed_batches,
    }


def _print_report(report: CycleReport) -> None:
    """Print one line per diagnostic (1-based line:col), then the summary."""
    for d in report.diagnostics:
        start = d.range.start
        first_line = d.message.splitlines()[0] if d.message else ""
        print(f"{start.line + 1}:{start.character + 1} {d.severity.name.lower():11} {first_line}")
    if report.failed_batches:
        print(f"warning: {report.failed_batches} of {report.batches} requests failed; results may be incomplete")
    if report.message:
        print(report.message)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
