"""Main Typer application — the ``nexus`` command.

Entry point: ``nexus`` (configured via pyproject.toml console_scripts).

Commands: status, graph, dev, sync, observers.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from nexus.cli.render import ReportRenderer
from nexus.config import config
from nexus.core.engine import ReconciliationEngine
from nexus.core.errors import NexusError
from nexus.core.graph_builder import DependencyGraph

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="nexus",
    help="Nexus: declarative desired-state reconciliation for developer environments.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

_MANIFEST_HELP = "Path to nexus.yaml (default: $NEXUS_MANIFEST or nexus.yaml)."
_INTENT_HELP = "Intent name to resolve (default: defaultIntent, 'feature', or the first intent)."
_STATE_HELP = "Path to the persisted state file (default: $NEXUS_STATE_PATH or .nexus/state.json)."


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Configure logging for every command."""
    level = logging.DEBUG if verbose else config.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _engine(manifest: Path | None, state: Path | None = None) -> ReconciliationEngine:
    return ReconciliationEngine(manifest_path=manifest, state_path=state)


def _print_json(payload: dict[str, Any]) -> None:
    typer.echo(json.dumps(payload, indent=2, default=str))


def _fail(exc: Exception) -> NoReturn:
    err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}", highlight=False)
    raise typer.Exit(code=1)


@app.command(name="status", help="Show desired vs observed state.")
def status_cmd(
    manifest: Path = typer.Option(None, "--manifest", "-m", help=_MANIFEST_HELP),
    intent: str = typer.Option(None, "--intent", "-i", help=_INTENT_HELP),
    state: Path = typer.Option(None, "--state", help=_STATE_HELP),
    as_json: bool = typer.Option(False, "--json", help="JSON output."),
) -> None:
    """Observe the selected intent without persisting anything."""
    try:
        report = _engine(manifest, state).status(intent)
    except NexusError as exc:
        _fail(exc)
    if as_json:
        _print_json(report.to_report())
        return
    ReportRenderer(console).print_status(report)


@app.command(name="graph", help="Show the service dependency graph.")
def graph_cmd(
    manifest: Path = typer.Option(None, "--manifest", "-m", help=_MANIFEST_HELP),
    service: str = typer.Option(None, "--service", "-s", help="Only show edges touching this service."),
    as_json: bool = typer.Option(False, "--json", help="JSON output."),
) -> None:
    """Print dependency edges derived from requires/consumes declarations."""
    try:
        report = _engine(manifest).graph()
    except NexusError as exc:
        _fail(exc)
    if as_json:
        edges = report.edges
        if service is not None:
            edges = DependencyGraph(edges).edges_touching(service)
        _print_json({"edges": [edge.to_report() for edge in edges]})
        return
    ReportRenderer(console).print_graph(report.edges, focus=service)


def _lifecycle(mode: str, manifest: Path | None, intent: str | None, state: Path | None, as_json: bool) -> None:
    try:
        report = _engine(manifest, state).sync(intent, mode=mode)
    except NexusError as exc:
        _fail(exc)
    if as_json:
        _print_json(report.to_report())
    else:
        ReportRenderer(console).print_lifecycle(report)
    if not report.summary.compliant:
        raise typer.Exit(code=1)


@app.command(name="dev", help="Resolve and persist local state.")
def dev_cmd(
    manifest: Path = typer.Option(None, "--manifest", "-m", help=_MANIFEST_HELP),
    intent: str = typer.Option(None, "--intent", "-i", help=_INTENT_HELP),
    state: Path = typer.Option(None, "--state", help=_STATE_HELP),
    as_json: bool = typer.Option(False, "--json", help="JSON output."),
) -> None:
    """Observe the intent and replace persisted state. Exits 1 if not compliant."""
    _lifecycle("dev", manifest, intent, state, as_json)


@app.command(name="sync", help="Align local state to the manifest.")
def sync_cmd(
    manifest: Path = typer.Option(None, "--manifest", "-m", help=_MANIFEST_HELP),
    intent: str = typer.Option(None, "--intent", "-i", help=_INTENT_HELP),
    state: Path = typer.Option(None, "--state", help=_STATE_HELP),
    as_json: bool = typer.Option(False, "--json", help="JSON output."),
) -> None:
    """Observe the intent and replace persisted state. Exits 1 if not compliant."""
    _lifecycle("sync", manifest, intent, state, as_json)


@app.command(name="observers", help="List registered observer types.")
def observers_cmd(
    manifest: Path = typer.Option(
        None, "--manifest", "-m", help="Also register observers declared in this manifest."
    ),
    as_json: bool = typer.Option(False, "--json", help="JSON output."),
) -> None:
    """List the state types Nexus can observe."""
    engine = _engine(manifest)
    if manifest is not None:
        try:
            engine.load()
        except NexusError as exc:
            _fail(exc)
    types = engine.registry.types
    if as_json:
        _print_json({"observers": types})
        return
    if not types:
        console.print("[dim]No observers registered.[/dim]")
        return
    for type_name in types:
        console.print(f"- {type_name}", markup=False, highlight=False)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
