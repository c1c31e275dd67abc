"""Rich terminal renderer for Nexus reports.

Color scheme
------------
- green  : healthy
- red    : missing
- yellow : unknown
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from nexus.core.graph_builder import DependencyGraph
from nexus.models.graph import GraphEdge
from nexus.models.plan import ObservationStatus, StateResult, Summary
from nexus.models.reports import LifecycleReport, StatusReport

_STATUS_MARKUP: dict[ObservationStatus, str] = {
    ObservationStatus.HEALTHY: "[green]healthy[/green]",
    ObservationStatus.MISSING: "[red]missing[/red]",
    ObservationStatus.UNKNOWN: "[yellow]unknown[/yellow]",
}


class ReportRenderer:
    """Prints engine reports as human-readable terminal output.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def print_status(self, report: StatusReport) -> None:
        self.console.print(f"[bold]Nexus status[/bold] (intent: [cyan]{escape(report.intent)}[/cyan])")
        self.console.print(f"Manifest: {escape(str(report.manifest))}")
        self.console.print(f"Manifest hash: {report.manifest_hash}")
        if report.state_hash is None:
            self.console.print(f"State: {escape(str(report.state_path))} [dim](missing)[/dim]")
        elif report.state_stale:
            self.console.print(f"State: {escape(str(report.state_path))} [yellow](stale)[/yellow]")
        else:
            self.console.print(f"State: {escape(str(report.state_path))}")
        self.console.print()
        self.print_results(report.results)
        self.console.print()
        self.print_summary(report.summary)

    def print_lifecycle(self, report: LifecycleReport) -> None:
        self.console.print(f"[bold]Nexus {report.mode}[/bold] (intent: [cyan]{escape(report.intent)}[/cyan])")
        self.console.print(f"Resolved {len(report.results)} states.")
        self.print_summary(report.summary)
        if report.pending_types:
            self.console.print()
            self.console.print("No reconcilers registered for:")
            for type_name in report.pending_types:
                self.console.print(f"- {type_name}", markup=False, highlight=False)
            self.console.print("[dim]Use plugins to reconcile missing states.[/dim]")
        self.console.print()
        self.console.print(f"State saved to {report.state_path}", markup=False)

    def print_graph(self, edges: list[GraphEdge], focus: str | None = None) -> None:
        self.console.print("[bold]Nexus graph[/bold]")
        if focus is not None:
            graph = DependencyGraph(edges)
            edges = graph.edges_touching(focus)
            dependents = graph.dependents_of(focus)
            self.console.print(f"Service: [cyan]{escape(focus)}[/cyan]")
            self.console.print(
                f"Depends on: {', '.join(graph.dependencies_of(focus)) or '-'}", markup=False
            )
            self.console.print(f"Needed by: {', '.join(dependents) or '-'}", markup=False)
        if not edges:
            self.console.print("No edges found.")
            return
        for edge in edges:
            self.console.print(str(edge), markup=False, highlight=False)

    # ------------------------------------------------------------------
    # Pieces
    # ------------------------------------------------------------------

    def print_results(self, results: list[StateResult]) -> None:
        if not results:
            self.console.print("No states resolved.")
            return
        table = Table(show_header=True, header_style="bold")
        table.add_column("State", style="cyan")
        table.add_column("Type")
        table.add_column("Status")
        for result in results:
            table.add_row(
                escape(result.key),
                escape(result.item.type),
                _STATUS_MARKUP.get(result.observation.status, result.observation.status.value),
            )
        self.console.print(table)

    def print_summary(self, summary: Summary) -> None:
        self.console.print(
            f"Healthy: {summary.healthy}, Missing: {summary.missing}, Unknown: {summary.unknown}"
        )
