"""
CLI formatters for comparison reports and snapshot history.

Keeps rich rendering out of the command functions.
"""

import logging
from typing import List

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from taxrollwatch.domain.change_types import ChangeRecord, PropertyEntry
from taxrollwatch.domain.identity import find_address
from taxrollwatch.domain.report import ComparisonReport
from taxrollwatch.infrastructure.sqlite import SnapshotInfo

logger = logging.getLogger(__name__)


class ReportFormatter:
    """
    Renders reports and history as rich tables.

    Usage:
        ReportFormatter(console).display_report(report, limit=20)
    """

    def __init__(self, console: Console):
        self.console = console

    def display_report(self, report: ComparisonReport, limit: int = 20) -> None:
        """
        Display the summary panel followed by the change tables.

        Args:
            report: Report to render
            limit: Maximum rows per table (0 for all)
        """
        self.display_summary(report)
        if report.is_baseline:
            return
        self.display_status_changes(report.status_changes, limit)
        self.display_entries("🆕 New Properties", report.new_properties, limit)
        self.display_entries("📤 Removed Properties", report.removed_properties, limit)
        self.display_entries("🏚️ Foreclosed", report.foreclosed_properties, limit)

    def display_summary(self, report: ComparisonReport) -> None:
        """Display the summary counts as a panel."""
        summary = report.summary
        if report.is_baseline:
            body = (
                f"[bold]Baseline snapshot[/bold] with {summary.current_record_count} records.\n"
                "Nothing to compare yet; the next upload will be compared against it."
            )
            self.console.print(Panel(body, title="📊 Comparison Report", border_style="blue"))
            return

        lines = [
            f"Previous upload: {_format_timestamp(report.previous_uploaded_at)}"
            f" ({summary.previous_record_count} records)",
            f"Current upload:  {_format_timestamp(report.current_uploaded_at)}"
            f" ({summary.current_record_count} records)",
            "",
            f"[green]New status:[/green]      {summary.new_status_count}",
            f"[cyan]New properties:[/cyan]  {summary.new_count}",
            f"[yellow]Removed:[/yellow]         {summary.removed_count}",
            f"[red]Foreclosed:[/red]      {summary.foreclosed_count}",
        ]
        if summary.transition_breakdown:
            breakdown = ", ".join(
                f"{escape(key)}: {count}"
                for key, count in sorted(summary.transition_breakdown.items())
            )
            lines.append(f"Transitions:     {breakdown}")
        if summary.duplicate_identifier_count or summary.empty_identifier_count:
            lines.append(
                f"[yellow]⚠️ {summary.duplicate_identifier_count} duplicate and "
                f"{summary.empty_identifier_count} empty identifier(s)[/yellow]"
            )

        self.console.print(
            Panel("\n".join(lines), title="📊 Comparison Report", border_style="blue")
        )

    def display_status_changes(self, changes: List[ChangeRecord], limit: int = 20) -> None:
        """Display properties that newly entered J/A/P."""
        table = Table(title=f"⚖️ New Status ({len(changes)})")
        table.add_column("Identifier", style="cyan", no_wrap=True)
        table.add_column("Change", style="magenta")
        table.add_column("Status", style="green")
        table.add_column("Address")

        for change in _limited(changes, limit):
            table.add_row(
                escape(change.identifier),
                escape(change.change_type),
                change.new_status.value,
                escape(find_address(change.record)),
            )
        self._print_table(table, len(changes), limit)

    def display_entries(self, title: str, entries: List[PropertyEntry], limit: int = 20) -> None:
        """Display new, removed or foreclosed properties."""
        table = Table(title=f"{title} ({len(entries)})")
        table.add_column("Identifier", style="cyan", no_wrap=True)
        table.add_column("Status", style="yellow")
        table.add_column("Address")

        for entry in _limited(entries, limit):
            table.add_row(
                escape(entry.identifier),
                entry.status.value,
                escape(find_address(entry.record)),
            )
        self._print_table(table, len(entries), limit)

    def display_history(self, snapshots: List[SnapshotInfo], roll: str) -> None:
        """Display stored snapshots, newest first."""
        if not snapshots:
            self.console.print(f"[yellow]No snapshots stored for roll '{escape(roll)}'[/yellow]")
            return

        table = Table(title=f"🗂️ Snapshots - {escape(roll)}")
        table.add_column("ID", style="cyan", justify="right")
        table.add_column("Uploaded", style="blue")
        table.add_column("Source")
        table.add_column("Records", justify="right", style="green")

        for info in snapshots:
            table.add_row(
                str(info.id),
                _format_timestamp(info.uploaded_at),
                escape(info.source_name or "-"),
                str(info.record_count),
            )
        self.console.print(table)

    def _print_table(self, table: Table, total: int, limit: int) -> None:
        if total == 0:
            return
        self.console.print(table)
        if limit and total > limit:
            self.console.print(f"[dim]... {total - limit} more not shown[/dim]")


def _limited(items: list, limit: int) -> list:
    return items[:limit] if limit else items


def _format_timestamp(value) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else "-"
