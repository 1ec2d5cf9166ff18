"""
Detector score report for visual QA of format detection.
"""
from pathlib import Path
from typing import Optional
import logging

from rich.table import Table

from ..core.resolver import FormatResolver
from ..models.schema import DetectionResult

logger = logging.getLogger(__name__)


class SniffReport:
    """Collects every detector's score sheet for one file."""

    def __init__(self, path: Path, resolver: Optional[FormatResolver] = None):
        self.path = Path(path)
        self.resolver = resolver or FormatResolver()
        self.results = self.resolver.explain(self.path)

    @property
    def winner(self) -> Optional[DetectionResult]:
        """First matching result in priority order."""
        return next((r for r in self.results if r.matched), None)

    def build_table(self) -> Table:
        """
        Render the score sheets as a rich table.

        Returns:
            Table with one row per detector, in priority order
        """
        table = Table(title=f"Format detection: {self.path.name}")
        table.add_column("Template", style="cyan", no_wrap=True)
        table.add_column("Matched", no_wrap=True)
        table.add_column("Score", justify="right", no_wrap=True)
        table.add_column("Layout")
        table.add_column("Details")

        winner = self.winner
        for result in self.results:
            if result.error:
                matched = f"[red]error: {result.error}[/red]"
            elif result.matched:
                matched = "[green]yes[/green]" if result is winner else "[yellow]yes[/yellow]"
            else:
                matched = "no"

            details = ", ".join(f"{k}={v}" for k, v in result.details.items())
            table.add_row(result.template_id, matched, str(result.score), result.layout or "", details)

        return table


def create_sniff_report(path: Path, resolver: Optional[FormatResolver] = None) -> Table:
    """
    Build the detector score table for a statement file.

    Args:
        path: Path to the statement file
        resolver: Resolver holding the parser registry

    Returns:
        rich Table
    """
    report = SniffReport(path, resolver)
    logger.debug(f"Sniff report for {path}: {[r.template_id for r in report.results if r.matched]}")
    return report.build_table()
