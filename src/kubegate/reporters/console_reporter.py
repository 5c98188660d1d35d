# src/kubegate/reporters/console_reporter.py
"""
A reporter that displays project quota headroom and availability checks in
formatted tables in the console.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.table import Table

from ..capacity.quota import DIMENSIONS
from ..core.config import config
from ..models.quota import AvailabilityResult, ResourceHeadroomSummary, ResourceUsage
from .base_reporter import BaseReporter

logger = logging.getLogger(__name__)


def usage_status(usage: ResourceUsage, warning_threshold: float, critical_threshold: float) -> str:
    if usage.is_unlimited:
        return "✓ Unlimited"
    if usage.usage_percent > critical_threshold:
        return "✗ CRITICAL"
    if usage.usage_percent > warning_threshold:
        return "⚠ WARNING"
    return "✓"


class ConsoleReporter(BaseReporter):
    """
    Renders quota data to the console using the 'rich' library.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        warning_threshold: Optional[float] = None,
        critical_threshold: Optional[float] = None,
    ):
        self.console = console or Console()
        self.warning_threshold = config.QUOTA_WARNING_THRESHOLD if warning_threshold is None else warning_threshold
        self.critical_threshold = (
            config.QUOTA_CRITICAL_THRESHOLD if critical_threshold is None else critical_threshold
        )

    def report_headroom(self, summary: ResourceHeadroomSummary):
        table = Table(
            title=f"Resource headroom for project '{summary.project_name}'",
            header_style="bold magenta",
            show_lines=True,
        )
        table.add_column("Resource", style="cyan")
        table.add_column("Used", justify="right")
        table.add_column("Limit", justify="right")
        table.add_column("Available", style="green", justify="right")
        table.add_column("Usage (%)", justify="right")
        table.add_column("Status")

        for field_name, label in DIMENSIONS:
            usage: ResourceUsage = getattr(summary, field_name)
            if not usage.has_data:
                table.add_row(label, "-", "-", "-", "-", "No data available", style="dim")
                continue

            status = usage_status(usage, self.warning_threshold, self.critical_threshold)
            if usage.is_unlimited:
                table.add_row(label, f"{usage.used} {usage.units}", "unlimited", "unlimited", "-", status)
                continue

            style = None
            if status.startswith("✗"):
                style = "bold red"
            elif status.startswith("⚠"):
                style = "yellow"
            table.add_row(
                label,
                f"{usage.used} {usage.units}",
                f"{usage.limit} {usage.units}",
                f"{usage.available} {usage.units}",
                f"{usage.usage_percent:.1f}",
                status,
                style=style,
            )

        self.console.print(table)

    def report_availability(self, result: AvailabilityResult):
        request = result.request
        self.console.print(
            f"Requested for project '{result.project_name}': "
            f"{request.vcpus} vCPU, {request.memory_gb} GiB memory, {request.storage_gb} GiB storage"
        )
        for check in result.checks:
            marker = "✅" if check.available else "❌"
            self.console.print(f"  {marker} {check.message}")

        if result.can_provision:
            self.console.print("RESULT: sufficient resources available", style="bold green")
        else:
            self.console.print("RESULT: insufficient resources", style="bold red")
