"""
Terminal rendering for the shortener and statistics views.

Uses the rich library for tables and panels.
"""

from datetime import datetime
from typing import Dict, List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .errors import ValidationError
from .models import LinkRecord, LinkStatus
from .registry import LinkRegistry

CLICK_DETAIL_LIMIT = 5


def format_time(dt: datetime) -> str:
    return dt.astimezone().strftime("%Y-%m-%d %H:%M:%S")


class TerminalRenderer:
    """Renders registry state for the terminal."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def render_success(self, message: str) -> None:
        self.console.print(Panel(Text(message, style="bold green"), title="SUCCESS", box=box.ROUNDED))

    def render_warning(self, message: str) -> None:
        self.console.print(Panel(Text(message, style="bold yellow"), title="WARNING", box=box.ROUNDED))

    def render_error(self, message: str) -> None:
        self.console.print(Panel(Text(message, style="bold red"), title="ERROR", box=box.ROUNDED))

    def render_validation_errors(self, error: ValidationError) -> None:
        """Show every failed field of a submission at once."""
        table = Table(title="Please fix the following", box=box.ROUNDED)
        table.add_column("Field", style="cyan")
        table.add_column("Error", style="red")
        for name, field_error in error.errors.items():
            table.add_row(name, field_error.message)
        self.console.print(table)

    def render_recent_links(self, records: List[LinkRecord]) -> None:
        """
        Render the shortener view's list of active links.

        Args:
            records: Active records, most recent first
        """
        if not records:
            self.console.print(Text("No active short URLs.", style="dim"))
            return

        table = Table(title="Your Shortened URLs", box=box.ROUNDED)
        table.add_column("Short URL", style="cyan")
        table.add_column("Original", overflow="fold")
        table.add_column("Expires")
        table.add_column("Clicks", justify="right")
        for record in records:
            table.add_row(
                record.short_url,
                record.original_url,
                format_time(record.expiry_at),
                str(record.clicks),
            )
        self.console.print(table)

    def render_statistics(self, registry: LinkRegistry, records: List[LinkRecord]) -> None:
        """
        Render the statistics view.

        Args:
            registry: Registry used for status and totals
            records: Records to show, in creation order
        """
        if not records:
            self.console.print(Text("No URLs have been shortened yet.", style="dim"))
            return

        self.render_summary(registry.statistics())
        for record in records:
            self.render_link_detail(record, registry.status(record))

    def render_summary(self, stats: Dict[str, int]) -> None:
        table = Table(title="URL Statistics", box=box.ROUNDED)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")
        table.add_row("Total links", str(stats["total_links"]))
        table.add_row("Active", str(stats["active_links"]))
        table.add_row("Expired", str(stats["expired_links"]))
        table.add_row("Total clicks", str(stats["total_clicks"]))
        self.console.print(table)

    def render_link_detail(self, record: LinkRecord, status: LinkStatus) -> None:
        badge_style = "bold green" if status is LinkStatus.ACTIVE else "bold red"

        details = Table.grid(padding=(0, 2))
        details.add_column(style="bold")
        details.add_column(overflow="fold")
        details.add_row("Original URL", record.original_url)
        details.add_row("Short URL", record.short_url)
        details.add_row("Created", format_time(record.created_at))
        details.add_row("Expires", format_time(record.expiry_at))
        details.add_row("Total Clicks", str(record.clicks))

        title = Text.assemble((record.shortcode, "bold"), "  ", (status.value, badge_style))
        self.console.print(Panel(details, title=title, title_align="left", box=box.ROUNDED))

        shown, hidden = LinkRegistry.recent_clicks(record, CLICK_DETAIL_LIMIT)
        if not shown:
            return

        clicks = Table(title="Click Details", box=box.SIMPLE)
        clicks.add_column("Time")
        clicks.add_column("Source")
        clicks.add_column("Location")
        for event in shown:
            clicks.add_row(format_time(event.timestamp), event.source, event.location)
        self.console.print(clicks)
        if hidden:
            self.console.print(Text(f"... and {hidden} more clicks", style="italic dim"))
