"""
natstats Console Output Module

Rich console formatting for the CLI interface.
"""

from datetime import timedelta

from rich.box import ROUNDED
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from natstats import __version__
from natstats.analysis.statistics import AVERAGED_PROTOCOLS, NATStatistics


# =============================================================================
# Constants
# =============================================================================

NOT_APPLICABLE = "n/a"
NO_DATA = "no data"

PHASE_ICONS = {
    "parsing": "📦",
    "statistics": "📊",
    "error": "❌",
}


# =============================================================================
# Console Display Class
# =============================================================================


class NATStatsConsole:
    """Rich console interface for the natstats CLI."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()
        self._width = self.console.width

    def print_banner(self) -> None:
        description = (
            f"[bold cyan]natstats v{__version__}[/bold cyan]\n\n"
            "Per-protocol statistics for NAT translation table dumps"
        )
        self.console.print(Panel(description, border_style="bright_blue", padding=(1, 2)))
        self.console.print()

    def print_phase_header(self, phase: str, title: str, description: str = "") -> None:
        """Print a phase header with icon and description."""
        icon = PHASE_ICONS.get(phase, "▶")

        self.console.print()
        self.console.print(f"{'═' * self._width}", style="bright_blue")
        self.console.print(f" {icon} [bold bright_white]{title}[/bold bright_white]")
        if description:
            self.console.print(f"    [dim]{escape(description)}[/dim]")
        self.console.print(f"{'═' * self._width}", style="bright_blue")
        self.console.print()

    def print_success(self, text: str) -> None:
        self.console.print(f"  [green]✓[/green] {escape(text)}")

    def print_error(self, text: str) -> None:
        self.console.print(f"  [red]✗[/red] {escape(text)}")

    # =========================================================================
    # Parsing
    # =========================================================================

    def create_progress(self) -> Progress:
        """Create a progress display for parsing."""
        return Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TextColumn("•"),
            TextColumn("[bright_cyan]{task.fields[records]:,}[/bright_cyan] translations"),
            TextColumn("•"),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        )

    def print_parsing_start(self, source: str) -> None:
        self.print_phase_header("parsing", "Getting data", f"Reading translations from {source}")

    def print_parsing_complete(self, records: int, static_records: int) -> None:
        self.print_success("Data parsed")

        table = Table(box=None, show_header=False, padding=(0, 2))
        table.add_column("Label", style="dim")
        table.add_column("Value", style="bright_white")

        table.add_row("Translations", f"{records:,}")
        table.add_row("Static", f"{static_records:,}")

        self.console.print(table)

    # =========================================================================
    # Statistics Display
    # =========================================================================

    def print_statistics_start(self) -> None:
        self.print_phase_header("statistics", "Getting counts", "Grouping translations by protocol")

    def print_statistics(self, stats: NATStatistics) -> None:
        """Print per-protocol counts and average timeouts."""
        threshold = self._format_duration(stats.threshold)

        counts = Table(title="Counts", box=ROUNDED, border_style="dim", title_style="bold cyan")
        counts.add_column("Protocol", style="cyan")
        counts.add_column("Count", style="bright_white", justify="right")
        counts.add_column(f">{threshold} left", style="bright_white", justify="right")
        counts.add_column("Percentage", style="bright_green", justify="right")

        for protocol, protocol_stats in stats.protocols.items():
            percentage = protocol_stats.long_percentage
            counts.add_row(
                protocol.canonical_name,
                f"{protocol_stats.count:,}",
                f"{protocol_stats.long_count:,}",
                f"{percentage:.0f}%" if percentage is not None else NOT_APPLICABLE,
            )

        self.console.print(counts)
        self.console.print()

        averages = Table(title="Average timeout", box=ROUNDED, border_style="dim", title_style="bold cyan")
        averages.add_column("Protocol", style="cyan")
        averages.add_column("Timeout", style="bright_white", justify="right")

        for protocol in AVERAGED_PROTOCOLS:
            if protocol not in stats.protocols:
                continue
            average = stats[protocol].average_timeout
            averages.add_row(
                protocol.canonical_name,
                self._format_duration(average) if average is not None else NO_DATA,
            )

        self.console.print(averages)

    # =========================================================================
    # Completion
    # =========================================================================

    def print_report_saved(self, path: str) -> None:
        self.print_success(f"Report saved to {path}")

    def print_analysis_error(self, error: str) -> None:
        self.console.print()
        self.console.print(f"{'═' * self._width}", style="red")
        self.console.print(f" {PHASE_ICONS['error']} [bold red]ANALYSIS FAILED[/bold red]")
        self.console.print(f"{'═' * self._width}", style="red")
        self.console.print()
        self.console.print(f"[red]{escape(error)}[/red]")

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _format_duration(self, duration: timedelta) -> str:
        """Format a duration like 1h30m0s, keeping tenths of a second."""
        total, tenths = divmod(round(duration.total_seconds() * 10), 10)
        hours, remainder = divmod(total, 3600)
        minutes, seconds = divmod(remainder, 60)
        seconds_text = f"{seconds}.{tenths}s" if tenths else f"{seconds}s"
        if hours:
            return f"{hours}h{minutes}m{seconds_text}"
        if minutes:
            return f"{minutes}m{seconds_text}"
        return seconds_text


# =============================================================================
# Singleton Instance
# =============================================================================

_console: NATStatsConsole | None = None


def get_console() -> NATStatsConsole:
    """Get the singleton console instance."""
    global _console
    if _console is None:
        _console = NATStatsConsole()
    return _console
