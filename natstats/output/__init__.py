"""
natstats Output Generation

Console presentation and JSON reports.
"""

from natstats.output.console import get_console, NATStatsConsole
from natstats.output.report import build_report, write_report

__all__ = [
    "get_console",
    "NATStatsConsole",
    "build_report",
    "write_report",
]
