"""
natstats Report Generator

JSON report of the computed statistics, optionally with every parsed
translation.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

import structlog

from natstats import __version__
from natstats.analysis.statistics import NATStatistics
from natstats.analysis.store import NATRecords

logger = structlog.get_logger(__name__)


def build_report(
    stats: NATStatistics,
    records: NATRecords | None = None,
    source: str | None = None,
) -> dict[str, Any]:
    """
    Assemble the report dictionary.

    Args:
        stats: Computed statistics
        records: Parsed translations to include, if any
        source: Name of the analyzed input

    Returns:
        JSON-serializable report
    """
    report: dict[str, Any] = {
        "tool": f"natstats {__version__}",
        "generated": datetime.now().isoformat(timespec="seconds"),
        "source": source,
        "statistics": stats.to_dict(),
    }
    if records is not None:
        report["records"] = [record.to_dict() for record in records]
    return report


def write_report(path: Path, report: dict[str, Any]) -> Path:
    """Write `report` as indented JSON and return the path written."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2, default=str)

    logger.info("report_written", path=str(path), records=len(report.get("records", [])))
    return path
