"""
natstats Statistics Engine

Per-protocol counts, long-lifetime share and average remaining timeout
for a parsed translation table.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

import structlog

from natstats.analysis.errors import EmptyPartitionError
from natstats.analysis.models import NATProtocol
from natstats.analysis.store import NATRecords, timeout_exceeds

logger = structlog.get_logger(__name__)


# =============================================================================
# Constants
# =============================================================================

DEFAULT_LONG_LIFETIME = timedelta(hours=1)

# Static translations are not reported
REPORTED_PROTOCOLS = (NATProtocol.UDP, NATProtocol.TCP, NATProtocol.ICMP)
AVERAGED_PROTOCOLS = (NATProtocol.UDP, NATProtocol.TCP)


# =============================================================================
# Statistics Data Models
# =============================================================================


@dataclass
class ProtocolStats:
    """Statistics for the translations of one protocol."""

    protocol: NATProtocol

    count: int = 0
    """Total translations of this protocol."""

    long_count: int = 0
    """Translations whose timeout exceeds the threshold."""

    average_timeout: timedelta | None = None
    """Mean timeout; None when not computed or when there is no data."""

    @property
    def long_percentage(self) -> float | None:
        """Share of long-lived translations, None when not applicable."""
        if self.count == 0:
            return None
        return self.long_count * 100 / self.count

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        percentage = self.long_percentage
        return {
            "count": self.count,
            "long_count": self.long_count,
            "long_percentage": round(percentage, 2) if percentage is not None else None,
            "average_timeout_seconds": (
                self.average_timeout.total_seconds()
                if self.average_timeout is not None
                else None
            ),
        }


@dataclass
class NATStatistics:
    """Complete statistics for a translation table."""

    threshold: timedelta = DEFAULT_LONG_LIFETIME
    total_records: int = 0
    protocols: dict[NATProtocol, ProtocolStats] = field(default_factory=dict)

    def __getitem__(self, protocol: NATProtocol) -> ProtocolStats:
        return self.protocols[protocol]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "threshold_seconds": self.threshold.total_seconds(),
            "total_records": self.total_records,
            "protocols": {
                protocol.canonical_name: stats.to_dict()
                for protocol, stats in self.protocols.items()
            },
        }


# =============================================================================
# Statistics Engine
# =============================================================================


class StatisticsEngine:
    """Computes NATStatistics from a record store."""

    def __init__(self, records: NATRecords, threshold: timedelta = DEFAULT_LONG_LIFETIME):
        """
        Args:
            records: Parsed translations
            threshold: Remaining lifetime above which a translation counts as long
        """
        self.records = records
        self.threshold = threshold
        self.stats = NATStatistics(threshold=threshold, total_records=len(records))

    def analyze(self) -> NATStatistics:
        logger.info("statistics_analysis_starting", records=len(self.records))

        long_lived = timeout_exceeds(self.threshold)

        for protocol in REPORTED_PROTOCOLS:
            partition = self.records.by_protocol(protocol)
            stats = ProtocolStats(
                protocol=protocol,
                count=len(partition),
                long_count=len(partition.where(long_lived)),
            )

            if protocol in AVERAGED_PROTOCOLS:
                try:
                    stats.average_timeout = average_timeout(partition)
                except EmptyPartitionError:
                    logger.debug("partition_empty", protocol=protocol.canonical_name)

            self.stats.protocols[protocol] = stats

        logger.info(
            "statistics_analysis_complete",
            **{p.canonical_name: s.count for p, s in self.stats.protocols.items()},
        )

        return self.stats


def average_timeout(records: NATRecords) -> timedelta:
    """
    Mean remaining lifetime of `records`.

    Raises:
        EmptyPartitionError: If `records` is empty
    """
    if not records:
        raise EmptyPartitionError("Cannot average the timeout of zero translations")
    return records.total_timeout() / len(records)


# =============================================================================
# Main Function
# =============================================================================


def compute_statistics(
    records: NATRecords,
    threshold: timedelta = DEFAULT_LONG_LIFETIME,
) -> NATStatistics:
    """
    Compute per-protocol statistics from parsed translations.

    Args:
        records: Parsed translations
        threshold: Long remaining lifetime threshold (default one hour)

    Returns:
        NATStatistics for udp, tcp and icmp
    """
    engine = StatisticsEngine(records, threshold)
    return engine.analyze()
