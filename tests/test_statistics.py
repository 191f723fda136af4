"""
Tests for the statistics engine.
"""

from datetime import timedelta

import pytest

from natstats.analysis.errors import EmptyPartitionError
from natstats.analysis.models import NATProtocol
from natstats.analysis.statistics import (
    average_timeout,
    compute_statistics,
    ProtocolStats,
    StatisticsEngine,
)
from natstats.analysis.store import NATRecords


class TestComputeStatistics:
    """Tests for per-protocol aggregation."""

    def test_udp_partition(self, make_record):
        """Four udp entries, three of them above one hour."""
        records = NATRecords(
            make_record(NATProtocol.UDP, minutes) for minutes in (30, 90, 90, 120)
        )

        stats = compute_statistics(records)
        udp = stats[NATProtocol.UDP]

        assert udp.count == 4
        assert udp.long_count == 3
        assert udp.long_percentage == 75
        assert udp.average_timeout == timedelta(minutes=82, seconds=30)

    def test_empty_icmp_partition(self, make_record):
        """An empty partition reports not applicable instead of dividing by zero."""
        records = NATRecords([make_record(NATProtocol.UDP, 30)])

        icmp = compute_statistics(records)[NATProtocol.ICMP]

        assert icmp.count == 0
        assert icmp.long_count == 0
        assert icmp.long_percentage is None
        assert icmp.average_timeout is None

    def test_empty_tcp_partition_has_no_average(self, make_record):
        records = NATRecords([make_record(NATProtocol.UDP, 30)])
        assert compute_statistics(records)[NATProtocol.TCP].average_timeout is None

    def test_icmp_is_not_averaged(self, make_record):
        records = NATRecords([make_record(NATProtocol.ICMP, 30)])

        icmp = compute_statistics(records)[NATProtocol.ICMP]

        assert icmp.count == 1
        assert icmp.average_timeout is None

    def test_static_is_not_reported(self, make_record):
        records = NATRecords([make_record(NATProtocol.STATIC), make_record(NATProtocol.TCP)])

        stats = compute_statistics(records)

        assert NATProtocol.STATIC not in stats.protocols
        assert list(stats.protocols) == [NATProtocol.UDP, NATProtocol.TCP, NATProtocol.ICMP]
        assert stats.total_records == 2

    def test_empty_store(self):
        stats = compute_statistics(NATRecords())

        for protocol_stats in stats.protocols.values():
            assert protocol_stats.count == 0
            assert protocol_stats.long_percentage is None

    def test_custom_threshold(self, make_record):
        records = NATRecords(make_record(NATProtocol.TCP, minutes) for minutes in (10, 20, 40))

        tcp = compute_statistics(records, threshold=timedelta(minutes=15))[NATProtocol.TCP]

        assert tcp.long_count == 2
        assert tcp.long_percentage == pytest.approx(66.666, rel=1e-3)

    def test_engine_keeps_threshold(self, make_record):
        engine = StatisticsEngine(NATRecords([make_record()]), threshold=timedelta(minutes=5))
        assert engine.analyze().threshold == timedelta(minutes=5)


class TestAverageTimeout:
    """Tests for the averaging helper."""

    def test_average(self, make_record):
        records = NATRecords([make_record(timeout_minutes=10), make_record(timeout_minutes=20)])
        assert average_timeout(records) == timedelta(minutes=15)

    def test_empty_raises(self):
        with pytest.raises(EmptyPartitionError):
            average_timeout(NATRecords())


class TestSerialization:
    """Tests for statistics to_dict."""

    def test_protocol_stats_to_dict(self):
        stats = ProtocolStats(
            protocol=NATProtocol.UDP,
            count=3,
            long_count=1,
            average_timeout=timedelta(minutes=1),
        )

        assert stats.to_dict() == {
            "count": 3,
            "long_count": 1,
            "long_percentage": 33.33,
            "average_timeout_seconds": 60.0,
        }

    def test_empty_protocol_stats_to_dict(self):
        data = ProtocolStats(protocol=NATProtocol.ICMP).to_dict()

        assert data["long_percentage"] is None
        assert data["average_timeout_seconds"] is None

    def test_statistics_to_dict(self, make_record):
        records = NATRecords([make_record(NATProtocol.UDP, 90)])

        data = compute_statistics(records).to_dict()

        assert data["threshold_seconds"] == 3600.0
        assert data["total_records"] == 1
        assert set(data["protocols"]) == {"udp", "tcp", "icmp"}
        assert data["protocols"]["udp"]["long_percentage"] == 100.0
