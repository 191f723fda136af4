"""
natstats Analysis Module

Core components: tokenizer, record parser, record store and statistics.
"""

from natstats.analysis.errors import (
    AddressParseError,
    DurationParseError,
    EmptyPartitionError,
    MalformedStreamError,
    NATParseError,
    NATStatsError,
    RecordFormatError,
    TimestampParseError,
    UnknownProtocolError,
)
from natstats.analysis.models import NATProtocol, NATRecord, ParserProgress
from natstats.analysis.parser import parse_record, parse_stream
from natstats.analysis.statistics import (
    compute_statistics,
    NATStatistics,
    ProtocolStats,
    StatisticsEngine,
)
from natstats.analysis.store import NATRecords, protocol_is, timeout_exceeds
from natstats.analysis.tokenizer import iter_record_blocks, RecordTokenizer, split_record

__all__ = [
    "NATProtocol",
    "NATRecord",
    "NATRecords",
    "ParserProgress",
    "protocol_is",
    "timeout_exceeds",
    "split_record",
    "RecordTokenizer",
    "iter_record_blocks",
    "parse_record",
    "parse_stream",
    "compute_statistics",
    "StatisticsEngine",
    "NATStatistics",
    "ProtocolStats",
    "NATStatsError",
    "NATParseError",
    "MalformedStreamError",
    "UnknownProtocolError",
    "RecordFormatError",
    "AddressParseError",
    "TimestampParseError",
    "DurationParseError",
    "EmptyPartitionError",
]
