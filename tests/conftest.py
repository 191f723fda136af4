"""
natstats Test Configuration

Pytest fixtures and configuration for all tests.
"""

import ipaddress
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable

import pytest
import structlog

from natstats.analysis.models import NATProtocol, NATRecord

HEADER_LINE = "Pro Inside global      Inside local       Outside local      Outside global\n"

UDP_BLOCK = (
    "udp   10.0.0.1:1234     192.168.0.1:1234  203.0.113.1:80    203.0.113.1:80\n"
    "  create: 01/02/23 10:00:00, use: 01/02/23 10:05:00, timeout: 01:30:00"
)
TCP_BLOCK = (
    "tcp   10.0.0.1:5000     192.168.0.2:5000  198.51.100.7:443  198.51.100.7:443\n"
    "  create: 01/02/23 09:00:00, use: 01/02/23 10:00:00, timeout: 00:30:00"
)
STATIC_BLOCK = (
    "---   10.0.0.50         192.168.0.50      ---               ---\n"
    "  create: 12/31/22 23:59:59, use: 12/31/22 23:59:59, timeout: 00:00:00"
)
ICMP_BLOCK = (
    "icmp  10.0.0.1:7        192.168.0.3:7     203.0.113.9:7     203.0.113.9:7\n"
    "  create: 01/02/23 10:10:00, use: 01/02/23 10:10:01, timeout: 00:01:00"
)

SAMPLE_BLOCKS = [UDP_BLOCK, TCP_BLOCK, STATIC_BLOCK, ICMP_BLOCK]


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any logging configuration done by a test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def sample_blocks() -> list[str]:
    """Record blocks of the sample dump, in order."""
    return list(SAMPLE_BLOCKS)


@pytest.fixture
def sample_dump() -> bytes:
    """A complete translation dump with header and trailing newline."""
    return (HEADER_LINE + "\n\n".join(SAMPLE_BLOCKS) + "\n").encode()


@pytest.fixture
def sample_dump_file(tmp_path: Path, sample_dump: bytes) -> Path:
    """The sample dump written to a temporary file."""
    path = tmp_path / "translations.txt"
    path.write_bytes(sample_dump)
    return path


@pytest.fixture
def make_record() -> Callable[..., NATRecord]:
    """Factory for records that only differ in protocol and timeout."""

    def _make(protocol: NATProtocol = NATProtocol.UDP, timeout_minutes: float = 30) -> NATRecord:
        port = None if protocol == NATProtocol.STATIC else 1234
        created = datetime(2023, 1, 2, 10, 0, 0)
        return NATRecord(
            protocol=protocol,
            inside_global=ipaddress.ip_address("10.0.0.1"),
            inside_global_port=port,
            inside_local=ipaddress.ip_address("192.168.0.1"),
            inside_local_port=port,
            outside_local=ipaddress.ip_address("203.0.113.1"),
            outside_local_port=port,
            outside_global=ipaddress.ip_address("203.0.113.1"),
            outside_global_port=port,
            created=created,
            used=created + timedelta(minutes=5),
            timeout=timedelta(minutes=timeout_minutes),
        )

    return _make
