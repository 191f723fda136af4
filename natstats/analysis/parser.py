"""
natstats Translation Parser

Turns the record blocks produced by the tokenizer into NATRecord values.

A block looks like:

    udp 10.0.0.1:1234  192.168.0.1:1234  203.0.113.1:80  203.0.113.1:80
      create: 01/02/23 10:00:00, use: 01/02/23 10:05:00, timeout: 01:30:00

Static translations show "---" as the protocol and bare addresses.
Parsing is all-or-nothing: the first malformed field aborts the record.
"""

import ipaddress
import re
from datetime import datetime, timedelta
from typing import BinaryIO, Callable, TextIO

import structlog

from natstats.analysis.errors import (
    AddressParseError,
    DurationParseError,
    NATParseError,
    RecordFormatError,
    TimestampParseError,
)
from natstats.analysis.models import IPAddress, NATProtocol, NATRecord, ParserProgress
from natstats.analysis.store import NATRecords
from natstats.analysis.tokenizer import (
    DEFAULT_CHUNK_SIZE,
    RECORD_HEADER,
    RecordTokenizer,
    iter_record_blocks,
)

logger = structlog.get_logger(__name__)


# =============================================================================
# Constants
# =============================================================================

DATE_FORMAT = "%m/%d/%y %H:%M:%S"
# strptime alone accepts single-digit fields
DATE_REGEXP = re.compile(r"^\d{2}/\d{2}/\d{2} \d{2}:\d{2}:\d{2}$", re.ASCII)

ROUTE_REGEXP = re.compile(
    r"^(-{3}|tcp|udp|icmp)\s+([\-:0-9.]+)\s+([\-:0-9.]+)\s+([\-:0-9.]+)\s+([\-:0-9.]+)\s*$"
)
TIME_REGEXP = re.compile(
    r"^\s+create:\s+([^,]+),\s+use:\s+([^,]+),\s+timeout:\s+([^,]+?)\s*$"
)
DURATION_REGEXP = re.compile(r"^(\d\d):(\d\d):(\d\d)$")
DURATION_REPLACE = r"\1h\2m\3s"
DURATION_EXPRESSION = re.compile(r"^(?:(\d+)h)?(?:(\d+)m)?(?:(\d+)s)?$")

FIELD_NAMES = ("Inside Global", "Inside Local", "Outside Local", "Outside Global")

# Static entries use "---" for roles without an address
MISSING_ADDRESS = "---"

MAX_PORT = 65535


# =============================================================================
# Record Parsing
# =============================================================================


def parse_record(block: bytes | str) -> NATRecord:
    """
    Parse a single record block.

    Args:
        block: Text of exactly one record, header and separator removed

    Returns:
        The parsed NATRecord

    Raises:
        RecordFormatError: If a line does not have the expected layout
        UnknownProtocolError: If the protocol code is not recognized
        AddressParseError: If an address or port is malformed
        TimestampParseError: If a create/use timestamp is malformed
        DurationParseError: If the timeout is not a valid duration
    """
    if isinstance(block, bytes):
        block = block.decode("utf-8", errors="replace")

    lines = block.split("\n", 2)
    if len(lines) < 2:
        raise RecordFormatError(f"Expected an address line and a timing line: {block!r}")

    route = ROUTE_REGEXP.match(lines[0])
    if route is None:
        raise RecordFormatError(f"Could not parse translation line: {lines[0]!r}")

    protocol = NATProtocol.from_code(route.group(1))
    fields = route.groups()[1:]

    if protocol == NATProtocol.STATIC:
        endpoints = [_parse_static_address(value, name) for value, name in zip(fields, FIELD_NAMES)]
    else:
        endpoints = [parse_ip_port(value, name) for value, name in zip(fields, FIELD_NAMES)]

    times = TIME_REGEXP.match(lines[1])
    if times is None:
        raise RecordFormatError(f"Could not parse timing line: {lines[1]!r}")

    created = parse_timestamp(times.group(1), "create")
    used = parse_timestamp(times.group(2), "use")
    timeout = parse_timeout(times.group(3))

    (ig, ig_port), (il, il_port), (ol, ol_port), (og, og_port) = endpoints

    return NATRecord(
        protocol=protocol,
        inside_global=ig,
        inside_global_port=ig_port,
        inside_local=il,
        inside_local_port=il_port,
        outside_local=ol,
        outside_local_port=ol_port,
        outside_global=og,
        outside_global_port=og_port,
        created=created,
        used=used,
        timeout=timeout,
    )


# =============================================================================
# Field Helpers
# =============================================================================


def parse_ip_port(value: str, name: str) -> tuple[IPAddress, int]:
    """Split an "address:port" token and validate both halves."""
    host, separator, port = value.rpartition(":")
    if not separator:
        raise AddressParseError(name, "address", f"missing port in address {value!r}")
    if ":" in host:
        raise AddressParseError(name, "address", f"too many colons in address {value!r}")

    address = _parse_address(host, name)

    if not (port.isascii() and port.isdigit()):
        raise AddressParseError(name, "port", f"invalid port {port!r}")
    port_number = int(port)
    if port_number > MAX_PORT:
        raise AddressParseError(name, "port", f"port {port_number} out of range")

    return address, port_number


def _parse_static_address(value: str, name: str) -> tuple[IPAddress | None, None]:
    if value == MISSING_ADDRESS:
        return None, None
    return _parse_address(value, name), None


def _parse_address(value: str, name: str) -> IPAddress:
    try:
        return ipaddress.ip_address(value)
    except ValueError as e:
        raise AddressParseError(name, "address", str(e)) from e


def parse_timestamp(value: str, label: str = "timestamp") -> datetime:
    """Parse a MM/DD/YY hh:mm:ss timestamp."""
    value = value.strip()
    if not DATE_REGEXP.match(value):
        raise TimestampParseError(f"Could not parse {label} time {value!r}: expected MM/DD/YY hh:mm:ss")
    try:
        return datetime.strptime(value, DATE_FORMAT)
    except ValueError as e:
        raise TimestampParseError(f"Could not parse {label} time {value!r}: {e}") from e


def parse_timeout(value: str) -> timedelta:
    """
    Parse a remaining-lifetime value.

    The router prints HH:MM:SS; it is rewritten to the duration form
    <H>h<M>m<S>s before parsing. Values already in duration form are
    accepted as-is.
    """
    expression = DURATION_REGEXP.sub(DURATION_REPLACE, value.strip())
    return parse_duration(expression)


def parse_duration(expression: str) -> timedelta:
    """Parse an hour/minute/second duration such as "1h30m0s"."""
    match = DURATION_EXPRESSION.match(expression)
    if match is None or not any(match.groups()):
        raise DurationParseError(f"Invalid duration {expression!r}")

    hours, minutes, seconds = (int(part) if part else 0 for part in match.groups())
    return timedelta(hours=hours, minutes=minutes, seconds=seconds)


# =============================================================================
# Stream Parsing
# =============================================================================


def parse_stream(
    stream: BinaryIO | TextIO,
    progress_callback: Callable[[ParserProgress], None] | None = None,
    batch_size: int = 1000,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    header: bytes = RECORD_HEADER,
) -> NATRecords:
    """
    Parse every record of a translation dump.

    Args:
        stream: Binary or text stream holding the dump
        progress_callback: Optional callback for progress updates
        batch_size: Number of records between progress callbacks
        chunk_size: Bytes read from the stream per pull
        header: Prefix identifying the column header line

    Returns:
        NATRecords in input order

    Raises:
        NATParseError: On the first malformed record; nothing is returned
    """
    logger.info("nat_parse_starting")

    records: list[NATRecord] = []
    tokenizer = RecordTokenizer(header=header)

    for index, block in enumerate(iter_record_blocks(stream, chunk_size, tokenizer=tokenizer)):
        try:
            records.append(parse_record(block))
        except NATParseError as e:
            logger.error("record_parse_failed", record=index, error=str(e))
            raise

        if progress_callback and len(records) % batch_size == 0:
            progress_callback(ParserProgress(
                records_parsed=len(records),
                bytes_processed=tokenizer.bytes_consumed,
                current_phase="Parsing translations",
            ))

    if progress_callback:
        progress_callback(ParserProgress(
            records_parsed=len(records),
            bytes_processed=tokenizer.bytes_consumed,
            current_phase="Parsing complete",
        ))

    logger.info("nat_parse_complete", records=len(records), bytes=tokenizer.bytes_consumed)

    return NATRecords(records)
