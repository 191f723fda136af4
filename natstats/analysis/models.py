"""
natstats Data Models

Protocol variants and the immutable record produced for every entry of a
translation table dump.
"""

import ipaddress
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from natstats.analysis.errors import UnknownProtocolError

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address


# =============================================================================
# Enums
# =============================================================================


class NATProtocol(str, Enum):
    """Translation types listed in the "Pro" column."""

    UDP = "udp"
    TCP = "tcp"
    STATIC = "static"
    ICMP = "icmp"

    @property
    def canonical_name(self) -> str:
        """Lowercase name used when serializing."""
        return PROTOCOL_NAMES[self]

    @classmethod
    def from_code(cls, code: str) -> "NATProtocol":
        """Resolve a protocol column token by its first character."""
        try:
            return PROTOCOL_CODES[code[:1]]
        except KeyError:
            raise UnknownProtocolError(code) from None

    @classmethod
    def from_name(cls, name: str) -> "NATProtocol":
        """Resolve a canonical name produced by `canonical_name`."""
        try:
            return PROTOCOL_BY_NAME[name]
        except KeyError:
            raise UnknownProtocolError(name) from None


# Static entries show "---" in the protocol column
PROTOCOL_CODES: Mapping[str, NATProtocol] = MappingProxyType({
    "u": NATProtocol.UDP,
    "t": NATProtocol.TCP,
    "-": NATProtocol.STATIC,
    "i": NATProtocol.ICMP,
})

PROTOCOL_NAMES: Mapping[NATProtocol, str] = MappingProxyType({
    NATProtocol.UDP: "udp",
    NATProtocol.TCP: "tcp",
    NATProtocol.STATIC: "static",
    NATProtocol.ICMP: "icmp",
})

PROTOCOL_BY_NAME: Mapping[str, NATProtocol] = MappingProxyType(
    {name: protocol for protocol, name in PROTOCOL_NAMES.items()}
)


# =============================================================================
# NAT Record
# =============================================================================


@dataclass(frozen=True, slots=True)
class NATRecord:
    """
    One translation table entry.

    Static translations carry no ports, so every `*_port` field is None
    for them. A static address shown as "---" is stored as None.
    """

    protocol: NATProtocol

    inside_global: IPAddress | None
    inside_global_port: int | None
    inside_local: IPAddress | None
    inside_local_port: int | None
    outside_local: IPAddress | None
    outside_local_port: int | None
    outside_global: IPAddress | None
    outside_global_port: int | None

    created: datetime
    """When the translation was created."""

    used: datetime
    """When the translation was last used."""

    timeout: timedelta
    """Remaining lifetime before the entry expires."""

    @property
    def is_static(self) -> bool:
        return self.protocol == NATProtocol.STATIC

    @property
    def timeout_seconds(self) -> float:
        return self.timeout.total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "protocol": self.protocol.canonical_name,
            "inside_global": _address_str(self.inside_global),
            "inside_global_port": self.inside_global_port,
            "inside_local": _address_str(self.inside_local),
            "inside_local_port": self.inside_local_port,
            "outside_local": _address_str(self.outside_local),
            "outside_local_port": self.outside_local_port,
            "outside_global": _address_str(self.outside_global),
            "outside_global_port": self.outside_global_port,
            "created": self.created.isoformat(),
            "used": self.used.isoformat(),
            "timeout_seconds": self.timeout_seconds,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NATRecord":
        """Rebuild a record from the output of `to_dict`."""
        return cls(
            protocol=NATProtocol.from_name(data["protocol"]),
            inside_global=_address_or_none(data.get("inside_global")),
            inside_global_port=data.get("inside_global_port"),
            inside_local=_address_or_none(data.get("inside_local")),
            inside_local_port=data.get("inside_local_port"),
            outside_local=_address_or_none(data.get("outside_local")),
            outside_local_port=data.get("outside_local_port"),
            outside_global=_address_or_none(data.get("outside_global")),
            outside_global_port=data.get("outside_global_port"),
            created=datetime.fromisoformat(data["created"]),
            used=datetime.fromisoformat(data["used"]),
            timeout=timedelta(seconds=data["timeout_seconds"]),
        )


# =============================================================================
# Parser Progress
# =============================================================================


@dataclass
class ParserProgress:
    """Progress information for the streaming parser."""

    records_parsed: int
    bytes_processed: int
    current_phase: str


# =============================================================================
# Helper Functions
# =============================================================================


def _address_str(address: IPAddress | None) -> str | None:
    return str(address) if address is not None else None


def _address_or_none(value: str | None) -> IPAddress | None:
    return ipaddress.ip_address(value) if value else None
