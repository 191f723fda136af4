"""
Tests for protocol variants and the NATRecord model.
"""

import ipaddress
from dataclasses import FrozenInstanceError
from datetime import timedelta

import pytest

from natstats.analysis.errors import UnknownProtocolError
from natstats.analysis.models import (
    NATProtocol,
    NATRecord,
    PROTOCOL_BY_NAME,
    PROTOCOL_CODES,
    PROTOCOL_NAMES,
)


class TestNATProtocol:
    """Tests for protocol code and name lookups."""

    @pytest.mark.parametrize("protocol", list(NATProtocol))
    def test_name_round_trip(self, protocol):
        """Serializing to the canonical name and back yields the same variant."""
        assert NATProtocol.from_name(protocol.canonical_name) is protocol

    def test_canonical_names(self):
        assert [p.canonical_name for p in NATProtocol] == ["udp", "tcp", "static", "icmp"]

    def test_from_code_uses_first_character(self):
        assert NATProtocol.from_code("udp") is NATProtocol.UDP
        assert NATProtocol.from_code("tcp") is NATProtocol.TCP
        assert NATProtocol.from_code("---") is NATProtocol.STATIC
        assert NATProtocol.from_code("icmp") is NATProtocol.ICMP

    def test_unknown_name_raises(self):
        """Unknown names must not fall back to a default variant."""
        with pytest.raises(UnknownProtocolError) as exc_info:
            NATProtocol.from_name("gre")
        assert exc_info.value.value == "gre"

    def test_unknown_code_raises(self):
        with pytest.raises(UnknownProtocolError):
            NATProtocol.from_code("gre")

    def test_empty_code_raises(self):
        with pytest.raises(UnknownProtocolError):
            NATProtocol.from_code("")

    def test_reverse_table_is_inverse(self):
        """The name -> variant table mirrors variant -> name exactly."""
        assert len(PROTOCOL_BY_NAME) == len(PROTOCOL_NAMES)
        for protocol, name in PROTOCOL_NAMES.items():
            assert PROTOCOL_BY_NAME[name] is protocol

    def test_every_variant_has_a_code(self):
        assert set(PROTOCOL_CODES.values()) == set(NATProtocol)

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            PROTOCOL_NAMES[NATProtocol.UDP] = "UDP"  # type: ignore[index]


class TestNATRecord:
    """Tests for the NATRecord dataclass."""

    def test_record_is_immutable(self, make_record):
        record = make_record()
        with pytest.raises(FrozenInstanceError):
            record.timeout = timedelta(0)  # type: ignore[misc]

    def test_timeout_seconds(self, make_record):
        assert make_record(timeout_minutes=90).timeout_seconds == 5400.0

    def test_is_static(self, make_record):
        assert make_record(NATProtocol.STATIC).is_static is True
        assert make_record(NATProtocol.TCP).is_static is False

    def test_to_dict(self, make_record):
        data = make_record(NATProtocol.TCP, timeout_minutes=1).to_dict()

        assert data["protocol"] == "tcp"
        assert data["inside_global"] == "10.0.0.1"
        assert data["inside_global_port"] == 1234
        assert data["created"] == "2023-01-02T10:00:00"
        assert data["used"] == "2023-01-02T10:05:00"
        assert data["timeout_seconds"] == 60.0

    def test_dict_round_trip(self, make_record):
        record = make_record(NATProtocol.ICMP, timeout_minutes=75)
        assert NATRecord.from_dict(record.to_dict()) == record

    def test_static_dict_round_trip_keeps_ports_absent(self, make_record):
        record = make_record(NATProtocol.STATIC)
        data = record.to_dict()

        assert data["protocol"] == "static"
        assert data["outside_global_port"] is None
        assert NATRecord.from_dict(data) == record

    def test_from_dict_missing_address(self, make_record):
        data = make_record(NATProtocol.STATIC).to_dict()
        data["outside_local"] = None

        record = NATRecord.from_dict(data)

        assert record.outside_local is None
        assert record.inside_local == ipaddress.ip_address("192.168.0.1")

    def test_from_dict_unknown_protocol(self, make_record):
        data = make_record().to_dict()
        data["protocol"] = "sctp"

        with pytest.raises(UnknownProtocolError):
            NATRecord.from_dict(data)
