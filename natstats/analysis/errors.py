"""
natstats Error Types

Every failure raised while reading a translation dump derives from
NATParseError and aborts the run. EmptyPartitionError is only used
inside the aggregator and never escapes it.
"""


class NATStatsError(Exception):
    """Base class for all natstats errors."""


class NATParseError(NATStatsError, ValueError):
    """A translation dump could not be turned into records."""


class MalformedStreamError(NATParseError):
    """Input ended without a properly terminated record."""


class UnknownProtocolError(NATParseError):
    """A protocol code or name does not map to a known variant."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Unknown NAT protocol: {value!r}")


class RecordFormatError(NATParseError):
    """A record block does not have the expected line layout."""


class AddressParseError(NATParseError):
    """
    An address field could not be parsed.

    `field` names the translation role (e.g. "Outside Local") and
    `component` is either "address" or "port".
    """

    def __init__(self, field: str, component: str, reason: str):
        self.field = field
        self.component = component
        self.reason = reason
        super().__init__(f"Could not parse {field} {component}: {reason}")


class TimestampParseError(NATParseError):
    """A create/use timestamp is not in MM/DD/YY hh:mm:ss form."""


class DurationParseError(NATParseError):
    """A timeout value is not a valid duration."""


class EmptyPartitionError(NATStatsError):
    """An average was requested over a protocol with no records."""
