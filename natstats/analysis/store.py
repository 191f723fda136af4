"""
natstats Record Store

Ordered, read-only collection of parsed records with declarative filtering.
"""

from collections.abc import Sequence
from datetime import timedelta
from typing import Callable, Iterable, Iterator, overload

from natstats.analysis.models import NATProtocol, NATRecord

RecordPredicate = Callable[[NATRecord], bool]


class NATRecords(Sequence[NATRecord]):
    """Records in input order. Filtering always returns a new store."""

    __slots__ = ("_records",)

    def __init__(self, records: Iterable[NATRecord] = ()):
        self._records: tuple[NATRecord, ...] = tuple(records)

    @overload
    def __getitem__(self, index: int) -> NATRecord: ...

    @overload
    def __getitem__(self, index: slice) -> "NATRecords": ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return NATRecords(self._records[index])
        return self._records[index]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[NATRecord]:
        return iter(self._records)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, NATRecords):
            return self._records == other._records
        return NotImplemented

    def __repr__(self) -> str:
        return f"NATRecords({len(self._records)} records)"

    def where(self, predicate: RecordPredicate) -> "NATRecords":
        """Records for which `predicate` holds, in their original order."""
        return NATRecords(record for record in self._records if predicate(record))

    def by_protocol(self, protocol: NATProtocol) -> "NATRecords":
        return self.where(protocol_is(protocol))

    def total_timeout(self) -> timedelta:
        return sum((record.timeout for record in self._records), timedelta())


# =============================================================================
# Predicates
# =============================================================================


def protocol_is(protocol: NATProtocol) -> RecordPredicate:
    """Match records of a single protocol variant."""
    return lambda record: record.protocol == protocol


def timeout_exceeds(threshold: timedelta) -> RecordPredicate:
    """Match records whose remaining lifetime is strictly above `threshold`."""
    return lambda record: record.timeout > threshold
