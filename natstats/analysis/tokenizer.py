"""
natstats Record Tokenizer

Splits a translation dump into one block of text per NAT entry.
Entries are separated by an empty line, the whole dump may start with
the column header line, and the final entry must be followed by a
trailing newline.
"""

from typing import BinaryIO, Iterator, TextIO

import structlog

from natstats.analysis.errors import MalformedStreamError

logger = structlog.get_logger(__name__)


# =============================================================================
# Constants
# =============================================================================

RECORD_SEPARATOR = b"\n\n"
RECORD_HEADER = b"Pro"
DEFAULT_CHUNK_SIZE = 64 * 1024


# =============================================================================
# Split Function
# =============================================================================


def split_record(
    data: bytes | bytearray,
    at_eof: bool,
    header: bytes = RECORD_HEADER,
) -> tuple[int, bytes | None]:
    """
    Find the next record block in `data`.

    Args:
        data: Unread bytes, starting at a record boundary
        at_eof: True once the underlying stream has no more data
        header: Prefix identifying the column header line

    Returns:
        (advance, block). `advance` is the number of bytes consumed.
        (0, None) means more input is needed, or at EOF that the
        stream is exhausted.

    Raises:
        MalformedStreamError: If input ends without a trailing newline
    """
    if not data and at_eof:
        return 0, None

    index = data.find(RECORD_SEPARATOR)
    if index == -1:
        if not at_eof:
            return 0, None
        if not data.endswith(b"\n"):
            raise MalformedStreamError(
                "Improperly formatted input: it must end with an empty line"
            )
        end = len(data) - 1
        advance = len(data)
    else:
        end = index
        advance = index + len(RECORD_SEPARATOR)

    start = 0
    if header and data.startswith(header):
        # Skip past the header line's newline
        start = min(data.find(b"\n") + 1, end)

    return advance, data[start:end]


# =============================================================================
# Tokenizer
# =============================================================================


class RecordTokenizer:
    """
    Push-style tokenizer holding the unread part of the stream.

    Feed it chunks of any size; complete blocks come out as soon as
    their separator has arrived. Call `close()` once the stream ends.
    """

    def __init__(self, header: bytes = RECORD_HEADER):
        self.header = header
        self._buffer = bytearray()
        self._closed = False
        self.bytes_consumed = 0

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet emitted."""
        return len(self._buffer)

    def feed(self, chunk: bytes) -> Iterator[bytes]:
        """Buffer `chunk` and return an iterator over the complete blocks."""
        if self._closed:
            raise MalformedStreamError("Cannot feed a closed tokenizer")
        self._buffer.extend(chunk)
        return self._drain()

    def close(self) -> Iterator[bytes]:
        """Mark end of input and return an iterator over the final block(s)."""
        self._closed = True
        return self._drain()

    def _drain(self) -> Iterator[bytes]:
        while True:
            advance, block = split_record(self._buffer, self._closed, self.header)
            if advance == 0:
                return
            del self._buffer[:advance]
            self.bytes_consumed += advance
            # A header followed directly by a blank line leaves nothing
            if block:
                yield bytes(block)


def iter_record_blocks(
    stream: BinaryIO | TextIO,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    header: bytes = RECORD_HEADER,
    tokenizer: RecordTokenizer | None = None,
) -> Iterator[bytes]:
    """
    Lazily yield record blocks read from `stream`.

    Text streams are encoded as UTF-8. The generator makes a single
    forward pass and cannot be restarted. Pass `tokenizer` to observe
    its byte count while iterating; `header` is then ignored.
    """
    if tokenizer is None:
        tokenizer = RecordTokenizer(header=header)

    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        if isinstance(chunk, str):
            chunk = chunk.encode("utf-8")
        yield from tokenizer.feed(chunk)

    yield from tokenizer.close()

    logger.debug("tokenizer_exhausted", bytes_consumed=tokenizer.bytes_consumed)
