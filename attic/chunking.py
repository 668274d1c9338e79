"""Content-defined chunking with the FastCDC algorithm."""

from __future__ import annotations

import hashlib
import math
from typing import Any, AsyncIterator, List, Tuple

from .streams import read_chunk_async

MINIMUM_MIN = 64
MINIMUM_MAX = 67_108_864
AVERAGE_MIN = 256
AVERAGE_MAX = 268_435_456
MAXIMUM_MIN = 1024
MAXIMUM_MAX = 1_073_741_824

_U32 = 0xFFFFFFFF

# Gear table: one pseudo-random 32-bit value per byte value.
_TABLE = tuple(
    int.from_bytes(hashlib.sha256(bytes([value])).digest()[:4], "little")
    for value in range(256)
)


def _check_sizes(min_size: int, avg_size: int, max_size: int) -> None:
    if not MINIMUM_MIN <= min_size <= MINIMUM_MAX:
        raise ValueError(f"min_size must be in [{MINIMUM_MIN}, {MINIMUM_MAX}], got {min_size}")
    if not AVERAGE_MIN <= avg_size <= AVERAGE_MAX:
        raise ValueError(f"avg_size must be in [{AVERAGE_MIN}, {AVERAGE_MAX}], got {avg_size}")
    if not MAXIMUM_MIN <= max_size <= MAXIMUM_MAX:
        raise ValueError(f"max_size must be in [{MAXIMUM_MIN}, {MAXIMUM_MAX}], got {max_size}")


def _logarithm2(value: int) -> int:
    return int(math.floor(math.log2(value) + 0.5))


def _mask(bits: int) -> int:
    if not 1 <= bits <= 31:
        raise ValueError(f"mask bits out of range: {bits}")
    return (1 << bits) - 1


def _center_size(average: int, minimum: int, source_size: int) -> int:
    offset = minimum + -(-minimum // 2)
    offset = min(offset, average)
    return min(average - offset, source_size)


def _cut(
    data: bytes,
    start: int,
    size: int,
    min_size: int,
    avg_size: int,
    max_size: int,
    mask_s: int,
    mask_l: int,
    eof: bool,
) -> int:
    """Returns the length of the next chunk at ``start``, or 0 to wait for more data."""
    if size <= min_size:
        return size if eof else 0
    size = min(size, max_size)

    end_small = start + _center_size(avg_size, min_size, size)
    end = start + size
    table = _TABLE
    h = 0
    pos = start + min_size

    while pos < end_small:
        h = ((h >> 1) + table[data[pos]]) & _U32
        if not h & mask_s:
            return pos - start
        pos += 1

    while pos < end:
        h = ((h >> 1) + table[data[pos]]) & _U32
        if not h & mask_l:
            return pos - start
        pos += 1

    # More data may still yield a larger chunk, unless the maximum is reached.
    if not eof and size < max_size:
        return 0
    return size


def find_chunks(
    data: bytes, min_size: int, avg_size: int, max_size: int, eof: bool = True
) -> List[Tuple[int, int]]:
    """Finds chunk boundaries in ``data`` as ``(offset, length)`` pairs.

    When ``eof`` is false, trailing bytes that may belong to a larger chunk
    are left out of the result.
    """
    _check_sizes(min_size, avg_size, max_size)
    bits = _logarithm2(avg_size)
    mask_s = _mask(bits + 1)
    mask_l = _mask(bits - 1)
    data = bytes(data)

    chunks = []
    offset = 0
    remaining = len(data)
    while remaining:
        length = _cut(
            data, offset, remaining, min_size, avg_size, max_size, mask_s, mask_l, eof
        )
        if length == 0:
            break
        chunks.append((offset, length))
        offset += length
        remaining -= length
    return chunks


def chunk_stream(
    stream: Any, min_size: int, avg_size: int, max_size: int
) -> AsyncIterator[bytes]:
    """Splits a reader into content-defined chunks, yielded as bytes."""
    _check_sizes(min_size, avg_size, max_size)
    return _chunk_stream(stream, min_size, avg_size, max_size)


async def _chunk_stream(
    stream: Any, min_size: int, avg_size: int, max_size: int
) -> AsyncIterator[bytes]:
    leftover = b""
    while True:
        read = leftover + await read_chunk_async(stream, max_size - len(leftover))
        if not read:
            break
        eof = len(read) < max_size

        consumed = 0
        for offset, length in find_chunks(read, min_size, avg_size, max_size, eof):
            consumed += length
            yield read[offset : offset + length]

        if eof:
            break
        leftover = read[consumed:]