"""Stream utilities: merging chunk streams and greedy reads."""

from __future__ import annotations

import asyncio
import inspect
from collections import deque
from typing import Any, AsyncIterator, Awaitable, Callable, Deque, Iterable, TypeVar

C = TypeVar("C")
S = TypeVar("S")


async def _read_some(stream: Any, size: int) -> bytes:
    """Reads up to ``size`` bytes from a reader whose ``read`` may be sync or async."""
    result = stream.read(size)
    if inspect.isawaitable(result):
        result = await result
    return bytes(result)


def merge_chunks(
    chunks: Iterable[C],
    streamer: Callable[[C, S], Awaitable[Any]],
    streamer_arg: S,
    num_prefetch: int,
) -> AsyncIterator[bytes]:
    """Lazily merges chunks into one continuous stream of bytes.

    ``streamer(chunk, streamer_arg)`` returns an awaitable that resolves to
    an iterable (async or not) of byte strings for that chunk. Up to
    ``num_prefetch`` streamers run ahead of the chunk being read, so the
    merged stream flows without pauses between chunks.
    """
    if num_prefetch < 1:
        raise ValueError(f"num_prefetch must be at least 1, got {num_prefetch}")
    return _merge(deque(chunks), streamer, streamer_arg, num_prefetch)


async def _merge(
    chunks: Deque[C],
    streamer: Callable[[C, S], Awaitable[Any]],
    streamer_arg: S,
    num_prefetch: int,
) -> AsyncIterator[bytes]:
    streams: Deque[asyncio.Future[Any]] = deque()
    try:
        while True:
            if streams:
                stream = await streams.popleft()
                if hasattr(stream, "__aiter__"):
                    async for item in stream:
                        yield item
                else:
                    for item in stream:
                        yield item

            while len(streams) < num_prefetch and chunks:
                chunk = chunks.popleft()
                streams.append(asyncio.ensure_future(streamer(chunk, streamer_arg)))

            if not chunks and not streams:
                break
    finally:
        for pending in streams:
            pending.cancel()


async def read_chunk_async(stream: Any, size: int) -> bytes:
    """Greedily reads from a stream until ``size`` bytes are read or EOF is hit."""
    parts = []
    total = 0
    while total < size:
        data = await _read_some(stream, size - total)
        if not data:
            break
        parts.append(data)
        total += len(data)
    return b"".join(parts)