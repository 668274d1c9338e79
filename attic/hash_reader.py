"""A reader filter that hashes the bytes read through it."""

from __future__ import annotations

from typing import Any, Optional, Tuple

from .streams import _read_some

DEFAULT_BUFFER_SIZE = 8192


class HashReader:
    """Wraps a reader and hashes every byte that passes through it.

    ``inner`` has a ``read(n)`` method, sync or async. ``digest`` is a
    hashlib-style object. The hash is finalized when EOF is reached and is
    then available from :meth:`finalized`.
    """

    def __init__(self, inner: Any, digest: Any, buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
        if buffer_size < 1:
            raise ValueError("buffer_size must be positive")
        self._inner = inner
        self._digest: Optional[Any] = digest
        self._buffer_size = buffer_size
        self._buf = b""
        self._pos = 0
        self._bytes_hashed = 0
        self._result: Optional[Tuple[bytes, int]] = None

    def _hash(self, data: bytes) -> None:
        if self._digest is None:
            raise RuntimeError("Stream has data after EOF")
        self._digest.update(data)
        self._bytes_hashed += len(data)

    def _eof(self) -> None:
        if self._digest is not None:
            self._result = (self._digest.digest(), self._bytes_hashed)
            self._digest = None

    async def _pull(self, size: int) -> bytes:
        data = await _read_some(self._inner, size)
        if data:
            self._hash(data)
        else:
            self._eof()
        return data

    async def read(self, n: int = -1) -> bytes:
        """Reads up to ``n`` bytes; with a negative ``n``, reads until EOF."""
        if n < 0:
            parts = []
            while True:
                data = await self.read(self._buffer_size)
                if not data:
                    return b"".join(parts)
                parts.append(data)
        if n == 0:
            return b""
        if self._pos < len(self._buf):
            end = min(len(self._buf), self._pos + n)
            data = self._buf[self._pos : end]
            self._pos = end
            return data
        return await self._pull(n)

    async def fill_buf(self) -> bytes:
        """Returns the buffered bytes, reading more if the buffer is empty."""
        if self._pos >= len(self._buf):
            self._buf = await self._pull(self._buffer_size)
            self._pos = 0
        return self._buf[self._pos :]

    def consume(self, amt: int) -> None:
        """Marks ``amt`` bytes returned by :meth:`fill_buf` as consumed."""
        available = len(self._buf) - self._pos
        if amt < 0 or amt > available:
            raise ValueError(f"cannot consume {amt} bytes, {available} buffered")
        self._pos += amt

    def finalized(self) -> Optional[Tuple[bytes, int]]:
        """Returns ``(digest, byte_count)`` once EOF was reached, else None."""
        return self._result