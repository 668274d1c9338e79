"""Hashes and their typed textual representations."""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass

from .errors import HashError
from .nix_base32 import from_nix_base32, to_nix_base32

_HEX_CHAR = re.compile(r"[^0-9a-fA-F]")


class NoColonSeparatorError(HashError):
    """The typed hash string lacks a colon separator."""

    def __init__(self) -> None:
        super().__init__("The string lacks a colon separator.")


class UnsupportedHashAlgorithmError(HashError):
    """The hash algorithm is not supported."""

    def __init__(self, algorithm: str) -> None:
        self.algorithm = algorithm
        super().__init__(f"Hash algorithm {algorithm} is not supported.")


class InvalidBase16HashError(HashError):
    """The hexadecimal hash could not be decoded."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid base16 hash: {reason}")


class InvalidBase32HashError(HashError):
    """The Nix base32 hash could not be decoded."""

    def __init__(self) -> None:
        super().__init__("Invalid base32 hash.")


class InvalidHashStringLengthError(HashError):
    """The hash string has neither the hexadecimal nor the base32 length."""

    def __init__(self, typ: str, base16_len: int, base32_len: int, actual: int) -> None:
        self.typ = typ
        self.base16_len = base16_len
        self.base32_len = base32_len
        self.actual = actual
        super().__init__(
            f"Invalid length for {typ} string: Must be either {base16_len} "
            f"(hexadecimal) or {base32_len} (base32), got {actual}."
        )


def _decode_hash(text: str, typ: str, expected_bytes: int) -> bytes:
    """Decodes a base16 or base32 encoded hash of a given size."""
    base16_len = expected_bytes * 2
    base32_len = (expected_bytes * 8 - 1) // 5 + 1
    length = len(text.encode("utf-8"))

    if length == base16_len:
        bad = _HEX_CHAR.search(text)
        if bad is not None:
            raise InvalidBase16HashError(
                f"Invalid character {bad.group()!r} at position {bad.start()}"
            )
        value = bytes.fromhex(text)
    elif length == base32_len:
        try:
            value = from_nix_base32(text)
        except ValueError:
            raise InvalidBase32HashError() from None
    else:
        raise InvalidHashStringLengthError(typ, base16_len, base32_len, length)

    if len(value) != expected_bytes:
        raise InvalidBase32HashError()
    return value


@dataclass(frozen=True)
class Hash:
    """A SHA-256 hash."""

    digest: bytes
    algorithm: str = "sha256"

    def __post_init__(self) -> None:
        if self.algorithm != "sha256":
            raise UnsupportedHashAlgorithmError(self.algorithm)
        if len(self.digest) != 32:
            raise ValueError(f"SHA-256 digest must be 32 bytes, got {len(self.digest)}")
        object.__setattr__(self, "digest", bytes(self.digest))

    @classmethod
    def sha256_from_bytes(cls, data: bytes) -> Hash:
        """Hashes a byte string with SHA-256."""
        return cls(hashlib.sha256(data).digest())

    @classmethod
    def from_typed(cls, text: str) -> Hash:
        """Parses a typed hash such as ``sha256:<hex or base32>``."""
        typ, colon, rest = text.partition(":")
        if not colon:
            raise NoColonSeparatorError()
        if typ != "sha256":
            raise UnsupportedHashAlgorithmError(typ)
        return cls(_decode_hash(rest, "SHA-256", 32))

    def to_typed_base32(self) -> str:
        """Returns the hash in Nix base32, prefixed by its type."""
        return f"{self.algorithm}:{to_nix_base32(self.digest)}"

    def to_typed_base16(self) -> str:
        """Returns the hash in hexadecimal, prefixed by its type."""
        return f"{self.algorithm}:{self.digest.hex()}"

    def __str__(self) -> str:
        return self.to_typed_base16()