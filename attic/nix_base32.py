"""The base32 encoding used by Nix for hashes."""

from __future__ import annotations

ALPHABET = "0123456789abcdfghijklmnpqrsvwxyz"

_REVERSE = {char: value for value, char in enumerate(ALPHABET)}


def to_nix_base32(data: bytes) -> str:
    """Encodes bytes in Nix base32 (least significant digit last)."""
    data = bytes(data)
    if not data:
        return ""
    length = (len(data) * 8 - 1) // 5 + 1
    value = int.from_bytes(data, "little")
    return "".join(ALPHABET[(value >> (5 * n)) & 0x1F] for n in reversed(range(length)))


def from_nix_base32(text: str) -> bytes:
    """Decodes a Nix base32 string.

    Raises ValueError on characters outside the alphabet or on
    non-zero bits beyond the decoded length.
    """
    size = len(text) * 5 // 8
    value = 0
    for n, char in enumerate(reversed(text)):
        digit = _REVERSE.get(char)
        if digit is None:
            raise ValueError(f"invalid character {char!r} in Nix base32 string")
        value |= digit << (5 * n)
    if value >> (8 * size):
        raise ValueError("Nix base32 string has non-zero trailing bits")
    return value.to_bytes(size, "little")