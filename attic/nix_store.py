"""Store paths and store path hashes."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import List, Optional, Union

from .errors import (
    InvalidStorePathError,
    InvalidStorePathHashError,
    InvalidStorePathNameError,
)
from .hash import Hash

PathInput = Union[str, bytes, "os.PathLike[str]", "os.PathLike[bytes]"]

STORE_PATH_HASH_LEN = 32
"""Length of the hash in a store path."""

STORE_PATH_HASH_REGEX_FRAGMENT = "[0123456789abcdfghijklmnpqrsvwxyz]{32}"
"""Regex that matches a store path hash, without anchors."""

_STORE_PATH_HASH_RE = re.compile(STORE_PATH_HASH_REGEX_FRAGMENT)

# The name part allows A-Za-z0-9 and the range '+'..'.' as well as '_', '?' and '='.
_STORE_BASE_NAME_RE = re.compile(r"[0123456789abcdfghijklmnpqrsvwxyz]{32}-[A-Za-z0-9+-._?=]+")


def _utf8_text(value: PathInput) -> Optional[str]:
    """Returns the value as UTF-8 text, or None if it is not valid UTF-8."""
    raw = os.fspath(value)
    try:
        if isinstance(raw, bytes):
            return raw.decode("utf-8")
        raw.encode("utf-8")
        return raw
    except (UnicodeDecodeError, UnicodeEncodeError):
        return None


@dataclass(frozen=True)
class StorePathHash:
    """The fixed-length hash portion of a store path.

    It holds exactly 32 characters of Nix base32; 'e', 'o', 'u' and 't'
    never occur.
    """

    hash: str

    def __post_init__(self) -> None:
        if len(self.hash.encode("utf-8", "surrogatepass")) != STORE_PATH_HASH_LEN:
            raise InvalidStorePathHashError(self.hash, "Hash is of invalid length")
        if not _STORE_PATH_HASH_RE.fullmatch(self.hash):
            raise InvalidStorePathHashError(self.hash, "Hash is of invalid format")

    @classmethod
    def _unchecked(cls, hash: str) -> StorePathHash:
        obj = object.__new__(cls)
        object.__setattr__(obj, "hash", hash)
        return obj

    def as_str(self) -> str:
        """Returns the hash as a string."""
        return self.hash

    def __str__(self) -> str:
        return self.hash


@dataclass(frozen=True)
class StorePath:
    """A direct child of a store, identified by its base name.

    The base name is guaranteed to be of valid format; the path may or
    may not exist.
    """

    base_name: str

    def __post_init__(self) -> None:
        if _utf8_text(self.base_name) is None:
            raise InvalidStorePathNameError(
                self.base_name, "Name contains non-UTF-8 characters"
            )
        if not _STORE_BASE_NAME_RE.fullmatch(self.base_name):
            raise InvalidStorePathNameError(self.base_name, "Name is of invalid format")

    @classmethod
    def from_base_name(cls, base_name: PathInput) -> StorePath:
        """Creates a store path from a base name such as ``<hash>-<name>``."""
        text = _utf8_text(base_name)
        if text is None:
            raise InvalidStorePathNameError(
                base_name, "Name contains non-UTF-8 characters"
            )
        return cls(text)

    @classmethod
    def _unchecked(cls, base_name: str) -> StorePath:
        obj = object.__new__(cls)
        object.__setattr__(obj, "base_name", base_name)
        return obj

    def to_hash(self) -> StorePathHash:
        """Returns the hash portion of the store path."""
        return StorePathHash._unchecked(self.base_name[:STORE_PATH_HASH_LEN])

    def name(self) -> str:
        """Returns the human-readable name."""
        return self.base_name[STORE_PATH_HASH_LEN + 1 :]

    def __fspath__(self) -> str:
        return self.base_name

    def __str__(self) -> str:
        return self.base_name


@dataclass
class ValidPathInfo:
    """Information on a valid store path."""

    path: StorePath
    nar_hash: Hash
    nar_size: int
    references: List[str] = field(default_factory=list)
    sigs: List[str] = field(default_factory=list)
    ca: Optional[str] = None


def to_base_name(store_dir: PathInput, path: PathInput) -> str:
    """Returns the base name of a path relative to a store directory."""
    store = PurePosixPath(os.fsdecode(store_dir))
    full = PurePosixPath(os.fsdecode(path))

    try:
        remaining = full.relative_to(store)
    except ValueError:
        raise InvalidStorePathError(path, "Path is not in store directory") from None

    if not remaining.parts:
        raise InvalidStorePathError(path, "Path is store directory itself")

    first = remaining.parts[0]
    if len(os.fsencode(first)) < STORE_PATH_HASH_LEN:
        raise InvalidStorePathError(path, "Path is too short")
    return first