"""Error types shared across the package."""

from __future__ import annotations

import os
from typing import Union

PathValue = Union[str, bytes, "os.PathLike[str]", "os.PathLike[bytes]"]


def _display_path(value: PathValue) -> str:
    """Renders a path (possibly raw bytes) for an error message."""
    value = os.fspath(value)
    if isinstance(value, bytes):
        return value.decode("utf-8", "backslashreplace")
    return value


class AtticError(Exception):
    """Base class of all errors raised by the package."""

    _kind = "AtticError"

    def name(self) -> str:
        """Returns the short name of the kind of error."""
        return self._kind


class InvalidStorePathError(AtticError):
    """A path is not a valid path inside a store."""

    _kind = "InvalidStorePath"

    def __init__(self, path: PathValue, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f'Invalid store path "{_display_path(path)}": {reason}')


class InvalidStorePathNameError(AtticError):
    """A store path base name is malformed."""

    _kind = "InvalidStorePathName"

    def __init__(self, base_name: PathValue, reason: str) -> None:
        self.base_name = base_name
        self.reason = reason
        super().__init__(
            f'Invalid store path base name "{_display_path(base_name)}": {reason}'
        )


class InvalidStorePathHashError(AtticError):
    """A store path hash is malformed."""

    _kind = "InvalidStorePathHash"

    def __init__(self, hash: str, reason: str) -> None:
        self.hash = hash
        self.reason = reason
        super().__init__(f'Invalid store path hash "{hash}": {reason}')


class InvalidCacheNameError(AtticError):
    """A cache name or cache name pattern is malformed."""

    _kind = "InvalidCacheName"

    def __init__(self, cache_name: str) -> None:
        self.cache_name = cache_name
        super().__init__(f'Invalid cache name "{cache_name}"')


class SigningError(AtticError):
    """Base class of errors raised while signing or verifying."""

    _kind = "SigningError"

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Signing error: {detail}")


class HashError(AtticError):
    """Base class of errors raised while parsing hashes."""

    _kind = "HashError"

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Hashing error: {detail}")