"""Binary cache names and name patterns.

Cache names are up to 50 characters long, consist of ASCII letters,
digits, dashes, underscores and plus signs, and start with a letter or
digit. The plus sign separates a namespace from a user-given name
(e.g. ``alice+shared``).
"""

from __future__ import annotations

import json
import re
from typing import Optional, Pattern

from .errors import InvalidCacheNameError

MAX_NAME_LENGTH = 50

_NAME_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9\-_+]{0,49}")
_PATTERN_RE = re.compile(r"[A-Za-z0-9*][A-Za-z0-9\-_+*]{0,49}")


def _validate(name: object, allow_wildcards: bool) -> str:
    regex = _PATTERN_RE if allow_wildcards else _NAME_RE
    if not isinstance(name, str) or not regex.fullmatch(name):
        raise InvalidCacheNameError(str(name))
    return name


def _load_json_string(text: str | bytes) -> str:
    value = json.loads(text)
    if not isinstance(value, str):
        raise ValueError(f"expected a JSON string, got {type(value).__name__}")
    return value


class CacheName:
    """A validated cache name."""

    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        self._name = _validate(name, False)

    def as_str(self) -> str:
        """Returns the name as a string."""
        return self._name

    def to_pattern(self) -> CacheNamePattern:
        """Returns a pattern that matches exactly this cache."""
        return CacheNamePattern._exact(self._name)

    @classmethod
    def from_json(cls, text: str | bytes) -> CacheName:
        """Parses a cache name from a JSON string."""
        return cls(_load_json_string(text))

    def __str__(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"CacheName({self._name!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CacheName):
            return NotImplemented
        return self._name == other._name

    def __hash__(self) -> int:
        return hash(self._name)


def _compile_wildcard(pattern: str) -> Pattern[str]:
    return re.compile(".*".join(re.escape(part) for part in pattern.split("*")), re.DOTALL)


class CacheNamePattern:
    """A pattern of cache names, where '*' matches any sequence of characters."""

    __slots__ = ("_pattern", "_matcher")

    def __init__(self, pattern: str) -> None:
        self._pattern = _validate(pattern, True)
        self._matcher: Optional[Pattern[str]] = _compile_wildcard(pattern)

    @classmethod
    def _exact(cls, name: str) -> CacheNamePattern:
        obj = cls.__new__(cls)
        obj._pattern = name
        obj._matcher = None
        return obj

    def matches(self, name: CacheName) -> bool:
        """Tests whether the pattern matches a cache name."""
        text = name.as_str()
        if self._matcher is None:
            return self._pattern == text
        return self._matcher.fullmatch(text) is not None

    @classmethod
    def from_json(cls, text: str | bytes) -> CacheNamePattern:
        """Parses a pattern from a JSON string."""
        return cls(_load_json_string(text))

    def __str__(self) -> str:
        return self._pattern

    def __repr__(self) -> str:
        return f"CacheNamePattern({self._pattern!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CacheNamePattern):
            return NotImplemented
        return self._pattern == other._pattern

    def __hash__(self) -> int:
        return hash(self._pattern)