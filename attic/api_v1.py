"""Request and response bodies of the v1 API, with their JSON forms."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .cache import CacheName
from .hash import Hash
from .nix_store import StorePathHash
from .signing import NixKeypair

ATTIC_NAR_INFO = "X-Attic-Nar-Info"
"""Header containing the upload info."""

ATTIC_NAR_INFO_PREAMBLE_SIZE = "X-Attic-Nar-Info-Preamble-Size"
"""Header containing the size of the upload info at the beginning of the body."""

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1
_U32_MAX = 2**32 - 1


def _mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"{what} must be a JSON object, got {type(data).__name__}")
    return data


def _field(data: Mapping[str, Any], key: str) -> Any:
    if key not in data:
        raise ValueError(f"missing field `{key}`")
    return data[key]


def _str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"field `{key}` must be a string")
    return value


def _opt_str(value: Any, key: str) -> Optional[str]:
    return None if value is None else _str(value, key)


def _bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"field `{key}` must be a boolean")
    return value


def _int(value: Any, key: str, low: Optional[int] = None, high: Optional[int] = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field `{key}` must be an integer")
    if (low is not None and value < low) or (high is not None and value > high):
        raise ValueError(f"field `{key}` is out of range: {value}")
    return value


def _str_list(value: Any, key: str) -> List[str]:
    if not isinstance(value, list):
        raise ValueError(f"field `{key}` must be a list")
    return [_str(item, key) for item in value]


@dataclass(frozen=True)
class KeypairConfig:
    """Keypair of a cache: either generated by the server or given by the client."""

    keypair: Optional[NixKeypair] = None

    @classmethod
    def generate(cls) -> KeypairConfig:
        """Asks for a randomly generated keypair."""
        return cls(None)

    @property
    def is_generate(self) -> bool:
        """Whether the server should generate the keypair."""
        return self.keypair is None

    def to_json(self) -> Any:
        """Returns the JSON value of the configuration."""
        if self.keypair is None:
            return "Generate"
        return {"Keypair": self.keypair.export_keypair()}

    @classmethod
    def from_json(cls, value: Any) -> KeypairConfig:
        """Parses the JSON value of the configuration."""
        if value == "Generate":
            return cls.generate()
        if isinstance(value, Mapping) and len(value) == 1 and "Keypair" in value:
            return cls(NixKeypair.from_str(_str(value["Keypair"], "Keypair")))
        raise ValueError(f"invalid keypair configuration: {value!r}")


@dataclass(frozen=True)
class RetentionPeriodConfig:
    """Retention period of a cache; ``period`` None means the global default.

    A period of 0 seconds disables time-based garbage collection.
    """

    period: Optional[int] = None

    def __post_init__(self) -> None:
        if self.period is not None:
            _int(self.period, "Period", 0, _U32_MAX)

    @property
    def is_global(self) -> bool:
        """Whether the global default is used."""
        return self.period is None

    def to_json(self) -> Any:
        """Returns the JSON value of the configuration."""
        if self.period is None:
            return "Global"
        return {"Period": self.period}

    @classmethod
    def from_json(cls, value: Any) -> RetentionPeriodConfig:
        """Parses the JSON value of the configuration."""
        if value == "Global":
            return cls(None)
        if isinstance(value, Mapping) and len(value) == 1 and "Period" in value:
            return cls(_int(value["Period"], "Period", 0, _U32_MAX))
        raise ValueError(f"invalid retention period configuration: {value!r}")


@dataclass
class CreateCacheRequest:
    """Body of a request that creates a cache."""

    keypair: KeypairConfig
    is_public: bool
    store_dir: str
    priority: int
    upstream_cache_key_names: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Returns the JSON object of the request."""
        return {
            "keypair": self.keypair.to_json(),
            "is_public": self.is_public,
            "store_dir": self.store_dir,
            "priority": self.priority,
            "upstream_cache_key_names": list(self.upstream_cache_key_names),
        }

    @classmethod
    def from_dict(cls, data: Any) -> CreateCacheRequest:
        """Parses the JSON object of the request."""
        data = _mapping(data, "CreateCacheRequest")
        return cls(
            keypair=KeypairConfig.from_json(_field(data, "keypair")),
            is_public=_bool(_field(data, "is_public"), "is_public"),
            store_dir=_str(_field(data, "store_dir"), "store_dir"),
            priority=_int(_field(data, "priority"), "priority", _I32_MIN, _I32_MAX),
            upstream_cache_key_names=_str_list(
                _field(data, "upstream_cache_key_names"), "upstream_cache_key_names"
            ),
        )


@dataclass
class CacheConfig:
    """Configuration of a cache; None means the default or the current value."""

    keypair: Optional[KeypairConfig] = None
    substituter_endpoint: Optional[str] = None
    api_endpoint: Optional[str] = None
    public_key: Optional[str] = None
    is_public: Optional[bool] = None
    store_dir: Optional[str] = None
    priority: Optional[int] = None
    upstream_cache_key_names: Optional[List[str]] = None
    retention_period: Optional[RetentionPeriodConfig] = None

    @classmethod
    def blank(cls) -> CacheConfig:
        """Returns a configuration with every field unset."""
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        """Returns the JSON object, leaving out unset fields."""
        values: Dict[str, Any] = {
            "keypair": None if self.keypair is None else self.keypair.to_json(),
            "substituter_endpoint": self.substituter_endpoint,
            "api_endpoint": self.api_endpoint,
            "public_key": self.public_key,
            "is_public": self.is_public,
            "store_dir": self.store_dir,
            "priority": self.priority,
            "upstream_cache_key_names": (
                None
                if self.upstream_cache_key_names is None
                else list(self.upstream_cache_key_names)
            ),
            "retention_period": (
                None if self.retention_period is None else self.retention_period.to_json()
            ),
        }
        return {key: value for key, value in values.items() if value is not None}

    @classmethod
    def from_dict(cls, data: Any) -> CacheConfig:
        """Parses the JSON object; missing or null fields stay unset."""
        data = _mapping(data, "CacheConfig")

        def get(key: str) -> Any:
            return data.get(key)

        keypair = get("keypair")
        names = get("upstream_cache_key_names")
        retention = get("retention_period")
        is_public = get("is_public")
        priority = get("priority")
        return cls(
            keypair=None if keypair is None else KeypairConfig.from_json(keypair),
            substituter_endpoint=_opt_str(get("substituter_endpoint"), "substituter_endpoint"),
            api_endpoint=_opt_str(get("api_endpoint"), "api_endpoint"),
            public_key=_opt_str(get("public_key"), "public_key"),
            is_public=None if is_public is None else _bool(is_public, "is_public"),
            store_dir=_opt_str(get("store_dir"), "store_dir"),
            priority=(
                None if priority is None else _int(priority, "priority", _I32_MIN, _I32_MAX)
            ),
            upstream_cache_key_names=(
                None if names is None else _str_list(names, "upstream_cache_key_names")
            ),
            retention_period=(
                None if retention is None else RetentionPeriodConfig.from_json(retention)
            ),
        )


@dataclass
class GetMissingPathsRequest:
    """Asks which of the given store paths a cache lacks."""

    cache: CacheName
    store_path_hashes: List[StorePathHash] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Returns the JSON object of the request."""
        return {
            "cache": self.cache.as_str(),
            "store_path_hashes": [h.as_str() for h in self.store_path_hashes],
        }

    @classmethod
    def from_dict(cls, data: Any) -> GetMissingPathsRequest:
        """Parses the JSON object of the request."""
        data = _mapping(data, "GetMissingPathsRequest")
        hashes = _str_list(_field(data, "store_path_hashes"), "store_path_hashes")
        return cls(
            cache=CacheName(_str(_field(data, "cache"), "cache")),
            store_path_hashes=[StorePathHash(h) for h in hashes],
        )


@dataclass
class GetMissingPathsResponse:
    """The store paths that are not in the cache."""

    missing_paths: List[StorePathHash] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Returns the JSON object of the response."""
        return {"missing_paths": [h.as_str() for h in self.missing_paths]}

    @classmethod
    def from_dict(cls, data: Any) -> GetMissingPathsResponse:
        """Parses the JSON object of the response."""
        data = _mapping(data, "GetMissingPathsResponse")
        hashes = _str_list(_field(data, "missing_paths"), "missing_paths")
        return cls(missing_paths=[StorePathHash(h) for h in hashes])


@dataclass
class UploadPathNarInfo:
    """NAR information sent along with an upload.

    It travels either in the ``X-Attic-Nar-Info`` header or as a JSON
    preamble of the body whose size is given in
    ``X-Attic-Nar-Info-Preamble-Size``.
    """

    cache: CacheName
    store_path_hash: StorePathHash
    store_path: str
    references: List[str]
    system: Optional[str]
    deriver: Optional[str]
    sigs: List[str]
    ca: Optional[str]
    nar_hash: Hash
    nar_size: int

    def to_dict(self) -> Dict[str, Any]:
        """Returns the JSON object; the hash is in typed hexadecimal form."""
        return {
            "cache": self.cache.as_str(),
            "store_path_hash": self.store_path_hash.as_str(),
            "store_path": self.store_path,
            "references": list(self.references),
            "system": self.system,
            "deriver": self.deriver,
            "sigs": list(self.sigs),
            "ca": self.ca,
            "nar_hash": self.nar_hash.to_typed_base16(),
            "nar_size": self.nar_size,
        }

    @classmethod
    def from_dict(cls, data: Any) -> UploadPathNarInfo:
        """Parses the JSON object; the hash may be hexadecimal or base32."""
        data = _mapping(data, "UploadPathNarInfo")
        return cls(
            cache=CacheName(_str(_field(data, "cache"), "cache")),
            store_path_hash=StorePathHash(
                _str(_field(data, "store_path_hash"), "store_path_hash")
            ),
            store_path=_str(_field(data, "store_path"), "store_path"),
            references=_str_list(_field(data, "references"), "references"),
            system=_opt_str(data.get("system"), "system"),
            deriver=_opt_str(data.get("deriver"), "deriver"),
            sigs=_str_list(_field(data, "sigs"), "sigs"),
            ca=_opt_str(data.get("ca"), "ca"),
            nar_hash=Hash.from_typed(_str(_field(data, "nar_hash"), "nar_hash")),
            nar_size=_int(_field(data, "nar_size"), "nar_size", 0),
        )


class UploadPathResultKind(enum.Enum):
    """What happened to an uploaded path."""

    UPLOADED = "Uploaded"
    DEDUPLICATED = "Deduplicated"

    @classmethod
    def default(cls) -> UploadPathResultKind:
        """The kind assumed when the server reports an unknown one."""
        return cls.UPLOADED


@dataclass
class UploadPathResult:
    """Result of an upload."""

    kind: UploadPathResultKind = UploadPathResultKind.UPLOADED
    file_size: Optional[int] = None
    frac_deduplicated: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Returns the JSON object; an unset file size is left out."""
        result: Dict[str, Any] = {"kind": self.kind.value}
        if self.file_size is not None:
            result["file_size"] = self.file_size
        result["frac_deduplicated"] = self.frac_deduplicated
        return result

    @classmethod
    def from_dict(cls, data: Any) -> UploadPathResult:
        """Parses the JSON object; an unrecognised kind falls back to the default."""
        data = _mapping(data, "UploadPathResult")
        raw_kind = _field(data, "kind")
        try:
            kind = UploadPathResultKind(raw_kind)
        except (ValueError, TypeError):
            kind = UploadPathResultKind.default()

        file_size = data.get("file_size")
        frac = data.get("frac_deduplicated")
        if frac is not None:
            if isinstance(frac, bool) or not isinstance(frac, (int, float)):
                raise ValueError("field `frac_deduplicated` must be a number")
            frac = float(frac)
        return cls(
            kind=kind,
            file_size=None if file_size is None else _int(file_size, "file_size", 0),
            frac_deduplicated=frac,
        )