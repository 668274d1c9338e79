from pathlib import PurePosixPath

import pytest

from attic.errors import (
    AtticError,
    HashError,
    InvalidCacheNameError,
    InvalidStorePathError,
    InvalidStorePathHashError,
    InvalidStorePathNameError,
    SigningError,
)


@pytest.mark.parametrize(
    "error, expected",
    [
        (InvalidStorePathError("/nix/store", "Path is too short"), "InvalidStorePath"),
        (
            InvalidStorePathNameError("bad", "Name is of invalid format"),
            "InvalidStorePathName",
        ),
        (
            InvalidStorePathHashError("bad", "Hash is of invalid length"),
            "InvalidStorePathHash",
        ),
        (InvalidCacheNameError("-ers"), "InvalidCacheName"),
        (SigningError("bad signature"), "SigningError"),
        (HashError("bad hash"), "HashError"),
    ],
)
def test_names(error, expected):
    assert error.name() == expected
    assert isinstance(error, AtticError)


def test_invalid_cache_name_message():
    error = InvalidCacheNameError("bad name")
    assert str(error) == 'Invalid cache name "bad name"'
    assert error.cache_name == "bad name"


def test_invalid_store_path_message():
    error = InvalidStorePathError("/nix/store", "Path is store directory itself")
    assert str(error) == 'Invalid store path "/nix/store": Path is store directory itself'
    assert error.reason == "Path is store directory itself"


def test_store_path_accepts_path_objects():
    path = PurePosixPath("/gnu/store/abc")
    error = InvalidStorePathError(path, "Path is not in store directory")
    assert error.path == path
    assert "/gnu/store/abc" in str(error)


def test_store_path_name_with_raw_bytes():
    error = InvalidStorePathNameError(b"abc-\xc3", "Name contains non-UTF-8 characters")
    assert str(error).startswith("Invalid store path base name")
    assert str(error).endswith("Name contains non-UTF-8 characters")
    assert error.base_name == b"abc-\xc3"


def test_store_path_hash_attributes():
    error = InvalidStorePathHashError("xyz", "Hash is of invalid format")
    assert error.hash == "xyz"
    assert str(error).endswith("Hash is of invalid format")


def test_hash_error_message():
    assert str(HashError("boom")) == "Hashing error: boom"


def test_signing_error_caught_as_base():
    error = SigningError("wrong key")
    try:
        raise error
    except AtticError as caught:
        caught_error = caught
    assert caught_error.name() == "SigningError"
    assert caught_error.detail == "wrong key"
    assert str(caught_error) == str(error)
    assert str(caught_error).startswith("Signing error:")