import pytest

from attic.errors import (
    InvalidStorePathError,
    InvalidStorePathHashError,
    InvalidStorePathNameError,
)
from attic.hash import Hash
from attic.nix_store import StorePath, StorePathHash, ValidPathInfo, to_base_name


@pytest.mark.parametrize(
    "store, path, expected",
    [
        (
            "/nix/store",
            "/nix/store/3iq73s1p4mh4mrflj2k1whkzsimxf0l7-firefox-91.0",
            "3iq73s1p4mh4mrflj2k1whkzsimxf0l7-firefox-91.0",
        ),
        (
            "/gnu/store",
            "/gnu/store/3iq73s1p4mh4mrflj2k1whkzsimxf0l7-firefox-91.0/",
            "3iq73s1p4mh4mrflj2k1whkzsimxf0l7-firefox-91.0",
        ),
        (
            "/nix/store",
            "/nix/store/3iq73s1p4mh4mrflj2k1whkzsimxf0l7-firefox-91.0/bin/firefox",
            "3iq73s1p4mh4mrflj2k1whkzsimxf0l7-firefox-91.0",
        ),
    ],
)
def test_to_base_name(store, path, expected):
    assert to_base_name(store, path) == expected


@pytest.mark.parametrize(
    "store, path, reason",
    [
        (
            "/gnu/store",
            "/nix/store/3iq73s1p4mh4mrflj2k1whkzsimxf0l7-firefox-91.0",
            "Path is not in store directory",
        ),
        ("/nix/store", "/nix/store", "Path is store directory itself"),
        ("/nix/store", "/nix/store/", "Path is store directory itself"),
        ("/nix/store", "/nix/store/tooshort", "Path is too short"),
    ],
)
def test_to_base_name_errors(store, path, reason):
    with pytest.raises(InvalidStorePathError) as info:
        to_base_name(store, path)
    assert reason in info.value.reason


def test_base_name_valid():
    sp = StorePath.from_base_name("ia70ss13m22znbl8khrf2hq72qmh5drr-ruby-2.7.5")
    assert sp.base_name == "ia70ss13m22znbl8khrf2hq72qmh5drr-ruby-2.7.5"
    assert sp.name() == "ruby-2.7.5"
    assert sp.to_hash().as_str() == "ia70ss13m22znbl8khrf2hq72qmh5drr"


def test_base_name_invalid_utf8():
    with pytest.raises(InvalidStorePathNameError) as info:
        StorePath.from_base_name(b"ia70ss13m22znbl8khrf2hq72qmh5drr-\xc3")
    assert "non-UTF-8" in info.value.reason


@pytest.mark.parametrize(
    "base_name",
    [
        "eeeeeeeeeeeeeeeeeeeeeeeeeeeeeeee-ruby-2.7.5",
        "ia70ss13m22znbl8khrf2hq72qmh5drr-shocking!!!",
        "ia70ss13m22znbl8khrf2hq72qmh5drr-",
        "ia70ss13m22znbl8khrf2hq72qmh5drr",
        "ia70ss13m22znbl8khrf2hq",
    ],
)
def test_base_name_invalid(base_name):
    with pytest.raises(InvalidStorePathNameError) as info:
        StorePath.from_base_name(base_name)
    assert info.value.reason == "Name is of invalid format"


def test_base_name_from_bytes_matches_str():
    a = StorePath.from_base_name(b"ia70ss13m22znbl8khrf2hq72qmh5drr-ruby-2.7.5")
    b = StorePath.from_base_name("ia70ss13m22znbl8khrf2hq72qmh5drr-ruby-2.7.5")
    assert a == b
    assert len({a, b}) == 1


def test_store_path_hash_valid():
    h = StorePathHash("ia70ss13m22znbl8khrf2hq72qmh5drr")
    assert h.as_str() == "ia70ss13m22znbl8khrf2hq72qmh5drr"


@pytest.mark.parametrize(
    "value, reason",
    [
        ("eeeeeeeeeeeeeeeeeeeeeeeeeeeeeeee", "Hash is of invalid format"),
        ("IA70SS13M22ZNBL8KHRF2HQ72QMH5DRR", "Hash is of invalid format"),
        ("ia70ss13m22znbl8khrf2hq", "Hash is of invalid length"),
    ],
)
def test_store_path_hash_invalid(value, reason):
    with pytest.raises(InvalidStorePathHashError) as info:
        StorePathHash(value)
    assert info.value.reason == reason


def test_valid_path_info_fields():
    path = StorePath.from_base_name("544qcchwgcgpz3xi1bbml28f8jj6009p-attic-test-with-deps-b")
    info = ValidPathInfo(
        path=path,
        nar_hash=Hash.sha256_from_bytes(b"nar"),
        nar_size=3,
        references=["3k1wymic8p7h5pfcqfhh0jan8ny2a712-attic-test-with-deps-c-final"],
    )
    assert info.path.name() == "attic-test-with-deps-b"
    assert info.references == ["3k1wymic8p7h5pfcqfhh0jan8ny2a712-attic-test-with-deps-c-final"]
    assert info.sigs == []
    assert info.ca is None