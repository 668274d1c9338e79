# attic

The building blocks of a self-hostable Nix binary cache, as a plain Python
library. It validates cache names and Nix store paths, parses and prints
hashes in the formats Nix uses, signs and verifies with Nix-compatible
Ed25519 keys, splits byte streams into content-defined chunks, and reads and
writes the JSON bodies of the v1 cache API.

## Installing

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Cache names

A cache name is up to 50 characters of `A-Za-z0-9`, `-`, `_` and `+`, and
starts with an alphanumeric character. Patterns (`CacheNamePattern`) may also
contain `*`, which matches any run of characters.

```python
from attic.cache import CacheName, CacheNamePattern

name = CacheName("username+cache")
pattern = CacheNamePattern("username+*")
assert pattern.matches(name)
assert name.to_pattern().matches(name)
```

An invalid name or pattern raises `attic.errors.InvalidCacheNameError`.
`CacheName.from_json` and `CacheNamePattern.from_json` parse a JSON string.

## Store paths

```python
from attic.nix_store import StorePath, to_base_name

base = to_base_name("/nix/store", "/nix/store/ia70ss13m22znbl8khrf2hq72qmh5drr-ruby-2.7.5/bin/ruby")
path = StorePath.from_base_name(base)
path.to_hash().as_str()   # "ia70ss13m22znbl8khrf2hq72qmh5drr"
path.name()               # "ruby-2.7.5"
```

`to_base_name` raises `InvalidStorePathError` for paths outside the store
directory, for the store directory itself and for names too short to hold a
hash. `StorePath` and `StorePathHash` raise `InvalidStorePathNameError` and
`InvalidStorePathHashError` for malformed input. `ValidPathInfo` is a plain
record of a path, its NAR hash and size, references, signatures and content
address.

## Hashes

`Hash.from_typed` accepts `sha256:` followed by either 64 hexadecimal
characters or 52 characters of Nix base32 (`attic.nix_base32` holds the
encoder and decoder).

```python
from attic.hash import Hash

h = Hash.sha256_from_bytes(b"hello world")
h.to_typed_base16()
# "sha256:b94d27b9934d3e08a52e52d7da7dabfac484efe37a5380ee9088f7ace2efcde9"
assert Hash.from_typed(h.to_typed_base32()) == h
```

Parse failures raise subclasses of `attic.errors.HashError`, such as
`NoColonSeparatorError` or `InvalidHashStringLengthError`.

## Signing

Keys and signatures use the `name:base64payload` format understood by Nix.

```python
from attic.signing import NixKeypair, NixPublicKey

keypair = NixKeypair.generate("my-cache-1")
signature = keypair.sign(b"message")

public = NixPublicKey.from_str(keypair.export_public_key())
public.verify(b"message", signature)   # raises SigningError on a bad signature
```

`NixKeypair.export_keypair` and `NixKeypair.from_str` round-trip the
64-byte private-plus-public payload.

## Streams and chunking

- `attic.chunking.chunk_stream(stream, min_size, avg_size, max_size)` splits a
  reader (its `read` may be plain or async) into content-defined chunks with
  FastCDC and yields them asynchronously; `find_chunks` returns the
  `(offset, length)` boundaries within a byte string.
- `attic.streams.merge_chunks(chunks, streamer, streamer_arg, num_prefetch)`
  joins per-chunk streams into one asynchronous byte stream, starting up to
  `num_prefetch` streamers ahead; `read_chunk_async` reads greedily up to a
  given size.
- `attic.hash_reader.HashReader` wraps a reader and a hashlib-style digest;
  after end of input, `finalized()` returns the digest and the byte count.
- `attic.util.Finally` schedules an awaitable on the running loop when closed,
  used as a context manager, or dropped, unless `cancel()` was called.

## API bodies

`attic.api_v1` holds the request and response bodies of the v1 API as
dataclasses with `to_dict` and `from_dict`: `CreateCacheRequest`,
`CacheConfig`, `GetMissingPathsRequest`, `GetMissingPathsResponse`,
`UploadPathNarInfo` and `UploadPathResult`, along with `KeypairConfig`,
`RetentionPeriodConfig` and `UploadPathResultKind`. It also names the
`X-Attic-Nar-Info` and `X-Attic-Nar-Info-Preamble-Size` headers.

## Errors

Validation errors for names, store paths, hashes and keys derive from
`attic.errors.AtticError`, whose `name()` gives the kind of failure. Bad
arguments to the chunking and stream helpers and malformed API bodies raise
`ValueError`.

## What it does not do

This is a library only. It does not talk to a local Nix store or daemon, so
it cannot dump NARs, compute closures or query path information; it provides
no cache server, no client and no command-line tool.