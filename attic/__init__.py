"""Core library for a Nix binary cache: cache names, store paths, hashes, signing, chunking and API bodies."""

__version__ = "0.1.0"