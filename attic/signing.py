"""Ed25519 signing and verification in the canonical ``name:base64`` format."""

from __future__ import annotations

import base64
import binascii
from typing import Optional, Tuple

import nacl.exceptions
import nacl.signing

from .errors import SigningError

_SEED_BYTES = 32
_PUBLIC_KEY_BYTES = 32
_KEYPAIR_BYTES = 64
_SIGNATURE_BYTES = 64


class SignatureError(SigningError):
    """A cryptographic operation failed."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Signature error: {reason}")


class WrongKeyNameError(SigningError):
    """The string names a different key."""

    def __init__(self, our_name: str, string_name: str) -> None:
        self.our_name = our_name
        self.string_name = string_name
        super().__init__(
            "The string has a wrong key name attached to it: "
            f'Our name is "{our_name}" and the string has "{string_name}"'
        )


class SigningNoColonSeparatorError(SigningError):
    """The string lacks a colon separator."""

    def __init__(self) -> None:
        super().__init__("The string lacks a colon separator.")


class BlankKeyNameError(SigningError):
    """The name portion of the string is blank."""

    def __init__(self) -> None:
        super().__init__("The name portion of the string is blank.")


class BlankPayloadError(SigningError):
    """The payload portion of the string is blank."""

    def __init__(self) -> None:
        super().__init__("The payload portion of the string is blank.")


class Base64DecodeError(SigningError):
    """The payload is not valid base64."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Base64 decode error: {reason}")


class InvalidPayloadLengthError(SigningError):
    """The decoded payload has the wrong length."""

    def __init__(self, expected: int, actual: int, usage: str) -> None:
        self.expected = expected
        self.actual = actual
        self.usage = usage
        super().__init__(
            f"Invalid base64 payload length: Expected {expected} ({usage}), got {actual}"
        )


class InvalidSigningKeyNameError(SigningError):
    """The key name is empty or contains a colon."""

    def __init__(self, key_name: str) -> None:
        self.key_name = key_name
        super().__init__(f'Invalid signing key name "{key_name}".')


def _validate_name(name: str) -> None:
    if not name or ":" in name:
        raise InvalidSigningKeyNameError(name)


def _b64decode(payload: str) -> bytes:
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise Base64DecodeError(str(exc)) from None
    if base64.b64encode(data).decode("ascii") != payload:
        raise Base64DecodeError("Non-canonical base64 encoding")
    return data


def _b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _decode_string(
    text: str, usage: str, expected_length: int, expected_name: Optional[str]
) -> Tuple[str, bytes]:
    """Splits ``name:payload`` and decodes the payload."""
    name, colon, payload = text.partition(":")
    if not colon:
        raise SigningNoColonSeparatorError()

    _validate_name(name)

    if expected_name is not None and expected_name != name:
        raise WrongKeyNameError(expected_name, name)

    data = _b64decode(payload)
    if len(data) != expected_length:
        raise InvalidPayloadLengthError(expected_length, len(data), usage)
    return name, data


def _verify(public: bytes, name: str, message: bytes, signature: str) -> None:
    _, sig = _decode_string(signature, "signature", _SIGNATURE_BYTES, name)
    try:
        nacl.signing.VerifyKey(public).verify(bytes(message), sig)
    except (nacl.exceptions.CryptoError, ValueError) as exc:
        raise SignatureError(str(exc) or "Signature verification failed") from None


class NixKeypair:
    """A named Ed25519 keypair for signing."""

    __slots__ = ("name", "_keypair")

    def __init__(self, name: str, keypair: bytes) -> None:
        _validate_name(name)
        if len(keypair) != _KEYPAIR_BYTES:
            raise InvalidPayloadLengthError(_KEYPAIR_BYTES, len(keypair), "keypair")
        self.name = name
        self._keypair = bytes(keypair)

    @classmethod
    def generate(cls, name: str) -> NixKeypair:
        """Generates a new random keypair."""
        _validate_name(name)
        key = nacl.signing.SigningKey.generate()
        return cls(name, bytes(key) + bytes(key.verify_key))

    @classmethod
    def from_str(cls, keypair: str) -> NixKeypair:
        """Imports a keypair from its canonical representation."""
        name, data = _decode_string(keypair, "keypair", _KEYPAIR_BYTES, None)
        return cls(name, data)

    @property
    def public_bytes(self) -> bytes:
        """The raw public key."""
        return self._keypair[_SEED_BYTES:]

    def export_keypair(self) -> str:
        """Returns the canonical representation: private then public key."""
        return f"{self.name}:{_b64encode(self._keypair)}"

    def export_public_key(self) -> str:
        """Returns the canonical representation of the public key."""
        return f"{self.name}:{_b64encode(self.public_bytes)}"

    def to_public_key(self) -> NixPublicKey:
        """Returns the public half of the keypair."""
        return NixPublicKey(self.name, self.public_bytes)

    def sign(self, message: bytes) -> str:
        """Signs a message, returning the canonical signature string."""
        key = nacl.signing.SigningKey(self._keypair[:_SEED_BYTES])
        signature = key.sign(bytes(message)).signature
        return f"{self.name}:{_b64encode(signature)}"

    def verify(self, message: bytes, signature: str) -> None:
        """Verifies a signature; raises SigningError if it is not valid."""
        _verify(self.public_bytes, self.name, message, signature)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NixKeypair):
            return NotImplemented
        return self.name == other.name and self._keypair == other._keypair

    def __hash__(self) -> int:
        return hash((self.name, self._keypair))

    def __repr__(self) -> str:
        return f"NixKeypair(name={self.name!r})"


class NixPublicKey:
    """A named Ed25519 public key for verification."""

    __slots__ = ("name", "public")

    def __init__(self, name: str, public: bytes) -> None:
        _validate_name(name)
        if len(public) != _PUBLIC_KEY_BYTES:
            raise InvalidPayloadLengthError(_PUBLIC_KEY_BYTES, len(public), "public key")
        self.name = name
        self.public = bytes(public)

    @classmethod
    def from_str(cls, public_key: str) -> NixPublicKey:
        """Imports a public key from its canonical representation."""
        name, data = _decode_string(public_key, "public key", _PUBLIC_KEY_BYTES, None)
        return cls(name, data)

    def export(self) -> str:
        """Returns the canonical representation of the public key."""
        return f"{self.name}:{_b64encode(self.public)}"

    def verify(self, message: bytes, signature: str) -> None:
        """Verifies a signature; raises SigningError if it is not valid."""
        _verify(self.public, self.name, message, signature)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NixPublicKey):
            return NotImplemented
        return self.name == other.name and self.public == other.public

    def __hash__(self) -> int:
        return hash((self.name, self.public))

    def __repr__(self) -> str:
        return f"NixPublicKey({self.export()!r})"