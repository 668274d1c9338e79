import json

import pytest

from attic.errors import SigningError
from attic.signing import (
    Base64DecodeError,
    InvalidPayloadLengthError,
    InvalidSigningKeyNameError,
    NixKeypair,
    NixPublicKey,
    SignatureError,
    SigningNoColonSeparatorError,
    WrongKeyNameError,
)

PUBLIC_KEY_TEXT = "example-cache-1:6NCHdD59X431o0gWypbMrAURkbJ16ZPMQFGspcDShjY="


def test_generate_key():
    keypair = NixKeypair.generate("attic-test")

    export_priv = keypair.export_keypair()
    export_pub = keypair.export_public_key()

    imported = NixKeypair.from_str(export_priv)
    assert imported.name == keypair.name
    assert imported == keypair

    imported_pub = NixPublicKey.from_str(export_pub)
    assert imported_pub.name == keypair.name
    assert imported_pub == keypair.to_public_key()

    again = NixPublicKey.from_str(imported_pub.export())
    assert again.name == keypair.name
    assert again.public == keypair.to_public_key().public


def test_keypair_json_round_trip():
    keypair = NixKeypair.generate("attic-test")
    text = json.dumps(keypair.export_keypair())
    restored = NixKeypair.from_str(json.loads(text))
    assert json.dumps(restored.export_keypair()) == text
    assert restored.export_public_key() == keypair.export_public_key()


def test_import_public_key():
    imported = NixPublicKey.from_str(PUBLIC_KEY_TEXT)
    assert imported.export() == PUBLIC_KEY_TEXT


def test_signing():
    keypair = NixKeypair.generate("attic-test")
    public = keypair.to_public_key()
    message = b"hello world"

    signature = keypair.sign(message)
    assert signature.startswith("attic-test:")

    keypair.verify(message, signature)
    public.verify(message, signature)

    with pytest.raises(SignatureError):
        keypair.verify(
            message,
            "attic-test:lo9EfNIL4eGRuNh7DTbAAffWPpI2SlYC/8uP7JnhgmfRIUNGhSbFe8qEaKN0mFS02TuhPpXFPNtRkFcCp0hGAQ==",
        )


def test_verify_tampered_message_fails():
    keypair = NixKeypair.generate("attic-test")
    signature = keypair.sign(b"hello world")
    with pytest.raises(SignatureError):
        keypair.to_public_key().verify(b"hello world!", signature)


def test_verify_wrong_key_name():
    keypair = NixKeypair.generate("attic-test")
    other = NixKeypair.generate("other-key")
    with pytest.raises(WrongKeyNameError) as info:
        keypair.verify(b"msg", other.sign(b"msg"))
    assert info.value.our_name == "attic-test"
    assert info.value.string_name == "other-key"


def test_no_colon_separator():
    with pytest.raises(SigningNoColonSeparatorError):
        NixPublicKey.from_str("no-separator-here")


def test_invalid_key_name():
    with pytest.raises(InvalidSigningKeyNameError):
        NixKeypair.generate("bad:name")
    with pytest.raises(InvalidSigningKeyNameError):
        NixKeypair.generate("")
    with pytest.raises(InvalidSigningKeyNameError):
        NixPublicKey.from_str(":6NCHdD59X431o0gWypbMrAURkbJ16ZPMQFGspcDShjY=")


def test_invalid_payload_length():
    with pytest.raises(InvalidPayloadLengthError) as info:
        NixKeypair.from_str(PUBLIC_KEY_TEXT)
    assert info.value.expected == 64
    assert info.value.actual == 32
    assert info.value.usage == "keypair"


def test_invalid_base64():
    with pytest.raises(Base64DecodeError):
        NixPublicKey.from_str("example-cache-1:not*base64")


def test_errors_are_signing_errors():
    with pytest.raises(SigningError) as info:
        NixPublicKey.from_str("missing-colon")
    assert info.value.name() == "SigningError"
    assert "colon" in str(info.value)