from __future__ import annotations

import base64
import binascii
import os
from typing import Protocol

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .errors import DecryptionFailedError, InvalidKeyLengthError, MalformedEnvelopeError

KEY_BYTES = 32
NONCE_BYTES = 12
TAG_BYTES = 16
FIELD_SEPARATOR = ":"


class Codec(Protocol):
    """
    Turns plaintext document text into a disk-ready blob and back.
    """

    def encode(self, plain_text: str) -> str:
        ...

    def decode(self, blob: str) -> str:
        ...


class PlainCodec(Codec):
    """Identity codec used when no encryption key is configured."""

    def encode(self, plain_text: str) -> str:
        return plain_text

    def decode(self, blob: str) -> str:
        return blob


class EnvelopeCodec(Codec):
    """
    AES-256-GCM envelope: `b64(nonce):b64(tag):b64(ciphertext)`.

    A fresh random nonce is drawn for every encode call.
    """

    def __init__(self, key: str | bytes):
        self._aead = AESGCM(parse_key(key))

    def __repr__(self) -> str:
        return "EnvelopeCodec(key=<redacted>)"

    def encode(self, plain_text: str) -> str:
        nonce = os.urandom(NONCE_BYTES)
        sealed = self._aead.encrypt(nonce, plain_text.encode("utf-8"), None)
        ciphertext, tag = sealed[:-TAG_BYTES], sealed[-TAG_BYTES:]
        return FIELD_SEPARATOR.join(_b64(part) for part in (nonce, tag, ciphertext))

    def decode(self, blob: str) -> str:
        fields = blob.strip().split(FIELD_SEPARATOR)
        if len(fields) != 3:
            raise MalformedEnvelopeError(
                f"Decryption failed: Invalid encrypted text format (expected 3 fields, got {len(fields)})."
            )
        nonce, tag, ciphertext = (_unb64(f) for f in fields)
        if len(nonce) != NONCE_BYTES:
            raise MalformedEnvelopeError(
                f"Decryption failed: Invalid encrypted text format (nonce must be {NONCE_BYTES} bytes)."
            )
        if len(tag) != TAG_BYTES:
            raise MalformedEnvelopeError(
                f"Decryption failed: Invalid encrypted text format (auth tag must be {TAG_BYTES} bytes)."
            )
        try:
            plain = self._aead.decrypt(nonce, ciphertext + tag, None)
        except InvalidTag as e:
            raise DecryptionFailedError() from e
        try:
            return plain.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecryptionFailedError("Decryption failed: plaintext is not valid UTF-8.") from e


def parse_key(key: str | bytes) -> bytes:
    """
    Accept a 64-char hex string or 32 raw bytes and return the raw key.

    Error messages never echo the key.
    """
    if isinstance(key, str):
        try:
            raw = bytes.fromhex(key.strip())
        except ValueError as e:
            raise InvalidKeyLengthError("Encryption key must be 32 bytes given as 64 hex characters.") from e
    else:
        raw = bytes(key)
    if len(raw) != KEY_BYTES:
        raise InvalidKeyLengthError(f"Encryption key must be 32 bytes, got {len(raw)}.")
    return raw


def make_codec(key: str | bytes | None) -> Codec:
    if key is None:
        return PlainCodec()
    return EnvelopeCodec(key)


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _unb64(field: str) -> bytes:
    try:
        return base64.b64decode(field, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedEnvelopeError("Decryption failed: Invalid encrypted text format (bad base64 field).") from e
