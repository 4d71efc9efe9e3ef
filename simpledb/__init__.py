from __future__ import annotations

from .codec import EnvelopeCodec, PlainCodec, make_codec
from .database import Database
from .errors import (
    CorruptedJsonError,
    DecryptionFailedError,
    InvalidFilenameError,
    InvalidKeyLengthError,
    IoFailureError,
    KeyNotFoundError,
    MalformedEnvelopeError,
    PathTraversalError,
    RequestError,
)
from .interfaces import KeyValueStore, Result
from .settings import DatabaseOptions, Settings, configure_logging, get_settings

__all__ = [
    "Database",
    "DatabaseOptions",
    "Settings",
    "get_settings",
    "configure_logging",
    "KeyValueStore",
    "Result",
    "EnvelopeCodec",
    "PlainCodec",
    "make_codec",
    "RequestError",
    "PathTraversalError",
    "InvalidFilenameError",
    "InvalidKeyLengthError",
    "MalformedEnvelopeError",
    "DecryptionFailedError",
    "CorruptedJsonError",
    "IoFailureError",
    "KeyNotFoundError",
]
