from __future__ import annotations


class RequestError(Exception):
    """
    Base class for every error raised by the store.

    `kind` is a stable identifier callers can branch on without matching
    message text.
    """

    kind = "Request"
    default_message = "Request failed."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(kind={self.kind!r}, message={self.message!r})"


class PathTraversalError(RequestError):
    kind = "PathTraversal"
    default_message = "Path traversal attempt detected."


class InvalidFilenameError(RequestError):
    kind = "InvalidFilename"
    default_message = "Invalid filename: Null bytes are not allowed."


class InvalidKeyLengthError(RequestError):
    kind = "InvalidKeyLength"
    default_message = "Encryption key must be 32 bytes (64 hex characters)."


class MalformedEnvelopeError(RequestError):
    kind = "MalformedEnvelope"
    default_message = "Decryption failed: Invalid encrypted text format."


class DecryptionFailedError(RequestError):
    kind = "DecryptionFailed"
    default_message = "Decryption failed: wrong key or corrupted data."


class CorruptedJsonError(RequestError):
    kind = "CorruptedJson"
    default_message = "Failed to parse database content as JSON."


class IoFailureError(RequestError):
    kind = "IoFailure"
    default_message = "Failed to access database file."


class KeyNotFoundError(RequestError):
    kind = "KeyNotFound"
    default_message = "Key not found."


__all__ = [
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
