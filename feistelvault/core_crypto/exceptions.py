"""
Error types raised by the cipher engine.

Every error subclasses ValueError so callers that treat bad input as a
ValueError keep working.
"""


class CipherError(ValueError):
    """Base class for all cipher engine errors."""


class InvalidBlockSize(CipherError):
    """A block, IV or block-mode ciphertext has the wrong length."""


class InvalidPadding(CipherError):
    """Trailing padding bytes are inconsistent with the length byte."""


class MalformedEnvelope(CipherError):
    """A transport envelope could not be parsed."""


class DecryptionError(CipherError):
    """
    Decryption failed.

    Raised by the high-level cipher in place of InvalidPadding and text
    decoding failures so that the cause is not observable by the caller.
    """
