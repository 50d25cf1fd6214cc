"""Exception hierarchy for content addressing, chains and codecs."""

from __future__ import annotations


class IpldError(Exception):
    """Base class for every error raised by this package."""


class ChainValidationError(IpldError):
    """A chain link points at a different CID than the expected one."""

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(
            f"chain validation failed: expected previous CID {expected!r}, got {actual!r}"
        )
        self.expected = expected
        self.actual = actual


class SequenceValidationError(IpldError):
    """A chain item carries the wrong sequence number."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"sequence validation failed: expected {expected}, got {actual}"
        )
        self.expected = expected
        self.actual = actual


class InvalidCidError(IpldError, ValueError):
    """A CID could not be parsed or does not match its content."""


class InvalidCodecRangeError(IpldError, ValueError):
    """A custom codec code lies outside the reserved custom range."""

    def __init__(self, code: int) -> None:
        super().__init__(
            f"codec 0x{code:x} is outside the custom range 0x300000-0x3fffff"
        )
        self.code = code


class MultihashError(IpldError, ValueError):
    """A multihash is malformed."""


class CborError(IpldError):
    """CBOR encoding or decoding failed."""


class SerializationError(IpldError):
    """JSON encoding or decoding failed."""