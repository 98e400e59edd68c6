"""Encoding error classes.

Every failure that crosses the public boundary is one of four kinds:
invalid caller input, fatal misconfiguration, a recoverable transport
fault, or a capability that is intentionally not implemented yet.
"""


class EncodingError(Exception):
    """Base error for all encoding operations."""

    kind = "encoding"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def retryable(self) -> bool:
        """Whether retrying the whole encode call may succeed."""
        return False

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class InvalidInputError(EncodingError):
    """Caller data is structurally wrong (unknown protocol, bad splits, ...)."""

    kind = "invalid_input"


class FatalEncodingError(EncodingError):
    """Internal misconfiguration or invariant violation."""

    kind = "fatal"


class RecoverableEncodingError(EncodingError):
    """Transient failure of an external dependency (RPC, quote service)."""

    kind = "recoverable"

    @property
    def retryable(self) -> bool:
        return True


class NotImplementedEncodingError(EncodingError):
    """Capability that exists in the type system but is not implemented."""

    kind = "not_implemented"


__all__ = [
    "EncodingError",
    "InvalidInputError",
    "FatalEncodingError",
    "RecoverableEncodingError",
    "NotImplementedEncodingError",
]
