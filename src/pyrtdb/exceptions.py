"""Custom exception hierarchy for pyrtdb."""

from __future__ import annotations


class RtdbError(Exception):
    """Base exception for all pyrtdb errors."""


class RtdbUrlError(RtdbError):
    """A database URL could not be turned into a reference."""

    def __init__(self, message: str, *, url: str = "") -> None:
        self.url = url
        super().__init__(message)


class RtdbNotHttpsError(RtdbUrlError):
    """The URL protocol is not ``https``."""


class RtdbUrlParseError(RtdbUrlError):
    """The URL is not an absolute, parsable URL."""


class RtdbSerializeError(RtdbError):
    """A write was attempted without a body, or the body is not JSON-serialisable."""


class RtdbTransportError(RtdbError):
    """HTTP-level failure (network error or unexpected status)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class RtdbNotJsonError(RtdbError):
    """Response body is not the JSON value the caller asked for."""


class RtdbUtf8Error(RtdbNotJsonError):
    """Response body is not valid UTF-8 text."""


class RtdbNotFoundError(RtdbError):
    """A read succeeded but the body was ``null`` (no data at the location)."""

    def __init__(self, message: str, *, url: str = "") -> None:
        self.url = url
        super().__init__(message)


class RtdbLimitExceededError(RtdbError):
    """An atomic update would cross a caller-supplied bound.

    Raised before any write is attempted for the offending value.
    """

    def __init__(
        self,
        message: str,
        *,
        current: int | float,
        bound: int | float,
    ) -> None:
        self.current = current
        self.bound = bound
        super().__init__(message)


class RtdbStreamError(RtdbError):
    """Connection error on the realtime event stream."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class RtdbHandlerExistsError(RtdbError):
    """A handler is already registered for this event type."""
