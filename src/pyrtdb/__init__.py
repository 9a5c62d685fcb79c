"""pyrtdb - Async Python client for the Firebase Realtime Database REST API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyrtdb")
except PackageNotFoundError:
    __version__ = "0+local"
from pyrtdb.client import RtdbClient
from pyrtdb.config import RtdbConfig
from pyrtdb.exceptions import (
    RtdbError,
    RtdbHandlerExistsError,
    RtdbLimitExceededError,
    RtdbNotFoundError,
    RtdbNotHttpsError,
    RtdbNotJsonError,
    RtdbSerializeError,
    RtdbStreamError,
    RtdbTransportError,
    RtdbUrlError,
    RtdbUrlParseError,
    RtdbUtf8Error,
)
from pyrtdb.models import Method, Response, StreamEvent
from pyrtdb.params import QueryParams
from pyrtdb.reference import Reference
from pyrtdb.router import EventRouter

__all__ = [
    "__version__",
    "EventRouter",
    "Method",
    "QueryParams",
    "Reference",
    "Response",
    "RtdbClient",
    "RtdbConfig",
    "RtdbError",
    "RtdbHandlerExistsError",
    "RtdbLimitExceededError",
    "RtdbNotFoundError",
    "RtdbNotHttpsError",
    "RtdbNotJsonError",
    "RtdbSerializeError",
    "RtdbStreamError",
    "RtdbTransportError",
    "RtdbUrlError",
    "RtdbUrlParseError",
    "RtdbUtf8Error",
    "StreamEvent",
]
