"""Data models for requests, responses and stream events."""

from pyrtdb.models.event import StreamEvent
from pyrtdb.models.method import Method
from pyrtdb.models.response import Response

__all__ = [
    "Method",
    "Response",
    "StreamEvent",
]
