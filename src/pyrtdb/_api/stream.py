"""Realtime event stream adapter.

Consumes the Server-Sent Events of a reference and applies the delivery
policy: comments are dropped, ``keep-alive`` events are dropped unless the
caller opts in, and a ``null`` payload becomes ``None``.  A transport
error ends the stream; reconnection is left to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable

from pyrtdb._constants import KEEP_ALIVE_EVENT, NULL_PAYLOAD
from pyrtdb._redact import redact_url
from pyrtdb._sse import SseEvent, SseMessage, iter_sse
from pyrtdb._transport import Transport
from pyrtdb.exceptions import RtdbStreamError
from pyrtdb.models import StreamEvent
from pyrtdb.reference import Reference

_logger = logging.getLogger(__name__)

EventCallback = Callable[[str, str | None], None]
ErrorCallback = Callable[[RtdbStreamError], None]


def to_stream_event(message: SseMessage, *, keep_alive_friendly: bool = False) -> StreamEvent | None:
    """Map one SSE message to a domain event, or ``None`` when it is filtered out."""
    if not isinstance(message, SseEvent):
        return None
    if message.event_type == KEEP_ALIVE_EVENT and not keep_alive_friendly:
        return None
    data = None if message.data == NULL_PAYLOAD else message.data
    return StreamEvent(event_type=message.event_type, data=data)


async def stream_events(
    transport: Transport,
    reference: Reference,
    *,
    keep_alive_friendly: bool = False,
) -> AsyncIterator[StreamEvent]:
    """Open a new stream on *reference* and yield filtered events in arrival order.

    Each call opens a fresh connection.  Iteration ends when the server
    closes the stream and raises :class:`~pyrtdb.exceptions.RtdbStreamError`
    on a connection failure.
    """
    _logger.debug("Listening on %s", redact_url(reference.url))
    lines = transport.stream(reference.url, headers={})
    async for message in iter_sse(lines):
        event = to_stream_event(message, keep_alive_friendly=keep_alive_friendly)
        if event is not None:
            yield event
    _logger.debug("Event stream on %s closed by server", redact_url(reference.url))


async def listen(
    transport: Transport,
    reference: Reference,
    on_event: EventCallback,
    on_error: ErrorCallback,
    *,
    keep_alive_friendly: bool = False,
) -> None:
    """Deliver events to *on_event* until the stream ends.

    A stream error is passed to *on_error* once and ends listening.
    Callbacks may be any callable, including closures and bound methods.
    """
    try:
        async for event in stream_events(transport, reference, keep_alive_friendly=keep_alive_friendly):
            on_event(event.event_type, event.data)
    except RtdbStreamError as exc:
        _logger.debug("Event stream on %s failed: %s", redact_url(reference.url), exc)
        on_error(exc)
