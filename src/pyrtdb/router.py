"""Per-event-type handler registry for the realtime stream."""

from __future__ import annotations

import logging
from collections.abc import Callable

from pyrtdb.exceptions import RtdbHandlerExistsError

_logger = logging.getLogger(__name__)

Handler = Callable[[str | None], None]


class EventRouter:
    """Dispatch stream events to one handler per event type.

    The router is itself an ``on_event`` callback::

        router = EventRouter()
        router.register("put", lambda data: print("put", data))
        router.register("patch", on_patch)
        await client.listen(ref, router, on_error)

    Events without a registered handler go to *fallback* when given and
    are otherwise ignored.
    """

    def __init__(self, fallback: Callable[[str, str | None], None] | None = None) -> None:
        self._handlers: dict[str, Handler] = {}
        self._fallback = fallback

    def register(self, event_type: str, handler: Handler) -> None:
        if event_type in self._handlers:
            raise RtdbHandlerExistsError(f"A handler for {event_type!r} is already registered")
        self._handlers[event_type] = handler

    def unregister(self, event_type: str) -> None:
        self._handlers.pop(event_type, None)

    @property
    def event_types(self) -> frozenset[str]:
        return frozenset(self._handlers)

    def __call__(self, event_type: str, data: str | None) -> None:
        handler = self._handlers.get(event_type)
        if handler is not None:
            handler(data)
        elif self._fallback is not None:
            self._fallback(event_type, data)
        else:
            _logger.debug("No handler for %s event", event_type)
