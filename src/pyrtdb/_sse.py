"""Server-Sent Events framing.

Turns the decoded lines of a ``text/event-stream`` body into events and
comments, following the WHATWG event-stream interpretation rules: a blank
line dispatches the pending event, ``data`` lines are joined with ``\\n``,
and an event without data is discarded.
"""

from __future__ import annotations

from collections.abc import AsyncIterable, AsyncIterator
from dataclasses import dataclass

_DEFAULT_EVENT_TYPE = "message"


@dataclass(frozen=True)
class SseEvent:
    event_type: str
    data: str
    last_event_id: str | None = None


@dataclass(frozen=True)
class SseComment:
    text: str


SseMessage = SseEvent | SseComment


async def iter_sse(lines: AsyncIterable[str]) -> AsyncIterator[SseMessage]:
    """Frame *lines* (without terminators) into SSE messages, in arrival order."""
    event_type = ""
    data_lines: list[str] = []
    last_event_id: str | None = None

    async for line in lines:
        if not line:
            if data_lines:
                yield SseEvent(
                    event_type=event_type or _DEFAULT_EVENT_TYPE,
                    data="\n".join(data_lines),
                    last_event_id=last_event_id,
                )
            event_type = ""
            data_lines = []
            continue

        if line.startswith(":"):
            yield SseComment(text=line[1:].lstrip(" "))
            continue

        field, sep, value = line.partition(":")
        if sep and value.startswith(" "):
            value = value[1:]

        if field == "event":
            event_type = value
        elif field == "data":
            data_lines.append(value)
        elif field == "id" and "\0" not in value:
            last_event_id = value
        # "retry" and unknown fields carry nothing the adapter uses
