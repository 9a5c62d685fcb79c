"""Realtime stream events."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from pyrtdb.models._decode import decode_json


class StreamEvent(BaseModel):
    """A domain event delivered by the realtime stream.

    ``data`` is ``None`` when the server sent the literal ``null`` payload.
    For ``put``/``patch`` events the payload is a JSON object with ``path``
    and ``data`` keys.
    """

    model_config = ConfigDict(frozen=True)

    event_type: str
    data: str | None = None

    def decode(self) -> Any:
        if self.data is None:
            return None
        return decode_json(self.data, source=f"{self.event_type} event")
