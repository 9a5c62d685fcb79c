"""JSON decoding shared by response and event models."""

from __future__ import annotations

import json
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from pyrtdb.exceptions import RtdbNotJsonError

T = TypeVar("T")


def decode_json(text: str, *, source: str = "body") -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise RtdbNotJsonError(f"Invalid JSON in {source}: {text[:128]}") from exc


def decode_as(text: str, type_: type[T], *, source: str = "body") -> T:
    """Decode *text* as JSON and validate it into *type_*.

    *type_* may be anything pydantic can validate: a ``BaseModel``
    subclass, a builtin, or a generic alias such as ``dict[str, User]``.
    """
    try:
        return TypeAdapter(type_).validate_json(text)
    except ValidationError as exc:
        raise RtdbNotJsonError(f"{source} does not match {type_!r}: {exc}") from exc
