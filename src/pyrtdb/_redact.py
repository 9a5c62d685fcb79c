"""Helpers for safe debug logging.

Every request URL may carry the database secret in its ``auth`` query
parameter, and payloads are user data of arbitrary size.  This module
redacts both before they are emitted in DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from yarl import URL

from pyrtdb._constants import AUTH

_REDACTED = "<redacted>"

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "auth",
        "password",
        "secret",
        "token",
        "idtoken",
        "refreshtoken",
        "accesstoken",
        "authorization",
        "cookie",
    }
)


def redact_url(url: URL | str) -> str:
    """Return *url* as text with the ``auth`` query value masked."""
    parsed = url if isinstance(url, URL) else URL(url)
    if AUTH not in parsed.query:
        return str(parsed)
    return str(parsed.update_query({AUTH: _REDACTED}))


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs."""
    if _depth > 20:
        return "<max-depth>"

    if value is None:
        return None

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, bytes):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            if key.lower() in _SENSITIVE_VALUE_KEYS:
                redacted[key] = _REDACTED
            else:
                redacted[key] = redact_for_log(v, max_string=max_string, _depth=_depth + 1)
        return redacted

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    return repr(value)
