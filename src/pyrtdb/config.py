"""Client configuration for pyrtdb."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyrtdb._constants import USER_AGENT


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class RtdbConfig:
    """Client configuration.

    Parameters
    ----------
    database_url : str
        Base URL of the database, e.g. ``https://<project>.firebaseio.com``.
        Must use ``https``.
    auth : str or None
        Static database secret or ID token sent as the ``auth`` query
        parameter on every request.  No refresh is performed.
    timeout : float
        Total timeout in seconds for a single REST request.
    stream_read_timeout : float
        Seconds of silence tolerated on the event stream before the
        connection is considered dead.  The server sends ``keep-alive``
        events every ~30 seconds.  Set to ``0`` to wait forever.
    user_agent : str
        ``User-Agent`` header value.
    api_trace_enabled : bool
        Log (redacted) request and response payloads at DEBUG level.
    """

    database_url: str
    auth: str | None = None
    timeout: float = 30.0
    stream_read_timeout: float = 90.0
    user_agent: str = USER_AGENT
    api_trace_enabled: bool = False

    @classmethod
    def from_env(cls, **overrides: Any) -> RtdbConfig:
        """Create configuration from environment variables.

        Reads ``RTDB_DATABASE_URL`` and the optional ``RTDB_*`` variables.
        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "RTDB_DATABASE_URL": "database_url",
            "RTDB_AUTH": "auth",
            "RTDB_USER_AGENT": "user_agent",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # numeric fields, handled separately
        timeout_env = env.get("RTDB_TIMEOUT")
        if timeout_env is not None and "timeout" not in overrides:
            config_kwargs["timeout"] = float(timeout_env)

        read_timeout_env = env.get("RTDB_STREAM_READ_TIMEOUT")
        if read_timeout_env is not None and "stream_read_timeout" not in overrides:
            config_kwargs["stream_read_timeout"] = float(read_timeout_env)

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("RTDB_API_TRACE_ENABLED"),
                False,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
