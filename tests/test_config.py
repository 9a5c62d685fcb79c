from __future__ import annotations

import pytest

from pyrtdb.config import RtdbConfig


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RTDB_DATABASE_URL", "https://my-db.firebaseio.com")
    monkeypatch.setenv("RTDB_AUTH", "secret")
    monkeypatch.setenv("RTDB_TIMEOUT", "5")
    monkeypatch.setenv("RTDB_STREAM_READ_TIMEOUT", "0")
    monkeypatch.setenv("RTDB_API_TRACE_ENABLED", "yes")

    config = RtdbConfig.from_env()

    assert config.database_url == "https://my-db.firebaseio.com"
    assert config.auth == "secret"
    assert config.timeout == 5.0
    assert config.stream_read_timeout == 0.0
    assert config.api_trace_enabled is True


def test_overrides_take_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RTDB_DATABASE_URL", "https://env-db.firebaseio.com")
    monkeypatch.setenv("RTDB_TIMEOUT", "5")
    monkeypatch.setenv("RTDB_API_TRACE_ENABLED", "1")

    config = RtdbConfig.from_env(
        database_url="https://other-db.firebaseio.com",
        timeout=12.5,
        api_trace_enabled=False,
    )

    assert config.database_url == "https://other-db.firebaseio.com"
    assert config.timeout == 12.5
    assert config.api_trace_enabled is False


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("RTDB_AUTH", "RTDB_TIMEOUT", "RTDB_STREAM_READ_TIMEOUT", "RTDB_API_TRACE_ENABLED", "RTDB_USER_AGENT"):
        monkeypatch.delenv(name, raising=False)

    config = RtdbConfig.from_env(database_url="https://my-db.firebaseio.com")

    assert config.auth is None
    assert config.timeout == 30.0
    assert config.api_trace_enabled is False
