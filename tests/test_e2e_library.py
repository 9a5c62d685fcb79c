from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator, Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest
from pydantic import BaseModel
from yarl import URL

from pyrtdb import (
    EventRouter,
    RtdbClient,
    RtdbConfig,
    RtdbError,
    RtdbLimitExceededError,
    RtdbNotFoundError,
    RtdbStreamError,
    StreamEvent,
)
from pyrtdb._transport import RawResponse


class User(BaseModel):
    username: str
    age: int = 0


@dataclass
class FakeDatabase:
    """In-memory stand-in for the REST endpoint, keyed by path without suffix."""

    data: dict[str, Any] = field(default_factory=dict)
    versions: dict[str, int] = field(default_factory=dict)
    requests: list[tuple[str, URL]] = field(default_factory=list)
    stream_lines: list[str] = field(default_factory=list)
    stream_fails: bool = False
    _next_id: int = 0

    @staticmethod
    def _key(url: URL) -> str:
        path = url.path.strip("/")
        return path[: -len(".json")] if path.endswith(".json") else path

    def _etag(self, key: str) -> str:
        return f"v{self.versions.get(key, 0)}"

    def _store(self, key: str, value: Any) -> None:
        self.data[key] = value
        self.versions[key] = self.versions.get(key, 0) + 1

    def _reply(self, status: int, key: str, value: Any) -> RawResponse:
        return RawResponse(status=status, headers={"ETag": self._etag(key)}, body=json.dumps(value).encode())

    async def request(
        self,
        method: str,
        url: URL,
        *,
        headers: Mapping[str, str],
        body: str | None = None,
    ) -> RawResponse:
        self.requests.append((method, url))
        await asyncio.sleep(0)
        key = self._key(url)

        if_match = headers.get("if-match")
        if if_match is not None and if_match != self._etag(key):
            return self._reply(412, key, self.data.get(key))

        if method == "GET":
            return self._reply(200, key, self.data.get(key))
        if method == "PUT":
            self._store(key, json.loads(body or "null"))
            return self._reply(200, key, self.data[key])
        if method == "PATCH":
            merged = dict(self.data.get(key) or {})
            merged.update(json.loads(body or "{}"))
            self._store(key, merged)
            return self._reply(200, key, merged)
        if method == "POST":
            self._next_id += 1
            child = f"-N{self._next_id:04d}"
            self._store(f"{key}/{child}", json.loads(body or "null"))
            return self._reply(200, key, {"name": child})
        if method == "DELETE":
            self.data.pop(key, None)
            return self._reply(200, key, None)
        return RawResponse(status=405, headers={}, body=b"")

    async def stream(self, url: URL, *, headers: Mapping[str, str]) -> AsyncIterator[str]:
        self.requests.append(("STREAM", url))
        for line in self.stream_lines:
            yield line
        if self.stream_fails:
            raise RtdbStreamError("Connection error for server events")


@pytest.fixture
def config() -> RtdbConfig:
    return RtdbConfig(database_url="https://my-db.firebaseio.com/", auth="secret")


@pytest.fixture
def backend(monkeypatch: pytest.MonkeyPatch) -> FakeDatabase:
    fake = FakeDatabase()

    async def fake_request(_self: Any, method: str, url: URL, **kwargs: Any) -> RawResponse:
        return await fake.request(method, url, **kwargs)

    def fake_stream(_self: Any, url: URL, **kwargs: Any) -> AsyncIterator[str]:
        return fake.stream(url, **kwargs)

    monkeypatch.setattr("pyrtdb._transport.HttpTransport.request", fake_request)
    monkeypatch.setattr("pyrtdb._transport.HttpTransport.stream", fake_stream)
    return fake


@pytest.mark.asyncio
async def test_e2e_crud_round_trip(config: RtdbConfig, backend: FakeDatabase) -> None:
    async with RtdbClient(config) as client:
        alice = client.reference("users/alice")

        await client.replace(alice, User(username="alice", age=30))
        assert await client.get_as(alice, User) == User(username="alice", age=30)

        await client.merge(alice, {"age": 31})
        assert await client.get_json(alice) == {"username": "alice", "age": 31}

        created = await client.create(client.reference("users"), {"username": "bob"})
        name = created.decode()["name"]
        assert backend.data[f"users/{name}"] == {"username": "bob"}

        deleted = await client.delete(alice)
        assert deleted.data == ""
        with pytest.raises(RtdbNotFoundError):
            await client.get(alice)

    assert all(url.query["auth"] == "secret" for _method, url in backend.requests)


@pytest.mark.asyncio
async def test_e2e_conditional_replace(config: RtdbConfig, backend: FakeDatabase) -> None:
    async with RtdbClient(config) as client:
        ref = client.reference("settings/theme")
        await client.replace(ref, "dark")

        snapshot = await client.get_with_etag(ref)
        assert snapshot.etag == "v1"

        await client.replace(ref, "light")
        stale = await client.replace(ref, "blue", if_match=snapshot.etag)

        assert stale.conflict
        assert stale.decode() == "light"
        assert backend.data["settings/theme"] == "light"


@pytest.mark.asyncio
async def test_e2e_concurrent_increments(config: RtdbConfig, backend: FakeDatabase) -> None:
    async with RtdbClient(config) as client:
        counter = client.reference("stats/visits")
        await client.replace(counter, 0)

        await asyncio.gather(*(client.increment(counter, 1) for _ in range(4)))
        assert backend.data["stats/visits"] == 4

        with pytest.raises(RtdbLimitExceededError):
            await client.increment(counter, 1, max_bound=4)
        assert backend.data["stats/visits"] == 4


@pytest.mark.asyncio
async def test_e2e_query_reference(config: RtdbConfig, backend: FakeDatabase) -> None:
    async with RtdbClient(config) as client:
        query = client.reference("users").with_params().order_by("age").limit_to_first(2).finish()
        await client.replace(client.reference("users"), {"a": {"age": 1}})

        await client.get(query)

    method, url = backend.requests[-1]
    assert method == "GET"
    assert str(url) == "https://my-db.firebaseio.com/users.json?auth=secret&limitToFirst=2&orderBy=age"


@pytest.mark.asyncio
async def test_e2e_stream_and_listen_with_router(config: RtdbConfig, backend: FakeDatabase) -> None:
    backend.stream_lines = [
        "event: put",
        'data: {"path":"/","data":{"text":"hi"}}',
        "",
        "event: keep-alive",
        "data: null",
        "",
        "event: cancel",
        "data: null",
        "",
    ]
    backend.stream_fails = True

    async with RtdbClient(config) as client:
        room = client.reference("rooms/lobby")

        events: list[StreamEvent] = []
        with pytest.raises(RtdbStreamError):
            async for event in client.stream(room):
                events.append(event)
        assert [event.event_type for event in events] == ["put", "cancel"]

        puts: list[Any] = []
        cancelled: list[str | None] = []
        errors: list[RtdbStreamError] = []
        router = EventRouter()
        router.register("put", lambda data: puts.append(json.loads(data or "null")["data"]))
        router.register("cancel", cancelled.append)

        await client.listen(room, router, errors.append)

    assert puts == [{"text": "hi"}]
    assert cancelled == [None]
    assert len(errors) == 1


@pytest.mark.asyncio
async def test_client_requires_context_manager(config: RtdbConfig) -> None:
    client = RtdbClient(config)

    with pytest.raises(RtdbError):
        await client.get(client.reference("users"))
