"""High-level async client for the Realtime Database REST API."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any, TypeVar

import aiohttp

from pyrtdb._api import atomic as _atomic_api
from pyrtdb._api import request as _request_api
from pyrtdb._api import stream as _stream_api
from pyrtdb._api.stream import ErrorCallback, EventCallback
from pyrtdb._transport import HttpTransport
from pyrtdb.config import RtdbConfig
from pyrtdb.exceptions import RtdbError
from pyrtdb.models import Method, Response, StreamEvent
from pyrtdb.reference import Reference

T = TypeVar("T")


class RtdbClient:
    """Async client for one database.

    Usage::

        async with RtdbClient(RtdbConfig(database_url="https://my-db.firebaseio.com")) as client:
            users = client.reference("users")
            await client.replace(users.at("alice"), {"age": 31})
            await client.increment(users.at("alice/age"), 1, max_bound=120)
    """

    def __init__(
        self,
        config: RtdbConfig,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: HttpTransport | None = None
        if config.auth:
            self._root = Reference.with_auth(config.database_url, config.auth)
        else:
            self._root = Reference.from_url(config.database_url)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> RtdbClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> HttpTransport:
        if self._transport is None:
            raise RtdbError("Client not initialized. Use 'async with RtdbClient(...) as client:'")
        return self._transport

    async def _send(
        self,
        reference: Reference,
        method: Method,
        body: Any = None,
        *,
        request_etag: bool = False,
        if_match: str | None = None,
    ) -> Response:
        return await _request_api.send(
            self._require_transport(),
            reference,
            method,
            body,
            request_etag=request_etag,
            if_match=if_match,
            trace=self._config.api_trace_enabled,
        )

    # ------------------------------------------------------------------
    # References
    # ------------------------------------------------------------------

    @property
    def root(self) -> Reference:
        return self._root

    def reference(self, path: str = "") -> Reference:
        """Return a reference to *path* (``/``-separated) below the database root."""
        return self._root.at(path)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get(self, reference: Reference) -> Response:
        """Read the value at *reference*; raises ``RtdbNotFoundError`` when nothing is stored."""
        return await self._send(reference, Method.GET)

    async def get_json(self, reference: Reference) -> Any:
        response = await self.get(reference)
        return response.decode()

    async def get_as(self, reference: Reference, type_: type[T]) -> T:
        """Read the value at *reference* and validate it into *type_* with pydantic."""
        response = await self.get(reference)
        return response.parse_as(type_)

    async def get_with_etag(self, reference: Reference) -> Response:
        """Read the value together with its current ETag."""
        return await self._send(reference, Method.GET, request_etag=True)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, reference: Reference, value: Any) -> Response:
        """Append *value* under a server-generated child key (``POST``).

        The response body is ``{"name": "<generated key>"}``.
        """
        return await self._send(reference, Method.POST, value)

    async def replace(self, reference: Reference, value: Any, *, if_match: str | None = None) -> Response:
        """Overwrite the value at *reference* (``PUT``).

        With *if_match*, the write only happens when the stored ETag still
        matches; otherwise a :attr:`Response.conflict` response carrying the
        current value is returned.
        """
        return await self._send(reference, Method.PUT, value, if_match=if_match)

    async def merge(self, reference: Reference, value: Any) -> Response:
        """Update only the children named in *value* (``PATCH``)."""
        return await self._send(reference, Method.PATCH, value)

    async def delete(self, reference: Reference) -> Response:
        return await self._send(reference, Method.DELETE)

    async def increment(
        self,
        reference: Reference,
        delta: int | float,
        *,
        min_bound: int | float | None = None,
        max_bound: int | float | None = None,
        known: Response | None = None,
    ) -> Response:
        """Atomically add *delta* to the number at *reference*.

        See :func:`pyrtdb._api.atomic.apply_delta` for the bound rules.
        Conflicting writers are retried without limit.
        """
        return await _atomic_api.apply_delta(
            self._require_transport(),
            reference,
            delta,
            min_bound=min_bound,
            max_bound=max_bound,
            known=known,
            trace=self._config.api_trace_enabled,
        )

    # ------------------------------------------------------------------
    # Realtime
    # ------------------------------------------------------------------

    def stream(self, reference: Reference, *, keep_alive_friendly: bool = False) -> AsyncIterator[StreamEvent]:
        """Return an async iterator over realtime events at *reference*.

        Each call opens a new connection; breaking out of the loop closes it.
        """
        return _stream_api.stream_events(
            self._require_transport(),
            reference,
            keep_alive_friendly=keep_alive_friendly,
        )

    async def listen(
        self,
        reference: Reference,
        on_event: EventCallback,
        on_error: ErrorCallback,
        *,
        keep_alive_friendly: bool = False,
    ) -> None:
        """Feed realtime events to *on_event* until the stream ends or fails."""
        await _stream_api.listen(
            self._require_transport(),
            reference,
            on_event,
            on_error,
            keep_alive_friendly=keep_alive_friendly,
        )
