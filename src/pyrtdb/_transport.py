"""HTTP transport over a shared aiohttp session."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import AsyncIterator, Mapping
from typing import Protocol

import aiohttp
from yarl import URL

from pyrtdb._constants import EVENT_STREAM
from pyrtdb._redact import redact_url
from pyrtdb.config import RtdbConfig
from pyrtdb.exceptions import RtdbStreamError, RtdbTransportError

_logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class RawResponse:
    """Undecoded HTTP answer: status, headers and body bytes."""

    status: int
    headers: Mapping[str, str]
    body: bytes = b""

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        value = self.headers.get(name)
        if value is not None:
            return value
        lowered = name.lower()
        for key, candidate in self.headers.items():
            if key.lower() == lowered:
                return candidate
        return None


class Transport(Protocol):
    """Structural transport interface used by the request and stream modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def request(
        self,
        method: str,
        url: URL,
        *,
        headers: Mapping[str, str],
        body: str | None = None,
    ) -> RawResponse:
        ...

    def stream(self, url: URL, *, headers: Mapping[str, str]) -> AsyncIterator[str]:
        ...


class HttpTransport:
    """Sends one HTTPS request per call and streams Server-Sent Events."""

    def __init__(self, config: RtdbConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    def _base_headers(self) -> dict[str, str]:
        return {"user-agent": self._config.user_agent}

    async def request(
        self,
        method: str,
        url: URL,
        *,
        headers: Mapping[str, str],
        body: str | None = None,
    ) -> RawResponse:
        merged = {**self._base_headers(), **headers}
        timeout = aiohttp.ClientTimeout(total=self._config.timeout)

        _logger.debug("%s %s", method, redact_url(url))

        try:
            async with self._http.request(method, url, data=body, headers=merged, timeout=timeout) as resp:
                payload = await resp.read()
                return RawResponse(status=resp.status, headers=dict(resp.headers), body=payload)
        except aiohttp.ClientError as exc:
            raise RtdbTransportError(
                f"{method} {redact_url(url)} failed: {exc}",
                url=redact_url(url),
            ) from exc
        except asyncio.TimeoutError as exc:
            raise RtdbTransportError(
                f"{method} {redact_url(url)} timed out after {self._config.timeout}s",
                url=redact_url(url),
            ) from exc

    async def stream(self, url: URL, *, headers: Mapping[str, str]) -> AsyncIterator[str]:
        """Yield decoded lines of an ``text/event-stream`` response.

        Line terminators are stripped.  The connection is released when the
        consumer stops iterating.
        """
        merged = {**self._base_headers(), "accept": EVENT_STREAM, **headers}
        read_timeout = self._config.stream_read_timeout or None
        timeout = aiohttp.ClientTimeout(total=None, sock_read=read_timeout)

        _logger.debug("STREAM %s", redact_url(url))

        try:
            async with self._http.get(url, headers=merged, timeout=timeout) as resp:
                if resp.status != 200:
                    text = await resp.text(errors="replace")
                    raise RtdbStreamError(
                        f"HTTP {resp.status} opening event stream: {text[:200]}",
                        status_code=resp.status,
                    )
                async for raw_line in resp.content:
                    try:
                        line = raw_line.decode("utf-8")
                    except UnicodeDecodeError as exc:
                        raise RtdbStreamError(f"Event stream is not UTF-8: {exc}") from exc
                    yield line.rstrip("\r\n")
        except aiohttp.ClientError as exc:
            raise RtdbStreamError(f"Connection error for server events: {exc}") from exc
        except asyncio.TimeoutError as exc:
            raise RtdbStreamError(f"No data on event stream for {read_timeout}s") from exc
