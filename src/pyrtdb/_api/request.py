"""Request dispatcher: one logical operation, one HTTPS call.

Maps a :class:`~pyrtdb.models.Method` plus optional body and concurrency
headers onto a single transport request and classifies the answer.  No
retries happen here.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel

from pyrtdb._constants import (
    ETAG_REQUEST_HEADER,
    ETAG_RESPONSE_HEADER,
    IF_MATCH_HEADER,
    NULL_PAYLOAD,
    STATUS_PRECONDITION_FAILED,
)
from pyrtdb._redact import redact_for_log, redact_url
from pyrtdb._transport import Transport
from pyrtdb.exceptions import (
    RtdbNotFoundError,
    RtdbSerializeError,
    RtdbTransportError,
    RtdbUtf8Error,
)
from pyrtdb.models import Method, Response
from pyrtdb.reference import Reference

_logger = logging.getLogger(__name__)


def serialize_body(value: Any) -> str:
    """JSON-encode a write payload; pydantic models are dumped in JSON mode."""
    if value is None:
        raise RtdbSerializeError("A body is required for this request")
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")
    try:
        return json.dumps(value, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        raise RtdbSerializeError(f"Body is not JSON-serialisable: {exc}") from exc


def build_headers(
    method: Method,
    *,
    request_etag: bool = False,
    if_match: str | None = None,
) -> dict[str, str]:
    headers: dict[str, str] = {}
    if method.has_body:
        headers["content-type"] = "application/json; charset=UTF-8"
    if request_etag:
        headers[ETAG_REQUEST_HEADER] = "true"
    if if_match is not None:
        headers[IF_MATCH_HEADER] = if_match
    return headers


async def send(
    transport: Transport,
    reference: Reference,
    method: Method,
    body: Any = None,
    *,
    request_etag: bool = False,
    if_match: str | None = None,
    trace: bool = False,
) -> Response:
    """Issue exactly one request and classify the result.

    Parameters
    ----------
    transport : Transport
        Transport used for the call.
    reference : Reference
        Target location.
    method : Method
        Verb to use.  ``POST``, ``PUT`` and ``PATCH`` require *body*.
    body : Any
        JSON-serialisable value or pydantic model.
    request_etag : bool
        Ask the server to return the current ETag of the location.
    if_match : str or None
        Make the request conditional on the stored ETag.  A ``412`` answer
        is then returned as a :attr:`Response.conflict` response carrying
        the current value and its fresh ETag instead of raising.
    trace : bool
        Log redacted request and response payloads.

    Raises
    ------
    RtdbSerializeError
        Write without body, or body not serialisable.  Raised before any
        network call.
    RtdbTransportError
        Transport failure or unexpected status.
    RtdbUtf8Error
        Body is not UTF-8 text.
    RtdbNotFoundError
        ``GET`` answered ``200`` with the literal body ``null``.
    """
    payload: str | None = None
    if method.has_body:
        payload = serialize_body(body)

    headers = build_headers(method, request_etag=request_etag, if_match=if_match)
    if trace:
        _logger.debug(
            "%s %s headers=%s body=%s",
            method.value,
            redact_url(reference.url),
            redact_for_log(headers),
            redact_for_log(payload),
        )

    raw = await transport.request(method.value, reference.url, headers=headers, body=payload)

    try:
        text = raw.body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise RtdbUtf8Error(f"{method.value} {redact_url(reference.url)} returned non UTF-8 body") from exc

    if trace:
        _logger.debug("HTTP %d %s body=%s", raw.status, redact_url(reference.url), redact_for_log(text))

    etag = raw.header(ETAG_RESPONSE_HEADER)

    if raw.status == STATUS_PRECONDITION_FAILED and if_match is not None:
        _logger.debug("Precondition failed for %s, fresh etag=%s", redact_url(reference.url), etag)
        return Response(status=raw.status, data=text, etag=etag)

    if not 200 <= raw.status < 300:
        raise RtdbTransportError(
            f"HTTP {raw.status} from {method.value} {redact_url(reference.url)}: {text[:200]}",
            status_code=raw.status,
            url=redact_url(reference.url),
        )

    if method is Method.GET and text == NULL_PAYLOAD:
        raise RtdbNotFoundError(
            f"Body is null or record is not found at {redact_url(reference.url)}",
            url=redact_url(reference.url),
        )

    if method is Method.DELETE:
        text = ""

    wants_etag = request_etag or if_match is not None
    return Response(status=raw.status, data=text, etag=etag if wants_etag else None)
