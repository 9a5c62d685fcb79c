"""Atomic counter updates over ETag preconditions.

A read-modify-write loop: read the value with its ETag, check the bounds,
write ``current + delta`` with ``if-match``.  When another writer won the
race the server answers ``412`` with the current value and a fresh ETag,
and the loop retries from the bound check.  Retries are unbounded; the
loop ends only on a successful write or a bound violation.
"""

from __future__ import annotations

import logging
from typing import Any

from pyrtdb._api.request import send
from pyrtdb._redact import redact_url
from pyrtdb._transport import Transport
from pyrtdb.exceptions import RtdbLimitExceededError, RtdbNotJsonError, RtdbTransportError
from pyrtdb.models import Method, Response
from pyrtdb.reference import Reference

_logger = logging.getLogger(__name__)

Number = int | float


def _as_number(response: Response) -> Number:
    value: Any = response.decode()
    # bool is an int subclass but never a counter value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RtdbNotJsonError(f"Stored value is not a JSON number: {response.data[:64]}")
    return value


def _require_etag(response: Response, reference: Reference) -> str:
    if response.etag is None:
        raise RtdbTransportError(
            f"No ETag returned for {redact_url(reference.url)}",
            status_code=response.status,
            url=redact_url(reference.url),
        )
    return response.etag


def check_bounds(
    current: Number,
    delta: Number,
    *,
    min_bound: Number | None = None,
    max_bound: Number | None = None,
) -> None:
    """Validate the stored value before *delta* is applied.

    The upper bound is checked in the direction of travel: a positive
    delta fails once ``current >= max_bound``, a negative one once
    ``current <= max_bound``.  The lower bound fails when the stored value
    sits exactly on it.
    """
    if max_bound is not None and ((delta > 0 and current >= max_bound) or (delta < 0 and current <= max_bound)):
        raise RtdbLimitExceededError(
            f"Value {current} already at limit {max_bound}",
            current=current,
            bound=max_bound,
        )
    if min_bound is not None and current == min_bound:
        raise RtdbLimitExceededError(
            f"Value {current} already at lower limit {min_bound}",
            current=current,
            bound=min_bound,
        )


async def apply_delta(
    transport: Transport,
    reference: Reference,
    delta: Number,
    *,
    min_bound: Number | None = None,
    max_bound: Number | None = None,
    known: Response | None = None,
    trace: bool = False,
) -> Response:
    """Add *delta* to the number stored at *reference*, safe under concurrent writers.

    Parameters
    ----------
    known : Response or None
        A previous read of *reference* that carries an ETag (for example
        from :func:`send` with ``request_etag=True``).  When given, the
        initial read is skipped.

    Returns
    -------
    Response
        The response of the winning conditional write.

    Raises
    ------
    RtdbLimitExceededError
        The stored value violates a bound; nothing is written.
    RtdbNotFoundError
        Nothing is stored at *reference*.
    RtdbNotJsonError
        The stored value is not a number.
    """
    snapshot = known
    if snapshot is None or snapshot.etag is None:
        snapshot = await send(transport, reference, Method.GET, request_etag=True, trace=trace)

    current = _as_number(snapshot)
    etag = _require_etag(snapshot, reference)
    attempt = 1

    while True:
        check_bounds(current, delta, min_bound=min_bound, max_bound=max_bound)

        response = await send(transport, reference, Method.PUT, current + delta, if_match=etag, trace=trace)
        if not response.conflict:
            _logger.debug("Atomic update of %s succeeded after %d attempt(s)", redact_url(reference.url), attempt)
            return response

        current = _as_number(response)
        etag = _require_etag(response, reference)
        attempt += 1
        _logger.debug("Concurrent write on %s, retrying with value=%s", redact_url(reference.url), current)
