"""Query parameter composition for ordering, filtering and pagination."""

from __future__ import annotations

import dataclasses

from pyrtdb._constants import (
    END_AT,
    EQUAL_TO,
    EXPORT,
    FORMAT,
    LIMIT_TO_FIRST,
    LIMIT_TO_LAST,
    ORDER_BY,
    SHALLOW,
    START_AT,
)
from pyrtdb.reference import Reference, parse_https_url

QueryValue = str | int | float | bool


def _stringify(value: QueryValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclasses.dataclass(frozen=True)
class QueryParams:
    """Immutable builder of query parameters for a :class:`Reference`.

    Each builder call returns a new ``QueryParams``; the receiver is left
    untouched.  Parameters are kept sorted by name, so the serialised
    query string does not depend on call order::

        ref.with_params().order_by("name").limit_to_first(10).finish()
        ref.with_params().limit_to_first(10).order_by("name").finish()  # same URL
    """

    reference: Reference
    params: tuple[tuple[str, str], ...] = ()

    def _add(self, key: str, value: QueryValue) -> QueryParams:
        merged = dict(self.params)
        merged[key] = _stringify(value)
        return dataclasses.replace(self, params=tuple(sorted(merged.items())))

    def order_by(self, key: str) -> QueryParams:
        return self._add(ORDER_BY, key)

    def limit_to_first(self, count: int) -> QueryParams:
        return self._add(LIMIT_TO_FIRST, count)

    def limit_to_last(self, count: int) -> QueryParams:
        return self._add(LIMIT_TO_LAST, count)

    def start_at(self, value: QueryValue) -> QueryParams:
        return self._add(START_AT, value)

    def end_at(self, value: QueryValue) -> QueryParams:
        return self._add(END_AT, value)

    def equal_to(self, value: QueryValue) -> QueryParams:
        return self._add(EQUAL_TO, value)

    def shallow(self, flag: bool = True) -> QueryParams:
        return self._add(SHALLOW, flag)

    def format(self) -> QueryParams:
        """Request the export format (includes priority metadata)."""
        return self._add(FORMAT, EXPORT)

    def finish(self) -> Reference:
        """Materialise a reference whose query string holds the parameters.

        Existing query pairs on the reference (such as ``auth``) are kept.
        All pairs are inserted in lexical key order and percent-encoded by
        the URL library, never formatted by hand.
        """
        base = self.reference.url
        merged = dict(base.query)
        merged.update(self.params)
        url = base.with_query(sorted(merged.items()))
        return Reference(parse_https_url(str(url)))
