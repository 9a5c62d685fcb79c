"""HTTP verbs understood by the REST API."""

from __future__ import annotations

import enum


class Method(str, enum.Enum):
    """Logical database operation, mapped one-to-one onto an HTTP verb."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @property
    def has_body(self) -> bool:
        """Whether requests with this verb must carry a JSON body."""
        return self in (Method.POST, Method.PUT, Method.PATCH)
