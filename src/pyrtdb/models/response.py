"""Result of a single REST request."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict

from pyrtdb._constants import STATUS_PRECONDITION_FAILED
from pyrtdb.models._decode import decode_as, decode_json

T = TypeVar("T")


class Response(BaseModel):
    """Outcome of one request.

    Parameters
    ----------
    status : int
        HTTP status code.
    data : str
        Body text, verbatim.  Empty for deletes.
    etag : str or None
        Version token of the stored value, present when the request asked
        for one (``X-Firebase-ETag``) or was conditional (``if-match``).
    """

    model_config = ConfigDict(frozen=True)

    status: int
    data: str = ""
    etag: str | None = None

    @property
    def conflict(self) -> bool:
        """Whether a conditional write was rejected because the value changed.

        In that case ``data`` holds the current stored value and ``etag``
        its fresh version token.
        """
        return self.status == STATUS_PRECONDITION_FAILED

    def decode(self) -> Any:
        """Decode ``data`` as JSON."""
        return decode_json(self.data)

    def parse_as(self, type_: type[T]) -> T:
        """Decode ``data`` and validate it into *type_*."""
        return decode_as(self.data, type_)
