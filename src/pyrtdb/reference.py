"""Database references: validated, immutable document-addressing URLs."""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING

from yarl import URL

from pyrtdb._constants import AUTH, JSON_SUFFIX
from pyrtdb.exceptions import RtdbNotHttpsError, RtdbUrlParseError

if TYPE_CHECKING:
    from pyrtdb.params import QueryParams


def _strip_suffix(segment: str) -> str:
    while segment.endswith(JSON_SUFFIX):
        segment = segment[: -len(JSON_SUFFIX)]
    return segment


def _segments(path: str) -> list[str]:
    stripped = [_strip_suffix(seg) for seg in path.split("/")]
    return [seg for seg in stripped if seg]


def parse_https_url(raw_url: str) -> URL:
    """Parse *raw_url* and normalise it for use as a reference.

    The scheme must be ``https``.  A trailing ``/`` is stripped from the
    path, so ``https://host`` and ``https://host/`` normalise to the same
    value.  Any query string is kept.

    Raises
    ------
    RtdbUrlParseError
        If *raw_url* is not an absolute URL with a host.
    RtdbNotHttpsError
        If the scheme is anything but ``https``.
    """
    try:
        url = URL(raw_url)
    except (TypeError, ValueError) as exc:
        raise RtdbUrlParseError(f"Error while parsing the URL: {exc}", url=str(raw_url)) from exc

    if not url.is_absolute() or not url.host:
        raise RtdbUrlParseError(f"Error while parsing the URL: {raw_url!r} is not absolute", url=raw_url)
    if url.scheme != "https":
        raise RtdbNotHttpsError("The URL protocol should be https.", url=raw_url)

    path = url.path.rstrip("/") or "/"
    normalized = url.with_path(path).with_fragment(None)
    if url.query_string:
        normalized = normalized.with_query(url.query)
    return normalized


@dataclasses.dataclass(frozen=True)
class Reference:
    """Pointer to one location in the remote document tree.

    A reference never changes after construction; :meth:`at` and
    :meth:`with_auth` return new references, so instances can be shared
    freely between tasks.

    Usage::

        root = Reference.from_url("https://my-db.firebaseio.com")
        movie = root.at("movies").at("movie1")
        movie.get_uri()  # https://my-db.firebaseio.com/movies/movie1.json
    """

    url: URL

    @classmethod
    def from_url(cls, raw_url: str) -> Reference:
        """Build a reference from a user-supplied ``https`` URL."""
        return cls(parse_https_url(raw_url))

    @classmethod
    def with_auth(cls, raw_url: str, auth_key: str) -> Reference:
        """Build a reference carrying a single ``auth=<auth_key>`` query parameter.

        Any query string already present on *raw_url* is replaced.
        """
        url = parse_https_url(raw_url)
        return cls(url.with_query({AUTH: auth_key}))

    @property
    def path(self) -> str:
        """Decoded URL path, including the ``.json`` suffix when addressing data."""
        return self.url.path

    @property
    def key(self) -> str | None:
        """Last path segment without the addressing suffix, ``None`` at the root."""
        segments = _segments(self.url.path)
        return segments[-1] if segments else None

    def at(self, path: str) -> Reference:
        """Return a reference to *path* below this one.

        *path* may hold several ``/``-separated segments.  The ``.json``
        suffix is stripped from every existing segment and re-applied once
        to the new last segment, so ``ref.at("x")`` and ``ref.at("x.json")``
        are equal.  The query string (e.g. ``auth``) is carried over.
        """
        segments = _segments(self.url.path)
        segments.extend(seg for seg in path.split("/") if seg)
        while segments:
            last = _strip_suffix(segments[-1])
            if last:
                segments[-1] = last
                break
            # a bare ".json" segment addresses its parent
            segments.pop()
        if not segments:
            return Reference(self.url.with_path("/" + JSON_SUFFIX).with_query(self.url.query))

        new_path = "/" + "/".join(segments) + JSON_SUFFIX
        return Reference(self.url.with_path(new_path).with_query(self.url.query))

    def with_params(self) -> QueryParams:
        """Start composing ordering/filtering parameters for this reference."""
        from pyrtdb.params import QueryParams

        return QueryParams(reference=self)

    def get_uri(self) -> str:
        """Return the full URL as text (including any ``auth`` parameter)."""
        return str(self.url)

    def __str__(self) -> str:
        return self.get_uri()
