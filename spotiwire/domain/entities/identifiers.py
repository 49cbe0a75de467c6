"""Spotify identifiers: bare ids, ``spotify:`` URIs and open.spotify.com URLs.

Callers may pass any of the three forms wherever the client takes an id.
Parsing happens before a request is built, so a URI of the wrong kind
(an album URI passed to ``track()``) is rejected without a network call.
"""

from typing import Self
from urllib.parse import urlparse

from attrs import define, field, validators

from .shared import ObjectType

_OPEN_HOST = "open.spotify.com"
_FORBIDDEN = frozenset(":/?# \t\n")


def _valid_id(_instance, attribute, value: str) -> None:
    if not value or any(ch in _FORBIDDEN for ch in value):
        raise ValueError(f"Invalid Spotify {attribute.name}: {value!r}")


@define(frozen=True, slots=True)
class SpotifyId:
    """A typed Spotify identifier.

    Attributes:
        kind: Which entity type the id is scoped to
        id: The opaque id itself, e.g. ``6akEvsycLGftJxYudPjmqK``
    """

    kind: ObjectType = field(validator=validators.instance_of(ObjectType))
    id: str = field(validator=[validators.instance_of(str), _valid_id])

    @classmethod
    def parse(cls, value: "str | SpotifyId", kind: ObjectType) -> Self:
        """Parse a bare id, URI or URL and check it is of the given kind.

        Raises:
            ValueError: Empty input, unrecognised shape, or an id of another kind
        """
        if isinstance(value, SpotifyId):
            if value.kind is not kind:
                raise ValueError(f"Expected a {kind.value} id, got a {value.kind.value} id")
            return cls(kind=kind, id=value.id)

        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"Expected a {kind.value} id, got {value!r}")
        value = value.strip()

        if value.startswith("spotify:"):
            parts = value.split(":")
            # Legacy playlist URIs: spotify:user:<owner>:playlist:<id>
            found_kind, found_id = (parts[-2], parts[-1]) if len(parts) >= 3 else ("", "")
        elif value.startswith(("http://", "https://")):
            url = urlparse(value)
            if url.netloc != _OPEN_HOST:
                raise ValueError(f"Not a Spotify URL: {value!r}")
            segments = [s for s in url.path.split("/") if s]
            # Localised links carry a leading segment like /intl-de/
            if segments and segments[0].startswith("intl-"):
                segments = segments[1:]
            found_kind, found_id = (segments[-2], segments[-1]) if len(segments) >= 2 else ("", "")
        else:
            return cls(kind=kind, id=value)

        if found_kind != kind.value:
            raise ValueError(f"Expected a {kind.value} id, got {value!r}")
        return cls(kind=kind, id=found_id)

    @property
    def uri(self) -> str:
        """The ``spotify:<kind>:<id>`` form used in request bodies."""
        return f"spotify:{self.kind.value}:{self.id}"

    @property
    def url(self) -> str:
        return f"https://{_OPEN_HOST}/{self.kind.value}/{self.id}"

    def __str__(self) -> str:
        return self.id


def parse_ids(
    values: "list[str | SpotifyId] | tuple[str | SpotifyId, ...]",
    kind: ObjectType,
    *,
    limit: int,
) -> list[SpotifyId]:
    """Parse a batch of ids for a multi-get endpoint.

    Raises:
        ValueError: Empty batch, more than ``limit`` ids, or any invalid id
    """
    if isinstance(values, str):
        raise ValueError(f"Expected a list of {kind.value} ids, got a single string")
    if not values:
        raise ValueError(f"At least one {kind.value} id is required")
    if len(values) > limit:
        raise ValueError(f"At most {limit} {kind.value} ids per request, got {len(values)}")
    return [SpotifyId.parse(value, kind) for value in values]
