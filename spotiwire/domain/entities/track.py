"""Track objects in all their wire shapes.

Full and simplified tracks are distinct classes with no inheritance between
them: a simplified track is what albums embed, a full track is what the track
endpoints return, and code that needs to accept both should say so in its
signature.

Market relinking is grouped into an explicit Relinking sub-record. The three
wire fields it covers (``is_playable``, ``linked_from``, ``restrictions``) only
appear when the request carried a market, so they are present or absent together
from the caller's point of view.
"""

from collections.abc import Mapping
from datetime import datetime, timedelta
from typing import Any, Self

from attrs import define, field, validators

from spotiwire.domain.exceptions import MalformedResponse

from .album import SimplifiedAlbum
from .artist import SimplifiedArtist
from .identifiers import SpotifyId
from .shared import (
    ObjectType,
    Restriction,
    as_object,
    duration_from_ms,
    duration_to_ms,
    format_timestamp,
    join,
    nullable,
    object_list,
    object_type,
    optional,
    parse_timestamp,
    require,
    string_list,
    string_map,
)

_RELINKING_KEYS = ("is_playable", "linked_from", "restrictions")


@define(frozen=True, slots=True)
class TrackLink:
    """Pointer back to the track that was requested before relinking."""

    external_urls: dict[str, str]
    href: str
    id: str
    uri: str
    type: ObjectType = ObjectType.TRACK

    @classmethod
    def from_json(cls, data: Mapping[str, Any], path: str = "") -> Self:
        data = as_object(data, path)
        return cls(
            external_urls=string_map(require(data, "external_urls", Mapping, path), join(path, "external_urls")),
            href=require(data, "href", str, path),
            id=require(data, "id", str, path),
            type=object_type(data, path, ObjectType.TRACK),
            uri=require(data, "uri", str, path),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "external_urls": dict(self.external_urls),
            "href": self.href,
            "id": self.id,
            "type": self.type.value,
            "uri": self.uri,
        }


@define(frozen=True, slots=True)
class Relinking:
    """Market relinking metadata attached to a track.

    Attributes:
        is_playable: Whether the track can be played in the requested market
        linked_from: The originally requested track when a substitute was returned
        restrictions: Why the track is not playable, if it isn't
    """

    is_playable: bool | None = None
    linked_from: TrackLink | None = None
    restrictions: Restriction | None = None

    @classmethod
    def from_track_json(cls, data: Mapping[str, Any], path: str = "") -> Self | None:
        """Read the relinking fields of a track payload; None if none were sent."""
        if all(data.get(key) is None for key in _RELINKING_KEYS):
            return None

        linked_from = optional(data, "linked_from", Mapping, path)
        restrictions = optional(data, "restrictions", Mapping, path)
        return cls(
            is_playable=optional(data, "is_playable", bool, path),
            linked_from=TrackLink.from_json(linked_from, join(path, "linked_from"))
            if linked_from is not None
            else None,
            restrictions=Restriction.from_json(restrictions, join(path, "restrictions"))
            if restrictions is not None
            else None,
        )

    def to_json(self) -> dict[str, Any]:
        """Flatten back into the track-level wire keys, skipping unset ones."""
        payload: dict[str, Any] = {}
        if self.is_playable is not None:
            payload["is_playable"] = self.is_playable
        if self.linked_from is not None:
            payload["linked_from"] = self.linked_from.to_json()
        if self.restrictions is not None:
            payload["restrictions"] = self.restrictions.to_json()
        return payload

    @property
    def was_relinked(self) -> bool:
        return self.linked_from is not None


@define(frozen=True, slots=True)
class FullTrack:
    """Complete track object returned by the track endpoints.

    ``duration`` is a timedelta in memory and ``duration_ms`` on the wire.
    ``available_markets`` is empty when the request carried a market.
    """

    album: SimplifiedAlbum
    artists: tuple[SimplifiedArtist, ...]
    disc_number: int
    duration: timedelta
    explicit: bool
    external_ids: dict[str, str]
    external_urls: dict[str, str]
    href: str | None
    id: str | None
    is_local: bool
    name: str
    popularity: int = field(validator=[validators.ge(0), validators.le(100)])
    preview_url: str | None
    track_number: int
    uri: str
    available_markets: tuple[str, ...] = ()
    relinking: Relinking | None = None
    type: ObjectType = ObjectType.TRACK

    @classmethod
    def from_json(cls, data: Mapping[str, Any], path: str = "") -> Self:
        data = as_object(data, path)
        markets = optional(data, "available_markets", list, path)
        popularity = require(data, "popularity", int, path)
        if not 0 <= popularity <= 100:
            raise MalformedResponse(f"popularity out of range: {popularity}", join(path, "popularity"))
        return cls(
            album=SimplifiedAlbum.from_json(require(data, "album", Mapping, path), join(path, "album")),
            artists=object_list(require(data, "artists", list, path), join(path, "artists"), SimplifiedArtist.from_json),
            available_markets=string_list(markets, join(path, "available_markets")) if markets is not None else (),
            disc_number=require(data, "disc_number", int, path),
            duration=duration_from_ms(require(data, "duration_ms", int, path), join(path, "duration_ms")),
            explicit=require(data, "explicit", bool, path),
            external_ids=string_map(require(data, "external_ids", Mapping, path), join(path, "external_ids")),
            external_urls=string_map(require(data, "external_urls", Mapping, path), join(path, "external_urls")),
            href=nullable(data, "href", str, path),
            id=nullable(data, "id", str, path),
            is_local=require(data, "is_local", bool, path),
            relinking=Relinking.from_track_json(data, path),
            name=require(data, "name", str, path),
            popularity=popularity,
            preview_url=nullable(data, "preview_url", str, path),
            track_number=require(data, "track_number", int, path),
            type=object_type(data, path, ObjectType.TRACK),
            uri=require(data, "uri", str, path),
        )

    def to_json(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "album": self.album.to_json(),
            "artists": [artist.to_json() for artist in self.artists],
            "disc_number": self.disc_number,
            "duration_ms": duration_to_ms(self.duration),
            "explicit": self.explicit,
            "external_ids": dict(self.external_ids),
            "external_urls": dict(self.external_urls),
            "href": self.href,
            "id": self.id,
            "is_local": self.is_local,
            "name": self.name,
            "popularity": self.popularity,
            "preview_url": self.preview_url,
            "track_number": self.track_number,
            "type": self.type.value,
            "uri": self.uri,
        }
        if self.available_markets:
            payload["available_markets"] = list(self.available_markets)
        if self.relinking is not None:
            payload.update(self.relinking.to_json())
        return payload

    @property
    def isrc(self) -> str | None:
        return self.external_ids.get("isrc")


@define(frozen=True, slots=True)
class SimplifiedTrack:
    """Track object embedded in album track listings.

    Has no album, external ids or popularity. ``available_markets`` is None
    when the server left it out, which is different from an empty list.
    """

    artists: tuple[SimplifiedArtist, ...]
    disc_number: int
    duration: timedelta
    explicit: bool
    external_urls: dict[str, str]
    href: str | None
    id: str | None
    is_local: bool
    name: str
    preview_url: str | None
    track_number: int
    uri: str
    available_markets: tuple[str, ...] | None = None
    relinking: Relinking | None = None
    type: ObjectType = ObjectType.TRACK

    @classmethod
    def from_json(cls, data: Mapping[str, Any], path: str = "") -> Self:
        data = as_object(data, path)
        markets = optional(data, "available_markets", list, path)
        return cls(
            artists=object_list(require(data, "artists", list, path), join(path, "artists"), SimplifiedArtist.from_json),
            available_markets=string_list(markets, join(path, "available_markets")) if markets is not None else None,
            disc_number=require(data, "disc_number", int, path),
            duration=duration_from_ms(require(data, "duration_ms", int, path), join(path, "duration_ms")),
            explicit=require(data, "explicit", bool, path),
            external_urls=string_map(require(data, "external_urls", Mapping, path), join(path, "external_urls")),
            href=optional(data, "href", str, path),
            id=nullable(data, "id", str, path),
            is_local=require(data, "is_local", bool, path),
            relinking=Relinking.from_track_json(data, path),
            name=require(data, "name", str, path),
            preview_url=nullable(data, "preview_url", str, path),
            track_number=require(data, "track_number", int, path),
            type=object_type(data, path, ObjectType.TRACK),
            uri=require(data, "uri", str, path),
        )

    def to_json(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "artists": [artist.to_json() for artist in self.artists],
            "disc_number": self.disc_number,
            "duration_ms": duration_to_ms(self.duration),
            "explicit": self.explicit,
            "external_urls": dict(self.external_urls),
            "href": self.href,
            "id": self.id,
            "is_local": self.is_local,
            "name": self.name,
            "preview_url": self.preview_url,
            "track_number": self.track_number,
            "type": self.type.value,
            "uri": self.uri,
        }
        if self.available_markets is not None:
            payload["available_markets"] = list(self.available_markets)
        if self.relinking is not None:
            payload.update(self.relinking.to_json())
        return payload


@define(frozen=True, slots=True)
class SavedTrack:
    """A track in the user's library, with the time it was saved."""

    added_at: datetime
    track: FullTrack

    @classmethod
    def from_json(cls, data: Mapping[str, Any], path: str = "") -> Self:
        data = as_object(data, path)
        return cls(
            added_at=parse_timestamp(require(data, "added_at", str, path), join(path, "added_at")),
            track=FullTrack.from_json(require(data, "track", Mapping, path), join(path, "track")),
        )

    def to_json(self) -> dict[str, Any]:
        return {"added_at": format_timestamp(self.added_at), "track": self.track.to_json()}


def _track_id(value: "str | SpotifyId") -> SpotifyId:
    return SpotifyId.parse(value, ObjectType.TRACK)


def _positions(values: Any) -> tuple[int, ...]:
    positions = tuple(values)
    for position in positions:
        if isinstance(position, bool) or not isinstance(position, int):
            raise ValueError(f"Playlist positions must be integers, got {position!r}")
    return positions


@define(frozen=True, slots=True)
class TrackPositions:
    """A track id with the playlist positions it occupies.

    Request-only value used to remove specific occurrences of a track from a
    playlist. Accepts a bare id, URI or URL for the track.

    Example:
        >>> TrackPositions("4iV5W9uYEdYUVa79Axb7Rh", [0, 3])
    """

    id: SpotifyId = field(converter=_track_id)
    positions: tuple[int, ...] = field(
        converter=_positions,
        validator=validators.deep_iterable(member_validator=validators.ge(0)),
    )

    def to_json(self) -> dict[str, Any]:
        return {"uri": self.id.uri, "positions": list(self.positions)}
