"""Album objects, full, simplified and saved."""

from collections.abc import Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any, Self

from attrs import define

from .artist import SimplifiedArtist
from .paging import Page
from .shared import (
    Copyright,
    Image,
    ObjectType,
    Restriction,
    as_object,
    format_timestamp,
    images,
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

if TYPE_CHECKING:
    from .track import SimplifiedTrack


@define(frozen=True, slots=True)
class SimplifiedAlbum:
    """Album reference embedded in tracks and artist discographies.

    ``album_group`` is only sent by the artist-albums endpoint and
    ``available_markets`` is dropped when the request carried a market.
    Albums of local files have no type, id or release date.
    """

    album_type: str | None
    artists: tuple[SimplifiedArtist, ...]
    external_urls: dict[str, str]
    href: str | None
    id: str | None
    images: tuple[Image, ...]
    name: str
    release_date: str | None
    release_date_precision: str | None
    uri: str | None
    album_group: str | None = None
    available_markets: tuple[str, ...] | None = None
    restrictions: Restriction | None = None
    total_tracks: int | None = None
    type: ObjectType = ObjectType.ALBUM

    @classmethod
    def from_json(cls, data: Mapping[str, Any], path: str = "") -> Self:
        data = as_object(data, path)
        markets = optional(data, "available_markets", list, path)
        restrictions = optional(data, "restrictions", Mapping, path)
        return cls(
            album_group=optional(data, "album_group", str, path),
            album_type=nullable(data, "album_type", str, path),
            artists=object_list(require(data, "artists", list, path), join(path, "artists"), SimplifiedArtist.from_json),
            available_markets=string_list(markets, join(path, "available_markets")) if markets is not None else None,
            external_urls=string_map(require(data, "external_urls", Mapping, path), join(path, "external_urls")),
            href=nullable(data, "href", str, path),
            id=nullable(data, "id", str, path),
            images=images(data, path),
            name=require(data, "name", str, path),
            release_date=nullable(data, "release_date", str, path),
            release_date_precision=nullable(data, "release_date_precision", str, path),
            restrictions=Restriction.from_json(restrictions, join(path, "restrictions"))
            if restrictions is not None
            else None,
            total_tracks=optional(data, "total_tracks", int, path),
            type=object_type(data, path, ObjectType.ALBUM),
            uri=nullable(data, "uri", str, path),
        )

    def to_json(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "album_type": self.album_type,
            "artists": [artist.to_json() for artist in self.artists],
            "external_urls": dict(self.external_urls),
            "href": self.href,
            "id": self.id,
            "images": [image.to_json() for image in self.images],
            "name": self.name,
            "release_date": self.release_date,
            "release_date_precision": self.release_date_precision,
            "type": self.type.value,
            "uri": self.uri,
        }
        if self.album_group is not None:
            payload["album_group"] = self.album_group
        if self.available_markets is not None:
            payload["available_markets"] = list(self.available_markets)
        if self.restrictions is not None:
            payload["restrictions"] = self.restrictions.to_json()
        if self.total_tracks is not None:
            payload["total_tracks"] = self.total_tracks
        return payload


@define(frozen=True, slots=True)
class FullAlbum:
    """Complete album object, including the first page of its tracks."""

    album_type: str
    artists: tuple[SimplifiedArtist, ...]
    copyrights: tuple[Copyright, ...]
    external_ids: dict[str, str]
    external_urls: dict[str, str]
    genres: tuple[str, ...]
    href: str
    id: str
    images: tuple[Image, ...]
    label: str | None
    name: str
    popularity: int
    release_date: str
    release_date_precision: str
    tracks: "Page[SimplifiedTrack]"
    uri: str
    available_markets: tuple[str, ...] | None = None
    total_tracks: int | None = None
    type: ObjectType = ObjectType.ALBUM

    @classmethod
    def from_json(cls, data: Mapping[str, Any], path: str = "") -> Self:
        # track.py imports this module for SimplifiedAlbum
        from .track import SimplifiedTrack

        data = as_object(data, path)
        markets = optional(data, "available_markets", list, path)
        return cls(
            album_type=require(data, "album_type", str, path),
            artists=object_list(require(data, "artists", list, path), join(path, "artists"), SimplifiedArtist.from_json),
            available_markets=string_list(markets, join(path, "available_markets")) if markets is not None else None,
            copyrights=object_list(require(data, "copyrights", list, path), join(path, "copyrights"), Copyright.from_json),
            external_ids=string_map(require(data, "external_ids", Mapping, path), join(path, "external_ids")),
            external_urls=string_map(require(data, "external_urls", Mapping, path), join(path, "external_urls")),
            genres=string_list(require(data, "genres", list, path), join(path, "genres")),
            href=require(data, "href", str, path),
            id=require(data, "id", str, path),
            images=images(data, path),
            label=optional(data, "label", str, path),
            name=require(data, "name", str, path),
            popularity=require(data, "popularity", int, path),
            release_date=require(data, "release_date", str, path),
            release_date_precision=require(data, "release_date_precision", str, path),
            total_tracks=optional(data, "total_tracks", int, path),
            tracks=Page.from_json(require(data, "tracks", Mapping, path), SimplifiedTrack.from_json, join(path, "tracks")),
            type=object_type(data, path, ObjectType.ALBUM),
            uri=require(data, "uri", str, path),
        )

    def to_json(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "album_type": self.album_type,
            "artists": [artist.to_json() for artist in self.artists],
            "copyrights": [c.to_json() for c in self.copyrights],
            "external_ids": dict(self.external_ids),
            "external_urls": dict(self.external_urls),
            "genres": list(self.genres),
            "href": self.href,
            "id": self.id,
            "images": [image.to_json() for image in self.images],
            "label": self.label,
            "name": self.name,
            "popularity": self.popularity,
            "release_date": self.release_date,
            "release_date_precision": self.release_date_precision,
            "tracks": self.tracks.to_json(),
            "type": self.type.value,
            "uri": self.uri,
        }
        if self.available_markets is not None:
            payload["available_markets"] = list(self.available_markets)
        if self.total_tracks is not None:
            payload["total_tracks"] = self.total_tracks
        return payload


@define(frozen=True, slots=True)
class SavedAlbum:
    """An album in the user's library."""

    added_at: datetime
    album: FullAlbum

    @classmethod
    def from_json(cls, data: Mapping[str, Any], path: str = "") -> Self:
        data = as_object(data, path)
        return cls(
            added_at=parse_timestamp(require(data, "added_at", str, path), join(path, "added_at")),
            album=FullAlbum.from_json(require(data, "album", Mapping, path), join(path, "album")),
        )

    def to_json(self) -> dict[str, Any]:
        return {"added_at": format_timestamp(self.added_at), "album": self.album.to_json()}
