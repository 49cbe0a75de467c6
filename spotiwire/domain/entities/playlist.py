"""Playlist objects and the items they hold."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Self

from attrs import define

from .paging import Page
from .shared import (
    Followers,
    Image,
    ObjectType,
    as_object,
    format_timestamp,
    images,
    join,
    nullable,
    object_type,
    optional,
    parse_timestamp,
    require,
    string_map,
)
from .track import FullTrack
from .user import PublicUser


@define(frozen=True, slots=True)
class PlaylistItem:
    """A track within a playlist with the metadata of when it was added.

    ``track`` is None for tracks that were removed from the catalogue;
    ``added_at`` and ``added_by`` are None for very old playlists.
    """

    added_at: datetime | None
    added_by: PublicUser | None
    is_local: bool
    track: FullTrack | None

    @classmethod
    def from_json(cls, data: Mapping[str, Any], path: str = "") -> Self:
        data = as_object(data, path)
        added_at = optional(data, "added_at", str, path)
        added_by = optional(data, "added_by", Mapping, path)
        track = nullable(data, "track", Mapping, path)
        return cls(
            added_at=parse_timestamp(added_at, join(path, "added_at")) if added_at is not None else None,
            added_by=PublicUser.from_json(added_by, join(path, "added_by")) if added_by is not None else None,
            is_local=require(data, "is_local", bool, path),
            track=FullTrack.from_json(track, join(path, "track")) if track is not None else None,
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "added_at": format_timestamp(self.added_at) if self.added_at else None,
            "added_by": self.added_by.to_json() if self.added_by else None,
            "is_local": self.is_local,
            "track": self.track.to_json() if self.track else None,
        }


@define(frozen=True, slots=True)
class PlaylistTracksRef:
    """Where to fetch a simplified playlist's tracks, and how many there are."""

    href: str
    total: int

    @classmethod
    def from_json(cls, data: Mapping[str, Any], path: str = "") -> Self:
        data = as_object(data, path)
        return cls(href=require(data, "href", str, path), total=require(data, "total", int, path))

    def to_json(self) -> dict[str, Any]:
        return {"href": self.href, "total": self.total}


@define(frozen=True, slots=True)
class SimplifiedPlaylist:
    """Playlist as listed in a user's playlists or in search results."""

    collaborative: bool
    description: str | None
    external_urls: dict[str, str]
    href: str
    id: str
    images: tuple[Image, ...]
    name: str
    owner: PublicUser
    public: bool | None
    snapshot_id: str
    tracks: PlaylistTracksRef
    uri: str
    type: ObjectType = ObjectType.PLAYLIST

    @classmethod
    def from_json(cls, data: Mapping[str, Any], path: str = "") -> Self:
        data = as_object(data, path)
        return cls(
            collaborative=require(data, "collaborative", bool, path),
            description=optional(data, "description", str, path),
            external_urls=string_map(require(data, "external_urls", Mapping, path), join(path, "external_urls")),
            href=require(data, "href", str, path),
            id=require(data, "id", str, path),
            images=images(data, path),
            name=require(data, "name", str, path),
            owner=PublicUser.from_json(require(data, "owner", Mapping, path), join(path, "owner")),
            public=optional(data, "public", bool, path),
            snapshot_id=require(data, "snapshot_id", str, path),
            tracks=PlaylistTracksRef.from_json(require(data, "tracks", Mapping, path), join(path, "tracks")),
            type=object_type(data, path, ObjectType.PLAYLIST),
            uri=require(data, "uri", str, path),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "collaborative": self.collaborative,
            "description": self.description,
            "external_urls": dict(self.external_urls),
            "href": self.href,
            "id": self.id,
            "images": [image.to_json() for image in self.images],
            "name": self.name,
            "owner": self.owner.to_json(),
            "public": self.public,
            "snapshot_id": self.snapshot_id,
            "tracks": self.tracks.to_json(),
            "type": self.type.value,
            "uri": self.uri,
        }


@define(frozen=True, slots=True)
class FullPlaylist:
    """Complete playlist object, including the first page of its items."""

    collaborative: bool
    description: str | None
    external_urls: dict[str, str]
    followers: Followers
    href: str
    id: str
    images: tuple[Image, ...]
    name: str
    owner: PublicUser
    public: bool | None
    snapshot_id: str
    tracks: Page[PlaylistItem]
    uri: str
    type: ObjectType = ObjectType.PLAYLIST

    @classmethod
    def from_json(cls, data: Mapping[str, Any], path: str = "") -> Self:
        data = as_object(data, path)
        return cls(
            collaborative=require(data, "collaborative", bool, path),
            description=optional(data, "description", str, path),
            external_urls=string_map(require(data, "external_urls", Mapping, path), join(path, "external_urls")),
            followers=Followers.from_json(require(data, "followers", Mapping, path), join(path, "followers")),
            href=require(data, "href", str, path),
            id=require(data, "id", str, path),
            images=images(data, path),
            name=require(data, "name", str, path),
            owner=PublicUser.from_json(require(data, "owner", Mapping, path), join(path, "owner")),
            public=optional(data, "public", bool, path),
            snapshot_id=require(data, "snapshot_id", str, path),
            tracks=Page.from_json(require(data, "tracks", Mapping, path), PlaylistItem.from_json, join(path, "tracks")),
            type=object_type(data, path, ObjectType.PLAYLIST),
            uri=require(data, "uri", str, path),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "collaborative": self.collaborative,
            "description": self.description,
            "external_urls": dict(self.external_urls),
            "followers": self.followers.to_json(),
            "href": self.href,
            "id": self.id,
            "images": [image.to_json() for image in self.images],
            "name": self.name,
            "owner": self.owner.to_json(),
            "public": self.public,
            "snapshot_id": self.snapshot_id,
            "tracks": self.tracks.to_json(),
            "type": self.type.value,
            "uri": self.uri,
        }


@define(frozen=True, slots=True)
class PlaylistSnapshot:
    """Version identifier returned by every playlist mutation."""

    snapshot_id: str

    @classmethod
    def from_json(cls, data: Mapping[str, Any], path: str = "") -> Self:
        return cls(snapshot_id=require(as_object(data, path), "snapshot_id", str, path))

    def to_json(self) -> dict[str, Any]:
        return {"snapshot_id": self.snapshot_id}
