"""Artist objects, full and simplified."""

from collections.abc import Mapping
from typing import Any, Self

from attrs import define

from .shared import (
    Followers,
    Image,
    ObjectType,
    as_object,
    images,
    join,
    nullable,
    object_type,
    require,
    string_list,
    string_map,
)


@define(frozen=True, slots=True)
class SimplifiedArtist:
    """Artist reference embedded in tracks and albums."""

    external_urls: dict[str, str]
    href: str | None
    id: str | None
    name: str
    uri: str | None
    type: ObjectType = ObjectType.ARTIST

    @classmethod
    def from_json(cls, data: Mapping[str, Any], path: str = "") -> Self:
        data = as_object(data, path)
        return cls(
            external_urls=string_map(require(data, "external_urls", Mapping, path), join(path, "external_urls")),
            href=nullable(data, "href", str, path),
            id=nullable(data, "id", str, path),
            name=require(data, "name", str, path),
            type=object_type(data, path, ObjectType.ARTIST),
            uri=nullable(data, "uri", str, path),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "external_urls": dict(self.external_urls),
            "href": self.href,
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "uri": self.uri,
        }


@define(frozen=True, slots=True)
class FullArtist:
    """Complete artist object returned by the artist endpoints."""

    external_urls: dict[str, str]
    followers: Followers
    genres: tuple[str, ...]
    href: str
    id: str
    images: tuple[Image, ...]
    name: str
    popularity: int
    uri: str
    type: ObjectType = ObjectType.ARTIST

    @classmethod
    def from_json(cls, data: Mapping[str, Any], path: str = "") -> Self:
        data = as_object(data, path)
        return cls(
            external_urls=string_map(require(data, "external_urls", Mapping, path), join(path, "external_urls")),
            followers=Followers.from_json(require(data, "followers", Mapping, path), join(path, "followers")),
            genres=string_list(require(data, "genres", list, path), join(path, "genres")),
            href=require(data, "href", str, path),
            id=require(data, "id", str, path),
            images=images(data, path),
            name=require(data, "name", str, path),
            popularity=require(data, "popularity", int, path),
            type=object_type(data, path, ObjectType.ARTIST),
            uri=require(data, "uri", str, path),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "external_urls": dict(self.external_urls),
            "followers": self.followers.to_json(),
            "genres": list(self.genres),
            "href": self.href,
            "id": self.id,
            "images": [image.to_json() for image in self.images],
            "name": self.name,
            "popularity": self.popularity,
            "type": self.type.value,
            "uri": self.uri,
        }
