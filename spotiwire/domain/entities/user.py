"""User profile objects."""

from collections.abc import Mapping
from typing import Any, Self

from attrs import define

from .shared import (
    Followers,
    Image,
    ObjectType,
    as_object,
    join,
    object_list,
    object_type,
    optional,
    require,
    string_map,
)


def _optional_images(data: Mapping[str, Any], path: str) -> tuple[Image, ...] | None:
    value = optional(data, "images", list, path)
    return object_list(value, join(path, "images"), Image.from_json) if value is not None else None


@define(frozen=True, slots=True)
class PublicUser:
    """Public profile; playlist owners are embedded in this shape without
    followers or images.
    """

    display_name: str | None
    external_urls: dict[str, str]
    href: str
    id: str
    uri: str
    followers: Followers | None = None
    images: tuple[Image, ...] | None = None
    type: ObjectType = ObjectType.USER

    @classmethod
    def from_json(cls, data: Mapping[str, Any], path: str = "") -> Self:
        data = as_object(data, path)
        followers = optional(data, "followers", Mapping, path)
        return cls(
            display_name=optional(data, "display_name", str, path),
            external_urls=string_map(require(data, "external_urls", Mapping, path), join(path, "external_urls")),
            followers=Followers.from_json(followers, join(path, "followers")) if followers is not None else None,
            href=require(data, "href", str, path),
            id=require(data, "id", str, path),
            images=_optional_images(data, path),
            type=object_type(data, path, ObjectType.USER),
            uri=require(data, "uri", str, path),
        )

    def to_json(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "display_name": self.display_name,
            "external_urls": dict(self.external_urls),
            "href": self.href,
            "id": self.id,
            "type": self.type.value,
            "uri": self.uri,
        }
        if self.followers is not None:
            payload["followers"] = self.followers.to_json()
        if self.images is not None:
            payload["images"] = [image.to_json() for image in self.images]
        return payload


@define(frozen=True, slots=True)
class ExplicitContent:
    """The current user's explicit content settings."""

    filter_enabled: bool
    filter_locked: bool

    @classmethod
    def from_json(cls, data: Mapping[str, Any], path: str = "") -> Self:
        data = as_object(data, path)
        return cls(
            filter_enabled=require(data, "filter_enabled", bool, path),
            filter_locked=require(data, "filter_locked", bool, path),
        )

    def to_json(self) -> dict[str, Any]:
        return {"filter_enabled": self.filter_enabled, "filter_locked": self.filter_locked}


@define(frozen=True, slots=True)
class PrivateUser:
    """Profile of the user who authorized the token.

    ``country``, ``email``, ``product`` and ``explicit_content`` are only sent
    when the matching scopes were granted.
    """

    display_name: str | None
    external_urls: dict[str, str]
    href: str
    id: str
    uri: str
    country: str | None = None
    email: str | None = None
    explicit_content: ExplicitContent | None = None
    followers: Followers | None = None
    images: tuple[Image, ...] | None = None
    product: str | None = None
    type: ObjectType = ObjectType.USER

    @classmethod
    def from_json(cls, data: Mapping[str, Any], path: str = "") -> Self:
        data = as_object(data, path)
        followers = optional(data, "followers", Mapping, path)
        explicit = optional(data, "explicit_content", Mapping, path)
        return cls(
            country=optional(data, "country", str, path),
            display_name=optional(data, "display_name", str, path),
            email=optional(data, "email", str, path),
            explicit_content=ExplicitContent.from_json(explicit, join(path, "explicit_content"))
            if explicit is not None
            else None,
            external_urls=string_map(require(data, "external_urls", Mapping, path), join(path, "external_urls")),
            followers=Followers.from_json(followers, join(path, "followers")) if followers is not None else None,
            href=require(data, "href", str, path),
            id=require(data, "id", str, path),
            images=_optional_images(data, path),
            product=optional(data, "product", str, path),
            type=object_type(data, path, ObjectType.USER),
            uri=require(data, "uri", str, path),
        )

    def to_json(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "display_name": self.display_name,
            "external_urls": dict(self.external_urls),
            "href": self.href,
            "id": self.id,
            "type": self.type.value,
            "uri": self.uri,
        }
        optional_fields = {
            "country": self.country,
            "email": self.email,
            "explicit_content": self.explicit_content.to_json() if self.explicit_content else None,
            "followers": self.followers.to_json() if self.followers else None,
            "images": [image.to_json() for image in self.images] if self.images is not None else None,
            "product": self.product,
        }
        payload.update({k: v for k, v in optional_fields.items() if v is not None})
        return payload
