"""Shared value objects and wire-reading helpers for domain entities.

The helpers turn "missing key" and "wrong type" into MalformedResponse with
the dotted path of the offending field, so entity parsers can read payloads
without sprinkling try/except around every lookup.
"""

from collections.abc import Callable, Mapping
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Any, Self

from attrs import define

from spotiwire.domain.exceptions import MalformedResponse


class ObjectType(StrEnum):
    """The ``"type"`` tag carried by every Web API object."""

    ALBUM = "album"
    ARTIST = "artist"
    AUDIO_FEATURES = "audio_features"
    EPISODE = "episode"
    PLAYLIST = "playlist"
    SHOW = "show"
    TRACK = "track"
    USER = "user"


# =============================================================================
# WIRE READERS
# =============================================================================

_MISSING = object()


def _describe(value: Any) -> str:
    return "null" if value is None else type(value).__name__


def _check(value: Any, expected: type | tuple[type, ...], path: str) -> Any:
    # bool is an int subclass; the wire never means one when it sends the other
    if isinstance(value, bool) and bool not in (
        expected if isinstance(expected, tuple) else (expected,)
    ):
        raise MalformedResponse(f"expected {expected}, got bool", path)
    if not isinstance(value, expected):
        raise MalformedResponse(f"expected {expected}, got {_describe(value)}", path)
    return value


def join(path: str, key: str | int) -> str:
    """Extend a dotted field path."""
    if isinstance(key, int):
        return f"{path}[{key}]"
    return f"{path}.{key}" if path else key


def as_object(data: Any, path: str = "") -> Mapping[str, Any]:
    """Assert that a payload is a JSON object."""
    if not isinstance(data, Mapping):
        raise MalformedResponse(f"expected object, got {_describe(data)}", path or None)
    return data


def require(
    data: Mapping[str, Any], key: str, expected: type | tuple[type, ...], path: str = ""
) -> Any:
    """Read a required, non-null field."""
    value = data.get(key, _MISSING)
    if value is _MISSING:
        raise MalformedResponse("required field missing", join(path, key))
    return _check(value, expected, join(path, key))


def nullable(
    data: Mapping[str, Any], key: str, expected: type | tuple[type, ...], path: str = ""
) -> Any:
    """Read a field that is always sent but may be null."""
    value = data.get(key, _MISSING)
    if value is _MISSING:
        raise MalformedResponse("required field missing", join(path, key))
    if value is None:
        return None
    return _check(value, expected, join(path, key))


def optional(
    data: Mapping[str, Any], key: str, expected: type | tuple[type, ...], path: str = ""
) -> Any:
    """Read a field that may be absent or null."""
    value = data.get(key)
    if value is None:
        return None
    return _check(value, expected, join(path, key))


def require_float(data: Mapping[str, Any], key: str, path: str = "") -> float:
    """Read a required number, accepting integral JSON numbers."""
    return float(require(data, key, (int, float), path))


def string_map(value: Any, path: str) -> dict[str, str]:
    """Validate a string-to-string mapping such as ``external_urls``."""
    mapping = as_object(value, path)
    for key, item in mapping.items():
        _check(item, str, join(path, key))
    return dict(mapping)


def string_list(value: Any, path: str) -> tuple[str, ...]:
    """Validate a list of strings such as ``genres``."""
    items = _check(value, list, path)
    return tuple(_check(item, str, join(path, i)) for i, item in enumerate(items))


def object_list[T](
    value: Any, path: str, parse: Callable[[Mapping[str, Any], str], T]
) -> tuple[T, ...]:
    """Parse a list of nested objects, keeping each element's path."""
    items = _check(value, list, path)
    return tuple(parse(as_object(item, join(path, i)), join(path, i)) for i, item in enumerate(items))


def object_type(
    data: Mapping[str, Any], path: str = "", expected: ObjectType | None = None
) -> ObjectType:
    """Read and validate the ``type`` tag."""
    raw = require(data, "type", str, path)
    try:
        tag = ObjectType(raw)
    except ValueError:
        raise MalformedResponse(f"unknown object type {raw!r}", join(path, "type")) from None
    if expected is not None and tag is not expected:
        raise MalformedResponse(
            f"expected type {expected.value!r}, got {raw!r}", join(path, "type")
        )
    return tag


# =============================================================================
# DURATIONS AND TIMESTAMPS
# =============================================================================

_ONE_MS = timedelta(milliseconds=1)


def duration_from_ms(value: Any, path: str = "duration_ms") -> timedelta:
    """Decode a wire millisecond count into a timedelta."""
    ms = _check(value, int, path)
    if ms < 0:
        raise MalformedResponse(f"negative duration {ms}", path)
    return timedelta(milliseconds=ms)


def duration_to_ms(duration: timedelta) -> int:
    """Encode a timedelta as whole milliseconds, exactly."""
    return duration // _ONE_MS


def parse_timestamp(value: Any, path: str) -> datetime:
    """Decode an ISO-8601 timestamp, assuming UTC when no offset is sent."""
    raw = _check(value, str, path)
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        raise MalformedResponse(f"invalid timestamp {raw!r}", path) from None
    return parsed.replace(tzinfo=UTC) if parsed.tzinfo is None else parsed


def format_timestamp(value: datetime) -> str:
    """Encode a timestamp the way the Web API sends them, keeping any fraction."""
    value = value.astimezone(UTC).replace(tzinfo=None)
    if not value.microsecond:
        timespec = "seconds"
    elif value.microsecond % 1000 == 0:
        timespec = "milliseconds"
    else:
        timespec = "microseconds"
    return f"{value.isoformat(timespec=timespec)}Z"


# =============================================================================
# SMALL VALUE OBJECTS
# =============================================================================


@define(frozen=True, slots=True)
class Restriction:
    """Why content is unavailable, e.g. ``"market"`` or ``"explicit"``."""

    reason: str

    @classmethod
    def from_json(cls, data: Mapping[str, Any], path: str = "") -> Self:
        return cls(reason=require(as_object(data, path), "reason", str, path))

    def to_json(self) -> dict[str, Any]:
        return {"reason": self.reason}


@define(frozen=True, slots=True)
class Image:
    """Cover art or profile picture."""

    url: str
    height: int | None = None
    width: int | None = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any], path: str = "") -> Self:
        data = as_object(data, path)
        return cls(
            url=require(data, "url", str, path),
            height=optional(data, "height", int, path),
            width=optional(data, "width", int, path),
        )

    def to_json(self) -> dict[str, Any]:
        return {"url": self.url, "height": self.height, "width": self.width}


@define(frozen=True, slots=True)
class Followers:
    """Follower count; ``href`` is always null in the current API."""

    total: int
    href: str | None = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any], path: str = "") -> Self:
        data = as_object(data, path)
        return cls(
            total=require(data, "total", int, path),
            href=optional(data, "href", str, path),
        )

    def to_json(self) -> dict[str, Any]:
        return {"href": self.href, "total": self.total}


@define(frozen=True, slots=True)
class Copyright:
    """Copyright statement; ``type`` is ``C`` (copyright) or ``P`` (performance)."""

    text: str
    type: str

    @classmethod
    def from_json(cls, data: Mapping[str, Any], path: str = "") -> Self:
        data = as_object(data, path)
        return cls(
            text=require(data, "text", str, path),
            type=require(data, "type", str, path),
        )

    def to_json(self) -> dict[str, Any]:
        return {"text": self.text, "type": self.type}


def images(data: Mapping[str, Any], path: str, key: str = "images") -> tuple[Image, ...]:
    """Read an image list; a null list (sent for some users) reads as empty."""
    value = data.get(key)
    if value is None:
        return ()
    return object_list(value, join(path, key), Image.from_json)
