"""Paging envelopes wrapping one page of results plus cursors to its neighbours.

Each envelope remembers the item parser it was decoded with, so the client
can decode the next page into the same type without the caller repeating it.
"""

from collections.abc import Callable, Iterator, Mapping
from typing import Any

from attrs import define, field

from .shared import as_object, join, nullable, object_list, optional, require

type ItemParser[T] = Callable[[Mapping[str, Any], str], T]


def _encode(item: Any) -> Any:
    return item.to_json() if hasattr(item, "to_json") else item


@define(frozen=True, slots=True)
class Page[T]:
    """Offset-based paging object.

    Attributes:
        href: Full URL of the request that produced this page
        items: The page contents, in server order
        limit: Requested page size
        next: URL of the next page, or None on the last page
        offset: Index of the first item within the whole result
        previous: URL of the previous page, or None on the first page
        total: Total number of items available server-side
        skip_null_items: Drop null entries instead of rejecting them; search
            results contain them for objects the server cannot show
    """

    href: str
    items: tuple[T, ...]
    limit: int
    next: str | None
    offset: int
    previous: str | None
    total: int
    parse_item: ItemParser[T] | None = field(default=None, eq=False, repr=False, kw_only=True)
    skip_null_items: bool = field(default=False, eq=False, repr=False, kw_only=True)

    @classmethod
    def from_json(
        cls,
        data: Mapping[str, Any],
        parse_item: ItemParser[T],
        path: str = "",
        *,
        skip_null_items: bool = False,
    ) -> "Page[T]":
        data = as_object(data, path)
        items = require(data, "items", list, path)
        if skip_null_items:
            items = [item for item in items if item is not None]
        return cls(
            href=require(data, "href", str, path),
            items=object_list(items, join(path, "items"), parse_item),
            limit=require(data, "limit", int, path),
            next=nullable(data, "next", str, path),
            offset=require(data, "offset", int, path),
            previous=nullable(data, "previous", str, path),
            total=require(data, "total", int, path),
            parse_item=parse_item,
            skip_null_items=skip_null_items,
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "href": self.href,
            "items": [_encode(item) for item in self.items],
            "limit": self.limit,
            "next": self.next,
            "offset": self.offset,
            "previous": self.previous,
            "total": self.total,
        }

    @property
    def has_next(self) -> bool:
        return self.next is not None

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@define(frozen=True, slots=True)
class Cursor:
    """Position markers for cursor-based paging."""

    after: str | None = None
    before: str | None = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any], path: str = "") -> "Cursor":
        data = as_object(data, path)
        return cls(
            after=optional(data, "after", str, path),
            before=optional(data, "before", str, path),
        )

    def to_json(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"after": self.after}
        if self.before is not None:
            payload["before"] = self.before
        return payload


@define(frozen=True, slots=True)
class CursorPage[T]:
    """Cursor-based paging object, used by followed artists.

    ``total`` is optional because some cursor endpoints never send it.
    """

    href: str
    items: tuple[T, ...]
    limit: int
    next: str | None
    cursors: Cursor | None
    total: int | None = None
    parse_item: ItemParser[T] | None = field(default=None, eq=False, repr=False, kw_only=True)

    @classmethod
    def from_json(
        cls, data: Mapping[str, Any], parse_item: ItemParser[T], path: str = ""
    ) -> "CursorPage[T]":
        data = as_object(data, path)
        cursors = optional(data, "cursors", Mapping, path)
        return cls(
            href=require(data, "href", str, path),
            items=object_list(require(data, "items", list, path), join(path, "items"), parse_item),
            limit=require(data, "limit", int, path),
            next=optional(data, "next", str, path),
            cursors=Cursor.from_json(cursors, join(path, "cursors")) if cursors is not None else None,
            total=optional(data, "total", int, path),
            parse_item=parse_item,
        )

    def to_json(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "href": self.href,
            "items": [_encode(item) for item in self.items],
            "limit": self.limit,
            "next": self.next,
            "cursors": self.cursors.to_json() if self.cursors else None,
        }
        if self.total is not None:
            payload["total"] = self.total
        return payload

    @property
    def has_next(self) -> bool:
        return self.next is not None

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)
