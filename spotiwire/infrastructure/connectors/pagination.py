"""Lazy iteration over paged Web API results.

Example:
    >>> first = await client.album_track(album_id, limit=50)
    >>> async for track in client.paginate(first):
    ...     print(track.name)

A Paginator is forward-only and single-use. It holds one page at a time and
fetches the next one only after every item of the current page was yielded.
"""

from collections.abc import Awaitable, Callable

from attrs import define, field

from spotiwire.config import get_logger
from spotiwire.domain.entities import CursorPage, Page

logger = get_logger(__name__).bind(service="pagination")

type AnyPage[T] = Page[T] | CursorPage[T]
type PageFetcher[T] = Callable[[AnyPage[T]], Awaitable[AnyPage[T] | None]]


@define(slots=True)
class Paginator[T]:
    """Async iterator over the items of a page and all pages after it.

    Iteration stops when the current page has no ``next`` link, when the
    fetcher returns no page, when a fetched page is empty, or once as many
    items as the server-reported ``total`` were yielded.

    Attributes:
        page: The page currently being consumed
        fetch_next: Coroutine returning the page after the one it is given
        pages_fetched: Number of follow-up pages requested so far
    """

    page: AnyPage[T]
    fetch_next: PageFetcher[T] = field(repr=False)
    pages_fetched: int = field(default=0, init=False)
    _index: int = field(default=0, init=False, repr=False)
    _yielded: int = field(default=0, init=False, repr=False)
    _done: bool = field(default=False, init=False, repr=False)

    def __aiter__(self) -> "Paginator[T]":
        return self

    async def __anext__(self) -> T:
        while not self._done:
            if self.page.total is not None and self._yielded >= self.page.total:
                break

            if self._index < len(self.page.items):
                item = self.page.items[self._index]
                self._index += 1
                self._yielded += 1
                return item

            if self.page.next is None:
                break

            next_page = await self.fetch_next(self.page)
            self.pages_fetched += 1
            if next_page is None or not next_page.items:
                break

            logger.debug(
                "Fetched next page",
                page=self.pages_fetched,
                items=len(next_page.items),
                total=next_page.total,
            )
            self.page = next_page
            self._index = 0

        self._done = True
        raise StopAsyncIteration

    async def collect(self, limit: int | None = None) -> list[T]:
        """Drain the remaining items into a list, stopping early at ``limit``."""
        items: list[T] = []
        async for item in self:
            items.append(item)
            if limit is not None and len(items) >= limit:
                break
        return items
