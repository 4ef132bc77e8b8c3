"""Page-spanning gist stream fed by a background producer task."""

import asyncio
import logging
import weakref
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Protocol, TypeVar

from gisty.exceptions import GistError
from gisty.models.schemas import GistSummary

T = TypeVar("T")
logger = logging.getLogger(__name__)

ListPage = Callable[[int, int], Awaitable[list[GistSummary]]]


class Rendezvous(Generic[T]):
    """
    Unbuffered channel between one sender and one receiver.

    send() returns only once the receiver has taken the item, so the sender
    is never more than one item ahead.
    """

    def __init__(self):
        self._queue: asyncio.Queue[T] = asyncio.Queue(maxsize=1)

    async def send(self, item: T) -> None:
        await self._queue.put(item)
        await self._queue.join()

    async def receive(self) -> T:
        item = await self._queue.get()
        self._queue.task_done()
        return item


class CursorPolicy(Protocol):
    """Where a stream starts and how it moves to the next page."""

    start: int

    def advance(self, cursor: int, per_page: int) -> int: ...


class OffsetCursor:
    """Moves the page parameter by the page size: 0, 40, 80, ..."""

    start = 0

    def advance(self, cursor: int, per_page: int) -> int:
        return cursor + per_page


class PageNumberCursor:
    """Moves the page parameter by one: 1, 2, 3, ..."""

    start = 1

    def advance(self, cursor: int, per_page: int) -> int:
        return cursor + 1


CURSOR_POLICIES: dict[str, type] = {
    "offset": OffsetCursor,
    "page_number": PageNumberCursor,
}


def cursor_policy(name: str) -> CursorPolicy:
    """Return the cursor policy registered under name."""
    try:
        return CURSOR_POLICIES[name]()
    except KeyError:
        raise ValueError(f"unknown cursor policy: {name}") from None


@dataclass
class IterResult:
    """One element of a result stream: either a gist or the error that ended it."""

    gist: GistSummary | None = None
    error: GistError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class _Done:
    error: GistError | None = None


async def _produce(
    list_page: ListPage,
    per_page: int,
    cursor: CursorPolicy,
    channel: Rendezvous,
) -> None:
    # Must not reference the stream, or the finalizer would never run.
    page = cursor.start
    error = None
    try:
        while True:
            try:
                gists = await list_page(per_page, page)
            except GistError as e:
                error = e
                break
            if not gists:
                break
            for gist in gists:
                await channel.send(gist)
            page = cursor.advance(page, per_page)
    except Exception:
        # Unblock the consumer; it re-raises this when it awaits the task.
        await channel.send(_Done())
        raise
    await channel.send(_Done(error))


class GistStream:
    """
    Single-pass async iterator over every gist of a user.

    Pages are fetched by a producer task started on the first read and handed
    over one gist at a time. The stream ends quietly on the first empty page
    or the first error; the error, if any, is kept on ``error``.

    Close the stream (``aclose()`` or ``async with``) to stop the producer
    early. A stream that is dropped without closing cancels its producer when
    it is garbage collected.
    """

    def __init__(
        self,
        list_page: ListPage,
        per_page: int,
        cursor: CursorPolicy | None = None,
        log: logging.Logger | None = None,
    ):
        self._list_page = list_page
        self._per_page = per_page
        self._cursor = cursor or OffsetCursor()
        self._log = log or logger
        self._channel: Rendezvous = Rendezvous()
        self._task: asyncio.Task | None = None
        self._finalizer: weakref.finalize | None = None
        self._finished = False
        self.error: GistError | None = None
        self.count = 0

    def __aiter__(self) -> "GistStream":
        return self

    async def __anext__(self) -> GistSummary:
        if self._finished:
            raise StopAsyncIteration
        if self._task is None:
            self._start()

        item = await self._channel.receive()
        if isinstance(item, _Done):
            self._finished = True
            self.error = item.error
            await self._task
            if self.error is not None:
                self._log.debug(f"gist stream stopped after {self.count} gists: {self.error}")
            elif self.count == 0:
                self._log.error("didn't find any gists")
            raise StopAsyncIteration

        self.count += 1
        return item

    async def __aenter__(self) -> "GistStream":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()

    @property
    def finished(self) -> bool:
        return self._finished

    async def aclose(self) -> None:
        """Stop the producer and end the stream."""
        self._finished = True
        task = self._task
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    def _start(self) -> None:
        self._task = asyncio.create_task(
            _produce(self._list_page, self._per_page, self._cursor, self._channel)
        )
        self._finalizer = weakref.finalize(self, self._task.cancel)
        # The loop may already be closed at interpreter exit.
        self._finalizer.atexit = False
