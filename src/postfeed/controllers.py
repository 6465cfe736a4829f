"""
Fetch-state controllers.

A controller wraps one kind of remote fetch with the ``{data, loading, error,
has_more}`` state the screens render. ``FetchController`` holds the shared
machinery (state snapshot, request generations, cancellation); subclasses
decide how a result or a failure turns into the next snapshot:

- PaginatedController: cursor based pages (posts feed, comments of a post)
- SearchController: free-text search with debounce and a hard timeout
- CommentCountController: number of comments on a post

State machine per instance: IDLE -> LOADING -> (SUCCESS | ERROR) -> IDLE.
Failures are never retried automatically.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Generic, List, Optional, TypeVar

from .errors import FetchError, NetworkError
from .models import FetchState, PageCursor
from .schemas import Comment, Post

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

PageFetcher = Callable[[int, int], Awaitable[List[T]]]


# PUBLIC_INTERFACE
class FetchController(Generic[T]):
    """
    Base class for a single asynchronous fetch with observable state.

    Every request gets a generation number. Starting a new request cancels
    the one in flight, and only the newest generation may write state, so
    overlapping loads never interleave their results. ``cleanup()`` cancels
    the in-flight request and freezes the state.
    """

    def __init__(self, name: str, initial: Optional[FetchState[T]] = None) -> None:
        self.name = name
        self._state: FetchState[T] = initial or FetchState()
        self._generation = 0
        self._task: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def state(self) -> FetchState[T]:
        return self._state

    @property
    def data(self) -> List[T]:
        return self._state.data

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> Optional[str]:
        return self._state.error

    @property
    def has_more(self) -> bool:
        return self._state.has_more

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def started(self) -> bool:
        """True once a request has been issued."""
        return self._generation > 0

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    def _cancel_in_flight(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _execute(
        self,
        fetch: Callable[[], Awaitable[R]],
        on_success: Callable[[R], FetchState[T]],
        on_failure: Callable[[str], FetchState[T]],
    ) -> FetchState[T]:
        if self._closed:
            return self._state

        self._cancel_in_flight()
        self._generation += 1
        generation = self._generation
        self._state = self._state.evolve(loading=True, error=None)

        task = asyncio.ensure_future(fetch())
        self._task = task
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            # The caller went away; the request goes with it.
            task.cancel()
            if self._is_current(generation):
                self._task = None
                self._state = self._state.evolve(loading=False)
            raise

        if not self._is_current(generation):
            # Superseded by a newer request or torn down by cleanup().
            return self._state
        self._task = None

        if task.cancelled():
            self._state = self._state.evolve(loading=False)
            return self._state

        exc = task.exception()
        if exc is None:
            self._state = on_success(task.result())
        elif isinstance(exc, FetchError):
            logger.info("%s fetch failed: %s", self.name, exc)
            self._state = on_failure(str(exc))
        else:
            self._state = self._state.evolve(loading=False)
            raise exc
        return self._state

    # PUBLIC_INTERFACE
    def cleanup(self) -> None:
        """
        Tear the controller down.

        The in-flight request, if any, is cancelled and its result is never
        written. Later loads are no-ops.
        """
        if self._closed:
            return
        self._closed = True
        self._generation += 1
        self._cancel_in_flight()
        logger.debug("%s controller cleaned up", self.name)


# PUBLIC_INTERFACE
class PaginatedController(FetchController[T]):
    """
    Cursor based list loading.

    ``has_more`` is ``len(page) == limit``: the remote API does not report a
    total, so an exactly full last page reports ``has_more=True`` and the
    following (empty) page flips it to False.
    """

    def __init__(self, fetch_page: PageFetcher, limit: int, *, name: str = "list") -> None:
        super().__init__(name)
        self._fetch_page = fetch_page
        self.cursor = PageCursor(page=1, limit=limit)

    # PUBLIC_INTERFACE
    async def load(self, refresh: bool = False) -> FetchState[T]:
        """
        Fetch the page the cursor points at.

        A refresh resets the cursor to page 1. Page 1 replaces ``data``, later
        pages append to it. On failure ``data`` is kept and ``error`` is set.
        """
        if self._closed:
            return self._state
        if refresh:
            self.cursor.reset()

        page = self.cursor.page
        limit = self.cursor.limit

        def on_success(items: List[T]) -> FetchState[T]:
            data = list(items) if page == 1 else [*self._state.data, *items]
            if items:
                self.cursor.page = page + 1
            return FetchState(data=data, loading=False, error=None, has_more=len(items) == limit)

        def on_failure(message: str) -> FetchState[T]:
            return self._state.evolve(loading=False, error=message)

        return await self._execute(lambda: self._fetch_page(page, limit), on_success, on_failure)

    # PUBLIC_INTERFACE
    async def load_more(self) -> FetchState[T]:
        """Load the next page unless the list is exhausted or a fetch is running."""
        if self._closed or not self._state.has_more or self._state.loading:
            return self._state
        return await self.load()


# PUBLIC_INTERFACE
class SearchController(FetchController[Post]):
    """
    Free-text post search.

    Blank queries never reach the network. ``submit()`` debounces keystrokes:
    each call restarts the timer and only the last query of a quiet window is
    searched. Every search is bounded by ``timeout`` seconds and a failed
    search clears the previous results.
    """

    def __init__(
        self,
        search: Callable[[str], Awaitable[List[Post]]],
        *,
        timeout: float = 10.0,
        debounce: float = 0.5,
        name: str = "search",
    ) -> None:
        super().__init__(name, FetchState(has_more=False))
        self._search = search
        self._timeout = timeout
        self._debounce = debounce
        self._pending: Optional[asyncio.Task] = None
        self.query = ""

    async def _search_with_timeout(self, query: str) -> List[Post]:
        try:
            return await asyncio.wait_for(self._search(query), self._timeout)
        except asyncio.TimeoutError as exc:
            raise NetworkError("Network error: request timed out") from exc

    # PUBLIC_INTERFACE
    async def search(self, query: str) -> FetchState[Post]:
        """Search immediately. A blank query is a no-op."""
        q = query.strip()
        if self._closed or not q:
            return self._state
        self.query = q

        def on_success(items: List[Post]) -> FetchState[Post]:
            return FetchState(data=list(items), loading=False, error=None, has_more=False)

        def on_failure(message: str) -> FetchState[Post]:
            return FetchState(data=[], loading=False, error=message, has_more=False)

        return await self._execute(lambda: self._search_with_timeout(q), on_success, on_failure)

    async def _debounced(self, query: str) -> None:
        await asyncio.sleep(self._debounce)
        await self.search(query)

    # PUBLIC_INTERFACE
    def submit(self, query: str) -> None:
        """
        Debounced search for keystroke input. Must be called from the event loop.
        """
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None
        if self._closed or not query.strip():
            return
        self._pending = asyncio.ensure_future(self._debounced(query))

    # PUBLIC_INTERFACE
    async def wait_pending(self) -> FetchState[Post]:
        """Wait for a scheduled debounced search, if any, and return the state."""
        pending = self._pending
        if pending is not None:
            await asyncio.wait({pending})
        return self._state

    def cleanup(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None
        super().cleanup()


COMMENT_COUNT_ERROR = "Error fetching comments"


# PUBLIC_INTERFACE
class CommentCountController(FetchController[Comment]):
    """Loads every comment of a post and exposes how many there are."""

    def __init__(self, fetch_all: Callable[[], Awaitable[List[Comment]]], *, name: str = "comment-count") -> None:
        super().__init__(name, FetchState(has_more=False))
        self._fetch_all = fetch_all

    @property
    def count(self) -> int:
        return len(self._state.data)

    # PUBLIC_INTERFACE
    async def load(self) -> FetchState[Comment]:
        def on_success(items: List[Comment]) -> FetchState[Comment]:
            return FetchState(data=list(items), loading=False, error=None, has_more=False)

        def on_failure(message: str) -> FetchState[Comment]:
            return self._state.evolve(loading=False, error=COMMENT_COUNT_ERROR)

        return await self._execute(self._fetch_all, on_success, on_failure)
