from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from .errors import FetchError, HttpStatusError, NetworkError
from .schemas import Comment, CommentList, Post, PostList

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class PostsClient:
    """
    Thin async client for the public posts API (jsonplaceholder).

    Every call issues a single GET and parses a JSON array. Failures are
    normalised into the FetchError taxonomy:
    - transport, decoding and redirect failures and timeouts -> NetworkError
    - non-2xx responses -> HttpStatusError("HTTP error! status: <code>")
    - a body that is not the expected array -> FetchError

    Pass ``http`` to share or fake the underlying httpx.AsyncClient (tests use
    httpx.MockTransport); otherwise the client owns one and closes it in aclose().
    """

    def __init__(self, base_url: str, *, http: Optional[httpx.AsyncClient] = None) -> None:
        self._base_url = base_url.rstrip("/")
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def _get_list(
        self,
        path: str,
        adapter: TypeAdapter,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> List[Any]:
        url = f"{self._base_url}{path}"
        extra: Dict[str, Any] = {} if timeout is None else {"timeout": httpx.Timeout(timeout)}
        try:
            response = await self._http.get(url, params=params, **extra)
        except httpx.TimeoutException as exc:
            logger.warning("GET %s timed out: %s", path, exc)
            raise NetworkError("Network error: request timed out") from exc
        except httpx.RequestError as exc:
            logger.warning("GET %s failed: %s", path, exc)
            raise NetworkError() from exc

        if not response.is_success:
            logger.warning("GET %s returned HTTP %s", path, response.status_code)
            raise HttpStatusError(response.status_code)

        try:
            return adapter.validate_json(response.content)
        except ValidationError as exc:
            logger.warning("GET %s returned an unexpected payload: %s", path, exc)
            raise FetchError("Invalid response from server") from exc

    # PUBLIC_INTERFACE
    async def fetch_posts(self, page: int, limit: int) -> List[Post]:
        """GET /posts?_page=N&_limit=M"""
        return await self._get_list("/posts", PostList, params={"_page": page, "_limit": limit})

    # PUBLIC_INTERFACE
    async def fetch_comments(self, post_id: int, page: int, limit: int) -> List[Comment]:
        """GET /posts/{id}/comments?_page=N&_limit=M"""
        return await self._get_list(
            f"/posts/{post_id}/comments", CommentList, params={"_page": page, "_limit": limit}
        )

    # PUBLIC_INTERFACE
    async def fetch_all_comments(self, post_id: int) -> List[Comment]:
        """GET /posts/{id}/comments (unpaginated, used for comment counts)."""
        return await self._get_list(f"/posts/{post_id}/comments", CommentList)

    # PUBLIC_INTERFACE
    async def search_posts(self, query: str, *, timeout: Optional[float] = None) -> List[Post]:
        """
        GET /posts?q=<text>

        ``timeout`` replaces the http client default for this request, so a
        search may run longer than list fetches.
        """
        return await self._get_list("/posts", PostList, params={"q": query}, timeout=timeout)
