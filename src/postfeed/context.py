from __future__ import annotations

import logging
from typing import Dict, Optional

import httpx

from .client import PostsClient
from .controllers import CommentCountController, PaginatedController, SearchController
from .credentials import CredentialStore
from .favorites import FavoritesStore
from .schemas import Comment, Post
from .session import SessionManager
from .settings import Settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class AppContext:
    """
    Everything a running application holds: the remote client, the auth
    session, favorites and the fetch-state controllers behind each screen.

    Controllers for the feed and search live as long as the logged-in
    session; comment controllers are created when a post's detail view is
    opened and dropped when it is closed.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings
        self._http = httpx.AsyncClient(transport=transport)
        self.client = PostsClient(settings.api_base_url, http=self._http)
        self.store = CredentialStore(settings.auth_db_path)
        self.sessions = SessionManager(self.store)
        self.favorites = FavoritesStore()
        self._comments: Dict[int, PaginatedController[Comment]] = {}
        self.posts: PaginatedController[Post] = self._new_posts()
        self.search: SearchController = self._new_search()

    def _new_posts(self) -> PaginatedController[Post]:
        return PaginatedController(self.client.fetch_posts, self.settings.posts_page_size, name="posts")

    def _new_search(self) -> SearchController:
        timeout = self.settings.search_timeout

        async def search(query: str):
            return await self.client.search_posts(query, timeout=timeout)

        return SearchController(
            search,
            timeout=timeout,
            debounce=self.settings.search_debounce,
        )

    # PUBLIC_INTERFACE
    def comments_for(self, post_id: int) -> PaginatedController[Comment]:
        """Return the comments controller of a post, creating it on first use."""
        controller = self._comments.get(post_id)
        if controller is None:
            page_size = self.settings.comments_page_size

            async def fetch_page(page: int, limit: int):
                return await self.client.fetch_comments(post_id, page, limit)

            controller = PaginatedController(fetch_page, page_size, name=f"comments[{post_id}]")
            self._comments[post_id] = controller
        return controller

    # PUBLIC_INTERFACE
    def close_comments(self, post_id: int) -> bool:
        """Clean up and forget the comments controller of a post."""
        controller = self._comments.pop(post_id, None)
        if controller is None:
            return False
        controller.cleanup()
        return True

    # PUBLIC_INTERFACE
    def comment_counter(self, post_id: int) -> CommentCountController:
        async def fetch_all():
            return await self.client.fetch_all_comments(post_id)

        return CommentCountController(fetch_all, name=f"comment-count[{post_id}]")

    def _teardown_views(self) -> None:
        self.posts.cleanup()
        self.search.cleanup()
        for post_id in list(self._comments):
            self.close_comments(post_id)

    # PUBLIC_INTERFACE
    def reset_views(self) -> None:
        """Tear down every screen controller and start over with fresh ones."""
        self._teardown_views()
        self.posts = self._new_posts()
        self.search = self._new_search()

    # PUBLIC_INTERFACE
    def startup(self) -> None:
        self.store.ensure_schema()

    # PUBLIC_INTERFACE
    async def aclose(self) -> None:
        self._teardown_views()
        await self._http.aclose()
        logger.info("Application context closed")
