import asyncio
import re
from typing import List, Optional

import httpx
import pytest
import pytest_asyncio

from postfeed.client import PostsClient
from postfeed.settings import Settings

BASE_URL = "https://api.test"

_COMMENTS_PATH = re.compile(r"^/posts/(\d+)/comments$")


class FakePostsApi:
    """
    In-process stand-in for jsonplaceholder, served through httpx.MockTransport.

    Knobs:
    - status: answer every request with this HTTP status
    - network_down: raise a transport error instead of answering
    - gate: an asyncio.Event every request waits on before answering
    """

    def __init__(self, posts: int = 100, comments_per_post: int = 20) -> None:
        self.posts = [
            {"id": i, "title": f"Post {i}", "body": f"Body of post {i}", "userId": (i - 1) // 10 + 1}
            for i in range(1, posts + 1)
        ]
        self.comments_per_post = comments_per_post
        self.requests: List[httpx.Request] = []
        self.status: Optional[int] = None
        self.network_down = False
        self.gate: Optional[asyncio.Event] = None

    def comments(self, post_id: int) -> list:
        base = (post_id - 1) * self.comments_per_post
        return [
            {
                "id": base + i,
                "postId": post_id,
                "name": f"Comment {base + i}",
                "email": f"user{i}@example.com",
                "body": f"Comment body {base + i}",
            }
            for i in range(1, self.comments_per_post + 1)
        ]

    def pages_requested(self) -> List[int]:
        return [int(r.url.params["_page"]) for r in self.requests if "_page" in r.url.params]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        if self.network_down:
            raise httpx.ConnectError("connection refused", request=request)
        if self.status is not None:
            return httpx.Response(self.status, json={})

        params = request.url.params
        path = request.url.path
        match = _COMMENTS_PATH.match(path)
        if path == "/posts":
            items = self.posts
            if "q" in params:
                q = params["q"].lower()
                items = [p for p in items if q in p["title"].lower() or q in p["body"].lower()]
        elif match:
            items = self.comments(int(match.group(1)))
        else:
            return httpx.Response(404, json={})

        if "_page" in params:
            page = int(params["_page"])
            limit = int(params.get("_limit", "10"))
            items = items[(page - 1) * limit: page * limit]
        return httpx.Response(200, json=items)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def make_settings(tmp_path, **overrides) -> Settings:
    values = dict(
        api_base_url=BASE_URL,
        auth_db_path=str(tmp_path / "data" / "auth.db"),
        posts_page_size=20,
        comments_page_size=15,
        search_timeout=10.0,
        search_debounce=0.5,
        log_level="DEBUG",
        cors_allow_origins=["*"],
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def fake_api():
    return FakePostsApi()


@pytest_asyncio.fixture
async def posts_client(fake_api):
    http = httpx.AsyncClient(transport=fake_api.transport)
    yield PostsClient(BASE_URL, http=http)
    await http.aclose()


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


class SlowTransport(httpx.AsyncBaseTransport):
    """
    Answers as if the server took ``delay`` seconds, honouring the read
    timeout httpx attaches to each request instead of sleeping for real.
    """

    def __init__(self, api: FakePostsApi, delay: float) -> None:
        self.api = api
        self.delay = delay
        self.timeouts: List[Optional[float]] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        read_timeout = request.extensions.get("timeout", {}).get("read")
        self.timeouts.append(read_timeout)
        if read_timeout is not None and self.delay > read_timeout:
            raise httpx.ReadTimeout("timed out", request=request)
        return await self.api.handler(request)
