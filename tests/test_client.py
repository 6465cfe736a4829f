import httpx
import pytest

from postfeed.client import PostsClient
from postfeed.errors import FetchError, HttpStatusError, NetworkError

from conftest import BASE_URL


def client_for(handler):
    return PostsClient(BASE_URL, http=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


class TestPostsClient:
    @pytest.mark.asyncio
    async def test_parses_posts(self, posts_client):
        posts = await posts_client.fetch_posts(2, 10)
        assert [p.id for p in posts] == list(range(11, 21))
        assert posts[0].user_id == 2
        assert posts[0].model_dump(by_alias=True)["userId"] == 2

    @pytest.mark.asyncio
    async def test_search_sends_q(self, fake_api, posts_client):
        await posts_client.search_posts("hello world")
        assert fake_api.requests[0].url.params["q"] == "hello world"
        assert "_page" not in fake_api.requests[0].url.params

    @pytest.mark.asyncio
    async def test_non_2xx_becomes_http_status_error(self):
        client = client_for(lambda request: httpx.Response(404, json={}))
        with pytest.raises(HttpStatusError) as info:
            await client.fetch_posts(1, 20)
        assert info.value.status_code == 404
        assert str(info.value) == "HTTP error! status: 404"

    @pytest.mark.asyncio
    async def test_transport_failure_becomes_network_error(self):
        def handler(request):
            raise httpx.ConnectError("boom", request=request)

        client = client_for(handler)
        with pytest.raises(NetworkError) as info:
            await client.fetch_comments(1, 1, 15)
        assert str(info.value) == "Network error"

    @pytest.mark.asyncio
    async def test_timeout_becomes_network_error(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        client = client_for(handler)
        with pytest.raises(NetworkError) as info:
            await client.fetch_all_comments(1)
        assert "timed out" in str(info.value)

    @pytest.mark.asyncio
    async def test_unexpected_payload(self):
        client = client_for(lambda request: httpx.Response(200, json={"not": "a list"}))
        with pytest.raises(FetchError) as info:
            await client.fetch_posts(1, 20)
        assert not isinstance(info.value, (NetworkError, HttpStatusError))

    @pytest.mark.asyncio
    async def test_undecodable_body_becomes_network_error(self):
        def handler(request):
            return httpx.Response(200, headers={"content-encoding": "gzip"}, content=b"not gzip at all")

        client = client_for(handler)
        with pytest.raises(NetworkError) as info:
            await client.fetch_posts(1, 20)
        assert str(info.value) == "Network error"

    @pytest.mark.asyncio
    async def test_too_many_redirects_becomes_network_error(self):
        def handler(request):
            return httpx.Response(302, headers={"location": f"{BASE_URL}/posts"})

        client = PostsClient(
            BASE_URL,
            http=httpx.AsyncClient(transport=httpx.MockTransport(handler), follow_redirects=True, max_redirects=2),
        )
        with pytest.raises(NetworkError):
            await client.fetch_posts(1, 20)

    @pytest.mark.asyncio
    async def test_search_timeout_overrides_client_default(self, fake_api, posts_client):
        await posts_client.search_posts("post", timeout=10.0)
        await posts_client.fetch_posts(1, 20)
        search, listing = fake_api.requests
        assert search.extensions["timeout"]["read"] == 10.0
        assert listing.extensions["timeout"]["read"] == 5.0
