import asyncio

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer as AioTestServer

from services.content_api import ContentAPI
from services.models import DeliveredAsset, Failure, MediaKind, ResolvedContent

URL = "https://vm.tiktok.com/ZMabc123/"

INFO_DATA = {
    "has_video": True,
    "has_audio": True,
    "has_photos": False,
    "cover": "https://cdn.example/cover.jpg",
    "author": {"nickname": "dancer<3"},
    "digg_count": 1200,
    "play_count": 45000,
    "comment_count": 17,
}


@pytest_asyncio.fixture
async def make_api():
    servers, clients = [], []

    async def factory(handler, timeout=5):
        app = web.Application()
        app.router.add_get("/api.php", handler)
        server = AioTestServer(app)
        await server.start_server()
        servers.append(server)

        api = ContentAPI(str(server.make_url("/api.php")), timeout=timeout)
        clients.append(api)
        return api

    yield factory

    for api in clients:
        await api.close()
    for server in servers:
        await server.close()


def json_handler(payload, status=200, seen=None):
    async def handler(request):
        if seen is not None:
            seen.append(dict(request.query))
        return web.json_response(payload, status=status)
    return handler


@pytest.mark.asyncio
async def test_resolve_success(make_api):
    seen = []
    api = await make_api(json_handler({"success": True, "data": INFO_DATA}, seen=seen))

    result = await api.resolve(URL)

    assert seen == [{"endpoint": "info", "url": URL}]
    assert isinstance(result, ResolvedContent)
    assert result.kinds == [MediaKind.AUDIO, MediaKind.VIDEO]
    assert result.author == "dancer<3"
    assert result.likes == 1200
    assert result.cover == "https://cdn.example/cover.jpg"


@pytest.mark.asyncio
async def test_resolve_api_error(make_api):
    api = await make_api(json_handler({"success": False, "error": "Video not found"}))
    result = await api.resolve(URL)
    assert result == Failure("Video not found")


@pytest.mark.asyncio
async def test_resolve_without_data_is_failure(make_api):
    api = await make_api(json_handler({"success": True}))
    result = await api.resolve(URL)
    assert isinstance(result, Failure)


@pytest.mark.asyncio
async def test_http_error(make_api):
    api = await make_api(json_handler({}, status=502))
    result = await api.resolve(URL)
    assert result == Failure("HTTP 502")


@pytest.mark.asyncio
async def test_non_json_body(make_api):
    async def handler(request):
        return web.Response(text="<html>oops</html>")

    api = await make_api(handler)
    result = await api.resolve(URL)
    assert result == Failure("Malformed response from API")


@pytest.mark.asyncio
async def test_timeout(make_api):
    async def handler(request):
        await asyncio.sleep(0.5)
        return web.json_response({"success": True, "data": INFO_DATA})

    api = await make_api(handler, timeout=0.05)
    result = await api.resolve(URL)
    assert result == Failure("Request timed out")


@pytest.mark.asyncio
async def test_connection_refused():
    api = ContentAPI("http://127.0.0.1:1/api.php", timeout=2)
    try:
        result = await api.resolve(URL)
    finally:
        await api.close()

    assert isinstance(result, Failure)
    assert result.reason


@pytest.mark.asyncio
async def test_download_video(make_api):
    seen = []
    api = await make_api(json_handler({"success": True, "url": "https://cdn.example/v.mp4"}, seen=seen))

    result = await api.download(URL, MediaKind.VIDEO)

    assert seen == [{"endpoint": "download", "url": URL, "type": "video"}]
    assert result == DeliveredAsset(kind=MediaKind.VIDEO, url="https://cdn.example/v.mp4")
    assert not result.empty


@pytest.mark.asyncio
async def test_download_photos(make_api):
    payload = {"success": True, "photos": [{"url": "https://cdn.example/1.jpg"}, {"url": "https://cdn.example/2.jpg"}]}
    api = await make_api(json_handler(payload))

    result = await api.download(URL, "photos")

    assert result.kind is MediaKind.PHOTOS
    assert result.photos == ["https://cdn.example/1.jpg", "https://cdn.example/2.jpg"]


@pytest.mark.asyncio
async def test_download_zero_photos_is_not_a_failure(make_api):
    api = await make_api(json_handler({"success": True, "photos": []}))
    result = await api.download(URL, MediaKind.PHOTOS)
    assert isinstance(result, DeliveredAsset)
    assert result.empty


@pytest.mark.asyncio
async def test_download_failure(make_api):
    api = await make_api(json_handler({"success": False, "error": "timeout"}))
    result = await api.download(URL, MediaKind.AUDIO)
    assert result == Failure("timeout")
