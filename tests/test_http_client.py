import time

import pytest
from aiohttp import test_utils, web

from niftyboard.services.http_client import HttpClient, ProviderError, is_retryable_status


def responder(*replies):
    """Handler answering with (status, body, content_type) tuples in turn; the last one repeats."""
    hits = []

    async def handler(request):
        hits.append(dict(request.query))
        status, body, content_type = replies[min(len(hits), len(replies)) - 1]
        return web.Response(status=status, text=body, content_type=content_type)

    return handler, hits


@pytest.fixture
async def serve():
    servers = []

    async def start(handler):
        app = web.Application()
        app.router.add_get("/data", handler)
        server = test_utils.TestServer(app)
        await server.start_server()
        servers.append(server)
        return str(server.make_url("/data"))

    yield start
    for server in servers:
        await server.close()


@pytest.fixture
async def client():
    http = HttpClient(timeout=5, retries=2, backoff=0)
    yield http
    await http.close()


def test_retryable_statuses():
    assert is_retryable_status(429)
    assert is_retryable_status(500)
    assert is_retryable_status(501)
    assert is_retryable_status(599)
    assert not is_retryable_status(404)
    assert not is_retryable_status(None)


async def test_returns_json_and_sends_params(serve, client):
    handler, hits = responder((200, '{"c": 101.5}', "application/json"))
    url = await serve(handler)

    data = await client.get_json(url, params={"symbol": "TCS"})

    assert data == {"c": 101.5}
    assert hits == [{"symbol": "TCS"}]


async def test_json_served_as_text_is_decoded(serve, client):
    handler, _ = responder((200, '[1, 2]', "text/plain"))
    url = await serve(handler)

    assert await client.get_json(url) == [1, 2]


async def test_server_errors_are_retried_then_raised(serve, client):
    handler, hits = responder((503, "busy", "text/plain"))
    url = await serve(handler)

    with pytest.raises(ProviderError) as excinfo:
        await client.get_json(url)

    assert len(hits) == 3
    assert excinfo.value.status == 503
    assert "Error 503: busy" in str(excinfo.value)


async def test_not_implemented_is_retried(serve, client):
    handler, hits = responder((501, "", "text/plain"))
    url = await serve(handler)

    with pytest.raises(ProviderError) as excinfo:
        await client.get_json(url)

    assert len(hits) == 3
    assert excinfo.value.status == 501


async def test_transient_failure_recovers(serve, client):
    handler, hits = responder((429, "slow down", "text/plain"), (200, '{"ok": true}', "application/json"))
    url = await serve(handler)

    assert await client.get_json(url) == {"ok": True}
    assert len(hits) == 2


async def test_client_errors_are_not_retried(serve, client):
    handler, hits = responder((404, "", "text/plain"))
    url = await serve(handler)

    with pytest.raises(ProviderError) as excinfo:
        await client.get_json(url)

    assert len(hits) == 1
    assert excinfo.value.status == 404
    assert str(excinfo.value) == "Error 404: Unknown error"


async def test_backoff_grows_linearly(serve):
    handler, hits = responder((502, "", "text/plain"))
    url = await serve(handler)
    http = HttpClient(timeout=5, retries=2, backoff=0.1)

    start = time.monotonic()
    with pytest.raises(ProviderError):
        await http.get_json(url)
    elapsed = time.monotonic() - start
    await http.close()

    # 0.1 after the first attempt, 0.2 after the second
    assert len(hits) == 3
    assert elapsed >= 0.3


async def test_html_body_raises(serve, client):
    handler, hits = responder((200, "<html>Access Denied</html>", "text/html"))
    url = await serve(handler)

    with pytest.raises(ProviderError, match="Invalid JSON"):
        await client.get_json(url)
    assert len(hits) == 1


async def test_empty_body_raises(serve, client):
    handler, _ = responder((200, "  \n", "application/json"))
    url = await serve(handler)

    with pytest.raises(ProviderError, match="Empty response") as excinfo:
        await client.get_json(url)
    assert excinfo.value.status == 200


async def test_connection_errors_become_provider_errors(client):
    url = f"http://127.0.0.1:{test_utils.unused_port()}/data"

    with pytest.raises(ProviderError) as excinfo:
        await client.get_json(url)
    assert excinfo.value.status is None

    with pytest.raises(ProviderError, match="Warm-up failed"):
        await client.warm_up(url)


async def test_warm_up_reads_page(serve, client):
    handler, hits = responder((200, "<html>home</html>", "text/html"))
    url = await serve(handler)

    await client.warm_up(url)

    assert len(hits) == 1


async def test_session_is_reused_until_closed(client):
    first = await client._get_session()
    assert await client._get_session() is first

    await client.close()
    assert first.closed
    assert await client._get_session() is not first
