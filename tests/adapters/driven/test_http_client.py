"""Tests for HTTP client adapter against in-process stub servers."""

import asyncio
import json
import socket
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from dispatcher.adapters.driven.http.client import HttpClient
from dispatcher.core.dispatch import dispatch, encode_payload
from dispatcher.ports.errors import ConnectionFailedError, DispatchTimeoutError, HttpStatusError
from dispatcher.ports.http import RequestConfiguration

__all__ = []

PAYLOAD = {"somedata": "crap"}

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@asynccontextmanager
async def stub_server(handler: Handler) -> AsyncIterator[RequestConfiguration]:
    """Serve handler on POST /append and yield a configuration targeting it."""
    app = web.Application()
    app.router.add_post("/append", handler)
    server = TestServer(app)
    await server.start_server()
    try:
        yield RequestConfiguration(host=server.host, port=server.port, path="/append")
    finally:
        await server.close()


def unused_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.mark.asyncio
async def test_http_client_context_manager() -> None:
    """HTTP client should initialize and close session."""
    client = HttpClient()
    assert client.session is None

    async with client as c:
        assert c.session is not None
        assert c is client

    assert client.session.closed


@pytest.mark.asyncio
async def test_post_raises_if_session_not_initialized() -> None:
    """post should raise if used outside 'async with'."""
    client = HttpClient()
    config = RequestConfiguration(host="127.0.0.1", port=8080, path="/append")

    with pytest.raises(RuntimeError, match="Session not initialized"):
        await client.post(config, b"{}")


@pytest.mark.asyncio
async def test_dispatch_prints_echoed_body() -> None:
    """Echoed body should be emitted byte-for-byte as serialized."""
    seen: dict[str, str] = {}

    async def echo(request: web.Request) -> web.Response:
        seen["method"] = request.method
        seen["content_type"] = request.content_type
        return web.Response(body=await request.read())

    received: list[str] = []
    async with stub_server(echo) as config, HttpClient() as http:
        result = await dispatch(config, PAYLOAD, send_fn=http.post, sink=received.append)

    assert result.ok
    assert received == [encode_payload(PAYLOAD).decode()]
    assert seen == {"method": "POST", "content_type": "application/json"}


@pytest.mark.asyncio
async def test_dispatch_concatenates_chunks_in_order() -> None:
    """Chunk boundaries should never show up in the output."""
    chunks = [b"alpha-", b"beta-", b"gamma-", b"delta"]

    async def chunked(request: web.Request) -> web.StreamResponse:
        await request.read()
        resp = web.StreamResponse()
        resp.enable_chunked_encoding()
        await resp.prepare(request)
        for chunk in chunks:
            await resp.write(chunk)
            await asyncio.sleep(0.01)
        await resp.write_eof()
        return resp

    received: list[str] = []
    async with stub_server(chunked) as config, HttpClient() as http:
        result = await dispatch(config, PAYLOAD, send_fn=http.post, sink=received.append)

    assert received == ["alpha-beta-gamma-delta"]
    assert result.body == "alpha-beta-gamma-delta"


@pytest.mark.asyncio
async def test_dispatch_json_round_trip() -> None:
    """Server-side decoded payload should reproduce the sent key and value."""

    async def reemit(request: web.Request) -> web.Response:
        return web.json_response(await request.json())

    received: list[str] = []
    async with stub_server(reemit) as config, HttpClient() as http:
        await dispatch(config, PAYLOAD, send_fn=http.post, sink=received.append)

    assert json.loads(received[0]) == {"somedata": "crap"}


@pytest.mark.asyncio
async def test_silent_server_times_out_without_output() -> None:
    """No output and no error should occur before the deadline."""
    release = asyncio.Event()

    async def silent(request: web.Request) -> web.Response:
        await release.wait()
        return web.Response(text="too late")

    timeout = 0.3
    received: list[str] = []
    async with stub_server(silent) as config:
        try:
            async with HttpClient() as http:
                loop = asyncio.get_running_loop()
                started = loop.time()
                result = await dispatch(
                    config,
                    PAYLOAD,
                    send_fn=http.post,
                    sink=received.append,
                    timeout_in_sec=timeout,
                )
                elapsed = loop.time() - started
        finally:
            release.set()

    assert received == []
    assert isinstance(result.error, DispatchTimeoutError)
    assert elapsed >= timeout * 0.9


@pytest.mark.asyncio
async def test_server_error_differs_from_empty_success() -> None:
    """HTTP 500 should be reported as failure; empty 200 as success."""
    statuses = iter([500, 200])

    async def flaky(request: web.Request) -> web.Response:
        return web.Response(status=next(statuses), body=b"")

    received: list[str] = []
    async with stub_server(flaky) as config, HttpClient() as http:
        failed = await dispatch(config, PAYLOAD, send_fn=http.post, sink=received.append)
        empty = await dispatch(config, PAYLOAD, send_fn=http.post, sink=received.append)

    assert isinstance(failed.error, HttpStatusError)
    assert failed.status_code == 500
    assert empty.ok
    assert empty.status_code == 200
    assert received == [""]


@pytest.mark.asyncio
async def test_sequential_dispatches_are_independent() -> None:
    """Two dispatches should produce two requests and two separate bodies."""
    calls = 0

    async def counting(request: web.Request) -> web.Response:
        nonlocal calls
        calls += 1
        return web.Response(text=f"call-{calls}")

    received: list[str] = []
    async with stub_server(counting) as config, HttpClient() as http:
        first = await dispatch(config, PAYLOAD, send_fn=http.post, sink=received.append)
        second = await dispatch(config, PAYLOAD, send_fn=http.post, sink=received.append)

    assert calls == 2
    assert (first.body, second.body) == ("call-1", "call-2")
    assert received == ["call-1", "call-2"]


@pytest.mark.asyncio
async def test_refused_connection_is_reported() -> None:
    """Connecting to a closed port should fail fast with a connection error."""
    config = RequestConfiguration(host="127.0.0.1", port=unused_port(), path="/append")
    received: list[str] = []

    async with HttpClient() as http:
        result = await dispatch(
            config, PAYLOAD, send_fn=http.post, sink=received.append, timeout_in_sec=5.0
        )

    assert received == []
    assert isinstance(result.error, ConnectionFailedError)
    assert result.status_code is None


@pytest.mark.asyncio
async def test_unknown_response_charset_is_decoded_as_utf8() -> None:
    """A reply announcing an unknown charset should still succeed."""

    async def bogus_charset(request: web.Request) -> web.Response:
        return web.Response(body=b"hi", headers={"Content-Type": "text/plain; charset=bogus"})

    received: list[str] = []
    async with stub_server(bogus_charset) as config, HttpClient() as http:
        result = await dispatch(config, PAYLOAD, send_fn=http.post, sink=received.append)

    assert result.ok
    assert received == ["hi"]
