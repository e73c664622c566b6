from __future__ import annotations

import json
from typing import Any, AsyncIterator, Dict, List

import pytest

from feed_fetcher.errors import TransportError
from feed_fetcher.transports.streaming import StreamingTransport

STREAM_URL = "http://feed-requests/v1/feed-requests/stream"


class RecordingProvider:
    def __init__(self, values: List[Any]) -> None:
        self.values = values
        self.calls: List[tuple] = []

    async def __call__(self, payload: Dict[str, Any], metadata: Dict[str, str]) -> AsyncIterator[Any]:
        self.calls.append((payload, metadata))
        for value in self.values:
            yield value


@pytest.mark.asyncio
async def test_last_value_is_body_with_fixed_success_status():
    provider = RecordingProvider([{"requestStatus": "pending"}, {"requestStatus": "success"}])
    transport = StreamingTransport(STREAM_URL, "key-1", target="feed-requests", stream_provider=provider)

    response = await transport.send("https://example.com/feed.xml", True)

    assert response.status_code == 200
    assert await response.body.json() == {"requestStatus": "success"}
    payload, metadata = provider.calls[0]
    assert payload == {"url": "https://example.com/feed.xml", "executeFetchIfNotExists": True}
    assert metadata == {"api-key": "key-1", "x-fetch-target": "feed-requests"}


@pytest.mark.asyncio
async def test_empty_stream_is_transport_error():
    transport = StreamingTransport(STREAM_URL, "key-1", stream_provider=RecordingProvider([]))

    with pytest.raises(TransportError):
        await transport.send("https://example.com/feed.xml", False)


class RpcUnavailable(Exception):
    code = "UNAVAILABLE"
    details = "upstream connect error"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [ConnectionError("connection refused"), OSError("network unreachable"), RpcUnavailable("unavailable")],
)
async def test_provider_connection_errors_become_transport_errors(error):
    async def failing(_payload, _metadata):
        raise error
        yield  # pragma: no cover

    transport = StreamingTransport(STREAM_URL, "key-1", stream_provider=failing)
    with pytest.raises(TransportError) as excinfo:
        await transport.send("https://example.com/feed.xml", False)

    assert excinfo.value.__cause__ is error


@pytest.mark.asyncio
async def test_provider_programming_errors_propagate():
    async def broken(_payload, _metadata):
        raise KeyError("missing")
        yield  # pragma: no cover

    transport = StreamingTransport(STREAM_URL, "key-1", stream_provider=broken)
    with pytest.raises(KeyError):
        await transport.send("https://example.com/feed.xml", False)


@pytest.mark.asyncio
async def test_default_provider_streams_ndjson(httpx_mock):
    frames = [{"requestStatus": "pending"}, {"requestStatus": "success", "response": {"body": "<rss/>"}}]
    httpx_mock.add_response(
        method="POST",
        url=STREAM_URL,
        content=("\n".join(json.dumps(f) for f in frames) + "\n").encode(),
        status_code=200,
    )

    transport = StreamingTransport(STREAM_URL, "key-1", target="router-a")
    try:
        response = await transport.send("https://example.com/feed.xml", False)
    finally:
        await transport.aclose()

    assert response.status_code == 200
    assert (await response.body.json())["response"]["body"] == "<rss/>"
    request = httpx_mock.get_request()
    assert request.headers["api-key"] == "key-1"
    assert request.headers["x-fetch-target"] == "router-a"


@pytest.mark.asyncio
async def test_default_provider_returns_rejected_status(httpx_mock):
    httpx_mock.add_response(method="POST", url=STREAM_URL, json={"message": "unauthorized"}, status_code=401)

    transport = StreamingTransport(STREAM_URL, "bad-key")
    try:
        response = await transport.send("https://example.com/feed.xml", False)
    finally:
        await transport.aclose()

    assert response.status_code == 401
    assert await response.body.json() == {"message": "unauthorized"}
