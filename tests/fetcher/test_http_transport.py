from __future__ import annotations

import json

import httpx
import pytest

pytest.importorskip("pytest_httpx")

from feed_fetcher.errors import TransportError
from feed_fetcher.transports.http import HttpTransport

SERVICE = "http://feed-requests/v1/feed-requests"


@pytest.mark.asyncio
async def test_send_posts_payload_with_api_key(httpx_mock):
    httpx_mock.add_response(method="POST", url=SERVICE, json={"requestStatus": "pending"}, status_code=200)

    transport = HttpTransport(SERVICE, "test-key")
    try:
        response = await transport.send("https://example.com/feed.xml", True)
    finally:
        await transport.aclose()

    assert response.status_code == 200
    assert await response.body.json() == {"requestStatus": "pending"}

    request = httpx_mock.get_request()
    assert request.headers["api-key"] == "test-key"
    assert request.headers["accept"] == "application/json"
    assert json.loads(request.content) == {
        "url": "https://example.com/feed.xml",
        "executeFetchIfNotExists": True,
    }


@pytest.mark.asyncio
async def test_non_2xx_is_returned_not_raised(httpx_mock):
    httpx_mock.add_response(method="POST", url=SERVICE, json={"message": "oops"}, status_code=500)

    transport = HttpTransport(SERVICE, "test-key")
    try:
        response = await transport.send("https://example.com/feed.xml", False)
    finally:
        await transport.aclose()

    assert response.status_code == 500
    # buffered body decodes more than once
    assert await response.body.json() == {"message": "oops"}
    assert await response.body.json() == {"message": "oops"}


@pytest.mark.asyncio
async def test_connection_error_becomes_transport_error(httpx_mock):
    httpx_mock.add_exception(httpx.ConnectError("connection refused"))

    transport = HttpTransport(SERVICE, "test-key")
    try:
        with pytest.raises(TransportError) as excinfo:
            await transport.send("https://example.com/feed.xml", False)
    finally:
        await transport.aclose()

    assert "ConnectError" in str(excinfo.value)
