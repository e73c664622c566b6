"""Streaming channel: one persistent-connection call per fetch.

The call yields values until it completes; only the last value is kept and it
is handed to the interpreter under a fixed 200 status.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, AsyncIterator, Callable, Dict, Optional

import httpx

from feed_fetcher.settings import Settings
from feed_fetcher.utils.logging import get_logger

from .base import LazyBody, TransportError, TransportResponse, build_request_payload


StreamProviderFn = Callable[[Dict[str, Any], Dict[str, str]], AsyncIterator[Any]]

STREAM_SUCCESS_STATUS = 200

logger = get_logger(__name__)


def _is_connection_error(exc: BaseException) -> bool:
    # OSError covers ConnectionError and socket timeouts; RPC errors carry a status ``code``
    if isinstance(exc, (OSError, asyncio.TimeoutError)):
        return True
    return getattr(exc, "code", None) is not None


class _StreamRejected(Exception):
    def __init__(self, status_code: int, content: bytes) -> None:
        super().__init__(f"stream rejected with status {status_code}")
        self.status_code = status_code
        self.content = content


class StreamingTransport:
    """Streaming call with credential + routing metadata attached per call.

    A ``stream_provider`` may be injected (tests/offline); it receives the
    request payload and the metadata and returns an async iterator of values.
    Without one, NDJSON is streamed from ``service_url`` over a shared
    ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        service_url: str,
        api_key: str,
        *,
        target: str = "feed-requests",
        timeout_seconds: float = 30.0,
        stream_provider: Optional[StreamProviderFn] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.service_url = service_url
        self._api_key = api_key
        self._target = target
        self._stream_provider = stream_provider
        self._owns_client = client is None and stream_provider is None
        self._client = client
        if self._client is None and stream_provider is None:
            self._client = httpx.AsyncClient(timeout=timeout_seconds)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        stream_provider: Optional[StreamProviderFn] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> "StreamingTransport":
        assert settings.feed_requests_stream_url is not None
        return cls(
            settings.feed_requests_stream_url,
            settings.feed_requests_api_key.get_secret_value(),
            target=settings.feed_requests_stream_target,
            timeout_seconds=float(settings.feed_requests_timeout_seconds),
            stream_provider=stream_provider,
            client=client,
        )

    def _metadata(self) -> Dict[str, str]:
        return {"api-key": self._api_key, "x-fetch-target": self._target}

    async def send(self, url: str, execute_if_not_cached: bool) -> TransportResponse:
        payload = build_request_payload(url, execute_if_not_cached)
        provider = self._stream_provider or self._stream_ndjson
        missing = object()
        last_value: Any = missing
        try:
            async for value in provider(payload, self._metadata()):
                last_value = value
        except _StreamRejected as exc:
            return TransportResponse(status_code=exc.status_code, body=LazyBody(exc.content))
        except httpx.HTTPError as exc:
            logger.error(
                "stream.error",
                extra={"url": url, "error_type": type(exc).__name__, "error_message": str(exc)},
            )
            raise TransportError(f"{type(exc).__name__}: {exc}") from exc
        except Exception as exc:
            logger.error(
                "stream.error",
                extra={
                    "url": url,
                    "error_type": type(exc).__name__,
                    "error_message": str(exc),
                    "code": getattr(exc, "code", None),
                    "details": getattr(exc, "details", None),
                },
            )
            if isinstance(exc, TransportError):
                raise
            if _is_connection_error(exc):
                raise TransportError(f"{type(exc).__name__}: {exc}") from exc
            raise

        if last_value is missing:
            raise TransportError("Streaming call completed without yielding a value")
        return TransportResponse(status_code=STREAM_SUCCESS_STATUS, body=LazyBody.from_value(last_value))

    async def _stream_ndjson(self, payload: Dict[str, Any], metadata: Dict[str, str]) -> AsyncIterator[Any]:
        assert self._client is not None
        headers = {"content-type": "application/json", "accept": "application/x-ndjson", **metadata}
        async with self._client.stream("POST", self.service_url, json=payload, headers=headers) as resp:
            if resp.status_code < 200 or resp.status_code >= 300:
                raise _StreamRejected(resp.status_code, await resp.aread())
            async for line in resp.aiter_lines():
                if not line.strip():
                    continue
                try:
                    yield json.loads(line)
                except json.JSONDecodeError as exc:
                    raise TransportError(f"Malformed stream frame: {exc}") from exc

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
