"""Synchronous request/response channel to the feed requests service."""

from __future__ import annotations

from typing import Optional

import httpx

from feed_fetcher.settings import Settings

from .base import LazyBody, TransportError, TransportResponse, build_request_payload


class HttpTransport:
    """POSTs ``{url, executeFetchIfNotExists}`` and returns the raw status + body.

    Non-2xx responses are returned as-is; only connection-level failures raise.
    """

    def __init__(
        self,
        service_url: str,
        api_key: str,
        *,
        timeout_seconds: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.service_url = service_url
        self._api_key = api_key
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)

    @classmethod
    def from_settings(cls, settings: Settings, client: Optional[httpx.AsyncClient] = None) -> "HttpTransport":
        return cls(
            settings.feed_requests_api_url,
            settings.feed_requests_api_key.get_secret_value(),
            timeout_seconds=float(settings.feed_requests_timeout_seconds),
            client=client,
        )

    async def send(self, url: str, execute_if_not_cached: bool) -> TransportResponse:
        headers = {
            "content-type": "application/json",
            "accept": "application/json",
            "api-key": self._api_key,
        }
        try:
            resp = await self._client.post(
                self.service_url,
                json=build_request_payload(url, execute_if_not_cached),
                headers=headers,
            )
        except httpx.TimeoutException as exc:
            raise TransportError(f"Feed requests API 타임아웃: {exc}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"{type(exc).__name__}: {exc}") from exc

        return TransportResponse(status_code=resp.status_code, body=LazyBody(resp.content))

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
