"""Transport abstraction shared by the HTTP and streaming channels."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Protocol

from feed_fetcher.errors import TransportError  # noqa: F401  re-exported for channel modules


class LazyBody:
    """Buffered response body decoded on demand.

    The raw bytes are held in memory so the decoder can run more than once
    (diagnostic decode on a bad status, or the single success-path decode).
    """

    def __init__(self, content: bytes = b"", *, value: Any = None, decoded: bool = False) -> None:
        self._content = content
        self._value = value
        self._decoded = decoded

    @classmethod
    def from_value(cls, value: Any) -> "LazyBody":
        return cls(value=value, decoded=True)

    async def json(self) -> Any:
        if self._decoded:
            return self._value
        return json.loads(self._content)


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    body: LazyBody


class Transport(Protocol):
    service_url: str

    async def send(self, url: str, execute_if_not_cached: bool) -> TransportResponse: ...  # noqa: D401

    async def aclose(self) -> None: ...  # noqa: D401


def build_request_payload(url: str, execute_if_not_cached: bool) -> Dict[str, Any]:
    return {"url": url, "executeFetchIfNotExists": bool(execute_if_not_cached)}
