"""Channel selection from configuration."""

from __future__ import annotations

from feed_fetcher.settings import Settings

from .base import Transport
from .http import HttpTransport
from .streaming import StreamingTransport


def build_transport(settings: Settings) -> Transport:
    if settings.feed_requests_transport == "stream":
        return StreamingTransport.from_settings(settings)
    return HttpTransport.from_settings(settings)
