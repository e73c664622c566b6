"""Feed requests client package bootstrap."""

from .errors import (  # noqa: F401
    FeedArticleNotFoundError,
    FeedRequestError,
    FeedRequestPendingError,
    FeedsError,
    MalformedRecordError,
    TransportError,
)
from .models.domain import FetchFailure, FetchFailureKind, FetchOutcome, FetchPending, FetchSuccess  # noqa: F401
from .settings import Settings, get_settings, reset_settings_cache  # noqa: F401

__all__ = [
    "FeedArticleNotFoundError",
    "FeedRequestError",
    "FeedRequestPendingError",
    "FeedsError",
    "FetchFailure",
    "FetchFailureKind",
    "FetchOutcome",
    "FetchPending",
    "FetchSuccess",
    "MalformedRecordError",
    "Settings",
    "TransportError",
    "get_settings",
    "reset_settings_cache",
]
