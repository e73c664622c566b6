"""Error taxonomy for feed fetching and article normalization."""

from __future__ import annotations

from typing import Optional

from feed_fetcher.models.domain import FetchFailure, FetchFailureKind


class FeedsError(Exception):
    """Base error."""


class TransportError(FeedsError):
    """Connection-level failure inside a transport channel (retryable)."""


class FeedRequestError(FeedsError):
    """A fetch ended in one of the typed failure kinds.

    Callers branch on ``kind``; ``failure`` carries the full detail.
    """

    def __init__(self, failure: FetchFailure) -> None:
        super().__init__(failure.message)
        self.failure = failure

    @property
    def kind(self) -> FetchFailureKind:
        return self.failure.kind

    @property
    def status_code(self) -> Optional[int]:
        return self.failure.status_code


class FeedRequestPendingError(FeedsError):
    """The fetch for a feed is still pending upstream."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Request for {url} is still pending")
        self.url = url


class FeedArticleNotFoundError(FeedsError):
    def __init__(self, url: str, article_id: str) -> None:
        super().__init__(f"Article with id {article_id} for url {url} not found")
        self.url = url
        self.article_id = article_id


class MalformedRecordError(FeedsError):
    """A raw record could not be reduced to scalar fields."""

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.key = key
