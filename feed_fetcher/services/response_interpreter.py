"""Maps a raw transport response onto a typed fetch outcome."""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from feed_fetcher.models.domain import (
    FeedResponse,
    FeedResponseRequestStatus,
    FetchFailure,
    FetchFailureKind,
    FetchOutcome,
    FetchPending,
    FetchSuccess,
)
from feed_fetcher.transports.base import TransportResponse


_STATUS_FAILURES = {
    FeedResponseRequestStatus.INTERNAL_ERROR: (
        FetchFailureKind.INTERNAL,
        "Feed requests service encountered internal error while fetching feed",
    ),
    FeedResponseRequestStatus.PARSE_ERROR: (FetchFailureKind.PARSE, "Invalid feed"),
    FeedResponseRequestStatus.FETCH_ERROR: (
        FetchFailureKind.FETCH,
        "Fetch on feed requests service failed, likely a network error",
    ),
    FeedResponseRequestStatus.FETCH_TIMEOUT: (FetchFailureKind.TIMEOUT, "Feed request timed out"),
}


def _dump(value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(value)


async def interpret_response(response: TransportResponse, service_url: str) -> FetchOutcome:
    status_code = response.status_code
    if status_code < 200 or status_code >= 300:
        body: Any = {}
        try:
            body = await response.body.json()
        except ValueError:
            # best-effort diagnostic decode only
            body = {}
        return FetchFailure(
            kind=FetchFailureKind.SERVER_STATUS,
            message=f"Bad status code for {service_url} ({status_code}) ({_dump(body)}).",
            status_code=status_code,
            body=body,
        )

    try:
        envelope = FeedResponse.model_validate(await response.body.json())
    except (ValueError, ValidationError) as exc:
        return FetchFailure(
            kind=FetchFailureKind.INTERNAL,
            message=f"Invalid response envelope from {service_url}: {exc}",
        )

    tag = envelope.request_status
    try:
        status = FeedResponseRequestStatus(tag)
    except ValueError:
        return FetchFailure(
            kind=FetchFailureKind.INTERNAL,
            message=f"Unexpected feed request status in response: {tag}",
            request_status=tag,
        )

    if status in _STATUS_FAILURES:
        kind, message = _STATUS_FAILURES[status]
        return FetchFailure(kind=kind, message=message, request_status=tag)

    if status is FeedResponseRequestStatus.BAD_STATUS_CODE:
        origin_status = envelope.response.status_code if envelope.response else None
        return FetchFailure(
            kind=FetchFailureKind.BAD_STATUS_CODE,
            message=f"Bad status code received for feed request ({origin_status})",
            status_code=origin_status,
            request_status=tag,
        )

    if status is FeedResponseRequestStatus.PENDING:
        return FetchPending()

    # SUCCESS
    if envelope.response is None or envelope.response.body is None:
        return FetchFailure(
            kind=FetchFailureKind.INTERNAL,
            message="Success envelope did not include a response body",
            request_status=tag,
        )
    return FetchSuccess(payload=envelope.response.body)
