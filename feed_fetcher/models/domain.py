"""Envelope schema and fetch outcome types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class FeedResponseRequestStatus(str, Enum):
    """Status tags reported by the feed requests service."""

    SUCCESS = "success"
    PENDING = "pending"
    INTERNAL_ERROR = "internal_error"
    PARSE_ERROR = "parse_error"
    FETCH_ERROR = "fetch_error"
    BAD_STATUS_CODE = "bad_status_code"
    FETCH_TIMEOUT = "fetch_timeout"


class FeedResponseDetails(BaseModel):
    """Origin response nested in the envelope."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    status_code: Optional[int] = Field(None, alias="statusCode")
    body: Optional[str] = None


class FeedResponse(BaseModel):
    """Envelope returned by the feed requests service.

    ``request_status`` is kept as a raw string so that unknown tags survive
    validation and can be reported verbatim.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    request_status: str = Field(..., alias="requestStatus")
    response: Optional[FeedResponseDetails] = None


class FetchFailureKind(str, Enum):
    NETWORK = "network"
    SERVER_STATUS = "server_status"
    INTERNAL = "internal"
    PARSE = "parse"
    FETCH = "fetch"
    BAD_STATUS_CODE = "bad_status_code"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class FetchSuccess:
    payload: str


@dataclass(frozen=True)
class FetchPending:
    """The upstream fetch is queued but not complete; retry later."""


@dataclass(frozen=True)
class FetchFailure:
    kind: FetchFailureKind
    message: str
    # origin status for BAD_STATUS_CODE, service status for SERVER_STATUS
    status_code: Optional[int] = None
    body: Any = None
    request_status: Optional[str] = None


FetchOutcome = Union[FetchSuccess, FetchPending, FetchFailure]
