"""Format options and article containers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_TIMEZONE = "UTC"


class FormatOptions(BaseModel):
    """Caller-supplied rendering options for date fields.

    ``date_format`` is a ``strftime`` pattern; when absent dates render as
    ISO-8601 with a numeric offset.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    date_timezone: Optional[str] = Field(None, alias="dateTimezone")
    date_format: Optional[str] = Field(None, alias="dateFormat")

    @field_validator("date_timezone")
    @classmethod
    def _valid_timezone(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        name = v.strip()
        if not name:
            return None
        try:
            ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {name}") from exc
        return name

    @field_validator("date_format")
    @classmethod
    def _blank_format_is_default(cls, v: Optional[str]) -> Optional[str]:
        return v if v else None

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.date_timezone or DEFAULT_TIMEZONE)

    def format_date(self, value: date) -> str:
        if isinstance(value, datetime):
            dt = value
        else:
            dt = datetime.combine(value, time.min)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        local = dt.astimezone(self.zone)
        if self.date_format:
            return local.strftime(self.date_format)
        return local.isoformat(timespec="seconds")


@dataclass(frozen=True)
class ExtractionResult:
    images: List[str] = field(default_factory=list)
    anchors: List[str] = field(default_factory=list)


@dataclass
class FeedArticle:
    flattened: Dict[str, str]

    @property
    def id(self) -> Optional[str]:
        return self.flattened.get("id")
