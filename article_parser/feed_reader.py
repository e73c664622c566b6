"""Turn a fetched feed document into one raw nested record per entry."""

from __future__ import annotations

import calendar
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List

import feedparser


FeedReaderFn = Callable[[str], List[Dict[str, Any]]]


def _to_plain(value: Any) -> Any:
    # feedparser hands back FeedParserDict and struct_time values
    if isinstance(value, time.struct_time):
        return datetime.fromtimestamp(calendar.timegm(value), tz=timezone.utc)
    if isinstance(value, dict):
        return {str(k): _to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(v) for v in value]
    return value


def read_feed_records(payload: str) -> List[Dict[str, Any]]:
    """Parse ``payload`` with feedparser; entries keep their nested shape.

    Tag terms are exposed as a ``categories`` list of strings when the entry
    does not already carry one, so category pre-processing can see them.
    """
    parsed = feedparser.parse(payload)
    records: List[Dict[str, Any]] = []
    for entry in parsed.entries:
        record = _to_plain(entry)
        tags = record.get("tags")
        if "categories" not in record and isinstance(tags, list):
            terms = [t.get("term") for t in tags if isinstance(t, dict)]
            record["categories"] = [term for term in terms if isinstance(term, str)]
        records.append(record)
    return records
