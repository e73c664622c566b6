"""Collapse nested article records into single-level string mappings."""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from feed_fetcher.errors import MalformedRecordError

from .constants import ARTICLE_FIELD_DELIMITER
from .models import FormatOptions


_SEQUENCE_TYPES = (list, tuple)


def _is_container(value: Any) -> bool:
    return isinstance(value, (Mapping,) + _SEQUENCE_TYPES)


def _children(value: Any) -> List[Tuple[str, Any]]:
    if isinstance(value, Mapping):
        return [(str(k), v) for k, v in value.items()]
    return [(str(i), v) for i, v in enumerate(value)]


def flatten_record(raw: Mapping[str, Any], delimiter: str = ARTICLE_FIELD_DELIMITER) -> Dict[str, Any]:
    """Flatten ``raw`` into ``{"a__b__0": leaf}``.

    Mappings and lists/tuples are descended; list indexes become key
    segments. Empty containers and every non-container value are leaves and
    keep their original type. A container reachable from itself raises
    ``MalformedRecordError``.
    """
    flat: Dict[str, Any] = {}
    # (key path, value, ids of containers on the current path)
    stack: List[Tuple[Optional[str], Any, frozenset]] = [(None, raw, frozenset())]
    while stack:
        path, value, ancestors = stack.pop()
        if path is not None and (not _is_container(value) or not value):
            flat[path] = value
            continue
        if id(value) in ancestors:
            raise MalformedRecordError(f"Cycle detected in record at {path!r}", key=path)
        on_path = ancestors | {id(value)}
        # reversed so the traversal visits children in their original order
        for key, child in reversed(_children(value)):
            child_path = key if path is None else f"{path}{delimiter}{key}"
            stack.append((child_path, child, on_path))
    return flat


def _is_falsy(value: Any) -> bool:
    if isinstance(value, float) and math.isnan(value):
        return True
    try:
        return not value
    except (TypeError, ValueError):
        # objects with ambiguous truth values are kept
        return False


def coerce_value(key: str, value: Any, format_options: Optional[FormatOptions] = None) -> Optional[str]:
    """Return the stored string for ``value`` or ``None`` to drop it."""
    if _is_falsy(value):
        return None

    if isinstance(value, str):
        trimmed = value.strip()
        return trimmed or None

    if isinstance(value, date):
        return (format_options or FormatOptions()).format_date(value)

    if isinstance(value, Mapping):
        raise MalformedRecordError(
            "Non-empty object found in flattened record. "
            'Check that "flatten_record" is working as intended',
            key=key,
        )

    if isinstance(value, _SEQUENCE_TYPES):
        raise MalformedRecordError(
            "Non-empty array found in flattened record. "
            'Check that "flatten_record" is working as intended',
            key=key,
        )

    if isinstance(value, bool):
        return "true"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def coerce_flattened(
    flat: Mapping[str, Any],
    format_options: Optional[FormatOptions] = None,
    into: Optional[Dict[str, str]] = None,
) -> Dict[str, str]:
    """Apply value coercion to every entry, writing into ``into`` if given."""
    record: Dict[str, str] = into if into is not None else {}
    for key, value in flat.items():
        coerced = coerce_value(key, value, format_options)
        if coerced is not None:
            record[key] = coerced
    return record
