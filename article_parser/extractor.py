"""Pull image sources and anchor targets out of HTML-bearing fields."""

from __future__ import annotations

from typing import Dict, Mapping

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from .constants import EXTRACTED_KEY_PREFIX
from .models import ExtractionResult


def extract_extra_info(value: str) -> ExtractionResult:
    """Collect ``<img src>`` and ``<a href>`` values in document order.

    Text without markup, or markup the parser rejects, yields nothing.
    """
    if "<" not in value:
        return ExtractionResult()
    try:
        soup = BeautifulSoup(value, "html.parser")
    except ParserRejectedMarkup:
        return ExtractionResult()

    images = [img.get("src") for img in soup.find_all("img")]
    anchors = [a.get("href") for a in soup.find_all("a")]
    return ExtractionResult(
        images=[src for src in images if isinstance(src, str) and src],
        anchors=[href for href in anchors if isinstance(href, str) and href],
    )


def extracted_fields(record: Mapping[str, str]) -> Dict[str, str]:
    """Synthesize ``extracted::<key>::image<n>`` / ``::anchor<n>`` entries."""
    fields: Dict[str, str] = {}
    for key, value in list(record.items()):
        if not isinstance(value, str):
            continue
        info = extract_extra_info(value)
        for index, src in enumerate(info.images, start=1):
            fields[f"{EXTRACTED_KEY_PREFIX}{key}::image{index}"] = src
        for index, href in enumerate(info.anchors, start=1):
            fields[f"{EXTRACTED_KEY_PREFIX}{key}::anchor{index}"] = href
    return fields
