"""Field naming shared by the flattener, extractor and rule engine."""

from __future__ import annotations

from enum import Enum


ARTICLE_FIELD_DELIMITER = "__"

PROCESSED_CATEGORIES_KEY = "processed::categories"
REDDIT_DESCRIPTION_KEY = "processed::description::reddit1"
EXTRACTED_KEY_PREFIX = "extracted::"


class PostProcessParserRule(str, Enum):
    """Optional transformations a caller may request per invocation."""

    REDDIT_COMMENT_LINK = "REDDIT_COMMENT_LINK"
