"""Article normalization: flattening, extraction and parser rules."""

from .constants import ARTICLE_FIELD_DELIMITER, PostProcessParserRule  # noqa: F401
from .models import FeedArticle, FormatOptions  # noqa: F401
from .service import ArticleParser, ArticlesService  # noqa: F401

__all__ = [
    "ARTICLE_FIELD_DELIMITER",
    "ArticleParser",
    "ArticlesService",
    "FeedArticle",
    "FormatOptions",
    "PostProcessParserRule",
]
