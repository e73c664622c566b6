"""Article normalization pipeline.

Order per record: pre-process rules seed the output, flattened and coerced
values are written over them, link/image extraction runs on the coerced
values, then the caller's post-process rules see the assembled record.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from feed_fetcher.utils.logging import get_logger

from .constants import ARTICLE_FIELD_DELIMITER
from .extractor import extracted_fields
from .feed_reader import FeedReaderFn, read_feed_records
from .flattener import coerce_flattened, flatten_record
from .models import FeedArticle, FormatOptions
from .rules import RuleRequest, as_rule_list, run_post_process_rules, run_pre_process_rules


logger = get_logger(__name__)


class ArticleParser:
    def __init__(self, delimiter: str = ARTICLE_FIELD_DELIMITER) -> None:
        self.delimiter = delimiter

    def flatten(
        self,
        raw: Mapping[str, Any],
        format_options: Optional[FormatOptions] = None,
        use_parser_rules: Optional[Iterable[RuleRequest]] = None,
    ) -> Dict[str, str]:
        intermediate = flatten_record(raw, self.delimiter)
        record = run_pre_process_rules(raw)
        coerce_flattened(intermediate, format_options, into=record)
        record.update(extracted_fields(record))
        return run_post_process_rules(record, use_parser_rules)


class ArticlesService:
    """Builds the article set for a successful feed payload."""

    def __init__(
        self,
        parser: Optional[ArticleParser] = None,
        reader: Optional[FeedReaderFn] = None,
    ) -> None:
        self._parser = parser or ArticleParser()
        self._reader = reader or read_feed_records

    def get_articles_from_feed(
        self,
        payload: str,
        format_options: Optional[FormatOptions] = None,
        use_parser_rules: Optional[Iterable[RuleRequest]] = None,
    ) -> List[FeedArticle]:
        rules = as_rule_list(use_parser_rules)
        records = self._reader(payload)
        articles = [
            FeedArticle(flattened=self._parser.flatten(raw, format_options, rules))
            for raw in records
        ]
        logger.info("articles.parsed", extra={"articles": len(articles)})
        return articles
