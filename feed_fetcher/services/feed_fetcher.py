"""Feed fetch client: transport + retry + response interpretation.

Article-level queries sit on top of a single ``fetch`` call; nothing is
cached locally.
"""

from __future__ import annotations

import random
from typing import Callable, Iterable, List, Optional

from article_parser.models import FeedArticle, FormatOptions
from article_parser.rules import RuleRequest
from article_parser.service import ArticlesService
from feed_fetcher.errors import FeedArticleNotFoundError, FeedRequestError, FeedRequestPendingError
from feed_fetcher.models.domain import FetchFailure, FetchOutcome, FetchPending, FetchSuccess
from feed_fetcher.services.response_interpreter import interpret_response
from feed_fetcher.services.retry import RetryPolicy
from feed_fetcher.settings import Settings, get_settings
from feed_fetcher.transports.base import Transport
from feed_fetcher.transports.factory import build_transport
from feed_fetcher.utils.logging import get_logger


RetryPolicyFactory = Callable[[Optional[int]], RetryPolicy]

logger = get_logger(__name__)


class FeedFetcher:
    def __init__(
        self,
        transport: Transport,
        *,
        articles_service: Optional[ArticlesService] = None,
        retry_policy_factory: Optional[RetryPolicyFactory] = None,
        default_retries: int = 5,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._transport = transport
        self._articles = articles_service or ArticlesService()
        self._default_retries = default_retries
        self._retry_policy_factory = retry_policy_factory or (
            lambda retries: RetryPolicy(self._default_retries if retries is None else retries)
        )
        self._rng = rng or random.Random()

    @classmethod
    def from_env(
        cls,
        settings: Optional[Settings] = None,
        *,
        transport: Optional[Transport] = None,
        articles_service: Optional[ArticlesService] = None,
    ) -> "FeedFetcher":
        cfg = settings or get_settings()
        return cls(
            transport or build_transport(cfg),
            articles_service=articles_service,
            retry_policy_factory=lambda retries: RetryPolicy.from_settings(cfg, retries),
            default_retries=int(cfg.feed_requests_max_retries),
        )

    async def __aenter__(self) -> "FeedFetcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def fetch_outcome(
        self,
        url: str,
        execute_if_not_cached: bool = False,
        retries: Optional[int] = None,
    ) -> FetchOutcome:
        """Run one fetch and return its typed outcome without raising."""
        policy = self._retry_policy_factory(retries)
        logger.info(
            "fetch.start",
            extra={"url": url, "execute_if_not_cached": execute_if_not_cached, "retries": policy.retries},
        )
        try:
            response = await policy.run(
                lambda: self._transport.send(url, execute_if_not_cached),
                description=self._transport.service_url,
            )
        except FeedRequestError as exc:
            return exc.failure
        return await interpret_response(response, self._transport.service_url)

    async def fetch(
        self,
        url: str,
        execute_if_not_cached: bool = False,
        retries: Optional[int] = None,
    ) -> Optional[str]:
        """Return the feed payload, ``None`` while pending, or raise ``FeedRequestError``."""
        outcome = await self.fetch_outcome(url, execute_if_not_cached, retries)
        if isinstance(outcome, FetchSuccess):
            logger.info("fetch.success", extra={"url": url, "payload_chars": len(outcome.payload)})
            return outcome.payload
        if isinstance(outcome, FetchPending):
            logger.info("fetch.pending", extra={"url": url})
            return None
        assert isinstance(outcome, FetchFailure)
        logger.warning(
            "fetch.failed",
            extra={"url": url, "kind": outcome.kind.value, "status_code": outcome.status_code, "error": outcome.message},
        )
        raise FeedRequestError(outcome)

    async def fetch_feed_articles(
        self,
        url: str,
        format_options: Optional[FormatOptions] = None,
        use_parser_rules: Optional[Iterable[RuleRequest]] = None,
    ) -> Optional[List[FeedArticle]]:
        payload = await self.fetch(url, execute_if_not_cached=True)
        # an empty success body carries no feed document yet
        if not payload:
            return None
        return self._articles.get_articles_from_feed(payload, format_options, use_parser_rules)

    async def _completed_articles(
        self,
        url: str,
        format_options: Optional[FormatOptions],
        use_parser_rules: Optional[Iterable[RuleRequest]],
    ) -> List[FeedArticle]:
        articles = await self.fetch_feed_articles(url, format_options, use_parser_rules)
        if articles is None:
            raise FeedRequestPendingError(url)
        return articles

    async def fetch_feed_article(
        self,
        url: str,
        article_id: str,
        format_options: Optional[FormatOptions] = None,
        use_parser_rules: Optional[Iterable[RuleRequest]] = None,
    ) -> FeedArticle:
        articles = await self._completed_articles(url, format_options, use_parser_rules)
        for article in articles:
            if article.id == article_id:
                return article
        raise FeedArticleNotFoundError(url, article_id)

    async def fetch_random_feed_article(
        self,
        url: str,
        format_options: Optional[FormatOptions] = None,
        use_parser_rules: Optional[Iterable[RuleRequest]] = None,
    ) -> Optional[FeedArticle]:
        articles = await self._completed_articles(url, format_options, use_parser_rules)
        if not articles:
            return None
        return self._rng.choice(articles)
