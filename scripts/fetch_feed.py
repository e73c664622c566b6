"""Quick feed fetch smoke test.

Usage:
  uv run -- python scripts/fetch_feed.py -u https://example.com/feed.xml -n 3 --tz Asia/Seoul

Reads configuration from .env via pydantic settings. Requires
FEED_REQUESTS_API_URL and FEED_REQUESTS_API_KEY.
Prints the number of articles and the flattened fields of the first few.
"""

from __future__ import annotations

import argparse
import asyncio
from typing import List

from article_parser.constants import PostProcessParserRule
from article_parser.models import FormatOptions
from feed_fetcher.errors import FeedRequestError
from feed_fetcher.services.feed_fetcher import FeedFetcher
from feed_fetcher.settings import get_settings
from feed_fetcher.utils.logging import configure_from_settings


async def _run(args: argparse.Namespace) -> int:
    cfg = get_settings()
    configure_from_settings(cfg)
    print(
        "Config:",
        {
            "transport": cfg.feed_requests_transport,
            "endpoint": cfg.feed_requests_api_url,
            "timeout_s": float(cfg.feed_requests_timeout_seconds),
            "max_retries": int(cfg.feed_requests_max_retries),
        },
    )

    options = FormatOptions(date_timezone=args.tz, date_format=args.date_format)
    rules = [PostProcessParserRule.REDDIT_COMMENT_LINK] if args.reddit else None

    async with FeedFetcher.from_env(cfg) as fetcher:
        try:
            articles = await fetcher.fetch_feed_articles(args.url, options, rules)
        except FeedRequestError as exc:
            print(f"Fetch failed ({exc.kind.value}): {exc}")
            return 2

    if articles is None:
        print(f"Request for {args.url} is still pending; try again later.")
        return 3

    print(f"Fetched {len(articles)} articles from {args.url}.")
    for idx, article in enumerate(articles[: args.top], start=1):
        print(f"{idx}. id={article.id}")
        for key in sorted(article.flattened):
            print(f"   {key} = {article.flattened[key][:120]}")
    return 0


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Feed fetch smoke test")
    parser.add_argument("-u", "--url", required=True, help="Feed URL")
    parser.add_argument("-n", "--top", type=int, default=3, help="Print top N articles (default: 3)")
    parser.add_argument("--tz", default=None, help="IANA timezone for date fields (default: UTC)")
    parser.add_argument("--date-format", default=None, help="strftime pattern for date fields")
    parser.add_argument("--reddit", action="store_true", help="Strip reddit [link]/[comments] markers")
    args = parser.parse_args(argv)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
