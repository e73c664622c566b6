from __future__ import annotations

from datetime import datetime, timezone

from article_parser.feed_reader import read_feed_records
from article_parser.service import ArticlesService


RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Example</title>
    <link>https://example.com</link>
    <description>Example feed</description>
    <item>
      <guid isPermaLink="false">item-1</guid>
      <title>First post</title>
      <link>https://example.com/1</link>
      <category>news</category>
      <category>tech</category>
      <pubDate>Sun, 01 Jan 2023 00:00:00 GMT</pubDate>
      <description>&lt;p&gt;&lt;img src="https://example.com/1.png"&gt;hello&lt;/p&gt;</description>
    </item>
    <item>
      <guid isPermaLink="false">item-2</guid>
      <title>Second post</title>
    </item>
  </channel>
</rss>
"""


def test_reader_returns_one_record_per_entry():
    records = read_feed_records(RSS)

    assert [r["id"] for r in records] == ["item-1", "item-2"]
    assert records[0]["categories"] == ["news", "tech"]
    assert records[0]["published_parsed"] == datetime(2023, 1, 1, tzinfo=timezone.utc)
    assert isinstance(records[0]["tags"], list)


def test_reader_on_garbage_yields_no_records():
    assert read_feed_records("not a feed") == []


def test_service_flattens_parsed_feed():
    articles = ArticlesService().get_articles_from_feed(RSS)

    first = articles[0].flattened
    assert articles[0].id == "item-1"
    assert first["title"] == "First post"
    assert first["processed::categories"] == "news,tech"
    assert first["published_parsed"] == "2023-01-01T00:00:00+00:00"
    assert first["extracted::summary::image1"] == "https://example.com/1.png"
    assert all(isinstance(v, str) for v in first.values())
