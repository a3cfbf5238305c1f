"""
News retrievers for composed providers.

Two sources are supported:
1. GoogleSearchRetriever: Google Custom Search JSON API
2. RSSRetriever: polls configured feeds concurrently and keeps topic matches

Both return a bounded, deduplicated, date-filtered list of NewsItem.
"""

from __future__ import annotations

import asyncio
from calendar import timegm
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
import logging
import re
from typing import Any, Callable, MutableMapping

import feedparser
import httpx

from ..config import SearchConfig
from ..dedup import dedup_items
from ..errors import ConfigError, ProviderError
from ..logging_utils import log_event
from ..types import NewsItem
from .base import NewsRetriever


logger = logging.getLogger("daily_news.providers")

_DATE_RANGE_RE = re.compile(r"^([dw])(\d+)$")
_TAG_RE = re.compile(r"<[^>]*>")
_URL_RE = re.compile(r"https?://\S+")
_EMAIL_RE = re.compile(r"\S+@\S+\.\S+")
_SPACE_RE = re.compile(r"\s+")

SNIPPET_MAX_CHARS = 300


def parse_date_range(value: str) -> timedelta | None:
    """Parse "d<N>" / "w<N>" into a timedelta; None disables date filtering."""
    match = _DATE_RANGE_RE.match((value or "").strip())
    if not match:
        return None
    unit, amount = match.group(1), int(match.group(2))
    return timedelta(days=amount if unit == "d" else amount * 7)


def parse_published(value: str | None) -> datetime | None:
    """Parse an ISO 8601 or RFC 822 timestamp into an aware datetime."""
    if not value:
        return None
    text = value.strip()
    parsed: datetime | None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = parsedate_to_datetime(text)
        except (TypeError, ValueError):
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def filter_by_date_range(
    items: list[NewsItem], date_range: str, now: datetime | None = None
) -> list[NewsItem]:
    """Drop items older than the window. Undated or unparseable items are kept."""
    window = parse_date_range(date_range)
    if window is None:
        return items
    cutoff = (now or datetime.now(timezone.utc)) - window
    if cutoff.tzinfo is None:
        cutoff = cutoff.replace(tzinfo=timezone.utc)
    kept = []
    for item in items:
        published = parse_published(item.published_time)
        if published is None or published >= cutoff:
            kept.append(item)
    return kept


def clean_content(text: str) -> str:
    if not text:
        return ""
    text = _TAG_RE.sub("", text)
    text = _URL_RE.sub("", text)
    text = _EMAIL_RE.sub("", text)
    return _SPACE_RE.sub(" ", text).strip()


def truncate_snippet(text: str, max_chars: int = SNIPPET_MAX_CHARS) -> str:
    if len(text) <= max_chars:
        return text
    return text[: max_chars - 3] + "..."


def _sort_key(item: NewsItem) -> float:
    published = parse_published(item.published_time)
    return published.timestamp() if published else 0.0


class RSSRetriever(NewsRetriever):
    """Fetches every configured feed concurrently and keeps items matching the topic.

    A failing feed is logged and skipped; the others still contribute.
    """

    source_name = "rss"

    def __init__(
        self,
        cfg: SearchConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        now: Callable[[], datetime] | None = None,
    ):
        self.cfg = cfg
        self.transport = transport
        self.now = now or (lambda: datetime.now(timezone.utc))

    def fetch_news(self, topic: str) -> list[NewsItem]:
        if not self.cfg.rss_feeds:
            raise ConfigError("No RSS feeds configured. Please add RSS feed URLs in settings.")

        feeds = asyncio.run(self._fetch_all())

        collected: list[NewsItem] = []
        seen_links: set[str] = set()
        for feed_url, parsed in feeds:
            feed_title = parsed.feed.get("title") or feed_url
            for entry in filter_by_topic(parsed.entries, topic):
                item = _entry_to_item(entry, feed_title)
                if item.link in seen_links:
                    continue
                seen_links.add(item.link)
                collected.append(item)

        collected.sort(key=_sort_key, reverse=True)
        filtered = filter_by_date_range(collected, self.cfg.date_range, self.now())
        filtered = dedup_items(filtered, self.cfg.title_similarity_threshold)
        limited = filtered[: self.cfg.results_per_topic]
        log_event(
            logger,
            f"RSS retriever: {len(collected)} matching items, kept {len(limited)} for {topic}",
            event="rss_fetch_complete",
            topic=topic,
            total=len(collected),
            kept=len(limited),
        )
        return limited

    async def _fetch_all(self) -> list[tuple[str, Any]]:
        async with httpx.AsyncClient(
            timeout=self.cfg.timeout_seconds,
            headers={"User-Agent": self.cfg.user_agent},
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            results = await asyncio.gather(
                *(self._fetch_feed(client, url) for url in self.cfg.rss_feeds),
                return_exceptions=True,
            )

        feeds = []
        for url, result in zip(self.cfg.rss_feeds, results):
            if isinstance(result, BaseException):
                log_event(
                    logger,
                    f"Error fetching RSS feed {url}: {result}",
                    level=logging.WARNING,
                    event="rss_feed_failed",
                    url=url,
                )
                continue
            feeds.append((url, result))
        return feeds

    async def _fetch_feed(self, client: httpx.AsyncClient, url: str) -> Any:
        resp = await client.get(url)
        resp.raise_for_status()
        parsed = feedparser.parse(resp.content)
        if parsed.bozo and not parsed.entries:
            raise ProviderError(f"Unparseable feed: {parsed.get('bozo_exception')}")
        return parsed


def filter_by_topic(entries: list[Any], topic: str) -> list[Any]:
    """Keep entries whose title, summary or categories mention the topic.

    A match is either the full topic or any topic word longer than two characters.
    """
    topic_lower = topic.lower()
    keywords = [word for word in topic_lower.split() if len(word) > 2]

    matched = []
    for entry in entries:
        title = (entry.get("title") or "").lower()
        content = (entry.get("summary") or entry.get("description") or "").lower()
        categories = [str(tag.get("term") or "").lower() for tag in entry.get("tags") or []]
        haystacks = [title, content, *categories]
        if any(topic_lower in text for text in haystacks):
            matched.append(entry)
        elif any(keyword in text for keyword in keywords for text in haystacks):
            matched.append(entry)
    return matched


def _entry_to_item(entry: Any, feed_title: str) -> NewsItem:
    published = None
    for key in ("published_parsed", "updated_parsed"):
        struct = entry.get(key)
        if struct:
            published = datetime.fromtimestamp(timegm(struct), tz=timezone.utc).isoformat()
            break
    if published is None:
        published = entry.get("published") or entry.get("updated")

    snippet = truncate_snippet(clean_content(entry.get("summary") or entry.get("description") or ""))
    return NewsItem(
        title=entry.get("title") or "Untitled",
        link=entry.get("link") or entry.get("id") or "",
        snippet=snippet,
        published_time=published,
        source=feed_title,
    )


class GoogleSearchRetriever(NewsRetriever):
    """Google Custom Search retriever with optional AI-written queries.

    Generated queries are stored in query_cache (topic -> query) and reused
    by later topics and runs.
    """

    source_name = "google"
    endpoint = "https://www.googleapis.com/customsearch/v1"
    page_size = 10

    def __init__(
        self,
        cfg: SearchConfig,
        api_key: str | None,
        engine_id: str | None,
        query_builder: Callable[[str], str] | None = None,
        query_cache: MutableMapping[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
        now: Callable[[], datetime] | None = None,
    ):
        self.cfg = cfg
        self.api_key = api_key
        self.engine_id = engine_id
        self.query_builder = query_builder
        self.query_cache = query_cache if query_cache is not None else {}
        self.transport = transport
        self.now = now or (lambda: datetime.now(timezone.utc))

    def fetch_news(self, topic: str) -> list[NewsItem]:
        if not self.api_key or not self.engine_id:
            raise ConfigError("Google Search API key and engine id are required")

        query = self.resolve_query(topic)
        raw = self._search(query)
        items = [_search_item_to_news(item) for item in raw]

        items = [item for item in items if len(item.snippet) >= self.cfg.min_content_length]
        for item in items:
            item.quality_score = score_item(item)
        if self.cfg.strict_quality_filtering:
            items = [item for item in items if (item.quality_score or 0) >= self.cfg.quality_threshold]

        items = filter_by_date_range(items, self.cfg.date_range, self.now())
        items = dedup_items(items, self.cfg.title_similarity_threshold)
        items.sort(key=lambda item: (item.quality_score or 0, _sort_key(item)), reverse=True)
        limited = items[: self.cfg.results_per_topic]
        log_event(
            logger,
            f"Google retriever: {len(raw)} results, kept {len(limited)} for {topic}",
            event="google_fetch_complete",
            topic=topic,
            query=query,
            total=len(raw),
            kept=len(limited),
        )
        return limited

    def resolve_query(self, topic: str) -> str:
        if not (self.cfg.use_ai_for_queries and self.query_builder):
            return topic
        cached = self.query_cache.get(topic)
        if cached:
            return cached
        try:
            query = self.query_builder(topic) or topic
        except Exception as exc:  # noqa: BLE001
            log_event(
                logger,
                f"Query generation failed for {topic}, using topic: {exc}",
                level=logging.WARNING,
                event="query_generation_failed",
                topic=topic,
            )
            return topic
        self.query_cache[topic] = query
        return query

    def _search(self, query: str) -> list[dict[str, Any]]:
        params: dict[str, Any] = {"key": self.api_key, "cx": self.engine_id, "q": query}
        if parse_date_range(self.cfg.date_range) is not None:
            params["dateRestrict"] = self.cfg.date_range

        results: list[dict[str, Any]] = []
        start = 1
        with httpx.Client(timeout=self.cfg.timeout_seconds, transport=self.transport) as client:
            while len(results) < self.cfg.max_search_results:
                num = min(self.page_size, self.cfg.max_search_results - len(results))
                resp = client.get(self.endpoint, params={**params, "num": num, "start": start})
                resp.raise_for_status()
                data = resp.json()
                if data.get("error"):
                    raise ProviderError(f"Google Search error: {data['error'].get('message')}")
                page = data.get("items") or []
                results.extend(page)
                if len(page) < num:
                    break
                start += num
        return results


def _search_item_to_news(item: dict[str, Any]) -> NewsItem:
    metatags: dict[str, Any] = {}
    tags = (item.get("pagemap") or {}).get("metatags") or []
    if tags and isinstance(tags[0], dict):
        metatags = tags[0]
    published = (
        metatags.get("article:published_time")
        or metatags.get("og:updated_time")
        or metatags.get("publishedTime")
    )
    source = metatags.get("og:site_name") or metatags.get("og_site_name") or item.get("displayLink")
    return NewsItem(
        title=item.get("title") or "Untitled",
        link=item.get("link") or "",
        snippet=truncate_snippet(clean_content(item.get("snippet") or "")),
        published_time=published,
        source=source,
    )


def score_item(item: NewsItem) -> float:
    """Heuristic 0-5 quality score: dated, sourced, specific, substantial."""
    score = 0.0
    if item.published_time:
        score += 1
    if item.source:
        score += 1
    if len(item.title.split()) >= 5:
        score += 1
    if len(item.snippet) >= 150:
        score += 1
    if any(ch.isdigit() for ch in item.snippet):
        score += 1
    return score
