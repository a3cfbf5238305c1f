"""
Per-topic daily cache.

Results are keyed by "{date}_{provider_key}_{topic}" and are only valid on
the calendar day they were written. The cache also carries the query cache
(topic -> AI-generated search query) shared with search retrievers.

State is stored as one JSON file:
    {"daily_topic_cache": {key: TopicContent}, "query_cache": {topic: query}}
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
import tempfile
from typing import Any

from .errors import StorageError
from .logging_utils import log_event
from .types import TopicContent


logger = logging.getLogger("daily_news.cache")


def cache_key(date: str, provider_key: str, topic: str) -> str:
    return f"{date}_{provider_key}_{topic}"


class DailyTopicCache:
    """Topic results for the current day, persisted to a JSON state file.

    Attributes:
        path: State file location, or None for a purely in-memory cache
        entries: Cached TopicContent by cache key
        query_cache: AI-generated search queries by topic
    """

    def __init__(
        self,
        path: Path | None = None,
        entries: dict[str, TopicContent] | None = None,
        query_cache: dict[str, str] | None = None,
    ):
        self.path = path
        self.entries: dict[str, TopicContent] = dict(entries or {})
        self.query_cache: dict[str, str] = dict(query_cache or {})

    @classmethod
    def load(cls, path: Path) -> "DailyTopicCache":
        """Load state from path; a missing or corrupt file yields an empty cache."""
        if not path.exists():
            return cls(path)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            entries = {
                key: TopicContent.from_dict(value)
                for key, value in (raw.get("daily_topic_cache") or {}).items()
            }
            query_cache = {str(k): str(v) for k, v in (raw.get("query_cache") or {}).items()}
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            log_event(
                logger,
                f"Ignoring unreadable cache state {path}: {exc}",
                level=logging.WARNING,
                event="cache_load_failed",
                path=str(path),
            )
            return cls(path)
        return cls(path, entries, query_cache)

    def get(self, date: str, provider_key: str, topic: str) -> TopicContent | None:
        return self.entries.get(cache_key(date, provider_key, topic))

    def put(self, date: str, provider_key: str, topic: str, content: TopicContent) -> None:
        self.entries[cache_key(date, provider_key, topic)] = content

    def prune_not_matching(self, date: str) -> int:
        """Remove every entry whose date component is not date. Returns the count removed."""
        prefix = f"{date}_"
        stale = [key for key in self.entries if not key.startswith(prefix)]
        for key in stale:
            del self.entries[key]
        if stale:
            log_event(
                logger,
                f"Cleaned {len(stale)} cache entries from previous days",
                event="cache_pruned",
                removed=len(stale),
            )
        return len(stale)

    def clear(self) -> int:
        removed = len(self.entries)
        self.entries.clear()
        return removed

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def to_dict(self) -> dict[str, Any]:
        return {
            "daily_topic_cache": {key: value.to_dict() for key, value in self.entries.items()},
            "query_cache": dict(self.query_cache),
        }

    def persist(self) -> None:
        """Atomically write state to path.

        Raises:
            StorageError: If the state file cannot be written
        """
        if self.path is None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".cache-", suffix=".json", dir=self.path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(self.to_dict(), handle, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise StorageError(f"Failed to persist cache to {self.path}: {exc}") from exc


class InMemoryCache(DailyTopicCache):
    """Cache that is never written to disk."""

    def __init__(self, entries: dict[str, TopicContent] | None = None, query_cache: dict[str, str] | None = None):
        super().__init__(None, entries, query_cache)
