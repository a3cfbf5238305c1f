"""Composed provider: a retriever and a summarizer joined into one provider."""

from __future__ import annotations

import logging

from ..i18n import get_translation
from ..logging_utils import log_event
from ..types import ProviderResult
from .base import NewsProvider, NewsRetriever, NewsSummarizer, is_no_news_text


logger = logging.getLogger("daily_news.providers")


class SearchSummarizeCoordinator(NewsProvider):
    """Drives retriever.fetch_news() then summarizer.summarize().

    An empty retrieval yields an empty result carrying the translated
    "no recent news" text, never an empty string.
    """

    def __init__(
        self,
        retriever: NewsRetriever,
        summarizer: NewsSummarizer,
        name: str,
        language: str = "en",
        credentials_ok: bool = True,
    ):
        super().__init__(language)
        self.retriever = retriever
        self.summarizer = summarizer
        self.name = name
        self.credentials_ok = credentials_ok

    def get_provider_name(self) -> str:
        return self.name

    def validate_configuration(self) -> bool:
        return self.credentials_ok

    def fetch_result(self, topic: str) -> ProviderResult:
        try:
            items = self.retriever.fetch_news(topic)
        except Exception as exc:  # noqa: BLE001
            log_event(
                logger,
                f"Retrieval failed for {topic}: {exc}",
                level=logging.ERROR,
                event="retrieval_failed",
                topic=topic,
                source=self.retriever.source_name,
            )
            return ProviderResult.error(
                f"Error retrieving news about {topic}: {exc}",
                detail=f"Retrieval error: {exc}",
            )

        log_event(
            logger,
            f"Retrieved {len(items)} items for {topic}",
            event="retrieval_complete",
            topic=topic,
            count=len(items),
        )
        if not items:
            text = f"{get_translation('noRecentNews', self.language)} {topic}."
            return ProviderResult.empty(text, detail=f"No news found for topic \"{topic}\"")

        try:
            summary = self.summarizer.summarize(items, topic)
        except Exception as exc:  # noqa: BLE001
            log_event(
                logger,
                f"Summarization failed for {topic}: {exc}",
                level=logging.ERROR,
                event="summarization_failed",
                topic=topic,
                summarizer=self.summarizer.summarizer_name,
            )
            return ProviderResult.error(
                f"Error summarizing news about {topic}: {exc}",
                detail=f"Summarization error: {exc}",
            )

        summary = (summary or "").strip()
        if not summary:
            return ProviderResult.error(
                f"Error summarizing news about {topic}: empty response",
                detail="Summarization error: empty response",
            )
        if is_no_news_text(summary, self.language):
            return ProviderResult.empty(summary, detail=f"No news found for topic \"{topic}\"")
        return ProviderResult.success(summary)
