"""
Abstract interfaces for news providers.

A provider turns a topic into narrative Markdown. Two shapes exist:
- agentic providers make one opaque search-and-summarize call
- composed providers join a NewsRetriever and a NewsSummarizer

Both expose the same string contract, fetch_and_summarize_news(), and its
typed companion fetch_result(), which the generator uses.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..i18n import NO_NEWS_MARKER, get_translation
from ..types import NewsItem, ProviderResult

ERROR_MARKER = "Error"


def classify_summary(text: str, language: str = "en") -> ProviderResult:
    """Classify provider text into exactly one of error, empty or success.

    Args:
        text: Text returned through the string contract
        language: Note language, used to recognize the translated "no news" marker

    Returns:
        ProviderResult carrying the original text
    """
    if ERROR_MARKER in text:
        return ProviderResult.error(text)
    if is_no_news_text(text, language):
        return ProviderResult.empty(text)
    return ProviderResult.success(text)


def is_no_news_text(text: str, language: str = "en") -> bool:
    return get_translation("noRecentNews", language) in text or NO_NEWS_MARKER in text


class NewsProvider(ABC):
    """Uniform provider contract consumed by the generator.

    Subclasses override fetch_result() or fetch_and_summarize_news(); each
    default is written in terms of the other, so overriding neither raises
    TypeError.
    """

    def __init__(self, language: str = "en"):
        self.language = language

    @abstractmethod
    def get_provider_name(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def validate_configuration(self) -> bool:
        raise NotImplementedError

    def fetch_result(self, topic: str) -> ProviderResult:
        """Return a tagged result for topic. Never raises for a complete subclass.

        Subclasses that only produce text inherit this adapter, which
        classifies the string contract with classify_summary().
        """
        _require_override(self)
        try:
            text = self.fetch_and_summarize_news(topic)
        except Exception as exc:  # noqa: BLE001
            return ProviderResult.error(
                f"Error fetching news about {topic}: {exc}",
                detail=f"Provider error: {exc}",
            )
        return classify_summary(text, self.language)

    def fetch_and_summarize_news(self, topic: str) -> str:
        """Return Markdown for topic, an "Error..." payload, or a "no news" message."""
        _require_override(self)
        return self.fetch_result(topic).text


def _require_override(provider: NewsProvider) -> None:
    cls = type(provider)
    if (
        cls.fetch_result is NewsProvider.fetch_result
        and cls.fetch_and_summarize_news is NewsProvider.fetch_and_summarize_news
    ):
        raise TypeError(f"{cls.__name__} must override fetch_result() or fetch_and_summarize_news()")


class NewsRetriever(ABC):
    """Returns a bounded, deduplicated, time-filtered list of items for a topic."""

    source_name: str = ""

    @abstractmethod
    def fetch_news(self, topic: str) -> list[NewsItem]:
        raise NotImplementedError


class NewsSummarizer(ABC):
    """Turns raw items into formatted narrative text."""

    summarizer_name: str = ""

    @abstractmethod
    def summarize(self, items: list[NewsItem], topic: str) -> str:
        raise NotImplementedError
