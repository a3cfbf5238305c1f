"""Tests for result classification and the two provider shapes."""

import httpx
import pytest

from daily_news.config import NewsConfig
from daily_news.errors import ProviderError
from daily_news.llm.clients import LLMClient
from daily_news.providers import AgenticProvider, NewsProvider, SearchSummarizeCoordinator, classify_summary
from daily_news.providers.base import NewsRetriever, NewsSummarizer
from daily_news.providers.summarizers import LLMSummarizer
from daily_news.types import NewsItem, ResultKind


class FakeClient(LLMClient):
    vendor = "fake"

    def __init__(self, reply="summary", error: Exception | None = None, api_key="key"):
        super().__init__(api_key=api_key, model="m", base_url="https://llm.example.com")
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []

    def complete(self, prompt, system=None):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


class StaticRetriever(NewsRetriever):
    source_name = "static"

    def __init__(self, items=None, error: Exception | None = None):
        self.items = items or []
        self.error = error

    def fetch_news(self, topic):
        if self.error is not None:
            raise self.error
        return list(self.items)


class StaticSummarizer(NewsSummarizer):
    summarizer_name = "static"

    def __init__(self, text="### Key Developments\n- Item", error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls = 0

    def summarize(self, items, topic):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.text


class TextProvider(NewsProvider):
    def __init__(self, text=None, error: Exception | None = None):
        super().__init__("en")
        self.text = text
        self.error = error

    def get_provider_name(self):
        return "text"

    def validate_configuration(self):
        return True

    def fetch_and_summarize_news(self, topic):
        if self.error is not None:
            raise self.error
        return self.text


def _items(count: int = 2) -> list[NewsItem]:
    return [NewsItem(title=f"Story {i}", link=f"https://example.com/{i}", snippet="text") for i in range(count)]


def test_classify_summary_is_total():
    assert classify_summary("Error fetching news").kind is ResultKind.ERROR
    assert classify_summary("No recent news found for Tech.").kind is ResultKind.EMPTY
    assert classify_summary("Aucune actualité récente trouvée pour Tech.", "fr").kind is ResultKind.EMPTY
    assert classify_summary("### Key Developments\n- A").kind is ResultKind.SUCCESS
    assert classify_summary("").kind is ResultKind.SUCCESS


def test_text_provider_adapts_through_classification():
    assert TextProvider("- Item A").fetch_result("Tech").ok
    assert TextProvider("Error: quota").fetch_result("Tech").kind is ResultKind.ERROR


def test_text_provider_exception_becomes_error_result():
    result = TextProvider(error=RuntimeError("boom")).fetch_result("Tech")
    assert result.kind is ResultKind.ERROR
    assert result.text.startswith("Error")
    assert "boom" in result.detail


class BareProvider(NewsProvider):
    def get_provider_name(self):
        return "bare"

    def validate_configuration(self):
        return True


def test_provider_overriding_neither_method_raises_type_error():
    provider = BareProvider()
    with pytest.raises(TypeError, match="must override"):
        provider.fetch_result("Tech")
    with pytest.raises(TypeError, match="must override"):
        provider.fetch_and_summarize_news("Tech")


def test_coordinator_success_strips_summary():
    summarizer = StaticSummarizer("  ### Key Developments\n- Item A  ")
    provider = SearchSummarizeCoordinator(StaticRetriever(_items(3)), summarizer, "demo")
    result = provider.fetch_result("Tech")
    assert result.ok
    assert result.text == "### Key Developments\n- Item A"
    assert provider.fetch_and_summarize_news("Tech") == result.text


def test_coordinator_empty_retrieval_skips_summarizer():
    summarizer = StaticSummarizer()
    provider = SearchSummarizeCoordinator(StaticRetriever([]), summarizer, "demo", language="de")
    result = provider.fetch_result("Tech")
    assert result.kind is ResultKind.EMPTY
    assert result.text == "Keine aktuellen Nachrichten gefunden für Tech."
    assert summarizer.calls == 0


def test_coordinator_no_news_summary_is_empty():
    summarizer = StaticSummarizer("No recent news found for Tech.")
    provider = SearchSummarizeCoordinator(StaticRetriever(_items(1)), summarizer, "demo")
    result = provider.fetch_result("Tech")
    assert result.kind is ResultKind.EMPTY
    assert result.text == "No recent news found for Tech."
    assert result.detail == 'No news found for topic "Tech"'
    assert summarizer.calls == 1


def test_coordinator_and_agentic_agree_on_no_news_reply():
    reply = "Keine aktuellen Nachrichten gefunden für Tech."
    composed = SearchSummarizeCoordinator(StaticRetriever(_items(2)), StaticSummarizer(reply), "demo", language="de")
    agentic = AgenticProvider("gpt", FakeClient(reply), NewsConfig(language="de"))
    assert composed.fetch_result("Tech").kind is agentic.fetch_result("Tech").kind is ResultKind.EMPTY


def test_coordinator_retrieval_error():
    provider = SearchSummarizeCoordinator(StaticRetriever(error=RuntimeError("feed down")), StaticSummarizer(), "demo")
    result = provider.fetch_result("Tech")
    assert result.kind is ResultKind.ERROR
    assert result.text.startswith("Error retrieving news about Tech")


def test_coordinator_summarizer_error_and_empty_summary():
    failing = SearchSummarizeCoordinator(StaticRetriever(_items()), StaticSummarizer(error=ProviderError("bad")), "demo")
    assert failing.fetch_result("Tech").kind is ResultKind.ERROR
    blank = SearchSummarizeCoordinator(StaticRetriever(_items()), StaticSummarizer("   "), "demo")
    assert blank.fetch_result("Tech").kind is ResultKind.ERROR


def test_agentic_missing_key_short_circuits():
    client = FakeClient(api_key=None)
    provider = AgenticProvider("sonar", client, NewsConfig())
    result = provider.fetch_result("Tech")
    assert result.kind is ResultKind.ERROR
    assert result.text.startswith("Error: Perplexity API key is not configured")
    assert client.prompts == []


def test_agentic_success_and_no_news():
    ok = AgenticProvider("gpt", FakeClient("### Key Developments\n- A"), NewsConfig()).fetch_result("Tech")
    assert ok.ok
    empty = AgenticProvider("gpt", FakeClient("No recent news found for Tech."), NewsConfig()).fetch_result("Tech")
    assert empty.kind is ResultKind.EMPTY
    assert empty.detail == 'No news found for topic "Tech"'


def test_agentic_http_error_becomes_error_result():
    request = httpx.Request("POST", "https://llm.example.com")
    response = httpx.Response(429, request=request)
    error = httpx.HTTPStatusError("rate limited", request=request, response=response)
    result = AgenticProvider("grok", FakeClient(error=error), NewsConfig()).fetch_result("Tech")
    assert result.kind is ResultKind.ERROR
    assert result.text.startswith("Error fetching news about Tech from Grok API")
    assert "HTTP 429" in result.detail


def test_summarizer_generate_query_takes_first_line():
    summarizer = LLMSummarizer("gemini", FakeClient('"AI chips export rules"\nextra'), NewsConfig())
    assert summarizer.generate_query("AI") == "AI chips export rules"
    assert LLMSummarizer("gemini", FakeClient("  "), NewsConfig()).generate_query("AI") == "AI"


def test_summarizer_prompt_mentions_items():
    client = FakeClient("- summary")
    summarizer = LLMSummarizer("gemini", client, NewsConfig())
    assert summarizer.summarize(_items(2), "Tech") == "- summary"
    assert "Story 0" in client.prompts[0]
    assert "Story 1" in client.prompts[0]
