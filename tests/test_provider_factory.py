"""Tests for provider construction, validation and keys."""

import pytest

from daily_news.config import AppConfig
from daily_news.providers import (
    AgenticProvider,
    GoogleSearchRetriever,
    RSSRetriever,
    SearchSummarizeCoordinator,
    available_providers,
    create_provider,
    get_provider_key,
    get_provider_name,
    validate_provider_config,
)


def _modular(source: str = "rss", summarizer: str = "gemini") -> AppConfig:
    cfg = AppConfig()
    cfg.provider.pipeline_mode = "modular"
    cfg.provider.news_source = source
    cfg.provider.summarizer = summarizer
    return cfg


def _agentic(vendor: str = "sonar") -> AppConfig:
    cfg = AppConfig()
    cfg.provider.pipeline_mode = "agentic"
    cfg.provider.agentic_provider = vendor
    return cfg


def test_available_providers_lists_every_selector():
    names = available_providers()
    assert names["pipeline_mode"] == ["modular", "agentic"]
    assert names["news_source"] == ["google", "rss"]
    assert "claude" in names["summarizer"]
    assert "sonar" in names["agentic_provider"]
    assert "sonar" not in names["summarizer"]


def test_create_provider_agentic():
    provider = create_provider(_agentic("claude"))
    assert isinstance(provider, AgenticProvider)
    assert provider.get_provider_name() == "Claude (Agentic Search)"


def test_create_provider_modular_rss():
    cfg = _modular("rss", "gpt")
    provider = create_provider(cfg)
    assert isinstance(provider, SearchSummarizeCoordinator)
    assert isinstance(provider.retriever, RSSRetriever)
    assert provider.get_provider_name() == "RSS + GPT Summarizer"


def test_create_provider_modular_google_shares_query_cache():
    queries: dict[str, str] = {}
    provider = create_provider(_modular("google", "gemini"), query_cache=queries)
    assert isinstance(provider.retriever, GoogleSearchRetriever)
    assert provider.retriever.query_cache is queries


def test_create_provider_never_checks_credentials():
    provider = create_provider(_agentic("sonar"))
    assert provider.validate_configuration() is False


@pytest.mark.parametrize(
    "cfg",
    [
        _agentic("nope"),
        _modular("bing", "gemini"),
        _modular("rss", "sonar"),
    ],
)
def test_create_provider_rejects_unknown_identifiers(cfg):
    with pytest.raises(ValueError, match="Unsupported"):
        create_provider(cfg)


def test_create_provider_rejects_unknown_mode():
    cfg = AppConfig()
    cfg.provider.pipeline_mode = "hybrid"
    with pytest.raises(ValueError, match="Unsupported pipeline mode"):
        create_provider(cfg)


def test_validate_agentic_requires_vendor_key(monkeypatch):
    cfg = _agentic("sonar")
    assert validate_provider_config(cfg) is False
    monkeypatch.setenv("PERPLEXITY_API_KEY", "pplx")
    assert validate_provider_config(cfg) is True


def test_validate_modular_google_requires_key_pair_and_summarizer():
    cfg = _modular("google", "gemini")
    cfg.credentials.google_search_api_key = "g-key"
    cfg.credentials.gemini_api_key = "gem"
    assert validate_provider_config(cfg) is False
    cfg.credentials.google_search_engine_id = "cx"
    assert validate_provider_config(cfg) is True
    cfg.credentials.gemini_api_key = ""
    assert validate_provider_config(cfg) is False


def test_validate_modular_rss_requires_feeds():
    cfg = _modular("rss", "grok")
    cfg.credentials.grok_api_key = "xai"
    assert validate_provider_config(cfg) is False
    cfg.search.rss_feeds = ["https://example.com/feed.xml"]
    assert validate_provider_config(cfg) is True


def test_validate_unknown_identifier_is_false():
    cfg = _agentic("nope")
    cfg.credentials.perplexity_api_key = "x"
    assert validate_provider_config(cfg) is False


def test_provider_key_tracks_output_affecting_choices_only():
    cfg = _modular("rss", "gemini")
    key = get_provider_key(cfg)
    assert key == "rss-gemini"

    cfg.credentials.gemini_api_key = "changed"
    cfg.news.topics = ["Other"]
    cfg.search.results_per_topic = 3
    assert get_provider_key(cfg) == key

    cfg.provider.summarizer = "claude"
    assert get_provider_key(cfg) == "rss-claude"
    assert get_provider_key(_agentic("grok")) == "grok"


def test_provider_names():
    assert get_provider_name(_agentic("sonar")) == "Sonar by Perplexity"
    assert get_provider_name(_modular("google", "openrouter")) == "Google Search + OpenRouter Summarizer"
    assert get_provider_name(_modular("bing", "gemini")) == "Unknown Provider"
