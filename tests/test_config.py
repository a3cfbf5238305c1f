"""Tests for YAML config loading and credential resolution."""

from pathlib import Path

from daily_news.config import AppConfig, CredentialsConfig, get_api_key, load_config


def test_load_config_without_path_returns_defaults():
    cfg = load_config(None)
    assert cfg == AppConfig()
    assert cfg.news.language == "en"
    assert cfg.cache.state_file == ".daily_news_cache.json"


def test_load_config_merges_sections_and_ignores_unknown_keys(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "provider:\n"
        "  pipeline_mode: agentic\n"
        "  agentic_provider: grok\n"
        "  not_a_field: 1\n"
        "news:\n"
        "  topics: [Tech, Health]\n"
        "  language: fr\n"
        "search:\n"
        "  rss_feeds: ['https://example.com/feed']\n"
        "unknown_section:\n"
        "  foo: bar\n",
        encoding="utf-8",
    )

    cfg = load_config(str(path))

    assert cfg.provider.pipeline_mode == "agentic"
    assert cfg.provider.agentic_provider == "grok"
    assert cfg.provider.summarizer == "gemini"
    assert cfg.news.topics == ["Tech", "Health"]
    assert cfg.news.language == "fr"
    assert cfg.news.archive_folder == "News Archive"
    assert cfg.search.rss_feeds == ["https://example.com/feed"]
    assert cfg.search.results_per_topic == 8


def test_load_config_empty_file_uses_defaults(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(str(path)) == AppConfig()


def test_get_api_key_prefers_inline_value(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "env-key")
    creds = CredentialsConfig(gemini_api_key="  inline-key ")
    assert get_api_key(creds, "gemini") == "inline-key"


def test_get_api_key_falls_back_to_environment(monkeypatch):
    monkeypatch.setenv("XAI_API_KEY", "xai-key")
    monkeypatch.setenv("GOOGLE_SEARCH_ENGINE_ID", "engine")
    creds = CredentialsConfig()
    assert get_api_key(creds, "grok") == "xai-key"
    assert get_api_key(creds, "google_engine") == "engine"


def test_get_api_key_blank_or_unknown_is_none():
    creds = CredentialsConfig(openai_api_key="   ")
    assert get_api_key(creds, "gpt") is None
    assert get_api_key(creds, "nope") is None
