"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- ProviderConfig: pipeline mode, news source, summarizer and agentic vendor
- CredentialsConfig: per-vendor API keys (inline or via environment)
- SearchConfig: retrieval limits, date range, RSS feeds, quality filtering
- NewsConfig: topics, language, archive location and output style
- MetadataConfig: YAML front matter toggles
- TemplateConfig: note template selection
- ScheduleConfig: daily trigger time
- CacheConfig: per-topic daily cache state file
- LoggingConfig: logging behavior
- AppConfig: root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
import os
from typing import Any

import yaml


@dataclass
class ProviderConfig:
    """Selection of the news acquisition strategy.

    Attributes:
        pipeline_mode: "modular" (retriever + summarizer) or "agentic" (single call)
        news_source: Retriever used in modular mode ("google" or "rss")
        summarizer: Summarizer used in modular mode
            ("gemini", "gpt", "grok", "claude", "openrouter")
        agentic_provider: Vendor used in agentic mode
            ("sonar", "gpt", "grok", "claude", "openrouter", "gemini")
        gemini_model: Gemini model identifier
        openai_model: OpenAI model identifier
        grok_model: xAI Grok model identifier
        claude_model: Anthropic model identifier
        openrouter_model: OpenRouter model identifier
        sonar_model: Perplexity model identifier
        timeout_seconds: HTTP timeout for LLM calls
        trust_env: Whether to respect system proxy settings for API requests
    """

    pipeline_mode: str = "modular"
    news_source: str = "google"
    summarizer: str = "gemini"
    agentic_provider: str = "sonar"
    gemini_model: str = "gemini-2.5-flash"
    openai_model: str = "gpt-4.1-mini"
    grok_model: str = "grok-3-mini"
    claude_model: str = "claude-sonnet-4-20250514"
    openrouter_model: str = "anthropic/claude-sonnet-4"
    sonar_model: str = "sonar-pro"
    timeout_seconds: float = 60.0
    trust_env: bool = True


@dataclass
class CredentialsConfig:
    """API credentials. Empty values fall back to environment variables.

    Attributes:
        google_search_api_key: Google Custom Search API key
        google_search_engine_id: Google Programmable Search engine id (cx)
        gemini_api_key: Google Generative Language API key
        perplexity_api_key: Perplexity API key
        openai_api_key: OpenAI API key
        grok_api_key: xAI API key
        anthropic_api_key: Anthropic API key
        openrouter_api_key: OpenRouter API key
    """

    google_search_api_key: str | None = None
    google_search_engine_id: str | None = None
    gemini_api_key: str | None = None
    perplexity_api_key: str | None = None
    openai_api_key: str | None = None
    grok_api_key: str | None = None
    anthropic_api_key: str | None = None
    openrouter_api_key: str | None = None


@dataclass
class SearchConfig:
    """Configuration for news retrieval.

    Attributes:
        rss_feeds: Feed URLs polled by the RSS retriever
        results_per_topic: Maximum number of items handed to the summarizer
        max_search_results: Maximum number of raw search hits to page through
        date_range: Freshness window, "d<N>" days or "w<N>" weeks
        min_content_length: Minimum snippet length kept by the search retriever
        strict_quality_filtering: Drop items scoring below quality_threshold
        quality_threshold: Minimum heuristic quality score (0-5)
        use_ai_for_queries: Let the summarizer LLM write search queries
        title_similarity_threshold: Fuzzy match threshold (0-100) for duplicate titles
        timeout_seconds: HTTP timeout for search and feed requests
        user_agent: User-Agent header for feed requests
    """

    rss_feeds: list[str] = field(default_factory=list)
    results_per_topic: int = 8
    max_search_results: int = 30
    date_range: str = "d3"
    min_content_length: int = 80
    strict_quality_filtering: bool = False
    quality_threshold: int = 3
    use_ai_for_queries: bool = True
    title_similarity_threshold: int = 92
    timeout_seconds: float = 10.0
    user_agent: str = "daily-news-briefing/0.1 (+feed reader)"


@dataclass
class NewsConfig:
    """Core briefing settings.

    Attributes:
        topics: Ordered topic list; order determines section order
        language: ISO 639-1 language code (exactly two characters)
        vault_dir: Root directory of the document store
        archive_folder: Folder (relative to vault_dir) holding daily notes
        output_format: "detailed" or "concise"
        enable_analysis_context: Add an "Analysis & Context" section in detailed mode
        use_custom_prompt: Replace the built-in prompt with custom_prompt
        custom_prompt: Custom prompt; {{TOPIC}} is replaced with the topic
    """

    topics: list[str] = field(default_factory=lambda: ["Technology", "World News"])
    language: str = "en"
    vault_dir: str = "."
    archive_folder: str = "News Archive"
    output_format: str = "detailed"
    enable_analysis_context: bool = True
    use_custom_prompt: bool = False
    custom_prompt: str = ""


@dataclass
class MetadataConfig:
    """YAML front matter settings."""

    enabled: bool = False
    include_datetime: bool = True
    include_topics: bool = True
    include_tags: bool = True
    include_language: bool = False
    include_processing_time: bool = False
    include_source: bool = False
    include_output_format: bool = False


@dataclass
class TemplateConfig:
    """Note template selection.

    Attributes:
        type: "default", "minimal", "detailed", "custom" or "file"
        custom: Template source used when type is "custom"
        file_path: Template note path (relative to vault_dir) used when type is "file"
    """

    type: str = "default"
    custom: str = ""
    file_path: str = ""


@dataclass
class ScheduleConfig:
    """Daily trigger settings for the watch command."""

    time: str = "08:00"
    poll_seconds: float = 60.0


@dataclass
class CacheConfig:
    """Per-topic daily cache settings.

    Attributes:
        enabled: Whether to persist the cache between runs
        state_file: JSON file holding the daily topic cache and query cache
    """

    enabled: bool = True
    state_file: str = ".daily_news_cache.json"


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
        log_dir: Directory for the log file (defaults to the vault directory)
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "daily_news.jsonl"
    log_dir: str | None = None


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    provider: ProviderConfig = field(default_factory=ProviderConfig)
    credentials: CredentialsConfig = field(default_factory=CredentialsConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    news: NewsConfig = field(default_factory=NewsConfig)
    metadata: MetadataConfig = field(default_factory=MetadataConfig)
    template: TemplateConfig = field(default_factory=TemplateConfig)
    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_SECTIONS: dict[str, type] = {f.name: f.default_factory for f in fields(AppConfig)}  # type: ignore[misc]

# Environment variables consulted when a credential is not set inline.
_CREDENTIAL_ENV: dict[str, tuple[str, str]] = {
    "google_search": ("google_search_api_key", "GOOGLE_SEARCH_API_KEY"),
    "google_engine": ("google_search_engine_id", "GOOGLE_SEARCH_ENGINE_ID"),
    "gemini": ("gemini_api_key", "GEMINI_API_KEY"),
    "sonar": ("perplexity_api_key", "PERPLEXITY_API_KEY"),
    "gpt": ("openai_api_key", "OPENAI_API_KEY"),
    "grok": ("grok_api_key", "XAI_API_KEY"),
    "claude": ("anthropic_api_key", "ANTHROPIC_API_KEY"),
    "openrouter": ("openrouter_api_key", "OPENROUTER_API_KEY"),
}


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary, ignoring unknown keys."""
    sections = {}
    for name, section_cls in _SECTIONS.items():
        known = {f.name for f in fields(section_cls)}
        values = {k: v for k, v in (data.get(name) or {}).items() if k in known}
        sections[name] = section_cls(**values)
    return AppConfig(**sections)


def get_api_key(cfg: CredentialsConfig, vendor: str) -> str | None:
    """Get a credential from inline config or its environment variable.

    Args:
        cfg: Credentials section
        vendor: Vendor id ("gemini", "gpt", "grok", "claude", "openrouter",
            "sonar") or "google_search" / "google_engine"

    Returns:
        The stripped credential, or None when unset or blank
    """
    try:
        attr, env_name = _CREDENTIAL_ENV[vendor]
    except KeyError:
        return None
    value = getattr(cfg, attr) or os.getenv(env_name) or ""
    value = value.strip()
    return value or None
