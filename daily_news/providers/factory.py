"""Provider factory: builds, validates and keys the active news provider."""

from __future__ import annotations

from typing import MutableMapping

from ..config import AppConfig, get_api_key
from ..llm.clients import build_llm_client
from .agentic import AGENTIC_NAMES, AgenticProvider
from .base import NewsProvider, NewsRetriever
from .coordinator import SearchSummarizeCoordinator
from .retrievers import GoogleSearchRetriever, RSSRetriever
from .summarizers import SUMMARIZER_NAMES, LLMSummarizer


PIPELINE_MODES = ("modular", "agentic")

_SOURCE_NAMES: dict[str, str] = {
    "google": "Google Search",
    "rss": "RSS",
}


def available_providers() -> dict[str, list[str]]:
    """Return the registered identifiers for each selector."""
    return {
        "pipeline_mode": list(PIPELINE_MODES),
        "news_source": sorted(_SOURCE_NAMES),
        "summarizer": sorted(SUMMARIZER_NAMES),
        "agentic_provider": sorted(AGENTIC_NAMES),
    }


def _selection(cfg: AppConfig) -> tuple[str, str, str, str]:
    p = cfg.provider
    return (
        p.pipeline_mode.lower().strip(),
        p.news_source.lower().strip(),
        p.summarizer.lower().strip(),
        p.agentic_provider.lower().strip(),
    )


def _check_selection(cfg: AppConfig) -> None:
    mode, source, summarizer, agentic = _selection(cfg)
    if mode not in PIPELINE_MODES:
        raise ValueError(f"Unsupported pipeline mode: {cfg.provider.pipeline_mode}")
    if mode == "agentic":
        if agentic not in AGENTIC_NAMES:
            supported = ", ".join(sorted(AGENTIC_NAMES))
            raise ValueError(f"Unsupported agentic provider: {cfg.provider.agentic_provider}. Supported: {supported}")
        return
    if source not in _SOURCE_NAMES:
        supported = ", ".join(sorted(_SOURCE_NAMES))
        raise ValueError(f"Unsupported news source: {cfg.provider.news_source}. Supported: {supported}")
    if summarizer not in SUMMARIZER_NAMES:
        supported = ", ".join(sorted(SUMMARIZER_NAMES))
        raise ValueError(f"Unsupported summarizer: {cfg.provider.summarizer}. Supported: {supported}")


def create_provider(
    cfg: AppConfig,
    query_cache: MutableMapping[str, str] | None = None,
) -> NewsProvider:
    """Build the provider selected by cfg.

    Construction never checks credentials; see validate_provider_config().

    Raises:
        ValueError: If a selector names an unknown identifier
    """
    _check_selection(cfg)
    mode, source, summarizer_id, agentic = _selection(cfg)

    if mode == "agentic":
        client = build_llm_client(agentic, cfg)
        return AgenticProvider(agentic, client, cfg.news)

    summarizer = LLMSummarizer(summarizer_id, build_llm_client(summarizer_id, cfg), cfg.news)
    retriever: NewsRetriever
    if source == "google":
        retriever = GoogleSearchRetriever(
            cfg.search,
            api_key=get_api_key(cfg.credentials, "google_search"),
            engine_id=get_api_key(cfg.credentials, "google_engine"),
            query_builder=summarizer.generate_query,
            query_cache=query_cache,
        )
    else:
        retriever = RSSRetriever(cfg.search)
    return SearchSummarizeCoordinator(
        retriever,
        summarizer,
        get_provider_name(cfg),
        language=cfg.news.language,
        credentials_ok=validate_provider_config(cfg),
    )


def validate_provider_config(cfg: AppConfig) -> bool:
    """True iff every credential or feed the selected provider needs is present."""
    mode, source, summarizer, agentic = _selection(cfg)
    creds = cfg.credentials
    if mode == "agentic":
        return agentic in AGENTIC_NAMES and bool(get_api_key(creds, agentic))
    if mode != "modular" or summarizer not in SUMMARIZER_NAMES:
        return False
    if source == "google":
        source_ok = bool(get_api_key(creds, "google_search") and get_api_key(creds, "google_engine"))
    elif source == "rss":
        source_ok = any(url.strip() for url in cfg.search.rss_feeds)
    else:
        return False
    return source_ok and bool(get_api_key(creds, summarizer))


def get_provider_key(cfg: AppConfig) -> str:
    """Cache partition key; changes only with output-affecting selections."""
    mode, source, summarizer, agentic = _selection(cfg)
    if mode == "agentic":
        return agentic
    return f"{source}-{summarizer}"


def get_provider_name(cfg: AppConfig) -> str:
    mode, source, summarizer, agentic = _selection(cfg)
    if mode == "agentic":
        return AGENTIC_NAMES.get(agentic, "Unknown Provider")
    if source not in _SOURCE_NAMES or summarizer not in SUMMARIZER_NAMES:
        return "Unknown Provider"
    return f"{_SOURCE_NAMES[source]} + {SUMMARIZER_NAMES[summarizer]} Summarizer"
