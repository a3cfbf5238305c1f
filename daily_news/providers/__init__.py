"""
News provider implementations.

This package contains the provider contract and both provider shapes:
agentic providers (one search-and-summarize call) and composed providers
(a retriever and a summarizer joined by SearchSummarizeCoordinator).

To add a vendor:
1. Add an LLMClient subclass in daily_news.llm.clients and register it
2. Add its display name to AGENTIC_NAMES and/or SUMMARIZER_NAMES
3. Add its credential to CredentialsConfig and _CREDENTIAL_ENV in config.py
"""

from .agentic import AgenticProvider
from .base import NewsProvider, NewsRetriever, NewsSummarizer, classify_summary
from .coordinator import SearchSummarizeCoordinator
from .factory import (
    available_providers,
    create_provider,
    get_provider_key,
    get_provider_name,
    validate_provider_config,
)
from .retrievers import GoogleSearchRetriever, RSSRetriever
from .summarizers import LLMSummarizer

__all__ = [
    "NewsProvider",
    "NewsRetriever",
    "NewsSummarizer",
    "classify_summary",
    "AgenticProvider",
    "SearchSummarizeCoordinator",
    "GoogleSearchRetriever",
    "RSSRetriever",
    "LLMSummarizer",
    "available_providers",
    "create_provider",
    "get_provider_key",
    "get_provider_name",
    "validate_provider_config",
]
