"""Agentic providers: one vendor call that searches and summarizes together."""

from __future__ import annotations

import logging

import httpx

from ..config import NewsConfig
from ..llm.clients import LLMClient
from ..llm.prompts import build_agentic_request, build_system_instruction
from ..logging_utils import log_event, truncate_text
from ..types import ProviderResult
from .base import NewsProvider, is_no_news_text


logger = logging.getLogger("daily_news.providers")

AGENTIC_NAMES: dict[str, str] = {
    "sonar": "Sonar by Perplexity",
    "gpt": "GPT (Agentic Search)",
    "grok": "Grok (Agentic Search)",
    "claude": "Claude (Agentic Search)",
    "openrouter": "OpenRouter (Agentic Search)",
    "gemini": "Gemini (Agentic Search)",
}

_VENDOR_LABELS: dict[str, str] = {
    "sonar": "Perplexity",
    "gpt": "OpenAI",
    "grok": "Grok",
    "claude": "Anthropic",
    "openrouter": "OpenRouter",
    "gemini": "Gemini",
}


class AgenticProvider(NewsProvider):
    """Single-call provider backed by a search-capable LLM client.

    Every fault is converted into an error result; nothing propagates to
    the caller.
    """

    def __init__(self, vendor: str, client: LLMClient, news_cfg: NewsConfig):
        super().__init__(news_cfg.language)
        self.vendor = vendor
        self.client = client
        self.news_cfg = news_cfg

    def get_provider_name(self) -> str:
        return AGENTIC_NAMES.get(self.vendor, self.vendor)

    def validate_configuration(self) -> bool:
        return bool(self.client.api_key)

    def fetch_result(self, topic: str) -> ProviderResult:
        label = _VENDOR_LABELS.get(self.vendor, self.vendor)
        if not self.client.api_key:
            return ProviderResult.error(
                f"Error: {label} API key is not configured. Please add your API key in the settings.",
                detail=f"{label} API key is not configured",
            )

        system = build_system_instruction(self.news_cfg, topic)
        request = build_agentic_request(self.news_cfg, topic)
        try:
            text = self.client.search_and_summarize(request, system=system)
        except httpx.HTTPStatusError as exc:
            return self._error(topic, label, f"HTTP {exc.response.status_code}: {exc}")
        except Exception as exc:  # noqa: BLE001
            return self._error(topic, label, f"{type(exc).__name__}: {exc}")

        log_event(
            logger,
            "Agentic response",
            level=logging.DEBUG,
            event="agentic_response",
            vendor=self.vendor,
            topic=topic,
            response=truncate_text(text, 500),
        )
        if is_no_news_text(text, self.language):
            return ProviderResult.empty(text, detail=f"No news found for topic \"{topic}\"")
        return ProviderResult.success(text)

    def _error(self, topic: str, label: str, detail: str) -> ProviderResult:
        log_event(
            logger,
            f"{label} API error for {topic}: {detail}",
            level=logging.ERROR,
            event="agentic_error",
            vendor=self.vendor,
            topic=topic,
        )
        return ProviderResult.error(
            f"Error fetching news about {topic} from {label} API. "
            f"Please check your API key and settings.\n\nError details: {detail}",
            detail=detail,
        )
