"""LLM-backed summarizers used by composed providers."""

from __future__ import annotations

from ..config import NewsConfig
from ..llm.clients import LLMClient
from ..llm.prompts import build_query_prompt, build_summary_prompt, build_system_instruction
from ..types import NewsItem
from .base import NewsSummarizer


SUMMARIZER_NAMES: dict[str, str] = {
    "gemini": "Gemini",
    "gpt": "GPT",
    "grok": "Grok",
    "claude": "Claude",
    "openrouter": "OpenRouter",
}


class LLMSummarizer(NewsSummarizer):
    """Summarizes retrieved items with one completion call."""

    def __init__(self, vendor: str, client: LLMClient, news_cfg: NewsConfig):
        self.vendor = vendor
        self.client = client
        self.news_cfg = news_cfg
        self.summarizer_name = SUMMARIZER_NAMES.get(vendor, vendor)

    def summarize(self, items: list[NewsItem], topic: str) -> str:
        system = build_system_instruction(self.news_cfg, topic)
        prompt = build_summary_prompt(self.news_cfg, items, topic)
        return self.client.complete(prompt, system=system).strip()

    def generate_query(self, topic: str) -> str:
        """Ask the model for a search query; used by search retrievers."""
        query = self.client.complete(build_query_prompt(topic)).strip().strip("\"'")
        lines = [line.strip() for line in query.splitlines() if line.strip()]
        return lines[0] if lines else topic
