"""Prompt builders for agentic providers, summarizers and search query generation."""

from __future__ import annotations

from ..config import NewsConfig
from ..i18n import get_translation
from ..types import NewsItem


def _language_instruction(language: str) -> str:
    if language == "en":
        return ""
    return (
        f" Translate all content into the language with ISO 639-1 code \"{language}\". "
        "The source news may be in English but your response should be entirely in the target language."
    )


def _format_instruction(cfg: NewsConfig) -> str:
    language = cfg.language
    if cfg.output_format == "detailed":
        text = (
            "\n\nFormat your summary with these sections:\n\n"
            f"### {get_translation('keyDevelopments', language)}\n"
            "- **[Clear headline with key detail]**: Concrete facts with specific details. [Source](URL)\n"
            "- **[Clear headline with key detail]**: Concrete facts with specific details. [Source](URL)"
        )
        if cfg.enable_analysis_context:
            text += (
                f"\n\n### {get_translation('analysisContext', language)}\n"
                "[Provide context, implications, or background for the most significant developments]"
            )
        return text
    return (
        "\n\nFormat your summary as bullet points with concrete facts:\n\n"
        "- **[Clear headline with key detail]**: Concrete facts with specific details. [Source](URL)\n"
        "- **[Clear headline with key detail]**: Concrete facts with specific details. [Source](URL)"
    )


def build_system_instruction(cfg: NewsConfig, topic: str) -> str:
    """System prompt shared by agentic providers and summarizers."""
    if cfg.use_custom_prompt and cfg.custom_prompt:
        return cfg.custom_prompt.replace("{{TOPIC}}", topic)

    return (
        "You are a helpful AI assistant. Please answer in the required format."
        f"{_language_instruction(cfg.language)}\n\n"
        "KEY REQUIREMENTS:\n"
        "1. Focus on concrete developments, facts, and data\n"
        "2. For each news item include the SOURCE in markdown format: [Source](URL)\n"
        "3. Use specific dates rather than relative time references\n"
        "4. Prioritize news with specific details (numbers, names, quotes)\n"
        "5. Only return the news - do not include any meta-narratives, explanations, or instructions.\n"
        f"6. If content lacks substance, state \"{get_translation('limitedNews', cfg.language)} {topic}\"\n"
        f"7. If there is no recent news at all, reply only: \"{get_translation('noRecentNews', cfg.language)} {topic}.\""
        f"{_format_instruction(cfg)}"
    )


def build_agentic_request(cfg: NewsConfig, topic: str) -> str:
    if cfg.language != "en":
        return (
            f"What are the latest significant news about \"{topic}\"? Search for information in English, "
            f"but translate your final response into the language with ISO 639-1 code \"{cfg.language}\"."
        )
    return f"What are the latest significant news about \"{topic}\"?"


def build_summary_prompt(cfg: NewsConfig, items: list[NewsItem], topic: str) -> str:
    lines = [f"Summarize the following recent news about \"{topic}\".", ""]
    for idx, item in enumerate(items, start=1):
        lines.append(f"[{idx}] {item.title}")
        if item.source:
            lines.append(f"Source: {item.source}")
        if item.published_time:
            lines.append(f"Published: {item.published_time}")
        lines.append(f"URL: {item.link}")
        if item.snippet:
            lines.append(item.snippet)
        lines.append("")
    return "\n".join(lines).rstrip()


def build_query_prompt(topic: str) -> str:
    return (
        "Write one concise web search query (at most 8 words) that finds the most recent, "
        f"substantive news about the topic \"{topic}\". Return only the query text, no quotes."
    )
