"""Helpers that turn per-topic results into note fragments and run analysis."""

from __future__ import annotations

from datetime import datetime
import re
from typing import Any

import yaml

from .config import AppConfig
from .i18n import get_translation
from .types import ResultKind, RunAnalysis, TopicContent, TopicStatus


def slugify(value: str) -> str:
    slug = re.sub(r"[^\w]+", "-", value.strip().lower(), flags=re.UNICODE).strip("-")
    return slug or "section"


def analyze_topic_results(statuses: list[TopicStatus]) -> RunAnalysis:
    """Summarize topic outcomes for one run.

    Empty topics are soft misses: they neither succeed nor count toward
    all_topics_failed.
    """
    failed = [s for s in statuses if s.outcome is ResultKind.ERROR]
    all_failed = bool(statuses) and len(failed) == len(statuses)
    any_success = any(s.retrieval_success and s.summarization_success for s in statuses)
    any_news = any(s.news_count > 0 for s in statuses)
    lines = [f"- {s.topic}: {s.error}" for s in statuses if s.error]
    return RunAnalysis(
        all_topics_failed=all_failed,
        at_least_one_successful_topic=any_success,
        at_least_one_news_item=any_news,
        error_summary="\n".join(lines),
    )


def build_table_of_contents(topics: list[str], language: str = "en") -> str:
    lines = [f"## {get_translation('tableOfContents', language)}", ""]
    used: dict[str, int] = {}
    for topic in topics:
        base = slugify(topic)
        count = used.get(base, 0)
        used[base] = count + 1
        anchor = f"{base}-{count}" if count else base
        lines.append(f"- [{topic}](#{anchor})")
    return "\n".join(lines) + "\n"


def build_processing_status(statuses: list[TopicStatus], language: str = "en") -> str:
    lines = [f"## {get_translation('processingStatus', language)}", ""]
    for status in statuses:
        if status.outcome is ResultKind.SUCCESS:
            continue
        label = (
            get_translation("topicNoNews", language)
            if status.outcome is ResultKind.EMPTY
            else get_translation("topicFailed", language)
        )
        detail = f" ({status.error})" if status.error else ""
        lines.append(f"- **{status.topic}**: {label}{detail}")
    return "\n".join(lines) + "\n"


def build_topic_sections(contents: list[TopicContent]) -> str:
    sections = []
    for item in contents:
        sections.append(f"\n---\n\n## {item.topic}\n\n{item.content}")
    return "".join(sections)


def generate_metadata(
    cfg: AppConfig,
    started_at: datetime,
    now: datetime,
    provider_name: str,
) -> dict[str, Any]:
    """Collect the front matter fields enabled in cfg.metadata."""
    meta_cfg = cfg.metadata
    meta: dict[str, Any] = {}
    if meta_cfg.include_datetime:
        meta["datetime"] = now.strftime("%Y-%m-%d %H:%M:%S")
    if meta_cfg.include_topics:
        meta["topics"] = list(cfg.news.topics)
    if meta_cfg.include_tags:
        meta["tags"] = ["daily-news"] + [slugify(topic) for topic in cfg.news.topics]
    if meta_cfg.include_language:
        meta["language"] = cfg.news.language
    if meta_cfg.include_processing_time:
        meta["processing_time"] = f"{max(0.0, (now - started_at).total_seconds()):.1f}s"
    if meta_cfg.include_source:
        meta["source"] = provider_name
    if meta_cfg.include_output_format:
        meta["output_format"] = cfg.news.output_format
    return meta


def format_metadata_as_yaml(meta: dict[str, Any]) -> str:
    if not meta:
        return ""
    body = yaml.safe_dump(meta, allow_unicode=True, sort_keys=False, default_flow_style=False)
    return f"---\n{body}---\n"
