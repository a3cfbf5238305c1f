"""Tests for run analysis and note fragments."""

from datetime import datetime

from daily_news.config import AppConfig
from daily_news.content import (
    analyze_topic_results,
    build_processing_status,
    build_table_of_contents,
    build_topic_sections,
    format_metadata_as_yaml,
    generate_metadata,
    slugify,
)
from daily_news.types import ResultKind, TopicContent, TopicStatus

OK = TopicStatus("Tech", True, True, 1, None, ResultKind.SUCCESS)
EMPTY = TopicStatus("Health", error='No news found for topic "Health"', outcome=ResultKind.EMPTY)
FAILED = TopicStatus("Space", error='demo error for topic "Space"', outcome=ResultKind.ERROR)


def test_analysis_success_and_empty():
    analysis = analyze_topic_results([OK, EMPTY])
    assert analysis.at_least_one_successful_topic is True
    assert analysis.all_topics_failed is False
    assert analysis.at_least_one_news_item is True
    assert analysis.degraded is False
    assert analysis.error_summary == '- Health: No news found for topic "Health"'


def test_analysis_all_failed():
    analysis = analyze_topic_results([FAILED, FAILED])
    assert analysis.all_topics_failed is True
    assert analysis.at_least_one_successful_topic is False
    assert analysis.degraded is True


def test_analysis_empty_topics_are_not_failures():
    analysis = analyze_topic_results([EMPTY, FAILED])
    assert analysis.all_topics_failed is False
    assert analysis.at_least_one_news_item is False
    assert analysis.degraded is True


def test_analysis_of_no_topics():
    analysis = analyze_topic_results([])
    assert analysis.all_topics_failed is False
    assert analysis.at_least_one_successful_topic is False


def test_table_of_contents_links_unique_anchors():
    toc = build_table_of_contents(["AI & Robots", "Tech", "Tech"])
    assert toc.startswith("## Table of Contents\n")
    assert "- [AI & Robots](#ai-robots)" in toc
    assert "- [Tech](#tech)" in toc
    assert "- [Tech](#tech-1)" in toc


def test_processing_status_lists_problem_topics_in_language():
    status = build_processing_status([OK, EMPTY, FAILED], "en")
    assert "Tech" not in status
    assert "- **Health**: no recent news" in status
    assert "- **Space**: failed" in status
    assert build_processing_status([FAILED], "fr").startswith("## État du traitement")


def test_topic_sections_keep_order():
    sections = build_topic_sections(
        [TopicContent("Tech", "- Item A\n", OK), TopicContent("Health", "none\n\n", EMPTY)]
    )
    assert sections == "\n---\n\n## Tech\n\n- Item A\n\n---\n\n## Health\n\nnone\n\n"


def test_slugify():
    assert slugify("World News") == "world-news"
    assert slugify("***") == "section"


def test_metadata_respects_toggles():
    cfg = AppConfig()
    cfg.news.topics = ["Tech", "World News"]
    cfg.metadata.include_language = True
    cfg.metadata.include_source = True
    cfg.metadata.include_processing_time = True
    started = datetime(2024, 3, 1, 8, 0, 0)
    now = datetime(2024, 3, 1, 8, 0, 12)

    meta = generate_metadata(cfg, started, now, "RSS + Gemini Summarizer")

    assert meta["datetime"] == "2024-03-01 08:00:12"
    assert meta["topics"] == ["Tech", "World News"]
    assert meta["tags"] == ["daily-news", "tech", "world-news"]
    assert meta["language"] == "en"
    assert meta["source"] == "RSS + Gemini Summarizer"
    assert meta["processing_time"] == "12.0s"
    assert "output_format" not in meta


def test_format_metadata_as_yaml():
    text = format_metadata_as_yaml({"datetime": "2024-03-01 08:00:00", "tags": ["daily-news"]})
    assert text.startswith("---\n")
    assert text.endswith("---\n")
    assert "tags:\n- daily-news\n" in text
    assert format_metadata_as_yaml({}) == ""
