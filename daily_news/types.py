"""
Core data types for the daily news pipeline.

This module defines the structures that flow between pipeline stages:
- NewsItem: a candidate story produced by a retriever
- ProviderResult: tagged outcome of one provider call
- TopicStatus / TopicContent: per-topic work product, the unit of caching
- RunAnalysis: derived summary of all topic outcomes in a run
- RunResult / RunOutcome: terminal state of a generation run
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


@dataclass
class NewsItem:
    """A candidate news story returned by a retriever.

    Attributes:
        title: Headline
        link: Canonical URL
        snippet: Cleaned, truncated description
        published_time: Publication timestamp as reported by the source
        source: Feed title or site name
        quality_score: Heuristic score (0-5) assigned by search retrievers
    """
    title: str
    link: str
    snippet: str
    published_time: str | None = None
    source: str | None = None
    quality_score: float | None = None


class ResultKind(str, Enum):
    SUCCESS = "success"
    EMPTY = "empty"
    ERROR = "error"


@dataclass(frozen=True)
class ProviderResult:
    """Tagged result of fetching and summarizing news for one topic.

    Attributes:
        kind: SUCCESS, EMPTY (nothing recent found) or ERROR
        text: Narrative text, the "no news" message, or an error payload
        detail: Error or empty-result detail suitable for a status line
    """
    kind: ResultKind
    text: str
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.kind is ResultKind.SUCCESS

    @classmethod
    def success(cls, text: str) -> "ProviderResult":
        return cls(ResultKind.SUCCESS, text)

    @classmethod
    def empty(cls, text: str, detail: str | None = None) -> "ProviderResult":
        return cls(ResultKind.EMPTY, text, detail=detail)

    @classmethod
    def error(cls, text: str, detail: str | None = None) -> "ProviderResult":
        return cls(ResultKind.ERROR, text, detail=detail)


@dataclass(frozen=True)
class TopicStatus:
    """Outcome of processing one topic in one run.

    Attributes:
        topic: The topic name
        retrieval_success: True only for successful topics
        summarization_success: True only for successful topics
        news_count: 1 for successful topics, 0 otherwise
        error: Short description for failed or empty topics
        outcome: Classification of the provider result
    """
    topic: str
    retrieval_success: bool = False
    summarization_success: bool = False
    news_count: int = 0
    error: str | None = None
    outcome: ResultKind = ResultKind.ERROR

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["outcome"] = self.outcome.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TopicStatus":
        outcome = data.get("outcome")
        if outcome is None:
            # Entries written before outcomes were recorded.
            if data.get("retrieval_success") and data.get("summarization_success"):
                outcome = ResultKind.SUCCESS.value
            elif str(data.get("error") or "").startswith("No news found"):
                outcome = ResultKind.EMPTY.value
            else:
                outcome = ResultKind.ERROR.value
        return cls(
            topic=data["topic"],
            retrieval_success=bool(data.get("retrieval_success", False)),
            summarization_success=bool(data.get("summarization_success", False)),
            news_count=int(data.get("news_count", 0)),
            error=data.get("error"),
            outcome=ResultKind(outcome),
        )


@dataclass(frozen=True)
class TopicContent:
    """Rendered section body for one topic together with its status."""
    topic: str
    content: str
    status: TopicStatus

    def to_dict(self) -> dict[str, Any]:
        return {"topic": self.topic, "content": self.content, "status": self.status.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TopicContent":
        return cls(
            topic=data["topic"],
            content=data.get("content", ""),
            status=TopicStatus.from_dict(data["status"]),
        )


@dataclass(frozen=True)
class RunAnalysis:
    all_topics_failed: bool
    at_least_one_successful_topic: bool
    at_least_one_news_item: bool
    error_summary: str

    @property
    def degraded(self) -> bool:
        return self.all_topics_failed or not self.at_least_one_successful_topic


class RunOutcome(str, Enum):
    PUBLISHED = "published"
    PUBLISHED_WITH_ERRORS = "published_with_errors"
    SKIPPED_ALREADY_EXISTS = "skipped_already_exists"
    SKIPPED_IN_PROGRESS = "skipped_in_progress"
    ABORTED_CONFIG = "aborted_config"
    ABORTED_NO_FOLDER = "aborted_no_folder"
    FALLBACK_WRITTEN = "fallback_written"
    FAILED = "failed"


@dataclass
class RunResult:
    """Terminal state of a generation run.

    Attributes:
        outcome: The terminal state reached
        path: Document path (existing, created or fallback), if any
        analysis: Topic outcome analysis, when topics were processed
        provider_calls: Number of provider invocations made in this run
        message: Human-readable summary
    """
    outcome: RunOutcome
    path: str | None = None
    analysis: RunAnalysis | None = None
    provider_calls: int = 0
    message: str = ""

    @property
    def document_written(self) -> bool:
        return self.outcome in (
            RunOutcome.PUBLISHED,
            RunOutcome.PUBLISHED_WITH_ERRORS,
            RunOutcome.FALLBACK_WRITTEN,
        )


@dataclass
class ReorganizeReport:
    moved: int = 0
    skipped: int = 0
    errors: int = 0
    details: list[str] = field(default_factory=list)

    def summary(self) -> str:
        parts = []
        if self.moved:
            parts.append(f"{self.moved} moved")
        if self.skipped:
            parts.append(f"{self.skipped} skipped")
        if self.errors:
            parts.append(f"{self.errors} errors")
        return ", ".join(parts) or "nothing to do"
