"""
Generation orchestration for the daily news note.

One run produces at most one note per calendar day:
1. Validate provider configuration and language
2. Take the per-date run lock and skip if today's note already exists
3. Fetch each topic in order, reusing today's cached results
4. Analyze topic outcomes (degraded runs still publish)
5. Ensure the archive and monthly folders exist
6. Render the template and create the note
7. Prune and persist the cache

Any unexpected fault while processing topics or writing the note is turned
into a fallback note at the same path.
"""

from __future__ import annotations

import logging
import re
import threading
from datetime import datetime

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from .cache import DailyTopicCache
from .config import AppConfig
from .content import (
    analyze_topic_results,
    build_processing_status,
    build_table_of_contents,
    build_topic_sections,
    format_metadata_as_yaml,
    generate_metadata,
)
from .errors import StorageError
from .i18n import get_translation, has_translations
from .logging_utils import log_event, truncate_text
from .providers.base import NewsProvider
from .providers.factory import create_provider, get_provider_key, get_provider_name, validate_provider_config
from .store import DocumentStore, normalize_path
from .template import TemplateData, load_template_file, render_template
from .types import (
    ProviderResult,
    ReorganizeReport,
    ResultKind,
    RunAnalysis,
    RunOutcome,
    RunResult,
    TopicContent,
    TopicStatus,
)


logger = logging.getLogger("daily_news.runner")

NOTE_PREFIX = "Daily News - "
NOTE_NAME_RE = re.compile(r"^Daily News - (\d{4}-\d{2}-\d{2})\.md$")

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def target_path(archive_folder: str, date: str) -> str:
    """Return "{archive}/{YYYY-MM}/Daily News - {YYYY-MM-DD}.md"."""
    return normalize_path(f"{archive_folder}/{date[:7]}/{NOTE_PREFIX}{date}.md")


def is_schedule_due(schedule_time: str, now: datetime) -> bool:
    """True when now falls in the scheduled HH:MM minute."""
    try:
        hour_text, minute_text = schedule_time.strip().split(":", 1)
        hour, minute = int(hour_text), int(minute_text)
    except (AttributeError, ValueError):
        return False
    return now.hour == hour and now.minute == minute


class RunLock:
    """In-process single-flight guard keyed by date."""

    def __init__(self):
        self._guard = threading.Lock()
        self._held: set[str] = set()

    def acquire(self, key: str) -> bool:
        with self._guard:
            if key in self._held:
                return False
            self._held.add(key)
            return True

    def release(self, key: str) -> None:
        with self._guard:
            self._held.discard(key)

    def held(self, key: str) -> bool:
        with self._guard:
            return key in self._held


_RUN_LOCK = RunLock()


def build_fallback_note(date: str, message: str) -> str:
    return (
        f"# Daily News - {date}\n\n"
        "**Error generating news**\n\n"
        "An unexpected error occurred:\n\n"
        f"```\n{message}\n```\n\n"
        "Please check the console for more details."
    )


def build_template_data(
    cfg: AppConfig,
    contents: list[TopicContent],
    started_at: datetime,
    now: datetime,
    provider_name: str,
) -> TemplateData:
    """Collect every placeholder value for one run."""
    language = cfg.news.language
    topics = [item.topic for item in contents]
    statuses = [item.status for item in contents]

    meta = generate_metadata(cfg, started_at, now, provider_name)
    sections = build_topic_sections(contents)
    has_problems = any(status.outcome is not ResultKind.SUCCESS for status in statuses)

    return TemplateData(
        metadata=format_metadata_as_yaml(meta) if cfg.metadata.enabled else "",
        timestamp=f"{get_translation('generatedAt', language)} {now:%H:%M:%S}",
        date=f"{now:%Y-%m-%d}",
        time=f"{now:%H:%M:%S}",
        table_of_contents=build_table_of_contents(topics, language) if topics else "",
        topics=sections,
        topic_contents=list(contents),
        processing_status=build_processing_status(statuses, language) if has_problems else "",
        language=language,
        year=f"{now:%Y}",
        month=f"{now:%m}",
        month_name=MONTH_NAMES[now.month - 1],
        month_name_short=MONTH_NAMES[now.month - 1][:3],
        day=f"{now:%d}",
        day_name=DAY_NAMES[now.weekday()],
        day_name_short=DAY_NAMES[now.weekday()][:3],
        hour=f"{now:%H}",
        minute=f"{now:%M}",
        second=f"{now:%S}",
        metadata_datetime=str(meta.get("datetime", "")),
        metadata_tags=", ".join(meta.get("tags", [])),
        metadata_language=str(meta.get("language", "")),
        metadata_provider=str(meta.get("source", "")),
        topic_count=str(len(topics)),
        topic_list=", ".join(topics),
        topic_sections=sections,
    )


def topic_content_from_result(topic: str, result: ProviderResult, provider_name: str) -> TopicContent:
    """Turn one provider result into the cached per-topic work product."""
    if result.kind is ResultKind.ERROR:
        status = TopicStatus(
            topic=topic,
            error=f'{provider_name} error for topic "{topic}"',
            outcome=ResultKind.ERROR,
        )
        content = f"**Error processing {topic} with {provider_name}.**\n\n{result.text}\n"
    elif result.kind is ResultKind.EMPTY:
        status = TopicStatus(
            topic=topic,
            error=f'No news found for topic "{topic}"',
            outcome=ResultKind.EMPTY,
        )
        content = f"{result.text}\n\n"
    else:
        status = TopicStatus(
            topic=topic,
            retrieval_success=True,
            summarization_success=True,
            news_count=1,
            outcome=ResultKind.SUCCESS,
        )
        content = f"{result.text}\n"
    return TopicContent(topic=topic, content=content, status=status)


class DailyNewsGenerator:
    """Runs daily note generation against injected collaborators.

    Attributes:
        cfg: Application configuration
        store: Where notes are written
        cache: Per-topic daily cache (pruned and persisted by each run)
        provider: Provider to use; built from cfg on first use when None
        lock: Per-date run lock shared by generators in this process
    """

    def __init__(
        self,
        cfg: AppConfig,
        store: DocumentStore,
        cache: DailyTopicCache,
        provider: NewsProvider | None = None,
        lock: RunLock | None = None,
        show_progress: bool = False,
        console: Console | None = None,
    ):
        self.cfg = cfg
        self.store = store
        self.cache = cache
        self.provider = provider
        self.lock = lock or _RUN_LOCK
        self.show_progress = show_progress
        self.console = console or Console()

    def _configuration_problem(self) -> str | None:
        language = self.cfg.news.language or ""
        if len(language) != 2:
            return f"Invalid language code: {language!r} (expected two letters)"
        if self.provider is not None:
            if not self.provider.validate_configuration():
                return f"{self.provider.get_provider_name()} is not configured"
        elif not validate_provider_config(self.cfg):
            return f"{get_provider_name(self.cfg)} is missing required credentials or feeds"
        if not has_translations(language):
            log_event(
                logger,
                f"No translations for language {language!r}; using English labels",
                level=logging.WARNING,
                event="language_untranslated",
                language=language,
            )
        return None

    def generate(self, now: datetime | None = None) -> RunResult:
        """Run generation for the calendar day of now (local time)."""
        started_at = datetime.now() if now is None else now
        date = f"{started_at:%Y-%m-%d}"

        problem = self._configuration_problem()
        if problem:
            log_event(logger, f"Generation aborted: {problem}", level=logging.ERROR, event="run_aborted_config")
            return RunResult(RunOutcome.ABORTED_CONFIG, message=problem)

        if not self.lock.acquire(date):
            log_event(logger, f"Generation for {date} already in progress", event="run_in_progress", date=date)
            return RunResult(RunOutcome.SKIPPED_IN_PROGRESS, message=f"Generation for {date} already in progress")
        try:
            return self._generate_locked(date, started_at, now)
        finally:
            self.lock.release(date)

    def _generate_locked(self, date: str, started_at: datetime, now: datetime | None) -> RunResult:
        archive = self.cfg.news.archive_folder
        path = target_path(archive, date)
        if self.store.exists(path):
            log_event(logger, f"Daily news already exists: {path}", event="run_skipped_exists", path=path)
            return RunResult(RunOutcome.SKIPPED_ALREADY_EXISTS, path=path, message="Note already exists")

        self.cache.prune_not_matching(date)
        calls = 0
        try:
            provider = self.provider or create_provider(self.cfg, query_cache=self.cache.query_cache)
            provider_key = get_provider_key(self.cfg)
            provider_name = provider.get_provider_name()

            contents, calls = self._process_topics(provider, provider_key, provider_name, date)
            analysis = analyze_topic_results([item.status for item in contents])
            self._warn_if_degraded(analysis)

            try:
                self.store.create_folder(archive)
                self.store.create_folder(f"{archive}/{date[:7]}")
            except StorageError as exc:
                log_event(logger, f"Failed to create folders: {exc}", level=logging.ERROR, event="run_aborted_folder")
                return RunResult(
                    RunOutcome.ABORTED_NO_FOLDER,
                    analysis=analysis,
                    provider_calls=calls,
                    message=str(exc),
                )

            finished_at = datetime.now() if now is None else now
            data = build_template_data(self.cfg, contents, started_at, finished_at, provider_name)
            self.store.create(path, self._render(data))
        except Exception as exc:  # noqa: BLE001
            return self._write_fallback(path, date, exc, calls)

        self.cache.prune_not_matching(date)
        self._persist_cache()

        has_errors = analysis.degraded or any(item.status.outcome is ResultKind.ERROR for item in contents)
        outcome = RunOutcome.PUBLISHED_WITH_ERRORS if has_errors else RunOutcome.PUBLISHED
        log_event(
            logger,
            f"Daily news created: {path}",
            event="run_published",
            path=path,
            outcome=outcome.value,
            provider_calls=calls,
        )
        return RunResult(outcome, path=path, analysis=analysis, provider_calls=calls, message="Note created")

    def _process_topics(
        self,
        provider: NewsProvider,
        provider_key: str,
        provider_name: str,
        date: str,
    ) -> tuple[list[TopicContent], int]:
        topics = list(self.cfg.news.topics)
        contents: list[TopicContent] = []
        calls = 0

        progress = None
        task_id = None
        if self.show_progress:
            progress = Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                console=self.console,
                transient=True,
            )
            progress.start()
            task_id = progress.add_task("Generating news", total=len(topics))

        try:
            for topic in topics:
                cached = self.cache.get(date, provider_key, topic)
                if cached is not None:
                    log_event(logger, f"Using cached content for {topic}", event="topic_cache_hit", topic=topic)
                    contents.append(cached)
                else:
                    calls += 1
                    item = self._fetch_topic(provider, provider_name, topic)
                    self.cache.put(date, provider_key, topic, item)
                    contents.append(item)
                if progress is not None and task_id is not None:
                    progress.advance(task_id)
        finally:
            if progress is not None:
                progress.stop()
        return contents, calls

    def _fetch_topic(self, provider: NewsProvider, provider_name: str, topic: str) -> TopicContent:
        log_event(logger, f"Fetching news for {topic}", event="topic_fetch_start", topic=topic)
        try:
            result = provider.fetch_result(topic)
        except Exception as exc:  # noqa: BLE001
            result = ProviderResult.error(f"Provider error: {exc}", detail=str(exc))
        item = topic_content_from_result(topic, result, provider_name)
        log_event(
            logger,
            f"Topic {topic}: {item.status.outcome.value}",
            level=logging.WARNING if item.status.outcome is ResultKind.ERROR else logging.INFO,
            event="topic_fetch_done",
            topic=topic,
            outcome=item.status.outcome.value,
            detail=truncate_text(result.detail or "", 500),
        )
        return item

    def _warn_if_degraded(self, analysis: RunAnalysis) -> None:
        if not analysis.degraded:
            return
        if analysis.at_least_one_news_item:
            message = "Some topics returned news but none were processed successfully; check the note for details."
        else:
            message = "No news could be generated for any topic; check your API keys and provider settings."
        log_event(
            logger,
            message,
            level=logging.WARNING,
            event="run_degraded",
            error_summary=analysis.error_summary,
        )

    def _render(self, data: TemplateData) -> str:
        template_cfg = self.cfg.template
        file_source = None
        if template_cfg.type.lower() == "file":
            file_source = load_template_file(self.store, template_cfg.file_path)
        return render_template(template_cfg.type, template_cfg.custom, data, file_source=file_source)

    def _write_fallback(self, path: str, date: str, exc: Exception, calls: int) -> RunResult:
        message = str(exc) or type(exc).__name__
        log_event(logger, f"Error generating news: {message}", level=logging.ERROR, event="run_failed")
        try:
            self.store.create(path, build_fallback_note(date, message))
        except Exception as fallback_exc:  # noqa: BLE001
            log_event(
                logger,
                f"Failed to write fallback note: {fallback_exc}",
                level=logging.ERROR,
                event="fallback_failed",
                path=path,
            )
            return RunResult(
                RunOutcome.FAILED,
                provider_calls=calls,
                message=f"{message}; fallback note failed: {fallback_exc}",
            )
        return RunResult(RunOutcome.FALLBACK_WRITTEN, path=path, provider_calls=calls, message=message)

    def _persist_cache(self) -> None:
        try:
            self.cache.persist()
        except StorageError as exc:
            log_event(logger, f"Cache not saved: {exc}", level=logging.WARNING, event="cache_persist_failed")


def generate_daily_news(
    cfg: AppConfig,
    store: DocumentStore,
    cache: DailyTopicCache,
    provider: NewsProvider | None = None,
    now: datetime | None = None,
    lock: RunLock | None = None,
) -> RunResult:
    """Generate today's note. See DailyNewsGenerator."""
    return DailyNewsGenerator(cfg, store, cache, provider=provider, lock=lock).generate(now)


def reorganize_existing_notes(store: DocumentStore, archive_folder: str) -> ReorganizeReport:
    """Move flat "Daily News - YYYY-MM-DD.md" notes into monthly subfolders.

    Only files directly under archive_folder are considered; notes already in
    a monthly folder are never listed. Existing targets are skipped.
    """
    report = ReorganizeReport()
    archive = normalize_path(archive_folder)
    for path in store.list_files(archive):
        filename = path.rsplit("/", 1)[-1]
        match = NOTE_NAME_RE.match(filename)
        if not match:
            continue
        date = match.group(1)
        new_path = target_path(archive, date)
        if new_path == normalize_path(path) or store.exists(new_path):
            report.skipped += 1
            report.details.append(f"skipped {filename}")
            continue
        try:
            store.create_folder(new_path.rsplit("/", 1)[0])
            store.rename(path, new_path)
        except StorageError as exc:
            report.errors += 1
            report.details.append(f"error {filename}: {exc}")
            log_event(logger, f"Failed to move {path}: {exc}", level=logging.WARNING, event="reorganize_error", path=path)
            continue
        report.moved += 1
        report.details.append(f"moved {filename} -> {new_path}")
    log_event(
        logger,
        f"Reorganization complete: {report.summary()}",
        event="reorganize_done",
        moved=report.moved,
        skipped=report.skipped,
        errors=report.errors,
    )
    return report
