"""
Command-line interface for the daily news generator.

Uses Typer with options overriding the YAML configuration. Loads .env files
so API keys can be kept out of the config.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
import time

import typer
from rich.console import Console
from rich.table import Table

from .cache import DailyTopicCache, InMemoryCache
from .config import AppConfig, load_config
from .errors import StorageError
from .logging_utils import setup_logging
from .providers.factory import available_providers, get_provider_key, get_provider_name, validate_provider_config
from .runner import DailyNewsGenerator, is_schedule_due, reorganize_existing_notes
from .store import FileSystemStore
from .template import TEMPLATE_EXAMPLE, TEMPLATE_KINDS, get_placeholder_info, validate_template
from .types import RunOutcome

try:
    from dotenv import load_dotenv
except Exception:  # noqa: BLE001
    load_dotenv = None

app = typer.Typer(add_completion=False)
console = Console()

_FAILURE_OUTCOMES = {RunOutcome.ABORTED_CONFIG, RunOutcome.ABORTED_NO_FOLDER, RunOutcome.FAILED}


def _load(
    config: Path | None,
    vault: Path | None = None,
    log_level: str | None = None,
    log_file: bool | None = None,
) -> AppConfig:
    if load_dotenv is not None:
        load_dotenv()
    cfg = load_config(str(config) if config else None)
    if vault is not None:
        cfg.news.vault_dir = str(vault)
    if log_level:
        cfg.logging.level = log_level
    if log_file is not None:
        cfg.logging.file = log_file
    log_dir = Path(cfg.logging.log_dir) if cfg.logging.log_dir else Path(cfg.news.vault_dir) / ".daily_news_logs"
    setup_logging(cfg.logging, log_dir)
    return cfg


def _state_path(cfg: AppConfig) -> Path:
    path = Path(cfg.cache.state_file)
    return path if path.is_absolute() else Path(cfg.news.vault_dir) / path


def _open_cache(cfg: AppConfig) -> DailyTopicCache:
    if not cfg.cache.enabled:
        return InMemoryCache()
    return DailyTopicCache.load(_state_path(cfg))


def _run_once(cfg: AppConfig, progress: bool) -> RunOutcome:
    generator = DailyNewsGenerator(
        cfg,
        FileSystemStore(Path(cfg.news.vault_dir)),
        _open_cache(cfg),
        show_progress=progress,
        console=console,
    )
    result = generator.generate()
    style = "red" if result.outcome in _FAILURE_OUTCOMES else "yellow" if result.outcome is not RunOutcome.PUBLISHED else "green"
    console.print(f"[{style}]{result.outcome.value}[/{style}] {result.path or ''} {result.message}".rstrip())
    if result.analysis is not None and result.analysis.error_summary:
        console.print(result.analysis.error_summary)
    return result.outcome


@app.command()
def run(
    config: Path | None = typer.Option(Path("config.yaml"), "--config", "-c", exists=True),
    vault: Path | None = typer.Option(None, "--vault", "-v", help="Vault directory notes are written to."),
    topics: list[str] | None = typer.Option(None, "--topic", "-t", help="Override configured topics."),
    language: str | None = typer.Option(None, "--language", help="Two-letter language code."),
    template: str | None = typer.Option(
        None, "--template", help=f"Template type: {', '.join(TEMPLATE_KINDS)}."
    ),
    progress: bool = typer.Option(True, "--progress/--no-progress"),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
    no_cache: bool = typer.Option(False, "--no-cache", help="Do not read or write the daily cache."),
):
    """Generate today's daily news note.

    Args:
        config: Path to YAML config file
        vault: Override the vault directory
        topics: Override the configured topics
        language: Override the note language
        template: Override the template type
        progress: Whether to show a progress bar
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Enable/disable file logging
        no_cache: Run without the persistent cache
    """
    cfg = _load(config, vault, log_level, log_file)

    if topics:
        cfg.news.topics = list(topics)
    if language:
        cfg.news.language = language
    if template:
        cfg.template.type = template
    if no_cache:
        cfg.cache.enabled = False

    outcome = _run_once(cfg, progress)
    if outcome in _FAILURE_OUTCOMES:
        raise typer.Exit(code=1)


@app.command()
def watch(
    config: Path | None = typer.Option(Path("config.yaml"), "--config", "-c", exists=True),
    vault: Path | None = typer.Option(None, "--vault", "-v"),
    at: str | None = typer.Option(None, "--at", help="Override schedule time (HH:MM)."),
    log_level: str | None = typer.Option(None, "--log-level"),
):
    """Poll the clock and generate the note at the scheduled minute."""
    cfg = _load(config, vault, log_level)
    if at:
        cfg.schedule.time = at
    console.print(f"Waiting for {cfg.schedule.time} each day (Ctrl+C to stop)")
    last_date = None
    try:
        while True:
            now = datetime.now()
            today = f"{now:%Y-%m-%d}"
            if today != last_date and is_schedule_due(cfg.schedule.time, now):
                _run_once(cfg, progress=False)
                last_date = today
            time.sleep(cfg.schedule.poll_seconds)
    except KeyboardInterrupt:
        console.print("Stopped")


@app.command()
def reorganize(
    config: Path | None = typer.Option(Path("config.yaml"), "--config", "-c", exists=True),
    vault: Path | None = typer.Option(None, "--vault", "-v"),
):
    """Move flat daily notes into monthly folders."""
    cfg = _load(config, vault)
    report = reorganize_existing_notes(FileSystemStore(Path(cfg.news.vault_dir)), cfg.news.archive_folder)
    for line in report.details:
        console.print(f"  {line}")
    console.print(f"Reorganization complete: {report.summary()}")
    if report.errors:
        raise typer.Exit(code=1)


@app.command("validate-template")
def validate_template_cmd(
    path: Path = typer.Argument(..., exists=True, readable=True, help="Template file to check."),
):
    """Statically check a template file."""
    result = validate_template(path.read_text(encoding="utf-8"))
    if result.valid:
        console.print("[green]Template is valid[/green]")
        return
    for error in result.errors:
        console.print(f"[red]- {error}[/red]")
    raise typer.Exit(code=1)


@app.command()
def placeholders(example: bool = typer.Option(False, "--example", help="Print an example template.")):
    """List template placeholders."""
    if example:
        console.print(TEMPLATE_EXAMPLE, markup=False)
        return
    for category, entries in get_placeholder_info():
        table = Table(title=category, show_header=False)
        for token, description in entries:
            table.add_row(token, description)
        console.print(table)


@app.command("clear-cache")
def clear_cache(
    config: Path | None = typer.Option(Path("config.yaml"), "--config", "-c", exists=True),
    vault: Path | None = typer.Option(None, "--vault", "-v"),
    queries: bool = typer.Option(False, "--queries", help="Also clear cached search queries."),
):
    """Drop cached topic results so failed topics are retried."""
    cfg = _load(config, vault)
    cache = DailyTopicCache.load(_state_path(cfg))
    removed = cache.clear()
    if queries:
        cache.query_cache.clear()
    try:
        cache.persist()
    except StorageError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)
    console.print(f"Cleared {removed} cached topic entries")


@app.command()
def providers(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
):
    """Show available providers and the configured selection."""
    for selector, ids in available_providers().items():
        console.print(f"{selector}: {', '.join(ids)}")
    if config is None:
        return
    cfg = _load(config)
    ready = validate_provider_config(cfg)
    console.print(
        f"Configured: {get_provider_name(cfg)} (key {get_provider_key(cfg)}) "
        + ("[green]ready[/green]" if ready else "[red]missing credentials[/red]")
    )


if __name__ == "__main__":
    app()
