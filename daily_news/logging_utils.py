"""
Logging setup for daily runs.

Console output goes through rich; the optional run log in the vault is one
JSON object per line so a day's topics can be traced after the fact.
Structured fields are passed as keyword arguments to log_event().
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rich.logging import RichHandler

from .config import LoggingConfig


LOGGER_NAME = "daily_news"
PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(topic)s] %(message)s"

# Attributes every LogRecord carries; anything else came in through extra=.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}

# HTTP client libraries log every request at INFO.
_NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(cfg: LoggingConfig, log_dir: Path | None) -> logging.Logger:
    """Configure the daily_news logger from cfg.

    Args:
        cfg: Logging section of the app config
        log_dir: Directory for the run log; file logging is skipped when None

    Returns:
        The configured package logger
    """
    level = logging.getLevelName(cfg.level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handlers: list[logging.Handler] = []
    if cfg.console:
        console = RichHandler(rich_tracebacks=True, show_time=False, markup=False)
        console.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(console)
    if cfg.file and log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        run_log = logging.FileHandler(log_dir / cfg.filename, encoding="utf-8")
        run_log.setFormatter(JsonlFormatter() if cfg.format == "jsonl" else _PlainFormatter(PLAIN_FORMAT))
        handlers.append(run_log)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        handler.setLevel(level)
        logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    return logger


def log_event(logger: logging.Logger | None, message: str, level: int = logging.INFO, **fields: Any) -> None:
    if logger is None:
        return
    logger.log(level, message, extra=fields)


def truncate_text(text: str, max_chars: int = 2000) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "...(truncated)"


def event_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Fields passed to log_event() for this record."""
    return {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRS}


class JsonlFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **event_fields(record),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class _PlainFormatter(logging.Formatter):
    """Plain run log line; records without a topic show "-"."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "topic"):
            record.topic = "-"
        return super().format(record)
