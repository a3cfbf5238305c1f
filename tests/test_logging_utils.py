import json
import logging
from pathlib import Path

from daily_news.config import LoggingConfig
from daily_news.logging_utils import JsonlFormatter, event_fields, log_event, setup_logging, truncate_text


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("daily_news.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    record.__dict__.update(extra)
    return record


def test_event_fields_only_returns_extras():
    assert event_fields(_record(topic="Tech", count=3)) == {"topic": "Tech", "count": 3}


def test_jsonl_formatter_includes_fields():
    payload = json.loads(JsonlFormatter().format(_record(topic="Économie")))
    assert payload["message"] == "hello world"
    assert payload["level"] == "INFO"
    assert payload["topic"] == "Économie"


def test_setup_logging_writes_jsonl_run_log(tmp_path: Path):
    cfg = LoggingConfig(level="debug", console=False, file=True, filename="run.jsonl")
    logger = setup_logging(cfg, tmp_path)
    log_event(logger.getChild("runner"), "topic done", event="topic_complete", topic="Tech")
    for handler in logger.handlers:
        handler.flush()

    lines = (tmp_path / "run.jsonl").read_text(encoding="utf-8").splitlines()
    assert json.loads(lines[-1])["event"] == "topic_complete"
    assert logger.level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING


def test_setup_logging_plain_format_and_reconfigure(tmp_path: Path):
    cfg = LoggingConfig(console=False, file=True, format="plain", filename="run.log")
    logger = setup_logging(cfg, tmp_path)
    logger.info("no topic")
    log_event(logger, "with topic", topic="Tech")
    setup_logging(LoggingConfig(console=False), None)
    assert logger.handlers == []

    text = (tmp_path / "run.log").read_text(encoding="utf-8")
    assert "[-] no topic" in text
    assert "[Tech] with topic" in text


def test_unknown_level_falls_back_to_info():
    assert setup_logging(LoggingConfig(level="chatty", console=False), None).level == logging.INFO


def test_truncate_text():
    assert truncate_text("abc", 5) == "abc"
    assert truncate_text("abcdef", 3) == "abc...(truncated)"
