"""Tests for CLI commands that need no network."""

from pathlib import Path

from typer.testing import CliRunner

from daily_news.cache import DailyTopicCache
from daily_news.cli import app
from daily_news.types import TopicContent, TopicStatus

runner = CliRunner()


def _write_config(tmp_path: Path, extra: str = "") -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(
        f"news:\n  vault_dir: {tmp_path.as_posix()}\n"
        "logging:\n  console: false\n" + extra,
        encoding="utf-8",
    )
    return path


def test_validate_template_command(tmp_path: Path):
    good = tmp_path / "good.md"
    good.write_text("# {{date}}\n{{topics}}", encoding="utf-8")
    bad = tmp_path / "bad.md"
    bad.write_text("{{date}} {{weather}}", encoding="utf-8")

    assert runner.invoke(app, ["validate-template", str(good)]).exit_code == 0
    result = runner.invoke(app, ["validate-template", str(bad)])
    assert result.exit_code == 1
    assert "weather" in result.output


def test_placeholders_command_lists_tokens():
    result = runner.invoke(app, ["placeholders"])
    assert result.exit_code == 0
    assert "{{tableOfContents}}" in result.output


def test_run_without_credentials_exits_nonzero(tmp_path: Path):
    config = _write_config(tmp_path)
    result = runner.invoke(app, ["run", "--config", str(config), "--no-progress"])
    assert result.exit_code == 1
    assert "aborted_config" in result.output


def test_clear_cache_command(tmp_path: Path):
    config = _write_config(tmp_path)
    state = tmp_path / ".daily_news_cache.json"
    cache = DailyTopicCache(state)
    cache.put("2024-03-01", "sonar", "Tech", TopicContent("Tech", "x", TopicStatus("Tech")))
    cache.persist()

    result = runner.invoke(app, ["clear-cache", "--config", str(config)])

    assert result.exit_code == 0
    assert "Cleared 1" in result.output
    assert len(DailyTopicCache.load(state)) == 0


def test_providers_command(tmp_path: Path):
    config = _write_config(tmp_path, "provider:\n  pipeline_mode: agentic\n  agentic_provider: sonar\n")
    result = runner.invoke(app, ["providers", "--config", str(config)])
    assert result.exit_code == 0
    assert "Sonar by Perplexity" in result.output
    assert "missing credentials" in result.output
