"""
Daily News - AI-powered daily news briefing generator.

This package fetches and summarizes news for a list of topics through an
agentic search provider or a retriever + summarizer pipeline, caches each
topic's result for the day, and writes one Markdown note per day from a
template.

Main entry point is the CLI via `daily-news run` command.

Example:
    $ daily-news run -c config.yaml --vault ~/Notes
"""

__all__ = ["__version__", "generate_daily_news", "DailyNewsGenerator", "render_template", "validate_template"]
__version__ = "0.1.0"

from .runner import DailyNewsGenerator, generate_daily_news
from .template import render_template, validate_template
