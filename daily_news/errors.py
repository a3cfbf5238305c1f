"""Exception hierarchy for the daily news pipeline."""

from __future__ import annotations


class DailyNewsError(Exception):
    """Base class for all pipeline errors."""


class ConfigError(DailyNewsError):
    """Missing credentials, malformed language code or other invalid settings."""


class ProviderError(DailyNewsError):
    """A news provider (retriever, summarizer or LLM call) reported failure."""


class StorageError(DailyNewsError):
    """Document, folder or cache state could not be written."""


class TemplateLoadError(DailyNewsError):
    """An external template file is missing or unreadable."""
