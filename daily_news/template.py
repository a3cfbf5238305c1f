"""
Note template engine.

Templates use {{placeholder}} tokens. Rendering rules:
- a known placeholder is replaced by its TemplateData value ("" when unset)
- an unknown token, any other {{ expression }} and {# comments #} are left
  verbatim, so partial templates can be built up
- {% for item in topicContents %}...{% endfor %} and {% if name %}...{% endif %}
  are available for per-topic layouts
- a template Jinja cannot parse or run falls back to plain token replacement

Rendering never raises.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
import logging
import re
from typing import Any, Mapping

from jinja2 import StrictUndefined, Undefined, nodes
from jinja2.exceptions import TemplateSyntaxError
from jinja2.meta import find_undeclared_variables
from jinja2.sandbox import SandboxedEnvironment

from .errors import StorageError, TemplateLoadError
from .logging_utils import log_event
from .store import DocumentStore, normalize_path
from .types import TopicContent


logger = logging.getLogger("daily_news.template")


TEMPLATE_KINDS = ("default", "minimal", "detailed", "custom", "file")

PLACEHOLDER_CATEGORIES: list[tuple[str, list[tuple[str, str]]]] = [
    (
        "Basic",
        [
            ("metadata", "YAML front matter (when metadata is enabled)"),
            ("timestamp", "Localized \"Generated at\" line"),
            ("date", "Current date (YYYY-MM-DD)"),
            ("time", "Current time (HH:MM:SS)"),
            ("tableOfContents", "Table of contents for all topics"),
            ("topics", "All topic sections combined"),
            ("topicSections", "All topic sections combined (alias of topics)"),
            ("processingStatus", "Summary of failed or empty topics"),
            ("language", "Language code"),
        ],
    ),
    (
        "Date & time",
        [
            ("year", "YYYY"),
            ("month", "MM"),
            ("monthName", "January, February, ..."),
            ("monthNameShort", "Jan, Feb, ..."),
            ("day", "DD"),
            ("dayName", "Monday, Tuesday, ..."),
            ("dayNameShort", "Mon, Tue, ..."),
            ("hour", "HH (24-hour)"),
            ("minute", "MM"),
            ("second", "SS"),
        ],
    ),
    (
        "Metadata fields",
        [
            ("metadataDatetime", "Date and time recorded in metadata"),
            ("metadataTags", "Comma-separated tags"),
            ("metadataLanguage", "Language recorded in metadata"),
            ("metadataProvider", "Provider name recorded in metadata"),
        ],
    ),
    (
        "Topics",
        [
            ("topicCount", "Number of configured topics"),
            ("topicList", "Comma-separated topic names"),
            ("topicContents", "Per-topic items for loops: item.topic, item.content, item.status"),
        ],
    ),
]

PLACEHOLDERS: frozenset[str] = frozenset(
    name for _, entries in PLACEHOLDER_CATEGORIES for name, _ in entries
)
LOOP_SOURCES = frozenset({"topicContents"})

DEFAULT_TEMPLATE = (
    "{{metadata}}# Daily News - {{date}}\n\n"
    "*{{timestamp}}*\n\n"
    "{{tableOfContents}}"
    "{{topics}}\n\n"
    "{{processingStatus}}"
)

MINIMAL_TEMPLATE = (
    "{{metadata}}# Daily News - {{date}}\n"
    "{{topics}}\n"
)

DETAILED_TEMPLATE = (
    "{{metadata}}# Daily News - {{dayName}}, {{monthName}} {{day}}, {{year}}\n\n"
    "> {{timestamp}} | {{topicCount}} topics: {{topicList}} | {{language}}\n\n"
    "{{tableOfContents}}"
    "{% for item in topicContents %}\n---\n\n## {{ item.topic }}\n\n{{ item.content }}{% endfor %}\n\n"
    "{{processingStatus}}"
)

PRESETS: dict[str, str] = {
    "default": DEFAULT_TEMPLATE,
    "minimal": MINIMAL_TEMPLATE,
    "detailed": DETAILED_TEMPLATE,
}

TEMPLATE_EXAMPLE = (
    "# Daily News - {{date}}\n\n"
    "Generated {{dayName}} at {{hour}}:{{minute}} covering {{topicList}}.\n\n"
    "{{tableOfContents}}\n"
    "{% for item in topicContents %}\n## {{ item.topic }}\n\n{{ item.content }}\n{% endfor %}\n"
    "{% if processingStatus %}{{processingStatus}}{% endif %}\n"
)

_TOKEN_RE = re.compile(r"\{\{\s*([A-Za-z_][\w.]*)\s*\}\}")
_EXPRESSION_RE = re.compile(r"\{\{.*?\}\}|\{#.*?#\}", re.DOTALL)
_NAME_PATH_RE = re.compile(r"[A-Za-z_][\w.]*")
_FOR_TARGET_RE = re.compile(r"\{%-?\s*for\s+([A-Za-z_]\w*)(?:\s*,\s*([A-Za-z_]\w*))?\s+in\b")
_UNSUPPORTED_NODES = (nodes.Extends, nodes.Include, nodes.Import, nodes.FromImport, nodes.Macro, nodes.CallBlock)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


@dataclass
class TemplateData:
    """Values for every placeholder. Built once per run, read-only afterwards."""

    metadata: str = ""
    timestamp: str = ""
    date: str = ""
    time: str = ""
    table_of_contents: str = ""
    topics: str = ""
    topic_contents: list[TopicContent] = field(default_factory=list)
    processing_status: str = ""
    language: str = ""
    year: str = ""
    month: str = ""
    month_name: str = ""
    month_name_short: str = ""
    day: str = ""
    day_name: str = ""
    day_name_short: str = ""
    hour: str = ""
    minute: str = ""
    second: str = ""
    metadata_datetime: str = ""
    metadata_tags: str = ""
    metadata_language: str = ""
    metadata_provider: str = ""
    topic_count: str = ""
    topic_list: str = ""
    topic_sections: str = ""

    def to_context(self) -> dict[str, Any]:
        return {_camel(f.name): getattr(self, f.name) for f in fields(self)}


@dataclass
class TemplateValidation:
    valid: bool
    errors: list[str] = field(default_factory=list)


class _KeepUnknown(Undefined):
    """Renders an unknown name as its original token."""

    def __str__(self) -> str:
        return "{{" + (self._undefined_name or "") + "}}"


_env = SandboxedEnvironment(
    autoescape=False,
    keep_trailing_newline=True,
    undefined=_KeepUnknown,
)
_crlf_env = _env.overlay(newline_sequence="\r\n")
_strict_env = SandboxedEnvironment(autoescape=False, undefined=StrictUndefined)


def _build_context(data: TemplateData | Mapping[str, Any] | None) -> dict[str, Any]:
    context: dict[str, Any] = {name: "" for name in PLACEHOLDERS}
    context["topicContents"] = []
    if data is None:
        return context
    values = data.to_context() if isinstance(data, TemplateData) else dict(data)
    for key, value in values.items():
        if value is None:
            continue
        context[key] = value
    return context


def _loop_names(source: str) -> set[str]:
    names = {"loop"}
    for match in _FOR_TARGET_RE.finditer(source):
        names.update(name for name in match.groups() if name)
    return names


def _protect_unknown_tokens(source: str) -> str:
    """Wrap everything but known names in raw blocks so Jinja leaves it untouched.

    Only {{name}} for a placeholder or loop variable path is rendered. Other
    expressions and {# comments #} come out as written.
    """
    loop_names = _loop_names(source)

    def _replace(match: re.Match[str]) -> str:
        token = match.group(0)
        if token.startswith("{{"):
            inner = token[2:-2].strip().strip("-").strip()
            if _NAME_PATH_RE.fullmatch(inner):
                root = inner.split(".", 1)[0]
                if root in PLACEHOLDERS or root in loop_names:
                    return token
        return "{% raw %}" + token + "{% endraw %}"

    return _EXPRESSION_RE.sub(_replace, source)


def substitute_tokens(source: str, context: Mapping[str, Any]) -> str:
    """Plain text replacement of known {{placeholder}} tokens."""

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in PLACEHOLDERS or name == "topicContents":
            return match.group(0)
        value = context.get(name)
        return "" if value is None else str(value)

    return _TOKEN_RE.sub(_replace, source)


def render_source(source: str, data: TemplateData | Mapping[str, Any] | None) -> str:
    """Render a template body against data."""
    context = _build_context(data)
    try:
        env = _crlf_env if "\r\n" in source else _env
        template = env.from_string(_protect_unknown_tokens(source))
        return template.render(**context)
    except Exception:  # noqa: BLE001
        return substitute_tokens(source, context)


def render_template(
    kind: str,
    custom_source: str,
    data: TemplateData | Mapping[str, Any] | None,
    file_source: str | None = None,
) -> str:
    """Render the note for a template kind.

    Args:
        kind: "default", "minimal", "detailed", "custom" or "file"
        custom_source: Template body used for "custom"
        data: Placeholder values
        file_source: Template body loaded from a file, used for "file"

    Returns:
        Rendered note text. Unknown kinds, an empty custom template and a
        missing file template all render the default layout.
    """
    kind = (kind or "default").lower()
    if kind == "custom" and custom_source and custom_source.strip():
        return render_source(custom_source, data)
    if kind == "file" and file_source:
        return render_source(file_source, data)
    preset = PRESETS.get(kind, DEFAULT_TEMPLATE)
    return render_source(preset, data).rstrip() + "\n"


def validate_template(source: str) -> TemplateValidation:
    """Statically check a template without rendering it.

    Reports syntax errors (unbalanced or unknown block tags), unsupported
    constructs, loops over anything but topicContents, and unknown placeholders.
    """
    errors: list[str] = []
    if not source or not source.strip():
        return TemplateValidation(False, ["Template is empty"])

    try:
        ast = _strict_env.parse(source)
    except TemplateSyntaxError as exc:
        errors.append(f"Line {exc.lineno}: {exc.message}")
        loop_names = _loop_names(source)
        for name in sorted({m.group(1).split(".", 1)[0] for m in _TOKEN_RE.finditer(source)}):
            if name not in PLACEHOLDERS and name not in loop_names:
                errors.append(f"Unknown placeholder: {{{{{name}}}}}")
        return TemplateValidation(False, errors)

    for node in ast.find_all(_UNSUPPORTED_NODES):
        errors.append(f"Line {node.lineno}: unsupported construct '{type(node).__name__.lower()}'")
    for loop in ast.find_all(nodes.For):
        if not (isinstance(loop.iter, nodes.Name) and loop.iter.name in LOOP_SOURCES):
            errors.append(f"Line {loop.lineno}: loops are only supported over topicContents")
    for name in sorted(find_undeclared_variables(ast)):
        if name not in PLACEHOLDERS:
            errors.append(f"Unknown placeholder: {{{{{name}}}}}")

    return TemplateValidation(not errors, errors)


def _read_template(store: DocumentStore, path: str) -> str:
    if not path or not path.strip():
        raise TemplateLoadError("No template file path configured")
    candidates = [normalize_path(path)]
    if not candidates[0].endswith(".md"):
        candidates.append(candidates[0] + ".md")
    for candidate in candidates:
        if not store.exists(candidate):
            continue
        try:
            text = store.read(candidate)
        except StorageError as exc:
            raise TemplateLoadError(str(exc)) from exc
        if not text.strip():
            raise TemplateLoadError(f"Template file is empty: {candidate}")
        return text
    raise TemplateLoadError(f"Template file not found: {path}")


def load_template_file(store: DocumentStore, path: str) -> str | None:
    """Read a template note from the store, or None if it cannot be used."""
    try:
        return _read_template(store, path)
    except TemplateLoadError as exc:
        log_event(
            logger,
            f"Template file unavailable, using default template: {exc}",
            level=logging.WARNING,
            event="template_load_failed",
            path=path,
        )
        return None


def get_placeholder_info() -> list[tuple[str, list[tuple[str, str]]]]:
    return [
        (category, [("{{" + name + "}}", desc) for name, desc in entries])
        for category, entries in PLACEHOLDER_CATEGORIES
    ]
