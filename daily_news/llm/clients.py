"""
Thin REST clients for the LLM vendors used by summarizers and agentic providers.

Each client exposes two calls:
- complete(): plain text generation from a prompt
- search_and_summarize(): generation grounded by the vendor's own web search

All clients talk to the vendor REST APIs through httpx; SDKs are not used.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from typing import Any

import httpx

from ..config import AppConfig, get_api_key
from ..errors import ConfigError, ProviderError


logger = logging.getLogger("daily_news.llm")


class LLMClient(ABC):
    """Base class for vendor clients."""

    vendor: str = ""

    def __init__(
        self,
        api_key: str | None,
        model: str,
        base_url: str,
        timeout: float = 60.0,
        trust_env: bool = True,
        transport: httpx.BaseTransport | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.trust_env = trust_env
        self.transport = transport

    @abstractmethod
    def complete(self, prompt: str, system: str | None = None) -> str:
        """Return generated text for prompt."""
        raise NotImplementedError

    def search_and_summarize(self, prompt: str, system: str | None = None) -> str:
        """Return text generated with live web search; defaults to complete()."""
        return self.complete(prompt, system)

    def _require_key(self) -> str:
        if not self.api_key:
            raise ConfigError(f"Missing API key for {self.vendor}")
        return self.api_key

    def _post(
        self,
        path: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        logger.debug("POST %s (%s)", url, self.model)
        with httpx.Client(
            timeout=self.timeout, trust_env=self.trust_env, transport=self.transport
        ) as client:
            resp = client.post(url, params=params, headers=headers, json=payload)
            resp.raise_for_status()
            return resp.json()


class GeminiClient(LLMClient):
    vendor = "gemini"

    def complete(self, prompt: str, system: str | None = None) -> str:
        return self._generate(prompt, system, tools=None)

    def search_and_summarize(self, prompt: str, system: str | None = None) -> str:
        return self._generate(prompt, system, tools=[{"google_search": {}}])

    def _generate(self, prompt: str, system: str | None, tools: list[dict[str, Any]] | None) -> str:
        payload: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": 0.3},
        }
        if system:
            payload["systemInstruction"] = {"parts": [{"text": system}]}
        if tools:
            payload["tools"] = tools
        data = self._post(
            f"/v1beta/models/{self.model}:generateContent",
            payload,
            params={"key": self._require_key()},
        )
        return _require_text(self.vendor, _extract_gemini_text(data))


class OpenAICompatibleClient(LLMClient):
    """Chat Completions client for OpenAI-compatible APIs (xAI, OpenRouter, Perplexity)."""

    vendor = "openai_compatible"

    def complete(self, prompt: str, system: str | None = None) -> str:
        return self._chat(prompt, system)

    def _chat(self, prompt: str, system: str | None, **extra: Any) -> str:
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        payload: dict[str, Any] = {"model": self.model, "messages": messages, "temperature": 0.3}
        payload.update(extra)
        data = self._post(
            "/chat/completions",
            payload,
            headers={"Authorization": f"Bearer {self._require_key()}"},
        )
        return _require_text(self.vendor, _extract_chat_text(data))


class OpenAIClient(OpenAICompatibleClient):
    vendor = "gpt"

    def search_and_summarize(self, prompt: str, system: str | None = None) -> str:
        payload: dict[str, Any] = {
            "model": self.model,
            "input": prompt,
            "tools": [{"type": "web_search_preview"}],
        }
        if system:
            payload["instructions"] = system
        data = self._post(
            "/responses",
            payload,
            headers={"Authorization": f"Bearer {self._require_key()}"},
        )
        return _require_text(self.vendor, _extract_responses_text(data))


class GrokClient(OpenAICompatibleClient):
    vendor = "grok"

    def search_and_summarize(self, prompt: str, system: str | None = None) -> str:
        return self._chat(prompt, system, search_parameters={"mode": "on", "return_citations": True})


class OpenRouterClient(OpenAICompatibleClient):
    vendor = "openrouter"

    def search_and_summarize(self, prompt: str, system: str | None = None) -> str:
        return self._chat(prompt, system, plugins=[{"id": "web"}])


class PerplexityClient(OpenAICompatibleClient):
    """Sonar models search the web on every request."""

    vendor = "sonar"


class AnthropicClient(LLMClient):
    vendor = "claude"
    api_version = "2023-06-01"

    def complete(self, prompt: str, system: str | None = None) -> str:
        return self._messages(prompt, system, tools=None)

    def search_and_summarize(self, prompt: str, system: str | None = None) -> str:
        tools = [{"type": "web_search_20250305", "name": "web_search", "max_uses": 5}]
        return self._messages(prompt, system, tools=tools)

    def _messages(self, prompt: str, system: str | None, tools: list[dict[str, Any]] | None) -> str:
        payload: dict[str, Any] = {
            "model": self.model,
            "max_tokens": 4096,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            payload["system"] = system
        if tools:
            payload["tools"] = tools
        data = self._post(
            "/v1/messages",
            payload,
            headers={"x-api-key": self._require_key(), "anthropic-version": self.api_version},
        )
        return _require_text(self.vendor, _extract_anthropic_text(data))


_CLIENTS: dict[str, tuple[type[LLMClient], str, str]] = {
    # vendor: (client class, base url, model attribute on ProviderConfig)
    "gemini": (GeminiClient, "https://generativelanguage.googleapis.com", "gemini_model"),
    "gpt": (OpenAIClient, "https://api.openai.com/v1", "openai_model"),
    "grok": (GrokClient, "https://api.x.ai/v1", "grok_model"),
    "openrouter": (OpenRouterClient, "https://openrouter.ai/api/v1", "openrouter_model"),
    "sonar": (PerplexityClient, "https://api.perplexity.ai", "sonar_model"),
    "claude": (AnthropicClient, "https://api.anthropic.com", "claude_model"),
}


def available_vendors() -> list[str]:
    return sorted(_CLIENTS)


def build_llm_client(vendor: str, cfg: AppConfig) -> LLMClient:
    """Build the client for vendor; the API key may be missing and is checked per call."""
    try:
        client_cls, base_url, model_attr = _CLIENTS[vendor]
    except KeyError:
        raise ValueError(f"Unsupported LLM vendor: {vendor}. Supported: {', '.join(available_vendors())}")
    return client_cls(
        api_key=get_api_key(cfg.credentials, vendor),
        model=getattr(cfg.provider, model_attr),
        base_url=base_url,
        timeout=cfg.provider.timeout_seconds,
        trust_env=cfg.provider.trust_env,
    )


def _require_text(vendor: str, text: str) -> str:
    text = (text or "").strip()
    if not text:
        raise ProviderError(f"Invalid response format from {vendor} API")
    return text


def _extract_gemini_text(data: dict[str, Any]) -> str:
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return ""
    return "".join(part.get("text", "") for part in parts if isinstance(part, dict))


def _extract_chat_text(data: dict[str, Any]) -> str:
    try:
        return data["choices"][0]["message"]["content"] or ""
    except (KeyError, IndexError, TypeError):
        return ""


def _extract_responses_text(data: dict[str, Any]) -> str:
    if isinstance(data.get("output_text"), str):
        return data["output_text"]
    chunks = []
    for item in data.get("output") or []:
        if item.get("type") != "message":
            continue
        for block in item.get("content") or []:
            if block.get("type") == "output_text":
                chunks.append(block.get("text", ""))
    return "".join(chunks)


def _extract_anthropic_text(data: dict[str, Any]) -> str:
    blocks = data.get("content") or []
    return "".join(b.get("text", "") for b in blocks if isinstance(b, dict) and b.get("type") == "text")
