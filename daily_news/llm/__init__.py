"""LLM vendor clients and prompt builders."""

from .clients import (
    AnthropicClient,
    GeminiClient,
    GrokClient,
    LLMClient,
    OpenAIClient,
    OpenRouterClient,
    PerplexityClient,
    available_vendors,
    build_llm_client,
)

__all__ = [
    "LLMClient",
    "GeminiClient",
    "OpenAIClient",
    "GrokClient",
    "OpenRouterClient",
    "PerplexityClient",
    "AnthropicClient",
    "available_vendors",
    "build_llm_client",
]
