"""
LLM module - Provides LLM provider abstractions.
"""

from typing import Optional

from .provider import (
    ILLMProvider,
    BaseLLMProvider,
    ModelInfo,
    ModelProvider,
    Usage,
    AssistantMessage
)
from .anthropic_provider import AnthropicProvider, DEFAULT_ANTHROPIC_MODEL
from .ollama_provider import OllamaProvider, DEFAULT_OLLAMA_MODEL
from .gemini_provider import GeminiProvider, DEFAULT_GEMINI_MODEL

DEFAULT_PROVIDER = ModelProvider.GEMINI.value


def create_llm_provider(
    provider_type: str = DEFAULT_PROVIDER,
    model_id: Optional[str] = None,
    api_key: Optional[str] = None,
    **kwargs
) -> ILLMProvider:
    """
    Factory function to create an LLM provider.

    Args:
        provider_type: Type of provider ("anthropic", "ollama", "gemini")
        model_id: Model identifier
        api_key: API key (if required)
        **kwargs: Additional provider-specific arguments (base_url, timeout)

    Returns:
        ILLMProvider instance

    Raises:
        ValueError: If provider_type is unknown
    """
    provider_type = provider_type.lower()

    if provider_type == "anthropic":
        return AnthropicProvider(model_id=model_id or DEFAULT_ANTHROPIC_MODEL, api_key=api_key)

    elif provider_type == "ollama":
        return OllamaProvider(
            model_id=model_id or DEFAULT_OLLAMA_MODEL,
            base_url=kwargs.get("base_url"),
            api_key=api_key,
            timeout=kwargs.get("timeout")
        )

    elif provider_type == "gemini":
        return GeminiProvider(model_id=model_id or DEFAULT_GEMINI_MODEL, api_key=api_key)

    else:
        raise ValueError(
            f"Unknown provider type: {provider_type}. "
            f"Supported: anthropic, ollama, gemini"
        )


__all__ = [
    # Base classes
    "ILLMProvider",
    "BaseLLMProvider",
    "ModelInfo",
    "ModelProvider",
    "Usage",
    "AssistantMessage",
    # Providers
    "AnthropicProvider",
    "OllamaProvider",
    "GeminiProvider",
    # Factory
    "DEFAULT_PROVIDER",
    "create_llm_provider",
]
