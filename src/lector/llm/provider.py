"""
LLM Provider abstraction layer.

Every provider speaks the same Anthropic-style message format so the
review loop does not care which model is behind it:

- messages: [{"role": "user" | "assistant", "content": str | [block, ...]}]
- blocks:   {"type": "text", "text": ...}
            {"type": "tool_use", "id": ..., "name": ..., "input": {...}}
            {"type": "tool_result", "tool_use_id": ..., "content": ..., "is_error": bool}
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Dict, Any, Optional
from enum import Enum


class ModelProvider(Enum):
    """Supported LLM providers"""
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    OLLAMA = "ollama"


@dataclass
class ModelInfo:
    """Information about a specific model"""
    id: str
    name: str
    provider: ModelProvider
    context_window: int
    supports_tools: bool = True


@dataclass
class Usage:
    """Token usage information"""
    input_tokens: int
    output_tokens: int
    total_tokens: int


@dataclass
class AssistantMessage:
    """Response from the LLM"""
    content: List[Dict[str, Any]]  # Content blocks (text and tool_use)
    stop_reason: Optional[str] = None  # end_turn, tool_use, max_tokens, ...
    usage: Optional[Usage] = None

    @property
    def text(self) -> str:
        """Concatenated text blocks"""
        return "".join(
            block.get("text", "")
            for block in self.content
            if isinstance(block, dict) and block.get("type") == "text"
        )


class ILLMProvider(ABC):
    """
    Base interface for LLM providers.

    All providers must implement this interface to be usable by the agent.
    """

    @property
    @abstractmethod
    def model_info(self) -> ModelInfo:
        """Get information about the model"""
        pass

    @abstractmethod
    async def create_message(
        self,
        system_prompt: str,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
        temperature: float = 0.2,
        max_tokens: int = 4096
    ) -> AssistantMessage:
        """
        Create a message (request-response).

        Args:
            system_prompt: System prompt for the model
            messages: Conversation history
            tools: Available tools (in Anthropic format)
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate

        Returns:
            AssistantMessage with model response
        """
        pass

    async def close(self) -> None:
        """Release network resources held by the provider"""
        pass

    def supports_tools(self) -> bool:
        """Whether this provider supports tool calling"""
        return self.model_info.supports_tools


class BaseLLMProvider(ILLMProvider):
    """
    Shared model metadata and API key lookup.

    Subclasses set PROVIDER, CONTEXT_WINDOW and KNOWN_MODELS (model id to
    display name) and implement create_message().
    """

    PROVIDER: ModelProvider
    CONTEXT_WINDOW = 8192
    KNOWN_MODELS: Dict[str, str] = {}

    def __init__(self, model_id: str, api_key: Optional[str] = None):
        if not model_id:
            raise ValueError("model_id is required")
        self.model_id = model_id
        self.api_key = api_key

    @property
    def model_info(self) -> ModelInfo:
        return ModelInfo(
            id=self.model_id,
            name=self.KNOWN_MODELS.get(self.model_id, self.model_id),
            provider=self.PROVIDER,
            context_window=self.CONTEXT_WINDOW
        )

    @staticmethod
    def _require_api_key(api_key: Optional[str], label: str, *env_vars: str) -> str:
        """Return api_key, or the first env var that is set; raise ValueError if none is"""
        key = api_key or next((os.environ[var] for var in env_vars if os.environ.get(var)), None)
        if not key:
            raise ValueError(f"{label} API key required (set {env_vars[0]} env var)")
        return key
