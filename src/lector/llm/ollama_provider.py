"""
Ollama LLM Provider implementation for local models.
"""

import os
import json
import logging
from typing import List, Dict, Any, Optional

import httpx

from .provider import (
    BaseLLMProvider,
    ModelInfo,
    ModelProvider,
    AssistantMessage,
    Usage
)
from ..utils.retry import retry_with_backoff

logger = logging.getLogger(__name__)

DEFAULT_OLLAMA_MODEL = "qwen2.5-coder:7b"
DEFAULT_OLLAMA_URL = "http://localhost:11434"


class OllamaProvider(BaseLLMProvider):
    """
    Provider for Ollama local models.

    Uses the /api/chat endpoint with OpenAI-style tool definitions.
    Tool calling support varies by model.
    """

    PROVIDER = ModelProvider.OLLAMA
    TOOL_CAPABLE_MODELS = ("qwen2.5", "qwen3", "llama3.1", "llama3.2", "mistral")

    def __init__(
        self,
        model_id: str = DEFAULT_OLLAMA_MODEL,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        """
        Args:
            model_id: Ollama model name, e.g. "llama3.1:8b"
            base_url: Server URL (default: OLLAMA_BASE_URL or localhost:11434)
            api_key: Unused by a local server
            timeout: Read timeout in seconds (default: OLLAMA_TIMEOUT or 600).
                     0 disables the read timeout.
        """
        super().__init__(model_id, api_key)
        self.base_url = base_url or os.getenv("OLLAMA_BASE_URL", DEFAULT_OLLAMA_URL)

        if timeout is None:
            raw_timeout = os.getenv("OLLAMA_TIMEOUT", "600")
            try:
                timeout = float(raw_timeout)
            except ValueError:
                logger.warning(f"Ignoring invalid OLLAMA_TIMEOUT={raw_timeout!r}, using 600s")
                timeout = 600.0

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(connect=10.0, read=timeout or None, write=30.0, pool=10.0)
        )

        logger.info(f"Ollama provider ready: {self.model_id} at {self.base_url}")

    @property
    def model_info(self) -> ModelInfo:
        name = self.model_id.lower()
        info = super().model_info
        info.context_window = 32768 if "qwen" in name else self.CONTEXT_WINDOW
        info.supports_tools = any(family in name for family in self.TOOL_CAPABLE_MODELS)
        return info

    @retry_with_backoff(max_retries=3)
    async def create_message(
        self,
        system_prompt: str,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
        temperature: float = 0.2,
        max_tokens: int = 4096
    ) -> AssistantMessage:
        request_data: Dict[str, Any] = {
            "model": self.model_id,
            "messages": self._format_messages(system_prompt, messages),
            "stream": False,
            "options": {
                "temperature": temperature,
                "num_predict": max_tokens
            }
        }

        if tools:
            if not self.model_info.supports_tools:
                logger.warning(f"Model {self.model_id} may not support tool calling")
            request_data["tools"] = self._convert_tools(tools)

        logger.debug(f"Sending request to Ollama: {len(request_data['messages'])} messages")

        response = await self.client.post("/api/chat", json=request_data)
        response.raise_for_status()

        return self._parse_response(response.json())

    def _format_messages(
        self,
        system_prompt: str,
        messages: List[Dict[str, Any]]
    ) -> List[Dict[str, Any]]:
        """
        Convert Anthropic-style messages to Ollama chat messages.

        tool_use blocks become assistant tool_calls and each tool_result
        becomes its own "tool" role message.
        """
        formatted = []
        if system_prompt:
            formatted.append({"role": "system", "content": system_prompt})

        for msg in messages:
            content = msg["content"]
            if isinstance(content, str):
                formatted.append({"role": msg["role"], "content": content})
                continue

            text_parts = []
            tool_calls = []
            for block in content:
                block_type = block.get("type")
                if block_type == "text":
                    text_parts.append(block.get("text", ""))
                elif block_type == "tool_use":
                    tool_calls.append({
                        "function": {
                            "name": block["name"],
                            "arguments": block.get("input") or {}
                        }
                    })
                elif block_type == "tool_result":
                    formatted.append({"role": "tool", "content": str(block.get("content", ""))})

            if text_parts or tool_calls:
                entry: Dict[str, Any] = {"role": msg["role"], "content": "\n".join(text_parts)}
                if tool_calls:
                    entry["tool_calls"] = tool_calls
                formatted.append(entry)

        return formatted

    def _convert_tools(self, tools: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Convert Anthropic tool format to the OpenAI-style format Ollama expects"""
        return [
            {
                "type": "function",
                "function": {
                    "name": tool["name"],
                    "description": tool["description"],
                    "parameters": tool["input_schema"]
                }
            }
            for tool in tools
        ]

    def _parse_response(self, response: Dict[str, Any]) -> AssistantMessage:
        """Parse an Ollama /api/chat response into an AssistantMessage"""
        message_data = response.get("message", {})
        text = message_data.get("content") or ""

        content_blocks: List[Dict[str, Any]] = []
        if text:
            content_blocks.append({"type": "text", "text": text})

        for index, tool_call in enumerate(message_data.get("tool_calls") or []):
            function = tool_call.get("function", {})
            arguments = function.get("arguments", {})
            if isinstance(arguments, str):
                try:
                    arguments = json.loads(arguments)
                except json.JSONDecodeError as e:
                    logger.error(f"Failed to parse tool arguments JSON: {arguments}, error: {e}")
                    arguments = {}

            content_blocks.append({
                "type": "tool_use",
                "id": tool_call.get("id") or f"tool_{index}",
                "name": function.get("name", ""),
                "input": arguments
            })

        if not content_blocks:
            logger.error("Ollama returned empty content with no tool calls")

        usage = None
        if "prompt_eval_count" in response or "eval_count" in response:
            input_tokens = response.get("prompt_eval_count", 0)
            output_tokens = response.get("eval_count", 0)
            usage = Usage(
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                total_tokens=input_tokens + output_tokens
            )

        stop_reason = "tool_use" if message_data.get("tool_calls") else response.get("done_reason")

        return AssistantMessage(content=content_blocks, stop_reason=stop_reason, usage=usage)

    async def close(self) -> None:
        """Close the HTTP client"""
        await self.client.aclose()
