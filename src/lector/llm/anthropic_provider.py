"""
Anthropic (Claude) provider.

Claude already speaks the agent's message format, so requests go out
unchanged and only the SDK response objects need converting.
"""

import logging
from typing import List, Dict, Any, Optional

import anthropic

from .provider import BaseLLMProvider, ModelProvider, AssistantMessage, Usage
from ..utils.retry import retry_with_backoff

logger = logging.getLogger(__name__)

DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-20250514"


class AnthropicProvider(BaseLLMProvider):

    PROVIDER = ModelProvider.ANTHROPIC
    CONTEXT_WINDOW = 200000
    KNOWN_MODELS = {
        "claude-sonnet-4-20250514": "Claude Sonnet 4",
        "claude-3-5-haiku-20241022": "Claude 3.5 Haiku",
    }

    def __init__(self, model_id: str = DEFAULT_ANTHROPIC_MODEL, api_key: Optional[str] = None):
        super().__init__(model_id, api_key)
        self.api_key = self._require_api_key(api_key, "Anthropic", "ANTHROPIC_API_KEY")
        self.client = anthropic.AsyncAnthropic(api_key=self.api_key)

        logger.info(f"Anthropic provider ready: {self.model_id}")

    @retry_with_backoff(max_retries=3)
    async def create_message(
        self,
        system_prompt: str,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
        temperature: float = 0.2,
        max_tokens: int = 4096
    ) -> AssistantMessage:
        extra: Dict[str, Any] = {"tools": tools} if tools else {}
        logger.debug(f"Claude request: {len(messages)} messages, {len(tools or [])} tools")

        response = await self.client.messages.create(
            model=self.model_id,
            system=system_prompt,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            **extra
        )
        return self._parse_response(response)

    def _parse_response(self, response: Any) -> AssistantMessage:
        """SDK content blocks to plain dict blocks; unknown block types are dropped"""
        content: List[Dict[str, Any]] = []
        for block in response.content:
            if block.type == "text":
                content.append({"type": "text", "text": block.text})
            elif block.type == "tool_use":
                content.append({"type": "tool_use", "id": block.id, "name": block.name, "input": dict(block.input or {})})

        usage = None
        if getattr(response, "usage", None) is not None:
            spent_in, spent_out = response.usage.input_tokens, response.usage.output_tokens
            usage = Usage(input_tokens=spent_in, output_tokens=spent_out, total_tokens=spent_in + spent_out)

        return AssistantMessage(content=content, stop_reason=response.stop_reason, usage=usage)

    async def close(self) -> None:
        await self.client.close()
