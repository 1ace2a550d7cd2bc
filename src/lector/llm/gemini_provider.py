"""
Google Gemini provider (google-genai SDK).
"""

import logging
from typing import List, Dict, Any, Optional

from google import genai
from google.genai import types

from .provider import BaseLLMProvider, ModelProvider, AssistantMessage, Usage
from ..utils.retry import retry_with_backoff

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"


class GeminiProvider(BaseLLMProvider):
    """
    Translates between the agent's Anthropic-style blocks and Gemini
    contents/parts. Automatic function calling is disabled; the review loop
    runs the tools itself.
    """

    PROVIDER = ModelProvider.GEMINI
    CONTEXT_WINDOW = 1048576
    KNOWN_MODELS = {
        "gemini-2.5-pro": "Gemini 2.5 Pro",
        "gemini-2.5-flash": "Gemini 2.5 Flash",
        "gemini-2.0-flash": "Gemini 2.0 Flash",
    }

    def __init__(self, model_id: str = DEFAULT_GEMINI_MODEL, api_key: Optional[str] = None):
        super().__init__(model_id, api_key)
        self.api_key = self._require_api_key(api_key, "Gemini", "GEMINI_API_KEY", "GOOGLE_API_KEY")
        self.client = genai.Client(api_key=self.api_key)

        logger.info(f"Gemini provider ready: {self.model_id}")

    @retry_with_backoff(max_retries=3)
    async def create_message(
        self,
        system_prompt: str,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
        temperature: float = 0.2,
        max_tokens: int = 4096
    ) -> AssistantMessage:
        config_params: Dict[str, Any] = {
            "temperature": temperature,
            "max_output_tokens": max_tokens,
        }
        if system_prompt:
            config_params["system_instruction"] = system_prompt
        if tools:
            config_params["tools"] = self._convert_tools(tools)
            config_params["automatic_function_calling"] = types.AutomaticFunctionCallingConfig(disable=True)

        contents = self._format_messages(messages)
        logger.debug(f"Creating Gemini message with {len(contents)} contents, "
                     f"tools={'enabled' if tools else 'disabled'}")

        response = await self.client.aio.models.generate_content(
            model=self.model_id,
            contents=contents,
            config=types.GenerateContentConfig(**config_params)
        )

        return self._parse_response(response)

    def _format_messages(self, messages: List[Dict[str, Any]]) -> List[types.Content]:
        """
        Convert Anthropic-style messages to Gemini contents.

        tool_result blocks only carry the tool_use id, so the function name
        is recovered from the preceding tool_use blocks.
        """
        formatted = []
        tool_names: Dict[str, str] = {}

        for msg in messages:
            role = "model" if msg["role"] == "assistant" else "user"
            content = msg["content"]
            parts: List[types.Part] = []

            if isinstance(content, str):
                parts.append(types.Part.from_text(text=content))
            else:
                for block in content:
                    block_type = block.get("type")
                    if block_type == "text" and block.get("text"):
                        parts.append(types.Part.from_text(text=block["text"]))
                    elif block_type == "tool_use":
                        tool_names[block.get("id", "")] = block["name"]
                        parts.append(types.Part.from_function_call(
                            name=block["name"],
                            args=block.get("input") or {}
                        ))
                    elif block_type == "tool_result":
                        name = tool_names.get(block.get("tool_use_id", ""))
                        if not name:
                            logger.warning(f"No tool_use found for tool_result {block.get('tool_use_id')}")
                            continue
                        key = "error" if block.get("is_error") else "result"
                        parts.append(types.Part.from_function_response(
                            name=name,
                            response={key: block.get("content", "")}
                        ))

            if parts:
                formatted.append(types.Content(role=role, parts=parts))

        return formatted

    def _convert_tools(self, tools: List[Dict[str, Any]]) -> List[types.Tool]:
        declarations = [
            types.FunctionDeclaration(
                name=tool["name"],
                description=tool["description"],
                parameters_json_schema=tool["input_schema"]
            )
            for tool in tools
        ]
        return [types.Tool(function_declarations=declarations)]

    def _parse_response(self, response: Any) -> AssistantMessage:
        """Convert a Gemini response into Anthropic-style content blocks"""
        content_blocks: List[Dict[str, Any]] = []
        stop_reason = None

        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            logger.warning("Gemini response has no candidates")
        else:
            candidate = candidates[0]
            parts = []
            if candidate.content is not None:
                parts = candidate.content.parts or []
            for index, part in enumerate(parts):
                function_call = getattr(part, "function_call", None)
                if function_call and function_call.name:
                    content_blocks.append({
                        "type": "tool_use",
                        "id": f"tool_{index}",
                        "name": function_call.name,
                        "input": dict(function_call.args or {})
                    })
                elif getattr(part, "text", None):
                    content_blocks.append({"type": "text", "text": part.text})

            finish_reason = str(getattr(candidate, "finish_reason", "") or "")
            if "MAX_TOKENS" in finish_reason:
                stop_reason = "max_tokens"
            elif any(b["type"] == "tool_use" for b in content_blocks):
                stop_reason = "tool_use"
            elif "STOP" in finish_reason:
                stop_reason = "end_turn"
            elif finish_reason:
                logger.warning(f"Gemini stopped with finish_reason={finish_reason}")
                stop_reason = "stop_sequence"

        usage = None
        usage_metadata = getattr(response, "usage_metadata", None)
        if usage_metadata is not None:
            usage = Usage(
                input_tokens=usage_metadata.prompt_token_count or 0,
                output_tokens=usage_metadata.candidates_token_count or 0,
                total_tokens=usage_metadata.total_token_count or 0
            )

        return AssistantMessage(content=content_blocks, stop_reason=stop_reason, usage=usage)
