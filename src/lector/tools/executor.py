"""
ToolExecutor - Coordinates tool execution using the coordinator pattern.

This module manages tool registration, lookup, and execution.
"""

import logging
from typing import Dict, List, Any, Optional
from .base import IToolHandler, ToolDefinition, ToolResponse, ToolCategory

logger = logging.getLogger(__name__)


class ToolExecutor:
    """
    Coordinates tool execution for the agent.

    Responsibilities:
    1. Register tool handlers
    2. Provide tool definitions to LLM
    3. Route tool calls to appropriate handlers
    4. Handle execution errors gracefully
    """

    def __init__(self):
        self._handlers: Dict[str, IToolHandler] = {}
        self._handlers_by_category: Dict[ToolCategory, List[IToolHandler]] = {
            category: [] for category in ToolCategory
        }

    def register(self, handler: IToolHandler) -> None:
        """
        Register a tool handler.

        Raises:
            ValueError if a handler with the same name already exists
        """
        if handler.name in self._handlers:
            raise ValueError(f"Tool handler '{handler.name}' is already registered")

        self._handlers[handler.name] = handler
        self._handlers_by_category[handler.category].append(handler)
        logger.debug(f"Registered tool: {handler.name} (category: {handler.category.value})")

    def get_tool_definitions(self, categories: Optional[List[ToolCategory]] = None) -> List[ToolDefinition]:
        """
        Get tool definitions, optionally filtered by category.
        """
        if categories is None:
            return [handler.get_definition() for handler in self._handlers.values()]

        return [
            handler.get_definition()
            for category in categories
            for handler in self._handlers_by_category.get(category, [])
        ]

    def get_tool_definitions_for_llm(self, categories: Optional[List[ToolCategory]] = None) -> List[Dict[str, Any]]:
        """
        Get tool definitions formatted for LLM API (Anthropic format).

        Returns list of tool objects with name, description, and input_schema.
        """
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "input_schema": tool.input_schema
            }
            for tool in self.get_tool_definitions(categories)
        ]

    async def execute(self, tool_use: Any, context: Any = None) -> ToolResponse:
        """
        Execute a tool by routing to the appropriate handler.

        Args:
            tool_use: Object with `name` and `input` attributes
            context: Execution context passed through to the handler

        Returns:
            ToolResponse from the handler

        Raises:
            ValueError if the tool is unknown or its input is invalid
            Exception if the handler raises
        """
        tool_name = tool_use.name
        tool_input = tool_use.input

        logger.debug(f"Executing tool: {tool_name}")
        logger.debug(f"Tool input: {tool_input}")

        handler = self._handlers.get(tool_name)
        if not handler:
            logger.error(f"Tool not found: {tool_name}")
            raise ValueError(
                f"Unknown tool: {tool_name}. Available tools: {list(self._handlers.keys())}"
            )

        try:
            handler.validate_input(tool_input)
        except Exception as e:
            logger.error(f"Tool input validation failed for {tool_name}: {e}")
            raise ValueError(f"Invalid input for tool '{tool_name}': {str(e)}") from e

        try:
            result = await handler.execute(tool_input, context)
        except Exception as e:
            logger.error(f"Tool {tool_name} execution failed: {e}", exc_info=True)
            raise Exception(f"Tool '{tool_name}' execution failed: {str(e)}") from e

        if result.is_error:
            logger.warning(f"Tool {tool_name} completed with error: {result.content}")
        else:
            content_str = result.to_string()
            content_preview = content_str[:200] + "..." if len(content_str) > 200 else content_str
            logger.debug(f"Tool {tool_name} completed successfully. Result preview: {content_preview}")

        return result

    def get_tool_names(self) -> List[str]:
        """Get list of all registered tool names"""
        return list(self._handlers.keys())

    def get_tools_by_category(self, category: ToolCategory) -> List[IToolHandler]:
        """Get all tools in a specific category"""
        return self._handlers_by_category.get(category, [])
