"""
Base classes and interfaces for the tool system.

Tools are what the review agent can call; each one declares a JSON schema
for the model and an async execute().
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional

from ..errors import InputError


class ToolCategory(Enum):
    """Categories of tools available to the agent"""
    GIT = "git"  # Change-set inspection
    COMMIT = "commit"  # Commit message synthesis
    REPORT = "report"  # Review report output


@dataclass
class ToolResponse:
    """Response from a tool execution"""
    content: Any  # The actual result content
    metadata: Optional[Dict[str, Any]] = None  # Additional metadata

    @property
    def is_error(self) -> bool:
        return bool(self.metadata and self.metadata.get("error"))

    def to_string(self) -> str:
        """Convert response to string format"""
        if isinstance(self.content, str):
            return self.content
        return json.dumps(self.content, indent=2, default=str)


@dataclass
class ToolDefinition:
    """Definition of a tool for LLM"""
    name: str
    description: str
    input_schema: Dict[str, Any]  # JSON schema for tool inputs
    category: ToolCategory


class IToolHandler(ABC):
    """
    Base interface for all tool handlers.

    Each tool handler implements:
    1. Tool definition (name, description, schema)
    2. Execution logic
    3. Optional validation
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique tool name"""
        pass

    @property
    @abstractmethod
    def category(self) -> ToolCategory:
        """Tool category"""
        pass

    @abstractmethod
    def get_definition(self) -> ToolDefinition:
        """
        Get the tool definition for the LLM.

        Returns:
            ToolDefinition with name, description, and input schema
        """
        pass

    @abstractmethod
    async def execute(self, input_data: Dict[str, Any], context: Any) -> ToolResponse:
        """
        Execute the tool with given input.

        Args:
            input_data: Tool input parameters
            context: Execution context (the running ReviewTask, or None)

        Returns:
            ToolResponse with results
        """
        pass

    def validate_input(self, input_data: Dict[str, Any]) -> None:
        """
        Validate tool input before execution.

        Raises:
            InputError if validation fails
        """
        pass


class BaseToolHandler(IToolHandler):
    """
    Base implementation of IToolHandler with common functionality.

    Subclasses only need to implement:
    - name property
    - category property
    - get_definition()
    - execute()
    """

    # Checked by validate_input; OPTIONAL_FIELDS maps field name to accepted types
    REQUIRED_STRINGS: Iterable[str] = ()
    OPTIONAL_FIELDS: Dict[str, tuple] = {}

    def validate_input(self, input_data: Dict[str, Any]) -> None:
        if not isinstance(input_data, dict):
            raise InputError(f"{self.name} expects an object of named parameters")

        for field_name in self.REQUIRED_STRINGS:
            value = input_data.get(field_name)
            if not isinstance(value, str) or not value.strip():
                raise InputError(f"'{field_name}' is required and must be a non-empty string")

        for field_name, types in self.OPTIONAL_FIELDS.items():
            value = input_data.get(field_name)
            if value is None:
                continue
            # bool is an int subclass; only accept it where bool is declared
            if isinstance(value, bool) and bool not in types:
                raise InputError(f"'{field_name}' must be of type {', '.join(t.__name__ for t in types)}")
            if not isinstance(value, types):
                raise InputError(f"'{field_name}' must be of type {', '.join(t.__name__ for t in types)}")

    def _format_error(self, error: Exception) -> str:
        """Format an error message for returning to the LLM"""
        return f"Error executing {self.name}: {str(error)}"

    def _success_response(self, content: Any, metadata: Optional[Dict] = None) -> ToolResponse:
        """Create a successful tool response"""
        return ToolResponse(content=content, metadata=metadata)

    def _error_response(self, error: Exception, content: Any = None) -> ToolResponse:
        """Create an error tool response"""
        return ToolResponse(
            content=content if content is not None else self._format_error(error),
            metadata={"error": True, "error_message": str(error)}
        )
