"""
Tools module - Provides all tool handlers for the review agent.
"""

from typing import Optional

from .base import (
    IToolHandler,
    BaseToolHandler,
    ToolDefinition,
    ToolResponse,
    ToolCategory
)
from .executor import ToolExecutor
from .review_tools import (
    GetFileChangesHandler,
    GenerateCommitMessageHandler,
    WriteReviewHandler
)
from ..commit import DEFAULT_MAX_LENGTH
from ..report import DEFAULT_FILENAME, DEFAULT_OUTPUT_DIR
from ..repository import ChangeSetReader


def create_default_tool_executor(
    reader: Optional[ChangeSetReader] = None,
    commit_max_length: int = DEFAULT_MAX_LENGTH,
    report_filename: str = DEFAULT_FILENAME,
    output_dir: str = DEFAULT_OUTPUT_DIR,
    include_metadata: bool = True
) -> ToolExecutor:
    """
    Create a ToolExecutor with all default tools registered.

    Args:
        reader: Shared ChangeSetReader (default: one with default exclusions)
        commit_max_length: Default max_length for generate_commit_message
        report_filename: Default filename for write_review_to_markdown
        output_dir: Default output directory for write_review_to_markdown
        include_metadata: Default include_metadata for write_review_to_markdown

    Returns:
        ToolExecutor with the three review tools
    """
    reader = reader or ChangeSetReader()
    executor = ToolExecutor()

    executor.register(GetFileChangesHandler(reader))
    executor.register(GenerateCommitMessageHandler(reader, default_max_length=commit_max_length))
    executor.register(WriteReviewHandler(
        default_filename=report_filename,
        default_output_dir=output_dir,
        default_include_metadata=include_metadata
    ))

    return executor


__all__ = [
    # Base classes
    "IToolHandler",
    "BaseToolHandler",
    "ToolDefinition",
    "ToolResponse",
    "ToolCategory",
    # Executor
    "ToolExecutor",
    "create_default_tool_executor",
    # Review tools
    "GetFileChangesHandler",
    "GenerateCommitMessageHandler",
    "WriteReviewHandler",
]
