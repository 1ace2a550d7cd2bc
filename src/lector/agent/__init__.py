"""
Agent module - LLM-driven review loop.
"""

from .task import (
    ReviewTask,
    TaskConfig,
    TaskStatus,
    Message,
    ToolUse,
    ToolResult,
    DEFAULT_MAX_STEPS,
    build_review_prompt
)

__all__ = [
    "ReviewTask",
    "TaskConfig",
    "TaskStatus",
    "Message",
    "ToolUse",
    "ToolResult",
    "DEFAULT_MAX_STEPS",
    "build_review_prompt",
]
