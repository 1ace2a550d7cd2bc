"""
ReviewTask - Bounded agent loop for LLM-driven code review.

This module implements the loop that:
1. Maintains conversation history
2. Makes LLM requests with the review tools attached
3. Executes tools based on LLM responses
4. Stops when the model answers without tool calls, or at the step limit
"""

import logging
from typing import Dict, List, Any, Optional
from dataclasses import dataclass
from enum import Enum

from ..errors import LectorError
from ..prompts import PromptBuilder
from ..report import DEFAULT_FILENAME, DEFAULT_OUTPUT_DIR

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 15


class TaskStatus(Enum):
    """Task execution status"""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    ABORTED = "aborted"


@dataclass
class TaskConfig:
    """Configuration for a review run"""
    root_dir: str
    max_steps: int = DEFAULT_MAX_STEPS
    max_consecutive_mistakes: int = 3
    report_filename: str = DEFAULT_FILENAME
    output_dir: str = DEFAULT_OUTPUT_DIR


@dataclass
class Message:
    """Represents a message in the conversation history"""
    role: str  # "user" or "assistant"
    content: Any  # Can be string or list of content blocks


@dataclass
class ToolUse:
    """Represents a tool use request from the LLM"""
    id: str
    name: str
    input: Dict[str, Any]


@dataclass
class ToolResult:
    """Represents the result of a tool execution"""
    tool_use_id: str
    content: str
    is_error: bool = False


def build_review_prompt(root_dir: str = ".", report_filename: str = DEFAULT_FILENAME) -> str:
    """Default user prompt for a review of all changes under root_dir."""
    return f"""Review all code changes in the directory '{root_dir}'. Provide detailed feedback on each modified file.

Focus on:
- Code quality and structure
- Potential bugs or issues
- Security considerations
- Performance implications
- Best practices adherence

After completing your review:
1. Generate an appropriate commit message for these changes
2. Save the complete review to a markdown file named '{report_filename}'

Make your review comprehensive but concise, suitable for both immediate feedback and documentation."""


class ReviewTask:
    """
    Runs one review conversation against an LLM provider.

    Every model call counts as a step. The loop ends when the model replies
    without tool calls (its text is the final review), or with status
    ABORTED once max_steps calls have been made. Too many failing tool calls
    in a row raise LectorError.
    """

    def __init__(
        self,
        config: TaskConfig,
        llm_provider: Any,
        tool_executor: Any
    ):
        if config.max_steps <= 0:
            raise ValueError("max_steps must be positive")

        self.config = config
        self.llm_provider = llm_provider
        self.tool_executor = tool_executor

        self.status = TaskStatus.PENDING
        self.conversation_history: List[Message] = []
        self.step_count = 0
        self.consecutive_mistakes = 0

        self.final_text = ""
        self.tools_used_count: Dict[str, int] = {}
        self.report_path: Optional[str] = None
        self.commit_message: Optional[str] = None

    async def execute(self, prompt: str) -> Dict[str, Any]:
        """
        Main entry point to run the review.

        Args:
            prompt: The initial user prompt (see build_review_prompt)

        Returns:
            Dict with status, steps, final_text, tools_used, report_path
            and commit_message
        """
        logger.info(f"Starting review of {self.config.root_dir} (max {self.config.max_steps} steps)")
        logger.debug(f"Initial prompt: {prompt[:200]}...")

        self.status = TaskStatus.IN_PROGRESS
        next_user_content: Any = [{"type": "text", "text": prompt}]

        try:
            while self.step_count < self.config.max_steps:
                tool_results = await self._make_request(next_user_content)
                if tool_results is None:
                    self.status = TaskStatus.COMPLETED
                    break
                next_user_content = self._format_tool_results(tool_results)

            if self.status != TaskStatus.COMPLETED:
                self.status = TaskStatus.ABORTED
                logger.warning(f"Review stopped at the step limit ({self.config.max_steps})")
            else:
                logger.info(f"Review completed in {self.step_count} step(s)")

        except Exception as e:
            self.status = TaskStatus.FAILED
            logger.error(f"Review failed after {self.step_count} step(s): {e}", exc_info=True)
            raise

        return self._build_task_result()

    async def _make_request(self, user_content: Any) -> Optional[List[ToolResult]]:
        """
        Make a single LLM request and run the tools it asks for.

        Returns:
            The tool results to send back, or None when the model replied
            without any tool calls
        """
        self.step_count += 1
        logger.info(f"=== Step {self.step_count}/{self.config.max_steps} ===")

        self.conversation_history.append(Message(role="user", content=user_content))

        assistant_message = await self.llm_provider.create_message(
            system_prompt=self._build_system_prompt(),
            messages=self._format_messages_for_llm(),
            tools=self.tool_executor.get_tool_definitions_for_llm()
        )
        logger.debug(f"Received LLM response: stop_reason={assistant_message.stop_reason}")

        self.conversation_history.append(Message(role="assistant", content=assistant_message.content))

        text = assistant_message.text
        if text:
            self.final_text = text

        tool_uses = self._extract_tool_uses(assistant_message.content)
        if not tool_uses:
            logger.info(f"Step {self.step_count}: no tool calls, review finished")
            return None

        logger.info(f"Step {self.step_count}: {', '.join(t.name for t in tool_uses)}")

        results = []
        for tool_use in tool_uses:
            result = await self._run_tool(tool_use)
            results.append(result)

            if result.is_error:
                self.consecutive_mistakes += 1
                logger.warning(
                    f"Consecutive mistakes: {self.consecutive_mistakes}/{self.config.max_consecutive_mistakes}"
                )
                if self.consecutive_mistakes >= self.config.max_consecutive_mistakes:
                    raise LectorError(
                        f"Stopping: {self.consecutive_mistakes} consecutive tool failures "
                        f"(last: {tool_use.name})"
                    )
            else:
                self.consecutive_mistakes = 0

        return results

    async def _run_tool(self, tool_use: ToolUse) -> ToolResult:
        try:
            response = await self.tool_executor.execute(tool_use, self)
        except Exception as e:
            logger.warning(f"Tool {tool_use.name} failed: {e}")
            return ToolResult(
                tool_use_id=tool_use.id,
                content=f"Tool execution failed: {str(e)}",
                is_error=True
            )

        self.tools_used_count[tool_use.name] = self.tools_used_count.get(tool_use.name, 0) + 1
        self._update_context_from_tool_result(tool_use.name, response)

        return ToolResult(
            tool_use_id=tool_use.id,
            content=response.to_string(),
            is_error=response.is_error
        )

    def _build_system_prompt(self) -> str:
        builder = PromptBuilder()
        builder.add_context_section(
            "TASK_CONTEXT",
            f"""## Current Task

**Repository directory**: {self.config.root_dir}
**Report file**: {self.config.report_filename} (in {self.config.output_dir})
**Step**: {self.step_count}/{self.config.max_steps}
"""
        )
        return builder.build()

    def _format_messages_for_llm(self) -> List[Dict[str, Any]]:
        """Format conversation history for LLM API"""
        return [{"role": msg.role, "content": msg.content} for msg in self.conversation_history]

    def _extract_tool_uses(self, content: Any) -> List[ToolUse]:
        """
        Extract tool use requests from assistant message content.

        Tool uses are represented as blocks with type="tool_use".
        """
        if not isinstance(content, list):
            return []

        return [
            ToolUse(
                id=block.get("id", ""),
                name=block.get("name", ""),
                input=block.get("input") or {}
            )
            for block in content
            if isinstance(block, dict) and block.get("type") == "tool_use"
        ]

    def _format_tool_results(self, results: List[ToolResult]) -> List[Dict[str, Any]]:
        """Format tool results as user message content"""
        return [
            {
                "type": "tool_result",
                "tool_use_id": result.tool_use_id,
                "content": result.content,
                "is_error": result.is_error
            }
            for result in results
        ]

    def _update_context_from_tool_result(self, tool_name: str, result: Any) -> None:
        """Track the report path and commit suggestion from tool metadata"""
        metadata = getattr(result, "metadata", None)
        if not metadata or metadata.get("error"):
            return

        if tool_name == "write_review_to_markdown" and metadata.get("report_path"):
            self.report_path = metadata["report_path"]
            logger.info(f"Context updated: report_path = '{self.report_path}'")

        if tool_name == "generate_commit_message" and metadata.get("commit_message"):
            self.commit_message = metadata["commit_message"]
            logger.info(f"Context updated: commit_message = '{self.commit_message}'")

    def _build_task_result(self) -> Dict[str, Any]:
        """Build the final task result"""
        return {
            "status": self.status.value,
            "steps": self.step_count,
            "final_text": self.final_text,
            "tools_used": dict(self.tools_used_count),
            "report_path": self.report_path,
            "commit_message": self.commit_message
        }
