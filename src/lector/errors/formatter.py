"""
Error message formatting for users (HTTP responses, logs, review files).
"""

import logging
from typing import Optional

from .categories import ErrorCategory, categorize_error

logger = logging.getLogger(__name__)


class ErrorFormatter:
    """
    Formats errors into user-friendly messages.
    """

    SUGGESTIONS = {
        ErrorCategory.INPUT: [
            "Check that `root_dir` is a non-empty path to an existing directory",
            "Check that `type` is one of feat, fix, docs, style, refactor, test, chore",
            "Check that `max_length` is a positive integer"
        ],
        ErrorCategory.COLLABORATOR: [
            "Verify the directory is readable and inside a git work tree",
            "Verify the output directory exists and is writable",
            "Check free disk space"
        ],
        ErrorCategory.CONFIGURATION: [
            "Check your `.env` file for missing or incorrect values",
            "Verify your API keys are valid and not expired",
            "Ensure `LLM_PROVIDER` names a supported provider"
        ],
        ErrorCategory.AUTH: [
            "Check that your LLM provider API key is valid",
            "Ensure your API keys haven't expired"
        ],
        ErrorCategory.TIMEOUT: [
            "For Ollama: Set `OLLAMA_TIMEOUT=0` for unlimited timeout",
            "Check if the model or API service is responding"
        ],
        ErrorCategory.NETWORK: [
            "Check your internet connection",
            "Verify the API endpoint is accessible"
        ],
        ErrorCategory.API: [
            "Check the service status page for outages",
            "Try again in a few moments"
        ],
        ErrorCategory.TOOL: [
            "Check the tool input parameters",
            "Review the error details for specific issues"
        ],
        ErrorCategory.INTERNAL: [
            "Try running the review again",
            "Check the server logs for more details"
        ]
    }

    EMOJIS = {
        ErrorCategory.INPUT: "📝",
        ErrorCategory.COLLABORATOR: "📂",
        ErrorCategory.CONFIGURATION: "⚙️",
        ErrorCategory.AUTH: "🔒",
        ErrorCategory.TIMEOUT: "⏱️",
        ErrorCategory.NETWORK: "🌐",
        ErrorCategory.API: "🔌",
        ErrorCategory.TOOL: "🔧",
        ErrorCategory.INTERNAL: "⚠️"
    }

    @staticmethod
    def format_error_markdown(
        error: Exception,
        step: Optional[str] = None,
        include_traceback: bool = False
    ) -> str:
        """
        Format an error as a markdown block.

        Args:
            error: The exception to format
            step: Name of the step that failed (e.g. "code review")
            include_traceback: Whether to include technical details (default: False)

        Returns:
            Formatted markdown string
        """
        category, explanation = categorize_error(error)
        emoji = ErrorFormatter.EMOJIS.get(category, "❌")
        suggestions = ErrorFormatter.SUGGESTIONS.get(category, [])
        step_name = step or getattr(error, "step", None) or "The requested operation"

        lines = [
            f"{emoji} **{category.value.replace('_', ' ').title()} Error**",
            "",
            f"{step_name} could not be completed.",
            "",
            "### What Happened",
            f"{explanation}: {str(error)[:200]}",
            ""
        ]

        if suggestions:
            lines.append("### 💡 Suggestions")
            for suggestion in suggestions:
                lines.append(f"- {suggestion}")
            lines.append("")

        if include_traceback:
            lines.append("<details>")
            lines.append("<summary>Technical Details (click to expand)</summary>")
            lines.append("")
            lines.append("```")
            lines.append(f"Error Type: {type(error).__name__}")
            lines.append(f"Error Message: {str(error)}")
            lines.append("```")
            lines.append("</details>")
            lines.append("")

        return "\n".join(lines)

    @staticmethod
    def format_error_concise(error: Exception) -> str:
        """
        Format an error concisely for logs or inline display.

        Args:
            error: The exception to format

        Returns:
            Concise error string
        """
        category, explanation = categorize_error(error)
        emoji = ErrorFormatter.EMOJIS.get(category, "❌")

        return f"{emoji} {category.value.upper()}: {explanation} - {str(error)[:100]}"


def format_error_for_user(
    error: Exception,
    step: Optional[str] = None,
    format_type: str = "concise"
) -> str:
    """
    Convenience function to format an error for display to users.

    Args:
        error: The exception to format
        step: Optional name of the failed step (markdown format only)
        format_type: Format type ("markdown" or "concise")

    Returns:
        Formatted error message
    """
    if format_type == "markdown":
        return ErrorFormatter.format_error_markdown(error, step=step)
    return ErrorFormatter.format_error_concise(error)
