"""
Error categorization for user-friendly error messages.
"""

from enum import Enum
from typing import Tuple

from .exceptions import CollaboratorError, InputError


class ErrorCategory(Enum):
    """Categories of errors that can occur in Lector"""
    INPUT = "input"
    COLLABORATOR = "collaborator"
    CONFIGURATION = "configuration"
    AUTH = "authentication"
    TIMEOUT = "timeout"
    NETWORK = "network"
    API = "api"
    TOOL = "tool"
    INTERNAL = "internal"


def categorize_error(error: Exception) -> Tuple[ErrorCategory, str]:
    """
    Categorize an error and provide a user-friendly explanation.

    Typed errors are checked first; anything else falls back to
    keyword matching on the message.

    Args:
        error: The exception to categorize

    Returns:
        Tuple of (ErrorCategory, explanation)
    """
    if isinstance(error, InputError):
        return (
            ErrorCategory.INPUT,
            "Invalid input - a required field is missing or malformed"
        )

    if isinstance(error, CollaboratorError):
        step = error.step or "a collaborator"
        return (
            ErrorCategory.COLLABORATOR,
            f"Could not complete {step} - git or the filesystem reported an error"
        )

    if isinstance(error, TimeoutError):
        return (
            ErrorCategory.TIMEOUT,
            "Operation timed out - the model or API took too long to respond"
        )

    error_str = str(error).lower()

    if "api key" in error_str or "config" in error_str or "env var" in error_str:
        return (
            ErrorCategory.CONFIGURATION,
            "Configuration error - please check your API keys and environment variables"
        )

    if "401" in error_str or "unauthorized" in error_str or "forbidden" in error_str:
        return (
            ErrorCategory.AUTH,
            "Authentication failed - please check your API keys"
        )

    if "timeout" in error_str or "timed out" in error_str:
        return (
            ErrorCategory.TIMEOUT,
            "Operation timed out - the model or API took too long to respond"
        )

    if any(keyword in error_str for keyword in ["connection", "network", "unreachable"]):
        return (
            ErrorCategory.NETWORK,
            "Network error - please check your internet connection"
        )

    if "429" in error_str or "rate limit" in error_str:
        return (
            ErrorCategory.API,
            "Rate limit exceeded - too many requests"
        )

    if any(code in error_str for code in ["400", "404", "500", "502", "503"]):
        return (
            ErrorCategory.API,
            "API error - the service returned an error"
        )

    if "tool" in error_str or "consecutive mistakes" in error_str:
        return (
            ErrorCategory.TOOL,
            "Tool execution failed"
        )

    return (
        ErrorCategory.INTERNAL,
        "An unexpected error occurred"
    )
