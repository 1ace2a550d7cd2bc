"""
Exception types shared across Lector.

InputError is raised before any collaborator is touched. CollaboratorError
wraps failures from git or the filesystem; the tools capture it into their
result values instead of letting it escape.
"""

from typing import Optional


class LectorError(Exception):
    """Base class for all Lector errors"""
    pass


class InputError(LectorError, ValueError):
    """Malformed or missing input (e.g., an empty directory path)"""
    pass


class CollaboratorError(LectorError):
    """
    A collaborator (change-set reader, report writer) failed.

    Attributes:
        step: Short name of the step that failed, e.g. "read changes"
        cause: Underlying exception, if any
    """

    def __init__(self, message: str, step: Optional[str] = None, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.step = step
        self.cause = cause

    def __str__(self) -> str:
        message = super().__str__()
        if self.step:
            return f"{self.step} failed: {message}"
        return message
