"""
Error handling and formatting for Lector.
"""

from .exceptions import LectorError, InputError, CollaboratorError
from .formatter import ErrorFormatter, format_error_for_user
from .categories import ErrorCategory, categorize_error

__all__ = [
    "LectorError",
    "InputError",
    "CollaboratorError",
    "ErrorFormatter",
    "format_error_for_user",
    "ErrorCategory",
    "categorize_error",
]
