"""
Utility modules for Lector.
"""

from .retry import retry_with_backoff, is_retryable_error, calculate_delay

__all__ = ["retry_with_backoff", "is_retryable_error", "calculate_delay"]
