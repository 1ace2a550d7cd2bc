"""
Prompts module - Modular system prompt construction.
"""

from .builder import PromptBuilder, PromptComponent


__all__ = [
    "PromptBuilder",
    "PromptComponent",
]
