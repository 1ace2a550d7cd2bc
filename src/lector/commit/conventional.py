"""
Conventional Commits vocabulary for Lector.

Standard header format: type: description

Only the seven types below are produced; anything else is rejected.
"""

from enum import Enum
from typing import Optional, Union

from ..errors import InputError


class CommitType(Enum):
    """Conventional commit types Lector can emit."""

    FEAT = "feat"          # New feature
    FIX = "fix"            # Bug fix
    DOCS = "docs"          # Documentation only changes
    STYLE = "style"        # Code style/formatting (no logic change)
    REFACTOR = "refactor"  # Code restructuring (no behavior change)
    TEST = "test"          # Adding or updating tests
    CHORE = "chore"        # Maintenance tasks, dependencies

    @property
    def description(self) -> str:
        """Get human-readable description of commit type."""
        descriptions = {
            CommitType.FEAT: "A new feature",
            CommitType.FIX: "A bug fix",
            CommitType.DOCS: "Documentation only changes",
            CommitType.STYLE: "Changes that don't affect code meaning (formatting, etc.)",
            CommitType.REFACTOR: "Code change that neither fixes a bug nor adds a feature",
            CommitType.TEST: "Adding missing tests or correcting existing tests",
            CommitType.CHORE: "Changes to build process or auxiliary tools",
        }
        return descriptions[self]

    @classmethod
    def values(cls):
        return [t.value for t in cls]


def parse_commit_type(value: Union[str, CommitType, None]) -> Optional[CommitType]:
    """
    Coerce an optional user-supplied type into a CommitType.

    Args:
        value: A CommitType, its string value, or None/"" for "no override"

    Returns:
        CommitType or None

    Raises:
        InputError: If value names an unknown type
    """
    if value is None or value == "":
        return None
    if isinstance(value, CommitType):
        return value
    try:
        return CommitType(str(value).strip().lower())
    except ValueError:
        raise InputError(
            f"Unknown commit type '{value}'. Expected one of: {', '.join(CommitType.values())}"
        )


def format_header(commit_type: CommitType, description: str) -> str:
    """Format a conventional commit header: "type: description"."""
    return f"{commit_type.value}: {description}"
