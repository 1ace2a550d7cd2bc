"""
Heuristic commit message synthesis.

build_commit_message() is a pure function over a ChangeSetSummary.
generate_commit_message() adds the repository policy around it: prefer
staged changes, fall back to suggesting `git add` for unstaged ones, and
report "no changes" when the work tree is clean.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from ..errors import CollaboratorError, InputError
from ..repository.changeset import ChangeSetReader, ChangeSetSummary, FileDelta
from .classifier import classify_change_set
from .conventional import CommitType, format_header, parse_commit_type

logger = logging.getLogger(__name__)

DEFAULT_MAX_LENGTH = 72
# Headroom kept free before the stats suffix may be appended
STATS_HEADROOM = 20
ELLIPSIS = "..."

NO_CHANGES_MESSAGE = "No changes detected"
STAGE_FIRST_SUGGESTION = (
    "Use 'git add .' to stage all changes or 'git add <specific-files>' to stage specific files"
)
ERROR_MESSAGE = "Error generating commit message"


class CommitMessageStatus(Enum):
    """Outcome of a commit message request"""
    GENERATED = "generated"
    STAGE_SUGGESTED = "stage_suggested"
    NO_CHANGES = "no_changes"
    ERROR = "error"


@dataclass(frozen=True)
class CommitMessage:
    """A synthesized conventional commit header."""

    type: CommitType
    text: str


@dataclass
class CommitMessageResult:
    """Result of commit message generation, including non-message outcomes."""

    status: CommitMessageStatus
    message: str
    files: List[FileDelta] = field(default_factory=list)
    commit: Optional[CommitMessage] = None
    stats: Optional[Dict[str, int]] = None
    suggestion: Optional[str] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def commit_type(self) -> Optional[CommitType]:
        return self.commit.type if self.commit else None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly form, as returned to the agent."""
        data: Dict[str, Any] = {
            "message": self.message,
            "files": [f.to_dict() for f in self.files],
        }
        if self.commit:
            data["type"] = self.commit.type.value
        if self.stats is not None:
            data["stats"] = dict(self.stats)
        if self.suggestion:
            data["suggestion"] = self.suggestion
        if self.error is not None:
            data["error"] = self.error
        return data


def format_stats_suffix(insertions: int, deletions: int) -> str:
    """Stats suffix such as ' (+12/-3)'; empty when nothing changed."""
    if insertions > 0 and deletions > 0:
        return f" (+{insertions}/-{deletions})"
    if insertions > 0:
        return f" (+{insertions})"
    if deletions > 0:
        return f" (-{deletions})"
    return ""


def truncate_message(text: str, max_length: int) -> str:
    """Cut text to max_length, ending in an ellipsis when there is room for one."""
    if len(text) <= max_length:
        return text
    if max_length <= len(ELLIPSIS):
        return text[:max_length]
    return text[:max_length - len(ELLIPSIS)] + ELLIPSIS


def _validate_max_length(max_length: Any) -> int:
    if isinstance(max_length, bool) or not isinstance(max_length, int) or max_length <= 0:
        raise InputError(f"max_length must be a positive integer (got {max_length!r})")
    return max_length


def synthesize_message(
    summary: ChangeSetSummary,
    commit_type: CommitType,
    max_length: int = DEFAULT_MAX_LENGTH
) -> str:
    """
    Build the message text for a non-empty change-set.

    Args:
        summary: Change-set with at least one file
        commit_type: Type to put in the header
        max_length: Hard upper bound on the returned length

    Returns:
        Message text, never longer than max_length
    """
    if len(summary) == 1:
        description = f"update {summary.files[0].basename}"
    else:
        description = f"update {len(summary)} files"
    message = format_header(commit_type, description)

    if len(message) < max_length - STATS_HEADROOM:
        message += format_stats_suffix(summary.total_insertions, summary.total_deletions)

    return truncate_message(message, max_length)


def _stats(summary: ChangeSetSummary) -> Dict[str, int]:
    return {
        "total_files": len(summary),
        "total_insertions": summary.total_insertions,
        "total_deletions": summary.total_deletions,
    }


def build_commit_message(
    summary: ChangeSetSummary,
    commit_type: Union[CommitType, str, None] = None,
    max_length: int = DEFAULT_MAX_LENGTH
) -> CommitMessageResult:
    """
    Map a change-set to a conventional commit message.

    Pure: no filesystem, network, clock or randomness involved.

    Args:
        summary: Change-set to describe
        commit_type: Explicit type override; classified from the change-set if None
        max_length: Maximum message length (positive, default 72)

    Returns:
        CommitMessageResult with status GENERATED, or NO_CHANGES for an empty change-set

    Raises:
        InputError: If max_length is not positive or commit_type is unknown
    """
    max_length = _validate_max_length(max_length)
    explicit_type = parse_commit_type(commit_type)

    if summary.is_empty():
        return CommitMessageResult(
            status=CommitMessageStatus.NO_CHANGES,
            message=NO_CHANGES_MESSAGE,
        )

    resolved_type = explicit_type or classify_change_set(summary)
    text = synthesize_message(summary, resolved_type, max_length)

    return CommitMessageResult(
        status=CommitMessageStatus.GENERATED,
        message=text,
        files=list(summary.files),
        commit=CommitMessage(type=resolved_type, text=text),
        stats=_stats(summary),
    )


def generate_commit_message(
    root_dir: str,
    commit_type: Union[CommitType, str, None] = None,
    max_length: int = DEFAULT_MAX_LENGTH,
    reader: Optional[ChangeSetReader] = None
) -> CommitMessageResult:
    """
    Suggest a commit message for the work tree containing root_dir.

    Staged changes are described when present. With nothing staged, the
    unstaged changes are listed together with a suggestion to stage them
    first. A clean work tree yields the NO_CHANGES result.

    Args:
        root_dir: Directory inside the repository
        commit_type: Optional explicit type override
        max_length: Maximum message length
        reader: ChangeSetReader to use (default: one with default exclusions)

    Returns:
        CommitMessageResult; collaborator failures come back with status ERROR

    Raises:
        InputError: For an empty root_dir, bad max_length or unknown type
    """
    if not isinstance(root_dir, str) or not root_dir.strip():
        raise InputError("root_dir must be a non-empty directory path")
    max_length = _validate_max_length(max_length)
    explicit_type = parse_commit_type(commit_type)
    reader = reader or ChangeSetReader()

    try:
        staged = reader.read(root_dir, staged=True)
        if not staged.is_empty():
            return build_commit_message(staged, explicit_type, max_length)

        unstaged = reader.read(root_dir, staged=False)
        if unstaged.is_empty():
            logger.info(f"No changes detected in {root_dir}")
            return build_commit_message(unstaged, explicit_type, max_length)

        logger.info(f"Nothing staged in {root_dir}; {len(unstaged)} unstaged file(s)")
        return CommitMessageResult(
            status=CommitMessageStatus.STAGE_SUGGESTED,
            message=f"Suggest staging changes first. Found {len(unstaged)} modified files",
            files=list(unstaged.files),
            suggestion=STAGE_FIRST_SUGGESTION,
        )

    except CollaboratorError as e:
        logger.warning(f"Commit message generation failed for {root_dir}: {e}")
        return CommitMessageResult(
            status=CommitMessageStatus.ERROR,
            message=ERROR_MESSAGE,
            error=str(e),
        )
