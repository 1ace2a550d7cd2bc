"""
Commit message heuristics.

**Main Components:**
- **conventional**: Commit type vocabulary and header formatting
- **classifier**: Ordered rule list mapping change-set shape to a commit type
- **message_builder**: Message synthesis and the staged/unstaged policy
"""

from .conventional import (
    CommitType,
    parse_commit_type,
    format_header
)

from .classifier import (
    ClassificationRule,
    CLASSIFICATION_RULES,
    FALLBACK_TYPE,
    classify_change_set,
    explain_classification
)

from .message_builder import (
    DEFAULT_MAX_LENGTH,
    NO_CHANGES_MESSAGE,
    CommitMessage,
    CommitMessageStatus,
    CommitMessageResult,
    build_commit_message,
    generate_commit_message,
    synthesize_message,
    format_stats_suffix,
    truncate_message
)

__all__ = [
    # Conventional commits
    "CommitType",
    "parse_commit_type",
    "format_header",
    # Classification
    "ClassificationRule",
    "CLASSIFICATION_RULES",
    "FALLBACK_TYPE",
    "classify_change_set",
    "explain_classification",
    # Message synthesis
    "DEFAULT_MAX_LENGTH",
    "NO_CHANGES_MESSAGE",
    "CommitMessage",
    "CommitMessageStatus",
    "CommitMessageResult",
    "build_commit_message",
    "generate_commit_message",
    "synthesize_message",
    "format_stats_suffix",
    "truncate_message",
]
