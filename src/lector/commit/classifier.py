"""
Commit type classification from change-set shape.

The heuristic is an ordered rule list: the first rule whose predicate
matches decides the type, and FALLBACK_TYPE applies when none does.
"""

from dataclasses import dataclass
from typing import Callable, Tuple

from ..repository.changeset import ChangeSetSummary
from .conventional import CommitType

DOC_EXTENSIONS = (".md",)
DOC_MARKERS = ("README",)
TEST_MARKERS = (".test.", "spec.")

FALLBACK_TYPE = CommitType.FIX
FALLBACK_RULE_NAME = "mixed_modifications"


@dataclass(frozen=True)
class ClassificationRule:
    """A named predicate over a change-set that implies a commit type."""

    name: str
    commit_type: CommitType
    matches: Callable[[ChangeSetSummary], bool]


def _is_doc_path(path: str) -> bool:
    return path.endswith(DOC_EXTENSIONS) or any(marker in path for marker in DOC_MARKERS)


def _is_test_path(path: str) -> bool:
    return any(marker in path for marker in TEST_MARKERS)


def is_sole_documentation_change(summary: ChangeSetSummary) -> bool:
    # Docs only when it is the single change, so docs+code stays a code commit
    return len(summary) == 1 and _is_doc_path(summary.files[0].path)


def touches_tests(summary: ChangeSetSummary) -> bool:
    return any(_is_test_path(f.path) for f in summary)


def has_pure_addition(summary: ChangeSetSummary) -> bool:
    return any(f.insertions > 0 and f.deletions == 0 for f in summary)


def is_pure_removal(summary: ChangeSetSummary) -> bool:
    return len(summary) > 0 and all(f.deletions > 0 and f.insertions == 0 for f in summary)


CLASSIFICATION_RULES: Tuple[ClassificationRule, ...] = (
    ClassificationRule("sole_documentation_change", CommitType.DOCS, is_sole_documentation_change),
    ClassificationRule("touches_tests", CommitType.TEST, touches_tests),
    ClassificationRule("pure_addition", CommitType.FEAT, has_pure_addition),
    ClassificationRule("pure_removal", CommitType.REFACTOR, is_pure_removal),
)


def explain_classification(summary: ChangeSetSummary) -> Tuple[CommitType, str]:
    """
    Classify a change-set and report which rule decided it.

    Returns:
        (CommitType, rule name)
    """
    for rule in CLASSIFICATION_RULES:
        if rule.matches(summary):
            return rule.commit_type, rule.name
    return FALLBACK_TYPE, FALLBACK_RULE_NAME


def classify_change_set(summary: ChangeSetSummary) -> CommitType:
    """Pick the conventional commit type for a change-set."""
    commit_type, _ = explain_classification(summary)
    return commit_type
