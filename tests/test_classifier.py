"""Tests for commit type classification."""

import pytest

from lector.commit import (
    CLASSIFICATION_RULES,
    CommitType,
    classify_change_set,
    explain_classification,
    parse_commit_type,
)
from lector.errors import InputError
from lector.repository import ChangeSetSummary, FileDelta


def summary_of(*deltas):
    return ChangeSetSummary.from_deltas(FileDelta(*d) for d in deltas)


class TestRules:

    def test_rule_order(self):
        assert [rule.name for rule in CLASSIFICATION_RULES] == [
            "sole_documentation_change",
            "touches_tests",
            "pure_addition",
            "pure_removal",
        ]

    @pytest.mark.parametrize("path", ["README.md", "docs/guide.md", "README", "pkg/README.rst"])
    def test_single_doc_file_is_docs(self, path):
        assert explain_classification(summary_of((path, 5, 2))) == (CommitType.DOCS, "sole_documentation_change")

    def test_docs_beside_code_is_not_docs(self):
        commit_type, rule = explain_classification(summary_of(("README.md", 2, 1), ("app.py", 3, 3)))
        assert commit_type != CommitType.DOCS
        assert rule == "mixed_modifications"

    @pytest.mark.parametrize("path", ["src/auth.test.ts", "spec/models/user_spec.rb", "tests/login.spec.ts"])
    def test_test_paths_win_regardless_of_shape(self, path):
        for counts in [(10, 0), (0, 10), (4, 4)]:
            summary = summary_of(("src/app.ts", 1, 1), (path, *counts))
            assert explain_classification(summary) == (CommitType.TEST, "touches_tests")

    def test_single_doc_named_like_spec_is_docs(self):
        assert classify_change_set(summary_of(("docs/spec.md", 1, 0))) == CommitType.DOCS

    def test_any_pure_addition_is_feat(self):
        # One added file is enough even when another file only lost lines
        summary = summary_of(("a.ts", 3, 0), ("b.ts", 0, 5))
        assert explain_classification(summary) == (CommitType.FEAT, "pure_addition")

    def test_all_pure_removals_is_refactor(self):
        summary = summary_of(("a.py", 0, 3), ("b.py", 0, 9))
        assert explain_classification(summary) == (CommitType.REFACTOR, "pure_removal")

    def test_mixed_edits_fall_back_to_fix(self):
        summary = summary_of(("src/auth.ts", 127, 15))
        assert explain_classification(summary) == (CommitType.FIX, "mixed_modifications")

    def test_binary_only_change_falls_back_to_fix(self):
        assert classify_change_set(summary_of(("logo.png", 0, 0))) == CommitType.FIX

    def test_removal_plus_binary_is_not_refactor(self):
        assert classify_change_set(summary_of(("a.py", 0, 3), ("logo.png", 0, 0))) == CommitType.FIX


class TestCommitTypeParsing:

    @pytest.mark.parametrize("value", CommitType.values())
    def test_known_values(self, value):
        assert parse_commit_type(value).value == value

    def test_case_and_whitespace_insensitive(self):
        assert parse_commit_type(" Feat ") == CommitType.FEAT

    @pytest.mark.parametrize("value", [None, ""])
    def test_no_override(self, value):
        assert parse_commit_type(value) is None

    def test_enum_passthrough(self):
        assert parse_commit_type(CommitType.CHORE) is CommitType.CHORE

    @pytest.mark.parametrize("value", ["wip", "feature", "perf"])
    def test_unknown_rejected(self, value):
        with pytest.raises(InputError):
            parse_commit_type(value)

    def test_exactly_seven_types(self):
        assert CommitType.values() == ["feat", "fix", "docs", "style", "refactor", "test", "chore"]
