"""Tests for the git-backed change-set reader."""

import git as gitpython
import pytest
from git import GitCommandError
from git.exc import GitCommandNotFound

from lector.errors import CollaboratorError, InputError
from lector.repository import (
    DEFAULT_EXCLUDES,
    ChangeSetReader,
    ChangeSetSummary,
    FileDelta,
    is_excluded,
    parse_numstat,
)

APP_SOURCE = "def main():\n    return 1\n"


class TestFileDelta:

    def test_changes_and_basename(self):
        delta = FileDelta("src/auth/login.ts", insertions=10, deletions=4)
        assert delta.changes == 14
        assert delta.basename == "login.ts"

    def test_empty_path_rejected(self):
        with pytest.raises(InputError):
            FileDelta("", insertions=1)

    def test_negative_counts_rejected(self):
        with pytest.raises(InputError):
            FileDelta("a.py", insertions=-1)
        with pytest.raises(InputError):
            FileDelta("a.py", deletions=-2)

    def test_diff_does_not_affect_equality(self):
        assert FileDelta("a.py", 1, 0, diff="x") == FileDelta("a.py", 1, 0, diff="y")

    def test_to_dict(self):
        assert FileDelta("a.py", 3, 2).to_dict() == {
            "file": "a.py",
            "insertions": 3,
            "deletions": 2,
            "changes": 5,
        }


class TestChangeSetSummary:

    def test_totals_follow_deltas(self):
        summary = ChangeSetSummary.from_deltas([
            FileDelta("a.py", 3, 1),
            FileDelta("b.py", 0, 7),
            FileDelta("c.bin", 0, 0),
        ])
        assert len(summary) == 3
        assert summary.total_insertions == 3
        assert summary.total_deletions == 8
        assert summary.paths == ["a.py", "b.py", "c.bin"]

    def test_empty(self):
        summary = ChangeSetSummary()
        assert summary.is_empty()
        assert summary.total_insertions == 0
        assert list(summary) == []


class TestExclusions:

    @pytest.mark.parametrize("path", [
        "dist/bundle.js",
        "packages/web/node_modules/react/index.js",
        "bun.lock",
        "frontend/package-lock.json",
        "poetry.lock",
    ])
    def test_default_exclusions(self, path):
        assert is_excluded(path, DEFAULT_EXCLUDES)

    @pytest.mark.parametrize("path", [
        "src/distance.py",
        "docs/building.md",
        "lockfile_notes.txt",
    ])
    def test_similar_names_not_excluded(self, path):
        assert not is_excluded(path, DEFAULT_EXCLUDES)

    def test_glob_on_basename(self):
        assert is_excluded("vendor/gems.lock", ["*.lock"])
        assert not is_excluded("vendor/gems.lock.md", ["*.lock"])


class TestParseNumstat:

    def test_parses_records(self):
        output = "12\t3\tsrc/app.py\x000\t5\tREADME.md\x00"
        assert parse_numstat(output) == [("src/app.py", 12, 3), ("README.md", 0, 5)]

    def test_binary_counts_as_zero(self):
        assert parse_numstat("-\t-\tassets/logo.png\x00") == [("assets/logo.png", 0, 0)]

    def test_skips_blank_and_malformed(self):
        assert parse_numstat("\x00not numstat\x001\t1\ta.py\x00") == [("a.py", 1, 1)]

    def test_path_with_tab_kept_whole(self):
        assert parse_numstat("1\t0\tweird\tname.txt\x00") == [("weird\tname.txt", 1, 0)]

    def test_path_with_newline_kept_whole(self):
        assert parse_numstat("2\t0\tline\nbreak.md\x00") == [("line\nbreak.md", 2, 0)]


class TestChangeSetReader:

    def test_unstaged_modification(self, git_repo):
        (git_repo / "app.py").write_text(APP_SOURCE + "\n\ndef helper():\n    return 3\n")

        summary = ChangeSetReader().read(str(git_repo))

        assert summary.files == (FileDelta("app.py", 4, 0),)
        assert summary.files[0].diff is None

    def test_staged_only_when_requested(self, git_repo, git):
        (git_repo / "new_module.py").write_text("x = 1\ny = 2\n")
        git("add", "new_module.py")
        (git_repo / "app.py").write_text("def main():\n    return 2\n")

        staged = ChangeSetReader().read(str(git_repo), staged=True)
        unstaged = ChangeSetReader().read(str(git_repo), staged=False)

        assert staged.paths == ["new_module.py"]
        assert staged.total_insertions == 2
        assert unstaged.paths == ["app.py"]
        assert (unstaged.total_insertions, unstaged.total_deletions) == (1, 1)

    def test_include_diff(self, git_repo):
        (git_repo / "app.py").write_text("def main():\n    return 2\n")

        summary = ChangeSetReader().read(str(git_repo), include_diff=True)

        diff = summary.files[0].diff
        assert "-    return 1" in diff
        assert "+    return 2" in diff

    def test_excluded_paths_dropped(self, git_repo, git):
        (git_repo / "bun.lock").write_text("lock\n")
        (git_repo / "dist").mkdir()
        (git_repo / "dist" / "out.js").write_text("built\n")
        (git_repo / "feature.py").write_text("pass\n")
        git("add", ".")

        summary = ChangeSetReader().read(str(git_repo), staged=True)

        assert summary.paths == ["feature.py"]

    def test_custom_exclusions(self, git_repo, git):
        (git_repo / "bun.lock").write_text("lock\n")
        git("add", ".")

        summary = ChangeSetReader(exclude_patterns=[]).read(str(git_repo), staged=True)

        assert summary.paths == ["bun.lock"]

    def test_subdirectory_uses_enclosing_repository(self, git_repo, git):
        sub = git_repo / "pkg"
        sub.mkdir()
        (sub / "mod.py").write_text("a = 1\n")
        git("add", ".")

        summary = ChangeSetReader().read(str(sub), staged=True)

        assert summary.paths == ["pkg/mod.py"]

    def test_clean_tree_is_empty(self, git_repo):
        assert ChangeSetReader().read(str(git_repo)).is_empty()

    def test_outside_git_is_empty(self, plain_dir):
        assert ChangeSetReader().read(str(plain_dir)).is_empty()

    def test_missing_directory_rejected(self, tmp_path):
        with pytest.raises(InputError):
            ChangeSetReader().read(str(tmp_path / "missing"))

    @pytest.mark.parametrize("root_dir", ["", "   "])
    def test_empty_root_dir_rejected(self, root_dir):
        with pytest.raises(InputError):
            ChangeSetReader().read(root_dir)

    def test_git_failure_is_collaborator_error(self, git_repo, monkeypatch):
        closed = []

        class BrokenGit:
            def diff(self, *args):
                raise GitCommandError(["git", "diff"], 128, stderr="fatal: bad object")

        class BrokenRepo:
            def __init__(self, *args, **kwargs):
                self.git = BrokenGit()

            def close(self):
                closed.append(True)

        monkeypatch.setattr(gitpython, "Repo", BrokenRepo)

        with pytest.raises(CollaboratorError) as exc_info:
            ChangeSetReader().read(str(git_repo))

        assert exc_info.value.step == "read changes"
        assert closed == [True]

    def test_missing_git_binary_is_collaborator_error(self, git_repo, monkeypatch):
        class NoGit:
            def diff(self, *args):
                raise GitCommandNotFound("git", "No such file or directory")

        class RepoWithoutGit:
            def __init__(self, *args, **kwargs):
                self.git = NoGit()

            def close(self):
                pass

        monkeypatch.setattr(gitpython, "Repo", RepoWithoutGit)

        with pytest.raises(CollaboratorError) as exc_info:
            ChangeSetReader().read(str(git_repo))

        assert exc_info.value.step == "read changes"

    def test_non_ascii_path_kept_verbatim(self, git_repo, git):
        (git_repo / "café.py").write_text("x = 1\n", encoding="utf-8")
        git("add", ".")

        summary = ChangeSetReader().read(str(git_repo), staged=True, include_diff=True)

        assert summary.paths == ["café.py"]
        assert summary.files[0].basename == "café.py"
        assert "+x = 1" in summary.files[0].diff

    def test_non_ascii_path_can_be_excluded(self, git_repo, git):
        (git_repo / "résumé.lock").write_text("lock\n", encoding="utf-8")
        (git_repo / "app.py").write_text("def main():\n    return 2\n")
        git("add", ".")

        summary = ChangeSetReader(exclude_patterns=["*.lock"]).read(str(git_repo), staged=True)

        assert summary.paths == ["app.py"]

    def test_glob_like_name_diffs_only_itself(self, git_repo, git):
        (git_repo / "a[1].py").write_text("one = 1\n")
        (git_repo / "a1.py").write_text("other = 1\n")
        git("add", ".")

        summary = ChangeSetReader().read(str(git_repo), staged=True, include_diff=True)

        by_path = {delta.path: delta.diff for delta in summary}
        assert "+one = 1" in by_path["a[1].py"]
        assert "other" not in by_path["a[1].py"]

    def test_read_file_diffs(self, git_repo):
        (git_repo / "README.md").write_text("# Test Repo\n\nMore docs.\n")

        diffs = ChangeSetReader().read_file_diffs(str(git_repo))

        assert [d["file"] for d in diffs] == ["README.md"]
        assert "+More docs." in diffs[0]["diff"]
