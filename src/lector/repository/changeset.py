"""
Change-set reading via local git.

Turns `git diff --numstat -z` output into immutable FileDelta / ChangeSetSummary
value objects. Directories outside a git work tree yield an empty summary;
git command failures are raised as CollaboratorError.
"""

import fnmatch
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import git
from git import InvalidGitRepositoryError, NoSuchPathError
from git.exc import CommandError

from ..errors import CollaboratorError, InputError

logger = logging.getLogger(__name__)


# Build output directories and lockfiles
DEFAULT_EXCLUDES: Tuple[str, ...] = (
    "dist",
    "build",
    "node_modules",
    "bun.lock",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "poetry.lock",
    "uv.lock",
    "Cargo.lock",
)


@dataclass(frozen=True)
class FileDelta:
    """Per-file change statistics from a diff."""

    path: str
    insertions: int = 0
    deletions: int = 0
    diff: Optional[str] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if not isinstance(self.path, str) or not self.path:
            raise InputError("FileDelta path must be a non-empty string")
        if self.insertions < 0 or self.deletions < 0:
            raise InputError(
                f"FileDelta counts must be non-negative (got +{self.insertions}/-{self.deletions} for {self.path})"
            )

    @property
    def changes(self) -> int:
        return self.insertions + self.deletions

    @property
    def basename(self) -> str:
        """Final path segment"""
        return self.path.split("/")[-1] or self.path

    def to_dict(self) -> Dict[str, object]:
        return {
            "file": self.path,
            "insertions": self.insertions,
            "deletions": self.deletions,
            "changes": self.changes,
        }


@dataclass(frozen=True)
class ChangeSetSummary:
    """
    Ordered file deltas plus aggregate totals.

    Totals are derived from the deltas, so they can never disagree with them.
    """

    files: Tuple[FileDelta, ...] = ()

    @classmethod
    def from_deltas(cls, deltas: Iterable[FileDelta]) -> "ChangeSetSummary":
        return cls(files=tuple(deltas))

    @property
    def total_insertions(self) -> int:
        return sum(f.insertions for f in self.files)

    @property
    def total_deletions(self) -> int:
        return sum(f.deletions for f in self.files)

    @property
    def paths(self) -> List[str]:
        return [f.path for f in self.files]

    def is_empty(self) -> bool:
        return not self.files

    def __len__(self) -> int:
        return len(self.files)

    def __iter__(self):
        return iter(self.files)


def is_excluded(path: str, exclude_patterns: Sequence[str]) -> bool:
    """
    Check a repository-relative path against the exclusion list.

    A path is excluded when any of its segments equals an entry, or its
    basename matches an entry as a glob (e.g. "*.lock").
    """
    segments = path.split("/")
    basename = segments[-1]
    for pattern in exclude_patterns:
        if pattern in segments:
            return True
        if fnmatch.fnmatch(basename, pattern):
            return True
    return False


def parse_numstat(output: str) -> List[Tuple[str, int, int]]:
    """
    Parse `git diff --numstat -z --no-renames` output into (path, insertions, deletions).

    Each record is "added\\tremoved\\tpath" terminated by NUL, with the path
    unquoted. Binary files are reported as "-\\t-\\tpath" and count as 0/0.
    """
    entries = []
    for record in output.split("\0"):
        if not record.strip():
            continue
        parts = record.split("\t", 2)
        if len(parts) != 3:
            logger.debug(f"Skipping unparseable numstat record: {record!r}")
            continue
        added, removed, path = parts
        insertions = int(added) if added.isdigit() else 0
        deletions = int(removed) if removed.isdigit() else 0
        entries.append((path, insertions, deletions))
    return entries


class ChangeSetReader:
    """
    Reads staged or unstaged changes of a directory's git work tree.

    Example:
        reader = ChangeSetReader()
        summary = reader.read("/path/to/project", staged=True)
        for delta in summary:
            print(delta.path, delta.insertions, delta.deletions)
    """

    def __init__(self, exclude_patterns: Optional[Sequence[str]] = None):
        self.exclude_patterns: Tuple[str, ...] = tuple(
            DEFAULT_EXCLUDES if exclude_patterns is None else exclude_patterns
        )

    def read(
        self,
        root_dir: str,
        staged: bool = False,
        include_diff: bool = False
    ) -> ChangeSetSummary:
        """
        Read the change-set of the work tree containing root_dir.

        Args:
            root_dir: Directory to inspect (need not be the repository root)
            staged: If True, read the index (git diff --cached)
            include_diff: If True, attach the full per-file diff text

        Returns:
            ChangeSetSummary (empty if root_dir is not inside a git work tree)

        Raises:
            InputError: If root_dir is empty or is not an existing directory
            CollaboratorError: If git fails to compute the diff
        """
        self._validate_root_dir(root_dir)

        repo = self._open_repo(root_dir)
        if repo is None:
            return ChangeSetSummary()

        flags = ["--cached"] if staged else []
        try:
            numstat = repo.git.diff("--numstat", "-z", "--no-renames", *flags)
            deltas = []
            for path, insertions, deletions in parse_numstat(numstat):
                if is_excluded(path, self.exclude_patterns):
                    logger.debug(f"Excluding {path} from change-set")
                    continue
                diff_text = None
                if include_diff:
                    # literal pathspec: names with *, ? or [ must match only themselves
                    diff_text = repo.git.diff(*flags, "--", f":(literal){path}")
                deltas.append(FileDelta(path=path, insertions=insertions, deletions=deletions, diff=diff_text))
        except CommandError as e:
            raise CollaboratorError(str(e), step="read changes", cause=e) from e
        finally:
            repo.close()

        logger.info(
            f"Read {'staged' if staged else 'unstaged'} change-set for {root_dir}: {len(deltas)} file(s)"
        )
        return ChangeSetSummary.from_deltas(deltas)

    def read_file_diffs(self, root_dir: str) -> List[Dict[str, str]]:
        """
        List unstaged changes with their full diff text.

        Returns:
            List of {"file": path, "diff": text}
        """
        summary = self.read(root_dir, staged=False, include_diff=True)
        return [{"file": delta.path, "diff": delta.diff or ""} for delta in summary]

    def _validate_root_dir(self, root_dir: str) -> None:
        if not isinstance(root_dir, str) or not root_dir.strip():
            raise InputError("root_dir must be a non-empty directory path")
        if not Path(root_dir).is_dir():
            raise InputError(f"root_dir does not exist or is not a directory: {root_dir}")

    def _open_repo(self, root_dir: str) -> Optional[git.Repo]:
        try:
            return git.Repo(root_dir, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError):
            logger.debug(f"{root_dir} is not inside a git work tree, returning empty change-set")
            return None
