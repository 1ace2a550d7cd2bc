"""
Repository module - reads change-sets from local git work trees.
"""

from .changeset import (
    DEFAULT_EXCLUDES,
    FileDelta,
    ChangeSetSummary,
    ChangeSetReader,
    is_excluded,
    parse_numstat
)

__all__ = [
    "DEFAULT_EXCLUDES",
    "FileDelta",
    "ChangeSetSummary",
    "ChangeSetReader",
    "is_excluded",
    "parse_numstat",
]
