"""
Data models for commit grouping.

A :class:`FileSummary` describes one analyzed file, a
:class:`CommitGroup` is a set of files committed together with one
message, and a :class:`CommitPlan` is the ordered list of groups to
apply.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


COMMIT_CATEGORIES = ("feat", "fix", "refactor", "docs", "test", "chore", "style")


@dataclass(frozen=True)
class FileSummary:
    """One-line description of the change made to a single file.

    Attributes
    ----------
    summary : str
        Short description, roughly fifteen words at most.
    category : str
        Conventional Commit type, one of :data:`COMMIT_CATEGORIES`.
    scope : str
        Component or module affected by the change.
    """

    summary: str
    category: str
    scope: str


@dataclass
class CommitGroup:
    """Representation of a grouped commit.

    Attributes
    ----------
    files : List[str]
        Paths committed together, in staging order.
    message : str
        Conventional Commit message for the group.
    """

    files: List[str]
    message: str


@dataclass
class CommitPlan:
    """Ordered list of commit groups; the order is the commit order.

    ``local_groups`` holds the groups that were built without the model
    (binary groups); they are part of ``commits`` and exempt from
    validation.
    """

    commits: List[CommitGroup] = field(default_factory=list)
    local_groups: List[CommitGroup] = field(default_factory=list, repr=False, compare=False)

    def __len__(self) -> int:
        return len(self.commits)

    def __iter__(self):
        return iter(self.commits)
