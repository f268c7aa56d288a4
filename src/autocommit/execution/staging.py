"""
Application of a commit plan to the repository.

The :class:`StagingCoordinator` first unstages everything so that only
the planned files end up in each commit, then stages and commits the
groups one after another. The first failing ``git add`` or ``git
commit`` stops the run; commits already created are kept and reported,
and later groups are left untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from autocommit.grouping.group_model import CommitGroup, CommitPlan
from autocommit.vcs.git_client import GitClient, GitError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


class StagingState(str, Enum):
    IDLE = "idle"
    RESETTING = "resetting"
    STAGING = "staging"
    COMMITTING = "committing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class GroupFailure:
    """The group that stopped execution and the Git error text."""

    group: CommitGroup
    error: str
    index: int  # 1-based position in the plan


@dataclass
class AutoResult:
    """Outcome of applying a plan.

    Attributes
    ----------
    successful : List[CommitGroup]
        Groups committed, in plan order.
    failure : Optional[GroupFailure]
        The group that failed, if any.
    skipped : List[CommitGroup]
        Groups after the failing one, never staged.
    """

    successful: List[CommitGroup] = field(default_factory=list)
    failure: Optional[GroupFailure] = None
    skipped: List[CommitGroup] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.failure is not None

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0


class StagingCoordinator:
    """Stage and commit each group of a plan in order."""

    def __init__(self, git_client: GitClient, rename_sources: Optional[Dict[str, str]] = None) -> None:
        self.git_client = git_client
        # new path -> old path; the old side of a rename is staged with the new one
        self.rename_sources = rename_sources or {}
        self.state = StagingState.IDLE

    def _paths_to_stage(self, group: CommitGroup) -> List[str]:
        paths: List[str] = []
        for path in group.files:
            old_path = self.rename_sources.get(path)
            if old_path and old_path not in paths:
                paths.append(old_path)
            if path not in paths:
                paths.append(path)
        return paths

    def apply(self, plan: CommitPlan) -> AutoResult:
        """Apply ``plan`` and report what was committed.

        Raises
        ------
        GitError
            If the index cannot be reset before the first group. Failures
            while staging or committing a group are captured in the result
            instead.
        """
        result = AutoResult()

        self.state = StagingState.RESETTING
        try:
            self.git_client.reset_index()
        except GitError:
            self.state = StagingState.FAILED
            raise

        groups = list(plan.commits)
        for index, group in enumerate(groups, start=1):
            try:
                self.state = StagingState.STAGING
                self.git_client.stage_files(self._paths_to_stage(group))
                self.state = StagingState.COMMITTING
                self.git_client.commit(group.message)
            except GitError as exc:
                self.state = StagingState.FAILED
                logger.error("Commit group %d (%s) failed: %s", index, group.message, exc)
                result.failure = GroupFailure(group=group, error=str(exc), index=index)
                result.skipped = groups[index:]
                return result
            logger.debug("Committed group %d: %s", index, group.message)
            result.successful.append(group)

        self.state = StagingState.DONE
        return result
