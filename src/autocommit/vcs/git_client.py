"""
Git client implementation for autocommit.

This module wraps the Git operations required by the auto-commit
pipeline: reading the working tree status, computing diffs, resetting
the index and creating commits. All subprocess calls go through
:meth:`GitClient._run` so that unit tests can mock them easily.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs will propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# Hash of the empty tree, used to diff against when no commit exists yet.
EMPTY_TREE_SHA = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"


class ChangeKind(str, Enum):
    """Kind of change recorded for a single path."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"


_VERBS = {
    ChangeKind.ADDED: "add",
    ChangeKind.MODIFIED: "update",
    ChangeKind.DELETED: "remove",
    ChangeKind.RENAMED: "rename",
}


@dataclass(frozen=True)
class FileChange:
    """Representation of a single file change in the repository.

    ``path`` is always the current path of the file; for renames it is
    the new path and ``old_path`` carries the previous one.
    """

    kind: ChangeKind
    path: str
    old_path: Optional[str] = None

    @classmethod
    def added(cls, path: str) -> "FileChange":
        return cls(ChangeKind.ADDED, path)

    @classmethod
    def modified(cls, path: str) -> "FileChange":
        return cls(ChangeKind.MODIFIED, path)

    @classmethod
    def deleted(cls, path: str) -> "FileChange":
        return cls(ChangeKind.DELETED, path)

    @classmethod
    def renamed(cls, old_path: str, new_path: str) -> "FileChange":
        return cls(ChangeKind.RENAMED, new_path, old_path)

    @property
    def verb(self) -> str:
        """Imperative verb describing the change (add, update, remove, rename)."""
        return _VERBS[self.kind]


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class GitClient:
    """Client for interacting with a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached. ``.git`` may be a file for worktrees.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                # reached filesystem root
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Both output streams are captured in full before the process is
        reaped, so large diffs cannot block the child.

        Raises
        ------
        GitError
            If the command exits with a non-zero status when ``check`` is True,
            or if the ``git`` executable cannot be started.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as exc:
            logger.error("Git executable not found: %s", exc)
            raise GitError("Git command not found. Please install Git.") from exc
        except UnicodeDecodeError as e:
            logger.error("Unicode decode error in Git output: %s", e)
            raise GitError(f"Failed to decode Git output: {e}") from e

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    # ------------------------------------------------------------------
    # Status and change detection
    # ------------------------------------------------------------------
    def get_changes(self, staged_only: bool = False) -> List[FileChange]:
        """Get the list of changed files in the repository.

        Parses ``git status --porcelain -z``. Each NUL-terminated record
        is ``XY path`` where X is the index status and Y the working tree
        status. A rename record is followed by a second entry holding the
        original path. Untracked files are always excluded.

        Parameters
        ----------
        staged_only : bool, optional
            Only report files with a change recorded in the index.

        Returns
        -------
        List[FileChange]
            Changes in status order, one per path.

        Raises
        ------
        GitError
            If the git status command fails.
        """
        result = self._run(["status", "--porcelain", "-z"], check=True)
        if not result.stdout:
            return []

        entries = result.stdout.split("\0")
        changes: List[FileChange] = []
        seen = set()
        index = 0
        while index < len(entries):
            record = entries[index]
            index += 1
            if len(record) < 3:
                continue

            index_status = record[0]
            worktree_status = record[1]
            path = record[3:]

            if index_status == "?":
                continue

            old_path = None
            if "R" in (index_status, worktree_status) and index < len(entries):
                # the source path is a separate entry, consumed even if the record is skipped
                old_path = entries[index]
                index += 1

            has_staged = index_status != " "
            has_unstaged = worktree_status not in (" ", "?")
            if staged_only and not has_staged:
                continue
            if not has_staged and not has_unstaged:
                continue

            if old_path is not None:
                change = FileChange.renamed(old_path, path)
            elif index_status == "A":
                change = FileChange.added(path)
            elif "D" in (index_status, worktree_status):
                change = FileChange.deleted(path)
            else:
                change = FileChange.modified(path)

            if change.path in seen:
                continue
            seen.add(change.path)
            changes.append(change)

        return changes

    def has_head(self) -> bool:
        """Return True if the repository has at least one commit."""
        result = self._run(["rev-parse", "--verify", "--quiet", "HEAD"], check=False)
        return result.returncode == 0

    def _diff_base(self, staged_only: bool) -> List[str]:
        if staged_only:
            return ["--cached"]
        if self.has_head():
            return ["HEAD"]
        return ["--cached", EMPTY_TREE_SHA]

    def get_numstat(self, staged_only: bool = False) -> str:
        """Return NUL-separated ``git diff --numstat -z`` output for the selected scope."""
        result = self._run(["diff", "--numstat", "-z"] + self._diff_base(staged_only), check=True)
        return result.stdout

    def get_diff(self, paths: List[str], staged_only: bool = False) -> str:
        """Return the unified diff restricted to ``paths``."""
        result = self._run(["diff"] + self._diff_base(staged_only) + ["--"] + list(paths), check=True)
        return result.stdout

    # ------------------------------------------------------------------
    # Index manipulation and committing
    # ------------------------------------------------------------------
    def reset_index(self) -> None:
        """Unstage everything so the index matches HEAD.

        On an unborn branch there is nothing to reset to, so every entry
        is removed from the index instead. Git exits with 128 when the
        index is already empty; that counts as success.
        """
        if self.has_head():
            self._run(["reset", "-q", "HEAD"], check=True)
            return
        result = self._run(["rm", "-r", "-q", "--cached", "."], check=False)
        if result.returncode not in (0, 128):
            raise GitError(result.stderr.strip() or result.stdout.strip())
        if result.returncode == 128:
            logger.debug("Index already empty: %s", result.stderr.strip())

    def stage_files(self, files: List[str]) -> None:
        """Stage exactly the given paths (additions, edits and deletions)."""
        self._run(["add", "-A", "--"] + list(files), check=True)

    def commit(self, message: str) -> None:
        """Create a commit with the given message.

        Multi-line commit messages are supported. If the commit fails,
        a GitError is raised.
        """
        self._run(["commit", "-q", "-m", message], check=True)


def rename_sources(changes: List[FileChange]) -> Dict[str, str]:
    """Map the new path of every rename to its old path."""
    return {c.path: c.old_path for c in changes if c.kind is ChangeKind.RENAMED and c.old_path}
