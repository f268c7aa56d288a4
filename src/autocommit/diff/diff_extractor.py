"""
Diff extraction utilities.

This module obtains the diff text for a single changed file and bounds
its size before it is handed to the language model.
"""

from __future__ import annotations

import logging

from autocommit.vcs.git_client import ChangeKind, FileChange, GitClient, GitError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


MAX_DIFF_CHARS = 6000
TRUNCATION_MARKER = "\n\n[... diff truncated ...]"


def truncate_diff(diff: str, max_length: int = MAX_DIFF_CHARS) -> str:
    """Cut ``diff`` to ``max_length`` characters, appending a marker when cut."""
    if len(diff) <= max_length:
        return diff
    return diff[:max_length] + TRUNCATION_MARKER


def extract_diff(client: GitClient, change: FileChange, staged_only: bool = False) -> str:
    """Return the diff text for ``change``.

    Renames are diffed over both paths so the move is visible. A diff
    that cannot be obtained is treated as empty; the caller then falls
    back to a summary built from the path alone.
    """
    paths = [change.path]
    if change.kind is ChangeKind.RENAMED and change.old_path:
        paths = [change.old_path, change.path]
    try:
        return client.get_diff(paths, staged_only=staged_only)
    except GitError as exc:
        logger.warning("Could not read diff for %s: %s", change.path, exc)
        return ""
