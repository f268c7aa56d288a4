"""
Version control integration.

This package contains the :class:`GitClient` used by the pipeline to
inventory changes, read diffs, reset the index and create commits,
together with the :class:`FileChange` value type it produces.
"""

from .git_client import ChangeKind, FileChange, GitClient, GitError  # noqa: F401
