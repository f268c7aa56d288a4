"""
Pipeline-level errors.

Component errors live beside their components (``GitError`` in
:mod:`autocommit.vcs.git_client`, ``LLMError`` in
:mod:`autocommit.llm.ollama_client`, ``ConfigError`` in
:mod:`autocommit.config.loader`). The errors here concern the run as a
whole.
"""

from __future__ import annotations

from typing import Optional

from autocommit.execution.staging import AutoResult


class TooManyFilesError(Exception):
    """Raised when the inventory exceeds the safety limit."""

    def __init__(self, count: int, limit: int) -> None:
        self.count = count
        self.limit = limit
        super().__init__(
            f"Too many files ({count}) - limit is {limit}. Please commit in smaller batches."
        )


class CommitFailedError(Exception):
    """Raised after a partial run has already been reported to the user.

    The top-level handler only maps it to an exit code; it prints nothing.
    """

    def __init__(self, result: Optional[AutoResult] = None) -> None:
        self.result = result
        super().__init__("Commit application stopped at a failing group")
