"""
Per-file change analysis.

The :class:`FileAnalyzer` asks the language model for a one-line
structured summary of every text file in the inventory. Files are
processed one at a time in inventory order. A malformed answer or a
failed request is retried once; after that, or when the file has no
diff text at all, a deterministic summary built from the path is used.
Analysis never fails the run.
"""

from __future__ import annotations

import asyncio
import logging
import posixpath
from typing import Callable, Dict, Iterable, List, Optional, Set

from autocommit.diff.diff_extractor import MAX_DIFF_CHARS, extract_diff, truncate_diff
from autocommit.grouping.group_model import FileSummary
from autocommit.llm.ollama_client import LLMError, OllamaClient
from autocommit.llm.prompts import build_file_summary_prompt
from autocommit.llm.response_parser import ResponseParseError, parse_file_summary
from autocommit.vcs.git_client import FileChange, GitClient


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


ProgressCallback = Callable[[int, int, FileChange, FileSummary, bool], None]


def fallback_summary(change: FileChange) -> FileSummary:
    """Build a summary from the change kind and path alone.

    The scope is the name of the immediate parent directory, or the file
    name itself for files at the repository root.
    """
    filename = posixpath.basename(change.path)
    directory = posixpath.dirname(change.path)
    scope = posixpath.basename(directory) if directory else filename
    return FileSummary(summary=f"{change.verb} {filename}", category="chore", scope=scope)


class FileAnalyzer:
    """Summarize changed files through the language model."""

    def __init__(
        self,
        git_client: GitClient,
        llm_client: OllamaClient,
        staged_only: bool = False,
        max_diff_chars: int = MAX_DIFF_CHARS,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.git_client = git_client
        self.llm_client = llm_client
        self.staged_only = staged_only
        self.max_diff_chars = max_diff_chars
        self.on_progress = on_progress

    async def analyze(
        self,
        changes: Iterable[FileChange],
        binary_paths: Set[str],
    ) -> Dict[str, FileSummary]:
        """Return a summary for every non-binary change, keyed by path.

        The returned mapping preserves inventory order.
        """
        text_changes: List[FileChange] = [c for c in changes if c.path not in binary_paths]
        summaries: Dict[str, FileSummary] = {}
        total = len(text_changes)
        for position, change in enumerate(text_changes, start=1):
            summary, from_model = await self.analyze_file(change)
            summaries[change.path] = summary
            if self.on_progress is not None:
                self.on_progress(position, total, change, summary, from_model)
        return summaries

    async def analyze_file(self, change: FileChange):
        """Summarize a single change.

        Returns
        -------
        Tuple[FileSummary, bool]
            The summary and whether it came from the model (False when the
            fallback was used).
        """
        diff = extract_diff(self.git_client, change, staged_only=self.staged_only)
        if not diff.strip():
            logger.debug("Empty diff for %s; using fallback summary", change.path)
            return fallback_summary(change), False

        prompt = build_file_summary_prompt(
            change.path, change.verb, truncate_diff(diff, self.max_diff_chars)
        )
        for attempt in (1, 2):
            try:
                response = await self._ask(prompt)
                return parse_file_summary(response), True
            except (LLMError, ResponseParseError) as exc:
                logger.warning(
                    "Summary attempt %d for %s failed: %s", attempt, change.path, exc
                )
        logger.warning("Using fallback summary for %s", change.path)
        return fallback_summary(change), False

    async def _ask(self, prompt: str) -> str:
        # Each request is a fresh, stateless generation; the blocking HTTP
        # call runs in a worker thread and is awaited before moving on.
        return await asyncio.to_thread(self.llm_client.generate, prompt)
