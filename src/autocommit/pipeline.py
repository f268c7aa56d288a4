"""
The auto-commit pipeline.

Stages run strictly in order, each consuming only the output of the
previous one:

1. inventory of changed files (aborting above :data:`MAX_FILES`);
2. availability check of the language model;
3. binary detection;
4. per-file analysis;
5. grouping into a plan;
6. validation of the plan;
7. application of the plan (skipped for dry runs).

Presentation is left to the caller; see :mod:`autocommit.report`.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Set

from autocommit.analysis.file_analyzer import FileAnalyzer, ProgressCallback
from autocommit.diff.binary_classifier import detect_binary_files
from autocommit.errors import TooManyFilesError
from autocommit.execution.staging import AutoResult, StagingCoordinator
from autocommit.grouping.group_model import CommitPlan, FileSummary
from autocommit.grouping.planner import GroupPlanner
from autocommit.grouping.validator import ValidationReport, validate_plan
from autocommit.llm.ollama_client import OllamaClient
from autocommit.vcs.git_client import FileChange, GitClient, rename_sources


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


MAX_FILES = 30


@dataclass
class PipelineOutcome:
    """Everything a caller needs to report on a run."""

    changes: List[FileChange]
    binary_paths: Set[str]
    summaries: Dict[str, FileSummary]
    validation: ValidationReport
    result: Optional[AutoResult] = None  # None for dry runs
    dry_run: bool = False

    @property
    def plan(self) -> CommitPlan:
        return self.validation.plan


@dataclass
class AutoCommitPipeline:
    """Plan and optionally apply commits for the current working tree."""

    git_client: GitClient
    llm_client: OllamaClient
    staged_only: bool = False
    dry_run: bool = False
    max_files: int = MAX_FILES
    on_progress: Optional[ProgressCallback] = None
    on_inventory: Optional[Callable[[List[FileChange]], None]] = None

    def inventory(self) -> List[FileChange]:
        """Return the changed files, enforcing the file limit.

        Raises
        ------
        TooManyFilesError
            If more than ``max_files`` files changed.
        GitError
            If the status query fails.
        """
        changes = self.git_client.get_changes(staged_only=self.staged_only)
        if len(changes) > self.max_files:
            raise TooManyFilesError(len(changes), self.max_files)
        return changes

    async def run(self) -> Optional[PipelineOutcome]:
        """Run the whole pipeline.

        Returns None when there is nothing to commit.
        """
        changes = self.inventory()
        if not changes:
            logger.info("Nothing to commit")
            return None
        if self.on_inventory is not None:
            self.on_inventory(changes)

        await asyncio.to_thread(self.llm_client.check_availability)

        binary_paths = detect_binary_files(self.git_client, staged_only=self.staged_only)
        binary_paths &= {c.path for c in changes}

        analyzer = FileAnalyzer(
            self.git_client,
            self.llm_client,
            staged_only=self.staged_only,
            on_progress=self.on_progress,
        )
        summaries = await analyzer.analyze(changes, binary_paths)

        planner = GroupPlanner(self.llm_client)
        proposed = await planner.create_plan(summaries, changes, binary_paths)
        validation = validate_plan(proposed, list(summaries))

        outcome = PipelineOutcome(
            changes=changes,
            binary_paths=binary_paths,
            summaries=summaries,
            validation=validation,
            dry_run=self.dry_run,
        )
        if self.dry_run:
            return outcome
        if not validation.plan.commits:
            # nothing survived validation; leave the index as the user had it
            outcome.result = AutoResult()
            return outcome

        coordinator = StagingCoordinator(self.git_client, rename_sources(changes))
        outcome.result = coordinator.apply(validation.plan)
        return outcome
