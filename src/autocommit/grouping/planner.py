"""
Commit plan construction.

The :class:`GroupPlanner` turns per-file summaries into an ordered
:class:`CommitPlan`:

* no text files: only the binary groups;
* one text file: a single group whose message is built directly from
  the summary, without asking the model;
* several text files: one grouping request to the model.

Binary files never reach the model. They are bucketed by parent
directory and appended after the text groups.
"""

from __future__ import annotations

import asyncio
import logging
import posixpath
from typing import Dict, Iterable, List, Set

from autocommit.grouping.group_model import CommitGroup, CommitPlan, FileSummary
from autocommit.llm.ollama_client import OllamaClient
from autocommit.llm.prompts import build_grouping_prompt
from autocommit.llm.response_parser import parse_commit_plan
from autocommit.vcs.git_client import FileChange


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


def single_file_message(summary: FileSummary) -> str:
    """Format ``category(scope): description`` from one summary."""
    scope_part = f"({summary.scope})" if summary.scope else ""
    description = summary.summary
    if description and description[0].isupper():
        description = description[0].lower() + description[1:]
    return f"{summary.category}{scope_part}: {description}"


def format_summaries(summaries: Dict[str, FileSummary]) -> str:
    return "\n".join(
        f"{path}: {s.summary} [{s.category}] ({s.scope})" for path, s in summaries.items()
    )


def create_binary_groups(changes: Iterable[FileChange], binary_paths: Set[str]) -> List[CommitGroup]:
    """Group binary files by the name of their parent directory.

    Buckets appear in the order their first file appears in the
    inventory; files at the top level go into the ``root`` bucket.
    """
    by_directory: Dict[str, List[str]] = {}
    for change in changes:
        if change.path not in binary_paths:
            continue
        directory = posixpath.dirname(change.path)
        name = posixpath.basename(directory) if directory else "root"
        by_directory.setdefault(name, []).append(change.path)
    return [
        CommitGroup(files=paths, message=f"chore({name}): update binary files")
        for name, paths in by_directory.items()
    ]


class GroupPlanner:
    """Build the commit plan from file summaries."""

    def __init__(self, llm_client: OllamaClient) -> None:
        self.llm_client = llm_client

    async def create_plan(
        self,
        summaries: Dict[str, FileSummary],
        changes: List[FileChange],
        binary_paths: Set[str],
    ) -> CommitPlan:
        """Return the proposed plan followed by the binary groups.

        Raises
        ------
        LLMError
            If the grouping request fails.
        PlanParseError
            If the grouping response does not decode to a plan.
        """
        binary_groups = create_binary_groups(changes, binary_paths)

        if not summaries:
            return CommitPlan(commits=list(binary_groups), local_groups=binary_groups)

        if len(summaries) == 1:
            path, summary = next(iter(summaries.items()))
            group = CommitGroup(files=[path], message=single_file_message(summary))
            return CommitPlan(commits=[group] + binary_groups, local_groups=binary_groups)

        prompt = build_grouping_prompt(format_summaries(summaries))
        logger.debug("Requesting grouping for %d files", len(summaries))
        response = await asyncio.to_thread(self.llm_client.generate, prompt)
        plan = parse_commit_plan(response)
        plan.commits.extend(binary_groups)
        plan.local_groups = binary_groups
        return plan
