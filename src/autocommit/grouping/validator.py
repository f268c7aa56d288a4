"""
Validation of model-proposed commit plans.

The model may reference paths it was never shown or list a file in more
than one group. Validation keeps only known paths, gives each path to
the first group that claims it, and drops groups left empty. Groups
built locally (binary groups) are passed through untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Set

from autocommit.grouping.group_model import CommitGroup, CommitPlan


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


@dataclass
class ValidationReport:
    """Outcome of :func:`validate_plan`.

    Attributes
    ----------
    plan : CommitPlan
        The validated plan, in the original order.
    unknown_paths : List[str]
        Paths the model referenced that were not among the analyzed files.
    unplanned_paths : List[str]
        Analyzed files that ended up in no group and will not be committed.
    """

    plan: CommitPlan
    unknown_paths: List[str] = field(default_factory=list)
    unplanned_paths: List[str] = field(default_factory=list)


def validate_plan(plan: CommitPlan, known_paths: Sequence[str]) -> ValidationReport:
    """Filter ``plan`` against ``known_paths``.

    Parameters
    ----------
    plan : CommitPlan
        The plan as proposed.
    known_paths : Sequence[str]
        The analyzed (non-binary) paths, in inventory order.
    """
    known: Set[str] = set(known_paths)
    local_ids = {id(g) for g in plan.local_groups}
    claimed: Set[str] = set()
    unknown: List[str] = []
    validated: List[CommitGroup] = []

    for group in plan.commits:
        if id(group) in local_ids:
            validated.append(group)
            continue
        files: List[str] = []
        for path in group.files:
            if path not in known:
                if path not in unknown:
                    unknown.append(path)
                continue
            if path in claimed:
                logger.debug("Path %s already planned in an earlier group", path)
                continue
            claimed.add(path)
            files.append(path)
        if not files:
            logger.warning("Dropping empty commit group: %s", group.message)
            continue
        validated.append(CommitGroup(files=files, message=group.message))

    if unknown:
        logger.warning("Ignoring unknown paths proposed by the model: %s", ", ".join(unknown))
    unplanned = [p for p in known_paths if p not in claimed]
    if unplanned:
        logger.warning("Files not assigned to any commit: %s", ", ".join(unplanned))

    return ValidationReport(
        plan=CommitPlan(commits=validated, local_groups=list(plan.local_groups)),
        unknown_paths=unknown,
        unplanned_paths=unplanned,
    )
