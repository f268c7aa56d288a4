"""
Grouping logic for commits.

This package holds the plan data model, the planner that asks the
language model to group files, and the validator that checks its
answer. See :mod:`autocommit.grouping.planner` and
:mod:`autocommit.grouping.validator` for details.
"""

from .group_model import CommitGroup, CommitPlan, FileSummary  # noqa: F401
from .validator import ValidationReport, validate_plan  # noqa: F401
