"""
Execution of commit plans against the repository.

See :mod:`autocommit.execution.staging`.
"""

from .staging import AutoResult, GroupFailure, StagingCoordinator  # noqa: F401
