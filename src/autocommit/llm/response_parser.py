"""
Decoding of structured LLM output.

The model is asked for bare JSON but frequently wraps it in markdown
fences. The helpers here strip such fences and decode the payload into
the strict shapes the pipeline needs. Anything that does not match the
expected shape raises :class:`ResponseParseError`; partial data is never
coerced into a result.
"""

from __future__ import annotations

import json
from typing import Any, List

from autocommit.grouping.group_model import (
    COMMIT_CATEGORIES,
    CommitGroup,
    CommitPlan,
    FileSummary,
)


class ResponseParseError(ValueError):
    """Raised when an LLM response does not decode to the expected shape."""

    pass


class PlanParseError(ResponseParseError):
    """Raised when the grouping response cannot be turned into a commit plan."""

    pass


def strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code fence, if any.

    Handles both ```` ```json ```` and bare ```` ``` ```` openers.

    Examples
    --------
    >>> strip_code_fence('```json\\n{"a": 1}\\n```')
    '{"a": 1}'
    """
    cleaned = text.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[len("```json"):]
    elif cleaned.startswith("```"):
        cleaned = cleaned[len("```"):]
    if cleaned.endswith("```"):
        cleaned = cleaned[: -len("```")]
    return cleaned.strip()


def _load_object(text: str, error_cls=ResponseParseError) -> dict:
    try:
        data = json.loads(strip_code_fence(text))
    except json.JSONDecodeError as exc:
        raise error_cls(f"Invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise error_cls(f"Expected a JSON object, got {type(data).__name__}")
    return data


def _require_str(data: dict, key: str, error_cls=ResponseParseError) -> str:
    if key not in data:
        raise error_cls(f"Missing required field '{key}'")
    value = data[key]
    if not isinstance(value, str):
        raise error_cls(f"Field '{key}' must be a string")
    return value


def parse_file_summary(text: str) -> FileSummary:
    """Decode a ``{summary, category, scope}`` object."""
    data = _load_object(text)
    summary = _require_str(data, "summary").strip()
    category = _require_str(data, "category").strip().lower()
    scope = _require_str(data, "scope").strip()
    if not summary:
        raise ResponseParseError("Field 'summary' is empty")
    if category not in COMMIT_CATEGORIES:
        raise ResponseParseError(f"Unknown category '{category}'")
    return FileSummary(summary=summary, category=category, scope=scope)


def parse_commit_plan(text: str) -> CommitPlan:
    """Decode a ``{"commits": [{"files": [...], "message": "..."}]}`` object."""
    data = _load_object(text, PlanParseError)
    commits: Any = data.get("commits")
    if not isinstance(commits, list):
        raise PlanParseError("Field 'commits' must be a list")

    groups: List[CommitGroup] = []
    for position, entry in enumerate(commits, start=1):
        if not isinstance(entry, dict):
            raise PlanParseError(f"Commit {position} is not an object")
        files = entry.get("files")
        if not isinstance(files, list) or not all(isinstance(f, str) for f in files):
            raise PlanParseError(f"Commit {position}: 'files' must be a list of strings")
        message = _require_str(entry, "message", PlanParseError).strip()
        if not message:
            raise PlanParseError(f"Commit {position}: 'message' is empty")
        groups.append(CommitGroup(files=list(files), message=message))
    return CommitPlan(commits=groups)
