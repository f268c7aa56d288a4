"""Prompt templates sent to the language model."""

from textwrap import dedent


FILE_SUMMARY_PROMPT = dedent(
    """
    Analyze this git diff and respond with ONLY a JSON object (no markdown, no explanation):
    {
      "summary": "brief description of changes, max 15 words",
      "category": "one of: feat, fix, refactor, docs, test, chore, style",
      "scope": "primary component/module affected, e.g. auth, api, ui"
    }
    """
).strip()


GROUPING_PROMPT = dedent(
    """
    Group these file changes into logical commits.

    Rules:
    - Use as FEW commits as possible; only split work that is clearly unrelated
    - Related changes belong together (feature + its tests, component + its styles)
    - Separate unrelated work (don't mix "add translation" with "fix error handler")
    - Commits should be meaningful units of work, not tiny atomic changes
    - Only use file paths from the list below, exactly as written
    - Use conventional commit format: type(scope): description

    Respond with ONLY a JSON object (no markdown, no explanation):
    {
      "commits": [
        {
          "files": ["path/to/file1", "path/to/file2"],
          "message": "feat(scope): description"
        }
      ]
    }
    """
).strip()


def build_file_summary_prompt(path: str, verb: str, diff: str) -> str:
    return f"{FILE_SUMMARY_PROMPT}\n\nFile: {path}\nChange type: {verb}\n\nDiff:\n{diff}"


def build_grouping_prompt(summary_lines: str) -> str:
    return f"{GROUPING_PROMPT}\n\nFiles:\n{summary_lines}"
