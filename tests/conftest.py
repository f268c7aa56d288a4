from typing import Callable, Dict, List, Optional, Sequence, Union

import pytest

from autocommit.llm.ollama_client import LLMError
from autocommit.vcs.git_client import FileChange, GitError


@pytest.fixture(autouse=True)
def isolate_config_dir(monkeypatch, tmp_path):
    """Point the configuration loader at an empty temporary directory.

    Tests must never pick up a real ``~/.autocommit/config.json``.
    """
    config_dir = tmp_path / "autocommit-config"
    config_dir.mkdir()
    monkeypatch.setenv("AUTOCOMMIT_CONFIG_DIR", str(config_dir))
    return config_dir


class FakeGitClient:
    """In-memory stand-in for :class:`GitClient`.

    Records every mutating call so tests can assert on what would have
    happened to the repository.
    """

    def __init__(
        self,
        changes: Optional[List[FileChange]] = None,
        diffs: Optional[Dict[str, str]] = None,
        numstat: str = "",
        head: bool = True,
    ) -> None:
        self.changes = changes or []
        self.diffs = diffs or {}
        self.numstat = numstat
        self.head = head
        self.fail_stage_on: Dict[int, str] = {}
        self.fail_commit_on: Dict[int, str] = {}
        self.reset_error: Optional[str] = None
        self.resets = 0
        self.staged: List[List[str]] = []
        self.commits: List[str] = []
        self.diff_requests: List[List[str]] = []

    @property
    def mutations(self) -> int:
        return self.resets + len(self.staged) + len(self.commits)

    def get_changes(self, staged_only: bool = False) -> List[FileChange]:
        return list(self.changes)

    def get_numstat(self, staged_only: bool = False) -> str:
        return self.numstat

    def get_diff(self, paths: Sequence[str], staged_only: bool = False) -> str:
        self.diff_requests.append(list(paths))
        return self.diffs.get(paths[-1], "")

    def has_head(self) -> bool:
        return self.head

    def reset_index(self) -> None:
        if self.reset_error:
            raise GitError(self.reset_error)
        self.resets += 1

    def stage_files(self, files: List[str]) -> None:
        attempt = len(self.commits) + 1
        if attempt in self.fail_stage_on:
            raise GitError(self.fail_stage_on[attempt])
        self.staged.append(list(files))

    def commit(self, message: str) -> None:
        attempt = len(self.commits) + 1
        if attempt in self.fail_commit_on:
            raise GitError(self.fail_commit_on[attempt])
        self.commits.append(message)


Reply = Union[str, Exception, Callable[[str], str]]


class FakeLLM:
    """Scripted stand-in for :class:`OllamaClient`.

    ``replies`` are consumed in order; an exception instance is raised
    instead of returned. When the script runs out, ``default`` is used.
    """

    def __init__(self, replies: Optional[List[Reply]] = None, default: Optional[Reply] = None) -> None:
        self.replies = list(replies or [])
        self.default = default
        self.prompts: List[str] = []
        self.availability_error: Optional[Exception] = None
        self.availability_checks = 0

    def check_availability(self) -> None:
        self.availability_checks += 1
        if self.availability_error is not None:
            raise self.availability_error

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        reply = self.replies.pop(0) if self.replies else self.default
        if reply is None:
            raise LLMError("no scripted reply")
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(prompt)
        return reply


@pytest.fixture
def fake_git():
    return FakeGitClient()


@pytest.fixture
def fake_llm():
    return FakeLLM()
