import asyncio
import json

from autocommit.analysis.file_analyzer import FileAnalyzer, fallback_summary
from autocommit.diff.diff_extractor import TRUNCATION_MARKER
from autocommit.grouping.group_model import FileSummary
from autocommit.llm.ollama_client import LLMError
from autocommit.vcs.git_client import FileChange


def summary_json(summary="Add parser", category="feat", scope="core"):
    return json.dumps({"summary": summary, "category": category, "scope": scope})


def analyze(fake_git, fake_llm, changes, binary_paths=frozenset(), **kwargs):
    fake_git.changes = list(changes)
    analyzer = FileAnalyzer(fake_git, fake_llm, **kwargs)
    return asyncio.run(analyzer.analyze(changes, set(binary_paths)))


def test_fallback_summary_uses_parent_directory():
    summary = fallback_summary(FileChange.modified("src/utils/strings.py"))
    assert summary == FileSummary("update strings.py", "chore", "utils")


def test_fallback_summary_at_root_uses_filename():
    assert fallback_summary(FileChange.added("README.md")) == FileSummary("add README.md", "chore", "README.md")


def test_fallback_summary_verbs():
    assert fallback_summary(FileChange.deleted("a/b.txt")).summary == "remove b.txt"
    assert fallback_summary(FileChange.renamed("a/old.py", "a/new.py")).summary == "rename new.py"


def test_model_summary_used(fake_git, fake_llm):
    fake_git.diffs = {"pkg/parser.py": "+def parse():\n+    pass\n"}
    fake_llm.replies = ["```json\n" + summary_json() + "\n```"]
    result = analyze(fake_git, fake_llm, [FileChange.modified("pkg/parser.py")])
    assert result == {"pkg/parser.py": FileSummary("Add parser", "feat", "core")}
    assert len(fake_llm.prompts) == 1
    assert "File: pkg/parser.py" in fake_llm.prompts[0]
    assert "Change type: update" in fake_llm.prompts[0]


def test_empty_diff_skips_model(fake_git, fake_llm):
    fake_git.diffs = {"a.py": "  \n\t\n"}
    result = analyze(fake_git, fake_llm, [FileChange.modified("a.py")])
    assert result["a.py"] == FileSummary("update a.py", "chore", "a.py")
    assert fake_llm.prompts == []


def test_malformed_twice_falls_back(fake_git, fake_llm):
    fake_git.diffs = {"lib/main.go": "+func main() {}\n"}
    fake_llm.replies = ["not json", '{"summary": "x"}']
    result = analyze(fake_git, fake_llm, [FileChange.modified("lib/main.go")])
    assert result["lib/main.go"] == FileSummary("update main.go", "chore", "lib")
    assert len(fake_llm.prompts) == 2
    assert fake_llm.prompts[0] == fake_llm.prompts[1]


def test_retry_recovers(fake_git, fake_llm):
    fake_git.diffs = {"a.py": "+x\n"}
    fake_llm.replies = ["garbage", summary_json("Fix crash", "fix", "cli")]
    result = analyze(fake_git, fake_llm, [FileChange.modified("a.py")])
    assert result["a.py"] == FileSummary("Fix crash", "fix", "cli")


def test_model_errors_fall_back(fake_git, fake_llm):
    fake_git.diffs = {"a.py": "+x\n"}
    fake_llm.replies = [LLMError("timeout"), LLMError("timeout")]
    result = analyze(fake_git, fake_llm, [FileChange.modified("a.py")])
    assert result["a.py"].category == "chore"
    assert len(fake_llm.prompts) == 2


def test_binary_files_are_not_analyzed(fake_git, fake_llm):
    fake_git.diffs = {"b.go": "+func b() {}\n"}
    fake_llm.default = summary_json()
    changes = [FileChange.added("a.png"), FileChange.modified("b.go")]
    result = analyze(fake_git, fake_llm, changes, binary_paths={"a.png"})
    assert list(result) == ["b.go"]
    assert fake_git.diff_requests == [["b.go"]]


def test_inventory_order_preserved(fake_git, fake_llm):
    paths = ["z.py", "a.py", "m.py"]
    fake_git.diffs = {p: "+x\n" for p in paths}
    fake_llm.default = summary_json()
    result = analyze(fake_git, fake_llm, [FileChange.modified(p) for p in paths])
    assert list(result) == paths
    assert [p.split("File: ")[1].split("\n")[0] for p in fake_llm.prompts] == paths


def test_long_diff_truncated_in_prompt(fake_git, fake_llm):
    fake_git.diffs = {"big.py": "+" + "x" * 100}
    fake_llm.default = summary_json()
    analyze(fake_git, fake_llm, [FileChange.modified("big.py")], max_diff_chars=20)
    assert TRUNCATION_MARKER in fake_llm.prompts[0]
    assert "x" * 50 not in fake_llm.prompts[0]


def test_progress_callback(fake_git, fake_llm):
    fake_git.diffs = {"a.py": "+x\n"}
    fake_llm.default = summary_json()
    seen = []
    analyze(
        fake_git,
        fake_llm,
        [FileChange.modified("a.py"), FileChange.deleted("b.py")],
        on_progress=lambda i, n, change, summary, from_model: seen.append((i, n, change.path, from_model)),
    )
    assert seen == [(1, 2, "a.py", True), (2, 2, "b.py", False)]
