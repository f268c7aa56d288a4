from autocommit.execution.staging import AutoResult, GroupFailure
from autocommit.grouping.group_model import CommitGroup, CommitPlan
from autocommit.grouping.validator import ValidationReport
from autocommit.report import render_dry_run, render_result, render_warnings


GROUPS = [
    CommitGroup(["a.py", "tests/test_a.py"], "feat(a): add a"),
    CommitGroup(["b.py"], "fix(b): repair b"),
    CommitGroup(["c.png"], "chore(root): update binary files"),
]


def test_dry_run_lists_every_group(capsys):
    render_dry_run(CommitPlan(list(GROUPS)))
    out = capsys.readouterr().out
    assert "Planned commits (dry-run):" in out
    assert out.count("  • ") == 3
    assert "  • feat(a): add a\n    a.py, tests/test_a.py\n" in out
    assert out.rstrip().endswith("Run without --dry-run to commit.")


def test_full_success(capsys):
    render_result(CommitPlan(list(GROUPS)), AutoResult(successful=list(GROUPS)))
    out = capsys.readouterr().out
    assert "Creating 3 commits:" in out
    assert out.count("  ✓ ") == 3
    assert "Done. 3 commits created." in out
    assert "✗" not in out


def test_single_commit_wording(capsys):
    plan = CommitPlan([GROUPS[1]])
    render_result(plan, AutoResult(successful=[GROUPS[1]]))
    out = capsys.readouterr().out
    assert "Creating 1 commit:" in out
    assert "Done. 1 commit created." in out


def test_partial_failure(capsys):
    result = AutoResult(
        successful=[GROUPS[0]],
        failure=GroupFailure(group=GROUPS[1], error="error: hook failed", index=2),
        skipped=[GROUPS[2]],
    )
    render_result(CommitPlan(list(GROUPS)), result)
    out = capsys.readouterr().out
    assert out.count("  ✓ ") == 1
    assert "  ✗ fix(b): repair b" in out
    assert "    Error: error: hook failed" in out
    assert "Skipped 1 remaining group." in out
    assert "Stopped. 1 commit created, 1 failed." in out
    assert "chore(root): update binary files" not in out


def test_failure_on_last_group_has_no_skip_line(capsys):
    result = AutoResult(
        successful=GROUPS[:2],
        failure=GroupFailure(group=GROUPS[2], error="boom", index=3),
    )
    render_result(CommitPlan(list(GROUPS)), result)
    out = capsys.readouterr().out
    assert "Skipped" not in out
    assert "Stopped. 2 commits created, 1 failed." in out


def test_warnings(capsys):
    report = ValidationReport(plan=CommitPlan(), unknown_paths=["ghost.py"], unplanned_paths=["b.py"])
    render_warnings(report)
    out = capsys.readouterr().out
    assert "Ignored unknown paths: ghost.py" in out
    assert "Not included in any commit: b.py" in out


def test_no_warnings_prints_nothing(capsys):
    render_warnings(ValidationReport(plan=CommitPlan()))
    assert capsys.readouterr().out == ""
