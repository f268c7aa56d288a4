"""
Rendering of commit plans and run results.

Dry runs print the plan and how to apply it. Live runs print one line
per committed group and, when a group failed, the error, how many groups
were skipped and a closing "Stopped" summary.
"""

from __future__ import annotations

from typing import List

import click

from autocommit.execution.staging import AutoResult
from autocommit.grouping.group_model import CommitGroup, CommitPlan
from autocommit.grouping.validator import ValidationReport


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def _echo_group(symbol: str, group: CommitGroup) -> None:
    click.echo(f"  {symbol} {group.message}")
    click.echo(f"    {', '.join(group.files)}")


def render_warnings(validation: ValidationReport) -> None:
    """Print the paths that validation removed or left uncommitted."""
    if validation.unknown_paths:
        click.echo(f"⚠ Ignored unknown paths: {', '.join(validation.unknown_paths)}")
    if validation.unplanned_paths:
        click.echo(
            f"⚠ Not included in any commit: {', '.join(validation.unplanned_paths)}"
        )


def render_dry_run(plan: CommitPlan) -> None:
    click.echo("")
    click.echo("Planned commits (dry-run):")
    click.echo("")
    for group in plan.commits:
        _echo_group("•", group)
        click.echo("")
    click.echo("Run without --dry-run to commit.")


def render_result(plan: CommitPlan, result: AutoResult) -> None:
    """Print the outcome of a live run."""
    click.echo("")
    click.echo(f"Creating {_plural(len(plan.commits), 'commit')}:")
    click.echo("")

    for group in result.successful:
        _echo_group("✓", group)
        click.echo("")

    created = len(result.successful)
    if result.failure is None:
        click.echo(f"Done. {_plural(created, 'commit')} created.")
        return

    _echo_group("✗", result.failure.group)
    click.echo(f"    Error: {result.failure.error}")
    click.echo("")
    skipped: List[CommitGroup] = result.skipped
    if skipped:
        click.echo(f"Skipped {_plural(len(skipped), 'remaining group')}.")
    click.echo(f"Stopped. {_plural(created, 'commit')} created, 1 failed.")
