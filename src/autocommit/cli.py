"""
Command line interface for autocommit.

This module defines the ``main`` command group used as the entry point
of the ``autocommit`` executable and its ``auto`` subcommand, which
splits the working tree changes into several commits. It wires the
configuration, the Git and Ollama clients and the pipeline together,
renders the outcome, and maps failures onto exit codes.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List

import click

from autocommit import __version__
from autocommit.config.loader import ConfigError, load_config
from autocommit.errors import CommitFailedError, TooManyFilesError
from autocommit.grouping.group_model import FileSummary
from autocommit.llm.ollama_client import LLMError, LLMUnavailableError, OllamaClient
from autocommit.llm.response_parser import PlanParseError
from autocommit.pipeline import AutoCommitPipeline
from autocommit.report import render_dry_run, render_result, render_warnings
from autocommit.vcs.git_client import FileChange, GitClient, GitError

# Create a module-level logger. Attach a null handler and disable
# propagation to avoid logging errors when the root logger's stream is
# closed (such as during unit tests).
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_INVALID_USAGE = 2
EXIT_NO_REPO = 3
EXIT_TOO_MANY_FILES = 4
EXIT_CONFIG_ERROR = 5
EXIT_VCS_FAILURE = 6
EXIT_LLM_FAILURE = 7
EXIT_COMMIT_FAILED = 8


# ---------------------------------------------------------------------------
# Status display utilities
# ---------------------------------------------------------------------------

def print_info(message: str, indent: int = 0):
    """Print an info message."""
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}")


def print_error(message: str, indent: int = 0):
    """Print an error message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


def _announce_inventory(changes: List[FileChange]) -> None:
    count = len(changes)
    click.echo(f"Analyzing {count} file{'s' if count != 1 else ''}...")


def _make_progress_printer(verbose: bool):
    def on_progress(index: int, total: int, change: FileChange, summary: FileSummary, from_model: bool) -> None:
        if not verbose:
            return
        source = "" if from_model else " (fallback)"
        print_info(
            f"[{index}/{total}] {change.path}: {summary.category}({summary.scope}) {summary.summary}{source}",
            indent=1,
        )

    return on_progress


def run_auto(repo_root: Path, dry_run: bool, staged_only: bool, verbose: bool) -> None:
    """Run the pipeline for ``repo_root`` and render its outcome.

    Raises
    ------
    CommitFailedError
        After a partial result has been rendered.
    """
    try:
        config = load_config()
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

    llm_client = OllamaClient(
        base_url=config["base_url"],
        port=config["port"],
        model=config["model"],
        request_timeout=float(config.get("request_timeout", 60)),
        max_tokens=config.get("max_tokens"),
    )
    pipeline = AutoCommitPipeline(
        git_client=GitClient(repo_root),
        llm_client=llm_client,
        staged_only=staged_only,
        dry_run=dry_run,
        on_progress=_make_progress_printer(verbose),
        on_inventory=_announce_inventory,
    )

    outcome = asyncio.run(pipeline.run())
    if outcome is None:
        click.echo("Nothing to commit")
        return

    render_warnings(outcome.validation)
    if dry_run or outcome.result is None:
        render_dry_run(outcome.plan)
        return

    render_result(outcome.plan, outcome.result)
    if outcome.result.failed:
        raise CommitFailedError(outcome.result)


@click.group()
@click.version_option(version=__version__, prog_name="autocommit")
def main() -> None:
    """Split working tree changes into conventional commits using a local LLM."""


@main.command("auto")
@click.option("--dry-run", is_flag=True, help="Show the planned commits without creating them.")
@click.option("--staged", "staged_only", is_flag=True, help="Only consider changes already in the index.")
@click.option("--verbose", is_flag=True, help="Show per-file progress and debug output.")
def auto(dry_run: bool, staged_only: bool, verbose: bool) -> None:
    """Group changed files into commits and create them."""
    # force=True so repeated invocations (tests) reconfigure handlers
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )
    ctx = click.get_current_context(silent=True)

    try:
        repo_root = GitClient.find_repo_root(Path.cwd())
        if repo_root is None:
            print_error("Current directory is not inside a Git repository.")
            raise click.exceptions.Exit(EXIT_NO_REPO)
        logger.debug("Repository root: %s", repo_root)

        run_auto(repo_root, dry_run=dry_run, staged_only=staged_only, verbose=verbose)
        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        raise
    except CommitFailedError:
        # already rendered by the reporter
        raise click.exceptions.Exit(EXIT_COMMIT_FAILED)
    except TooManyFilesError as exc:
        print_error(str(exc))
        raise click.exceptions.Exit(EXIT_TOO_MANY_FILES)
    except LLMUnavailableError as exc:
        print_error(f"Language model unavailable: {exc}")
        raise click.exceptions.Exit(EXIT_LLM_FAILURE)
    except PlanParseError as exc:
        print_error(f"Failed to parse LLM response: {exc}")
        raise click.exceptions.Exit(EXIT_LLM_FAILURE)
    except LLMError as exc:
        print_error(f"LLM error: {exc}")
        print_info("Make sure Ollama is running and accessible", indent=1)
        raise click.exceptions.Exit(EXIT_LLM_FAILURE)
    except GitError as exc:
        print_error(f"Git error: {exc}")
        raise click.exceptions.Exit(EXIT_VCS_FAILURE)
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        ctx.exit(EXIT_GENERIC_ERROR)
