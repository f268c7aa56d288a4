"""
Binary file detection.

``git diff --numstat -z`` reports ``-`` instead of line counts for files it
considers binary. Those files cannot be summarized from their diff and
are committed in directory-based groups instead.
"""

from __future__ import annotations

import logging
from typing import Set

from autocommit.vcs.git_client import GitClient, GitError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


def parse_numstat(output: str) -> Set[str]:
    """Return the paths marked binary in ``git diff --numstat -z`` output.

    Each record is ``added<TAB>removed<TAB>path`` terminated by NUL, with
    the path unquoted. For a rename the path field is empty and the old
    and new paths follow as two more NUL-terminated entries.
    """
    binaries: Set[str] = set()
    entries = output.split("\0")
    index = 0
    while index < len(entries):
        parts = entries[index].split("\t", 2)
        index += 1
        if len(parts) < 3:
            continue
        added, removed, path = parts
        if not path:
            if index + 1 >= len(entries):
                break
            path = entries[index + 1]
            index += 2
        if added == "-" and removed == "-" and path:
            binaries.add(path)
    return binaries


def detect_binary_files(client: GitClient, staged_only: bool = False) -> Set[str]:
    """Classify which changed paths are binary.

    A failing numstat query yields an empty set; classification is best
    effort and the analyzer copes with whatever diff text it receives.
    """
    try:
        output = client.get_numstat(staged_only=staged_only)
    except GitError as exc:
        logger.warning("Binary detection failed, treating all files as text: %s", exc)
        return set()
    binaries = parse_numstat(output)
    logger.debug("Binary files: %s", sorted(binaries))
    return binaries
