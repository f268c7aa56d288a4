"""
Utilities for extracting diffs from Git.

The :mod:`autocommit.diff.diff_extractor` module reads and bounds
per-file diffs and :mod:`autocommit.diff.binary_classifier` flags the
paths whose diff is not text.
"""

from .binary_classifier import detect_binary_files  # noqa: F401
from .diff_extractor import extract_diff, truncate_diff  # noqa: F401
