"""
Per-file analysis of working tree changes.

See :mod:`autocommit.analysis.file_analyzer`.
"""

from .file_analyzer import FileAnalyzer, fallback_summary  # noqa: F401
