"""
Top-level package for autocommit.

The command line entry point lives in :mod:`autocommit.cli`; the
pipeline that plans and applies commits lives in
:mod:`autocommit.pipeline`.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
