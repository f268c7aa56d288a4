"""
Configuration loading for autocommit.

See :mod:`autocommit.config.loader` for implementation details.
"""

from .loader import ConfigError, load_config  # noqa: F401
