"""
Language model integration for autocommit.

This package contains the :class:`OllamaClient` for communicating with
an Ollama LLM server, the prompt templates, and the strict decoders for
the JSON the model is asked to return.
"""

from .ollama_client import LLMError, LLMUnavailableError, OllamaClient  # noqa: F401
from .response_parser import (  # noqa: F401
    PlanParseError,
    ResponseParseError,
    parse_commit_plan,
    parse_file_summary,
    strip_code_fence,
)
