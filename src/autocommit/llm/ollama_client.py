"""
Client for interacting with an Ollama LLM server.

This client wraps HTTP requests to the Ollama REST API. Text generation
goes through the ``/api/generate`` endpoint and availability is checked
against ``/api/tags``. On error conditions (HTTP errors, timeouts), a
:class:`LLMError` is raised.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests


logger = logging.getLogger(__name__)
# Attach a null handler to avoid errors when the root logger is missing a
# stream. Messages will still propagate to the root logger if configured.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


class LLMError(Exception):
    """Raised when communication with the LLM server fails."""

    pass


class LLMUnavailableError(LLMError):
    """Raised when the server is unreachable or the model is not installed."""

    pass


_THINKING_PATTERNS = [
    r"<think>.*?</think>",
    r"<thinking>.*?</thinking>",
    r"<thought>.*?</thought>",
    r"<reasoning>.*?</reasoning>",
]


def strip_thinking_tags(text: str) -> str:
    """Remove thinking process tags from LLM responses.

    Reasoning models often emit their deliberation inside tags such as
    ``<think>`` before the actual answer.

    Examples
    --------
    >>> strip_thinking_tags("<think>reasoning...</think>Answer")
    'Answer'
    """
    result = text
    for pattern in _THINKING_PATTERNS:
        result = re.sub(pattern, "", result, flags=re.DOTALL | re.IGNORECASE)
    return result.strip()


@dataclass
class OllamaClient:
    """Client for interacting with an Ollama server.

    Parameters
    ----------
    base_url : str
        Base URL of the Ollama server, e.g. ``"http://localhost"``.
    port : int
        Port number of the Ollama server, e.g. ``11434``.
    model : str
        Name of the model to use for generation, e.g. ``"llama3"``.
    request_timeout : float, optional
        Timeout in seconds for HTTP requests. Defaults to 60 seconds.
    max_tokens : int, optional
        Maximum number of tokens to generate. If provided, passed via
        the ``options`` payload.
    """

    base_url: str
    port: int
    model: str
    request_timeout: float = 60.0
    max_tokens: Optional[int] = None

    def _endpoint(self, name: str = "generate") -> str:
        return f"{self.base_url}:{self.port}/api/{name}"

    def check_availability(self) -> None:
        """Verify that the server answers and the configured model is installed.

        Raises
        ------
        LLMUnavailableError
            If the server cannot be reached or does not list the model.
        """
        url = self._endpoint("tags")
        try:
            response = requests.get(url, timeout=self.request_timeout)
        except requests.RequestException as exc:
            logger.error("Failed to reach LLM server: %s", exc)
            raise LLMUnavailableError(
                f"Ollama server at {self.base_url}:{self.port} is not reachable: {exc}"
            ) from exc
        if response.status_code != 200:
            raise LLMUnavailableError(
                f"Ollama server returned status {response.status_code} for {url}"
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise LLMUnavailableError("Unexpected response from Ollama model listing") from exc

        names: List[str] = [m.get("name", "") for m in data.get("models", []) if isinstance(m, dict)]
        if not any(self._matches_model(name) for name in names):
            raise LLMUnavailableError(
                f"Model '{self.model}' is not available on the Ollama server. "
                f"Run 'ollama pull {self.model}' and try again."
            )
        logger.debug("Model %s is available", self.model)

    def _matches_model(self, name: str) -> bool:
        if name == self.model:
            return True
        # "llama3" refers to "llama3:latest"
        return ":" not in self.model and name == f"{self.model}:latest"

    def generate(self, prompt: str) -> str:
        """Generate a completion from the model.

        Every call is an independent request; no conversation context is
        carried between calls.

        Raises
        ------
        LLMError
            If the request fails or the server returns an error.
        """
        payload: Dict[str, Any] = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
        }
        if self.max_tokens is not None:
            payload["options"] = {"num_predict": self.max_tokens}
        url = self._endpoint()
        logger.debug("Sending request to LLM at %s (%d prompt chars)", url, len(prompt))
        try:
            response = requests.post(
                url,
                json=payload,
                timeout=self.request_timeout,
            )
        except requests.RequestException as exc:
            logger.error("Failed to connect to LLM: %s", exc)
            raise LLMError(str(exc)) from exc
        if response.status_code != 200:
            logger.error(
                "LLM returned non-200 status %s: %s", response.status_code, response.text
            )
            raise LLMError(f"LLM returned status {response.status_code}: {response.text}")
        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            logger.error("Failed to parse LLM response: %s", exc)
            raise LLMError("Failed to parse LLM response") from exc
        if "response" in data:
            return strip_thinking_tags(data.get("response", ""))
        if "message" in data and isinstance(data["message"], dict):
            return strip_thinking_tags(data["message"].get("content", ""))
        raise LLMError("Unexpected response structure from LLM")
