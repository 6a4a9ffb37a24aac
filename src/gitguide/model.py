"""Ollama model client - the README writing backend.

Checks that the local server and model are available, pulls the model on
first use, and sends a single prompt per README.
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from .errors import GitGuideError
from .logging import get_logger

logger = get_logger("model")

DEFAULT_MODEL = "qwen2.5-coder:7b"
OLLAMA_BASE_URL = "http://localhost:11434"
PULL_TIMEOUT = 600
GENERATE_TIMEOUT = 300
TAGS_TIMEOUT = 5

NOT_RUNNING = "Cannot connect to Ollama. Is it running? Try: ollama serve"


class ModelError(GitGuideError):
    """Error communicating with the model."""


class OllamaClient:
    """Client for the Ollama REST API."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        base_url: str = OLLAMA_BASE_URL,
    ):
        self.model = model
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(timeout=GENERATE_TIMEOUT)

    def _installed_models(self) -> list[str] | None:
        try:
            resp = self._client.get(f"{self.base_url}/api/tags", timeout=TAGS_TIMEOUT)
        except (httpx.ConnectError, httpx.TimeoutException):
            return None
        if resp.status_code != 200:
            return None
        try:
            return [m.get("name", "") for m in resp.json().get("models", [])]
        except ValueError:
            return []

    def is_running(self) -> bool:
        """Check if the Ollama server is reachable."""
        return self._installed_models() is not None

    def has_model(self) -> bool:
        """Check if the configured model is downloaded."""
        names = self._installed_models() or []
        return any(
            self.model in (name, name.split(":")[0]) or f"{self.model}:latest" == name
            for name in names
        )

    def pull_model(self, progress_callback=None) -> None:
        """Download the configured model, streaming progress."""
        logger.info("Pulling model %s", self.model)
        try:
            with self._client.stream(
                "POST",
                f"{self.base_url}/api/pull",
                json={"name": self.model},
                timeout=PULL_TIMEOUT,
            ) as resp:
                for line in resp.iter_lines():
                    if not line or not progress_callback:
                        continue
                    try:
                        data = json.loads(line)
                    except json.JSONDecodeError:
                        continue
                    progress_callback(
                        data.get("status", ""),
                        data.get("completed", 0),
                        data.get("total", 0),
                    )
        except httpx.HTTPError as e:
            raise ModelError(f"Failed to pull model {self.model}: {e}")

        if not self.has_model():
            raise ModelError(f"Model {self.model} is still unavailable after pulling")

    def ensure_ready(self, progress_callback=None) -> None:
        """Fail early when Ollama is down; pull the model if missing."""
        if not self.is_running():
            raise ModelError(NOT_RUNNING)
        if not self.has_model():
            if progress_callback:
                progress_callback(f"Downloading {self.model} (one-time)...", 0, 0)
            self.pull_model(progress_callback)

    def generate(
        self,
        prompt: str,
        system: str = "",
        temperature: float = 0.4,
        max_tokens: int = 4096,
    ) -> str:
        """Send one non-streaming completion request and return its text."""
        body: dict[str, Any] = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {"temperature": temperature, "num_predict": max_tokens},
        }
        if system:
            body["system"] = system

        resp = self._post("/api/generate", body)
        if resp.status_code != 200:
            raise ModelError(f"Ollama returned {resp.status_code}: {resp.text[:200]}")
        try:
            text = resp.json().get("response", "")
        except ValueError:
            raise ModelError("Ollama returned a response that is not JSON")
        logger.debug("Model %s produced %d characters", self.model, len(text))
        return text

    def _post(self, endpoint: str, body: dict[str, Any]) -> httpx.Response:
        try:
            return self._client.post(f"{self.base_url}{endpoint}", json=body, timeout=GENERATE_TIMEOUT)
        except httpx.TimeoutException:
            raise ModelError(f"Model generation timed out after {GENERATE_TIMEOUT}s")
        except httpx.ConnectError:
            raise ModelError(NOT_RUNNING)
