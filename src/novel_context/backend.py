"""Turn an assembled context into new text through a completion backend."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import requests
from pydantic import BaseModel

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


class CompletionRequest(BaseModel):
    """Continuation request sent to a completion backend."""

    prompt: str
    system: str = ""
    model: str = ""
    max_tokens: int | None = None
    temperature: float | None = None
    top_p: float | None = None


class CompletionResponse(BaseModel):
    """Generated continuation text."""

    text: str
    model: str = ""
    prompt_tokens: int | None = None
    completion_tokens: int | None = None


# ---------------------------------------------------------------------------
# CompletionBackend ABC
# ---------------------------------------------------------------------------


class CompletionBackend(ABC):
    """Abstract base class for completion backends."""

    @abstractmethod
    def name(self) -> str:
        """Return the canonical backend name (e.g. 'ollama')."""

    @abstractmethod
    def generate(self, request: CompletionRequest) -> CompletionResponse:
        """Generate a continuation for *request*."""


class StubCompletionBackend(CompletionBackend):
    """Returns canned continuations without making real HTTP calls."""

    _CANNED = "The story continues."

    def __init__(self) -> None:
        self.requests: list[CompletionRequest] = []

    def name(self) -> str:
        return "stub"

    def generate(self, request: CompletionRequest) -> CompletionResponse:
        """Return a deterministic canned response and remember the request."""
        self.requests.append(request)
        reply = f"{self._CANNED} (model={request.model or 'stub'})"
        return CompletionResponse(
            text=reply,
            model=request.model or "stub",
            prompt_tokens=len(request.prompt.split()),
            completion_tokens=len(reply.split()),
        )


class OllamaCompletionBackend(CompletionBackend):
    """Completion via the Ollama ``/api/generate`` endpoint.

    Requires Ollama running locally (default: http://localhost:11434).
    """

    def __init__(
        self,
        model: str = "llama3",
        base_url: str = "http://localhost:11434",
        timeout: float = 120.0,
    ) -> None:
        self._model = model
        self._url = f"{base_url}/api/generate"
        self._timeout = timeout

    @property
    def model(self) -> str:
        return self._model

    def name(self) -> str:
        return "ollama"

    def generate(self, request: CompletionRequest) -> CompletionResponse:
        model = request.model or self._model
        options: dict[str, float | int] = {}
        if request.max_tokens is not None:
            options["num_predict"] = request.max_tokens
        if request.temperature is not None:
            options["temperature"] = request.temperature
        if request.top_p is not None:
            options["top_p"] = request.top_p

        payload: dict[str, object] = {"model": model, "prompt": request.prompt, "stream": False}
        if request.system:
            payload["system"] = request.system
        if options:
            payload["options"] = options

        logger.debug("ollama generate: model=%s prompt_chars=%d", model, len(request.prompt))
        resp = requests.post(self._url, json=payload, timeout=self._timeout)
        resp.raise_for_status()
        data = resp.json()
        return CompletionResponse(
            text=data.get("response", ""),
            model=data.get("model", model),
            prompt_tokens=data.get("prompt_eval_count"),
            completion_tokens=data.get("eval_count"),
        )
