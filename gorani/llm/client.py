"""Client for the external reasoning service (OpenAI-compatible chat API)."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Sequence
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ..errors import ReasoningServiceError
from ..logging import get_logger
from ..ports import ReadSecret
from ..prompting.builder import ContextRequest
from ..prompting.response import response_format

_KEY_FROM_ENV = object()
_SECRET_PROMPT = "Enter your API key for the reasoning service: "


@dataclass(frozen=True)
class ReasoningRequest:
    """One structured-output call, as handed to the transport."""

    prompt: str
    model: str
    response_format: Dict[str, Any]
    temperature: Optional[float]
    max_tokens: Optional[int]
    base_url: str
    api_key: Optional[str]
    request_timeout: Optional[float]

    def body(self) -> Dict[str, Any]:
        """Return the chat/completions JSON body."""
        body: Dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": self.prompt}],
            "response_format": self.response_format,
        }
        optional = {"temperature": self.temperature, "max_tokens": self.max_tokens}
        body.update({key: value for key, value in optional.items() if value is not None})
        return body


Transport = Callable[[ReasoningRequest], str]


class ReasoningClient:
    """Sends prompts with a strict JSON schema and returns the raw reply text.

    Settings passed in win over ``GORANI_*`` environment variables, which win
    over ``OPENAI_*`` ones. A missing API key is requested once through the
    ``read_secret`` port and then reused.
    """

    DEFAULT_MODEL = "gpt-4o-2024-08-06"
    DEFAULT_BASE_URL = "https://api.openai.com/v1"
    ENV_MODEL_KEYS = ("GORANI_MODEL", "OPENAI_MODEL")
    ENV_BASE_URL_KEYS = ("GORANI_BASE_URL", "OPENAI_BASE_URL")
    ENV_API_KEY_KEYS = ("GORANI_API_KEY", "OPENAI_API_KEY")

    def __init__(
        self,
        model: str | None = None,
        *,
        base_url: str | None = None,
        api_key: str | None | object = _KEY_FROM_ENV,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        request_timeout: Optional[float] = 120.0,
        read_secret: ReadSecret | None = None,
        transport: Transport | None = None,
    ) -> None:
        self.model = model or _env(self.ENV_MODEL_KEYS) or self.DEFAULT_MODEL
        self.base_url = (base_url or _env(self.ENV_BASE_URL_KEYS) or self.DEFAULT_BASE_URL).rstrip("/")
        self.api_key: Optional[str] = (
            _env(self.ENV_API_KEY_KEYS) if api_key is _KEY_FROM_ENV else api_key  # type: ignore[assignment]
        )
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.request_timeout = request_timeout
        self._read_secret = read_secret
        self._transport = transport or post_chat_completion
        self.logger = get_logger("llm")

    def complete(self, request: ContextRequest) -> str:
        """Send the request prompt and return the structured reply as text."""
        if not self.api_key and self._read_secret is not None:
            self.api_key = self._read_secret(_SECRET_PROMPT) or None
        self.logger.debug(
            "Requesting %s reply from %s (model=%s)", request.variant.value, self.base_url, self.model
        )
        return self._transport(
            ReasoningRequest(
                prompt=request.prompt,
                model=self.model,
                response_format=response_format(request.variant),
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                base_url=self.base_url,
                api_key=self.api_key,
                request_timeout=self.request_timeout,
            )
        )


def post_chat_completion(request: ReasoningRequest) -> str:
    """POST ``request`` to ``{base_url}/chat/completions`` and return the message content."""
    if not request.api_key:
        raise ReasoningServiceError(
            "No API key configured. Set OPENAI_API_KEY or llm.api_key in .gorani.yml."
        )
    http_request = Request(
        f"{request.base_url}/chat/completions",
        data=json.dumps(request.body()).encode("utf-8"),
        headers={
            "Content-Type": "application/json",
            "Authorization": f"Bearer {request.api_key}",
        },
        method="POST",
    )
    try:
        with urlopen(http_request, timeout=request.request_timeout) as response:  # type: ignore[arg-type]
            raw = response.read()
    except HTTPError as exc:
        body = exc.read().decode("utf-8", errors="replace").strip()
        raise ReasoningServiceError(
            f"Reasoning service failed with status {exc.code}: {body or exc.reason}"
        ) from exc
    except URLError as exc:
        raise ReasoningServiceError(f"Reasoning service request failed: {exc.reason}") from exc

    try:
        envelope = json.loads(raw)
    except ValueError as exc:
        raise ReasoningServiceError("Reasoning service returned invalid JSON") from exc

    content = _message_content(_first_message(envelope))
    if not content:
        raise ReasoningServiceError("Reasoning service returned an empty response")
    return content.strip()


def _first_message(envelope: Any) -> Mapping[str, Any]:
    choices = envelope.get("choices") if isinstance(envelope, dict) else None
    if not choices or not isinstance(choices, list) or not isinstance(choices[0], dict):
        return {}
    message = choices[0].get("message")
    return message if isinstance(message, dict) else {}


def _message_content(message: Mapping[str, Any]) -> str:
    refusal = message.get("refusal")
    if refusal:
        raise ReasoningServiceError(f"Reasoning service refused the request: {refusal}")
    content = message.get("content")
    return content if isinstance(content, str) else ""


def _env(keys: Sequence[str]) -> Optional[str]:
    return next((os.environ[key] for key in keys if os.environ.get(key)), None)


__all__ = ["ReasoningClient", "ReasoningRequest", "post_chat_completion"]
