from __future__ import annotations

from typing import Any, Optional

from .providers import ProviderFamily


class ResumeAIError(Exception):
    """Base class for errors surfaced to the user."""


class GatewayError(ResumeAIError):
    pass


class ConfigurationError(GatewayError):
    def __init__(
        self, message: str = "API key not configured. Please set your API key in Settings."
    ):
        super().__init__(message)


class UpstreamError(GatewayError):
    """A relay answered with a non-2xx status (or an unusable 2xx body).

    ``payload`` is the backend's error envelope exactly as it was received.
    """

    def __init__(
        self,
        family: ProviderFamily,
        status_code: int,
        payload: Any,
        detail: Optional[str] = None,
    ):
        self.family = family
        self.status_code = status_code
        self.payload = payload
        self.detail = detail or _error_message(payload)
        super().__init__(f"{family.label} API error: {self.detail}")

    @property
    def label(self) -> str:
        return self.family.label


class SessionBusyError(ResumeAIError):
    def __init__(self, message: str = "A request is already in progress. Please wait for it to finish."):
        super().__init__(message)


def _error_message(payload: Any) -> str:
    # OpenAI and Anthropic both nest the message under ``error.message``.
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
    return "Unknown error"
