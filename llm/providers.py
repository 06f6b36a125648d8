"""
Model-id resolution.

A configured model id names exactly one backend family. Ids starting with
``claude`` go to the message-style (Anthropic) backend and are mapped through
a small alias table; anything else is sent unchanged to the completion-style
(OpenAI) backend.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from schemas.settings import Settings

MESSAGE_MODEL_PREFIX = "claude"
DEFAULT_MESSAGE_MODEL = "claude-3-5-sonnet-20241022"
MODEL_ALIASES = {
    "claude-3-sonnet": "claude-3-5-sonnet-20241022",
    "claude-3-haiku": "claude-3-5-haiku-20241022",
}


class ProviderFamily(str, Enum):
    COMPLETION = "completion"
    MESSAGE = "message"

    @property
    def label(self) -> str:
        if self is ProviderFamily.MESSAGE:
            return "Claude"
        return "OpenAI"

    @property
    def vendor(self) -> str:
        if self is ProviderFamily.MESSAGE:
            return "Anthropic"
        return "OpenAI"


@dataclass(frozen=True)
class ResolvedModel:
    family: ProviderFamily
    model: str


def resolve_model(model_id: str) -> ResolvedModel:
    if model_id.startswith(MESSAGE_MODEL_PREFIX):
        return ResolvedModel(
            ProviderFamily.MESSAGE, MODEL_ALIASES.get(model_id, DEFAULT_MESSAGE_MODEL)
        )
    return ResolvedModel(ProviderFamily.COMPLETION, model_id)


def current_model_info(settings: Settings) -> Tuple[str, str]:
    """Return the configured model id and the vendor that will serve it."""
    return settings.ai_model, resolve_model(settings.ai_model).family.vendor


def is_configured(settings: Settings) -> bool:
    return bool(settings.api_key)
