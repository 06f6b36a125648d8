from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Protocol, Sequence

import httpx

from schemas.chat import ChatMessage, ChatRole
from schemas.settings import Settings

from .errors import ConfigurationError, GatewayError, UpstreamError
from .providers import ProviderFamily, ResolvedModel, resolve_model

logger = logging.getLogger(__name__)

OPENAI_BASE_URL = "https://api.openai.com/v1"
ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"
INTERNAL_ERROR_PAYLOAD = {"error": "Internal server error"}


@dataclass(frozen=True)
class RelayResponse:
    status_code: int
    payload: Any


class Relay(Protocol):
    def send(self, envelope: Dict[str, Any], api_key: str) -> RelayResponse: ...


class OpenAIRelay:
    """Forwards a chat-completions envelope and returns the reply untouched."""

    def __init__(
        self, base_url: str = OPENAI_BASE_URL, http_client: Optional[httpx.Client] = None
    ):
        try:
            import openai  # type: ignore
        except Exception as exc:  # pragma: no cover - import guard
            raise RuntimeError(
                "openai package is required. Install with `pip install openai`."
            ) from exc

        self._raw = openai
        self.base_url = base_url
        self._http_client = http_client

    def send(self, envelope: Dict[str, Any], api_key: str) -> RelayResponse:
        openai = self._raw
        # Retries are the user's call, never the transport's.
        client = openai.OpenAI(
            api_key=api_key,
            base_url=self.base_url,
            max_retries=0,
            http_client=self._http_client,
        )
        try:
            raw = client.chat.completions.with_raw_response.create(**envelope)
            return RelayResponse(raw.http_response.status_code, _json_body(raw.http_response))
        except openai.APIStatusError as exc:
            return RelayResponse(exc.status_code, _json_body(exc.response))
        except openai.APIConnectionError as exc:  # pragma: no cover - network call
            logger.error("OpenAI relay error: %s", exc)
            return RelayResponse(500, dict(INTERNAL_ERROR_PAYLOAD))
        finally:
            # An injected http client belongs to the caller.
            if self._http_client is None:
                client.close()


class AnthropicRelay:
    """Forwards a messages envelope with the credential injected as a header."""

    def __init__(
        self,
        url: str = ANTHROPIC_MESSAGES_URL,
        client: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
    ):
        self.url = url
        self._client = client
        self.timeout = timeout

    def send(self, envelope: Dict[str, Any], api_key: str) -> RelayResponse:
        headers = {
            "x-api-key": api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }
        try:
            if self._client is not None:
                response = self._client.post(self.url, headers=headers, json=envelope)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.post(self.url, headers=headers, json=envelope)
        except httpx.HTTPError as exc:
            logger.error("Anthropic relay error: %s", exc)
            return RelayResponse(500, dict(INTERNAL_ERROR_PAYLOAD))
        return RelayResponse(response.status_code, _json_body(response))


@dataclass(frozen=True)
class GatewayResult:
    """Outcome of one gateway call: reply text or a typed error, never both."""

    text: Optional[str] = None
    error: Optional[GatewayError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> str:
        if self.error is not None:
            raise self.error
        return self.text or ""


def default_relays() -> Dict[ProviderFamily, Relay]:
    return {
        ProviderFamily.COMPLETION: OpenAIRelay(),
        ProviderFamily.MESSAGE: AnthropicRelay(),
    }


def build_envelope(
    resolved: ResolvedModel, messages: Sequence[ChatMessage], settings: Settings
) -> Dict[str, Any]:
    if resolved.family is ProviderFamily.COMPLETION:
        return {
            "model": resolved.model,
            "messages": [m.to_wire() for m in messages],
            "temperature": settings.temperature,
            "max_tokens": settings.max_tokens,
        }
    if resolved.family is ProviderFamily.MESSAGE:
        # The messages API only takes user/assistant turns; system text rides alongside.
        system_parts = [m.content for m in messages if m.role is ChatRole.SYSTEM]
        envelope: Dict[str, Any] = {
            "model": resolved.model,
            "max_tokens": settings.max_tokens,
            "messages": [m.to_wire() for m in messages if m.role is not ChatRole.SYSTEM],
            "temperature": settings.temperature,
        }
        if system_parts:
            envelope["system"] = "\n\n".join(system_parts)
        return envelope
    raise ValueError(f"Unknown provider family: {resolved.family}")


def parse_reply(family: ProviderFamily, payload: Any) -> str:
    """Pull the reply text out of a backend's success body.

    Raises KeyError/IndexError/TypeError when the body has another shape.
    """
    if family is ProviderFamily.COMPLETION:
        return payload["choices"][0]["message"]["content"] or ""
    if family is ProviderFamily.MESSAGE:
        return payload["content"][0]["text"] or ""
    raise ValueError(f"Unknown provider family: {family}")


class ProviderGateway:
    def __init__(self, relays: Optional[Mapping[ProviderFamily, Relay]] = None):
        self.relays: Dict[ProviderFamily, Relay] = (
            dict(relays) if relays is not None else default_relays()
        )

    def complete(self, messages: Sequence[ChatMessage], settings: Settings) -> GatewayResult:
        if not settings.api_key:
            return GatewayResult(error=ConfigurationError())

        resolved = resolve_model(settings.ai_model)
        envelope = build_envelope(resolved, messages, settings)
        logger.info(
            "%s request - Model: %s, Messages: %s",
            resolved.family.vendor,
            resolved.model,
            len(envelope["messages"]),
        )
        response = self.relays[resolved.family].send(envelope, settings.api_key)

        if not 200 <= response.status_code < 300:
            error = UpstreamError(resolved.family, response.status_code, response.payload)
            logger.warning("%s (status %s)", error, response.status_code)
            return GatewayResult(error=error)

        try:
            text = parse_reply(resolved.family, response.payload)
        except (KeyError, IndexError, TypeError) as exc:
            logger.warning("%s reply had an unexpected shape: %r", resolved.family.vendor, exc)
            return GatewayResult(
                error=UpstreamError(
                    resolved.family,
                    response.status_code,
                    response.payload,
                    detail="unexpected response shape",
                )
            )
        return GatewayResult(text=text)


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text

