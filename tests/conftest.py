from typing import Any, Dict, List

import pytest

from config.store import MemorySettingsStore
from llm.client import ProviderGateway, RelayResponse
from llm.providers import ProviderFamily
from schemas.settings import Settings


class FakeRelay:
    def __init__(self, status_code: int = 200, payload: Any = None):
        self.status_code = status_code
        self.payload = payload
        self.calls: List[Dict[str, Any]] = []

    def send(self, envelope: Dict[str, Any], api_key: str) -> RelayResponse:
        self.calls.append({"envelope": envelope, "api_key": api_key})
        return RelayResponse(self.status_code, self.payload)


def completion_payload(text: str) -> Dict[str, Any]:
    return {"choices": [{"message": {"role": "assistant", "content": text}}]}


def message_payload(text: str) -> Dict[str, Any]:
    return {"content": [{"type": "text", "text": text}]}


@pytest.fixture
def completion_relay():
    return FakeRelay(payload=completion_payload("Hello from OpenAI"))


@pytest.fixture
def message_relay():
    return FakeRelay(payload=message_payload("Hello from Claude"))


@pytest.fixture
def gateway(completion_relay, message_relay):
    return ProviderGateway(
        {ProviderFamily.COMPLETION: completion_relay, ProviderFamily.MESSAGE: message_relay}
    )


@pytest.fixture
def settings():
    return Settings(api_key="sk-test", ai_model="gpt-4")


@pytest.fixture
def store(settings):
    return MemorySettingsStore(settings)
