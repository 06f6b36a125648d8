import httpx
import pytest

from config.store import MemorySettingsStore
from conftest import FakeRelay, completion_payload
from llm.client import AnthropicRelay, ProviderGateway
from llm.errors import SessionBusyError
from llm.providers import ProviderFamily
from llm.session import MISSING_KEY_REPLY, ConversationSession
from schemas.chat import ChatRole
from schemas.settings import Settings


def test_send_appends_user_and_assistant_turns(gateway, completion_relay, store):
    session = ConversationSession(gateway, store)

    reply = session.send("How can I improve my resume?")

    assert reply.role is ChatRole.ASSISTANT
    assert reply.content == "Hello from OpenAI"
    assert [m.role for m in session.messages] == [ChatRole.USER, ChatRole.ASSISTANT]
    assert session.messages[0].content == "How can I improve my resume?"
    assert not session.busy


def test_send_includes_full_history_and_resume(gateway, completion_relay, store):
    session = ConversationSession(gateway, store, resume_text="Jane Doe")
    session.send("first")
    session.send("second")

    sent = completion_relay.calls[-1]["envelope"]["messages"]

    assert [m["role"] for m in sent] == ["system", "user", "assistant", "user"]
    assert sent[1]["content"] == "first"
    assert sent[-1]["content"] == "Resume Content:\nJane Doe\n\nUser Question: second"
    # The visible transcript keeps what the user typed.
    assert session.messages[2].content == "second"


def test_missing_key_becomes_assistant_diagnostic(gateway, completion_relay):
    session = ConversationSession(gateway, MemorySettingsStore(Settings(api_key="")))

    reply = session.send("hello")

    assert reply.content == MISSING_KEY_REPLY
    assert completion_relay.calls == []
    assert len(session.messages) == 2


def test_upstream_failure_becomes_assistant_diagnostic(store):
    relay = FakeRelay(status_code=500, payload={"error": "Internal server error"})
    gateway = ProviderGateway({ProviderFamily.COMPLETION: relay, ProviderFamily.MESSAGE: FakeRelay()})
    session = ConversationSession(gateway, store)

    reply = session.send("hello")

    assert reply.role is ChatRole.ASSISTANT
    assert reply.content.startswith("Sorry, I encountered an error: OpenAI API error: Internal server error")
    assert len(relay.calls) == 1


def test_settings_are_read_on_every_call(gateway, completion_relay, message_relay, store):
    session = ConversationSession(gateway, store)
    session.send("one")
    store.save(Settings(api_key="sk-ant", ai_model="claude-3-sonnet"))
    session.send("two")

    assert len(completion_relay.calls) == 1
    assert len(message_relay.calls) == 1


def test_second_call_while_busy_is_rejected(store):
    class ReentrantRelay:
        def __init__(self):
            self.session = None
            self.error = None

        def send(self, envelope, api_key):
            try:
                self.session.send("again")
            except SessionBusyError as exc:
                self.error = exc
            return FakeRelay(payload=completion_payload("ok")).send(envelope, api_key)

    relay = ReentrantRelay()
    gateway = ProviderGateway({ProviderFamily.COMPLETION: relay, ProviderFamily.MESSAGE: FakeRelay()})
    session = ConversationSession(gateway, store)
    relay.session = session

    session.send("first")

    assert isinstance(relay.error, SessionBusyError)
    assert len(session.messages) == 2
    assert not session.busy


def test_generate_stores_last_result(store):
    relay = FakeRelay(
        payload=completion_payload("===LATEX_RESUME===\nDOC\n===IMPROVEMENTS===\nProjects: add one")
    )
    gateway = ProviderGateway({ProviderFamily.COMPLETION: relay, ProviderFamily.MESSAGE: FakeRelay()})
    session = ConversationSession(gateway, store, resume_text="CV text")

    result = session.generate("Backend Engineer")

    assert session.last_result is result
    assert result.improvements[0].category == "projects"
    assert session.messages == ()
    assert not session.busy


def test_generate_failure_propagates_and_releases_flag(gateway):
    session = ConversationSession(gateway, MemorySettingsStore(Settings(api_key="")))

    with pytest.raises(Exception, match="API key not configured"):
        session.generate("Backend Engineer")

    assert not session.busy
    assert session.last_result is None


def test_transport_exception_becomes_assistant_diagnostic():
    def handler(request):
        return httpx.Response(200, json={"content": [{"text": "unreachable"}]})

    relay = AnthropicRelay(client=httpx.Client(transport=httpx.MockTransport(handler)))
    gateway = ProviderGateway({ProviderFamily.COMPLETION: FakeRelay(), ProviderFamily.MESSAGE: relay})
    # A pasted smart quote cannot be encoded into the x-api-key header.
    store = MemorySettingsStore(Settings(api_key="sk-ant-’x", ai_model="claude-3-haiku"))
    session = ConversationSession(gateway, store)

    reply = session.send("hello")

    assert reply.role is ChatRole.ASSISTANT
    assert reply.content.startswith("Sorry, I encountered an error:")
    assert [m.role for m in session.messages] == [ChatRole.USER, ChatRole.ASSISTANT]
    assert not session.busy
