from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from config.store import SettingsStore
from schemas.chat import ChatMessage, ChatRole
from schemas.resume import TailoredResume
from schemas.settings import Settings

from .client import ProviderGateway
from .errors import ConfigurationError, GatewayError, SessionBusyError
from .pipeline import generate_tailored_resume
from .prompts import build_chat_messages

logger = logging.getLogger(__name__)

MISSING_KEY_REPLY = (
    "I understand your request. However, to provide accurate resume analysis and job "
    "recommendations, please configure your AI API key in the Settings page."
)


def error_reply(error: Exception) -> str:
    if isinstance(error, ConfigurationError):
        return MISSING_KEY_REPLY
    return (
        f"Sorry, I encountered an error: {error}. "
        "Please check your API configuration in Settings."
    )


class ConversationSession:
    """
    Transcript of one resume conversation plus the resume text it is about.

    At most one model call is outstanding at a time; a second call made while
    one is in flight raises SessionBusyError. Settings are loaded from the
    store at the start of every call.
    """

    def __init__(
        self,
        gateway: ProviderGateway,
        store: SettingsStore,
        resume_text: Optional[str] = None,
    ):
        self.gateway = gateway
        self.store = store
        self.resume_text = resume_text
        self.last_result: Optional[TailoredResume] = None
        self._messages: List[ChatMessage] = []
        self._busy = False

    @property
    def messages(self) -> Tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def busy(self) -> bool:
        return self._busy

    def attach_resume(self, resume_text: Optional[str]) -> None:
        self.resume_text = resume_text or None

    def _acquire(self) -> None:
        if self._busy:
            raise SessionBusyError()
        self._busy = True

    def send(self, text: str) -> ChatMessage:
        """Append the user's turn, ask the model, append and return the reply.

        Model failures do not raise; they come back as an assistant turn
        describing the problem.
        """
        self._acquire()
        try:
            settings = self.store.load()
            history = list(self._messages)
            self._messages.append(ChatMessage(role=ChatRole.USER, content=text))

            messages = build_chat_messages(
                settings.system_prompt, history, text, self.resume_text
            )
            try:
                reply = self._ask(messages, settings)
            except Exception as exc:
                # Transport-level failures, e.g. a key the header encoder rejects.
                logger.exception("Error sending message")
                reply = ChatMessage(role=ChatRole.ASSISTANT, content=error_reply(exc))
            self._messages.append(reply)
            return reply
        finally:
            self._busy = False

    def _ask(self, messages: List[ChatMessage], settings: Settings) -> ChatMessage:
        result = self.gateway.complete(messages, settings)
        if result.ok:
            return ChatMessage(role=ChatRole.ASSISTANT, content=result.text or "")
        logger.error("Error sending message: %s", result.error)
        return ChatMessage(role=ChatRole.ASSISTANT, content=error_reply(result.error))

    def generate(self, job_description: str) -> TailoredResume:
        """Generate a tailored resume; failures propagate to the caller."""
        self._acquire()
        try:
            settings = self.store.load()
            result = generate_tailored_resume(
                self.gateway, settings, job_description, self.resume_text
            )
        except GatewayError as exc:
            logger.error("Error generating resume: %s", exc)
            raise
        finally:
            self._busy = False
        self.last_result = result
        return result
