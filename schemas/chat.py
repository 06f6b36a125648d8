from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ChatMessage(BaseModel):
    role: ChatRole
    content: str

    class Config:
        frozen = True

    def to_wire(self) -> dict:
        return {"role": self.role.value, "content": self.content}
