from __future__ import annotations

from pydantic import BaseModel, Field, validator

DEFAULT_MODEL = "gpt-4"
DEFAULT_SYSTEM_PROMPT = (
    "You are an expert resume writer and career advisor. Help users optimize "
    "their resumes for ATS systems and specific job descriptions. Provide "
    "actionable feedback and suggestions."
)
AVAILABLE_MODELS = [
    "gpt-4",
    "gpt-4-turbo",
    "gpt-3.5-turbo",
    "claude-3-sonnet",
    "claude-3-haiku",
]


class Settings(BaseModel):
    api_key: str = ""
    ai_model: str = DEFAULT_MODEL
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=2000, ge=100, le=4000)
    # Stored and editable; nothing schedules saves from it.
    auto_save: bool = True

    @validator("api_key", pre=True)
    def strip_api_key(cls, v):  # type: ignore
        if v is None:
            return ""
        return str(v).strip()

    @validator("ai_model", pre=True)
    def default_model(cls, v):  # type: ignore
        if v is None or not str(v).strip():
            return DEFAULT_MODEL
        return str(v).strip()
