from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, Field, validator

NO_IMPROVEMENTS = "No specific improvements identified."


class ImprovementCategory(str, Enum):
    SKILLS = "skills"
    PROJECTS = "projects"
    EXPERIENCE = "experience"
    EDUCATION = "education"
    SUMMARY = "summary"
    GENERAL = "general"


class GenerationResult(BaseModel):
    document: str = ""
    improvements_raw: str = Field(
        default=NO_IMPROVEMENTS,
        description="Free-form improvement notes following the document.",
    )

    class Config:
        frozen = True


class ImprovementRecord(BaseModel):
    ordinal: int = Field(..., ge=1, description="1-based position in the reply.")
    title: str
    body: str
    category: ImprovementCategory = ImprovementCategory.GENERAL

    class Config:
        frozen = True

    @validator("body")
    def body_not_blank(cls, v: str) -> str:  # type: ignore
        if not v.strip():
            raise ValueError("improvement body must not be empty")
        return v


class TailoredResume(BaseModel):
    generation: GenerationResult
    improvements: List[ImprovementRecord] = Field(default_factory=list)

    @property
    def document(self) -> str:
        return self.generation.document
