from __future__ import annotations

from typing import Sequence

from llm.improvements import category_counts, group_by_category
from schemas.chat import ChatMessage, ChatRole
from schemas.resume import ImprovementCategory, ImprovementRecord

NO_IMPROVEMENTS_MESSAGE = (
    "The resume appears to be well-structured and complete for this job description."
)
GROUP_HEADINGS = {
    ImprovementCategory.SKILLS: "Skills Analysis & Enhancements",
    ImprovementCategory.PROJECTS: "Projects Analysis & Additions",
    ImprovementCategory.EXPERIENCE: "Experience Enhancements",
}
SPEAKERS = {ChatRole.USER: "You", ChatRole.ASSISTANT: "Assistant", ChatRole.SYSTEM: "System"}


def transcript_markdown(messages: Sequence[ChatMessage]) -> str:
    if not messages:
        return "_Ask anything about your resume to get started._"
    blocks = [f"**{SPEAKERS[m.role]}:**\n\n{m.content}" for m in messages]
    return "\n\n---\n\n".join(blocks)


def improvements_markdown(records: Sequence[ImprovementRecord]) -> str:
    if not records:
        return NO_IMPROVEMENTS_MESSAGE

    counts = category_counts(records)
    lines = [
        "| Skills | Projects | Experience | Other |",
        "| --- | --- | --- | --- |",
        f"| {counts['skills']} | {counts['projects']} | {counts['experience']} | {counts['other']} |",
        "",
    ]
    for category, members in group_by_category(records).items():
        heading = GROUP_HEADINGS.get(category)
        if heading:
            lines.append(f"### {heading}")
            lines.append("")
        for record in members:
            lines.append(f"**{record.title}**")
            lines.append("")
            lines.append(record.body)
            lines.append("")
    return "\n".join(lines).strip()
