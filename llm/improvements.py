"""
Turn the free-form improvements text of a generation reply into records.

Everything here is a pure function of its input text: segmentation, title
inference and the ordered keyword table that picks a category.
"""
from __future__ import annotations

import re
from typing import Dict, List, Sequence, Tuple

from schemas.resume import ImprovementCategory, ImprovementRecord

# A blank line, or a newline followed by a bullet marker, starts a new segment.
_SEGMENT_BREAK = re.compile(r"\n\s*\n|\n[•\-*]\s")
_LEADING_BULLET = re.compile(r"^[•\-*]\s+")
_LEADING_MARKUP = re.compile(r"^[#*\s]+")
_TRAILING_PUNCTUATION = re.compile(r"[\s:•\-*]+$")

TITLE_MAX_LENGTH = 50
SYNTHETIC_TITLE_WORDS = 3
SECTION_KEYWORDS = (
    "summary",
    "skills",
    "experience",
    "education",
    "projects",
    "improvements",
    "suggestions",
    "analysis",
)
_SECTION_HEADING = re.compile(r"^(" + "|".join(SECTION_KEYWORDS) + r")", re.IGNORECASE)

# Order matters: the first group with a hit wins.
CATEGORY_RULES: Tuple[Tuple[Tuple[str, ...], ImprovementCategory], ...] = (
    (("skill", "technical"), ImprovementCategory.SKILLS),
    (("project",), ImprovementCategory.PROJECTS),
    (("experience", "work"), ImprovementCategory.EXPERIENCE),
    (("education",), ImprovementCategory.EDUCATION),
    (("summary", "overview"), ImprovementCategory.SUMMARY),
)

DISPLAY_ORDER = (
    ImprovementCategory.SKILLS,
    ImprovementCategory.PROJECTS,
    ImprovementCategory.EXPERIENCE,
)


def split_segments(text: str) -> List[str]:
    normalized = (text or "").replace("\r\n", "\n")
    segments = []
    for chunk in _SEGMENT_BREAK.split(normalized):
        chunk = _LEADING_BULLET.sub("", chunk.strip()).strip()
        if chunk:
            segments.append(chunk)
    return segments


def categorize(title: str) -> ImprovementCategory:
    lowered = title.lower()
    for keywords, category in CATEGORY_RULES:
        if any(keyword in lowered for keyword in keywords):
            return category
    return ImprovementCategory.GENERAL


def _title_and_body(segment: str, ordinal: int) -> Tuple[str, str]:
    lines = segment.split("\n")
    first_line = _LEADING_MARKUP.sub("", lines[0]).strip()

    if (
        first_line.endswith(":")
        or len(first_line) < TITLE_MAX_LENGTH
        or _SECTION_HEADING.match(first_line)
    ):
        title = _TRAILING_PUNCTUATION.sub("", first_line)
        body = "\n".join(lines[1:]).strip()
    else:
        title = " ".join(first_line.split()[:SYNTHETIC_TITLE_WORDS]) + "..."
        body = segment

    if not title:
        title = f"Improvement {ordinal}"
        body = segment
    # A one-line segment is both heading and content.
    if not body:
        body = segment
    return title, body


def classify_improvements(text: str) -> List[ImprovementRecord]:
    records = []
    for ordinal, segment in enumerate(split_segments(text), start=1):
        title, body = _title_and_body(segment, ordinal)
        records.append(
            ImprovementRecord(
                ordinal=ordinal, title=title, body=body, category=categorize(title)
            )
        )
    return records


def group_by_category(
    records: Sequence[ImprovementRecord],
) -> Dict[ImprovementCategory, List[ImprovementRecord]]:
    """Group for display: skills, projects and experience first, then the rest.

    Records keep their ordinals and relative order inside each group.
    """
    grouped: Dict[ImprovementCategory, List[ImprovementRecord]] = {}
    for category in DISPLAY_ORDER:
        members = [r for r in records if r.category == category]
        if members:
            grouped[category] = members
    for record in records:
        if record.category not in DISPLAY_ORDER:
            grouped.setdefault(record.category, []).append(record)
    return grouped


def category_counts(records: Sequence[ImprovementRecord]) -> Dict[str, int]:
    counts = {"skills": 0, "projects": 0, "experience": 0, "other": 0}
    for record in records:
        if record.category in DISPLAY_ORDER:
            counts[record.category.value] += 1
        else:
            counts["other"] += 1
    return counts
