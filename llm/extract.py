from __future__ import annotations

import logging
import re

from schemas.resume import NO_IMPROVEMENTS, GenerationResult

from .prompts import IMPROVEMENTS_MARKER, RESUME_MARKER

logger = logging.getLogger(__name__)

_TAGGED_REPLY = re.compile(
    re.escape(RESUME_MARKER) + r"(.*?)" + re.escape(IMPROVEMENTS_MARKER) + r"(.*)\Z",
    re.DOTALL,
)


def extract_generation(raw: str) -> GenerationResult:
    """
    Split a generation reply into the LaTeX document and the improvement notes.

    Never raises: a reply that does not carry both markers, in order, is kept
    whole as the document and the notes fall back to a fixed sentence.
    """
    raw = raw or ""
    match = _TAGGED_REPLY.search(raw)
    if match is None:
        logger.warning(
            "Reply is missing %s/%s markers; using the whole reply as the document (%s chars)",
            RESUME_MARKER,
            IMPROVEMENTS_MARKER,
            len(raw),
        )
        return GenerationResult(document=raw, improvements_raw=NO_IMPROVEMENTS)

    return GenerationResult(
        document=match.group(1).strip(),
        improvements_raw=match.group(2).strip(),
    )
