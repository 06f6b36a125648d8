from __future__ import annotations

import logging
from typing import Optional

from schemas.resume import TailoredResume
from schemas.settings import Settings

from .client import ProviderGateway
from .extract import extract_generation
from .improvements import classify_improvements
from .prompts import build_generation_messages

logger = logging.getLogger(__name__)


def generate_tailored_resume(
    gateway: ProviderGateway,
    settings: Settings,
    job_description: str,
    existing_resume: Optional[str] = None,
) -> TailoredResume:
    """Run prompt -> model -> extract -> classify for one job description.

    Raises ValueError for a blank job description and the gateway's
    ConfigurationError/UpstreamError when the model call fails.
    """
    if not job_description or not job_description.strip():
        raise ValueError("Job description required.")

    if existing_resume:
        logger.info("Generating with existing resume content (%s chars)", len(existing_resume))
    else:
        logger.info("Generating without existing resume content")

    messages = build_generation_messages(job_description, existing_resume, settings.system_prompt)
    raw = gateway.complete(messages, settings).unwrap()

    generation = extract_generation(raw)
    improvements = classify_improvements(generation.improvements_raw)
    return TailoredResume(generation=generation, improvements=improvements)
