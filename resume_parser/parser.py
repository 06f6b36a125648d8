from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

MAX_FILE_BYTES = 10 * 1024 * 1024
MIN_TEXT_LENGTH = 10
RESUME_KEYWORDS = (
    "experience",
    "education",
    "skills",
    "work",
    "job",
    "position",
    "company",
    "university",
    "degree",
)
SUPPORTED_SUFFIXES = (".docx", ".pdf")


class DocumentIngestionError(ValueError):
    """The uploaded resume could not be turned into text."""


@dataclass
class ResumeParseResult:
    raw_text: str
    method: str
    metadata: Optional[dict] = None


def _extract_with_python_docx(path: str) -> Optional[str]:
    try:
        import docx  # type: ignore
    except Exception as exc:  # pragma: no cover - import guard
        logger.info("python-docx unavailable: %s", exc)
        return None

    try:
        document = docx.Document(path)
    except Exception as exc:
        logger.warning("python-docx failed: %s", exc)
        return None

    chunks = [p.text for p in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            chunks.append(" | ".join(cell.text for cell in row.cells))
    text = "\n".join(chunks).strip()
    return text or None


def _extract_with_pdfplumber(path: str) -> Optional[str]:
    try:
        import pdfplumber
    except Exception as exc:  # pragma: no cover - import guard
        logger.info("pdfplumber unavailable: %s", exc)
        return None

    try:
        text_chunks = []
        with pdfplumber.open(path) as pdf:
            for page in pdf.pages:
                text_chunks.append(page.extract_text() or "")
        text = "\n".join(text_chunks).strip()
        return text or None
    except Exception as exc:  # pragma: no cover - safety
        logger.warning("pdfplumber failed, will fallback: %s", exc)
        return None


def _extract_with_pymupdf(path: str) -> Optional[str]:
    try:
        import fitz  # type: ignore
    except Exception as exc:  # pragma: no cover - import guard
        logger.info("pymupdf unavailable: %s", exc)
        return None

    try:
        doc = fitz.open(path)
        text_chunks = [page.get_text() for page in doc]
        text = "\n".join(text_chunks).strip()
        return text or None
    except Exception as exc:  # pragma: no cover - safety
        logger.warning("pymupdf failed: %s", exc)
        return None


def clean_text(text: str) -> str:
    """Collapse runs of spaces and blank lines."""
    text = re.sub(r"[ \t\f\v]+", " ", text)
    text = re.sub(r"[ \t]*\n\s*", "\n", text)
    return text.strip()


def looks_like_resume(text: str) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in RESUME_KEYWORDS)


def parse_resume(path: str) -> ResumeParseResult:
    """
    Extract resume text from a .docx (python-docx) or .pdf (pdfplumber, then pymupdf).

    Raises DocumentIngestionError when the file is too large, has an
    unsupported type, or yields no meaningful text.
    """
    file_path = Path(path)
    suffix = file_path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise DocumentIngestionError("Please upload a valid DOCX or PDF file.")
    if file_path.stat().st_size > MAX_FILE_BYTES:
        raise DocumentIngestionError(
            "Resume file is too large. Please upload a file smaller than 10MB."
        )

    if suffix == ".docx":
        text = _extract_with_python_docx(path)
        method_used = "python-docx"
    else:
        text = _extract_with_pdfplumber(path)
        method_used = "pdfplumber"
        if not text:
            text = _extract_with_pymupdf(path)
            method_used = "pymupdf"

    cleaned = clean_text(text or "")
    if len(cleaned) < MIN_TEXT_LENGTH:
        raise DocumentIngestionError(
            "Could not extract meaningful text from the resume. "
            "The file might be corrupted or empty."
        )
    if not looks_like_resume(cleaned):
        logger.warning("%s may not be a resume - continuing anyway", file_path.name)

    logger.info("Parsed %s with %s (%s chars)", file_path.name, method_used, len(cleaned))
    return ResumeParseResult(
        raw_text=cleaned, method=method_used, metadata={"path": path, "name": file_path.name}
    )
