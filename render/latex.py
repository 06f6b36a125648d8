from __future__ import annotations

import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

TEX_FILENAME = "tailored-resume.tex"


def latexmk_available() -> bool:
    return shutil.which("latexmk") is not None


def export_tex(latex_content: str, output_dir: Optional[Path] = None) -> Path:
    """Write the generated document as ``tailored-resume.tex`` and return its path."""
    if output_dir is None:
        output_dir = Path(tempfile.mkdtemp(prefix="resumeai_"))
    output_dir.mkdir(parents=True, exist_ok=True)
    tex_path = output_dir / TEX_FILENAME
    tex_path.write_text(latex_content, encoding="utf-8")
    return tex_path


def compile_latex(latex_content: str, output_dir: Path) -> Path:
    """
    Compile LaTeX content using latexmk. Raises if latexmk is missing.

    The generated documents use ``\\documentclass{resume}``, so resume.cls has
    to be resolvable by the TeX installation.
    """
    if not latexmk_available():
        raise RuntimeError("latexmk is not installed. Install TeX Live or MikTeX.")

    tex_path = export_tex(latex_content, output_dir)
    subprocess.run(
        ["latexmk", "-pdf", "-interaction=nonstopmode", tex_path.name],
        cwd=output_dir,
        check=True,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    )
    return tex_path.with_suffix(".pdf")


def compile_to_tempfile(latex_content: str) -> Optional[Path]:
    if not latexmk_available():
        return None
    tmpdir = Path(tempfile.mkdtemp(prefix="resumeai_"))
    try:
        return compile_latex(latex_content, tmpdir)
    except subprocess.CalledProcessError as exc:  # pragma: no cover - external tool
        logger.error("latexmk failed: %s", exc.stderr)
        raise
