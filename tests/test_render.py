from llm.improvements import classify_improvements
from render.latex import TEX_FILENAME, export_tex
from render.markdown import (
    NO_IMPROVEMENTS_MESSAGE,
    improvements_markdown,
    transcript_markdown,
)
from schemas.chat import ChatMessage, ChatRole


def test_export_tex_writes_document(tmp_path):
    path = export_tex("\\documentclass{resume}", tmp_path / "out")

    assert path.name == TEX_FILENAME == "tailored-resume.tex"
    assert path.read_text(encoding="utf-8") == "\\documentclass{resume}"


def test_improvements_markdown_groups_known_categories_first():
    records = classify_improvements("Summary: tighten\n\nSkills: add React\n\nATS: use keywords")

    rendered = improvements_markdown(records)

    assert "| 1 | 0 | 0 | 2 |" in rendered
    assert rendered.index("Skills Analysis & Enhancements") < rendered.index("**Summary: tighten**")
    assert "**ATS: use keywords**" in rendered


def test_improvements_markdown_empty():
    assert improvements_markdown([]) == NO_IMPROVEMENTS_MESSAGE


def test_transcript_markdown_labels_speakers():
    rendered = transcript_markdown(
        [
            ChatMessage(role=ChatRole.USER, content="Hi"),
            ChatMessage(role=ChatRole.ASSISTANT, content="Hello!"),
        ]
    )

    assert rendered.startswith("**You:**")
    assert "**Assistant:**\n\nHello!" in rendered
