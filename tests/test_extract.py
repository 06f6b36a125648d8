from llm.extract import extract_generation
from schemas.resume import NO_IMPROVEMENTS


def test_extracts_both_segments_trimmed():
    raw = "Sure!\n===LATEX_RESUME===\n  \\documentclass{resume}\n\n===IMPROVEMENTS===\n\nSkills: add React\n"

    result = extract_generation(raw)

    assert result.document == "\\documentclass{resume}"
    assert result.improvements_raw == "Skills: add React"


def test_missing_improvements_marker_degrades_to_whole_reply(caplog):
    raw = "===LATEX_RESUME===\n\\documentclass{resume}"

    with caplog.at_level("WARNING"):
        result = extract_generation(raw)

    assert result.document == raw
    assert result.improvements_raw == NO_IMPROVEMENTS
    assert "missing" in caplog.text


def test_missing_resume_marker_degrades_to_whole_reply():
    raw = "Here you go\n===IMPROVEMENTS===\nAdd metrics"

    result = extract_generation(raw)

    assert result.document == raw
    assert result.improvements_raw == NO_IMPROVEMENTS


def test_markers_out_of_order_degrade():
    raw = "===IMPROVEMENTS===\nnotes\n===LATEX_RESUME===\ndoc"

    assert extract_generation(raw).improvements_raw == NO_IMPROVEMENTS


def test_empty_and_none_replies_never_fail():
    assert extract_generation("").document == ""
    assert extract_generation(None).improvements_raw == NO_IMPROVEMENTS


def test_improvements_run_to_end_of_text():
    raw = "===LATEX_RESUME===doc===IMPROVEMENTS===a\n\nb===IMPROVEMENTS===c"

    result = extract_generation(raw)

    assert result.document == "doc"
    assert result.improvements_raw == "a\n\nb===IMPROVEMENTS===c"
