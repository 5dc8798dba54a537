import pytest

from resume_extractor.config import ValidationConfig
from resume_extractor.models import DetectedFormat
from resume_extractor.sample import SAMPLE_RESUME
from resume_extractor.validation import count_section_markers, is_valid


def test_rejects_short_text():
    assert not is_valid("hi", "txt")


def test_accepts_padded_markers():
    assert is_valid(" " * 60 + "Experience Education Skills", "txt")


def test_rejects_mostly_non_printable_prefix():
    text = "\x00" * 900 + "Experience Education Skills " + "a" * 72
    assert not is_valid(text, "txt")


def test_rejects_empty_and_none():
    assert not is_valid("", "pdf")
    assert not is_valid(None, "pdf")


def test_pdf_threshold_is_lenient():
    text = "Some PDF text. Skills: Python"
    assert len(text) < 50
    assert is_valid(text, DetectedFormat.PDF)
    assert not is_valid(text, DetectedFormat.TXT)


def test_non_pdf_needs_two_distinct_markers():
    text = "Experience " * 10
    assert not is_valid(text, "docx")
    assert is_valid(text, "pdf")


def test_tabs_and_newlines_count_as_printable():
    text = "Experience\tEducation\n" * 10
    assert is_valid(text, "txt")


def test_non_ascii_letters_are_printable():
    text = "Expérience professionnelle. Education: Université de Genève. Skills: Python"
    assert is_valid(text, "txt")


def test_custom_config():
    config = ValidationConfig(default_min_length=10, default_required_markers=1)
    assert is_valid("Skills: Python", "txt", config)


def test_unknown_format_uses_default_thresholds():
    assert not is_valid("Skills: Python, Go, SQL", "unknown")


@pytest.mark.parametrize("fmt", list(DetectedFormat))
def test_sample_resume_passes_gate_for_every_format(fmt):
    assert is_valid(SAMPLE_RESUME, fmt)


def test_count_section_markers_is_case_insensitive_and_distinct():
    markers = ("experience", "education", "skills")
    assert count_section_markers("EXPERIENCE experience Skills", markers) == 2
