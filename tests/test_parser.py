import pytest

from resume_extractor import FALLBACK_TAG, parse_document
from resume_extractor.config import ExtractorConfig
from resume_extractor.diagnostics import AttemptLog
from resume_extractor.models import DetectedFormat


def test_parse_from_path(tmp_path, resume_text):
    path = tmp_path / "resume.txt"
    path.write_text(resume_text, encoding="utf-8")

    result = parse_document(file_path=str(path))

    assert result.provenance_tag == "txt-utf8"
    assert result.file_name == "resume.txt"


def test_parse_pdf_bytes(pdf_bytes):
    log = AttemptLog()
    result = parse_document(
        file_bytes=pdf_bytes,
        file_name="resume.pdf",
        config=ExtractorConfig(retry_backoff_seconds=0),
        recorder=log,
    )

    assert result.detected_format is DetectedFormat.PDF
    assert result.provenance_tag == "pdf-layout"
    assert [a.strategy for a in log.attempts()] == ["pdf-layout"]


def test_parse_docx_bytes_with_guessed_mime(docx_bytes):
    result = parse_document(file_bytes=docx_bytes, file_name="cv.docx")
    assert result.provenance_tag == "docx-structured"


def test_parse_fallback(tmp_path):
    path = tmp_path / "blank.txt"
    path.write_bytes(b"X")

    result = parse_document(file_path=str(path))

    assert result.provenance_tag == FALLBACK_TAG
    assert not result.success


def test_requires_input():
    with pytest.raises(ValueError, match="Must provide"):
        parse_document()


def test_rejects_both_inputs(tmp_path):
    with pytest.raises(ValueError, match="not both"):
        parse_document(file_path=str(tmp_path / "a.txt"), file_bytes=b"x", file_name="a.txt")


def test_requires_file_name_with_bytes():
    with pytest.raises(ValueError, match="file_name is required"):
        parse_document(file_bytes=b"Experience")


def test_missing_file(tmp_path):
    with pytest.raises(ValueError, match="File not found"):
        parse_document(file_path=str(tmp_path / "missing.pdf"))
