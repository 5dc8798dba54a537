import base64

import pytest

from resume_extractor.exceptions import EmptyFileError, InvalidBase64Error
from resume_extractor.handler import DocumentHandler
from resume_extractor.models import DetectedFormat, UploadedDocument
from resume_extractor.sample import FALLBACK_TAG


@pytest.fixture
def handler(fast_config, attempt_log):
    return DocumentHandler(config=fast_config, recorder=attempt_log)


def test_primary_strategy_result_has_no_warnings(handler, txt_document):
    result = handler.extract(txt_document)

    assert result.success
    assert not result.used_fallback
    assert result.provenance_tag == "txt-utf8"
    assert result.warnings == []
    assert result.detected_format is DetectedFormat.TXT
    assert result.character_count == len(result.text)
    assert result.file_name == "resume.txt"


def test_fallback_is_flagged(handler):
    result = handler.extract(UploadedDocument(content=b"X", file_name="notes.txt"))

    assert not result.success
    assert result.used_fallback
    assert result.provenance_tag == FALLBACK_TAG
    assert len(result.warnings) == 1
    assert "notes.txt" in result.warnings[0]
    assert "sample resume" in result.warnings[0]


def test_secondary_strategy_gets_soft_warning(handler, resume_text):
    result = handler.extract(
        UploadedDocument(content=resume_text.encode("utf-8"), file_name="resume.docx")
    )

    assert result.success
    assert result.provenance_tag == "docx-text"
    assert "docx-text" in result.warnings[0]


def test_extract_encoded(handler, resume_text):
    encoded = base64.b64encode(resume_text.encode("utf-8")).decode("ascii")

    result = handler.extract_encoded(encoded, "text/plain", "resume.txt")

    assert result.provenance_tag == "txt-utf8"
    assert "EXPERIENCE" in result.text


def test_invalid_base64(handler):
    with pytest.raises(InvalidBase64Error):
        handler.extract_encoded("not base64!!", "text/plain", "resume.txt")


def test_rejections_propagate(handler):
    with pytest.raises(EmptyFileError):
        handler.extract(UploadedDocument(content=b"", file_name="resume.txt"))


def test_to_dict(handler, txt_document):
    data = handler.extract(txt_document).to_dict(include_attempts=True)

    assert data["provenance_tag"] == "txt-utf8"
    assert data["detected_format"] == "txt"
    assert data["success"] is True
    (attempt,) = data["attempts"]
    assert attempt["strategy"] == "txt-utf8"
    assert attempt["success"] is True
    assert "text" not in attempt
    assert attempt["character_count"] == data["character_count"]


def test_to_dict_omits_attempts_by_default(handler, txt_document):
    assert "attempts" not in handler.extract(txt_document).to_dict()
