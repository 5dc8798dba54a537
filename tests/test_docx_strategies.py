import io
import zipfile

import pytest
from docx import Document

from resume_extractor.docx_strategies import (
    extract_decoded_text,
    extract_structured_text,
    extract_xml_text,
)
from resume_extractor.exceptions import StrategyFailedError


def make_zip(files):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, data in files.items():
            archive.writestr(name, data)
    return buffer.getvalue()


def test_structured_text_keeps_semantic_grouping(docx_bytes):
    assert extract_structured_text(docx_bytes) == (
        "EXPERIENCE\n\n"
        "Senior Engineer at Acme Corp building payment services since 2019.\n\n"
        "• Led the migration to Kubernetes\n"
        "• Mentored four junior developers\n\n"
        "EDUCATION\n\n"
        "BSc Computer Science, University of Somewhere\n\n"
        "Skills\tPython, Go\n"
        "Languages\tEnglish, German"
    )


def test_structured_text_rejects_non_docx():
    with pytest.raises(Exception):
        extract_structured_text(b"not a zip archive")


def test_xml_text_reads_document_xml(docx_bytes):
    text = extract_xml_text(docx_bytes)
    paragraphs = text.split("\n\n")
    assert paragraphs[0] == "Experience"
    assert "Led the migration to Kubernetes" in paragraphs
    assert "Python, Go" in paragraphs


def test_xml_text_falls_back_to_regex_on_broken_xml():
    content = make_zip(
        {"word/document.xml": b"<w:document><w:body><w:p><w:r><w:t>Skills here</w:t>"}
    )
    assert extract_xml_text(content) == "Skills here"


def test_xml_text_requires_document_xml():
    content = make_zip({"word/styles.xml": b"<styles/>"})
    with pytest.raises(StrategyFailedError):
        extract_xml_text(content)


def test_decoded_text_handles_misnamed_plain_text():
    content = "Experience &amp; Education\r\nSkills".encode("utf-8")
    assert extract_decoded_text(content) == "Experience & Education\nSkills"


def test_decoded_text_rejects_real_docx(docx_bytes):
    with pytest.raises(StrategyFailedError):
        extract_decoded_text(docx_bytes)


def test_structured_text_collapses_space_runs_but_keeps_table_tabs():
    document = Document()
    document.add_paragraph("Senior   Engineer at  Acme    Corp")
    table = document.add_table(rows=1, cols=2)
    table.cell(0, 0).text = "Skills"
    table.cell(0, 1).text = "Python,   Go"
    buffer = io.BytesIO()
    document.save(buffer)

    text = extract_structured_text(buffer.getvalue())

    assert text == "Senior Engineer at Acme Corp\n\nSkills\tPython, Go"


def test_structured_text_refuses_oversized_archive(docx_bytes):
    with pytest.raises(StrategyFailedError, match="byte limit"):
        extract_structured_text(docx_bytes, max_uncompressed_bytes=1024)


def test_xml_text_refuses_oversized_document_xml():
    content = make_zip({"word/document.xml": b"<w:document/>" + b" " * 4096})
    with pytest.raises(StrategyFailedError, match="byte limit"):
        extract_xml_text(content, max_uncompressed_bytes=1024)
