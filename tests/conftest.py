import io

import fitz
import pytest
from docx import Document

from resume_extractor.config import ExtractorConfig
from resume_extractor.diagnostics import AttemptLog
from resume_extractor.models import UploadedDocument


def make_pdf(lines, start_y=72, line_gap=28):
    """Single-page PDF with each line drawn at a known baseline."""
    pdf = fitz.open()
    page = pdf.new_page()
    for index, line in enumerate(lines):
        page.insert_text((72, start_y + index * line_gap), line, fontsize=11)
    content = pdf.tobytes()
    pdf.close()
    return content


def make_docx():
    document = Document()
    document.add_heading("Experience", level=1)
    document.add_paragraph("Senior Engineer at Acme Corp building payment services since 2019.")
    document.add_paragraph("Led the migration to Kubernetes", style="List Bullet")
    document.add_paragraph("Mentored four junior developers", style="List Bullet")
    document.add_heading("Education", level=1)
    document.add_paragraph("BSc Computer Science, University of Somewhere")
    table = document.add_table(rows=2, cols=2)
    table.cell(0, 0).text = "Skills"
    table.cell(0, 1).text = "Python, Go"
    table.cell(1, 0).text = "Languages"
    table.cell(1, 1).text = "English, German"

    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


RESUME_TEXT = (
    "Jane Smith\n"
    "Software Engineer\n\n"
    "EXPERIENCE\n"
    "Backend developer at Example Ltd, 2019 - present.\n\n"
    "EDUCATION\n"
    "BSc Computer Science\n"
)


@pytest.fixture
def fast_config():
    """Default thresholds, no backoff sleeps."""
    return ExtractorConfig(retry_backoff_seconds=0, primary_timeout_seconds=10.0)


@pytest.fixture
def attempt_log():
    return AttemptLog()


@pytest.fixture
def pdf_bytes():
    return make_pdf(["Jane Smith - Software Engineer", "SKILLS", "Python, Go"])


@pytest.fixture
def pdf_document(pdf_bytes):
    return UploadedDocument(content=pdf_bytes, file_name="resume.pdf", mime_type="application/pdf")


@pytest.fixture
def docx_bytes():
    return make_docx()


@pytest.fixture
def docx_document(docx_bytes):
    return UploadedDocument(content=docx_bytes, file_name="resume.docx")


@pytest.fixture
def txt_document():
    return UploadedDocument(content=RESUME_TEXT.encode("utf-8"), file_name="resume.txt")


@pytest.fixture
def resume_text():
    return RESUME_TEXT
