"""High-level API for resume extraction."""

import mimetypes
from pathlib import Path
from typing import Optional

from resume_extractor.config import ExtractorConfig
from resume_extractor.diagnostics import AttemptRecorder
from resume_extractor.handler import DocumentHandler
from resume_extractor.models import ExtractionResult, UploadedDocument


def parse_document(
    file_path: Optional[str] = None,
    file_bytes: Optional[bytes] = None,
    file_name: Optional[str] = None,
    mime_type: Optional[str] = None,
    config: Optional[ExtractorConfig] = None,
    recorder: Optional[AttemptRecorder] = None,
) -> ExtractionResult:
    """Extract resume text from a file path or raw bytes.

    Args:
        file_path: Path to resume file (alternative to file_bytes)
        file_bytes: Raw resume bytes (alternative to file_path)
        file_name: Original filename (required if using file_bytes)
        mime_type: MIME type hint (optional, guessed from the name if omitted)
        config: Extraction configuration (optional, uses defaults if omitted)
        recorder: Optional sink receiving every strategy attempt

    Returns:
        ExtractionResult with text, provenance tag and warnings

    Raises:
        ValueError: If neither file_path nor file_bytes provided, or if file_bytes
            provided without file_name
        EmptyFileError: If the file is empty
        FileTooLargeError: If the file exceeds the size cap
        UnsupportedFormatError: If the file is not a PDF, DOCX or TXT document

    Examples:
        >>> result = parse_document(file_path="resume.pdf")
        >>> if result.used_fallback:
        ...     print(result.warnings[0])

        >>> with open("resume.docx", "rb") as f:
        ...     result = parse_document(file_bytes=f.read(), file_name="resume.docx")
    """
    if file_path and file_bytes:
        raise ValueError("Provide either file_path or file_bytes, not both")

    if not file_path and file_bytes is None:
        raise ValueError("Must provide either file_path or file_bytes")

    if file_path:
        path = Path(file_path)
        if not path.exists():
            raise ValueError(f"File not found: {file_path}")

        file_bytes = path.read_bytes()
        file_name = path.name

    if not file_name:
        raise ValueError("file_name is required when using file_bytes")

    if not mime_type:
        guessed_type, _ = mimetypes.guess_type(file_name)
        mime_type = guessed_type or ""

    handler = DocumentHandler(config=config, recorder=recorder)
    return handler.extract(
        UploadedDocument(content=file_bytes, file_name=file_name, mime_type=mime_type)
    )
