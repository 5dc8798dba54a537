"""Document format detection and upload validation."""

import mimetypes
from typing import Optional

from resume_extractor.logger import get_logger
from resume_extractor.models import DetectedFormat, UploadedDocument

logger = get_logger(__name__)


PDF_SIGNATURE = b"%PDF-"
ZIP_SIGNATURE = b"PK\x03\x04"
SNIFF_BYTES = 1024

SUPPORTED_EXTENSIONS = {"pdf", "docx", "txt"}

MIME_FORMATS = {
    "application/pdf": DetectedFormat.PDF,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": DetectedFormat.DOCX,
    "text/plain": DetectedFormat.TXT,
}


class FormatDetector:
    """Detects the format of an uploaded resume."""

    def detect(self, document: UploadedDocument) -> DetectedFormat:
        """Detect format from magic bytes, then extension, then MIME type.

        Never raises; anything unrecognised is handled as plain text.
        """
        sniffed = self.sniff(document.content)
        from_mime = self._format_from_mime(document)
        if sniffed:
            detected, source = sniffed, "signature"
        elif document.extension in SUPPORTED_EXTENSIONS:
            detected, source = DetectedFormat(document.extension), "extension"
        elif from_mime is not None:
            detected, source = from_mime, "mime_type"
        else:
            detected, source = DetectedFormat.TXT, "default"

        logger.debug(
            "Document format detected",
            extra_data={
                "file_name": document.file_name,
                "detected_format": detected.value,
                "source": source,
                "declared_mime_type": document.mime_type,
                "file_size_bytes": document.size,
            },
        )
        return detected

    def ensure_supported(self, document: UploadedDocument) -> None:
        """Reject uploads declared as some other document type.

        A file whose extension is not pdf/docx/txt is only accepted when its
        bytes identify it as a PDF or DOCX anyway. Files without an
        extension are accepted and handled as text.

        Raises:
            ValueError: If the upload is not a supported format
        """
        extension = document.extension
        if not extension or extension in SUPPORTED_EXTENSIONS:
            return
        if self.sniff(document.content):
            return

        logger.warning(
            "Unsupported document format",
            extra_data={
                "file_name": document.file_name,
                "extension": extension,
                "declared_mime_type": document.mime_type,
            },
        )
        raise ValueError(
            f"Unsupported file format: {extension}. "
            "Please upload a PDF, DOCX, or TXT file."
        )

    @staticmethod
    def sniff(content: bytes) -> Optional[DetectedFormat]:
        """Detect format from file signature/magic bytes."""
        head = content[:SNIFF_BYTES]
        # PDF readers tolerate junk before the header within the first 1KB
        if PDF_SIGNATURE in head:
            return DetectedFormat.PDF
        if head.startswith(ZIP_SIGNATURE):
            # DOCX files are ZIP archives
            return DetectedFormat.DOCX
        return None

    @staticmethod
    def _format_from_mime(document: UploadedDocument) -> Optional[DetectedFormat]:
        mime_type = (document.mime_type or "").split(";")[0].strip().lower()
        if not mime_type:
            mime_type, _ = mimetypes.guess_type(document.file_name)
        return MIME_FORMATS.get(mime_type or "")
