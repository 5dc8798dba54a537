"""Attempt recorders and per-file diagnostics for extraction behaviour."""

import base64
import re
from collections import deque
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Optional, Protocol

from resume_extractor import pdf_strategies
from resume_extractor.exceptions import format_size
from resume_extractor.logger import get_logger
from resume_extractor.models import ExtractionAttempt, UploadedDocument
from resume_extractor.text_utils import control_ratio

logger = get_logger(__name__)

PDF_HEADER = b"%PDF-"
ZIP_SIGNATURE = b"PK"
MAX_SUPPORTED_PDF_VERSION = 1.7
HEADER_SCAN_BYTES = 1024
SIGNATURE_BYTES = 8
PRINTABLE_SCAN_BYTES = 100_000

_PDF_VERSION = re.compile(rb"%PDF-(\d+\.\d+)")
_PRINTABLE_CHUNK = re.compile(rb"[\x20-\x7e\r\n]{4,}")
_WORD_SIGNATURE = re.compile(r"^\w+$")


class AttemptRecorder(Protocol):
    """Sink receiving every strategy attempt made by the pipeline."""

    def record(self, attempt: ExtractionAttempt) -> None: ...


class AttemptLog:
    """Bounded in-memory log of the most recent extraction attempts.

    Purely diagnostic: dropping it changes nothing about extraction.
    """

    def __init__(self, max_entries: int = 50):
        self.max_entries = max_entries
        self._attempts: deque[ExtractionAttempt] = deque(maxlen=max_entries)
        self._lock = Lock()

    def record(self, attempt: ExtractionAttempt) -> None:
        with self._lock:
            self._attempts.append(attempt)

    def attempts(self, strategy: Optional[str] = None) -> list[ExtractionAttempt]:
        """Recorded attempts, oldest first, optionally for one strategy."""
        with self._lock:
            attempts = list(self._attempts)
        if strategy is not None:
            attempts = [a for a in attempts if a.strategy == strategy]
        return attempts

    def clear(self) -> None:
        with self._lock:
            self._attempts.clear()

    def __len__(self) -> int:
        return len(self._attempts)

    def success_rate(self) -> dict[str, float]:
        attempts = self.attempts()
        total = len(attempts)
        success = sum(1 for a in attempts if a.success)
        rate = round(success / total * 100, 1) if total else 0.0
        return {"total": total, "success": success, "rate": rate}

    def report(self) -> str:
        """Human-readable report grouped by strategy."""
        lines = ["=== EXTRACTION REPORT ===", ""]

        by_strategy: dict[str, list[ExtractionAttempt]] = {}
        for attempt in self.attempts():
            by_strategy.setdefault(attempt.strategy, []).append(attempt)

        for strategy, attempts in by_strategy.items():
            lines.append(f"== {strategy} ==")
            for attempt in attempts:
                if attempt.success:
                    outcome = f"SUCCESS: {attempt.character_count} characters"
                elif attempt.error:
                    outcome = f"ERROR: {attempt.error}"
                else:
                    outcome = f"REJECTED: {attempt.character_count} characters"
                lines.append(
                    f"{attempt.file_name or '-'} - {attempt.elapsed_ms:.1f}ms - {outcome}"
                )
            lines.append("")

        stats = self.success_rate()
        lines.extend(
            [
                "=== SUMMARY ===",
                f"Total attempts: {stats['total']}",
                f"Successes: {stats['success']}",
                f"Success rate: {stats['rate']}%",
            ]
        )
        return "\n".join(lines)


def _sample(text: str, length: int = 100) -> str:
    return text[:length] + ("..." if len(text) > length else "")


def check_signature(content: bytes) -> dict[str, str]:
    """Identify the container from the first bytes of the upload."""
    head = content[:SIGNATURE_BYTES]
    ascii_signature = "".join(chr(b) if 32 <= b <= 126 else "." for b in head)

    if ascii_signature.startswith("%PDF"):
        detected_type = "pdf"
    elif head.startswith(ZIP_SIGNATURE):
        detected_type = "zip-based (possibly docx)"
    elif _WORD_SIGNATURE.match(ascii_signature):
        detected_type = "text-based"
    else:
        detected_type = "unknown"

    return {
        "hex_signature": head.hex(),
        "ascii_signature": ascii_signature,
        "detected_type": detected_type,
    }


def diagnose_file(document: UploadedDocument) -> dict[str, Any]:
    """Describe an upload the way each reader would see it.

    Read-only: nothing here affects extraction, it only explains why a file
    might have ended up with the sample resume.
    """
    content = document.content
    text = content.decode("utf-8", errors="replace")
    scanned = content[:PRINTABLE_SCAN_BYTES]
    chunks = [chunk.decode("ascii") for chunk in _PRINTABLE_CHUNK.findall(scanned)]
    printable = " ".join(chunks)
    mime_type = document.mime_type or "application/octet-stream"
    encoded = base64.b64encode(content[:30]).decode("ascii")
    data_url = f"data:{mime_type};base64,{encoded}"

    return {
        "file_info": {
            "name": document.file_name,
            "type": document.mime_type or "unknown",
            "size": document.size,
            "extension": document.extension or "unknown",
        },
        "signature": check_signature(content),
        "reading": {
            "text": {
                "length": len(text),
                "sample": _sample(text),
                "is_binary": control_ratio(text) > 0.1,
            },
            "bytes": {
                "byte_length": len(content),
                "text_chunks": len(chunks),
                "sample": _sample(printable),
            },
            "data_url": {"prefix": data_url[:30] + "..."},
        },
    }


@dataclass
class PDFAnalysis:
    """Findings about one PDF upload; ``valid`` means no issue was found."""

    file_name: str
    size_bytes: int
    mime_type: str
    pdf_version: Optional[str] = None
    page_count: Optional[int] = None
    is_encrypted: bool = False
    metadata_format: Optional[str] = None
    issues: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.issues

    def add(self, issue: str, recommendation: Optional[str] = None) -> None:
        self.issues.append(issue)
        if recommendation:
            self.recommendations.append(recommendation)

    def report(self) -> str:
        lines = [
            "=== PDF DIAGNOSTICS REPORT ===",
            "",
            f"File: {self.file_name}",
            f"Size: {self.size_bytes / 1024:.2f} KB",
            f"Type: {self.mime_type or 'Unknown'}",
            f"Version: {self.pdf_version or 'Unknown'}",
            f"Pages: {self.page_count if self.page_count is not None else 'Unknown'}",
            f"Encrypted: {'Yes' if self.is_encrypted else 'No'}",
            "",
            "Issues Detected:",
        ]
        if self.issues:
            lines.extend(f"- {i}. {issue}" for i, issue in enumerate(self.issues, 1))
        else:
            lines.append("- No issues detected")

        lines.extend(["", "Recommendations:"])
        if self.recommendations:
            lines.extend(f"- {i}. {rec}" for i, rec in enumerate(self.recommendations, 1))
        else:
            lines.append("- No specific recommendations")
        return "\n".join(lines)


def analyze_pdf(
    document: UploadedDocument,
    max_file_size_bytes: int = 10 * 1024 * 1024,
    engine_wait_seconds: float = 30.0,
) -> PDFAnalysis:
    """Check a PDF upload for problems that commonly defeat extraction."""
    analysis = PDFAnalysis(
        file_name=document.file_name,
        size_bytes=document.size,
        mime_type=document.mime_type,
    )
    logger.info("Analyzing PDF", extra_data={"file_name": document.file_name})

    if document.size == 0:
        analysis.add("File is empty (0 bytes)", "Upload a valid PDF file")
        return analysis
    if document.size > max_file_size_bytes:
        analysis.add(
            f"File is very large (> {format_size(max_file_size_bytes)})",
            "Try compressing the PDF or using a smaller file",
        )

    if document.mime_type != "application/pdf" and document.extension != "pdf":
        analysis.add(
            f"File may not be a PDF (type: {document.mime_type or 'unknown'})",
            "Ensure you're uploading a valid PDF file",
        )

    header = document.content[:HEADER_SCAN_BYTES]
    if not header.startswith(PDF_HEADER):
        if PDF_HEADER in header:
            analysis.add(
                "PDF header is preceded by junk bytes",
                "Re-save the file from a PDF viewer",
            )
        else:
            analysis.add(
                "File does not have a valid PDF header",
                "The file may be corrupted or not a valid PDF",
            )
            return analysis

    version = _PDF_VERSION.search(header)
    if version:
        analysis.pdf_version = version.group(1).decode("ascii")
        if float(analysis.pdf_version) > MAX_SUPPORTED_PDF_VERSION:
            analysis.add(
                f"PDF version {analysis.pdf_version} may not be fully supported",
                "Try converting to PDF 1.7 or earlier for better compatibility",
            )

    try:
        with pdf_strategies.pdf_engine(engine_wait_seconds):
            with pdf_strategies.open_pdf(document.content) as pdf:
                analysis.is_encrypted = bool(pdf.is_encrypted or pdf.needs_pass)
                # Page tree and metadata are unreadable without the password
                if not pdf.needs_pass:
                    analysis.page_count = pdf.page_count
                    analysis.metadata_format = (pdf.metadata or {}).get("format") or None
    except Exception as exc:
        logger.warning(
            "PDF could not be opened for diagnostics",
            extra_data={"file_name": document.file_name, "error": str(exc)},
        )
        analysis.add(f"PDF could not be opened: {exc}", "The file may be corrupted")
        return analysis

    if analysis.is_encrypted:
        analysis.add(
            "PDF is encrypted or password-protected",
            "Use an unencrypted PDF file",
        )
    if analysis.page_count == 0:
        analysis.add("PDF has no pages", "Upload a PDF that contains the resume pages")

    logger.info(
        "PDF analysis completed",
        extra_data={
            "file_name": document.file_name,
            "version": analysis.pdf_version,
            "page_count": analysis.page_count,
            "issue_count": len(analysis.issues),
        },
    )
    return analysis
