"""Custom exceptions for resume extraction."""


class ResumeExtractionError(Exception):
    """Base exception for resume extraction errors."""

    pass


class InvalidBase64Error(ResumeExtractionError):
    """Raised when base64 decoding fails."""

    pass


class UnsupportedFormatError(ResumeExtractionError):
    """Raised when the upload is not a PDF, DOCX or TXT document."""

    pass


def format_size(size_bytes: int) -> str:
    """Human-readable size: 10MB, 1.5MB, 512KB or 900 bytes."""
    for unit, factor in (("MB", 1024 * 1024), ("KB", 1024)):
        if size_bytes >= factor:
            return f"{size_bytes / factor:.1f}".rstrip("0").rstrip(".") + unit
    return f"{size_bytes} bytes"


class FileTooLargeError(ResumeExtractionError):
    """Raised when the upload exceeds the configured size cap."""

    def __init__(self, size_bytes: int, limit_bytes: int):
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes
        super().__init__(
            f"File is too large ({size_bytes} bytes). "
            f"Please upload a file smaller than {format_size(limit_bytes)}."
        )


class EmptyFileError(ResumeExtractionError):
    """Raised when the upload has no content."""

    pass


class StrategyFailedError(ResumeExtractionError):
    """Raised by a strategy that cannot handle its input.

    Always caught by the strategy chain and recorded as a failed attempt.
    """

    pass
