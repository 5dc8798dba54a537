"""Best-effort resume text extraction with tagged sample-resume fallback."""

from resume_extractor.chain import Strategy, first_valid
from resume_extractor.config import ExtractorConfig, OCRConfig, ValidationConfig
from resume_extractor.detector import FormatDetector
from resume_extractor.diagnostics import (
    AttemptLog,
    AttemptRecorder,
    PDFAnalysis,
    analyze_pdf,
    check_signature,
    diagnose_file,
)
from resume_extractor.exceptions import (
    EmptyFileError,
    FileTooLargeError,
    InvalidBase64Error,
    ResumeExtractionError,
    StrategyFailedError,
    UnsupportedFormatError,
)
from resume_extractor.extractor import ResumeExtractor
from resume_extractor.handler import DocumentHandler
from resume_extractor.models import (
    DetectedFormat,
    Extracted,
    ExtractedText,
    ExtractionAttempt,
    ExtractionResult,
    FallbackUsed,
    UploadedDocument,
)
from resume_extractor.parser import parse_document
from resume_extractor.sample import FALLBACK_TAG, SAMPLE_RESUME
from resume_extractor.scoring import KeywordReport, analyze, extract_keywords, match_keywords, score
from resume_extractor.validation import is_valid

__version__ = "0.1.0"

__all__ = [
    # High-level API
    "parse_document",
    # Core classes
    "DocumentHandler",
    "ResumeExtractor",
    "FormatDetector",
    "Strategy",
    "first_valid",
    "is_valid",
    # Diagnostics
    "AttemptLog",
    "AttemptRecorder",
    "PDFAnalysis",
    "analyze_pdf",
    "check_signature",
    "diagnose_file",
    # Data models
    "UploadedDocument",
    "DetectedFormat",
    "ExtractionAttempt",
    "Extracted",
    "FallbackUsed",
    "ExtractedText",
    "ExtractionResult",
    "FALLBACK_TAG",
    "SAMPLE_RESUME",
    # Keyword scoring
    "KeywordReport",
    "score",
    "extract_keywords",
    "match_keywords",
    "analyze",
    # Configuration
    "ExtractorConfig",
    "ValidationConfig",
    "OCRConfig",
    # Exceptions
    "ResumeExtractionError",
    "InvalidBase64Error",
    "UnsupportedFormatError",
    "FileTooLargeError",
    "EmptyFileError",
    "StrategyFailedError",
]
