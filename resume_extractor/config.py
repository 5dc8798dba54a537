"""Configuration classes for resume extraction."""

from dataclasses import dataclass, field
from typing import Optional

DEFAULT_SECTION_MARKERS = (
    "experience",
    "education",
    "skills",
    "summary",
    "objective",
    "certifications",
    "work history",
    "employment",
    "projects",
    "qualifications",
)


@dataclass
class ValidationConfig:
    """Thresholds for the acceptance gate applied to every strategy result.

    PDF extraction is noisier than DOCX or plain text, so its thresholds are
    more lenient.

    Examples:
        >>> # Defaults
        >>> config = ValidationConfig()

        >>> # Require more evidence that a PDF is really a resume
        >>> config = ValidationConfig(pdf_min_length=100, pdf_required_markers=2)
    """

    pdf_min_length: int = 20
    """Minimum characters for a PDF candidate."""

    default_min_length: int = 50
    """Minimum characters for DOCX and TXT candidates."""

    max_control_ratio: float = 0.15
    """Maximum share of non-printable characters in the sampled prefix.

    A higher share means binary container bytes leaked through as "text".
    """

    control_sample_size: int = 1000
    """Number of leading characters inspected for non-printable content."""

    pdf_required_markers: int = 1
    """Distinct section markers a PDF candidate must mention."""

    default_required_markers: int = 2
    """Distinct section markers a DOCX or TXT candidate must mention."""

    section_markers: tuple[str, ...] = DEFAULT_SECTION_MARKERS
    """Lowercase vocabulary of resume section markers."""


@dataclass
class OCRConfig:
    """Configuration for the optional OCR strategy on scanned PDFs.

    Examples:
        >>> # Default configuration
        >>> config = OCRConfig()

        >>> # Better quality on a machine with spare cores
        >>> config = OCRConfig(dpi=300, max_workers=7)
    """

    tesseract_cmd: str = "tesseract"
    """Path to tesseract binary. Default: "tesseract" (assumes in PATH)."""

    tessdata_prefix: Optional[str] = None
    """Optional path to tessdata directory. If None, uses system default."""

    languages: str = "eng"
    """OCR languages in Tesseract format (e.g., "eng", "eng+fra")."""

    dpi: int = 150
    """Image DPI for PDF page rendering. Higher is sharper but slower."""

    psm_mode: int = 6
    """Page segmentation mode (0-13). Default: 6 (uniform block of text)."""

    max_workers: int = 3
    """Number of pages OCR'd in parallel."""

    enable_image_preprocessing: bool = True
    """Convert rendered pages to grayscale and boost contrast before OCR."""

    contrast_enhancement: float = 1.2
    """Contrast factor used when preprocessing is enabled (1.0 = unchanged)."""


@dataclass
class ExtractorConfig:
    """Configuration for the extraction pipeline."""

    validation: ValidationConfig = field(default_factory=ValidationConfig)
    ocr_config: OCRConfig = field(default_factory=OCRConfig)

    max_file_size_bytes: int = 10 * 1024 * 1024
    """Uploads above this size are rejected before any strategy runs."""

    primary_timeout_seconds: float = 15.0
    """Wall-clock limit for one attempt of the primary PDF strategy."""

    primary_attempts: int = 3
    """Attempts of the primary PDF strategy before moving on."""

    retry_backoff_seconds: float = 1.0
    """Base of the exponential backoff between primary attempts (1s, 2s, ...)."""

    line_threshold: float = 5.0
    """Maximum baseline distance (layout units) for spans on the same line."""

    max_uncompressed_bytes: int = 50 * 1024 * 1024
    """Cap on bytes inflated from compressed PDF streams or DOCX archive members."""

    engine_wait_seconds: float = 30.0
    """How long a PDF strategy waits for an abandoned primary attempt to release MuPDF."""

    binary_scan_limit_bytes: int = 2_000_000
    """Bytes inspected by the raw byte scan strategy."""

    min_run_length: int = 5
    """Shortest printable byte run kept by the raw byte scan."""

    table_strategy: str = "lines_strict"
    fontsize_limit: int = 3
    force_text: bool = True

    enable_ocr: bool = False
    """Insert the Tesseract OCR strategy after the markdown PDF strategy."""
