"""Acceptance gate shared by every extraction strategy."""

from typing import Optional, Union

from resume_extractor.config import ValidationConfig
from resume_extractor.models import DetectedFormat
from resume_extractor.text_utils import control_ratio

_DEFAULT_CONFIG = ValidationConfig()


def count_section_markers(text: str, markers: tuple[str, ...]) -> int:
    """Number of distinct markers occurring in ``text`` (case-insensitive)."""
    lowered = text.lower()
    return sum(1 for marker in markers if marker in lowered)


def is_valid(
    text: Optional[str],
    fmt: Union[DetectedFormat, str],
    config: Optional[ValidationConfig] = None,
) -> bool:
    """Decide whether a strategy's output is usable resume text.

    A cheap heuristic, not a structural validator: the text must be long
    enough, must not look like leaked binary, and must mention enough
    resume section markers.

    Args:
        text: Candidate text produced by a strategy
        fmt: Format of the source document ("pdf", "docx", "txt", ...)
        config: Thresholds. If None, uses defaults.

    Returns:
        True if the candidate passes the gate
    """
    config = config or _DEFAULT_CONFIG
    is_pdf = DetectedFormat(fmt) is DetectedFormat.PDF

    if not text:
        return False

    min_length = config.pdf_min_length if is_pdf else config.default_min_length
    if len(text) < min_length:
        return False

    if control_ratio(text, config.control_sample_size) > config.max_control_ratio:
        return False

    required = config.pdf_required_markers if is_pdf else config.default_required_markers
    return count_section_markers(text, config.section_markers) >= required
