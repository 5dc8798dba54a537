"""Data models for resume extraction."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar, Optional, Union

from resume_extractor.sample import FALLBACK_TAG, SAMPLE_RESUME


class DetectedFormat(str, Enum):
    PDF = "pdf"
    DOCX = "docx"
    TXT = "txt"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class UploadedDocument:
    """Raw upload as received from the client."""

    content: bytes
    file_name: str
    mime_type: str = ""

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        """Lowercase extension without the dot, or "" when there is none."""
        return Path(self.file_name).suffix.lower().lstrip(".")


@dataclass(frozen=True)
class ExtractionAttempt:
    """One strategy run, kept for diagnostics only."""

    strategy: str
    text: str
    success: bool
    elapsed_ms: float
    error: Optional[str] = None
    file_name: str = ""

    @property
    def character_count(self) -> int:
        return len(self.text)


@dataclass(frozen=True)
class Extracted:
    """Text produced by a real extraction strategy."""

    text: str
    strategy: str
    attempts: tuple[ExtractionAttempt, ...] = ()

    is_fallback: ClassVar[bool] = False

    @property
    def provenance_tag(self) -> str:
        return self.strategy


@dataclass(frozen=True)
class FallbackUsed:
    """Every strategy failed; the text is the fixed sample resume."""

    text: str = SAMPLE_RESUME
    attempts: tuple[ExtractionAttempt, ...] = ()

    is_fallback: ClassVar[bool] = True
    provenance_tag: ClassVar[str] = FALLBACK_TAG


ExtractedText = Union[Extracted, FallbackUsed]


@dataclass
class ExtractionResult:
    """Result handed to callers of the document handler."""

    success: bool  # False exactly when the sample resume was substituted
    text: str
    provenance_tag: str
    warnings: list[str] = field(default_factory=list)
    file_name: str = ""
    detected_format: DetectedFormat = DetectedFormat.UNKNOWN
    character_count: int = 0
    attempts: list[ExtractionAttempt] = field(default_factory=list)

    @property
    def used_fallback(self) -> bool:
        return self.provenance_tag == FALLBACK_TAG

    def to_dict(self, include_attempts: bool = False) -> dict[str, Any]:
        data = {
            "success": self.success,
            "text": self.text,
            "provenance_tag": self.provenance_tag,
            "warnings": list(self.warnings),
            "file_name": self.file_name,
            "detected_format": self.detected_format.value,
            "character_count": self.character_count,
        }
        if include_attempts:
            data["attempts"] = [
                {
                    key: value
                    for key, value in asdict(attempt).items()
                    if key != "text"
                }
                | {"character_count": attempt.character_count}
                for attempt in self.attempts
            ]
        return data
