"""Document handler orchestration."""

import base64
import binascii
from typing import Optional

from resume_extractor.config import ExtractorConfig
from resume_extractor.diagnostics import AttemptRecorder
from resume_extractor.exceptions import InvalidBase64Error, ResumeExtractionError
from resume_extractor.extractor import ResumeExtractor
from resume_extractor.logger import Timer, get_logger, set_extraction_id
from resume_extractor.models import ExtractedText, ExtractionResult, UploadedDocument

logger = get_logger(__name__)

PRIMARY_STRATEGIES = {"pdf-layout", "docx-structured", "txt-utf8"}


class DocumentHandler:
    def __init__(
        self,
        extractor: Optional[ResumeExtractor] = None,
        config: Optional[ExtractorConfig] = None,
        recorder: Optional[AttemptRecorder] = None,
    ) -> None:
        """Initialize document handler.

        Args:
            extractor: Resume extractor. If None, creates default with config.
            config: Extraction configuration. Only used if extractor is None.
            recorder: Attempt sink. Only used if extractor is None.
        """
        self.extractor = extractor or ResumeExtractor(config=config, recorder=recorder)

    def decode_file(self, encoded: str) -> bytes:
        """Decode base64-encoded file.

        Raises:
            InvalidBase64Error: If decoding fails
        """
        try:
            with Timer("base64_decode") as timer:
                decoded = base64.b64decode(encoded, validate=True)

            logger.debug(
                "Successfully decoded base64 file",
                extra_data={
                    "decoded_size_bytes": len(decoded),
                    "decode_time_ms": timer.get_elapsed_ms(),
                },
            )
            return decoded
        except (ValueError, binascii.Error) as exc:
            logger.error(
                "Failed to decode base64 string",
                extra_data={
                    "error_type": type(exc).__name__,
                    "encoded_length": len(encoded) if encoded else 0,
                },
            )
            raise InvalidBase64Error(
                "file_base64 must be a valid base64 string"
            ) from exc

    def extract_encoded(
        self, encoded: str, mime_type: str, file_name: str
    ) -> ExtractionResult:
        """Extract text from a base64-encoded upload."""
        content = self.decode_file(encoded)
        return self.extract(
            UploadedDocument(content=content, file_name=file_name, mime_type=mime_type)
        )

    def extract(self, document: UploadedDocument) -> ExtractionResult:
        """Extract resume text and shape the result for callers.

        Args:
            document: The upload

        Returns:
            ExtractionResult. ``success`` is False when the sample resume was
            substituted; a warning then says so.

        Raises:
            EmptyFileError: If the upload has no content
            FileTooLargeError: If the upload exceeds the size cap
            UnsupportedFormatError: If the upload is another document type
        """
        set_extraction_id()

        with Timer("extraction") as timer:
            try:
                fmt = self.extractor.detector.detect(document)
                extracted = self.extractor.extract(document, fmt)
            except ResumeExtractionError as exc:
                logger.warning(
                    "Upload rejected",
                    extra_data={
                        "file_name": document.file_name,
                        "error_type": type(exc).__name__,
                        "error": str(exc),
                        "file_size_bytes": document.size,
                    },
                )
                raise

        result = ExtractionResult(
            success=not extracted.is_fallback,
            text=extracted.text,
            provenance_tag=extracted.provenance_tag,
            warnings=self._warnings(document, extracted),
            file_name=document.file_name,
            detected_format=fmt,
            character_count=len(extracted.text),
            attempts=list(extracted.attempts),
        )

        log = logger.warning if extracted.is_fallback else logger.info
        log(
            "Resume extraction finished",
            extra_data={
                "file_name": document.file_name,
                "detected_format": fmt.value,
                "provenance_tag": result.provenance_tag,
                "strategies_tried": len(result.attempts),
                "character_count": result.character_count,
                "extraction_time_ms": timer.get_elapsed_ms(),
            },
        )
        return result

    @staticmethod
    def _warnings(document: UploadedDocument, extracted: ExtractedText) -> list[str]:
        if extracted.is_fallback:
            return [
                f"Could not extract readable text from '{document.file_name}'. "
                "A sample resume is shown instead; it is not your document."
            ]
        if extracted.provenance_tag not in PRIMARY_STRATEGIES:
            return [
                f"Text was recovered with the '{extracted.provenance_tag}' fallback "
                "strategy; formatting may be lost. Please review it."
            ]
        return []
